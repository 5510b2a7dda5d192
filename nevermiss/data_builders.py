"""Rule and cycle building helpers.

This module is the SINGLE SOURCE OF TRUTH for:
- Turning stored/form rule dicts into RecurrenceRule / AdvancedRecurrenceRule
- Business logic validation of rules (raised as InvalidRuleError)
- Building new TaskCycle values

### Build Functions
Each rule shape has a `build_<shape>()` function that:
- Takes a dict with the stored camelCase keys (see type_defs.py)
- Applies field defaults
- Returns a frozen model value, validated

### Validation Functions
- `validate_<shape>_data()` takes the raw dict and returns a dict of errors
  ({field: translation_key}, empty when valid) for form highlighting.
- `validate_recurrence_rule()` / `validate_advanced_rule()` check an already
  built model and raise InvalidRuleError. The calculators call these before
  doing any date arithmetic, so a malformed rule fails fast.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from . import const
from .models import (
    AdvancedRecurrenceRule,
    BackwardDay,
    CompositeDay,
    DayOfMonth,
    DayOfYear,
    DayPlacement,
    ForwardDay,
    NthWeekday,
    RecurrenceRule,
    SpecialDateAnchor,
    TaskCycle,
)
from .type_defs import (
    AdvancedRecurrenceRuleData,
    RecurrenceRuleData,
    SpecialDateAnchorData,
)
from .utils.dt_utils import as_utc, dt_now_utc

# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class InvalidRuleError(Exception):
    """Validation error with field-specific information for form highlighting.

    Raised when a recurrence rule is missing a field required by its type or
    carries an out-of-range value. The field attribute lets the editing form
    map the error back to the input that caused it.

    Attributes:
        field: The FIELD_* constant identifying the rule field that failed
        translation_key: The TRANS_KEY_* constant for the error message
        placeholders: Optional dict for translation string placeholders

    Example:
        raise InvalidRuleError(
            field=const.FIELD_WEEK_DAY,
            translation_key=const.TRANS_KEY_MISSING_WEEK_DAY,
        )
    """

    def __init__(
        self,
        field: str,
        translation_key: str,
        placeholders: dict[str, str] | None = None,
    ) -> None:
        """Initialize InvalidRuleError.

        Args:
            field: The FIELD_* constant for the field that failed validation
            translation_key: The TRANS_KEY_* constant for error message
            placeholders: Optional dict for translation placeholders
        """
        self.field = field
        self.translation_key = translation_key
        self.placeholders = placeholders or {}
        super().__init__(f"{field}: {translation_key}")


# ==============================================================================
# HELPER FUNCTIONS FOR FIELD NORMALIZATION
# ==============================================================================


def _int_field(
    data: Mapping[str, Any],
    key: str,
    translation_key: str,
    default: int | None = None,
) -> int | None:
    """Read an optional integer field.

    Accepts ints and integral strings ("3"); booleans and anything else are
    rejected with InvalidRuleError.
    """
    value = data.get(key)
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise InvalidRuleError(field=key, translation_key=translation_key)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as err:
        raise InvalidRuleError(
            field=key,
            translation_key=translation_key,
            placeholders={"value": str(value)},
        ) from err


def _check_range(
    value: int | None,
    low: int,
    high: int,
    field: str,
    translation_key: str,
) -> None:
    if value is not None and not low <= value <= high:
        raise InvalidRuleError(
            field=field,
            translation_key=translation_key,
            placeholders={"value": str(value), "min": str(low), "max": str(high)},
        )


def _errors_from(builder: Any, data: Mapping[str, Any]) -> dict[str, str]:
    try:
        builder(data)
    except InvalidRuleError as err:
        return {err.field: err.translation_key}
    return {}


# ==============================================================================
# SPECIAL DATE ANCHORS
# ==============================================================================


def build_special_date_anchor(
    data: SpecialDateAnchorData | Mapping[str, Any],
) -> SpecialDateAnchor:
    """Build a SpecialDateAnchor from its stored dict.

    Raises:
        InvalidRuleError: If month/day are missing or out of range.
    """
    key = const.FIELD_SPECIAL_DATE_ANCHOR
    try:
        month = int(data["month"])
        day = int(data["day"])
    except (KeyError, TypeError, ValueError) as err:
        raise InvalidRuleError(
            field=key, translation_key=const.TRANS_KEY_INVALID_SPECIAL_DATE
        ) from err

    anchor = SpecialDateAnchor(
        kind=str(data.get("kind", data.get("type", const.SPECIAL_DATE_KIND_CUSTOM))),
        name=str(data.get("name", "")),
        month=month,
        day=day,
        is_lunar=bool(data.get("isLunar", False)),
        id=data.get("id"),
    )
    validate_special_date_anchor(anchor)
    return anchor


def validate_special_date_anchor(anchor: SpecialDateAnchor) -> None:
    """Validate a special date anchor.

    Lunar anchors allow days 1..30, solar anchors 1..31.

    Raises:
        InvalidRuleError: On an unknown kind or an out-of-range month/day.
    """
    key = const.FIELD_SPECIAL_DATE_ANCHOR
    if anchor.kind not in const.SPECIAL_DATE_KINDS:
        raise InvalidRuleError(
            field=key, translation_key=const.TRANS_KEY_INVALID_SPECIAL_DATE
        )
    max_day = const.LUNAR_MONTH_MAX_DAYS if anchor.is_lunar else 31
    _check_range(anchor.month, 1, 12, key, const.TRANS_KEY_INVALID_SPECIAL_DATE)
    _check_range(anchor.day, 1, max_day, key, const.TRANS_KEY_INVALID_SPECIAL_DATE)


# ==============================================================================
# BASIC RECURRENCE RULES
# ==============================================================================


def _build_month_day(value: Any) -> DayPlacement | None:
    """Map stored monthDay input to a DayPlacement.

    - positive int N -> ForwardDay(N)
    - negative int -N -> BackwardDay(N)
    - {"direction": "forward"|"backward", "day": N} -> explicit placement
    """
    field = const.FIELD_MONTH_DAY
    invalid = const.TRANS_KEY_INVALID_MONTH_DAY
    if value is None or value == "":
        return None

    if isinstance(value, Mapping):
        direction = value.get("direction", const.COUNT_DIRECTION_FORWARD)
        day = _int_field(value, "day", invalid)
        if day is None:
            raise InvalidRuleError(field=field, translation_key=invalid)
        if direction == const.COUNT_DIRECTION_BACKWARD:
            return BackwardDay(day)
        if direction == const.COUNT_DIRECTION_FORWARD:
            return ForwardDay(day)
        raise InvalidRuleError(
            field=const.FIELD_COUNT_DIRECTION,
            translation_key=const.TRANS_KEY_INVALID_COUNT_DIRECTION,
        )

    day = _int_field({field: value}, field, invalid)
    if not day:
        raise InvalidRuleError(field=field, translation_key=invalid)
    return ForwardDay(day) if day > 0 else BackwardDay(-day)


def _build_composite_day(data: Mapping[str, Any]) -> CompositeDay | None:
    """Pick the single day variant of a composite rule.

    Precedence: weekOfMonth+weekDay, then yearDay, then monthDay.
    """
    if data.get(const.FIELD_ENABLED_WEEK_OF_MONTH):
        week_of_month = _int_field(
            data, const.FIELD_WEEK_OF_MONTH, const.TRANS_KEY_INVALID_WEEK_OF_MONTH
        )
        week_day = _int_field(
            data, const.FIELD_WEEK_DAY, const.TRANS_KEY_INVALID_WEEK_DAY
        )
        if week_of_month is None:
            raise InvalidRuleError(
                field=const.FIELD_WEEK_OF_MONTH,
                translation_key=const.TRANS_KEY_MISSING_WEEK_OF_MONTH,
            )
        if week_day is None:
            raise InvalidRuleError(
                field=const.FIELD_WEEK_DAY,
                translation_key=const.TRANS_KEY_MISSING_WEEK_DAY,
            )
        return NthWeekday(week_of_month=week_of_month, weekday=week_day)

    if data.get(const.FIELD_ENABLED_YEAR_DAY):
        days = _int_field(data, const.FIELD_YEAR_DAY, const.TRANS_KEY_INVALID_YEAR_DAY)
        if days:
            return DayOfYear(days)

    if data.get(const.FIELD_ENABLED_MONTH_DAY):
        days = _int_field(
            data, const.FIELD_MONTH_DAY, const.TRANS_KEY_INVALID_MONTH_DAY
        )
        if days:
            return DayOfMonth(days)

    return None


def build_recurrence_rule(
    data: RecurrenceRuleData | Mapping[str, Any],
) -> RecurrenceRule:
    """Build a RecurrenceRule from its stored/form dict.

    Args:
        data: RecurrenceRuleData-shaped dict (camelCase keys)

    Returns:
        Validated RecurrenceRule

    Raises:
        InvalidRuleError: If a field is malformed, out of range, or missing
            for the declared rule type.

    Examples:
        build_recurrence_rule({"type": "daily", "value": 3})
        build_recurrence_rule({"type": "monthly", "value": 1, "monthDay": -1})
    """
    rule_type = data.get(const.FIELD_TYPE)
    if rule_type not in const.RULE_TYPES:
        raise InvalidRuleError(
            field=const.FIELD_TYPE,
            translation_key=const.TRANS_KEY_INVALID_RULE_TYPE,
            placeholders={"value": str(rule_type)},
        )

    anchor_data = data.get(const.FIELD_SPECIAL_DATE_ANCHOR)
    anchor = build_special_date_anchor(anchor_data) if anchor_data else None

    if rule_type == const.RULE_TYPE_COMPOSITE:
        years = None
        months = None
        if data.get(const.FIELD_ENABLED_YEAR):
            years = _int_field(data, const.FIELD_YEARS, const.TRANS_KEY_INVALID_VALUE)
        if data.get(const.FIELD_ENABLED_MONTH):
            months = _int_field(
                data, const.FIELD_MONTHS, const.TRANS_KEY_INVALID_VALUE
            )
        rule = RecurrenceRule(
            type=rule_type,
            value=_int_field(  # type: ignore[arg-type]
                data, const.FIELD_VALUE, const.TRANS_KEY_INVALID_VALUE, 1
            ),
            years=years or None,
            months=months or None,
            composite_day=_build_composite_day(data),
        )
    else:
        rule = RecurrenceRule(
            type=rule_type,
            value=_int_field(  # type: ignore[arg-type]
                data, const.FIELD_VALUE, const.TRANS_KEY_INVALID_VALUE, 1
            ),
            unit=data.get(const.FIELD_UNIT) or None,
            week_day=_int_field(
                data, const.FIELD_WEEK_DAY, const.TRANS_KEY_INVALID_WEEK_DAY
            ),
            month_day=_build_month_day(data.get(const.FIELD_MONTH_DAY)),
            year_day=_int_field(
                data, const.FIELD_YEAR_DAY, const.TRANS_KEY_INVALID_YEAR_DAY
            ),
            month=_int_field(data, const.FIELD_MONTH, const.TRANS_KEY_INVALID_MONTH),
            week_of_month=_int_field(
                data, const.FIELD_WEEK_OF_MONTH, const.TRANS_KEY_INVALID_WEEK_OF_MONTH
            ),
            special_date_anchor=anchor,
        )

    validate_recurrence_rule(rule)
    return rule


def validate_recurrence_rule_data(
    data: RecurrenceRuleData | Mapping[str, Any],
) -> dict[str, str]:
    """Validate a stored/form rule dict without raising.

    Returns:
        Dict of errors: {field: translation_key}
        Empty dict means validation passed.
    """
    return _errors_from(build_recurrence_rule, data)


def validate_recurrence_rule(rule: RecurrenceRule) -> None:
    """Validate a RecurrenceRule against the requirements of its type.

    Raises:
        InvalidRuleError: On the first rule violation found.

    Validation Rules:
        1. Known type, value >= 1
        2. Ranges: weekDay 0-6, month 1-12, weekOfMonth 1-5, yearDay 1-366,
           forward monthDay 1-31, backward offset 0-30
        3. custom needs a unit; weekOfMonth needs weekDay and weekOfMonth
        4. composite needs at least one enabled component
        5. specialDateAnchor only on yearly rules
    """
    # === 1. Type / value ===
    if rule.type not in const.RULE_TYPES:
        raise InvalidRuleError(
            field=const.FIELD_TYPE, translation_key=const.TRANS_KEY_INVALID_RULE_TYPE
        )
    if not isinstance(rule.value, int) or rule.value < 1:
        raise InvalidRuleError(
            field=const.FIELD_VALUE,
            translation_key=const.TRANS_KEY_INVALID_VALUE,
            placeholders={"value": str(rule.value)},
        )

    # === 2. Field ranges ===
    _check_range(
        rule.week_day, 0, 6, const.FIELD_WEEK_DAY, const.TRANS_KEY_INVALID_WEEK_DAY
    )
    _check_range(rule.month, 1, 12, const.FIELD_MONTH, const.TRANS_KEY_INVALID_MONTH)
    _check_range(
        rule.week_of_month,
        const.WEEK_OF_MONTH_MIN,
        const.WEEK_OF_MONTH_MAX,
        const.FIELD_WEEK_OF_MONTH,
        const.TRANS_KEY_INVALID_WEEK_OF_MONTH,
    )
    _check_range(
        rule.year_day, 1, 366, const.FIELD_YEAR_DAY, const.TRANS_KEY_INVALID_YEAR_DAY
    )
    if isinstance(rule.month_day, ForwardDay):
        _check_range(
            rule.month_day.day,
            1,
            31,
            const.FIELD_MONTH_DAY,
            const.TRANS_KEY_INVALID_MONTH_DAY,
        )
    elif isinstance(rule.month_day, BackwardDay):
        _check_range(
            rule.month_day.offset,
            0,
            30,
            const.FIELD_MONTH_DAY,
            const.TRANS_KEY_INVALID_MONTH_DAY,
        )

    # === 3. Type-specific requirements ===
    if rule.type == const.RULE_TYPE_CUSTOM and rule.unit not in const.TIME_UNITS:
        raise InvalidRuleError(
            field=const.FIELD_UNIT,
            translation_key=const.TRANS_KEY_INVALID_UNIT,
            placeholders={"value": str(rule.unit)},
        )

    if rule.type == const.RULE_TYPE_WEEK_OF_MONTH:
        if rule.week_day is None:
            raise InvalidRuleError(
                field=const.FIELD_WEEK_DAY,
                translation_key=const.TRANS_KEY_MISSING_WEEK_DAY,
            )
        if rule.week_of_month is None:
            raise InvalidRuleError(
                field=const.FIELD_WEEK_OF_MONTH,
                translation_key=const.TRANS_KEY_MISSING_WEEK_OF_MONTH,
            )

    # === 4. Composite ===
    if rule.type == const.RULE_TYPE_COMPOSITE:
        _validate_composite(rule)

    # === 5. Special date anchor ===
    if rule.special_date_anchor is not None:
        if rule.type != const.RULE_TYPE_YEARLY:
            raise InvalidRuleError(
                field=const.FIELD_SPECIAL_DATE_ANCHOR,
                translation_key=const.TRANS_KEY_INVALID_SPECIAL_DATE,
            )
        validate_special_date_anchor(rule.special_date_anchor)


def _validate_composite(rule: RecurrenceRule) -> None:
    for field, offset in (
        (const.FIELD_YEARS, rule.years),
        (const.FIELD_MONTHS, rule.months),
    ):
        if offset is not None and offset < 1:
            raise InvalidRuleError(
                field=field, translation_key=const.TRANS_KEY_INVALID_VALUE
            )

    day = rule.composite_day
    if isinstance(day, NthWeekday):
        _check_range(
            day.week_of_month,
            const.WEEK_OF_MONTH_MIN,
            const.WEEK_OF_MONTH_MAX,
            const.FIELD_WEEK_OF_MONTH,
            const.TRANS_KEY_INVALID_WEEK_OF_MONTH,
        )
        _check_range(
            day.weekday, 0, 6, const.FIELD_WEEK_DAY, const.TRANS_KEY_INVALID_WEEK_DAY
        )
    elif isinstance(day, DayOfYear) and day.days < 1:
        raise InvalidRuleError(
            field=const.FIELD_YEAR_DAY, translation_key=const.TRANS_KEY_INVALID_YEAR_DAY
        )
    elif isinstance(day, DayOfMonth) and day.days < 1:
        raise InvalidRuleError(
            field=const.FIELD_MONTH_DAY,
            translation_key=const.TRANS_KEY_INVALID_MONTH_DAY,
        )

    if rule.years is None and rule.months is None and day is None:
        raise InvalidRuleError(
            field=const.FIELD_TYPE, translation_key=const.TRANS_KEY_EMPTY_COMPOSITE
        )


# ==============================================================================
# ADVANCED RECURRENCE RULES
# ==============================================================================


def build_advanced_rule(
    data: AdvancedRecurrenceRuleData | Mapping[str, Any],
) -> AdvancedRecurrenceRule:
    """Build an AdvancedRecurrenceRule from the advanced editor dict.

    Missing numeric values default to 1, countDirection to "forward" and
    weekDay to Monday.

    Raises:
        InvalidRuleError: If a field is malformed or out of range.
    """
    invalid = const.TRANS_KEY_INVALID_VALUE
    use_anchor = bool(data.get(const.FIELD_USE_SPECIAL_DATE_ANCHOR, False))
    rule = AdvancedRecurrenceRule(
        selected_unit=str(data.get(const.FIELD_SELECTED_UNIT, "")),
        year_value=_int_field(data, const.FIELD_YEAR_VALUE, invalid, 1),  # type: ignore[arg-type]
        month_value=_int_field(data, const.FIELD_MONTH_VALUE, invalid, 1),  # type: ignore[arg-type]
        week_value=_int_field(data, const.FIELD_WEEK_VALUE, invalid, 1),  # type: ignore[arg-type]
        day_value=_int_field(data, const.FIELD_DAY_VALUE, invalid, 1),  # type: ignore[arg-type]
        count_direction=str(
            data.get(const.FIELD_COUNT_DIRECTION) or const.COUNT_DIRECTION_FORWARD
        ),
        week_day=_int_field(  # type: ignore[arg-type]
            data,
            const.FIELD_WEEK_DAY,
            const.TRANS_KEY_INVALID_WEEK_DAY,
            const.WEEKDAY_MONDAY,
        ),
        use_special_date_anchor=use_anchor,
        special_date_anchor_type=(
            data.get(const.FIELD_SPECIAL_DATE_ANCHOR_TYPE) if use_anchor else None
        ),
    )
    validate_advanced_rule(rule)
    return rule


def validate_advanced_rule_data(
    data: AdvancedRecurrenceRuleData | Mapping[str, Any],
) -> dict[str, str]:
    """Validate an advanced editor dict without raising.

    Returns:
        Dict of errors: {field: translation_key}
        Empty dict means validation passed.
    """
    return _errors_from(build_advanced_rule, data)


def validate_advanced_rule(rule: AdvancedRecurrenceRule) -> None:
    """Validate an AdvancedRecurrenceRule.

    Raises:
        InvalidRuleError: On the first rule violation found.
    """
    if rule.selected_unit not in const.ADVANCED_UNITS:
        raise InvalidRuleError(
            field=const.FIELD_SELECTED_UNIT,
            translation_key=const.TRANS_KEY_INVALID_ADVANCED_UNIT,
            placeholders={"value": str(rule.selected_unit)},
        )

    for field, value in (
        (const.FIELD_YEAR_VALUE, rule.year_value),
        (const.FIELD_MONTH_VALUE, rule.month_value),
        (const.FIELD_WEEK_VALUE, rule.week_value),
        (const.FIELD_DAY_VALUE, rule.day_value),
    ):
        if value < 1:
            raise InvalidRuleError(
                field=field,
                translation_key=const.TRANS_KEY_INVALID_VALUE,
                placeholders={"value": str(value)},
            )

    if rule.count_direction not in const.COUNT_DIRECTIONS:
        raise InvalidRuleError(
            field=const.FIELD_COUNT_DIRECTION,
            translation_key=const.TRANS_KEY_INVALID_COUNT_DIRECTION,
        )
    _check_range(
        rule.week_day, 0, 6, const.FIELD_WEEK_DAY, const.TRANS_KEY_INVALID_WEEK_DAY
    )

    if rule.use_special_date_anchor:
        if rule.special_date_anchor_type not in const.ANCHOR_TYPES:
            raise InvalidRuleError(
                field=const.FIELD_SPECIAL_DATE_ANCHOR_TYPE,
                translation_key=const.TRANS_KEY_INVALID_ANCHOR_TYPE,
                placeholders={"value": str(rule.special_date_anchor_type)},
            )
    elif rule.selected_unit == const.ADVANCED_UNIT_YEAR:
        # Year mode places the result in calendar month `monthValue`
        _check_range(
            rule.month_value,
            1,
            12,
            const.FIELD_MONTH_VALUE,
            const.TRANS_KEY_INVALID_MONTH,
        )


# ==============================================================================
# DISPATCH
# ==============================================================================


def build_rule(data: Mapping[str, Any]) -> RecurrenceRule | AdvancedRecurrenceRule:
    """Build either rule shape; advanced dicts are recognized by selectedUnit."""
    if const.FIELD_SELECTED_UNIT in data:
        return build_advanced_rule(data)
    return build_recurrence_rule(data)


# ==============================================================================
# CYCLES
# ==============================================================================


def build_task_cycle(
    task_id: str,
    start_date: datetime,
    due_date: datetime,
    date_system: str = const.DATE_SYSTEM_SOLAR,
    created_at: datetime | None = None,
) -> TaskCycle:
    """Build a new Pending cycle with UTC dates.

    Raises:
        InvalidRuleError: If the date system is unknown.
        ValueError: If due_date is not after start_date.
    """
    if date_system not in const.DATE_SYSTEMS:
        raise InvalidRuleError(
            field=const.FIELD_DATE_SYSTEM,
            translation_key=const.TRANS_KEY_INVALID_DATE_SYSTEM,
            placeholders={"value": str(date_system)},
        )
    return TaskCycle(
        task_id=task_id,
        start_date=as_utc(start_date),
        due_date=as_utc(due_date),
        date_system=date_system,
        created_at=as_utc(created_at) if created_at else dt_now_utc(),
    )
