# File: helpers/description_helpers.py
"""Human-readable rule descriptions.

Pure functions of a rule; no date arithmetic. The wording follows the
calculators' field interpretation:
- BackwardDay(n) reads "n days before month end" (n = 0 is the last day)
- weekOfMonth 5 reads "last"
- composite rules read year, month, then day part in application order

English only.
"""

from __future__ import annotations

from .. import const
from ..models import (
    AdvancedRecurrenceRule,
    BackwardDay,
    DayOfMonth,
    DayOfYear,
    DayPlacement,
    ForwardDay,
    NthWeekday,
    RecurrenceRule,
)


def _plural(value: int, singular: str) -> str:
    return f"{value} {singular}" if value == 1 else f"{value} {singular}s"


def _every(value: int, singular: str) -> str:
    """'every day' / 'every 3 days'."""
    if value == 1:
        return f"every {singular}"
    return f"every {value} {singular}s"


def _weekday(weekday: int) -> str:
    return const.WEEKDAY_NAMES[weekday]


def _month_name(month: int) -> str:
    return const.MONTH_NAMES[month - 1]


def describe_day_placement(placement: DayPlacement) -> str:
    """Describe a day placement ('on day 15', 'on the last day')."""
    if isinstance(placement, ForwardDay):
        return f"on day {placement.day}"
    if placement.offset == 0:
        return "on the last day"
    return f"{_plural(placement.offset, 'day')} before month end"


def _with_placement(text: str, placement: DayPlacement) -> str:
    """Append a placement, comma-separated when counting back from month end."""
    if isinstance(placement, BackwardDay) and placement.offset > 0:
        return f"{text}, {describe_day_placement(placement)}"
    return f"{text} {describe_day_placement(placement)}"


def describe_nth_weekday(week_of_month: int, weekday: int) -> str:
    """'first Monday', 'last Friday'."""
    return f"{const.ORDINAL_LABELS[week_of_month]} {_weekday(weekday)}"


# ==============================================================================
# BASIC RULES
# ==============================================================================


def describe_rule(
    rule: RecurrenceRule, date_system: str = const.DATE_SYSTEM_SOLAR
) -> str:
    """Describe a basic recurrence rule.

    Args:
        rule: Rule to describe
        date_system: Appends "(lunar)" for lunar rules

    Returns:
        Text such as "every 2 weeks on Monday".

    Examples:
        >>> describe_rule(RecurrenceRule(type="daily", value=3))
        'every 3 days'
        >>> describe_rule(RecurrenceRule(type="weekly", value=1, week_day=0))
        'every Monday'
    """
    text = _describe_basic(rule)
    if date_system == const.DATE_SYSTEM_LUNAR and rule.special_date_anchor is None:
        text = f"{text} ({const.LUNAR_LABEL})"
    return text


def _describe_basic(rule: RecurrenceRule) -> str:
    value = rule.value

    if rule.type == const.RULE_TYPE_DAILY:
        return _every(value, "day")

    if rule.type == const.RULE_TYPE_WEEKLY:
        if rule.week_day is None:
            return _every(value, "week")
        if value == 1:
            return f"every {_weekday(rule.week_day)}"
        return f"{_every(value, 'week')} on {_weekday(rule.week_day)}"

    if rule.type == const.RULE_TYPE_MONTHLY:
        text = _every(value, "month")
        if rule.month_day is not None:
            text = _with_placement(text, rule.month_day)
        return text

    if rule.type == const.RULE_TYPE_YEARLY:
        return _describe_yearly(rule)

    if rule.type == const.RULE_TYPE_WEEK_OF_MONTH:
        where = _month_name(rule.month) if rule.month else "the month"
        text = (
            f"every {describe_nth_weekday(rule.week_of_month, rule.week_day)} "  # type: ignore[arg-type]
            f"of {where}"
        )
        if value > 1:
            step = "year" if rule.month else "month"
            text = f"{text}, {_every(value, step)}"
        return text

    if rule.type == const.RULE_TYPE_CUSTOM:
        singular = const.UNIT_LABELS_SINGULAR.get(rule.unit or "", "day")
        return _every(value, singular)

    return _describe_composite(rule)


def _describe_yearly(rule: RecurrenceRule) -> str:
    text = _every(rule.value, "year")
    if rule.special_date_anchor is not None:
        anchor = rule.special_date_anchor
        suffix = f" ({const.LUNAR_LABEL})" if anchor.is_lunar else ""
        return f"{text} on {anchor.name}{suffix}"
    if rule.year_day is not None:
        return f"{text} on day {rule.year_day} of the year"
    if rule.month is not None:
        if isinstance(rule.month_day, ForwardDay):
            return f"{text} on {_month_name(rule.month)} {rule.month_day.day}"
        text = f"{text} in {_month_name(rule.month)}"
    if rule.month_day is not None:
        text = _with_placement(text, rule.month_day)
    return text


def _describe_composite(rule: RecurrenceRule) -> str:
    parts: list[str] = []
    if rule.years:
        parts.append(_plural(rule.years, "year"))
    if rule.months:
        parts.append(_plural(rule.months, "month"))

    day = rule.composite_day
    if isinstance(day, NthWeekday):
        parts.append(
            f"then the {describe_nth_weekday(day.week_of_month, day.weekday)} "
            "of the next month"
        )
    elif isinstance(day, (DayOfMonth, DayOfYear)):
        parts.append(_plural(day.days, "day"))

    return "every " + ", ".join(parts)


# ==============================================================================
# ADVANCED RULES
# ==============================================================================


def describe_advanced_rule(rule: AdvancedRecurrenceRule) -> str:
    """Describe an advanced recurrence rule.

    Examples:
        "every 3 days", "every 2 weeks on Friday", "on the next weekend",
        "every month, 3 days before month end", "every year on June 5"
    """
    unit = rule.selected_unit
    placement: DayPlacement = (
        BackwardDay(rule.day_value)
        if rule.count_direction == const.COUNT_DIRECTION_BACKWARD
        else ForwardDay(rule.day_value)
    )

    if unit == const.ADVANCED_UNIT_DAY:
        return _every(rule.day_value, "day")

    if unit == const.ADVANCED_UNIT_WEEK:
        if rule.use_special_date_anchor:
            label = const.ANCHOR_TYPE_LABELS.get(
                rule.special_date_anchor_type or "", "special date"
            )
            return f"on the next {label}"
        if rule.week_value == 1:
            return f"every {_weekday(rule.week_day)}"
        return f"{_every(rule.week_value, 'week')} on {_weekday(rule.week_day)}"

    if unit == const.ADVANCED_UNIT_MONTH:
        if rule.use_special_date_anchor:
            return "every month"
        return _with_placement(_every(rule.month_value, "month"), placement)

    text = _every(rule.year_value, "year")
    if rule.use_special_date_anchor:
        return text
    month = _month_name(rule.month_value)
    if isinstance(placement, ForwardDay):
        return f"{text} on {month} {placement.day}"
    return _with_placement(f"{text} in {month}", placement)
