"""Special Date Engine - festivals, solar terms and day-kind predicates.

Provides:
- Built-in catalogs of lunar holidays, solar holidays and the 24 solar terms
- Resolution of a SpecialDateAnchor to a concrete solar date in a year
- Next/previous occurrence lookups used by yearly anchored rules
- Weekend/workday predicates used by the advanced calculator

Solar terms use their usual fixed Gregorian dates; the true astronomical
date can differ by a day.
"""

from __future__ import annotations

from calendar import monthrange
from datetime import date

from .. import const
from ..data_builders import InvalidRuleError
from ..models import SpecialDateAnchor
from .lunar_engine import DEFAULT_LUNAR_TABLE, LunarCalendarAdapter

# =============================================================================
# CATALOGS
# =============================================================================

_HOLIDAY = const.SPECIAL_DATE_KIND_HOLIDAY
_SOLAR_TERM = const.SPECIAL_DATE_KIND_SOLAR_TERM

LUNAR_HOLIDAYS: tuple[SpecialDateAnchor, ...] = (
    SpecialDateAnchor(_HOLIDAY, "Spring Festival", 1, 1, True, "spring_festival"),
    SpecialDateAnchor(_HOLIDAY, "Lantern Festival", 1, 15, True, "lantern_festival"),
    SpecialDateAnchor(_HOLIDAY, "Dragon Boat Festival", 5, 5, True, "dragon_boat"),
    SpecialDateAnchor(_HOLIDAY, "Mid-Autumn Festival", 8, 15, True, "mid_autumn"),
    SpecialDateAnchor(_HOLIDAY, "Double Ninth Festival", 9, 9, True, "double_ninth"),
    SpecialDateAnchor(_HOLIDAY, "Laba Festival", 12, 8, True, "laba_festival"),
)

SOLAR_HOLIDAYS: tuple[SpecialDateAnchor, ...] = (
    SpecialDateAnchor(_HOLIDAY, "New Year's Day", 1, 1, False, "new_year"),
    SpecialDateAnchor(_HOLIDAY, "Women's Day", 3, 8, False, "womens_day"),
    SpecialDateAnchor(_HOLIDAY, "Labor Day", 5, 1, False, "labor_day"),
    SpecialDateAnchor(_HOLIDAY, "Children's Day", 6, 1, False, "childrens_day"),
    SpecialDateAnchor(_HOLIDAY, "CPC Founding Day", 7, 1, False, "cpc_founding"),
    SpecialDateAnchor(_HOLIDAY, "Army Day", 8, 1, False, "army_day"),
    SpecialDateAnchor(_HOLIDAY, "Teachers' Day", 9, 10, False, "teachers_day"),
    SpecialDateAnchor(_HOLIDAY, "National Day", 10, 1, False, "national_day"),
)

SOLAR_TERMS: tuple[SpecialDateAnchor, ...] = tuple(
    SpecialDateAnchor(_SOLAR_TERM, name, month, day, False, term_id)
    for term_id, name, month, day in (
        ("xiaohan", "Minor Cold", 1, 6),
        ("dahan", "Major Cold", 1, 20),
        ("lichun", "Start of Spring", 2, 4),
        ("yushui", "Rain Water", 2, 19),
        ("jingzhe", "Awakening of Insects", 3, 6),
        ("chunfen", "Spring Equinox", 3, 21),
        ("qingming", "Pure Brightness", 4, 5),
        ("guyu", "Grain Rain", 4, 20),
        ("lixia", "Start of Summer", 5, 6),
        ("xiaoman", "Grain Buds", 5, 21),
        ("mangzhong", "Grain in Ear", 6, 6),
        ("xiazhi", "Summer Solstice", 6, 21),
        ("xiaoshu", "Minor Heat", 7, 7),
        ("dashu", "Major Heat", 7, 23),
        ("liqiu", "Start of Autumn", 8, 8),
        ("chushu", "End of Heat", 8, 23),
        ("bailu", "White Dew", 9, 8),
        ("qiufen", "Autumn Equinox", 9, 23),
        ("hanlu", "Cold Dew", 10, 8),
        ("shuangjiang", "Frost's Descent", 10, 24),
        ("lidong", "Start of Winter", 11, 7),
        ("xiaoxue", "Minor Snow", 11, 22),
        ("daxue", "Major Snow", 12, 7),
        ("dongzhi", "Winter Solstice", 12, 22),
    )
)


# =============================================================================
# DAY-KIND PREDICATES
# =============================================================================


def is_weekend(value: date) -> bool:
    """Return True for Saturday and Sunday."""
    return value.weekday() in const.WEEKEND_DAYS


def is_workday(value: date) -> bool:
    """Return True for Monday to Friday (no holiday calendar is consulted)."""
    return not is_weekend(value)


# =============================================================================
# SPECIAL DATE ENGINE
# =============================================================================


class SpecialDateEngine:
    """Resolve special date anchors to solar dates."""

    def __init__(self, lunar_adapter: LunarCalendarAdapter | None = None) -> None:
        self._lunar = lunar_adapter or LunarCalendarAdapter(DEFAULT_LUNAR_TABLE)

    @staticmethod
    def get_special_dates(kind: str) -> list[SpecialDateAnchor]:
        """Return the built-in catalog for a kind.

        Args:
            kind: const.SPECIAL_DATE_KIND_HOLIDAY or SPECIAL_DATE_KIND_SOLAR_TERM
                (custom dates are owned by the caller, so that catalog is empty)

        Raises:
            InvalidRuleError: If the kind is unknown.
        """
        if kind == const.SPECIAL_DATE_KIND_HOLIDAY:
            return [*LUNAR_HOLIDAYS, *SOLAR_HOLIDAYS]
        if kind == const.SPECIAL_DATE_KIND_SOLAR_TERM:
            return list(SOLAR_TERMS)
        if kind == const.SPECIAL_DATE_KIND_CUSTOM:
            return []
        raise InvalidRuleError(
            field=const.FIELD_SPECIAL_DATE_ANCHOR,
            translation_key=const.TRANS_KEY_INVALID_SPECIAL_DATE,
            placeholders={"value": str(kind)},
        )

    @staticmethod
    def find_special_date(anchor_id: str) -> SpecialDateAnchor | None:
        """Look up a built-in anchor by id."""
        for anchor in (*LUNAR_HOLIDAYS, *SOLAR_HOLIDAYS, *SOLAR_TERMS):
            if anchor.id == anchor_id:
                return anchor
        return None

    def date_in_year(self, anchor: SpecialDateAnchor, year: int) -> date:
        """Return the solar date of an anchor in a year.

        ``year`` is a lunar year for lunar anchors and a solar year otherwise.
        The day is clamped to the month length (lunar 30th in a 29-day month,
        Feb 29 in a common year).

        Raises:
            InvalidLunarDateError: If a lunar year is outside the table.
        """
        if anchor.is_lunar:
            day = min(anchor.day, self._lunar.days_in_lunar_month(year, anchor.month))
            return self._lunar.to_solar(year, anchor.month, day)
        day = min(anchor.day, monthrange(year, anchor.month)[1])
        return date(year, anchor.month, day)

    def next_occurrence(self, anchor: SpecialDateAnchor, after: date) -> date:
        """Return the first occurrence strictly after ``after``."""
        year = self._year_of(anchor, after)
        occurrence = self.date_in_year(anchor, year)
        if occurrence <= after:
            occurrence = self.date_in_year(anchor, year + 1)
        return occurrence

    def previous_occurrence(self, anchor: SpecialDateAnchor, before: date) -> date:
        """Return the last occurrence strictly before ``before``."""
        year = self._year_of(anchor, before)
        occurrence = self.date_in_year(anchor, year)
        if occurrence >= before:
            occurrence = self.date_in_year(anchor, year - 1)
        return occurrence

    def _year_of(self, anchor: SpecialDateAnchor, value: date) -> int:
        if anchor.is_lunar:
            return self._lunar.to_lunar(value).year
        return value.year
