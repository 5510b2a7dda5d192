"""Unit tests for special_date_engine.py.

Tests the built-in catalogs, anchor resolution per year and the strict
next/previous occurrence lookups.
"""

from datetime import date

import pytest

from nevermiss import const
from nevermiss.data_builders import InvalidRuleError
from nevermiss.engines.special_date_engine import (
    SpecialDateEngine,
    is_weekend,
    is_workday,
)
from nevermiss.models import SpecialDateAnchor


class TestCatalogs:
    """get_special_dates / find_special_date."""

    def test_holiday_catalog(self) -> None:
        """Six lunar and eight solar holidays."""
        holidays = SpecialDateEngine.get_special_dates(const.SPECIAL_DATE_KIND_HOLIDAY)

        assert len(holidays) == 14
        assert sum(1 for anchor in holidays if anchor.is_lunar) == 6

    def test_solar_term_catalog(self) -> None:
        """24 solar terms in calendar order."""
        terms = SpecialDateEngine.get_special_dates(const.SPECIAL_DATE_KIND_SOLAR_TERM)

        assert len(terms) == 24
        assert [(t.month, t.day) for t in terms] == sorted(
            (t.month, t.day) for t in terms
        )

    def test_custom_catalog_is_empty(self) -> None:
        assert SpecialDateEngine.get_special_dates(const.SPECIAL_DATE_KIND_CUSTOM) == []

    def test_unknown_kind(self) -> None:
        with pytest.raises(InvalidRuleError):
            SpecialDateEngine.get_special_dates("birthday")

    def test_find_by_id(self) -> None:
        anchor = SpecialDateEngine.find_special_date("mid_autumn")

        assert anchor is not None
        assert (anchor.month, anchor.day, anchor.is_lunar) == (8, 15, True)
        assert SpecialDateEngine.find_special_date("nope") is None


class TestResolution:
    """Anchor resolution to solar dates."""

    @pytest.mark.parametrize(
        ("anchor_id", "year", "expected"),
        [
            ("spring_festival", 2027, date(2027, 2, 6)),
            ("cpc_founding", 2025, date(2025, 7, 1)),
            ("army_day", 2025, date(2025, 8, 1)),
        ],
    )
    def test_builtin_date_in_year(
        self,
        special_dates: SpecialDateEngine,
        anchor_id: str,
        year: int,
        expected: date,
    ) -> None:
        anchor = SpecialDateEngine.find_special_date(anchor_id)
        assert anchor is not None

        assert special_dates.date_in_year(anchor, year) == expected

    def test_lunar_day_30_clamped(self, special_dates: SpecialDateEngine) -> None:
        """Lunar 1/30 in 2024 (a 29-day month) resolves to 1/29 = 2024-03-09."""
        anchor = SpecialDateAnchor(
            kind=const.SPECIAL_DATE_KIND_CUSTOM, name="x", month=1, day=30, is_lunar=True
        )

        assert special_dates.date_in_year(anchor, 2024) == date(2024, 3, 9)

    def test_solar_feb_29_clamped(self, special_dates: SpecialDateEngine) -> None:
        anchor = SpecialDateAnchor(
            kind=const.SPECIAL_DATE_KIND_CUSTOM, name="leap", month=2, day=29
        )

        assert special_dates.date_in_year(anchor, 2025) == date(2025, 2, 28)
        assert special_dates.date_in_year(anchor, 2024) == date(2024, 2, 29)

    def test_next_occurrence_is_strict(self, special_dates: SpecialDateEngine) -> None:
        """The day of the festival itself moves to next year's festival."""
        spring = SpecialDateEngine.find_special_date("spring_festival")
        assert spring is not None

        assert special_dates.next_occurrence(spring, date(2024, 2, 10)) == date(
            2025, 1, 29
        )
        assert special_dates.next_occurrence(spring, date(2024, 2, 9)) == date(
            2024, 2, 10
        )

    def test_previous_occurrence(self, special_dates: SpecialDateEngine) -> None:
        spring = SpecialDateEngine.find_special_date("spring_festival")
        assert spring is not None

        assert special_dates.previous_occurrence(spring, date(2024, 2, 11)) == date(
            2024, 2, 10
        )
        assert special_dates.previous_occurrence(spring, date(2024, 2, 10)) < date(
            2024, 2, 10
        )

    def test_solar_next_occurrence(self, special_dates: SpecialDateEngine) -> None:
        national = SpecialDateEngine.find_special_date("national_day")
        assert national is not None

        assert special_dates.next_occurrence(national, date(2024, 9, 30)) == date(
            2024, 10, 1
        )
        assert special_dates.next_occurrence(national, date(2024, 10, 1)) == date(
            2025, 10, 1
        )


class TestDayKinds:
    """Weekend/workday predicates."""

    @pytest.mark.parametrize(
        ("value", "weekend"),
        [
            (date(2024, 3, 8), False),
            (date(2024, 3, 9), True),
            (date(2024, 3, 10), True),
            (date(2024, 3, 11), False),
        ],
    )
    def test_predicates(self, value: date, weekend: bool) -> None:
        assert is_weekend(value) is weekend
        assert is_workday(value) is not weekend
