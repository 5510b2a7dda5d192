"""Unit tests for simple_cycle_engine.py SimpleCycleCalculator.

Covers:
- Daily/custom offsets and their exact start<->due inverse
- Weekly snapping to a weekday (not an exact inverse)
- Monthly day placement with month-end clamping and backward counting
- Yearly: Feb 29 clamping, pinned month/day, day-of-year, special anchors
- weekOfMonth: Nth/last weekday, month and year rolling
- Composite year -> month -> day ordering
- Lunar delegation and fallbacks for unrepresentable dates
"""

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

import pytest

from nevermiss import const
from nevermiss.data_builders import InvalidRuleError
from nevermiss.engines.simple_cycle_engine import SimpleCycleCalculator
from nevermiss.models import (
    BackwardDay,
    DayOfMonth,
    ForwardDay,
    NthWeekday,
    RecurrenceRule,
    SpecialDateAnchor,
)
from nevermiss.utils import dt_utils

LUNAR = const.DATE_SYSTEM_LUNAR


def make_utc_dt(
    year: int, month: int, day: int, hour: int = 12, minute: int = 0
) -> datetime:
    """Create a UTC datetime for testing."""
    return datetime(year, month, day, hour, minute, 0, tzinfo=UTC)


# =============================================================================
# Daily / Custom
# =============================================================================


class TestOffsetRules:
    """Daily and custom rules are plain offsets."""

    def test_daily_crosses_month_boundary(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """daily, value=3, 2024-01-30 -> 2024-02-02."""
        rule = RecurrenceRule(type=const.RULE_TYPE_DAILY, value=3)

        due = simple_calculator.compute_due(make_utc_dt(2024, 1, 30), rule)

        assert due == make_utc_dt(2024, 2, 2)

    def test_daily_start_is_exact_inverse(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """compute_start(compute_due(d)) == d for daily rules."""
        rule = RecurrenceRule(type=const.RULE_TYPE_DAILY, value=3)
        start = make_utc_dt(2024, 1, 30, 9, 15)

        due = simple_calculator.compute_due(start, rule)

        assert simple_calculator.compute_start(due, rule) == start

    @pytest.mark.parametrize(
        ("unit", "value", "expected"),
        [
            (const.TIME_UNIT_MINUTES, 90, make_utc_dt(2024, 1, 1, 13, 30)),
            (const.TIME_UNIT_HOURS, 5, make_utc_dt(2024, 1, 1, 17)),
            (const.TIME_UNIT_DAYS, 10, make_utc_dt(2024, 1, 11)),
            (const.TIME_UNIT_WEEKS, 2, make_utc_dt(2024, 1, 15)),
            (const.TIME_UNIT_MONTHS, 1, make_utc_dt(2024, 2, 1)),
            (const.TIME_UNIT_YEARS, 1, make_utc_dt(2025, 1, 1)),
        ],
    )
    def test_custom_units(
        self,
        simple_calculator: SimpleCycleCalculator,
        unit: str,
        value: int,
        expected: datetime,
    ) -> None:
        """Every custom unit moves by the expected amount and back."""
        rule = RecurrenceRule(type=const.RULE_TYPE_CUSTOM, value=value, unit=unit)
        start = make_utc_dt(2024, 1, 1)

        due = simple_calculator.compute_due(start, rule)

        assert due == expected
        assert simple_calculator.compute_start(due, rule) == start

    def test_custom_months_clamps_to_month_end(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """Jan 31 + 1 month clamps to Feb 29 in a leap year, never spills into March."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_CUSTOM, value=1, unit=const.TIME_UNIT_MONTHS
        )

        due = simple_calculator.compute_due(make_utc_dt(2024, 1, 31), rule)

        assert due == make_utc_dt(2024, 2, 29)

    def test_wall_time_kept_across_dst(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """A 09:00 local task stays at 09:00 local when DST starts."""
        tz = ZoneInfo("America/New_York")
        dt_utils.set_default_timezone(tz)
        rule = RecurrenceRule(type=const.RULE_TYPE_DAILY, value=1)
        start = datetime(2024, 3, 9, 9, 0, tzinfo=tz)

        due = simple_calculator.compute_due(start, rule)

        assert due.astimezone(tz) == datetime(2024, 3, 10, 9, 0, tzinfo=tz)
        assert due == make_utc_dt(2024, 3, 10, 13)


# =============================================================================
# Weekly
# =============================================================================


class TestWeekly:
    """Weekly rules snap to the next matching weekday."""

    def test_weekly_two_weeks_on_monday(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """Wed 2024-03-06 -> Monday 2024-03-11 plus one week -> 2024-03-18."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_WEEKLY, value=2, week_day=const.WEEKDAY_MONDAY
        )

        due = simple_calculator.compute_due(make_utc_dt(2024, 3, 6), rule)

        assert due == make_utc_dt(2024, 3, 18)

    def test_anchor_on_weekday_moves_full_week(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """An anchor already on the weekday advances a full week."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_WEEKLY, value=1, week_day=const.WEEKDAY_MONDAY
        )

        due = simple_calculator.compute_due(make_utc_dt(2024, 3, 11), rule)

        assert due == make_utc_dt(2024, 3, 18)

    def test_start_is_not_exact_inverse(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """Backward snapping lands on a Monday, not on the starting Wednesday."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_WEEKLY, value=2, week_day=const.WEEKDAY_MONDAY
        )

        start = simple_calculator.compute_start(make_utc_dt(2024, 3, 18), rule)

        assert start == make_utc_dt(2024, 3, 4)
        assert start != make_utc_dt(2024, 3, 6)

    def test_weekly_without_weekday_is_plain_weeks(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """No weekDay behaves like custom weeks."""
        rule = RecurrenceRule(type=const.RULE_TYPE_WEEKLY, value=3)

        due = simple_calculator.compute_due(make_utc_dt(2024, 3, 6), rule)

        assert due == make_utc_dt(2024, 3, 27)


# =============================================================================
# Monthly
# =============================================================================


class TestMonthly:
    """Monthly rules with forward/backward day placement."""

    def test_day_31_clamps_to_feb_29(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """monthDay=31 from January 2024 clamps to 2024-02-29."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_MONTHLY, value=1, month_day=ForwardDay(31)
        )

        due = simple_calculator.compute_due(make_utc_dt(2024, 1, 15), rule)

        assert due == make_utc_dt(2024, 2, 29)

    def test_day_31_clamps_to_feb_28_in_common_year(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """monthDay=31 from January 2023 clamps to 2023-02-28."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_MONTHLY, value=1, month_day=ForwardDay(31)
        )

        due = simple_calculator.compute_due(make_utc_dt(2023, 1, 31), rule)

        assert due == make_utc_dt(2023, 2, 28)

    @pytest.mark.parametrize(
        ("offset", "expected_day"),
        [(0, 29), (3, 26), (30, 1)],
    )
    def test_backward_day(
        self,
        simple_calculator: SimpleCycleCalculator,
        offset: int,
        expected_day: int,
    ) -> None:
        """Backward placement is daysInMonth - offset, floored at day 1."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_MONTHLY, value=1, month_day=BackwardDay(offset)
        )

        due = simple_calculator.compute_due(make_utc_dt(2024, 1, 10), rule)

        assert due == make_utc_dt(2024, 2, expected_day)

    def test_without_month_day_clamps(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """Plain monthly steps clamp to the shorter month."""
        rule = RecurrenceRule(type=const.RULE_TYPE_MONTHLY, value=1)

        assert simple_calculator.compute_due(
            make_utc_dt(2024, 1, 31), rule
        ) == make_utc_dt(2024, 2, 29)
        assert simple_calculator.compute_start(
            make_utc_dt(2024, 3, 31), rule
        ) == make_utc_dt(2024, 2, 29)

    def test_month_arithmetic_never_yields_invalid_day(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """Twelve consecutive monthly steps from the 31st stay valid and ordered."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_MONTHLY, value=1, month_day=ForwardDay(31)
        )
        current = make_utc_dt(2024, 1, 31)

        for _ in range(12):
            result = simple_calculator.calculate_due(current, rule)
            assert not result.is_degraded
            assert result.instant > current
            current = result.instant

        assert current == make_utc_dt(2025, 1, 31)


# =============================================================================
# Yearly
# =============================================================================


class TestYearly:
    """Yearly rules."""

    def test_feb_29_clamps_in_common_year(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """2024-02-29 + 1 year -> 2025-02-28."""
        rule = RecurrenceRule(type=const.RULE_TYPE_YEARLY, value=1)

        due = simple_calculator.compute_due(make_utc_dt(2024, 2, 29), rule)

        assert due == make_utc_dt(2025, 2, 28)

    def test_pinned_month_and_day(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """month=12, monthDay=25 places the result on Christmas of the next year."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_YEARLY,
            value=1,
            month=12,
            month_day=ForwardDay(25),
        )

        due = simple_calculator.compute_due(make_utc_dt(2024, 3, 1), rule)

        assert due == make_utc_dt(2025, 12, 25)

    def test_year_day(self, simple_calculator: SimpleCycleCalculator) -> None:
        """yearDay=60 in 2025 is March 1; 366 clamps to Dec 31."""
        start = make_utc_dt(2024, 5, 1)

        day_60 = RecurrenceRule(type=const.RULE_TYPE_YEARLY, value=1, year_day=60)
        day_366 = RecurrenceRule(type=const.RULE_TYPE_YEARLY, value=1, year_day=366)

        assert simple_calculator.compute_due(start, day_60) == make_utc_dt(2025, 3, 1)
        assert simple_calculator.compute_due(start, day_366) == make_utc_dt(
            2025, 12, 31
        )

    def test_lunar_special_anchor(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """A Mid-Autumn anchor resolves to the next festival (2024-09-17)."""
        anchor = SpecialDateAnchor(
            kind=const.SPECIAL_DATE_KIND_HOLIDAY,
            name="Mid-Autumn Festival",
            month=8,
            day=15,
            is_lunar=True,
        )
        rule = RecurrenceRule(
            type=const.RULE_TYPE_YEARLY, value=1, special_date_anchor=anchor
        )

        due = simple_calculator.compute_due(make_utc_dt(2024, 1, 10), rule)

        assert due == make_utc_dt(2024, 9, 17)

    def test_solar_special_anchor_on_the_day_moves_a_year(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """An anchor on the festival itself resolves to next year's festival."""
        anchor = SpecialDateAnchor(
            kind=const.SPECIAL_DATE_KIND_HOLIDAY, name="National Day", month=10, day=1
        )
        rule = RecurrenceRule(
            type=const.RULE_TYPE_YEARLY, value=1, special_date_anchor=anchor
        )

        due = simple_calculator.compute_due(make_utc_dt(2024, 10, 1), rule)

        assert due == make_utc_dt(2025, 10, 1)


# =============================================================================
# weekOfMonth
# =============================================================================


class TestWeekOfMonth:
    """Nth weekday of a month."""

    def test_last_friday_of_june(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """weekOfMonth=5, Friday, month=6, 2024 -> 2024-06-28."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_WEEK_OF_MONTH,
            value=1,
            week_day=const.WEEKDAY_FRIDAY,
            week_of_month=5,
            month=6,
        )

        due = simple_calculator.compute_due(make_utc_dt(2024, 6, 1), rule)

        assert due == make_utc_dt(2024, 6, 28)

    def test_pinned_month_passed_rolls_to_next_year(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """After June 2024 the next last Friday of June is 2025-06-27."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_WEEK_OF_MONTH,
            value=1,
            week_day=const.WEEKDAY_FRIDAY,
            week_of_month=5,
            month=6,
        )

        due = simple_calculator.compute_due(make_utc_dt(2024, 7, 1), rule)

        assert due == make_utc_dt(2025, 6, 27)

    def test_passed_occurrence_rolls_to_next_month(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """First Monday of January 2024 passed -> first Monday of February."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_WEEK_OF_MONTH,
            value=1,
            week_day=const.WEEKDAY_MONDAY,
            week_of_month=1,
        )

        due = simple_calculator.compute_due(make_utc_dt(2024, 1, 15), rule)

        assert due == make_utc_dt(2024, 2, 5)

    def test_occurrence_on_anchor_day_rolls(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """An anchor on the last Friday itself moves to July's last Friday."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_WEEK_OF_MONTH,
            value=1,
            week_day=const.WEEKDAY_FRIDAY,
            week_of_month=5,
        )

        due = simple_calculator.compute_due(make_utc_dt(2024, 6, 28), rule)

        assert due == make_utc_dt(2024, 7, 26)

    def test_value_adds_further_months(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """value=2 adds one more month after the next occurrence."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_WEEK_OF_MONTH,
            value=2,
            week_day=const.WEEKDAY_MONDAY,
            week_of_month=1,
        )

        due = simple_calculator.compute_due(make_utc_dt(2024, 1, 15), rule)

        assert due == make_utc_dt(2024, 3, 4)

    def test_start_searches_backward(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """The start for a 2024-06-28 due date is the last Friday of June 2023."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_WEEK_OF_MONTH,
            value=1,
            week_day=const.WEEKDAY_FRIDAY,
            week_of_month=5,
            month=6,
        )

        start = simple_calculator.compute_start(make_utc_dt(2024, 6, 28), rule)

        assert start == make_utc_dt(2023, 6, 30)

    @pytest.mark.parametrize("weekday", range(7))
    def test_last_week_within_final_seven_days(
        self, simple_calculator: SimpleCycleCalculator, weekday: int
    ) -> None:
        """weekOfMonth=5 always lands within the last 7 days of its month."""
        for month in range(1, 13):
            rule = RecurrenceRule(
                type=const.RULE_TYPE_WEEK_OF_MONTH,
                value=1,
                week_day=weekday,
                week_of_month=5,
                month=month,
            )
            due = simple_calculator.compute_due(make_utc_dt(2024, 1, 1), rule)
            next_month = date(2025, 1, 1) if month == 12 else date(2024, month + 1, 1)

            assert due.month == month
            assert due.weekday() == weekday
            assert 0 < (next_month - due.date()).days <= 7

    def test_missing_weekday_rejected(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """weekOfMonth without weekDay is an InvalidRuleError, not a fallback."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_WEEK_OF_MONTH, value=1, week_of_month=2
        )

        with pytest.raises(InvalidRuleError) as err:
            simple_calculator.compute_due(make_utc_dt(2024, 1, 1), rule)

        assert err.value.field == const.FIELD_WEEK_DAY


# =============================================================================
# Composite
# =============================================================================


class TestComposite:
    """Composite rules apply year, month, then day parts."""

    def test_years_then_months(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """1 year and 2 months from 2024-01-15 -> 2025-03-15."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_COMPOSITE, value=1, years=1, months=2
        )

        due = simple_calculator.compute_due(make_utc_dt(2024, 1, 15), rule)

        assert due == make_utc_dt(2025, 3, 15)

    def test_nth_weekday_in_following_month(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """1 month then the first Monday of the following month -> 2024-03-04."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_COMPOSITE,
            value=1,
            months=1,
            composite_day=NthWeekday(week_of_month=1, weekday=const.WEEKDAY_MONDAY),
        )

        due = simple_calculator.compute_due(make_utc_dt(2024, 1, 15), rule)

        assert due == make_utc_dt(2024, 3, 4)

    def test_day_offset_round_trip(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """A plain day offset is mirrored by the start calculation."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_COMPOSITE, value=1, composite_day=DayOfMonth(10)
        )
        start = make_utc_dt(2024, 1, 15)

        due = simple_calculator.compute_due(start, rule)

        assert due == make_utc_dt(2024, 1, 25)
        assert simple_calculator.compute_start(due, rule) == start


# =============================================================================
# Lunar
# =============================================================================


class TestLunarRules:
    """Lunar rules run the same arithmetic in lunar fields."""

    def test_monthly_moves_one_lunar_month(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """Lunar 2024/1/1 (2024-02-10) + 1 month -> lunar 2/1 (2024-03-10)."""
        rule = RecurrenceRule(type=const.RULE_TYPE_MONTHLY, value=1)

        due = simple_calculator.compute_due(make_utc_dt(2024, 2, 10), rule, LUNAR)

        assert due == make_utc_dt(2024, 3, 10)

    def test_monthly_clamps_to_short_lunar_month(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """Lunar 2/30 (2024-04-08) + 1 month clamps to lunar 3/29 (2024-05-07)."""
        rule = RecurrenceRule(type=const.RULE_TYPE_MONTHLY, value=1)

        due = simple_calculator.compute_due(make_utc_dt(2024, 4, 8), rule, LUNAR)

        assert due == make_utc_dt(2024, 5, 7)

    def test_yearly_follows_lunar_date(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """Lunar 8/15 in 2024 (2024-09-17) -> lunar 8/15 in 2025 (2025-10-06)."""
        rule = RecurrenceRule(type=const.RULE_TYPE_YEARLY, value=1)

        due = simple_calculator.compute_due(make_utc_dt(2024, 9, 17), rule, LUNAR)

        assert due == make_utc_dt(2025, 10, 6)

    def test_yearly_from_spring_festival(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """Spring Festival 2026 (2026-02-17) -> Spring Festival 2027 (2027-02-06)."""
        rule = RecurrenceRule(type=const.RULE_TYPE_YEARLY, value=1)

        due = simple_calculator.compute_due(make_utc_dt(2026, 2, 17, 9), rule, LUNAR)

        assert due == make_utc_dt(2027, 2, 6, 9)

    def test_monthly_in_late_window_not_degraded(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """Lunar years up to 2100 convert without falling back."""
        rule = RecurrenceRule(type=const.RULE_TYPE_MONTHLY, value=1)
        start = make_utc_dt(2060, 1, 1)

        result = simple_calculator.calculate_due(start, rule, LUNAR)

        assert not result.is_degraded
        assert start < result.instant < make_utc_dt(2060, 2, 2)

    def test_weekly_matches_solar_weekday(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """Weekday matching is unaffected by the lunar date system."""
        rule = RecurrenceRule(
            type=const.RULE_TYPE_WEEKLY, value=2, week_day=const.WEEKDAY_MONDAY
        )

        due = simple_calculator.compute_due(make_utc_dt(2024, 3, 6), rule, LUNAR)

        assert due == make_utc_dt(2024, 3, 18)


# =============================================================================
# Failure policy
# =============================================================================


class TestFallbacks:
    """Unrepresentable results degrade instead of raising."""

    def test_out_of_range_lunar_year_falls_back_30_days(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """A lunar rule outside the table window returns anchor + 30 days."""
        rule = RecurrenceRule(type=const.RULE_TYPE_MONTHLY, value=1)
        start = make_utc_dt(2105, 1, 1)

        result = simple_calculator.calculate_due(start, rule, LUNAR)

        assert result.is_degraded
        assert result.instant == make_utc_dt(2105, 1, 31)
        assert result.degraded is not None
        assert result.degraded.reason == const.DEGRADED_REASON_INVALID_LUNAR_DATE

    def test_out_of_range_lunar_start_falls_back_30_days_earlier(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """The start fallback mirrors the due fallback."""
        rule = RecurrenceRule(type=const.RULE_TYPE_MONTHLY, value=1)

        start = simple_calculator.compute_start(make_utc_dt(2105, 1, 31), rule, LUNAR)

        assert start == make_utc_dt(2105, 1, 1)

    def test_unrepresentable_year_falls_back_one_day(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """Year 10000 cannot be built; the due date falls back to anchor + 1 day."""
        rule = RecurrenceRule(type=const.RULE_TYPE_YEARLY, value=1)

        result = simple_calculator.calculate_due(make_utc_dt(9999, 6, 1), rule)

        assert result.instant == make_utc_dt(9999, 6, 2)
        assert result.degraded is not None
        assert result.degraded.reason == const.DEGRADED_REASON_INVALID_DATE

    def test_invalid_value_raises(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """value < 1 is rejected before any arithmetic."""
        rule = RecurrenceRule(type=const.RULE_TYPE_DAILY, value=0)

        with pytest.raises(InvalidRuleError):
            simple_calculator.compute_due(make_utc_dt(2024, 1, 1), rule)

    def test_unknown_date_system_raises(
        self, simple_calculator: SimpleCycleCalculator
    ) -> None:
        """Only solar and lunar date systems are accepted."""
        rule = RecurrenceRule(type=const.RULE_TYPE_DAILY, value=1)

        with pytest.raises(InvalidRuleError):
            simple_calculator.compute_due(make_utc_dt(2024, 1, 1), rule, "hebrew")


# =============================================================================
# Invariant: due strictly after start
# =============================================================================


@pytest.mark.parametrize(
    "rule",
    [
        RecurrenceRule(type=const.RULE_TYPE_DAILY, value=1),
        RecurrenceRule(type=const.RULE_TYPE_WEEKLY, value=1, week_day=4),
        RecurrenceRule(type=const.RULE_TYPE_MONTHLY, value=1, month_day=BackwardDay(30)),
        RecurrenceRule(type=const.RULE_TYPE_MONTHLY, value=1, month_day=ForwardDay(1)),
        RecurrenceRule(type=const.RULE_TYPE_YEARLY, value=1, month=1, month_day=ForwardDay(1)),
        RecurrenceRule(
            type=const.RULE_TYPE_WEEK_OF_MONTH, value=1, week_day=0, week_of_month=1
        ),
        RecurrenceRule(type=const.RULE_TYPE_CUSTOM, value=1, unit=const.TIME_UNIT_MINUTES),
        RecurrenceRule(
            type=const.RULE_TYPE_COMPOSITE,
            value=1,
            composite_day=NthWeekday(week_of_month=5, weekday=6),
        ),
    ],
)
@pytest.mark.parametrize("date_system", [const.DATE_SYSTEM_SOLAR, LUNAR])
def test_due_always_after_start(
    simple_calculator: SimpleCycleCalculator,
    rule: RecurrenceRule,
    date_system: str,
) -> None:
    """compute_due(d) > d for every rule shape in both calendars."""
    for start in (
        make_utc_dt(2024, 1, 31),
        make_utc_dt(2024, 2, 29),
        make_utc_dt(2024, 12, 31, 23, 59),
        make_utc_dt(2025, 6, 15),
    ):
        result = simple_calculator.calculate_due(start, rule, date_system)
        assert result.instant > start
        assert not result.is_degraded
