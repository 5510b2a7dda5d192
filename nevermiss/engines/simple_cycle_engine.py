"""Simple Cycle Engine - due/start dates for the basic rule types.

Handles daily, weekly, monthly, yearly, weekOfMonth, custom and composite
RecurrenceRules in either calendar system:

- daily / custom: offset arithmetic (minutes and hours are exact durations,
  days and weeks are local calendar days, months and years clamp to the
  month end)
- weekly / monthly / weekOfMonth: snap to the nearest matching calendar
  point, so compute_start(compute_due(d)) is NOT d for these rules
- lunar rules run the same field arithmetic through LunarSpace; weekdays
  are always matched on the solar date

ARCHITECTURE: Pure logic, no persistence. The local wall time of the anchor
is kept on every result.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Any

from .. import const
from ..data_builders import InvalidRuleError, validate_recurrence_rule
from ..models import DayOfMonth, DayOfYear, NthWeekday, RecurrenceRule
from ..utils.dt_utils import local_date
from .base_calculator import BaseCycleCalculator
from .calendar_space import CalendarFields, CalendarSpace, nth_weekday_of_month
from .lunar_engine import LunarCalendarAdapter
from .special_date_engine import SpecialDateEngine


class SimpleCycleCalculator(BaseCycleCalculator):
    """Cycle boundary calculator for basic RecurrenceRules."""

    name = "SimpleCycleCalculator"

    def __init__(self, lunar_adapter: LunarCalendarAdapter | None = None) -> None:
        """Initialize the calculator.

        Args:
            lunar_adapter: Adapter used for lunar rules and lunar anchors
        """
        super().__init__(lunar_adapter)
        self._special_dates = SpecialDateEngine(self._lunar)
        self._handlers: dict[
            str, Callable[[datetime, RecurrenceRule, CalendarSpace, int], datetime]
        ] = {
            const.RULE_TYPE_DAILY: self._daily,
            const.RULE_TYPE_WEEKLY: self._weekly,
            const.RULE_TYPE_MONTHLY: self._monthly,
            const.RULE_TYPE_YEARLY: self._yearly,
            const.RULE_TYPE_WEEK_OF_MONTH: self._week_of_month,
            const.RULE_TYPE_CUSTOM: self._custom,
            const.RULE_TYPE_COMPOSITE: self._composite,
        }

    def validate(self, rule: Any) -> None:
        if not isinstance(rule, RecurrenceRule):
            raise InvalidRuleError(
                field=const.FIELD_TYPE,
                translation_key=const.TRANS_KEY_INVALID_RULE_TYPE,
            )
        validate_recurrence_rule(rule)

    def _compute(
        self, anchor: datetime, rule: RecurrenceRule, space: CalendarSpace, sign: int
    ) -> datetime:
        const.LOGGER.debug(
            "SimpleCycleCalculator: %s rule (value=%s) %s from %s in %s space",
            rule.type,
            rule.value,
            "forward" if sign > 0 else "backward",
            anchor.isoformat(),
            space.date_system,
        )
        return self._handlers[rule.type](anchor, rule, space, sign)

    # -------------------------------------------------------------------------
    # Offset rules
    # -------------------------------------------------------------------------

    def _daily(
        self, anchor: datetime, rule: RecurrenceRule, space: CalendarSpace, sign: int
    ) -> datetime:
        return self._shift_days(anchor, sign * rule.value)

    def _custom(
        self, anchor: datetime, rule: RecurrenceRule, space: CalendarSpace, sign: int
    ) -> datetime:
        amount = sign * rule.value
        if rule.unit == const.TIME_UNIT_MINUTES:
            return anchor + timedelta(minutes=amount)
        if rule.unit == const.TIME_UNIT_HOURS:
            return anchor + timedelta(hours=amount)
        if rule.unit == const.TIME_UNIT_DAYS:
            return self._shift_days(anchor, amount)
        if rule.unit == const.TIME_UNIT_WEEKS:
            return self._shift_days(anchor, amount * 7)

        fields = space.from_date(local_date(anchor))
        if rule.unit == const.TIME_UNIT_MONTHS:
            fields = space.add_months(fields, amount)
        else:
            fields = space.add_years(fields, amount)
        return self._on(anchor, space.to_date(fields))

    # -------------------------------------------------------------------------
    # Snapping rules
    # -------------------------------------------------------------------------

    def _weekly(
        self, anchor: datetime, rule: RecurrenceRule, space: CalendarSpace, sign: int
    ) -> datetime:
        if rule.week_day is None:
            return self._shift_days(anchor, sign * rule.value * 7)

        # Start one day out so an anchor on the weekday itself moves a full week
        first = local_date(anchor) + timedelta(days=sign)
        target = self._scan(first, sign, lambda d: d.weekday() == rule.week_day)
        target += timedelta(days=sign * (rule.value - 1) * 7)
        return self._on(anchor, target)

    def _monthly(
        self, anchor: datetime, rule: RecurrenceRule, space: CalendarSpace, sign: int
    ) -> datetime:
        fields = space.add_months(space.from_date(local_date(anchor)), sign * rule.value)
        if rule.month_day is not None:
            fields = replace(fields, day=rule.month_day.resolve(space.month_length(fields)))
        return self._on(anchor, space.to_date(fields))

    def _yearly(
        self, anchor: datetime, rule: RecurrenceRule, space: CalendarSpace, sign: int
    ) -> datetime:
        if rule.special_date_anchor is not None:
            target = local_date(anchor)
            for _ in range(rule.value):
                if sign > 0:
                    target = self._special_dates.next_occurrence(
                        rule.special_date_anchor, target
                    )
                else:
                    target = self._special_dates.previous_occurrence(
                        rule.special_date_anchor, target
                    )
            return self._on(anchor, target)

        fields = space.add_years(space.from_date(local_date(anchor)), sign * rule.value)
        if rule.year_day is not None:
            return self._on(anchor, space.year_day(fields.year, rule.year_day))
        if rule.month is not None:
            fields = space.set_month(fields, rule.month)
        if rule.month_day is not None:
            fields = replace(fields, day=rule.month_day.resolve(space.month_length(fields)))
        return self._on(anchor, space.to_date(fields))

    def _week_of_month(
        self, anchor: datetime, rule: RecurrenceRule, space: CalendarSpace, sign: int
    ) -> datetime:
        anchor_date = local_date(anchor)
        fields = replace(space.from_date(anchor_date), day=1)

        # A pinned month rolls by years, otherwise by months
        step: Callable[[CalendarFields, int], CalendarFields]
        if rule.month is not None:
            fields = space.set_month(fields, rule.month)
            step = space.add_years
        else:
            step = space.add_months

        def occurrence_in(month_fields: CalendarFields) -> date:
            return nth_weekday_of_month(
                space,
                month_fields,
                rule.week_of_month,  # type: ignore[arg-type]
                rule.week_day,  # type: ignore[arg-type]
            )

        occurrence = occurrence_in(fields)
        if (occurrence - anchor_date).days * sign <= 0:
            fields = step(fields, sign)
            occurrence = occurrence_in(fields)
        if rule.value > 1:
            fields = step(fields, sign * (rule.value - 1))
            occurrence = occurrence_in(fields)

        return self._on(anchor, occurrence)

    def _composite(
        self, anchor: datetime, rule: RecurrenceRule, space: CalendarSpace, sign: int
    ) -> datetime:
        fields = space.from_date(local_date(anchor))
        if rule.years:
            fields = space.add_years(fields, sign * rule.years)
        if rule.months:
            fields = space.add_months(fields, sign * rule.months)

        day = rule.composite_day
        if isinstance(day, NthWeekday):
            # Nth weekday of the following (or, backward, preceding) month
            month_fields = space.add_months(replace(fields, day=1), sign)
            target = nth_weekday_of_month(
                space, month_fields, day.week_of_month, day.weekday
            )
        else:
            target = space.to_date(fields)
            if isinstance(day, (DayOfMonth, DayOfYear)):
                target += timedelta(days=sign * day.days)

        return self._on(anchor, target)
