"""Advanced Cycle Engine - due/start dates for parametrized rules.

An AdvancedRecurrenceRule is keyed on ``selected_unit``:

- day: offset by dayValue
- week: next/previous weekDay plus (weekValue - 1) weeks, or a special
  anchor scan (weekend, workday) / fixed jump (holiday 7 days, solar term
  15 days)
- month: monthValue months, then day placement counted forward
  (min(dayValue, daysInMonth)) or backward (max(1, daysInMonth - dayValue));
  a special anchor makes it a flat one-month jump
- year: yearValue years, then month monthValue and the same day placement
  (skipped with a special anchor)

Lunar delegation and the failure policy are shared with
SimpleCycleCalculator through BaseCycleCalculator.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any

from .. import const
from ..data_builders import InvalidRuleError, validate_advanced_rule
from ..models import AdvancedRecurrenceRule, BackwardDay, DayPlacement, ForwardDay
from ..utils.dt_utils import local_date
from .base_calculator import BaseCycleCalculator
from .calendar_space import CalendarSpace
from .special_date_engine import is_weekend, is_workday


class AdvancedCycleCalculator(BaseCycleCalculator):
    """Cycle boundary calculator for AdvancedRecurrenceRules."""

    name = "AdvancedCycleCalculator"

    def validate(self, rule: Any) -> None:
        if not isinstance(rule, AdvancedRecurrenceRule):
            raise InvalidRuleError(
                field=const.FIELD_SELECTED_UNIT,
                translation_key=const.TRANS_KEY_INVALID_ADVANCED_UNIT,
            )
        validate_advanced_rule(rule)

    def _compute(
        self,
        anchor: datetime,
        rule: AdvancedRecurrenceRule,
        space: CalendarSpace,
        sign: int,
    ) -> datetime:
        const.LOGGER.debug(
            "AdvancedCycleCalculator: unit=%s anchor=%s special=%s direction=%s",
            rule.selected_unit,
            anchor.isoformat(),
            rule.special_date_anchor_type if rule.use_special_date_anchor else None,
            rule.count_direction,
        )

        if rule.selected_unit == const.ADVANCED_UNIT_DAY:
            return self._shift_days(anchor, sign * rule.day_value)
        if rule.selected_unit == const.ADVANCED_UNIT_WEEK:
            if rule.use_special_date_anchor:
                return self._special_week(anchor, rule, sign)
            return self._week(anchor, rule, sign)
        if rule.selected_unit == const.ADVANCED_UNIT_MONTH:
            return self._month(anchor, rule, space, sign)
        return self._year(anchor, rule, space, sign)

    # -------------------------------------------------------------------------
    # Units
    # -------------------------------------------------------------------------

    def _week(self, anchor: datetime, rule: AdvancedRecurrenceRule, sign: int) -> datetime:
        first = local_date(anchor) + timedelta(days=sign)
        target = self._scan(first, sign, lambda d: d.weekday() == rule.week_day)
        target += timedelta(days=sign * (rule.week_value - 1) * 7)
        return self._on(anchor, target)

    def _special_week(
        self, anchor: datetime, rule: AdvancedRecurrenceRule, sign: int
    ) -> datetime:
        anchor_type = rule.special_date_anchor_type
        first = local_date(anchor) + timedelta(days=sign)

        if anchor_type == const.ANCHOR_TYPE_WEEKEND:
            target = self._scan(first, sign, is_weekend)
            # Land on the far side of the weekend: Sunday forward, Saturday back
            if sign > 0 and target.weekday() == const.WEEKDAY_SATURDAY:
                target += timedelta(days=1)
            elif sign < 0 and target.weekday() == const.WEEKDAY_SUNDAY:
                target -= timedelta(days=1)
            return self._on(anchor, target)

        if anchor_type == const.ANCHOR_TYPE_WORKDAY:
            return self._on(anchor, self._scan(first, sign, is_workday))

        if anchor_type == const.ANCHOR_TYPE_HOLIDAY:
            return self._shift_days(anchor, sign * const.ANCHOR_HOLIDAY_JUMP_DAYS)
        return self._shift_days(anchor, sign * const.ANCHOR_SOLAR_TERM_JUMP_DAYS)

    def _month(
        self,
        anchor: datetime,
        rule: AdvancedRecurrenceRule,
        space: CalendarSpace,
        sign: int,
    ) -> datetime:
        fields = space.from_date(local_date(anchor))
        if rule.use_special_date_anchor:
            return self._on(anchor, space.to_date(space.add_months(fields, sign)))

        fields = space.add_months(fields, sign * rule.month_value)
        day = self._placement(rule).resolve(space.month_length(fields))
        return self._on(anchor, space.to_date(replace(fields, day=day)))

    def _year(
        self,
        anchor: datetime,
        rule: AdvancedRecurrenceRule,
        space: CalendarSpace,
        sign: int,
    ) -> datetime:
        fields = space.add_years(
            space.from_date(local_date(anchor)), sign * rule.year_value
        )
        if not rule.use_special_date_anchor:
            fields = space.set_month(fields, rule.month_value)
            day = self._placement(rule).resolve(space.month_length(fields))
            fields = replace(fields, day=day)
        return self._on(anchor, space.to_date(fields))

    @staticmethod
    def _placement(rule: AdvancedRecurrenceRule) -> DayPlacement:
        if rule.count_direction == const.COUNT_DIRECTION_BACKWARD:
            return BackwardDay(rule.day_value)
        return ForwardDay(rule.day_value)
