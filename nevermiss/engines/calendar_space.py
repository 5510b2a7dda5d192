"""Calendar Spaces - shared field arithmetic for solar and lunar calendars.

Both cycle calculators express their rules once, as year/month/day field
arithmetic, and run it in either calendar through a CalendarSpace:

- SolarSpace: Gregorian fields, ``dateutil.relativedelta`` month stepping
- LunarSpace: lunisolar fields through LunarCalendarAdapter

Month/year stepping always clamps the day to the target month length
(Jan 31 + 1 month = Feb 28/29, lunar day 30 + 1 month = day 29 when the next
month is short). Weekday matching is not a field operation: callers work on
the solar ``date`` returned by ``to_date``.
"""

from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass, replace
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from .. import const
from .lunar_engine import DEFAULT_LUNAR_TABLE, LunarCalendarAdapter


@dataclass(frozen=True)
class CalendarFields:
    """Year/month/day in a calendar space (leap flag only used by lunar)."""

    year: int
    month: int
    day: int
    is_leap_month: bool = False


class CalendarSpace:
    """Field arithmetic over one calendar system.

    Subclasses provide the conversions and month lengths; the stepping and
    placement helpers below are shared.
    """

    date_system: str = const.DATE_SYSTEM_SOLAR

    def from_date(self, value: date) -> CalendarFields:
        """Convert a solar date into this space's fields."""
        raise NotImplementedError

    def _fields_to_date(self, fields: CalendarFields) -> date:
        raise NotImplementedError

    def days_in_month(self, year: int, month: int, is_leap_month: bool = False) -> int:
        """Return the length of a month in this space."""
        raise NotImplementedError

    def days_in_year(self, year: int) -> int:
        """Return the length of a year in this space."""
        raise NotImplementedError

    def add_months(self, fields: CalendarFields, months: int) -> CalendarFields:
        """Step by whole months, clamping the day to the target month."""
        raise NotImplementedError

    def add_years(self, fields: CalendarFields, years: int) -> CalendarFields:
        """Step by whole years, clamping the day to the target month."""
        raise NotImplementedError

    # -------------------------------------------------------------------------
    # Shared helpers
    # -------------------------------------------------------------------------

    def to_date(self, fields: CalendarFields) -> date:
        """Convert fields back to a solar date, clamping the day first."""
        return self._fields_to_date(self.clamp(fields))

    def clamp(self, fields: CalendarFields) -> CalendarFields:
        """Clamp the day of ``fields`` to its month length."""
        dim = self.days_in_month(fields.year, fields.month, fields.is_leap_month)
        if fields.day > dim:
            return replace(fields, day=dim)
        return fields

    def month_length(self, fields: CalendarFields) -> int:
        """Length of the month ``fields`` falls in."""
        return self.days_in_month(fields.year, fields.month, fields.is_leap_month)

    def month_bounds(self, fields: CalendarFields) -> tuple[date, date]:
        """Return the first and last solar dates of the month of ``fields``."""
        first = self.to_date(replace(fields, day=1))
        return first, first + timedelta(days=self.month_length(fields) - 1)

    def set_month(self, fields: CalendarFields, month: int) -> CalendarFields:
        """Move to another month of the same year (regular month), clamped."""
        return self.clamp(replace(fields, month=month, is_leap_month=False))

    def year_day(self, year: int, day_of_year: int) -> date:
        """Return day N (1-based, clamped to the year length) of a year."""
        day_of_year = max(1, min(day_of_year, self.days_in_year(year)))
        first = self.to_date(CalendarFields(year, 1, 1))
        return first + timedelta(days=day_of_year - 1)


class SolarSpace(CalendarSpace):
    """Gregorian calendar fields."""

    date_system = const.DATE_SYSTEM_SOLAR

    def from_date(self, value: date) -> CalendarFields:
        return CalendarFields(value.year, value.month, value.day)

    def _fields_to_date(self, fields: CalendarFields) -> date:
        return date(fields.year, fields.month, fields.day)

    def days_in_month(self, year: int, month: int, is_leap_month: bool = False) -> int:
        return monthrange(year, month)[1]

    def days_in_year(self, year: int) -> int:
        return 366 if monthrange(year, 2)[1] == 29 else 365

    def add_months(self, fields: CalendarFields, months: int) -> CalendarFields:
        # relativedelta clamps to the month end (Jan 31 + 1 month = Feb 28/29)
        moved = self.to_date(fields) + relativedelta(months=months)
        return self.from_date(moved)

    def add_years(self, fields: CalendarFields, years: int) -> CalendarFields:
        moved = self.to_date(fields) + relativedelta(years=years)
        return self.from_date(moved)


class LunarSpace(CalendarSpace):
    """Lunisolar calendar fields, converted through LunarCalendarAdapter.

    Month stepping counts month numbers: a leap month is skipped when
    stepping over it and is only kept when the target month number carries
    the same leap in the target year.
    """

    date_system = const.DATE_SYSTEM_LUNAR

    def __init__(self, adapter: LunarCalendarAdapter) -> None:
        self._adapter = adapter

    def from_date(self, value: date) -> CalendarFields:
        lunar = self._adapter.to_lunar(value)
        return CalendarFields(lunar.year, lunar.month, lunar.day, lunar.is_leap_month)

    def _fields_to_date(self, fields: CalendarFields) -> date:
        return self._adapter.to_solar(
            fields.year, fields.month, fields.day, fields.is_leap_month
        )

    def days_in_month(self, year: int, month: int, is_leap_month: bool = False) -> int:
        return self._adapter.days_in_lunar_month(year, month, is_leap_month)

    def days_in_year(self, year: int) -> int:
        return self._adapter.days_in_lunar_year(year)

    def add_months(self, fields: CalendarFields, months: int) -> CalendarFields:
        if months == 0:
            return self.clamp(fields)
        index = fields.year * 12 + (fields.month - 1) + months
        year, month = divmod(index, 12)
        return self._land(fields, year, month + 1)

    def add_years(self, fields: CalendarFields, years: int) -> CalendarFields:
        return self._land(fields, fields.year + years, fields.month)

    def _land(self, fields: CalendarFields, year: int, month: int) -> CalendarFields:
        keep_leap = fields.is_leap_month and self._adapter.leap_month_of(year) == month
        return self.clamp(CalendarFields(year, month, fields.day, keep_leap))


SOLAR_SPACE = SolarSpace()


def get_calendar_space(
    date_system: str, adapter: LunarCalendarAdapter | None = None
) -> CalendarSpace:
    """Return the calendar space for a date system.

    Args:
        date_system: const.DATE_SYSTEM_SOLAR or const.DATE_SYSTEM_LUNAR
        adapter: Lunar adapter to use (default table when omitted)
    """
    if date_system == const.DATE_SYSTEM_LUNAR:
        return LunarSpace(adapter or LunarCalendarAdapter(DEFAULT_LUNAR_TABLE))
    return SOLAR_SPACE


def nth_weekday_of_month(
    space: CalendarSpace, fields: CalendarFields, week_of_month: int, weekday: int
) -> date:
    """Return the Nth solar weekday inside the month of ``fields``.

    week_of_month 1..4 counts from the first matching weekday (stepping back
    by whole weeks if the month is too short); 5 means the last occurrence,
    found by walking back from the end of the month.

    Args:
        space: Calendar space defining the month
        fields: Any fields inside the target month
        week_of_month: 1..5 (5 = last)
        weekday: 0=Monday..6=Sunday
    """
    first, last = space.month_bounds(fields)
    if week_of_month >= const.WEEK_OF_MONTH_LAST:
        return last - timedelta(days=(last.weekday() - weekday) % 7)

    occurrence = first + timedelta(
        days=(weekday - first.weekday()) % 7 + (week_of_month - 1) * 7
    )
    while occurrence > last:
        occurrence -= timedelta(days=7)
    return occurrence
