"""Lunar Engine - Solar/lunar conversion for lunisolar recurrence.

Thin policy wrapper around the ``lunar_python`` Chinese calendar:

- to_lunar / to_solar conversions
- month length and leap month queries
- leap-month fallback: asking for a leap month the year does not have
  resolves to the regular month of the same number instead of failing

ARCHITECTURE: Pure logic with no shared mutable state. The supported window
is passed explicitly as an immutable LunarTable handle; lunar_python returns
fresh value objects for every lookup, so one adapter may be shared across
threads.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from functools import lru_cache

from lunar_python import Lunar, LunarMonth, LunarYear, Solar

from .. import const
from ..utils.dt_utils import local_date
# =============================================================================
# ERRORS / VALUE TYPES
# =============================================================================


class InvalidLunarDateError(Exception):
    """Raised when a lunar date cannot be converted.

    Attributes:
        year: Lunar (or solar, for to_lunar) year requested
        month: Month requested
        day: Day requested
        reason: Short description of the failure
    """

    def __init__(self, year: int, month: int, day: int, reason: str) -> None:
        """Initialize InvalidLunarDateError.

        Args:
            year: Year requested
            month: Month requested
            day: Day requested
            reason: Short description of the failure
        """
        self.year = year
        self.month = month
        self.day = day
        self.reason = reason
        super().__init__(f"Invalid lunar date {year}-{month:02d}-{day:02d}: {reason}")


@dataclass(frozen=True)
class LunarDate:
    """A date in the lunisolar calendar."""

    year: int
    month: int
    day: int
    is_leap_month: bool = False


@dataclass(frozen=True)
class LunarTable:
    """Immutable handle on the supported conversion window.

    Attributes:
        min_year: First supported lunar year
        max_year: Last supported lunar year
    """

    min_year: int = const.LUNAR_MIN_YEAR
    max_year: int = const.LUNAR_MAX_YEAR

    def contains(self, year: int) -> bool:
        """Return True when the lunar year is inside the table window."""
        return self.min_year <= year <= self.max_year


DEFAULT_LUNAR_TABLE = LunarTable()


# =============================================================================
# TABLE LOOKUPS (cached, read-only)
# =============================================================================


@lru_cache(maxsize=4096)
def _month_length(year: int, month: int, is_leap: bool) -> int:
    """Return 30 or 29 for an existing lunar month."""
    # lunar_python numbers a leap month with a negative month
    lunar_month = LunarMonth.fromYm(year, -month if is_leap else month)
    return lunar_month.getDayCount()


@lru_cache(maxsize=512)
def _leap_month(year: int) -> int | None:
    """Return the leap month number of a lunar year, or None."""
    return LunarYear.fromYear(year).getLeapMonth() or None


# =============================================================================
# LUNAR CALENDAR ADAPTER
# =============================================================================


class LunarCalendarAdapter:
    """Solar/lunar conversion with the leap-month fallback policy."""

    def __init__(self, table: LunarTable = DEFAULT_LUNAR_TABLE) -> None:
        """Initialize the adapter.

        Args:
            table: Conversion table handle bounding the supported years
        """
        self._table = table

    @property
    def table(self) -> LunarTable:
        """Table handle used by this adapter."""
        return self._table

    def to_lunar(self, value: date | datetime) -> LunarDate:
        """Convert a solar date (or an instant, read in local time) to lunar.

        Raises:
            InvalidLunarDateError: If the date is outside the table window.
        """
        solar = local_date(value) if isinstance(value, datetime) else value
        # The lunar year is the solar year or the one before it
        if not (
            self._table.contains(solar.year) or self._table.contains(solar.year - 1)
        ):
            raise InvalidLunarDateError(
                solar.year, solar.month, solar.day, "solar date outside table"
            )

        lunar_day = Solar.fromYmd(solar.year, solar.month, solar.day).getLunar()
        lunar = LunarDate(
            year=lunar_day.getYear(),
            month=abs(lunar_day.getMonth()),
            day=lunar_day.getDay(),
            is_leap_month=lunar_day.getMonth() < 0,
        )
        if not self._table.contains(lunar.year):
            raise InvalidLunarDateError(
                lunar.year, lunar.month, lunar.day, "year outside supported range"
            )
        return lunar

    def to_solar(
        self, year: int, month: int, day: int, is_leap_month: bool = False
    ) -> date:
        """Convert a lunar date to its solar date.

        A leap month request for a year whose leap month differs falls back
        to the regular month with the same number.

        Raises:
            InvalidLunarDateError: If the year is out of range or the day does
                not exist in the month.
        """
        self._check_month(year, month, day)
        is_leap_month = self._effective_leap(year, month, is_leap_month)

        if day < 1 or day > _month_length(year, month, is_leap_month):
            raise InvalidLunarDateError(year, month, day, "day exceeds month length")

        solar = Lunar.fromYmd(year, -month if is_leap_month else month, day).getSolar()
        return date(solar.getYear(), solar.getMonth(), solar.getDay())

    def days_in_lunar_month(
        self, year: int, month: int, is_leap_month: bool = False
    ) -> int:
        """Return the number of days (29 or 30) in a lunar month.

        Raises:
            InvalidLunarDateError: If the year is outside the table window.
        """
        self._check_month(year, month, 1)
        is_leap_month = self._effective_leap(year, month, is_leap_month)
        return _month_length(year, month, is_leap_month)

    def leap_month_of(self, year: int) -> int | None:
        """Return the leap month number of a lunar year, or None.

        Raises:
            InvalidLunarDateError: If the year is outside the table window.
        """
        self._check_year(year)
        return _leap_month(year)

    def days_in_lunar_year(self, year: int) -> int:
        """Return the total number of days in a lunar year, leap month included."""
        self._check_year(year)
        total = sum(_month_length(year, month, False) for month in range(1, 13))
        leap = _leap_month(year)
        if leap is not None:
            total += _month_length(year, leap, True)
        return total

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _check_year(self, year: int) -> None:
        if not self._table.contains(year):
            raise InvalidLunarDateError(year, 1, 1, "year outside supported range")

    def _check_month(self, year: int, month: int, day: int) -> None:
        self._check_year(year)
        if not 1 <= month <= 12:
            raise InvalidLunarDateError(year, month, day, "month out of range")

    def _effective_leap(self, year: int, month: int, is_leap_month: bool) -> bool:
        if is_leap_month and _leap_month(year) != month:
            const.LOGGER.debug(
                "LunarCalendarAdapter: Year %s has no leap month %s, "
                "using regular month",
                year,
                month,
            )
            return False
        return is_leap_month
