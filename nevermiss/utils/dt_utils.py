# File: utils/dt_utils.py
"""Date and time utilities for NeverMiss.

Pure Python date/time functions shared by the engines and managers.
Uses standard library datetime/zoneinfo only; calendar-field arithmetic
lives in the engines (dateutil).

Functions:
    - set_default_timezone / get_default_timezone: Configure the local zone
    - dt_now_utc: Get current datetime in UTC
    - as_utc / as_local: Timezone conversion (naive = local)
    - local_date: Calendar date of an instant in the local zone
    - with_local_date: Move an instant to another local date, same wall time
    - dt_parse: Normalize str/date/datetime inputs to aware datetimes
    - dt_to_iso: Serialize a datetime to an ISO-8601 UTC string
"""

from __future__ import annotations

from datetime import UTC, date, datetime
import logging
from zoneinfo import ZoneInfo

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Timezone Configuration
# ==============================================================================

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Calendar arithmetic (month ends, weekdays, lunar conversion) happens on
    local dates in this zone.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone.

    Returns:
        The configured default timezone (ZoneInfo object)
    """
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware).

    Returns:
        Current UTC datetime.
    """
    return datetime.now(UTC)


# ==============================================================================
# Timezone Conversion
# ==============================================================================


def as_utc(dt_obj: datetime) -> datetime:
    """Convert a datetime to UTC timezone.

    Args:
        dt_obj: Datetime object (naive values are read as local time)

    Returns:
        Datetime in UTC timezone
    """
    if dt_obj.tzinfo is None:
        # Assume it's in default timezone if naive
        dt_obj = dt_obj.replace(tzinfo=DEFAULT_TIME_ZONE)
    return dt_obj.astimezone(UTC)


def as_local(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Convert a datetime to local timezone.

    Args:
        dt_obj: Datetime object (naive values are read as local time)
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Datetime in local timezone
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    if dt_obj.tzinfo is None:
        return dt_obj.replace(tzinfo=tz_info)
    return dt_obj.astimezone(tz_info)


def local_date(dt_obj: datetime, tz: ZoneInfo | None = None) -> date:
    """Return the local calendar date of an instant."""
    return as_local(dt_obj, tz).date()


def with_local_date(
    dt_obj: datetime, target: date, tz: ZoneInfo | None = None
) -> datetime:
    """Place an instant on another local calendar date, keeping its wall time.

    The wall-clock time of ``dt_obj`` in the local zone is preserved, so a
    task due "at 09:00" stays at 09:00 across DST changes.

    Args:
        dt_obj: Reference instant supplying the time of day
        target: Local calendar date for the result
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Timezone-aware datetime in UTC
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    local_dt = as_local(dt_obj, tz_info)
    moved = datetime.combine(target, local_dt.time(), tzinfo=tz_info)
    return moved.astimezone(UTC)


# ==============================================================================
# Date/Time Parsing
# ==============================================================================


def dt_parse(
    dt_input: str | date | datetime | None,
    default_tzinfo: ZoneInfo | None = None,
) -> datetime | None:
    """Normalize various datetime input formats to an aware UTC datetime.

    Args:
        dt_input: ISO string, date or datetime to normalize, or None
        default_tzinfo: Timezone to use if the input is naive
                        (defaults to DEFAULT_TIME_ZONE if None)

    Returns:
        Aware UTC datetime, or None if the input could not be parsed.

    Example:
        >>> dt_parse("2024-01-10T09:00:00+00:00")
        datetime.datetime(2024, 1, 10, 9, 0, tzinfo=datetime.timezone.utc)
    """
    if not dt_input:
        return None

    tz_info = default_tzinfo or DEFAULT_TIME_ZONE
    result: datetime | None = None

    if isinstance(dt_input, str):
        try:
            result = datetime.fromisoformat(dt_input)
        except ValueError:
            _LOGGER.debug("dt_parse: Unparseable datetime string '%s'", dt_input)
            return None
    elif isinstance(dt_input, datetime):
        result = dt_input
    elif isinstance(dt_input, date):
        result = datetime.combine(dt_input, datetime.min.time())
    else:
        return None

    if result.tzinfo is None:
        result = result.replace(tzinfo=tz_info)

    return result.astimezone(UTC)


def dt_to_iso(dt_obj: datetime | None) -> str | None:
    """Serialize a datetime as an ISO-8601 string in UTC."""
    if dt_obj is None:
        return None
    return as_utc(dt_obj).isoformat()
