# File: const.py
"""Constants for the NeverMiss cycle engine.

This file centralizes rule types, units, anchor kinds, cycle states, fallback
offsets and display labels so engines, managers and helpers agree on the same
string values as the stored task data.
"""

import logging

# ------------------------------------------------------------------------------------------------
# General / Package Information
# ------------------------------------------------------------------------------------------------
# Logger
LOGGER = logging.getLogger(__package__)


# ------------------------------------------------------------------------------------------------
# Recurrence Rule Types
# ------------------------------------------------------------------------------------------------
RULE_TYPE_DAILY = "daily"
RULE_TYPE_WEEKLY = "weekly"
RULE_TYPE_MONTHLY = "monthly"
RULE_TYPE_YEARLY = "yearly"
RULE_TYPE_WEEK_OF_MONTH = "weekOfMonth"
RULE_TYPE_CUSTOM = "custom"
RULE_TYPE_COMPOSITE = "composite"

RULE_TYPES = [
    RULE_TYPE_DAILY,
    RULE_TYPE_WEEKLY,
    RULE_TYPE_MONTHLY,
    RULE_TYPE_YEARLY,
    RULE_TYPE_WEEK_OF_MONTH,
    RULE_TYPE_CUSTOM,
    RULE_TYPE_COMPOSITE,
]


# ------------------------------------------------------------------------------------------------
# Time Units (custom rules)
# ------------------------------------------------------------------------------------------------
TIME_UNIT_MINUTES = "minutes"
TIME_UNIT_HOURS = "hours"
TIME_UNIT_DAYS = "days"
TIME_UNIT_WEEKS = "weeks"
TIME_UNIT_MONTHS = "months"
TIME_UNIT_YEARS = "years"

TIME_UNITS = [
    TIME_UNIT_MINUTES,
    TIME_UNIT_HOURS,
    TIME_UNIT_DAYS,
    TIME_UNIT_WEEKS,
    TIME_UNIT_MONTHS,
    TIME_UNIT_YEARS,
]


# ------------------------------------------------------------------------------------------------
# Advanced Rule Units / Directions
# ------------------------------------------------------------------------------------------------
ADVANCED_UNIT_DAY = "day"
ADVANCED_UNIT_WEEK = "week"
ADVANCED_UNIT_MONTH = "month"
ADVANCED_UNIT_YEAR = "year"

ADVANCED_UNITS = [
    ADVANCED_UNIT_DAY,
    ADVANCED_UNIT_WEEK,
    ADVANCED_UNIT_MONTH,
    ADVANCED_UNIT_YEAR,
]

COUNT_DIRECTION_FORWARD = "forward"
COUNT_DIRECTION_BACKWARD = "backward"

COUNT_DIRECTIONS = [COUNT_DIRECTION_FORWARD, COUNT_DIRECTION_BACKWARD]


# ------------------------------------------------------------------------------------------------
# Special Date Anchors
# ------------------------------------------------------------------------------------------------
ANCHOR_TYPE_WEEKEND = "weekend"
ANCHOR_TYPE_WORKDAY = "workday"
ANCHOR_TYPE_HOLIDAY = "holiday"
ANCHOR_TYPE_SOLAR_TERM = "solarTerm"

ANCHOR_TYPES = [
    ANCHOR_TYPE_WEEKEND,
    ANCHOR_TYPE_WORKDAY,
    ANCHOR_TYPE_HOLIDAY,
    ANCHOR_TYPE_SOLAR_TERM,
]

# Fixed jumps used instead of a real holiday calendar
ANCHOR_HOLIDAY_JUMP_DAYS = 7
ANCHOR_SOLAR_TERM_JUMP_DAYS = 15

SPECIAL_DATE_KIND_HOLIDAY = "holiday"
SPECIAL_DATE_KIND_SOLAR_TERM = "solarTerm"
SPECIAL_DATE_KIND_CUSTOM = "custom"

SPECIAL_DATE_KINDS = [
    SPECIAL_DATE_KIND_HOLIDAY,
    SPECIAL_DATE_KIND_SOLAR_TERM,
    SPECIAL_DATE_KIND_CUSTOM,
]


# ------------------------------------------------------------------------------------------------
# Date Systems
# ------------------------------------------------------------------------------------------------
DATE_SYSTEM_SOLAR = "solar"
DATE_SYSTEM_LUNAR = "lunar"

DATE_SYSTEMS = [DATE_SYSTEM_SOLAR, DATE_SYSTEM_LUNAR]


# ------------------------------------------------------------------------------------------------
# Weekdays (Python convention: Monday == 0)
# ------------------------------------------------------------------------------------------------
WEEKDAY_MONDAY = 0
WEEKDAY_TUESDAY = 1
WEEKDAY_WEDNESDAY = 2
WEEKDAY_THURSDAY = 3
WEEKDAY_FRIDAY = 4
WEEKDAY_SATURDAY = 5
WEEKDAY_SUNDAY = 6

WEEKEND_DAYS = frozenset({WEEKDAY_SATURDAY, WEEKDAY_SUNDAY})

WEEKDAY_NAMES = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]

# Week-of-month 5 means "last occurrence in the month"
WEEK_OF_MONTH_LAST = 5
WEEK_OF_MONTH_MIN = 1
WEEK_OF_MONTH_MAX = 5


# ------------------------------------------------------------------------------------------------
# Cycle States
# ------------------------------------------------------------------------------------------------
CYCLE_STATE_PENDING = "pending"
CYCLE_STATE_COMPLETED = "completed"
CYCLE_STATE_OVERDUE = "overdue"
CYCLE_STATE_SKIPPED = "skipped"
CYCLE_STATE_SUPERSEDED = "superseded"

# Lifecycle actions
CYCLE_ACTION_CREATE = "create"
CYCLE_ACTION_COMPLETE = "complete"
CYCLE_ACTION_SKIP = "skip"
CYCLE_ACTION_OVERDUE = "overdue"


# ------------------------------------------------------------------------------------------------
# Fallbacks / Safety Limits
# ------------------------------------------------------------------------------------------------
# Offset applied when a computed date cannot be represented
FALLBACK_OFFSET_DAYS = 1

# Offset applied when a lunar conversion fails
LUNAR_FALLBACK_OFFSET_DAYS = 30

# Safety limit for day-by-day scans
MAX_DATE_CALCULATION_ITERATIONS = 100

# Supported lunar years for the conversion table
LUNAR_MIN_YEAR = 1900
LUNAR_MAX_YEAR = 2100

# Largest possible lunar month
LUNAR_MONTH_MAX_DAYS = 30

# Degraded computation reasons
DEGRADED_REASON_INVALID_DATE = "invalid_date"
DEGRADED_REASON_INVALID_LUNAR_DATE = "invalid_lunar_date"
DEGRADED_REASON_NON_POSITIVE = "non_positive_cycle"


# ------------------------------------------------------------------------------------------------
# Validation (field names / translation keys)
# ------------------------------------------------------------------------------------------------
FIELD_TYPE = "type"
FIELD_VALUE = "value"
FIELD_UNIT = "unit"
FIELD_WEEK_DAY = "weekDay"
FIELD_MONTH_DAY = "monthDay"
FIELD_YEAR_DAY = "yearDay"
FIELD_MONTH = "month"
FIELD_WEEK_OF_MONTH = "weekOfMonth"
FIELD_YEARS = "years"
FIELD_MONTHS = "months"
FIELD_SPECIAL_DATE_ANCHOR = "specialDateAnchor"
FIELD_SELECTED_UNIT = "selectedUnit"
FIELD_YEAR_VALUE = "yearValue"
FIELD_MONTH_VALUE = "monthValue"
FIELD_WEEK_VALUE = "weekValue"
FIELD_DAY_VALUE = "dayValue"
FIELD_COUNT_DIRECTION = "countDirection"
FIELD_USE_SPECIAL_DATE_ANCHOR = "useSpecialDateAnchor"
FIELD_SPECIAL_DATE_ANCHOR_TYPE = "specialDateAnchorType"
FIELD_DATE_SYSTEM = "dateSystem"

# Composite rule "enabled" flags (form-style input)
FIELD_ENABLED_YEAR = "yearEnabled"
FIELD_ENABLED_MONTH = "monthEnabled"
FIELD_ENABLED_WEEK_OF_MONTH = "weekOfMonthEnabled"
FIELD_ENABLED_YEAR_DAY = "yearDayEnabled"
FIELD_ENABLED_MONTH_DAY = "monthDayEnabled"

TRANS_KEY_INVALID_RULE_TYPE = "invalid_rule_type"
TRANS_KEY_INVALID_VALUE = "invalid_value"
TRANS_KEY_INVALID_UNIT = "invalid_unit"
TRANS_KEY_INVALID_WEEK_DAY = "invalid_week_day"
TRANS_KEY_MISSING_WEEK_DAY = "missing_week_day"
TRANS_KEY_INVALID_MONTH_DAY = "invalid_month_day"
TRANS_KEY_INVALID_YEAR_DAY = "invalid_year_day"
TRANS_KEY_INVALID_MONTH = "invalid_month"
TRANS_KEY_INVALID_WEEK_OF_MONTH = "invalid_week_of_month"
TRANS_KEY_MISSING_WEEK_OF_MONTH = "missing_week_of_month"
TRANS_KEY_EMPTY_COMPOSITE = "empty_composite"
TRANS_KEY_INVALID_ADVANCED_UNIT = "invalid_advanced_unit"
TRANS_KEY_INVALID_COUNT_DIRECTION = "invalid_count_direction"
TRANS_KEY_INVALID_ANCHOR_TYPE = "invalid_anchor_type"
TRANS_KEY_INVALID_SPECIAL_DATE = "invalid_special_date"
TRANS_KEY_INVALID_DATE_SYSTEM = "invalid_date_system"


# ------------------------------------------------------------------------------------------------
# Description Labels (English)
# ------------------------------------------------------------------------------------------------
ORDINAL_LABELS = {
    1: "first",
    2: "second",
    3: "third",
    4: "fourth",
    5: "last",
}

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

UNIT_LABELS_SINGULAR = {
    TIME_UNIT_MINUTES: "minute",
    TIME_UNIT_HOURS: "hour",
    TIME_UNIT_DAYS: "day",
    TIME_UNIT_WEEKS: "week",
    TIME_UNIT_MONTHS: "month",
    TIME_UNIT_YEARS: "year",
}

ANCHOR_TYPE_LABELS = {
    ANCHOR_TYPE_WEEKEND: "weekend",
    ANCHOR_TYPE_WORKDAY: "workday",
    ANCHOR_TYPE_HOLIDAY: "holiday",
    ANCHOR_TYPE_SOLAR_TERM: "solar term",
}

LUNAR_LABEL = "lunar"
