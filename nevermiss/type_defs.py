"""Type definitions for NeverMiss storage and form data structures.

These TypedDicts describe the plain-dict shapes exchanged with the task
store and the rule-editing forms. Keys use the camelCase names stored by the
app. The engines never work on these dicts directly: data_builders turns
them into the frozen dataclasses in models.py, and models.TaskCycle
converts back with to_dict().

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime validation lives in
data_builders.py.
"""

from typing import NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

TaskId = str  # UUID string
ISODatetime = str  # ISO 8601 datetime string "2024-01-10T09:00:00+00:00"


# =============================================================================
# Rule Shapes
# =============================================================================


class MonthDayData(TypedDict):
    """Explicit day placement as submitted by the rule form."""

    direction: str  # "forward" | "backward"
    day: int


class SpecialDateAnchorData(TypedDict):
    """Named calendar pivot (festival, solar term or user-defined date)."""

    id: NotRequired[str]
    kind: str
    name: str
    month: int
    day: int
    isLunar: bool


class RecurrenceRuleData(TypedDict):
    """Basic recurrence rule as stored on a task.

    monthDay accepts a signed int (negative counts back from month end) or
    a MonthDayData mapping.
    """

    type: str
    value: int
    unit: NotRequired[str]
    weekDay: NotRequired[int]
    monthDay: NotRequired[int | MonthDayData]
    yearDay: NotRequired[int]
    month: NotRequired[int]
    weekOfMonth: NotRequired[int]
    specialDateAnchor: NotRequired[SpecialDateAnchorData]
    # Composite-only fields
    years: NotRequired[int]
    months: NotRequired[int]
    yearEnabled: NotRequired[bool]
    monthEnabled: NotRequired[bool]
    weekOfMonthEnabled: NotRequired[bool]
    yearDayEnabled: NotRequired[bool]
    monthDayEnabled: NotRequired[bool]


class AdvancedRecurrenceRuleData(TypedDict):
    """Parametrized recurrence rule from the advanced editor."""

    selectedUnit: str
    yearValue: NotRequired[int]
    monthValue: NotRequired[int]
    weekValue: NotRequired[int]
    dayValue: NotRequired[int]
    countDirection: NotRequired[str]
    weekDay: NotRequired[int]
    useSpecialDateAnchor: NotRequired[bool]
    specialDateAnchorType: NotRequired[str]


# =============================================================================
# Cycle Shapes
# =============================================================================


class TaskCycleData(TypedDict):
    """One occurrence window of a recurring task, as persisted."""

    taskId: TaskId
    startDate: ISODatetime
    dueDate: ISODatetime
    dateSystem: str
    isCompleted: bool
    completedAt: NotRequired[ISODatetime | None]
    isOverdue: bool
    isSkipped: NotRequired[bool]
    createdAt: ISODatetime | None
