"""Rule and cycle data model for NeverMiss.

Pure data: frozen dataclasses with no scheduling behavior. Calculators,
managers and helpers all consume these values; data_builders creates them
from stored/form dicts.

Day placement and composite day offsets are tagged unions instead of
sign-encoded integers or bags of optional flags:

- DayPlacement = ForwardDay | BackwardDay
- CompositeDay = DayOfMonth | DayOfYear | NthWeekday
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from . import const
from .type_defs import TaskCycleData
from .utils.dt_utils import dt_parse, dt_to_iso

# =============================================================================
# DAY PLACEMENT
# =============================================================================


@dataclass(frozen=True)
class ForwardDay:
    """Day N of the month, clamped to the month length."""

    day: int

    def resolve(self, days_in_month: int) -> int:
        """Return the concrete day for a month of the given length."""
        return min(self.day, days_in_month)


@dataclass(frozen=True)
class BackwardDay:
    """Day counted back from the end of the month.

    The effective day is ``days_in_month - offset``, floored at day 1.
    ``BackwardDay(0)`` is the last day of the month.
    """

    offset: int

    def resolve(self, days_in_month: int) -> int:
        """Return the concrete day for a month of the given length."""
        return max(1, days_in_month - self.offset)


DayPlacement = ForwardDay | BackwardDay


# =============================================================================
# COMPOSITE DAY VARIANTS
# =============================================================================


@dataclass(frozen=True)
class DayOfMonth:
    """Plain day offset applied after the year/month offsets."""

    days: int


@dataclass(frozen=True)
class DayOfYear:
    """Plain day offset (year-day flavored) applied after year/month offsets."""

    days: int


@dataclass(frozen=True)
class NthWeekday:
    """Nth weekday of the following month (week_of_month 5 = last)."""

    week_of_month: int
    weekday: int


CompositeDay = DayOfMonth | DayOfYear | NthWeekday


# =============================================================================
# RULES
# =============================================================================


@dataclass(frozen=True)
class SpecialDateAnchor:
    """Named calendar pivot such as a festival or a solar term."""

    kind: str
    name: str
    month: int
    day: int
    is_lunar: bool = False
    id: str | None = None


@dataclass(frozen=True)
class RecurrenceRule:
    """Basic recurrence rule.

    Attributes:
        type: One of const.RULE_TYPES
        value: Repeat interval, always >= 1
        unit: Time unit for custom rules (const.TIME_UNITS)
        week_day: 0=Monday..6=Sunday (weekly / weekOfMonth)
        month_day: Day placement (monthly / yearly)
        year_day: 1-based day of year (yearly)
        month: 1..12 (yearly / weekOfMonth)
        week_of_month: 1..5, 5 meaning "last" (weekOfMonth)
        special_date_anchor: Festival/solar-term pin (yearly)
        years: Composite year offset
        months: Composite month offset
        composite_day: Composite day variant
    """

    type: str
    value: int = 1
    unit: str | None = None
    week_day: int | None = None
    month_day: DayPlacement | None = None
    year_day: int | None = None
    month: int | None = None
    week_of_month: int | None = None
    special_date_anchor: SpecialDateAnchor | None = None
    years: int | None = None
    months: int | None = None
    composite_day: CompositeDay | None = None


@dataclass(frozen=True)
class AdvancedRecurrenceRule:
    """Parametrized rule from the advanced editor.

    Exactly one computation path applies: the special-anchor path when
    ``use_special_date_anchor`` is set, the unit-based path otherwise.
    """

    selected_unit: str
    year_value: int = 1
    month_value: int = 1
    week_value: int = 1
    day_value: int = 1
    count_direction: str = const.COUNT_DIRECTION_FORWARD
    week_day: int = const.WEEKDAY_MONDAY
    use_special_date_anchor: bool = False
    special_date_anchor_type: str | None = None


# =============================================================================
# CYCLES / TASKS
# =============================================================================


@dataclass(frozen=True)
class TaskCycle:
    """One occurrence window of a recurring task.

    Both dates are absolute UTC instants; ``date_system`` only records which
    calculator path produced them. Cycles are never mutated: flag changes
    return a new value via ``dataclasses.replace``.
    """

    task_id: str
    start_date: datetime
    due_date: datetime
    date_system: str = const.DATE_SYSTEM_SOLAR
    is_completed: bool = False
    completed_at: datetime | None = None
    is_overdue: bool = False
    is_skipped: bool = False
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.due_date <= self.start_date:
            raise ValueError(
                f"Cycle due date {self.due_date.isoformat()} must be after "
                f"start date {self.start_date.isoformat()}"
            )

    @property
    def state(self) -> str:
        """Derived lifecycle state of the cycle."""
        if self.is_completed:
            return const.CYCLE_STATE_COMPLETED
        if self.is_skipped:
            return const.CYCLE_STATE_SKIPPED
        if self.is_overdue:
            return const.CYCLE_STATE_OVERDUE
        return const.CYCLE_STATE_PENDING

    def to_dict(self) -> TaskCycleData:
        """Serialize to the TaskCycleData storage shape."""
        return {
            "taskId": self.task_id,
            "startDate": dt_to_iso(self.start_date),
            "dueDate": dt_to_iso(self.due_date),
            "dateSystem": self.date_system,
            "isCompleted": self.is_completed,
            "completedAt": dt_to_iso(self.completed_at),
            "isOverdue": self.is_overdue,
            "isSkipped": self.is_skipped,
            "createdAt": dt_to_iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TaskCycle:
        """Build a cycle from the TaskCycleData storage shape.

        Raises:
            ValueError: If a required date is missing or unparseable.
        """
        start = dt_parse(data.get("startDate"))
        due = dt_parse(data.get("dueDate"))
        if start is None or due is None:
            raise ValueError("Cycle data requires startDate and dueDate")
        return cls(
            task_id=str(data["taskId"]),
            start_date=start,
            due_date=due,
            date_system=str(data.get("dateSystem", const.DATE_SYSTEM_SOLAR)),
            is_completed=bool(data.get("isCompleted", False)),
            completed_at=dt_parse(data.get("completedAt")),
            is_overdue=bool(data.get("isOverdue", False)),
            is_skipped=bool(data.get("isSkipped", False)),
            created_at=dt_parse(data.get("createdAt")),
        )


@dataclass(frozen=True)
class Task:
    """The subset of a task the cycle engine reads."""

    id: str
    rule: RecurrenceRule | AdvancedRecurrenceRule
    date_system: str = const.DATE_SYSTEM_SOLAR
    auto_restart: bool = True
    is_recurring: bool = True
    is_active: bool = True
