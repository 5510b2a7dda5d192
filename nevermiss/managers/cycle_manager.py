"""Cycle Manager - Task cycle lifecycle orchestration.

This manager handles all cycle transitions for a recurring task:
- Creating the first cycle of a task
- Completing a cycle (and restarting the schedule from "now")
- Skipping a cycle
- Detecting overdue cycles (and rolling over from the missed due date)

ARCHITECTURE:
- CycleLifecycleManager = workflow orchestration (which calculator, which anchor)
- CycleEngine = pure state machine logic (STATELESS)
- Simple/AdvancedCycleCalculator = date arithmetic

The manager never persists anything: every operation returns a
CycleTransition that the caller stores, then hands to notification or
calendar-sync collaborators.

Anchor policy:
- completion -> now
- skip -> now
- overdue rollover -> the missed due date
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from datetime import datetime

from .. import const, data_builders as db
from ..engines.advanced_cycle_engine import AdvancedCycleCalculator
from ..engines.base_calculator import BaseCycleCalculator, DegradedComputation
from ..engines.cycle_engine import CycleEngine
from ..engines.lunar_engine import LunarCalendarAdapter
from ..engines.simple_cycle_engine import SimpleCycleCalculator
from ..models import AdvancedRecurrenceRule, Task, TaskCycle
from ..utils.dt_utils import as_utc, dt_now_utc

# =============================================================================
# RESULT DATA STRUCTURE
# =============================================================================


@dataclass(frozen=True)
class CycleTransition:
    """Outcome of a lifecycle operation, to be persisted by the caller.

    Attributes:
        action: One of const.CYCLE_ACTION_*
        updated_cycle: The input cycle with its new flags (None on create)
        new_cycle: Newly created Pending cycle, if any
        degraded: Fallback report when the new due date is approximate
        deactivate_task: True when a one-off task has been completed
    """

    action: str
    updated_cycle: TaskCycle | None = None
    new_cycle: TaskCycle | None = None
    degraded: DegradedComputation | None = None
    deactivate_task: bool = False


# =============================================================================
# CYCLE LIFECYCLE MANAGER
# =============================================================================


class CycleLifecycleManager:
    """Orchestrate cycle creation, completion, skip and overdue transitions."""

    def __init__(
        self,
        clock: Callable[[], datetime] | None = None,
        lunar_adapter: LunarCalendarAdapter | None = None,
    ) -> None:
        """Initialize manager.

        Args:
            clock: Returns "now"; defaults to dt_now_utc. Inject for tests.
            lunar_adapter: Lunar table adapter shared by both calculators
        """
        self._clock = clock or dt_now_utc
        self._simple = SimpleCycleCalculator(lunar_adapter)
        self._advanced = AdvancedCycleCalculator(lunar_adapter)

    def now(self) -> datetime:
        """Current instant in UTC, from the injected clock."""
        return as_utc(self._clock())

    def calculator_for(self, task: Task) -> BaseCycleCalculator:
        """Return the calculator matching the task's rule shape."""
        if isinstance(task.rule, AdvancedRecurrenceRule):
            return self._advanced
        return self._simple

    # -------------------------------------------------------------------------
    # Lifecycle operations
    # -------------------------------------------------------------------------

    def create(self, task: Task, anchor: datetime | None = None) -> CycleTransition:
        """Create a task's first cycle, starting now (or at ``anchor``).

        Raises:
            InvalidRuleError: If the task's rule is malformed.
        """
        new_cycle, degraded = self._next_cycle(task, anchor or self.now())
        const.LOGGER.info(
            "CycleLifecycleManager: Created cycle for task %s due %s",
            task.id,
            new_cycle.due_date.isoformat(),
        )
        return CycleTransition(
            action=const.CYCLE_ACTION_CREATE, new_cycle=new_cycle, degraded=degraded
        )

    def complete(
        self, task: Task, cycle: TaskCycle, *, skip_next_cycle: bool = False
    ) -> CycleTransition:
        """Complete a cycle.

        A recurring, active task with auto-restart gets its next cycle
        anchored at the completion instant. A one-off task is flagged for
        deactivation instead.

        Args:
            task: Task owning the cycle
            cycle: Cycle being completed (pending or overdue)
            skip_next_cycle: Do not create the next cycle

        Raises:
            CycleStateError: If the cycle is already completed or skipped.
            InvalidRuleError: If the task's rule is malformed.
        """
        CycleEngine.validate_transition(cycle, const.CYCLE_STATE_COMPLETED)
        now = self.now()
        updated = replace(cycle, is_completed=True, completed_at=now, is_overdue=False)
        const.LOGGER.info(
            "CycleLifecycleManager: Completed cycle for task %s at %s",
            task.id,
            now.isoformat(),
        )

        if not task.is_recurring:
            return CycleTransition(
                action=const.CYCLE_ACTION_COMPLETE,
                updated_cycle=updated,
                deactivate_task=True,
            )

        if skip_next_cycle or not (task.auto_restart and task.is_active):
            const.LOGGER.debug(
                "CycleLifecycleManager: No restart for task %s "
                "(auto_restart=%s, active=%s, skip_next=%s)",
                task.id,
                task.auto_restart,
                task.is_active,
                skip_next_cycle,
            )
            return CycleTransition(
                action=const.CYCLE_ACTION_COMPLETE, updated_cycle=updated
            )

        new_cycle, degraded = self._next_cycle(task, now)
        return CycleTransition(
            action=const.CYCLE_ACTION_COMPLETE,
            updated_cycle=updated,
            new_cycle=new_cycle,
            degraded=degraded,
        )

    def skip(self, task: Task, cycle: TaskCycle) -> CycleTransition:
        """Skip a pending cycle and start the next one now.

        Raises:
            CycleStateError: If the cycle is not pending.
            InvalidRuleError: If the task's rule is malformed.
        """
        CycleEngine.validate_transition(cycle, const.CYCLE_STATE_SKIPPED)
        now = self.now()
        updated = replace(cycle, is_skipped=True)
        new_cycle, degraded = self._next_cycle(task, now)
        const.LOGGER.info(
            "CycleLifecycleManager: Skipped cycle for task %s, next due %s",
            task.id,
            new_cycle.due_date.isoformat(),
        )
        return CycleTransition(
            action=const.CYCLE_ACTION_SKIP,
            updated_cycle=updated,
            new_cycle=new_cycle,
            degraded=degraded,
        )

    def overdue_check(self, task: Task, cycle: TaskCycle) -> CycleTransition:
        """Mark a cycle overdue once its due instant has passed.

        The next cycle starts at the missed due date, not at "now", so a
        missed deadline keeps the planned schedule. It is created whether
        or not auto-restart is enabled; one-off tasks get no next cycle.

        Returns:
            CycleTransition; when the cycle is not overdue, ``updated_cycle``
            is the unchanged cycle and ``new_cycle`` is None.

        Raises:
            InvalidRuleError: If the task's rule is malformed.
        """
        now = self.now()
        if not CycleEngine.is_overdue(cycle, now):
            return CycleTransition(action=const.CYCLE_ACTION_OVERDUE, updated_cycle=cycle)

        updated = replace(cycle, is_overdue=True)
        const.LOGGER.info(
            "CycleLifecycleManager: Task %s is overdue (due %s)",
            task.id,
            cycle.due_date.isoformat(),
        )
        if not task.is_recurring:
            return CycleTransition(action=const.CYCLE_ACTION_OVERDUE, updated_cycle=updated)

        new_cycle, degraded = self._next_cycle(task, cycle.due_date)
        return CycleTransition(
            action=const.CYCLE_ACTION_OVERDUE,
            updated_cycle=updated,
            new_cycle=new_cycle,
            degraded=degraded,
        )

    def overdue_scan(self, task: Task, cycles: Iterable[TaskCycle]) -> CycleTransition | None:
        """Run overdue_check on the task's current cycle.

        Returns:
            The transition, or None when the task has no cycles.
        """
        current = CycleEngine.derive_current_cycle(cycles)
        if current is None:
            return None
        return self.overdue_check(task, current)

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _next_cycle(
        self, task: Task, anchor: datetime
    ) -> tuple[TaskCycle, DegradedComputation | None]:
        result = self.calculator_for(task).calculate_due(
            anchor, task.rule, task.date_system
        )
        cycle = db.build_task_cycle(
            task_id=task.id,
            start_date=anchor,
            due_date=result.instant,
            date_system=task.date_system,
            created_at=self.now(),
        )
        return cycle, result.degraded
