"""Cycle Engine - Pure logic for task cycle states.

This engine provides stateless, pure Python functions for:
- State transition validation (Pending / Completed / Overdue / Skipped)
- Overdue detection against an injected "now"
- Current-cycle derivation from a task's append-only cycle log

ARCHITECTURE: This is a pure logic engine with no persistence.
All functions are static methods that operate on passed-in data.
Orchestration (which calculator, which anchor) belongs in
CycleLifecycleManager.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from .. import const
from ..models import TaskCycle

# =============================================================================
# EXCEPTIONS
# =============================================================================


class CycleStateError(Exception):
    """Raised when a cycle transition is not allowed from its current state.

    Attributes:
        task_id: Task owning the cycle
        current_state: State the cycle is in
        requested_state: State that was requested
    """

    def __init__(self, task_id: str, current_state: str, requested_state: str) -> None:
        """Initialize CycleStateError.

        Args:
            task_id: Task owning the cycle
            current_state: State the cycle is in
            requested_state: State that was requested
        """
        self.task_id = task_id
        self.current_state = current_state
        self.requested_state = requested_state
        super().__init__(
            f"Task {task_id}: cannot move cycle from {current_state} "
            f"to {requested_state}"
        )


# =============================================================================
# CYCLE ENGINE
# =============================================================================


class CycleEngine:
    """Pure logic engine for cycle state transitions and queries."""

    # Valid state transitions matrix
    VALID_TRANSITIONS: dict[str, list[str]] = {
        # From PENDING: done, missed, or skipped
        const.CYCLE_STATE_PENDING: [
            const.CYCLE_STATE_COMPLETED,
            const.CYCLE_STATE_OVERDUE,
            const.CYCLE_STATE_SKIPPED,
        ],
        # From OVERDUE: completed late, or replaced by the next cycle
        const.CYCLE_STATE_OVERDUE: [
            const.CYCLE_STATE_COMPLETED,
            const.CYCLE_STATE_SUPERSEDED,
        ],
        # Terminal states
        const.CYCLE_STATE_COMPLETED: [],
        const.CYCLE_STATE_SKIPPED: [],
        const.CYCLE_STATE_SUPERSEDED: [],
    }

    @staticmethod
    def can_transition(from_state: str, to_state: str) -> bool:
        """Return True if moving from ``from_state`` to ``to_state`` is allowed."""
        return to_state in CycleEngine.VALID_TRANSITIONS.get(from_state, [])

    @staticmethod
    def validate_transition(cycle: TaskCycle, to_state: str) -> None:
        """Raise CycleStateError if ``cycle`` cannot move to ``to_state``."""
        if not CycleEngine.can_transition(cycle.state, to_state):
            raise CycleStateError(cycle.task_id, cycle.state, to_state)

    @staticmethod
    def is_overdue(cycle: TaskCycle, now: datetime) -> bool:
        """Return True if a pending cycle's due instant has passed."""
        return cycle.state == const.CYCLE_STATE_PENDING and now > cycle.due_date

    @staticmethod
    def is_incomplete(cycle: TaskCycle) -> bool:
        """Cycle still waiting for the user (pending or overdue)."""
        return not cycle.is_completed and not cycle.is_skipped

    @staticmethod
    def derive_current_cycle(cycles: Iterable[TaskCycle]) -> TaskCycle | None:
        """Derive the task's current cycle from its cycle log.

        The latest incomplete cycle by due date wins; when every cycle is
        finished, the newest cycle overall is returned.

        Returns:
            The current cycle, or None for an empty log.
        """
        cycles = list(cycles)
        if not cycles:
            return None

        incomplete = [cycle for cycle in cycles if CycleEngine.is_incomplete(cycle)]
        if incomplete:
            return max(incomplete, key=lambda cycle: cycle.due_date)

        return max(
            cycles,
            key=lambda cycle: (cycle.created_at or cycle.start_date, cycle.due_date),
        )

    @staticmethod
    def derive_state(cycle: TaskCycle, cycles: Iterable[TaskCycle]) -> str:
        """Return the display state, reporting replaced overdue cycles as superseded."""
        if cycle.state != const.CYCLE_STATE_OVERDUE:
            return cycle.state
        if any(other.start_date >= cycle.due_date for other in cycles if other != cycle):
            return const.CYCLE_STATE_SUPERSEDED
        return cycle.state
