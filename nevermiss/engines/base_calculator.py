"""Base class for cycle calculators.

Holds the contract shared by SimpleCycleCalculator and
AdvancedCycleCalculator:

- compute_due / compute_start return plain datetimes
- calculate_due / calculate_start also report a DegradedComputation
- rule validation happens before any date arithmetic (InvalidRuleError
  propagates to the caller)
- unrepresentable results never propagate: they fall back to anchor ±1 day,
  or ±30 days when the lunar table cannot convert a date

Subclasses implement ``_compute()`` once for both directions: ``sign`` is +1
when computing a due date from a start date and -1 when deriving a start
date from a due date.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

from .. import const
from ..data_builders import InvalidRuleError
from ..utils.dt_utils import as_utc, local_date, with_local_date
from .calendar_space import CalendarSpace, get_calendar_space
from .lunar_engine import DEFAULT_LUNAR_TABLE, InvalidLunarDateError, LunarCalendarAdapter

# =============================================================================
# RESULT DATA STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class DegradedComputation:
    """Report of a recovered calculation failure.

    Attributes:
        reason: One of const.DEGRADED_REASON_*
        anchor: Instant the calculation started from
        fallback: Instant returned instead of the real result
        detail: Text of the underlying error
    """

    reason: str
    anchor: datetime
    fallback: datetime
    detail: str = ""


@dataclass(frozen=True)
class CycleComputation:
    """Result of a due/start calculation."""

    instant: datetime
    degraded: DegradedComputation | None = None

    @property
    def is_degraded(self) -> bool:
        """True when the instant is a fallback value."""
        return self.degraded is not None


# =============================================================================
# BASE CALCULATOR
# =============================================================================


class BaseCycleCalculator(ABC):
    """Shared due/start contract and failure policy."""

    name = "BaseCycleCalculator"

    def __init__(self, lunar_adapter: LunarCalendarAdapter | None = None) -> None:
        """Initialize the calculator.

        Args:
            lunar_adapter: Adapter used for lunar rules (default table if None)
        """
        self._lunar = lunar_adapter or LunarCalendarAdapter(DEFAULT_LUNAR_TABLE)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def compute_due(
        self, start: datetime, rule: Any, date_system: str = const.DATE_SYSTEM_SOLAR
    ) -> datetime:
        """Return the due instant of the cycle starting at ``start``."""
        return self.calculate_due(start, rule, date_system).instant

    def compute_start(
        self, due: datetime, rule: Any, date_system: str = const.DATE_SYSTEM_SOLAR
    ) -> datetime:
        """Return the start instant of the cycle due at ``due``."""
        return self.calculate_start(due, rule, date_system).instant

    def calculate_due(
        self, start: datetime, rule: Any, date_system: str = const.DATE_SYSTEM_SOLAR
    ) -> CycleComputation:
        """Calculate a due instant, reporting any fallback used.

        Raises:
            InvalidRuleError: If the rule is malformed.
        """
        return self._calculate(start, rule, date_system, 1)

    def calculate_start(
        self, due: datetime, rule: Any, date_system: str = const.DATE_SYSTEM_SOLAR
    ) -> CycleComputation:
        """Calculate a start instant, reporting any fallback used.

        Raises:
            InvalidRuleError: If the rule is malformed.
        """
        return self._calculate(due, rule, date_system, -1)

    # -------------------------------------------------------------------------
    # Subclass hooks
    # -------------------------------------------------------------------------

    @abstractmethod
    def validate(self, rule: Any) -> None:
        """Raise InvalidRuleError if the rule cannot be handled."""

    @abstractmethod
    def _compute(
        self, anchor: datetime, rule: Any, space: CalendarSpace, sign: int
    ) -> datetime:
        """Compute the boundary instant in direction ``sign``."""

    # -------------------------------------------------------------------------
    # Failure policy
    # -------------------------------------------------------------------------

    def _calculate(
        self, anchor: datetime, rule: Any, date_system: str, sign: int
    ) -> CycleComputation:
        if date_system not in const.DATE_SYSTEMS:
            raise InvalidRuleError(
                field=const.FIELD_DATE_SYSTEM,
                translation_key=const.TRANS_KEY_INVALID_DATE_SYSTEM,
                placeholders={"value": str(date_system)},
            )
        self.validate(rule)
        anchor = as_utc(anchor)

        try:
            space = get_calendar_space(date_system, self._lunar)
            result = self._compute(anchor, rule, space, sign)
        except InvalidLunarDateError as err:
            return self._degrade(
                anchor,
                sign * const.LUNAR_FALLBACK_OFFSET_DAYS,
                const.DEGRADED_REASON_INVALID_LUNAR_DATE,
                str(err),
            )
        except (ValueError, OverflowError) as err:
            return self._degrade(
                anchor,
                sign * const.FALLBACK_OFFSET_DAYS,
                const.DEGRADED_REASON_INVALID_DATE,
                str(err),
            )

        result = as_utc(result)
        if (result - anchor) * sign <= timedelta(0):
            return self._degrade(
                anchor,
                sign * const.FALLBACK_OFFSET_DAYS,
                const.DEGRADED_REASON_NON_POSITIVE,
                f"result {result.isoformat()} does not move away from anchor",
            )
        return CycleComputation(result)

    def _degrade(
        self, anchor: datetime, offset_days: int, reason: str, detail: str
    ) -> CycleComputation:
        fallback = anchor + timedelta(days=offset_days)
        const.LOGGER.warning(
            "%s: Degraded computation (%s) from %s, using %s: %s",
            self.name,
            reason,
            anchor.isoformat(),
            fallback.isoformat(),
            detail,
        )
        return CycleComputation(
            fallback,
            DegradedComputation(
                reason=reason, anchor=anchor, fallback=fallback, detail=detail
            ),
        )

    # -------------------------------------------------------------------------
    # Shared date helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _on(anchor: datetime, target: date) -> datetime:
        """Place the anchor's local wall time on ``target``."""
        return with_local_date(anchor, target)

    @staticmethod
    def _shift_days(anchor: datetime, days: int) -> datetime:
        """Move by whole local calendar days, keeping the wall time."""
        return with_local_date(anchor, local_date(anchor) + timedelta(days=days))

    def _scan(self, first: date, sign: int, predicate: Callable[[date], bool]) -> date:
        """Walk day by day from ``first`` until ``predicate`` holds.

        Raises:
            ValueError: If no match is found within the iteration limit.
        """
        current = first
        for _ in range(const.MAX_DATE_CALCULATION_ITERATIONS):
            if predicate(current):
                return current
            current += timedelta(days=sign)
        const.LOGGER.warning(
            "%s: Hit iteration limit scanning from %s", self.name, first.isoformat()
        )
        raise ValueError(f"No matching day found from {first.isoformat()}")
