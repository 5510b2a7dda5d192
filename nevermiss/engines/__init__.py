"""Engine modules for NeverMiss.

Contains specialized computation engines:
- lunar_engine: Solar/lunar conversion over an explicit table handle
- calendar_space: Shared solar/lunar field arithmetic
- simple_cycle_engine: Due/start dates for basic recurrence rules
- advanced_cycle_engine: Due/start dates for parametrized rules
- special_date_engine: Festival and solar-term catalogs and resolution
- cycle_engine: Cycle state machine and current-cycle derivation
"""

# Use relative imports within package to avoid mypy module resolution issues
from .advanced_cycle_engine import AdvancedCycleCalculator
from .base_calculator import CycleComputation, DegradedComputation
from .cycle_engine import CycleEngine, CycleStateError
from .lunar_engine import (
    DEFAULT_LUNAR_TABLE,
    InvalidLunarDateError,
    LunarCalendarAdapter,
    LunarDate,
    LunarTable,
)
from .simple_cycle_engine import SimpleCycleCalculator
from .special_date_engine import SpecialDateEngine, is_weekend, is_workday

__all__ = [
    "DEFAULT_LUNAR_TABLE",
    "AdvancedCycleCalculator",
    "CycleComputation",
    "CycleEngine",
    "CycleStateError",
    "DegradedComputation",
    "InvalidLunarDateError",
    "LunarCalendarAdapter",
    "LunarDate",
    "LunarTable",
    "SimpleCycleCalculator",
    "SpecialDateEngine",
    "is_weekend",
    "is_workday",
]
