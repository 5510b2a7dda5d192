"""Shared fixtures for NeverMiss tests."""

from collections.abc import Iterator
from zoneinfo import ZoneInfo

import pytest

from nevermiss.engines.advanced_cycle_engine import AdvancedCycleCalculator
from nevermiss.engines.lunar_engine import LunarCalendarAdapter
from nevermiss.engines.simple_cycle_engine import SimpleCycleCalculator
from nevermiss.engines.special_date_engine import SpecialDateEngine
from nevermiss.utils import dt_utils


@pytest.fixture(autouse=True)
def utc_default_timezone() -> Iterator[None]:
    """Run every test with UTC as the local zone, restoring it afterwards."""
    previous = dt_utils.get_default_timezone()
    dt_utils.set_default_timezone(ZoneInfo("UTC"))
    yield
    dt_utils.set_default_timezone(previous)


@pytest.fixture
def lunar_adapter() -> LunarCalendarAdapter:
    """Adapter over the default lunar table."""
    return LunarCalendarAdapter()


@pytest.fixture
def simple_calculator(lunar_adapter: LunarCalendarAdapter) -> SimpleCycleCalculator:
    """Calculator for basic rules."""
    return SimpleCycleCalculator(lunar_adapter)


@pytest.fixture
def advanced_calculator(
    lunar_adapter: LunarCalendarAdapter,
) -> AdvancedCycleCalculator:
    """Calculator for advanced rules."""
    return AdvancedCycleCalculator(lunar_adapter)


@pytest.fixture
def special_dates(lunar_adapter: LunarCalendarAdapter) -> SpecialDateEngine:
    """Special date engine over the default lunar table."""
    return SpecialDateEngine(lunar_adapter)
