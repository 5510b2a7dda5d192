"""Manager modules for NeverMiss.

Managers orchestrate workflows and coordinate between engines.
"""

from .cycle_manager import CycleLifecycleManager, CycleTransition

__all__ = [
    "CycleLifecycleManager",
    "CycleTransition",
]
