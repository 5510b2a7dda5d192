# File: utils/__init__.py
"""Pure Python utilities for NeverMiss.

Submodules:
    - dt_utils: Timezone configuration, conversion and parsing helpers

Usage:
    from . import dt_utils
    from .dt_utils import as_utc, with_local_date
"""

from . import dt_utils

__all__ = ["dt_utils"]
