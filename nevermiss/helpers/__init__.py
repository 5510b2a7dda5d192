# File: helpers/__init__.py
"""Presentation helpers for NeverMiss.

Submodules:
    - description_helpers: Human-readable recurrence rule descriptions

Usage:
    from .helpers import description_helpers as dh
    from .helpers.description_helpers import describe_rule
"""

from . import description_helpers

__all__ = ["description_helpers"]
