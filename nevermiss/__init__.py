"""NeverMiss cycle engine.

Computes the start/due boundaries of recurring task cycles in the solar
(Gregorian) and lunar (lunisolar) calendars, and orchestrates the cycle
lifecycle (create, complete, skip, overdue rollover).

Layout:
    - const.py: Shared constants and LOGGER
    - models.py / type_defs.py: Rule and cycle data
    - data_builders.py: Rule building, validation and InvalidRuleError
    - engines/: Pure calculation engines
    - managers/: Lifecycle orchestration
    - helpers/: Rule descriptions
    - utils/: Date/time utilities
"""
