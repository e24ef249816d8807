"""Error types for FocusPlan.

InputError: the caller broke a contract (bad clock value, overlapping events,
inverted day window). ScheduleDefect: the generator broke its own invariants.
"""

from __future__ import annotations


class PlannerError(Exception):
    """Base class for FocusPlan errors."""


class InputError(PlannerError, ValueError):
    """Rejected input. Never coerced into a valid value."""


class ScheduleDefect(PlannerError, RuntimeError):
    """Internal invariant failure in schedule generation."""
