"""Peak energy windows: named preference -> minute-of-day range."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

PEAK_RANGES: dict[str, tuple[int, int]] = {
    "Morning": (420, 720),  # 7 AM - 12 PM
    "Afternoon": (720, 1020),  # 12 PM - 5 PM
    "Evening": (1020, 1260),  # 5 PM - 9 PM
    "Late Night": (1260, 1380),  # 9 PM - 11 PM
}

DEFAULT_PEAK_WINDOW = "Morning"

_BY_LOWER = {name.lower(): name for name in PEAK_RANGES}


def canonical_window_name(name: str) -> str | None:
    """'late night' -> 'Late Night'; None for unknown names."""
    return _BY_LOWER.get((name or "").strip().lower())


def resolve_peak_range(name: str) -> tuple[int, int]:
    """Half-open [start, end) range for a window name, Morning when unknown."""
    canonical = canonical_window_name(name)
    if canonical is None:
        logger.warning("Unknown peak window %r, falling back to %s", name, DEFAULT_PEAK_WINDOW)
        canonical = DEFAULT_PEAK_WINDOW
    return PEAK_RANGES[canonical]


def in_peak(minute: int, peak_range: tuple[int, int]) -> bool:
    start, end = peak_range
    return start <= minute < end
