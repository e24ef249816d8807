"""12-hour clock and minute-of-day conversions."""

from __future__ import annotations

import re

from focusplan.errors import InputError
from focusplan.models import ClockTime

MINUTES_PER_DAY = 24 * 60

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def to_minute_of_day(clock: ClockTime) -> int:
    """12:00 AM -> 0, 12:00 PM -> 720, 11:59 PM -> 1439."""
    minutes = (clock.hour % 12) * 60 + clock.minute
    if clock.period == "PM":
        minutes += 720
    return minutes


def from_minute_of_day(total: int) -> ClockTime:
    if not 0 <= total < MINUTES_PER_DAY:
        raise InputError(f"Minute of day out of range: {total}")
    hours, minute = divmod(total, 60)
    period = "PM" if hours >= 12 else "AM"
    return ClockTime(hour=(hours % 12) or 12, minute=minute, period=period)


def parse_hhmm(value: str) -> int:
    """Parse a 24-hour 'HH:MM' string into minute of day."""
    m = _HHMM_RE.match(value.strip())
    if not m:
        raise InputError(f"Invalid HH:MM time: {value!r}")
    hour, minute = int(m.group(1)), int(m.group(2))
    if hour > 23 or minute > 59:
        raise InputError(f"Invalid HH:MM time: {value!r}")
    return hour * 60 + minute


def format_hhmm(total: int) -> str:
    """Minute of day -> '13:05'."""
    _check_range(total)
    return f"{total // 60:02d}:{total % 60:02d}"


def format_12h(total: int) -> str:
    """Minute of day -> '01:05 pm'."""
    _check_range(total)
    hours, mins = divmod(total, 60)
    suffix = "pm" if 12 <= hours < 24 else "am"
    return f"{(hours % 12) or 12:02d}:{mins:02d} {suffix}"


def format_duration(minutes: int) -> str:
    """90 -> '1h 30m', 45 -> '45m', 120 -> '2h'."""
    h, m = divmod(minutes, 60)
    if h and m:
        return f"{h}h {m}m"
    if h:
        return f"{h}h"
    return f"{m}m"


def _check_range(total: int) -> None:
    # 1440 is allowed so a day that ends at midnight can be displayed.
    if not 0 <= total <= MINUTES_PER_DAY:
        raise InputError(f"Minute of day out of range: {total}")
