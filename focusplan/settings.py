"""User settings: load, validate, update.

``update_settings`` is the single write path for settings. The web API and
any external assistant call it with a partial change set.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from focusplan.errors import InputError
from focusplan.fileio import read_yaml, write_yaml_atomic
from focusplan.models import ClockTime, Settings
from focusplan.peak import canonical_window_name
from focusplan.workspace import settings_path, workspace_root

logger = logging.getLogger(__name__)

MAX_FOCUS_GOAL_HOURS = 24
SHORT_BREAK_RANGE = (1, 60)
LONG_BREAK_RANGE = (1, 180)

# Flat keys an assistant may send instead of nested clock dicts.
_CLOCK_KEYS = {
    "start": ("startHour", "startMinute", "startPeriod"),
    "end": ("endHour", "endMinute", "endPeriod"),
}


def validate_settings(settings: Settings) -> Settings:
    """Check ranges and normalize names. Returns the normalized settings."""
    if not 0 <= settings.focus_goal_hours <= MAX_FOCUS_GOAL_HOURS:
        raise InputError(f"Focus goal must be 0-{MAX_FOCUS_GOAL_HOURS} hours, got {settings.focus_goal_hours}")
    lo, hi = SHORT_BREAK_RANGE
    if not lo <= settings.short_break <= hi:
        raise InputError(f"Short break must be {lo}-{hi} minutes, got {settings.short_break}")
    lo, hi = LONG_BREAK_RANGE
    if not lo <= settings.long_break <= hi:
        raise InputError(f"Long break must be {lo}-{hi} minutes, got {settings.long_break}")
    window = canonical_window_name(settings.peak_window)
    if window is None:
        raise InputError(f"Unknown peak window: {settings.peak_window!r}")
    try:
        ZoneInfo(settings.timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InputError(f"Unknown timezone: {settings.timezone!r}") from e
    return replace(settings, peak_window=window)


def load_settings(root: Path | None = None) -> Settings:
    """Load settings.yaml; defaults when missing."""
    if root is None:
        root = workspace_root()
    return Settings.from_dict(read_yaml(settings_path(root)))


def save_settings(settings: Settings, root: Path | None = None) -> Settings:
    if root is None:
        root = workspace_root()
    settings = validate_settings(settings)
    write_yaml_atomic(settings_path(root), settings.to_dict())
    return settings


def _merge_clock(current: ClockTime, changes: dict[str, Any], which: str) -> ClockTime:
    nested = changes.get(f"{which}Time")
    hour_key, minute_key, period_key = _CLOCK_KEYS[which]
    parts = current.to_dict()
    if isinstance(nested, dict):
        parts.update({k: v for k, v in nested.items() if k in parts})
    for key, part in ((hour_key, "hour"), (minute_key, "minute"), (period_key, "period")):
        if changes.get(key) not in (None, ""):
            parts[part] = changes[key]
    return ClockTime.from_dict(parts)


def apply_changes(settings: Settings, changes: dict[str, Any]) -> Settings:
    """Return *settings* with a partial change set applied (unvalidated)."""
    try:
        updated = replace(
            settings,
            start_time=_merge_clock(settings.start_time, changes, "start"),
            end_time=_merge_clock(settings.end_time, changes, "end"),
        )
        if changes.get("focusGoal") is not None:
            updated = replace(updated, focus_goal_hours=float(changes["focusGoal"]))
        if changes.get("peakWindow"):
            updated = replace(updated, peak_window=str(changes["peakWindow"]))
        if changes.get("shortBreak") is not None:
            updated = replace(updated, short_break=int(changes["shortBreak"]))
        if changes.get("longBreak") is not None:
            updated = replace(updated, long_break=int(changes["longBreak"]))
        if changes.get("isMuted") is not None:
            updated = replace(updated, is_muted=bool(changes["isMuted"]))
        if changes.get("timezone"):
            updated = replace(updated, timezone=str(changes["timezone"]))
    except InputError:
        raise
    except (TypeError, ValueError) as e:
        raise InputError(f"Invalid settings change: {e}") from e
    return updated


def update_settings(changes: dict[str, Any], root: Path | None = None) -> Settings:
    """Apply, validate and persist a partial settings update."""
    if root is None:
        root = workspace_root()
    current = load_settings(root)
    updated = save_settings(apply_changes(current, changes), root)
    logger.info("Settings updated: %s", ", ".join(sorted(changes)) or "(no changes)")
    return updated
