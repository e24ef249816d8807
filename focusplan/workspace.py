"""Workspace root, timezone and path helpers for FocusPlan."""

from __future__ import annotations

import logging
import os
from datetime import date, datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from focusplan.fileio import read_yaml

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "UTC"


def workspace_root() -> Path:
    """Get the workspace root directory (holds settings, calendar and progress files)."""
    return Path(
        os.environ.get("FOCUSPLAN_ROOT", str(Path.home() / "focusplan"))
    ).expanduser().resolve()


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """Get the reference timezone from settings.yaml, defaulting to UTC."""
    if root is None:
        root = workspace_root()
    name = read_yaml(settings_path(root)).get("timezone") or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(str(name))
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r in settings, using %s", name, DEFAULT_TIMEZONE)
        return ZoneInfo(DEFAULT_TIMEZONE)


def date_key(d: date) -> str:
    """Calendar date key in YYYYMMDD form."""
    return d.strftime("%Y%m%d")


def parse_date_key(key: str) -> date:
    return datetime.strptime(key, "%Y%m%d").date()


def today_key(root: Path | None = None) -> str:
    """Today's date key in the user's timezone."""
    return date_key(datetime.now(get_user_timezone(root)).date())


def upcoming_date_keys(days: int = 7, root: Path | None = None) -> list[str]:
    """Date keys for today and the following days, in the user's timezone."""
    start = datetime.now(get_user_timezone(root)).date()
    return [date_key(start + timedelta(days=i)) for i in range(days)]


# ── Path helpers ──────────────────────────────────────────────

def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "settings.yaml"


def calendar_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "calendar.json"


def adjustments_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "adjustments.json"


def progress_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "progress.json"
