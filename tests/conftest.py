"""Shared test fixtures for FocusPlan tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with default settings."""
    root = tmp_path / "workspace"
    root.mkdir(parents=True)

    settings = {
        "startTime": {"hour": "08", "minute": "00", "period": "AM"},
        "endTime": {"hour": "06", "minute": "00", "period": "PM"},
        "focusGoal": 7,
        "peakWindow": "Morning",
        "shortBreak": 5,
        "longBreak": 30,
        "isMuted": False,
        "timezone": "UTC",
    }
    (root / "settings.yaml").write_text(
        yaml.dump(settings, default_flow_style=False, sort_keys=False), encoding="utf-8"
    )

    # Set env var
    os.environ["FOCUSPLAN_ROOT"] = str(root)
    yield root
    # Cleanup
    if "FOCUSPLAN_ROOT" in os.environ:
        del os.environ["FOCUSPLAN_ROOT"]


ICS_SAMPLE = """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//FocusPlan Tests//EN
BEGIN:VEVENT
UID:standup@example.com
DTSTAMP:20260301T000000Z
DTSTART:20260302T100000Z
DTEND:20260302T110000Z
SUMMARY:Team standup with the extended platform and infrastructure group f
 or the quarterly review
END:VEVENT
BEGIN:VEVENT
UID:review@example.com
DTSTAMP:20260301T000000Z
DTSTART;TZID=Europe/Berlin:20260302T150000
DTEND;TZID=Europe/Berlin:20260302T153000
SUMMARY:Design review
END:VEVENT
BEGIN:VEVENT
UID:sync@example.com
DTSTAMP:20260301T000000Z
DTSTART:20260303T090000Z
DTEND:20260303T093000Z
RRULE:FREQ=DAILY;COUNT=3
SUMMARY:Daily sync
END:VEVENT
BEGIN:VEVENT
UID:open@example.com
DTSTAMP:20260301T000000Z
DTSTART:20260304T140000Z
SUMMARY:Open ended
END:VEVENT
BEGIN:VEVENT
UID:holiday@example.com
DTSTAMP:20260301T000000Z
DTSTART;VALUE=DATE:20260305
DTEND;VALUE=DATE:20260306
SUMMARY:Holiday
END:VEVENT
END:VCALENDAR
"""


@pytest.fixture
def ics_text() -> str:
    return ICS_SAMPLE.replace("\n", "\r\n")
