"""Imported calendar events: storage and per-day normalization."""

from __future__ import annotations

import logging
from pathlib import Path

from focusplan.clock import MINUTES_PER_DAY, parse_hhmm
from focusplan.errors import InputError
from focusplan.fileio import read_json, remove_file, write_json_atomic
from focusplan.models import CalendarEvent, DayEvent
from focusplan.workspace import calendar_path, get_user_timezone, workspace_root

logger = logging.getLogger(__name__)

DEFAULT_EVENT_MINUTES = 30


# ── Normalization ─────────────────────────────────────────────


def _end_minute(event: CalendarEvent, start: int) -> int:
    if event.duration_minutes > 0:
        return start + event.duration_minutes
    try:
        end = parse_hhmm(event.end_time)
    except InputError:
        end = start
    if end > start:
        return end
    logger.warning(
        "Event %r on %s has no positive duration, using %d minutes",
        event.summary, event.date, DEFAULT_EVENT_MINUTES,
    )
    return start + DEFAULT_EVENT_MINUTES


def normalize_event(event: CalendarEvent) -> DayEvent:
    """Resolve one event to a minute-of-day interval with positive duration."""
    start = parse_hhmm(event.start_time)
    end = _end_minute(event, start)
    if end > MINUTES_PER_DAY:
        # Midnight crossing is not modelled; keep the part on this day.
        logger.warning("Event %r on %s runs past midnight, truncating", event.summary, event.date)
        end = MINUTES_PER_DAY
    return DayEvent(summary=event.summary, start_minute=start, end_minute=end)


def events_for_date(events: list[CalendarEvent], date_key: str) -> list[DayEvent]:
    """Events whose date key equals *date_key*, sorted by start (then end)."""
    day = [normalize_event(e) for e in events if e.date == date_key]
    day.sort(key=lambda e: (e.start_minute, e.end_minute))
    return day


def drop_overlapping(events: list[DayEvent]) -> list[DayEvent]:
    """Keep the first of any overlapping run. Input must be sorted by start."""
    kept: list[DayEvent] = []
    for event in events:
        if kept and kept[-1].overlaps(event):
            logger.warning(
                "Dropping %r (%d-%d): overlaps %r",
                event.summary, event.start_minute, event.end_minute, kept[-1].summary,
            )
            continue
        kept.append(event)
    return kept


def has_events(events: list[CalendarEvent], date_key: str) -> bool:
    return any(e.date == date_key for e in events)


# ── Storage ───────────────────────────────────────────────────


def load_events(root: Path | None = None) -> list[CalendarEvent]:
    """Load the stored calendar (empty list when none has been imported)."""
    if root is None:
        root = workspace_root()
    data = read_json(calendar_path(root), default=[])
    if not isinstance(data, list):
        return []
    return [CalendarEvent.from_dict(d) for d in data if isinstance(d, dict)]


def save_events(events: list[CalendarEvent], root: Path | None = None) -> None:
    if root is None:
        root = workspace_root()
    write_json_atomic(calendar_path(root), [e.to_dict() for e in events])


def clear_events(root: Path | None = None) -> bool:
    """Forget the imported calendar. Returns True if one was stored."""
    if root is None:
        root = workspace_root()
    return remove_file(calendar_path(root))


def import_calendar(ics_text: str, root: Path | None = None) -> list[CalendarEvent]:
    """Parse an .ics document and replace the stored calendar with its events.

    Raises InputError (stored calendar untouched) if nothing usable was found.
    """
    from focusplan.ics import parse_ics

    if root is None:
        root = workspace_root()
    events = parse_ics(ics_text, get_user_timezone(root))
    if not events:
        raise InputError("No events found in calendar file")
    save_events(events, root)
    logger.info("Imported %d calendar events", len(events))
    return events
