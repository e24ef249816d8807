"""iCalendar (.ics) import.

Turns VEVENTs into CalendarEvents keyed to the user's reference timezone.
Recurring events are expanded a fixed number of days ahead.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, tzinfo

from dateutil.rrule import rruleset, rrulestr
from icalendar import Calendar

from focusplan.errors import InputError
from focusplan.models import CalendarEvent

logger = logging.getLogger(__name__)

RECURRENCE_HORIZON_DAYS = 30
DEFAULT_DURATION = timedelta(minutes=30)


def _localize(dt: datetime, tz: tzinfo) -> datetime:
    # Floating times are wall-clock times in the reference zone.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def _event_span(component, tz: tzinfo) -> tuple[datetime, timedelta] | None:
    start_prop = component.get("DTSTART")
    if start_prop is None:
        return None
    start = start_prop.dt
    if not isinstance(start, datetime):
        logger.debug("Skipping all-day event %r", str(component.get("SUMMARY", "")))
        return None
    start = _localize(start, tz)

    end_prop = component.get("DTEND")
    duration_prop = component.get("DURATION")
    if end_prop is not None and isinstance(end_prop.dt, datetime):
        duration = _localize(end_prop.dt, tz) - start
    elif duration_prop is not None and isinstance(duration_prop.dt, timedelta):
        duration = duration_prop.dt
    else:
        duration = DEFAULT_DURATION
    if duration < timedelta(0):
        duration = timedelta(0)
    return start, duration


def _occurrences(component, start: datetime) -> list[datetime]:
    rules = component.get("RRULE")
    if rules is None:
        return [start]
    if not isinstance(rules, list):
        rules = [rules]

    # Several RRULE lines recur as their union.
    recurrence = rruleset()
    parsed = 0
    for rule in rules:
        text = rule.to_ical().decode("utf-8")
        try:
            recurrence.rrule(rrulestr(text, dtstart=start))
            parsed += 1
        except (ValueError, TypeError) as e:
            logger.warning("Ignoring unsupported RRULE %r: %s", text, e)
    if not parsed:
        return [start]
    limit = start + timedelta(days=RECURRENCE_HORIZON_DAYS)
    out = []
    for occurrence in recurrence:
        if occurrence >= limit:
            break
        out.append(occurrence)
    return out


def _to_event(summary: str, start: datetime, duration: timedelta, tz: tzinfo) -> CalendarEvent:
    start = start.astimezone(tz)
    end = start + duration
    return CalendarEvent(
        summary=summary,
        start_time=start.strftime("%H:%M"),
        end_time=end.strftime("%H:%M"),
        duration_minutes=int(duration.total_seconds() // 60),
        date=start.strftime("%Y%m%d"),
    )


def parse_ics(text: str, tz: tzinfo) -> list[CalendarEvent]:
    """Parse .ics text into events sorted by (date, start time).

    Raises InputError if the document cannot be parsed at all.
    """
    if not text or not text.strip():
        return []
    try:
        calendar = Calendar.from_ical(text)
    except ValueError as e:
        raise InputError(f"Could not parse calendar file: {e}") from e

    events: list[CalendarEvent] = []
    for component in calendar.walk("VEVENT"):
        span = _event_span(component, tz)
        if span is None:
            continue
        start, duration = span
        summary = str(component.get("SUMMARY") or "").strip() or "Untitled Event"
        for occurrence in _occurrences(component, start):
            events.append(_to_event(summary, occurrence, duration, tz))

    events.sort(key=lambda e: (e.date, e.start_time, e.summary))
    return events

