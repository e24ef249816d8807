"""Tests for focusplan/events.py — per-day normalization and storage."""

from focusplan.events import drop_overlapping, events_for_date, has_events, load_events, normalize_event, save_events
from focusplan.models import CalendarEvent, DayEvent


def _event(summary, start, end, duration, date="20260302"):
    return CalendarEvent(summary=summary, start_time=start, end_time=end, duration_minutes=duration, date=date)


def test_normalize_event_uses_duration():
    assert normalize_event(_event("A", "10:00", "11:00", 60)) == DayEvent("A", 600, 660)


def test_normalize_event_falls_back_to_end_time():
    assert normalize_event(_event("A", "10:00", "10:45", 0)) == DayEvent("A", 600, 645)


def test_normalize_event_defaults_non_positive():
    assert normalize_event(_event("A", "10:00", "10:00", 0)) == DayEvent("A", 600, 630)
    assert normalize_event(_event("A", "10:00", "09:00", -5)) == DayEvent("A", 600, 630)


def test_normalize_event_truncates_at_midnight():
    assert normalize_event(_event("Late", "23:30", "00:30", 60)) == DayEvent("Late", 1410, 1440)


def test_events_for_date_filters_and_sorts():
    events = [
        _event("B", "14:00", "15:00", 60),
        _event("Other day", "09:00", "10:00", 60, date="20260303"),
        _event("A2", "09:00", "10:00", 60),
        _event("A1", "09:00", "09:30", 30),
    ]
    day = events_for_date(events, "20260302")
    assert [e.summary for e in day] == ["A1", "A2", "B"]


def test_drop_overlapping_keeps_first(caplog):
    events = [DayEvent("A", 600, 660), DayEvent("B", 630, 700), DayEvent("C", 660, 720)]
    kept = drop_overlapping(events)
    assert [e.summary for e in kept] == ["A", "C"]
    assert "overlaps" in caplog.text


def test_adjacent_events_do_not_overlap():
    assert not DayEvent("A", 600, 660).overlaps(DayEvent("B", 660, 720))


def test_has_events():
    events = [_event("A", "10:00", "11:00", 60)]
    assert has_events(events, "20260302")
    assert not has_events(events, "20260303")


def test_load_events_missing(workspace):
    assert load_events(workspace) == []


def test_save_and_load_events(workspace):
    events = [_event("A", "10:00", "11:00", 60), _event("", "12:00", "12:30", 30)]
    save_events(events, workspace)
    loaded = load_events(workspace)
    assert loaded[0] == events[0]
    # Empty summaries are named on load
    assert loaded[1].summary == "Untitled Event"
