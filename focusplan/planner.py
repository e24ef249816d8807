"""Day planning service: settings + calendar + adjustments -> DayPlan.

Bridges the pure schedule generator and the stored workspace state.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from focusplan.clock import to_minute_of_day
from focusplan.errors import InputError
from focusplan.events import drop_overlapping, events_for_date, has_events, load_events
from focusplan.goals import (
    MIN_INCREMENT,
    adjustment_increment,
    apply_adjustment,
    clear_adjustment,
    effective_goal,
    evaluate_goal,
    load_adjustments,
    save_adjustments,
)
from focusplan.models import CalendarEvent, DayEvent, DayPlan, ScheduleConfig, Settings
from focusplan.peak import resolve_peak_range
from focusplan.scheduler import generate_blocks
from focusplan.settings import load_settings
from focusplan.workspace import parse_date_key, today_key, upcoming_date_keys, workspace_root

logger = logging.getLogger(__name__)

# Generated days never extend outside 07:00-23:00.
DAY_START_LIMIT = 7 * 60
DAY_END_LIMIT = 23 * 60

ADJUST_DIRECTIONS = ("add", "reduce")


def resolve_day_window(settings: Settings, events: list[DayEvent]) -> tuple[int, int]:
    """Settings window clamped to the hard limits, widened to cover the day's events."""
    start = max(DAY_START_LIMIT, to_minute_of_day(settings.start_time))
    end = min(DAY_END_LIMIT, to_minute_of_day(settings.end_time))
    if events:
        start = min(start, max(DAY_START_LIMIT, events[0].start_minute))
        end = max(end, min(DAY_END_LIMIT, max(e.end_minute for e in events)))
    if start > end:
        raise InputError(f"Day window is empty or inverted: {start}-{end}")
    return start, end


def _events_in_window(events: list[DayEvent], start: int, end: int) -> list[DayEvent]:
    kept = []
    for e in events:
        if e.start_minute < start or e.end_minute > end:
            logger.warning(
                "Dropping %r (%d-%d): outside the day window %d-%d",
                e.summary, e.start_minute, e.end_minute, start, end,
            )
            continue
        kept.append(e)
    return kept


def build_config(settings: Settings, day_start: int, day_end: int, goal_minutes: int) -> ScheduleConfig:
    return ScheduleConfig(
        day_start=day_start,
        day_end=day_end,
        focus_goal_minutes=goal_minutes,
        peak_range=resolve_peak_range(settings.peak_window),
        short_break_minutes=settings.short_break,
        long_break_minutes=settings.long_break,
        count_meetings_toward_goal=True,
    )


def plan_day(
    settings: Settings,
    events: list[CalendarEvent],
    date_key: str,
    adjustments: dict[str, int] | None = None,
) -> DayPlan:
    """Generate the plan for one date. Pure: reads nothing from disk."""
    adjustments = adjustments or {}
    day_events = drop_overlapping(events_for_date(events, date_key))
    day_start, day_end = resolve_day_window(settings, day_events)
    day_events = _events_in_window(day_events, day_start, day_end)

    base_goal = settings.focus_goal_minutes
    goal = effective_goal(base_goal, adjustments, date_key)
    config = build_config(settings, day_start, day_end, goal)
    blocks = generate_blocks(date_key, day_events, config)

    return DayPlan(
        date=date_key,
        day_start=day_start,
        day_end=day_end,
        blocks=blocks,
        goal_status=evaluate_goal(blocks, goal),
        stated_goal_minutes=base_goal,
        effective_goal_minutes=goal,
        adjustment_minutes=adjustments.get(date_key, 0),
    )


# ── Workspace-backed API ──────────────────────────────────────


def plan_for_date(date_key: str | None = None, root: Path | None = None) -> DayPlan:
    """Load settings, calendar and adjustments from the workspace and plan a date."""
    if root is None:
        root = workspace_root()
    if date_key is None:
        date_key = today_key(root)
    _check_date_key(date_key)
    return plan_day(load_settings(root), load_events(root), date_key, load_adjustments(root))


def week_days(days: int = 7, root: Path | None = None) -> list[dict[str, Any]]:
    """The next *days* dates with a flag for days that have imported events."""
    if root is None:
        root = workspace_root()
    events = load_events(root)
    out = []
    for key in upcoming_date_keys(days, root):
        d = parse_date_key(key)
        out.append({
            "date": key,
            "weekday": d.strftime("%a"),
            "day": d.strftime("%d"),
            "label": d.strftime("%A, %d %B %Y"),
            "hasEvents": has_events(events, key),
        })
    return out


def adjust_focus(date_key: str, direction: str, root: Path | None = None) -> DayPlan:
    """Add or reduce focus for one date, then regenerate that date's plan."""
    if direction not in ADJUST_DIRECTIONS:
        raise InputError(f"Direction must be one of {ADJUST_DIRECTIONS}, got {direction!r}")
    if root is None:
        root = workspace_root()
    current = plan_for_date(date_key, root)
    status = current.goal_status
    increment = adjustment_increment(status.difference) if status and not status.on_target else MIN_INCREMENT
    delta = increment if direction == "add" else -increment

    adjustments = apply_adjustment(load_adjustments(root), date_key, delta)
    save_adjustments(adjustments, root)
    logger.info("Focus adjustment for %s is now %+d minutes", date_key, adjustments.get(date_key, 0))
    return plan_for_date(date_key, root)


def reset_adjustment(date_key: str, root: Path | None = None) -> DayPlan:
    if root is None:
        root = workspace_root()
    save_adjustments(clear_adjustment(load_adjustments(root), date_key), root)
    return plan_for_date(date_key, root)


def _check_date_key(date_key: str) -> None:
    if len(date_key) != 8 or not date_key.isdigit():
        raise InputError(f"Date must be YYYYMMDD, got {date_key!r}")
    try:
        parse_date_key(date_key)
    except ValueError as e:
        raise InputError(f"Date must be YYYYMMDD, got {date_key!r}") from e
