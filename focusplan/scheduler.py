"""Greedy day-schedule generator for FocusPlan.

Fills the time around fixed calendar events with focus, break, wellness,
lunch and hobby blocks in a single left-to-right sweep. The sweep is a fold
over an immutable SweepState: ``step`` takes one state and returns the next,
so generation is a pure function of its inputs.

Policy at each cursor position:

1. an event starting here is emitted verbatim as a meeting;
2. after exertion (focus or meeting) comes rest: lunch once inside the lunch
   window, wellness when the gap is long, a short break otherwise;
3. after rest (or at the start of the day) comes focus while the goal is
   unmet, sized by the peak/off-peak cap;
4. once the goal is met, rest time is filled with hobby blocks.

Adjacent break or wellness blocks of the same kind are merged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable

from focusplan.clock import MINUTES_PER_DAY
from focusplan.errors import InputError, ScheduleDefect
from focusplan.models import BlockKind, DayEvent, ScheduleBlock, ScheduleConfig
from focusplan.peak import in_peak

logger = logging.getLogger(__name__)


# ── Per-kind policy ───────────────────────────────────────────


@dataclass(frozen=True)
class KindPolicy:
    label: str
    sub_label: str
    color: str
    mergeable: bool
    # (config, cursor) -> longest block of this kind; None for fixed events
    cap: Callable[[ScheduleConfig, int], int] | None


def _focus_cap(config: ScheduleConfig, cursor: int) -> int:
    return config.peak_focus_cap if in_peak(cursor, config.peak_range) else config.off_peak_focus_cap


KIND_POLICY: dict[BlockKind, KindPolicy] = {
    BlockKind.FOCUS: KindPolicy("Focus Sprint", "Execution focus", "#ED6A45", False, _focus_cap),
    BlockKind.MEETING: KindPolicy("Meeting", "", "#8E6043", False, None),
    BlockKind.BREAK: KindPolicy(
        "Mental Pivot", "Strategic pause", "#E5E7EB", True,
        lambda c, _: c.short_break_minutes,
    ),
    BlockKind.WELLNESS: KindPolicy(
        "Wellness Buffer", "Hydrate & context reset", "#4ADE80", True,
        lambda c, _: c.wellness_break_minutes,
    ),
    BlockKind.LUNCH: KindPolicy(
        "Lunch Break", "Mid-day reset", "#60A5FA", False,
        lambda c, _: c.long_break_minutes,
    ),
    BlockKind.HOBBY: KindPolicy(
        "Creative Hobby Break", "Personal exploration", "#C084FC", False,
        lambda c, _: c.hobby_block_minutes,
    ),
}

PEAK_FOCUS_LABEL = ("Peak Window Deep Work", "High-impact productivity")


def block_id(date_key: str, kind: BlockKind, start_minute: int) -> str:
    return f"{date_key}-{kind.value}-{start_minute}"


# ── Sweep state ───────────────────────────────────────────────


@dataclass(frozen=True)
class SweepState:
    cursor: int
    remaining_focus: int
    last_kind: BlockKind | None = None
    lunch_placed: bool = False
    event_index: int = 0
    blocks: tuple[ScheduleBlock, ...] = ()


def initial_state(events: list[DayEvent], config: ScheduleConfig) -> SweepState:
    remaining = config.focus_goal_minutes
    if config.count_meetings_toward_goal:
        remaining = max(0, remaining - sum(e.duration_minutes for e in events))
    return SweepState(
        cursor=config.day_start,
        remaining_focus=remaining,
        lunch_placed=any("lunch" in e.summary.lower() for e in events),
    )


def _make_block(date_key: str, kind: BlockKind, start: int, duration: int, config: ScheduleConfig,
                label: str | None = None) -> ScheduleBlock:
    policy = KIND_POLICY[kind]
    sub_label = policy.sub_label
    if kind is BlockKind.FOCUS and in_peak(start, config.peak_range):
        label, sub_label = PEAK_FOCUS_LABEL
    return ScheduleBlock(
        id=block_id(date_key, kind, start),
        kind=kind,
        label=label if label is not None else policy.label,
        start_minute=start,
        duration_minutes=duration,
        sub_label=sub_label,
        color_hint=policy.color,
    )


def _emit(state: SweepState, block: ScheduleBlock, **changes) -> SweepState:
    blocks = state.blocks
    last = blocks[-1] if blocks else None
    if last is not None and last.kind is block.kind and KIND_POLICY[block.kind].mergeable:
        merged = replace(last, duration_minutes=last.duration_minutes + block.duration_minutes)
        blocks = blocks[:-1] + (merged,)
    else:
        blocks = blocks + (block,)
    return replace(state, cursor=block.end_minute, last_kind=block.kind, blocks=blocks, **changes)


def _choose_kind(state: SweepState, gap: int, config: ScheduleConfig) -> BlockKind:
    if state.last_kind is not None and state.last_kind.is_exertion:
        lunch_start, lunch_end = config.lunch_window
        if not state.lunch_placed and lunch_start <= state.cursor < lunch_end:
            return BlockKind.LUNCH
        if gap >= config.wellness_gap_minutes:
            return BlockKind.WELLNESS
        return BlockKind.BREAK
    if state.remaining_focus > 0:
        if gap >= config.min_focus_minutes:
            return BlockKind.FOCUS
        # Too short to focus: stretch the current rest.
        if state.last_kind in (BlockKind.BREAK, BlockKind.WELLNESS):
            return state.last_kind
        return BlockKind.BREAK
    return BlockKind.HOBBY


def step(state: SweepState, date_key: str, events: list[DayEvent], config: ScheduleConfig) -> SweepState:
    """Advance the sweep by one block."""
    pending = events[state.event_index] if state.event_index < len(events) else None

    if pending is not None and pending.start_minute == state.cursor:
        block = _make_block(
            date_key, BlockKind.MEETING, pending.start_minute, pending.duration_minutes, config,
            label=pending.summary,
        )
        return _emit(state, block, event_index=state.event_index + 1)

    gap_end = pending.start_minute if pending is not None else config.day_end
    gap = gap_end - state.cursor
    kind = _choose_kind(state, gap, config)

    cap = KIND_POLICY[kind].cap(config, state.cursor)
    duration = min(gap, cap)
    if kind is BlockKind.FOCUS:
        duration = min(duration, state.remaining_focus)

    block = _make_block(date_key, kind, state.cursor, duration, config)
    if kind is BlockKind.FOCUS:
        return _emit(state, block, remaining_focus=state.remaining_focus - duration)
    if kind is BlockKind.LUNCH:
        return _emit(state, block, lunch_placed=True)
    return _emit(state, block)


# ── Validation ────────────────────────────────────────────────


def _validate(events: list[DayEvent], config: ScheduleConfig) -> None:
    if not 0 <= config.day_start <= MINUTES_PER_DAY or not 0 <= config.day_end <= MINUTES_PER_DAY:
        raise InputError(f"Day bounds out of range: {config.day_start}-{config.day_end}")
    if config.day_start > config.day_end:
        raise InputError(f"Day starts after it ends: {config.day_start} > {config.day_end}")
    if config.focus_goal_minutes < 0:
        raise InputError(f"Focus goal must be >= 0, got {config.focus_goal_minutes}")
    for name in (
        "short_break_minutes", "long_break_minutes", "wellness_break_minutes",
        "hobby_block_minutes", "peak_focus_cap", "off_peak_focus_cap", "min_focus_minutes",
    ):
        if getattr(config, name) < 1:
            raise InputError(f"{name} must be >= 1")

    previous: DayEvent | None = None
    for event in events:
        if event.duration_minutes <= 0:
            raise InputError(f"Event {event.summary!r} has non-positive duration")
        if event.start_minute < config.day_start or event.end_minute > config.day_end:
            raise InputError(
                f"Event {event.summary!r} ({event.start_minute}-{event.end_minute}) "
                f"is outside the day {config.day_start}-{config.day_end}"
            )
        if previous is not None and event.start_minute < previous.end_minute:
            raise InputError(f"Events {previous.summary!r} and {event.summary!r} overlap or are unsorted")
        previous = event


def verify_schedule(blocks: list[ScheduleBlock], events: list[DayEvent], config: ScheduleConfig) -> None:
    """Raise ScheduleDefect unless *blocks* is a contiguous, in-bounds day plan."""
    cursor = config.day_start
    for b in blocks:
        if b.duration_minutes <= 0:
            raise ScheduleDefect(f"Block {b.id} has non-positive duration")
        if b.start_minute != cursor:
            raise ScheduleDefect(f"Block {b.id} starts at {b.start_minute}, expected {cursor}")
        cursor = b.end_minute
    if cursor != config.day_end and blocks:
        raise ScheduleDefect(f"Schedule ends at {cursor}, expected {config.day_end}")

    meetings = [(b.start_minute, b.end_minute, b.label) for b in blocks if b.kind is BlockKind.MEETING]
    expected = [(e.start_minute, e.end_minute, e.summary) for e in events]
    if meetings != expected:
        raise ScheduleDefect("Meeting blocks do not match the input events")


# ── Entry point ───────────────────────────────────────────────


def generate_blocks(date_key: str, events: list[DayEvent], config: ScheduleConfig) -> list[ScheduleBlock]:
    """Generate the ordered block list for one date.

    *events* must be sorted and non-overlapping and lie within the day;
    violations raise InputError. A zero-width day yields an empty list.
    """
    _validate(events, config)
    if config.day_start == config.day_end:
        return []

    state = initial_state(events, config)
    budget = len(events) + (config.day_end - config.day_start) + 1
    for _ in range(budget):
        if state.cursor >= config.day_end:
            break
        before = state.cursor
        state = step(state, date_key, events, config)
        if state.cursor <= before:
            raise ScheduleDefect(f"Sweep stalled at minute {before}")
    else:
        raise ScheduleDefect(f"Sweep did not finish within {budget} steps")

    blocks = list(state.blocks)
    verify_schedule(blocks, events, config)
    logger.debug(
        "Generated %d blocks for %s (%d focus minutes left unscheduled)",
        len(blocks), date_key, state.remaining_focus,
    )
    return blocks
