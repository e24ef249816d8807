"""Typed dataclasses for the FocusPlan data model.

Persisted models use from_dict/to_dict for JSON/YAML serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from focusplan.errors import InputError


# ── Primitives ────────────────────────────────────────────────


PERIODS = ("AM", "PM")


@dataclass(frozen=True)
class ClockTime:
    """A 12-hour wall clock reading: hour 1..12, minute 0..59, AM/PM."""

    hour: int
    minute: int
    period: str

    def __post_init__(self) -> None:
        if not 1 <= self.hour <= 12:
            raise InputError(f"Hour must be 1-12, got {self.hour}")
        if not 0 <= self.minute <= 59:
            raise InputError(f"Minute must be 0-59, got {self.minute}")
        if self.period not in PERIODS:
            raise InputError(f"Period must be AM or PM, got {self.period!r}")

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ClockTime:
        """Parse {'hour': '08', 'minute': '00', 'period': 'AM'} (strings or ints)."""
        try:
            hour = int(d["hour"])
            minute = int(d["minute"])
        except (KeyError, TypeError, ValueError) as e:
            raise InputError(f"Invalid clock time: {d!r}") from e
        return cls(hour=hour, minute=minute, period=str(d.get("period", "")).upper())

    def to_dict(self) -> dict[str, str]:
        return {"hour": f"{self.hour:02d}", "minute": f"{self.minute:02d}", "period": self.period}


# ── Calendar ──────────────────────────────────────────────────


@dataclass(frozen=True)
class CalendarEvent:
    """An imported calendar event, keyed to one calendar day."""

    summary: str
    start_time: str  # HH:MM, 24-hour
    end_time: str  # HH:MM, 24-hour
    duration_minutes: int
    date: str  # YYYYMMDD

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> CalendarEvent:
        return cls(
            summary=str(d.get("summary", "") or "Untitled Event"),
            start_time=str(d.get("startTime", "00:00")),
            end_time=str(d.get("endTime", "00:00")),
            duration_minutes=int(d.get("durationMinutes", 0) or 0),
            date=str(d.get("date", "")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "durationMinutes": self.duration_minutes,
            "date": self.date,
        }


@dataclass(frozen=True)
class DayEvent:
    """A calendar event resolved to a minute-of-day interval."""

    summary: str
    start_minute: int
    end_minute: int

    @property
    def duration_minutes(self) -> int:
        return self.end_minute - self.start_minute

    def overlaps(self, other: DayEvent) -> bool:
        return self.start_minute < other.end_minute and other.start_minute < self.end_minute


# ── Schedule ──────────────────────────────────────────────────


class BlockKind(str, Enum):
    FOCUS = "focus"
    MEETING = "meeting"
    BREAK = "break"
    WELLNESS = "wellness"
    LUNCH = "lunch"
    HOBBY = "hobby"

    @property
    def is_exertion(self) -> bool:
        return self in EXERTION_KINDS

    @property
    def is_rest(self) -> bool:
        return not self.is_exertion


EXERTION_KINDS = frozenset({BlockKind.FOCUS, BlockKind.MEETING})
REST_KINDS = frozenset(BlockKind) - EXERTION_KINDS


@dataclass(frozen=True)
class ScheduleBlock:
    id: str
    kind: BlockKind
    label: str
    start_minute: int
    duration_minutes: int
    sub_label: str = ""
    color_hint: str = ""

    @property
    def end_minute(self) -> int:
        return self.start_minute + self.duration_minutes

    def to_dict(self) -> dict[str, Any]:
        from focusplan.clock import format_12h

        return {
            "id": self.id,
            "kind": self.kind.value,
            "label": self.label,
            "subLabel": self.sub_label,
            "startTime": format_12h(self.start_minute),
            "startMinute": self.start_minute,
            "durationMinutes": self.duration_minutes,
            "color": self.color_hint,
        }


@dataclass(frozen=True)
class ScheduleConfig:
    """Inputs to one generation call. Built fresh per call, never persisted."""

    day_start: int
    day_end: int
    focus_goal_minutes: int
    peak_range: tuple[int, int] = (420, 720)
    short_break_minutes: int = 5
    long_break_minutes: int = 30
    wellness_break_minutes: int = 15
    hobby_block_minutes: int = 60
    peak_focus_cap: int = 90
    off_peak_focus_cap: int = 45
    min_focus_minutes: int = 20
    wellness_gap_minutes: int = 90
    lunch_window: tuple[int, int] = (780, 840)
    count_meetings_toward_goal: bool = False


@dataclass(frozen=True)
class GoalStatus:
    scheduled_minutes: int
    goal_minutes: int
    difference: int  # scheduled - goal
    on_target: bool
    suggestion: str | None = None  # "add", "reduce"
    suggested_minutes: int = 0  # signed

    def to_dict(self) -> dict[str, Any]:
        return {
            "scheduledMinutes": self.scheduled_minutes,
            "goalMinutes": self.goal_minutes,
            "difference": self.difference,
            "onTarget": self.on_target,
            "suggestion": self.suggestion,
            "suggestedMinutes": self.suggested_minutes,
        }


@dataclass
class DayPlan:
    date: str = ""
    day_start: int = 0
    day_end: int = 0
    blocks: list[ScheduleBlock] = field(default_factory=list)
    goal_status: GoalStatus | None = None
    stated_goal_minutes: int = 0
    effective_goal_minutes: int = 0
    adjustment_minutes: int = 0

    def find_block(self, block_id: str) -> ScheduleBlock | None:
        for b in self.blocks:
            if b.id == block_id:
                return b
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "dayStart": self.day_start,
            "dayEnd": self.day_end,
            "blocks": [b.to_dict() for b in self.blocks],
            "goalStatus": self.goal_status.to_dict() if self.goal_status else None,
            "statedGoalMinutes": self.stated_goal_minutes,
            "effectiveGoalMinutes": self.effective_goal_minutes,
            "adjustmentMinutes": self.adjustment_minutes,
        }


# ── Settings ──────────────────────────────────────────────────


PEAK_WINDOW_NAMES = ("Morning", "Afternoon", "Evening", "Late Night")


@dataclass
class Settings:
    start_time: ClockTime = field(default_factory=lambda: ClockTime(8, 0, "AM"))
    end_time: ClockTime = field(default_factory=lambda: ClockTime(6, 0, "PM"))
    focus_goal_hours: float = 7
    peak_window: str = "Morning"
    short_break: int = 5
    long_break: int = 30
    is_muted: bool = False
    timezone: str = "UTC"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        defaults = cls()
        start = d.get("startTime")
        end = d.get("endTime")
        try:
            focus_goal_hours = float(d.get("focusGoal", defaults.focus_goal_hours))
            short_break = int(d.get("shortBreak", defaults.short_break))
            long_break = int(d.get("longBreak", defaults.long_break))
        except (TypeError, ValueError) as e:
            raise InputError(f"Invalid settings: {e}") from e
        return cls(
            start_time=ClockTime.from_dict(start) if isinstance(start, dict) else defaults.start_time,
            end_time=ClockTime.from_dict(end) if isinstance(end, dict) else defaults.end_time,
            focus_goal_hours=focus_goal_hours,
            peak_window=str(d.get("peakWindow", defaults.peak_window)),
            short_break=short_break,
            long_break=long_break,
            is_muted=bool(d.get("isMuted", False)),
            timezone=str(d.get("timezone", defaults.timezone)),
        )

    def to_dict(self) -> dict[str, Any]:
        goal = self.focus_goal_hours
        return {
            "startTime": self.start_time.to_dict(),
            "endTime": self.end_time.to_dict(),
            "focusGoal": int(goal) if float(goal).is_integer() else goal,
            "peakWindow": self.peak_window,
            "shortBreak": self.short_break,
            "longBreak": self.long_break,
            "isMuted": self.is_muted,
            "timezone": self.timezone,
        }

    @property
    def focus_goal_minutes(self) -> int:
        return int(round(self.focus_goal_hours * 60))


# ── Progress ──────────────────────────────────────────────────


@dataclass
class Progress:
    """Per-date completed block ids plus the block currently being timed."""

    completed: dict[str, list[str]] = field(default_factory=dict)
    active_date: str | None = None
    active_block: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Progress:
        if not d or not isinstance(d, dict):
            return cls()
        completed = {}
        for day, ids in (d.get("completed") or {}).items():
            if isinstance(ids, list):
                completed[str(day)] = [str(i) for i in ids]
        return cls(
            completed=completed,
            active_date=d.get("activeDate"),
            active_block=d.get("activeBlock"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "completed": self.completed,
            "activeDate": self.active_date,
            "activeBlock": self.active_block,
        }

    def is_completed(self, day: str, block_id: str) -> bool:
        return block_id in self.completed.get(day, [])
