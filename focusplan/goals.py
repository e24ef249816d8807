"""Focus goal tracking and per-date goal adjustments."""

from __future__ import annotations

from pathlib import Path

from focusplan.errors import InputError
from focusplan.fileio import read_json, write_json_atomic
from focusplan.models import BlockKind, GoalStatus, ScheduleBlock
from focusplan.workspace import adjustments_path, workspace_root

ON_TARGET_THRESHOLD = 15
MIN_INCREMENT = 60

GOAL_KINDS = frozenset({BlockKind.FOCUS, BlockKind.MEETING})


def scheduled_focus_minutes(blocks: list[ScheduleBlock]) -> int:
    """Minutes of focus and meeting blocks."""
    return sum(b.duration_minutes for b in blocks if b.kind in GOAL_KINDS)


def adjustment_increment(difference: int) -> int:
    """Whole hours nearest to |difference|, at least one hour. Always positive."""
    hours = int((abs(difference) + 30) // 60)
    return max(MIN_INCREMENT, hours * 60)


def evaluate_goal(
    blocks: list[ScheduleBlock],
    goal_minutes: int,
    threshold: int = ON_TARGET_THRESHOLD,
) -> GoalStatus:
    """Compare scheduled focus to the stated goal.

    Within *threshold* minutes the day is on target. Otherwise the status
    carries a suggestion: "add" (shortfall) or "reduce" (excess), with the
    signed number of minutes to apply to that date's effective goal.
    """
    scheduled = scheduled_focus_minutes(blocks)
    difference = scheduled - goal_minutes
    if abs(difference) < threshold:
        return GoalStatus(scheduled, goal_minutes, difference, on_target=True)
    increment = adjustment_increment(difference)
    if difference < 0:
        return GoalStatus(scheduled, goal_minutes, difference, False, "add", increment)
    return GoalStatus(scheduled, goal_minutes, difference, False, "reduce", -increment)


def effective_goal(base_minutes: int, adjustments: dict[str, int], date_key: str) -> int:
    return max(0, base_minutes + adjustments.get(date_key, 0))


def apply_adjustment(adjustments: dict[str, int], date_key: str, delta: int) -> dict[str, int]:
    """Return a new mapping with *delta* added to *date_key*'s adjustment.

    A resulting zero adjustment removes the key.
    """
    updated = dict(adjustments)
    total = updated.get(date_key, 0) + delta
    if total:
        updated[date_key] = total
    else:
        updated.pop(date_key, None)
    return updated


def clear_adjustment(adjustments: dict[str, int], date_key: str) -> dict[str, int]:
    return {k: v for k, v in adjustments.items() if k != date_key}


# ── Storage ───────────────────────────────────────────────────


def load_adjustments(root: Path | None = None) -> dict[str, int]:
    if root is None:
        root = workspace_root()
    data = read_json(adjustments_path(root))
    if not isinstance(data, dict):
        return {}
    out = {}
    for k, v in data.items():
        try:
            out[str(k)] = int(v)
        except (TypeError, ValueError):
            raise InputError(f"Invalid adjustment for {k}: {v!r}") from None
    return out


def save_adjustments(adjustments: dict[str, int], root: Path | None = None) -> None:
    if root is None:
        root = workspace_root()
    write_json_atomic(adjustments_path(root), dict(sorted(adjustments.items())))
