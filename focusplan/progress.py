"""Block progress for stepping through a day plan.

A BlockTimer counts one block down; Progress records which block ids are
done per date and which one is running. Ids are stable across regeneration
for blocks that did not move, so completion survives settings tweaks.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from focusplan.fileio import read_json, write_json_atomic
from focusplan.models import DayPlan, Progress
from focusplan.workspace import progress_path, workspace_root


@dataclass
class BlockTimer:
    """Countdown for one block, in seconds."""

    block_id: str
    total_seconds: int
    seconds_left: int = -1
    running: bool = False

    def __post_init__(self) -> None:
        if self.seconds_left < 0:
            self.seconds_left = self.total_seconds

    @classmethod
    def for_block(cls, block_id: str, duration_minutes: int) -> BlockTimer:
        return cls(block_id=block_id, total_seconds=duration_minutes * 60)

    def start(self) -> None:
        if self.seconds_left > 0:
            self.running = True

    def pause(self) -> None:
        self.running = False

    def toggle(self) -> None:
        if self.running:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        self.seconds_left = self.total_seconds
        self.running = False

    def tick(self, seconds: int = 1) -> bool:
        """Count down while running. Returns True on the tick that reaches zero."""
        if not self.running or self.seconds_left <= 0:
            return False
        self.seconds_left = max(0, self.seconds_left - seconds)
        if self.seconds_left == 0:
            self.running = False
            return True
        return False

    @property
    def finished(self) -> bool:
        return self.seconds_left == 0

    def display(self) -> str:
        m, s = divmod(self.seconds_left, 60)
        return f"{m:02d}:{s:02d}"


# ── Storage ───────────────────────────────────────────────────


def load_progress(root: Path | None = None) -> Progress:
    if root is None:
        root = workspace_root()
    return Progress.from_dict(read_json(progress_path(root)))


def save_progress(progress: Progress, root: Path | None = None) -> None:
    if root is None:
        root = workspace_root()
    write_json_atomic(progress_path(root), progress.to_dict())


def next_block_id(plan: DayPlan, block_id: str) -> str | None:
    """Id of the block after *block_id*, or None at the end of the day."""
    ids = [b.id for b in plan.blocks]
    if block_id not in ids:
        return None
    i = ids.index(block_id)
    return ids[i + 1] if i + 1 < len(ids) else None


def set_active(date_key: str, block_id: str | None, root: Path | None = None) -> Progress:
    progress = load_progress(root)
    progress.active_date = date_key if block_id else None
    progress.active_block = block_id
    save_progress(progress, root)
    return progress


def complete_block(plan: DayPlan, block_id: str, root: Path | None = None) -> str | None:
    """Mark *block_id* done for the plan's date; the next block becomes active.

    Returns the next block id (None when the day is finished).
    Raises KeyError if the block is not part of the plan.
    """
    if plan.find_block(block_id) is None:
        raise KeyError(block_id)
    progress = load_progress(root)
    done = progress.completed.setdefault(plan.date, [])
    if block_id not in done:
        done.append(block_id)
    following = next_block_id(plan, block_id)
    progress.active_date = plan.date if following else None
    progress.active_block = following
    save_progress(progress, root)
    return following
