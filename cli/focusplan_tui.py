#!/usr/bin/env python3
"""FocusPlan TUI — step through the day's blocks with countdown timers, powered by Textual."""

from __future__ import annotations

import logging
import sys

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import DataTable, Footer, Header, Label, Static

from focusplan import (
    BlockTimer,
    DayPlan,
    PlannerError,
    adjust_focus,
    complete_block,
    format_12h,
    format_duration,
    load_progress,
    load_settings,
    plan_for_date,
    reset_adjustment,
    set_active,
    week_days,
    workspace_root,
)


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

#main-layout {
    height: 1fr;
}

#left-pane {
    width: 2fr;
    min-width: 40;
    border-right: tall $primary-background-darken-2;
    padding: 0 1;
}

#right-pane {
    width: 1fr;
    min-width: 30;
    padding: 0 1;
}

.section-title {
    text-style: bold;
    color: $text;
    margin: 1 0 0 0;
    padding: 0 1;
}

#days-bar {
    height: auto;
    padding: 0 1;
    color: $text-muted;
}

#schedule-table {
    height: 1fr;
}

#timer-label {
    text-style: bold;
    padding: 0 1;
}

#timer-display {
    height: 5;
    content-align: center middle;
    text-style: bold;
    color: $warning;
    border: tall $primary-background-darken-2;
}

#goal-info {
    height: auto;
    padding: 1 1;
    color: $text-muted;
}
"""


KIND_MARKS = {
    "focus": "●",
    "meeting": "■",
    "break": "·",
    "wellness": "~",
    "lunch": "◆",
    "hobby": "♪",
}


class FocusPlanApp(App):
    """FocusPlan — daily timeline with per-block timers."""

    TITLE = "FocusPlan"
    CSS = CSS
    AUTO_FOCUS = "#schedule-table"

    BINDINGS = [
        Binding("space", "toggle_timer", "Start/Pause"),
        Binding("r", "reset_timer", "Reset"),
        Binding("n", "complete_block", "Done/Next"),
        Binding("left_square_bracket", "prev_day", "Prev day"),
        Binding("right_square_bracket", "next_day", "Next day"),
        Binding("a", "add_focus", "Add focus"),
        Binding("x", "reduce_focus", "Reduce focus"),
        Binding("0", "reset_adjustment", "Reset goal"),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._days = week_days()
        self._day_index = 0
        self._plan: DayPlan | None = None
        self._timer: BlockTimer | None = None
        self._muted = False

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            Vertical(
                Static(id="days-bar"),
                Label("Schedule", classes="section-title"),
                DataTable(id="schedule-table", cursor_type="row", zebra_stripes=True),
                id="left-pane",
            ),
            Vertical(
                Label("Timer", classes="section-title"),
                Static(id="timer-label"),
                Static("--:--", id="timer-display"),
                Static(id="goal-info"),
                id="right-pane",
            ),
            id="main-layout",
        )
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#schedule-table", DataTable)
        table.add_columns("", "Start", "Block", "Length", "Status")
        self._load_plan()
        self.set_interval(1, self._tick)

    # ── Data ───────────────────────────────────────────────────

    @property
    def _date(self) -> str:
        return self._days[self._day_index]["date"]

    def _load_plan(self) -> None:
        """(Re)generate the selected day's plan and refresh every widget."""
        try:
            self._muted = load_settings().is_muted
            self._plan = plan_for_date(self._date)
        except PlannerError as e:
            self._plan = None
            self.notify(str(e), title="Cannot plan day", severity="error")
        self._render_days()
        self._render_table()
        self._render_goal()

        progress = load_progress()
        if self._timer and self._plan and self._plan.find_block(self._timer.block_id):
            return
        if progress.active_date == self._date and progress.active_block:
            self._select_block(progress.active_block, autostart=False)
        else:
            self._timer = None
            self._render_timer()

    def _render_days(self) -> None:
        parts = []
        for i, d in enumerate(self._days):
            text = f"{d['weekday']} {d['day']}{'•' if d['hasEvents'] else ''}"
            parts.append(f"[b reverse] {text} [/]" if i == self._day_index else f" {text} ")
        self.query_one("#days-bar", Static).update(" ".join(parts))
        self.sub_title = self._days[self._day_index]["label"]

    def _render_table(self) -> None:
        table = self.query_one("#schedule-table", DataTable)
        table.clear()
        if self._plan is None:
            return
        progress = load_progress()
        for b in self._plan.blocks:
            if progress.is_completed(self._plan.date, b.id):
                state = "done"
            elif self._timer and self._timer.block_id == b.id:
                state = "running" if self._timer.running else "paused"
            else:
                state = ""
            table.add_row(
                KIND_MARKS.get(b.kind.value, " "),
                format_12h(b.start_minute),
                b.label,
                format_duration(b.duration_minutes),
                state,
                key=b.id,
            )

    def _render_goal(self) -> None:
        widget = self.query_one("#goal-info", Static)
        if self._plan is None or self._plan.goal_status is None:
            widget.update("")
            return
        goal = self._plan.goal_status
        lines = [
            f"Focus scheduled: {format_duration(goal.scheduled_minutes)}",
            f"Goal: {format_duration(goal.goal_minutes)}",
        ]
        if self._plan.adjustment_minutes:
            lines.append(
                f"Adjustment today: {self._plan.adjustment_minutes:+d} min "
                f"(stated goal {format_duration(self._plan.stated_goal_minutes)})"
            )
        if goal.on_target:
            lines.append("On target.")
        elif goal.suggestion == "add":
            lines.append(f"Short by {-goal.difference} min — press 'a' to add focus.")
        else:
            lines.append(f"Over by {goal.difference} min — press 'x' to reduce focus.")
        widget.update("\n".join(lines))

    def _render_timer(self) -> None:
        label = self.query_one("#timer-label", Static)
        display = self.query_one("#timer-display", Static)
        if self._timer is None or self._plan is None:
            label.update("Select a block and press space.")
            display.update("--:--")
            return
        block = self._plan.find_block(self._timer.block_id)
        label.update(block.label if block else "")
        suffix = "" if self._timer.running else "  (paused)"
        display.update(f"{self._timer.display()}{suffix}")

    # ── Timer ──────────────────────────────────────────────────

    def _select_block(self, block_id: str, autostart: bool) -> None:
        if self._plan is None:
            return
        block = self._plan.find_block(block_id)
        if block is None:
            return
        self._timer = BlockTimer.for_block(block.id, block.duration_minutes)
        if autostart:
            self._timer.start()
        set_active(self._date, block.id)
        self._render_table()
        self._render_timer()

    def _highlighted_block_id(self) -> str | None:
        if self._plan is None or not self._plan.blocks:
            return None
        table = self.query_one("#schedule-table", DataTable)
        row = min(max(table.cursor_row, 0), len(self._plan.blocks) - 1)
        return self._plan.blocks[row].id

    def _tick(self) -> None:
        if self._timer is None or not self._timer.running:
            return
        if self._timer.tick():
            if not self._muted:
                self.bell()
            self._advance(autostart=True)
        else:
            self._render_timer()

    def _advance(self, autostart: bool) -> None:
        """Complete the timed block and move on to the next one."""
        if self._timer is None or self._plan is None:
            return
        finished = self._timer.block_id
        following = complete_block(self._plan, finished)
        if following is None:
            self._timer = None
            self.notify("That was the last block of the day.", title="Day complete")
            self._render_table()
            self._render_timer()
            return
        self._select_block(following, autostart=autostart)

    # ── Actions ────────────────────────────────────────────────

    def action_toggle_timer(self) -> None:
        selected = self._highlighted_block_id()
        if selected is None:
            return
        if self._timer is None or self._timer.block_id != selected:
            self._select_block(selected, autostart=True)
            return
        self._timer.toggle()
        self._render_table()
        self._render_timer()

    def action_reset_timer(self) -> None:
        if self._timer is not None:
            self._timer.reset()
            self._render_table()
            self._render_timer()

    def action_complete_block(self) -> None:
        if self._timer is None:
            selected = self._highlighted_block_id()
            if selected is None:
                return
            self._select_block(selected, autostart=False)
        self._advance(autostart=False)

    def action_prev_day(self) -> None:
        if self._day_index > 0:
            self._day_index -= 1
            self._timer = None
            self._load_plan()

    def action_next_day(self) -> None:
        if self._day_index < len(self._days) - 1:
            self._day_index += 1
            self._timer = None
            self._load_plan()

    def _adjust(self, direction: str) -> None:
        try:
            adjust_focus(self._date, direction)
        except PlannerError as e:
            self.notify(str(e), title="Adjustment failed", severity="error")
            return
        self._load_plan()

    def action_add_focus(self) -> None:
        self._adjust("add")

    def action_reduce_focus(self) -> None:
        self._adjust("reduce")

    def action_reset_adjustment(self) -> None:
        try:
            reset_adjustment(self._date)
        except PlannerError as e:
            self.notify(str(e), title="Reset failed", severity="error")
            return
        self._load_plan()

    def action_quit_app(self) -> None:
        self.exit()

    @on(DataTable.RowSelected, "#schedule-table")
    def _on_row_selected(self, event: DataTable.RowSelected) -> None:
        if event.row_key.value:
            self._select_block(event.row_key.value, autostart=True)


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    logging.basicConfig(level=logging.WARNING)
    root = workspace_root()
    if not root.exists():
        print(f"Workspace not found: {root}")
        print("Set FOCUSPLAN_ROOT or create the directory first.")
        sys.exit(1)

    app = FocusPlanApp()
    app.run()


if __name__ == "__main__":
    main()
