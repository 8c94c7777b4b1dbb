#!/usr/bin/env python3
"""Sanctum TUI — streak, weekly prayer minutes, plans and sealed letters."""

from __future__ import annotations

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import DataTable, Footer, Header, Input, Label, Static

from sanctum import EngagementFacade, SanctumError
from sanctum.logger import setup_logging


BAR_WIDTH = 30


CSS = """
Screen {
    background: $surface;
}

#streak-bar {
    dock: top;
    height: 3;
    background: $primary-background;
    color: $warning;
    text-style: bold;
    content-align: center middle;
    padding: 0 2;
}

#left-pane {
    width: 1fr;
    min-width: 30;
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

#weekly-chart {
    height: auto;
    padding: 0 1;
}

#minutes-input {
    margin: 1 0 0 0;
}

#status-bar {
    dock: bottom;
    height: 1;
    background: $primary-background;
    color: $text-muted;
    padding: 0 2;
}
"""


def render_weekly_chart(days: list[dict], total: float) -> str:
    peak = max((d["minutes"] for d in days), default=0) or 1
    lines = []
    for d in days:
        width = int(round(BAR_WIDTH * d["minutes"] / peak))
        lines.append(f"{d['name']}  {'█' * width:<{BAR_WIDTH}} {d['minutes']:g} min")
    lines.append(f"\nThis week: {total:g} min")
    return "\n".join(lines)


class SanctumApp(App):
    """Sanctum — engagement dashboard."""

    TITLE = "Sanctum"
    CSS = CSS

    BINDINGS = [
        Binding("p", "record_prayer", "Prayed today"),
        Binding("r", "refresh", "Refresh"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, facade: EngagementFacade | None = None) -> None:
        super().__init__()
        self.facade = facade or EngagementFacade.from_workspace()

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(id="streak-bar")
        yield Horizontal(
            VerticalScroll(
                Label("Verse of the day", classes="section-title"),
                Static(id="verse"),
                Label("This week", classes="section-title"),
                Static(id="weekly-chart"),
                Input(placeholder="minutes prayed today, then Enter", id="minutes-input"),
                id="left-pane",
            ),
            Vertical(
                Label("Plans", classes="section-title"),
                DataTable(id="plans-table"),
                Label("Sealed letters", classes="section-title"),
                DataTable(id="sealed-table"),
                id="right-pane",
            ),
        )
        yield Static(id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#plans-table", DataTable).add_columns("Plan", "Kind", "Day", "Done", "%")
        self.query_one("#sealed-table", DataTable).add_columns("ID", "Status", "Opens in")
        self.action_refresh()

    def _status(self, msg: str) -> None:
        self.query_one("#status-bar", Static).update(msg)

    def action_refresh(self) -> None:
        try:
            streak = self.facade.current_streak_summary()
            weekly = self.facade.weekly_summary().to_dict()
            plan_rows = self.facade.list_plans()
            sealed_rows = self.facade.list_sealed()
        except SanctumError as e:
            self._status(f"Couldn't load: {e}")
            return

        flame = "🔥 " if streak["isAlive"] else ""
        self.query_one("#streak-bar", Static).update(
            f"{flame}Streak {streak['currentStreak']}  ·  best {streak['longestStreak']}"
            f"  ·  {streak['totalEngagedDays']} days  ·  next milestone {streak['nextMilestone']}"
        )
        verse = self.facade.daily_verse()
        self.query_one("#verse", Static).update(f"{verse.get('text', '')}\n— {verse.get('reference', '')}")
        self.query_one("#weekly-chart", Static).update(
            render_weekly_chart(weekly["days"], weekly["totalMinutes"])
        )

        plans_table = self.query_one("#plans-table", DataTable)
        plans_table.clear()
        for p in plan_rows:
            plans_table.add_row(
                p.get("title", p["planId"]),
                p["kind"],
                f"{p['currentDay']}/{p['totalDays']}",
                "yes" if p["isCompleted"] else "",
                f"{p['progressPercent']:g}",
            )

        sealed_table = self.query_one("#sealed-table", DataTable)
        sealed_table.clear()
        for s in sealed_rows:
            opens = f"{s['daysRemaining']} day(s)" if s["status"] == "sealed" else "-"
            sealed_table.add_row(s["id"][:8], s["status"], opens)

    def action_record_prayer(self) -> None:
        self._record(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        text = event.value.strip()
        if not text:
            return
        try:
            minutes = float(text)
        except ValueError:
            self._status(f"Not a number of minutes: {text!r}")
            return
        event.input.value = ""
        self._record(minutes)

    def _record(self, minutes: float | None) -> None:
        try:
            state = self.facade.record_engagement_today(duration_minutes=minutes)
        except (SanctumError, ValueError) as e:
            self._status(f"Couldn't save, try again ({e})")
            return
        self._status(f"Recorded. Current streak: {state.current_streak}")
        self.action_refresh()


def main() -> None:
    setup_logging()
    SanctumApp().run()


if __name__ == "__main__":
    main()
