"""Rich terminal formatting helpers."""

from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn, TimeRemainingColumn
from rich.table import Table
from rich.text import Text
from rich.theme import Theme as RichTheme

from doable.models import Achievement, StatusSummary, Task, Theme

# Named styles used below. SYSTEM keeps the terminal's own palette; LIGHT
# and DARK pick colours that stay readable on that background.
PALETTES: dict[Theme, dict[str, str]] = {
    Theme.SYSTEM: {
        "doable.info": "blue",
        "doable.success": "green",
        "doable.warning": "yellow",
        "doable.danger": "bold red",
        "doable.muted": "dim",
        "doable.accent": "magenta",
        "doable.done": "bold green",
    },
    Theme.LIGHT: {
        "doable.info": "blue3",
        "doable.success": "dark_green",
        "doable.warning": "dark_orange3",
        "doable.danger": "bold red3",
        "doable.muted": "grey50",
        "doable.accent": "dark_magenta",
        "doable.done": "bold dark_green",
    },
    Theme.DARK: {
        "doable.info": "bright_cyan",
        "doable.success": "bright_green",
        "doable.warning": "bright_yellow",
        "doable.danger": "bold bright_red",
        "doable.muted": "grey62",
        "doable.accent": "bright_magenta",
        "doable.done": "bold bright_green",
    },
}

console = Console(theme=RichTheme(PALETTES[Theme.SYSTEM]))
_active_theme = Theme.SYSTEM


def apply_theme(theme: Theme) -> None:
    """Switch the console to the palette for *theme*."""
    global _active_theme
    if theme is _active_theme:
        return
    if _active_theme is not Theme.SYSTEM:
        console.pop_theme()
    if theme is not Theme.SYSTEM:
        console.push_theme(RichTheme(PALETTES[theme]))
    _active_theme = theme


def _task_icon(task: Task, now: datetime) -> str:
    if task.is_completed:
        return "[x]"
    if task.is_overdue(now):
        return "[!]"
    return "[ ]"


def _task_style(task: Task, now: datetime) -> str:
    if task.is_completed:
        return "doable.success"
    if task.is_overdue(now):
        return "doable.danger"
    return ""


def _task_detail(task: Task) -> str:
    parts: list[str] = []
    if task.scheduled_time is not None and not task.is_completed:
        parts.append(task.scheduled_time.strftime("%a %d %b %H:%M"))
    if task.completed_with_timer and task.timer_duration_seconds:
        m, s = divmod(task.timer_duration_seconds, 60)
        parts.append(f"timer {m:02d}:{s:02d}")
    if task.category:
        parts.append(f"#{task.category}")
    return "  ".join(parts)


def print_task_list(
    tasks: list[Task], title: str = "Tasks", now: Optional[datetime] = None
) -> None:
    """Print a list of tasks in a panel."""
    if not tasks:
        console.print(Panel("No tasks.", title=title, border_style="doable.muted"))
        return

    now = now or datetime.now()
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("status", width=3)
    table.add_column("id", width=5)
    table.add_column("title")
    table.add_column("detail", style="doable.muted")

    for task in tasks:
        table.add_row(
            escape(_task_icon(task, now)),
            f"#{task.id}",
            escape(task.title),
            _task_detail(task),
            style=_task_style(task, now),
        )

    console.print(Panel(table, title=title, border_style="doable.info"))


def print_status(summary: StatusSummary) -> None:
    """Print the statistics dashboard."""
    hours, rest = divmod(summary.total_focus_seconds, 3600)
    lines: list[str] = [
        f"Open: {summary.open_count}",
        f"Done today: {summary.completed_today}",
        f"Overdue: {summary.overdue_count}",
        "",
        f"Streak: {summary.streak_days} day{'s' if summary.streak_days != 1 else ''}",
        f"Focus time: {hours}h {rest // 60:02d}m",
    ]
    console.print(Panel("\n".join(lines), title="Status", border_style="doable.success"))

    if summary.overdue_tasks:
        print_task_list(summary.overdue_tasks, title="Overdue")


def print_history(history: dict[date, list[Task]]) -> None:
    """Print completed tasks grouped by day."""
    if not history:
        console.print(Panel("Nothing here yet.", title="History", border_style="doable.muted"))
        return
    for day, tasks in history.items():
        print_task_list(tasks, title=day.strftime("%d %b %Y"))


def print_calendar(year: int, month: int, counts: dict[date, int]) -> None:
    """Print a month grid; days with completions are highlighted."""
    table = Table(title=f"{calendar.month_name[month]} {year}", box=None)
    for name in calendar.day_abbr:
        table.add_column(name[:2], justify="right")

    for week in calendar.Calendar().monthdayscalendar(year, month):
        cells: list[str] = []
        for day in week:
            if day == 0:
                cells.append("")
                continue
            done = counts.get(date(year, month, day), 0)
            cells.append(f"[doable.done]{day}[/]" if done else f"[doable.muted]{day}[/]")
        table.add_row(*cells)

    console.print(table)


def print_achievements(achievements: list[Achievement]) -> None:
    """Print all achievements, unlocked ones first."""
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("badge", width=3)
    table.add_column("title")
    table.add_column("text")
    for ach in sorted(achievements, key=lambda a: not a.unlocked):
        if ach.unlocked:
            table.add_row(
                "[*]", f"[bold]{ach.title}[/bold]", ach.description, style="doable.success"
            )
        else:
            table.add_row("[ ]", ach.title, ach.unlock_hint, style="doable.muted")
    console.print(Panel(table, title="Achievements", border_style="doable.accent"))


def print_nudge(message: str) -> None:
    """Print an encouragement message in a styled panel."""
    text = Text(message, justify="center")
    console.print(Panel(text, border_style="doable.accent", padding=(1, 4)))


def print_disappointment(title: str, message: str) -> None:
    """Print the message shown after an abandoned timer run."""
    text = Text(message, justify="center")
    console.print(Panel(text, title=title, border_style="doable.danger", padding=(1, 4)))


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[doable.success]{escape(message)}[/]")


def print_info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[doable.info]{escape(message)}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[doable.warning]{escape(message)}[/]")


def create_timer_progress() -> Progress:
    """Create a Rich progress bar for the timer."""
    return Progress(
        TextColumn("[doable.info]{task.description}"),
        BarColumn(bar_width=40),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeRemainingColumn(),
        console=console,
    )
