"""Doable CLI -- a small to-do list that makes you earn your check marks."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import NoReturn, Optional

import typer
from pydantic import ValidationError
from rich.logging import RichHandler

from doable import db, display, encouragement, stats, timer
from doable.models import TaskCreate, TaskUpdate, Theme, TimerConfig

app = typer.Typer(
    name="doable",
    help="A to-do list that makes you earn your check marks.",
    no_args_is_help=True,
)

_DATETIME_FORMATS = ["%Y-%m-%d", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M", "%Y-%m-%dT%H:%M:%S"]

# Commands that either are the tour or may run before it.
_NO_TOUR_COMMANDS = ("welcome", "config")


def _conn() -> db.sqlite3.Connection:
    """Get a database connection (convenience wrapper)."""
    return db.get_connection()


def _not_found(conn: db.sqlite3.Connection, task_id: int) -> NoReturn:
    display.print_warning(f"Task #{task_id} not found.")
    conn.close()
    raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """A to-do list that makes you earn your check marks."""
    from doable import config as cfg

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=display.console, show_path=False)],
        )

    settings = cfg.load_config()
    display.apply_theme(settings.theme)
    if not settings.onboarding_completed and ctx.invoked_subcommand not in _NO_TOUR_COMMANDS:
        _show_welcome()


# ---------------------------------------------------------------------------
# Task management
# ---------------------------------------------------------------------------


@app.command()
def add(
    title: str = typer.Argument(..., help="What do you need to do?"),
    at: Optional[datetime] = typer.Option(
        None, "--at", formats=_DATETIME_FORMATS, help="When it is due"
    ),
    notes: str = typer.Option("", "--notes", help="Extra notes"),
    category: str = typer.Option("", "--category", "-c", help="Category label"),
) -> None:
    """Add a new task."""
    try:
        task_in = TaskCreate(title=title, scheduled_time=at, notes=notes, category=category)
    except ValidationError:
        display.print_warning("A task needs a title between 1 and 500 characters.")
        raise typer.Exit(1)
    conn = _conn()
    task = db.add_task(conn, task_in)
    display.print_success(f"Added task #{task.id}: {task.title}")
    conn.close()


@app.command()
def edit(
    task_id: int = typer.Argument(..., help="ID of the task to edit"),
    title: Optional[str] = typer.Option(
        None, "--title", "-t", help="New title (empty deletes the task)"
    ),
    at: Optional[datetime] = typer.Option(
        None, "--at", formats=_DATETIME_FORMATS, help="New due time"
    ),
    clear_time: bool = typer.Option(False, "--clear-time", help="Remove the due time"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Replace the notes"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Replace the category"),
) -> None:
    """Edit a task."""
    conn = _conn()
    if db.get_task(conn, task_id) is None:
        _not_found(conn, task_id)

    try:
        changes = TaskUpdate(
            title=title,
            scheduled_time=at,
            clear_schedule=clear_time,
            notes=notes,
            category=category,
        )
    except ValidationError:
        display.print_warning("Titles are limited to 500 characters.")
        conn.close()
        raise typer.Exit(1)

    task = db.update_task(conn, task_id, changes)
    if task is None:
        display.print_info(f"Task #{task_id} had no title left and was removed.")
    else:
        display.print_success(f"Updated #{task.id}: {task.title}")
    conn.close()


@app.command()
def delete(task_id: int = typer.Argument(..., help="ID of the task to delete")) -> None:
    """Delete a task."""
    conn = _conn()
    if not db.delete_task(conn, task_id):
        _not_found(conn, task_id)
    display.print_success(f"Deleted task #{task_id}.")
    conn.close()


@app.command(name="list")
def list_tasks(
    all_tasks: bool = typer.Option(False, "--all", "-a", help="Include everything completed"),
) -> None:
    """List your tasks."""
    conn = _conn()
    display.print_task_list(db.list_open(conn), title="To do")
    if all_tasks:
        done = db.list_tasks(conn, completed=True)
        if done:
            display.print_task_list(done, title=f"Done ({len(done)})")
    else:
        done_today = db.list_completed_today(conn)
        if done_today:
            display.print_task_list(done_today, title=f"Done today ({len(done_today)})")
    conn.close()


@app.command()
def count() -> None:
    """Print the number of open tasks."""
    conn = _conn()
    display.console.print(str(db.count_open(conn)))
    conn.close()


@app.command()
def suggest() -> None:
    """Suggest a title for a new task."""
    display.print_info(encouragement.get_new_task_suggestion())


# ---------------------------------------------------------------------------
# Completion
# ---------------------------------------------------------------------------


@app.command()
def done(
    task_id: int = typer.Argument(..., help="ID of the task to complete"),
    minutes: Optional[int] = typer.Option(
        None, "--minutes", "-m", min=0, max=59, help="Timer minutes (default from settings)"
    ),
    seconds: int = typer.Option(0, "--seconds", "-s", min=0, max=59, help="Timer seconds"),
    no_timer: bool = typer.Option(False, "--no-timer", help="Complete without a timer"),
) -> None:
    """Complete a task, normally after holding out a timer."""
    from doable import config as cfg

    conn = _conn()
    task = db.get_task(conn, task_id)
    if task is None:
        _not_found(conn, task_id)
    if task.is_completed:
        display.print_info(f'"{task.title}" is already done.')
        conn.close()
        return

    if no_timer:
        db.complete_task(conn, task_id)
        display.print_success(f"Completed: {task.title}")
        conn.close()
        return

    if minutes is None:
        minutes = cfg.load_config().default_timer_minutes
    total = minutes * 60 + seconds
    if total <= 0:
        display.print_warning("Pick a duration above zero, or use --no-timer.")
        conn.close()
        raise typer.Exit(1)

    display.print_info(f'Doing "{task.title}" for {timer.format_seconds(total)}.')
    completed = timer.run_timer(TimerConfig(title=task.title, total_seconds=total, task_id=task_id))
    if completed:
        db.complete_task(conn, task_id, timer_seconds=total)
        display.print_success(f"Completed: {task.title}")
    else:
        display.print_disappointment(
            encouragement.DISAPPOINTMENT_TITLE, encouragement.get_disappointment()
        )
    conn.close()


@app.command()
def undo(task_id: int = typer.Argument(..., help="ID of the task to reopen")) -> None:
    """Reopen a completed task."""
    conn = _conn()
    task = db.uncomplete_task(conn, task_id)
    if task is None:
        _not_found(conn, task_id)
    display.print_success(f"Reopened: {task.title}")
    conn.close()


# ---------------------------------------------------------------------------
# History, statistics & achievements
# ---------------------------------------------------------------------------


@app.command()
def history() -> None:
    """Show what you completed on previous days."""
    conn = _conn()
    display.print_history(stats.history_by_date(db.list_tasks(conn, completed=True)))
    conn.close()


@app.command(name="stats")
def show_stats(
    month: Optional[str] = typer.Option(
        None, "--month", help="Calendar month as YYYY-MM (default: this month)"
    ),
) -> None:
    """See your streak, focus time and calendar."""
    from doable import config as cfg

    if month is None:
        year, mon = date.today().year, date.today().month
    else:
        try:
            parsed = datetime.strptime(month, "%Y-%m")
        except ValueError:
            display.print_warning(f"Unknown month '{month}'. Use YYYY-MM.")
            raise typer.Exit(1)
        year, mon = parsed.year, parsed.month

    conn = _conn()
    summary = db.get_status(conn)
    all_tasks = db.list_tasks(conn)
    conn.close()

    display.print_status(summary)
    display.print_calendar(year, mon, stats.completion_calendar(all_tasks, year, mon))
    if cfg.load_config().notifications_enabled and stats.needs_streak_reminder(all_tasks):
        display.print_nudge(encouragement.get_reminder_title())


@app.command()
def achievements() -> None:
    """Show which achievements you have unlocked."""
    conn = _conn()
    display.print_achievements(stats.compute_achievements(db.list_tasks(conn)))
    conn.close()


# ---------------------------------------------------------------------------
# Onboarding & settings
# ---------------------------------------------------------------------------

_WELCOME_PAGES: list[tuple[str, str]] = [
    ("Welcome to Doable", "Write down small things you want to get done."),
    (
        "Earn it",
        "To tick something off, start a timer with `doable done ID`. "
        "Keep at it until the timer runs out.",
    ),
    ("No sneaking off", "Leave early and the timer is cancelled. The task stays open."),
    ("Keep the streak", "Finish at least one task a day. `doable stats` shows how you're doing."),
]


def _show_welcome() -> None:
    from doable import config as cfg

    for heading, body in _WELCOME_PAGES:
        display.console.print(f"\n[bold]{heading}[/bold]")
        display.print_info(body)
    cfg.complete_onboarding()


@app.command()
def welcome() -> None:
    """Show the short introduction."""
    _show_welcome()


@app.command()
def config(
    db_path: Optional[str] = typer.Option(
        None, "--db-path",
        help="Set a custom database file path",
    ),
    reset: bool = typer.Option(False, "--reset", help="Reset to default local DB"),
    default_minutes: Optional[int] = typer.Option(
        None, "--default-minutes", help="Default timer length in minutes (0-59)"
    ),
    theme: Optional[Theme] = typer.Option(None, "--theme", help="Colour theme"),
    notifications: Optional[bool] = typer.Option(
        None, "--notifications/--no-notifications", help="Streak reminders on or off"
    ),
    show: bool = typer.Option(False, "--show", help="Show current config"),
) -> None:
    """Change your settings."""
    from doable import config as cfg

    changed = False
    if db_path:
        result = cfg.set_db_path(db_path)
        display.print_success(f"Database path set to: {result.db_path}")
        changed = True
    elif reset:
        cfg.reset_db_path()
        display.print_success("Reset to default local database.")
        changed = True

    if default_minutes is not None:
        try:
            cfg.set_default_timer_minutes(default_minutes)
        except ValidationError:
            display.print_warning("Default minutes must be between 0 and 59.")
            raise typer.Exit(1)
        display.print_success(f"Default timer: {default_minutes} min")
        changed = True
    if theme is not None:
        cfg.set_theme(theme)
        display.print_success(f"Theme: {theme.value}")
        changed = True
    if notifications is not None:
        cfg.set_notifications(notifications)
        display.print_success(f"Notifications {'on' if notifications else 'off'}.")
        changed = True

    if show:
        current = cfg.load_config()
        resolved = cfg.get_db_path()
        if current.db_path:
            display.print_info(f"Database: {current.db_path}")
        else:
            display.print_info(f"Database: {resolved} (default)")
        display.print_info(f"Default timer: {current.default_timer_minutes} min")
        display.print_info(f"Theme: {current.theme.value}")
        display.print_info(f"Notifications: {'on' if current.notifications_enabled else 'off'}")
    elif not changed:
        display.print_info(
            "Use --db-path, --reset, --default-minutes, --theme, --notifications or --show."
        )
