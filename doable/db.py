"""SQLite task store. All public functions return Pydantic models."""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime, time
from pathlib import Path
from typing import Optional

from doable import stats
from doable.config import get_db_path as _config_get_db_path
from doable.models import StatusSummary, Task, TaskCreate, TaskUpdate

log = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS tasks (
    id                      INTEGER PRIMARY KEY AUTOINCREMENT,
    title                   TEXT    NOT NULL,
    is_completed            INTEGER NOT NULL DEFAULT 0,
    created_at              TEXT    NOT NULL,
    scheduled_time          TEXT,
    completed_at            TEXT,
    completed_with_timer    INTEGER NOT NULL DEFAULT 0,
    timer_duration_seconds  INTEGER,
    notes                   TEXT    NOT NULL DEFAULT '',
    category                TEXT    NOT NULL DEFAULT ''
);

CREATE INDEX IF NOT EXISTS idx_tasks_completed ON tasks (is_completed, completed_at);
"""


def _get_db_path() -> Path:
    """Return the database file path from config (or default)."""
    return _config_get_db_path()


def get_connection(db_path: Optional[Path] = None) -> sqlite3.Connection:
    """Open a connection and ensure the schema exists."""
    path = db_path or _get_db_path()
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.executescript(_SCHEMA)
    return conn


def _parse_ts(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _row_to_task(row: sqlite3.Row) -> Task:
    """Convert a database row to a Task model."""
    return Task(
        id=row["id"],
        title=row["title"],
        is_completed=bool(row["is_completed"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        scheduled_time=_parse_ts(row["scheduled_time"]),
        completed_at=_parse_ts(row["completed_at"]),
        completed_with_timer=bool(row["completed_with_timer"]),
        timer_duration_seconds=row["timer_duration_seconds"],
        notes=row["notes"],
        category=row["category"],
    )


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


def add_task(conn: sqlite3.Connection, task_in: TaskCreate) -> Task:
    """Insert a new task and return it as a model."""
    now = datetime.now().isoformat()
    scheduled = task_in.scheduled_time.isoformat() if task_in.scheduled_time else None
    cur = conn.execute(
        "INSERT INTO tasks (title, created_at, scheduled_time, notes, category) "
        "VALUES (?, ?, ?, ?, ?)",
        (task_in.title, now, scheduled, task_in.notes, task_in.category),
    )
    conn.commit()
    row = conn.execute("SELECT * FROM tasks WHERE id = ?", (cur.lastrowid,)).fetchone()
    return _row_to_task(row)


def get_task(conn: sqlite3.Connection, task_id: int) -> Optional[Task]:
    """Fetch a single task by ID."""
    row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
    return _row_to_task(row) if row else None


def list_tasks(conn: sqlite3.Connection, completed: Optional[bool] = None) -> list[Task]:
    """List tasks, newest first, optionally filtered by completion."""
    query = "SELECT * FROM tasks"
    params: list[int] = []
    if completed is not None:
        query += " WHERE is_completed = ?"
        params.append(int(completed))
    query += " ORDER BY created_at DESC, id DESC"
    rows = conn.execute(query, params).fetchall()
    return [_row_to_task(r) for r in rows]


def list_open(conn: sqlite3.Connection) -> list[Task]:
    """Open tasks, newest first."""
    return list_tasks(conn, completed=False)


def list_completed_today(
    conn: sqlite3.Connection, today: Optional[date] = None
) -> list[Task]:
    """Tasks completed since midnight, most recent first."""
    today = today or date.today()
    start = datetime.combine(today, time.min).isoformat()
    rows = conn.execute(
        "SELECT * FROM tasks WHERE is_completed = 1 AND completed_at >= ? "
        "ORDER BY completed_at DESC",
        (start,),
    ).fetchall()
    return [_row_to_task(r) for r in rows]


def list_overdue(conn: sqlite3.Connection, now: Optional[datetime] = None) -> list[Task]:
    """Open tasks whose scheduled time has passed, oldest schedule first."""
    now = now or datetime.now()
    rows = conn.execute(
        "SELECT * FROM tasks WHERE is_completed = 0 AND scheduled_time IS NOT NULL "
        "AND scheduled_time < ? ORDER BY scheduled_time ASC",
        (now.isoformat(),),
    ).fetchall()
    return [_row_to_task(r) for r in rows]


def count_open(conn: sqlite3.Connection) -> int:
    """Number of open tasks (what the home-screen widget shows)."""
    row = conn.execute("SELECT COUNT(*) AS n FROM tasks WHERE is_completed = 0").fetchone()
    return row["n"]


def update_task(
    conn: sqlite3.Connection, task_id: int, changes: TaskUpdate
) -> Optional[Task]:
    """Apply a partial edit.

    An empty (or whitespace-only) title deletes the task, the same way the
    list screen drops a row that loses focus with no text. Returns ``None``
    in that case and for unknown IDs.
    """
    task = get_task(conn, task_id)
    if task is None:
        return None

    if changes.title is not None and not changes.title.strip():
        delete_task(conn, task_id)
        return None

    sets: list[str] = []
    params: list[Optional[str]] = []
    if changes.title is not None:
        sets.append("title = ?")
        params.append(changes.title)
    if changes.clear_schedule:
        sets.append("scheduled_time = NULL")
    elif changes.scheduled_time is not None:
        sets.append("scheduled_time = ?")
        params.append(changes.scheduled_time.isoformat())
    if changes.notes is not None:
        sets.append("notes = ?")
        params.append(changes.notes)
    if changes.category is not None:
        sets.append("category = ?")
        params.append(changes.category)

    if sets:
        conn.execute(
            f"UPDATE tasks SET {', '.join(sets)} WHERE id = ?",
            (*params, task_id),
        )
        conn.commit()
    return get_task(conn, task_id)


def delete_task(conn: sqlite3.Connection, task_id: int) -> bool:
    """Delete a task. Returns False if it did not exist."""
    cur = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
    conn.commit()
    return cur.rowcount > 0


# ---------------------------------------------------------------------------
# Completion
# ---------------------------------------------------------------------------


def complete_task(
    conn: sqlite3.Connection,
    task_id: int,
    timer_seconds: Optional[int] = None,
) -> Optional[Task]:
    """Mark a task as done.

    Pass ``timer_seconds`` when the completion followed a successful timer
    run; leave it out for the "complete without timer" shortcut.
    """
    if timer_seconds is not None and timer_seconds <= 0:
        raise ValueError(f"timer_seconds must be positive, got {timer_seconds}")
    now = datetime.now().isoformat()
    conn.execute(
        "UPDATE tasks SET is_completed = 1, completed_at = ?, "
        "completed_with_timer = ?, timer_duration_seconds = ? WHERE id = ?",
        (now, int(timer_seconds is not None), timer_seconds, task_id),
    )
    conn.commit()
    task = get_task(conn, task_id)
    if task is not None:
        log.debug(
            "Completed task #%d%s",
            task_id,
            f" after {timer_seconds}s timer" if timer_seconds else "",
        )
    return task


def uncomplete_task(conn: sqlite3.Connection, task_id: int) -> Optional[Task]:
    """Revert a completed task back to open, dropping its timer metadata."""
    conn.execute(
        "UPDATE tasks SET is_completed = 0, completed_at = NULL, "
        "completed_with_timer = 0, timer_duration_seconds = NULL WHERE id = ?",
        (task_id,),
    )
    conn.commit()
    return get_task(conn, task_id)


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------


def get_status(conn: sqlite3.Connection, now: Optional[datetime] = None) -> StatusSummary:
    """Build the full status summary."""
    now = now or datetime.now()
    all_tasks = list_tasks(conn)
    open_tasks = [t for t in all_tasks if not t.is_completed]
    overdue = sorted(
        (t for t in open_tasks if t.is_overdue(now)),
        key=lambda t: t.scheduled_time,
    )

    return StatusSummary(
        open_count=len(open_tasks),
        completed_today=len(stats.completed_on(all_tasks, now.date())),
        overdue_count=len(overdue),
        streak_days=stats.calculate_streak(all_tasks, now.date()),
        total_focus_seconds=stats.total_focus_seconds(all_tasks),
        open_tasks=open_tasks,
        overdue_tasks=overdue,
    )
