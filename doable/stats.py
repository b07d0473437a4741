"""Statistics derived from an in-memory list of tasks.

Everything here is a pure function of the task list (and "today"), so the
same numbers can be computed from the database, a test fixture or an
exported snapshot.
"""

from __future__ import annotations

import calendar
from collections import defaultdict
from datetime import date, timedelta
from typing import Optional

from doable.models import Achievement, Task

WORKAHOLIC_SECONDS = 10 * 60 * 60
MAKER_COUNT = 100
SPRINT_COUNT = 10
SPRINT_WINDOW = timedelta(hours=1)
SPRINT_MAX_TIMER_SECONDS = 60
EARLY_BIRD_HOUR = 8
EMPIRE_TITLE = "Ein Imperium aufbauen"


def _completed(tasks: list[Task]) -> list[Task]:
    return [t for t in tasks if t.is_completed and t.completed_at is not None]


def completion_dates(tasks: list[Task]) -> set[date]:
    """Days on which at least one task was completed."""
    return {t.completed_at.date() for t in _completed(tasks)}


def completed_on(tasks: list[Task], day: date) -> list[Task]:
    """Tasks completed on *day*, in completion order."""
    done = [t for t in _completed(tasks) if t.completed_at.date() == day]
    return sorted(done, key=lambda t: t.completed_at)


def calculate_streak(tasks: list[Task], today: Optional[date] = None) -> int:
    """Count consecutive days (ending today or yesterday) with at least one completion."""
    dates = completion_dates(tasks)
    if not dates:
        return 0

    check_date = today or date.today()

    # Allow streak to start from today or yesterday
    if check_date not in dates:
        check_date -= timedelta(days=1)
        if check_date not in dates:
            return 0

    streak = 0
    while check_date in dates:
        streak += 1
        check_date -= timedelta(days=1)
    return streak


def needs_streak_reminder(tasks: list[Task], today: Optional[date] = None) -> bool:
    """True when a streak is running but nothing has been completed today yet."""
    today = today or date.today()
    return today not in completion_dates(tasks) and calculate_streak(tasks, today) > 0


def history_by_date(tasks: list[Task], today: Optional[date] = None) -> dict[date, list[Task]]:
    """Completed tasks grouped by day, most recent day first. Today is excluded."""
    today = today or date.today()
    grouped: dict[date, list[Task]] = defaultdict(list)
    for task in _completed(tasks):
        day = task.completed_at.date()
        if day != today:
            grouped[day].append(task)
    return {
        day: sorted(grouped[day], key=lambda t: t.completed_at)
        for day in sorted(grouped, reverse=True)
    }


def completion_calendar(tasks: list[Task], year: int, month: int) -> dict[date, int]:
    """Number of completions for every day of the given month."""
    _, days_in_month = calendar.monthrange(year, month)
    counts = {date(year, month, d): 0 for d in range(1, days_in_month + 1)}
    for task in _completed(tasks):
        day = task.completed_at.date()
        if day in counts:
            counts[day] += 1
    return counts


def total_focus_seconds(tasks: list[Task]) -> int:
    """Seconds spent in successful timer runs."""
    return sum(
        t.timer_duration_seconds or 0 for t in _completed(tasks) if t.completed_with_timer
    )


# ---------------------------------------------------------------------------
# Achievements
# ---------------------------------------------------------------------------


def _is_sprint_task(task: Task) -> bool:
    if not task.completed_with_timer:
        return True
    return (task.timer_duration_seconds or 0) <= SPRINT_MAX_TIMER_SECONDS


def _has_sprint(tasks: list[Task]) -> bool:
    """Ten qualifying completions inside any one-hour window."""
    stamps = sorted(t.completed_at for t in _completed(tasks) if _is_sprint_task(t))
    start = 0
    for end, stamp in enumerate(stamps):
        while stamp - stamps[start] > SPRINT_WINDOW:
            start += 1
        if end - start + 1 >= SPRINT_COUNT:
            return True
    return False


def compute_achievements(tasks: list[Task]) -> list[Achievement]:
    """Evaluate every achievement against the task list."""
    done = _completed(tasks)
    empire = any(t.title.strip().casefold() == EMPIRE_TITLE.casefold() for t in done)
    early_bird = any(t.completed_at.hour < EARLY_BIRD_HOUR for t in done)

    return [
        Achievement(
            id="maker",
            title="Maker",
            description="Completed 100 tasks.",
            unlock_hint=f"Complete {MAKER_COUNT} tasks.",
            unlocked=len(done) >= MAKER_COUNT,
        ),
        Achievement(
            id="workaholic",
            title="Workaholic",
            description="Spent ten hours in timed focus.",
            unlock_hint="Collect 10 hours of timer runs.",
            unlocked=total_focus_seconds(tasks) >= WORKAHOLIC_SECONDS,
        ),
        Achievement(
            id="empire",
            title="Empire Builder",
            description="Built an empire. Casually.",
            unlock_hint=f'Complete a task called "{EMPIRE_TITLE}".',
            unlocked=empire,
        ),
        Achievement(
            id="sprinter",
            title="Sprint Champion",
            description="Ten quick tasks inside one hour.",
            unlock_hint="Complete 10 tasks within an hour, each without a timer or with one minute at most.",
            unlocked=_has_sprint(tasks),
        ),
        Achievement(
            id="earlybird",
            title="Early Bird",
            description="Got something done before 8 am.",
            unlock_hint="Complete a task before 8:00.",
            unlocked=early_bird,
        ),
    ]
