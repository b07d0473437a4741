"""Tests for the statistics helpers."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from itertools import count
from typing import Optional

from doable import stats
from doable.models import Task

_ids = count(1)

TODAY = date(2026, 3, 18)


def _done(
    when: datetime, title: str = "Task", timer: Optional[int] = None
) -> Task:
    return Task(
        id=next(_ids),
        title=title,
        is_completed=True,
        completed_at=when,
        completed_with_timer=timer is not None,
        timer_duration_seconds=timer,
    )


def _open(title: str = "Open") -> Task:
    return Task(id=next(_ids), title=title)


def _on(day: date, hour: int = 12, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute)


class TestStreak:
    def test_no_completions(self) -> None:
        assert stats.calculate_streak([_open()], TODAY) == 0

    def test_today_only(self) -> None:
        assert stats.calculate_streak([_done(_on(TODAY))], TODAY) == 1

    def test_consecutive_days(self) -> None:
        tasks = [_done(_on(TODAY - timedelta(days=n))) for n in range(4)]
        assert stats.calculate_streak(tasks, TODAY) == 4

    def test_streak_can_end_yesterday(self) -> None:
        tasks = [_done(_on(TODAY - timedelta(days=n))) for n in (1, 2)]
        assert stats.calculate_streak(tasks, TODAY) == 2

    def test_gap_breaks_streak(self) -> None:
        tasks = [_done(_on(TODAY)), _done(_on(TODAY - timedelta(days=2)))]
        assert stats.calculate_streak(tasks, TODAY) == 1

    def test_stale_streak_is_zero(self) -> None:
        tasks = [_done(_on(TODAY - timedelta(days=n))) for n in (2, 3, 4)]
        assert stats.calculate_streak(tasks, TODAY) == 0

    def test_multiple_per_day_count_once(self) -> None:
        tasks = [_done(_on(TODAY, 9)), _done(_on(TODAY, 10))]
        assert stats.calculate_streak(tasks, TODAY) == 1


class TestStreakReminder:
    def test_reminder_when_today_is_missing(self) -> None:
        tasks = [_done(_on(TODAY - timedelta(days=1)))]
        assert stats.needs_streak_reminder(tasks, TODAY)

    def test_no_reminder_when_done_today(self) -> None:
        tasks = [_done(_on(TODAY)), _done(_on(TODAY - timedelta(days=1)))]
        assert not stats.needs_streak_reminder(tasks, TODAY)

    def test_no_reminder_without_streak(self) -> None:
        assert not stats.needs_streak_reminder([], TODAY)


class TestHistory:
    def test_groups_by_day_excluding_today(self) -> None:
        yesterday = TODAY - timedelta(days=1)
        older = TODAY - timedelta(days=5)
        tasks = [
            _done(_on(TODAY), "today"),
            _done(_on(yesterday, 15), "y2"),
            _done(_on(yesterday, 9), "y1"),
            _done(_on(older), "old"),
            _open(),
        ]
        history = stats.history_by_date(tasks, TODAY)
        assert list(history) == [yesterday, older]
        assert [t.title for t in history[yesterday]] == ["y1", "y2"]

    def test_completed_on(self) -> None:
        tasks = [_done(_on(TODAY, 8), "a"), _done(_on(TODAY - timedelta(days=1)), "b")]
        assert [t.title for t in stats.completed_on(tasks, TODAY)] == ["a"]


class TestCalendar:
    def test_counts_every_day_of_month(self) -> None:
        tasks = [
            _done(_on(date(2026, 2, 3))),
            _done(_on(date(2026, 2, 3), 18)),
            _done(_on(date(2026, 3, 1))),
        ]
        cal = stats.completion_calendar(tasks, 2026, 2)
        assert len(cal) == 28
        assert cal[date(2026, 2, 3)] == 2
        assert cal[date(2026, 2, 4)] == 0


class TestFocus:
    def test_only_timer_completions_count(self) -> None:
        tasks = [_done(_on(TODAY), timer=300), _done(_on(TODAY)), _open()]
        assert stats.total_focus_seconds(tasks) == 300


class TestAchievements:
    def _unlocked(self, tasks: list[Task]) -> set[str]:
        return {a.id for a in stats.compute_achievements(tasks) if a.unlocked}

    def test_nothing_unlocked_for_empty_list(self) -> None:
        achievements = stats.compute_achievements([])
        assert len(achievements) == 5
        assert self._unlocked([]) == set()

    def test_maker(self) -> None:
        tasks = [_done(_on(TODAY - timedelta(days=n % 30), 12)) for n in range(100)]
        assert "maker" in self._unlocked(tasks)
        assert "maker" not in self._unlocked(tasks[:99])

    def test_workaholic(self) -> None:
        tasks = [_done(_on(TODAY - timedelta(days=n)), timer=3600) for n in range(10)]
        assert "workaholic" in self._unlocked(tasks)
        assert "workaholic" not in self._unlocked(tasks[:9])

    def test_empire(self) -> None:
        tasks = [_done(_on(TODAY), "  ein imperium aufbauen ")]
        assert "empire" in self._unlocked(tasks)

    def test_early_bird(self) -> None:
        assert "earlybird" in self._unlocked([_done(_on(TODAY, 7, 59))])
        assert "earlybird" not in self._unlocked([_done(_on(TODAY, 8, 0))])

    def test_sprinter(self) -> None:
        start = _on(TODAY, 10)
        tasks = [_done(start + timedelta(minutes=6 * n), timer=60) for n in range(10)]
        assert "sprinter" in self._unlocked(tasks)

    def test_sprinter_needs_one_hour_window(self) -> None:
        start = _on(TODAY, 10)
        tasks = [_done(start + timedelta(minutes=7 * n)) for n in range(10)]
        assert "sprinter" not in self._unlocked(tasks)

    def test_sprinter_ignores_long_timers(self) -> None:
        start = _on(TODAY, 10)
        tasks = [_done(start + timedelta(minutes=n), timer=61) for n in range(10)]
        assert "sprinter" not in self._unlocked(tasks)
