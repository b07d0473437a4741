"""Pydantic models -- single source of truth for all data types."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class Task(BaseModel):
    """A single to-do item."""

    id: int
    title: str
    is_completed: bool = False
    created_at: datetime = Field(default_factory=datetime.now)
    scheduled_time: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    completed_with_timer: bool = False
    timer_duration_seconds: Optional[int] = Field(default=None, gt=0)
    notes: str = ""
    category: str = ""

    @model_validator(mode="after")
    def _check_completion(self) -> Task:
        if self.is_completed != (self.completed_at is not None):
            raise ValueError("completed_at must be set exactly when the task is completed")
        if self.completed_with_timer and not self.is_completed:
            raise ValueError("completed_with_timer requires a completed task")
        if self.timer_duration_seconds is not None and not self.completed_with_timer:
            raise ValueError("timer_duration_seconds is only kept for timer completions")
        return self

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        """True when the scheduled time has passed and the task is still open."""
        if self.is_completed or self.scheduled_time is None:
            return False
        return self.scheduled_time < (now or datetime.now())


class TaskCreate(BaseModel):
    """Input model for creating a new task."""

    title: str = Field(min_length=1, max_length=500)
    scheduled_time: Optional[datetime] = None
    notes: str = ""
    category: str = ""

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class TaskUpdate(BaseModel):
    """Partial edit of a task. ``None`` leaves a field untouched."""

    title: Optional[str] = Field(default=None, max_length=500)
    scheduled_time: Optional[datetime] = None
    clear_schedule: bool = False
    notes: Optional[str] = None
    category: Optional[str] = None


class StatusSummary(BaseModel):
    """Dashboard data for the stats command and the home-screen widget."""

    open_count: int = Field(default=0, ge=0)
    completed_today: int = Field(default=0, ge=0)
    overdue_count: int = Field(default=0, ge=0)
    streak_days: int = Field(default=0, ge=0)
    total_focus_seconds: int = Field(default=0, ge=0)
    open_tasks: list[Task] = Field(default_factory=list)
    overdue_tasks: list[Task] = Field(default_factory=list)


class Achievement(BaseModel):
    """A badge computed from the completed task history."""

    id: str
    title: str
    description: str
    unlock_hint: str
    unlocked: bool = False


# ---------------------------------------------------------------------------
# Timed completion
# ---------------------------------------------------------------------------


class TimerState(str, enum.Enum):
    """States of a single timer run."""

    AWAITING_START = "awaiting_start"
    RUNNING = "running"
    PORTRAIT_GRACE = "portrait_grace"
    FINISHED = "finished"
    COMPLETED = "completed"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self in (TimerState.COMPLETED, TimerState.ABANDONED)


class Orientation(str, enum.Enum):
    """Physical device orientation. UNKNOWN covers flat and face-up readings."""

    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"
    UNKNOWN = "unknown"


class LifecyclePhase(str, enum.Enum):
    """Host app lifecycle phase."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    BACKGROUND = "background"


class AbandonReason(str, enum.Enum):
    """Why a timer run was abandoned."""

    GRACE_EXPIRED = "grace_expired"
    APP_BACKGROUNDED = "app_backgrounded"


class TimerEventKind(str, enum.Enum):
    """Events a timer run reports to its host."""

    STARTED = "started"
    TICK = "tick"
    PAUSED_FOR_PORTRAIT = "paused_for_portrait"
    RESUMED = "resumed"
    FINISHED_COUNTDOWN = "finished_countdown"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class TimerEvent(BaseModel):
    """A single notification emitted by the timed completion controller."""

    kind: TimerEventKind
    remaining_seconds: int = Field(ge=0)
    grace_remaining_seconds: int = Field(ge=0)
    reason: Optional[AbandonReason] = None


class TimerConfig(BaseModel):
    """Configuration for a timed completion run."""

    title: str = ""
    total_seconds: int = Field(gt=0, le=3599)
    task_id: Optional[int] = None


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class Theme(str, enum.Enum):
    """Colour theme preference."""

    SYSTEM = "system"
    LIGHT = "light"
    DARK = "dark"


class AppConfig(BaseModel):
    """Application configuration (persisted to ~/.config/doable/config.json)."""

    db_path: Optional[str] = None  # None = use default (~/.local/share/doable/)
    default_timer_minutes: int = Field(default=5, ge=0, le=59)
    theme: Theme = Theme.SYSTEM
    notifications_enabled: bool = False
    onboarding_completed: bool = False
