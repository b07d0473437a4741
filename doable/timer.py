"""Timed completion: an orientation-gated countdown that ends in one outcome.

The user commits to working on a task for a number of seconds. The countdown
starts once the device is turned to landscape, pauses into a short grace
window if it is turned back to portrait, and succeeds when the full duration
has passed and the device is returned to portrait. Leaving the app during
the countdown, or staying in portrait past the grace window, abandons the
run.

:class:`TimedCompletionController` knows nothing about storage or screens. It
reports exactly one terminal outcome through ``on_complete`` or
``on_cancel``; the caller decides what to persist.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, Protocol

from doable.display import console, create_timer_progress, print_info, print_nudge
from doable.encouragement import get_success
from doable.models import (
    AbandonReason,
    LifecyclePhase,
    Orientation,
    TimerConfig,
    TimerEvent,
    TimerEventKind,
    TimerState,
)
from doable.ticks import ManualTickSource, TickSource

log = logging.getLogger(__name__)

GRACE_SECONDS = 15

_LEAVING_PHASES = (LifecyclePhase.INACTIVE, LifecyclePhase.BACKGROUND)


class Feedback(Protocol):
    """Haptic / sound cues. Fire-and-forget; must not block."""

    def started(self) -> None: ...

    def succeeded(self) -> None: ...

    def failed(self) -> None: ...


class NullFeedback:
    """Feedback that does nothing."""

    def started(self) -> None:
        pass

    def succeeded(self) -> None:
        pass

    def failed(self) -> None:
        pass


class TimedCompletionController:
    """State machine for one timer run.

    Events are fed in through :meth:`orientation_changed`,
    :meth:`app_lifecycle_changed`, :meth:`tick` and :meth:`view_dismissed`.
    They are handled one at a time; anything arriving after the run has
    ended is ignored.
    """

    def __init__(
        self,
        title: str,
        total_seconds: int,
        *,
        on_complete: Optional[Callable[[], None]] = None,
        on_cancel: Optional[Callable[[], None]] = None,
        listener: Optional[Callable[[TimerEvent], None]] = None,
        tick_source: Optional[TickSource] = None,
        feedback: Optional[Feedback] = None,
        grace_seconds: int = GRACE_SECONDS,
    ) -> None:
        if total_seconds < 0:
            raise ValueError(f"total_seconds must not be negative, got {total_seconds}")
        if grace_seconds <= 0:
            raise ValueError(f"grace_seconds must be positive, got {grace_seconds}")
        self.title = title
        self.total_seconds = total_seconds
        self.grace_seconds = grace_seconds
        self._on_complete = on_complete
        self._on_cancel = on_cancel
        self._listener = listener
        self._ticks: TickSource = tick_source if tick_source is not None else ManualTickSource()
        self._feedback: Feedback = feedback if feedback is not None else NullFeedback()
        self._lock = threading.RLock()

        self._state = TimerState.AWAITING_START
        self._remaining = total_seconds
        self._grace_remaining = grace_seconds
        self._abandon_reason: Optional[AbandonReason] = None
        self._dismissed = False

    # -- Read-only view ----------------------------------------------------

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def grace_remaining_seconds(self) -> int:
        return self._grace_remaining

    @property
    def abandon_reason(self) -> Optional[AbandonReason]:
        return self._abandon_reason

    @property
    def is_terminal(self) -> bool:
        return self._state.is_terminal

    @property
    def is_dismissed(self) -> bool:
        return self._dismissed

    # -- Incoming events ---------------------------------------------------

    def orientation_changed(self, orientation: Orientation) -> None:
        """Handle a device orientation reading."""
        with self._lock:
            if self._closed() or orientation is Orientation.UNKNOWN:
                return
            state = self._state
            if state is TimerState.AWAITING_START:
                if orientation is Orientation.LANDSCAPE and self.total_seconds > 0:
                    self._start()
            elif state is TimerState.RUNNING:
                if orientation is Orientation.PORTRAIT:
                    self._enter_grace()
            elif state is TimerState.PORTRAIT_GRACE:
                if orientation is Orientation.LANDSCAPE:
                    self._resume()
            elif state is TimerState.FINISHED:
                if orientation is Orientation.PORTRAIT:
                    self._complete()

    def app_lifecycle_changed(self, phase: LifecyclePhase) -> None:
        """Handle the host app moving between foreground and background."""
        with self._lock:
            if self._closed() or phase not in _LEAVING_PHASES:
                return
            if self._state in (TimerState.RUNNING, TimerState.PORTRAIT_GRACE):
                self._abandon(AbandonReason.APP_BACKGROUNDED)

    def tick(self) -> None:
        """Advance whichever countdown is active by one second."""
        with self._lock:
            if self._closed():
                return
            if self._state is TimerState.RUNNING:
                self._remaining = max(0, self._remaining - 1)
                self._emit(TimerEventKind.TICK)
                if self._remaining == 0:
                    self._finish()
            elif self._state is TimerState.PORTRAIT_GRACE:
                self._grace_remaining = max(0, self._grace_remaining - 1)
                if self._grace_remaining == 0:
                    self._abandon(AbandonReason.GRACE_EXPIRED)
                else:
                    self._emit(TimerEventKind.PAUSED_FOR_PORTRAIT)

    def view_dismissed(self) -> None:
        """Tear the run down. Emits nothing; the outcome is left unreported."""
        with self._lock:
            if self._dismissed:
                return
            self._dismissed = True
            self._ticks.stop()
            if not self.is_terminal:
                log.debug("Timer run for %r dismissed in state %s", self.title, self._state.value)

    # -- Transitions -------------------------------------------------------

    def _closed(self) -> bool:
        return self._dismissed or self._state.is_terminal

    def _start(self) -> None:
        self._state = TimerState.RUNNING
        self._remaining = self.total_seconds
        self._ticks.start(self.tick)
        log.debug("Timer run for %r started (%ds)", self.title, self.total_seconds)
        self._emit(TimerEventKind.STARTED)
        self._cue(self._feedback.started)

    def _enter_grace(self) -> None:
        self._state = TimerState.PORTRAIT_GRACE
        self._grace_remaining = self.grace_seconds
        self._emit(TimerEventKind.PAUSED_FOR_PORTRAIT)

    def _resume(self) -> None:
        self._state = TimerState.RUNNING
        self._grace_remaining = self.grace_seconds
        self._emit(TimerEventKind.RESUMED)

    def _finish(self) -> None:
        self._state = TimerState.FINISHED
        self._ticks.stop()
        self._emit(TimerEventKind.FINISHED_COUNTDOWN)
        self._cue(self._feedback.succeeded)

    def _complete(self) -> None:
        self._state = TimerState.COMPLETED
        self._ticks.stop()
        log.info("Timer run for %r completed", self.title)
        self._emit(TimerEventKind.COMPLETED)
        if self._on_complete is not None:
            self._on_complete()

    def _abandon(self, reason: AbandonReason) -> None:
        self._state = TimerState.ABANDONED
        self._abandon_reason = reason
        self._ticks.stop()
        log.info(
            "Timer run for %r abandoned (%s) with %ds left",
            self.title,
            reason.value,
            self._remaining,
        )
        self._emit(TimerEventKind.ABANDONED, reason=reason)
        self._cue(self._feedback.failed)
        if self._on_cancel is not None:
            self._on_cancel()

    def _emit(self, kind: TimerEventKind, reason: Optional[AbandonReason] = None) -> None:
        if self._listener is None:
            return
        event = TimerEvent(
            kind=kind,
            remaining_seconds=self._remaining,
            grace_remaining_seconds=self._grace_remaining,
            reason=reason,
        )
        try:
            self._listener(event)
        except Exception:
            log.warning("Timer listener failed on %s", kind.value, exc_info=True)

    def _cue(self, cue: Callable[[], None]) -> None:
        try:
            cue()
        except Exception:
            log.warning("Feedback cue %s failed", getattr(cue, "__name__", cue), exc_info=True)


# ---------------------------------------------------------------------------
# Terminal host
# ---------------------------------------------------------------------------


class TerminalFeedback:
    """Bell on success and failure; nothing on start."""

    def started(self) -> None:
        pass

    def succeeded(self) -> None:
        console.print("\a", end="")

    def failed(self) -> None:
        console.print("\a", end="")


def format_seconds(seconds: int) -> str:
    """Render a duration as MM:SS."""
    s = max(0, seconds)
    return f"{s // 60:02d}:{s % 60:02d}"


def run_timer(config: TimerConfig, feedback: Optional[Feedback] = None) -> bool:
    """Run a timed completion in the terminal. Returns True if completed.

    The terminal has no orientation sensor, so it is treated as a device that
    is already in landscape. Ctrl-C counts as leaving the app.
    """
    ticks = ManualTickSource()
    progress = create_timer_progress()
    label = config.title or "Timer"
    if config.task_id is not None:
        label = f"{label} (task #{config.task_id})"

    with progress:
        bar = progress.add_task(label, total=config.total_seconds)

        def _on_event(event: TimerEvent) -> None:
            if event.kind is TimerEventKind.TICK:
                progress.update(bar, completed=config.total_seconds - event.remaining_seconds)

        controller = TimedCompletionController(
            config.title,
            config.total_seconds,
            listener=_on_event,
            tick_source=ticks,
            feedback=feedback if feedback is not None else TerminalFeedback(),
        )
        try:
            controller.orientation_changed(Orientation.LANDSCAPE)
            while controller.state is TimerState.RUNNING:
                time.sleep(1)
                ticks.advance()
        except KeyboardInterrupt:
            controller.app_lifecycle_changed(LifecyclePhase.BACKGROUND)
            console.print("\n[doable.warning]Timer stopped early.[/]")
        finally:
            if controller.state is TimerState.FINISHED:
                controller.orientation_changed(Orientation.PORTRAIT)
            controller.view_dismissed()

    if controller.state is TimerState.COMPLETED:
        print_info(f"{format_seconds(config.total_seconds)} done.")
        print_nudge(get_success())
        return True
    return False
