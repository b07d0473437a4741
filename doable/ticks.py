"""One-tick-per-second clocks used to drive timer runs.

A timer run never sleeps or schedules anything itself. It is handed a tick
source, starts it when the countdown begins and stops it when the run is
over. Tests use :class:`ManualTickSource` to step virtual time; interactive
hosts use :class:`ThreadedTickSource` or drive a manual source from their
own loop.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol

log = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class TickSource(Protocol):
    """Cancellable clock that invokes a callback once per elapsed second."""

    @property
    def running(self) -> bool: ...

    def start(self, callback: TickCallback) -> None: ...

    def stop(self) -> None: ...


class ManualTickSource:
    """Virtual clock. Nothing happens until :meth:`advance` is called."""

    def __init__(self) -> None:
        self._callback: Optional[TickCallback] = None
        self.ticks_delivered = 0

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, callback: TickCallback) -> None:
        self._callback = callback

    def stop(self) -> None:
        self._callback = None

    def advance(self, seconds: int = 1) -> int:
        """Deliver up to *seconds* ticks. Returns how many were delivered."""
        delivered = 0
        for _ in range(seconds):
            # The callback may stop the source mid-way.
            callback = self._callback
            if callback is None:
                break
            callback()
            delivered += 1
        self.ticks_delivered += delivered
        return delivered


class ThreadedTickSource:
    """Wall-clock ticks from a daemon thread.

    For library hosts whose own thread waits on UI events, so the clock has
    to run elsewhere. The terminal host in :mod:`doable.timer` owns its loop
    and drives a :class:`ManualTickSource` instead.

    :meth:`stop` never blocks, so it is safe to call from inside the tick
    callback or while holding a lock the callback needs. A tick that was
    already being delivered when ``stop`` was called may still complete;
    the consumer is expected to ignore ticks it no longer wants.
    """

    def __init__(self, interval: float = 1.0) -> None:
        self.interval = interval
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and not self._stop_event.is_set()

    def start(self, callback: TickCallback) -> None:
        with self._lock:
            if self.running:
                return
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(callback, self._stop_event),
                name="doable-ticks",
                daemon=True,
            )
            self._thread.start()

    def stop(self) -> None:
        with self._lock:
            self._stop_event.set()

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the worker thread to exit after :meth:`stop`."""
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _run(self, callback: TickCallback, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval):
            try:
                callback()
            except Exception:
                log.exception("Tick callback failed; stopping tick source")
                stop_event.set()
