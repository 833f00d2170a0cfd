"""Throttle and debounce helpers with explicit timer lifecycle."""

from __future__ import annotations

import threading
import time
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


def threading_timer_factory(delay_s: float, callback: Callable[[], None]) -> TimerHandle:
    timer = threading.Timer(delay_s, callback)
    timer.daemon = True
    timer.start()
    return timer


class Throttle:
    """Leading-edge throttle: accepts at most one call per interval.

    Calls arriving inside the interval are dropped, never queued.
    """

    def __init__(self, interval_s: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.interval_s = max(0.0, float(interval_s))
        self._clock = clock
        self._last_fire: float | None = None
        self.dropped = 0

    @property
    def last_fire(self) -> float | None:
        return self._last_fire

    def trigger(self) -> bool:
        now = self._clock()
        if self._last_fire is not None and now - self._last_fire < self.interval_s:
            self.dropped += 1
            return False
        self._last_fire = now
        return True

    def cancel(self) -> None:
        self._last_fire = None


class Debouncer:
    """Runs ``callback`` once, after ``trigger()`` calls stop for ``interval_s``."""

    def __init__(
        self,
        interval_s: float,
        callback: Callable[[], None],
        timer_factory: TimerFactory = threading_timer_factory,
    ) -> None:
        self.interval_s = max(0.0, float(interval_s))
        self._callback = callback
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._handle: TimerHandle | None = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
            self._generation += 1
            generation = self._generation
            self._handle = self._timer_factory(self.interval_s, lambda: self._fire(generation))

    def cancel(self) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
                self._handle = None
            self._generation += 1

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A timer cancelled after it started firing must not run the callback.
            if generation != self._generation or self._handle is None:
                return
            self._handle = None
        self._callback()
