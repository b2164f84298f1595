"""Timer scheduling for debounce and fixed-cadence playback.

Everything runs on one cooperative thread of control. Production code uses
:class:`AsyncioScheduler` (timers on the running event loop); tests and
headless replay use :class:`ManualScheduler`, whose virtual clock only
moves when :meth:`ManualScheduler.advance` is called.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from collections.abc import Callable
from typing import Protocol


class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled before it fires."""

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Minimal timer interface shared by the pipeline and the ticker."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...

    def time(self) -> float: ...


class AsyncioScheduler:
    """Schedule callbacks on an asyncio event loop.

    With no explicit *loop*, the running loop is looked up on each call, so
    the scheduler can be built before the loop starts.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._get_loop().call_later(delay, callback)

    def time(self) -> float:
        return self._get_loop().time()


class _ManualHandle:
    def __init__(self) -> None:
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Virtual-time scheduler.

    Callbacks fire in due-time order (ties in scheduling order) when the
    clock is advanced past their due time, including callbacks scheduled by
    other callbacks during the same advance.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._seq = itertools.count()
        self._queue: list[tuple[float, int, _ManualHandle, Callable[[], None]]] = []

    def time(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle()
        due = self._now + max(0.0, delay)
        heapq.heappush(self._queue, (due, next(self._seq), handle, callback))
        return handle

    @property
    def pending(self) -> int:
        """Number of scheduled, not yet fired or cancelled callbacks."""
        return sum(1 for _, _, h, _ in self._queue if not h.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing due callbacks. Returns how many fired."""
        target = self._now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = due
            handle.fired = True
            callback()
            fired += 1
        self._now = target
        return fired


class Ticker:
    """Invoke *callback* every *interval* seconds until stopped."""

    def __init__(
        self,
        scheduler: Scheduler,
        interval: float,
        callback: Callable[[], None],
    ) -> None:
        if interval <= 0:
            msg = f"Ticker interval must be positive, got {interval}"
            raise ValueError(msg)
        self._scheduler = scheduler
        self._interval = interval
        self._callback = callback
        self._handle: TimerHandle | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self._handle is None:
            self._handle = self._scheduler.call_later(self._interval, self._fire)

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = self._scheduler.call_later(self._interval, self._fire)
        self._callback()
