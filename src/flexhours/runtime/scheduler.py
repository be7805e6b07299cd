"""Timer scheduling for the acquisition controller.

The controller never sleeps. It asks a :class:`HostScheduler` to call it back
later and tracks every handle on one :class:`CancellationToken`, so reaching a
terminal state cancels all of them at once.

Key guarantees:

- ``cancel`` is idempotent and accepts handles that already fired.
- :class:`AsyncioScheduler` runs callbacks on the event loop thread via
  ``loop.call_later``.
- :class:`SteppedScheduler` keeps virtual time; callbacks fire only from
  :meth:`SteppedScheduler.advance`, in due-time order.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol, runtime_checkable

Callback = Callable[[], None]

logger = logging.getLogger(__name__)


@runtime_checkable
class HostScheduler(Protocol):
    """Scheduling contract consumed from the host environment."""

    def schedule_once(self, delay_ms: int, callback: Callback) -> Any:
        """Call ``callback`` once after ``delay_ms``; return a cancellable handle."""

    def schedule_repeating(self, interval_ms: int, callback: Callback) -> Any:
        """Call ``callback`` every ``interval_ms`` until cancelled."""

    def cancel(self, handle: Any) -> None:
        """Cancel a handle returned by either schedule method."""


class CancellationToken:
    """Shared cancellation for every scheduled source of one acquisition cycle.

    Cleanups registered after :meth:`cancel` run immediately.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._cleanups: list[Callback] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def register(self, cleanup: Callback) -> None:
        if self._cancelled:
            cleanup()
            return
        self._cleanups.append(cleanup)

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        cleanups, self._cleanups = self._cleanups, []
        for cleanup in reversed(cleanups):
            cleanup()


# Asyncio ---------------------------------------------------------------------
class _RepeatingHandle:
    """Re-arms ``loop.call_later`` after each run until cancelled."""

    def __init__(self, loop: asyncio.AbstractEventLoop, interval_s: float, callback: Callback) -> None:
        self._loop = loop
        self._interval_s = interval_s
        self._callback = callback
        self._cancelled = False
        self._handle: asyncio.TimerHandle = loop.call_later(interval_s, self._run)

    def _run(self) -> None:
        if self._cancelled:
            return
        self._handle = self._loop.call_later(self._interval_s, self._run)
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        self._handle.cancel()

    def cancelled(self) -> bool:
        return self._cancelled


class AsyncioScheduler:
    """HostScheduler backed by an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()

    def schedule_once(self, delay_ms: int, callback: Callback) -> asyncio.TimerHandle:
        return self._loop.call_later(max(0, delay_ms) / 1000.0, callback)

    def schedule_repeating(self, interval_ms: int, callback: Callback) -> _RepeatingHandle:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be greater than zero")
        return _RepeatingHandle(self._loop, interval_ms / 1000.0, callback)

    def cancel(self, handle: asyncio.TimerHandle | _RepeatingHandle) -> None:
        handle.cancel()


# Stepped ---------------------------------------------------------------------
@dataclass
class SteppedTimer:
    """A timer registered with :class:`SteppedScheduler`."""

    due_ms: int
    callback: Callback
    interval_ms: int | None = None
    cancelled: bool = False
    fired: int = field(default=0)


class SteppedScheduler:
    """Deterministic scheduler used for tests.

    Virtual time advances only when :meth:`advance` is called.
    """

    def __init__(self, start_ms: int = 0) -> None:
        self._now_ms = start_ms
        self._queue: list[tuple[int, int, SteppedTimer]] = []
        self._seq = itertools.count()

    @property
    def now_ms(self) -> int:
        return self._now_ms

    def _push(self, timer: SteppedTimer) -> None:
        heapq.heappush(self._queue, (timer.due_ms, next(self._seq), timer))

    def schedule_once(self, delay_ms: int, callback: Callback) -> SteppedTimer:
        timer = SteppedTimer(due_ms=self._now_ms + max(0, delay_ms), callback=callback)
        self._push(timer)
        return timer

    def schedule_repeating(self, interval_ms: int, callback: Callback) -> SteppedTimer:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be greater than zero")
        timer = SteppedTimer(due_ms=self._now_ms + interval_ms, callback=callback, interval_ms=interval_ms)
        self._push(timer)
        return timer

    def cancel(self, handle: SteppedTimer) -> None:
        handle.cancelled = True

    def pending(self) -> list[SteppedTimer]:
        """Live (not cancelled) timers, soonest first."""
        return [timer for _, _, timer in sorted(self._queue) if not timer.cancelled]

    def advance(self, ms: int) -> int:
        """Advance virtual time by ``ms``, firing due timers. Returns callbacks run."""
        if ms < 0:
            raise ValueError("ms must be non-negative")
        target = self._now_ms + ms
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due_ms, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now_ms = due_ms
            if timer.interval_ms is not None:
                timer.due_ms = due_ms + timer.interval_ms
                self._push(timer)
            else:
                timer.cancelled = True
            timer.fired += 1
            ran += 1
            timer.callback()
        self._now_ms = target
        return ran

    def run_until_idle(self, limit_ms: int = 3_600_000) -> int:
        """Advance until no live timers remain or ``limit_ms`` of virtual time passes."""
        deadline = self._now_ms + limit_ms
        ran = 0
        while True:
            live = self.pending()
            if not live or live[0].due_ms > deadline:
                break
            ran += self.advance(live[0].due_ms - self._now_ms)
        return ran
