"""Scheduler implementations: a real event loop and a virtual clock."""

from __future__ import annotations

import asyncio
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable

from ..core.ports import Scheduler


class AsyncioScheduler(Scheduler):
    """
    Defers actions with loop.call_later. Must be used from the thread that
    runs the loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self.loop = loop

    def schedule(self, action: Callable[[], None], delay_ms: int) -> asyncio.TimerHandle:
        loop = self.loop or asyncio.get_running_loop()
        return loop.call_later(delay_ms / 1000, action)

    def cancel(self, token: asyncio.TimerHandle) -> None:
        token.cancel()


@dataclass(order=True)
class _Timer:
    due: int
    seq: int
    action: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)


class ManualScheduler(Scheduler):
    """
    Virtual clock: nothing fires until advance() moves time past a timer's
    due point. Timers due at the same instant fire in scheduling order.
    """

    def __init__(self) -> None:
        self.now = 0
        self._queue: list[_Timer] = []
        self._seq = itertools.count()
        self._cancelled = 0

    def schedule(self, action: Callable[[], None], delay_ms: int) -> _Timer:
        timer = _Timer(self.now + max(0, delay_ms), next(self._seq), action)
        heapq.heappush(self._queue, timer)
        return timer

    def cancel(self, token: _Timer) -> None:
        if token.cancelled:
            return
        token.cancelled = True
        self._cancelled += 1
        # Keep dead timers at most half the heap
        if self._cancelled * 2 > len(self._queue):
            self._queue = [t for t in self._queue if not t.cancelled]
            heapq.heapify(self._queue)
            self._cancelled = 0

    @property
    def pending(self) -> int:
        return len(self._queue) - self._cancelled

    def advance(self, ms: int) -> int:
        """Move the clock forward, firing due timers. Returns how many fired."""
        target = self.now + ms
        fired = 0
        while self._queue and self._queue[0].due <= target:
            timer = heapq.heappop(self._queue)
            if timer.cancelled:
                self._cancelled -= 1
                continue
            # Fired timers can no longer be cancelled
            timer.cancelled = True
            self.now = timer.due
            timer.action()
            fired += 1
        self.now = target
        return fired

    def run_all(self) -> int:
        fired = 0
        while self.pending:
            due = min(t.due for t in self._queue if not t.cancelled)
            fired += self.advance(due - self.now)
        return fired
