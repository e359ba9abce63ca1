from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple

Callback = Callable[[], None]


class TaskHandle(Protocol):
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Deferred and periodic callbacks on the session's single event stream."""

    def call_later(self, delay: float, callback: Callback) -> TaskHandle: ...

    def call_every(self, interval: float, callback: Callback) -> TaskHandle: ...


class ManualTask:
    def __init__(self, due: float, interval: Optional[float], callback: Callback) -> None:
        self.due = due
        self.interval = interval
        self.callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False


class ManualScheduler:
    """Virtual-clock scheduler. Nothing fires until :meth:`advance` is called.

    Used for headless play and in tests.
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._queue: List[Tuple[float, int, ManualTask]] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callback) -> ManualTask:
        return self._push(ManualTask(self._now + max(0.0, delay), None, callback))

    def call_every(self, interval: float, callback: Callback) -> ManualTask:
        if interval <= 0:
            raise ValueError("Interval must be positive")
        return self._push(ManualTask(self._now + interval, interval, callback))

    def pending(self) -> int:
        return sum(1 for _, _, task in self._queue if task.active)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due tasks in time order."""
        target = self._now + seconds
        # Float accumulation (e.g. 5 x 0.6) must not push a task past its due tick.
        while self._queue and self._queue[0][0] <= target + 1e-9:
            due, _, task = heapq.heappop(self._queue)
            if not task.active:
                continue
            self._now = max(self._now, due)
            if task.interval is None:
                task.cancel()
            else:
                task.due = due + task.interval
                self._push(task)
            task.callback()
        self._now = max(self._now, target)

    def run_pending(self) -> None:
        """Fire everything already due without moving the clock."""
        self.advance(0.0)

    def _push(self, task: ManualTask) -> ManualTask:
        heapq.heappush(self._queue, (task.due, next(self._seq), task))
        return task
