from __future__ import annotations

from typing import List, Optional

from PySide6.QtCore import QObject, QTimer

from memorymatch.core.scheduler import Callback


class QtTask:
    """A QTimer wrapped in the scheduler's cancellable task handle."""

    def __init__(self, parent: Optional[QObject], delay: float, callback: Callback, repeat: bool) -> None:
        self._callback = callback
        self._repeat = repeat
        self._timer: Optional[QTimer] = QTimer(parent)
        self._timer.setSingleShot(not repeat)
        self._timer.setInterval(max(0, int(round(delay * 1000))))
        self._timer.timeout.connect(self._fire)
        self._timer.start()

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None

    def _fire(self) -> None:
        if self._timer is None:
            return
        if not self._repeat:
            self.cancel()
        self._callback()


class QtScheduler:
    """Runs session timers on the Qt event loop.

    Live tasks are kept referenced here so that fire-and-forget calls are not
    collected before their timer fires.
    """

    def __init__(self, parent: Optional[QObject] = None) -> None:
        self._parent = parent
        self._tasks: List[QtTask] = []

    def call_later(self, delay: float, callback: Callback) -> QtTask:
        return self._track(QtTask(self._parent, delay, callback, repeat=False))

    def call_every(self, interval: float, callback: Callback) -> QtTask:
        return self._track(QtTask(self._parent, interval, callback, repeat=True))

    def _track(self, task: QtTask) -> QtTask:
        self._tasks = [t for t in self._tasks if t.active]
        self._tasks.append(task)
        return task
