from __future__ import annotations

import logging
from typing import Callable, List, Optional

from memorymatch.core.scheduler import Callback, Scheduler, TaskHandle

logger = logging.getLogger(__name__)


class RoundTimers:
    """Owns every timer of a session and the round generation token.

    Each callback is bound to the generation that was current when it was
    scheduled. :meth:`new_generation` cancels all outstanding work, and any
    callback that still gets delivered afterwards is dropped.

    At most one round countdown and one auto-progress countdown exist at a
    time; starting either cancels its predecessor.
    """

    def __init__(self, scheduler: Scheduler, tick_seconds: float = 1.0) -> None:
        self._scheduler = scheduler
        self._tick_seconds = tick_seconds
        self._generation = 0
        self._countdown: Optional[TaskHandle] = None
        self._auto_progress: Optional[TaskHandle] = None
        self._auto_progress_remaining: Optional[int] = None
        self._one_shots: List[TaskHandle] = []

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def countdown_active(self) -> bool:
        return self._countdown is not None and self._countdown.active

    @property
    def auto_progress_remaining(self) -> Optional[int]:
        return self._auto_progress_remaining

    def new_generation(self) -> int:
        self.cancel_all()
        self._generation += 1
        logger.debug("Round generation is now %d", self._generation)
        return self._generation

    def cancel_all(self) -> None:
        self.cancel_countdown()
        self.cancel_auto_progress()
        self.cancel_one_shots()

    def cancel_one_shots(self) -> None:
        for handle in self._one_shots:
            handle.cancel()
        self._one_shots = []

    def schedule_once(self, delay: float, callback: Callback) -> TaskHandle:
        self._one_shots = [h for h in self._one_shots if h.active]
        handle = self._scheduler.call_later(delay, self._bind(callback))
        self._one_shots.append(handle)
        return handle

    # -- round countdown ---------------------------------------------------

    def start_countdown(self, on_tick: Callback) -> None:
        self.cancel_countdown()
        self._countdown = self._scheduler.call_every(self._tick_seconds, self._bind(on_tick))

    def cancel_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None

    # -- auto-progress countdown -------------------------------------------

    def start_auto_progress(
        self,
        seconds: int,
        on_tick: Callable[[int], None],
        on_done: Callback,
    ) -> None:
        """Count ``seconds`` down once per tick, then call ``on_done``."""
        self.cancel_auto_progress()
        self._auto_progress_remaining = seconds

        def _tick() -> None:
            if self._auto_progress_remaining is None:
                return
            self._auto_progress_remaining -= 1
            if self._auto_progress_remaining <= 0:
                self.cancel_auto_progress()
                on_done()
            else:
                on_tick(self._auto_progress_remaining)

        self._auto_progress = self._scheduler.call_every(self._tick_seconds, self._bind(_tick))

    def cancel_auto_progress(self) -> None:
        if self._auto_progress is not None:
            self._auto_progress.cancel()
            self._auto_progress = None
        self._auto_progress_remaining = None

    def _bind(self, callback: Callback) -> Callback:
        generation = self._generation

        def _guarded() -> None:
            if generation != self._generation:
                logger.debug("Dropping stale callback from round generation %d", generation)
                return
            callback()

        return _guarded
