"""Tests for memorymatch.core.scheduler and memorymatch.core.timing."""

from __future__ import annotations

from typing import Callable, List

import pytest

from memorymatch.core.scheduler import ManualScheduler
from memorymatch.core.timing import RoundTimers


class _StickyHandle:
    """Handle whose cancel() does nothing, to reach the generation guard."""

    active = True

    def cancel(self) -> None:
        pass


class _RecordingScheduler:
    def __init__(self) -> None:
        self.callbacks: List[Callable[[], None]] = []

    def call_later(self, delay, callback):
        self.callbacks.append(callback)
        return _StickyHandle()

    def call_every(self, interval, callback):
        self.callbacks.append(callback)
        return _StickyHandle()


# ---------------------------------------------------------------------------
# ManualScheduler
# ---------------------------------------------------------------------------

class TestManualScheduler:
    def test_call_later_fires_when_due(self):
        s = ManualScheduler()
        fired = []
        s.call_later(1.0, lambda: fired.append(s.now))
        s.advance(0.5)
        assert fired == []
        s.advance(0.5)
        assert fired == [1.0]

    def test_one_shot_fires_once(self):
        s = ManualScheduler()
        fired = []
        handle = s.call_later(0.6, lambda: fired.append(1))
        s.advance(5)
        assert fired == [1]
        assert not handle.active

    def test_call_every_repeats(self):
        s = ManualScheduler()
        ticks = []
        s.call_every(1.0, lambda: ticks.append(s.now))
        s.advance(3.5)
        assert ticks == [1.0, 2.0, 3.0]

    def test_cancel_stops_task(self):
        s = ManualScheduler()
        ticks = []
        handle = s.call_every(1.0, lambda: ticks.append(1))
        s.advance(2)
        handle.cancel()
        s.advance(5)
        assert ticks == [1, 1]

    def test_cancel_twice_is_harmless(self):
        s = ManualScheduler()
        handle = s.call_later(1.0, lambda: None)
        handle.cancel()
        handle.cancel()
        assert s.pending() == 0

    def test_tasks_fire_in_time_order(self):
        s = ManualScheduler()
        order = []
        s.call_later(2.0, lambda: order.append("b"))
        s.call_later(1.0, lambda: order.append("a"))
        s.advance(3)
        assert order == ["a", "b"]

    def test_task_scheduled_from_callback_fires_in_same_advance(self):
        s = ManualScheduler()
        fired = []
        s.call_later(1.0, lambda: s.call_later(1.0, lambda: fired.append(s.now)))
        s.advance(5)
        assert fired == [2.0]

    def test_run_pending_fires_zero_delay(self):
        s = ManualScheduler()
        fired = []
        s.call_later(0, lambda: fired.append(1))
        s.run_pending()
        assert fired == [1]

    def test_repeated_fractional_advances(self):
        s = ManualScheduler()
        fired = []
        s.call_later(3.0, lambda: fired.append(1))
        for _ in range(5):
            s.advance(0.6)
        assert fired == [1]

    def test_non_positive_interval_rejected(self):
        with pytest.raises(ValueError):
            ManualScheduler().call_every(0, lambda: None)


# ---------------------------------------------------------------------------
# RoundTimers – generation guard
# ---------------------------------------------------------------------------

class TestGenerationGuard:
    def test_stale_callback_is_dropped(self):
        scheduler = _RecordingScheduler()
        timers = RoundTimers(scheduler)
        fired = []
        timers.schedule_once(0.6, lambda: fired.append(1))
        timers.new_generation()
        scheduler.callbacks[0]()
        assert fired == []

    def test_current_callback_runs(self):
        scheduler = _RecordingScheduler()
        timers = RoundTimers(scheduler)
        fired = []
        timers.schedule_once(0.6, lambda: fired.append(1))
        scheduler.callbacks[0]()
        assert fired == [1]

    def test_new_generation_cancels_pending(self):
        s = ManualScheduler()
        timers = RoundTimers(s)
        timers.schedule_once(1.0, lambda: None)
        timers.start_countdown(lambda: None)
        timers.start_auto_progress(5, lambda r: None, lambda: None)
        timers.new_generation()
        assert s.pending() == 0
        assert timers.generation == 1

    def test_cancel_one_shots_keeps_countdown(self):
        s = ManualScheduler()
        timers = RoundTimers(s)
        fired = []
        ticks = []
        timers.schedule_once(0.6, lambda: fired.append(1))
        timers.start_countdown(lambda: ticks.append(1))
        timers.cancel_one_shots()
        timers.cancel_one_shots()
        s.advance(2)
        assert fired == []
        assert len(ticks) == 2
        assert timers.generation == 0


# ---------------------------------------------------------------------------
# RoundTimers – countdowns
# ---------------------------------------------------------------------------

class TestCountdowns:
    def test_restarting_countdown_keeps_single_timer(self):
        s = ManualScheduler()
        timers = RoundTimers(s)
        ticks = []
        timers.start_countdown(lambda: ticks.append(1))
        timers.start_countdown(lambda: ticks.append(1))
        s.advance(3)
        assert len(ticks) == 3
        assert timers.countdown_active

    def test_cancel_countdown_is_idempotent(self):
        s = ManualScheduler()
        timers = RoundTimers(s)
        timers.cancel_countdown()
        timers.start_countdown(lambda: None)
        timers.cancel_countdown()
        timers.cancel_countdown()
        assert not timers.countdown_active

    def test_cancel_all_without_timers(self):
        timers = RoundTimers(ManualScheduler())
        timers.cancel_all()
        timers.cancel_all()
        assert timers.auto_progress_remaining is None

    def test_auto_progress_counts_down_then_fires(self):
        s = ManualScheduler()
        timers = RoundTimers(s)
        ticks: List[int] = []
        done = []
        timers.start_auto_progress(5, ticks.append, lambda: done.append(True))
        assert timers.auto_progress_remaining == 5
        s.advance(4)
        assert ticks == [4, 3, 2, 1]
        assert done == []
        s.advance(1)
        assert done == [True]
        assert timers.auto_progress_remaining is None
        s.advance(10)
        assert done == [True]

    def test_cancel_auto_progress(self):
        s = ManualScheduler()
        timers = RoundTimers(s)
        done = []
        timers.start_auto_progress(5, lambda r: None, lambda: done.append(True))
        s.advance(2)
        timers.cancel_auto_progress()
        timers.cancel_auto_progress()
        s.advance(10)
        assert done == []
