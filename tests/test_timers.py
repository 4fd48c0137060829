"""Tests for the TimerQueue virtual clock."""

import pytest

from zonespawn.engine.timers import TimerQueue


class TestTimerQueue:
    def test_one_shot_runs_once_when_due(self):
        timers = TimerQueue()
        fired = []
        timers.schedule_once(1500, lambda: fired.append(timers.now_ms))
        timers.advance(1.0)
        assert fired == []
        timers.advance(1.0)
        assert fired == [1500]
        timers.advance(10.0)
        assert fired == [1500]
        assert timers.now_ms == 12000

    def test_repeating_fires_each_interval(self):
        timers = TimerQueue()
        fired = []
        timers.schedule_repeating(1000, lambda: fired.append(timers.now_ms))
        timers.advance(3.5)
        assert fired == [1000, 2000, 3000]

    def test_due_order_then_registration_order(self):
        timers = TimerQueue()
        order = []
        timers.schedule_once(200, lambda: order.append("late"))
        timers.schedule_once(100, lambda: order.append("first"))
        timers.schedule_once(100, lambda: order.append("second"))
        timers.advance_ms(500)
        assert order == ["first", "second", "late"]

    def test_cancel(self):
        timers = TimerQueue()
        fired = []
        task = timers.schedule_repeating(100, lambda: fired.append(1))
        timers.advance_ms(250)
        timers.cancel(task)
        timers.advance_ms(1000)
        assert fired == [1, 1]
        assert timers.pending == 0

    def test_callback_may_schedule_due_work(self):
        timers = TimerQueue()
        fired = []

        def first():
            fired.append("first")
            timers.schedule_once(0, lambda: fired.append("chained"))

        timers.schedule_once(10, first)
        timers.advance_ms(10)
        assert fired == ["first", "chained"]

    def test_repeating_interval_must_be_positive(self):
        with pytest.raises(ValueError):
            TimerQueue().schedule_repeating(0, lambda: None)

    def test_clear_cancels_everything(self):
        timers = TimerQueue()
        task = timers.schedule_once(10, lambda: None)
        timers.clear()
        assert task.cancelled
        assert timers.pending == 0
