from __future__ import annotations

import pytest

from memorygames.scheduling import ManualScheduler


def test_call_later_fires_in_due_then_scheduling_order(scheduler):
    fired = []
    scheduler.call_later(2.0, lambda: fired.append("c"))
    scheduler.call_later(1.0, lambda: fired.append("a"))
    scheduler.call_later(1.0, lambda: fired.append("b"))

    assert scheduler.advance(0.5) == 0
    assert scheduler.advance(1.0) == 2
    assert fired == ["a", "b"]
    scheduler.advance(1.0)
    assert fired == ["a", "b", "c"]
    assert scheduler.now() == pytest.approx(2.5)


def test_cancelled_handle_never_fires(scheduler):
    fired = []
    handle = scheduler.call_later(1.0, lambda: fired.append(1))
    handle.cancel()
    handle.cancel()
    scheduler.advance(5.0)
    assert fired == []
    assert scheduler.pending == 0


def test_repeating_timer_rearms_until_cancelled(scheduler):
    ticks = []
    handle = scheduler.call_every(0.5, lambda: ticks.append(scheduler.now()))
    scheduler.advance(2.0)
    assert ticks == pytest.approx([0.5, 1.0, 1.5, 2.0])
    handle.cancel()
    scheduler.advance(2.0)
    assert len(ticks) == 4


def test_repeating_callback_may_cancel_itself(scheduler):
    calls = []
    handle = None

    def tick():
        calls.append(1)
        if len(calls) == 3:
            handle.cancel()

    handle = scheduler.call_every(1.0, tick)
    scheduler.advance(10.0)
    assert len(calls) == 3
    assert scheduler.pending == 0


def test_callbacks_scheduled_during_advance_fire_when_due(scheduler):
    fired = []

    def first():
        fired.append(("first", scheduler.now()))
        scheduler.call_later(0.5, lambda: fired.append(("second", scheduler.now())))

    scheduler.call_later(1.0, first)
    scheduler.advance(2.0)
    assert [name for name, _ in fired] == ["first", "second"]
    assert fired[1][1] == pytest.approx(1.5)
    assert scheduler.now() == pytest.approx(2.0)


def test_one_shot_handle_marked_done_after_firing(scheduler):
    handle = scheduler.call_later(0.1, lambda: None)
    assert scheduler.pending == 1
    scheduler.advance(0.2)
    assert handle.cancelled
    assert scheduler.pending == 0


def test_invalid_arguments():
    s = ManualScheduler(start=10.0)
    assert s.now() == 10.0
    with pytest.raises(ValueError):
        s.call_later(-1.0, lambda: None)
    with pytest.raises(ValueError):
        s.call_every(0.0, lambda: None)
    with pytest.raises(ValueError):
        s.advance(-0.1)
