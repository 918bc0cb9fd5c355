"""Tests for the periodic ticker."""

import pytest
from unittest.mock import Mock

from moodlife.core.errors import InvalidGridError
from moodlife.core.grid import Grid
from moodlife.core.scheduler import PeriodicTicker
from moodlife.core.session import Cursor, Session, SessionState


class FakeTimer:
    """Stand-in for a Tk root's after()/after_cancel()."""

    def __init__(self):
        self.pending = {}
        self.delays = []
        self._next_id = 0

    def after(self, ms, callback):
        self._next_id += 1
        after_id = f"after#{self._next_id}"
        self.pending[after_id] = callback
        self.delays.append(ms)
        return after_id

    def after_cancel(self, after_id):
        self.pending.pop(after_id, None)

    def fire(self):
        """Run every callback that is currently pending."""
        callbacks = list(self.pending.values())
        self.pending.clear()
        for callback in callbacks:
            callback()


class TestPeriodicTicker:
    """Test cases for PeriodicTicker."""

    @pytest.fixture
    def timer(self):
        return FakeTimer()

    @pytest.fixture
    def session(self):
        session = Session(Grid(2, 2), speed=100)
        session.start()
        return session

    def test_start_schedules_one_tick(self, timer, session):
        """Test that start registers a single callback with the session speed."""
        ticker = PeriodicTicker(timer, session)
        ticker.start()
        ticker.start()

        assert len(timer.pending) == 1
        assert timer.delays == [100]
        assert ticker.active

    def test_fire_ticks_and_reschedules(self, timer, session):
        """Test that each fire advances one cell and schedules the next."""
        on_tick = Mock()
        ticker = PeriodicTicker(timer, session, on_tick=on_tick)
        ticker.start()

        timer.fire()
        timer.fire()

        assert session.cursor == Cursor(1, 0)
        assert on_tick.call_count == 2
        on_tick.assert_called_with(Cursor(0, 1))
        assert len(timer.pending) == 1

    def test_speed_change_applies_to_next_period(self, timer, session):
        """Test that the period is re-read between ticks."""
        ticker = PeriodicTicker(timer, session)
        ticker.start()

        session.speed = 5
        timer.fire()
        session.speed = 250
        timer.fire()

        assert timer.delays == [100, 10, 250]

    def test_cancel(self, timer, session):
        """Test that cancelling removes the pending registration."""
        ticker = PeriodicTicker(timer, session)
        ticker.start()
        ticker.cancel()

        assert not ticker.active
        assert timer.pending == {}

        # Cancelling again is harmless
        ticker.cancel()

    def test_restart(self, timer, session):
        """Test that restart replaces the pending registration."""
        ticker = PeriodicTicker(timer, session)
        ticker.start()
        session.speed = 40
        ticker.restart()

        assert len(timer.pending) == 1
        assert timer.delays == [100, 40]

    def test_paused_session_does_not_tick(self, timer, session):
        """Test that a fire after pausing neither ticks nor reschedules."""
        ticker = PeriodicTicker(timer, session)
        ticker.start()
        session.pause()

        timer.fire()

        assert session.cursor == Cursor.origin()
        assert not ticker.active

    def test_on_tick_can_pause(self, timer, session):
        """Test that pausing from the callback stops the loop."""
        ticker = PeriodicTicker(timer, session, on_tick=lambda cursor: session.pause())
        ticker.start()

        timer.fire()

        assert session.state is SessionState.PAUSED
        assert not ticker.active

    def test_reentrant_fire_ignored(self, timer, session):
        """Test that a fire during a tick does not run a second tick."""
        ticker = PeriodicTicker(timer, session)

        ticker._in_tick = True
        ticker._fire()
        assert session.cursor == Cursor.origin()

        ticker._in_tick = False
        ticker._fire()
        assert session.cursor == Cursor(0, 1)

    def test_tick_error_stops_loop(self, timer):
        """Test that a failing tick propagates and is not rescheduled."""
        session = Session(Grid(1, 1))
        session.start()
        session.grid = Grid(0, 0)

        ticker = PeriodicTicker(timer, session)
        ticker.start()

        with pytest.raises(InvalidGridError):
            timer.fire()

        assert not ticker.active
        assert session.state is SessionState.IDLE
