"""
Tests for the periodic action scheduler.
"""

import pytest

from fitfuel.burger_core.clock import PeriodicAction, SimulationClock


def recorder(name, log):
    return lambda: log.append(name)


class TestPeriodicAction:
    """Test a single recurring action."""

    def test_rejects_non_positive_period(self):
        """Zero or negative periods fail fast."""
        with pytest.raises(ValueError):
            PeriodicAction("bad", 0.0, lambda: None)

    def test_unarmed_never_due(self):
        """A cancelled action accumulates nothing."""
        action = PeriodicAction("a", 0.1, lambda: None)
        action.accumulate(5.0)
        assert not action.take_due()

    def test_arm_starts_fresh_schedule(self):
        """Re-arming discards the partial accumulator."""
        action = PeriodicAction("a", 1.0, lambda: None)
        action.arm()
        action.accumulate(0.9)
        action.cancel()
        action.arm()
        action.accumulate(0.2)
        assert not action.take_due()


class TestSimulationClock:
    """Test the frame-driven clock."""

    def test_fires_at_period(self):
        """An action fires once per elapsed period."""
        log = []
        clock = SimulationClock()
        clock.add(PeriodicAction("tick", 0.1, recorder("tick", log)))
        clock.arm_all()

        clock.advance(0.05)
        assert log == []
        clock.advance(0.05)
        assert log == ["tick"]
        clock.advance(0.35)
        assert len(log) == 4

    def test_small_steps_absorb_drift(self):
        """Ten 0.01 steps owe exactly one 0.1 firing."""
        action = PeriodicAction("countdown", 0.1, lambda: None)
        clock = SimulationClock()
        clock.add(action)
        clock.arm_all()

        for _ in range(10):
            clock.advance(0.01)

        assert action.fire_count == 1

    def test_physics_rate(self):
        """One time-unit yields 60 physics ticks."""
        action = PeriodicAction("physics", 1.0 / 60.0, lambda: None)
        clock = SimulationClock()
        clock.add(action)
        clock.arm_all()

        for _ in range(60):
            clock.advance(1.0 / 60.0)

        assert action.fire_count == 60

    def test_registration_order_within_frame(self):
        """Coinciding firings run in registration order."""
        log = []
        clock = SimulationClock()
        clock.add(PeriodicAction("spawn", 0.5, recorder("spawn", log)))
        clock.add(PeriodicAction("physics", 0.25, recorder("physics", log)))
        clock.add(PeriodicAction("countdown", 0.5, recorder("countdown", log)))
        clock.arm_all()

        clock.advance(0.5)

        assert log == ["physics", "spawn", "physics", "countdown"]

    def test_large_dt_interleaves_chronologically(self):
        """A long advance is split so short periods are not batched at the end."""
        log = []
        clock = SimulationClock()
        clock.add(PeriodicAction("slow", 0.3, recorder("slow", log)))
        clock.add(PeriodicAction("fast", 0.1, recorder("fast", log)))
        clock.arm_all()

        clock.advance(0.6)

        assert log == ["fast", "fast", "slow", "fast", "fast", "fast", "slow", "fast"]

    def test_cancel_inside_callback_stops_others(self):
        """A callback that cancels the clock prevents later firings that frame."""
        log = []
        clock = SimulationClock()

        def stop_everything():
            log.append("first")
            clock.cancel_all()

        clock.add(PeriodicAction("first", 0.1, stop_everything))
        clock.add(PeriodicAction("second", 0.1, recorder("second", log)))
        clock.arm_all()

        clock.advance(1.0)

        assert log == ["first"]
        assert not clock.any_armed

    def test_callback_exception_propagates(self):
        """Errors in periodic work are not swallowed."""
        def explode():
            raise RuntimeError("boom")

        clock = SimulationClock()
        clock.add(PeriodicAction("bad", 0.1, explode))
        clock.arm_all()

        with pytest.raises(RuntimeError, match="boom"):
            clock.advance(0.2)

    def test_negative_dt_rejected(self):
        """Time never runs backwards."""
        clock = SimulationClock()
        with pytest.raises(ValueError):
            clock.advance(-0.1)

    def test_duplicate_name_rejected(self):
        """Action names are unique."""
        clock = SimulationClock()
        clock.add(PeriodicAction("a", 0.1, lambda: None))
        with pytest.raises(ValueError):
            clock.add(PeriodicAction("a", 0.2, lambda: None))

    def test_idle_clock_does_not_advance(self):
        """Elapsed time only counts while something is armed."""
        clock = SimulationClock()
        clock.add(PeriodicAction("a", 0.1, lambda: None))

        assert clock.advance(1.0) == 0
        assert clock.elapsed == 0.0
