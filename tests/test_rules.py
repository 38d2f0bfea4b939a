"""
Tests for the survival countdown and win/lose checks.
"""

import pytest

from fitfuel.burger_core.rules import Countdown, GameResult, TerminationResult, TerminationRules


@pytest.fixture
def rules(config):
    return TerminationRules(config)


class TestCountdown:
    """Test integer-tick countdown."""

    def test_rejects_non_positive_period(self):
        """A zero period cannot count anything down."""
        with pytest.raises(ValueError):
            Countdown(0.0, 60.0)

    def test_six_hundred_ticks_land_on_zero(self):
        """60 time-units at 0.1 expire on exactly the 600th tick."""
        countdown = Countdown(0.1, 60.0)

        for _ in range(599):
            countdown.tick()
        assert not countdown.expired
        assert countdown.remaining == pytest.approx(0.1)

        countdown.tick()
        assert countdown.expired
        assert countdown.remaining == 0.0

    def test_remaining_never_negative(self):
        """Extra ticks past zero keep remaining at zero."""
        countdown = Countdown(0.1, 0.2)
        for _ in range(5):
            countdown.tick()

        assert countdown.expired
        assert countdown.remaining == 0.0

    def test_reset_refills(self):
        """reset() starts a full timer again."""
        countdown = Countdown(0.1, 1.0)
        for _ in range(10):
            countdown.tick()

        countdown.reset(1.0)

        assert not countdown.expired
        assert countdown.remaining == pytest.approx(1.0)


class TestTerminationRules:
    """Test weight and countdown checks."""

    def test_weight_below_ceiling_continues(self, rules):
        outcome = rules.check_weight(199, 200)

        assert outcome.result is GameResult.IN_PROGRESS
        assert not outcome.terminated

    def test_weight_at_ceiling_loses(self, rules):
        """Reaching the ceiling exactly is a loss."""
        outcome = rules.check_weight(200, 200)

        assert outcome.result is GameResult.LOST
        assert outcome.reason == "weight_ceiling"
        assert outcome.terminated

    def test_overshoot_loses(self, rules):
        """Weight above the ceiling still reports a loss."""
        assert rules.check_weight(215, 200).result is GameResult.LOST

    def test_countdown_win_only_when_expired(self, rules, config):
        """check_countdown() wins once the full survival duration has ticked."""
        ticks = round(config.levels.survival_duration / config.clock.countdown_period)

        for _ in range(ticks - 1):
            rules.countdown.tick()
        assert rules.check_countdown() == TerminationResult.none()

        rules.countdown.tick()
        outcome = rules.check_countdown()
        assert outcome.result is GameResult.WON
        assert outcome.reason == "survived"

    def test_reset_uses_level_duration(self, rules):
        """reset() takes the duration of the level being started."""
        rules.reset(5.0)

        assert rules.countdown.remaining == pytest.approx(5.0)
        assert rules.check_countdown().result is GameResult.IN_PROGRESS
