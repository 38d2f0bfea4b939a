"""
Game Rules
==========

Handles the survival countdown and the win/lose conditions.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from fitfuel.burger_core.config_loader import GameConfig, get_config


class GameResult(str, enum.Enum):
    """Outcome of the current attempt."""
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"


class RunState(str, enum.Enum):
    """Whether the periodic actions are running."""
    STOPPED = "stopped"
    ACTIVE = "active"
    PAUSED = "paused"


@dataclass
class TerminationResult:
    """Result of termination check."""
    result: GameResult
    reason: str

    @property
    def terminated(self) -> bool:
        return self.result is not GameResult.IN_PROGRESS

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(GameResult.IN_PROGRESS, "")

    @staticmethod
    def won(reason: str) -> "TerminationResult":
        return TerminationResult(GameResult.WON, reason)

    @staticmethod
    def lost(reason: str) -> "TerminationResult":
        return TerminationResult(GameResult.LOST, reason)


class Countdown:
    """
    Survival timer counted in whole countdown periods.

    Counting integer periods keeps 600 decrements of 0.1 landing exactly
    on zero instead of drifting around it.
    """

    def __init__(self, period: float, duration: float):
        if period <= 0:
            raise ValueError(f"Countdown period must be positive, got {period}")
        self._period = period
        self._ticks_left: int = 0
        self.reset(duration)

    def reset(self, duration: float) -> None:
        self._ticks_left = max(0, int(round(duration / self._period)))

    def tick(self) -> None:
        self._ticks_left -= 1

    @property
    def period(self) -> float:
        return self._period

    @property
    def remaining(self) -> float:
        """Remaining time in time-units (may be zero, never negative)."""
        return max(0, self._ticks_left) * self._period

    @property
    def expired(self) -> bool:
        return self._ticks_left <= 0


class TerminationRules:
    """
    Handles game termination conditions.

    - Ceiling: avatar weight at or above the level ceiling (checked each
      physics tick, after collision resolution)
    - Survival: countdown reached zero
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize termination rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self.countdown = Countdown(
            config.clock.countdown_period,
            config.levels.survival_duration
        )

    def reset(self, duration: float) -> None:
        """Reset the countdown for a new attempt."""
        self.countdown.reset(duration)

    def check_weight(self, weight: int, ceiling: int) -> TerminationResult:
        """Loss check; weight may overshoot the ceiling and is not clamped."""
        if weight >= ceiling:
            return TerminationResult.lost("weight_ceiling")
        return TerminationResult.none()

    def check_countdown(self) -> TerminationResult:
        """Win check after a countdown tick."""
        if self.countdown.expired:
            return TerminationResult.won("survived")
        return TerminationResult.none()
