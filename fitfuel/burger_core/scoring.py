"""
Scoring System
==============

Tracks attempt counters and computes level awards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fitfuel.burger_core.config_loader import GameConfig, get_config


@dataclass
class AwardEvent:
    """Record of a won level; points are reported, never applied here."""
    level_index: int
    points: int

    def __repr__(self) -> str:
        return f"AwardEvent(level={self.level_index}, points={self.points})"


class ProgressTracker:
    """
    Tracks counters reported to the progression layer.

    - games_played: incremented on every won or lost attempt
    - highest_level: highest level index reached via advance
    - points: award for a won level is ``level_index * points_per_level``
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize progress tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._games_played: int = 0
        self._highest_level: int = 1
        self._last_award: Optional[AwardEvent] = None

    @property
    def games_played(self) -> int:
        return self._games_played

    @property
    def highest_level(self) -> int:
        return self._highest_level

    @property
    def last_award(self) -> Optional[AwardEvent]:
        """Award of the most recent win, or None."""
        return self._last_award

    def points_for_level(self, level_index: int) -> int:
        return level_index * self._config.scoring.points_per_level

    def record_win(self, level_index: int) -> AwardEvent:
        """Count a won attempt and compute its award."""
        self._games_played += 1
        self._last_award = AwardEvent(
            level_index=level_index,
            points=self.points_for_level(level_index)
        )
        return self._last_award

    def record_loss(self) -> None:
        self._games_played += 1

    def reach_level(self, level_index: int) -> int:
        """
        Raise the highest level reached.

        Returns:
            The highest level after the update.
        """
        if level_index > self._highest_level:
            self._highest_level = level_index
        return self._highest_level

    def reset(self) -> None:
        """Reset all counters to their initial values."""
        self._games_played = 0
        self._highest_level = 1
        self._last_award = None
