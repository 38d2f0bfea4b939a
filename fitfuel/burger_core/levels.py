"""
Level Specs
===========

Per-level tunables derived from the level index via closed-form formulas.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fitfuel.burger_core.config_loader import GameConfig, get_config


@dataclass(frozen=True)
class LevelSpec:
    """
    Immutable tunables for one level.

    ``weight_ceiling`` and ``spawn_interval`` never increase with the index
    and are floor-clamped.
    """
    index: int
    weight_ceiling: int
    spawn_interval: float
    survival_duration: float

    def __post_init__(self) -> None:
        if self.index < 1:
            raise ValueError(f"Level index must be >= 1, got {self.index}")


def weight_ceiling_for(index: int, config: Optional[GameConfig] = None) -> int:
    """max(floor, base - (index - 1) * step)"""
    if config is None:
        config = get_config()
    levels = config.levels
    return max(levels.ceiling_floor, levels.base_ceiling - (index - 1) * levels.ceiling_step)


def spawn_interval_for(index: int, config: Optional[GameConfig] = None) -> float:
    """max(floor, base - (index - 1) * step)"""
    if config is None:
        config = get_config()
    levels = config.levels
    return max(levels.spawn_floor, levels.base_spawn_interval - (index - 1) * levels.spawn_step)


def derive_level(index: int, config: Optional[GameConfig] = None) -> LevelSpec:
    """
    Build the LevelSpec for a level index.

    Indices below 1 are clamped to 1.

    Args:
        index: 1-based level index.
        config: Game configuration. Uses default if None.

    Returns:
        LevelSpec for that index.
    """
    if config is None:
        config = get_config()

    index = max(1, int(index))
    return LevelSpec(
        index=index,
        weight_ceiling=weight_ceiling_for(index, config),
        spawn_interval=spawn_interval_for(index, config),
        survival_duration=config.levels.survival_duration
    )
