"""
RNG - Object Spawner
====================

Provides deterministic, seeded construction of falling objects.
"""

from __future__ import annotations

import random
from typing import Optional, Tuple

from fitfuel.burger_core.config_loader import GameConfig, get_config
from fitfuel.burger_core.entities import FallingObject, FieldBounds


class ObjectSpawner:
    """
    Builds new falling objects for the spawn action.

    Every random draw goes through one ``random.Random`` so that a seed
    fully determines the sequence of positions, payloads and sizes.
    Subclasses may override ``create`` to script spawns (tests do).
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize spawner.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._rng = random.Random(seed)
        self._next_uid: int = 0

    def spawn_x_range(self, bounds: FieldBounds) -> Tuple[float, float]:
        """
        Get valid spawn X range for a field.

        Collapses to the field center when the field is narrower than
        two margins.
        """
        margin = self._config.field.spawn_margin
        min_x = margin
        max_x = bounds.width - margin
        if max_x < min_x:
            center = bounds.width / 2.0
            return (center, center)
        return (min_x, max_x)

    def _allocate_uid(self) -> int:
        uid = self._next_uid
        self._next_uid += 1
        return uid

    def create(self, bounds: FieldBounds, level_index: int) -> FallingObject:
        """
        Create one object above the visible field.

        Args:
            bounds: Current play-field bounds.
            level_index: Current level; sets the vertical velocity.

        Returns:
            A new FallingObject with a fresh uid.
        """
        objects = self._config.objects
        min_x, max_x = self.spawn_x_range(bounds)

        x = self._rng.uniform(min_x, max_x)
        payload = self._rng.randint(*objects.payload_range)
        size = self._rng.uniform(objects.size_min, objects.size_max)

        return FallingObject(
            uid=self._allocate_uid(),
            x=x,
            y=self._config.field.spawn_y,
            velocity=objects.velocity_for_level(level_index),
            payload=payload,
            radius=size / 2.0
        )

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the spawner with optional new seed.

        Args:
            seed: New random seed. Keeps current if None.
        """
        if seed is not None:
            self._seed = seed
        self._rng = random.Random(self._seed)
        self._next_uid = 0
