"""
Shared fixtures for the burger core tests.
"""

from typing import Any, Dict, List, Optional

import pytest

from fitfuel.burger_core.config_loader import GameConfig, load_config
from fitfuel.burger_core.entities import FallingObject, FieldBounds
from fitfuel.burger_core.rng import ObjectSpawner


class ScriptedSpawner(ObjectSpawner):
    """
    Spawns objects from a script instead of random draws.

    Each script entry may override x, y, velocity, payload and radius;
    once the script runs out, defaults are used.
    """

    def __init__(
        self,
        config: GameConfig,
        script: Optional[List[Dict[str, Any]]] = None,
        x: float = 50.0,
        payload: int = 10,
        radius: float = 20.0,
        velocity: Optional[float] = None
    ):
        super().__init__(config, seed=0)
        self._script = list(script or [])
        self.x = x
        self.payload = payload
        self.radius = radius
        self.velocity = velocity

    def create(self, bounds: FieldBounds, level_index: int) -> FallingObject:
        entry = self._script.pop(0) if self._script else {}
        velocity = self.velocity
        if velocity is None:
            velocity = self._config.objects.velocity_for_level(level_index)
        return FallingObject(
            uid=self._allocate_uid(),
            x=entry.get("x", self.x),
            y=entry.get("y", self._config.field.spawn_y),
            velocity=entry.get("velocity", velocity),
            payload=entry.get("payload", self.payload),
            radius=entry.get("radius", self.radius)
        )


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def make_spawner(config):
    """Factory for ScriptedSpawner bound to the default config."""
    def _make(**kwargs):
        return ScriptedSpawner(config, **kwargs)
    return _make
