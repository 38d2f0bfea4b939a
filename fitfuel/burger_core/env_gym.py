"""
Gymnasium Environment
=====================

Single-agent wrapper around SimulationEngine.

Action: normalized target position in [-1, 1] x [-1, 1], mapped onto the
field and applied with ``move_player``. Each step then advances
``frame_skip`` physics frames. Reward is always 0.0; agents compute
their own from ``info``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple, Union

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from fitfuel.burger_core.config_loader import GameConfig, load_config
from fitfuel.burger_core.game import SimulationEngine

logger = logging.getLogger(__name__)


class BurgerDodgeEnv(gym.Env):
    """Gymnasium environment for the burger dodge game."""

    metadata = {"render_modes": []}

    def __init__(
        self,
        config_path: Optional[str] = None,
        level: int = 1,
        frame_skip: int = 6,
        debug: bool = False
    ):
        """
        Initialize environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            level: Level index to play each episode.
            frame_skip: Physics frames advanced per step.
            debug: If True, logs every step at DEBUG level.
        """
        super().__init__()

        if frame_skip < 1:
            raise ValueError(f"frame_skip must be >= 1, got {frame_skip}")

        self._config = load_config(config_path)
        self._level = max(1, int(level))
        self._frame_skip = frame_skip
        self._debug = debug

        self._engine = SimulationEngine(config=self._config, level=self._level)

        self.action_space = spaces.Box(low=-1.0, high=1.0, shape=(2,), dtype=np.float32)
        self.observation_space = self._build_observation_space()

        if self._debug:
            logger.debug(
                "BurgerDodgeEnv initialized: field %.0fx%.0f, level %d, frame_skip %d",
                self._config.field.width, self._config.field.height, self._level, frame_skip
            )

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_obj = self._config.caps.max_active_objects
        objects = self._config.objects

        return spaces.Dict({
            "avatar_x": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "avatar_y": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "weight": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "weight_ceiling": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "remaining_time": spaces.Box(low=0, high=self._config.levels.survival_duration, shape=(), dtype=np.float32),
            "level_index": spaces.Box(low=1, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "field_width": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "field_height": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "objects_count": spaces.Box(low=0, high=max_obj, shape=(), dtype=np.int32),
            "obj_x": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_y": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_radius": spaces.Box(low=0, high=objects.size_max, shape=(max_obj,), dtype=np.float32),
            "obj_payload": spaces.Box(low=0, high=objects.payload_max, shape=(max_obj,), dtype=np.int32),
            "obj_mask": spaces.MultiBinary(max_obj),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for the object spawner.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._engine.close()
        self._engine = SimulationEngine(config=self._config, seed=seed, level=self._level)
        snapshot = self._engine.start()

        return snapshot.to_obs_dict(), self._engine.get_info()

    def step(
        self,
        action: Union[np.ndarray, Tuple[float, float]]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one step.

        Args:
            action: Normalized target position, each component in [-1, 1].

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        action = np.clip(np.asarray(action, dtype=np.float32).reshape(2), -1.0, 1.0)
        field = self._engine.field
        target_x = (float(action[0]) + 1.0) / 2.0 * field.width
        target_y = (float(action[1]) + 1.0) / 2.0 * field.height
        self._engine.move_player(target_x, target_y)

        collisions = 0
        frame = None
        dt = self._config.clock.physics_dt
        for _ in range(self._frame_skip):
            frame = self._engine.advance(dt)
            collisions += len(frame.collisions)
            if frame.snapshot.is_over:
                break

        snapshot = frame.snapshot
        terminated = snapshot.is_over
        info = self._engine.get_info()
        info["collisions_this_step"] = collisions
        info["points_awarded"] = snapshot.points_awarded

        if self._debug:
            logger.debug(
                "Step: target=(%.1f, %.1f) weight=%d objects=%d remaining=%.1f",
                target_x, target_y, snapshot.weight, snapshot.objects_count, snapshot.remaining_time
            )
            if terminated:
                logger.debug("TERMINATED: %s", snapshot.result.value)

        return snapshot.to_obs_dict(), 0.0, terminated, False, info

    def close(self) -> None:
        """Clean up resources."""
        self._engine.close()

    @property
    def engine(self) -> SimulationEngine:
        """Access to underlying engine (for debugging/tools)."""
        return self._engine

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
