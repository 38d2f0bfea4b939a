"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import yaml

DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(__file__)),
    "game_config.yaml"
)


@dataclass(frozen=True)
class FieldConfig:
    """Default play-field geometry and spawn/despawn lines."""
    width: float            # Default field width until the host configures one
    height: float           # Default field height
    spawn_y: float          # Y coordinate where objects appear (above the field)
    despawn_margin: float   # Objects are pruned once y > height + margin
    spawn_margin: float     # Horizontal margin kept free at spawn time


@dataclass(frozen=True)
class AvatarConfig:
    """Player avatar parameters."""
    starting_weight: int
    size: float             # Diameter; collision radius is size / 2
    bottom_offset: float    # Start y = field height - bottom_offset

    @property
    def radius(self) -> float:
        return self.size / 2.0


@dataclass(frozen=True)
class ObjectConfig:
    """Falling object (burger) parameters."""
    payload_min: int
    payload_max: int
    size_min: float
    size_max: float
    base_velocity: float
    velocity_per_level: float

    @property
    def payload_range(self) -> Tuple[int, int]:
        return (self.payload_min, self.payload_max)

    def velocity_for_level(self, level_index: int) -> float:
        """Vertical velocity of objects spawned at the given level."""
        return self.base_velocity + self.velocity_per_level * level_index


@dataclass(frozen=True)
class LevelConfig:
    """Coefficients of the closed-form level formulas."""
    base_ceiling: int
    ceiling_step: int
    ceiling_floor: int
    survival_duration: float
    base_spawn_interval: float
    spawn_step: float
    spawn_floor: float


@dataclass(frozen=True)
class ClockConfig:
    """Periods of the recurring actions."""
    countdown_period: float
    physics_hz: int

    @property
    def physics_dt(self) -> float:
        return 1.0 / self.physics_hz


@dataclass(frozen=True)
class CapsConfig:
    """Game limits."""
    max_active_objects: int


@dataclass(frozen=True)
class ScoringConfig:
    """Scoring parameters."""
    points_per_level: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    field: FieldConfig
    avatar: AvatarConfig
    objects: ObjectConfig
    levels: LevelConfig
    clock: ClockConfig
    caps: CapsConfig
    scoring: ScoringConfig


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if config.field.width <= 0 or config.field.height <= 0:
        raise ValueError(
            f"Field size must be positive, got {config.field.width}x{config.field.height}"
        )

    if config.avatar.size <= 0:
        raise ValueError(f"Avatar size must be positive, got {config.avatar.size}")
    if config.avatar.starting_weight < 0:
        raise ValueError(f"Starting weight must be >= 0, got {config.avatar.starting_weight}")

    objects = config.objects
    if not 0 <= objects.payload_min <= objects.payload_max:
        raise ValueError(
            f"Payload range must satisfy 0 <= min <= max, got [{objects.payload_min}, {objects.payload_max}]"
        )
    if not 0 < objects.size_min <= objects.size_max:
        raise ValueError(
            f"Size range must satisfy 0 < min <= max, got [{objects.size_min}, {objects.size_max}]"
        )
    if objects.base_velocity <= 0:
        raise ValueError(f"Base velocity must be positive, got {objects.base_velocity}")

    levels = config.levels
    if levels.ceiling_floor <= 0 or levels.spawn_floor <= 0:
        raise ValueError("Level floors must be positive")
    if levels.ceiling_step < 0 or levels.spawn_step < 0:
        raise ValueError("Level steps must be non-negative")
    if levels.survival_duration <= 0:
        raise ValueError(f"Survival duration must be positive, got {levels.survival_duration}")

    if config.clock.countdown_period <= 0 or config.clock.physics_hz <= 0:
        raise ValueError("Clock periods must be positive")

    if config.caps.max_active_objects <= 0:
        raise ValueError(f"max_active_objects must be positive, got {config.caps.max_active_objects}")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    field_data = raw["field"]
    field = FieldConfig(
        width=float(field_data["width"]),
        height=float(field_data["height"]),
        spawn_y=float(field_data.get("spawn_y", -50.0)),
        despawn_margin=float(field_data.get("despawn_margin", 50.0)),
        spawn_margin=float(field_data.get("spawn_margin", 50.0))
    )

    avatar_data = raw["avatar"]
    avatar = AvatarConfig(
        starting_weight=int(avatar_data["starting_weight"]),
        size=float(avatar_data["size"]),
        bottom_offset=float(avatar_data.get("bottom_offset", 100.0))
    )

    objects_data = raw["objects"]
    objects = ObjectConfig(
        payload_min=int(objects_data["payload_min"]),
        payload_max=int(objects_data["payload_max"]),
        size_min=float(objects_data["size_min"]),
        size_max=float(objects_data["size_max"]),
        base_velocity=float(objects_data["base_velocity"]),
        velocity_per_level=float(objects_data.get("velocity_per_level", 0.0))
    )

    levels_data = raw["levels"]
    levels = LevelConfig(
        base_ceiling=int(levels_data["base_ceiling"]),
        ceiling_step=int(levels_data["ceiling_step"]),
        ceiling_floor=int(levels_data["ceiling_floor"]),
        survival_duration=float(levels_data["survival_duration"]),
        base_spawn_interval=float(levels_data["base_spawn_interval"]),
        spawn_step=float(levels_data["spawn_step"]),
        spawn_floor=float(levels_data["spawn_floor"])
    )

    clock_data = raw["clock"]
    clock = ClockConfig(
        countdown_period=float(clock_data["countdown_period"]),
        physics_hz=int(clock_data["physics_hz"])
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_active_objects=int(caps_data.get("max_active_objects", 64))
    )

    scoring_data = raw["scoring"]
    scoring = ScoringConfig(
        points_per_level=int(scoring_data["points_per_level"])
    )

    config = GameConfig(
        field=field,
        avatar=avatar,
        objects=objects,
        levels=levels,
        clock=clock,
        caps=caps,
        scoring=scoring
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
