"""
Entities
========

Value types for the play field, the player avatar and falling objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from fitfuel.burger_core.config_loader import AvatarConfig


@dataclass(frozen=True)
class FieldBounds:
    """Rectangular play area supplied by the host UI."""
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Field size must be positive, got {self.width}x{self.height}")

    def clamp(self, x: float, y: float, margin: float) -> Tuple[float, float]:
        """Clamp a point into the field shrunk by ``margin`` on every side."""
        clamped_x = max(margin, min(self.width - margin, x))
        clamped_y = max(margin, min(self.height - margin, y))
        return clamped_x, clamped_y


@dataclass
class Avatar:
    """
    The player-controlled body.

    ``size`` is the visual diameter; the collision circle and the
    movement clamp both use ``radius`` (half the size).
    """
    x: float
    y: float
    weight: int
    size: float

    @classmethod
    def spawn(cls, bounds: FieldBounds, config: AvatarConfig) -> "Avatar":
        """Create a fresh avatar centered horizontally near the field bottom."""
        avatar = cls(
            x=bounds.width / 2.0,
            y=bounds.height - config.bottom_offset,
            weight=config.starting_weight,
            size=config.size
        )
        # Tiny fields would otherwise put the start point outside the bounds
        avatar.x, avatar.y = bounds.clamp(avatar.x, avatar.y, avatar.radius)
        return avatar

    @property
    def radius(self) -> float:
        return self.size / 2.0

    @property
    def position(self) -> Tuple[float, float]:
        return self.x, self.y

    def move_to(self, x: float, y: float, bounds: FieldBounds) -> None:
        """Move to (x, y), clamped component-wise into the field."""
        self.x, self.y = bounds.clamp(x, y, self.radius)

    def add_weight(self, payload: int) -> None:
        self.weight += payload


@dataclass
class FallingObject:
    """A burger falling through the field."""
    uid: int
    x: float
    y: float
    velocity: float   # Vertical speed, units per time-unit (positive = down)
    payload: int      # Weight added to the avatar on collision
    radius: float

    @property
    def position(self) -> Tuple[float, float]:
        return self.x, self.y

    @property
    def size(self) -> float:
        """Visual diameter."""
        return self.radius * 2.0

    def fall(self, dt: float) -> None:
        self.y += self.velocity * dt

    def is_below(self, limit_y: float) -> bool:
        """True once the object has strictly passed ``limit_y``."""
        return self.y > limit_y
