"""
State Snapshot
==============

Read-only views of the engine state, published after every frame.

Observers never see the engine's mutable avatar or object list; they get
a frozen copy, and agents can pack it into fixed-size numpy arrays.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING
import numpy as np

from fitfuel.burger_core.config_loader import GameConfig, get_config
from fitfuel.burger_core.rules import GameResult, RunState

if TYPE_CHECKING:
    from fitfuel.burger_core.entities import Avatar, FallingObject, FieldBounds
    from fitfuel.burger_core.levels import LevelSpec


@dataclass(frozen=True)
class ObjectView:
    """Frozen copy of one falling object."""
    uid: int
    x: float
    y: float
    radius: float
    payload: int

    @property
    def size(self) -> float:
        return self.radius * 2.0


@dataclass(frozen=True)
class FrameSnapshot:
    """
    Complete engine state after a frame.

    ``objects`` keeps spawn order. ``points_awarded`` is non-zero only
    when the attempt was won.
    """
    frame: int

    # Avatar
    avatar_x: float
    avatar_y: float
    avatar_radius: float
    weight: int

    # Field
    field_width: float
    field_height: float

    # Level
    level_index: int
    weight_ceiling: int
    remaining_time: float

    # State machine
    result: GameResult
    run_state: RunState

    # Progress counters
    games_played: int
    highest_level: int
    points_awarded: int

    objects: Tuple[ObjectView, ...]
    max_objects: int

    @property
    def avatar_position(self) -> Tuple[float, float]:
        return self.avatar_x, self.avatar_y

    @property
    def objects_count(self) -> int:
        return len(self.objects)

    @property
    def is_over(self) -> bool:
        return self.result is not GameResult.IN_PROGRESS

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Pack into fixed-size arrays padded to ``max_objects`` with a mask."""
        count = min(len(self.objects), self.max_objects)

        obj_x = np.zeros(self.max_objects, dtype=np.float32)
        obj_y = np.zeros(self.max_objects, dtype=np.float32)
        obj_radius = np.zeros(self.max_objects, dtype=np.float32)
        obj_payload = np.zeros(self.max_objects, dtype=np.int32)
        obj_mask = np.zeros(self.max_objects, dtype=bool)

        for i, obj in enumerate(self.objects[:count]):
            obj_x[i] = obj.x
            obj_y[i] = obj.y
            obj_radius[i] = obj.radius
            obj_payload[i] = obj.payload
            obj_mask[i] = True

        return {
            "avatar_x": np.array(self.avatar_x, dtype=np.float32),
            "avatar_y": np.array(self.avatar_y, dtype=np.float32),
            "weight": np.array(self.weight, dtype=np.int32),
            "weight_ceiling": np.array(self.weight_ceiling, dtype=np.int32),
            "remaining_time": np.array(self.remaining_time, dtype=np.float32),
            "level_index": np.array(self.level_index, dtype=np.int32),
            "field_width": np.array(self.field_width, dtype=np.float32),
            "field_height": np.array(self.field_height, dtype=np.float32),
            "objects_count": np.array(count, dtype=np.int32),
            "obj_x": obj_x,
            "obj_y": obj_y,
            "obj_radius": obj_radius,
            "obj_payload": obj_payload,
            "obj_mask": obj_mask,
        }


class SnapshotBuilder:
    """Builds frame snapshots from live engine state."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_objects = config.caps.max_active_objects

    @property
    def max_objects(self) -> int:
        return self._max_objects

    def build(
        self,
        frame: int,
        avatar: "Avatar",
        objects: List["FallingObject"],
        bounds: "FieldBounds",
        level: "LevelSpec",
        remaining_time: float,
        result: GameResult,
        run_state: RunState,
        games_played: int,
        highest_level: int,
        points_awarded: int = 0
    ) -> FrameSnapshot:
        """Build a snapshot from current engine state."""
        views = tuple(
            ObjectView(uid=obj.uid, x=obj.x, y=obj.y, radius=obj.radius, payload=obj.payload)
            for obj in objects
        )

        return FrameSnapshot(
            frame=frame,
            avatar_x=avatar.x,
            avatar_y=avatar.y,
            avatar_radius=avatar.radius,
            weight=avatar.weight,
            field_width=bounds.width,
            field_height=bounds.height,
            level_index=level.index,
            weight_ceiling=level.weight_ceiling,
            remaining_time=remaining_time,
            result=result,
            run_state=run_state,
            games_played=games_played,
            highest_level=highest_level,
            points_awarded=points_awarded,
            objects=views,
            max_objects=self._max_objects
        )
