"""
Collision Resolver
==================

Circle-circle overlap test between the avatar and falling objects.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from fitfuel.burger_core.entities import Avatar, FallingObject

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollisionResult:
    """Result of a resolved collision."""
    uid: int
    payload: int
    weight_after: int


def overlaps(avatar: Avatar, obj: FallingObject) -> bool:
    """True when the bounding circles strictly overlap."""
    distance = math.hypot(avatar.x - obj.x, avatar.y - obj.y)
    return distance < avatar.radius + obj.radius


class CollisionResolver:
    """
    Resolves at most one collision per physics tick.

    Objects are scanned in their stored (spawn) order and the first
    overlapping one is consumed, even if a later one is closer.
    """

    def __init__(self):
        self._resolved_count: int = 0

    @property
    def resolved_count(self) -> int:
        """Total collisions resolved since the last reset."""
        return self._resolved_count

    def find_first(self, avatar: Avatar, objects: List[FallingObject]) -> Optional[int]:
        """Index of the first overlapping object, or None."""
        for index, obj in enumerate(objects):
            if overlaps(avatar, obj):
                return index
        return None

    def resolve(self, avatar: Avatar, objects: List[FallingObject]) -> Optional[CollisionResult]:
        """
        Consume the first colliding object, if any.

        Removes it from ``objects`` and adds its payload to the avatar.

        Args:
            avatar: The player avatar (mutated on collision).
            objects: Active objects in insertion order (mutated on collision).

        Returns:
            CollisionResult, or None if nothing overlaps.
        """
        index = self.find_first(avatar, objects)
        if index is None:
            return None

        obj = objects.pop(index)
        avatar.add_weight(obj.payload)
        self._resolved_count += 1

        logger.debug(
            "Collision with object %d: +%d (weight %d)", obj.uid, obj.payload, avatar.weight
        )
        return CollisionResult(uid=obj.uid, payload=obj.payload, weight_after=avatar.weight)

    def reset(self) -> None:
        self._resolved_count = 0
