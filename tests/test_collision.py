"""
Tests for avatar movement and collision resolution.
"""

import random

import pytest

from fitfuel.burger_core.collision import CollisionResolver, overlaps
from fitfuel.burger_core.entities import Avatar, FallingObject, FieldBounds


@pytest.fixture
def bounds():
    return FieldBounds(375, 667)


@pytest.fixture
def avatar(bounds, config):
    return Avatar.spawn(bounds, config.avatar)


@pytest.fixture
def resolver():
    return CollisionResolver()


def make_object(uid, x, y, payload=10, radius=20.0):
    return FallingObject(uid=uid, x=x, y=y, velocity=120.0, payload=payload, radius=radius)


class TestFieldAndAvatar:
    """Test geometry value types."""

    def test_field_rejects_non_positive(self):
        """Non-positive field sizes are contract violations."""
        with pytest.raises(ValueError):
            FieldBounds(0, 667)
        with pytest.raises(ValueError):
            FieldBounds(375, -1)

    def test_avatar_spawn_position(self, avatar, config):
        """Fresh avatar sits centered, 100 above the bottom, at 70."""
        assert avatar.position == (187.5, 567.0)
        assert avatar.weight == config.avatar.starting_weight == 70
        assert avatar.radius == 30.0

    def test_move_clamps_every_target(self, avatar, bounds):
        """Any target, in or out of the field, lands inside the clamp box."""
        rng = random.Random(7)
        r = avatar.radius

        for _ in range(500):
            x = rng.uniform(-2000, 2000)
            y = rng.uniform(-2000, 2000)
            avatar.move_to(x, y, bounds)

            assert r <= avatar.x <= bounds.width - r
            assert r <= avatar.y <= bounds.height - r

    def test_move_inside_is_exact(self, avatar, bounds):
        """In-bounds targets are applied unchanged."""
        avatar.move_to(100.0, 200.0, bounds)
        assert avatar.position == (100.0, 200.0)

    def test_object_falls(self):
        """Objects advance by velocity * dt."""
        obj = make_object(0, 100, -50)
        obj.fall(0.5)
        assert obj.y == pytest.approx(10.0)
        assert obj.size == 40.0


class TestCollisionResolver:
    """Test per-tick collision resolution."""

    def test_no_collision_leaves_state(self, avatar, resolver):
        """Nothing overlapping means nothing changes."""
        objects = [make_object(0, 20, 20), make_object(1, 350, 50)]

        assert resolver.resolve(avatar, objects) is None
        assert len(objects) == 2
        assert avatar.weight == 70

    def test_single_collision_consumed(self, avatar, resolver):
        """An overlapping object is removed and its payload added."""
        objects = [make_object(0, avatar.x, avatar.y - 10, payload=12)]

        result = resolver.resolve(avatar, objects)

        assert result is not None
        assert result.uid == 0
        assert result.payload == 12
        assert result.weight_after == 82
        assert objects == []
        assert avatar.weight == 82

    def test_at_most_one_per_call(self, avatar, resolver):
        """Several overlapping objects still yield a single collision."""
        objects = [make_object(i, avatar.x + i, avatar.y, payload=5) for i in range(4)]

        resolver.resolve(avatar, objects)

        assert len(objects) == 3
        assert avatar.weight == 75
        assert resolver.resolved_count == 1

    def test_first_in_order_wins_not_closest(self, avatar, resolver):
        """Scan order decides, even when a later object is closer."""
        far_overlap = make_object(0, avatar.x + 45, avatar.y, payload=5)
        dead_center = make_object(1, avatar.x, avatar.y, payload=15)
        objects = [far_overlap, dead_center]

        result = resolver.resolve(avatar, objects)

        assert result.uid == 0
        assert objects == [dead_center]
        assert avatar.weight == 75

    def test_touching_is_not_overlap(self, avatar):
        """Distance equal to the radius sum does not collide."""
        touching = make_object(0, avatar.x + 50.0, avatar.y, radius=20.0)
        inside = make_object(1, avatar.x + 49.999, avatar.y, radius=20.0)

        assert not overlaps(avatar, touching)
        assert overlaps(avatar, inside)

    def test_repeated_calls_drain_one_at_a_time(self, avatar, resolver):
        """Each call consumes the next overlapping object."""
        objects = [make_object(i, avatar.x, avatar.y, payload=10) for i in range(3)]

        for expected_left in (2, 1, 0):
            resolver.resolve(avatar, objects)
            assert len(objects) == expected_left

        assert avatar.weight == 100
        assert resolver.resolve(avatar, objects) is None
