"""
Simulation Engine
=================

Main game orchestrator combining the clock, spawning, collisions, rules
and progress counters.
"""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from fitfuel.burger_core.clock import PeriodicAction, SimulationClock
from fitfuel.burger_core.collision import CollisionResolver, CollisionResult
from fitfuel.burger_core.config_loader import GameConfig, get_config
from fitfuel.burger_core.entities import Avatar, FallingObject, FieldBounds
from fitfuel.burger_core.levels import LevelSpec, derive_level
from fitfuel.burger_core.rng import ObjectSpawner
from fitfuel.burger_core.rules import GameResult, RunState, TerminationResult, TerminationRules
from fitfuel.burger_core.scoring import ProgressTracker
from fitfuel.burger_core.state_snapshot import FrameSnapshot, ObjectView, SnapshotBuilder

logger = logging.getLogger(__name__)

FrameCallback = Callable[[FrameSnapshot], None]


class GameStateError(RuntimeError):
    """Raised when an operation is not legal in the current state."""


class EngineState(str, enum.Enum):
    """Combined view of result and run state."""
    IDLE = "idle"
    ACTIVE = "active"
    PAUSED = "paused"
    WON = "won"
    LOST = "lost"


@dataclass
class FrameResult:
    """Result of a single ``advance`` call."""
    snapshot: FrameSnapshot
    fired: int
    collisions: List[CollisionResult]
    spawned: int

    @property
    def result(self) -> GameResult:
        return self.snapshot.result


class SimulationEngine:
    """
    Burger dodge simulation.

    Orchestrates:
    - Avatar and active falling objects
    - Spawn, physics and countdown actions on one SimulationClock
    - Collision resolution (at most one per physics tick)
    - Win/lose rules and progress counters
    - Frame snapshots for observers

    All mutation goes through the public operations below. ``advance`` and
    ``move_player`` serialise on one lock, so a physics tick never observes
    a half-applied avatar position.
    """

    SPAWN = "spawn"
    PHYSICS = "physics"
    COUNTDOWN = "countdown"

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        spawner: Optional[ObjectSpawner] = None,
        frame_callback: Optional[FrameCallback] = None,
        level: int = 1
    ):
        """
        Initialize engine.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for the default spawner.
            spawner: Object spawner; a seeded ObjectSpawner if None.
            frame_callback: Optional observer receiving each FrameSnapshot.
            level: Level index to begin at, e.g. restored by the progression layer.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._lock = threading.RLock()

        # Subsystems
        self._spawner = spawner if spawner is not None else ObjectSpawner(config, seed)
        self._resolver = CollisionResolver()
        self._rules = TerminationRules(config)
        self._progress = ProgressTracker(config)
        self._snapshot_builder = SnapshotBuilder(config)

        # Game state
        self._bounds = FieldBounds(config.field.width, config.field.height)
        self._level: LevelSpec = derive_level(level, config)
        self._avatar = Avatar.spawn(self._bounds, config.avatar)
        self._objects: List[FallingObject] = []
        self._result = GameResult.IN_PROGRESS
        self._run_state = RunState.STOPPED
        self._frame: int = 0
        self._closed: bool = False
        self._progress.reach_level(self._level.index)
        self._rules.reset(self._level.survival_duration)

        # Per-frame bookkeeping
        self._frame_collisions: List[CollisionResult] = []
        self._frame_spawned: int = 0

        # Frame order: spawn, physics (collisions + loss), countdown (win)
        self._clock = SimulationClock()
        self._clock.add(PeriodicAction(self.SPAWN, self._level.spawn_interval, self._on_spawn))
        self._clock.add(PeriodicAction(self.PHYSICS, config.clock.physics_dt, self._on_physics_tick))
        self._clock.add(PeriodicAction(self.COUNTDOWN, config.clock.countdown_period, self._on_countdown))

        self._subscribers: List[FrameCallback] = []
        if frame_callback is not None:
            self._subscribers.append(frame_callback)

    # -- Read-only state ---------------------------------------------------

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def clock(self) -> SimulationClock:
        """The clock driving the periodic actions."""
        return self._clock

    @property
    def field(self) -> FieldBounds:
        return self._bounds

    @property
    def level(self) -> LevelSpec:
        return self._level

    @property
    def avatar_position(self) -> Tuple[float, float]:
        with self._lock:
            return self._avatar.position

    @property
    def avatar_radius(self) -> float:
        return self._avatar.radius

    @property
    def weight(self) -> int:
        return self._avatar.weight

    @property
    def active_objects(self) -> Tuple[ObjectView, ...]:
        """Frozen copies of the active objects, in spawn order."""
        with self._lock:
            return tuple(
                ObjectView(uid=o.uid, x=o.x, y=o.y, radius=o.radius, payload=o.payload)
                for o in self._objects
            )

    @property
    def remaining_time(self) -> float:
        return self._rules.countdown.remaining

    @property
    def result(self) -> GameResult:
        return self._result

    @property
    def run_state(self) -> RunState:
        return self._run_state

    @property
    def state(self) -> EngineState:
        if self._result is GameResult.WON:
            return EngineState.WON
        if self._result is GameResult.LOST:
            return EngineState.LOST
        if self._run_state is RunState.ACTIVE:
            return EngineState.ACTIVE
        if self._run_state is RunState.PAUSED:
            return EngineState.PAUSED
        return EngineState.IDLE

    @property
    def is_over(self) -> bool:
        """True if the current attempt has ended."""
        return self._result is not GameResult.IN_PROGRESS

    @property
    def games_played(self) -> int:
        return self._progress.games_played

    @property
    def highest_level(self) -> int:
        return self._progress.highest_level

    @property
    def frame(self) -> int:
        return self._frame

    @property
    def closed(self) -> bool:
        return self._closed

    def points_awarded_on_win(self) -> int:
        """Award for winning the current level; applying it is the caller's job."""
        return self._progress.points_for_level(self._level.index)

    # -- Observers ---------------------------------------------------------

    def subscribe(self, callback: FrameCallback) -> None:
        with self._lock:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: FrameCallback) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def snapshot(self) -> FrameSnapshot:
        """Build a snapshot of the current state."""
        with self._lock:
            return self._build_snapshot()

    def _build_snapshot(self) -> FrameSnapshot:
        award = self._progress.last_award
        points = award.points if self._result is GameResult.WON and award is not None else 0
        return self._snapshot_builder.build(
            frame=self._frame,
            avatar=self._avatar,
            objects=self._objects,
            bounds=self._bounds,
            level=self._level,
            remaining_time=self._rules.countdown.remaining,
            result=self._result,
            run_state=self._run_state,
            games_played=self._progress.games_played,
            highest_level=self._progress.highest_level,
            points_awarded=points
        )

    def _publish(self) -> FrameSnapshot:
        """Build a snapshot under the lock, then notify outside it."""
        with self._lock:
            snapshot = self._build_snapshot()
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(snapshot)
        return snapshot

    # -- Commands ----------------------------------------------------------

    def configure(self, width: float, height: float) -> FrameSnapshot:
        """
        Set play-field bounds.

        When idle a fresh avatar is placed at bottom-center. While an
        attempt is running, paused or finished the avatar keeps its weight
        and is only re-clamped into the new bounds, so a final Won/Lost
        weight survives a resize.

        Raises:
            ValueError: If the size is not positive.
        """
        bounds = FieldBounds(float(width), float(height))
        with self._lock:
            self._bounds = bounds
            if self.state is EngineState.IDLE:
                self._avatar = Avatar.spawn(bounds, self._config.avatar)
            else:
                self._avatar.move_to(self._avatar.x, self._avatar.y, bounds)
            logger.debug("Field configured: %.0fx%.0f", bounds.width, bounds.height)
        return self._publish()

    def start(self) -> FrameSnapshot:
        """
        Start an attempt at the current level.

        Calling this while an attempt is active or paused restarts it
        through ``restart_active``.

        Raises:
            GameStateError: If the engine was closed.
        """
        with self._lock:
            self._check_open()
            if self._run_state is RunState.STOPPED:
                self._begin_attempt()
            else:
                self._restart_active_locked()
        return self._publish()

    def restart_active(self) -> FrameSnapshot:
        """Restart the running attempt; taken when ``start`` is called mid-attempt."""
        with self._lock:
            self._check_open()
            self._restart_active_locked()
        return self._publish()

    def restart_level(self) -> FrameSnapshot:
        """Stop, then start again at the same level index."""
        with self._lock:
            self._check_open()
            self._stop_locked()
            self._begin_attempt()
        return self._publish()

    def stop(self) -> FrameSnapshot:
        """
        Force the engine back to idle.

        Clears active objects; avatar weight and level stay until the
        next ``start``.
        """
        with self._lock:
            self._stop_locked()
            logger.info("Stopped at level %d (weight %d)", self._level.index, self._avatar.weight)
        return self._publish()

    def pause(self) -> FrameSnapshot:
        """Cancel the periodic actions, keeping all state. No-op unless active."""
        with self._lock:
            if self._run_state is RunState.ACTIVE:
                self._clock.cancel_all()
                self._run_state = RunState.PAUSED
                logger.info("Paused with %.1f remaining", self.remaining_time)
        return self._publish()

    def resume(self) -> FrameSnapshot:
        """Re-arm the periodic actions with fresh schedules. No-op unless paused."""
        with self._lock:
            if self._run_state is RunState.PAUSED:
                self._clock.arm_all()
                self._run_state = RunState.ACTIVE
                logger.info("Resumed with %.1f remaining", self.remaining_time)
        return self._publish()

    def advance_level(self) -> int:
        """
        Move to the next level after a win and return to idle.

        Returns:
            Highest level reached, for the caller to persist.

        Raises:
            GameStateError: If the current attempt was not won.
        """
        with self._lock:
            if self._result is not GameResult.WON:
                raise GameStateError(
                    f"advance_level requires a won attempt, result is '{self._result.value}'"
                )
            self._level = derive_level(self._level.index + 1, self._config)
            highest = self._progress.reach_level(self._level.index)
            self._reset_attempt()
            logger.info(
                "Advanced to level %d (ceiling %d, spawn every %.2f)",
                self._level.index, self._level.weight_ceiling, self._level.spawn_interval
            )
        self._publish()
        return highest

    def reset_progress(self) -> FrameSnapshot:
        """Hard reset: level 1, counters cleared, idle."""
        with self._lock:
            self._level = derive_level(1, self._config)
            self._progress.reset()
            self._reset_attempt()
            logger.info("Progress reset")
        return self._publish()

    def move_player(self, x: float, y: float) -> bool:
        """
        Move the avatar toward (x, y), clamped into the field.

        Returns:
            True if applied, False when not active (no-op).
        """
        with self._lock:
            if self._run_state is not RunState.ACTIVE:
                return False
            self._avatar.move_to(float(x), float(y), self._bounds)
            return True

    def advance(self, dt: float) -> FrameResult:
        """
        Advance simulated time by ``dt`` and publish the resulting frame.

        Exceptions from the periodic actions propagate.

        Args:
            dt: Elapsed time in time-units.

        Returns:
            FrameResult with the snapshot and what happened this frame.
        """
        with self._lock:
            self._frame_collisions = []
            self._frame_spawned = 0
            fired = self._clock.advance(dt)
            self._frame += 1
            collisions = self._frame_collisions
            spawned = self._frame_spawned

        snapshot = self._publish()
        return FrameResult(
            snapshot=snapshot,
            fired=fired,
            collisions=collisions,
            spawned=spawned
        )

    def close(self) -> None:
        """Cancel all periodic work and drop observers."""
        with self._lock:
            self._clock.cancel_all()
            self._run_state = RunState.STOPPED
            self._objects.clear()
            self._subscribers.clear()
            self._closed = True

    def get_info(self) -> Dict[str, Any]:
        """Get a plain summary dict (used as the Gymnasium info dict)."""
        return {
            "state": self.state.value,
            "weight": self._avatar.weight,
            "weight_ceiling": self._level.weight_ceiling,
            "level": self._level.index,
            "remaining_time": self.remaining_time,
            "objects": len(self._objects),
            "collisions": self._resolver.resolved_count,
            "games_played": self._progress.games_played,
            "highest_level": self._progress.highest_level,
        }

    # -- Internals ---------------------------------------------------------

    def _check_open(self) -> None:
        if self._closed:
            raise GameStateError("Engine is closed")

    def _reset_attempt(self) -> None:
        """Return to idle with a fresh avatar and a full timer."""
        self._clock.cancel_all()
        self._clock.reset_elapsed()
        self._avatar = Avatar.spawn(self._bounds, self._config.avatar)
        self._objects.clear()
        self._resolver.reset()
        self._rules.reset(self._level.survival_duration)
        self._result = GameResult.IN_PROGRESS
        self._run_state = RunState.STOPPED

    def _stop_locked(self) -> None:
        self._clock.cancel_all()
        self._objects.clear()
        self._result = GameResult.IN_PROGRESS
        self._run_state = RunState.STOPPED

    def _restart_active_locked(self) -> None:
        logger.info("start() during an attempt at level %d: restarting", self._level.index)
        self._stop_locked()
        self._begin_attempt()

    def _begin_attempt(self) -> None:
        self._reset_attempt()
        self._clock.get(self.SPAWN).period = self._level.spawn_interval
        self._clock.arm_all()
        self._run_state = RunState.ACTIVE
        logger.info(
            "Started level %d (ceiling %d, %.0f to survive)",
            self._level.index, self._level.weight_ceiling, self._level.survival_duration
        )

    def _end_attempt(self, outcome: TerminationResult) -> None:
        self._clock.cancel_all()
        self._run_state = RunState.STOPPED
        self._result = outcome.result

        if outcome.result is GameResult.WON:
            award = self._progress.record_win(self._level.index)
            logger.info("Level %d won: %d points", self._level.index, award.points)
        else:
            self._progress.record_loss()
            logger.info(
                "Level %d lost (%s): weight %d >= %d",
                self._level.index, outcome.reason, self._avatar.weight, self._level.weight_ceiling
            )

    def _on_spawn(self) -> None:
        if self._run_state is not RunState.ACTIVE:
            return
        if len(self._objects) >= self._config.caps.max_active_objects:
            logger.debug("Spawn skipped: %d objects active", len(self._objects))
            return

        obj = self._spawner.create(self._bounds, self._level.index)
        self._objects.append(obj)
        self._frame_spawned += 1
        logger.debug("Spawned object %d at x=%.1f (payload %d)", obj.uid, obj.x, obj.payload)

    def _on_physics_tick(self) -> None:
        if self._run_state is not RunState.ACTIVE:
            return
        dt = self._config.clock.physics_dt

        for obj in self._objects:
            obj.fall(dt)

        limit_y = self._bounds.height + self._config.field.despawn_margin
        self._objects[:] = [obj for obj in self._objects if not obj.is_below(limit_y)]

        collision = self._resolver.resolve(self._avatar, self._objects)
        if collision is not None:
            self._frame_collisions.append(collision)

        outcome = self._rules.check_weight(self._avatar.weight, self._level.weight_ceiling)
        if outcome.terminated:
            self._end_attempt(outcome)

    def _on_countdown(self) -> None:
        if self._run_state is not RunState.ACTIVE:
            return
        self._rules.countdown.tick()
        outcome = self._rules.check_countdown()
        if outcome.terminated:
            self._end_attempt(outcome)
