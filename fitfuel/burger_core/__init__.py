"""
Burger Core - The burger dodge game simulation.

This module provides the frame-driven simulation engine, a Gymnasium
environment wrapper, and all supporting systems (clock, spawning,
collisions, rules, progress counters).

Main exports:
- SimulationEngine: Game simulation consumed by the host UI
- RealtimeDriver: Wall-clock driver thread for an engine
- BurgerDodgeEnv: Gymnasium environment for agents
- LevelSpec / derive_level: Per-level tunables
- GameConfig: Configuration loaded from game_config.yaml
"""

from fitfuel.burger_core.config_loader import GameConfig, load_config
from fitfuel.burger_core.levels import LevelSpec, derive_level
from fitfuel.burger_core.entities import Avatar, FallingObject, FieldBounds
from fitfuel.burger_core.rules import GameResult, RunState
from fitfuel.burger_core.clock import RealtimeDriver, SimulationClock
from fitfuel.burger_core.game import EngineState, GameStateError, SimulationEngine
from fitfuel.burger_core.state_snapshot import FrameSnapshot
from fitfuel.burger_core.env_gym import BurgerDodgeEnv

__all__ = [
    "GameConfig",
    "load_config",
    "LevelSpec",
    "derive_level",
    "Avatar",
    "FallingObject",
    "FieldBounds",
    "GameResult",
    "RunState",
    "SimulationClock",
    "RealtimeDriver",
    "EngineState",
    "GameStateError",
    "SimulationEngine",
    "FrameSnapshot",
    "BurgerDodgeEnv",
]
