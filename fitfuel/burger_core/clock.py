"""
Simulation Clock
================

Frame-driven scheduler for the engine's periodic actions.

A single external time source calls ``SimulationClock.advance(dt)``. Each
periodic action keeps its own accumulator; firings are interleaved frame
by frame in registration order, so a spawn always lands before the physics
tick of the same frame and the countdown runs last.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from fitfuel.burger_core.game import SimulationEngine

logger = logging.getLogger(__name__)

# Absorbs float drift, e.g. ten 0.01 steps owing one 0.1 firing
TIME_EPSILON = 1e-9


class PeriodicAction:
    """
    A cancellable recurring callback.

    Arming always starts a fresh schedule; there is no catch-up for time
    spent cancelled.
    """

    def __init__(self, name: str, period: float, callback: Callable[[], None]):
        if period <= 0:
            raise ValueError(f"Period of '{name}' must be positive, got {period}")
        self.name = name
        self._period = period
        self._callback = callback
        self._armed: bool = False
        self._accumulated: float = 0.0
        self._fire_count: int = 0

    @property
    def period(self) -> float:
        return self._period

    @period.setter
    def period(self, value: float) -> None:
        if value <= 0:
            raise ValueError(f"Period of '{self.name}' must be positive, got {value}")
        self._period = value

    @property
    def armed(self) -> bool:
        return self._armed

    @property
    def fire_count(self) -> int:
        """Number of times the callback ran since construction."""
        return self._fire_count

    def arm(self) -> None:
        self._armed = True
        self._accumulated = 0.0

    def cancel(self) -> None:
        self._armed = False
        self._accumulated = 0.0

    def accumulate(self, dt: float) -> None:
        if self._armed:
            self._accumulated += dt

    def take_due(self) -> bool:
        """Consume one period if a firing is owed."""
        if self._armed and self._accumulated + TIME_EPSILON >= self._period:
            self._accumulated -= self._period
            return True
        return False

    def fire(self) -> None:
        self._fire_count += 1
        self._callback()

    def __repr__(self) -> str:
        state = "armed" if self._armed else "cancelled"
        return f"PeriodicAction({self.name!r}, period={self._period:.4f}, {state})"


class SimulationClock:
    """
    Drives a fixed set of periodic actions from one time source.

    Large ``dt`` values are split into sub-frames no longer than the
    shortest armed period so firings stay in chronological order.
    Exceptions raised by callbacks propagate to the caller of ``advance``.
    """

    def __init__(self):
        self._actions: List[PeriodicAction] = []
        self._by_name: Dict[str, PeriodicAction] = {}
        self._elapsed: float = 0.0

    def add(self, action: PeriodicAction) -> PeriodicAction:
        if action.name in self._by_name:
            raise ValueError(f"Duplicate periodic action: {action.name}")
        self._actions.append(action)
        self._by_name[action.name] = action
        return action

    def get(self, name: str) -> PeriodicAction:
        return self._by_name[name]

    @property
    def actions(self) -> List[PeriodicAction]:
        return list(self._actions)

    @property
    def any_armed(self) -> bool:
        return any(action.armed for action in self._actions)

    @property
    def elapsed(self) -> float:
        """Time advanced while at least one action was armed."""
        return self._elapsed

    def arm_all(self) -> None:
        for action in self._actions:
            action.arm()

    def cancel_all(self) -> None:
        for action in self._actions:
            action.cancel()

    def reset_elapsed(self) -> None:
        self._elapsed = 0.0

    def advance(self, dt: float) -> int:
        """
        Advance time by ``dt`` and run every firing that became due.

        Args:
            dt: Elapsed time in time-units (must be >= 0).

        Returns:
            Number of callback invocations.
        """
        if dt < 0:
            raise ValueError(f"Cannot advance clock by negative dt: {dt}")

        fired = 0
        remaining = dt
        while remaining > TIME_EPSILON and self.any_armed:
            step = min(remaining, min(a.period for a in self._actions if a.armed))
            remaining -= step
            self._elapsed += step

            for action in self._actions:
                action.accumulate(step)

            for action in self._actions:
                # An earlier firing this frame may have cancelled the rest
                while action.take_due():
                    action.fire()
                    fired += 1

        return fired


class RealtimeDriver:
    """
    Feeds wall-clock time into an engine from a daemon thread.

    A callback exception is fatal to the engine: the driver closes it,
    stops, and re-raises the exception from ``stop()``.
    """

    def __init__(self, engine: "SimulationEngine", frame_rate: float = 60.0):
        if frame_rate <= 0:
            raise ValueError(f"Frame rate must be positive, got {frame_rate}")
        self._engine = engine
        self._frame_period = 1.0 / frame_rate
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._error: Optional[BaseException] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._error = None
        self._thread = threading.Thread(
            target=self._run, name="burger-sim", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None
        if self._error is not None:
            error, self._error = self._error, None
            raise error

    def _run(self) -> None:
        last = time.monotonic()
        while not self._stop_event.wait(self._frame_period):
            now = time.monotonic()
            dt, last = now - last, now
            try:
                self._engine.advance(dt)
            except Exception as exc:
                logger.exception("Simulation frame failed; closing engine")
                self._error = exc
                self._engine.close()
                return
