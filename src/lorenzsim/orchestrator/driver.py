from __future__ import annotations

import math
import threading
from typing import Callable, Optional, Tuple

import numpy as np

from lorenzsim.core.buffer import TrajectoryBuffer
from lorenzsim.core.chaos.base import ChaoticSystem, State, TrajectoryPoint
from lorenzsim.core.chaos.lorenz import LorenzSystem
from lorenzsim.core.config import SimulationConfig
from lorenzsim.core.constants import INITIAL_STATE
from lorenzsim.utils.logging import get_logger

logger = get_logger(__name__)


class NonFiniteStateError(ValueError):
    """Raised when finite checking is enabled and a step leaves the finite range."""

    def __init__(self, state: State, steps: int):
        super().__init__(f"Non-finite state {state} after {steps} steps; reset required.")
        self.state = state
        self.steps = steps


class SimulationDriver:
    """
    Per-frame advance/reset protocol around an integrator and a trajectory buffer.

    The driver is always running: ``advance`` moves the trajectory forward,
    ``reset`` restores the initial condition. Both, as well as ``snapshot``,
    take the same lock so a timer thread and an input thread can share one
    driver without observing a half-updated buffer.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        on_redraw: Optional[Callable[[], None]] = None,
        system: ChaoticSystem | None = None,
    ):
        self.config = config or SimulationConfig()
        self.system = system or LorenzSystem.from_config(self.config)
        self.initial_state = TrajectoryPoint(*INITIAL_STATE)
        self.on_redraw = on_redraw
        self._lock = threading.Lock()
        self._current: State = tuple(self.initial_state)
        self._buffer = TrajectoryBuffer(self.config.buffer_capacity, seed=self.initial_state)
        self._ticks = 0
        self._steps = 0

    @property
    def current(self) -> State:
        return self._current

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def steps(self) -> int:
        return self._steps

    def advance(self, n: int) -> None:
        """Perform exactly ``n`` integration steps, appending each new state."""
        if n < 0:
            raise ValueError(f"step count must be >= 0, got {n}")
        with self._lock:
            for _ in range(n):
                nxt = self.system.step(self._current)
                if self.config.check_finite and not all(math.isfinite(c) for c in nxt):
                    logger.warning("Rejected non-finite state %s after %d steps", nxt, self._steps)
                    raise NonFiniteStateError(nxt, self._steps)
                self._current = nxt
                self._buffer.append(TrajectoryPoint(*nxt))
                self._steps += 1
        logger.debug("Advanced %d steps total=%d len=%d", n, self._steps, len(self._buffer))

    def reset(self) -> None:
        with self._lock:
            self._current = tuple(self.initial_state)
            self._buffer.clear_and_seed(self.initial_state)
            self._ticks = 0
            self._steps = 0
        logger.info(
            "Simulation reset to x0=%.6f y0=%.6f z0=%.6f",
            self.initial_state.x,
            self.initial_state.y,
            self.initial_state.z,
        )

    def snapshot(self) -> Tuple[TrajectoryPoint, ...]:
        with self._lock:
            return self._buffer.snapshot()

    def snapshot_array(self) -> np.ndarray:
        """Current contents as an ``(N, 3)`` array, oldest first."""
        with self._lock:
            return self._buffer.to_array()

    def on_tick(self) -> None:
        """Timer callback: advance one frame's worth of steps, then request a redraw."""
        self.advance(self.config.steps_per_tick)
        with self._lock:
            self._ticks += 1
        if self.on_redraw is not None:
            self.on_redraw()

    def on_primary_click(self) -> None:
        self.reset()
