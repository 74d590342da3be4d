from __future__ import annotations

from abc import ABC, abstractmethod
from typing import NamedTuple, Tuple

State = Tuple[float, float, float]


class TrajectoryPoint(NamedTuple):
    """Immutable snapshot of the state at one simulation tick."""

    x: float
    y: float
    z: float


class ChaoticSystem(ABC):
    """Base class for chaotic systems integrated with a fixed-step RK4 scheme."""

    def __init__(self, dt: float):
        self.dt = float(dt)

    @abstractmethod
    def derivative(self, state: State) -> State:
        """Evaluate the vector field at ``state``."""
        ...

    def step(self, state: State) -> State:
        """Return the state one time step after ``state``. Does not mutate anything."""
        dt = self.dt
        half = dt / 2
        x, y, z = state

        k1 = self.derivative((x, y, z))
        k2 = self.derivative((x + half * k1[0], y + half * k1[1], z + half * k1[2]))
        k3 = self.derivative((x + half * k2[0], y + half * k2[1], z + half * k2[2]))
        k4 = self.derivative((x + dt * k3[0], y + dt * k3[1], z + dt * k3[2]))

        return (
            x + dt * (k1[0] + 2 * k2[0] + 2 * k3[0] + k4[0]) / 6,
            y + dt * (k1[1] + 2 * k2[1] + 2 * k3[1] + k4[1]) / 6,
            z + dt * (k1[2] + 2 * k2[2] + 2 * k3[2] + k4[2]) / 6,
        )
