from __future__ import annotations

from lorenzsim.core.config import SimulationConfig

from .base import ChaoticSystem, State


class LorenzSystem(ChaoticSystem):
    """RK4 integration of the Lorenz system."""

    def __init__(
        self,
        dt: float,
        sigma: float,
        rho: float,
        beta: float,
    ):
        super().__init__(dt)
        self.sigma = float(sigma)
        self.rho = float(rho)
        self.beta = float(beta)

    @classmethod
    def from_config(cls, config: SimulationConfig) -> "LorenzSystem":
        return cls(dt=config.time_step, sigma=config.sigma, rho=config.rho, beta=config.beta)

    def derivative(self, state: State) -> State:
        x, y, z = state
        dx = self.sigma * (y - x)
        dy = x * (self.rho - z) - y
        dz = x * y - self.beta * z
        return dx, dy, dz
