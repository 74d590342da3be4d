from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from lorenzsim.core import constants


# -------------------------
# Config structures
# -------------------------


@dataclass(frozen=True)
class SimulationConfig:
    """Immutable parameters for one simulation run."""

    sigma: float = constants.LORENZ_SIGMA
    rho: float = constants.LORENZ_RHO
    beta: float = constants.LORENZ_BETA
    time_step: float = constants.DEFAULT_TIME_STEP
    buffer_capacity: int = constants.DEFAULT_BUFFER_CAPACITY
    steps_per_tick: int = constants.DEFAULT_STEPS_PER_TICK
    scale: float = constants.DEFAULT_SCALE
    check_finite: bool = False

    def __post_init__(self) -> None:
        validate_simulation(self)


@dataclass(frozen=True)
class RenderConfig:
    width: int = constants.DEFAULT_WIDTH
    height: int = constants.DEFAULT_HEIGHT
    margin: int = constants.DEFAULT_MARGIN
    vertical_shift: int = constants.DEFAULT_VERTICAL_SHIFT
    tick_interval_ms: int = constants.DEFAULT_TICK_INTERVAL_MS
    linewidth: float = constants.DEFAULT_LINEWIDTH

    def __post_init__(self) -> None:
        validate_render(self)


@dataclass(frozen=True)
class FullConfig:
    simulation: SimulationConfig
    render: RenderConfig


# -------------------------
# Config parsing/validation
# -------------------------


class ConfigError(Exception):
    """Raised when the simulation config is invalid."""


_SIMULATION_TYPES: Dict[str, Tuple[type, ...]] = {
    "sigma": (int, float),
    "rho": (int, float),
    "beta": (int, float),
    "time_step": (int, float),
    "buffer_capacity": (int,),
    "steps_per_tick": (int,),
    "scale": (int, float),
    "check_finite": (bool,),
}

_RENDER_TYPES: Dict[str, Tuple[type, ...]] = {
    "width": (int,),
    "height": (int,),
    "margin": (int,),
    "vertical_shift": (int,),
    "tick_interval_ms": (int,),
    "linewidth": (int, float),
}


def validate_simulation(cfg: SimulationConfig) -> None:
    if cfg.time_step <= 0:
        raise ConfigError(f"time_step must be > 0, got {cfg.time_step}")
    if cfg.buffer_capacity < 1:
        raise ConfigError(f"buffer_capacity must be >= 1, got {cfg.buffer_capacity}")
    if cfg.steps_per_tick < 0:
        raise ConfigError(f"steps_per_tick must be >= 0, got {cfg.steps_per_tick}")
    if cfg.scale <= 0:
        raise ConfigError(f"scale must be > 0, got {cfg.scale}")


def validate_render(cfg: RenderConfig) -> None:
    if cfg.width <= 0 or cfg.height <= 0:
        raise ConfigError(f"surface size must be positive, got {cfg.width}x{cfg.height}")
    if cfg.margin < 0 or 2 * cfg.margin >= min(cfg.width, cfg.height):
        raise ConfigError(f"margin {cfg.margin} does not fit a {cfg.width}x{cfg.height} surface")
    if cfg.tick_interval_ms <= 0:
        raise ConfigError(f"tick_interval_ms must be > 0, got {cfg.tick_interval_ms}")
    if cfg.linewidth <= 0:
        raise ConfigError(f"linewidth must be > 0, got {cfg.linewidth}")


def _check_section(section: str, mapping: Dict[str, Any], types: Dict[str, Tuple[type, ...]]) -> Dict[str, Any]:
    unknown = sorted(set(mapping) - set(types))
    if unknown:
        raise ConfigError(f"Unknown key(s) in '{section}': {unknown}. Recognized: {sorted(types)}")
    checked: Dict[str, Any] = {}
    for key, val in mapping.items():
        expected = types[key]
        # bool is an int subclass; only accept it where bool is expected
        if isinstance(val, bool) and bool not in expected:
            raise ConfigError(f"Key '{section}.{key}' must be of type {expected}, got {type(val)}")
        if not isinstance(val, expected):
            raise ConfigError(f"Key '{section}.{key}' must be of type {expected}, got {type(val)}")
        checked[key] = float(val) if float in expected else val
    return checked


def build_config(data: Dict[str, Any] | None) -> FullConfig:
    """Build a validated config from an already-parsed mapping."""
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigError("Top-level YAML must be a mapping.")
    unknown = sorted(set(data) - {"simulation", "render"})
    if unknown:
        raise ConfigError(f"Unknown top-level key(s): {unknown}")

    simulation = data.get("simulation")
    render = data.get("render")
    simulation = {} if simulation is None else simulation
    render = {} if render is None else render
    if not isinstance(simulation, dict):
        raise ConfigError("Key 'simulation' must be a mapping.")
    if not isinstance(render, dict):
        raise ConfigError("Key 'render' must be a mapping.")

    return FullConfig(
        simulation=SimulationConfig(**_check_section("simulation", simulation, _SIMULATION_TYPES)),
        render=RenderConfig(**_check_section("render", render, _RENDER_TYPES)),
    )


def parse_config(path: Path) -> FullConfig:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to read YAML: {exc}") from exc
    return build_config(data)


def with_overrides(cfg: SimulationConfig, overrides: Optional[Dict[str, Any]] = None) -> SimulationConfig:
    """Return a copy of ``cfg`` with the non-None overrides applied."""
    changes = {k: v for k, v in (overrides or {}).items() if v is not None}
    if not changes:
        return cfg
    return dataclasses.replace(cfg, **_check_section("simulation", changes, _SIMULATION_TYPES))
