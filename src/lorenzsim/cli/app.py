from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict

import typer

from lorenzsim.cli import ui
from lorenzsim.core import constants
from lorenzsim.core.config import ConfigError, FullConfig, RenderConfig, SimulationConfig, parse_config, with_overrides
from lorenzsim.core.chaos.lorenz import LorenzSystem
from lorenzsim.orchestrator.driver import NonFiniteStateError, SimulationDriver
from lorenzsim.utils.logging import get_logger, resolve_log_level, set_command_context, setup_logging

app = typer.Typer(help="Lorenz attractor simulation")
logger = get_logger(__name__)

# One RK4 step from the initial condition with the default parameters.
REFERENCE_FIRST_STEP = (0.0917928, 0.0266340, 0.0000126)
REFERENCE_TOLERANCE = 5e-5

_CONFIG_OPTION = typer.Option(None, "--config", "-c", exists=True, readable=True, help="YAML config file")
_SIGMA_OPTION = typer.Option(None, "--sigma", help="Lorenz sigma")
_RHO_OPTION = typer.Option(None, "--rho", help="Lorenz rho")
_BETA_OPTION = typer.Option(None, "--beta", help="Lorenz beta")
_DT_OPTION = typer.Option(None, "--time-step", help="Fixed RK4 time step")
_CAPACITY_OPTION = typer.Option(None, "--capacity", help="Trajectory buffer capacity")
_STEPS_OPTION = typer.Option(None, "--steps-per-tick", help="Integration steps per tick")
_SCALE_OPTION = typer.Option(None, "--scale", help="Screen pixels per unit")
_FINITE_OPTION = typer.Option(None, "--check-finite/--no-check-finite", help="Reject non-finite states")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at INFO level"),
    debug: bool = typer.Option(False, "--debug", help="Log at DEBUG level"),
):
    setup_logging(resolve_log_level(verbose, debug))


def _load_config(config_path: Path | None, overrides: Dict[str, Any]) -> FullConfig:
    try:
        full = parse_config(config_path) if config_path else FullConfig(SimulationConfig(), RenderConfig())
        simulation = with_overrides(full.simulation, overrides)
    except ConfigError as exc:
        typer.secho(f"Config error: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    return FullConfig(simulation=simulation, render=full.render)


def _advance_ticks(driver: SimulationDriver, ticks: int) -> None:
    try:
        for _ in range(ticks):
            driver.on_tick()
    except NonFiniteStateError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc


def _summary(driver: SimulationDriver) -> Dict[str, Any]:
    snapshot = driver.snapshot()
    return {
        "length": len(snapshot),
        "capacity": driver.config.buffer_capacity,
        "ticks": driver.ticks,
        "steps": driver.steps,
        "first": list(snapshot[0]),
        "last": list(snapshot[-1]),
        "finite": all(math.isfinite(c) for c in driver.current),
    }


@app.command()
def run(
    config: Path | None = _CONFIG_OPTION,
    sigma: float | None = _SIGMA_OPTION,
    rho: float | None = _RHO_OPTION,
    beta: float | None = _BETA_OPTION,
    time_step: float | None = _DT_OPTION,
    capacity: int | None = _CAPACITY_OPTION,
    steps_per_tick: int | None = _STEPS_OPTION,
    scale: float | None = _SCALE_OPTION,
    check_finite: bool | None = _FINITE_OPTION,
):
    """Open the live window. Click anywhere to reset the trajectory."""
    set_command_context("run")
    cfg = _load_config(
        config,
        dict(sigma=sigma, rho=rho, beta=beta, time_step=time_step, buffer_capacity=capacity,
             steps_per_tick=steps_per_tick, scale=scale, check_finite=check_finite),
    )
    from lorenzsim.render.window import run_window

    driver = SimulationDriver(cfg.simulation)
    run_window(driver, cfg.render)


@app.command()
def simulate(
    ticks: int = typer.Option(2000, "--ticks", "-n", min=0, help="Number of ticks to advance"),
    json_summary: bool = typer.Option(False, "--json", help="Print summary JSON to stdout"),
    config: Path | None = _CONFIG_OPTION,
    sigma: float | None = _SIGMA_OPTION,
    rho: float | None = _RHO_OPTION,
    beta: float | None = _BETA_OPTION,
    time_step: float | None = _DT_OPTION,
    capacity: int | None = _CAPACITY_OPTION,
    steps_per_tick: int | None = _STEPS_OPTION,
    scale: float | None = _SCALE_OPTION,
    check_finite: bool | None = _FINITE_OPTION,
):
    """Advance the simulation headlessly and print where it ended up."""
    set_command_context("simulate")
    cfg = _load_config(
        config,
        dict(sigma=sigma, rho=rho, beta=beta, time_step=time_step, buffer_capacity=capacity,
             steps_per_tick=steps_per_tick, scale=scale, check_finite=check_finite),
    )
    driver = SimulationDriver(cfg.simulation)
    _advance_ticks(driver, ticks)
    summary = _summary(driver)

    if json_summary:
        typer.echo(json.dumps(summary))
        return

    ui.print_run_header("simulate", config=cfg.simulation, config_path=config, ticks=ticks)
    ui.print_summary_lines(
        "buffer",
        [
            f"length={summary['length']} capacity={summary['capacity']}",
            f"first={ui.format_point(summary['first'])}",
            f"last={ui.format_point(summary['last'])}",
        ],
    )
    ui.print_done(f"steps={summary['steps']} finite={summary['finite']}")


@app.command()
def render(
    out: Path = typer.Option(..., "--out", "-o", help="PNG output path"),
    ticks: int = typer.Option(2000, "--ticks", "-n", min=0, help="Number of ticks to advance first"),
    config: Path | None = _CONFIG_OPTION,
    sigma: float | None = _SIGMA_OPTION,
    rho: float | None = _RHO_OPTION,
    beta: float | None = _BETA_OPTION,
    time_step: float | None = _DT_OPTION,
    capacity: int | None = _CAPACITY_OPTION,
    steps_per_tick: int | None = _STEPS_OPTION,
    scale: float | None = _SCALE_OPTION,
    check_finite: bool | None = _FINITE_OPTION,
):
    """Advance headlessly, then save a single frame as PNG."""
    set_command_context("render")
    cfg = _load_config(
        config,
        dict(sigma=sigma, rho=rho, beta=beta, time_step=time_step, buffer_capacity=capacity,
             steps_per_tick=steps_per_tick, scale=scale, check_finite=check_finite),
    )
    from lorenzsim.render.window import render_frame

    driver = SimulationDriver(cfg.simulation)
    _advance_ticks(driver, ticks)
    ui.print_run_header("render", config=cfg.simulation, config_path=config, render=cfg.render, ticks=ticks)
    ui.print_io_write(out)
    render_frame(driver, cfg.render, out)
    typer.secho(f"Rendered {len(driver.snapshot())} points → {out}", fg=typer.colors.GREEN)


@app.command()
def selftest():
    """
    Check one RK4 step against the reference value and the buffer scenarios.
    """
    set_command_context("selftest")
    default = SimulationConfig()
    system = LorenzSystem.from_config(default)
    first = system.step(constants.INITIAL_STATE)
    step_ok = all(abs(a - b) < REFERENCE_TOLERANCE for a, b in zip(first, REFERENCE_FIRST_STEP))
    ui.print_check("rk4_first_step", step_ok, ui.format_point(first))

    driver = SimulationDriver(default)
    ticks = default.buffer_capacity // default.steps_per_tick
    for _ in range(ticks):
        driver.on_tick()
    snapshot = driver.snapshot()
    capacity_ok = len(snapshot) == default.buffer_capacity and snapshot[0] != driver.initial_state
    ui.print_check("capacity", capacity_ok, f"length={len(snapshot)} after {ticks} ticks")

    driver.reset()
    driver.reset()
    reset_ok = list(driver.snapshot()) == [constants.INITIAL_STATE]
    ui.print_check("reset", reset_ok)

    if step_ok and capacity_ok and reset_ok:
        typer.secho("Selftest passed.", fg=typer.colors.GREEN)
    else:
        typer.secho("Selftest FAILED.", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
