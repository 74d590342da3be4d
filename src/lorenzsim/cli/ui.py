from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Sequence

import typer

from lorenzsim.core.config import RenderConfig, SimulationConfig


def _timestamp_utc() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _abs_path(path: Path | None) -> str:
    if path is None:
        return "n/a"
    try:
        return str(path.resolve())
    except OSError:
        return str(path)


def format_point(point: Optional[Sequence[float]]) -> str:
    if point is None:
        return "n/a"
    return f"({point[0]:.6f},{point[1]:.6f},{point[2]:.6f})"


def print_run_header(
    command: str,
    *,
    config: SimulationConfig,
    config_path: Path | None = None,
    render: RenderConfig | None = None,
    ticks: int | None = None,
) -> None:
    typer.echo(f"[run] command={command} ts_utc={_timestamp_utc()} config={_abs_path(config_path)}")
    typer.echo(f"[lorenz] sigma={config.sigma} rho={config.rho} beta={config.beta:.6f} dt={config.time_step}")
    typer.echo(
        f"[buffer] capacity={config.buffer_capacity} steps_per_tick={config.steps_per_tick} "
        f"scale={config.scale} check_finite={config.check_finite}"
    )
    if render is not None:
        typer.echo(
            f"[surface] size={render.width}x{render.height} margin={render.margin} "
            f"shift={render.vertical_shift} tick_ms={render.tick_interval_ms}"
        )
    if ticks is not None:
        typer.echo(f"[ticks] count={ticks} steps={ticks * config.steps_per_tick}")


def print_io_write(path: Path) -> None:
    typer.echo(f"[io] Writing output: {_abs_path(path)}")


def print_check(label: str, ok: bool, detail: str = "") -> None:
    suffix = f" {detail}" if detail else ""
    typer.secho(
        f"[check] {label}={'ok' if ok else 'FAILED'}{suffix}",
        fg=typer.colors.GREEN if ok else typer.colors.RED,
    )


def print_summary_lines(tag: str, lines: Iterable[str]) -> None:
    for line in lines:
        typer.echo(f"[{tag}] {line}")


def print_done(summary: str) -> None:
    typer.echo(f"[done] {summary}")
