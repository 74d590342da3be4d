from __future__ import annotations

from pathlib import Path
from typing import Optional

from matplotlib.collections import LineCollection
from matplotlib.figure import Figure

from lorenzsim.core.config import RenderConfig
from lorenzsim.core.constants import CAPTION, CAPTION_POSITION
from lorenzsim.orchestrator.driver import SimulationDriver
from lorenzsim.render.mapping import segment_array, segment_colors, surface_offset
from lorenzsim.utils.logging import get_logger

logger = get_logger(__name__)

_DPI = 100


class TrajectoryView:
    """Draws the driver's current snapshot onto a black, pixel-addressed surface."""

    def __init__(self, driver: SimulationDriver, render: RenderConfig | None = None, figure: Optional[Figure] = None):
        self.driver = driver
        self.render = render or RenderConfig()
        self.offset = surface_offset(
            self.render.width, self.render.height, self.render.margin, self.render.vertical_shift
        )
        self.figure = figure or Figure()
        self.figure.set_size_inches(self.render.width / _DPI, self.render.height / _DPI)
        self.figure.set_dpi(_DPI)
        self.figure.patch.set_facecolor("black")

        ax = self.figure.add_axes((0.0, 0.0, 1.0, 1.0))
        ax.set_facecolor("black")
        ax.set_xlim(0, self.render.width)
        ax.set_ylim(self.render.height, 0)  # screen y grows downwards
        ax.set_axis_off()
        self.axes = ax

        self.lines = LineCollection([], linewidths=self.render.linewidth, antialiaseds=True)
        ax.add_collection(self.lines)
        ax.text(
            CAPTION_POSITION[0],
            CAPTION_POSITION[1],
            CAPTION,
            color="white",
            fontsize=10,
        )
        self.draw()

    def draw(self) -> LineCollection:
        points = self.driver.snapshot_array()
        self.lines.set_segments(segment_array(points, self.offset, self.driver.config.scale))
        self.lines.set_colors(segment_colors(len(points)))
        return self.lines


def render_frame(driver: SimulationDriver, render: RenderConfig | None, out_path: Path) -> Path:
    """Save the current snapshot as a PNG without opening a window."""
    view = TrajectoryView(driver, render)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    view.figure.savefig(out_path, dpi=_DPI, facecolor="black")
    logger.info("Rendered %d points to %s", len(driver.snapshot()), out_path)
    return out_path


def run_window(driver: SimulationDriver, render: RenderConfig | None = None) -> None:
    """Open the live window: timer ticks advance the simulation, a left click resets it."""
    import matplotlib.pyplot as plt
    from matplotlib.animation import FuncAnimation

    render = render or RenderConfig()
    figure = plt.figure()
    view = TrajectoryView(driver, render, figure=figure)
    if figure.canvas.manager is not None:
        figure.canvas.manager.set_window_title("Lorenz-Attraktor Simulation")

    def on_press(event) -> None:
        if event.button == 1:
            driver.on_primary_click()

    def update(_frame):
        driver.on_tick()
        return (view.lines,)

    driver.on_redraw = view.draw
    figure.canvas.mpl_connect("button_press_event", on_press)
    # keep a reference or the timer is garbage-collected
    view.animation = FuncAnimation(
        figure, update, interval=render.tick_interval_ms, blit=False, cache_frame_data=False
    )
    logger.info("Opening window %dx%d tick=%dms", render.width, render.height, render.tick_interval_ms)
    plt.show()
