"""
Coordinate and colour mapping used by the renderers.

Points are sliced onto the x/z plane: x maps to the horizontal screen axis,
z to the vertical one (screen y grows downwards), y is dropped. Colours run
from blue to red by buffer index, so once the buffer is full the gradient
scrolls with eviction rather than tracking simulated time.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from lorenzsim.core.chaos.base import TrajectoryPoint
from lorenzsim.core.constants import (
    DEFAULT_HEIGHT,
    DEFAULT_MARGIN,
    DEFAULT_SCALE,
    DEFAULT_VERTICAL_SHIFT,
    DEFAULT_WIDTH,
    GREEN_CHANNEL,
)

Offset = Tuple[int, int]
Color = Tuple[float, float, float]


@dataclass(frozen=True)
class Segment:
    start: Tuple[int, int]
    end: Tuple[int, int]
    color: Color


def surface_offset(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    margin: int = DEFAULT_MARGIN,
    vertical_shift: int = DEFAULT_VERTICAL_SHIFT,
) -> Offset:
    """Centre of the drawable area inside ``margin``, pushed down by ``vertical_shift``."""
    available_w = width - 2 * margin
    available_h = height - 2 * margin
    return margin + available_w // 2, margin + available_h // 2 + vertical_shift


def to_screen(point: Sequence[float], offset: Offset, scale: float = DEFAULT_SCALE) -> Tuple[int, int]:
    # round() is half-to-even, same as np.rint in project()
    offset_x, offset_y = offset
    return offset_x + round(point[0] * scale), offset_y - round(point[2] * scale)


def segment_color(index: int, count: int) -> Color:
    ratio = index / count
    return ratio, GREEN_CHANNEL, 1.0 - ratio


def build_segments(
    points: Sequence[TrajectoryPoint], offset: Offset, scale: float = DEFAULT_SCALE
) -> List[Segment]:
    """Connected segments (i-1, i) for i in 1..N-1, coloured by ``segment_color(i, N)``."""
    count = len(points)
    segments: List[Segment] = []
    if count < 2:
        return segments
    prev = to_screen(points[0], offset, scale)
    for i in range(1, count):
        curr = to_screen(points[i], offset, scale)
        segments.append(Segment(start=prev, end=curr, color=segment_color(i, count)))
        prev = curr
    return segments


def project(points: np.ndarray, offset: Offset, scale: float = DEFAULT_SCALE) -> np.ndarray:
    """Vectorised ``to_screen`` over an ``(N, 3)`` array; returns ``(N, 2)`` ints."""
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    screen = np.empty((points.shape[0], 2), dtype=np.int64)
    screen[:, 0] = offset[0] + np.rint(points[:, 0] * scale).astype(np.int64)
    screen[:, 1] = offset[1] - np.rint(points[:, 2] * scale).astype(np.int64)
    return screen


def segment_colors(count: int) -> np.ndarray:
    """RGB rows for segments 1..count-1, matching ``segment_color``."""
    if count < 2:
        return np.empty((0, 3), dtype=np.float64)
    ratio = np.arange(1, count, dtype=np.float64) / count
    return np.column_stack([ratio, np.full_like(ratio, GREEN_CHANNEL), 1.0 - ratio])


def segment_array(points: np.ndarray, offset: Offset, scale: float = DEFAULT_SCALE) -> np.ndarray:
    """``(N-1, 2, 2)`` array of screen segments, suitable for a LineCollection."""
    screen = project(points, offset, scale)
    if screen.shape[0] < 2:
        return np.empty((0, 2, 2), dtype=np.int64)
    return np.stack([screen[:-1], screen[1:]], axis=1)
