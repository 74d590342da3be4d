import numpy as np
import pytest

from lorenzsim.core.chaos.base import TrajectoryPoint
from lorenzsim.render.mapping import (
    Segment,
    build_segments,
    project,
    segment_array,
    segment_color,
    segment_colors,
    surface_offset,
    to_screen,
)


def test_surface_offset_defaults():
    # 900x700 drawable area inside a 50px margin, shifted down by 350
    assert surface_offset() == (500, 750)
    assert surface_offset(200, 100, 10, 0) == (100, 50)


def test_to_screen_uses_x_and_z():
    offset = (500, 400)
    assert to_screen((1.0, 99.0, 2.0), offset) == (515, 370)
    assert to_screen((-1.0, 0.0, -2.0), offset, scale=10.0) == (490, 420)
    assert to_screen(TrajectoryPoint(0.2, 0.0, -0.2), offset) == (503, 403)


def test_segment_color_gradient():
    assert segment_color(0, 4) == (0.0, 0.5, 1.0)
    assert segment_color(1, 4) == (0.25, 0.5, 0.75)
    assert segment_color(3, 4) == (0.75, 0.5, 0.25)


def test_build_segments():
    points = [TrajectoryPoint(0.0, 0.0, 0.0), TrajectoryPoint(1.0, 0.0, 1.0), TrajectoryPoint(2.0, 5.0, 2.0)]
    segments = build_segments(points, (0, 100), scale=10.0)
    assert segments == [
        Segment(start=(0, 100), end=(10, 90), color=segment_color(1, 3)),
        Segment(start=(10, 90), end=(20, 80), color=segment_color(2, 3)),
    ]


def test_build_segments_too_short():
    assert build_segments([], (0, 0)) == []
    assert build_segments([TrajectoryPoint(0.1, 0.0, 0.0)], (0, 0)) == []


def test_gradient_depends_on_index_not_time():
    early = [TrajectoryPoint(float(i), 0.0, 0.0) for i in range(4)]
    late = [TrajectoryPoint(float(i), 0.0, 0.0) for i in range(100, 104)]
    colors_early = [s.color for s in build_segments(early, (0, 0))]
    colors_late = [s.color for s in build_segments(late, (0, 0))]
    assert colors_early == colors_late


def test_vectorised_forms_match_scalar():
    rng = np.random.default_rng(0)
    points = rng.uniform(-25, 45, size=(50, 3))
    offset = (500, 750)
    screen = project(points, offset)
    assert [tuple(row) for row in screen.tolist()] == [to_screen(p, offset) for p in points]

    segments = build_segments([TrajectoryPoint(*p) for p in points], offset)
    arr = segment_array(points, offset)
    assert arr.shape == (49, 2, 2)
    assert [(tuple(a), tuple(b)) for a, b in arr.tolist()] == [(s.start, s.end) for s in segments]
    assert np.allclose(segment_colors(50), [s.color for s in segments])


def test_vectorised_empty():
    assert segment_colors(1).shape == (0, 3)
    assert segment_array(np.empty((0, 3)), (0, 0)).shape == (0, 2, 2)
    assert segment_array(np.array([[0.1, 0.0, 0.0]]), (0, 0)).shape == (0, 2, 2)


@pytest.mark.parametrize("value,expected", [(0.5, 0), (1.5, 2), (2.5, 2)])
def test_rounding_half_to_even(value, expected):
    assert to_screen((value, 0.0, 0.0), (0, 0), scale=1.0)[0] == expected
    assert project(np.array([[value, 0.0, 0.0]]), (0, 0), scale=1.0)[0, 0] == expected
