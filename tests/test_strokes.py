import math
import random
import pytest

from airdraw.geometry import Point
from airdraw.strokes import StrokeAccumulator, ToolSettings, ToolType


@pytest.fixture
def strokes():
    return StrokeAccumulator()


@pytest.fixture
def tools():
    return ToolSettings()


def draw(strokes, tools, n, spacing=10.0):
    strokes.start_stroke(Point(0.0, 0.0))
    for i in range(1, n):
        strokes.add_point(Point(i * spacing, 0.0))
    return strokes.end_stroke(tools)


def test_start_stroke_has_single_point(strokes):
    strokes.start_stroke(Point(5.0, 5.0))
    assert strokes.current == (Point(5.0, 5.0),)
    assert strokes.is_active


def test_micro_movements_are_ignored(strokes):
    strokes.start_stroke(Point(100.0, 100.0))
    for dx, dy in [(1.0, 0.0), (0.0, 1.5), (-1.2, -1.2), (2.0, 0.0), (1.4, 1.4)]:
        assert not strokes.add_point(Point(100.0 + dx, 100.0 + dy))
    assert len(strokes.current) == 1


def test_point_beyond_spacing_is_recorded(strokes):
    strokes.start_stroke(Point(0.0, 0.0))
    assert strokes.add_point(Point(2.1, 0.0))
    assert len(strokes.current) == 2


def test_add_point_without_stroke_is_noop(strokes):
    assert not strokes.add_point(Point(50.0, 50.0))
    assert strokes.current == ()


def test_end_stroke_captures_brush_at_finalize_time(strokes, tools):
    strokes.start_stroke(Point(0.0, 0.0))
    strokes.add_point(Point(10.0, 0.0))
    tools.tool = ToolType.ERASER
    tools.color = "#FF0000"
    tools.size = 10

    path = strokes.end_stroke(tools)

    assert path.points == (Point(0.0, 0.0), Point(10.0, 0.0))
    assert path.color == "#FF0000"
    assert path.width == 10
    assert path.is_eraser
    assert strokes.paths == (path,)
    assert not strokes.is_active


def test_end_stroke_is_idempotent(strokes, tools):
    draw(strokes, tools, 3)
    paths = strokes.paths
    assert strokes.end_stroke(tools) is None
    assert strokes.paths == paths


def test_end_stroke_without_stroke_is_noop(strokes, tools):
    assert strokes.end_stroke(tools) is None
    assert strokes.paths == ()


@pytest.mark.parametrize("n_points", [1, 4, 5, 9])
def test_dissolve_samples_every_fourth_point(strokes, tools, n_points):
    draw(strokes, tools, n_points)
    draw(strokes, tools, 3)

    particles = strokes.dissolve(random.Random(1))

    assert len(particles) == math.ceil(n_points / 4) + 1
    assert strokes.paths == ()


def test_dissolve_discards_active_stroke(strokes, tools):
    draw(strokes, tools, 2)
    strokes.start_stroke(Point(1.0, 1.0))
    strokes.dissolve(random.Random(1))
    assert strokes.current == ()
    assert not strokes.is_active


def test_dissolve_without_paths_is_noop(strokes):
    strokes.start_stroke(Point(1.0, 1.0))
    assert strokes.dissolve() == []
    assert strokes.is_active


def test_dissolve_particle_properties(strokes, tools):
    tools.color = "#0000FF"
    draw(strokes, tools, 8)
    tools.tool = ToolType.ERASER
    draw(strokes, tools, 1)

    particles = strokes.dissolve(random.Random(42))

    assert [p.color for p in particles] == ["#0000FF", "#0000FF", "white"]
    assert (particles[0].x, particles[1].x) == (0.0, 40.0)
    for p in particles:
        assert p.life == 1.0
        assert -2.0 <= p.vx < 2.0
        assert 2.0 <= p.vy < 7.0
        assert 1.0 <= p.size < 4.0
