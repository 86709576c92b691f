import pytest

from airdraw.geometry import Point
from airdraw.position_filter import SpeedAdaptiveFilter


def test_first_sample_passes_through():
    f = SpeedAdaptiveFilter()
    assert f.value is None
    assert f(Point(120.0, 80.0)) == Point(120.0, 80.0)


def test_slow_movement_is_smoothed_heavily():
    f = SpeedAdaptiveFilter()
    f(Point(0.0, 0.0))
    # 8px move -> speed factor 0.1 -> alpha 0.17
    out = f(Point(8.0, 0.0))
    assert out.x == pytest.approx(8.0 * 0.17)
    assert out.y == pytest.approx(0.0)


def test_fast_movement_is_nearly_raw():
    f = SpeedAdaptiveFilter()
    f(Point(0.0, 0.0))
    # Beyond the 80px reference the blend factor saturates at 0.8
    out = f(Point(0.0, 200.0))
    assert out.y == pytest.approx(160.0)


def test_adaptive_responds_faster_to_fast_motion():
    slow = SpeedAdaptiveFilter()
    fast = SpeedAdaptiveFilter()
    slow(Point(0.0, 0.0))
    fast(Point(0.0, 0.0))

    slow_out = slow(Point(10.0, 0.0))
    fast_out = fast(Point(60.0, 0.0))

    # Fraction of the gap closed in one step
    assert fast_out.x / 60.0 > slow_out.x / 10.0


def test_stationary_input_converges():
    f = SpeedAdaptiveFilter()
    f(Point(0.0, 0.0))
    for _ in range(200):
        out = f(Point(5.0, 5.0))
    assert out.x == pytest.approx(5.0, abs=1e-3)
    assert out.y == pytest.approx(5.0, abs=1e-3)


def test_reset_restarts_without_smoothing():
    f = SpeedAdaptiveFilter()
    f(Point(0.0, 0.0))
    f.reset()
    assert f.value is None
    assert f(Point(300.0, 300.0)) == Point(300.0, 300.0)
