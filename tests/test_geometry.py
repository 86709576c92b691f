import math
import pytest

from airdraw.geometry import (
    INDEX_PIP, INDEX_TIP, RING_PIP, RING_TIP, Point,
    detect_open_palm, detect_pointing, detect_victory, hand_size,
    is_finger_extended, is_in_safe_zone, pinch_midpoint, pinch_ratio,
)
from hand_fixtures import HAND_SIZE, make_hand, open_palm, pinch_hand, pointing_hand, victory_hand


def test_hand_size_is_wrist_to_middle_mcp():
    assert hand_size(open_palm()) == pytest.approx(HAND_SIZE)


def test_hand_size_ignores_depth():
    hand = [(x, y, 5.0 * i) for i, (x, y, _) in enumerate(open_palm())]
    assert hand_size(hand) == pytest.approx(HAND_SIZE)


def test_pinch_ratio_is_normalized_by_hand_size():
    hand = pinch_hand(0.05)
    assert pinch_ratio(hand, hand_size(hand)) == pytest.approx(0.05)


def test_pinch_ratio_is_scale_invariant():
    near = pinch_hand(0.07)
    # Same hand at half the size (farther from the camera)
    far = [(0.5 + (x - 0.5) / 2, 0.5 + (y - 0.5) / 2, z) for x, y, z in near]
    assert pinch_ratio(far, hand_size(far)) == pytest.approx(pinch_ratio(near, hand_size(near)))


def test_pinch_ratio_degenerate_hand_size():
    assert math.isinf(pinch_ratio(open_palm(), 0.0))


def test_pinch_midpoint():
    hand = pinch_hand(0.1)
    mid = pinch_midpoint(hand)
    assert mid.x == pytest.approx(0.45 - 0.01)
    assert mid.y == pytest.approx(0.40)


def test_finger_extension():
    hand = make_hand(index=True, ring=False)
    assert is_finger_extended(hand, INDEX_TIP, INDEX_PIP)
    assert not is_finger_extended(hand, RING_TIP, RING_PIP)


def test_open_palm():
    assert detect_open_palm(open_palm())


def test_open_palm_requires_thumb_out():
    assert not detect_open_palm(make_hand(thumb_out=False))


def test_open_palm_requires_all_fingers():
    assert not detect_open_palm(make_hand(pinky=False))


def test_victory():
    assert detect_victory(victory_hand())
    assert not detect_victory(open_palm())
    assert not detect_victory(pointing_hand())


def test_pointing():
    assert detect_pointing(pointing_hand())
    assert not detect_pointing(victory_hand())


@pytest.mark.parametrize("point, inside", [
    (Point(0.5, 0.5), True),
    (Point(0.06, 0.94), True),
    (Point(0.05, 0.5), False),
    (Point(0.5, 0.95), False),
    (Point(0.97, 0.5), False),
    (Point(0.5, 0.01), False),
])
def test_safe_zone(point, inside):
    assert is_in_safe_zone(point) is inside
