"""
Hand geometry and gesture classification.
Pure functions that operate on a list of 21 (x, y, z) landmarks.
"""
import math
from typing import NamedTuple, Sequence, Tuple

Landmark = Tuple[float, float, float]
LandmarkSet = Sequence[Landmark]

# MediaPipe landmark indices
WRIST = 0
THUMB_IP = 3
THUMB_TIP = 4
INDEX_PIP = 6
INDEX_TIP = 8
MIDDLE_MCP = 9
MIDDLE_PIP = 10
MIDDLE_TIP = 12
RING_PIP = 14
RING_TIP = 16
PINKY_MCP = 17
PINKY_PIP = 18
PINKY_TIP = 20

SAFE_ZONE_MARGIN = 0.05


class Point(NamedTuple):
    x: float
    y: float


def distance_sq(p1, p2) -> float:
    """Squared 2D distance (ignores z)."""
    dx = p1[0] - p2[0]
    dy = p1[1] - p2[1]
    return dx*dx + dy*dy


def distance(p1, p2) -> float:
    return math.sqrt(distance_sq(p1, p2))


def lerp(start: float, end: float, t: float) -> float:
    return start * (1.0 - t) + end * t


def hand_size(landmarks: LandmarkSet) -> float:
    """
    Reference hand size: wrist to middle finger MCP.
    Keeps thresholds independent of the distance to the camera.
    """
    return distance(landmarks[WRIST], landmarks[MIDDLE_MCP])


def pinch_ratio(landmarks: LandmarkSet, size: float) -> float:
    """
    Thumb-index tip distance as a fraction of hand size.

    Returns:
        Ratio (0 = touching). Infinite for a degenerate hand size.
    """
    if size <= 0.0:
        return math.inf
    return distance(landmarks[INDEX_TIP], landmarks[THUMB_TIP]) / size


def pinch_midpoint(landmarks: LandmarkSet) -> Point:
    """Midpoint between index and thumb tips (steadier than the index tip while pinching)."""
    index, thumb = landmarks[INDEX_TIP], landmarks[THUMB_TIP]
    return Point((index[0] + thumb[0]) / 2, (index[1] + thumb[1]) / 2)


def is_finger_extended(landmarks: LandmarkSet, tip: int, pip: int) -> bool:
    """A finger counts as extended when its tip is farther from the wrist than its PIP joint."""
    wrist = landmarks[WRIST]
    return distance_sq(wrist, landmarks[tip]) > distance_sq(wrist, landmarks[pip])


def _finger_states(landmarks: LandmarkSet) -> Tuple[bool, bool, bool, bool]:
    return (
        is_finger_extended(landmarks, INDEX_TIP, INDEX_PIP),
        is_finger_extended(landmarks, MIDDLE_TIP, MIDDLE_PIP),
        is_finger_extended(landmarks, RING_TIP, RING_PIP),
        is_finger_extended(landmarks, PINKY_TIP, PINKY_PIP),
    )


def detect_open_palm(landmarks: LandmarkSet) -> bool:
    """All four fingers extended and the thumb spread away from the palm."""
    if not all(_finger_states(landmarks)):
        return False
    pinky_mcp = landmarks[PINKY_MCP]
    return distance(landmarks[THUMB_TIP], pinky_mcp) > distance(landmarks[THUMB_IP], pinky_mcp)


def detect_victory(landmarks: LandmarkSet) -> bool:
    index, middle, ring, pinky = _finger_states(landmarks)
    return index and middle and not ring and not pinky


def detect_pointing(landmarks: LandmarkSet) -> bool:
    index, middle, ring, pinky = _finger_states(landmarks)
    return index and not middle and not ring and not pinky


def is_in_safe_zone(point: Point) -> bool:
    """Check a normalized point against the central region (frame edges are noisy)."""
    low, high = SAFE_ZONE_MARGIN, 1.0 - SAFE_ZONE_MARGIN
    return low < point.x < high and low < point.y < high
