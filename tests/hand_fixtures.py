"""
Synthetic 21-point hands for tests.

Wrist at (0.5, 0.8), middle MCP at (0.5, 0.6): hand size 0.2.
Fingers point up (decreasing y); a curled finger folds its tip back
below the PIP joint.
"""
HAND_SIZE = 0.2

# x position of index, middle, ring, pinky
_FINGER_X = [0.45, 0.5, 0.55, 0.6]


def make_hand(index=True, middle=True, ring=True, pinky=True,
              thumb_out=True, pinch=None, offset=(0.0, 0.0)):
    """
    Build a landmark list.

    Args:
        index/middle/ring/pinky: Whether each finger is extended
        thumb_out: Thumb spread away from the palm
        pinch: If set, place the thumb tip so the pinch ratio equals this value
        offset: (dx, dy) shift applied to every landmark
    """
    points = [None] * 21
    points[0] = (0.5, 0.8)

    # Thumb: CMC, MCP, IP, TIP
    points[1] = (0.42, 0.75)
    points[2] = (0.38, 0.70)
    points[3] = (0.35, 0.65)
    points[4] = (0.32, 0.60) if thumb_out else (0.45, 0.68)

    for i, (extended, x) in enumerate(zip((index, middle, ring, pinky), _FINGER_X)):
        base = 5 + i * 4
        points[base] = (x, 0.6)          # MCP
        points[base + 1] = (x, 0.5)      # PIP
        if extended:
            points[base + 2] = (x, 0.45)
            points[base + 3] = (x, 0.40)
        else:
            points[base + 2] = (x, 0.55)
            points[base + 3] = (x, 0.58)

    if pinch is not None:
        tip_x, tip_y = points[8]
        points[4] = (tip_x - pinch * HAND_SIZE, tip_y)

    dx, dy = offset
    return [(x + dx, y + dy, 0.0) for x, y in points]


def pinch_hand(ratio, offset=(0.0, 0.0)):
    """Index up, other fingers curled, thumb placed for the given pinch ratio."""
    return make_hand(middle=False, ring=False, pinky=False, pinch=ratio, offset=offset)


def pointing_hand(offset=(0.0, 0.0)):
    return make_hand(middle=False, ring=False, pinky=False, thumb_out=False, offset=offset)


def fist_hand(offset=(0.0, 0.0)):
    return make_hand(index=False, middle=False, ring=False, pinky=False, thumb_out=False, offset=offset)


def open_palm():
    return make_hand()


def victory_hand():
    return make_hand(ring=False, pinky=False, thumb_out=False)
