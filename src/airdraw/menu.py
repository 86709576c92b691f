"""
Gesture menu: element ids, dwell-based selection and its effect on the brush.
"""
from typing import List, Mapping, NamedTuple, Optional

from .geometry import Point
from .strokes import ToolSettings, ToolType

DWELL_TIME_MS = 600.0

COLORS = ['#FFFFFF', '#FF0000', '#00FF00', '#0000FF', '#FFFF00']
SIZES = [2, 5, 10, 15]

TOOL_IDS = {
    'btn-pen': ToolType.PEN,
    'btn-eraser': ToolType.ERASER,
}
COLOR_PREFIX = 'btn-color-'
SIZE_PREFIX = 'btn-size-'

# Hit-test order. Elements never overlap, so first match wins.
ELEMENT_IDS: List[str] = (
    list(TOOL_IDS)
    + [f"{COLOR_PREFIX}{i}" for i in range(len(COLORS))]
    + [f"{SIZE_PREFIX}{i}" for i in range(len(SIZES))]
)


class Rect(NamedTuple):
    """Screen rectangle in pixels."""
    left: float
    top: float
    right: float
    bottom: float

    def contains(self, point: Point) -> bool:
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom


ElementRects = Mapping[str, Rect]


def hit_test(point: Point, rects: ElementRects) -> Optional[str]:
    """Return the first element (in menu order) whose rectangle contains the point."""
    for element_id in ELEMENT_IDS:
        rect = rects.get(element_id)
        if rect is not None and rect.contains(point):
            return element_id
    return None


def apply_selection(tools: ToolSettings, element_id: str) -> bool:
    """
    Update the brush for a selected element.

    Returns:
        True if the id was recognized
    """
    if element_id in TOOL_IDS:
        tools.tool = TOOL_IDS[element_id]
        return True

    for prefix, options in ((COLOR_PREFIX, COLORS), (SIZE_PREFIX, SIZES)):
        if element_id.startswith(prefix):
            try:
                value = options[int(element_id[len(prefix):])]
            except (ValueError, IndexError):
                return False
            if prefix == COLOR_PREFIX:
                tools.color = value
            else:
                tools.size = value
            return True

    return False


class DwellSelector:
    """
    Fires a selection once the cursor rests on the same element for the dwell time.
    """

    def __init__(self, dwell_ms: float = DWELL_TIME_MS):
        self.dwell_ms = dwell_ms
        self.hovered_id: Optional[str] = None
        self.progress_ms = 0.0

    def update(self, cursor: Point, rects: ElementRects, dt_ms: float) -> Optional[str]:
        """
        Advance dwell tracking by one frame.

        Args:
            cursor: Filtered cursor in pixels
            rects: Element id -> screen rectangle snapshot
            dt_ms: Time elapsed since the previous frame

        Returns:
            Id of the element selected on this frame, if any
        """
        hit = hit_test(cursor, rects)

        if hit is None:
            self.clear()
            return None

        if hit != self.hovered_id:
            self.hovered_id = hit
            self.progress_ms = 0.0
            return None

        self.progress_ms += dt_ms
        if self.progress_ms >= self.dwell_ms:
            self.clear()
            return hit
        return None

    def clear(self) -> None:
        self.hovered_id = None
        self.progress_ms = 0.0

    @property
    def progress_fraction(self) -> float:
        """Dwell progress in [0, 1] for the progress ring."""
        if self.dwell_ms <= 0:
            return 0.0
        return max(0.0, min(1.0, self.progress_ms / self.dwell_ms))
