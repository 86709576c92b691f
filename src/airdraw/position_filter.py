from typing import Optional

from .geometry import Point, distance, lerp


class SpeedAdaptiveFilter:
    """
    One-pole low pass filter whose blend factor follows cursor speed.

    Slow movement is smoothed heavily (steady menu targeting), fast movement
    passes through almost raw (no lag on broad strokes).
    """

    def __init__(self, min_alpha: float = 0.1, max_alpha: float = 0.8, speed_reference: float = 80.0):
        """
        Args:
            min_alpha: Blend factor at rest
            max_alpha: Blend factor at or above the reference speed
            speed_reference: Frame-to-frame movement in pixels treated as full speed
        """
        self.min_alpha = min_alpha
        self.max_alpha = max_alpha
        self.speed_reference = speed_reference
        self._value: Optional[Point] = None

    def __call__(self, raw: Point) -> Point:
        """
        Filter a raw pixel position.

        Returns:
            Smoothed pixel position
        """
        if self._value is None:
            self._value = Point(raw.x, raw.y)
            return self._value

        prev = self._value
        speed_factor = min(1.0, distance(prev, raw) / self.speed_reference)
        alpha = lerp(self.min_alpha, self.max_alpha, speed_factor)

        self._value = Point(lerp(prev.x, raw.x, alpha), lerp(prev.y, raw.y, alpha))
        return self._value

    def reset(self) -> None:
        self._value = None

    @property
    def value(self) -> Optional[Point]:
        return self._value
