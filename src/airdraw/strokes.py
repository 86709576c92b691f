"""
Stroke accumulation: building, finalizing and dissolving drawing paths.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple
import random

from .geometry import Point, distance_sq
from .particles import Particle

MIN_POINT_SPACING_PX = 2.0
DISSOLVE_SAMPLE_STEP = 4
ERASER_PARTICLE_COLOR = "white"


class ToolType(Enum):
    PEN = "PEN"
    ERASER = "ERASER"


@dataclass
class ToolSettings:
    """Active brush. Captured into a path when the stroke ends."""
    tool: ToolType = ToolType.PEN
    color: str = "#00FF00"
    size: int = 5

    @property
    def is_eraser(self) -> bool:
        return self.tool == ToolType.ERASER


@dataclass(frozen=True)
class DrawingPath:
    """A finalized stroke."""
    points: Tuple[Point, ...]
    color: str
    width: int
    is_eraser: bool


class StrokeAccumulator:
    """
    Owns the finalized paths and at most one in-progress stroke.
    """

    def __init__(self, min_spacing: float = MIN_POINT_SPACING_PX):
        self._min_spacing_sq = min_spacing * min_spacing
        self._paths: List[DrawingPath] = []
        self._current: List[Point] = []

    def start_stroke(self, point: Point) -> None:
        """Begin a new stroke with a single point."""
        self._current = [point]

    def add_point(self, point: Point) -> bool:
        """
        Append a point to the active stroke, skipping jitter-sized moves.

        Returns:
            True if the point was recorded
        """
        if not self._current:
            return False

        if distance_sq(self._current[-1], point) > self._min_spacing_sq:
            self._current.append(point)
            return True
        return False

    def end_stroke(self, tools: ToolSettings) -> Optional[DrawingPath]:
        """
        Finalize the active stroke with the current brush.

        Returns:
            The new path, or None if there was nothing to finalize
        """
        if not self._current:
            return None

        path = DrawingPath(
            points=tuple(self._current),
            color=tools.color,
            width=tools.size,
            is_eraser=tools.is_eraser,
        )
        self._paths.append(path)
        self._current = []
        return path

    def dissolve(self, rng: Optional[random.Random] = None) -> List[Particle]:
        """
        Turn every finalized path into falling particles and clear the canvas.
        Every 4th point of each path spawns one particle.

        Returns:
            The spawned particles (empty if there were no paths)
        """
        if not self._paths:
            return []

        rng = rng or random
        particles = []
        for path in self._paths:
            color = ERASER_PARTICLE_COLOR if path.is_eraser else path.color
            for point in path.points[::DISSOLVE_SAMPLE_STEP]:
                particles.append(Particle(
                    x=point.x,
                    y=point.y,
                    vx=(rng.random() - 0.5) * 4,
                    vy=rng.random() * 5 + 2,
                    color=color,
                    size=rng.random() * 3 + 1,
                    life=1.0,
                ))

        self._paths = []
        self._current = []
        return particles

    @property
    def paths(self) -> Tuple[DrawingPath, ...]:
        return tuple(self._paths)

    @property
    def current(self) -> Tuple[Point, ...]:
        return tuple(self._current)

    @property
    def is_active(self) -> bool:
        return bool(self._current)
