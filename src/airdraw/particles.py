"""
Dissolve particles and their per-frame physics.
"""
from dataclasses import dataclass
from typing import List
import math

LIFE_DECREMENT = 0.02
DRIFT_FREQUENCY = 0.05
DRIFT_AMPLITUDE = 0.5


@dataclass
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    color: str
    size: float
    life: float = 1.0


def step_particles(particles: List[Particle], height: float) -> List[Particle]:
    """
    Advance all particles by one frame.

    Args:
        particles: Particles to move (mutated in place)
        height: Bottom edge of the visible area in pixels

    Returns:
        The particles still alive
    """
    alive = []
    for p in particles:
        # Horizontal flutter keyed to height
        p.x += p.vx + math.sin(p.y * DRIFT_FREQUENCY) * DRIFT_AMPLITUDE
        p.y += p.vy
        p.life -= LIFE_DECREMENT
        if p.life > 0 and p.y < height:
            alive.append(p)
    return alive
