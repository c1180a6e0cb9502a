"""Point light sources.

A point light has a world-space position and an intensity (its color).
There is no attenuation with distance; a light either reaches a point or
is blocked by a shadow-casting shape.
"""

from dataclasses import dataclass

import numpy as np

from src.tracer.core.tuples import Color, Tuple4, freeze, is_point


@dataclass(frozen=True, eq=False)
class PointLight:
    """A light with no size, radiating equally in every direction.

    Attributes:
        position: World-space position (a point).
        intensity: Linear RGB intensity. Components may exceed 1.0.
    """

    position: Tuple4
    intensity: Color

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", freeze(self.position))
        object.__setattr__(self, "intensity", freeze(self.intensity))
        if self.position.shape != (4,) or not is_point(self.position):
            raise ValueError("Light position must be a point")
        if self.intensity.shape != (3,) or np.any(self.intensity < 0.0):
            raise ValueError(f"Light intensity must be a non-negative color, got {self.intensity}")


def point_light(position: Tuple4, intensity: Color) -> PointLight:
    """Create a point light."""
    return PointLight(position=position, intensity=intensity)
