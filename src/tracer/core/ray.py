"""Ray data structure.

A ray is an origin point plus a direction vector. The direction is not
required to be normalized: rays transformed into a scaled object's space
keep their parametric distances, so a hit at ``t`` in object space is the
same ``t`` in world space.

Example:
    >>> from src.tracer.core.ray import Ray
    >>> from src.tracer.core.tuples import point, vector
    >>> ray = Ray(origin=point(2, 3, 4), direction=vector(1, 0, 0))
    >>> ray.position(2.5)  # Point 2.5 units along the ray
    array([4.5, 3. , 4. , 1. ])
"""

from dataclasses import dataclass

from src.tracer.core.matrix import Matrix4
from src.tracer.core.tuples import Tuple4, freeze


@dataclass(frozen=True)
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (w = 1).
        direction: The direction vector of the ray (w = 0). Not normalized
            in general.
    """

    origin: Tuple4
    direction: Tuple4

    def position(self, t: float) -> Tuple4:
        """Compute the point along the ray at parameter t.

        Args:
            t: The parameter value. Positive values are in front of the origin.

        Returns:
            The point origin + direction * t.
        """
        return self.origin + self.direction * t

    def transform(self, m: Matrix4) -> "Ray":
        """Return this ray with origin and direction multiplied by ``m``."""
        return Ray(origin=freeze(m @ self.origin), direction=freeze(m @ self.direction))


def make_ray(origin: Tuple4, direction: Tuple4) -> Ray:
    """Create a ray, freezing the given arrays so the ray stays immutable."""
    return Ray(origin=freeze(origin), direction=freeze(direction))
