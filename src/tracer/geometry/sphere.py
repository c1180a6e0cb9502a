"""Unit sphere primitive with robust ray-sphere intersection.

The sphere is centered at the object-space origin with radius 1; size and
position come from the shape's transform.

The quadratic is solved with the reformulation from Ray Tracing Gems, which
avoids catastrophic cancellation when b^2 is nearly equal to 4ac. Both real
roots are reported in ascending order, including the roots behind the ray
origin; a tangent ray reports the same root twice.

Example:
    >>> from src.tracer.core.ray import Ray
    >>> from src.tracer.core.tuples import point, vector
    >>> local_intersect(Sphere(), Ray(point(0, 0, -5), vector(0, 0, 1)))
    [(4.0, None, None), (6.0, None, None)]
"""

import math
from dataclasses import dataclass

from src.tracer.core.ray import Ray
from src.tracer.core.tuples import Tuple4, point, vector
from src.tracer.geometry.bounds import Bounds


@dataclass(frozen=True)
class Sphere:
    """A unit sphere at the origin. Carries no parameters."""


def solve_quadratic(a: float, h: float, c: float) -> tuple[float, float] | None:
    """Solve ``a*t^2 + 2*h*t + c = 0`` using a numerically stable method.

    Args:
        a: Quadratic coefficient (non-zero).
        h: Half of the linear coefficient.
        c: Constant term.

    Returns:
        Tuple of (t0, t1) with t0 <= t1, or None if there are no real roots.
    """
    discriminant = h * h - a * c
    if discriminant < 0.0:
        return None
    sqrt_d = math.sqrt(discriminant)

    # use the sign of h to avoid subtracting nearly equal numbers
    q = -(h + math.copysign(sqrt_d, h))

    if abs(q) < 1e-10:
        # Fall back to the standard formula when q vanishes (b and c near zero)
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        t0, t1 = t1, t0
    return t0, t1


def local_intersect(sphere: Sphere, ray: Ray) -> list[tuple[float, None, None]]:
    """Intersect an object-space ray with the unit sphere.

    The intersection is found by solving |origin + t * direction|^2 = 1.

    Args:
        sphere: The sphere geometry.
        ray: The ray, already in the sphere's object space.

    Returns:
        Zero or two ``(t, None, None)`` entries in ascending t.
    """
    o = ray.origin[:3]
    d = ray.direction[:3]

    a = float(d @ d)
    h = float(d @ o)
    c = float(o @ o) - 1.0

    roots = solve_quadratic(a, h, c)
    if roots is None:
        return []
    return [(roots[0], None, None), (roots[1], None, None)]


def local_normal_at(sphere: Sphere, object_point: Tuple4, hit=None) -> Tuple4:
    """Outward normal: the vector from the center to the point."""
    return vector(object_point[0], object_point[1], object_point[2])


def bounds(sphere: Sphere) -> Bounds:
    return Bounds(point(-1, -1, -1), point(1, 1, 1))
