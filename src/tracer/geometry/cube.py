"""Axis-aligned cube spanning -1..1 on every axis.

Intersection treats the cube as three pairs of parallel planes (slabs) and
keeps the overlap of the three entry/exit intervals.
"""

from dataclasses import dataclass

from src.tracer.core.ray import Ray
from src.tracer.core.tuples import Tuple4, point, vector
from src.tracer.geometry.bounds import Bounds, check_axis


@dataclass(frozen=True)
class Cube:
    """The cube [-1, 1]^3. Carries no parameters."""


def local_intersect(cube: Cube, ray: Ray) -> list[tuple[float, None, None]]:
    """Slab-method intersection.

    Returns:
        Two entries (entry, exit) when the intervals overlap, otherwise [].
    """
    xtmin, xtmax = check_axis(ray.origin[0], ray.direction[0], -1.0, 1.0)
    ytmin, ytmax = check_axis(ray.origin[1], ray.direction[1], -1.0, 1.0)
    ztmin, ztmax = check_axis(ray.origin[2], ray.direction[2], -1.0, 1.0)

    tmin = max(xtmin, ytmin, ztmin)
    tmax = min(xtmax, ytmax, ztmax)
    if tmin > tmax:
        return []
    return [(float(tmin), None, None), (float(tmax), None, None)]


def local_normal_at(cube: Cube, object_point: Tuple4, hit=None) -> Tuple4:
    """Normal of the face owning the largest absolute coordinate."""
    x, y, z = abs(object_point[0]), abs(object_point[1]), abs(object_point[2])
    maxc = max(x, y, z)

    if maxc == x:
        return vector(object_point[0], 0, 0)
    if maxc == y:
        return vector(0, object_point[1], 0)
    return vector(0, 0, object_point[2])


def bounds(cube: Cube) -> Bounds:
    return Bounds(point(-1, -1, -1), point(1, 1, 1))
