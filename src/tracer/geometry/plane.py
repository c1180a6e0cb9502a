"""Infinite xz plane through the object-space origin."""

from dataclasses import dataclass

from src.tracer.core.ray import Ray
from src.tracer.core.tuples import EPSILON, Tuple4, point, vector
from src.tracer.geometry.bounds import INFINITY, Bounds

UP = vector(0, 1, 0)


@dataclass(frozen=True)
class Plane:
    """The plane y = 0. Carries no parameters."""


def local_intersect(plane: Plane, ray: Ray) -> list[tuple[float, None, None]]:
    """A ray parallel to the plane (including one lying in it) misses."""
    if abs(ray.direction[1]) < EPSILON:
        return []
    t = -ray.origin[1] / ray.direction[1]
    return [(float(t), None, None)]


def local_normal_at(plane: Plane, object_point: Tuple4, hit=None) -> Tuple4:
    return UP


def bounds(plane: Plane) -> Bounds:
    return Bounds(point(-INFINITY, 0, -INFINITY), point(INFINITY, 0, INFINITY))
