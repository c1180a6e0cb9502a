"""Cylinder and double-napped cone primitives.

Both are centered on the object-space y axis and may be truncated to
``minimum < y < maximum`` (exclusive) and optionally closed with end caps.
The cylinder has radius 1; the cone's radius at height y is |y|.

Body hits come from a quadratic in t. When the quadratic coefficient
vanishes the ray is parallel to the cylinder's axis (only caps can be hit)
or parallel to one half of the cone (one linear root, ``-c / 2b``).
"""

import math
from dataclasses import dataclass

from src.tracer.core.ray import Ray
from src.tracer.core.tuples import EPSILON, Tuple4, point, vector
from src.tracer.geometry.bounds import INFINITY, Bounds

Hits = list[tuple[float, None, None]]


@dataclass(frozen=True)
class Cylinder:
    """Unit-radius cylinder around the y axis.

    Attributes:
        minimum: Lower truncation height (exclusive), -inf for none.
        maximum: Upper truncation height (exclusive), +inf for none.
        closed: Whether the truncated ends are capped.
    """

    minimum: float = -INFINITY
    maximum: float = INFINITY
    closed: bool = False


@dataclass(frozen=True)
class Cone:
    """Double-napped cone around the y axis with radius |y|.

    Attributes:
        minimum: Lower truncation height (exclusive), -inf for none.
        maximum: Upper truncation height (exclusive), +inf for none.
        closed: Whether the truncated ends are capped.
    """

    minimum: float = -INFINITY
    maximum: float = INFINITY
    closed: bool = False


def _check_cap(ray: Ray, t: float, radius: float) -> bool:
    """Is the point at ``t`` within ``radius`` of the y axis?"""
    x = ray.origin[0] + t * ray.direction[0]
    z = ray.origin[2] + t * ray.direction[2]
    return x * x + z * z <= radius * radius


def _intersect_caps(shape: Cylinder | Cone, ray: Ray, cone: bool, xs: Hits) -> None:
    if not shape.closed or abs(ray.direction[1]) < EPSILON:
        return

    # cone caps have the radius of the cone at the cap height
    t = (shape.minimum - ray.origin[1]) / ray.direction[1]
    if _check_cap(ray, t, abs(shape.minimum) if cone else 1.0):
        xs.append((float(t), None, None))

    t = (shape.maximum - ray.origin[1]) / ray.direction[1]
    if _check_cap(ray, t, abs(shape.maximum) if cone else 1.0):
        xs.append((float(t), None, None))


def _add_body_hits(shape: Cylinder | Cone, ray: Ray, roots: tuple[float, ...], xs: Hits) -> None:
    """Keep roots whose height falls strictly inside the truncation range."""
    for t in roots:
        y = ray.origin[1] + t * ray.direction[1]
        if shape.minimum < y < shape.maximum:
            xs.append((float(t), None, None))


def _sorted_roots(a: float, b: float, c: float) -> tuple[float, ...] | None:
    disc = b * b - 4.0 * a * c
    if disc < 0.0:
        return None
    sqrt_d = math.sqrt(disc)
    t0 = (-b - sqrt_d) / (2.0 * a)
    t1 = (-b + sqrt_d) / (2.0 * a)
    if t0 > t1:
        t0, t1 = t1, t0
    return t0, t1


def intersect_cylinder(cyl: Cylinder, ray: Ray) -> Hits:
    """Intersect an object-space ray with a cylinder.

    Returns:
        Body hits first (ascending), then cap hits (lower cap first).
    """
    ox, oz = ray.origin[0], ray.origin[2]
    dx, dz = ray.direction[0], ray.direction[2]
    xs: Hits = []

    a = dx * dx + dz * dz
    # a ~ 0 means the ray is parallel to the y axis; only the caps can be hit
    if abs(a) >= EPSILON:
        b = 2.0 * (ox * dx + oz * dz)
        c = ox * ox + oz * oz - 1.0
        roots = _sorted_roots(a, b, c)
        if roots is None:
            return []
        _add_body_hits(cyl, ray, roots, xs)

    _intersect_caps(cyl, ray, False, xs)
    return xs


def cylinder_normal_at(cyl: Cylinder, object_point: Tuple4, hit=None) -> Tuple4:
    x, y, z = object_point[0], object_point[1], object_point[2]
    dist = x * x + z * z

    if dist < 1.0 and y >= cyl.maximum - EPSILON:
        return vector(0, 1, 0)
    if dist < 1.0 and y <= cyl.minimum + EPSILON:
        return vector(0, -1, 0)
    return vector(x, 0, z)


def cylinder_bounds(cyl: Cylinder) -> Bounds:
    return Bounds(point(-1, cyl.minimum, -1), point(1, cyl.maximum, 1))


def intersect_cone(cone: Cone, ray: Ray) -> Hits:
    """Intersect an object-space ray with a cone.

    Returns:
        Body hits first (ascending), then cap hits (lower cap first).
    """
    ox, oy, oz = ray.origin[0], ray.origin[1], ray.origin[2]
    dx, dy, dz = ray.direction[0], ray.direction[1], ray.direction[2]
    xs: Hits = []

    a = dx * dx - dy * dy + dz * dz
    b = 2.0 * (ox * dx - oy * dy + oz * dz)
    c = ox * ox - oy * oy + oz * oz

    if abs(a) < EPSILON:
        # Ray parallel to one of the cone's halves: at most one body hit
        if abs(b) >= EPSILON:
            _add_body_hits(cone, ray, (-c / (2.0 * b),), xs)
    else:
        roots = _sorted_roots(a, b, c)
        if roots is not None:
            _add_body_hits(cone, ray, roots, xs)

    _intersect_caps(cone, ray, True, xs)
    return xs


def cone_normal_at(cone: Cone, object_point: Tuple4, hit=None) -> Tuple4:
    x, y, z = object_point[0], object_point[1], object_point[2]
    dist = x * x + z * z

    if dist < cone.maximum * cone.maximum and y >= cone.maximum - EPSILON:
        return vector(0, 1, 0)
    if dist < cone.minimum * cone.minimum and y <= cone.minimum + EPSILON:
        return vector(0, -1, 0)

    ny = math.sqrt(dist)
    if y > 0.0:
        ny = -ny
    return vector(x, ny, z)


def cone_bounds(cone: Cone) -> Bounds:
    limit = max(abs(cone.minimum), abs(cone.maximum))
    return Bounds(point(-limit, cone.minimum, -limit), point(limit, cone.maximum, limit))
