"""Flat and smooth triangle primitives.

Triangles are intersected with the Moller-Trumbore algorithm, which yields
the barycentric coordinates (u, v) of the hit alongside t. A flat triangle
has one precomputed face normal; a smooth triangle interpolates its three
vertex normals with those coordinates:

    normal = n2 * u + n3 * v + n1 * (1 - u - v)

Triangles are defined directly in object space (there is no unit triangle),
so their vertices also define their bounding box.
"""

from dataclasses import dataclass, field

from src.tracer.core.ray import Ray
from src.tracer.core.tuples import EPSILON, Tuple4, cross, dot, freeze, magnitude, normalize
from src.tracer.geometry.bounds import Bounds


class DegenerateTriangleError(ValueError):
    """Raised for a triangle whose vertices do not span an area."""


@dataclass(frozen=True, eq=False)
class Triangle:
    """A flat triangle.

    Attributes:
        p1, p2, p3: Vertex points in object space.
        e1: Edge p2 - p1 (computed).
        e2: Edge p3 - p1 (computed).
        normal: Unit face normal, normalize(e2 x e1) (computed).
    """

    p1: Tuple4
    p2: Tuple4
    p3: Tuple4
    e1: Tuple4 = field(init=False, repr=False)
    e2: Tuple4 = field(init=False, repr=False)
    normal: Tuple4 = field(init=False, repr=False)

    def __post_init__(self) -> None:
        for name in ("p1", "p2", "p3"):
            object.__setattr__(self, name, freeze(getattr(self, name)))
        e1 = self.p2 - self.p1
        e2 = self.p3 - self.p1
        face = cross(e2, e1)
        if magnitude(face) <= EPSILON * magnitude(e1) * magnitude(e2):
            raise DegenerateTriangleError(f"Triangle vertices are collinear: {self.p1}, {self.p2}, {self.p3}")
        object.__setattr__(self, "e1", freeze(e1))
        object.__setattr__(self, "e2", freeze(e2))
        object.__setattr__(self, "normal", freeze(normalize(face)))


@dataclass(frozen=True, eq=False)
class SmoothTriangle(Triangle):
    """A triangle with per-vertex normals.

    Attributes:
        n1, n2, n3: Vertex normals matching p1, p2, p3.
    """

    n1: Tuple4 = None
    n2: Tuple4 = None
    n3: Tuple4 = None

    def __post_init__(self) -> None:
        super().__post_init__()
        for name in ("n1", "n2", "n3"):
            value = getattr(self, name)
            if value is None:
                raise ValueError(f"SmoothTriangle requires vertex normal {name}")
            object.__setattr__(self, name, freeze(value))


def local_intersect(tri: Triangle, ray: Ray) -> list[tuple[float, float, float]]:
    """Moller-Trumbore ray-triangle intersection.

    Args:
        tri: A Triangle or SmoothTriangle.
        ray: The ray, already in the triangle's object space.

    Returns:
        ``[(t, u, v)]`` on a hit, where (u, v) are barycentric coordinates
        relative to p2 and p3; ``[]`` on a miss or a ray parallel to the
        triangle's plane.
    """
    dir_cross_e2 = cross(ray.direction, tri.e2)
    det = dot(tri.e1, dir_cross_e2)
    if abs(det) <= EPSILON * magnitude(tri.e1) * magnitude(dir_cross_e2):
        return []

    f = 1.0 / det
    p1_to_origin = ray.origin - tri.p1
    u = f * dot(p1_to_origin, dir_cross_e2)
    if u < 0.0 or u > 1.0:
        return []

    origin_cross_e1 = cross(p1_to_origin, tri.e1)
    v = f * dot(ray.direction, origin_cross_e1)
    if v < 0.0 or u + v > 1.0:
        return []

    t = f * dot(tri.e2, origin_cross_e1)
    return [(t, u, v)]


def local_normal_at(tri: Triangle, object_point: Tuple4, hit=None) -> Tuple4:
    return tri.normal


def smooth_normal_at(tri: SmoothTriangle, object_point: Tuple4, hit=None) -> Tuple4:
    """Interpolate the vertex normals at the hit's (u, v).

    Without a hit carrying barycentric coordinates the face normal is used.
    """
    if hit is None or hit.u is None or hit.v is None:
        return tri.normal
    return tri.n2 * hit.u + tri.n3 * hit.v + tri.n1 * (1.0 - hit.u - hit.v)


def bounds(tri: Triangle) -> Bounds:
    return Bounds.empty().add_point(tri.p1).add_point(tri.p2).add_point(tri.p3)
