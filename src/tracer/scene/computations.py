"""Precomputed shading state for a single hit.

``prepare_computations`` gathers everything the integrator needs about a
hit once, so shading, shadow, reflection and refraction code never repeats
the geometry work:

    point        world-space hit point
    eyev         unit vector back toward the ray origin
    normalv      unit normal, flipped to face the eye (``inside`` records it)
    reflectv     ray direction mirrored about the normal
    over_point   point nudged EPSILON along the normal (shadow/reflect origin)
    under_point  point nudged EPSILON against the normal (refraction origin)
    n1, n2       refractive indices on the incoming and outgoing sides

n1 and n2 come from walking the sorted intersection list with a stack of
the shapes the ray is currently inside: a shape is pushed when the ray
enters it and removed when the ray leaves it. Outside every shape the
index is 1.0 (vacuum).
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from src.tracer.core.ray import Ray
from src.tracer.core.tuples import EPSILON, Tuple4, dot, normalize, reflect
from src.tracer.geometry.shape import Shape
from src.tracer.scene.intersection import Intersection

if TYPE_CHECKING:
    from src.tracer.scene.graph import SceneGraph

VACUUM_INDEX = 1.0


@dataclass(frozen=True, eq=False)
class HitRecord:
    """Shading state for one hit (see module docstring for each field)."""

    t: float
    shape: Shape
    point: Tuple4
    eyev: Tuple4
    normalv: Tuple4
    inside: bool
    reflectv: Tuple4
    over_point: Tuple4
    under_point: Tuple4
    n1: float
    n2: float

    @property
    def shape_id(self) -> int:
        return self.shape.id


def refractive_indices(hit: Intersection, xs: list[Intersection], graph: "SceneGraph") -> tuple[float, float]:
    """Find (n1, n2) for ``hit`` by walking ``xs`` in order.

    Args:
        hit: The hit being shaded; must be one of the entries of ``xs``.
        xs: All intersections along the ray, sorted by t.
        graph: Used to look up each shape's material.

    Returns:
        Refractive indices of the material being left and entered.
    """
    containers: list[int] = []
    n1 = n2 = VACUUM_INDEX

    for x in xs:
        if x is hit:
            n1 = graph.get(containers[-1]).material.refractive_index if containers else VACUUM_INDEX

        if x.shape_id in containers:
            containers.remove(x.shape_id)
        else:
            containers.append(x.shape_id)

        if x is hit:
            n2 = graph.get(containers[-1]).material.refractive_index if containers else VACUUM_INDEX
            break

    return n1, n2


def prepare_computations(
    hit: Intersection,
    ray: Ray,
    xs: list[Intersection] | None,
    graph: "SceneGraph",
) -> HitRecord:
    """Build the HitRecord for a hit.

    Args:
        hit: The intersection being shaded.
        ray: The world-space ray that produced it.
        xs: Every intersection along the ray, sorted by t. Pass None when
            only the hit is known; n1/n2 then describe a single surface.
        graph: The scene graph owning the hit shape.

    Returns:
        The precomputed state.
    """
    shape = graph.get(hit.shape_id)
    point = ray.position(hit.t)
    eyev = -ray.direction
    normalv = graph.normal_at(hit.shape_id, point, hit)

    inside = dot(normalv, eyev) < 0.0
    if inside:
        normalv = -normalv

    n1, n2 = refractive_indices(hit, [hit] if xs is None else xs, graph)

    return HitRecord(
        t=hit.t,
        shape=shape,
        point=point,
        eyev=normalize(eyev),
        normalv=normalv,
        inside=inside,
        reflectv=reflect(ray.direction, normalv),
        over_point=point + normalv * EPSILON,
        under_point=point - normalv * EPSILON,
        n1=n1,
        n2=n2,
    )
