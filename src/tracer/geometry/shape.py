"""The shape record and per-kind dispatch tables.

Shapes form a closed set of variants tagged by ``ShapeKind``. A ``Shape``
record holds what every variant shares (identifier, transform with its
cached inverses, material, shadow flag) plus the variant's geometry.

Behavior is looked up by kind in plain dictionaries rather than through
subclass methods:

    LOCAL_INTERSECT[kind](geometry, object_ray)   -> [(t, u, v), ...]
    LOCAL_NORMAL_AT[kind](geometry, point, hit)   -> object-space normal
    LOCAL_BOUNDS[kind](geometry)                  -> object-space Bounds

Groups have no entries: they have no surface of their own, and their
intersection and bounds depend on their children, which only the scene
graph knows about.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from src.tracer.core.matrix import IDENTITY, Matrix4, inverse, transpose
from src.tracer.core.tuples import freeze
from src.tracer.geometry import cube, cylinder, plane, sphere, triangle
from src.tracer.geometry.bounds import Bounds
from src.tracer.materials.material import Material


class ShapeKind(IntEnum):
    """Tag identifying a shape variant."""

    SPHERE = 0
    PLANE = 1
    CUBE = 2
    CYLINDER = 3
    CONE = 4
    TRIANGLE = 5
    SMOOTH_TRIANGLE = 6
    GROUP = 7


@dataclass(frozen=True)
class GroupGeometry:
    """Marker geometry for a group; children are tracked by the scene graph."""


# Geometry type expected for each kind
GEOMETRY_TYPES: dict[ShapeKind, type] = {
    ShapeKind.SPHERE: sphere.Sphere,
    ShapeKind.PLANE: plane.Plane,
    ShapeKind.CUBE: cube.Cube,
    ShapeKind.CYLINDER: cylinder.Cylinder,
    ShapeKind.CONE: cylinder.Cone,
    ShapeKind.TRIANGLE: triangle.Triangle,
    ShapeKind.SMOOTH_TRIANGLE: triangle.SmoothTriangle,
    ShapeKind.GROUP: GroupGeometry,
}

LOCAL_INTERSECT: dict[ShapeKind, Callable[..., list]] = {
    ShapeKind.SPHERE: sphere.local_intersect,
    ShapeKind.PLANE: plane.local_intersect,
    ShapeKind.CUBE: cube.local_intersect,
    ShapeKind.CYLINDER: cylinder.intersect_cylinder,
    ShapeKind.CONE: cylinder.intersect_cone,
    ShapeKind.TRIANGLE: triangle.local_intersect,
    ShapeKind.SMOOTH_TRIANGLE: triangle.local_intersect,
}

LOCAL_NORMAL_AT: dict[ShapeKind, Callable[..., Any]] = {
    ShapeKind.SPHERE: sphere.local_normal_at,
    ShapeKind.PLANE: plane.local_normal_at,
    ShapeKind.CUBE: cube.local_normal_at,
    ShapeKind.CYLINDER: cylinder.cylinder_normal_at,
    ShapeKind.CONE: cylinder.cone_normal_at,
    ShapeKind.TRIANGLE: triangle.local_normal_at,
    ShapeKind.SMOOTH_TRIANGLE: triangle.smooth_normal_at,
}

LOCAL_BOUNDS: dict[ShapeKind, Callable[[Any], Bounds]] = {
    ShapeKind.SPHERE: sphere.bounds,
    ShapeKind.PLANE: plane.bounds,
    ShapeKind.CUBE: cube.bounds,
    ShapeKind.CYLINDER: cylinder.cylinder_bounds,
    ShapeKind.CONE: cylinder.cone_bounds,
    ShapeKind.TRIANGLE: triangle.bounds,
    ShapeKind.SMOOTH_TRIANGLE: triangle.bounds,
}


@dataclass(frozen=True, eq=False)
class Shape:
    """One node of the scene: a primitive or a group.

    Attributes:
        id: Identifier assigned by the owning scene graph.
        kind: Variant tag.
        geometry: Variant-specific parameters (e.g. ``Cylinder``).
        transform: Object space -> parent space transform.
        inverse: Cached inverse of ``transform``.
        inverse_transpose: Cached transpose of ``inverse``, for normals.
        material: Surface material; unused for groups.
        casts_shadow: Shapes with False are ignored by shadow rays.
    """

    id: int
    kind: ShapeKind
    geometry: Any
    transform: Matrix4 = field(default_factory=lambda: IDENTITY)
    material: Material = field(default_factory=Material)
    casts_shadow: bool = True
    inverse: Matrix4 = field(init=False, repr=False)
    inverse_transpose: Matrix4 = field(init=False, repr=False)

    def __post_init__(self) -> None:
        expected = GEOMETRY_TYPES[self.kind]
        if type(self.geometry) is not expected:
            raise TypeError(f"{self.kind.name} expects {expected.__name__} geometry, got {type(self.geometry).__name__}")
        inv = inverse(self.transform)
        object.__setattr__(self, "transform", freeze(self.transform))
        object.__setattr__(self, "inverse", inv)
        object.__setattr__(self, "inverse_transpose", transpose(inv))

    @property
    def is_group(self) -> bool:
        return self.kind == ShapeKind.GROUP

    def local_intersect(self, object_ray) -> list:
        return LOCAL_INTERSECT[self.kind](self.geometry, object_ray)

    def local_normal_at(self, object_point, hit=None):
        return LOCAL_NORMAL_AT[self.kind](self.geometry, object_point, hit)

    def local_bounds(self) -> Bounds:
        return LOCAL_BOUNDS[self.kind](self.geometry)
