"""Geometry module for shape primitives and bounding boxes.

This module provides geometric primitives and intersection algorithms:

Components:
    bounds: Axis-aligned bounding boxes and the slab test
    sphere: Unit sphere with robust ray-sphere intersection
    plane: Infinite xz plane
    cube: Axis-aligned unit cube
    cylinder: Truncatable, cappable cylinder and double cone
    triangle: Flat and smooth triangles (Moller-Trumbore)
    shape: The Shape record and per-kind dispatch tables

Every primitive works in its own object space and exposes the same three
functions (local intersect, local normal, bounds); the scene graph moves
rays and normals between world and object space.
"""

from .bounds import Bounds, check_axis
from .cube import Cube
from .cylinder import Cone, Cylinder
from .plane import Plane
from .sphere import Sphere
from .triangle import DegenerateTriangleError, SmoothTriangle, Triangle
from .shape import GroupGeometry, Shape, ShapeKind

__all__ = [
    "Bounds",
    "check_axis",
    "Sphere",
    "Plane",
    "Cube",
    "Cylinder",
    "Cone",
    "Triangle",
    "SmoothTriangle",
    "DegenerateTriangleError",
    "GroupGeometry",
    "Shape",
    "ShapeKind",
]
