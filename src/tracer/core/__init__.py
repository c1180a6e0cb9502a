"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    tuples: Points, vectors, colors and vector utilities
    matrix: 4x4 affine transforms and their builders
    ray: Ray data structure
    integrator: Whitted-style light transport (Phong, shadows, reflection,
        refraction) with a bounded recursion depth
    canvas: Taichi-backed render target holding linear colors
    renderer: Drives camera rays through a world into a canvas

Geometry and shading run in Python scope on numpy arrays, because the scene
graph is a tree of heterogeneous shapes and the light transport recurses.
The per-pixel, data-parallel pieces (primary ray generation and the color
buffer) use Taichi kernels.
"""

from .matrix import (
    IDENTITY,
    Matrix4,
    SingularMatrixError,
    chain,
    determinant,
    identity,
    inverse,
    is_invertible,
    matrix,
    multiply,
    rotation_x,
    rotation_y,
    rotation_z,
    scaling,
    shearing,
    transform,
    translation,
    transpose,
    view_transform,
)
from .ray import Ray, make_ray
from .tuples import (
    BLACK,
    EPSILON,
    WHITE,
    color,
    cross,
    dot,
    equal,
    float_equal,
    is_point,
    is_vector,
    magnitude,
    normalize,
    point,
    reflect,
    tuple4,
    vector,
)

# Note: integrator, canvas and renderer are NOT imported here to avoid circular
# imports (they depend on the scene package). Import them directly, e.g.
#   from src.tracer.core.integrator import color_at

__all__ = [
    "EPSILON",
    "BLACK",
    "WHITE",
    "tuple4",
    "point",
    "vector",
    "color",
    "is_point",
    "is_vector",
    "equal",
    "float_equal",
    "magnitude",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "Matrix4",
    "IDENTITY",
    "SingularMatrixError",
    "matrix",
    "identity",
    "multiply",
    "transform",
    "transpose",
    "determinant",
    "is_invertible",
    "inverse",
    "chain",
    "translation",
    "scaling",
    "rotation_x",
    "rotation_y",
    "rotation_z",
    "shearing",
    "view_transform",
    "Ray",
    "make_ray",
]
