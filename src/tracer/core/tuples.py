"""Points, vectors, colors and the vector utilities used across the tracer.

Tuples are 4-component numpy arrays where ``w == 1`` marks a point and
``w == 0`` marks a vector. Colors are 3-component arrays kept in linear
space; they are never clamped inside the core.

All constructors return read-only arrays so a tuple can be shared freely
between shapes, hit records and rays. Arithmetic on them produces fresh
(writable) arrays, which is how new tuples are derived.

Example:
    >>> from src.tracer.core.tuples import point, vector
    >>> p = point(1.0, 2.0, 3.0)
    >>> v = vector(0.0, 0.0, 1.0)
    >>> p + v * 2.0  # still a point, w stays 1
    array([1., 2., 5., 1.])
"""

import math

import numpy as np
import numpy.typing as npt

# Tolerance shared by equality checks, root validity and surface offsets
EPSILON = 1e-5

Tuple4 = npt.NDArray[np.float64]
Color = npt.NDArray[np.float64]


def _frozen(values) -> npt.NDArray[np.float64]:
    """Build a read-only float64 array from the given values."""
    arr = np.array(values, dtype=np.float64)
    arr.flags.writeable = False
    return arr


def tuple4(x: float, y: float, z: float, w: float) -> Tuple4:
    """Create a raw 4-component tuple."""
    return _frozen((x, y, z, w))


def point(x: float, y: float, z: float) -> Tuple4:
    """Create a point (w = 1)."""
    return _frozen((x, y, z, 1.0))


def vector(x: float, y: float, z: float) -> Tuple4:
    """Create a vector (w = 0)."""
    return _frozen((x, y, z, 0.0))


def color(r: float, g: float, b: float) -> Color:
    """Create a linear RGB color."""
    return _frozen((r, g, b))


BLACK = color(0.0, 0.0, 0.0)
WHITE = color(1.0, 1.0, 1.0)


def freeze(arr) -> npt.NDArray[np.float64]:
    """Return a read-only float64 copy of an array computed elsewhere."""
    return _frozen(arr)


def is_point(t: Tuple4) -> bool:
    return abs(t[3] - 1.0) < EPSILON


def is_vector(t: Tuple4) -> bool:
    return abs(t[3]) < EPSILON


def equal(a, b, eps: float = EPSILON) -> bool:
    """Componentwise approximate equality within ``eps``."""
    return bool(np.all(np.abs(np.asarray(a) - np.asarray(b)) < eps))


def float_equal(a: float, b: float, eps: float = EPSILON) -> bool:
    return abs(a - b) < eps


# =============================================================================
# Vector Utility Functions
# =============================================================================


def magnitude(v: Tuple4) -> float:
    """Euclidean length of a vector (the w component takes part, as it is 0)."""
    return math.sqrt(float(np.dot(v, v)))


def normalize(v: Tuple4) -> Tuple4:
    """Scale a vector to unit length.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v. A zero-length input is
        returned unchanged so callers can detect the degenerate case.
    """
    m = magnitude(v)
    if m == 0.0:
        return v
    return v / m


def dot(a: Tuple4, b: Tuple4) -> float:
    """Dot product of two tuples."""
    return float(np.dot(a, b))


def cross(a: Tuple4, b: Tuple4) -> Tuple4:
    """Cross product of two vectors; the result is always a vector."""
    c = np.cross(a[:3], b[:3])
    return np.array((c[0], c[1], c[2], 0.0))


def reflect(incident: Tuple4, normal: Tuple4) -> Tuple4:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - normal * 2.0 * dot(incident, normal)
