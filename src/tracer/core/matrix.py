"""4x4 affine transforms: composition, inversion and the transform builders.

Matrices are read-only ``(4, 4)`` float64 numpy arrays. They are only ever
used as invertible affine transforms (translation, scaling, rotation,
shearing) composed by multiplication, so a singular matrix means the scene
was built wrong: ``inverse`` raises instead of returning garbage.

Transforms compose right-to-left like ordinary matrix products:
``multiply(translation(...), scaling(...))`` scales first, then translates.
``chain`` takes its arguments in application order instead, which reads
better when building long sequences.

Example:
    >>> from src.tracer.core.matrix import chain, rotation_x, scaling, translation
    >>> m = chain(rotation_x(math.pi / 2), scaling(5, 5, 5), translation(10, 5, 7))
"""

import math
from functools import reduce

import numpy as np
import numpy.typing as npt

from src.tracer.core.tuples import Tuple4, cross, freeze, normalize

Matrix4 = npt.NDArray[np.float64]

# Determinants below this are treated as singular. Kept far below EPSILON so
# small but legitimate scalings (0.01 on every axis) still invert.
SINGULAR_TOLERANCE = 1e-12


class SingularMatrixError(ValueError):
    """Raised when a transform has no inverse (determinant ~ 0)."""


def matrix(rows) -> Matrix4:
    """Build a read-only 4x4 matrix from nested rows."""
    m = freeze(rows)
    if m.shape != (4, 4):
        raise ValueError(f"Expected a 4x4 matrix, got shape {m.shape}")
    return m


IDENTITY = freeze(np.identity(4))


def identity() -> Matrix4:
    """Return the 4x4 identity matrix."""
    return IDENTITY


def multiply(a: Matrix4, b: Matrix4) -> Matrix4:
    """Compose two transforms; ``b`` is applied first."""
    return freeze(a @ b)


def transform(m: Matrix4, t: Tuple4) -> Tuple4:
    """Apply a transform to a point or vector."""
    return m @ t


def transpose(m: Matrix4) -> Matrix4:
    return freeze(m.T)


def determinant(m: Matrix4) -> float:
    return float(np.linalg.det(m))


def is_invertible(m: Matrix4) -> bool:
    return abs(determinant(m)) >= SINGULAR_TOLERANCE


def inverse(m: Matrix4) -> Matrix4:
    """Invert a transform.

    Args:
        m: An invertible affine transform.

    Returns:
        The inverse matrix.

    Raises:
        SingularMatrixError: If the determinant is within SINGULAR_TOLERANCE
            of zero.
            Every builder in this module produces invertible matrices for
            non-zero parameters, so this signals a construction bug.
    """
    det = determinant(m)
    if abs(det) < SINGULAR_TOLERANCE:
        raise SingularMatrixError(f"Matrix is not invertible (determinant={det:g})")
    return freeze(np.linalg.inv(m))


def chain(*transforms: Matrix4) -> Matrix4:
    """Compose transforms given in the order they should be applied."""
    if not transforms:
        return IDENTITY
    return freeze(reduce(lambda acc, m: m @ acc, transforms, np.identity(4)))


# =============================================================================
# Transform Builders
# =============================================================================


def translation(x: float, y: float, z: float) -> Matrix4:
    m = np.identity(4)
    m[0, 3] = x
    m[1, 3] = y
    m[2, 3] = z
    return freeze(m)


def scaling(x: float, y: float, z: float) -> Matrix4:
    return freeze(np.diag((x, y, z, 1.0)))


def rotation_x(radians: float) -> Matrix4:
    """Rotation about the x axis (left-handed, as seen looking down -x)."""
    c, s = math.cos(radians), math.sin(radians)
    return matrix(
        [
            [1.0, 0.0, 0.0, 0.0],
            [0.0, c, -s, 0.0],
            [0.0, s, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def rotation_y(radians: float) -> Matrix4:
    c, s = math.cos(radians), math.sin(radians)
    return matrix(
        [
            [c, 0.0, s, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [-s, 0.0, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def rotation_z(radians: float) -> Matrix4:
    c, s = math.cos(radians), math.sin(radians)
    return matrix(
        [
            [c, -s, 0.0, 0.0],
            [s, c, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def shearing(xy: float, xz: float, yx: float, yz: float, zx: float, zy: float) -> Matrix4:
    """Shear each component in proportion to the other two.

    ``xy`` moves x in proportion to y, ``xz`` moves x in proportion to z,
    and so on.
    """
    return matrix(
        [
            [1.0, xy, xz, 0.0],
            [yx, 1.0, yz, 0.0],
            [zx, zy, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def view_transform(from_point: Tuple4, to_point: Tuple4, up: Tuple4) -> Matrix4:
    """Build the world-to-camera transform for an eye at ``from_point``.

    Args:
        from_point: Eye position in world space.
        to_point: Point the eye looks at.
        up: Approximate up direction; only needs to be non-parallel to the
            view direction.

    Returns:
        A matrix that orients the world so the eye sits at the origin looking
        down -z with +y up.
    """
    forward = normalize(to_point - from_point)
    left = cross(forward, normalize(up))
    true_up = cross(left, forward)
    orientation = np.array(
        [
            [left[0], left[1], left[2], 0.0],
            [true_up[0], true_up[1], true_up[2], 0.0],
            [-forward[0], -forward[1], -forward[2], 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )
    return freeze(orientation @ translation(-from_point[0], -from_point[1], -from_point[2]))
