"""Axis-aligned bounding boxes used to prune intersection tests.

Every primitive reports a fixed object-space box; a group's box is the
union of its children's boxes after each child's transform is applied.
Boxes are only ever a fast-reject filter: a ray that hits a box still has
to be tested against the exact geometry inside.

Infinite extents are allowed (a plane is unbounded in x and z). The corner
transform treats ``0 * inf`` as 0 and widens any axis that a rotation mixes
``+inf`` and ``-inf`` into, so unbounded boxes stay unbounded instead of
turning into NaN.

Example:
    >>> from src.tracer.core.matrix import translation
    >>> from src.tracer.core.tuples import point
    >>> box = Bounds(point(-1, -1, -1), point(1, 1, 1))
    >>> box.transform(translation(5, 0, 0)).minimum
    array([ 4., -1., -1.,  1.])
"""

import itertools
import math
from dataclasses import dataclass

import numpy as np

from src.tracer.core.matrix import Matrix4
from src.tracer.core.ray import Ray
from src.tracer.core.tuples import EPSILON, Tuple4, freeze, point

INFINITY = math.inf


def check_axis(origin: float, direction: float, minimum: float, maximum: float) -> tuple[float, float]:
    """Slab test along one axis.

    Computes the ray parameters where the ray enters and leaves the slab
    ``minimum <= x <= maximum``. A direction component within EPSILON of
    zero means the ray runs parallel to the slab: it is either inside for
    every t (``(-inf, inf)``) or never inside.

    Args:
        origin: Ray origin component along this axis.
        direction: Ray direction component along this axis.
        minimum: Lower slab bound (may be -inf).
        maximum: Upper slab bound (may be +inf).

    Returns:
        Tuple of (tmin, tmax) with tmin <= tmax.
    """
    tmin_numerator = minimum - origin
    tmax_numerator = maximum - origin

    if abs(direction) >= EPSILON:
        tmin = tmin_numerator / direction
        tmax = tmax_numerator / direction
    else:
        tmin = -INFINITY if tmin_numerator <= 0.0 else INFINITY
        tmax = INFINITY if tmax_numerator >= 0.0 else -INFINITY

    if tmin > tmax:
        tmin, tmax = tmax, tmin
    return tmin, tmax


def _transform_corner(m: Matrix4, corner: Tuple4) -> np.ndarray:
    """Multiply a corner by ``m``, treating 0 * inf as 0."""
    with np.errstate(invalid="ignore"):
        terms = np.where(m[:3, :3] == 0.0, 0.0, m[:3, :3] * corner[:3])
        return terms.sum(axis=1) + m[:3, 3]


@dataclass(frozen=True, eq=False)
class Bounds:
    """An axis-aligned box between two corner points.

    Attributes:
        minimum: Corner with the smallest coordinates.
        maximum: Corner with the largest coordinates.
    """

    minimum: Tuple4
    maximum: Tuple4

    def __post_init__(self) -> None:
        object.__setattr__(self, "minimum", freeze(self.minimum))
        object.__setattr__(self, "maximum", freeze(self.maximum))

    @classmethod
    def empty(cls) -> "Bounds":
        """A box containing nothing; merging anything into it yields that thing."""
        return cls(point(INFINITY, INFINITY, INFINITY), point(-INFINITY, -INFINITY, -INFINITY))

    @property
    def is_empty(self) -> bool:
        return bool(np.any(self.minimum[:3] > self.maximum[:3]))

    def add_point(self, p: Tuple4) -> "Bounds":
        """Return the smallest box containing this box and ``p``."""
        lo = np.minimum(self.minimum[:3], p[:3])
        hi = np.maximum(self.maximum[:3], p[:3])
        return Bounds(point(*lo), point(*hi))

    def merge(self, other: "Bounds") -> "Bounds":
        """Return the union of two boxes."""
        if other.is_empty:
            return self
        if self.is_empty:
            return other
        lo = np.minimum(self.minimum[:3], other.minimum[:3])
        hi = np.maximum(self.maximum[:3], other.maximum[:3])
        return Bounds(point(*lo), point(*hi))

    def contains_point(self, p: Tuple4) -> bool:
        return bool(np.all(self.minimum[:3] <= p[:3]) and np.all(p[:3] <= self.maximum[:3]))

    def contains_bounds(self, other: "Bounds") -> bool:
        return self.contains_point(other.minimum) and self.contains_point(other.maximum)

    def transform(self, m: Matrix4) -> "Bounds":
        """Transform the box and re-fit an axis-aligned box around it.

        All eight corners are transformed and the componentwise min/max taken.

        Args:
            m: The transform to apply (typically a child's transform, taking
                its box into the parent's space).

        Returns:
            The axis-aligned box enclosing the transformed corners.
        """
        if self.is_empty:
            return self
        lo, hi = self.minimum, self.maximum
        corners = np.array(
            [
                _transform_corner(m, point(x, y, z))
                for x, y, z in itertools.product((lo[0], hi[0]), (lo[1], hi[1]), (lo[2], hi[2]))
            ]
        )
        # NaN only appears where +inf and -inf were mixed: that axis is unbounded
        mins = np.where(np.isnan(corners), -INFINITY, corners).min(axis=0)
        maxs = np.where(np.isnan(corners), INFINITY, corners).max(axis=0)
        return Bounds(point(*mins), point(*maxs))

    def intersects(self, ray: Ray) -> bool:
        """Slab test: does the ray pass through the box at any t >= 0?"""
        if self.is_empty:
            return False
        xtmin, xtmax = check_axis(ray.origin[0], ray.direction[0], self.minimum[0], self.maximum[0])
        ytmin, ytmax = check_axis(ray.origin[1], ray.direction[1], self.minimum[1], self.maximum[1])
        ztmin, ztmax = check_axis(ray.origin[2], ray.direction[2], self.minimum[2], self.maximum[2])

        tmax = min(xtmax, ytmax, ztmax)
        if tmax < 0.0:
            return False
        tmin = max(xtmin, ytmin, ztmin)
        return bool(tmin <= tmax)

    def split(self) -> tuple["Bounds", "Bounds"]:
        """Halve the box along its longest axis.

        Returns:
            Tuple of (left, right) boxes sharing the split plane. An
            unbounded box cannot be halved and is returned as both halves.
        """
        extent = self.maximum[:3] - self.minimum[:3]
        if not np.all(np.isfinite(extent)):
            return self, self

        axis = int(np.argmax(extent))
        middle = self.minimum[axis] + extent[axis] / 2.0

        left_max = np.array(self.maximum, dtype=np.float64)
        left_max[axis] = middle
        right_min = np.array(self.minimum, dtype=np.float64)
        right_min[axis] = middle
        return Bounds(self.minimum, left_max), Bounds(right_min, self.maximum)
