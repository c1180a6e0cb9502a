"""Intersection records and the hit rule.

An intersection is a ray parameter ``t`` tagged with the identifier of the
shape that produced it. Triangles also report the barycentric (u, v) of the
hit, which smooth triangles use to interpolate their normal.

Lists of intersections are not kept sorted while they are built (a group
merges its children's lists as they come); ``hit`` scans for the visible one.

Example:
    >>> xs = [Intersection(5.0, 1), Intersection(-3.0, 1), Intersection(2.0, 2)]
    >>> hit(xs).t
    2.0
"""

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class Intersection:
    """A ray-shape intersection.

    Attributes:
        t: Ray parameter of the hit. May be negative (behind the origin).
        shape_id: Identifier of the primitive that was hit.
        u: Barycentric u for triangle hits, otherwise None.
        v: Barycentric v for triangle hits, otherwise None.
    """

    t: float
    shape_id: int
    u: float | None = None
    v: float | None = None


def hit(xs: Iterable[Intersection]) -> Intersection | None:
    """Return the visible intersection: the smallest strictly positive t.

    Ties keep the earliest entry in ``xs``.

    Returns:
        The hit, or None when every t is <= 0 (or ``xs`` is empty).
    """
    best = None
    for x in xs:
        if x.t > 0.0 and (best is None or x.t < best.t):
            best = x
    return best


def sort_intersections(xs: Iterable[Intersection]) -> list[Intersection]:
    """Sort by t ascending; equal t values keep their original order."""
    return sorted(xs, key=lambda x: x.t)
