"""Color patterns evaluated over object-local coordinates.

A pattern maps a point to a color. Every pattern carries its own transform
(pattern space -> object space), so one material can be stretched, rotated
or offset independently of the shape it is attached to.

Patterns form a closed set of variants, tagged by ``PatternKind``:

    solid:    a single color
    stripe:   alternates on floor(x)
    gradient: linear blend across each unit of x
    ring:     alternates on floor(sqrt(x^2 + z^2))
    checker:  alternates on floor(x) + floor(y) + floor(z)
    blend:    average of two patterns
    test:     returns the pattern-space point itself as a color

The two-color variants accept either plain colors or nested patterns for
``a`` and ``b``. A nested pattern is evaluated through its own transform,
starting from the parent's pattern-space point.

Example:
    >>> from src.tracer.core.matrix import scaling
    >>> from src.tracer.core.tuples import BLACK, WHITE, point
    >>> stripes = StripePattern(WHITE, BLACK, transform=scaling(0.5, 1, 1))
    >>> pattern_at_object(stripes, point(0.75, 0, 0))  # second stripe
    array([0., 0., 0.])
"""

import math
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import ClassVar, Union

import numpy as np

from src.tracer.core.matrix import IDENTITY, Matrix4, inverse
from src.tracer.core.tuples import Color, Tuple4, color, freeze


class PatternKind(IntEnum):
    """Tag identifying a pattern variant."""

    SOLID = 0
    STRIPE = 1
    GRADIENT = 2
    RING = 3
    CHECKER = 4
    BLEND = 5
    TEST = 6


@dataclass(frozen=True, eq=False)
class Pattern:
    """Fields shared by every pattern variant.

    Attributes:
        transform: Pattern space -> object space transform.
        inverse: Cached inverse of ``transform`` (object -> pattern space).
    """

    kind: ClassVar[PatternKind]

    transform: Matrix4 = field(default_factory=lambda: IDENTITY, kw_only=True)
    inverse: Matrix4 = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "transform", freeze(self.transform))
        object.__setattr__(self, "inverse", inverse(self.transform))


# A pattern slot holds either a flat color or another pattern
Paint = Union[Color, Pattern]


@dataclass(frozen=True, eq=False)
class SolidPattern(Pattern):
    kind: ClassVar[PatternKind] = PatternKind.SOLID

    color: Color


@dataclass(frozen=True, eq=False)
class StripePattern(Pattern):
    kind: ClassVar[PatternKind] = PatternKind.STRIPE

    a: Paint
    b: Paint


@dataclass(frozen=True, eq=False)
class GradientPattern(Pattern):
    kind: ClassVar[PatternKind] = PatternKind.GRADIENT

    a: Paint
    b: Paint


@dataclass(frozen=True, eq=False)
class RingPattern(Pattern):
    kind: ClassVar[PatternKind] = PatternKind.RING

    a: Paint
    b: Paint


@dataclass(frozen=True, eq=False)
class CheckerPattern(Pattern):
    kind: ClassVar[PatternKind] = PatternKind.CHECKER

    a: Paint
    b: Paint


@dataclass(frozen=True, eq=False)
class BlendPattern(Pattern):
    """Average of two patterns, each evaluated through its own transform."""

    kind: ClassVar[PatternKind] = PatternKind.BLEND

    a: Paint
    b: Paint


@dataclass(frozen=True, eq=False)
class TestPattern(Pattern):
    """Returns the pattern-space point as a color; used to check transforms."""

    __test__ = False  # not a pytest test class

    kind: ClassVar[PatternKind] = PatternKind.TEST


# =============================================================================
# Evaluation
# =============================================================================


def _paint_at(paint: Paint, pattern_point: Tuple4) -> Color:
    """Resolve a pattern slot at a point in the enclosing pattern's space."""
    if isinstance(paint, Pattern):
        return pattern_at_object(paint, pattern_point)
    return paint


def _solid_at(p: SolidPattern, pt: Tuple4) -> Color:
    return p.color


def _stripe_at(p: StripePattern, pt: Tuple4) -> Color:
    if math.floor(pt[0]) % 2 == 0:
        return _paint_at(p.a, pt)
    return _paint_at(p.b, pt)


def _gradient_at(p: GradientPattern, pt: Tuple4) -> Color:
    a = _paint_at(p.a, pt)
    b = _paint_at(p.b, pt)
    fraction = pt[0] - math.floor(pt[0])
    return a + (b - a) * fraction


def _ring_at(p: RingPattern, pt: Tuple4) -> Color:
    if math.floor(math.hypot(pt[0], pt[2])) % 2 == 0:
        return _paint_at(p.a, pt)
    return _paint_at(p.b, pt)


def _checker_at(p: CheckerPattern, pt: Tuple4) -> Color:
    if (math.floor(pt[0]) + math.floor(pt[1]) + math.floor(pt[2])) % 2 == 0:
        return _paint_at(p.a, pt)
    return _paint_at(p.b, pt)


def _blend_at(p: BlendPattern, pt: Tuple4) -> Color:
    return (_paint_at(p.a, pt) + _paint_at(p.b, pt)) * 0.5


def _test_at(p: TestPattern, pt: Tuple4) -> Color:
    return color(pt[0], pt[1], pt[2])


_PATTERN_FUNCS: dict[PatternKind, Callable[[Pattern, Tuple4], Color]] = {
    PatternKind.SOLID: _solid_at,
    PatternKind.STRIPE: _stripe_at,
    PatternKind.GRADIENT: _gradient_at,
    PatternKind.RING: _ring_at,
    PatternKind.CHECKER: _checker_at,
    PatternKind.BLEND: _blend_at,
    PatternKind.TEST: _test_at,
}


def pattern_at(pattern: Pattern, pattern_point: Tuple4) -> Color:
    """Evaluate a pattern at a point already expressed in pattern space.

    Args:
        pattern: Any pattern variant.
        pattern_point: The point in the pattern's own coordinate frame.

    Returns:
        The linear RGB color at that point.
    """
    return np.asarray(_PATTERN_FUNCS[pattern.kind](pattern, pattern_point), dtype=np.float64)


def pattern_at_object(pattern: Pattern, object_point: Tuple4) -> Color:
    """Evaluate a pattern at an object-space point.

    The point is first mapped through the pattern's inverse transform.
    Converting a world point to object space is the scene graph's job, see
    ``SceneGraph.world_to_object``.
    """
    return pattern_at(pattern, pattern.inverse @ object_point)
