"""Materials module for surface appearance.

This module implements the Phong surface model and procedural patterns:

Components:
    material: Material parameters and the Phong ``lighting`` function
    patterns: Stripe, gradient, ring, checker, blend and test patterns

Materials are immutable values owned by a single shape. Reflection and
refraction weights live on the material but are applied by the
integrator, which traces the secondary rays.
"""

from .material import Material, glass, lighting
from .patterns import (
    BlendPattern,
    CheckerPattern,
    GradientPattern,
    Paint,
    Pattern,
    PatternKind,
    RingPattern,
    SolidPattern,
    StripePattern,
    TestPattern,
    pattern_at,
    pattern_at_object,
)

__all__ = [
    # Material
    "Material",
    "glass",
    "lighting",
    # Patterns
    "Pattern",
    "PatternKind",
    "Paint",
    "SolidPattern",
    "StripePattern",
    "GradientPattern",
    "RingPattern",
    "CheckerPattern",
    "BlendPattern",
    "TestPattern",
    "pattern_at",
    "pattern_at_object",
]
