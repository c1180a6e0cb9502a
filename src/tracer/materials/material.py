"""Surface material and the Phong reflection model.

A Material describes how a surface responds to light: its base color (or a
pattern that replaces it), the ambient/diffuse/specular weights and
shininess of the Phong model, and the reflectivity, transparency and
refractive index used for recursive reflection and refraction.

Each shape owns its own Material value. Materials are immutable; use
``dataclasses.replace`` (or ``Material.with_``) to derive a variant.

Key physics:
    - Ambient term: constant, independent of lights and shadows
    - Diffuse term: Lambertian, proportional to cos(light, normal)
    - Specular term: Phong, proportional to cos(reflection, eye)^shininess
"""

import math
from dataclasses import dataclass, field, replace
from typing import Any

import numpy as np

from src.tracer.core.lights import PointLight
from src.tracer.core.tuples import BLACK, WHITE, Color, Tuple4, dot, freeze, normalize, reflect
from src.tracer.materials.patterns import Pattern, pattern_at_object


@dataclass(frozen=True, eq=False)
class Material:
    """Phong material with reflection and refraction parameters.

    Attributes:
        color: Flat surface color, used when no pattern is set.
        pattern: Optional pattern replacing ``color``.
        ambient: Ambient weight, >= 0.
        diffuse: Diffuse weight, >= 0.
        specular: Specular weight, >= 0.
        shininess: Phong exponent, > 0.
        reflectivity: Mirror contribution in [0, 1].
        transparency: Refracted contribution in [0, 1].
        refractive_index: Index of refraction, > 0. Common values:
            - Vacuum/Air: 1.0
            - Water: 1.333
            - Glass: 1.5
            - Diamond: 2.417
    """

    color: Color = field(default_factory=lambda: WHITE)
    pattern: Pattern | None = None
    ambient: float = 0.1
    diffuse: float = 0.9
    specular: float = 0.9
    shininess: float = 200.0
    reflectivity: float = 0.0
    transparency: float = 0.0
    refractive_index: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "color", freeze(self.color))
        if len(self.color) != 3:
            raise ValueError(f"Material color must have 3 components, got {len(self.color)}")
        for name in ("ambient", "diffuse", "specular"):
            if getattr(self, name) < 0.0:
                raise ValueError(f"Material {name} must be non-negative, got {getattr(self, name)}")
        if self.shininess <= 0.0:
            raise ValueError(f"Material shininess must be positive, got {self.shininess}")
        if not 0.0 <= self.reflectivity <= 1.0:
            raise ValueError(f"Reflectivity must be in [0, 1], got {self.reflectivity}")
        if not 0.0 <= self.transparency <= 1.0:
            raise ValueError(f"Transparency must be in [0, 1], got {self.transparency}")
        if self.refractive_index <= 0.0:
            raise ValueError(f"Refractive index must be positive, got {self.refractive_index}")

    def with_(self, **changes: Any) -> "Material":
        """Return a copy with the given fields replaced (validated again)."""
        return replace(self, **changes)

    def surface_color(self, object_point: Tuple4) -> Color:
        """Base color at an object-space point: the pattern if set, else ``color``."""
        if self.pattern is not None:
            return pattern_at_object(self.pattern, object_point)
        return self.color


def glass(refractive_index: float = 1.5, **kwargs: Any) -> Material:
    """Fully transparent material, the usual starting point for glass objects."""
    return Material(transparency=1.0, refractive_index=refractive_index, **kwargs)


def lighting(
    material: Material,
    light: PointLight,
    point: Tuple4,
    eyev: Tuple4,
    normalv: Tuple4,
    in_shadow: bool = False,
    object_point: Tuple4 | None = None,
) -> Color:
    """Shade a point with the Phong model for a single light.

    Args:
        material: The surface material.
        light: The point light illuminating the surface.
        point: World-space point being shaded (normally the over point).
        eyev: Unit vector from the point toward the eye.
        normalv: Unit surface normal, already flipped to face the eye.
        in_shadow: If True only the ambient term is returned.
        object_point: The same point in the shape's object space, used to
            evaluate the material pattern. Defaults to ``point`` (a shape
            with an identity transform chain).

    Returns:
        The ambient + diffuse + specular color contributed by this light.
    """
    base = material.surface_color(point if object_point is None else object_point)

    # combine surface color with the light's color/intensity
    effective_color = base * light.intensity
    ambient = effective_color * material.ambient

    if in_shadow:
        return ambient

    lightv = normalize(light.position - point)

    # cosine between light and normal; negative means the light is behind
    light_dot_normal = dot(lightv, normalv)
    if light_dot_normal < 0.0:
        return ambient

    diffuse = effective_color * material.diffuse * light_dot_normal

    # cosine between reflection and eye; negative reflects away from the eye
    reflect_dot_eye = dot(reflect(-lightv, normalv), eyev)
    if reflect_dot_eye <= 0.0:
        specular = BLACK
    else:
        factor = math.pow(reflect_dot_eye, material.shininess)
        specular = light.intensity * material.specular * factor

    return np.asarray(ambient + diffuse + specular, dtype=np.float64)
