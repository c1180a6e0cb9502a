"""Whitted-style light transport.

This module turns a ray into a color: find the nearest hit, shade it with
the Phong model for every light (taking shadows into account), then recurse
for mirror reflection and refraction.

Recursion is bounded by ``remaining``, decremented on every secondary ray.
At zero, reflection and refraction contribute black, so a pair of facing
mirrors terminates. Surface shading itself is never cut off.

Key features:
    - Hard shadows from point lights (shapes can opt out of casting them)
    - Mirror reflection weighted by material reflectivity
    - Snell refraction with total internal reflection
    - Schlick's approximation to blend reflection and refraction on
      surfaces that are both reflective and transparent

Example:
    >>> from src.tracer.core.integrator import color_at
    >>> from src.tracer.core.ray import Ray
    >>> from src.tracer.core.tuples import point, vector
    >>> from src.tracer.scene.world import default_world
    >>> color_at(default_world(), Ray(point(0, 0, -5), vector(0, 0, 1)))
    array([0.38066119, 0.47582649, 0.28549589])
"""

import math
from typing import TYPE_CHECKING

from src.tracer.core.ray import make_ray
from src.tracer.core.tuples import BLACK, Color, Tuple4, dot, magnitude, normalize
from src.tracer.materials.material import lighting
from src.tracer.scene.computations import HitRecord, prepare_computations
from src.tracer.scene.intersection import hit

if TYPE_CHECKING:
    from src.tracer.core.ray import Ray
    from src.tracer.scene.world import World

# =============================================================================
# Rendering Constants
# =============================================================================

# Maximum number of secondary rays (reflection + refraction) per camera ray
MAX_DEPTH = 5

# Color returned for rays that hit nothing
BACKGROUND_COLOR = BLACK


def is_shadowed(world: "World", light_position: Tuple4, point: Tuple4) -> bool:
    """Is anything that casts shadows between ``point`` and the light?

    Args:
        world: The scene.
        light_position: World-space position of the light.
        point: The point being shaded (normally the over point).

    Returns:
        True if a shadow-casting shape is hit at 0 < t < distance to light.
    """
    to_light = light_position - point
    distance = magnitude(to_light)
    shadow_ray = make_ray(point, normalize(to_light))

    graph = world.graph
    for x in world.intersect_world(shadow_ray):
        if 0.0 < x.t < distance and graph.casts_shadow(x.shape_id):
            return True
    return False


def shade_hit(world: "World", comps: HitRecord, remaining: int = MAX_DEPTH) -> Color:
    """Color at a prepared hit: direct lighting plus secondary rays."""
    material = comps.shape.material
    object_point = world.graph.world_to_object(comps.shape_id, comps.over_point)

    surface = BLACK
    for light in world.lights:
        shadowed = is_shadowed(world, light.position, comps.over_point)
        surface = surface + lighting(
            material,
            light,
            comps.over_point,
            comps.eyev,
            comps.normalv,
            in_shadow=shadowed,
            object_point=object_point,
        )

    reflected = reflected_color(world, comps, remaining)
    refracted = refracted_color(world, comps, remaining)

    if material.reflectivity > 0.0 and material.transparency > 0.0:
        reflectance = schlick(comps)
        return surface + reflected * reflectance + refracted * (1.0 - reflectance)
    return surface + reflected + refracted


def reflected_color(world: "World", comps: HitRecord, remaining: int = MAX_DEPTH) -> Color:
    """Mirror contribution, black for non-reflective surfaces or at depth 0."""
    reflectivity = comps.shape.material.reflectivity
    if remaining <= 0 or reflectivity == 0.0:
        return BLACK

    reflect_ray = make_ray(comps.over_point, comps.reflectv)
    return color_at(world, reflect_ray, remaining - 1) * reflectivity


def refracted_color(world: "World", comps: HitRecord, remaining: int = MAX_DEPTH) -> Color:
    """Refracted contribution via Snell's law.

    Returns:
        Black for opaque surfaces, at depth 0, or under total internal
        reflection; otherwise the color seen along the refracted ray scaled
        by the material's transparency.
    """
    transparency = comps.shape.material.transparency
    if remaining <= 0 or transparency == 0.0:
        return BLACK

    # Snell's law: n1 * sin(theta_i) = n2 * sin(theta_t)
    n_ratio = comps.n1 / comps.n2
    cos_i = dot(comps.eyev, comps.normalv)
    sin2_t = n_ratio * n_ratio * (1.0 - cos_i * cos_i)
    if sin2_t > 1.0:
        return BLACK

    cos_t = math.sqrt(1.0 - sin2_t)
    direction = comps.normalv * (n_ratio * cos_i - cos_t) - comps.eyev * n_ratio
    refract_ray = make_ray(comps.under_point, direction)
    return color_at(world, refract_ray, remaining - 1) * transparency


def schlick(comps: HitRecord) -> float:
    """Schlick's approximation of the Fresnel reflectance.

    Returns:
        The fraction of light reflected, in [0, 1]. Exactly 1.0 under total
        internal reflection.
    """
    cos = dot(comps.eyev, comps.normalv)

    if comps.n1 > comps.n2:
        n = comps.n1 / comps.n2
        sin2_t = n * n * (1.0 - cos * cos)
        if sin2_t > 1.0:
            return 1.0
        # when n1 > n2 use cos(theta_t) instead
        cos = math.sqrt(1.0 - sin2_t)

    r0 = ((comps.n1 - comps.n2) / (comps.n1 + comps.n2)) ** 2
    return r0 + (1.0 - r0) * (1.0 - cos) ** 5


def color_at(world: "World", ray: "Ray", remaining: int = MAX_DEPTH) -> Color:
    """Trace a world-space ray and return its linear color.

    Args:
        world: The scene.
        ray: The ray to trace.
        remaining: Secondary rays still allowed below this one.

    Returns:
        BACKGROUND_COLOR on a miss, otherwise the shaded hit.
    """
    xs = world.intersect_world(ray)
    visible = hit(xs)
    if visible is None:
        return BACKGROUND_COLOR
    comps = prepare_computations(visible, ray, xs, world.graph)
    return shade_hit(world, comps, remaining)
