"""Scene module for the scene graph, intersections and the world.

This module handles scene representation and ray-scene queries:

Components:
    intersection: Intersection records and the hit rule
    graph: Arena scene graph with groups, transforms and bounding boxes
    computations: Per-hit shading state (normals, offsets, n1/n2)
    world: Scene graph plus lights, the entry point for tracing

The scene graph owns all shapes in a flat table keyed by integer id; the
parent/child hierarchy is kept in side tables so shapes never point back
at their parents.
"""

from .intersection import Intersection, hit, sort_intersections
from .graph import SceneGraph, SceneGraphError
from .computations import HitRecord, prepare_computations, refractive_indices

# Note: world is NOT imported here to avoid a circular import with
# core.integrator. Import it directly:
#   from src.tracer.scene.world import World, default_world

__all__ = [
    "Intersection",
    "hit",
    "sort_intersections",
    "SceneGraph",
    "SceneGraphError",
    "HitRecord",
    "prepare_computations",
    "refractive_indices",
]
