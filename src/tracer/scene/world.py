"""The world: a scene graph plus the lights that illuminate it.

Example:
    >>> world = default_world()
    >>> len(world.graph.roots()), len(world.lights)
    (2, 1)
"""

from collections.abc import Iterable

from src.tracer.core import integrator
from src.tracer.core.lights import PointLight, point_light
from src.tracer.core.matrix import scaling
from src.tracer.core.ray import Ray
from src.tracer.core.tuples import Color, Tuple4, color, point
from src.tracer.materials.material import Material
from src.tracer.scene.computations import HitRecord
from src.tracer.scene.graph import SceneGraph
from src.tracer.scene.intersection import Intersection, sort_intersections


class World:
    """Everything a ray can see.

    Attributes:
        graph: The scene graph holding every shape.
        lights: Point lights, summed during shading.
    """

    def __init__(self, graph: SceneGraph | None = None, lights: Iterable[PointLight] = ()) -> None:
        self.graph = SceneGraph() if graph is None else graph
        self.lights: list[PointLight] = list(lights)

    def add_light(self, light: PointLight) -> None:
        self.lights.append(light)

    def intersect_world(self, ray: Ray) -> list[Intersection]:
        """Intersect every root shape; results sorted by t (stable)."""
        xs: list[Intersection] = []
        for root in self.graph.roots():
            xs.extend(self.graph.intersect(root, ray))
        return sort_intersections(xs)

    def is_shadowed(self, light_position: Tuple4, point: Tuple4) -> bool:
        return integrator.is_shadowed(self, light_position, point)

    def shade_hit(self, comps: HitRecord, remaining: int = integrator.MAX_DEPTH) -> Color:
        return integrator.shade_hit(self, comps, remaining)

    def color_at(self, ray: Ray, remaining: int = integrator.MAX_DEPTH) -> Color:
        return integrator.color_at(self, ray, remaining)


def default_world() -> World:
    """Two concentric spheres lit from the upper left.

    The outer unit sphere is green-tinted with diffuse 0.7 and specular 0.2;
    the inner one is scaled by 0.5 and uses the default material.
    """
    graph = SceneGraph()
    graph.add_sphere(material=Material(color=color(0.8, 1.0, 0.6), diffuse=0.7, specular=0.2))
    graph.add_sphere(transform=scaling(0.5, 0.5, 0.5))
    light = point_light(point(-10, 10, -10), color(1, 1, 1))
    return World(graph=graph, lights=[light])
