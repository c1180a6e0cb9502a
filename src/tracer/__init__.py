"""Whitted-style ray tracer built on numpy and Taichi.

This package renders scenes of transformed primitives organized in a scene
graph, with support for:
- Phong shading with hard shadows from point lights
- Recursive mirror reflection and refraction (Schlick blending)
- Spheres, planes, cubes, cylinders, cones and triangles
- Groups with bounding boxes and automatic subdivision

Subpackages:
    core: Tuples, matrices, rays, lights, light transport, canvas, renderer
    geometry: Shape primitives, bounding boxes and the shape record
    materials: Phong materials and procedural patterns
    scene: Scene graph, intersections, hit computations and the world
    camera: Pinhole camera with batched primary ray generation
"""

__version__ = "0.1.0"
