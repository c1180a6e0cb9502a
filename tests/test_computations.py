"""Unit tests for hit precomputation.

Tests cover:
- Point, eye and normal vectors
- Inside/outside detection
- Over and under points
- Reflection vector
- Refractive indices through overlapping transparent shapes
"""

import math

import pytest


class TestPrepareComputations:
    """Tests for the per-hit shading state."""

    def test_outside_hit(self, graph):
        from src.tracer.core.ray import make_ray
        from src.tracer.core.tuples import equal, point, vector
        from src.tracer.scene.computations import prepare_computations
        from src.tracer.scene.intersection import Intersection

        s = graph.add_sphere()
        ray = make_ray(point(0, 0, -5), vector(0, 0, 1))
        x = Intersection(4.0, s)
        comps = prepare_computations(x, ray, [x], graph)

        assert comps.t == 4.0
        assert comps.shape_id == s
        assert equal(comps.point, point(0, 0, -1))
        assert equal(comps.eyev, vector(0, 0, -1))
        assert equal(comps.normalv, vector(0, 0, -1))
        assert comps.inside is False

    def test_inside_hit_flips_normal(self, graph):
        from src.tracer.core.ray import make_ray
        from src.tracer.core.tuples import equal, point, vector
        from src.tracer.scene.computations import prepare_computations
        from src.tracer.scene.intersection import Intersection

        s = graph.add_sphere()
        ray = make_ray(point(0, 0, 0), vector(0, 0, 1))
        x = Intersection(1.0, s)
        comps = prepare_computations(x, ray, [x], graph)

        assert equal(comps.point, point(0, 0, 1))
        assert equal(comps.eyev, vector(0, 0, -1))
        assert comps.inside is True
        assert equal(comps.normalv, vector(0, 0, -1))

    def test_over_point(self, graph):
        from src.tracer.core.matrix import translation
        from src.tracer.core.ray import make_ray
        from src.tracer.core.tuples import EPSILON, point, vector
        from src.tracer.scene.computations import prepare_computations
        from src.tracer.scene.intersection import Intersection

        s = graph.add_sphere(transform=translation(0, 0, 1))
        ray = make_ray(point(0, 0, -5), vector(0, 0, 1))
        x = Intersection(5.0, s)
        comps = prepare_computations(x, ray, [x], graph)

        assert comps.over_point[2] < -EPSILON / 2
        assert comps.point[2] > comps.over_point[2]

    def test_under_point(self, graph):
        from src.tracer.core.matrix import translation
        from src.tracer.core.ray import make_ray
        from src.tracer.core.tuples import EPSILON, point, vector
        from src.tracer.materials.material import glass
        from src.tracer.scene.computations import prepare_computations
        from src.tracer.scene.intersection import Intersection

        s = graph.add_sphere(transform=translation(0, 0, 1), material=glass())
        ray = make_ray(point(0, 0, -5), vector(0, 0, 1))
        x = Intersection(5.0, s)
        comps = prepare_computations(x, ray, [x], graph)

        assert comps.under_point[2] > EPSILON / 2
        assert comps.point[2] < comps.under_point[2]

    def test_reflect_vector(self, graph):
        from src.tracer.core.ray import make_ray
        from src.tracer.core.tuples import equal, point, vector
        from src.tracer.scene.computations import prepare_computations
        from src.tracer.scene.intersection import Intersection

        p = graph.add_plane()
        k = math.sqrt(2) / 2
        ray = make_ray(point(0, 1, -1), vector(0, -k, k))
        x = Intersection(math.sqrt(2), p)
        comps = prepare_computations(x, ray, [x], graph)

        assert equal(comps.reflectv, vector(0, k, k))

    def test_eye_vector_is_normalized(self, graph):
        from src.tracer.core.ray import make_ray
        from src.tracer.core.tuples import equal, magnitude, point, vector
        from src.tracer.scene.computations import prepare_computations
        from src.tracer.scene.intersection import Intersection

        s = graph.add_sphere()
        ray = make_ray(point(0, 0, -5), vector(0, 0, 2))
        x = Intersection(2.0, s)
        comps = prepare_computations(x, ray, None, graph)

        assert equal(comps.point, point(0, 0, -1))
        assert magnitude(comps.eyev) == pytest.approx(1.0)


class TestRefractiveIndices:
    """Tests for n1/n2 across nested glass spheres."""

    @pytest.mark.parametrize(
        "index, n1, n2",
        [(0, 1.0, 1.5), (1, 1.5, 2.0), (2, 2.0, 2.5), (3, 2.5, 2.5), (4, 2.5, 1.5), (5, 1.5, 1.0)],
    )
    def test_n1_n2_at_each_hit(self, graph, index, n1, n2):
        from src.tracer.core.matrix import scaling, translation
        from src.tracer.core.ray import make_ray
        from src.tracer.core.tuples import point, vector
        from src.tracer.materials.material import glass
        from src.tracer.scene.computations import prepare_computations
        from src.tracer.scene.intersection import Intersection

        a = graph.add_sphere(transform=scaling(2, 2, 2), material=glass(1.5))
        b = graph.add_sphere(transform=translation(0, 0, -0.25), material=glass(2.0))
        c = graph.add_sphere(transform=translation(0, 0, 0.25), material=glass(2.5))

        ray = make_ray(point(0, 0, -4), vector(0, 0, 1))
        xs = [
            Intersection(2.0, a),
            Intersection(2.75, b),
            Intersection(3.25, c),
            Intersection(4.75, b),
            Intersection(5.25, c),
            Intersection(6.0, a),
        ]
        comps = prepare_computations(xs[index], ray, xs, graph)

        assert comps.n1 == pytest.approx(n1)
        assert comps.n2 == pytest.approx(n2)

    def test_single_surface_defaults_to_vacuum(self, graph):
        from src.tracer.core.ray import make_ray
        from src.tracer.core.tuples import point, vector
        from src.tracer.materials.material import glass
        from src.tracer.scene.computations import VACUUM_INDEX, prepare_computations
        from src.tracer.scene.intersection import Intersection

        s = graph.add_sphere(material=glass(1.5))
        ray = make_ray(point(0, 0, -5), vector(0, 0, 1))
        x = Intersection(4.0, s)
        comps = prepare_computations(x, ray, None, graph)

        assert comps.n1 == VACUUM_INDEX
        assert comps.n2 == pytest.approx(1.5)
