"""Unit tests for cylinders and cones.

Tests cover:
- Body intersections of infinite cylinders and cones
- Truncation and end caps
- Cones hit by rays parallel to one half
- Normals on the body and the caps
- Bounding boxes
"""

import math

import pytest


def _ray(origin, direction):
    from src.tracer.core.ray import make_ray
    from src.tracer.core.tuples import normalize, point, vector

    return make_ray(point(*origin), normalize(vector(*direction)))


class TestCylinder:
    """Tests for the cylinder primitive."""

    @pytest.mark.parametrize(
        "origin, direction",
        [((1, 0, 0), (0, 1, 0)), ((0, 0, 0), (0, 1, 0)), ((0, 0, -5), (1, 1, 1))],
    )
    def test_ray_misses(self, origin, direction):
        from src.tracer.geometry.cylinder import Cylinder, intersect_cylinder

        assert intersect_cylinder(Cylinder(), _ray(origin, direction)) == []

    @pytest.mark.parametrize(
        "origin, direction, t0, t1",
        [
            ((1, 0, -5), (0, 0, 1), 5, 5),
            ((0, 0, -5), (0, 0, 1), 4, 6),
            ((0.5, 0, -5), (0.1, 1, 1), 6.80798, 7.08872),
        ],
    )
    def test_ray_hits(self, origin, direction, t0, t1):
        from src.tracer.geometry.cylinder import Cylinder, intersect_cylinder

        xs = intersect_cylinder(Cylinder(), _ray(origin, direction))
        assert [x[0] for x in xs] == pytest.approx([t0, t1], abs=1e-4)

    @pytest.mark.parametrize(
        "p, n",
        [((1, 0, 0), (1, 0, 0)), ((0, 5, -1), (0, 0, -1)), ((0, -2, 1), (0, 0, 1)), ((-1, 1, 0), (-1, 0, 0))],
    )
    def test_body_normal(self, p, n):
        from src.tracer.core.tuples import equal, point, vector
        from src.tracer.geometry.cylinder import Cylinder, cylinder_normal_at

        assert equal(cylinder_normal_at(Cylinder(), point(*p)), vector(*n))

    def test_default_is_infinite_and_open(self):
        from src.tracer.geometry.cylinder import Cylinder

        cyl = Cylinder()
        assert cyl.minimum == -math.inf
        assert cyl.maximum == math.inf
        assert cyl.closed is False

    @pytest.mark.parametrize(
        "origin, direction, count",
        [
            ((0, 1.5, 0), (0.1, 1, 0), 0),
            ((0, 3, -5), (0, 0, 1), 0),
            ((0, 0, -5), (0, 0, 1), 0),
            ((0, 2, -5), (0, 0, 1), 0),
            ((0, 1, -5), (0, 0, 1), 0),
            ((0, 1.5, -2), (0, 0, 1), 2),
        ],
    )
    def test_truncated(self, origin, direction, count):
        """Truncation limits are exclusive."""
        from src.tracer.geometry.cylinder import Cylinder, intersect_cylinder

        cyl = Cylinder(minimum=1, maximum=2)
        assert len(intersect_cylinder(cyl, _ray(origin, direction))) == count

    @pytest.mark.parametrize(
        "origin, direction, count",
        [
            ((0, 3, 0), (0, -1, 0), 2),
            ((0, 3, -2), (0, -1, 2), 2),
            ((0, 0, -2), (0, 1, 2), 2),
        ],
    )
    def test_capped(self, origin, direction, count):
        from src.tracer.geometry.cylinder import Cylinder, intersect_cylinder

        cyl = Cylinder(minimum=1, maximum=2, closed=True)
        assert len(intersect_cylinder(cyl, _ray(origin, direction))) == count

    @pytest.mark.parametrize(
        "p, n",
        [
            ((0, 1, 0), (0, -1, 0)),
            ((0.5, 1, 0), (0, -1, 0)),
            ((0, 1, 0.5), (0, -1, 0)),
            ((0, 2, 0), (0, 1, 0)),
            ((0.5, 2, 0), (0, 1, 0)),
            ((0, 2, 0.5), (0, 1, 0)),
        ],
    )
    def test_cap_normal(self, p, n):
        from src.tracer.core.tuples import equal, point, vector
        from src.tracer.geometry.cylinder import Cylinder, cylinder_normal_at

        cyl = Cylinder(minimum=1, maximum=2, closed=True)
        assert equal(cylinder_normal_at(cyl, point(*p)), vector(*n))

    def test_bounds(self):
        from src.tracer.core.tuples import equal, point
        from src.tracer.geometry.cylinder import Cylinder, cylinder_bounds

        box = cylinder_bounds(Cylinder(minimum=-5, maximum=3))
        assert equal(box.minimum, point(-1, -5, -1))
        assert equal(box.maximum, point(1, 3, 1))

    def test_unbounded_bounds(self):
        from src.tracer.geometry.cylinder import Cylinder, cylinder_bounds

        box = cylinder_bounds(Cylinder())
        assert box.minimum[1] == -math.inf
        assert box.maximum[1] == math.inf


class TestCone:
    """Tests for the double-napped cone primitive."""

    @pytest.mark.parametrize(
        "origin, direction, t0, t1",
        [
            ((0, 0, -5), (0, 0, 1), 5, 5),
            ((1, 1, -5), (-0.5, -1, 1), 4.55006, 49.44994),
        ],
    )
    def test_ray_hits(self, origin, direction, t0, t1):
        from src.tracer.geometry.cylinder import Cone, intersect_cone

        xs = intersect_cone(Cone(), _ray(origin, direction))
        assert [x[0] for x in xs] == pytest.approx([t0, t1], abs=1e-4)

    def test_ray_parallel_to_one_half(self):
        """a ~ 0 gives a single root -c / 2b."""
        from src.tracer.geometry.cylinder import Cone, intersect_cone

        xs = intersect_cone(Cone(), _ray((0, 0, -1), (0, 1, 1)))
        assert len(xs) == 1
        assert xs[0][0] == pytest.approx(0.35355, abs=1e-4)

    @pytest.mark.parametrize(
        "origin, direction, count",
        [((0, 0, -5), (0, 1, 0), 0), ((0, 0, -0.25), (0, 1, 1), 2), ((0, 0, -0.25), (0, 1, 0), 4)],
    )
    def test_capped(self, origin, direction, count):
        from src.tracer.geometry.cylinder import Cone, intersect_cone

        cone = Cone(minimum=-0.5, maximum=0.5, closed=True)
        assert len(intersect_cone(cone, _ray(origin, direction))) == count

    @pytest.mark.parametrize(
        "p, n",
        [((0, 0, 0), (0, 0, 0)), ((1, 1, 1), (1, -math.sqrt(2), 1)), ((-1, -1, 0), (-1, 1, 0))],
    )
    def test_body_normal(self, p, n):
        from src.tracer.core.tuples import equal, point, vector
        from src.tracer.geometry.cylinder import Cone, cone_normal_at

        assert equal(cone_normal_at(Cone(), point(*p)), vector(*n))

    def test_cap_normal(self):
        from src.tracer.core.tuples import equal, point, vector
        from src.tracer.geometry.cylinder import Cone, cone_normal_at

        cone = Cone(minimum=-1, maximum=2, closed=True)
        assert equal(cone_normal_at(cone, point(0.5, 2, 0)), vector(0, 1, 0))
        assert equal(cone_normal_at(cone, point(0.5, -1, 0)), vector(0, -1, 0))

    def test_bounds(self):
        from src.tracer.core.tuples import equal, point
        from src.tracer.geometry.cylinder import Cone, cone_bounds

        box = cone_bounds(Cone(minimum=-5, maximum=3))
        assert equal(box.minimum, point(-5, -5, -5))
        assert equal(box.maximum, point(5, 3, 5))

    def test_unbounded_bounds(self):
        from src.tracer.geometry.cylinder import Cone, cone_bounds

        box = cone_bounds(Cone())
        assert box.minimum[0] == -math.inf
        assert box.maximum[1] == math.inf
