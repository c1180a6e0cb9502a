"""Unit tests for points, vectors, colors and vector utilities.

Tests cover:
- Point/vector construction and the w component
- Approximate equality
- Magnitude, normalization, dot and cross products
- Reflection about a normal
"""

import math

import pytest


class TestConstruction:
    """Tests for tuple constructors."""

    def test_point_has_w_one(self):
        """A point is a tuple with w = 1."""
        from src.tracer.core.tuples import is_point, is_vector, point

        p = point(4.3, -4.2, 3.1)
        assert tuple(p) == (4.3, -4.2, 3.1, 1.0)
        assert is_point(p)
        assert not is_vector(p)

    def test_vector_has_w_zero(self):
        """A vector is a tuple with w = 0."""
        from src.tracer.core.tuples import is_point, is_vector, vector

        v = vector(4.3, -4.2, 3.1)
        assert tuple(v) == (4.3, -4.2, 3.1, 0.0)
        assert is_vector(v)
        assert not is_point(v)

    def test_tuples_are_read_only(self):
        """Constructed tuples cannot be modified in place."""
        from src.tracer.core.tuples import point

        p = point(1, 2, 3)
        with pytest.raises(ValueError):
            p[0] = 5.0

    def test_point_plus_vector_is_point(self):
        """Adding a vector to a point yields a point."""
        from src.tracer.core.tuples import equal, is_point, point, vector

        result = point(3, -2, 5) + vector(-2, 3, 1)
        assert equal(result, point(1, 1, 6))
        assert is_point(result)

    def test_point_minus_point_is_vector(self):
        """Subtracting two points yields the vector between them."""
        from src.tracer.core.tuples import equal, point, vector

        assert equal(point(3, 2, 1) - point(5, 6, 7), vector(-2, -4, -6))

    def test_colors_multiply_componentwise(self):
        """Color product (Hadamard) multiplies each channel."""
        from src.tracer.core.tuples import color, equal

        assert equal(color(1, 0.2, 0.4) * color(0.9, 1, 0.1), color(0.9, 0.2, 0.04))


class TestEquality:
    """Tests for approximate comparison."""

    def test_equal_within_epsilon(self):
        """Components closer than EPSILON compare equal."""
        from src.tracer.core.tuples import EPSILON, equal, point

        assert equal(point(1, 2, 3), point(1 + EPSILON / 2, 2, 3))
        assert not equal(point(1, 2, 3), point(1 + EPSILON * 2, 2, 3))

    def test_float_equal(self):
        from src.tracer.core.tuples import float_equal

        assert float_equal(0.1 + 0.2, 0.3)
        assert not float_equal(1.0, 1.001)


class TestVectorOps:
    """Tests for magnitude, normalize, dot, cross and reflect."""

    def test_magnitude(self):
        """Magnitude of unit and general vectors."""
        from src.tracer.core.tuples import magnitude, vector

        assert magnitude(vector(1, 0, 0)) == pytest.approx(1.0)
        assert magnitude(vector(1, 2, 3)) == pytest.approx(math.sqrt(14))
        assert magnitude(vector(-1, -2, -3)) == pytest.approx(math.sqrt(14))

    def test_normalize(self):
        """Normalizing gives a unit vector in the same direction."""
        from src.tracer.core.tuples import equal, magnitude, normalize, vector

        v = normalize(vector(1, 2, 3))
        s = math.sqrt(14)
        assert equal(v, vector(1 / s, 2 / s, 3 / s))
        assert magnitude(v) == pytest.approx(1.0)

    def test_normalize_zero_vector_unchanged(self):
        """A zero vector cannot be normalized and is returned as is."""
        from src.tracer.core.tuples import equal, normalize, vector

        assert equal(normalize(vector(0, 0, 0)), vector(0, 0, 0))

    def test_dot(self):
        from src.tracer.core.tuples import dot, vector

        assert dot(vector(1, 2, 3), vector(2, 3, 4)) == pytest.approx(20.0)

    def test_cross(self):
        """Cross product is anti-commutative and yields a vector."""
        from src.tracer.core.tuples import cross, equal, is_vector, vector

        a = vector(1, 2, 3)
        b = vector(2, 3, 4)
        assert equal(cross(a, b), vector(-1, 2, -1))
        assert equal(cross(b, a), vector(1, -2, 1))
        assert is_vector(cross(a, b))

    def test_reflect_at_45_degrees(self):
        """A vector approaching at 45 degrees bounces straight back up."""
        from src.tracer.core.tuples import equal, reflect, vector

        assert equal(reflect(vector(1, -1, 0), vector(0, 1, 0)), vector(1, 1, 0))

    def test_reflect_off_slanted_surface(self):
        from src.tracer.core.tuples import equal, reflect, vector

        s = math.sqrt(2) / 2
        assert equal(reflect(vector(0, -1, 0), vector(s, s, 0)), vector(1, 0, 0))
