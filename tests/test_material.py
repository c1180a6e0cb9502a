"""Unit tests for materials, point lights and the Phong model.

Tests cover:
- Material defaults and validation
- Point light validation
- Lighting with the eye and light in various positions
- Shadowed points and patterned materials
"""

import math

import pytest


class TestMaterial:
    """Tests for Material construction."""

    def test_defaults(self):
        from src.tracer.core.tuples import WHITE, equal
        from src.tracer.materials.material import Material

        m = Material()
        assert equal(m.color, WHITE)
        assert m.ambient == 0.1
        assert m.diffuse == 0.9
        assert m.specular == 0.9
        assert m.shininess == 200.0
        assert m.reflectivity == 0.0
        assert m.transparency == 0.0
        assert m.refractive_index == 1.0
        assert m.pattern is None

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"reflectivity": 1.5},
            {"transparency": -0.1},
            {"refractive_index": 0.0},
            {"ambient": -1.0},
            {"shininess": 0.0},
        ],
    )
    def test_invalid_values_raise(self, kwargs):
        from src.tracer.materials.material import Material

        with pytest.raises(ValueError):
            Material(**kwargs)

    def test_with_returns_modified_copy(self):
        from src.tracer.materials.material import Material

        m = Material()
        shiny = m.with_(reflectivity=0.5)
        assert shiny.reflectivity == 0.5
        assert m.reflectivity == 0.0

    def test_glass(self):
        from src.tracer.materials.material import glass

        g = glass()
        assert g.transparency == 1.0
        assert g.refractive_index == 1.5


class TestPointLight:
    """Tests for point lights."""

    def test_point_light(self):
        from src.tracer.core.lights import point_light
        from src.tracer.core.tuples import color, equal, point

        light = point_light(point(0, 0, 0), color(1, 1, 1))
        assert equal(light.position, point(0, 0, 0))
        assert equal(light.intensity, color(1, 1, 1))

    def test_negative_intensity_raises(self):
        from src.tracer.core.lights import point_light
        from src.tracer.core.tuples import color, point

        with pytest.raises(ValueError):
            point_light(point(0, 0, 0), color(-1, 1, 1))

    def test_vector_position_raises(self):
        from src.tracer.core.lights import point_light
        from src.tracer.core.tuples import color, vector

        with pytest.raises(ValueError):
            point_light(vector(0, 0, 0), color(1, 1, 1))


class TestLighting:
    """Tests for the Phong lighting function."""

    @pytest.fixture
    def setup(self):
        from src.tracer.core.tuples import point
        from src.tracer.materials.material import Material

        return Material(), point(0, 0, 0)

    def test_eye_between_light_and_surface(self, setup):
        from src.tracer.core.lights import point_light
        from src.tracer.core.tuples import color, equal, point, vector
        from src.tracer.materials.material import lighting

        m, position = setup
        light = point_light(point(0, 0, -10), color(1, 1, 1))
        result = lighting(m, light, position, vector(0, 0, -1), vector(0, 0, -1))
        assert equal(result, color(1.9, 1.9, 1.9))

    def test_eye_offset_45_degrees(self, setup):
        from src.tracer.core.lights import point_light
        from src.tracer.core.tuples import color, equal, point, vector
        from src.tracer.materials.material import lighting

        m, position = setup
        s = math.sqrt(2) / 2
        light = point_light(point(0, 0, -10), color(1, 1, 1))
        result = lighting(m, light, position, vector(0, s, -s), vector(0, 0, -1))
        assert equal(result, color(1.0, 1.0, 1.0))

    def test_light_offset_45_degrees(self, setup):
        from src.tracer.core.lights import point_light
        from src.tracer.core.tuples import color, equal, point, vector
        from src.tracer.materials.material import lighting

        m, position = setup
        light = point_light(point(0, 10, -10), color(1, 1, 1))
        result = lighting(m, light, position, vector(0, 0, -1), vector(0, 0, -1))
        assert equal(result, color(0.7364, 0.7364, 0.7364), 1e-4)

    def test_eye_in_reflection_path(self, setup):
        from src.tracer.core.lights import point_light
        from src.tracer.core.tuples import color, equal, point, vector
        from src.tracer.materials.material import lighting

        m, position = setup
        s = math.sqrt(2) / 2
        light = point_light(point(0, 10, -10), color(1, 1, 1))
        result = lighting(m, light, position, vector(0, -s, -s), vector(0, 0, -1))
        assert equal(result, color(1.6364, 1.6364, 1.6364), 1e-4)

    def test_light_behind_surface(self, setup):
        """Only ambient light reaches a surface facing away from the light."""
        from src.tracer.core.lights import point_light
        from src.tracer.core.tuples import color, equal, point, vector
        from src.tracer.materials.material import lighting

        m, position = setup
        light = point_light(point(0, 0, 10), color(1, 1, 1))
        result = lighting(m, light, position, vector(0, 0, -1), vector(0, 0, -1))
        assert equal(result, color(0.1, 0.1, 0.1))

    def test_surface_in_shadow(self, setup):
        from src.tracer.core.lights import point_light
        from src.tracer.core.tuples import color, equal, point, vector
        from src.tracer.materials.material import lighting

        m, position = setup
        light = point_light(point(0, 0, -10), color(1, 1, 1))
        result = lighting(m, light, position, vector(0, 0, -1), vector(0, 0, -1), in_shadow=True)
        assert equal(result, color(0.1, 0.1, 0.1))

    def test_pattern_replaces_color(self):
        """A stripe pattern decides the surface color at each point."""
        from src.tracer.core.lights import point_light
        from src.tracer.core.tuples import BLACK, WHITE, color, equal, point, vector
        from src.tracer.materials.material import Material, lighting
        from src.tracer.materials.patterns import StripePattern

        m = Material(pattern=StripePattern(WHITE, BLACK), ambient=1, diffuse=0, specular=0)
        light = point_light(point(0, 0, -10), color(1, 1, 1))
        eyev = vector(0, 0, -1)
        normalv = vector(0, 0, -1)
        assert equal(lighting(m, light, point(0.9, 0, 0), eyev, normalv), WHITE)
        assert equal(lighting(m, light, point(1.1, 0, 0), eyev, normalv), BLACK)

    def test_pattern_uses_object_point(self):
        """The pattern is evaluated at the object-space point when given."""
        from src.tracer.core.lights import point_light
        from src.tracer.core.tuples import BLACK, WHITE, color, equal, point, vector
        from src.tracer.materials.material import Material, lighting
        from src.tracer.materials.patterns import StripePattern

        m = Material(pattern=StripePattern(WHITE, BLACK), ambient=1, diffuse=0, specular=0)
        light = point_light(point(0, 0, -10), color(1, 1, 1))
        result = lighting(
            m, light, point(0.5, 0, 0), vector(0, 0, -1), vector(0, 0, -1), object_point=point(1.5, 0, 0)
        )
        assert equal(result, BLACK)
