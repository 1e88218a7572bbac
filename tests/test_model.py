"""Tests for scene model validation and the demo preset."""

import math

import pytest

from raycast.camera.viewport import Camera
from raycast.scene.model import Material, Plane, PointLight, Scene, Sphere
from raycast.scene.presets import DemoSceneParams, create_demo_scene

CAMERA = Camera(position=(0, 0, 0), direction=(0, 0, 1), fov=60)
GREY = Material(colour=(128, 128, 128), diffuse=1.0, specular=0.0, specular_exp=1)


class TestMaterial:
    """Test Material validation."""

    def test_values_are_normalised(self):
        m = Material(colour=[10, 20, 30], diffuse=1, specular=0, specular_exp=16)
        assert m.colour == (10, 20, 30)
        assert isinstance(m.diffuse, float)
        assert m.specular_exp == 16.0

    @pytest.mark.parametrize("colour", [(256, 0, 0), (-1, 0, 0), (1.5, 0, 0), (1, 2), "red"])
    def test_bad_colour(self, colour):
        with pytest.raises(ValueError):
            Material(colour=colour, diffuse=0.5, specular=0.5, specular_exp=1)

    @pytest.mark.parametrize("field", ["diffuse", "specular"])
    @pytest.mark.parametrize("value", [-0.1, 1.5])
    def test_coefficients_in_unit_interval(self, field, value):
        kwargs = dict(colour=(1, 2, 3), diffuse=0.5, specular=0.5, specular_exp=1)
        kwargs[field] = value
        with pytest.raises(ValueError, match=field):
            Material(**kwargs)

    @pytest.mark.parametrize("exp", [-1.0, math.inf, math.nan])
    def test_bad_exponent(self, exp):
        with pytest.raises(ValueError, match="specular_exp"):
            Material(colour=(1, 2, 3), diffuse=0.5, specular=0.5, specular_exp=exp)

    def test_zero_exponent_allowed(self):
        assert Material(colour=(1, 2, 3), diffuse=0.5, specular=0.5, specular_exp=0).specular_exp == 0.0


class TestPrimitives:
    """Test Sphere and Plane validation."""

    def test_sphere(self):
        s = Sphere(center=(1, 2, 3), radius=2, material=GREY)
        assert s.center == (1.0, 2.0, 3.0)
        assert s.radius == 2.0

    @pytest.mark.parametrize("radius", [0.0, -1.0, math.inf, math.nan])
    def test_sphere_bad_radius(self, radius):
        with pytest.raises(ValueError, match="radius"):
            Sphere(center=(0, 0, 0), radius=radius, material=GREY)

    def test_sphere_bad_center(self):
        with pytest.raises(ValueError, match="three numbers"):
            Sphere(center=(0, 0), radius=1.0, material=GREY)

    def test_plane_normal_is_normalised(self):
        p = Plane(point=(0, 0, 0), normal=(0, 3, 4), material=GREY)
        assert p.normal == pytest.approx((0.0, 0.6, 0.8))

    def test_plane_zero_normal(self):
        with pytest.raises(ValueError, match="non-zero"):
            Plane(point=(0, 0, 0), normal=(0, 0, 0), material=GREY)


class TestPointLight:
    """Test PointLight validation."""

    def test_valid(self):
        light = PointLight(position=(1, 2, 3), colour=(255, 255, 255), intensity=2)
        assert light.intensity == 2.0

    @pytest.mark.parametrize("intensity", [-0.5, math.inf])
    def test_bad_intensity(self, intensity):
        with pytest.raises(ValueError, match="intensity"):
            PointLight(position=(0, 0, 0), colour=(255, 255, 255), intensity=intensity)


class TestScene:
    """Test Scene construction."""

    def test_defaults(self):
        scene = Scene(camera=CAMERA)
        assert scene.primitives == ()
        assert scene.lights == ()
        assert scene.ambient == 0.0
        assert scene.background == (0, 0, 0)

    def test_lists_become_tuples(self):
        sphere = Sphere(center=(0, 0, 5), radius=1, material=GREY)
        scene = Scene(camera=CAMERA, primitives=[sphere])
        assert scene.primitives == (sphere,)

    def test_sphere_and_plane_views_keep_order(self):
        s1 = Sphere(center=(0, 0, 5), radius=1, material=GREY)
        p1 = Plane(point=(0, -1, 0), normal=(0, 1, 0), material=GREY)
        s2 = Sphere(center=(2, 0, 5), radius=1, material=GREY)
        scene = Scene(camera=CAMERA, primitives=(s1, p1, s2))
        assert scene.spheres == (s1, s2)
        assert scene.planes == (p1,)

    def test_rejects_unknown_primitive(self):
        with pytest.raises(ValueError, match="Unsupported primitive"):
            Scene(camera=CAMERA, primitives=("cube",))

    def test_rejects_unknown_light(self):
        with pytest.raises(ValueError, match="Unsupported light"):
            Scene(camera=CAMERA, lights=(object(),))

    def test_rejects_bad_ambient(self):
        with pytest.raises(ValueError, match="ambient"):
            Scene(camera=CAMERA, ambient=1.5)

    def test_rejects_non_camera(self):
        with pytest.raises(ValueError, match="Camera"):
            Scene(camera=None)

    def test_is_immutable(self):
        scene = Scene(camera=CAMERA)
        with pytest.raises(AttributeError):
            scene.ambient = 0.5


class TestDemoScene:
    """Test the built-in demo scene."""

    def test_contents(self):
        scene = create_demo_scene()
        assert len(scene.spheres) == 3
        assert len(scene.planes) == 2
        assert len(scene.lights) == 2
        assert scene.ambient == pytest.approx(0.1)

    def test_params(self):
        scene = create_demo_scene(DemoSceneParams(ambient=0.4, key_intensity=1.5, fov=45))
        assert scene.ambient == pytest.approx(0.4)
        assert scene.lights[0].intensity == pytest.approx(1.5)
        assert scene.camera.fov == 45
