"""Pytest configuration for raycast tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate the module-level fields of already imported modules.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, fast_math=False, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear the primitive and light tables before and after each test."""
    # Import here so Taichi is initialized before the fields are declared
    from raycast.scene.intersection import clear_primitives
    from raycast.scene.lights import clear_lights, set_environment

    def _clear_all():
        clear_primitives()
        clear_lights()
        set_environment(0.0, (0, 0, 0))

    _clear_all()
    yield
    _clear_all()


@pytest.fixture
def grey_material():
    """A plain fully diffuse grey material."""
    from raycast.scene.model import Material

    return Material(colour=(128, 128, 128), diffuse=1.0, specular=0.0, specular_exp=1.0)


@pytest.fixture
def plane_scene_factory():
    """Build the reference scene: a wall at z=5 facing a camera at the origin.

    The wall has colour (200, 100, 50). Keyword arguments override the
    material coefficients, lights, ambient level and extra primitives.
    """
    from raycast.camera.viewport import Camera
    from raycast.scene.model import Material, Plane, Scene

    def _make(
        *,
        diffuse=1.0,
        specular=0.0,
        specular_exp=1.0,
        lights=(),
        ambient=0.0,
        extra=(),
        background=(0, 0, 0),
    ):
        wall = Plane(
            point=(0.0, 0.0, 5.0),
            normal=(0.0, 0.0, -1.0),
            material=Material(
                colour=(200, 100, 50),
                diffuse=diffuse,
                specular=specular,
                specular_exp=specular_exp,
            ),
        )
        return Scene(
            camera=Camera(position=(0.0, 0.0, 0.0), direction=(0.0, 0.0, 1.0), fov=90.0),
            primitives=(wall, *extra),
            lights=tuple(lights),
            ambient=ambient,
            background=background,
        )

    return _make
