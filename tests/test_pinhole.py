"""Unit tests for kernel-side viewport storage and primary rays."""

import math

import pytest
import taichi as ti

from raycast.camera.viewport import Camera, compute_viewport


class TestSetupViewport:
    """Tests for setup_viewport() / get_viewport_info()."""

    def test_round_trip(self):
        from raycast.camera.pinhole import get_viewport_info, setup_viewport

        vp = compute_viewport(Camera(position=(0, 0, -1), direction=(0, 0, 1), fov=90), 100, 100)
        setup_viewport(vp)
        info = get_viewport_info()

        for key in ("origin", "top_left", "x_stride", "y_stride"):
            for a, e in zip(info[key], getattr(vp, key)):
                assert a == pytest.approx(e, abs=1e-12)


class TestGetPixelRay:
    """Tests for get_pixel_ray()."""

    def _trace(self, px, py):
        from raycast.camera.pinhole import get_pixel_ray

        origin = ti.Vector.field(3, dtype=ti.f64, shape=())
        direction = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel(x: ti.f64, y: ti.f64):
            ray = get_pixel_ray(x, y)
            origin[None] = ray.origin
            direction[None] = ray.direction

        test_kernel(px, py)
        return origin[None], direction[None]

    def test_top_left_pixel(self):
        from raycast.camera.pinhole import setup_viewport

        setup_viewport(compute_viewport(Camera(position=(0, 0, -1), direction=(0, 0, 1), fov=90), 100, 100))
        origin, direction = self._trace(0.0, 0.0)

        assert (origin[0], origin[1], origin[2]) == (0.0, 0.0, -1.0)
        # Towards (-1, 1, 0) from (0, 0, -1)
        inv = 1.0 / math.sqrt(3.0)
        assert direction[0] == pytest.approx(-inv, abs=1e-12)
        assert direction[1] == pytest.approx(inv, abs=1e-12)
        assert direction[2] == pytest.approx(inv, abs=1e-12)

    def test_screen_center(self):
        from raycast.camera.pinhole import setup_viewport

        setup_viewport(compute_viewport(Camera(position=(0, 0, -1), direction=(0, 0, 1), fov=90), 100, 100))
        _, direction = self._trace(50.0, 50.0)

        assert direction[0] == pytest.approx(0.0, abs=1e-12)
        assert direction[1] == pytest.approx(0.0, abs=1e-12)
        assert direction[2] == pytest.approx(1.0, abs=1e-12)

    def test_direction_is_unit(self):
        from raycast.camera.pinhole import setup_viewport

        setup_viewport(compute_viewport(Camera(position=(3, 1, 2), direction=(1, -0.5, 2), fov=70), 64, 48))
        _, direction = self._trace(12.25, 40.75)

        length = math.sqrt(sum(direction[i] ** 2 for i in range(3)))
        assert length == pytest.approx(1.0, abs=1e-12)
