"""Tests for the double-buffered frame renderer.

Note: Imports are done inside test methods; the renderer module declares
Taichi fields through the integrator.
"""

import numpy as np
import pytest

from raycast.config import Resolution


class TestFrameBuffer:
    """Test FrameBuffer swapping."""

    def test_starts_opaque_white(self):
        from raycast.core.framebuffer import FrameBuffer

        fb = FrameBuffer(Resolution(4, 3))
        assert fb.read_buffer().shape == (48,)
        assert np.all(fb.read_buffer() == 255)
        assert np.all(fb.write_buffer() == 255)

    def test_writes_are_hidden_until_swap(self):
        from raycast.core.framebuffer import FrameBuffer

        fb = FrameBuffer(Resolution(2, 2))
        fb.write_buffer()[:] = 10
        assert np.all(fb.read_buffer() == 255)

        fb.swap()
        assert np.all(fb.read_buffer() == 10)
        assert np.all(fb.write_buffer() == 255)

    def test_read_buffer_is_a_copy(self):
        from raycast.core.framebuffer import FrameBuffer

        fb = FrameBuffer(Resolution(2, 2))
        snapshot = fb.read_buffer()
        snapshot[:] = 0
        assert np.all(fb.read_buffer() == 255)


class TestFrameRenderer:
    """Test FrameRenderer."""

    def test_render_frame_publishes(self, plane_scene_factory):
        from raycast.core.framebuffer import FrameRenderer

        renderer = FrameRenderer(plane_scene_factory(ambient=0.1), Resolution(4, 3), 1)
        assert renderer.frame_count == 0

        renderer.render_frame()

        image = renderer.get_image_numpy()
        assert image.shape == (3, 4, 4)
        assert np.all(image[:, :, :3] == np.array([20, 10, 5], dtype=np.uint8))
        assert np.all(image[:, :, 3] == 255)
        assert renderer.frame_count == 1

    def test_progress_callback_reports_each_band(self, plane_scene_factory):
        from raycast.core.framebuffer import FrameRenderer

        renderer = FrameRenderer(plane_scene_factory(), Resolution(3, 5), 1, band_rows=2)
        progress = []
        renderer.render_frame(callback=lambda done, total: progress.append((done, total)))

        assert progress == [(2, 5), (4, 5), (5, 5)]

    def test_abandoned_frame_is_not_published(self, plane_scene_factory):
        from raycast.core.framebuffer import FrameRenderer

        renderer = FrameRenderer(plane_scene_factory(ambient=0.1), Resolution(4, 4), 1, band_rows=1)
        frame = renderer.render_frame_progressive()
        next(frame)
        next(frame)
        frame.close()

        assert np.all(renderer.get_image_numpy() == 255)
        assert renderer.frame_count == 0

    def test_banded_frame_matches_single_render(self):
        from raycast.core.framebuffer import FrameRenderer
        from raycast.core.integrator import render
        from raycast.scene.presets import create_demo_scene

        res = Resolution(12, 9)
        scene = create_demo_scene()
        expected = np.zeros(res.buffer_size, dtype=np.uint8)
        render(scene, expected, res, 3, seed=11)

        renderer = FrameRenderer(scene, res, 3, seed=11, band_rows=4)
        renderer.render_frame()

        np.testing.assert_array_equal(renderer.get_image_numpy().reshape(-1), expected)

    def test_scene_uploaded_once_per_frame(self, plane_scene_factory, monkeypatch):
        from raycast.core import framebuffer

        uploads = []
        prepare = framebuffer.prepare_scene

        def counting_prepare(scene, resolution):
            uploads.append(scene)
            return prepare(scene, resolution)

        monkeypatch.setattr(framebuffer, "prepare_scene", counting_prepare)

        scene = plane_scene_factory(ambient=0.1)
        renderer = framebuffer.FrameRenderer(scene, Resolution(3, 7), 1, band_rows=2)
        renderer.render_frame()
        assert uploads == [scene]

        renderer.render_frame()
        assert len(uploads) == 2
        assert np.all(renderer.get_image_numpy()[:, :, :3] == np.array([20, 10, 5], dtype=np.uint8))

    def test_scene_change_shows_on_next_frame(self, plane_scene_factory):
        from raycast.core.framebuffer import FrameRenderer

        renderer = FrameRenderer(plane_scene_factory(ambient=0.1), Resolution(2, 2), 1)
        renderer.render_frame()
        renderer.scene = plane_scene_factory(ambient=0.5)
        renderer.render_frame()

        assert tuple(renderer.get_image_numpy()[0, 0]) == (100, 50, 25, 255)
        assert renderer.frame_count == 2

    def test_save_image(self, plane_scene_factory, tmp_path):
        from raycast.core.framebuffer import FrameRenderer
        from raycast.preview.export import load_png

        renderer = FrameRenderer(plane_scene_factory(ambient=0.1), Resolution(5, 4), 1)
        renderer.render_frame()
        path = tmp_path / "frame.png"
        renderer.save_image(str(path))

        np.testing.assert_array_equal(load_png(str(path)), renderer.get_image_numpy())

    def test_rejects_bad_band_rows(self, plane_scene_factory):
        from raycast.core.framebuffer import FrameRenderer

        with pytest.raises(ValueError, match="band_rows"):
            FrameRenderer(plane_scene_factory(), Resolution(2, 2), band_rows=0)

    def test_repr(self, plane_scene_factory):
        from raycast.core.framebuffer import FrameRenderer

        renderer = FrameRenderer(plane_scene_factory(), Resolution(8, 6), 2)
        assert repr(renderer) == "FrameRenderer(width=8, height=6, samples=2, frames=0)"
