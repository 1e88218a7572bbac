"""Tests for PNG export and image comparison."""

import numpy as np
import pytest

from raycast.config import Resolution
from raycast.preview.export import buffer_to_image, compute_rmse, load_png, save_png


def _gradient(res):
    pixels = np.zeros((res.height, res.width, 4), dtype=np.uint8)
    pixels[:, :, 0] = np.arange(res.width, dtype=np.uint8)[None, :] * 10
    pixels[:, :, 1] = np.arange(res.height, dtype=np.uint8)[:, None] * 20
    pixels[:, :, 2] = 77
    pixels[:, :, 3] = 255
    return pixels


class TestBufferToImage:
    """Test buffer_to_image()."""

    def test_reshapes_row_major(self):
        res = Resolution(3, 2)
        flat = np.arange(res.buffer_size, dtype=np.uint8)
        image = buffer_to_image(flat, res)

        assert image.shape == (2, 3, 4)
        # Second row, first pixel starts after one full row
        assert tuple(image[1, 0]) == (12, 13, 14, 15)

    def test_accepts_bytes(self):
        res = Resolution(1, 1)
        image = buffer_to_image(bytes([1, 2, 3, 255]), res)
        assert tuple(image[0, 0]) == (1, 2, 3, 255)

    def test_size_mismatch(self):
        with pytest.raises(ValueError, match="Buffer holds 8 bytes"):
            buffer_to_image(np.zeros(8, dtype=np.uint8), Resolution(3, 1))


class TestPng:
    """Test save_png() / load_png()."""

    def test_save_and_load(self, tmp_path):
        res = Resolution(6, 4)
        pixels = _gradient(res)
        path = tmp_path / "out.png"

        save_png(pixels.reshape(-1), res, str(path))

        assert path.exists()
        np.testing.assert_array_equal(load_png(str(path)), pixels)


class TestComputeRmse:
    """Test compute_rmse()."""

    def test_identical_images(self):
        image = _gradient(Resolution(4, 4))
        assert compute_rmse(image, image.copy()) == 0.0

    def test_known_difference(self):
        a = np.zeros((2, 2, 4), dtype=np.uint8)
        b = np.full((2, 2, 4), 3, dtype=np.uint8)
        assert compute_rmse(a, b) == pytest.approx(3.0)

    def test_no_uint8_wraparound(self):
        a = np.zeros((1, 1, 4), dtype=np.uint8)
        b = np.full((1, 1, 4), 255, dtype=np.uint8)
        assert compute_rmse(b, a) == pytest.approx(255.0)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError, match="shapes differ"):
            compute_rmse(np.zeros((2, 2, 4)), np.zeros((2, 3, 4)))
