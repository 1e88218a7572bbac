"""Unit tests for hash-based sample jitter."""

import numpy as np
import taichi as ti


def _positions(width, height, samples, seed):
    """Sample positions for every pixel and sample, shape (h, w, samples, 2)."""
    from raycast.core.sampler import sample_position

    out = ti.Vector.field(2, dtype=ti.f64, shape=(height, width, samples))

    @ti.kernel
    def test_kernel(w: ti.i32, s: ti.u32):
        for y, x, k in out:
            px, py = sample_position(x, y, k, w, s)
            out[y, x, k] = ti.Vector([px, py], dt=ti.f64)

    test_kernel(width, seed)
    return out.to_numpy()


class TestSamplePosition:
    """Tests for sample_position()."""

    def test_first_sample_is_exact_pixel(self):
        pos = _positions(6, 4, 5, seed=123)
        ys, xs = np.mgrid[0:4, 0:6]
        np.testing.assert_array_equal(pos[:, :, 0, 0], xs)
        np.testing.assert_array_equal(pos[:, :, 0, 1], ys)

    def test_jitter_stays_inside_pixel(self):
        pos = _positions(8, 8, 16, seed=7)
        ys, xs = np.mgrid[0:8, 0:8]
        dx = pos[:, :, 1:, 0] - xs[:, :, None]
        dy = pos[:, :, 1:, 1] - ys[:, :, None]
        assert dx.min() >= 0.0 and dx.max() < 1.0
        assert dy.min() >= 0.0 and dy.max() < 1.0

    def test_jitter_is_not_constant(self):
        pos = _positions(8, 8, 16, seed=7)
        dx = pos[:, :, 1:, 0] - np.floor(pos[:, :, 1:, 0])
        assert np.unique(dx).size > 100
        # Roughly uniform: mean near 0.5
        assert abs(dx.mean() - 0.5) < 0.05

    def test_same_seed_is_deterministic(self):
        a = _positions(5, 3, 4, seed=99)
        b = _positions(5, 3, 4, seed=99)
        np.testing.assert_array_equal(a, b)

    def test_different_seed_changes_jitter(self):
        a = _positions(5, 3, 4, seed=1)
        b = _positions(5, 3, 4, seed=2)
        assert not np.array_equal(a[:, :, 1:], b[:, :, 1:])
        np.testing.assert_array_equal(a[:, :, 0], b[:, :, 0])


class TestNormalizeSeed:
    """Tests for normalize_seed()."""

    def test_in_range_seed_unchanged(self):
        from raycast.core.sampler import normalize_seed

        assert normalize_seed(0) == 0
        assert normalize_seed(12345) == 12345

    def test_large_and_negative_seeds_fold(self):
        from raycast.core.sampler import normalize_seed

        assert normalize_seed(2**32 + 5) == 5
        assert normalize_seed(-1) == 0xFFFFFFFF
