"""Tests for configuration values and Taichi initialisation arguments."""

import math

import pytest

from raycast.config import (
    ARCHS,
    DEFAULT_TOLERANCES,
    HIT_EPSILON,
    SHADOW_EPSILON,
    RenderConfig,
    Resolution,
    Tolerances,
    init_taichi,
)


class TestResolution:
    """Test Resolution."""

    def test_sizes(self):
        res = Resolution(320, 240)
        assert res.pixel_count == 76800
        assert res.buffer_size == 307200

    @pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-1, 5)])
    def test_rejects_non_positive(self, width, height):
        with pytest.raises(ValueError, match="Resolution must be positive"):
            Resolution(width, height)


class TestTolerances:
    """Test Tolerances."""

    def test_defaults(self):
        assert DEFAULT_TOLERANCES.hit_epsilon == HIT_EPSILON == 1e-4
        assert DEFAULT_TOLERANCES.shadow_epsilon == SHADOW_EPSILON == 5e-5

    @pytest.mark.parametrize("value", [0.0, -1e-4, math.inf, math.nan])
    def test_rejects_bad_values(self, value):
        with pytest.raises(ValueError, match="hit_epsilon"):
            Tolerances(hit_epsilon=value)
        with pytest.raises(ValueError, match="shadow_epsilon"):
            Tolerances(shadow_epsilon=value)


class TestRenderConfig:
    """Test RenderConfig defaults."""

    def test_defaults(self):
        config = RenderConfig()
        assert config.resolution == Resolution(1280, 720)
        assert config.samples == 8
        assert config.window is True


class TestInitTaichi:
    """Argument checks that run before ti.init() is reached."""

    def test_known_archs(self):
        assert {"cpu", "gpu", "cuda", "vulkan", "metal"} == set(ARCHS)

    def test_unknown_arch(self):
        with pytest.raises(ValueError, match="Unknown arch 'tpu'"):
            init_taichi("tpu")

    def test_bad_thread_count(self):
        with pytest.raises(ValueError, match="threads must be at least 1"):
            init_taichi("cpu", threads=0)

    @pytest.mark.parametrize(
        "seed,expected",
        [(0, 0), (12345, 12345), (2**40, 0), (2**40 + 7, 7), (-1, 0x7FFFFFFF)],
    )
    def test_seed_folded_into_c_int_range(self, monkeypatch, seed, expected):
        import taichi as ti

        captured = {}
        monkeypatch.setattr(ti, "init", lambda **kwargs: captured.update(kwargs))

        assert init_taichi("cpu", threads=2, seed=seed) == "cpu"
        assert captured["random_seed"] == expected
        assert captured["cpu_max_num_threads"] == 2
        assert captured["default_fp"] == ti.f64
