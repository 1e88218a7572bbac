"""Run configuration, numeric tolerances and Taichi initialisation.

Example:
    >>> from raycast.config import RenderConfig, init_taichi
    >>> config = RenderConfig(width=320, height=240, samples=4)
    >>> backend = init_taichi(config.arch, threads=config.threads)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import taichi as ti

from raycast.core.sampler import normalize_seed

# =============================================================================
# Self-intersection Tolerances
# =============================================================================

# Minimum plane hit distance; rejects near-parallel and behind-origin hits
HIT_EPSILON = 1e-4

# Lower bound for shadow ray occluders; keeps a surface from shadowing itself
SHADOW_EPSILON = 5e-5

# Supported Taichi backends by command-line name
ARCHS = {
    "cpu": ti.cpu,
    "gpu": ti.gpu,
    "cuda": ti.cuda,
    "vulkan": ti.vulkan,
    "metal": ti.metal,
}


@dataclass(frozen=True)
class Resolution:
    """Output image size in pixels.

    Attributes:
        width: Number of pixel columns.
        height: Number of pixel rows.
    """

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Resolution must be positive, got {self.width}x{self.height}"
            )

    @property
    def pixel_count(self) -> int:
        """Total number of pixels."""
        return self.width * self.height

    @property
    def buffer_size(self) -> int:
        """Size in bytes of an RGBA8 buffer for this resolution."""
        return self.pixel_count * 4


@dataclass(frozen=True)
class Tolerances:
    """Distance tolerances used to avoid self-intersection acne.

    Attributes:
        hit_epsilon: Minimum accepted plane intersection distance.
        shadow_epsilon: Shadow rays ignore occluders closer than this.
    """

    hit_epsilon: float = HIT_EPSILON
    shadow_epsilon: float = SHADOW_EPSILON

    def __post_init__(self) -> None:
        for name in ("hit_epsilon", "shadow_epsilon"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0.0:
                raise ValueError(f"{name} must be positive and finite, got {value}")


DEFAULT_TOLERANCES = Tolerances()


@dataclass
class RenderConfig:
    """Options for a command-line render.

    Attributes:
        scene_file: Path to the YAML or JSON scene description.
        threads: CPU worker threads used by the Taichi runtime.
        width: Image width in pixels.
        height: Image height in pixels.
        samples: Samples per pixel (1 disables jitter).
        seed: Seed for the jitter hash.
        output: Optional PNG output path.
        arch: Taichi backend name (see ARCHS).
        window: Show the result in a preview window.
        quiet: Suppress progress output.
    """

    scene_file: str = "scene.yml"
    threads: int = 1
    width: int = 1280
    height: int = 720
    samples: int = 8
    seed: int = 0
    output: str | None = None
    arch: str = "cpu"
    window: bool = True
    quiet: bool = False

    @property
    def resolution(self) -> Resolution:
        return Resolution(self.width, self.height)


def init_taichi(arch: str = "cpu", threads: int | None = None, seed: int = 0) -> str:
    """Initialise the Taichi runtime for rendering.

    Geometry is computed in double precision with strict float semantics so
    the distance tolerances behave the same on every run.

    Args:
        arch: Backend name, one of ARCHS.
        threads: Size of the CPU worker pool. None keeps Taichi's default.
        seed: Seed for Taichi's own generator (jitter does not use it). Any
            int is accepted and folded into the non-negative C int range.

    Returns:
        The name of the initialised backend.

    Raises:
        ValueError: If the backend name is unknown or threads < 1.
    """
    if arch not in ARCHS:
        raise ValueError(f"Unknown arch '{arch}', expected one of {sorted(ARCHS)}")

    kwargs = {
        "arch": ARCHS[arch],
        "default_fp": ti.f64,
        "fast_math": False,
        "random_seed": normalize_seed(seed) & 0x7FFFFFFF,
    }
    if threads is not None:
        if threads < 1:
            raise ValueError(f"threads must be at least 1, got {threads}")
        kwargs["cpu_max_num_threads"] = threads

    ti.init(**kwargs)
    return arch
