"""Core rendering module.

Components:
    ray: Ray data structure and vector helpers
    sampler: Stateless hash jitter for multi-sample anti-aliasing
    integrator: Shading, the row-band render kernel and render()
    framebuffer: Double-buffered frame presentation

Only field-free modules are imported here. integrator and framebuffer
declare Taichi fields (directly or through the scene tables); import them
directly after ti.init():

    from raycast.core.integrator import render
    from raycast.core.framebuffer import FrameRenderer
"""

from .ray import Ray, ivec3, make_ray, ray_at, real, reflect_about, vec3
from .sampler import normalize_seed, random_unit, sample_position, wang_hash

__all__ = [
    "Ray",
    "ivec3",
    "make_ray",
    "normalize_seed",
    "random_unit",
    "ray_at",
    "real",
    "reflect_about",
    "sample_position",
    "vec3",
    "wang_hash",
]
