"""Ray data structure and vector utilities for Taichi kernels.

This module provides the Ray dataclass and the small set of vector helpers
used by intersection and shading. Geometry runs in double precision so the
self-intersection tolerances (1e-4 and 5e-5) are well above rounding noise.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> @ti.kernel
    ... def unit_length() -> ti.f64:
    ...     ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 4.0))
    ...     return ray_at(ray, 2.0).z  # 2.0, the direction is unit length
"""

import taichi as ti
import taichi.math as tm

# Scalar and vector types for all geometry
real = ti.f64
vec3 = ti.types.vector(3, real)

# Integer colour triple (channel values 0-255 once clamped)
ivec3 = ti.types.vector(3, ti.i32)


@ti.dataclass
class Ray:
    """A ray with an origin point and a unit direction.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of the ray. Always unit length when built
            with make_ray().
    """

    origin: vec3
    direction: vec3


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray, normalising the direction.

    Args:
        origin: The starting point of the ray.
        direction: Any non-zero direction vector.

    Returns:
        A Ray whose direction is unit length.
    """
    return Ray(origin=origin, direction=tm.normalize(direction))


@ti.func
def ray_at(ray: Ray, t: real) -> vec3:
    """Compute the point origin + direction * t."""
    return ray.origin + t * ray.direction


@ti.func
def reflect_about(v: vec3, normal: vec3) -> vec3:
    """Mirror a vector about a unit normal.

    Unlike the incident-ray convention (v - 2(v.n)n), this reflects a vector
    that points away from the surface, so a light direction reflects into the
    direction of the specular highlight: 2(v.n)n - v.

    Args:
        v: The vector to mirror (pointing away from the surface).
        normal: The unit surface normal.

    Returns:
        The mirrored vector, same length as v.
    """
    return 2.0 * tm.dot(v, normal) * normal - v
