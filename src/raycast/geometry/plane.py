"""Infinite plane primitive and ray-plane intersection.

A plane is a point on the plane plus a unit normal. It is one-sided only in
the sense that the stored normal is returned unchanged; rays from either side
can hit it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raycast.geometry.plane import hit_plane
    >>> # Use hit_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from raycast.core.ray import Ray, ray_at, real, vec3
from raycast.geometry.sphere import HitRecord

# |normal . direction| below this counts as a ray parallel to the plane
PARALLEL_EPSILON = 1e-12


@ti.func
def hit_plane(ray: Ray, point: vec3, normal: vec3, hit_epsilon: real) -> HitRecord:
    """Test for ray-plane intersection.

    Solves dot(origin + t * direction - point, normal) = 0 for t.

    Args:
        ray: The ray to test.
        point: Any point on the plane.
        normal: Unit plane normal.
        hit_epsilon: Smallest distance accepted as a hit; keeps rays leaving
            the plane from re-hitting it.

    Returns:
        A HitRecord carrying the stored normal.
    """
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)

    denom = tm.dot(normal, ray.direction)
    if ti.abs(denom) >= PARALLEL_EPSILON:
        d = tm.dot(point - ray.origin, normal) / denom
        if d > hit_epsilon:
            did_hit = 1
            hit_t = d
            hit_point = ray_at(ray, d)

    return HitRecord(hit=did_hit, t=hit_t, point=hit_point, normal=normal)
