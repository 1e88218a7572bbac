"""Sphere primitive and ray-sphere intersection.

The intersection solves the full quadratic

    |origin + t * direction - center|^2 = radius^2

and only ever reports the nearer root. If that root lies behind (or exactly
at) the ray origin the result is a miss, even when the far root is in front:
a ray starting inside a sphere sees nothing of it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raycast.geometry.sphere import HitRecord, hit_sphere
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from raycast.core.ray import Ray, ray_at, real, vec3


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: Distance along the ray to the intersection. Only valid if hit == 1.
        point: The intersection point. Only valid if hit == 1.
        normal: Unit surface normal at the intersection. Only valid if hit == 1.
    """

    hit: ti.i32
    t: real
    point: vec3
    normal: vec3


@ti.func
def hit_sphere(ray: Ray, center: vec3, radius: real) -> HitRecord:
    """Test for ray-sphere intersection.

    With oc = origin - center the quadratic coefficients are:
        a = dot(direction, direction)
        b = 2 * dot(oc, direction)
        c = dot(oc, oc) - radius^2

    Args:
        ray: The ray to test.
        center: Sphere center.
        radius: Sphere radius (positive).

    Returns:
        A HitRecord. The normal points from the center to the hit point.
    """
    oc = ray.origin - center
    a = tm.dot(ray.direction, ray.direction)
    b = 2.0 * tm.dot(oc, ray.direction)
    c = tm.dot(oc, oc) - radius * radius

    discriminant = b * b - 4.0 * a * c

    # Taichi requires outer-scope declaration
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    if discriminant >= 0.0:
        t = (-b - ti.sqrt(discriminant)) / (2.0 * a)
        if t > 0.0:
            did_hit = 1
            hit_t = t
            hit_point = ray_at(ray, t)
            hit_normal = tm.normalize(hit_point - center)

    return HitRecord(hit=did_hit, t=hit_t, point=hit_point, normal=hit_normal)
