"""Scene-level primitive storage and intersection testing.

Spheres and planes share one primitive table in Structure of Arrays layout.
Each entry carries a ShapeKind tag, its geometry and its material, and the
table keeps insertion order: nearest-hit resolution visits primitives in
that order and keeps the first of two equally near hits.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raycast.scene.model import Material
    >>> from raycast.scene.intersection import add_plane, add_sphere, clear_primitives
    >>> grey = Material(colour=(128, 128, 128), diffuse=1.0, specular=0.0, specular_exp=1)
    >>> clear_primitives()
    >>> add_sphere((0, 0, 3), 1.0, grey)
    >>> add_plane((0, -1, 0), (0, 1, 0), grey)
    >>> # Use intersect_scene within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti

from raycast.core.ray import Ray, real, vec3
from raycast.geometry.plane import hit_plane
from raycast.geometry.sphere import HitRecord, hit_sphere
from raycast.materials.phong import Material
from raycast.scene import model


class ShapeKind(IntEnum):
    """Closed set of primitive shapes stored in the table."""

    SPHERE = 0
    PLANE = 1


_SPHERE = int(ShapeKind.SPHERE)


@ti.dataclass
class SceneHitRecord:
    """Record of the nearest ray-scene intersection.

    Attributes:
        hit: Whether the ray intersected any primitive (1 if hit, 0 if miss).
        t: Distance along the ray. Only valid if hit == 1.
        point: The intersection point. Only valid if hit == 1.
        normal: Unit surface normal. Only valid if hit == 1.
        primitive: Index of the hit primitive, -1 on a miss.
    """

    hit: ti.i32
    t: real
    point: vec3
    normal: vec3
    primitive: ti.i32


# Maximum number of primitives supported in the scene
MAX_PRIMITIVES = 1024

# Geometry
prim_kinds = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
# Sphere center or point on plane
prim_positions = ti.Vector.field(3, dtype=real, shape=MAX_PRIMITIVES)
# Plane normal (unused for spheres)
prim_normals = ti.Vector.field(3, dtype=real, shape=MAX_PRIMITIVES)
# Sphere radius (unused for planes)
prim_radii = ti.field(dtype=real, shape=MAX_PRIMITIVES)

# Materials, one per primitive
prim_colours = ti.Vector.field(3, dtype=ti.i32, shape=MAX_PRIMITIVES)
prim_diffuse = ti.field(dtype=real, shape=MAX_PRIMITIVES)
prim_specular = ti.field(dtype=real, shape=MAX_PRIMITIVES)
prim_specular_exp = ti.field(dtype=real, shape=MAX_PRIMITIVES)

num_primitives = ti.field(dtype=ti.i32, shape=())


def clear_primitives() -> None:
    """Remove all primitives.

    Only the count is reset; stale entries are overwritten by later adds.
    """
    num_primitives[None] = 0


def _add_primitive(kind: ShapeKind, position, material: model.Material) -> int:
    idx = num_primitives[None]
    if idx >= MAX_PRIMITIVES:
        raise RuntimeError(f"Maximum number of primitives ({MAX_PRIMITIVES}) exceeded")
    prim_kinds[idx] = int(kind)
    prim_positions[idx] = [float(c) for c in position]
    prim_colours[idx] = list(material.colour)
    prim_diffuse[idx] = material.diffuse
    prim_specular[idx] = material.specular
    prim_specular_exp[idx] = material.specular_exp
    num_primitives[None] = idx + 1
    return idx


def add_sphere(center, radius: float, material: model.Material) -> int:
    """Append a sphere to the table.

    Args:
        center: Sphere center (three floats).
        radius: Sphere radius (positive).
        material: The sphere's material.

    Returns:
        The index of the added primitive.

    Raises:
        RuntimeError: If the maximum number of primitives is exceeded.
    """
    idx = _add_primitive(ShapeKind.SPHERE, center, material)
    prim_radii[idx] = float(radius)
    prim_normals[idx] = [0.0, 0.0, 0.0]
    return idx


def add_plane(point, normal, material: model.Material) -> int:
    """Append an infinite plane to the table.

    Args:
        point: Any point on the plane.
        normal: Unit plane normal. model.Plane normalises on construction;
            callers passing raw tuples are responsible for unit length.
        material: The plane's material.

    Returns:
        The index of the added primitive.

    Raises:
        RuntimeError: If the maximum number of primitives is exceeded.
    """
    idx = _add_primitive(ShapeKind.PLANE, point, material)
    prim_normals[idx] = [float(c) for c in normal]
    prim_radii[idx] = 0.0
    return idx


def get_primitive_count() -> int:
    """Get the number of primitives in the scene."""
    return int(num_primitives[None])


@ti.func
def _make_miss_record() -> SceneHitRecord:
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        primitive=-1,
    )


@ti.func
def intersect_primitive(i: ti.i32, ray: Ray, hit_eps: real) -> HitRecord:
    """Intersect one table entry, dispatching on its ShapeKind."""
    rec = HitRecord(hit=0, t=0.0, point=vec3(0.0, 0.0, 0.0), normal=vec3(0.0, 0.0, 0.0))
    if prim_kinds[i] == _SPHERE:
        rec = hit_sphere(ray, prim_positions[i], prim_radii[i])
    else:
        rec = hit_plane(ray, prim_positions[i], prim_normals[i], hit_eps)
    return rec


@ti.func
def intersect_scene(ray: Ray, t_min: real, t_max: real, hit_eps: real) -> SceneHitRecord:
    """Find the nearest primitive hit with t_min < t < t_max.

    Every primitive is tested, in table order. A later primitive replaces the
    current best only if it is strictly nearer.

    Args:
        ray: The ray to trace.
        t_min: Exclusive lower distance bound.
        t_max: Exclusive upper distance bound.
        hit_eps: Plane hit tolerance.

    Returns:
        A SceneHitRecord for the nearest hit, or a miss record.
    """
    closest_t = t_max
    result = _make_miss_record()

    n = num_primitives[None]
    for i in range(n):
        rec = intersect_primitive(i, ray, hit_eps)
        if rec.hit == 1 and rec.t > t_min and rec.t < closest_t:
            closest_t = rec.t
            result = SceneHitRecord(
                hit=1,
                t=rec.t,
                point=rec.point,
                normal=rec.normal,
                primitive=i,
            )

    return result


@ti.func
def intersect_scene_any(ray: Ray, t_min: real, t_max: real, hit_eps: real) -> ti.i32:
    """Test whether anything lies on the ray with t_min < t < t_max (shadow query).

    Returns:
        1 if any primitive was hit, 0 otherwise.
    """
    hit_any = 0

    n = num_primitives[None]
    for i in range(n):
        if hit_any == 0:
            rec = intersect_primitive(i, ray, hit_eps)
            if rec.hit == 1 and rec.t > t_min and rec.t < t_max:
                hit_any = 1

    return hit_any


@ti.func
def material_at(i: ti.i32, point: vec3) -> Material:
    """Material of primitive i at a surface point.

    Materials are uniform over each primitive, so the point is unused.
    """
    return Material(
        colour=prim_colours[i],
        diffuse=prim_diffuse[i],
        specular=prim_specular[i],
        specular_exp=prim_specular_exp[i],
    )
