"""Ray casting integrator: shading, supersampling and the render entry point.

Each primary ray is traced once. On a hit the surface is shaded with local
illumination only:

    colour = clamp(ambient + sum of visible light contributions, 0, 255)

where a light is visible if no primitive lies strictly between the shadow
epsilon and the light along the shadow ray. A miss yields the background.

Each pixel takes N samples (see raycast.core.sampler); integer channel sums
are divided by N with floor division and written as R, G, B, 255 into a
row-major RGBA8 buffer.

Example:
    >>> import numpy as np
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raycast.config import Resolution
    >>> from raycast.core.integrator import render
    >>> from raycast.scene.presets import create_demo_scene
    >>>
    >>> res = Resolution(320, 240)
    >>> buffer = np.zeros(res.buffer_size, dtype=np.uint8)
    >>> render(create_demo_scene(), buffer, res, sample_count=4, seed=7)
"""

import numpy as np
import taichi as ti
import taichi.math as tm

from raycast.camera.pinhole import get_pixel_ray, setup_viewport
from raycast.camera.viewport import Viewport, compute_viewport
from raycast.config import DEFAULT_TOLERANCES, Resolution, Tolerances
from raycast.core.ray import Ray, ivec3, make_ray, real, vec3
from raycast.core.sampler import normalize_seed, sample_position
from raycast.materials.phong import ambient_colour, light_contribution
from raycast.scene.intersection import (
    SceneHitRecord,
    intersect_scene,
    intersect_scene_any,
    material_at,
)
from raycast.scene.lights import get_ambient, get_background, get_light, light_count
from raycast.scene.manager import upload_scene
from raycast.scene.model import Scene

# Primary rays accept any positive distance
T_MIN = 0.0
T_MAX = tm.inf

# =============================================================================
# Shading
# =============================================================================


@ti.func
def shade_hit(ray: Ray, rec: SceneHitRecord, hit_eps: real, shadow_eps: real) -> ivec3:
    """Local illumination at a primary hit.

    Args:
        ray: The primary ray.
        rec: The nearest hit along ray.
        hit_eps: Plane hit tolerance, also applied to shadow rays.
        shadow_eps: Shadow rays ignore occluders nearer than this.

    Returns:
        The shaded colour, each channel in [0, 255].
    """
    material = material_at(rec.primitive, rec.point)
    total = ambient_colour(material, get_ambient())
    to_viewer = -ray.direction

    for i in range(light_count()):
        light_pos, intensity = get_light(i)
        offset = light_pos - rec.point
        light_dist = tm.length(offset)
        # A light sitting on the surface has no defined direction
        if light_dist > shadow_eps:
            to_light = offset / light_dist
            shadow_ray = Ray(origin=rec.point, direction=to_light)
            if intersect_scene_any(shadow_ray, shadow_eps, light_dist, hit_eps) == 0:
                total += light_contribution(material, rec.normal, to_light, to_viewer, intensity)

    return tm.clamp(total, 0, 255)


@ti.func
def trace_ray(ray: Ray, hit_eps: real, shadow_eps: real) -> ivec3:
    """Colour seen along a ray: the shaded nearest hit, or the background."""
    colour = get_background()
    rec = intersect_scene(ray, T_MIN, T_MAX, hit_eps)
    if rec.hit == 1:
        colour = shade_hit(ray, rec, hit_eps, shadow_eps)
    return colour


@ti.func
def render_pixel(x: ti.i32, y: ti.i32, width: ti.i32, samples: ti.i32, seed: ti.u32,
                 hit_eps: real, shadow_eps: real) -> ivec3:
    """Average of `samples` jittered samples, floor-divided per channel."""
    acc = ivec3(0, 0, 0)
    for s in range(samples):
        px, py = sample_position(x, y, s, width, seed)
        acc += trace_ray(get_pixel_ray(px, py), hit_eps, shadow_eps)
    return acc // samples


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(
    buffer: ti.types.ndarray(dtype=ti.u8, ndim=1),
    width: ti.i32,
    row_start: ti.i32,
    row_end: ti.i32,
    samples: ti.i32,
    seed: ti.u32,
    hit_eps: real,
    shadow_eps: real,
):
    """Render rows [row_start, row_end) into an RGBA8 buffer.

    Pixels are independent and write disjoint slots, so the outer loop runs
    in parallel.
    """
    for y, x in ti.ndrange((row_start, row_end), width):
        colour = render_pixel(x, y, width, samples, seed, hit_eps, shadow_eps)
        base = (y * width + x) * 4
        buffer[base + 0] = ti.cast(colour[0], ti.u8)
        buffer[base + 1] = ti.cast(colour[1], ti.u8)
        buffer[base + 2] = ti.cast(colour[2], ti.u8)
        buffer[base + 3] = ti.cast(255, ti.u8)


# Single-result probes run inside a one-iteration loop so the scene loops
# in the called functions stay serial
_probe_colour = ti.Vector.field(3, dtype=ti.i32, shape=())


@ti.kernel
def _trace_single_ray(origin: vec3, direction: vec3, hit_eps: real, shadow_eps: real):
    for _ in range(1):
        _probe_colour[None] = trace_ray(make_ray(origin, direction), hit_eps, shadow_eps)


@ti.kernel
def _render_single_pixel(x: ti.i32, y: ti.i32, width: ti.i32, samples: ti.i32, seed: ti.u32,
                         hit_eps: real, shadow_eps: real):
    for _ in range(1):
        _probe_colour[None] = render_pixel(x, y, width, samples, seed, hit_eps, shadow_eps)


# =============================================================================
# Public Rendering API
# =============================================================================


def _as_byte_array(buffer) -> np.ndarray:
    """View buffer as a flat, writable uint8 array without copying."""
    if isinstance(buffer, np.ndarray):
        if buffer.dtype != np.uint8:
            raise ValueError(f"Buffer dtype must be uint8, got {buffer.dtype}")
        if not buffer.flags.c_contiguous:
            raise ValueError("Buffer must be C-contiguous")
        arr = buffer.reshape(-1)
    else:
        try:
            arr = np.frombuffer(buffer, dtype=np.uint8)
        except TypeError as exc:
            raise ValueError(
                f"Buffer must be a numpy uint8 array or a writable bytes-like object, "
                f"got {type(buffer).__name__}"
            ) from exc
    if not arr.flags.writeable:
        raise ValueError("Buffer is read-only")
    return arr


def _check_sample_count(sample_count: int) -> int:
    if isinstance(sample_count, bool) or int(sample_count) != sample_count or sample_count < 1:
        raise ValueError(f"sample_count must be an integer >= 1, got {sample_count!r}")
    return int(sample_count)


def _check_rows(rows: tuple[int, int] | None, height: int) -> tuple[int, int]:
    if rows is None:
        return 0, height
    start, end = rows
    if not 0 <= start < end <= height:
        raise ValueError(f"Row range must satisfy 0 <= start < end <= {height}, got {rows}")
    return int(start), int(end)


def prepare_scene(scene: Scene, resolution: Resolution) -> Viewport:
    """Derive the viewport and upload scene into the kernel tables.

    The viewport is computed first, so a camera error is raised before any
    kernel state changes.

    Returns:
        The Viewport that was installed.
    """
    viewport = compute_viewport(scene.camera, resolution.width, resolution.height)
    setup_viewport(viewport)
    upload_scene(scene)
    return viewport


def _check_render_args(
    buffer,
    resolution: Resolution,
    sample_count: int,
    rows: tuple[int, int] | None,
) -> tuple[np.ndarray, int, int, int]:
    samples = _check_sample_count(sample_count)
    arr = _as_byte_array(buffer)
    if arr.size != resolution.buffer_size:
        raise ValueError(
            f"Buffer holds {arr.size} bytes; {resolution.width}x{resolution.height} "
            f"RGBA needs {resolution.buffer_size}"
        )
    row_start, row_end = _check_rows(rows, resolution.height)
    return arr, samples, row_start, row_end


def _launch(
    arr: np.ndarray,
    resolution: Resolution,
    samples: int,
    seed: int,
    tolerances: Tolerances,
    row_start: int,
    row_end: int,
) -> None:
    _render_rows(
        arr,
        resolution.width,
        row_start,
        row_end,
        samples,
        normalize_seed(seed),
        tolerances.hit_epsilon,
        tolerances.shadow_epsilon,
    )
    ti.sync()


def render(
    scene: Scene,
    buffer,
    resolution: Resolution,
    sample_count: int = 1,
    *,
    seed: int = 0,
    tolerances: Tolerances = DEFAULT_TOLERANCES,
    rows: tuple[int, int] | None = None,
) -> np.ndarray:
    """Render scene into an RGBA8 buffer.

    Args:
        scene: The scene snapshot.
        buffer: numpy uint8 array or writable bytes-like object of exactly
            width * height * 4 bytes. Prior contents are never read.
        resolution: Output size.
        sample_count: Samples per pixel; 1 traces only the exact pixel ray.
        seed: Jitter seed. Same seed, same image.
        tolerances: Self-intersection tolerances.
        rows: Optional (start, end) half-open band of rows to render.
            Rows outside the band are left untouched.

    Returns:
        The buffer as a flat numpy uint8 view.

    Raises:
        ValueError: On a bad sample count, buffer, row range or camera.
    """
    arr, samples, row_start, row_end = _check_render_args(buffer, resolution, sample_count, rows)
    prepare_scene(scene, resolution)
    _launch(arr, resolution, samples, seed, tolerances, row_start, row_end)
    return arr


def render_uploaded(
    buffer,
    resolution: Resolution,
    sample_count: int = 1,
    *,
    seed: int = 0,
    tolerances: Tolerances = DEFAULT_TOLERANCES,
    rows: tuple[int, int] | None = None,
) -> np.ndarray:
    """Render the scene already installed by prepare_scene().

    Takes the same arguments as render() minus the scene. Used to render a
    frame in several row bands with a single upload.
    """
    arr, samples, row_start, row_end = _check_render_args(buffer, resolution, sample_count, rows)
    _launch(arr, resolution, samples, seed, tolerances, row_start, row_end)
    return arr


def trace_ray_colour(
    origin,
    direction,
    tolerances: Tolerances = DEFAULT_TOLERANCES,
) -> tuple[int, int, int]:
    """Trace one ray against the currently uploaded scene.

    Used for testing and debugging. Call prepare_scene() (or render()) first.
    """
    _trace_single_ray(
        vec3(*[float(c) for c in origin]),
        vec3(*[float(c) for c in direction]),
        tolerances.hit_epsilon,
        tolerances.shadow_epsilon,
    )
    colour = _probe_colour[None]
    return (int(colour[0]), int(colour[1]), int(colour[2]))


def render_pixel_colour(
    x: int,
    y: int,
    resolution: Resolution,
    sample_count: int = 1,
    seed: int = 0,
    tolerances: Tolerances = DEFAULT_TOLERANCES,
) -> tuple[int, int, int]:
    """Render one pixel against the currently uploaded scene and viewport."""
    if not (0 <= x < resolution.width and 0 <= y < resolution.height):
        raise ValueError(f"Pixel ({x}, {y}) outside {resolution.width}x{resolution.height}")
    _render_single_pixel(
        x,
        y,
        resolution.width,
        _check_sample_count(sample_count),
        normalize_seed(seed),
        tolerances.hit_epsilon,
        tolerances.shadow_epsilon,
    )
    colour = _probe_colour[None]
    return (int(colour[0]), int(colour[1]), int(colour[2]))
