"""Kernel-side viewport state and primary ray generation.

setup_viewport() copies a Viewport computed in Python into Taichi fields;
get_pixel_ray() then builds the primary ray for any fractional pixel
position inside a kernel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raycast.camera.viewport import Camera, compute_viewport
    >>> from raycast.camera.pinhole import setup_viewport, get_pixel_ray
    >>>
    >>> camera = Camera(position=(0, 0, 0), direction=(0, 0, 1), fov=90.0)
    >>> setup_viewport(compute_viewport(camera, 64, 48))
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_pixel_ray(10.0, 20.0)
"""

import taichi as ti

from raycast.camera.viewport import Viewport
from raycast.core.ray import Ray, make_ray, real, vec3

# =============================================================================
# Taichi Fields for Viewport State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=real, shape=())
_top_left = ti.Vector.field(3, dtype=real, shape=())
_x_stride = ti.Vector.field(3, dtype=real, shape=())
_y_stride = ti.Vector.field(3, dtype=real, shape=())


def setup_viewport(viewport: Viewport) -> None:
    """Store viewport geometry for use by kernels.

    Args:
        viewport: Geometry from compute_viewport().
    """
    _camera_origin[None] = list(viewport.origin)
    _top_left[None] = list(viewport.top_left)
    _x_stride[None] = list(viewport.x_stride)
    _y_stride[None] = list(viewport.y_stride)


@ti.func
def get_pixel_ray(px: real, py: real) -> Ray:
    """Generate the primary ray through a pixel-space position.

    Integer coordinates address the pixel points themselves; fractional parts
    move across the pixel along the strides.

    Args:
        px: Horizontal pixel coordinate (0 = left column).
        py: Vertical pixel coordinate (0 = top row).

    Returns:
        A unit-direction Ray from the eye through the screen point.
    """
    origin = _camera_origin[None]
    point = _top_left[None] + _x_stride[None] * px + _y_stride[None] * py
    return make_ray(origin, point - origin)


@ti.func
def get_camera_origin() -> vec3:
    """Get the eye position."""
    return _camera_origin[None]


def get_viewport_info() -> dict[str, tuple[float, float, float]]:
    """Read the stored viewport back from the fields, for debugging.

    Returns:
        Dictionary with origin, top_left, x_stride and y_stride.
    """
    fields = {
        "origin": _camera_origin,
        "top_left": _top_left,
        "x_stride": _x_stride,
        "y_stride": _y_stride,
    }
    info = {}
    for name, field in fields.items():
        v = field[None]
        info[name] = (float(v[0]), float(v[1]), float(v[2]))
    return info
