"""Point light storage and scene environment (ambient level, background).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raycast.scene.lights import add_point_light, clear_lights, set_environment
    >>> clear_lights()
    >>> add_point_light((0, 5, 0), (255, 255, 255), 1.0)
    >>> set_environment(ambient=0.1, background=(0, 0, 0))
"""

import taichi as ti

from raycast.core.ray import ivec3, real

# Maximum number of point lights supported in the scene
MAX_LIGHTS = 256

light_positions = ti.Vector.field(3, dtype=real, shape=MAX_LIGHTS)
# Carried for completeness; shading does not tint by light colour
light_colours = ti.Vector.field(3, dtype=ti.i32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=real, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())

_ambient = ti.field(dtype=real, shape=())
_background = ti.Vector.field(3, dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all point lights."""
    num_lights[None] = 0


def add_point_light(position, colour, intensity: float) -> int:
    """Append a point light.

    Args:
        position: Light position (three floats).
        colour: Light colour (three ints 0-255).
        intensity: Non-negative intensity multiplier.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = [float(c) for c in position]
    light_colours[idx] = [int(c) for c in colour]
    light_intensities[idx] = float(intensity)
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of point lights."""
    return int(num_lights[None])


def set_environment(ambient: float, background) -> None:
    """Set the ambient level and the colour of rays that hit nothing."""
    _ambient[None] = float(ambient)
    _background[None] = [int(c) for c in background]


def get_environment() -> tuple[float, tuple[int, int, int]]:
    """Read back (ambient, background)."""
    bg = _background[None]
    return float(_ambient[None]), (int(bg[0]), int(bg[1]), int(bg[2]))


@ti.func
def get_ambient() -> real:
    return _ambient[None]


@ti.func
def get_background() -> ivec3:
    return _background[None]


@ti.func
def get_light(i: ti.i32):
    """Position and intensity of light i."""
    return light_positions[i], light_intensities[i]


@ti.func
def light_count() -> ti.i32:
    return num_lights[None]
