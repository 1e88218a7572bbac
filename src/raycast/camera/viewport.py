"""Camera description and viewport derivation (Python side, NumPy).

The viewport is a virtual screen centred at ``position + direction``. Its
half width is ``|direction| * tan(fov / 2)``, so the length of the direction
vector acts as the focal distance. The half height follows from the aspect
ratio of the target resolution.

The screen basis is built against the fixed world-up axis (0, 1, 0):

- right = normalize(up_world x direction)
- up = normalize(direction x right)

A direction parallel to world-up leaves ``right`` undefined. That is a
configuration error and is reported once by compute_viewport(), before any
pixel is rendered.

Example:
    >>> camera = Camera(position=(0.0, 0.0, -1.0), direction=(0.0, 0.0, 1.0), fov=90.0)
    >>> vp = compute_viewport(camera, 100, 100)
    >>> vp.top_left
    (-1.0, 1.0, 0.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

Vector = tuple[float, float, float]

WORLD_UP = np.array([0.0, 1.0, 0.0], dtype=np.float64)

# Relative size of (world_up x direction) below which the two are parallel
PARALLEL_TOLERANCE = 1e-12


@dataclass(frozen=True)
class Camera:
    """A pinhole camera.

    Attributes:
        position: Eye position in world space.
        direction: Look direction. Need not be unit length; its length is the
            distance from the eye to the virtual screen.
        fov: Field of view in degrees, spanning the screen width.
    """

    position: Vector
    direction: Vector
    fov: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _as_vector(self.position, "position"))
        object.__setattr__(self, "direction", _as_vector(self.direction, "direction"))
        if not 0.0 < self.fov < 180.0:
            raise ValueError(f"Camera fov must be in (0, 180) degrees, got {self.fov}")
        if math.hypot(*self.direction) == 0.0:
            raise ValueError("Camera direction must be non-zero")


@dataclass(frozen=True)
class Viewport:
    """Screen geometry derived from a camera and a resolution.

    Attributes:
        origin: Eye position shared by all primary rays.
        right: Unit vector pointing right across the screen.
        up: Unit vector pointing up the screen.
        top_left: World position of pixel (0, 0).
        x_stride: World offset from one pixel column to the next.
        y_stride: World offset from one pixel row to the next (points down).
    """

    origin: Vector
    right: Vector
    up: Vector
    top_left: Vector
    x_stride: Vector
    y_stride: Vector


def _as_vector(value, name: str) -> Vector:
    try:
        x, y, z = (float(c) for c in value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be three numbers, got {value!r}") from exc
    return (x, y, z)


def _tuple(v: np.ndarray) -> Vector:
    return (float(v[0]), float(v[1]), float(v[2]))


def compute_basis(direction: Vector) -> tuple[Vector, Vector]:
    """Compute the screen's right and up unit vectors.

    Args:
        direction: Camera look direction (non-zero).

    Returns:
        Tuple (right, up).

    Raises:
        ValueError: If direction is parallel to world-up.
    """
    d = np.array(direction, dtype=np.float64)
    right = np.cross(WORLD_UP, d)
    right_len = np.linalg.norm(right)
    if right_len <= PARALLEL_TOLERANCE * np.linalg.norm(d):
        raise ValueError(
            f"Camera direction {tuple(direction)} is parallel to world up (0, 1, 0); "
            "the screen orientation is undefined"
        )
    right = right / right_len

    up = np.cross(d, right)
    up = up / np.linalg.norm(up)
    return _tuple(right), _tuple(up)


def compute_viewport(camera: Camera, width: int, height: int) -> Viewport:
    """Derive the screen origin and per-pixel strides.

    Args:
        camera: The camera to derive from.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The Viewport for this camera and resolution.

    Raises:
        ValueError: If the resolution is not positive or the camera looks
            straight up or down.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Resolution must be positive, got {width}x{height}")

    right_t, up_t = compute_basis(camera.direction)
    right = np.array(right_t)
    up = np.array(up_t)

    position = np.array(camera.position, dtype=np.float64)
    direction = np.array(camera.direction, dtype=np.float64)

    half_width = np.linalg.norm(direction) * math.tan(math.radians(camera.fov) / 2.0)
    half_height = half_width * height / width

    screen_center = position + direction
    top_left = screen_center - right * half_width + up * half_height

    x_stride = right * (2.0 * half_width / width)
    # Negated so increasing row index moves down the screen
    y_stride = up * (-2.0 * half_height / height)

    return Viewport(
        origin=_tuple(position),
        right=right_t,
        up=up_t,
        top_left=_tuple(top_left),
        x_stride=_tuple(x_stride),
        y_stride=_tuple(y_stride),
    )


def pixel_point(viewport: Viewport, px: float, py: float) -> Vector:
    """World position of (fractional) pixel coordinates on the screen."""
    p = (
        np.array(viewport.top_left)
        + np.array(viewport.x_stride) * px
        + np.array(viewport.y_stride) * py
    )
    return _tuple(p)
