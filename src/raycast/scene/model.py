"""Immutable scene description.

These plain dataclasses are the Python-side scene snapshot. They validate
their inputs on construction and never change afterwards; render() uploads a
snapshot into the Taichi tables each time it runs.

This module declares no Taichi fields and can be imported before ti.init().

Example:
    >>> from raycast.camera.viewport import Camera
    >>> from raycast.scene.model import Material, PointLight, Scene, Sphere
    >>> red = Material(colour=(255, 0, 0), diffuse=0.9, specular=0.3, specular_exp=16)
    >>> scene = Scene(
    ...     camera=Camera(position=(0, 0, 0), direction=(0, 0, 1), fov=60),
    ...     primitives=(Sphere(center=(0, 0, 5), radius=1.0, material=red),),
    ...     lights=(PointLight(position=(2, 2, 0), colour=(255, 255, 255), intensity=1.0),),
    ...     ambient=0.1,
    ... )
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

from raycast.camera.viewport import Camera, Vector, _as_vector
from raycast.config import DEFAULT_TOLERANCES, Resolution, Tolerances

if TYPE_CHECKING:
    import numpy as np

Colour = tuple[int, int, int]


def _as_colour(value, name: str) -> Colour:
    try:
        channels = tuple(value)
    except TypeError as exc:
        raise ValueError(f"{name} must be three integers, got {value!r}") from exc
    if len(channels) != 3:
        raise ValueError(f"{name} must be three integers, got {value!r}")
    result = []
    for c in channels:
        if isinstance(c, bool) or int(c) != c or not 0 <= c <= 255:
            raise ValueError(f"{name} channels must be integers in [0, 255], got {value!r}")
        result.append(int(c))
    return (result[0], result[1], result[2])


def _check_unit_interval(value: float, name: str) -> float:
    value = float(value)
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be in [0, 1], got {value}")
    return value


@dataclass(frozen=True)
class Material:
    """Surface appearance owned by a primitive.

    Attributes:
        colour: Base colour (r, g, b), each in [0, 255].
        diffuse: Diffuse coefficient in [0, 1].
        specular: Specular coefficient in [0, 1].
        specular_exp: Shininess exponent, >= 0.
    """

    colour: Colour
    diffuse: float
    specular: float
    specular_exp: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "colour", _as_colour(self.colour, "Material colour"))
        object.__setattr__(self, "diffuse", _check_unit_interval(self.diffuse, "diffuse"))
        object.__setattr__(self, "specular", _check_unit_interval(self.specular, "specular"))
        exp = float(self.specular_exp)
        if not exp >= 0.0 or math.isinf(exp):
            raise ValueError(f"specular_exp must be finite and >= 0, got {self.specular_exp}")
        object.__setattr__(self, "specular_exp", exp)


@dataclass(frozen=True)
class Sphere:
    """A sphere primitive."""

    center: Vector
    radius: float
    material: Material

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", _as_vector(self.center, "Sphere center"))
        radius = float(self.radius)
        if not radius > 0.0 or math.isinf(radius):
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")
        object.__setattr__(self, "radius", radius)


@dataclass(frozen=True)
class Plane:
    """An infinite plane through a point. The normal is normalised on construction."""

    point: Vector
    normal: Vector
    material: Material

    def __post_init__(self) -> None:
        object.__setattr__(self, "point", _as_vector(self.point, "Plane point"))
        nx, ny, nz = _as_vector(self.normal, "Plane normal")
        length = math.sqrt(nx * nx + ny * ny + nz * nz)
        if length == 0.0:
            raise ValueError("Plane normal must be non-zero")
        object.__setattr__(self, "normal", (nx / length, ny / length, nz / length))


Primitive = Union[Sphere, Plane]


@dataclass(frozen=True)
class PointLight:
    """A point light. The colour is carried for scene files but does not tint shading."""

    position: Vector
    colour: Colour
    intensity: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _as_vector(self.position, "Light position"))
        object.__setattr__(self, "colour", _as_colour(self.colour, "Light colour"))
        intensity = float(self.intensity)
        if not intensity >= 0.0 or math.isinf(intensity):
            raise ValueError(f"Light intensity must be finite and >= 0, got {self.intensity}")
        object.__setattr__(self, "intensity", intensity)


@dataclass(frozen=True)
class Scene:
    """Everything needed to render one image.

    Attributes:
        camera: The viewing camera.
        primitives: Spheres and planes, tested in this order.
        lights: Point lights.
        ambient: Ambient level in [0, 1].
        background: Colour of pixels whose primary ray hits nothing.
    """

    camera: Camera
    primitives: tuple[Primitive, ...] = ()
    lights: tuple[PointLight, ...] = ()
    ambient: float = 0.0
    background: Colour = field(default=(0, 0, 0))

    def __post_init__(self) -> None:
        if not isinstance(self.camera, Camera):
            raise ValueError(f"Scene camera must be a Camera, got {type(self.camera).__name__}")
        primitives = tuple(self.primitives)
        for prim in primitives:
            if not isinstance(prim, (Sphere, Plane)):
                raise ValueError(f"Unsupported primitive type: {type(prim).__name__}")
        lights = tuple(self.lights)
        for light in lights:
            if not isinstance(light, PointLight):
                raise ValueError(f"Unsupported light type: {type(light).__name__}")
        object.__setattr__(self, "primitives", primitives)
        object.__setattr__(self, "lights", lights)
        object.__setattr__(self, "ambient", _check_unit_interval(self.ambient, "ambient"))
        object.__setattr__(self, "background", _as_colour(self.background, "background"))

    @property
    def spheres(self) -> tuple[Sphere, ...]:
        return tuple(p for p in self.primitives if isinstance(p, Sphere))

    @property
    def planes(self) -> tuple[Plane, ...]:
        return tuple(p for p in self.primitives if isinstance(p, Plane))

    def render(
        self,
        buffer,
        resolution: Resolution,
        sample_count: int = 1,
        *,
        seed: int = 0,
        tolerances: Tolerances = DEFAULT_TOLERANCES,
        rows: tuple[int, int] | None = None,
    ) -> np.ndarray:
        """Render this scene into buffer. See raycast.core.integrator.render()."""
        # Deferred: the integrator declares Taichi fields
        from raycast.core.integrator import render

        return render(
            self,
            buffer,
            resolution,
            sample_count,
            seed=seed,
            tolerances=tolerances,
            rows=rows,
        )
