"""Materials module for local illumination.

Components:
    phong: Material struct and the ambient, diffuse and specular terms,
        evaluated on 8-bit integer colour channels

All shading is implemented as Taichi functions for kernel execution.
"""

from .phong import (
    Material,
    ambient_colour,
    light_contribution,
    phong_factors,
    scale_colour,
)

__all__ = [
    "Material",
    "ambient_colour",
    "light_contribution",
    "phong_factors",
    "scale_colour",
]
