"""Camera module for view and primary ray generation.

Components:
    viewport: Camera dataclass and NumPy derivation of the screen basis,
        top-left corner and per-pixel strides
    pinhole: Taichi fields holding the viewport and the get_pixel_ray()
        kernel function

Only the field-free viewport module is re-exported here. Import
raycast.camera.pinhole after Taichi has been initialised.
"""

from .viewport import (
    WORLD_UP,
    Camera,
    Viewport,
    compute_basis,
    compute_viewport,
    pixel_point,
)

__all__ = [
    "Camera",
    "Viewport",
    "WORLD_UP",
    "compute_basis",
    "compute_viewport",
    "pixel_point",
]
