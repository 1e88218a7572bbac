"""Image export utilities for rendered RGBA8 buffers.

Supported formats:
    - PNG (8-bit RGBA via Pillow)

Example:
    >>> from raycast.preview.export import save_png
    >>> save_png(buffer, resolution, "output.png")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from raycast.config import Resolution


def buffer_to_image(buffer, resolution: Resolution) -> npt.NDArray[np.uint8]:
    """View a flat RGBA8 buffer as an (height, width, 4) array.

    Args:
        buffer: numpy uint8 array or bytes-like object of width*height*4 bytes.
        resolution: Image size.

    Returns:
        A reshaped view (no copy for numpy input).

    Raises:
        ValueError: If the buffer size does not match the resolution.
    """
    if isinstance(buffer, np.ndarray):
        arr = buffer.astype(np.uint8, copy=False).reshape(-1)
    else:
        arr = np.frombuffer(buffer, dtype=np.uint8)
    if arr.size != resolution.buffer_size:
        raise ValueError(
            f"Buffer holds {arr.size} bytes; expected {resolution.buffer_size} "
            f"for {resolution.width}x{resolution.height} RGBA"
        )
    return arr.reshape(resolution.height, resolution.width, 4)


def save_png(buffer, resolution: Resolution, filepath: str) -> None:
    """Save an RGBA8 buffer as a PNG file.

    Args:
        buffer: Row-major RGBA8 pixels.
        resolution: Image size.
        filepath: Output file path (should end in .png).
    """
    image = buffer_to_image(buffer, resolution)
    pil_image = PILImage.fromarray(np.ascontiguousarray(image))
    pil_image.save(filepath)


def load_png(filepath: str) -> npt.NDArray[np.uint8]:
    """Load a PNG as an (height, width, 4) uint8 array."""
    with PILImage.open(filepath) as img:
        return np.asarray(img.convert("RGBA"), dtype=np.uint8).copy()


def compute_rmse(image_a, image_b) -> float:
    """Root mean squared error between two images of equal shape.

    Args:
        image_a: First image (any numeric dtype).
        image_b: Second image with the same shape.

    Returns:
        The RMSE over all channels, in the images' units.

    Raises:
        ValueError: If the shapes differ.
    """
    a = np.asarray(image_a, dtype=np.float64)
    b = np.asarray(image_b, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"Image shapes differ: {a.shape} vs {b.shape}")
    return float(np.sqrt(np.mean((a - b) ** 2)))
