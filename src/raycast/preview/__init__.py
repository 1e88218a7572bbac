"""Preview module for output and visualization.

Components:
    export: PNG export and image comparison for RGBA8 buffers
    interactive: Taichi GGUI window showing the published frame

Example:
    >>> from raycast.preview import save_png
    >>> save_png(buffer, resolution, "output.png")

For the interactive window:
    >>> from raycast.preview import InteractivePreview
    >>> preview = InteractivePreview(renderer.frame_buffer)
    >>> preview.run(renderer=renderer)
"""

from raycast.preview.export import buffer_to_image, compute_rmse, load_png, save_png
from raycast.preview.interactive import InteractivePreview, is_display_available

__all__ = [
    "InteractivePreview",
    "buffer_to_image",
    "compute_rmse",
    "is_display_available",
    "load_png",
    "save_png",
]
