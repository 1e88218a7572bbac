"""Interactive preview window using Taichi GGUI.

The window shows the front buffer of a FrameBuffer, re-reading it every
frame, so it always displays the most recently published frame and never a
partial one. When given a FrameRenderer it renders one band of rows per
window frame, swaps in the completed frame, then idles until renderer.scene
changes.

Example:
    >>> from raycast.preview.interactive import InteractivePreview
    >>>
    >>> preview = InteractivePreview(renderer.frame_buffer)
    >>> preview.run(renderer=renderer)  # Blocks until the window is closed
"""

from __future__ import annotations

import os
from datetime import datetime
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

if TYPE_CHECKING:
    from collections.abc import Generator

    import numpy.typing as npt

    from raycast.core.framebuffer import FrameBuffer, FrameRenderer
    from raycast.scene.model import Scene


class InteractivePreview:
    """Interactive preview window for a FrameBuffer.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
        display_image: Taichi field with the displayed RGB image (float).

    Keys:
        s: Save the displayed frame to a timestamped PNG.
        Escape: Close the window.
    """

    def __init__(
        self,
        frame_buffer: FrameBuffer,
        *,
        title: str = "raycast",
    ) -> None:
        """Prepare the preview. The window opens lazily on first use.

        Args:
            frame_buffer: Source of published frames.
            title: Window title.
        """
        self._frame_buffer = frame_buffer
        self.width = frame_buffer.resolution.width
        self.height = frame_buffer.resolution.height
        self._title = title

        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None

        # Frame in progress and the scene of the last published frame
        self._bands: Generator[tuple[int, int], None, None] | None = None
        self._pending_scene: Scene | None = None
        self._published_scene: Scene | None = None

        # Taichi fields are indexed (x, y) with y pointing up
        self.display_image: ti.MatrixField = ti.Vector.field(
            3, dtype=ti.f32, shape=(self.width, self.height)
        )

    def _initialize_window(self) -> None:
        if self._window is not None:
            return
        self._window = ti.ui.Window(
            name=self._title,
            res=(self.width, self.height),
            vsync=True,
        )
        self._canvas = self._window.get_canvas()

    @property
    def window(self) -> ti.ui.Window:
        """Get the Taichi GGUI window, initializing if needed."""
        self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> ti.ui.Canvas:
        self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    def update_image(self, rgba: npt.NDArray[np.uint8]) -> None:
        """Load a row-major RGBA8 frame into the display field.

        Args:
            rgba: Flat buffer or (height, width, 4) uint8 array.

        Raises:
            ValueError: If the size doesn't match the window.
        """
        expected = self.width * self.height * 4
        if rgba.size != expected:
            raise ValueError(f"Frame holds {rgba.size} bytes, expected {expected}")

        image = rgba.reshape(self.height, self.width, 4)[:, :, :3].astype(np.float32) / 255.0
        # NumPy rows run top-down, Taichi y runs bottom-up
        image_xy = np.ascontiguousarray(np.transpose(np.flipud(image), (1, 0, 2)))
        self.display_image.from_numpy(image_xy)

    def refresh(self) -> None:
        """Re-read the front buffer into the display field."""
        self.update_image(self._frame_buffer.read_buffer())

    def is_running(self) -> bool:
        return self.window.running

    def show_frame(self) -> None:
        """Present the display field."""
        self.canvas.set_image(self.display_image)
        self.window.show()

    def _handle_events(self) -> None:
        for event in self.window.get_events(ti.ui.PRESS):
            if event.key == ti.ui.ESCAPE:
                self.close()
            elif event.key == "s":
                self.export_png()

    def advance(self, renderer: FrameRenderer) -> bool:
        """Render the next band of the pending frame, if there is one.

        A new frame is started only when renderer.scene is not the scene of
        the last published frame, so an unchanged scene is rendered once.

        Returns:
            True if a band was rendered.
        """
        if self._bands is None:
            if renderer.scene is self._published_scene:
                return False
            self._pending_scene = renderer.scene
            self._bands = renderer.render_frame_progressive()
        try:
            next(self._bands)
        except StopIteration:
            self._bands = None
            self._published_scene = self._pending_scene
            return False
        return True

    def run(self, renderer: FrameRenderer | None = None) -> None:
        """Run the window event loop until the window is closed.

        Args:
            renderer: Optional renderer advanced by one band per window
                frame. Assigning a new scene to renderer.scene starts a new
                frame once the current one is published.
        """
        self._initialize_window()

        while self.is_running():
            if renderer is not None:
                self.advance(renderer)
            self._handle_events()
            self.refresh()
            self.show_frame()

    def close(self) -> None:
        if self._window is not None:
            self._window.running = False

    def export_png(self, filepath: str | None = None) -> str:
        """Save the currently published frame.

        Args:
            filepath: Output path. Defaults to raycast_YYYYMMDD_HHMMSS.png.

        Returns:
            The path written.
        """
        from raycast.preview.export import save_png

        if filepath is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filepath = f"raycast_{timestamp}.png"
        save_png(self._frame_buffer.read_buffer(), self._frame_buffer.resolution, filepath)
        print(f"Exported: {filepath}")
        return filepath

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if os.name == "nt":
            return True

        # macOS has a display unless this is an SSH session without forwarding
        if os.uname().sysname == "Darwin":
            return not (os.environ.get("SSH_CONNECTION") and not display)

        return bool(display or wayland)


def is_display_available() -> bool:
    """Module-level shortcut for InteractivePreview.is_display_available()."""
    return InteractivePreview.is_display_available()
