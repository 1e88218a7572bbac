"""Double-buffered frame presentation.

A FrameBuffer holds two RGBA8 buffers. The renderer writes into the rear
buffer while readers (a preview window, an exporter) copy the front buffer;
swap() publishes a finished frame by exchanging the two under a lock, so a
reader never observes a partially rendered frame.

FrameRenderer uploads the scene once per frame, renders the rear buffer one
band of rows at a time and swaps only after the last band. The uploaded
scene tables are shared, so only one frame may be in progress at a time.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from raycast.config import Resolution
    >>> from raycast.core.framebuffer import FrameRenderer
    >>> from raycast.scene.presets import create_demo_scene
    >>>
    >>> renderer = FrameRenderer(create_demo_scene(), Resolution(320, 240), sample_count=4)
    >>> renderer.render_frame()
    >>> image = renderer.get_image_numpy()  # (240, 320, 4) uint8
"""

import threading
from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from raycast.config import DEFAULT_TOLERANCES, Resolution, Tolerances
from raycast.core.integrator import prepare_scene, render_uploaded
from raycast.scene.model import Scene

# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]

# Rows rendered per kernel launch between progress reports
DEFAULT_BAND_ROWS = 32


class FrameBuffer:
    """Front and rear RGBA8 buffers with an atomic swap.

    Both buffers start filled with 255 (opaque white).
    """

    def __init__(self, resolution: Resolution) -> None:
        self._resolution = resolution
        self._front = np.full(resolution.buffer_size, 255, dtype=np.uint8)
        self._rear = np.full(resolution.buffer_size, 255, dtype=np.uint8)
        self._lock = threading.Lock()

    @property
    def resolution(self) -> Resolution:
        return self._resolution

    def read_buffer(self) -> npt.NDArray[np.uint8]:
        """Copy of the most recently published frame."""
        with self._lock:
            return self._front.copy()

    def write_buffer(self) -> npt.NDArray[np.uint8]:
        """The rear buffer. Only the rendering side may write to it."""
        return self._rear

    def swap(self) -> None:
        """Publish the rear buffer as the new front buffer."""
        with self._lock:
            self._front, self._rear = self._rear, self._front


class FrameRenderer:
    """Renders a scene into a FrameBuffer, one complete frame at a time.

    Attributes:
        scene: The scene rendered by the next frame.
        sample_count: Samples per pixel.
        seed: Jitter seed, reused for every frame.
        band_rows: Rows rendered per kernel launch.
    """

    def __init__(
        self,
        scene: Scene,
        resolution: Resolution,
        sample_count: int = 8,
        *,
        seed: int = 0,
        tolerances: Tolerances = DEFAULT_TOLERANCES,
        band_rows: int = DEFAULT_BAND_ROWS,
    ) -> None:
        if band_rows < 1:
            raise ValueError(f"band_rows must be at least 1, got {band_rows}")
        self.scene = scene
        self.sample_count = sample_count
        self.seed = seed
        self.tolerances = tolerances
        self.band_rows = band_rows
        self._frame_buffer = FrameBuffer(resolution)
        self._frame_count = 0

    @property
    def resolution(self) -> Resolution:
        return self._frame_buffer.resolution

    @property
    def frame_buffer(self) -> FrameBuffer:
        return self._frame_buffer

    @property
    def frame_count(self) -> int:
        """Number of frames published so far."""
        return self._frame_count

    def _bands(self) -> Generator[tuple[int, int], None, None]:
        height = self.resolution.height
        for start in range(0, height, self.band_rows):
            yield start, min(start + self.band_rows, height)

    def render_frame_progressive(self) -> Generator[tuple[int, int], None, None]:
        """Render one frame, yielding (rows_done, total_rows) after each band.

        The frame is published when the generator is exhausted. Abandoning
        the generator early leaves the previous frame on display.
        """
        rear = self._frame_buffer.write_buffer()
        total = self.resolution.height
        prepare_scene(self.scene, self.resolution)
        for start, end in self._bands():
            render_uploaded(
                rear,
                self.resolution,
                self.sample_count,
                seed=self.seed,
                tolerances=self.tolerances,
                rows=(start, end),
            )
            yield end, total

        self._frame_buffer.swap()
        self._frame_count += 1

    def render_frame(self, callback: ProgressCallback | None = None) -> None:
        """Render and publish one frame.

        Args:
            callback: Optional function called after each band with
                (rows_done, total_rows).
        """
        for done, total in self.render_frame_progressive():
            if callback is not None:
                callback(done, total)

    def get_image_numpy(self) -> npt.NDArray[np.uint8]:
        """The published frame as an (height, width, 4) uint8 array."""
        res = self.resolution
        return self._frame_buffer.read_buffer().reshape(res.height, res.width, 4)

    def save_image(self, filepath: str) -> None:
        """Save the published frame as a PNG file."""
        from raycast.preview.export import save_png

        save_png(self._frame_buffer.read_buffer(), self.resolution, filepath)

    def __repr__(self) -> str:
        res = self.resolution
        return (
            f"FrameRenderer(width={res.width}, height={res.height}, "
            f"samples={self.sample_count}, frames={self.frame_count})"
        )
