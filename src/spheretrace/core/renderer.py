"""Batch renderer: configuration, scanline scheduling and quantization.

The Renderer wraps the integrator's render target and kernel. A render
seeds one random stream per scanline from the configured seed and runs the
render kernel over bands of scanlines, reporting progress after each band.
Because every scanline owns its stream, the image for a given seed is the
same whatever the band size or the number of worker threads.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretrace.core.renderer import RenderConfig, Renderer
    >>> from src.spheretrace.scene.random_scene import create_random_scene, create_default_camera
    >>> from src.spheretrace.camera.thin_lens import setup_camera
    >>>
    >>> create_random_scene(seed=7)
    >>> setup_camera(create_default_camera(2.0))
    >>> renderer = Renderer(RenderConfig(width=200, height=100, samples_per_pixel=10))
    >>> pixels = renderer.render()  # (100, 200, 3) int32
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from src.spheretrace.camera.thin_lens import is_camera_ready
from src.spheretrace.core.integrator import (
    MAX_DEPTH,
    MAX_IMAGE_HEIGHT,
    MAX_IMAGE_WIDTH,
    get_linear_image_numpy,
    render_rows,
    setup_render_target,
)
from src.spheretrace.core.sampling import seed_streams

logger = logging.getLogger(__name__)

# Callback receives (rows_done, rows_total)
ProgressCallback = Callable[[int, int], None]


@dataclass
class RenderConfig:
    """Parameters of a render.

    Attributes:
        width: Image width in pixels, in [1, 2048].
        height: Image height in pixels, in [1, 2048].
        samples_per_pixel: Camera rays averaged per pixel, at least 1.
        max_depth: Bounce budget per path, at least 0.
        seed: Seed of the per-scanline random streams.

    Raises:
        ValueError: If any parameter is out of range.
    """

    width: int
    height: int
    samples_per_pixel: int
    max_depth: int = MAX_DEPTH
    seed: int = 0

    def __post_init__(self) -> None:
        if not 1 <= self.width <= MAX_IMAGE_WIDTH:
            raise ValueError(f"width must be in [1, {MAX_IMAGE_WIDTH}], got {self.width}")
        if not 1 <= self.height <= MAX_IMAGE_HEIGHT:
            raise ValueError(f"height must be in [1, {MAX_IMAGE_HEIGHT}], got {self.height}")
        if self.samples_per_pixel < 1:
            raise ValueError(
                f"samples_per_pixel must be at least 1, got {self.samples_per_pixel}"
            )
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height


def gamma_correct(image: npt.ArrayLike) -> npt.NDArray[np.float32]:
    """Apply gamma 2 encoding (square root) to a linear image."""
    return np.sqrt(np.asarray(image, dtype=np.float32))


def quantize(image: npt.ArrayLike) -> npt.NDArray[np.int32]:
    """Convert a linear image to integer channel values.

    Computes floor(255.99 * sqrt(c)) per channel. Values are not clamped:
    a channel above 1.0 maps above 255.

    Args:
        image: Linear colors, any shape.

    Returns:
        Integer array of the same shape.
    """
    return np.floor(np.float32(255.99) * gamma_correct(image)).astype(np.int32)


class Renderer:
    """Renders the current scene through the current camera.

    The scene and camera live in Taichi fields (see scene.manager and
    camera.thin_lens) and are read-only during a render.

    Attributes:
        config: The render parameters.
    """

    def __init__(self, config: RenderConfig) -> None:
        self.config = config
        self._image: npt.NDArray[np.float32] | None = None

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.config.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.config.height

    def render(
        self,
        rows_per_batch: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> npt.NDArray[np.int32]:
        """Render the full image.

        Args:
            rows_per_batch: Scanlines per kernel launch. Defaults to the whole
                image in one launch.
            callback: Optional function called after each band with
                (rows_done, rows_total).

        Returns:
            The quantized image, shape (height, width, 3), row 0 at the top.

        Raises:
            RuntimeError: If the camera has not been set up.
            ValueError: If rows_per_batch is less than 1.
        """
        if not is_camera_ready():
            raise RuntimeError("Camera not set up. Call setup_camera() first.")

        cfg = self.config
        rows = cfg.height if rows_per_batch is None else rows_per_batch
        if rows < 1:
            raise ValueError(f"rows_per_batch must be at least 1, got {rows}")

        setup_render_target(cfg.width, cfg.height)
        seed_streams(cfg.seed)

        logger.info(
            "Rendering %dx%d, %d spp, max depth %d, seed %d",
            cfg.width,
            cfg.height,
            cfg.samples_per_pixel,
            cfg.max_depth,
            cfg.seed,
        )
        start = time.perf_counter()

        for row_start in range(0, cfg.height, rows):
            row_end = min(row_start + rows, cfg.height)
            render_rows(row_start, row_end, cfg.samples_per_pixel, cfg.max_depth)
            logger.debug("Rendered scanlines %d-%d", row_start, row_end - 1)
            if callback is not None:
                callback(row_end, cfg.height)

        # The render target is shared by every Renderer; keep this image
        self._image = get_linear_image_numpy()
        logger.info("Render finished in %.2fs", time.perf_counter() - start)
        return self.get_image_quantized()

    def _rendered_image(self) -> npt.NDArray[np.float32]:
        if self._image is None:
            raise RuntimeError("Nothing rendered yet. Call render() first.")
        return self._image

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the averaged linear colors.

        Returns:
            Array of shape (height, width, 3), dtype float32, not clamped,
            row 0 at the top. The image is the one this renderer
            produced, even if another render ran since.

        Raises:
            RuntimeError: If render() has not been called.
        """
        return self._rendered_image().copy()

    def get_image_quantized(self) -> npt.NDArray[np.int32]:
        """Get the gamma-corrected integer image (see quantize).

        Raises:
            RuntimeError: If render() has not been called.
        """
        return quantize(self.get_image_numpy())
