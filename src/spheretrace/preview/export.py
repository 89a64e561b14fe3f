"""Image export for quantized renders.

The renderer produces integer channel values (see core.renderer.quantize),
shape (height, width, 3), row 0 at the top. This module writes them out.

Supported formats:
    - PPM (plain-text P3, written directly)
    - PNG and anything else Pillow can write (8-bit RGB)

PPM output keeps channel values exactly as given, including values above
255. 8-bit formats cannot hold those, so the Pillow path clamps every
channel to [0, 255].

Example:
    >>> from src.spheretrace.preview.export import save_image
    >>> pixels = renderer.render()
    >>> save_image(pixels, "random_scene.ppm")
    >>> save_image(pixels, "random_scene.png")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)

PPM_MAX_VALUE = 255


def _check_pixels(pixels: npt.ArrayLike) -> npt.NDArray[np.int64]:
    array = np.asarray(pixels)
    if array.ndim != 3 or array.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (height, width, 3), got {array.shape}")
    return array.astype(np.int64)


def write_ppm(pixels: npt.ArrayLike, stream: TextIO) -> None:
    """Write an image as plain-text PPM (P3).

    Emits the header "P3", "<width> <height>", "255", then one "r g b" line
    per pixel in row-major order starting at the top-left pixel.

    Args:
        pixels: Integer image of shape (height, width, 3).
        stream: Text stream to write to.

    Raises:
        ValueError: If pixels does not have shape (height, width, 3).
    """
    array = _check_pixels(pixels)
    height, width, _ = array.shape

    stream.write(f"P3\n{width} {height}\n{PPM_MAX_VALUE}\n")
    for row in array:
        stream.writelines(f"{r} {g} {b}\n" for r, g, b in row)


def save_ppm(pixels: npt.ArrayLike, filepath: str | Path) -> None:
    """Save an image as a plain-text PPM file."""
    with open(filepath, "w", encoding="ascii") as f:
        write_ppm(pixels, f)
    logger.info("Saved PPM image to %s", filepath)


def to_uint8(pixels: npt.ArrayLike) -> npt.NDArray[np.uint8]:
    """Clamp integer channel values to [0, 255] and convert to uint8."""
    array = _check_pixels(pixels)
    return np.clip(array, 0, 255).astype(np.uint8)


def save_png(pixels: npt.ArrayLike, filepath: str | Path) -> None:
    """Save an image as an 8-bit RGB file with Pillow.

    The format follows the file extension (PNG for ".png").

    Args:
        pixels: Integer image of shape (height, width, 3). Channels are
            clamped to [0, 255].
        filepath: Output file path.
    """
    pil_image = PILImage.fromarray(to_uint8(pixels))
    pil_image.save(filepath)
    logger.info("Saved image to %s", filepath)


def save_image(pixels: npt.ArrayLike, filepath: str | Path) -> None:
    """Save an image, choosing the format from the file extension.

    ".ppm" writes plain-text PPM; anything else goes through Pillow.
    """
    if Path(filepath).suffix.lower() == ".ppm":
        save_ppm(pixels, filepath)
    else:
        save_png(pixels, filepath)
