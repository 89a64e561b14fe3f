"""Preview module for image output and visualization.

Components:
    display: Matplotlib-based preview display
    export: PPM and Pillow (PNG) image export

Neither module touches Taichi; both work on the NumPy arrays returned by
the renderer.

Example:
    >>> from src.spheretrace.preview import save_image, show_preview
    >>> pixels = renderer.render()
    >>> save_image(pixels, "output.png")
    >>> show_preview(pixels)
"""

from src.spheretrace.preview.display import prepare_for_display, show_preview
from src.spheretrace.preview.export import (
    save_image,
    save_png,
    save_ppm,
    to_uint8,
    write_ppm,
)

__all__ = [
    # Display functions
    "show_preview",
    "prepare_for_display",
    # Export functions
    "write_ppm",
    "save_ppm",
    "save_png",
    "save_image",
    "to_uint8",
]
