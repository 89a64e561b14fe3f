"""Matplotlib-based preview display for rendered images.

Example:
    >>> from src.spheretrace.preview.display import show_preview
    >>> pixels = renderer.render()
    >>> show_preview(renderer.get_image_numpy(), title="Random spheres")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from matplotlib.figure import Figure


def prepare_for_display(image: npt.ArrayLike) -> npt.NDArray[np.float32]:
    """Convert a render to floats in [0, 1] for imshow.

    Integer images (quantized renders) are scaled by 1/255. Float images are
    taken as linear colors and gamma 2 encoded (square root). Both are
    clamped to [0, 1].

    Args:
        image: Image array of shape (H, W, 3).

    Returns:
        Display-ready float32 image.
    """
    array = np.asarray(image)
    if np.issubdtype(array.dtype, np.integer):
        result = array.astype(np.float32) / 255.0
    else:
        result = np.sqrt(np.maximum(array.astype(np.float32), 0.0))
    return np.clip(result, 0.0, 1.0).astype(np.float32)


def show_preview(
    image: npt.ArrayLike,
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 4),
    block: bool = True,
    show: bool = True,
) -> Figure:
    """Display a render as a Matplotlib figure.

    Args:
        image: Linear float image or quantized integer image, (H, W, 3).
        title: Figure title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
        show: Whether to open the window. Set to False to only build the
            figure (e.g. to save it or in tests).

    Returns:
        The Matplotlib figure.
    """
    import matplotlib.pyplot as plt

    display_image = prepare_for_display(image)
    height, width = display_image.shape[:2]

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")
    ax.set_title(title if title is not None else f"Render Preview - {width}x{height}")

    fig.tight_layout()
    if show:
        plt.show(block=block)

    return fig
