"""Camera module for primary ray generation.

Components:
    thin_lens: Thin-lens camera with depth of field

Ray generation uses normalized image-plane coordinates:
    s in [0, 1]: left to right across image
    t in [0, 1]: bottom to top across image
"""

from .thin_lens import (
    ThinLensCamera,
    get_camera_info,
    get_ray,
    is_camera_ready,
    reset_camera,
    setup_camera,
)

__all__ = [
    "ThinLensCamera",
    "setup_camera",
    "is_camera_ready",
    "reset_camera",
    "get_ray",
    "get_camera_info",
]
