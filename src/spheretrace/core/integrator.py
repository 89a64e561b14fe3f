"""Path tracing integrator for sphere scenes lit by a sky gradient.

This module implements the bounce loop, the material dispatch and the
per-scanline render kernel.

A path starts at the camera with full strength. At every bounce the closest
sphere is found; its material either scatters the ray (the strength is
multiplied by the material's attenuation) or absorbs it. A ray that escapes
the scene picks up the sky color, weighted by the accumulated strength. A
path that is absorbed or reaches the bounce budget contributes black.

The only light in the scene is the sky:

    t = 0.5 * (unit(direction).y + 1)
    sky = (1 - t) * white + t * (0.5, 0.7, 1.0)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretrace.core.integrator import (
    ...     setup_render_target, render_rows, get_linear_image_numpy
    ... )
    >>> from src.spheretrace.core.sampling import seed_streams
    >>> from src.spheretrace.scene.random_scene import create_random_scene, create_default_camera
    >>> from src.spheretrace.camera.thin_lens import setup_camera
    >>>
    >>> scene = create_random_scene(seed=7)
    >>> setup_camera(create_default_camera(2.0))
    >>> setup_render_target(200, 100)
    >>> seed_streams(0)
    >>> render_rows(0, 100, samples=10)
    >>> image = get_linear_image_numpy()
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.spheretrace.camera.thin_lens import get_ray
from src.spheretrace.core.ray import Ray, make_ray, normalize
from src.spheretrace.core.sampling import uniform
from src.spheretrace.geometry.sphere import HitRecord
from src.spheretrace.materials.dielectric import scatter_dielectric_by_id
from src.spheretrace.materials.lambertian import scatter_lambertian_by_id
from src.spheretrace.materials.metal import scatter_metal_by_id
from src.spheretrace.scene.intersection import intersect_scene
from src.spheretrace.scene.manager import (
    MaterialType,
    get_material_type,
    get_material_type_index,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Default bounce budget
MAX_DEPTH = 50

# Interval searched for the closest hit; t_min keeps bounced rays off their
# own surface
T_MIN = 0.001
T_MAX = 3.4028235e38

# Color at the top of the sky gradient (the bottom is white)
SKY_COLOR = vec3(0.5, 0.7, 1.0)

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Averaged linear color per pixel, indexed [x, y] with y = 0 at the bottom
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active image size and clear the color buffer.

    Args:
        width: Image width in pixels, in [1, MAX_IMAGE_WIDTH].
        height: Image height in pixels, in [1, MAX_IMAGE_HEIGHT].

    Raises:
        ValueError: If a dimension is out of range.
    """
    if not (1 <= width <= MAX_IMAGE_WIDTH and 1 <= height <= MAX_IMAGE_HEIGHT):
        raise ValueError(
            f"Image dimensions ({width}x{height}) outside supported range "
            f"(1x1 to {MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    clear_render_target()


def clear_render_target() -> None:
    """Clear the color buffer to zero."""
    _color_buffer.fill(0.0)


def reset_render_target() -> None:
    """Clear the color buffer and mark the render target as not set up."""
    _render_target_initialized[None] = 0
    clear_render_target()


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def _scatter_material(ray: Ray, rec: HitRecord, stream: ti.i32):
    """Dispatch to the scatter function of the hit material.

    Args:
        ray: The incoming ray.
        rec: The hit record; its material_id selects the material.
        stream: Random stream to draw from.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter). An
        unknown material id absorbs the ray.
    """
    mat_type = get_material_type(rec.material_id)
    type_index = get_material_type_index(rec.material_id)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == int(MaterialType.LAMBERTIAN):
        scattered_direction, attenuation, did_scatter = scatter_lambertian_by_id(
            type_index, ray, rec, stream
        )
    elif mat_type == int(MaterialType.METAL):
        scattered_direction, attenuation, did_scatter = scatter_metal_by_id(
            type_index, ray, rec, stream
        )
    elif mat_type == int(MaterialType.DIELECTRIC):
        scattered_direction, attenuation, did_scatter = scatter_dielectric_by_id(
            type_index, ray, rec, stream
        )

    return scattered_direction, attenuation, did_scatter


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Sky gradient: white looking straight down, light blue looking straight up."""
    t = 0.5 * (normalize(direction).y + 1.0)
    return (1.0 - t) * vec3(1.0, 1.0, 1.0) + t * SKY_COLOR


@ti.func
def trace_color(ray: Ray, max_depth: ti.i32, stream: ti.i32) -> vec3:
    """Estimate the light arriving along a ray.

    Args:
        ray: The primary ray.
        max_depth: Number of scattering events allowed before the path is
            cut off as black.
        stream: Random stream owned by the calling scanline.

    Returns:
        The estimated color (RGB, linear, not clamped).
    """
    origin = ray.origin
    direction = ray.direction
    strength = vec3(1.0, 1.0, 1.0)
    result = vec3(0.0, 0.0, 0.0)
    bounces = 0

    while True:
        current = make_ray(origin, direction)
        rec = intersect_scene(current, T_MIN, T_MAX)
        if rec.hit == 0:
            result = strength * sky_color(direction)
            break
        if bounces >= max_depth:
            break

        scattered_direction, attenuation, did_scatter = _scatter_material(current, rec, stream)
        if did_scatter == 0:
            break

        strength *= attenuation
        origin = rec.point
        direction = scattered_direction
        bounces += 1

    return result


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows_kernel(
    row_start: ti.i32,
    row_end: ti.i32,
    width: ti.i32,
    height: ti.i32,
    samples: ti.i32,
    max_depth: ti.i32,
):
    # Outermost loop is parallel: one scanline per thread, each scanline
    # drawing from its own stream.
    for j in range(row_start, row_end):
        for i in range(width):
            color = vec3(0.0, 0.0, 0.0)
            for _s in range(samples):
                u = (ti.cast(i, ti.f32) + uniform(j)) / ti.cast(width, ti.f32)
                v = (ti.cast(j, ti.f32) + uniform(j)) / ti.cast(height, ti.f32)
                color += trace_color(get_ray(u, v, j), max_depth, j)
            _color_buffer[i, j] = color / ti.cast(samples, ti.f32)


@ti.kernel
def _trace_ray_kernel(origin: vec3, direction: vec3, max_depth: ti.i32, stream: ti.i32) -> vec3:
    return trace_color(make_ray(origin, direction), max_depth, stream)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_rows(row_start: int, row_end: int, samples: int, max_depth: int = MAX_DEPTH) -> None:
    """Render scanlines row_start (inclusive) to row_end (exclusive).

    Rows are counted from the bottom of the picture. Each row draws from
    the random stream with the same index, so the caller must seed the
    streams (sampling.seed_streams) before the first call.

    Args:
        row_start: First scanline to render.
        row_end: One past the last scanline to render.
        samples: Samples per pixel.
        max_depth: Bounce budget per path.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the row range is outside the image.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    if not 0 <= row_start <= row_end <= height:
        raise ValueError(f"Row range [{row_start}, {row_end}) outside image of height {height}")
    _render_rows_kernel(row_start, row_end, width, height, samples, max_depth)


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int = MAX_DEPTH,
    stream: int = 0,
) -> tuple[float, float, float]:
    """Trace a single ray through the current scene.

    This is a Python-callable function for testing and inspection.

    Returns:
        Tuple of (R, G, B) color values.
    """
    color = _trace_ray_kernel(vec3(*origin), vec3(*direction), max_depth, stream)
    return (float(color[0]), float(color[1]), float(color[2]))


def get_linear_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered linear colors as a NumPy array.

    Returns:
        Array of shape (height, width, 3), dtype float32, not clamped. Row 0
        is the top of the picture (scanline height - 1).

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()

    image = _color_buffer.to_numpy()[:width, :height, :]
    # (width, height, 3) -> (height, width, 3), top row first
    image = np.flipud(np.transpose(image, (1, 0, 2)))
    return np.ascontiguousarray(image, dtype=np.float32)
