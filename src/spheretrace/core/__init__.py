"""Core rendering module.

This module contains the fundamental building blocks of the path tracer:

Components:
    ray: Ray data structure and vector utilities (reflect, refract, Schlick)
    sampling: Per-scanline random streams and rejection samplers
    integrator: The bounce loop, material dispatch and the render kernel
    renderer: Render configuration, image assembly and quantization

The core estimates the color of each pixel by averaging jittered camera
rays, each traced through the scene until it escapes to the sky, is
absorbed, or runs out of bounces.

All compute-intensive operations use Taichi kernels.
"""

from .ray import (
    Axis,
    Channel,
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    ray_at,
    reflect,
    refract,
    schlick,
    vec3,
)

# Note: sampling, integrator and renderer declare Taichi fields and are NOT
# imported here, so importing this package never triggers field allocation
# before ti.init(). Import them directly when needed:
#   from src.spheretrace.core.renderer import RenderConfig, Renderer

__all__ = [
    "Axis",
    "Channel",
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "refract",
    "schlick",
]
