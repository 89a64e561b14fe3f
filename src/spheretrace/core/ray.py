"""Ray data structure and vector utilities for the path tracer.

This module provides the fundamental Ray dataclass and the vector helpers
used by every stage of light transport: intersection, scattering and the
camera. All helpers are Taichi functions so they can be called from within
kernels.

Vectors are plain Taichi ``vec3`` values and are used interchangeably as
points, directions and colors. The ``Axis`` and ``Channel`` enumerations
name the same three slots (X/Y/Z and R/G/B) for readability at call sites.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class Axis(IntEnum):
    """Spatial component index of a vec3."""

    X = 0
    Y = 1
    Z = 2


class Channel(IntEnum):
    """Color component index of a vec3 (same slots as ``Axis``)."""

    R = 0
    G = 1
    B = 2


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            unit length; the point at parameter t is origin + t * direction.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction.

    This is a convenience function for creating rays within Taichi kernels.
    """
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.sqrt(tm.dot(v, v))


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Scale a vector to unit length.

    Precondition: v must not be the zero vector. A zero-length input yields
    non-finite components which propagate through subsequent arithmetic.

    Args:
        v: The input vector.

    Returns:
        v / length(v).
    """
    return v / length(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes incident - 2 * dot(incident, normal) * normal. The normal must be
    unit length; the result is not renormalized, so it keeps the length of
    the incident vector.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (unit length).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, ni_over_nt: ti.f32):
    """Refract an incident vector through a surface using Snell's law.

    The incident vector is normalized internally. Refraction is impossible
    (total internal reflection) when

        1 - ni_over_nt^2 * (1 - dot(unit(incident), normal)^2) <= 0

    Args:
        incident: The incoming direction vector (any non-zero length).
        normal: The surface normal on the incident side (unit length).
        ni_over_nt: Ratio of refractive indices (incident / transmitted).

    Returns:
        A tuple (did_refract, refracted) where did_refract is 1 if a refracted
        direction exists and 0 on total internal reflection. refracted is the
        zero vector when did_refract is 0.
    """
    uv = normalize(incident)
    dt = tm.dot(uv, normal)
    discriminant = 1.0 - ni_over_nt * ni_over_nt * (1.0 - dt * dt)
    did_refract = 0
    refracted = vec3(0.0, 0.0, 0.0)
    if discriminant > 0.0:
        did_refract = 1
        refracted = ni_over_nt * (uv - dt * normal) - tm.sqrt(discriminant) * normal
    return did_refract, refracted


@ti.func
def schlick(cosine: ti.f32, ref_idx: ti.f32) -> ti.f32:
    """Approximate Fresnel reflectance using Schlick's formula.

    Args:
        cosine: Cosine of the angle between the incident direction and normal.
        ref_idx: Refractive index of the material.

    Returns:
        r0 + (1 - r0) * (1 - cosine)^5 with r0 = ((1 - n) / (1 + n))^2.
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    # Explicit product keeps the sign for cosine > 1 (grazing exits).
    x = 1.0 - cosine
    x2 = x * x
    return r0 + (1.0 - r0) * (x2 * x2 * x)
