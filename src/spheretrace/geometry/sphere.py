"""Sphere primitive with ray-sphere intersection.

This module provides the Sphere and HitRecord dataclasses and the
intersection routine shared by the scene-level closest-hit query.

The intersection solves the quadratic in half-b form and tests the near
root before the far root, accepting the first one that lies in the
half-open interval [t_min, t_max).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretrace.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5, material_id=0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.spheretrace.core.ray import Ray, ray_at

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point, radius and material.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere. Expected to be positive; the
            intersection math runs for any value but is only meaningful
            for positive radii.
        material_id: Unified id of the material shared by this sphere.
    """

    center: vec3
    radius: ti.f32
    material_id: ti.i32


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: The ray parameter at the intersection. Only valid if hit == 1.
        point: The intersection point. Only valid if hit == 1.
        normal: The outward surface normal at the intersection point (unit
            length). It is never flipped toward the ray; materials compare
            it with the incoming direction to tell inside from outside.
            Only valid if hit == 1.
        material_id: Unified id of the material of the primitive that was
            hit. -1 for a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material_id: ti.i32


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material_id=-1,
    )


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Test for ray-sphere intersection.

    The intersection is found by solving:
        |origin + t * direction - center|^2 = radius^2

    which gives the quadratic a*t^2 + 2*b*t + c = 0 with:
        a = dot(direction, direction)
        b = dot(oc, direction)   (half of the traditional 'b')
        c = dot(oc, oc) - radius^2
        oc = origin - center

    A tangent ray (discriminant == 0) counts as a miss. The near root
    (-b - sqrt(d)) / a is tried before the far root (-b + sqrt(d)) / a.

    Args:
        ray: The ray to test (direction need not be normalized).
        sphere: The sphere to test intersection against.
        t_min: Smallest accepted t (inclusive).
        t_max: Upper bound on t (exclusive).

    Returns:
        A HitRecord; check its hit field to determine if an intersection
        occurred.
    """
    oc = ray.origin - sphere.center
    a = tm.dot(ray.direction, ray.direction)
    b = tm.dot(oc, ray.direction)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - a * c

    result = make_miss_record()

    if discriminant > 0.0:
        sqrt_d = tm.sqrt(discriminant)
        t = (-b - sqrt_d) / a
        valid = t >= t_min and t < t_max
        if not valid:
            t = (-b + sqrt_d) / a
            valid = t >= t_min and t < t_max

        if valid:
            point = ray_at(ray, t)
            result = HitRecord(
                hit=1,
                t=t,
                point=point,
                normal=(point - sphere.center) / sphere.radius,
                material_id=sphere.material_id,
            )

    return result


@ti.func
def make_sphere(center: vec3, radius: ti.f32, material_id: ti.i32) -> Sphere:
    """Create a sphere from center, radius and material id.

    This is a convenience function for creating spheres within Taichi kernels.
    """
    return Sphere(center=center, radius=radius, material_id=material_id)
