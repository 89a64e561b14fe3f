"""Dielectric (glass/water) material implementation.

Dielectrics either refract or reflect the incoming ray. The hit normal
always points out of the sphere, so the incoming direction decides which
side of the interface the ray is on:

    - dot(d, n) > 0: the ray leaves the material. The refraction normal is
      -n, the index ratio is ior and the cosine is ior * dot(d, n) / |d|.
    - otherwise: the ray enters the material. The refraction normal is n,
      the index ratio is 1 / ior and the cosine is -dot(d, n) / |d|.

When refraction is possible, the Schlick reflectance is compared with a
uniform draw to choose between the refracted and the mirrored ray. Under
total internal reflection no draw is made and the ray is mirrored.
Attenuation is always white: clear glass absorbs nothing.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretrace.materials.dielectric import scatter_dielectric
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_dielectric(
    >>> #     ior, ray, rec, stream
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from src.spheretrace.core.ray import Ray, length, reflect, refract, schlick
from src.spheretrace.core.sampling import uniform
from src.spheretrace.geometry.sphere import HitRecord

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def refraction_setup(ior: ti.f32, direction: vec3, normal: vec3):
    """Orient the interface for a ray hitting a dielectric.

    Args:
        ior: Index of refraction of the material.
        direction: The incoming ray direction (need not be normalized).
        normal: The outward surface normal at the hit point.

    Returns:
        A tuple of (outward_normal, ni_over_nt, cosine).
    """
    d_dot_n = tm.dot(direction, normal)
    outward_normal = normal
    ni_over_nt = 1.0 / ior
    cosine = -d_dot_n / length(direction)
    if d_dot_n > 0.0:
        outward_normal = -normal
        ni_over_nt = ior
        cosine = ior * d_dot_n / length(direction)
    return outward_normal, ni_over_nt, cosine


@ti.func
def scatter_dielectric(ior: ti.f32, ray: Ray, rec: HitRecord, stream: ti.i32):
    """Refract or reflect a ray at a dielectric interface.

    Args:
        ior: Index of refraction of the material.
        ray: The incoming ray.
        rec: The hit record at the scattering point.
        stream: Random stream to draw from.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: The refracted direction, or the direction
          mirrored about the hit normal.
        - attenuation: White.
        - did_scatter: Always 1.
    """
    outward_normal, ni_over_nt, cosine = refraction_setup(ior, ray.direction, rec.normal)
    did_refract, refracted = refract(ray.direction, outward_normal, ni_over_nt)

    scattered_direction = reflect(ray.direction, rec.normal)
    if did_refract == 1:
        if uniform(stream) >= schlick(cosine, ior):
            scattered_direction = refracted

    attenuation = vec3(1.0, 1.0, 1.0)
    did_scatter = 1
    return scattered_direction, attenuation, did_scatter


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of dielectric materials in the scene
MAX_DIELECTRIC_MATERIALS = 512

# Storage for dielectric material properties
dielectric_iors = ti.field(dtype=ti.f32, shape=MAX_DIELECTRIC_MATERIALS)
num_dielectric_materials = ti.field(dtype=ti.i32, shape=())


def clear_dielectric_materials() -> None:
    """Clear all dielectric materials."""
    num_dielectric_materials[None] = 0


def add_dielectric_material(ior: float = 1.5) -> int:
    """Add a dielectric material to the material registry.

    Args:
        ior: Index of refraction. Default is 1.5 (typical glass).
            Must be >= 1.0.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If IOR is less than 1.0.
    """
    if ior < 1.0:
        raise ValueError(
            f"Index of refraction = {ior} is less than 1.0. "
            "IOR must be >= 1.0 for physically meaningful materials."
        )

    idx = num_dielectric_materials[None]
    if idx >= MAX_DIELECTRIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of dielectric materials ({MAX_DIELECTRIC_MATERIALS}) exceeded"
        )

    dielectric_iors[idx] = ior
    num_dielectric_materials[None] = idx + 1
    return idx


def get_dielectric_material_count() -> int:
    """Get the number of dielectric materials in the registry."""
    return int(num_dielectric_materials[None])


@ti.func
def get_dielectric_ior(material_idx: ti.i32) -> ti.f32:
    """Get the IOR for a dielectric material by index."""
    return dielectric_iors[material_idx]


@ti.func
def scatter_dielectric_by_id(material_idx: ti.i32, ray: Ray, rec: HitRecord, stream: ti.i32):
    """Scatter off a registered dielectric material.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter).
    """
    return scatter_dielectric(get_dielectric_ior(material_idx), ray, rec, stream)
