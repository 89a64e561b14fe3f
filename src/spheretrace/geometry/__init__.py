"""Geometry module for the sphere primitive.

Components:
    sphere: Sphere primitive, HitRecord and ray-sphere intersection

The intersection routine is a Taichi function (@ti.func) so it can be called
from the render kernel. It shares its call shape with the scene-level query:

    record = hit_sphere(ray, sphere, t_min, t_max)
    record = intersect_scene(ray, t_min, t_max)
"""

from .sphere import HitRecord, Sphere, hit_sphere, make_miss_record, make_sphere

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_miss_record",
    "make_sphere",
]
