"""Scene module for sphere storage, materials and closest-hit queries.

Components:
    intersection: Sphere storage in Taichi fields and the closest-hit query
    manager: Scene manager assigning unified material ids to spheres
    random_scene: The random spheres showcase scene and its camera

Scene data is organized for kernel access:
    - Structure-of-Arrays layout for sphere data
    - Unified material ids mapped to per-kind registries
"""

from .intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere,
    get_sphere_count,
    intersect_scene,
)
from .manager import (
    MAX_MATERIALS,
    MaterialInfo,
    MaterialType,
    SceneConfig,
    SceneManager,
    SphereInfo,
    clear_all,
    get_material_type,
    get_material_type_index,
    material_type_indices,
    material_types,
    num_materials,
)
from .random_scene import create_default_camera, create_random_scene

__all__ = [
    # Intersection module
    "add_sphere",
    "clear_scene",
    "get_sphere",
    "get_sphere_count",
    "intersect_scene",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "MaterialType",
    "MaterialInfo",
    "SphereInfo",
    "SceneConfig",
    "MAX_MATERIALS",
    "clear_all",
    "get_material_type",
    "get_material_type_index",
    "material_types",
    "material_type_indices",
    "num_materials",
    # Random scene module
    "create_random_scene",
    "create_default_camera",
]
