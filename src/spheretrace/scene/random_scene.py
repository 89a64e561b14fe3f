"""The "random spheres" showcase scene and its camera.

The scene is a huge grey ground sphere covered by a 22 x 22 grid of small
spheres with randomly chosen materials, plus three large spheres in the
middle: glass, matte brown and a polished metal.

Small spheres are jittered inside their grid cell. Their material is drawn
with these odds:

- 80%: Lambertian with albedo (r1*r2, r3*r4, r5*r6)
- 15%: metal with albedo 0.5 * (1 + r) per channel and fuzz 0.5 * r
- 5%: glass with refractive index 1.5

Small spheres too close to the large metal sphere are left out.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretrace.scene.random_scene import create_random_scene, create_default_camera
    >>> from src.spheretrace.camera.thin_lens import setup_camera
    >>>
    >>> scene = create_random_scene(seed=42)
    >>> setup_camera(create_default_camera(aspect_ratio=2.0))
"""

import numpy as np

from src.spheretrace.camera.thin_lens import ThinLensCamera
from src.spheretrace.scene.manager import SceneManager

# Grid of small spheres: a, b in [GRID_MIN, GRID_MAX)
GRID_MIN = -11
GRID_MAX = 11

SMALL_RADIUS = 0.2

# Small spheres closer than this to (4, 0.2, 0) are skipped
CLEARANCE_CENTER = np.array([4.0, 0.2, 0.0])
CLEARANCE = 0.9

GLASS_IOR = 1.5


def create_random_scene(seed: int | None = None) -> SceneManager:
    """Build the random spheres scene.

    Every sphere gets its own material. Clears any previously loaded scene.

    Args:
        seed: Seed for numpy.random.default_rng. None draws a fresh scene
            each call.

    Returns:
        The populated SceneManager.
    """
    rng = np.random.default_rng(seed)
    scene = SceneManager()

    scene.add_lambertian_sphere((0.0, -1000.0, 0.0), 1000.0, albedo=(0.5, 0.5, 0.5))

    for a in range(GRID_MIN, GRID_MAX):
        for b in range(GRID_MIN, GRID_MAX):
            center = np.array([a + 0.9 * rng.random(), SMALL_RADIUS, b + 0.9 * rng.random()])
            if np.linalg.norm(center - CLEARANCE_CENTER) <= CLEARANCE:
                continue

            center = tuple(float(c) for c in center)
            choose_mat = rng.random()
            if choose_mat < 0.8:
                albedo = tuple(float(rng.random() * rng.random()) for _ in range(3))
                scene.add_lambertian_sphere(center, SMALL_RADIUS, albedo=albedo)
            elif choose_mat < 0.95:
                albedo = tuple(float(0.5 * (1.0 + rng.random())) for _ in range(3))
                scene.add_metal_sphere(
                    center, SMALL_RADIUS, albedo=albedo, fuzz=float(0.5 * rng.random())
                )
            else:
                scene.add_dielectric_sphere(center, SMALL_RADIUS, ior=GLASS_IOR)

    scene.add_dielectric_sphere((0.0, 1.0, 0.0), 1.0, ior=GLASS_IOR)
    scene.add_lambertian_sphere((-4.0, 1.0, 0.0), 1.0, albedo=(0.4, 0.2, 0.1))
    scene.add_metal_sphere((4.0, 1.0, 0.0), 1.0, albedo=(0.7, 0.6, 0.5), fuzz=0.0)

    return scene


def create_default_camera(aspect_ratio: float) -> ThinLensCamera:
    """Camera framing the random spheres scene with a shallow depth of field.

    Looks from (13, 2, 3) at the origin with a 20 degree vertical field of
    view, focused 10 units away with aperture 0.1.
    """
    return ThinLensCamera(
        lookfrom=(13.0, 2.0, 3.0),
        lookat=(0.0, 0.0, 0.0),
        vup=(0.0, 1.0, 0.0),
        vfov=20.0,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_dist=10.0,
    )
