"""Monte Carlo path tracer for sphere scenes, built on Taichi.

This package renders scenes made of spheres with diffuse, metallic and
dielectric materials under a sky gradient, using a thin-lens camera and
per-scanline parallel sampling.

Subpackages:
    core: Vector utilities, random streams, the integrator and the renderer
    geometry: The sphere primitive and its intersection routine
    materials: Lambertian, metal and dielectric scattering
    scene: Scene storage, closest-hit queries, scene manager, random scene
    camera: Thin-lens camera with depth of field
    preview: Image export (PPM, PNG) and matplotlib preview
"""

__version__ = "0.1.0"
