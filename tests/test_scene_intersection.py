"""Unit tests for the scene-level closest-hit query."""

import pytest
import taichi as ti


def _trace_scene(origin, direction, t_min=0.001, t_max=1e8):
    from src.spheretrace.core.ray import Ray
    from src.spheretrace.scene.intersection import intersect_scene, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    material = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, lo: ti.f32, hi: ti.f32):
        rec = intersect_scene(Ray(origin=o, direction=d), lo, hi)
        hit[None] = rec.hit
        t_val[None] = rec.t
        material[None] = rec.material_id

    test_kernel(vec3(*origin), vec3(*direction), t_min, t_max)
    return hit[None], t_val[None], material[None]


class TestSceneStorage:
    """Tests for adding and clearing spheres."""

    def test_add_sphere_returns_index(self):
        from src.spheretrace.scene.intersection import add_sphere, get_sphere_count

        assert get_sphere_count() == 0
        assert add_sphere((0.0, 0.0, -1.0), 0.5, 0) == 0
        assert add_sphere(ti.math.vec3(1.0, 0.0, -1.0), 0.5, 1) == 1
        assert get_sphere_count() == 2

    def test_clear_scene(self):
        from src.spheretrace.scene.intersection import add_sphere, clear_scene, get_sphere_count

        add_sphere((0.0, 0.0, -1.0), 0.5)
        clear_scene()
        assert get_sphere_count() == 0

    def test_capacity_exceeded(self):
        from src.spheretrace.scene.intersection import MAX_SPHERES, add_sphere, get_sphere_count

        for i in range(MAX_SPHERES):
            add_sphere((float(i), 0.0, 0.0), 0.1)
        assert get_sphere_count() == MAX_SPHERES
        with pytest.raises(RuntimeError):
            add_sphere((0.0, 0.0, 0.0), 0.1)
        assert get_sphere_count() == MAX_SPHERES


class TestIntersectScene:
    """Tests for intersect_scene."""

    def test_empty_scene_misses(self):
        hit, _, material = _trace_scene((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 0
        assert material == -1

    def test_closest_hit_wins(self):
        from src.spheretrace.scene.intersection import add_sphere

        # Far sphere first, near sphere second
        add_sphere((0.0, 0.0, -10.0), 1.0, 1)
        add_sphere((0.0, 0.0, -3.0), 1.0, 2)

        hit, t, material = _trace_scene((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert abs(t - 2.0) < 1e-5
        assert material == 2

    def test_closest_hit_independent_of_order(self):
        from src.spheretrace.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -3.0), 1.0, 2)
        add_sphere((0.0, 0.0, -10.0), 1.0, 1)

        _, t, material = _trace_scene((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert abs(t - 2.0) < 1e-5
        assert material == 2

    def test_identical_spheres_first_wins(self):
        from src.spheretrace.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -5.0), 1.0, 4)
        add_sphere((0.0, 0.0, -5.0), 1.0, 9)

        hit, _, material = _trace_scene((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert material == 4

    def test_interval_bounds_respected(self):
        from src.spheretrace.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -5.0), 1.0, 0)

        hit, _, _ = _trace_scene((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), t_max=3.0)
        assert hit == 0

        hit, t, _ = _trace_scene((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), t_min=5.0)
        assert hit == 1
        assert abs(t - 6.0) < 1e-5

    def test_large_ground_sphere(self):
        """Single precision is enough to hit the 1000-radius ground sphere."""
        from src.spheretrace.scene.intersection import add_sphere

        add_sphere((0.0, -1000.0, 0.0), 1000.0, 0)

        hit, t, _ = _trace_scene((0.0, 1.0, 0.0), (0.0, -1.0, 0.0))
        assert hit == 1
        assert abs(t - 1.0) < 1e-3
