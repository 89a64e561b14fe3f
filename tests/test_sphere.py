"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside
- Ray missing sphere
- Ray starting inside sphere (far root, outward normal)
- Ray tangent to sphere
- Interval bounds (t_min inclusive, t_max exclusive)
"""

import pytest
import taichi as ti


class TestSphereBasics:
    """Tests for Sphere dataclass and basic operations."""

    def test_make_sphere(self):
        """Test make_sphere convenience function."""
        from src.spheretrace.geometry.sphere import make_sphere, vec3

        center_result = ti.field(dtype=ti.math.vec3, shape=())
        radius_result = ti.field(dtype=ti.f32, shape=())
        material_result = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = make_sphere(vec3(1.0, 2.0, 3.0), 0.5, 7)
            center_result[None] = sphere.center
            radius_result[None] = sphere.radius
            material_result[None] = sphere.material_id

        test_kernel()
        c = center_result[None]
        assert abs(c[0] - 1.0) < 1e-6
        assert abs(c[1] - 2.0) < 1e-6
        assert abs(c[2] - 3.0) < 1e-6
        assert abs(radius_result[None] - 0.5) < 1e-6
        assert material_result[None] == 7

    def test_miss_record(self):
        from src.spheretrace.geometry.sphere import make_miss_record

        hit = ti.field(dtype=ti.i32, shape=())
        material = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            rec = make_miss_record()
            hit[None] = rec.hit
            material[None] = rec.material_id

        test_kernel()
        assert hit[None] == 0
        assert material[None] == -1


def _run_hit(origin, direction, center, radius, t_min=0.001, t_max=1000.0, material_id=0):
    """Run hit_sphere in a kernel and return (hit, t, point, normal, material_id)."""
    from src.spheretrace.core.ray import Ray
    from src.spheretrace.geometry.sphere import Sphere, hit_sphere, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    point = ti.field(dtype=ti.math.vec3, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())
    material = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, c: vec3, r: ti.f32, lo: ti.f32, hi: ti.f32, m: ti.i32):
        rec = hit_sphere(Ray(origin=o, direction=d), Sphere(center=c, radius=r, material_id=m), lo, hi)
        hit[None] = rec.hit
        t_val[None] = rec.t
        point[None] = rec.point
        normal[None] = rec.normal
        material[None] = rec.material_id

    test_kernel(
        vec3(*origin), vec3(*direction), vec3(*center), radius, t_min, t_max, material_id
    )
    return hit[None], t_val[None], point[None], normal[None], material[None]


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_direct_hit_from_outside(self):
        hit, t, p, n, _ = _run_hit((0.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0)
        assert hit == 1
        # Near root at z=1
        assert abs(t - 4.0) < 1e-5
        assert abs(p[2] - 1.0) < 1e-5
        assert abs(n[0]) < 1e-5
        assert abs(n[1]) < 1e-5
        assert abs(n[2] - 1.0) < 1e-5

    def test_unnormalized_direction(self):
        """t is measured in units of the direction vector."""
        hit, t, p, _, _ = _run_hit((0.0, 0.0, 5.0), (0.0, 0.0, -2.0), (0.0, 0.0, 0.0), 1.0)
        assert hit == 1
        assert abs(t - 2.0) < 1e-5
        assert abs(p[2] - 1.0) < 1e-5

    def test_miss(self):
        hit, _, _, _, material = _run_hit(
            (0.0, 5.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0
        )
        assert hit == 0
        assert material == -1

    def test_sphere_behind_ray(self):
        hit, _, _, _, _ = _run_hit((0.0, 0.0, 5.0), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0), 1.0)
        assert hit == 0

    def test_inside_uses_far_root_with_outward_normal(self):
        """From the center the near root is negative; the normal is not flipped."""
        hit, t, p, n, _ = _run_hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 2.0)
        assert hit == 1
        assert abs(t - 2.0) < 1e-5
        assert abs(p[2] + 2.0) < 1e-5
        # Outward normal points along the ray direction here
        assert abs(n[2] + 1.0) < 1e-5

    def test_tangent_is_miss(self):
        hit, _, _, _, _ = _run_hit((1.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0)
        assert hit == 0

    def test_t_min_is_inclusive(self):
        """A root exactly at t_min is accepted."""
        hit, t, _, _, _ = _run_hit(
            (0.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0, t_min=4.0, t_max=100.0
        )
        assert hit == 1
        assert abs(t - 4.0) < 1e-6

    def test_t_max_is_exclusive(self):
        """A near root exactly at t_max is rejected; the far root is beyond it."""
        hit, _, _, _, _ = _run_hit(
            (0.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0, t_min=0.001, t_max=4.0
        )
        assert hit == 0

    def test_near_root_rejected_falls_back_to_far(self):
        hit, t, _, _, _ = _run_hit(
            (0.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0, t_min=4.5, t_max=100.0
        )
        assert hit == 1
        assert abs(t - 6.0) < 1e-5

    @pytest.mark.parametrize("material_id", [0, 3, 41])
    def test_material_id_propagates(self, material_id):
        hit, _, _, _, material = _run_hit(
            (0.0, 0.0, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0, material_id=material_id
        )
        assert hit == 1
        assert material == material_id

    def test_normal_is_unit_length_off_axis(self):
        hit, _, _, n, _ = _run_hit((0.3, 0.2, 5.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 0.5)
        assert hit == 1
        assert abs((n[0] ** 2 + n[1] ** 2 + n[2] ** 2) - 1.0) < 1e-5
