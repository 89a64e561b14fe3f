"""Unit tests for the Dielectric material module.

Tests cover:
- Interface orientation (entering vs. leaving the material)
- Refraction vs. Fresnel reflection choice
- Total internal reflection
- White attenuation
- Material registry operations and IOR validation
"""

import math

import numpy as np
import pytest
import taichi as ti


class TestRefractionSetup:
    """Tests for refraction_setup."""

    def test_entering(self):
        from src.spheretrace.materials.dielectric import refraction_setup, vec3

        normal_out = ti.Vector.field(3, dtype=ti.f32, shape=())
        ratio = ti.field(dtype=ti.f32, shape=())
        cosine = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            n, r, c = refraction_setup(1.5, vec3(0.0, -2.0, 0.0), vec3(0.0, 1.0, 0.0))
            normal_out[None] = n
            ratio[None] = r
            cosine[None] = c

        test_kernel()
        assert abs(normal_out[None][1] - 1.0) < 1e-6
        assert abs(ratio[None] - 1.0 / 1.5) < 1e-6
        assert abs(cosine[None] - 1.0) < 1e-6

    def test_leaving(self):
        from src.spheretrace.materials.dielectric import refraction_setup, vec3

        normal_out = ti.Vector.field(3, dtype=ti.f32, shape=())
        ratio = ti.field(dtype=ti.f32, shape=())
        cosine = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            n, r, c = refraction_setup(1.5, vec3(0.6, 0.8, 0.0), vec3(0.0, 1.0, 0.0))
            normal_out[None] = n
            ratio[None] = r
            cosine[None] = c

        test_kernel()
        assert abs(normal_out[None][1] + 1.0) < 1e-6
        assert abs(ratio[None] - 1.5) < 1e-6
        # Cosine is scaled by the index when leaving
        assert abs(cosine[None] - 1.5 * 0.8) < 1e-5


def _scatter(direction, normal, ior=1.5, stream=0):
    from src.spheretrace.core.ray import Ray
    from src.spheretrace.geometry.sphere import HitRecord
    from src.spheretrace.materials.dielectric import scatter_dielectric, vec3

    result_dir = ti.Vector.field(3, dtype=ti.f32, shape=())
    result_att = ti.Vector.field(3, dtype=ti.f32, shape=())
    result_scatter = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(d: vec3, n: vec3, eta: ti.f32, s: ti.i32):
        ray = Ray(origin=vec3(0.0, 0.0, 0.0) - d, direction=d)
        rec = HitRecord(hit=1, t=1.0, point=vec3(0.0, 0.0, 0.0), normal=n, material_id=0)
        out_dir, attenuation, did_scatter = scatter_dielectric(eta, ray, rec, s)
        result_dir[None] = out_dir
        result_att[None] = attenuation
        result_scatter[None] = did_scatter

    test_kernel(vec3(*direction), vec3(*normal), ior, stream)
    return result_dir[None], result_att[None], result_scatter[None]


class TestDielectricScatter:
    """Tests for scatter_dielectric."""

    def test_attenuation_is_white_and_always_scatters(self):
        _, a, did_scatter = _scatter((0.0, -1.0, 0.0), (0.0, 1.0, 0.0))
        assert did_scatter == 1
        assert a[0] == 1.0 and a[1] == 1.0 and a[2] == 1.0

    def test_normal_incidence_refracts_or_reflects(self):
        d, _, _ = _scatter((0.0, -1.0, 0.0), (0.0, 1.0, 0.0))
        # Either straight through or straight back
        assert abs(d[0]) < 1e-5
        assert abs(abs(d[1]) - 1.0) < 1e-5

    def test_fresnel_fraction_at_normal_incidence(self):
        """About 4% of glass hits at normal incidence reflect."""
        from src.spheretrace.core.ray import Ray
        from src.spheretrace.core.sampling import seed_streams
        from src.spheretrace.geometry.sphere import HitRecord
        from src.spheretrace.materials.dielectric import scatter_dielectric, vec3

        seed_streams(77)
        n = 2000
        ys = ti.field(dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                ray = Ray(origin=vec3(0.0, 1.0, 0.0), direction=vec3(0.0, -1.0, 0.0))
                rec = HitRecord(
                    hit=1, t=1.0, point=vec3(0.0, 0.0, 0.0),
                    normal=vec3(0.0, 1.0, 0.0), material_id=0,
                )
                out_dir, _, _ = scatter_dielectric(1.5, ray, rec, i)
                ys[i] = out_dir.y

        test_kernel()
        reflected = int(np.sum(ys.to_numpy() > 0.0))
        assert 30 < reflected < 150

    def test_total_internal_reflection(self):
        """Leaving glass past the critical angle always mirrors, without a draw."""
        from src.spheretrace.core.sampling import get_stream_state

        sin_i = 0.9
        cos_i = math.sqrt(1.0 - sin_i * sin_i)
        before = get_stream_state(0)
        d, _, did_scatter = _scatter((sin_i, cos_i, 0.0), (0.0, 1.0, 0.0))

        assert did_scatter == 1
        assert abs(d[0] - sin_i) < 1e-5
        assert abs(d[1] + cos_i) < 1e-5
        assert get_stream_state(0) == before

    def test_refraction_draws_once(self):
        from src.spheretrace.core.sampling import get_stream_state

        before = get_stream_state(0)
        _scatter((0.0, -1.0, 0.0), (0.0, 1.0, 0.0))
        assert get_stream_state(0) != before

    def test_refracted_direction_bends_toward_normal(self):
        """When the refracted branch is taken, Snell's law holds."""
        from src.spheretrace.core.sampling import seed_streams

        seed_streams(5)
        sin_i = 0.5
        cos_i = math.sqrt(1.0 - sin_i * sin_i)
        seen_refraction = False
        for stream in range(16):
            d, _, _ = _scatter((sin_i, -cos_i, 0.0), (0.0, 1.0, 0.0), stream=stream)
            if d[1] < 0.0:
                seen_refraction = True
                norm = math.sqrt(d[0] ** 2 + d[1] ** 2 + d[2] ** 2)
                assert abs(d[0] / norm - sin_i / 1.5) < 1e-5
        assert seen_refraction


class TestDielectricRegistry:
    """Tests for the dielectric material registry."""

    def test_add_and_lookup(self):
        from src.spheretrace.materials.dielectric import (
            add_dielectric_material,
            get_dielectric_ior,
            get_dielectric_material_count,
        )

        assert add_dielectric_material() == 0
        assert add_dielectric_material(2.4) == 1
        assert get_dielectric_material_count() == 2

        result = ti.field(dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            result[0] = get_dielectric_ior(0)
            result[1] = get_dielectric_ior(1)

        test_kernel()
        assert abs(result[0] - 1.5) < 1e-6
        assert abs(result[1] - 2.4) < 1e-6

    def test_clear(self):
        from src.spheretrace.materials.dielectric import (
            add_dielectric_material,
            clear_dielectric_materials,
            get_dielectric_material_count,
        )

        add_dielectric_material(1.33)
        clear_dielectric_materials()
        assert get_dielectric_material_count() == 0

    @pytest.mark.parametrize("ior", [0.99, 0.5, -1.0])
    def test_invalid_ior(self, ior):
        from src.spheretrace.materials.dielectric import add_dielectric_material

        with pytest.raises(ValueError):
            add_dielectric_material(ior)

    def test_ior_one_accepted(self):
        from src.spheretrace.materials.dielectric import add_dielectric_material

        add_dielectric_material(1.0)
