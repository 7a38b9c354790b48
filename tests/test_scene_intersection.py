"""Unit tests for scene-level intersection.

Tests cover:
- Surface storage, counts and capacity
- Kind dispatch to the sphere, cylinder and plane solvers
- Nearest-hit selection over mixed surfaces
- Shadow-ray occlusion (excluding the shaded surface; the parametric
  t < |Rdn| test and the segment t < 1 test)
- Surface normals through the table
"""

import pytest
import taichi as ti


def _nearest(origin, direction):
    from phongtracer.scene.intersection import intersect_scene, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    surface = ti.field(dtype=ti.i32, shape=())
    point = ti.field(dtype=ti.math.vec3, shape=())

    @ti.kernel
    def test_kernel():
        record = intersect_scene(
            vec3(origin[0], origin[1], origin[2]), vec3(direction[0], direction[1], direction[2])
        )
        hit[None] = record.hit
        t_val[None] = record.t
        surface[None] = record.surface
        point[None] = record.point

    test_kernel()
    return hit[None], t_val[None], surface[None], point[None]


def _occluded(point, light_position, skip_surface, shadow_test="parametric"):
    from phongtracer.core.settings import ShadowTest
    from phongtracer.scene.intersection import is_occluded, vec3

    test_code = int(ShadowTest[shadow_test.upper()])

    result = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel():
        p = vec3(point[0], point[1], point[2])
        to_light = vec3(light_position[0], light_position[1], light_position[2]) - p
        result[None] = is_occluded(p, to_light, skip_surface, test_code)

    test_kernel()
    return result[None]


class TestSurfaceStorage:
    """Tests for the surface table."""

    def test_add_surfaces(self):
        """Test indices are assigned in order and counted."""
        from phongtracer.scene.intersection import (
            add_cylinder,
            add_plane,
            add_sphere,
            get_surface_count,
        )

        assert get_surface_count() == 0
        assert add_sphere((0.0, 0.0, 5.0), 1.0) == 0
        assert add_cylinder((0.0, 0.0, 5.0), 1.0) == 1
        assert add_plane((0.0, -1.0, 0.0), (0.0, 1.0, 0.0)) == 2
        assert get_surface_count() == 3

    def test_clear_scene(self):
        """Test clearing resets the count."""
        from phongtracer.scene.intersection import add_sphere, clear_scene, get_surface_count

        add_sphere((0.0, 0.0, 5.0), 1.0)
        clear_scene()
        assert get_surface_count() == 0

    def test_capacity_exceeded(self):
        """Test adding past MAX_SURFACES raises ConfigurationError."""
        from phongtracer.core.errors import ConfigurationError
        from phongtracer.scene.intersection import MAX_SURFACES, add_sphere, num_surfaces

        num_surfaces[None] = MAX_SURFACES
        with pytest.raises(ConfigurationError, match="Maximum number of surfaces"):
            add_sphere((0.0, 0.0, 5.0), 1.0)

    def test_colors_stored(self):
        """Test diffuse and specular colors land in the table."""
        from phongtracer.scene.intersection import add_sphere, surface_diffuse, surface_specular

        idx = add_sphere((0.0, 0.0, 5.0), 1.0, diffuse=(0.1, 0.2, 0.3), specular=(0.4, 0.5, 0.6))
        d = surface_diffuse[idx]
        s = surface_specular[idx]
        assert abs(d[2] - 0.3) < 1e-6
        assert abs(s[0] - 0.4) < 1e-6


class TestNearestHit:
    """Tests for intersect_scene."""

    def test_empty_scene_misses(self):
        """Test a ray in an empty scene misses."""
        hit, _, surface, _ = _nearest((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert hit == 0
        assert surface == -1

    def test_single_sphere(self):
        """Test the hit point of a single sphere."""
        from phongtracer.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 5.0), 1.0)
        hit, t, surface, point = _nearest((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert hit == 1
        assert abs(t - 4.0) < 1e-5
        assert surface == 0
        assert abs(point[2] - 4.0) < 1e-5

    def test_closest_of_mixed_surfaces(self):
        """Test the nearest surface wins regardless of insertion order."""
        from phongtracer.scene.intersection import add_cylinder, add_plane, add_sphere

        add_plane((0.0, 0.0, 10.0), (0.0, 0.0, -1.0))
        add_cylinder((0.0, 0.0, 7.0), 1.0)
        add_sphere((0.0, 0.0, 4.0), 1.0)

        hit, t, surface, _ = _nearest((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert hit == 1
        assert abs(t - 3.0) < 1e-5
        assert surface == 2

    def test_ray_away_from_everything(self):
        """Test a ray pointing away from every surface misses."""
        from phongtracer.scene.intersection import add_plane, add_sphere

        add_sphere((0.0, 0.0, 5.0), 1.0)
        add_plane((0.0, -1.0, 0.0), (0.0, 1.0, 0.0))

        hit, _, _, _ = _nearest((0.0, 0.0, 0.0), (0.0, 1.0, -1.0))
        assert hit == 0

    def test_tie_keeps_first_surface(self):
        """Test equal distances keep the earlier surface."""
        from phongtracer.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 5.0), 1.0)
        add_sphere((0.0, 0.0, 5.0), 1.0)

        _, _, surface, _ = _nearest((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert surface == 0


class TestOcclusion:
    """Tests for shadow-ray queries."""

    def test_unblocked_light(self):
        """Test a point with a clear path to the light is lit."""
        from phongtracer.scene.intersection import add_plane

        add_plane((0.0, -1.0, 0.0), (0.0, 1.0, 0.0))
        assert _occluded((0.0, -1.0, 5.0), (0.0, 10.0, 5.0), 0) == 0

    def test_blocker_just_beyond_light_occludes_by_default(self):
        """Test a hit at t < |Rdn| shadows even when it lies past the light."""
        from phongtracer.scene.intersection import add_plane, add_sphere

        add_plane((0.0, -1.0, 0.0), (0.0, 1.0, 0.0))
        # |Rdn| = 11 and the sphere is hit at t = 20/11
        add_sphere((0.0, 20.0, 5.0), 1.0)
        assert _occluded((0.0, -1.0, 5.0), (0.0, 10.0, 5.0), 0) == 1

    def test_segment_test_ignores_blocker_beyond_light(self):
        """Test the segment test only counts surfaces before the light."""
        from phongtracer.scene.intersection import add_plane, add_sphere

        add_plane((0.0, -1.0, 0.0), (0.0, 1.0, 0.0))
        add_sphere((0.0, 20.0, 5.0), 1.0)
        assert _occluded((0.0, -1.0, 5.0), (0.0, 10.0, 5.0), 0, "segment") == 0

    @pytest.mark.parametrize("shadow_test", ["parametric", "segment"])
    def test_blocker_far_beyond_light(self, shadow_test):
        """Test a hit at t >= |Rdn| never shadows."""
        from phongtracer.scene.intersection import add_plane, add_sphere

        add_plane((0.0, -1.0, 0.0), (0.0, 1.0, 0.0))
        # Hit at t = 200/11, past |Rdn| = 11
        add_sphere((0.0, 200.0, 5.0), 1.0)
        assert _occluded((0.0, -1.0, 5.0), (0.0, 10.0, 5.0), 0, shadow_test) == 0

    @pytest.mark.parametrize("shadow_test", ["parametric", "segment"])
    def test_blocker_between_point_and_light_in_both_tests(self, shadow_test):
        """Test a surface before the light shadows under either test."""
        from phongtracer.scene.intersection import add_plane, add_sphere

        add_plane((0.0, -1.0, 0.0), (0.0, 1.0, 0.0))
        add_sphere((0.0, 2.0, 5.0), 1.0)
        assert _occluded((0.0, -1.0, 5.0), (0.0, 10.0, 5.0), 0, shadow_test) == 1

    def test_shaded_surface_is_skipped(self):
        """Test the surface being shaded never shadows itself."""
        from phongtracer.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, 5.0), 1.0)
        # Point on the far side of the sphere, light in front of it
        assert _occluded((0.0, 0.0, 6.0), (0.0, 0.0, 0.0), 0) == 0


class TestSurfaceNormal:
    """Tests for normals looked up through the table."""

    @pytest.mark.parametrize(
        "kind, point, expected",
        [
            ("sphere", (0.0, 0.0, 4.0), (0.0, 0.0, -1.0)),
            ("cylinder", (1.0, 3.0, 5.0), (1.0, 0.0, 0.0)),
            ("plane", (2.0, -1.0, 7.0), (0.0, 1.0, 0.0)),
        ],
    )
    def test_normal_dispatch(self, kind, point, expected):
        """Test each kind uses its own normal."""
        from phongtracer.scene.intersection import (
            add_cylinder,
            add_plane,
            add_sphere,
            surface_normal,
            vec3,
        )

        if kind == "sphere":
            idx = add_sphere((0.0, 0.0, 5.0), 1.0)
        elif kind == "cylinder":
            idx = add_cylinder((0.0, 0.0, 5.0), 1.0)
        else:
            idx = add_plane((0.0, -1.0, 0.0), (0.0, 2.0, 0.0))

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = surface_normal(idx, vec3(point[0], point[1], point[2]))

        test_kernel()
        n = result[None]
        for axis in range(3):
            assert abs(n[axis] - expected[axis]) < 1e-6
