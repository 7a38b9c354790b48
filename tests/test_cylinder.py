"""Unit tests for infinite vertical cylinder intersection.

Tests cover:
- Horizontal hits from outside and inside
- Vertical ray components are ignored
- Rays parallel to the axis never hit
- Tangent rays (zero discriminant)
- Miss and behind-the-ray cases
- Outward radial normal
"""

import taichi as ti


class TestCylinderIntersection:
    """Tests for ray-cylinder intersection."""

    def test_hit_cylinder_direct_hit(self):
        """Test a horizontal ray hits the near wall."""
        from phongtracer.geometry.cylinder import hit_cylinder, vec3

        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            t_val[None] = hit_cylinder(
                vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0), vec3(0.0, 0.0, 5.0), 1.0
            )

        test_kernel()
        assert abs(t_val[None] - 4.0) < 1e-5

    def test_hit_cylinder_ignores_axis_height(self):
        """Test the y component of the axis position is irrelevant."""
        from phongtracer.geometry.cylinder import hit_cylinder, vec3

        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            t_val[None] = hit_cylinder(
                vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0), vec3(0.0, 100.0, 5.0), 1.0
            )

        test_kernel()
        assert abs(t_val[None] - 4.0) < 1e-5

    def test_hit_cylinder_sloped_ray(self):
        """Test a ray with a vertical component hits at the same t."""
        from phongtracer.geometry.cylinder import hit_cylinder, vec3

        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            t_val[None] = hit_cylinder(
                vec3(0.0, 0.0, 0.0), vec3(0.0, 3.0, 1.0), vec3(0.0, 0.0, 5.0), 1.0
            )

        test_kernel()
        assert abs(t_val[None] - 4.0) < 1e-5

    def test_hit_cylinder_parallel_to_axis(self):
        """Test a vertical ray never hits, even inside the cylinder."""
        from phongtracer.geometry.cylinder import hit_cylinder, vec3
        from phongtracer.geometry.sphere import NO_HIT

        t_val = ti.field(dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            t_val[0] = hit_cylinder(
                vec3(0.0, 0.0, 5.0), vec3(0.0, 1.0, 0.0), vec3(0.0, 0.0, 5.0), 1.0
            )
            t_val[1] = hit_cylinder(
                vec3(3.0, 0.0, 5.0), vec3(0.0, -1.0, 0.0), vec3(0.0, 0.0, 5.0), 1.0
            )

        test_kernel()
        assert t_val[0] == NO_HIT
        assert t_val[1] == NO_HIT

    def test_hit_cylinder_from_inside(self):
        """Test a ray starting on the axis hits the wall at t = radius."""
        from phongtracer.geometry.cylinder import hit_cylinder, vec3

        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            t_val[None] = hit_cylinder(
                vec3(0.0, 0.0, 5.0), vec3(1.0, 0.0, 0.0), vec3(0.0, 0.0, 5.0), 2.0
            )

        test_kernel()
        assert abs(t_val[None] - 2.0) < 1e-5

    def test_hit_cylinder_miss(self):
        """Test a ray passing beside the cylinder misses."""
        from phongtracer.geometry.cylinder import hit_cylinder, vec3
        from phongtracer.geometry.sphere import NO_HIT

        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            t_val[None] = hit_cylinder(
                vec3(2.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0), vec3(0.0, 0.0, 5.0), 1.0
            )

        test_kernel()
        assert t_val[None] == NO_HIT

    def test_hit_cylinder_behind_ray(self):
        """Test a cylinder behind the origin is not hit."""
        from phongtracer.geometry.cylinder import hit_cylinder, vec3
        from phongtracer.geometry.sphere import NO_HIT

        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            t_val[None] = hit_cylinder(
                vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0), vec3(0.0, 0.0, -5.0), 1.0
            )

        test_kernel()
        assert t_val[None] == NO_HIT

    def test_hit_cylinder_tangent_ray(self):
        """Test a ray grazing the wall (zero discriminant) hits at the single root."""
        from phongtracer.geometry.cylinder import hit_cylinder, vec3

        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            # Axis at x = 1, so the ray along z touches the wall at (0, 0, 5)
            t_val[None] = hit_cylinder(
                vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0), vec3(1.0, 0.0, 5.0), 1.0
            )

        test_kernel()
        assert abs(t_val[None] - 5.0) < 1e-5


class TestCylinderNormal:
    """Tests for the cylinder normal."""

    def test_normal_is_horizontal_and_outward(self):
        """Test the normal has no vertical component and points away from the axis."""
        from phongtracer.geometry.cylinder import cylinder_normal, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = cylinder_normal(vec3(0.0, 7.0, 3.0), vec3(0.0, 0.0, 5.0))

        test_kernel()
        n = result[None]
        assert abs(n[0]) < 1e-6
        assert abs(n[1]) < 1e-6
        assert abs(n[2] + 1.0) < 1e-6
