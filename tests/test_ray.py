"""Unit tests for the ray module.

Tests cover:
- Ray dataclass and ray_at function
- Vector utility functions (dot, length, normalize, is_zero, mirror)
"""

import taichi as ti


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_origin(self):
        """Test ray_at returns origin when t=0."""
        from phongtracer.core.ray import Ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, 1.0))
            result[None] = ray_at(ray, 0.0)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 2.0) < 1e-6
        assert abs(r[2] - 3.0) < 1e-6

    def test_ray_at_positive_t(self):
        """Test ray_at with an unnormalized direction."""
        from phongtracer.core.ray import make_ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 1.0, 0.0), vec3(2.0, 0.0, 0.0))
            result[None] = ray_at(ray, 2.5)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 5.0) < 1e-6
        assert abs(r[1] - 1.0) < 1e-6
        assert abs(r[2]) < 1e-6


class TestVectorUtilities:
    """Tests for the vector helpers."""

    def test_dot_and_length(self):
        """Test dot, length and length_squared."""
        from phongtracer.core.ray import dot, length, length_squared, vec3

        results = ti.field(dtype=ti.f32, shape=3)

        @ti.kernel
        def test_kernel():
            v = vec3(3.0, 4.0, 0.0)
            results[0] = dot(v, vec3(1.0, 2.0, 3.0))
            results[1] = length(v)
            results[2] = length_squared(v)

        test_kernel()
        assert abs(results[0] - 11.0) < 1e-6
        assert abs(results[1] - 5.0) < 1e-6
        assert abs(results[2] - 25.0) < 1e-6

    def test_normalize_unit_length(self):
        """Test normalize produces a unit vector in the same direction."""
        from phongtracer.core.ray import normalize, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(0.0, 3.0, 4.0))

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-6
        assert abs(r[1] - 0.6) < 1e-6
        assert abs(r[2] - 0.8) < 1e-6

    def test_normalize_zero_vector(self):
        """Test normalize returns zero (not NaN) for a zero vector."""
        from phongtracer.core.ray import normalize, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(0.0, 0.0, 0.0))

        test_kernel()
        r = result[None]
        assert r[0] == 0.0 and r[1] == 0.0 and r[2] == 0.0

    def test_is_zero(self):
        """Test is_zero only accepts the exact zero vector."""
        from phongtracer.core.ray import is_zero, vec3

        results = ti.field(dtype=ti.i32, shape=2)

        @ti.kernel
        def test_kernel():
            results[0] = is_zero(vec3(0.0, 0.0, 0.0))
            results[1] = is_zero(vec3(0.0, 1e-6, 0.0))

        test_kernel()
        assert results[0] == 1
        assert results[1] == 0

    def test_mirror_about_normal(self):
        """Test mirror reflects a vector about the normal."""
        from phongtracer.core.ray import mirror, normalize, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            to_light = normalize(vec3(1.0, 1.0, 0.0))
            result[None] = mirror(to_light, vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        s = 1.0 / 2.0**0.5
        assert abs(r[0] + s) < 1e-6
        assert abs(r[1] - s) < 1e-6
        assert abs(r[2]) < 1e-6
