"""Sphere primitive with robust ray-sphere intersection.

This module provides the closed-form ray-sphere solver and the shared
quadratic root selection used by the cylinder solver.

The quadratic is solved with the robust formula from Ray Tracing Gems to
avoid catastrophic cancellation when b^2 is nearly equal to 4ac. Roots are
selected the same way for every quadric: the smaller root if it is strictly
positive, otherwise the larger root if it is strictly positive, otherwise
NO_HIT.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongtracer.geometry.sphere import hit_sphere, vec3
    >>> # Inside a kernel:
    >>> # t = hit_sphere(vec3(0, 0, 0), vec3(0, 0, 1), vec3(0, 0, 5), 1.0)  -> 4.0
"""

import taichi as ti
import taichi.math as tm

from phongtracer.core.ray import dot, length_squared, normalize

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Returned by every solver when the ray misses (never a valid distance)
NO_HIT = -1.0


@ti.func
def _solve_quadratic_robust(h: ti.f32, a: ti.f32, c: ti.f32, sqrt_d: ti.f32):
    """Solve quadratic equation using robust formula from Ray Tracing Gems.

    Solves a*t^2 + 2*h*t + c = 0 using a numerically stable method.

    Args:
        h: Half of the linear coefficient.
        a: Quadratic coefficient (non-zero).
        c: Constant term.
        sqrt_d: Square root of discriminant (h^2 - a*c).

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    # q = -(h + sign(h) * sqrt(discriminant))
    sign_h = ti.select(h < 0.0, -1.0, 1.0)
    q = -(h + sign_h * sqrt_d)

    t0 = 0.0
    t1 = 0.0

    if ti.abs(q) < 1e-10:
        # Tangent ray through the origin of the quadric frame
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        temp = t0
        t0 = t1
        t1 = temp

    return t0, t1


@ti.func
def nearest_positive_root(t0: ti.f32, t1: ti.f32) -> ti.f32:
    """Pick the intersection distance from two ordered roots.

    Args:
        t0: The smaller root.
        t1: The larger root.

    Returns:
        t0 if it is strictly positive, else t1 if it is strictly positive,
        else NO_HIT.
    """
    t = NO_HIT
    if t0 > 0.0:
        t = t0
    elif t1 > 0.0:
        t = t1
    return t


@ti.func
def solve_ray_quadratic(a: ti.f32, h: ti.f32, c: ti.f32) -> ti.f32:
    """Intersect a ray with a quadric given in half-b form.

    Args:
        a: Quadratic coefficient. Zero means the ray is degenerate for this
            quadric (zero direction, or parallel to a cylinder axis).
        h: Half of the linear coefficient.
        c: Constant term.

    Returns:
        The nearest strictly positive root, or NO_HIT.
    """
    t = NO_HIT
    discriminant = h * h - a * c
    if a != 0.0 and discriminant >= 0.0:
        t0, t1 = _solve_quadratic_robust(h, a, c, ti.sqrt(discriminant))
        t = nearest_positive_root(t0, t1)
    return t


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, center: vec3, radius: ti.f32) -> ti.f32:
    """Test for ray-sphere intersection.

    Solves |D|^2 t^2 + 2 D.(O-C) t + |O-C|^2 - r^2 = 0 for t.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        center: The center of the sphere.
        radius: The radius of the sphere (positive).

    Returns:
        The smallest strictly positive distance t, or NO_HIT.
    """
    # Vector from sphere center to ray origin
    oc = ray_origin - center

    a = length_squared(ray_direction)
    h = dot(ray_direction, oc)  # Half of the traditional 'b'
    c = length_squared(oc) - radius * radius

    return solve_ray_quadratic(a, h, c)


@ti.func
def sphere_normal(point: vec3, center: vec3) -> vec3:
    """Outward unit normal of a sphere at a surface point."""
    return normalize(point - center)
