"""Infinite vertical cylinder with ray-cylinder intersection.

The cylinder axis is fixed to the y axis and has no caps or height limit, so
only the horizontal (x, z) components of the ray and of the cylinder
position take part in the intersection. Substituting the ray into

    (x - Cx)^2 + (z - Cz)^2 = r^2

gives a quadratic in t with

    a = Dx^2 + Dz^2
    b = 2 * (Ox*Dx - Dx*Cx + Oz*Dz - Dz*Cz)
    c = Ox^2 - 2*Ox*Cx + Cx^2 + Oz^2 - 2*Oz*Cz + Cz^2 - r^2

A ray parallel to the axis (a == 0) never hits.
"""

import taichi as ti
import taichi.math as tm

from phongtracer.core.ray import normalize

from .sphere import solve_ray_quadratic

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.func
def hit_cylinder(
    ray_origin: vec3,
    ray_direction: vec3,
    center: vec3,
    radius: ti.f32,
) -> ti.f32:
    """Test for ray-cylinder intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        center: Any point on the cylinder axis; its y component is ignored.
        radius: The radius of the cylinder (positive).

    Returns:
        The smallest strictly positive distance t, or NO_HIT.
    """
    ox = ray_origin.x
    oz = ray_origin.z
    dx = ray_direction.x
    dz = ray_direction.z
    cx = center.x
    cz = center.z

    a = dx * dx + dz * dz
    h = ox * dx - dx * cx + oz * dz - dz * cz  # Half of b
    c = ox * ox - 2.0 * ox * cx + cx * cx + oz * oz - 2.0 * oz * cz + cz * cz - radius * radius

    return solve_ray_quadratic(a, h, c)


@ti.func
def cylinder_normal(point: vec3, center: vec3) -> vec3:
    """Outward unit normal of a vertical cylinder at a surface point.

    The normal lies in the horizontal plane, pointing away from the axis.
    """
    return normalize(vec3(point.x - center.x, 0.0, point.z - center.z))
