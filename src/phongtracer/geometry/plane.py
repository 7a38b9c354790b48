"""Infinite plane with ray-plane intersection.

A plane is given by a point on it and a normal that need not be unit length.
With L = C - O the ray meets the plane at

    t = (L . N) / (D . N)

A ray parallel to the plane (D . N == 0) is reported as a miss for that ray
only. A plane whose normal is the zero vector is rejected when the scene is
validated, so it never reaches this solver.
"""

import taichi as ti
import taichi.math as tm

from phongtracer.core.ray import dot, normalize

from .sphere import NO_HIT

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.func
def hit_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    position: vec3,
    normal: vec3,
) -> ti.f32:
    """Test for ray-plane intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        position: Any point on the plane.
        normal: The plane normal (non-zero, need not be normalized).

    Returns:
        The distance t if it is strictly positive, otherwise NO_HIT.
    """
    denom = dot(ray_direction, normal)

    t = NO_HIT
    if denom != 0.0:
        candidate = dot(position - ray_origin, normal) / denom
        if candidate > 0.0:
            t = candidate
    return t


@ti.func
def plane_normal(normal: vec3) -> vec3:
    """Unit normal of a plane, exactly as oriented in the scene."""
    return normalize(normal)
