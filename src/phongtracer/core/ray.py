"""Ray data structure and vector utilities.

This module provides the Ray dataclass and the small set of vector helpers
used by the intersection solvers and the shading kernel. All operations are
Taichi functions so they can run inside the per-pixel render kernel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, 1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # (0, 0, 5), inside a kernel
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Primary rays are
            normalized; shadow rays are not.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector (no square root)."""
    return tm.dot(v, v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Unlike tm.normalize, a zero-length input yields the zero vector instead
    of NaNs, so degenerate normals simply produce no lighting.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v, or the zero vector.
    """
    len_sq = tm.dot(v, v)
    result = vec3(0.0, 0.0, 0.0)
    if len_sq > 0.0:
        result = v / ti.sqrt(len_sq)
    return result


@ti.func
def is_zero(v: vec3) -> ti.i32:
    """Check whether every component of a vector is exactly zero.

    Returns:
        1 if v == (0, 0, 0), 0 otherwise.
    """
    return v.x == 0.0 and v.y == 0.0 and v.z == 0.0


@ti.func
def mirror(v: vec3, normal: vec3) -> vec3:
    """Mirror a vector about a normal: 2 * N * (N . v) - v.

    With v pointing from the surface toward the light, the result points
    along the direction of perfect specular reflection.

    Args:
        v: The vector to mirror (should be normalized).
        normal: The surface normal (should be normalized).

    Returns:
        The mirrored vector.
    """
    return 2.0 * tm.dot(normal, v) * normal - v
