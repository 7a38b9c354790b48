"""Geometry module for ray/surface intersection.

Components:
    sphere: Ray-sphere solver and the shared quadratic root selection
    cylinder: Infinite vertical (y-axis) cylinder
    plane: Infinite plane with arbitrary normal

Every solver is a Taichi function with the same contract:

    t = hit_shape(ray_origin, ray_direction, ...shape parameters)

where t is the smallest strictly positive parametric distance along the ray,
or NO_HIT when there is none. Each shape also provides the outward unit
normal used for shading.
"""

from .cylinder import cylinder_normal, hit_cylinder
from .plane import hit_plane, plane_normal
from .sphere import NO_HIT, hit_sphere, nearest_positive_root, solve_ray_quadratic, sphere_normal

__all__ = [
    "NO_HIT",
    "hit_sphere",
    "sphere_normal",
    "hit_cylinder",
    "cylinder_normal",
    "hit_plane",
    "plane_normal",
    "nearest_positive_root",
    "solve_ray_quadratic",
]
