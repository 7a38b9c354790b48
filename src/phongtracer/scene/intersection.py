"""Scene-level surface storage and ray queries.

Surfaces are stored in Taichi fields (Structure-of-Arrays) with an integer
kind tag per entry. Queries loop over every surface (no acceleration
structure) and dispatch on the kind to the matching geometry solver.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongtracer.scene.intersection import add_sphere, clear_scene, intersect_scene
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, 5.0), 1.0, diffuse=(1.0, 1.0, 1.0))
    0
    >>> # Use intersect_scene within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from phongtracer.core.errors import ConfigurationError
from phongtracer.core.ray import length, make_ray, ray_at
from phongtracer.core.settings import ShadowTest
from phongtracer.geometry.cylinder import cylinder_normal, hit_cylinder
from phongtracer.geometry.plane import hit_plane, plane_normal
from phongtracer.geometry.sphere import NO_HIT, hit_sphere, sphere_normal

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class SurfaceKind(IntEnum):
    """Kind tag stored for every surface in the device table."""

    SPHERE = 0
    CYLINDER = 1
    PLANE = 2


@ti.dataclass
class SceneHitRecord:
    """Record of the nearest ray-scene intersection.

    Attributes:
        hit: Whether the ray intersected any surface (1 if hit, 0 if miss).
        t: Parametric distance of the hit. Only valid if hit == 1.
        point: The hit point. Only valid if hit == 1.
        surface: Index of the hit surface in the table, -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    surface: ti.i32


# Maximum number of surfaces in the device table
MAX_SURFACES = 1024

surface_kinds = ti.field(dtype=ti.i32, shape=MAX_SURFACES)
surface_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SURFACES)
surface_radii = ti.field(dtype=ti.f32, shape=MAX_SURFACES)
surface_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SURFACES)
surface_diffuse = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SURFACES)
surface_specular = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SURFACES)
num_surfaces = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all surfaces from the table.

    Resets the surface count to zero. The field data is overwritten when
    new surfaces are added.
    """
    num_surfaces[None] = 0


def add_surface(
    kind: SurfaceKind,
    position: tuple[float, float, float],
    diffuse: tuple[float, float, float] = (0.0, 0.0, 0.0),
    specular: tuple[float, float, float] = (0.0, 0.0, 0.0),
    radius: float = 0.0,
    normal: tuple[float, float, float] = (0.0, 0.0, 0.0),
) -> int:
    """Add a surface of any kind to the table.

    Args:
        kind: The surface kind.
        position: Sphere center, point on a cylinder axis or point on a plane.
        diffuse: Diffuse color (RGB).
        specular: Specular color (RGB).
        radius: Sphere or cylinder radius.
        normal: Plane normal.

    Returns:
        The index of the added surface.

    Raises:
        ConfigurationError: If the maximum number of surfaces is exceeded.
    """
    idx = num_surfaces[None]
    if idx >= MAX_SURFACES:
        raise ConfigurationError(f"Maximum number of surfaces ({MAX_SURFACES}) exceeded")
    surface_kinds[idx] = int(kind)
    surface_positions[idx] = vec3(position[0], position[1], position[2])
    surface_radii[idx] = radius
    surface_normals[idx] = vec3(normal[0], normal[1], normal[2])
    surface_diffuse[idx] = vec3(diffuse[0], diffuse[1], diffuse[2])
    surface_specular[idx] = vec3(specular[0], specular[1], specular[2])
    num_surfaces[None] = idx + 1
    return idx


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    diffuse: tuple[float, float, float] = (0.0, 0.0, 0.0),
    specular: tuple[float, float, float] = (0.0, 0.0, 0.0),
) -> int:
    """Add a sphere to the table and return its index."""
    return add_surface(SurfaceKind.SPHERE, center, diffuse, specular, radius=radius)


def add_cylinder(
    center: tuple[float, float, float],
    radius: float,
    diffuse: tuple[float, float, float] = (0.0, 0.0, 0.0),
    specular: tuple[float, float, float] = (0.0, 0.0, 0.0),
) -> int:
    """Add a vertical cylinder to the table and return its index."""
    return add_surface(SurfaceKind.CYLINDER, center, diffuse, specular, radius=radius)


def add_plane(
    position: tuple[float, float, float],
    normal: tuple[float, float, float],
    diffuse: tuple[float, float, float] = (0.0, 0.0, 0.0),
    specular: tuple[float, float, float] = (0.0, 0.0, 0.0),
) -> int:
    """Add a plane to the table and return its index."""
    return add_surface(SurfaceKind.PLANE, position, diffuse, specular, normal=normal)


def get_surface_count() -> int:
    """Get the number of surfaces in the table."""
    return int(num_surfaces[None])


@ti.func
def intersect_surface(surface_idx: ti.i32, ray_origin: vec3, ray_direction: vec3) -> ti.f32:
    """Intersect a ray with one surface of the table.

    Returns:
        The nearest strictly positive distance, or NO_HIT.
    """
    kind = surface_kinds[surface_idx]
    position = surface_positions[surface_idx]

    t = NO_HIT
    if kind == int(SurfaceKind.SPHERE):
        t = hit_sphere(ray_origin, ray_direction, position, surface_radii[surface_idx])
    elif kind == int(SurfaceKind.CYLINDER):
        t = hit_cylinder(ray_origin, ray_direction, position, surface_radii[surface_idx])
    elif kind == int(SurfaceKind.PLANE):
        t = hit_plane(ray_origin, ray_direction, position, surface_normals[surface_idx])
    return t


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(hit=0, t=NO_HIT, point=vec3(0.0, 0.0, 0.0), surface=-1)


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
    """Find the nearest surface hit by a ray.

    Iterates through all surfaces and keeps the smallest strictly positive
    distance. On equal distances the earlier surface wins.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.

    Returns:
        A SceneHitRecord for the closest intersection, or a miss record.
    """
    result = _make_miss_record()
    closest_t = 0.0

    for i in range(num_surfaces[None]):
        t = intersect_surface(i, ray_origin, ray_direction)
        if t > 0.0 and (result.hit == 0 or t < closest_t):
            closest_t = t
            result.hit = 1
            result.t = t
            result.surface = i

    if result.hit == 1:
        result.point = ray_at(make_ray(ray_origin, ray_direction), closest_t)

    return result


@ti.func
def nearest_occluder(ray_origin: vec3, ray_direction: vec3, skip_surface: ti.i32) -> ti.f32:
    """Nearest positive intersection along a shadow ray.

    Args:
        ray_origin: The shaded point.
        ray_direction: Vector from the shaded point to the light.
        skip_surface: Index of the surface the shaded point lies on.

    Returns:
        The smallest strictly positive parametric distance over every
        surface except skip_surface, or NO_HIT.
    """
    closest_t = NO_HIT
    for i in range(num_surfaces[None]):
        if i != skip_surface:
            t = intersect_surface(i, ray_origin, ray_direction)
            if t > 0.0 and (closest_t < 0.0 or t < closest_t):
                closest_t = t
    return closest_t


@ti.func
def is_occluded(point: vec3, to_light: vec3, skip_surface: ti.i32, shadow_test: ti.i32) -> ti.i32:
    """Test whether any other surface shadows the point from a light.

    The shadow ray is cast along the unnormalized vector to the light, so
    the light sits at t = 1. PARAMETRIC compares the nearest hit t with the
    distance to the light, which also catches surfaces some way past the
    light. SEGMENT only counts surfaces strictly between the point and the
    light (t < 1).

    Args:
        point: The shaded point.
        to_light: Light position minus point (not normalized).
        skip_surface: Index of the surface the point lies on.
        shadow_test: ShadowTest code.

    Returns:
        1 if occluded, 0 otherwise.
    """
    occluded = 0
    t = nearest_occluder(point, to_light, skip_surface)
    if t > 0.0:
        limit = 1.0
        if shadow_test == int(ShadowTest.PARAMETRIC):
            limit = length(to_light)
        if t < limit:
            occluded = 1
    return occluded


@ti.func
def surface_normal(surface_idx: ti.i32, point: vec3) -> vec3:
    """Outward unit normal of a table surface at a point on it."""
    kind = surface_kinds[surface_idx]
    position = surface_positions[surface_idx]

    normal = vec3(0.0, 0.0, 0.0)
    if kind == int(SurfaceKind.SPHERE):
        normal = sphere_normal(point, position)
    elif kind == int(SurfaceKind.CYLINDER):
        normal = cylinder_normal(point, position)
    elif kind == int(SurfaceKind.PLANE):
        normal = plane_normal(surface_normals[surface_idx])
    return normal
