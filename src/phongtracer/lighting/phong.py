"""Phong-style local illumination.

For a shaded point with unit normal N, unit vector L toward the light, mirror
vector R = 2N(N.L) - L and view vector V (the negated primary direction):

    diffuse  = diffuse_color  * light_color * (N.L)           if N.L > 0
    specular = specular_color * light_color * (R.V)^shininess if N.L > 0 and R.V > 0

Both terms are zero otherwise. Products of colors are per channel.
"""

import taichi as ti
import taichi.math as tm

from phongtracer.core.ray import dot, mirror

from .attenuation import power

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.func
def diffuse_term(diffuse_color: vec3, light_color: vec3, n_dot_l: ti.f32) -> vec3:
    """Lambertian term of the shading law."""
    result = vec3(0.0, 0.0, 0.0)
    if n_dot_l > 0.0:
        result = diffuse_color * light_color * n_dot_l
    return result


@ti.func
def specular_term(
    specular_color: vec3,
    light_color: vec3,
    n_dot_l: ti.f32,
    r_dot_v: ti.f32,
    shininess: ti.f32,
    exponent_mode: ti.i32,
) -> vec3:
    """Specular highlight term of the shading law."""
    result = vec3(0.0, 0.0, 0.0)
    if n_dot_l > 0.0 and r_dot_v > 0.0:
        result = specular_color * light_color * power(r_dot_v, shininess, exponent_mode)
    return result


@ti.func
def phong_contribution(
    normal: vec3,
    to_light: vec3,
    view: vec3,
    diffuse_color: vec3,
    specular_color: vec3,
    light_color: vec3,
    shininess: ti.f32,
    exponent_mode: ti.i32,
) -> vec3:
    """Unattenuated diffuse + specular contribution of one light.

    Args:
        normal: Unit surface normal at the shaded point.
        to_light: Unit vector from the shaded point toward the light.
        view: Unit vector from the shaded point toward the camera.
        diffuse_color: Surface diffuse color.
        specular_color: Surface specular color.
        light_color: Per-channel light intensity.
        shininess: Specular exponent.
        exponent_mode: ExponentMode code for the specular power.

    Returns:
        diffuse + specular, before radial and angular attenuation.
    """
    n_dot_l = dot(normal, to_light)
    reflected = mirror(to_light, normal)
    r_dot_v = dot(reflected, view)

    diffuse = diffuse_term(diffuse_color, light_color, n_dot_l)
    specular = specular_term(
        specular_color, light_color, n_dot_l, r_dot_v, shininess, exponent_mode
    )
    return diffuse + specular
