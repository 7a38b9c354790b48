"""Radial and angular light attenuation.

Radial falloff scales a light's contribution by the distance d between the
shaded point and the light:

    linear:     1 / (a2*d + a1*d + a0)
    quadratic:  1 / (a2*d^2 + a1*d + a0)

The linear model is the historical formula of this renderer (both
the quadratic and the linear coefficient multiply d); the quadratic model is
the textbook form. A zero denominator cannot be handled inside a kernel, so
callers evaluate falloff_denominator() first and report the light instead of
dividing.

Angular falloff only applies to spotlights. Given the spotlight aim and the
unit vector from the light toward the shaded point:

    cos_alpha = aim . to_point
    f = 0                        if cos_alpha < cos(theta)
    f = cos_alpha ^ angular_a0   otherwise
"""

import taichi as ti
import taichi.math as tm

from phongtracer.core.settings import ExponentMode, RadialFalloff

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.func
def legacy_power(x: ti.f32, y: ti.f32) -> ti.f32:
    """Repeated squaring, the historical exponentiation of this renderer.

    Squares x once for every integer i with 1 <= i < y, so the result is
    x^(2^(ceil(y)-1)) rather than x^y. Kept to reproduce older images.

    Args:
        x: The base.
        y: The nominal exponent.

    Returns:
        The repeatedly squared base.
    """
    result = x
    i = 1.0
    while i < y:
        result *= result
        i += 1.0
    return result


@ti.func
def power(x: ti.f32, y: ti.f32, mode: ti.i32) -> ti.f32:
    """Raise a non-negative base to an exponent.

    Args:
        x: The base (non-negative).
        y: The exponent.
        mode: ExponentMode code (EXACT or LEGACY).

    Returns:
        x^y, or the legacy repeated-squaring value.
    """
    result = 0.0
    if mode == int(ExponentMode.LEGACY):
        result = legacy_power(x, y)
    else:
        # Negative bases only come from cones wider than 90 degrees
        result = ti.max(x, 0.0) ** y
    return result


@ti.func
def falloff_denominator(a2: ti.f32, a1: ti.f32, a0: ti.f32, distance: ti.f32, model: ti.i32) -> ti.f32:
    """Denominator of the radial falloff for a given distance.

    Args:
        a2: Quadratic attenuation coefficient.
        a1: Linear attenuation coefficient.
        a0: Constant attenuation coefficient.
        distance: Distance from the shaded point to the light.
        model: RadialFalloff code (LINEAR or QUADRATIC).

    Returns:
        The value whose reciprocal is the radial falloff.
    """
    quadratic_term = a2 * distance
    if model == int(RadialFalloff.QUADRATIC):
        quadratic_term = a2 * distance * distance
    return quadratic_term + a1 * distance + a0


@ti.func
def radial_falloff(a2: ti.f32, a1: ti.f32, a0: ti.f32, distance: ti.f32, model: ti.i32) -> ti.f32:
    """Radial attenuation factor.

    The caller must ensure falloff_denominator() is non-zero.
    """
    return 1.0 / falloff_denominator(a2, a1, a0, distance, model)


@ti.func
def angular_falloff(
    theta: ti.f32,
    light_direction: vec3,
    to_point: vec3,
    angular_a0: ti.f32,
    mode: ti.i32,
) -> ti.f32:
    """Spotlight attenuation factor.

    Args:
        theta: Cone half-angle in degrees.
        light_direction: Unit aim direction of the spotlight.
        to_point: Unit vector from the light toward the shaded point.
        angular_a0: Falloff exponent.
        mode: ExponentMode code used for the exponentiation.

    Returns:
        0 outside the cone, cos_alpha^angular_a0 inside it.
    """
    cos_theta = ti.cos(theta * (tm.pi / 180.0))
    cos_alpha = tm.dot(light_direction, to_point)

    result = 0.0
    if cos_alpha >= cos_theta:
        result = power(cos_alpha, angular_a0, mode)
    return result
