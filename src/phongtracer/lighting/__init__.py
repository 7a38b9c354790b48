"""Lighting module: attenuation functions and the shading law.

Components:
    attenuation: Radial (distance) and angular (spotlight cone) falloff
    phong: Diffuse and specular terms of the local illumination law
    lights: Device-side light table (Taichi fields)

All functions here are Taichi functions for use inside the render kernel.
"""

from .attenuation import (
    angular_falloff,
    falloff_denominator,
    legacy_power,
    power,
    radial_falloff,
)
from .phong import diffuse_term, phong_contribution, specular_term

# Note: lights is NOT imported here because it declares Taichi fields.
# Import it directly: from phongtracer.lighting.lights import add_light

__all__ = [
    "angular_falloff",
    "falloff_denominator",
    "legacy_power",
    "power",
    "radial_falloff",
    "diffuse_term",
    "specular_term",
    "phong_contribution",
]
