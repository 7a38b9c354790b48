"""Core rendering module.

Components:
    ray: Ray data structure and vector utilities
    errors: Exception hierarchy (ConfigurationError and friends)
    settings: RenderSettings and the integer mode enums passed to kernels
    shading: Render target, per-pixel shading kernel and render entry points
    renderer: Renderer wrapper class and the render_scene convenience function

The shading kernel casts one primary ray per pixel, finds the nearest
surface, tests one shadow ray per light and accumulates diffuse and specular
contributions scaled by radial and angular attenuation.
"""

from .errors import ConfigurationError, FalloffError, PhongTracerError
from .ray import (
    Ray,
    dot,
    is_zero,
    length,
    length_squared,
    make_ray,
    mirror,
    normalize,
    ray_at,
    vec3,
)
from .settings import ExponentMode, RadialFalloff, RenderSettings, ShadowMode, ShadowTest

# Note: shading and renderer are NOT imported here because they declare Taichi
# fields, which must only be created after ti.init(). Import them directly:
#   from phongtracer.core.renderer import Renderer, render_scene

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "dot",
    "normalize",
    "is_zero",
    "mirror",
    "PhongTracerError",
    "ConfigurationError",
    "FalloffError",
    "RenderSettings",
    "ShadowMode",
    "ShadowTest",
    "RadialFalloff",
    "ExponentMode",
]
