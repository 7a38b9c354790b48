"""Light table for the render kernel.

Lights are stored in Taichi fields (Structure-of-Arrays) in scene order. A
light whose direction is the zero vector is an omnidirectional point light;
any other direction makes it a spotlight with cone half-angle theta and
angular falloff exponent angular_a0.
"""

import taichi as ti
import taichi.math as tm

from phongtracer.core.errors import ConfigurationError
from phongtracer.core.ray import is_zero, normalize

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Maximum number of lights in the device table
MAX_LIGHTS = 256

light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
# (a0, a1, a2) radial attenuation coefficients
light_radial = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_directions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_thetas = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
light_angular_a0 = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Clear all lights.

    Resets the light count to zero. Existing data in the fields will be
    overwritten when new lights are added.
    """
    num_lights[None] = 0


def add_light(
    position: tuple[float, float, float],
    color: tuple[float, float, float],
    radial: tuple[float, float, float],
    direction: tuple[float, float, float] = (0.0, 0.0, 0.0),
    theta: float = 0.0,
    angular_a0: float = 0.0,
) -> int:
    """Add a light to the table.

    Args:
        position: Light position (x, y, z).
        color: Per-channel intensity; not clamped.
        radial: Radial attenuation coefficients as (a0, a1, a2).
        direction: Spotlight aim; (0, 0, 0) for a point light.
        theta: Spotlight cone half-angle in degrees.
        angular_a0: Spotlight angular falloff exponent.

    Returns:
        The index of the added light.

    Raises:
        ConfigurationError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise ConfigurationError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = vec3(position[0], position[1], position[2])
    light_colors[idx] = vec3(color[0], color[1], color[2])
    light_radial[idx] = vec3(radial[0], radial[1], radial[2])
    light_directions[idx] = vec3(direction[0], direction[1], direction[2])
    light_thetas[idx] = theta
    light_angular_a0[idx] = angular_a0
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights in the table."""
    return int(num_lights[None])


@ti.func
def is_spotlight(light_idx: ti.i32) -> ti.i32:
    """1 if the light has a non-zero aim direction, 0 for a point light."""
    return is_zero(light_directions[light_idx]) == 0


@ti.func
def get_light_aim(light_idx: ti.i32) -> vec3:
    """Unit aim direction of a spotlight (zero vector for point lights)."""
    return normalize(light_directions[light_idx])
