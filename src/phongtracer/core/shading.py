"""Per-pixel Phong shading kernel.

This module implements the main rendering kernel: one primary ray per pixel,
a brute-force nearest-hit search, one shadow ray per light and a Phong-style
local illumination sum scaled by radial and angular attenuation.

For a hit at point P on a surface with unit normal N, each light in scene
order either adds

    frad(|Lp - P|) * fang(...) * (diffuse + specular)

to the pixel (fang only for spotlights), or, when is_occluded() reports another
surface in the way, applies the shadow policy:

    dim:      the whole accumulated color is scaled by the dimming factor
    exclude:  the light adds nothing

The result is clamped to [0, 1] per channel. Pixels whose primary ray hits
nothing are black.

A zero radial falloff denominator cannot be raised from inside a kernel. The
kernel records the lowest offending light index in an error field instead and
check_render_errors() turns it into a FalloffError after the kernel returns.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongtracer.core.shading import render_image, setup_render_target
    >>> from phongtracer.scene.manager import SceneManager
    >>> from phongtracer.scene.presets import create_demo_scene
    >>>
    >>> SceneManager().load(create_demo_scene())
    >>> setup_render_target(320, 240)
    >>> render_image()
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from phongtracer.camera.viewplane import check_camera, get_primary_ray
from phongtracer.core.errors import FalloffError
from phongtracer.core.ray import length
from phongtracer.core.settings import RenderSettings, ShadowMode
from phongtracer.lighting.attenuation import angular_falloff, falloff_denominator, radial_falloff
from phongtracer.lighting.lights import (
    get_light_aim,
    is_spotlight,
    light_angular_a0,
    light_colors,
    light_positions,
    light_radial,
    light_thetas,
    num_lights,
)
from phongtracer.lighting.phong import phong_contribution
from phongtracer.scene.intersection import (
    intersect_scene,
    is_occluded,
    surface_diffuse,
    surface_normal,
    surface_specular,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# Color of pixels whose primary ray hits nothing
BACKGROUND_COLOR = vec3(0.0, 0.0, 0.0)

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Linear color buffer, indexed [column, row] with row 0 at the bottom
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())

# Lowest light index with a zero falloff denominator (NO_ERROR if none)
NO_ERROR = 2**30
_error_light = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions and clears the buffers.
    The buffers are preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT
    to avoid Taichi kernel recompilation issues.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum
            supported size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the color buffer and the error flag."""
    _color_buffer.fill(0.0)
    reset_render_errors()


def reset_render_errors() -> None:
    """Forget any falloff error recorded by a previous render."""
    _error_light[None] = NO_ERROR


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def get_image() -> "ti.MatrixField":
    """Get the color buffer.

    Note: This returns the full preallocated buffer. Use get_image_dimensions()
    to determine the active region.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    return _color_buffer


# =============================================================================
# Shading Core
# =============================================================================


@ti.func
def shade_hit(
    surface_idx: ti.i32,
    point: vec3,
    view: vec3,
    shadow_mode: ti.i32,
    shadow_test: ti.i32,
    radial_model: ti.i32,
    exponent_mode: ti.i32,
    shininess: ti.f32,
    dim_factor: ti.f32,
) -> vec3:
    """Accumulate the contribution of every light at a hit point.

    Args:
        surface_idx: Index of the hit surface.
        point: The hit point.
        view: Unit vector from the hit point toward the camera.
        shadow_mode: ShadowMode code.
        shadow_test: ShadowTest code.
        radial_model: RadialFalloff code.
        exponent_mode: ExponentMode code.
        shininess: Specular exponent.
        dim_factor: Scale applied per occluded light in DIM mode.

    Returns:
        The unclamped color.
    """
    color = vec3(0.0, 0.0, 0.0)
    normal = surface_normal(surface_idx, point)
    diffuse_color = surface_diffuse[surface_idx]
    specular_color = surface_specular[surface_idx]

    for light_idx in range(num_lights[None]):
        to_light = light_positions[light_idx] - point
        distance = length(to_light)

        # A light sitting on the hit point has no direction to shade with
        if distance > 0.0:
            if is_occluded(point, to_light, surface_idx, shadow_test) == 1:
                if shadow_mode == int(ShadowMode.DIM):
                    color *= dim_factor
            else:
                radial = light_radial[light_idx]
                denom = falloff_denominator(radial.z, radial.y, radial.x, distance, radial_model)
                if denom == 0.0:
                    ti.atomic_min(_error_light[None], light_idx)
                else:
                    direction = to_light / distance
                    contribution = phong_contribution(
                        normal,
                        direction,
                        view,
                        diffuse_color,
                        specular_color,
                        light_colors[light_idx],
                        shininess,
                        exponent_mode,
                    )
                    factor = radial_falloff(radial.z, radial.y, radial.x, distance, radial_model)
                    if is_spotlight(light_idx) == 1:
                        factor *= angular_falloff(
                            light_thetas[light_idx],
                            get_light_aim(light_idx),
                            -direction,
                            light_angular_a0[light_idx],
                            exponent_mode,
                        )
                    color += factor * contribution

    return color


@ti.func
def shade_pixel(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    shadow_mode: ti.i32,
    shadow_test: ti.i32,
    radial_model: ti.i32,
    exponent_mode: ti.i32,
    shininess: ti.f32,
    dim_factor: ti.f32,
) -> vec3:
    """Compute the clamped color of one pixel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.
        shadow_mode: ShadowMode code.
        shadow_test: ShadowTest code.
        radial_model: RadialFalloff code.
        exponent_mode: ExponentMode code.
        shininess: Specular exponent.
        dim_factor: Scale applied per occluded light in DIM mode.

    Returns:
        The pixel color with every channel in [0, 1].
    """
    ray = get_primary_ray(pixel_i, pixel_j, width, height)
    hit_record = intersect_scene(ray.origin, ray.direction)

    color = BACKGROUND_COLOR
    if hit_record.hit == 1:
        color = shade_hit(
            hit_record.surface,
            hit_record.point,
            -ray.direction,
            shadow_mode,
            shadow_test,
            radial_model,
            exponent_mode,
            shininess,
            dim_factor,
        )

    return tm.clamp(color, 0.0, 1.0)


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(
    width: ti.i32,
    height: ti.i32,
    row_start: ti.i32,
    row_end: ti.i32,
    shadow_mode: ti.i32,
    shadow_test: ti.i32,
    radial_model: ti.i32,
    exponent_mode: ti.i32,
    shininess: ti.f32,
    dim_factor: ti.f32,
):
    """Shade every pixel in rows [row_start, row_end) into the color buffer."""
    for i, j in ti.ndrange(width, (row_start, row_end)):
        _color_buffer[i, j] = shade_pixel(
            i,
            j,
            width,
            height,
            shadow_mode,
            shadow_test,
            radial_model,
            exponent_mode,
            shininess,
            dim_factor,
        )


@ti.kernel
def _render_single_pixel(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    shadow_mode: ti.i32,
    shadow_test: ti.i32,
    radial_model: ti.i32,
    exponent_mode: ti.i32,
    shininess: ti.f32,
    dim_factor: ti.f32,
) -> vec3:
    """Shade a specific pixel without touching the color buffer.

    Used for testing and debugging individual pixels.
    """
    return shade_pixel(
        pixel_i,
        pixel_j,
        width,
        height,
        shadow_mode,
        shadow_test,
        radial_model,
        exponent_mode,
        shininess,
        dim_factor,
    )


# =============================================================================
# Public Rendering API
# =============================================================================


def _kernel_settings(settings: RenderSettings | None) -> tuple[int, int, int, int, float, float]:
    if settings is None:
        settings = RenderSettings()
    return (
        settings.shadow_mode_code,
        settings.shadow_test_code,
        settings.radial_falloff_code,
        settings.exponent_mode_code,
        settings.shininess,
        settings.shadow_dim_factor,
    )


def check_render_errors() -> None:
    """Raise for any fatal condition recorded by the last kernel launch.

    Raises:
        FalloffError: If a light's radial falloff denominator was zero.
    """
    light_idx = int(_error_light[None])
    if light_idx != NO_ERROR:
        raise FalloffError(light_idx)


def render_rows(row_start: int, row_end: int, settings: RenderSettings | None = None) -> None:
    """Render a band of rows into the color buffer.

    Args:
        row_start: First row to render (0 = bottom).
        row_end: One past the last row to render.
        settings: Render settings. Uses defaults if not provided.

    Raises:
        RuntimeError: If render target has not been set up.
        ConfigurationError: If no camera has been uploaded.
        FalloffError: If a light's radial falloff denominator was zero.
    """
    _check_render_target_initialized()
    check_camera()

    width, height = get_image_dimensions()
    row_start = max(0, row_start)
    row_end = min(height, row_end)
    if row_start >= row_end:
        return

    _render_rows(width, height, row_start, row_end, *_kernel_settings(settings))
    check_render_errors()


def render_image(settings: RenderSettings | None = None) -> None:
    """Render every pixel of the image into the color buffer.

    Args:
        settings: Render settings. Uses defaults if not provided.

    Raises:
        RuntimeError: If render target has not been set up.
        ConfigurationError: If no camera has been uploaded.
        FalloffError: If a light's radial falloff denominator was zero.
    """
    _check_render_target_initialized()
    reset_render_errors()
    _, height = get_image_dimensions()
    render_rows(0, height, settings)


def render_pixel(
    pixel_i: int, pixel_j: int, settings: RenderSettings | None = None
) -> tuple[float, float, float]:
    """Shade a single pixel.

    This is a Python-callable function for testing. For production rendering,
    use render_image() which processes all pixels in parallel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = bottom).
        settings: Render settings. Uses defaults if not provided.

    Returns:
        Tuple of (R, G, B) color values in [0, 1].

    Raises:
        RuntimeError: If render target has not been set up.
        ConfigurationError: If no camera has been uploaded.
        FalloffError: If a light's radial falloff denominator was zero.
    """
    _check_render_target_initialized()
    check_camera()
    reset_render_errors()

    width, height = get_image_dimensions()
    color = _render_single_pixel(pixel_i, pixel_j, width, height, *_kernel_settings(settings))
    check_render_errors()

    return (float(color[0]), float(color[1]), float(color[2]))


def get_normalized_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered image as a NumPy array.

    Returns the color buffer with values in [0, 1] range (clamped).
    The array shape is (height, width, 3) with the top scanline first.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    # Extract active region of the full buffer
    image = _color_buffer.to_numpy()[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3) for standard image format
    image = np.transpose(image, (1, 0, 2))

    # Flip vertically (row 0 is the bottom of the view plane)
    image = np.flipud(image)

    image = np.clip(image, 0.0, 1.0)

    return image.astype(np.float32)
