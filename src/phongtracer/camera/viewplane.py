"""View-plane camera for primary ray generation.

The camera sits at the origin looking down +z with y up. Its only parameters
are the width and height of the view plane, which lies at z = 1. A pixel
maps to the centre of its cell on that plane:

    direction = normalize((-w/2 + (w/W)(i + 0.5), -h/2 + (h/H)(j + 0.5), 1))

for column i (0 = left) and row j (0 = bottom) of a W x H image.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongtracer.camera.viewplane import setup_camera
    >>> from phongtracer.scene.model import Camera
    >>> setup_camera(Camera(width=2.0, height=2.0))
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_primary_ray(5, 5, 10, 10)  # Ray through pixel (5, 5)
"""

import taichi as ti
import taichi.math as tm

from phongtracer.core.errors import ConfigurationError
from phongtracer.core.ray import Ray, make_ray, vec3
from phongtracer.scene.model import Camera

# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

# View plane extent at unit distance
_view_width = ti.field(dtype=ti.f32, shape=())
_view_height = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: Camera) -> None:
    """Upload the view-plane size of a camera record.

    Args:
        camera: The scene camera.

    Raises:
        ConfigurationError: If the view plane is degenerate.
    """
    camera.validate()
    _view_width[None] = camera.width
    _view_height[None] = camera.height


def get_camera_info() -> dict[str, float]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with the view plane width and height.
    """
    return {
        "width": float(_view_width[None]),
        "height": float(_view_height[None]),
    }


def check_camera() -> None:
    """Raise if no camera has been uploaded."""
    if _view_width[None] <= 0.0 or _view_height[None] <= 0.0:
        raise ConfigurationError("Camera not set up. Call setup_camera() first.")


@ti.func
def get_ray(u: ti.f32, v: ti.f32) -> Ray:
    """Generate a ray through normalized view-plane coordinates (u, v).

    u = 0 is the left edge, u = 1 the right edge, v = 0 the bottom edge and
    v = 1 the top edge of the view plane.

    Args:
        u: Horizontal coordinate in [0, 1].
        v: Vertical coordinate in [0, 1].

    Returns:
        A Ray from the origin with a unit direction toward (u, v).
    """
    w = _view_width[None]
    h = _view_height[None]
    point_on_plane = vec3(-0.5 * w + u * w, -0.5 * h + v * h, 1.0)
    return make_ray(vec3(0.0, 0.0, 0.0), tm.normalize(point_on_plane))


@ti.func
def get_primary_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the ray through the centre of a pixel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The primary ray for the pixel.
    """
    u = (ti.cast(pixel_i, ti.f32) + 0.5) / ti.cast(width, ti.f32)
    v = (ti.cast(pixel_j, ti.f32) + 0.5) / ti.cast(height, ti.f32)
    return get_ray(u, v)
