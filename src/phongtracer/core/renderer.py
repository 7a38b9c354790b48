"""Renderer wrapper around the shading kernel.

This module provides a convenient wrapper around the shading kernel that
supports:
- Rendering in bands of rows with progress callbacks
- Generator-based progress reporting
- NumPy / 8-bit access to the finished image and saving it to disk

The Renderer class encapsulates the render target state; render_scene() is a
one-call path from a Scene to an 8-bit image.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongtracer.core.renderer import Renderer
    >>> from phongtracer.scene.manager import SceneManager
    >>> from phongtracer.scene.presets import create_demo_scene
    >>>
    >>> SceneManager().load(create_demo_scene())
    >>> renderer = Renderer(320, 240)
    >>> renderer.render()
    >>> image = renderer.get_image_uint8()
"""

from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import numpy as np
import numpy.typing as npt

from phongtracer.core.errors import ConfigurationError, FalloffError
from phongtracer.core.settings import RenderSettings
from phongtracer.core.shading import (
    clear_render_target,
    get_image,
    get_normalized_image_numpy,
    render_rows,
    reset_render_errors,
    setup_render_target,
)
from phongtracer.output.export import image_to_uint8
from phongtracer.output.export import save_image as _save_image_array
from phongtracer.scene.manager import SceneManager
from phongtracer.scene.model import Scene

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


class Renderer:
    """Renders the uploaded scene into the shared color buffer.

    The renderer maintains its own state for width/height/settings and
    delegates to the global shading buffers (which are Taichi fields).

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        settings: Shading options used by every render call.
    """

    def __init__(self, width: int, height: int, settings: RenderSettings | None = None) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).
            settings: Render settings. Uses defaults if not provided.

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum
                supported size.
        """
        self._width = width
        self._height = height
        self.settings = settings if settings is not None else RenderSettings()
        self._rows_done = 0
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def rows_done(self) -> int:
        """Number of rows rendered since the last reset."""
        return self._rows_done

    @property
    def is_complete(self) -> bool:
        """Whether every row has been rendered."""
        return self._rows_done >= self._height

    def reset(self) -> None:
        """Clear the color buffer for a fresh render."""
        clear_render_target()
        self._rows_done = 0

    def resize(self, width: int, height: int) -> None:
        """Resize the render target and reset it.

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum
                supported size.
        """
        self._width = width
        self._height = height
        setup_render_target(width, height)
        self._rows_done = 0

    def render(self, batch_rows: int = 0, callback: ProgressCallback | None = None) -> None:
        """Render the whole image with optional progress callback.

        Args:
            batch_rows: Rows rendered per kernel launch. Zero or negative
                renders the full image in a single launch.
            callback: Optional callback called after each batch. Receives
                (rows_done, total_rows).

        Raises:
            ConfigurationError: If no camera has been uploaded.
            FalloffError: If a light's radial falloff denominator was zero.

        Example:
            >>> def progress(done, total):
            ...     print(f"Progress: {done}/{total} rows")
            >>> renderer.render(batch_rows=64, callback=progress)
        """
        for done, total in self.render_progressive(batch_rows):
            if callback is not None:
                callback(done, total)

    def render_progressive(self, batch_rows: int = 0) -> Generator[tuple[int, int], None, None]:
        """Render the image band by band, yielding progress after each band.

        This is a generator-based alternative to render() with callbacks.

        Args:
            batch_rows: Rows rendered per kernel launch. Zero or negative
                renders the full image in a single launch.

        Yields:
            Tuple of (rows_done, total_rows).

        Example:
            >>> for done, total in renderer.render_progressive(batch_rows=32):
            ...     print(f"Progress: {done}/{total} rows")
        """
        if batch_rows <= 0:
            batch_rows = self._height

        self._rows_done = 0
        reset_render_errors()

        while self._rows_done < self._height:
            row_end = min(self._rows_done + batch_rows, self._height)
            render_rows(self._rows_done, row_end, self.settings)
            self._rows_done = row_end
            yield (self._rows_done, self._height)

    def get_image(self) -> Any:
        """Get the raw Taichi color buffer field.

        Note: This returns the full preallocated buffer. Use width/height
        properties to determine the active region.
        """
        return get_image()

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the rendered image as a NumPy array.

        Returns:
            NumPy array of shape (height, width, 3), float32 in [0, 1], top
            scanline first.
        """
        return get_normalized_image_numpy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the rendered image as an 8-bit NumPy array.

        Returns:
            NumPy array of shape (height, width, 3) with dtype uint8.
        """
        return image_to_uint8(self.get_image_numpy())

    def save_image(self, filepath: str | Path) -> Path:
        """Save the rendered image to a file.

        The format follows the file extension; PPM is used when the extension
        is not a known image format.

        Args:
            filepath: Path to save the image (e.g., "output.ppm").

        Returns:
            The path written.
        """
        return _save_image_array(self.get_image_uint8(), filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"rows_done={self.rows_done}, settings={self.settings})"
        )


def render_scene(
    scene: Scene,
    width: int,
    height: int,
    settings: RenderSettings | None = None,
    *,
    batch_rows: int = 0,
    callback: ProgressCallback | None = None,
) -> npt.NDArray[np.uint8]:
    """Upload a scene, render it and return the 8-bit image.

    Args:
        scene: The scene to render. It is validated before upload.
        width: Image width in pixels.
        height: Image height in pixels.
        settings: Render settings. Uses defaults if not provided.
        batch_rows: Rows per kernel launch (see Renderer.render).
        callback: Optional progress callback.

    Returns:
        NumPy array of shape (height, width, 3), dtype uint8, top scanline
        first.

    Raises:
        ConfigurationError: If the scene is invalid, exceeds the table
            capacities, or a light's falloff denominator is zero (the message
            names the light's scene record).
        ValueError: If the image dimensions are not supported.
    """
    manager = SceneManager()
    manager.load(scene)

    renderer = Renderer(width, height, settings)
    try:
        renderer.render(batch_rows=batch_rows, callback=callback)
    except FalloffError as exc:
        record_index = manager.light_record_index(exc.light_index)
        raise ConfigurationError(f"record {record_index} (light): {exc}") from exc

    return renderer.get_image_uint8()
