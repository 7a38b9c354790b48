"""Image export utilities for rendered images.

This module converts the linear [0, 1] color buffer to 8-bit pixels and
writes them to disk with Pillow.

Supported formats:
    - PPM (binary P6, the default)
    - Anything else Pillow can write, chosen by file extension (PNG, BMP, ...)

Files are written atomically: the image goes to a temporary file in the
destination directory which is then renamed over the target, so a failed
write never leaves a partial image behind.

Example:
    >>> import numpy as np
    >>> from phongtracer.output.export import image_to_uint8, save_image
    >>> pixels = image_to_uint8(np.zeros((4, 6, 3), dtype=np.float32))
    >>> save_image(pixels, "black.ppm")
    PosixPath('black.ppm')
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

# Format used when the file extension is not a known image format
DEFAULT_FORMAT = "PPM"


def image_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to 8-bit.

    Each channel is clamped to [0, 1] and quantized with floor(255 * c), so
    only an exact 1.0 maps to 255.

    Args:
        image: Image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    clamped = np.clip(np.asarray(image, dtype=np.float32), 0.0, 1.0)
    return np.floor(clamped * 255.0).astype(np.uint8)


def image_format_for(filepath: str | Path) -> str:
    """Pick the Pillow format name for a file path from its extension."""
    extension = Path(filepath).suffix.lower()
    return PILImage.registered_extensions().get(extension, DEFAULT_FORMAT)


def _default_file_mode() -> int:
    """Permission bits of a newly created regular file under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def save_image(image: npt.NDArray[np.uint8], filepath: str | Path) -> Path:
    """Write an 8-bit RGB image atomically.

    Args:
        image: Array of shape (H, W, 3), dtype uint8, top scanline first.
        filepath: Destination path. The extension selects the format.

    Returns:
        The destination path.

    Raises:
        ValueError: If the array is not an (H, W, 3) uint8 image.
        OSError: If the file cannot be written.
    """
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(
            f"Expected an (H, W, 3) uint8 image, got shape {image.shape} and dtype {image.dtype}"
        )

    path = Path(filepath)
    image_format = image_format_for(path)
    pil_image = PILImage.fromarray(np.ascontiguousarray(image))

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as tmp_file:
            pil_image.save(tmp_file, format=image_format)
        # mkstemp creates the file 0600; give it the mode open() would have
        os.chmod(tmp_name, _default_file_mode())
        os.replace(tmp_name, path)
    except BaseException:
        os.unlink(tmp_name)
        raise

    return path

