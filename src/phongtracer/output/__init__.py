"""Output module: image quantization and file export.

Components:
    export: 8-bit conversion and atomic image writing (PPM by default)
"""

from .export import DEFAULT_FORMAT, image_format_for, image_to_uint8, save_image

__all__ = [
    "DEFAULT_FORMAT",
    "image_format_for",
    "image_to_uint8",
    "save_image",
]
