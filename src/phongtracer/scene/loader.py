"""JSON scene loading.

A scene file is a JSON array of objects, one per record. Every object names
its kind with a "type" key and sets any of these properties:

    scalars:  width, height, radius, radial-a0, radial-a1, radial-a2,
              angular-a0, theta
    vectors:  color, position, normal, direction, diffuse_color,
              specular_color

Unset properties default to zero. A property the record kind does not use is
ignored with a warning, as is an unknown property name.

Example:
    >>> scene = parse_scene('''[
    ...     {"type": "camera", "width": 2, "height": 2},
    ...     {"type": "sphere", "position": [0, 0, 5], "radius": 1,
    ...      "diffuse_color": [1, 1, 1]},
    ...     {"type": "light", "position": [0, 5, 0], "color": [1, 1, 1],
    ...      "radial-a0": 1}
    ... ]''')
    >>> [record.kind for record in scene.records]
    ['camera', 'sphere', 'light']
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Callable
from pathlib import Path
from typing import Any

from phongtracer.core.errors import ConfigurationError

from .model import Camera, Cylinder, Light, Plane, Record, Scene, Sphere

logger = logging.getLogger(__name__)

SCALAR_KEYS = (
    "width",
    "height",
    "radius",
    "radial-a0",
    "radial-a1",
    "radial-a2",
    "angular-a0",
    "theta",
)
VECTOR_KEYS = (
    "color",
    "position",
    "normal",
    "direction",
    "diffuse_color",
    "specular_color",
)

# Scene-file property name -> dataclass field name, per record kind
RECORD_FIELDS: dict[str, dict[str, str]] = {
    "camera": {"width": "width", "height": "height"},
    "sphere": {
        "position": "position",
        "radius": "radius",
        "diffuse_color": "diffuse_color",
        "specular_color": "specular_color",
    },
    "cylinder": {
        "position": "position",
        "radius": "radius",
        "diffuse_color": "diffuse_color",
        "specular_color": "specular_color",
        "height": "height",
        "width": "width",
    },
    "plane": {
        "position": "position",
        "normal": "normal",
        "diffuse_color": "diffuse_color",
        "specular_color": "specular_color",
    },
    "light": {
        "position": "position",
        "color": "color",
        "radial-a0": "radial_a0",
        "radial-a1": "radial_a1",
        "radial-a2": "radial_a2",
        "direction": "direction",
        "theta": "theta",
        "angular-a0": "angular_a0",
    },
}

RECORD_TYPES: dict[str, Callable[..., Record]] = {
    "camera": Camera,
    "sphere": Sphere,
    "cylinder": Cylinder,
    "plane": Plane,
    "light": Light,
}


def _parse_scalar(value: Any, index: int, key: str) -> float:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"record {index}: \"{key}\" must be a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise ConfigurationError(f"record {index}: \"{key}\" must be finite, got {value!r}")
    return number


def _parse_vector(value: Any, index: int, key: str) -> tuple[float, float, float]:
    if not isinstance(value, list) or len(value) != 3:
        raise ConfigurationError(
            f"record {index}: \"{key}\" must be a list of three numbers, got {value!r}"
        )
    x, y, z = (_parse_scalar(component, index, key) for component in value)
    return (x, y, z)


def parse_record(data: Any, index: int) -> Record:
    """Build one scene record from its decoded JSON object.

    Args:
        data: The decoded JSON object.
        index: Position of the record in the scene file (for messages).

    Returns:
        The record dataclass for the object's "type".

    Raises:
        ConfigurationError: If the object has no valid "type" or a property
            value has the wrong shape.
    """
    if not isinstance(data, dict):
        raise ConfigurationError(f"record {index}: expected an object, got {data!r}")
    if "type" not in data:
        raise ConfigurationError(f"record {index}: expected \"type\" key")

    kind = data["type"]
    if not isinstance(kind, str) or kind not in RECORD_TYPES:
        raise ConfigurationError(f"record {index}: unknown type \"{kind}\"")

    fields = RECORD_FIELDS[kind]
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key == "type":
            continue
        if key in SCALAR_KEYS:
            parsed: Any = _parse_scalar(value, index, key)
        elif key in VECTOR_KEYS:
            parsed = _parse_vector(value, index, key)
        else:
            logger.warning("Unknown property \"%s\" on record %d ignored", key, index)
            continue
        if key not in fields:
            logger.warning("Property \"%s\" is not used by %s record %d", key, kind, index)
            continue
        kwargs[fields[key]] = parsed

    return RECORD_TYPES[kind](**kwargs)


def scene_from_dict(data: Any, *, validate: bool = True) -> Scene:
    """Build a scene from a decoded JSON record list.

    Args:
        data: A list of record objects (as produced by Scene.to_dict()).
        validate: Whether to run Scene.validate() on the result.

    Returns:
        The scene.

    Raises:
        ConfigurationError: If the data is not a non-empty list of valid
            records, or validation fails.
    """
    if not isinstance(data, list):
        raise ConfigurationError("scene must be a JSON array of objects")
    if not data:
        raise ConfigurationError("scene contains no objects")

    scene = Scene([parse_record(item, index) for index, item in enumerate(data)])
    if validate:
        scene.validate()
    return scene


def parse_scene(text: str, source: str = "<string>", *, validate: bool = True) -> Scene:
    """Parse a scene from JSON text.

    Args:
        text: The scene description.
        source: Name used in error messages.
        validate: Whether to validate the scene.

    Raises:
        ConfigurationError: If the text is not valid JSON or not a valid scene.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(
            f"{source}: invalid JSON on line {exc.lineno}, column {exc.colno}: {exc.msg}"
        ) from exc
    try:
        return scene_from_dict(data, validate=validate)
    except ConfigurationError as exc:
        raise ConfigurationError(f"{source}: {exc}") from exc


def load_scene(path: str | Path, *, validate: bool = True) -> Scene:
    """Read and parse a scene file.

    Args:
        path: Path of the JSON scene file.
        validate: Whether to validate the scene.

    Returns:
        The loaded scene.

    Raises:
        ConfigurationError: If the file cannot be read or is not a valid scene.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Could not open file \"{path}\": {exc}") from exc
    return parse_scene(text, source=str(path), validate=validate)
