"""Scene model: camera, surfaces and lights.

A Scene is an ordered list of records. Each record kind is its own frozen
dataclass carrying only its own fields, so code that needs a particular kind
dispatches on the type instead of on an integer tag.

The scene is built once (usually by phongtracer.scene.loader), validated, and
then only read while rendering.

Example:
    >>> scene = Scene([
    ...     Camera(width=2.0, height=2.0),
    ...     Sphere(position=(0.0, 0.0, 5.0), radius=1.0, diffuse_color=(1.0, 1.0, 1.0)),
    ...     Light(position=(0.0, 10.0, 0.0), color=(1.0, 1.0, 1.0), radial_a0=1.0),
    ... ])
    >>> scene.validate()
    >>> len(scene.surfaces), len(scene.lights)
    (1, 1)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from phongtracer.core.errors import ConfigurationError

Vec3 = tuple[float, float, float]

ZERO: Vec3 = (0.0, 0.0, 0.0)


def _vector_to_list(v: Vec3) -> list[float]:
    return [float(v[0]), float(v[1]), float(v[2])]


@dataclass(frozen=True)
class Camera:
    """View plane at distance 1 from the origin, looking down +z.

    Attributes:
        width: Horizontal extent of the view plane.
        height: Vertical extent of the view plane.
    """

    width: float = 0.0
    height: float = 0.0

    kind = "camera"

    def validate(self) -> None:
        if self.width <= 0.0 or self.height <= 0.0:
            raise ConfigurationError(
                f"camera view plane must have positive width and height, "
                f"got {self.width} x {self.height}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class Sphere:
    """Sphere with a center position and radius.

    Attributes:
        position: Center of the sphere.
        radius: Radius (must be positive).
        diffuse_color: Diffuse reflectance (RGB).
        specular_color: Specular reflectance (RGB).
    """

    position: Vec3 = ZERO
    radius: float = 0.0
    diffuse_color: Vec3 = ZERO
    specular_color: Vec3 = ZERO

    kind = "sphere"

    def validate(self) -> None:
        if self.radius <= 0.0:
            raise ConfigurationError(f"sphere radius must be positive, got {self.radius}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "position": _vector_to_list(self.position),
            "radius": self.radius,
            "diffuse_color": _vector_to_list(self.diffuse_color),
            "specular_color": _vector_to_list(self.specular_color),
        }


@dataclass(frozen=True)
class Cylinder:
    """Infinite cylinder around a vertical axis through position.

    Attributes:
        position: A point on the axis (its y component is irrelevant).
        radius: Radius (must be positive).
        diffuse_color: Diffuse reflectance (RGB).
        specular_color: Specular reflectance (RGB).
        height: Carried from the scene file, unused by intersection.
        width: Carried from the scene file, unused by intersection.
    """

    position: Vec3 = ZERO
    radius: float = 0.0
    diffuse_color: Vec3 = ZERO
    specular_color: Vec3 = ZERO
    height: float = 0.0
    width: float = 0.0

    kind = "cylinder"

    def validate(self) -> None:
        if self.radius <= 0.0:
            raise ConfigurationError(f"cylinder radius must be positive, got {self.radius}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "position": _vector_to_list(self.position),
            "radius": self.radius,
            "diffuse_color": _vector_to_list(self.diffuse_color),
            "specular_color": _vector_to_list(self.specular_color),
            "height": self.height,
            "width": self.width,
        }


@dataclass(frozen=True)
class Plane:
    """Infinite plane through position with the given normal.

    Attributes:
        position: A point on the plane.
        normal: Plane normal (non-zero, need not be unit length).
        diffuse_color: Diffuse reflectance (RGB).
        specular_color: Specular reflectance (RGB).
    """

    position: Vec3 = ZERO
    normal: Vec3 = ZERO
    diffuse_color: Vec3 = ZERO
    specular_color: Vec3 = ZERO

    kind = "plane"

    def validate(self) -> None:
        if all(component == 0.0 for component in self.normal):
            raise ConfigurationError("plane normal must be non-zero")

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "position": _vector_to_list(self.position),
            "normal": _vector_to_list(self.normal),
            "diffuse_color": _vector_to_list(self.diffuse_color),
            "specular_color": _vector_to_list(self.specular_color),
        }


@dataclass(frozen=True)
class Light:
    """Point light or spotlight.

    Attributes:
        position: Light position.
        color: Per-channel intensity (not clamped to [0, 1]).
        radial_a0: Constant radial attenuation coefficient.
        radial_a1: Linear radial attenuation coefficient.
        radial_a2: Quadratic radial attenuation coefficient.
        direction: Spotlight aim; the zero vector means a point light.
        theta: Spotlight cone half-angle in degrees.
        angular_a0: Spotlight angular falloff exponent.
    """

    position: Vec3 = ZERO
    color: Vec3 = ZERO
    radial_a0: float = 0.0
    radial_a1: float = 0.0
    radial_a2: float = 0.0
    direction: Vec3 = ZERO
    theta: float = 0.0
    angular_a0: float = 0.0

    kind = "light"

    @property
    def is_spotlight(self) -> bool:
        """Whether the light has a non-zero aim direction."""
        return any(component != 0.0 for component in self.direction)

    @property
    def radial(self) -> Vec3:
        """Radial coefficients as (a0, a1, a2)."""
        return (self.radial_a0, self.radial_a1, self.radial_a2)

    def validate(self) -> None:
        if self.radial_a0 == 0.0 and self.radial_a1 == 0.0 and self.radial_a2 == 0.0:
            raise ConfigurationError(
                "light has no radial attenuation coefficients "
                "(radial-a0, radial-a1 and radial-a2 are all zero)"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "position": _vector_to_list(self.position),
            "color": _vector_to_list(self.color),
            "radial-a0": self.radial_a0,
            "radial-a1": self.radial_a1,
            "radial-a2": self.radial_a2,
            "direction": _vector_to_list(self.direction),
            "theta": self.theta,
            "angular-a0": self.angular_a0,
        }


Surface = Union[Sphere, Cylinder, Plane]
Record = Union[Camera, Sphere, Cylinder, Plane, Light]

SURFACE_TYPES = (Sphere, Cylinder, Plane)


@dataclass
class Scene:
    """Ordered collection of scene records.

    Attributes:
        records: Camera, surface and light records in file order. The camera
            must be the first record.
    """

    records: list[Record] = field(default_factory=list)

    @property
    def camera(self) -> Camera:
        """The scene camera (the first record).

        Raises:
            ConfigurationError: If the first record is not a camera.
        """
        if not self.records or not isinstance(self.records[0], Camera):
            raise ConfigurationError("the first scene record must be the camera")
        return self.records[0]

    @property
    def surfaces(self) -> list[Surface]:
        """All sphere, cylinder and plane records, in scene order."""
        return [record for record in self.records if isinstance(record, SURFACE_TYPES)]

    @property
    def lights(self) -> list[Light]:
        """All light records, in scene order."""
        return [record for record in self.records if isinstance(record, Light)]

    def validate(self) -> None:
        """Check every scene invariant.

        Raises:
            ConfigurationError: If the scene is empty, has no camera or more
                than one, the camera is not the first record, there is no
                light, or any record is degenerate. The message names the
                offending record index and kind.
        """
        if not self.records:
            raise ConfigurationError("scene contains no objects")

        camera_indices = [i for i, record in enumerate(self.records) if isinstance(record, Camera)]
        if not camera_indices:
            raise ConfigurationError("scene has no camera")
        if len(camera_indices) > 1:
            raise ConfigurationError(
                f"scene has {len(camera_indices)} cameras (records {camera_indices}); "
                "exactly one is allowed"
            )
        if camera_indices[0] != 0:
            raise ConfigurationError(
                f"the camera must be the first scene record, found it at record {camera_indices[0]}"
            )
        if not self.lights:
            raise ConfigurationError("scene has no lights")

        for index, record in enumerate(self.records):
            try:
                record.validate()
            except ConfigurationError as exc:
                raise ConfigurationError(f"record {index} ({record.kind}): {exc}") from exc

    def to_dict(self) -> list[dict[str, Any]]:
        """Export the scene as a JSON-compatible list of records."""
        return [record.to_dict() for record in self.records]
