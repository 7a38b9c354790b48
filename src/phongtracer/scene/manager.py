"""Scene manager for uploading a Scene into the device tables.

The SceneManager is the bridge between the Python-side scene model and the
Taichi fields read by the render kernel. It validates the scene, uploads the
camera, every surface (in scene order) and every light (in scene order), and
remembers which scene record each table entry came from so kernel-side
failures can be reported against the scene file.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from phongtracer.scene.manager import SceneManager
    >>> from phongtracer.scene.presets import create_demo_scene
    >>> manager = SceneManager()
    >>> manager.load(create_demo_scene())
    >>> manager.get_surface_count() > 0
    True
"""

from dataclasses import dataclass
from typing import Any

from phongtracer.camera.viewplane import setup_camera
from phongtracer.core.errors import ConfigurationError
from phongtracer.lighting.lights import MAX_LIGHTS, add_light, clear_lights, get_light_count
from phongtracer.scene.intersection import (
    MAX_SURFACES,
    SurfaceKind,
    add_cylinder,
    add_plane,
    add_sphere,
    clear_scene,
    get_surface_count,
)
from phongtracer.scene.model import Cylinder, Light, Plane, Scene, Sphere, Surface


@dataclass
class SurfaceInfo:
    """Information about an uploaded surface.

    Attributes:
        surface_index: The index in the surface table.
        record_index: The index of the originating scene record.
        kind: The surface kind tag stored in the table.
    """

    surface_index: int
    record_index: int
    kind: SurfaceKind


@dataclass
class LightInfo:
    """Information about an uploaded light.

    Attributes:
        light_index: The index in the light table.
        record_index: The index of the originating scene record.
        is_spotlight: Whether the light has an aim direction.
    """

    light_index: int
    record_index: int
    is_spotlight: bool


class SceneManager:
    """Uploads a validated Scene into the Taichi device tables.

    Attributes:
        scene: The currently loaded scene, or None.
        surfaces: SurfaceInfo for each uploaded surface.
        lights: LightInfo for each uploaded light.
    """

    def __init__(self) -> None:
        """Initialize an empty manager and clear the device tables."""
        self.scene: Scene | None = None
        self.surfaces: list[SurfaceInfo] = []
        self.lights: list[LightInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        clear_scene()
        clear_lights()
        self.scene = None
        self.surfaces.clear()
        self.lights.clear()

    def clear(self) -> None:
        """Clear the device tables and the local tracking."""
        self._clear_all()

    def load(self, scene: Scene) -> None:
        """Validate a scene and upload it.

        Clears the current contents first. Surfaces and lights keep their
        scene order in the tables.

        Args:
            scene: The scene to render.

        Raises:
            ConfigurationError: If the scene is invalid or exceeds the table
                capacities.
        """
        scene.validate()
        if len(scene.surfaces) > MAX_SURFACES:
            raise ConfigurationError(
                f"Scene has {len(scene.surfaces)} surfaces; at most {MAX_SURFACES} are supported"
            )
        if len(scene.lights) > MAX_LIGHTS:
            raise ConfigurationError(
                f"Scene has {len(scene.lights)} lights; at most {MAX_LIGHTS} are supported"
            )
        self.clear()

        setup_camera(scene.camera)
        for record_index, record in enumerate(scene.records):
            if isinstance(record, (Sphere, Cylinder, Plane)):
                self._add_surface(record, record_index)
            elif isinstance(record, Light):
                self._add_light(record, record_index)

        self.scene = scene

    def _add_surface(self, surface: Surface, record_index: int) -> None:
        if isinstance(surface, Sphere):
            kind = SurfaceKind.SPHERE
            idx = add_sphere(
                surface.position, surface.radius, surface.diffuse_color, surface.specular_color
            )
        elif isinstance(surface, Cylinder):
            kind = SurfaceKind.CYLINDER
            idx = add_cylinder(
                surface.position, surface.radius, surface.diffuse_color, surface.specular_color
            )
        else:
            kind = SurfaceKind.PLANE
            idx = add_plane(
                surface.position, surface.normal, surface.diffuse_color, surface.specular_color
            )
        self.surfaces.append(SurfaceInfo(idx, record_index, kind))

    def _add_light(self, light: Light, record_index: int) -> None:
        idx = add_light(
            light.position,
            light.color,
            light.radial,
            direction=light.direction,
            theta=light.theta,
            angular_a0=light.angular_a0,
        )
        self.lights.append(LightInfo(idx, record_index, light.is_spotlight))

    def light_record_index(self, light_index: int) -> int:
        """Map a light table index back to its scene record index."""
        return self.lights[light_index].record_index

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_surface_count(self) -> int:
        """Get the number of surfaces in the device table."""
        return get_surface_count()

    def get_light_count(self) -> int:
        """Get the number of lights in the device table."""
        return get_light_count()

    def to_dict(self) -> list[dict[str, Any]]:
        """Export the loaded scene as a JSON-compatible record list.

        Returns:
            The record list, or an empty list when nothing is loaded.
        """
        if self.scene is None:
            return []
        return self.scene.to_dict()

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_surfaces() -> int:
        """Get the maximum number of surfaces supported."""
        return MAX_SURFACES

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS
