"""Scene module: scene model, file loading and device-side tables.

Components:
    model: Camera, Sphere, Cylinder, Plane, Light and Scene dataclasses
    loader: JSON scene parsing
    presets: Ready-made scenes
    intersection: Surface table (Taichi fields) and ray queries
    manager: SceneManager that uploads a Scene into the device tables
"""

from .loader import load_scene, parse_record, parse_scene, scene_from_dict
from .model import (
    SURFACE_TYPES,
    Camera,
    Cylinder,
    Light,
    Plane,
    Record,
    Scene,
    Sphere,
    Surface,
)
from .presets import DemoSceneParams, create_demo_scene, create_single_sphere_scene

# Note: intersection and manager are NOT imported here because they declare
# Taichi fields. Import them directly:
#   from phongtracer.scene.manager import SceneManager

__all__ = [
    "Camera",
    "Sphere",
    "Cylinder",
    "Plane",
    "Light",
    "Scene",
    "Surface",
    "Record",
    "SURFACE_TYPES",
    "load_scene",
    "parse_scene",
    "parse_record",
    "scene_from_dict",
    "DemoSceneParams",
    "create_demo_scene",
    "create_single_sphere_scene",
]
