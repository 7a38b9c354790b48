"""Taichi-based Phong ray caster.

This package renders still images of scenes built from analytic surfaces
(spheres, infinite vertical cylinders, planes) lit by point lights and
spotlights. Every pixel casts one primary ray, finds the nearest surface,
tests a shadow ray toward each light and accumulates a Phong-style diffuse
and specular contribution.

Subpackages:
    core: Ray utilities, render settings, errors, the render kernel and renderer
    geometry: Closed-form ray/surface solvers
    lighting: Light tables, attenuation functions and the shading law
    scene: Scene model, JSON scene loading and device-side scene tables
    camera: View-plane camera and primary ray generation
    output: Image quantization and file export

Note:
    Taichi must be initialized (``ti.init``) before importing modules that
    declare Taichi fields (scene.intersection, scene.manager, lighting.lights,
    camera.viewplane, core.shading, core.renderer).
"""

__version__ = "0.1.0"
