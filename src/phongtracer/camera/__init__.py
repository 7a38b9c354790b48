"""Camera module for primary ray generation.

Components:
    viewplane: Fixed camera at the origin with a view plane at z = 1

Note: viewplane is NOT imported here because it declares Taichi fields.
Import it directly: from phongtracer.camera.viewplane import setup_camera
"""
