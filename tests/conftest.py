"""Shared pytest fixtures.

Taichi is initialized once for the whole run on the CPU backend, and the
device-side surface and light tables are emptied around every test.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize the CPU backend once.

    Calling ti.init() repeatedly drops every field declared so far, which
    breaks the module-level tables, so it is done exactly once.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_device_tables():
    """Empty the surface and light tables and the render error flag."""
    # Field-declaring modules must be imported after ti.init()
    from phongtracer.core.shading import reset_render_errors
    from phongtracer.lighting.lights import clear_lights
    from phongtracer.scene.intersection import clear_scene

    def _clear():
        clear_scene()
        clear_lights()
        reset_render_errors()

    _clear()
    yield
    _clear()
