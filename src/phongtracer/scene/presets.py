"""Ready-made scenes.

create_demo_scene() builds a small showcase: a floor plane, a back wall,
two spheres and a cylinder, lit by one point light and one spotlight.
create_single_sphere_scene() builds the minimal scene used to sanity-check a
render: one white sphere in front of the camera and one white light above it.

Both return plain Scene objects; upload them with SceneManager.load() or
render them directly with phongtracer.core.renderer.render_scene().

Example:
    >>> scene = create_demo_scene(DemoSceneParams(spotlight_theta=20.0))
    >>> scene.validate()
    >>> len(scene.lights)
    2
"""

from dataclasses import dataclass

from .model import Camera, Cylinder, Light, Plane, Scene, Sphere

Color = tuple[float, float, float]


@dataclass
class DemoSceneParams:
    """Parameters for configuring the demo scene.

    Attributes:
        view_width: Width of the camera view plane.
        view_height: Height of the camera view plane.
        light_color: Per-channel intensity of the point light.
        spotlight_color: Per-channel intensity of the spotlight.
        spotlight_theta: Spotlight cone half-angle in degrees.
        sphere_color: Diffuse color of the large sphere.
        cylinder_color: Diffuse color of the cylinder.
        floor_color: Diffuse color of the floor plane.
    """

    view_width: float = 1.0
    view_height: float = 1.0
    light_color: Color = (1.5, 1.5, 1.5)
    spotlight_color: Color = (2.0, 1.8, 1.2)
    spotlight_theta: float = 25.0
    sphere_color: Color = (0.8, 0.2, 0.2)
    cylinder_color: Color = (0.2, 0.3, 0.8)
    floor_color: Color = (0.6, 0.6, 0.6)


def create_demo_scene(params: DemoSceneParams | None = None) -> Scene:
    """Create the demo scene.

    Args:
        params: Optional parameters. Uses defaults if not provided.

    Returns:
        A validated-ready Scene with the camera as its first record.
    """
    if params is None:
        params = DemoSceneParams()

    return Scene(
        [
            Camera(width=params.view_width, height=params.view_height),
            # Floor and back wall
            Plane(
                position=(0.0, -1.0, 0.0),
                normal=(0.0, 1.0, 0.0),
                diffuse_color=params.floor_color,
                specular_color=(0.1, 0.1, 0.1),
            ),
            Plane(
                position=(0.0, 0.0, 12.0),
                normal=(0.0, 0.0, -1.0),
                diffuse_color=(0.5, 0.5, 0.45),
            ),
            # Spheres
            Sphere(
                position=(-0.6, 0.0, 5.0),
                radius=1.0,
                diffuse_color=params.sphere_color,
                specular_color=(0.8, 0.8, 0.8),
            ),
            Sphere(
                position=(1.0, -0.6, 4.0),
                radius=0.4,
                diffuse_color=(0.9, 0.8, 0.2),
                specular_color=(0.5, 0.5, 0.5),
            ),
            # Vertical cylinder behind the spheres
            Cylinder(
                position=(2.2, 0.0, 8.0),
                radius=0.6,
                diffuse_color=params.cylinder_color,
                specular_color=(0.4, 0.4, 0.4),
            ),
            Light(
                position=(-3.0, 4.0, 1.0),
                color=params.light_color,
                radial_a0=1.0,
                radial_a1=0.05,
            ),
            Light(
                position=(2.0, 5.0, 3.0),
                color=params.spotlight_color,
                radial_a0=1.0,
                radial_a2=0.02,
                direction=(-0.4, -1.0, 0.4),
                theta=params.spotlight_theta,
                angular_a0=2.0,
            ),
        ]
    )


def create_single_sphere_scene(light_height: float = 100.0) -> Scene:
    """Create a camera, one white sphere and one white point light.

    The camera view plane is 2 x 2, the unit sphere is centred at z = 5 and
    the light is directly above the camera at the given height.

    Args:
        light_height: Height of the light above the origin.

    Returns:
        The scene.
    """
    return Scene(
        [
            Camera(width=2.0, height=2.0),
            Sphere(position=(0.0, 0.0, 5.0), radius=1.0, diffuse_color=(1.0, 1.0, 1.0)),
            Light(position=(0.0, light_height, 0.0), color=(1.0, 1.0, 1.0), radial_a0=1.0),
        ]
    )
