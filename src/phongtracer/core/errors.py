"""Exception types raised by the renderer.

Geometry misses are not errors; the solvers report them with the NO_HIT
sentinel. Everything that makes a scene unrenderable is a ConfigurationError,
including arithmetic failures detected while rendering.
"""


class PhongTracerError(Exception):
    """Base class for all phongtracer errors."""


class ConfigurationError(PhongTracerError, ValueError):
    """The scene (or its description) cannot be rendered.

    Raised for a missing or misplaced camera, a scene without lights,
    degenerate surfaces, unreadable scene files and capacity overflows.
    """


class FalloffError(ConfigurationError):
    """A light's radial falloff denominator evaluated to zero during a render.

    Attributes:
        light_index: Index of the offending light in the device light table
            (lights are uploaded in scene order).
    """

    def __init__(self, light_index: int) -> None:
        self.light_index = light_index
        super().__init__(
            f"Radial falloff denominator is zero for light #{light_index}; "
            "check its radial-a0/radial-a1/radial-a2 coefficients"
        )
