"""Render settings.

The shading model keeps a few historical behaviours of this renderer that are
questionable but needed for image parity (shadow dimming, the parametric
shadow test, the linear radial falloff) and replaces one that is plainly
wrong (repeated-squaring power). Each of them is selectable here.

Example:
    >>> settings = RenderSettings(shadow_mode="exclude", radial_falloff="quadratic")
    >>> settings.shadow_mode_code
    1
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Literal

ShadowModeName = Literal["dim", "exclude"]
ShadowTestName = Literal["parametric", "segment"]
RadialFalloffName = Literal["linear", "quadratic"]
ExponentModeName = Literal["exact", "legacy"]


class ShadowMode(IntEnum):
    """What an occluded light does to the pixel.

    DIM scales everything accumulated so far by the dimming factor.
    EXCLUDE drops the occluded light's contribution and nothing else.
    """

    DIM = 0
    EXCLUDE = 1


class ShadowTest(IntEnum):
    """Which shadow-ray hits count as occluders.

    The shadow ray runs along the unnormalized vector Rdn to the light.
    PARAMETRIC counts a hit at t < |Rdn|, the historical test, which also
    shadows with surfaces beyond the light when |Rdn| > 1. SEGMENT counts
    only hits strictly between the point and the light (t < 1).
    """

    PARAMETRIC = 0
    SEGMENT = 1


class RadialFalloff(IntEnum):
    """Radial attenuation model.

    LINEAR is 1 / (a2*d + a1*d + a0), QUADRATIC is 1 / (a2*d^2 + a1*d + a0).
    """

    LINEAR = 0
    QUADRATIC = 1


class ExponentMode(IntEnum):
    """How specular and spotlight exponents are evaluated.

    EXACT uses a real power. LEGACY squares the base y-1 times.
    """

    EXACT = 0
    LEGACY = 1


# Fixed Phong shininess exponent
DEFAULT_SHININESS = 7.0

# Factor applied to the accumulated color when a light is occluded (DIM mode)
DEFAULT_SHADOW_DIM_FACTOR = 0.2


@dataclass(frozen=True)
class RenderSettings:
    """Options for the shading kernel.

    Attributes:
        shadow_mode: "dim" (default) scales the accumulated color by
            shadow_dim_factor for every occluded light; "exclude" skips the
            occluded light only.
        shadow_test: "parametric" (default) compares the shadow-ray t with
            the distance to the light; "segment" only counts surfaces
            between the point and the light.
        radial_falloff: "linear" (default) or "quadratic" distance term.
        exponent_mode: "exact" (default) or "legacy" repeated squaring.
        shininess: Specular exponent.
        shadow_dim_factor: Multiplier used by the "dim" shadow mode.
    """

    shadow_mode: ShadowModeName = "dim"
    shadow_test: ShadowTestName = "parametric"
    radial_falloff: RadialFalloffName = "linear"
    exponent_mode: ExponentModeName = "exact"
    shininess: float = DEFAULT_SHININESS
    shadow_dim_factor: float = DEFAULT_SHADOW_DIM_FACTOR

    def __post_init__(self) -> None:
        if self.shadow_mode not in ("dim", "exclude"):
            raise ValueError(f"Unknown shadow mode: {self.shadow_mode}")
        if self.shadow_test not in ("parametric", "segment"):
            raise ValueError(f"Unknown shadow test: {self.shadow_test}")
        if self.radial_falloff not in ("linear", "quadratic"):
            raise ValueError(f"Unknown radial falloff model: {self.radial_falloff}")
        if self.exponent_mode not in ("exact", "legacy"):
            raise ValueError(f"Unknown exponent mode: {self.exponent_mode}")
        if self.shininess < 0.0:
            raise ValueError(f"Shininess = {self.shininess} is negative.")
        if not 0.0 <= self.shadow_dim_factor <= 1.0:
            raise ValueError(
                f"Shadow dim factor = {self.shadow_dim_factor} is outside [0, 1]."
            )

    @property
    def shadow_mode_code(self) -> int:
        """Integer code passed to the render kernel."""
        return int(ShadowMode[self.shadow_mode.upper()])

    @property
    def shadow_test_code(self) -> int:
        """Integer code passed to the render kernel."""
        return int(ShadowTest[self.shadow_test.upper()])

    @property
    def radial_falloff_code(self) -> int:
        """Integer code passed to the render kernel."""
        return int(RadialFalloff[self.radial_falloff.upper()])

    @property
    def exponent_mode_code(self) -> int:
        """Integer code passed to the render kernel."""
        return int(ExponentMode[self.exponent_mode.upper()])
