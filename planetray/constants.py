"""
Shared enumerations and numerical tolerances for planetray.
"""

from enum import Enum


class WaveType(Enum):
    """Polarization of a propagating body wave."""

    P = "P"
    SV = "SV"
    SH = "SH"


class Zone(Enum):
    """Radial zone in which a leg propagates."""

    MANTLE = "mantle"
    OUTER_CORE = "outer_core"
    INNER_CORE = "inner_core"


class BoundaryAction(Enum):
    """What happens to a ray at the end of a leg."""

    TURN = "turn"
    SURFACE_REFLECTION = "surface_reflection"
    CMB_REFLECTION = "cmb_reflection"
    ICB_REFLECTION = "icb_reflection"
    TRANSMISSION = "transmission"
    UNDERSIDE_REFLECTION = "underside_reflection"
    DIFFRACTION = "diffraction"
    END = "end"


# [km] roots this close to a layer boundary are placed exactly on it
BOUNDARY_TOLERANCE = 1e-6

# [km] tolerance on p*v - r when deciding whether a ray exists at a radius
EVANESCENCE_TOLERANCE = 1e-9

# [s/rad] bisection stops refining a catalog interval below this width
MINIMUM_DELTA_P = 1e-4

# Number of leading-coefficient magnitudes treated as zero by the root solver
POLYNOMIAL_ZERO = 1e-14
