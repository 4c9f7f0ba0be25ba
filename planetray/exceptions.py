"""
Exceptions raised by planetray.

Geometric non-existence of a phase is never an exception: it is reported
as NaN by :class:`~planetray.raypath.RayPath` and as an empty result by
:class:`~planetray.catalog.RayCatalog`.
"""


class PlanetRayError(Exception):
    """Base class for planetray errors."""


class MalformedPhaseError(PlanetRayError, ValueError):
    """A phase name cannot be parsed or mixes incompatible polarizations."""

    def __init__(self, phase_name: str, reason: str):
        self.phase_name = phase_name
        self.reason = reason
        super().__init__(f"Invalid phase name '{phase_name}': {reason}")


class InvalidModelError(PlanetRayError, ValueError):
    """A velocity model violates layering, positivity or fluid-core rules."""


class CatalogMismatchError(PlanetRayError, ValueError):
    """A stored catalog was built for a different velocity model."""
