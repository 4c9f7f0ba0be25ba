"""
PlanetRay: Travel Times of Compound Seismic Phases in Layered Planets

This package computes travel times and epicentral distances of body-wave
phases through radially symmetric, optionally transversely isotropic,
planetary models:
- Polynomial velocity models with PREM, isotropic PREM, AK135 and IASP91 presets
- Phase names such as PKiKP, ScS or Pdiff parsed into propagation legs
- Travel time and distance of every phase for a given ray parameter
- Precomputed ray catalogs answering "which rays reach this distance"
- 2D cross sections of ray paths and travel-time curves

Key Classes:
- VelocityModel: Layered model with polynomial profiles
- PhaseName: Parsed phase name
- RayPath: Travel times and distances for one ray parameter
- RayCatalog: Catalog of rays with inverse search
- RayPlotter: Cross sections and travel-time curves

Version: 0.1.0
"""

__version__ = "0.1.0"

from .constants import WaveType, Zone, BoundaryAction
from .exceptions import (
    PlanetRayError,
    MalformedPhaseError,
    InvalidModelError,
    CatalogMismatchError,
)
from .model import Layer, VelocityModel
from .phase import Leg, PhaseName
from .integration_mesh import IntegrationMesh
from .raypath import RayPath
from .catalog import Arrival, RayCatalog
from .coordinates import CoordinateConverter, epicentral_distance
from .visualization import RayPlotter

__all__ = [
    'WaveType', 'Zone', 'BoundaryAction',
    'PlanetRayError', 'MalformedPhaseError', 'InvalidModelError', 'CatalogMismatchError',
    'Layer', 'VelocityModel',
    'Leg', 'PhaseName',
    'IntegrationMesh',
    'RayPath',
    'Arrival', 'RayCatalog',
    'CoordinateConverter', 'epicentral_distance',
    'RayPlotter',
]
