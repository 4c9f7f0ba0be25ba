"""
Runtime configuration for planetray.

Defaults can be overridden through environment variables:

- ``PLANETRAY_CATALOG_DIR``: directory used to cache catalogs of the
  standard models (default ``~/.planetray/catalogs``)
- ``PLANETRAY_MAX_WORKERS``: worker processes used to build catalogs
  (default: number of CPUs)
- ``PLANETRAY_QUADRATURE_ORDER``: Gauss-Legendre points per mesh interval
  (default 4)
"""

import os

import numpy as np

CATALOG_DIR = os.path.expanduser(
    os.environ.get(
        'PLANETRAY_CATALOG_DIR',
        os.path.join('~', '.planetray', 'catalogs'),
    )
)

MAX_WORKERS = int(os.environ.get('PLANETRAY_MAX_WORKERS', '0')) or (
    os.cpu_count() or 1
)

QUADRATURE_ORDER = int(os.environ.get('PLANETRAY_QUADRATURE_ORDER', '4'))

# [rad] maximum change of epicentral distance between catalog neighbours
DEFAULT_MAXIMUM_D_DELTA = float(np.radians(0.1))

# [km] mesh spacings (inner core, outer core, mantle)
SIMPLE_MESH_INTERVALS = (10.0, 10.0, 10.0)
CATALOG_MESH_INTERVALS = (5.0, 5.0, 5.0)

# Geometric refinement towards turning radii
MESH_REFINEMENT_RATIO = 0.5
MESH_MINIMUM_SPACING = 1e-3  # [km]

# Number of evenly spaced ray parameters seeding a catalog build
CATALOG_SEED_SIZE = 64

# Upper bound on bisection rounds during a catalog build
CATALOG_MAX_ROUNDS = 40
