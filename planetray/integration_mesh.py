"""
Radial sampling used to integrate travel times and distances.

Nodes are spaced uniformly within each layer (one spacing per zone) and
always include the layer boundaries. Below the first regular node above a
turning radius, extra nodes are inserted at geometrically decreasing
distances from the turning radius.
"""

from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np

from . import config
from .constants import BOUNDARY_TOLERANCE, Zone
from .model import VelocityModel


class IntegrationMesh:
    """
    Radial integration nodes for a velocity model.

    Parameters
    ----------
    model : VelocityModel
        Model whose layer boundaries the mesh honours.
    intervals : sequence of float
        Node spacing in km for the inner core, outer core and mantle.
    refinement_ratio : float
        Ratio between successive refinement offsets near a turning radius.
    minimum_spacing : float
        Smallest refinement offset in km.
    mode : str
        Label stored with catalogs ('simple', 'catalog' or 'custom').

    Examples
    --------
    >>> mesh = IntegrationMesh.simple(VelocityModel.prem())
    >>> nodes = mesh.nodes_for(11)
    >>> float(nodes[0]), float(nodes[-1])
    (6356.0, 6371.0)
    """

    def __init__(self, model: VelocityModel,
                 intervals: Sequence[float] = config.SIMPLE_MESH_INTERVALS,
                 refinement_ratio: float = config.MESH_REFINEMENT_RATIO,
                 minimum_spacing: float = config.MESH_MINIMUM_SPACING,
                 mode: str = 'custom'):
        intervals = tuple(float(v) for v in intervals)
        if len(intervals) != 3 or min(intervals) <= 0:
            raise ValueError(
                f"intervals must be three positive spacings (inner core, outer core, mantle), got {intervals}"
            )
        if not 0 < refinement_ratio < 1:
            raise ValueError(f"refinement_ratio must be in (0, 1), got {refinement_ratio}")
        if minimum_spacing <= 0:
            raise ValueError(f"minimum_spacing must be positive, got {minimum_spacing}")

        self.model = model
        self.intervals = intervals
        self.refinement_ratio = float(refinement_ratio)
        self.minimum_spacing = float(minimum_spacing)
        self.mode = mode
        self._base = tuple(self._base_nodes(i) for i in range(model.n_layers))

    @classmethod
    def simple(cls, model: VelocityModel) -> 'IntegrationMesh':
        """Coarse mesh for single ray queries."""
        return cls(model, config.SIMPLE_MESH_INTERVALS, mode='simple')

    @classmethod
    def catalog(cls, model: VelocityModel) -> 'IntegrationMesh':
        """Fine mesh used to build catalogs."""
        return cls(model, config.CATALOG_MESH_INTERVALS, mode='catalog')

    @classmethod
    def from_dict(cls, model: VelocityModel, data: Dict[str, Any]) -> 'IntegrationMesh':
        return cls(model, data['intervals'], data['refinement_ratio'],
                   data['minimum_spacing'], data.get('mode', 'custom'))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mode': self.mode,
            'intervals': list(self.intervals),
            'refinement_ratio': self.refinement_ratio,
            'minimum_spacing': self.minimum_spacing,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IntegrationMesh):
            return NotImplemented
        return (self.model == other.model and self.intervals == other.intervals
                and self.refinement_ratio == other.refinement_ratio
                and self.minimum_spacing == other.minimum_spacing)

    def __hash__(self) -> int:
        return hash((self.model, self.intervals, self.refinement_ratio, self.minimum_spacing))

    def __repr__(self) -> str:
        return f"IntegrationMesh(mode={self.mode!r}, intervals={self.intervals})"

    def spacing_for(self, layer_index: int) -> float:
        zone = self.model.zone_of(self.model.layers[layer_index].r_min)
        if zone is Zone.INNER_CORE:
            return self.intervals[0]
        if zone is Zone.OUTER_CORE:
            return self.intervals[1]
        return self.intervals[2]

    def _base_nodes(self, layer_index: int) -> np.ndarray:
        layer = self.model.layers[layer_index]
        n = max(int(np.ceil(layer.thickness / self.spacing_for(layer_index))), 1)
        return np.linspace(layer.r_min, layer.r_max, n + 1)

    def nodes_for(self, layer_index: int, turning_radius: Optional[float] = None) -> np.ndarray:
        """
        Ascending sample radii of one layer.

        Parameters
        ----------
        layer_index : int
            Layer index (centre first).
        turning_radius : float, optional
            If given, nodes start at this radius and are refined towards it.

        Returns
        -------
        np.ndarray
        """
        base = self._base[layer_index]
        if turning_radius is None or np.isnan(turning_radius):
            return base.copy()

        layer = self.model.layers[layer_index]
        if not layer.r_min - BOUNDARY_TOLERANCE <= turning_radius <= layer.r_max + BOUNDARY_TOLERANCE:
            raise ValueError(
                f"Turning radius {turning_radius} outside layer {layer_index} "
                f"({layer.r_min}-{layer.r_max} km)"
            )
        rt = min(max(turning_radius, layer.r_min), layer.r_max)
        above = base[base > rt + self.minimum_spacing]
        if above.size == 0:
            return np.array([rt, layer.r_max]) if rt < layer.r_max else np.array([rt])

        offsets = []
        offset = (above[0] - rt) * self.refinement_ratio
        while offset >= self.minimum_spacing:
            offsets.append(offset)
            offset *= self.refinement_ratio
        refined = rt + np.array(offsets[::-1])
        return np.concatenate(([rt], refined, above))

    def zone_nodes(self, zone: Zone, bottom: Optional[float] = None) -> Tuple[np.ndarray, np.ndarray]:
        """
        Nodes from ``bottom`` to the top of ``zone``.

        Parameters
        ----------
        zone : Zone
        bottom : float, optional
            Lowest radius (a turning radius). Defaults to the zone bottom.

        Returns
        -------
        nodes : np.ndarray, shape (n,)
            Ascending radii.
        layers : np.ndarray, shape (n - 1,)
            Layer index of each interval ``[nodes[k], nodes[k+1]]``.
        """
        indices = self.model.zone_layers(zone)
        if not indices:
            return np.empty(0), np.empty(0, dtype=int)
        zone_bottom, zone_top = self.model.zone_bounds(zone)
        if bottom is None or np.isnan(bottom):
            bottom = zone_bottom

        nodes = []
        layers = []
        for i in indices:
            layer = self.model.layers[i]
            if layer.r_max <= bottom and not (i == indices[-1] and bottom >= zone_top):
                continue
            if layer.r_min <= bottom <= layer.r_max:
                local = self.nodes_for(i, bottom)
            else:
                local = self._base[i]
            if nodes:
                local = local[1:]
            nodes.append(local)
            layers.append(np.full(local.size, i))
        nodes = np.concatenate(nodes)
        # the first node of the first layer opens no interval
        layers = np.concatenate(layers)[1:]
        return nodes, layers
