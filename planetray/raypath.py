"""
Travel time and epicentral distance of a single ray parameter.

A :class:`RayPath` integrates, once per (zone, wave) pair, the vertical
slowness from the bottom of the ray in that zone (its turning radius, or
the zone bottom when the ray passes through) up to the zone top. Phases
are then evaluated by walking their legs and differencing those
cumulative integrals, so one computed ray answers every phase and source
depth.
"""

import threading
from typing import Dict, List, NamedTuple, Optional, Tuple, Union

import numpy as np

from .constants import BOUNDARY_TOLERANCE, BoundaryAction, WaveType, Zone
from .integration_mesh import IntegrationMesh
from .model import VelocityModel
from .phase import Leg, PhaseName
from .quadrature import get_good_scheme

PhaseLike = Union[str, PhaseName]

# (zone, wave) pairs a leg can travel as
ZONE_WAVES = (
    (Zone.MANTLE, WaveType.P),
    (Zone.MANTLE, WaveType.SV),
    (Zone.MANTLE, WaveType.SH),
    (Zone.OUTER_CORE, WaveType.P),
    (Zone.INNER_CORE, WaveType.P),
    (Zone.INNER_CORE, WaveType.SV),
)


class ZonePart(NamedTuple):
    """Cumulative integrals of one wave through one zone."""

    zone: Zone
    wave: WaveType
    anchor: float
    nodes: np.ndarray
    layers: np.ndarray
    cum_time: np.ndarray
    cum_delta: np.ndarray


class Segment(NamedTuple):
    """One leg of a phase resolved to radii."""

    leg: Leg
    start: float
    end: float
    part: ZonePart


def as_phase(phase: PhaseLike) -> PhaseName:
    return phase if isinstance(phase, PhaseName) else PhaseName.create(phase)


class RayPath:
    """
    Travel times and distances of every phase for one ray parameter.

    Parameters
    ----------
    ray_parameter : float
        Ray parameter in s/rad.
    model : VelocityModel
    mesh : IntegrationMesh, optional
        Defaults to :meth:`IntegrationMesh.simple`.

    Examples
    --------
    >>> model = VelocityModel.homogeneous(6371.0, vp=10.0)
    >>> path = RayPath(551.75, model)
    >>> round(float(np.degrees(path.epicentral_distance('P'))), 2)  # doctest: +SKIP
    60.0
    """

    def __init__(self, ray_parameter: float, model: VelocityModel,
                 mesh: Optional[IntegrationMesh] = None):
        ray_parameter = float(ray_parameter)
        if not np.isfinite(ray_parameter) or ray_parameter < 0:
            raise ValueError(f"Ray parameter must be finite and non-negative, got {ray_parameter}")
        if mesh is not None and mesh.model != model:
            raise ValueError("The integration mesh was built for a different model")
        self._p = ray_parameter
        self.model = model
        self.mesh = mesh if mesh is not None else IntegrationMesh.simple(model)
        self._lock = threading.Lock()
        self._computed = False
        self._turning: Dict[Tuple[Zone, WaveType], float] = {}
        self._parts: Dict[Tuple[Zone, WaveType], ZonePart] = {}

    @property
    def ray_parameter(self) -> float:
        return self._p

    @property
    def is_computed(self) -> bool:
        return self._computed

    def __repr__(self) -> str:
        return f"RayPath(ray_parameter={self._p!r}, model={self.model.name!r})"

    def __getstate__(self):
        state = self.__dict__.copy()
        del state['_lock']
        return state

    def __setstate__(self, state):
        self.__dict__.update(state)
        self._lock = threading.Lock()

    # ========== Integration ========== #

    def compute(self) -> None:
        """
        Integrate every (zone, wave) pair the ray can travel as.

        Idempotent and safe to call from several threads; the second and
        later calls return immediately.
        """
        if self._computed:
            return
        with self._lock:
            if self._computed:
                return
            turning = {}
            parts = {}
            for zone, wave in ZONE_WAVES:
                rt = self.model.turning_radius(self._p, wave, zone)
                turning[(zone, wave)] = rt
                if not self.model.is_accessible(self._p, wave, zone):
                    continue
                parts[(zone, wave)] = self._integrate_zone(zone, wave, rt)
            self._turning = turning
            self._parts = parts
            self._computed = True

    def results(self):
        """(turning radii, zone parts) of a computed ray, for transfer between processes."""
        self.compute()
        return dict(self._turning), dict(self._parts)

    @classmethod
    def from_results(cls, ray_parameter: float, model: VelocityModel, mesh: IntegrationMesh,
                     results) -> 'RayPath':
        """A computed RayPath built from :meth:`results` of an equivalent ray."""
        path = cls(ray_parameter, model, mesh)
        turning, parts = results
        path._turning = dict(turning)
        path._parts = dict(parts)
        path._computed = True
        return path

    def _integrand(self, wave: WaveType, layer: int):
        p = self._p

        def integrand(r):
            q, dqdp = self.model.vertical_slowness(p, wave, r, layer)
            return np.stack((q - p * dqdp, -dqdp))

        return integrand

    def _integrate(self, wave: WaveType, lower, upper, layers, anchor: float) -> np.ndarray:
        scheme = get_good_scheme()
        out = np.zeros((2, len(lower)))
        for i in np.unique(layers):
            mask = layers == i
            out[:, mask] = scheme.integrate_intervals(
                self._integrand(wave, int(i)), lower[mask], upper[mask], anchor
            )
        return out

    def _integrate_zone(self, zone: Zone, wave: WaveType, turning_radius: float) -> ZonePart:
        nodes, layers = self.mesh.zone_nodes(zone, turning_radius)
        anchor = float(nodes[0])
        cum = np.zeros((2, nodes.size))
        if nodes.size > 1:
            pieces = self._integrate(wave, nodes[:-1], nodes[1:], layers, anchor)
            cum[:, 1:] = np.cumsum(pieces, axis=1)
        return ZonePart(zone, wave, anchor, nodes, layers, cum[0], cum[1])

    def _cumulative(self, part: ZonePart, radius: float) -> Tuple[float, float]:
        """(time, distance) integrated from the part's anchor to ``radius``."""
        nodes = part.nodes
        if nodes.size < 2 or radius <= nodes[0]:
            return 0.0, 0.0
        if radius >= nodes[-1]:
            return float(part.cum_time[-1]), float(part.cum_delta[-1])
        k = int(np.searchsorted(nodes, radius, side='right')) - 1
        time, delta = float(part.cum_time[k]), float(part.cum_delta[k])
        if radius > nodes[k]:
            extra = self._integrate(part.wave, np.array([nodes[k]]), np.array([radius]),
                                    part.layers[k:k + 1], part.anchor)
            time += float(extra[0, 0])
            delta += float(extra[1, 0])
        return time, delta

    def _between(self, part: ZonePart, a: float, b: float) -> Tuple[float, float]:
        lower, upper = min(a, b), max(a, b)
        t1, d1 = self._cumulative(part, upper)
        t0, d0 = self._cumulative(part, lower)
        return t1 - t0, d1 - d0

    # ========== Phases ========== #

    def turning_radius(self, zone: Zone, wave: WaveType) -> float:
        """Turning radius of the ray in ``zone`` (NaN if it does not turn there)."""
        self.compute()
        return self._turning.get((zone, wave), np.nan)

    def _event_radius(self, event_radius: Optional[float]) -> float:
        if event_radius is None:
            return self.model.radius
        event_radius = float(event_radius)
        if not self.model.core_mantle_boundary < event_radius <= self.model.radius:
            raise ValueError(
                f"Event radius must lie in the mantle "
                f"({self.model.core_mantle_boundary}, {self.model.radius}] km, got {event_radius}"
            )
        return event_radius

    def segments(self, phase: PhaseLike, event_radius: Optional[float] = None) -> Optional[List[Segment]]:
        """
        Resolve the legs of ``phase`` to radius ranges.

        Returns None when the phase does not exist for this ray parameter.
        """
        phase = as_phase(phase)
        er = self._event_radius(event_radius)
        self.compute()
        model = self.model
        if phase.uses_core and not model.has_core:
            return None
        if Zone.INNER_CORE in phase.zones and not model.has_inner_core:
            return None

        out = []
        current = er
        for leg in phase.legs:
            part = self._parts.get((leg.zone, leg.wave))
            if part is None:
                return None
            bottom, top = model.zone_bounds(leg.zone)
            rt = self._turning[(leg.zone, leg.wave)]
            grazing = not np.isnan(rt) and abs(rt - bottom) <= BOUNDARY_TOLERANCE

            if leg.is_upgoing:
                # an upgoing leg must start at or above the turning radius
                if not (np.isnan(rt) or rt <= current + BOUNDARY_TOLERANCE):
                    return None
                end = top
            elif leg.action is BoundaryAction.TURN:
                if np.isnan(rt) or rt > current + BOUNDARY_TOLERANCE:
                    return None
                end = min(rt, current)
            elif leg.action is BoundaryAction.DIFFRACTION:
                if not grazing:
                    return None
                end = bottom
            else:
                if not (np.isnan(rt) or grazing):
                    return None
                end = bottom
            out.append(Segment(leg, current, end, part))
            current = end
        return out

    def _sum(self, segments: Optional[List[Segment]]) -> Tuple[float, float]:
        if segments is None:
            return np.nan, np.nan
        time = 0.0
        delta = 0.0
        for leg, start, end, part in segments:
            t, d = self._between(part, start, end)
            time += t
            delta += d
            if leg.action is BoundaryAction.DIFFRACTION:
                arc = np.radians(leg.diffraction_angle)
                time += self._p * arc
                delta += arc
            elif leg.action is BoundaryAction.TURN and self._p == 0 and end == 0:
                # vertical ray through the centre
                delta += np.pi
        return time, delta

    def travel_time(self, phase: PhaseLike, event_radius: Optional[float] = None) -> float:
        """
        Travel time in seconds of ``phase`` for a source at ``event_radius``.

        Parameters
        ----------
        phase : str or PhaseName
        event_radius : float, optional
            Source radius in km (default: the surface).

        Returns
        -------
        float
            NaN if the phase does not exist for this ray parameter.
        """
        return self._sum(self.segments(phase, event_radius))[0]

    def epicentral_distance(self, phase: PhaseLike, event_radius: Optional[float] = None) -> float:
        """Epicentral distance in radians of ``phase`` (NaN if it does not exist)."""
        return self._sum(self.segments(phase, event_radius))[1]

    def time_and_distance(self, phase: PhaseLike,
                          event_radius: Optional[float] = None) -> Tuple[float, float]:
        return self._sum(self.segments(phase, event_radius))

    def path_points(self, phase: PhaseLike, event_radius: Optional[float] = None,
                    arc_points: int = 20) -> np.ndarray:
        """
        Geometric ray path for plotting.

        Parameters
        ----------
        phase : str or PhaseName
        event_radius : float, optional
            Source radius in km (default: the surface).
        arc_points : int
            Points used to draw a diffracted arc.

        Returns
        -------
        np.ndarray, shape (N, 2)
            Columns are radius (km) and angular distance from the source
            (radians). Empty when the phase does not exist.
        """
        segments = self.segments(phase, event_radius)
        if segments is None:
            return np.empty((0, 2))

        points = [(segments[0].start, 0.0)]
        angle = 0.0
        for leg, start, end, part in segments:
            lo, hi = min(start, end), max(start, end)
            radii = part.nodes[(part.nodes > lo) & (part.nodes < hi)]
            if end < start:
                radii = radii[::-1]
            for r in np.concatenate((radii, [end])):
                _, d = self._between(part, start, r)
                points.append((float(r), angle + d))
            angle += self._between(part, start, end)[1]
            if leg.action is BoundaryAction.DIFFRACTION:
                arc = np.radians(leg.diffraction_angle)
                for a in np.linspace(angle, angle + arc, arc_points)[1:]:
                    points.append((end, float(a)))
                angle += arc
            elif leg.action is BoundaryAction.TURN and self._p == 0 and end == 0:
                angle += np.pi
        return np.array(points)
