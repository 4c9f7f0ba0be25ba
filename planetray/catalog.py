"""
Precomputed ray catalogs and inverse search.

A :class:`RayCatalog` holds computed :class:`~planetray.raypath.RayPath`
objects over the whole ray-parameter range of a model, spaced so that the
epicentral distance of every reference phase changes by at most
``max_delta_delta`` between neighbours. Queries of the form "which rays of
phase X reach distance D from a source at radius r" are answered by
binary search on each monotonic branch followed by a three-point
interpolation of the ray parameter.
"""

import json
import logging
import multiprocessing as mp
import os
import warnings
from concurrent.futures import ProcessPoolExecutor
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from numpy.polynomial import polynomial as P
from scipy.optimize import brentq

from . import config
from .constants import MINIMUM_DELTA_P, WaveType
from .exceptions import CatalogMismatchError
from .integration_mesh import IntegrationMesh
from .model import VelocityModel
from .phase import PhaseName
from .polynomial import solve_polynomial
from .raypath import PhaseLike, RayPath, as_phase

logger = logging.getLogger(__name__)

# Phases whose surface-source distances drive the catalog refinement
DEFAULT_REFERENCE_PHASES = (
    ('P', True), ('PcP', True), ('PKP', True), ('PKiKP', True), ('PKIKP', True),
    ('S', True), ('ScS', True), ('SKS', True), ('SKIKS', True),
    ('S', False), ('ScS', False),
)

CATALOG_FORMAT_VERSION = 1

TWO_PI = 2 * np.pi


class Arrival(NamedTuple):
    """One ray reaching the requested distance."""

    phase: PhaseName
    distance: float       # degrees
    travel_time: float    # seconds
    ray_parameter: float  # s/rad
    ray_path: RayPath


# ========== Worker Processes ========== #

_WORKER_STATE: Dict[str, Any] = {}


def _init_worker(model: VelocityModel, mesh: IntegrationMesh,
                 phases: Sequence[PhaseName]) -> None:
    """Store the read-only build inputs in a worker process."""
    _WORKER_STATE['model'] = model
    _WORKER_STATE['mesh'] = mesh
    _WORKER_STATE['phases'] = tuple(phases)


def _worker_entry(p: float):
    return _evaluate_entry(p, _WORKER_STATE['model'], _WORKER_STATE['mesh'],
                           _WORKER_STATE['phases'])


def _evaluate_entry(p: float, model: VelocityModel, mesh: IntegrationMesh,
                    phases: Sequence[PhaseName]):
    """Compute one ray and the surface-source (time, distance) of each phase."""
    path = RayPath(p, model, mesh)
    values = np.array([path.time_and_distance(phase) for phase in phases],
                      dtype=float).reshape(len(phases), 2)
    return p, path.results(), values


def _compute_entries(ray_parameters: np.ndarray, model: VelocityModel,
                     mesh: IntegrationMesh, phases: Sequence[PhaseName],
                     max_workers: int) -> list:
    """Scatter ray parameters over worker processes and gather the entries in order."""
    if max_workers <= 1 or len(ray_parameters) < 2:
        return [_evaluate_entry(float(p), model, mesh, phases) for p in ray_parameters]

    try:
        ctx = mp.get_context("fork")
    except ValueError:
        ctx = mp.get_context("spawn")
    n_workers = min(max_workers, len(ray_parameters))
    chunksize = max(1, len(ray_parameters) // (4 * n_workers))
    with ProcessPoolExecutor(
        max_workers=n_workers,
        mp_context=ctx,
        initializer=_init_worker,
        initargs=(model, mesh, tuple(phases)),
    ) as ex:
        return list(ex.map(_worker_entry, [float(p) for p in ray_parameters],
                           chunksize=chunksize))


# ========== Helpers ========== #

def _reference_phases(phases) -> Tuple[PhaseName, ...]:
    if phases is None:
        phases = DEFAULT_REFERENCE_PHASES
    out = []
    for phase in phases:
        if isinstance(phase, PhaseName):
            out.append(phase)
        elif isinstance(phase, str):
            out.append(PhaseName.create(phase))
        else:
            out.append(PhaseName.create(*phase))
    if not out:
        raise ValueError("At least one reference phase is required")
    return tuple(dict.fromkeys(out))


def grazing_ray_parameter(model: VelocityModel) -> float:
    """Largest ray parameter that propagates at the surface (slowest wave)."""
    v = min(model.velocity(wave, model.radius) for wave in WaveType)
    return model.radius / v


def critical_ray_parameters(model: VelocityModel, p_max: float) -> np.ndarray:
    """Ray parameters grazing each side of every boundary, for every wave."""
    radii = sorted({layer.r_min for layer in model.layers if layer.r_min > 0} | {model.radius})
    values = []
    for radius in radii:
        for wave in WaveType:
            for below in (False, True):
                p = model.critical_ray_parameter(radius, wave, below=below)
                if np.isfinite(p) and 0 < p <= p_max:
                    values.append(p)
    return np.unique(values)


def _refinement_points(ray_parameters: np.ndarray, delta: np.ndarray,
                       max_delta_delta: float) -> np.ndarray:
    """Midpoints of neighbouring entries whose reference distances differ too much."""
    a, b = delta[:-1], delta[1:]
    fa, fb = np.isfinite(a), np.isfinite(b)
    with np.errstate(invalid='ignore'):
        jump = fa & fb & (np.abs(b - a) > max_delta_delta)
    edge = fa ^ fb
    step = np.diff(ray_parameters)
    need = np.any(jump | edge, axis=1) & (step > 2 * MINIMUM_DELTA_P)
    return ray_parameters[:-1][need] + step[need] / 2


def branches(delta: np.ndarray) -> List[Tuple[int, int]]:
    """
    Split a distance column into strictly monotonic runs of finite values.

    Returns
    -------
    list of (start, stop)
        Index ranges ``delta[start:stop]``. A turning point (cusp) of the
        distance curve ends one branch and starts the next.
    """
    delta = np.asarray(delta, dtype=float)
    finite = np.isfinite(delta)
    n = delta.size
    out = []
    k = 0
    while k < n:
        if not finite[k]:
            k += 1
            continue
        start = j = k
        direction = 0.0
        while j + 1 < n and finite[j + 1]:
            step = np.sign(delta[j + 1] - delta[j])
            if step == 0 or (direction != 0 and step != direction):
                break
            direction = step
            j += 1
        out.append((start, j + 1))
        cusp = j > start and j + 1 < n and finite[j + 1] and delta[j + 1] != delta[j]
        k = j if cusp else j + 1
    return out


def fold_angle(delta):
    """Fold absolute distances into the relative range [0, pi]."""
    d = np.mod(delta, TWO_PI)
    return np.where(d > np.pi, TWO_PI - d, d)


def _absolute_targets(target: float, upper: float) -> List[float]:
    """Absolute distances up to ``upper`` that fold onto the relative ``target``."""
    out = []
    k = 0
    while target + TWO_PI * k <= upper + TWO_PI:
        out.extend((target + TWO_PI * k, TWO_PI * (k + 1) - target))
        k += 1
    return sorted(set(out))


# ========== Catalog ========== #

class RayCatalog:
    """
    An immutable table of computed rays sorted by ray parameter.

    Build one with :meth:`compute_catalog`, load one with :meth:`read`, or
    use :meth:`for_model` to cache catalogs on disk.

    Parameters
    ----------
    model : VelocityModel
    mesh : IntegrationMesh
    max_delta_delta : float
        Maximum distance step between neighbouring entries (radians).
    ray_parameters : np.ndarray
        Sorted ray parameters (s/rad).
    reference_phases : sequence of PhaseName
    reference_time, reference_delta : np.ndarray, shape (n, m)
        Surface-source travel times and distances of the reference phases.
    paths : sequence of RayPath, optional
        Computed rays; rebuilt lazily when omitted.

    Examples
    --------
    >>> catalog = RayCatalog.compute_catalog(model)  # doctest: +SKIP
    >>> paths = catalog.search_path('P', model.radius, np.radians(40))  # doctest: +SKIP
    """

    def __init__(self, model: VelocityModel, mesh: IntegrationMesh, max_delta_delta: float,
                 ray_parameters: np.ndarray, reference_phases: Sequence[PhaseName],
                 reference_time: np.ndarray, reference_delta: np.ndarray,
                 paths: Optional[Sequence[RayPath]] = None):
        self.model = model
        self.mesh = mesh
        self.max_delta_delta = float(max_delta_delta)
        self._p = np.asarray(ray_parameters, dtype=float)
        if np.any(np.diff(self._p) <= 0):
            raise ValueError("Catalog ray parameters must be strictly increasing")
        self._phases = tuple(reference_phases)
        self._time = np.asarray(reference_time, dtype=float).reshape(self._p.size, len(self._phases))
        self._delta = np.asarray(reference_delta, dtype=float).reshape(self._p.size, len(self._phases))
        for array in (self._p, self._time, self._delta):
            array.setflags(write=False)

        if paths is None:
            paths = [RayPath(p, model, mesh) for p in self._p]
        self._paths = tuple(paths)
        self._columns = {phase: i for i, phase in enumerate(self._phases)}
        self._branches = {phase: branches(self._delta[:, i]) for phase, i in self._columns.items()}
        self._diffraction = self._diffraction_paths()

    def _diffraction_paths(self) -> Dict[WaveType, RayPath]:
        """Rays grazing the mantle side of the core-mantle boundary."""
        out = {}
        if not self.model.has_core:
            return out
        cmb = self.model.core_mantle_boundary
        for wave in WaveType:
            p = self.model.critical_ray_parameter(cmb, wave)
            if np.isfinite(p):
                out[wave] = RayPath(p, self.model, self.mesh)
        return out

    # ========== Construction ========== #

    @classmethod
    def compute_catalog(cls, model: VelocityModel, mesh: Optional[IntegrationMesh] = None,
                        max_delta_delta: float = config.DEFAULT_MAXIMUM_D_DELTA,
                        reference_phases=None,
                        max_workers: Optional[int] = None) -> 'RayCatalog':
        """
        Build a catalog for ``model``.

        Starts from an even grid of ray parameters plus every critical ray
        parameter, then repeatedly bisects neighbouring entries whose
        reference-phase distances differ by more than ``max_delta_delta``
        (or where a phase starts or stops existing), until no interval
        needs refining or the ray-parameter step falls below
        ``MINIMUM_DELTA_P``. Each round is computed in parallel.

        Parameters
        ----------
        model : VelocityModel
        mesh : IntegrationMesh, optional
            Defaults to :meth:`IntegrationMesh.catalog`.
        max_delta_delta : float
            Maximum distance step in radians (default 0.1 degree).
        reference_phases : sequence, optional
            Phase names, PhaseName objects or (name, psv) pairs.
        max_workers : int, optional
            Worker processes (default ``config.MAX_WORKERS``; 1 is serial).

        Returns
        -------
        RayCatalog
        """
        if not max_delta_delta > 0:
            raise ValueError(f"max_delta_delta must be positive, got {max_delta_delta}")
        if mesh is None:
            mesh = IntegrationMesh.catalog(model)
        elif mesh.model != model:
            raise ValueError("The integration mesh was built for a different model")
        phases = _reference_phases(reference_phases)
        workers = max_workers or config.MAX_WORKERS

        p_max = grazing_ray_parameter(model)
        seeds = np.linspace(0.0, p_max, config.CATALOG_SEED_SIZE)
        grid = np.unique(np.concatenate((seeds, critical_ray_parameters(model, p_max))))
        logger.log(
            logging.INFO,
            f"Building catalog for {model.name}: {grid.size} seed ray parameters "
            f"up to {p_max:.4f} s/rad, workers={workers}",
        )

        entries = {}
        for p, results, values in _compute_entries(grid, model, mesh, phases, workers):
            entries[p] = (results, values)

        for round_number in range(1, config.CATALOG_MAX_ROUNDS + 1):
            ps = np.array(sorted(entries))
            delta = np.array([entries[p][1][:, 1] for p in ps])
            new = _refinement_points(ps, delta, max_delta_delta)
            if new.size == 0:
                break
            logger.log(logging.DEBUG, f"Refinement round {round_number}: {new.size} new ray parameters")
            for p, results, values in _compute_entries(new, model, mesh, phases, workers):
                entries[p] = (results, values)
        else:
            warnings.warn(
                f"Catalog refinement stopped after {config.CATALOG_MAX_ROUNDS} rounds; "
                f"some neighbours may differ by more than max_delta_delta"
            )

        ps = np.array(sorted(entries))
        values = np.array([entries[p][1] for p in ps])
        paths = [RayPath.from_results(p, model, mesh, entries[p][0]) for p in ps]
        logger.log(logging.INFO, f"Catalog for {model.name} complete: {ps.size} ray parameters")
        return cls(model, mesh, max_delta_delta, ps, phases,
                   values[:, :, 0], values[:, :, 1], paths)

    # ========== Access ========== #

    def __len__(self) -> int:
        return self._p.size

    def __repr__(self) -> str:
        return (f"RayCatalog(model={self.model.name!r}, entries={self._p.size}, "
                f"max_delta_delta={np.degrees(self.max_delta_delta):g} deg)")

    @property
    def ray_parameters(self) -> np.ndarray:
        return self._p

    @property
    def raypaths(self) -> Tuple[RayPath, ...]:
        return self._paths

    @property
    def reference_phases(self) -> Tuple[PhaseName, ...]:
        return self._phases

    def reference_table(self, phase: PhaseLike) -> Tuple[np.ndarray, np.ndarray]:
        """Surface-source (travel times, distances) of a reference phase."""
        phase = as_phase(phase)
        if phase not in self._columns:
            raise KeyError(f"'{phase}' is not a reference phase of this catalog")
        i = self._columns[phase]
        return self._time[:, i], self._delta[:, i]

    def branches(self, phase: PhaseLike, event_radius: Optional[float] = None) -> List[Tuple[float, float]]:
        """Ray-parameter ranges of the monotonic branches of ``phase``."""
        phase = as_phase(phase)
        er = self._event_radius(event_radius)
        delta = self._distances(phase, er)
        return [(self._p[a], self._p[b - 1]) for a, b in self._branch_ranges(phase, er, delta)]

    def diffraction_path(self, wave: WaveType) -> Optional[RayPath]:
        return self._diffraction.get(wave)

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

    def _distances(self, phase: PhaseName, event_radius: float) -> np.ndarray:
        """Distance of ``phase`` at every entry."""
        if event_radius == self.model.radius and phase in self._columns:
            return np.asarray(self._delta[:, self._columns[phase]])
        return np.array([path.epicentral_distance(phase, event_radius) for path in self._paths])

    def _branch_ranges(self, phase: PhaseName, event_radius: float,
                       delta: np.ndarray) -> List[Tuple[int, int]]:
        """Branch index ranges of ``delta``, stored for surface-source reference phases."""
        if event_radius == self.model.radius and phase in self._branches:
            return self._branches[phase]
        return branches(delta)

    def _index_of(self, ray_path: RayPath) -> int:
        i = int(np.searchsorted(self._p, ray_path.ray_parameter))
        if i >= self._p.size or self._p[i] != ray_path.ray_parameter:
            raise ValueError(f"{ray_path!r} is not an entry of this catalog")
        return i

    # ========== Search ========== #

    def search_path(self, phase: PhaseLike, event_radius: Optional[float],
                    target_delta: float, relative_angle: bool = False) -> List[RayPath]:
        """
        Catalog rays of ``phase`` closest to ``target_delta``.

        Parameters
        ----------
        phase : str or PhaseName
        event_radius : float or None
            Source radius in km (None for the surface).
        target_delta : float
            Epicentral distance in radians.
        relative_angle : bool
            Compare distances folded into [0, pi] instead of absolute ones.

        Returns
        -------
        list of RayPath
            One ray per branch reaching the distance; empty when the phase
            does not reach it.
        """
        phase = as_phase(phase)
        er = self._event_radius(event_radius)
        target_delta = float(target_delta)
        if not target_delta >= 0:
            raise ValueError(f"Target distance must be non-negative, got {target_delta}")
        if relative_angle and target_delta > np.pi:
            raise ValueError(f"Relative target distance must not exceed pi, got {target_delta}")

        if phase.is_diffracted:
            path = self._diffraction.get(phase.diffracted_leg.wave)
            if path is None:
                return []
            actual = self.get_actual_target_phase(path, phase, er, target_delta, relative_angle)
            return [path] if actual is not None else []

        delta = self._distances(phase, er)
        found: List[int] = []
        for start, stop in self._branch_ranges(phase, er, delta):
            if stop - start < 2:
                continue
            d = delta[start:stop]
            lo, hi = float(np.min(d)), float(np.max(d))
            targets = _absolute_targets(target_delta, hi) if relative_angle else [target_delta]
            for t in targets:
                if not lo <= t <= hi:
                    continue
                index = self._nearest_in_branch(d, t) + start
                if index not in found:
                    found.append(index)
        return [self._paths[i] for i in found]

    @staticmethod
    def _nearest_in_branch(d: np.ndarray, target: float) -> int:
        decreasing = d[0] > d[-1]
        ds = d[::-1] if decreasing else d
        j = int(np.clip(np.searchsorted(ds, target), 1, ds.size - 1))
        k = j - 1 if abs(ds[j - 1] - target) <= abs(ds[j] - target) else j
        return ds.size - 1 - k if decreasing else k

    def _absolute_target(self, target: float, relative_angle: bool, reference: float) -> float:
        """The absolute distance folding onto ``target`` closest to ``reference``."""
        if not relative_angle or not np.isfinite(reference):
            return target
        candidates = np.array(_absolute_targets(target, reference))
        return float(candidates[np.argmin(np.abs(candidates - reference))])

    def _window(self, phase: PhaseName, event_radius: float, index: int):
        """Three neighbouring entries on one monotonic branch around ``index``."""
        n = self._p.size
        for offsets in ((-1, 0, 1), (0, 1, 2), (-2, -1, 0)):
            idx = index + np.array(offsets)
            if idx.min() < 0 or idx.max() >= n:
                continue
            values = np.array([self._paths[i].time_and_distance(phase, event_radius) for i in idx])
            times, deltas = values[:, 0], values[:, 1]
            if not np.all(np.isfinite(deltas)):
                continue
            steps = np.diff(deltas)
            if np.all(steps > 0) or np.all(steps < 0):
                return idx, deltas, times
        return None

    def _linear_ray_parameter(self, phase: PhaseName, event_radius: float,
                              target: float, index: int) -> float:
        p0 = self._p[index]
        d0 = self._paths[index].epicentral_distance(phase, event_radius)
        for j in (index - 1, index + 1):
            if not 0 <= j < self._p.size:
                continue
            d1 = self._paths[j].epicentral_distance(phase, event_radius)
            if np.isfinite(d0) and np.isfinite(d1) and d1 != d0:
                return float(p0 + (target - d0) * (self._p[j] - p0) / (d1 - d0))
        return float(p0)

    def ray_parameter_by_three_point_interpolate(self, phase: PhaseLike, event_radius: Optional[float],
                                                 target_delta: float, relative_angle: bool,
                                                 ray_path: RayPath) -> float:
        """
        Ray parameter reaching exactly ``target_delta``.

        Fits a quadratic ``delta(p)`` through ``ray_path`` and two catalog
        neighbours on the same branch and solves it for ``target_delta``.
        Falls back to linear interpolation (with a warning) when no such
        neighbours exist or the quadratic has no suitable root.

        Parameters
        ----------
        phase : str or PhaseName
        event_radius : float or None
        target_delta : float
            Epicentral distance in radians.
        relative_angle : bool
        ray_path : RayPath
            A result of :meth:`search_path`.

        Returns
        -------
        float
            Ray parameter in s/rad.
        """
        phase = as_phase(phase)
        er = self._event_radius(event_radius)
        if phase.is_diffracted:
            return ray_path.ray_parameter
        index = self._index_of(ray_path)
        target = self._absolute_target(float(target_delta), relative_angle,
                                       ray_path.epicentral_distance(phase, er))

        window = self._window(phase, er, index)
        if window is None:
            warnings.warn(
                f"No three monotonic catalog neighbours for {phase} near "
                f"p={ray_path.ray_parameter:.6f}; using linear interpolation"
            )
            return self._linear_ray_parameter(phase, er, target, index)

        idx, deltas, _ = window
        p0 = self._p[index]
        x = self._p[idx] - p0
        coefficients = P.polyfit(x, deltas, 2)
        coefficients[0] -= target
        roots = solve_polynomial(coefficients)

        order = np.argsort(deltas)
        linear = float(np.interp(target, deltas[order], x[order]))
        span = x.max() - x.min()
        roots = roots[(roots >= x.min() - span) & (roots <= x.max() + span)]
        if roots.size == 0:
            warnings.warn(
                f"Quadratic fit for {phase} has no root near p={p0:.6f}; using linear interpolation"
            )
            return self._linear_ray_parameter(phase, er, target, index)
        return float(p0 + roots[np.argmin(np.abs(roots - linear))])

    def travel_time_by_three_point_interpolate(self, phase: PhaseLike, event_radius: Optional[float],
                                               target_delta: float, relative_angle: bool,
                                               ray_path: RayPath) -> float:
        """
        Travel time at ``target_delta`` from a quadratic fit of T(delta).

        Uses the same three catalog entries as
        :meth:`ray_parameter_by_three_point_interpolate`.
        """
        phase = as_phase(phase)
        er = self._event_radius(event_radius)
        if phase.is_diffracted:
            actual = self.get_actual_target_phase(ray_path, phase, er, target_delta, relative_angle)
            return ray_path.travel_time(actual, er) if actual is not None else np.nan
        index = self._index_of(ray_path)
        target = self._absolute_target(float(target_delta), relative_angle,
                                       ray_path.epicentral_distance(phase, er))

        window = self._window(phase, er, index)
        if window is None:
            warnings.warn(
                f"No three monotonic catalog neighbours for {phase} near "
                f"p={ray_path.ray_parameter:.6f}; using linear interpolation"
            )
            p = self._linear_ray_parameter(phase, er, target, index)
            return RayPath(p, self.model, self.mesh).travel_time(phase, er)

        _, deltas, times = window
        d0 = deltas[1]
        coefficients = P.polyfit(deltas - d0, times, 2)
        return float(P.polyval(target - d0, coefficients))

    def ray_parameter_by_bisection(self, phase: PhaseLike, event_radius: Optional[float],
                                   target_delta: float, relative_angle: bool,
                                   ray_path: RayPath, xtol: float = 1e-10) -> float:
        """
        Ray parameter reaching ``target_delta`` by Brent's method.

        The bracket is formed by ``ray_path`` and its catalog neighbours;
        each evaluation computes a new RayPath. NaN if no bracket exists.
        """
        phase = as_phase(phase)
        er = self._event_radius(event_radius)
        if phase.is_diffracted:
            return ray_path.ray_parameter
        index = self._index_of(ray_path)
        target = self._absolute_target(float(target_delta), relative_angle,
                                       ray_path.epicentral_distance(phase, er))

        def misfit(p):
            return RayPath(p, self.model, self.mesh).epicentral_distance(phase, er) - target

        f0 = self._paths[index].epicentral_distance(phase, er) - target
        if f0 == 0:
            return float(self._p[index])
        for j in (index - 1, index + 1):
            if not 0 <= j < self._p.size:
                continue
            f1 = self._paths[j].epicentral_distance(phase, er) - target
            if np.isfinite(f0) and np.isfinite(f1) and np.sign(f0) != np.sign(f1):
                a, b = sorted((self._p[index], self._p[j]))
                return float(brentq(misfit, a, b, xtol=xtol))
        return np.nan

    def get_actual_target_phase(self, ray_path: RayPath, phase: PhaseLike,
                                event_radius: Optional[float], target_delta: float,
                                relative_angle: bool) -> Optional[PhaseName]:
        """
        The phase that reaches ``target_delta`` along ``ray_path``.

        For a diffracted phase the diffraction arc is set to the target
        minus the critical (zero-arc) distance, in degrees. A negative arc
        means the target lies before the critical distance, and None is
        returned. Other phases are returned unchanged.
        """
        phase = as_phase(phase)
        if not phase.is_diffracted:
            return phase
        er = self._event_radius(event_radius)
        critical = ray_path.epicentral_distance(phase.with_diffraction_angle(0.0), er)
        if np.isnan(critical):
            return None
        target = float(target_delta)
        if relative_angle:
            candidates = [t for t in _absolute_targets(target, critical + TWO_PI) if t >= critical]
            target = min(candidates) if candidates else target
        angle = float(np.degrees(target - critical))
        if angle < 0:
            return None
        return phase.with_diffraction_angle(angle)

    # ========== Queries ========== #

    def compute_arrivals(self, phase: PhaseLike, event_radius: Optional[float],
                         distance: float, relative_angle: bool = False) -> List[Arrival]:
        """
        All arrivals of ``phase`` at ``distance`` degrees, sorted by time.

        Each catalog hit is refined with three-point interpolation and the
        resulting ray parameter is recomputed directly.
        """
        phase = as_phase(phase)
        er = self._event_radius(event_radius)
        target = float(np.radians(distance))
        arrivals = []
        for path in self.search_path(phase, er, target, relative_angle):
            actual = self.get_actual_target_phase(path, phase, er, target, relative_angle)
            if actual is None:
                continue
            if phase.is_diffracted:
                p = path.ray_parameter
                exact = path
            else:
                p = self.ray_parameter_by_three_point_interpolate(phase, er, target, relative_angle, path)
                if not np.isfinite(p) or p < 0:
                    continue
                exact = RayPath(p, self.model, self.mesh)
            time, delta = exact.time_and_distance(actual, er)
            if not np.isfinite(time):
                time = self.travel_time_by_three_point_interpolate(phase, er, target, relative_angle, path)
                delta = target
            if not np.isfinite(time):
                continue
            arrivals.append(Arrival(actual, float(np.degrees(delta)), float(time), float(p), exact))
        arrivals.sort(key=lambda arrival: arrival.travel_time)
        return arrivals

    def record_section(self, phase: PhaseLike, event_radius: Optional[float],
                       start: float, end: float, interval: float = 1.0) -> np.ndarray:
        """
        Travel-time curve of ``phase`` between two distances.

        Parameters
        ----------
        phase : str or PhaseName
        event_radius : float or None
        start, end, interval : float
            Distance range and step in degrees.

        Returns
        -------
        np.ndarray, shape (N, 3)
            Rows of (distance in degrees, travel time in s, ray parameter in
            s/rad); several rows share a distance where the phase has
            several branches.
        """
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        if end < start:
            raise ValueError(f"end ({end}) must not be smaller than start ({start})")
        rows = []
        for distance in np.arange(start, end + interval / 2, interval):
            for arrival in self.compute_arrivals(phase, event_radius, distance):
                rows.append((arrival.distance, arrival.travel_time, arrival.ray_parameter))
        return np.array(rows, dtype=float).reshape(-1, 3)

    # ========== Persistence ========== #

    def write(self, path: str) -> None:
        """
        Save the catalog to disk.

        Parameters
        ----------
        path : str
            Base path (without extension). Creates:
            - {path}.npz - ray parameters and reference-phase tables
            - {path}_metadata.json - model, mesh and build parameters
        """
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        table_path = f"{path}.npz"
        np.savez_compressed(
            table_path,
            ray_parameters=self._p,
            reference_time=self._time,
            reference_delta=self._delta,
        )

        metadata = {
            "format_version": CATALOG_FORMAT_VERSION,
            "model_name": self.model.name,
            "model_identity": self.model.identity,
            "model": self.model.to_dict(),
            "mesh": self.mesh.to_dict(),
            "max_delta_delta": self.max_delta_delta,
            "reference_phases": [[str(phase), phase.is_psv] for phase in self._phases],
            "n_entries": int(self._p.size),
        }
        metadata_path = f"{path}_metadata.json"
        with open(metadata_path, 'w') as f:
            json.dump(metadata, f, indent=2)

        logger.log(logging.INFO, f"Saved catalog to {table_path}")

    @classmethod
    def read(cls, path: str, model: Optional[VelocityModel] = None) -> 'RayCatalog':
        """
        Load a catalog written by :meth:`write`.

        Parameters
        ----------
        path : str
            Base path (without extension).
        model : VelocityModel, optional
            Model the catalog is expected to belong to. If None, the model
            stored with the catalog is used.

        Raises
        ------
        FileNotFoundError
            If either file is missing.
        CatalogMismatchError
            If the stored model differs from ``model`` or is corrupted.
        """
        table_path = f"{path}.npz"
        metadata_path = f"{path}_metadata.json"
        for file_path in (table_path, metadata_path):
            if not os.path.exists(file_path):
                raise FileNotFoundError(f"Catalog file not found: {file_path}")

        with open(metadata_path, 'r') as f:
            metadata = json.load(f)

        if metadata.get("format_version") != CATALOG_FORMAT_VERSION:
            raise CatalogMismatchError(
                f"Unsupported catalog format version {metadata.get('format_version')!r} in {metadata_path}"
            )
        stored = VelocityModel.from_dict(metadata["model"])
        identity = metadata["model_identity"]
        if stored.identity != identity:
            raise CatalogMismatchError(f"Catalog model in {metadata_path} does not match its identity")
        if model is None:
            model = stored
        elif model.identity != identity:
            raise CatalogMismatchError(
                f"Catalog {path} was built for model '{metadata.get('model_name')}' "
                f"({identity[:12]}), not '{model.name}' ({model.identity[:12]})"
            )

        mesh = IntegrationMesh.from_dict(model, metadata["mesh"])
        phases = [PhaseName.create(text, psv) for text, psv in metadata["reference_phases"]]
        with np.load(table_path) as data:
            ray_parameters = data["ray_parameters"]
            reference_time = data["reference_time"]
            reference_delta = data["reference_delta"]

        logger.log(logging.INFO, f"Loaded catalog from {table_path} ({ray_parameters.size} entries)")
        return cls(model, mesh, metadata["max_delta_delta"], ray_parameters, phases,
                   reference_time, reference_delta)

    @classmethod
    def for_model(cls, model: VelocityModel,
                  max_delta_delta: float = config.DEFAULT_MAXIMUM_D_DELTA,
                  catalog_dir: Optional[str] = None,
                  max_workers: Optional[int] = None) -> 'RayCatalog':
        """
        Catalog of ``model`` from the on-disk cache, building it if needed.

        Parameters
        ----------
        model : VelocityModel
        max_delta_delta : float
            Maximum distance step in radians.
        catalog_dir : str, optional
            Cache directory (default ``config.CATALOG_DIR``).
        max_workers : int, optional
            Worker processes used if the catalog has to be built.
        """
        catalog_dir = catalog_dir or config.CATALOG_DIR
        tag = f"{np.degrees(max_delta_delta):g}".replace('.', 'p')
        base = os.path.join(catalog_dir, f"{model.name.lower()}_{model.identity[:16]}_{tag}")

        if os.path.exists(f"{base}.npz"):
            try:
                return cls.read(base, model=model)
            except (CatalogMismatchError, OSError, ValueError, KeyError) as e:
                warnings.warn(f"Ignoring unreadable cached catalog {base}: {e}")

        catalog = cls.compute_catalog(model, max_delta_delta=max_delta_delta, max_workers=max_workers)
        try:
            catalog.write(base)
        except OSError as e:
            warnings.warn(f"Could not cache catalog in {catalog_dir}: {e}")
        return catalog

    @classmethod
    def prem(cls, **kwargs) -> 'RayCatalog':
        """Catalog of transversely isotropic PREM."""
        return cls.for_model(VelocityModel.prem(), **kwargs)

    @classmethod
    def iprem(cls, **kwargs) -> 'RayCatalog':
        """Catalog of isotropic PREM."""
        return cls.for_model(VelocityModel.iprem(), **kwargs)

    @classmethod
    def ak135(cls, **kwargs) -> 'RayCatalog':
        """Catalog of AK135."""
        return cls.for_model(VelocityModel.ak135(), **kwargs)
