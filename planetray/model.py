"""
Velocity model class for planetray.

This module provides an immutable, radially layered planet model whose
elastic properties are polynomials of the normalized radius
``x = r / radius`` within each layer. The model exposes the turning-radius
root solve and the vertical slowness used by the travel-time integrals.
"""

import hashlib
import json
import warnings
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from numpy.polynomial import polynomial as P

from . import presets
from .constants import BOUNDARY_TOLERANCE, EVANESCENCE_TOLERANCE, WaveType, Zone
from .exceptions import InvalidModelError
from .polynomial import solve_polynomial

FIELDS = ('rho', 'vpv', 'vph', 'vsv', 'vsh', 'eta')

# Velocity controlling the horizontally travelling ray of each wave type
VELOCITY_FIELD = {
    WaveType.P: 'vph',
    WaveType.SV: 'vsv',
    WaveType.SH: 'vsh',
}

_ALIASES = {'vp': 'vpv', 'vs': 'vsv', 'density': 'rho'}

# Points per layer used to check positivity of the profiles
_VALIDATION_SAMPLES = 17


@dataclass(frozen=True)
class Layer:
    """
    One polynomial layer of a velocity model.

    Parameters
    ----------
    r_min, r_max : float
        Radius range of the layer in km.
    rho, vpv, vph, vsv, vsh, eta : sequence of float
        Ascending-order polynomial coefficients in the normalized radius.
    q_mu : float
        Shear quality factor; a negative value marks a fluid layer.
    q_kappa : float
        Bulk quality factor.
    """

    r_min: float
    r_max: float
    rho: Tuple[float, ...]
    vpv: Tuple[float, ...]
    vph: Tuple[float, ...]
    vsv: Tuple[float, ...]
    vsh: Tuple[float, ...]
    eta: Tuple[float, ...] = (1.0,)
    q_mu: float = 600.0
    q_kappa: float = 57823.0

    def __post_init__(self) -> None:
        object.__setattr__(self, 'r_min', float(self.r_min))
        object.__setattr__(self, 'r_max', float(self.r_max))
        object.__setattr__(self, 'q_mu', float(self.q_mu))
        object.__setattr__(self, 'q_kappa', float(self.q_kappa))
        for field in FIELDS:
            coefficients = tuple(float(c) for c in np.atleast_1d(getattr(self, field)))
            if not coefficients:
                raise InvalidModelError(f"Layer field '{field}' has no coefficients")
            object.__setattr__(self, field, coefficients)

    @property
    def is_fluid(self) -> bool:
        return self.q_mu < 0

    @property
    def thickness(self) -> float:
        return self.r_max - self.r_min

    def evaluate(self, field: str, x):
        """Evaluate a field at normalized radius ``x``."""
        return P.polyval(x, np.asarray(getattr(self, field)))

    def contains(self, radius: float) -> bool:
        return self.r_min <= radius <= self.r_max

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {'r_min': self.r_min, 'r_max': self.r_max}
        for field in FIELDS:
            out[field] = list(getattr(self, field))
        out['q_mu'] = self.q_mu
        out['q_kappa'] = self.q_kappa
        return out


class VelocityModel:
    """
    An immutable, radially symmetric and transversely isotropic planet model.

    Layers are ordered from the centre outwards and must cover
    ``[0, radius]`` without gaps. The contiguous set of fluid layers
    (``q_mu < 0``) is the outer core; the layers below it form the inner
    core and those above it the mantle. A model without fluid layers is a
    single mantle zone and has both core boundaries at 0.

    Parameters
    ----------
    layers : sequence of Layer or dict
        Layer definitions, centre first.
    name : str, optional
        Display name. It does not take part in equality.

    Examples
    --------
    >>> model = VelocityModel.prem()
    >>> model.core_mantle_boundary
    3480.0
    >>> model.turning_radius(600.0, WaveType.P, Zone.MANTLE)  # doctest: +SKIP
    5105.3...
    """

    def __init__(self, layers: Sequence[Union[Layer, Dict[str, Any]]],
                 name: Optional[str] = None):
        parsed = [layer if isinstance(layer, Layer) else Layer(**layer) for layer in layers]
        if not parsed:
            raise InvalidModelError("A velocity model needs at least one layer")
        parsed.sort(key=lambda layer: layer.r_min)

        self._layers: Tuple[Layer, ...] = tuple(parsed)
        self.name = name if name is not None else 'custom'
        self._radius = parsed[-1].r_max
        self._r_min = np.array([layer.r_min for layer in parsed])
        self._r_max = np.array([layer.r_max for layer in parsed])

        self._validate()
        self._assign_zones()

    # ========== Construction ========== #

    @classmethod
    def from_layers(cls, layers: Sequence[Dict[str, Any]],
                    name: Optional[str] = None) -> 'VelocityModel':
        """Build a model from a list of layer dictionaries."""
        return cls(layers, name=name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VelocityModel':
        """Inverse of :meth:`to_dict`."""
        return cls(data['layers'], name=data.get('name'))

    @classmethod
    def homogeneous(cls, radius: float = 6371.0, vp: float = 10.0,
                    vs: Optional[float] = None, rho: float = 3.0,
                    name: str = 'homogeneous') -> 'VelocityModel':
        """
        A single solid layer with constant properties.

        Parameters
        ----------
        radius : float
            Planet radius in km.
        vp : float
            P velocity in km/s.
        vs : float, optional
            S velocity in km/s. Default: ``vp / sqrt(3)``.
        rho : float
            Density in g/cm^3.
        """
        if vs is None:
            vs = vp / np.sqrt(3.0)
        layer = Layer(r_min=0.0, r_max=radius, rho=(rho,), vpv=(vp,), vph=(vp,),
                      vsv=(vs,), vsh=(vs,))
        return cls([layer], name=name)

    @classmethod
    def from_standard_model(cls, model_name: str) -> 'VelocityModel':
        """
        Load a standard Earth model by name.

        Parameters
        ----------
        model_name : str
            One of :meth:`list_standard_models` (case insensitive).

        Raises
        ------
        ValueError
            If the model name is unknown.
        """
        key = model_name.lower()
        if key not in presets.STANDARD_MODELS:
            raise ValueError(
                f"Standard model '{model_name}' not found. "
                f"Available models: {', '.join(cls.list_standard_models())}"
            )
        return cls.from_dict(presets.STANDARD_MODELS[key]())

    @classmethod
    def list_standard_models(cls) -> List[str]:
        return sorted(presets.STANDARD_MODELS)

    @classmethod
    def prem(cls) -> 'VelocityModel':
        return cls.from_standard_model('prem')

    @classmethod
    def iprem(cls) -> 'VelocityModel':
        return cls.from_standard_model('iprem')

    @classmethod
    def ak135(cls) -> 'VelocityModel':
        return cls.from_standard_model('ak135')

    @classmethod
    def iasp91(cls) -> 'VelocityModel':
        return cls.from_standard_model('iasp91')

    def _validate(self) -> None:
        layers = self._layers
        if abs(layers[0].r_min) > BOUNDARY_TOLERANCE:
            raise InvalidModelError(
                f"Innermost layer must start at radius 0, got {layers[0].r_min}"
            )
        for lower, upper in zip(layers[:-1], layers[1:]):
            if abs(upper.r_min - lower.r_max) > BOUNDARY_TOLERANCE:
                raise InvalidModelError(
                    f"Layers are not contiguous: gap or overlap between "
                    f"{lower.r_max} and {upper.r_min} km"
                )

        for i, layer in enumerate(layers):
            if layer.r_max <= layer.r_min:
                raise InvalidModelError(
                    f"Layer {i} has non-positive thickness ({layer.r_min}-{layer.r_max} km)"
                )
            x = np.linspace(layer.r_min, layer.r_max, _VALIDATION_SAMPLES) / self._radius
            for field in ('rho', 'vpv', 'vph'):
                if np.any(layer.evaluate(field, x) <= 0):
                    raise InvalidModelError(
                        f"{field} must be strictly positive in layer {i} "
                        f"({layer.r_min}-{layer.r_max} km)"
                    )
            for field in ('vsv', 'vsh'):
                if layer.is_fluid:
                    if any(c != 0 for c in getattr(layer, field)):
                        raise InvalidModelError(
                            f"{field} must be identically zero in fluid layer {i}"
                        )
                elif np.any(layer.evaluate(field, x) <= 0):
                    raise InvalidModelError(
                        f"{field} must be strictly positive in solid layer {i} "
                        f"({layer.r_min}-{layer.r_max} km)"
                    )

        fluid = [i for i, layer in enumerate(layers) if layer.is_fluid]
        if fluid:
            if fluid != list(range(fluid[0], fluid[-1] + 1)):
                raise InvalidModelError("Fluid layers (q_mu < 0) must be contiguous")
            if fluid[-1] == len(layers) - 1:
                raise InvalidModelError("The outermost layer must be solid")

    def _assign_zones(self) -> None:
        n = len(self._layers)
        fluid = [i for i, layer in enumerate(self._layers) if layer.is_fluid]
        if fluid:
            first, last = fluid[0], fluid[-1]
            self._zones = {
                Zone.INNER_CORE: tuple(range(0, first)),
                Zone.OUTER_CORE: tuple(range(first, last + 1)),
                Zone.MANTLE: tuple(range(last + 1, n)),
            }
            self._icb = self._layers[first].r_min
            self._cmb = self._layers[last].r_max
        else:
            self._zones = {
                Zone.INNER_CORE: (),
                Zone.OUTER_CORE: (),
                Zone.MANTLE: tuple(range(n)),
            }
            self._icb = 0.0
            self._cmb = 0.0

    # ========== Structure ========== #

    @property
    def radius(self) -> float:
        """Planet radius in km."""
        return self._radius

    @property
    def layers(self) -> Tuple[Layer, ...]:
        return self._layers

    @property
    def n_layers(self) -> int:
        return len(self._layers)

    @property
    def core_mantle_boundary(self) -> float:
        return self._cmb

    @property
    def inner_core_boundary(self) -> float:
        return self._icb

    @property
    def has_core(self) -> bool:
        return bool(self._zones[Zone.OUTER_CORE])

    @property
    def has_inner_core(self) -> bool:
        return bool(self._zones[Zone.INNER_CORE])

    def zone_layers(self, zone: Zone) -> Tuple[int, ...]:
        """Indices of the layers of a zone, centre first."""
        return self._zones[zone]

    def zone_bounds(self, zone: Zone) -> Tuple[float, float]:
        """(bottom, top) radius of a zone."""
        if zone is Zone.MANTLE:
            return self._cmb, self._radius
        if zone is Zone.OUTER_CORE:
            return self._icb, self._cmb
        return 0.0, self._icb

    def zone_of(self, radius: float) -> Zone:
        """Zone containing ``radius``; boundaries belong to the zone above."""
        if radius >= self._cmb:
            return Zone.MANTLE
        if radius >= self._icb:
            return Zone.OUTER_CORE
        return Zone.INNER_CORE

    def layer_index(self, radius, upper: bool = True):
        """
        Index of the layer containing ``radius``.

        Parameters
        ----------
        radius : float or array-like
            Radius in km.
        upper : bool
            At a layer boundary, return the layer above it (default) or the
            one below it.
        """
        r = np.asarray(radius, dtype=float)
        if upper:
            idx = np.searchsorted(self._r_min, r, side='right') - 1
        else:
            idx = np.searchsorted(self._r_max, r, side='left')
        idx = np.clip(idx, 0, len(self._layers) - 1)
        return int(idx) if idx.ndim == 0 else idx

    # ========== Read-Only Property Access ========== #

    def get_property_at_radius(
        self, property_name: str, radius: Union[float, np.ndarray], below: bool = False
    ) -> Union[float, np.ndarray]:
        """
        Get property value at one or more radii (km).

        Parameters
        ----------
        property_name : str
            One of 'rho', 'vpv', 'vph', 'vsv', 'vsh', 'eta' ('vp', 'vs' and
            'density' are accepted as aliases of 'vpv', 'vsv' and 'rho').
        radius : float or np.ndarray
            Radius in km.
        below : bool
            At a discontinuity, return the value of the layer below.
        """
        field = _ALIASES.get(property_name, property_name)
        if field not in FIELDS:
            raise ValueError(f"Unknown property: {property_name}")
        r = np.asarray(radius, dtype=float)
        if np.any((r < 0) | (r > self._radius)):
            raise ValueError(
                f"One or more values outside valid range [0, {self._radius}]"
            )
        idx = np.atleast_1d(self.layer_index(r, upper=not below))
        flat = np.atleast_1d(r)
        out = np.empty_like(flat)
        for i in np.unique(idx):
            mask = idx == i
            out[mask] = self._layers[i].evaluate(field, flat[mask] / self._radius)
        return float(out[0]) if np.isscalar(radius) or r.ndim == 0 else out.reshape(r.shape)

    def get_property_at_depth(
        self, property_name: str, depth: Union[float, np.ndarray], below: bool = True
    ) -> Union[float, np.ndarray]:
        """Get property value at one or more depths (km)."""
        radius = self._radius - np.asarray(depth, dtype=float)
        value = self.get_property_at_radius(property_name, radius, below=below)
        return float(value) if np.isscalar(depth) else value

    def get_property_profile(self, names: Union[str, List[str]], asradius: bool = True,
                             points_per_layer: int = 20) -> Dict[str, np.ndarray]:
        """
        Sample one or more properties through every layer.

        Both ends of each layer are included, so discontinuities appear as
        two samples at the same radius.
        """
        if isinstance(names, str):
            names = [names]
        fields = [_ALIASES.get(n, n) for n in names]
        for name, field in zip(names, fields):
            if field not in FIELDS:
                raise ValueError(f"Unknown property: {name}")

        key = "radius" if asradius else "depth"
        result: Dict[str, List[np.ndarray]] = {k: [] for k in [key] + list(names)}
        for layer in self._layers:
            r = np.linspace(layer.r_min, layer.r_max, points_per_layer)
            result[key].append(r if asradius else self._radius - r)
            for name, field in zip(names, fields):
                result[name].append(layer.evaluate(field, r / self._radius))
        return {k: np.concatenate(v) for k, v in result.items()}

    def velocity(self, wave: WaveType, radius, upper: bool = True):
        """Horizontal phase velocity of ``wave`` at ``radius``."""
        return self.get_property_at_radius(VELOCITY_FIELD[wave], radius, below=not upper)

    # ========== Ray Geometry ========== #

    def turning_radius(self, p: float, wave: WaveType, zone: Zone) -> float:
        """
        Radius at which a ray of parameter ``p`` turns inside ``zone``.

        Layers are scanned from the top of the zone inwards. In each layer
        the turning equation ``p*v(x) - radius*x = 0`` is solved in closed
        form and the largest root inside the layer is kept. If the ray is
        already evanescent at the top of a deeper layer it turns at that
        boundary.

        Parameters
        ----------
        p : float
            Ray parameter in s/rad.
        wave : WaveType
            Polarization; selects vph, vsv or vsh.
        zone : Zone
            Zone to search.

        Returns
        -------
        float
            Turning radius in km, or NaN when the ray cannot enter the zone
            or passes through it without turning.
        """
        indices = self._zones[zone]
        field = VELOCITY_FIELD[wave]
        for k, i in enumerate(reversed(indices)):
            layer = self._layers[i]
            coefficients = np.asarray(getattr(layer, field))
            if not np.any(coefficients):
                return np.nan
            top = layer.r_max
            if p * layer.evaluate(field, top / self._radius) - top > EVANESCENCE_TOLERANCE:
                # evanescent just below the upper boundary
                if k == 0:
                    return np.nan
                return top
            root = self._largest_root(p, coefficients, layer)
            if not np.isnan(root):
                return root
        return np.nan

    def _largest_root(self, p: float, coefficients: np.ndarray, layer: Layer) -> float:
        c = np.zeros(max(coefficients.size, 2))
        c[:coefficients.size] = p * coefficients
        c[1] -= self._radius
        radii = solve_polynomial(c) * self._radius
        lo, hi = layer.r_min, layer.r_max
        radii = radii[(radii >= lo - BOUNDARY_TOLERANCE) & (radii <= hi + BOUNDARY_TOLERANCE)]
        if radii.size == 0:
            return np.nan
        best = float(radii.max())
        if abs(best - hi) <= BOUNDARY_TOLERANCE:
            return hi
        if abs(best - lo) <= BOUNDARY_TOLERANCE:
            return lo
        return best

    def is_accessible(self, p: float, wave: WaveType, zone: Zone) -> bool:
        """Whether a ray of parameter ``p`` propagates at the top of ``zone``."""
        indices = self._zones[zone]
        if not indices:
            return False
        layer = self._layers[indices[-1]]
        field = VELOCITY_FIELD[wave]
        v = layer.evaluate(field, layer.r_max / self._radius)
        if v <= 0:
            return False
        return p * v - layer.r_max <= EVANESCENCE_TOLERANCE

    def critical_ray_parameter(self, radius: float, wave: WaveType, below: bool = False) -> float:
        """
        Ray parameter of a ray grazing ``radius``: ``radius / v(radius)``.

        The velocity is taken from the layer above ``radius`` unless
        ``below`` is set. NaN if ``wave`` does not propagate there.
        """
        v = self.velocity(wave, radius, upper=not below)
        if v <= 0:
            return np.nan
        return radius / v

    def moduli(self, layer_index: int, radius) -> Dict[str, np.ndarray]:
        """Density and Love's elastic constants A, C, F, L, N at ``radius``."""
        layer = self._layers[layer_index]
        x = np.asarray(radius, dtype=float) / self._radius
        rho = layer.evaluate('rho', x)
        A = rho * layer.evaluate('vph', x) ** 2
        C = rho * layer.evaluate('vpv', x) ** 2
        L = rho * layer.evaluate('vsv', x) ** 2
        N = rho * layer.evaluate('vsh', x) ** 2
        F = layer.evaluate('eta', x) * (A - 2 * L)
        return {'rho': rho, 'A': A, 'C': C, 'F': F, 'L': L, 'N': N}

    def vertical_slowness(self, p: float, wave: WaveType, radius,
                          layer_index: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Vertical slowness ``q`` and its derivative ``dq/dp``.

        Uses the transversely isotropic solution of the Christoffel
        equation. In isotropic solids and in fluids ``q`` reduces to
        ``sqrt(1/v**2 - (p/r)**2)``.

        Parameters
        ----------
        p : float
            Ray parameter in s/rad.
        wave : WaveType
            Polarization.
        radius : array-like
            Radii in km, all inside layer ``layer_index``.
        layer_index : int
            Layer the radii belong to.

        Returns
        -------
        q : np.ndarray
            Vertical slowness in s/km (0 where the wave is evanescent).
        dqdp : np.ndarray
            Derivative of ``q`` with respect to ``p``.
        """
        r = np.asarray(radius, dtype=float)
        layer = self._layers[layer_index]
        xi = p / r

        if layer.is_fluid:
            if wave is not WaveType.P:
                raise ValueError(f"{wave.value} waves do not propagate in fluid layers")
            vp = layer.evaluate('vph', r / self._radius)
            q2 = 1.0 / vp ** 2 - xi ** 2
            dq2 = -2.0 * xi
        else:
            m = self.moduli(layer_index, r)
            rho, A, C, F, L, N = m['rho'], m['A'], m['C'], m['F'], m['L'], m['N']
            if wave is WaveType.SH:
                q2 = (rho - N * xi ** 2) / L
                dq2 = -2.0 * N * xi / L
            else:
                s1 = rho / 2 * (1 / L + 1 / C)
                s2 = rho / 2 * (1 / L - 1 / C)
                s3 = (A * C - F ** 2 - 2 * L * F) / (2 * L * C)
                s4 = s3 ** 2 - A / C
                s5 = rho * (A + L) / (L * C) - 2 * s1 * s3
                rr = np.sqrt(np.maximum(s4 * xi ** 4 + s5 * xi ** 2 + s2 ** 2, 0.0))
                sign = -1.0 if wave is WaveType.P else 1.0
                q2 = s1 - s3 * xi ** 2 + sign * rr
                drr = (2 * s4 * xi ** 3 + s5 * xi) / rr
                dq2 = -2 * s3 * xi + sign * drr

        q = np.sqrt(np.maximum(q2, 0.0))
        with np.errstate(divide='ignore', invalid='ignore'):
            dqdp = dq2 / r / (2.0 * q)
        return q, dqdp

    # ========== Identity ========== #

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'layers': [layer.to_dict() for layer in self._layers]}

    @property
    def identity(self) -> str:
        """SHA-256 digest of the canonical layer definition."""
        canonical = json.dumps([layer.to_dict() for layer in self._layers], sort_keys=True)
        return hashlib.sha256(canonical.encode('utf-8')).hexdigest()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VelocityModel):
            return NotImplemented
        return self._layers == other._layers

    def __hash__(self) -> int:
        return hash(self._layers)

    def __repr__(self) -> str:
        return (f"VelocityModel(name={self.name!r}, radius={self._radius}, "
                f"n_layers={len(self._layers)})")

    # ========== Model Information ========== #

    def get_info(self) -> Dict[str, Any]:
        """
        Get comprehensive information about the model.

        Returns
        -------
        info : Dict
            Dictionary containing model information
        """
        discontinuities = self.get_discontinuities(include_radius=False)
        return {
            'name': self.name,
            'radius_km': self._radius,
            'properties': list(FIELDS),
            'n_layers': len(self._layers),
            'n_discontinuities': len(discontinuities),
            'core_mantle_boundary_km': self._cmb,
            'inner_core_boundary_km': self._icb,
            'transversely_isotropic': any(
                layer.vpv != layer.vph or layer.vsv != layer.vsh or any(layer.eta[1:])
                or layer.eta[0] != 1.0
                for layer in self._layers
            ),
            'identity': self.identity,
            'layers': self.get_layer_info(),
        }

    def get_layer_info(self, properties: Optional[List[str]] = None,
                       outwards: bool = True) -> List[Dict[str, Any]]:
        """
        Get detailed information about each layer.

        Parameters
        ----------
        properties : List[str], optional
            Properties to include stats for. Default: ['vph', 'vsv', 'rho']
        outwards : bool
            Order from the centre outwards (default) or from the surface in.
        """
        if properties is None:
            properties = ['vph', 'vsv', 'rho']
        order = range(len(self._layers)) if outwards else reversed(range(len(self._layers)))
        info = []
        for i in order:
            layer = self._layers[i]
            x = np.linspace(layer.r_min, layer.r_max, _VALIDATION_SAMPLES) / self._radius
            entry = {
                'index': i,
                'zone': self.zone_of(layer.r_min).value,
                'fluid': layer.is_fluid,
                'radius_range': (layer.r_min, layer.r_max),
                'depth_range': (self._radius - layer.r_max, self._radius - layer.r_min),
                'properties': {},
            }
            for prop in properties:
                values = layer.evaluate(_ALIASES.get(prop, prop), x)
                entry['properties'][prop] = {
                    'min': float(np.min(values)),
                    'max': float(np.max(values)),
                    'mean': float(np.mean(values)),
                }
            info.append(entry)
        return info

    def get_discontinuities(self, include_radius: bool = True,
                            outwards: bool = False) -> List[Dict[str, Any]]:
        """
        Get discontinuity locations from the surface inward.

        Parameters
        ----------
        include_radius : bool
            If False, exclude the outer surface.
        outwards : bool
            If True, return discontinuities from the centre outwards.

        Returns
        -------
        List[Dict[str, Any]]
            One entry per boundary with its radius, depth and the property
            values just above ("upper") and just below ("lower") it.
        """
        props = list(FIELDS)
        out = []
        for i in reversed(range(len(self._layers))):
            layer = self._layers[i]
            below = self._layers[i - 1] if i > 0 else None
            if i == len(self._layers) - 1 and include_radius:
                out.append({
                    'radius': layer.r_max,
                    'depth': 0.0,
                    'upper': {prop: None for prop in props},
                    'lower': {prop: float(layer.evaluate(prop, 1.0)) for prop in props},
                })
            if below is None:
                continue
            x = layer.r_min / self._radius
            out.append({
                'radius': layer.r_min,
                'depth': self._radius - layer.r_min,
                'upper': {prop: float(layer.evaluate(prop, x)) for prop in props},
                'lower': {prop: float(below.evaluate(prop, x)) for prop in props},
            })
        if outwards:
            out.reverse()
        return out

    # ========== Visualization ========== #

    def plot_profiles(
        self,
        properties: Optional[List[str]] = None,
        max_depth_km: Optional[float] = None,
        ax: Optional[Axes] = None,
        show_discontinuities: bool = True,
        colors: Optional[Dict[str, str]] = None,
    ) -> Tuple[Any, Axes]:
        """
        Plot 1D profiles of the model.

        Parameters
        ----------
        properties : List[str], optional
            Properties to plot. Default: ['vpv', 'vph', 'vsv', 'vsh', 'rho']
        max_depth_km : float, optional
            Maximum depth to plot in km
        ax : matplotlib.axes.Axes, optional
            Axes to plot on. If None, creates new figure
        show_discontinuities : bool
            Whether to show discontinuity lines
        colors : Dict[str, str], optional
            Colors for each property

        Returns
        -------
        fig : matplotlib.figure.Figure
            Figure object
        ax : matplotlib.axes.Axes
            Axes object
        """
        if properties is None:
            properties = ['vpv', 'vph', 'vsv', 'vsh', 'rho']
        if colors is None:
            colors = {'vpv': 'blue', 'vph': 'cornflowerblue', 'vsv': 'red',
                      'vsh': 'salmon', 'rho': 'green', 'eta': 'purple'}

        if ax is None:
            fig, ax = plt.subplots(figsize=(10, 8))
        else:
            fig = ax.figure

        max_depth = max_depth_km or self._radius

        for prop in properties:
            if _ALIASES.get(prop, prop) not in FIELDS:
                warnings.warn(f"Skipping unknown property '{prop}'")
                continue
            profile = self.get_property_profile(prop, asradius=False)
            depths = profile['depth']
            values = profile[prop]
            mask = depths <= max_depth

            if prop.startswith('v'):
                label = "$v_{" + prop[1:] + "}$ (km/s)"
            elif prop == 'eta':
                label = "η"
            else:
                label = "ρ (g/cm$^3$)"
            ax.plot(values[mask], depths[mask], color=colors.get(prop, 'black'),
                    label=label, linewidth=2)

        if show_discontinuities:
            for d in self.get_discontinuities(include_radius=False):
                if d['depth'] <= max_depth:
                    ax.axhline(d['depth'], color='gray', linestyle='--', alpha=0.7)

        ax.set_ylabel('Depth (km)')
        ax.set_xlabel('Property Value')
        ax.set_ylim(max_depth, 0)
        ax.grid(True, alpha=0.3)
        ax.legend()
        ax.set_title(f'{self.name} - 1D Profiles')

        plt.tight_layout()
        return fig, ax
