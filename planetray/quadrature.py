"""
Numerical quadrature for radial travel-time integrals.

The travel-time and distance integrands behave like ``1/sqrt(r - r0)``
near a turning radius ``r0``. Substituting ``r = r0 + u**2`` turns them
into smooth functions of ``u``, which are then integrated with a fixed
order Gauss-Legendre rule on every mesh interval.

References
----------
- Abramowitz, M., & Stegun, I. A. (1964). Handbook of Mathematical
  Functions, section 25.4.29.
- Press, W. H., et al. (2007). Numerical Recipes, 3rd ed., section 4.5
  (change of variables for integrable singularities).
"""

from typing import Callable, Tuple

import numpy as np
from scipy.special import roots_legendre

from . import config

_SCHEMES = {}


class RadialQuadrature:
    """
    Gauss-Legendre quadrature on radial intervals.

    Parameters
    ----------
    order : int
        Number of Gauss points per interval.

    Examples
    --------
    >>> scheme = RadialQuadrature(order=4)
    >>> round(scheme.integrate(lambda r: r**2, 0.0, 3.0), 10)
    9.0
    """

    def __init__(self, order: int = 4):
        if order < 1:
            raise ValueError(f"Quadrature order must be positive, got {order}")
        self.order = order
        self.points, self.weights = self._get_quadrature_rule(order)

    def _get_quadrature_rule(self, order: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Gauss-Legendre points and weights mapped to [0, 1].

        Returns
        -------
        points : ndarray, shape (order,)
        weights : ndarray, shape (order,)
            Weights summing to 1.
        """
        x, w = roots_legendre(order)
        return (x + 1.0) / 2.0, w / 2.0

    def integrate(self, func: Callable[[np.ndarray], np.ndarray], a: float, b: float) -> float:
        """Integrate ``func`` over ``[a, b]`` without substitution."""
        r = a + (b - a) * self.points
        return float((b - a) * np.sum(self.weights * np.asarray(func(r))))

    def substitution_nodes(self, lower, upper, anchor: float) -> Tuple[np.ndarray, np.ndarray]:
        """
        Evaluation radii and weights for intervals ``[lower, upper]``.

        Uses ``r = anchor + u**2`` so that ``dr = 2 u du``. Every interval
        must lie at or above ``anchor``.

        Parameters
        ----------
        lower, upper : array-like, shape (m,)
            Interval bounds in km.
        anchor : float
            Radius of the integrable singularity (turning radius or the
            bottom of the integration range).

        Returns
        -------
        radii : ndarray, shape (m, order)
        weights : ndarray, shape (m, order)
            ``sum(f(radii) * weights, axis=1)`` approximates the integral
            of ``f`` over each interval.
        """
        lower = np.atleast_1d(np.asarray(lower, dtype=float))
        upper = np.atleast_1d(np.asarray(upper, dtype=float))
        u0 = np.sqrt(np.maximum(lower - anchor, 0.0))
        u1 = np.sqrt(np.maximum(upper - anchor, 0.0))
        du = (u1 - u0)[:, None]
        u = u0[:, None] + du * self.points[None, :]
        radii = anchor + u ** 2
        weights = 2.0 * u * du * self.weights[None, :]
        return radii, weights

    def integrate_intervals(self, func: Callable[[np.ndarray], np.ndarray],
                            lower, upper, anchor: float) -> np.ndarray:
        """
        Integrals of ``func`` over each interval ``[lower[i], upper[i]]``.

        ``func`` receives an array of radii and returns values of the same
        shape, or a stack of such arrays along a new leading axis.
        """
        radii, weights = self.substitution_nodes(lower, upper, anchor)
        values = np.asarray(func(radii))
        return np.sum(values * weights, axis=-1)


def get_good_scheme(order: int = None) -> RadialQuadrature:
    """
    Get the quadrature scheme used for travel-time integrals.

    Parameters
    ----------
    order : int, optional
        Gauss points per interval. If None (default), uses the
        ``PLANETRAY_QUADRATURE_ORDER`` environment variable or 4.

    Returns
    -------
    RadialQuadrature
    """
    if order is None:
        order = config.QUADRATURE_ORDER
    if order not in _SCHEMES:
        _SCHEMES[order] = RadialQuadrature(order=order)
    return _SCHEMES[order]
