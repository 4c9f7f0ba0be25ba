"""
Closed-form real roots of low-degree polynomials.

Velocity profiles are polynomials of at most third degree in the
normalized radius, so the turning-point equation ``p*v(x) - R*x = 0`` is
solved with explicit linear, quadratic and cubic formulas. The case is
selected from the discriminant rather than by iterating.

Coefficients are given in ascending order, ``c[0] + c[1]*x + c[2]*x**2 + ...``,
the same convention as :mod:`numpy.polynomial.polynomial`.
"""

from enum import Enum
from typing import Sequence

import numpy as np
from numpy.polynomial import polynomial as P

from .constants import POLYNOMIAL_ZERO


class RootType(Enum):
    """Classification of the real roots of a polynomial."""

    NONE = "none"              # no real root (or identically zero)
    SINGLE = "single"          # one simple real root
    DOUBLE = "double"          # one real root of multiplicity two
    TRIPLE = "triple"          # one real root of multiplicity three
    DISTINCT = "distinct"      # all roots real and distinct
    SINGLE_DOUBLE = "single_double"  # cubic with a simple and a double root


def trim(coefficients: Sequence[float]) -> np.ndarray:
    """Drop leading coefficients that are negligible compared to the rest."""
    c = np.asarray(coefficients, dtype=float)
    if c.size == 0:
        return c
    scale = np.max(np.abs(c))
    if scale == 0:
        return c[:1] * 0
    n = c.size
    while n > 1 and abs(c[n - 1]) <= POLYNOMIAL_ZERO * scale:
        n -= 1
    return c[:n]


def classify(coefficients: Sequence[float]) -> RootType:
    """
    Classify the real roots of a polynomial from its discriminant.

    Parameters
    ----------
    coefficients : sequence of float
        Ascending-order coefficients (degree <= 3).

    Returns
    -------
    RootType
    """
    c = trim(coefficients)
    degree = c.size - 1
    if degree <= 0:
        return RootType.NONE
    if degree == 1:
        return RootType.SINGLE
    if degree == 2:
        disc = c[1] ** 2 - 4 * c[2] * c[0]
        tol = POLYNOMIAL_ZERO * max(c[1] ** 2, abs(4 * c[2] * c[0]), 1e-300)
        if disc > tol:
            return RootType.DISTINCT
        if disc < -tol:
            return RootType.NONE
        return RootType.DOUBLE
    if degree == 3:
        p, q = _depressed(c)
        disc, tol = _cubic_discriminant(p, q)
        if disc > tol:
            return RootType.SINGLE
        if disc < -tol:
            return RootType.DISTINCT
        if abs(p) <= np.sqrt(POLYNOMIAL_ZERO) * (1 + abs(c[2] / c[3])) ** 2:
            return RootType.TRIPLE
        return RootType.SINGLE_DOUBLE
    raise ValueError(f"Closed-form classification supports degree <= 3, got {degree}")


def solve_polynomial(coefficients: Sequence[float], polish: bool = True) -> np.ndarray:
    """
    Real roots of a polynomial of degree at most three.

    Parameters
    ----------
    coefficients : sequence of float
        Ascending-order coefficients.
    polish : bool
        Apply Newton steps to each closed-form root.

    Returns
    -------
    np.ndarray
        Real roots in ascending order (may be empty).

    Examples
    --------
    >>> solve_polynomial([-6, 11, -6, 1])
    array([1., 2., 3.])
    """
    c = trim(coefficients)
    degree = c.size - 1
    if degree <= 0:
        return np.empty(0)
    if degree == 1:
        roots = np.array([-c[0] / c[1]])
    elif degree == 2:
        roots = _quadratic(c)
    elif degree == 3:
        roots = _cubic(c)
    else:
        # Not produced by the preset models; fall back to the companion matrix
        r = P.polyroots(c)
        roots = np.real(r[np.abs(np.imag(r)) <= 1e-10 * (1 + np.abs(r))])

    if polish and roots.size:
        roots = _newton(c, roots)
    return np.sort(roots)


def _quadratic(c: np.ndarray) -> np.ndarray:
    a, b, k = c[2], c[1], c[0]
    kind = classify(c)
    if kind is RootType.NONE:
        return np.empty(0)
    if kind is RootType.DOUBLE:
        return np.array([-b / (2 * a)])
    sq = np.sqrt(b * b - 4 * a * k)
    # numerically stable pair
    q = -0.5 * (b + np.copysign(sq, b))
    if q == 0:
        return np.array([0.0, 0.0])
    return np.array([q / a, k / q])


def _depressed(c: np.ndarray):
    """Coefficients of t**3 + p*t + q for x = t - b/3 (monic form)."""
    a3 = c[3]
    b, k, d = c[2] / a3, c[1] / a3, c[0] / a3
    p = k - b * b / 3
    q = 2 * b ** 3 / 27 - b * k / 3 + d
    return p, q


def _cubic_discriminant(p: float, q: float):
    disc = (q / 2) ** 2 + (p / 3) ** 3
    tol = POLYNOMIAL_ZERO * max((q / 2) ** 2, abs(p / 3) ** 3, 1e-300)
    return disc, tol


def _cubic(c: np.ndarray) -> np.ndarray:
    shift = c[2] / (3 * c[3])
    p, q = _depressed(c)
    kind = classify(c)

    if kind is RootType.SINGLE:
        # Cardano
        sq = np.sqrt((q / 2) ** 2 + (p / 3) ** 3)
        t = np.cbrt(-q / 2 + sq) + np.cbrt(-q / 2 - sq)
        return np.array([t - shift])

    if kind is RootType.TRIPLE:
        return np.array([-shift])

    if kind is RootType.SINGLE_DOUBLE:
        return np.array([3 * q / p - shift, -3 * q / (2 * p) - shift])

    # three distinct real roots: trigonometric form
    m = 2 * np.sqrt(-p / 3)
    arg = np.clip(3 * q / (p * m), -1.0, 1.0)
    theta = np.arccos(arg) / 3
    k = np.arange(3)
    return m * np.cos(theta - 2 * np.pi * k / 3) - shift


def _newton(c: np.ndarray, roots: np.ndarray, steps: int = 2) -> np.ndarray:
    dc = P.polyder(c)
    out = roots.astype(float).copy()
    for _ in range(steps):
        f = P.polyval(out, c)
        df = P.polyval(out, dc)
        ok = df != 0
        step = np.zeros_like(out)
        step[ok] = f[ok] / df[ok]
        # only accept steps that do not make the residual worse
        trial = out - step
        better = np.abs(P.polyval(trial, c)) <= np.abs(f)
        out = np.where(better, trial, out)
    return out
