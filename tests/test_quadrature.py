"""Tests for planetray.quadrature: Gauss-Legendre rules with square-root substitution."""

import numpy as np
import pytest

from planetray import quadrature
from planetray.quadrature import RadialQuadrature, get_good_scheme


class TestRadialQuadrature:
    def test_weights_sum_to_one(self):
        scheme = RadialQuadrature(order=5)
        assert scheme.weights.sum() == pytest.approx(1.0)
        assert np.all((scheme.points > 0) & (scheme.points < 1))

    @pytest.mark.parametrize("order", [1, 2, 3, 4, 6])
    def test_exact_for_polynomials(self, order):
        scheme = RadialQuadrature(order=order)
        degree = 2 * order - 1
        expected = (3.0 ** (degree + 1) - 1.0) / (degree + 1)
        assert scheme.integrate(lambda r: r ** degree, 1.0, 3.0) == pytest.approx(expected)

    def test_invalid_order(self):
        with pytest.raises(ValueError):
            RadialQuadrature(order=0)

    def test_substitution_removes_square_root_singularity(self):
        scheme = RadialQuadrature(order=4)
        anchor = 1000.0
        lower = np.array([1000.0, 1010.0])
        upper = np.array([1010.0, 1100.0])
        result = scheme.integrate_intervals(lambda r: 1.0 / np.sqrt(r - anchor), lower, upper, anchor)
        expected = 2 * np.sqrt(upper - anchor) - 2 * np.sqrt(lower - anchor)
        np.testing.assert_allclose(result, expected, rtol=1e-12)

    def test_stacked_integrands(self):
        scheme = RadialQuadrature(order=4)
        result = scheme.integrate_intervals(
            lambda r: np.stack((np.ones_like(r), r)), [0.0], [2.0], 0.0
        )
        assert result.shape == (2, 1)
        np.testing.assert_allclose(result[:, 0], [2.0, 2.0], rtol=1e-10)

    def test_substitution_nodes_inside_interval(self):
        scheme = RadialQuadrature(order=3)
        radii, weights = scheme.substitution_nodes([5.0], [9.0], 4.0)
        assert radii.shape == weights.shape == (1, 3)
        assert np.all((radii > 5.0) & (radii < 9.0))
        assert weights.sum() == pytest.approx(4.0)


class TestGoodScheme:
    def test_default_order_from_config(self, monkeypatch):
        monkeypatch.setattr(quadrature.config, "QUADRATURE_ORDER", 7)
        assert get_good_scheme().order == 7

    def test_cached(self):
        assert get_good_scheme(4) is get_good_scheme(4)
