"""Tests for planetray.visualization."""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest
from matplotlib.figure import Figure

from planetray import RayPath, RayPlotter, VelocityModel


@pytest.fixture(scope="module")
def prem():
    return VelocityModel.prem()


@pytest.fixture
def plotter(prem):
    yield RayPlotter(prem)
    plt.close("all")


class TestCrossSection:
    def test_returns_figure(self, prem, plotter):
        rays = [(RayPath(p, prem), "P") for p in (400.0, 600.0)]
        rays.append((RayPath(200.0, prem), "PKP"))
        fig = plotter.plot_cross_section(rays)
        assert isinstance(fig, Figure)
        ax = fig.axes[0]
        assert "3 ray(s)" in ax.get_title()

    def test_missing_phases_skipped(self, prem, plotter):
        fig = plotter.plot_cross_section([(RayPath(1200.0, prem), "P")])
        assert "0 ray(s)" in fig.axes[0].get_title()

    def test_upper_view_on_existing_axes(self, prem, plotter):
        fig, ax = plt.subplots()
        out = plotter.plot_cross_section([(RayPath(500.0, prem), "S")], event_radius=6000.0,
                                         view="upper", ax=ax)
        assert out is fig
        assert ax.get_ylim()[0] > -prem.radius * 0.2

    def test_invalid_view(self, plotter):
        with pytest.raises(ValueError, match="view"):
            plotter.plot_cross_section([], view="lower")


class TestCurves:
    def test_travel_time_curves(self, plotter):
        rows = np.array([[30.0, 370.0, 600.0], [40.0, np.nan, np.nan], [50.0, 520.0, 500.0]])
        fig = plotter.plot_travel_time_curves({"P": rows})
        assert isinstance(fig, Figure)
        line, = fig.axes[0].get_lines()
        assert len(line.get_xdata()) == 2

    def test_delta_curve(self, prem, plotter):
        paths = [RayPath(p, prem) for p in np.linspace(450.0, 650.0, 5)]
        fig = plotter.plot_delta_curve(paths, ["P", "PcP"])
        assert len(fig.axes[0].get_lines()) == 2
