"""Tests for planetray.model: presets, validation, property access, ray geometry."""

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from planetray import InvalidModelError, VelocityModel, WaveType, Zone


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def _solid(r_min, r_max, vp, vs, rho=3.0):
    return dict(r_min=r_min, r_max=r_max, rho=[rho], vpv=[vp], vph=[vp], vsv=[vs], vsh=[vs])


def _fluid(r_min, r_max, vp, rho=10.0):
    return dict(r_min=r_min, r_max=r_max, rho=[rho], vpv=[vp], vph=[vp], vsv=[0.0], vsh=[0.0],
                q_mu=-1.0)


@pytest.fixture(scope="module")
def prem():
    return VelocityModel.prem()


@pytest.fixture(scope="module")
def two_layer():
    """Uniform mantle (vp = 10 km/s) over a uniform fluid core (vp = 8 km/s)."""
    return VelocityModel([_fluid(0.0, 3480.0, 8.0), _solid(3480.0, 6371.0, 10.0, 10.0 / np.sqrt(3))],
                         name="two-layer")


@pytest.fixture(scope="module")
def homogeneous():
    return VelocityModel.homogeneous(6371.0, vp=10.0)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

class TestLoading:
    def test_list_standard_models(self):
        models = VelocityModel.list_standard_models()
        assert isinstance(models, list)
        for name in ("prem", "iprem", "ak135", "iasp91"):
            assert name in models

    def test_from_standard_model_unknown_raises(self):
        with pytest.raises(ValueError, match="not found"):
            VelocityModel.from_standard_model("__nonexistent_model__")

    def test_prem_structure(self, prem):
        assert prem.radius == pytest.approx(6371.0)
        assert prem.core_mantle_boundary == pytest.approx(3480.0)
        assert prem.inner_core_boundary == pytest.approx(1221.5)
        assert prem.has_core and prem.has_inner_core
        assert prem.n_layers == 12

    @pytest.mark.parametrize("name,cmb,icb", [
        ("ak135", 3479.5, 1217.5),
        ("iasp91", 3482.0, 1217.1),
    ])
    def test_other_presets(self, name, cmb, icb):
        model = VelocityModel.from_standard_model(name)
        assert model.core_mantle_boundary == pytest.approx(cmb)
        assert model.inner_core_boundary == pytest.approx(icb)

    def test_iprem_is_isotropic(self):
        info = VelocityModel.iprem().get_info()
        assert info["transversely_isotropic"] is False

    def test_prem_is_anisotropic(self, prem):
        assert prem.get_info()["transversely_isotropic"] is True

    def test_homogeneous_has_no_core(self, homogeneous):
        assert not homogeneous.has_core
        assert homogeneous.core_mantle_boundary == 0.0
        assert homogeneous.zone_layers(Zone.MANTLE) == (0,)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class TestValidation:
    def test_gap_between_layers(self):
        with pytest.raises(InvalidModelError, match="contiguous"):
            VelocityModel([_solid(0, 3000, 10, 5), _solid(3100, 6371, 10, 5)])

    def test_must_start_at_centre(self):
        with pytest.raises(InvalidModelError):
            VelocityModel([_solid(100, 6371, 10, 5)])

    def test_non_positive_velocity(self):
        with pytest.raises(InvalidModelError, match="positive"):
            VelocityModel([_solid(0, 6371, -1.0, 5)])

    def test_fluid_with_shear_velocity(self):
        layer = _fluid(0, 3480, 8.0)
        layer["vsv"] = [1.0]
        with pytest.raises(InvalidModelError, match="zero"):
            VelocityModel([layer, _solid(3480, 6371, 10, 5)])

    def test_fluid_outermost_layer(self):
        with pytest.raises(InvalidModelError, match="outermost"):
            VelocityModel([_solid(0, 3480, 10, 5), _fluid(3480, 6371, 8.0)])

    def test_non_contiguous_fluid(self):
        layers = [_fluid(0, 1000, 8), _solid(1000, 2000, 10, 5), _fluid(2000, 3000, 8),
                  _solid(3000, 6371, 10, 5)]
        with pytest.raises(InvalidModelError, match="contiguous"):
            VelocityModel(layers)

    def test_invalid_model_error_is_value_error(self):
        assert issubclass(InvalidModelError, ValueError)


# ---------------------------------------------------------------------------
# Property access
# ---------------------------------------------------------------------------

class TestPropertyAccess:
    def test_surface_values(self, prem):
        assert prem.get_property_at_depth("vp", 0.0) == pytest.approx(5.8)
        assert prem.get_property_at_depth("vs", 0.0) == pytest.approx(3.2)
        assert prem.get_property_at_depth("rho", 0.0) == pytest.approx(2.6)

    def test_core_mantle_boundary_sides(self, prem):
        above = prem.get_property_at_radius("vph", 3480.0)
        below = prem.get_property_at_radius("vph", 3480.0, below=True)
        assert above == pytest.approx(13.7166, rel=1e-3)
        assert below == pytest.approx(8.0648, rel=1e-3)
        assert prem.get_property_at_radius("vsv", 3480.0, below=True) == 0.0

    def test_vectorised_query(self, two_layer):
        values = two_layer.get_property_at_radius("vp", np.array([1000.0, 5000.0]))
        np.testing.assert_allclose(values, [8.0, 10.0])

    def test_out_of_range_raises(self, prem):
        with pytest.raises(ValueError, match="outside"):
            prem.get_property_at_radius("vp", 7000.0)

    def test_unknown_property_raises(self, prem):
        with pytest.raises(ValueError, match="Unknown property"):
            prem.get_property_at_radius("qp", 5000.0)

    def test_profile_arrays_same_length(self, prem):
        profile = prem.get_property_profile(["vp", "rho"], points_per_layer=10)
        assert set(profile) == {"radius", "vp", "rho"}
        assert len(profile["radius"]) == len(profile["vp"]) == prem.n_layers * 10

    def test_layer_index_at_boundary(self, two_layer):
        assert two_layer.layer_index(3480.0) == 1
        assert two_layer.layer_index(3480.0, upper=False) == 0

    def test_zone_of(self, prem):
        assert prem.zone_of(3480.0) is Zone.MANTLE
        assert prem.zone_of(2000.0) is Zone.OUTER_CORE
        assert prem.zone_of(1221.5) is Zone.OUTER_CORE
        assert prem.zone_of(100.0) is Zone.INNER_CORE


# ---------------------------------------------------------------------------
# Ray geometry
# ---------------------------------------------------------------------------

def _three_layer():
    """Fast layer sandwiched between two slower ones."""
    return VelocityModel([_solid(0, 2000, 6.0, 3.0), _solid(2000, 4000, 12.0, 6.0),
                          _solid(4000, 6371, 10.0, 5.0)])


class TestTurningRadius:
    def test_homogeneous_closed_form(self, homogeneous):
        assert homogeneous.turning_radius(300.0, WaveType.P, Zone.MANTLE) == pytest.approx(3000.0)

    def test_evanescent_at_surface(self, homogeneous):
        assert np.isnan(homogeneous.turning_radius(700.0, WaveType.P, Zone.MANTLE))
        assert not homogeneous.is_accessible(700.0, WaveType.P, Zone.MANTLE)

    def test_critical_ray_parameter_turns_at_cmb(self, two_layer):
        p = two_layer.critical_ray_parameter(3480.0, WaveType.P)
        assert p == pytest.approx(348.0)
        assert two_layer.turning_radius(p, WaveType.P, Zone.MANTLE) == 3480.0

    def test_passes_through_zone(self, two_layer):
        assert np.isnan(two_layer.turning_radius(300.0, WaveType.P, Zone.MANTLE))
        assert two_layer.turning_radius(200.0, WaveType.P, Zone.OUTER_CORE) == pytest.approx(1600.0)

    def test_shear_wave_in_fluid(self, two_layer):
        assert np.isnan(two_layer.turning_radius(100.0, WaveType.SV, Zone.OUTER_CORE))
        assert np.isnan(two_layer.critical_ray_parameter(3480.0, WaveType.SV, below=True))

    def test_evanescent_below_boundary_turns_on_it(self):
        model = _three_layer()
        assert model.turning_radius(380.0, WaveType.P, Zone.MANTLE) == 4000.0

    def test_prem_turning_radius_is_inside_mantle(self, prem):
        rt = prem.turning_radius(600.0, WaveType.P, Zone.MANTLE)
        assert 3480.0 < rt < 6371.0
        v = prem.velocity(WaveType.P, rt)
        assert 600.0 * v == pytest.approx(rt, rel=1e-6)


class TestVerticalSlowness:
    def test_isotropic_reduces_to_simple_form(self, two_layer):
        r = np.array([4000.0, 5000.0, 6000.0])
        p = 300.0
        q, _ = two_layer.vertical_slowness(p, WaveType.P, r, 1)
        np.testing.assert_allclose(q, np.sqrt(1 / 10.0**2 - (p / r) ** 2))

    def test_fluid_layer(self, two_layer):
        r = np.array([2000.0, 3000.0])
        q, _ = two_layer.vertical_slowness(200.0, WaveType.P, r, 0)
        np.testing.assert_allclose(q, np.sqrt(1 / 8.0**2 - (200.0 / r) ** 2))

    def test_fluid_rejects_shear(self, two_layer):
        with pytest.raises(ValueError):
            two_layer.vertical_slowness(200.0, WaveType.SV, np.array([2000.0]), 0)

    @pytest.mark.parametrize("wave", [WaveType.P, WaveType.SV, WaveType.SH])
    def test_derivative_matches_finite_difference(self, prem, wave):
        layer = prem.layer_index(6200.0)
        r = np.array([6200.0, 6250.0])
        p, h = 300.0, 1e-4
        _, dqdp = prem.vertical_slowness(p, wave, r, layer)
        q_plus, _ = prem.vertical_slowness(p + h, wave, r, layer)
        q_minus, _ = prem.vertical_slowness(p - h, wave, r, layer)
        np.testing.assert_allclose(dqdp, (q_plus - q_minus) / (2 * h), rtol=1e-5)


# ---------------------------------------------------------------------------
# Identity and information
# ---------------------------------------------------------------------------

class TestIdentity:
    def test_dict_round_trip(self, prem):
        copy = VelocityModel.from_dict(prem.to_dict())
        assert copy == prem
        assert copy.identity == prem.identity
        assert hash(copy) == hash(prem)

    def test_name_does_not_affect_equality(self, two_layer):
        renamed = VelocityModel(two_layer.layers, name="other")
        assert renamed == two_layer
        assert renamed.identity == two_layer.identity

    def test_different_models_differ(self, prem):
        assert VelocityModel.iprem() != prem
        assert VelocityModel.iprem().identity != prem.identity


class TestDiscontinuities:
    def test_core_boundaries_present(self, prem):
        radii = [d["radius"] for d in prem.get_discontinuities()]
        assert 3480.0 in radii
        assert 1221.5 in radii
        assert radii[0] == 6371.0

    def test_depth_radius_sum_to_planet_radius(self, prem):
        for d in prem.get_discontinuities():
            assert d["depth"] + d["radius"] == pytest.approx(prem.radius)

    def test_outer_core_has_zero_vs(self, prem):
        cmb = [d for d in prem.get_discontinuities() if d["radius"] == 3480.0][0]
        assert cmb["lower"]["vsv"] == 0.0
        assert cmb["upper"]["vsv"] > 0.0

    def test_exclude_radius_and_order(self, prem):
        inward = prem.get_discontinuities(include_radius=False)
        outward = prem.get_discontinuities(include_radius=False, outwards=True)
        assert 6371.0 not in [d["radius"] for d in inward]
        assert [d["radius"] for d in inward] == [d["radius"] for d in outward][::-1]

    def test_layer_info(self, prem):
        info = prem.get_layer_info()
        assert len(info) == prem.n_layers
        assert info[1]["fluid"] is True
        assert info[1]["zone"] == "outer_core"


class TestPlotting:
    def test_plot_profiles(self, prem):
        import matplotlib.pyplot as plt

        fig, ax = prem.plot_profiles(["vp", "vs", "rho"], max_depth_km=1000.0)
        assert len(ax.lines) >= 3
        plt.close(fig)
