"""Tests for planetray.integration_mesh: radial nodes and turning-point refinement."""

import numpy as np
import pytest

from planetray import IntegrationMesh, VelocityModel, Zone


@pytest.fixture(scope="module")
def prem():
    return VelocityModel.prem()


@pytest.fixture(scope="module")
def mesh(prem):
    return IntegrationMesh.simple(prem)


class TestConstruction:
    def test_modes(self, prem):
        assert IntegrationMesh.simple(prem).mode == "simple"
        assert IntegrationMesh.catalog(prem).mode == "catalog"

    @pytest.mark.parametrize("kwargs", [
        {"intervals": (10.0, 10.0)},
        {"intervals": (10.0, 0.0, 10.0)},
        {"refinement_ratio": 1.5},
        {"minimum_spacing": 0.0},
    ])
    def test_invalid_parameters(self, prem, kwargs):
        with pytest.raises(ValueError):
            IntegrationMesh(prem, **kwargs)

    def test_dict_round_trip(self, prem, mesh):
        copy = IntegrationMesh.from_dict(prem, mesh.to_dict())
        assert copy == mesh
        assert hash(copy) == hash(mesh)

    def test_meshes_of_different_models_differ(self, mesh):
        assert IntegrationMesh.simple(VelocityModel.iprem()) != mesh


class TestNodes:
    def test_layer_nodes_include_boundaries(self, prem, mesh):
        for i, layer in enumerate(prem.layers):
            nodes = mesh.nodes_for(i)
            assert nodes[0] == layer.r_min
            assert nodes[-1] == layer.r_max
            assert np.all(np.diff(nodes) <= mesh.spacing_for(i) + 1e-9)

    def test_refinement_towards_turning_radius(self, prem, mesh):
        layer = prem.layer_index(5000.0)
        nodes = mesh.nodes_for(layer, 5000.0)
        assert nodes[0] == 5000.0
        steps = np.diff(nodes)
        assert steps[0] < mesh.minimum_spacing * 2
        # geometric growth away from the turning radius
        assert np.all(np.diff(steps[1:10]) > 0)
        assert np.all(steps > 0)

    def test_turning_radius_outside_layer(self, prem, mesh):
        with pytest.raises(ValueError, match="outside layer"):
            mesh.nodes_for(prem.layer_index(5000.0), 6300.0)

    def test_zone_nodes_cover_zone(self, prem, mesh):
        nodes, layers = mesh.zone_nodes(Zone.MANTLE)
        assert nodes[0] == prem.core_mantle_boundary
        assert nodes[-1] == prem.radius
        assert layers.size == nodes.size - 1
        assert np.all(np.diff(nodes) > 0)
        # each interval lies inside the layer it is labelled with
        for a, b, i in zip(nodes[:-1], nodes[1:], layers):
            assert prem.layers[i].r_min <= a and b <= prem.layers[i].r_max

    def test_zone_nodes_from_turning_radius(self, prem, mesh):
        nodes, layers = mesh.zone_nodes(Zone.MANTLE, 5000.0)
        assert nodes[0] == 5000.0
        assert nodes[-1] == prem.radius
        assert set(np.unique(layers)) == set(range(prem.layer_index(5000.0), prem.n_layers))

    def test_bottom_on_boundary_uses_layer_above(self, prem, mesh):
        nodes, layers = mesh.zone_nodes(Zone.MANTLE, 5600.0)
        assert nodes[0] == 5600.0
        assert layers[0] == prem.layer_index(5600.0)

    def test_bottom_at_zone_top(self, prem, mesh):
        nodes, layers = mesh.zone_nodes(Zone.MANTLE, prem.radius)
        np.testing.assert_array_equal(nodes, [prem.radius])
        assert layers.size == 0

    def test_empty_zone(self):
        model = VelocityModel.homogeneous()
        nodes, layers = IntegrationMesh.simple(model).zone_nodes(Zone.OUTER_CORE)
        assert nodes.size == 0 and layers.size == 0
