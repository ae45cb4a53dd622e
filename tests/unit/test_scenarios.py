"""Unit tests for scenario presets."""

from dataclasses import replace

import numpy as np
import pytest

from physarum.core import ConfigurationError, Plasmodium, initialize
from physarum.core.gradient import combine_gradient
from physarum.scenarios import SCENARIOS, apply_scenario


def gradients(plas):
    return {k: n.gradient for k, n in plas.nodes.items()}


class TestBalanced:
    """Tests for the balanced scenario."""

    def test_all_nodes_equal(self, small_network):
        plas = apply_scenario(small_network, "balanced")
        for node in plas.nodes.values():
            assert node.gradient.components() == (0.5, 0.5, 0.5)

    def test_deterministic(self, small_network):
        a = apply_scenario(small_network, "balanced")
        b = apply_scenario(small_network, "balanced")
        assert gradients(a) == gradients(b)

    def test_idempotent(self, hotspot_network):
        once = apply_scenario(hotspot_network, "balanced")
        twice = apply_scenario(once, "balanced")
        assert gradients(once) == gradients(twice)

    def test_freshness_is_snapshot_time(self, small_network):
        plas = apply_scenario(replace(small_network, time=3.0), "balanced")
        assert all(n.gradient.freshness == 3.0 for n in plas.nodes.values())


class TestHotspot:
    """Tests for the hotspot scenario."""

    def test_one_rich_node(self, hotspot_network):
        levels = sorted(combine_gradient(n.gradient) for n in hotspot_network.nodes.values())
        assert levels[-1] == pytest.approx(0.885)
        assert all(level == pytest.approx(0.15) for level in levels[:-1])

    def test_first_node_is_hot(self, hotspot_network):
        first = next(iter(hotspot_network.nodes.values()))
        assert first.gradient.components() == (0.9, 0.85, 0.9)

    def test_idempotent(self, hotspot_network):
        again = apply_scenario(hotspot_network, "hotspot")
        assert gradients(again) == gradients(hotspot_network)

    def test_topology_untouched(self, small_network, hotspot_network):
        assert hotspot_network.tubes == small_network.tubes


class TestFailure:
    """Tests for the failure scenario."""

    def test_exactly_one_inactive(self, small_network, rng):
        plas = apply_scenario(small_network, "failure", rng=rng)
        inactive = [n for n in plas.nodes.values() if not n.is_active]
        assert len(inactive) == 1
        assert inactive[0].gradient.components() == (0.0, 0.0, 0.0)

    def test_incident_tubes_persist(self, small_network, rng):
        plas = apply_scenario(small_network, "failure", rng=rng)
        assert plas.tubes == small_network.tubes

    def test_repeated_failures_pick_active_nodes(self, small_network, rng):
        plas = small_network
        for expected in range(1, 8):
            plas = apply_scenario(plas, "failure", rng=rng)
            assert sum(not n.is_active for n in plas.nodes.values()) == expected

    def test_no_active_nodes_is_noop(self, small_network, rng):
        nodes = {k: replace(n, is_active=False) for k, n in small_network.nodes.items()}
        plas = replace(small_network, nodes=nodes)
        assert apply_scenario(plas, "failure", rng=rng) == plas

    def test_seeded_choice_reproducible(self, small_network):
        a = apply_scenario(small_network, "failure", rng=np.random.default_rng(7))
        b = apply_scenario(small_network, "failure", rng=np.random.default_rng(7))
        assert a == b


class TestGrowthScenario:
    """Tests for the growth scenario."""

    def test_sparsifies_to_origin_tubes(self, rng):
        plas = initialize(10, 0.5, rng=rng)
        grown = apply_scenario(plas, "growth")
        origin = next(iter(plas.nodes))
        assert 0 < grown.tube_count < plas.tube_count
        assert all(t.touches(origin) for t in grown.tubes.values())

    def test_balanced_gradients(self, small_network):
        plas = apply_scenario(small_network, "growth")
        assert all(n.gradient.components() == (0.5, 0.5, 0.5) for n in plas.nodes.values())


class TestMigrationScenario:
    """Tests for the migration scenario's starting profile."""

    def test_bounded_profile(self, small_network, config):
        plas = apply_scenario(small_network, "migration")
        for node in plas.nodes.values():
            for c in node.gradient.components():
                assert config.migration_floor - 1e-12 <= c <= config.migration_ceiling + 1e-12

    def test_not_uniform(self, small_network):
        plas = apply_scenario(small_network, "migration")
        levels = [combine_gradient(n.gradient) for n in plas.nodes.values()]
        assert max(levels) - min(levels) > 0.05

    def test_deterministic(self, small_network):
        a = apply_scenario(small_network, "migration")
        b = apply_scenario(small_network, "migration")
        assert gradients(a) == gradients(b)


class TestApplyScenario:
    """Generic behaviour of apply_scenario."""

    def test_unknown_scenario(self, small_network):
        with pytest.raises(ConfigurationError):
            apply_scenario(small_network, "meltdown")

    @pytest.mark.parametrize("scenario", SCENARIOS)
    def test_input_untouched(self, small_network, scenario, rng):
        before = (dict(small_network.nodes), dict(small_network.tubes))
        result = apply_scenario(small_network, scenario, rng=rng)
        assert result is not small_network
        assert (small_network.nodes, small_network.tubes) == before

    @pytest.mark.parametrize("scenario", SCENARIOS)
    def test_empty_network(self, scenario, rng):
        plas = apply_scenario(Plasmodium.empty(), scenario, rng=rng)
        assert plas.node_count == 0
        assert plas.tube_count == 0

    @pytest.mark.parametrize("scenario", SCENARIOS)
    def test_node_set_unchanged(self, small_network, scenario, rng):
        plas = apply_scenario(small_network, scenario, rng=rng)
        assert set(plas.nodes) == set(small_network.nodes)
