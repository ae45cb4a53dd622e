"""End-to-end behaviour of the network under each scenario."""

import numpy as np
import pytest

from physarum.analysis import compute_metrics
from physarum.core import EngineConfig, initialize, step
from physarum.scenarios import advance_migration, apply_scenario


class TestHotspotDrive:
    """initialize(7, 0.5) → hotspot → 100 ticks."""

    def test_flow_while_all_nodes_stay_active(self, rng):
        plas = apply_scenario(initialize(7, 0.5, rng=rng), "hotspot")
        saw_flow = False
        for _ in range(100):
            plas = step(plas)
            m = compute_metrics(plas)
            assert m.active_node_count == 7
            saw_flow = saw_flow or m.total_flow > 0
        assert saw_flow

    def test_flow_concentrates_on_hot_node(self, rng):
        plas = apply_scenario(initialize(7, 0.5, rng=rng), "hotspot")
        hot_id = next(iter(plas.nodes))
        for _ in range(100):
            plas = step(plas)
        hot_flow = sum(abs(t.flow) for t in plas.tubes.values() if t.touches(hot_id))
        assert hot_flow == pytest.approx(compute_metrics(plas).total_flow, rel=0.05)


class TestEquilibrium:
    """initialize(10, 0.9) → balanced → 500 ticks."""

    def test_total_flow_vanishes(self, rng):
        plas = apply_scenario(initialize(10, 0.9, rng=rng), "balanced")
        for _ in range(500):
            plas = step(plas)
        assert compute_metrics(plas).total_flow == pytest.approx(0.0, abs=1e-9)

    def test_undriven_tubes_are_replaced(self, rng):
        plas = apply_scenario(initialize(10, 0.9, rng=rng), "balanced")
        for _ in range(200):
            plas = step(plas)
        # Every seed tube has been pruned; what remains was regrown later
        assert plas.tube_count > 0
        assert all(t.age < plas.time for t in plas.tubes.values())
        assert all(t.thickness <= EngineConfig().seed_thickness for t in plas.tubes.values())


class TestGrowth:
    """initialize(5, 0.1) → growth → 1000 ticks."""

    def test_network_regrows(self, rng):
        plas = initialize(5, 0.1, rng=rng)
        initial = compute_metrics(plas).tube_count
        plas = apply_scenario(plas, "growth")
        sparse = compute_metrics(plas).tube_count

        for _ in range(1000):
            plas = step(plas)

        final = compute_metrics(plas).tube_count
        assert final > initial
        assert final > sparse


class TestFailure:
    """initialize(8, 0.6) → failure → next step."""

    def test_failed_node_carries_no_flow(self, rng):
        plas = apply_scenario(initialize(8, 0.6, rng=rng), "failure", rng=rng)
        inactive = [n for n in plas.nodes.values() if not n.is_active]
        assert len(inactive) == 1
        failed = inactive[0].id

        plas = step(plas)
        incident = plas.incident_tubes(failed)
        assert incident
        assert all(t.flow == 0.0 for t in incident)

    def test_failed_tubes_eventually_pruned(self, rng):
        cfg = EngineConfig()
        plas = apply_scenario(initialize(8, 0.6, config=cfg, rng=rng), "failure", cfg, rng)
        failed = next(n.id for n in plas.nodes.values() if not n.is_active)
        for _ in range(200):
            plas = step(plas, cfg)
        assert plas.incident_tubes(failed) == []


class TestInvariantsOverRuns:
    """Bounds hold tick by tick under every scenario."""

    @pytest.mark.parametrize("scenario", ["balanced", "hotspot", "migration", "failure", "growth"])
    def test_bounds(self, scenario, rng):
        plas = apply_scenario(initialize(9, 0.5, rng=rng), scenario, rng=rng)
        for _ in range(150):
            if scenario == "migration":
                plas = advance_migration(plas)
            plas = step(plas)
            for tube in plas.tubes.values():
                assert tube.thickness >= 0.0
                assert tube.age >= 0.0
                assert tube.source_id in plas.nodes
                assert tube.sink_id in plas.nodes
            for node in plas.nodes.values():
                assert all(0.0 <= c <= 1.0 for c in node.gradient.components())
            m = compute_metrics(plas)
            assert 0.0 <= m.network_efficiency <= 1.0
            assert np.isfinite(m.total_flow)
