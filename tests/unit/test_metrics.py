"""Unit tests for network metrics."""

from dataclasses import replace

import numpy as np
import pytest

from physarum.analysis import (
    NetworkMetrics,
    compute_metrics,
    network_efficiency,
    max_tube_flow,
    metrics_history_arrays,
)
from physarum.core import EngineConfig, Plasmodium, initialize, step
from physarum.core.network import make_tube


class TestEmptyNetwork:
    """Degenerate inputs give zeroed metrics."""

    def test_zero_nodes(self):
        assert compute_metrics(Plasmodium.empty()) == NetworkMetrics()

    def test_zero_fields(self):
        m = compute_metrics(Plasmodium.empty())
        assert m.tube_count == 0
        assert m.node_count == 0
        assert m.active_node_count == 0
        assert m.total_flow == 0.0
        assert m.network_efficiency == 0.0
        assert m.avg_gradient == 0.0

    def test_no_tubes(self, rng):
        m = compute_metrics(initialize(5, 0.0, rng=rng))
        assert m.tube_count == 0
        assert m.node_count == 5
        assert m.total_flow == 0.0
        assert m.network_efficiency == 0.0
        assert m.avg_gradient == pytest.approx(0.5)

    def test_all_inactive(self, small_network):
        nodes = {k: replace(n, is_active=False) for k, n in small_network.nodes.items()}
        m = compute_metrics(replace(small_network, nodes=nodes))
        assert m.active_node_count == 0
        assert m.avg_gradient == 0.0


class TestCounts:
    """Counts and sums."""

    def test_counts(self, small_network):
        m = compute_metrics(small_network)
        assert m.node_count == 7
        assert m.active_node_count == 7
        assert m.tube_count == small_network.tube_count

    def test_total_flow_is_abs_sum(self, hotspot_network):
        plas = step(hotspot_network)
        m = compute_metrics(plas)
        assert m.total_flow == pytest.approx(sum(abs(t.flow) for t in plas.tubes.values()))
        assert m.total_flow > 0.0

    def test_avg_thickness(self, small_network, config):
        m = compute_metrics(small_network)
        assert m.avg_thickness == pytest.approx(config.seed_thickness)

    def test_as_dict(self, small_network):
        d = compute_metrics(small_network).as_dict()
        assert set(d) == {
            "tube_count", "node_count", "active_node_count", "total_flow",
            "avg_thickness", "network_efficiency", "avg_gradient",
        }


class TestEfficiency:
    """Tests for network_efficiency."""

    def test_no_tubes(self):
        assert network_efficiency(1.0, 0) == 0.0

    def test_monotone_in_flow(self):
        values = [network_efficiency(q, 4) for q in np.linspace(0.0, 10.0, 50)]
        assert all(b >= a for a, b in zip(values, values[1:]))

    def test_bounded(self):
        assert network_efficiency(1e6, 1) == 1.0
        assert network_efficiency(0.0, 3) == 0.0

    def test_normalization(self):
        cfg = EngineConfig(flow_gain=2.0, min_resistance=1.0)
        assert max_tube_flow(cfg) == 2.0
        assert network_efficiency(1.0, 1, cfg) == pytest.approx(0.5)

    def test_metrics_efficiency_in_range(self, hotspot_network):
        plas = hotspot_network
        for _ in range(50):
            plas = step(plas)
            assert 0.0 <= compute_metrics(plas).network_efficiency <= 1.0


class TestRobustness:
    """compute_metrics never raises."""

    def test_dangling_tube_ignored(self, small_network):
        ghost = make_tube("node-0", "ghost", 0.1)
        plas = replace(small_network, tubes={**small_network.tubes, ghost.id: ghost})
        m = compute_metrics(plas)
        assert m.tube_count == small_network.tube_count

    def test_non_finite_flow(self, small_network):
        tid = next(iter(small_network.tubes))
        tubes = dict(small_network.tubes)
        tubes[tid] = replace(tubes[tid], flow=float("nan"))
        m = compute_metrics(replace(small_network, tubes=tubes))
        assert np.isfinite(m.total_flow)
        assert np.isfinite(m.network_efficiency)


class TestHistoryArrays:
    """Tests for metrics_history_arrays."""

    def test_arrays(self, small_network):
        history = [compute_metrics(small_network)] * 3
        arrays = metrics_history_arrays(history)
        assert arrays["tube_count"].shape == (3,)
        assert np.all(arrays["node_count"] == 7)

    def test_empty(self):
        arrays = metrics_history_arrays([])
        assert arrays["total_flow"].size == 0
