"""
Network metrics: summary statistics of a snapshot.

Read-only. compute_metrics() never raises on a snapshot: an empty network,
a network without tubes, or one with every node offline all give
well-defined values.

Network efficiency is the mean absolute flow per tube, normalized by the
largest flow any single tube can carry (|Δp| = 1 through a tube so thick
that only the resistance floor remains):

    efficiency = clip( (Σ|Q| / n_tubes) / (gain / R_min), 0, 1 )

It grows monotonically with flow and is 0 when there are no tubes.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

import numpy as np

from physarum.core.engine import check_invariants
from physarum.core.gradient import combine_gradient
from physarum.core.network import DEFAULT_CONFIG, EngineConfig, Plasmodium


@dataclass(frozen=True)
class NetworkMetrics:
    """Summary of a plasmodium snapshot."""

    tube_count: int = 0
    node_count: int = 0
    active_node_count: int = 0
    total_flow: float = 0.0  # Σ |flow|
    avg_thickness: float = 0.0
    network_efficiency: float = 0.0  # [0, 1]
    avg_gradient: float = 0.0  # Mean combined gradient of active nodes

    def as_dict(self) -> dict:
        return asdict(self)


def max_tube_flow(config: EngineConfig = DEFAULT_CONFIG) -> float:
    """Largest flow a single tube can carry."""
    return config.flow_gain / config.min_resistance


def network_efficiency(
    total_flow: float,
    tube_count: int,
    config: EngineConfig = DEFAULT_CONFIG,
) -> float:
    """Mean flow per tube relative to the theoretical maximum, in [0, 1]."""
    if tube_count <= 0:
        return 0.0
    ceiling = max_tube_flow(config)
    if not ceiling > 0:
        return 0.0
    return float(np.clip(total_flow / tube_count / ceiling, 0.0, 1.0))


def compute_metrics(plasmodium: Plasmodium, config: EngineConfig | None = None) -> NetworkMetrics:
    """
    Compute summary metrics for a snapshot.

    The snapshot goes through the same invariant guard as step(), so
    dangling tubes and non-finite values are repaired (and logged) rather
    than propagated.

    Raises:
        ConfigurationError: if config fails validation
    """
    cfg = config if config is not None else DEFAULT_CONFIG
    cfg.validate()
    plas = check_invariants(plasmodium, cfg, context="metrics")

    flows = np.array([t.flow for t in plas.tubes.values()], dtype=np.float64)
    thickness = np.array([t.thickness for t in plas.tubes.values()], dtype=np.float64)

    tube_count = plas.tube_count
    total_flow = float(np.abs(flows).sum()) if flows.size else 0.0
    avg_thickness = float(thickness.mean()) if thickness.size else 0.0

    active = plas.active_nodes()
    avg_gradient = (
        float(np.mean([combine_gradient(n.gradient) for n in active]))
        if active else 0.0
    )

    return NetworkMetrics(
        tube_count=tube_count,
        node_count=plas.node_count,
        active_node_count=len(active),
        total_flow=total_flow,
        avg_thickness=avg_thickness,
        network_efficiency=network_efficiency(total_flow, tube_count, cfg),
        avg_gradient=avg_gradient,
    )


def metrics_history_arrays(history: list[NetworkMetrics]) -> dict[str, np.ndarray]:
    """Turn a list of metrics into one array per field."""
    if not history:
        return {name: np.zeros(0) for name in NetworkMetrics.__dataclass_fields__}
    return {
        name: np.array([getattr(m, name) for m in history], dtype=np.float64)
        for name in NetworkMetrics.__dataclass_fields__
    }
