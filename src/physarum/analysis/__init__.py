"""
Analysis layer: derived quantities for display and comparison.

IMPORTANT: This is NOT seen by the engine. One-way derivation only.
"""

from physarum.analysis.metrics import (
    NetworkMetrics,
    compute_metrics,
    network_efficiency,
    max_tube_flow,
    metrics_history_arrays,
)

__all__ = [
    "NetworkMetrics",
    "compute_metrics",
    "network_efficiency",
    "max_tube_flow",
    "metrics_history_arrays",
]
