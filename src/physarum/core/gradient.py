"""
Resource gradients: the per-node signal that drives the network.

A gradient holds three normalized availability signals (compute, storage,
bandwidth) plus the simulated time they were last written. Everything the
engine does with a node's resources goes through combine_gradient():

    combined = 0.4·compute + 0.3·storage + 0.3·bandwidth

Rich nodes have LOW pressure (they are sources), poor nodes HIGH pressure.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

# Weights of the combined gradient (sum to 1, so combined stays in [0, 1])
COMPUTE_WEIGHT = 0.4
STORAGE_WEIGHT = 0.3
BANDWIDTH_WEIGHT = 0.3


@dataclass(frozen=True)
class ResourceGradient:
    """Normalized resource availability at a node."""

    compute: float    # Available execution slots, [0, 1]
    storage: float    # Available storage capacity, [0, 1]
    bandwidth: float  # Network throughput, [0, 1]
    freshness: float = 0.0  # Simulated time of the last write (seconds)

    @classmethod
    def uniform(cls, value: float, freshness: float = 0.0) -> ResourceGradient:
        """Gradient with every component set to the same value."""
        return cls(value, value, value, freshness)

    def components(self) -> tuple[float, float, float]:
        return self.compute, self.storage, self.bandwidth


def combine_gradient(gradient: ResourceGradient) -> float:
    """Collapse a gradient into one scalar resource level in [0, 1]."""
    return (
        gradient.compute * COMPUTE_WEIGHT
        + gradient.storage * STORAGE_WEIGHT
        + gradient.bandwidth * BANDWIDTH_WEIGHT
    )


def node_pressure(gradient: ResourceGradient) -> float:
    """Pressure driving flow: 1 - combined (high resources = low pressure)."""
    return 1.0 - combine_gradient(gradient)


def gradient_reliability(gradient: ResourceGradient, now: float, tau: float = 30.0) -> float:
    """
    Trust in a gradient given its age.

    reliability = exp(-(now - freshness) / τ), so 1.0 for a fresh write.
    """
    age = max(0.0, now - gradient.freshness)
    return math.exp(-age / tau)


def decay_gradient(
    gradient: ResourceGradient,
    dt: float,
    tau: float,
    baseline: float = 0.5,
) -> ResourceGradient:
    """
    Relax every component toward baseline with time constant τ.

    Exact exponential update: g ← g + (baseline - g)·(1 - e^(-dt/τ)).
    Freshness is left alone; decay is not a fresh measurement.
    """
    alpha = 1.0 - math.exp(-dt / tau)
    return replace(
        gradient,
        compute=gradient.compute + (baseline - gradient.compute) * alpha,
        storage=gradient.storage + (baseline - gradient.storage) * alpha,
        bandwidth=gradient.bandwidth + (baseline - gradient.bandwidth) * alpha,
    )


def _clamp_component(value: float, fallback: float) -> float:
    if not math.isfinite(value):
        return fallback
    return min(1.0, max(0.0, value))


def clamp_gradient(gradient: ResourceGradient, fallback: float = 0.5) -> ResourceGradient:
    """Force every component into [0, 1]; non-finite values become fallback."""
    return replace(
        gradient,
        compute=_clamp_component(gradient.compute, fallback),
        storage=_clamp_component(gradient.storage, fallback),
        bandwidth=_clamp_component(gradient.bandwidth, fallback),
    )


def is_valid_gradient(gradient: ResourceGradient) -> bool:
    """True if every component is finite and inside [0, 1]."""
    return all(
        math.isfinite(c) and 0.0 <= c <= 1.0
        for c in gradient.components()
    )
