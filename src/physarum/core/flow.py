"""
Flow solver and Murray's-law thickness adaptation.

Flow (Hagen-Poiseuille analogy):
    Δp   = pressure(source) - pressure(sink),   pressure = 1 - combined
    R(t) = R_min + k / t⁴                       (wide tubes resist less)
    Q    = gain · Δp / R(t)

R_min is the resistance floor: Q stays bounded for thick tubes, and the
thickness is floored at a tiny epsilon so t = 0 gives a huge (finite) R
rather than a division by zero.

Adaptation (Murray's law):
    t* = scale · |Q|^(1/3)
    t  ← t + (t* - t)·(1 - e^(-rate·dt)),  clamped to t ≥ 0

With the saturating resistance the dynamics are bistable: a tube thicker
than k / (|Δp|·scale³) is reinforced toward scale·(gain·|Δp|)^(1/3), a
thinner or undriven one fades toward zero and is eventually pruned.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from physarum.core.gradient import node_pressure

if TYPE_CHECKING:
    from physarum.core.network import EngineConfig, Plasmodium

# Thickness floor inside the resistance term
THICKNESS_EPSILON = 1e-6


def resistance(
    thickness: np.ndarray | float,
    flow_resistance: float = 1e-4,
    min_resistance: float = 1.0,
) -> np.ndarray | float:
    """Tube resistance R = R_min + k / max(t, ε)⁴."""
    t = np.maximum(np.asarray(thickness, dtype=np.float64), THICKNESS_EPSILON)
    r = min_resistance + flow_resistance / t**4
    return float(r) if np.ndim(r) == 0 else r


def tube_flow(
    pressure_diff: np.ndarray | float,
    thickness: np.ndarray | float,
    config: "EngineConfig",
) -> np.ndarray | float:
    """Flow for given pressure differences and thicknesses."""
    r = resistance(thickness, config.flow_resistance, config.min_resistance)
    q = config.flow_gain * np.asarray(pressure_diff, dtype=np.float64) / r
    return float(q) if np.ndim(q) == 0 else q


def optimal_thickness(flow: np.ndarray | float, tube_scale: float = 0.5) -> np.ndarray | float:
    """Murray's law target: scale · |Q|^(1/3). Monotone in |Q|."""
    t = tube_scale * np.cbrt(np.abs(np.asarray(flow, dtype=np.float64)))
    return float(t) if np.ndim(t) == 0 else t


def relax_thickness(
    thickness: np.ndarray | float,
    target: np.ndarray | float,
    rate: float,
    dt: float,
) -> np.ndarray | float:
    """Exponential relaxation of thickness toward target, clamped at 0."""
    alpha = 1.0 - np.exp(-rate * dt)
    t = np.asarray(thickness, dtype=np.float64)
    out = np.maximum(0.0, t + (np.asarray(target, dtype=np.float64) - t) * alpha)
    return float(out) if np.ndim(out) == 0 else out


def compute_flows(plasmodium: "Plasmodium", config: "EngineConfig") -> dict[str, float]:
    """
    Flow through every tube of a snapshot.

    Tubes touching an inactive node, or whose endpoint is missing, carry 0.

    Returns:
        Dict tube id → signed flow (positive = source → sink)
    """
    tubes = list(plasmodium.tubes.values())
    if not tubes:
        return {}

    nodes = plasmodium.nodes
    n = len(tubes)
    dp = np.zeros(n, dtype=np.float64)
    thickness = np.zeros(n, dtype=np.float64)
    live = np.zeros(n, dtype=bool)

    for i, tube in enumerate(tubes):
        source = nodes.get(tube.source_id)
        sink = nodes.get(tube.sink_id)
        thickness[i] = tube.thickness
        if source is None or sink is None:
            continue
        if not (source.is_active and sink.is_active):
            continue
        dp[i] = node_pressure(source.gradient) - node_pressure(sink.gradient)
        live[i] = True

    q = np.where(live, tube_flow(dp, thickness, config), 0.0)
    return {tube.id: float(q[i]) for i, tube in enumerate(tubes)}


def adapt_thicknesses(
    thickness: np.ndarray,
    flow: np.ndarray,
    config: "EngineConfig",
) -> np.ndarray:
    """Vectorized adaptation step for aligned thickness/flow arrays."""
    target = optimal_thickness(flow, config.tube_scale)
    return relax_thickness(thickness, target, config.adapt_rate, config.dt)
