"""
Migration: a resource peak that travels around the network.

The peak points along u(φ) = (cos φ, sin φ, 0). Each active node gets a
weight from how well its direction from the origin lines up with u:

    w_i = exp(κ · (n̂_i · u - 1))        (w = 1 on the peak, e^(-2κ) opposite)

For each gradient component a FIXED total mass (baseline × active nodes) is
shared out in proportion to w, bounded to [floor, ceiling] by water-filling:
nodes that would exceed the ceiling are pinned there and the excess goes to
the rest. Total mass is conserved whenever it fits inside the bounds.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace

import numpy as np

from physarum.core.geometry import normalize
from physarum.core.gradient import ResourceGradient
from physarum.core.network import DEFAULT_CONFIG, EngineConfig, Node, Plasmodium

logger = logging.getLogger(__name__)

# Phase offsets of the (compute, storage, bandwidth) peaks
COMPONENT_OFFSETS = (0.0, 0.6, -0.6)


def water_fill(weights: np.ndarray, total: float, floor: float, ceiling: float) -> np.ndarray:
    """
    Share `total` across entries proportionally to weights within bounds.

    Every entry starts at floor; the remaining mass is split by weight,
    with entries that would pass ceiling pinned there and their excess
    redistributed among the others.

    Args:
        weights: Non-negative weights, shape [n]
        total: Mass to distribute (clipped to [n·floor, n·ceiling])
        floor, ceiling: Per-entry bounds

    Returns:
        Array [n] with floor <= x <= ceiling and sum(x) == clipped total
    """
    w = np.clip(np.asarray(weights, dtype=np.float64), 0.0, None)
    n = len(w)
    if n == 0:
        return np.zeros(0, dtype=np.float64)

    total = min(max(total, n * floor), n * ceiling)
    out = np.full(n, floor, dtype=np.float64)
    free = np.ones(n, dtype=bool)
    remaining = total - n * floor

    for _ in range(n):
        if remaining <= 1e-12 or not free.any():
            break
        wf = np.where(free, w, 0.0)
        if wf.sum() <= 0.0:
            wf = free.astype(np.float64)
        share = remaining * wf / wf.sum()
        room = ceiling - out
        capped = free & (share >= room)
        if not capped.any():
            out += share
            remaining = 0.0
            break
        out[capped] = ceiling
        remaining -= float(room[capped].sum())
        free &= ~capped

    return out


def peak_weights(positions: np.ndarray, phase: float, sharpness: float) -> np.ndarray:
    """Alignment weights of node positions with the peak direction."""
    u = np.array([math.cos(phase), math.sin(phase), 0.0])
    dirs = np.array([normalize(tuple(p)) for p in positions]).reshape(-1, 3)
    return np.exp(sharpness * (dirs @ u - 1.0))


def migration_profile(
    plasmodium: Plasmodium,
    phase: float,
    config: EngineConfig = DEFAULT_CONFIG,
) -> dict[str, Node]:
    """
    Nodes with gradients set to the travelling-peak profile at `phase`.

    Inactive nodes are returned unchanged.
    """
    active = plasmodium.active_nodes()
    nodes = dict(plasmodium.nodes)
    if not active:
        return nodes

    positions = np.array([n.position for n in active], dtype=np.float64)
    total = config.neutral_gradient * len(active)

    values = [
        water_fill(
            peak_weights(positions, phase + offset, config.migration_sharpness),
            total,
            config.migration_floor,
            config.migration_ceiling,
        )
        for offset in COMPONENT_OFFSETS
    ]

    for i, node in enumerate(active):
        nodes[node.id] = replace(
            node,
            gradient=ResourceGradient(
                compute=float(values[0][i]),
                storage=float(values[1][i]),
                bandwidth=float(values[2][i]),
                freshness=plasmodium.time,
            ),
        )
    return nodes


def advance_migration(plasmodium: Plasmodium, config: EngineConfig | None = None) -> Plasmodium:
    """
    Move the migration peak forward by one tick.

    Call before step() while the migration scenario is running.
    """
    cfg = config if config is not None else DEFAULT_CONFIG
    cfg.validate()
    phase = (plasmodium.migration_phase + cfg.migration_speed * cfg.dt) % (2.0 * math.pi)
    nodes = migration_profile(plasmodium, phase, cfg)
    return replace(plasmodium, nodes=nodes, migration_phase=phase)
