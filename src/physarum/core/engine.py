"""
Adaptation step: one fixed-duration tick of the plasmodium.

Each call to step() applies, in order:
1. Invariant guard (repair dangling tubes, out-of-range values)
2. Flow through every tube (Hagen-Poiseuille analogy)
3. Thickness adaptation toward the Murray's-law target
4. Pruning of tubes that are thin AND past their grace period
5. Growth from resource-rich, under-connected nodes
6. Gradient decay toward the neutral baseline
7. Bookkeeping: time and tube ages advance by dt

The input snapshot is never modified. Pacing is the caller's business:
one call = exactly one tick of config.dt, whatever the wall clock says.

Pruning runs before growth within a tick, so an undriven tube that is
pruned can be regrown at once between the same pair. Tube ids are derived
from the endpoints, so the reborn tube may reuse the old id, with seed
thickness and zero age.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace

import numpy as np

from physarum.core.flow import adapt_thicknesses, compute_flows
from physarum.core.geometry import pairwise_distances
from physarum.core.gradient import (
    clamp_gradient,
    combine_gradient,
    decay_gradient,
    is_valid_gradient,
)
from physarum.core.network import (
    DEFAULT_CONFIG,
    EngineConfig,
    Node,
    Plasmodium,
    Tube,
    connected_pairs,
    degrees,
    make_tube,
    pair_key,
)

logger = logging.getLogger(__name__)

PULSE_RATE = 2.0  # rad/s, display only
TWO_PI = 2.0 * math.pi


def _finite_or(value: float, fallback: float) -> float:
    return value if math.isfinite(value) else fallback


def check_invariants(
    plasmodium: Plasmodium,
    config: EngineConfig = DEFAULT_CONFIG,
    context: str = "step",
) -> Plasmodium:
    """
    Detect and repair invariant violations.

    - Tubes referencing a missing node (or looping onto one node) are dropped
    - Duplicate tubes between the same pair keep the first one
    - Thickness is clamped into [0, max_thickness]; non-finite becomes 0
    - Non-finite flow becomes 0; negative or non-finite age becomes 0
    - Gradient components are clamped into [0, 1]; NaN becomes the baseline

    Every repair is logged as a warning. Returns the input unchanged when
    nothing needed fixing.
    """
    repairs: list[str] = []

    nodes = plasmodium.nodes
    fixed_nodes: dict[str, Node] | None = None
    for node_id, node in nodes.items():
        if not is_valid_gradient(node.gradient):
            if fixed_nodes is None:
                fixed_nodes = dict(nodes)
            fixed_nodes[node_id] = replace(
                node, gradient=clamp_gradient(node.gradient, config.neutral_gradient)
            )
            repairs.append(f"gradient of {node_id} out of [0, 1]")
    if fixed_nodes is not None:
        nodes = fixed_nodes

    tubes: dict[str, Tube] = {}
    seen: set[frozenset[str]] = set()
    tubes_changed = False
    for tid, tube in plasmodium.tubes.items():
        if tube.source_id not in nodes or tube.sink_id not in nodes:
            repairs.append(f"tube {tid} references a missing node")
            tubes_changed = True
            continue
        key = pair_key(tube.source_id, tube.sink_id)
        if tube.source_id == tube.sink_id or key in seen:
            repairs.append(f"tube {tid} is a self-loop or duplicate")
            tubes_changed = True
            continue
        seen.add(key)

        thickness = _finite_or(tube.thickness, 0.0)
        thickness = min(config.max_thickness, max(0.0, thickness))
        flow = _finite_or(tube.flow, 0.0)
        age = max(0.0, _finite_or(tube.age, 0.0))
        if (thickness, flow, age) != (tube.thickness, tube.flow, tube.age):
            repairs.append(f"tube {tid} has out-of-range values")
            tubes_changed = True
            tube = replace(tube, thickness=thickness, flow=flow, age=age)
        tubes[tid] = tube

    if not repairs:
        return plasmodium

    for message in repairs:
        logger.warning("invariant violation before %s: %s (repaired)", context, message)

    return replace(
        plasmodium,
        nodes=nodes,
        tubes=tubes if tubes_changed else plasmodium.tubes,
    )


def prune_tubes(tubes: dict[str, Tube], config: EngineConfig) -> dict[str, Tube]:
    """Drop tubes below the prune threshold that are past the grace period."""
    return {
        tid: tube
        for tid, tube in tubes.items()
        if not (tube.thickness < config.prune_threshold and tube.age > config.grace_period)
    }


def grow_tubes(
    nodes: dict[str, Node],
    tubes: dict[str, Tube],
    config: EngineConfig,
) -> dict[str, Tube]:
    """
    Grow at most one new tube per eligible node.

    A node is eligible if it is active, its combined gradient is at least
    growth_threshold and it has fewer than target_degree tubes. It links to
    the nearest active node it is not yet connected to (within
    growth_radius, if set).
    """
    active = [n for n in nodes.values() if n.is_active]
    if len(active) < 2:
        return tubes

    count = degrees(nodes, tubes)
    eligible = [
        i for i, node in enumerate(active)
        if combine_gradient(node.gradient) >= config.growth_threshold
        and count[node.id] < config.target_degree
    ]
    if not eligible:
        return tubes

    dist = pairwise_distances(np.array([n.position for n in active]))
    linked = connected_pairs(tubes)
    grown = dict(tubes)

    for i in eligible:
        node = active[i]
        # A neighbour's growth earlier in this pass may have filled this node
        if count[node.id] >= config.target_degree:
            continue
        for j in np.argsort(dist[i], kind="stable"):
            if j == i:
                continue
            if config.growth_radius is not None and dist[i, j] > config.growth_radius:
                break
            other = active[j]
            key = pair_key(node.id, other.id)
            if key in linked:
                continue
            tube = make_tube(node.id, other.id, config.seed_thickness)
            grown[tube.id] = tube
            linked.add(key)
            count[node.id] += 1
            count[other.id] += 1
            break

    return grown


def decay_gradients(nodes: dict[str, Node], config: EngineConfig) -> dict[str, Node]:
    """Relax every node's gradient toward the neutral baseline."""
    return {
        node_id: replace(
            node,
            gradient=decay_gradient(
                node.gradient, config.dt, config.decay_tau, config.neutral_gradient
            ),
        )
        for node_id, node in nodes.items()
    }


def step(plasmodium: Plasmodium, config: EngineConfig | None = None) -> Plasmodium:
    """
    Advance the plasmodium by one tick.

    Args:
        plasmodium: Current snapshot (left untouched)
        config: Engine constants (defaults if None)

    Returns:
        New snapshot, time advanced by config.dt

    Raises:
        ConfigurationError: if config fails validation
    """
    cfg = config if config is not None else DEFAULT_CONFIG
    cfg.validate()
    dt = cfg.dt

    plas = check_invariants(plasmodium, cfg, context="step")
    if not plas.nodes:
        return replace(plas, tubes={}, time=plas.time + dt)

    # Pulse phase (display only)
    nodes = {
        node_id: replace(node, pulse_phase=(node.pulse_phase + dt * PULSE_RATE) % TWO_PI)
        for node_id, node in plas.nodes.items()
    }

    # Flow + adaptation
    tube_list = list(plas.tubes.values())
    flows = compute_flows(plas, cfg)
    flow = np.array([flows[t.id] for t in tube_list], dtype=np.float64)
    thickness = np.array([t.thickness for t in tube_list], dtype=np.float64)
    adapted = adapt_thicknesses(thickness, flow, cfg)

    tubes = {
        t.id: replace(t, flow=float(flow[i]), thickness=float(adapted[i]))
        for i, t in enumerate(tube_list)
    }

    # Pruning, then growth into the freed capacity
    n_before = len(tubes)
    tubes = prune_tubes(tubes, cfg)
    n_pruned = n_before - len(tubes)
    tubes = grow_tubes(nodes, tubes, cfg)
    n_grown = len(tubes) - (n_before - n_pruned)
    if n_pruned or n_grown:
        logger.debug("t=%.3f: pruned %d, grew %d tubes", plas.time, n_pruned, n_grown)

    nodes = decay_gradients(nodes, cfg)

    # Bookkeeping
    tubes = {tid: replace(t, age=t.age + dt) for tid, t in tubes.items()}

    return replace(plas, nodes=nodes, tubes=tubes, time=plas.time + dt)
