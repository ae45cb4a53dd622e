"""
Topology initializer: nodes on a sphere plus a sparse seed tube set.

Layout is deterministic (Fibonacci sphere). Seeding is
nearest-neighbour-to-target-degree: with connectivity c and n nodes, each
node (in id order) links to its nearest not-yet-connected nodes until it
has k = max(1, round(c·(n-1))) tubes (k = 0 when c = 0). Nearby nodes are
therefore always the first to be joined.

The only randomness is the display-only pulse phase, drawn from an explicit
numpy Generator.
"""

from __future__ import annotations

import logging
import math
from numbers import Integral

import numpy as np

from physarum.core.geometry import fibonacci_sphere, pairwise_distances
from physarum.core.gradient import ResourceGradient
from physarum.core.network import (
    DEFAULT_CONFIG,
    ConfigurationError,
    EngineConfig,
    Node,
    Plasmodium,
    Tube,
    make_tube,
)

logger = logging.getLogger(__name__)

NODE_LABELS = (
    "Alpha", "Beta", "Gamma", "Delta", "Epsilon",
    "Zeta", "Eta", "Theta", "Iota", "Kappa",
    "Lambda", "Mu", "Nu", "Xi", "Omicron",
)

CYTOPLASM_PER_NODE = 10.0


def node_label(i: int) -> str:
    """Display label for the i-th node."""
    if i < len(NODE_LABELS):
        return NODE_LABELS[i]
    return f"Node-{i}"


def seed_degree(node_count: int, connectivity: float) -> int:
    """Target degree of the seed topology."""
    if connectivity <= 0.0 or node_count < 2:
        return 0
    return max(1, int(round(connectivity * (node_count - 1))))


def _validate_arguments(node_count, initial_connectivity) -> None:
    if isinstance(node_count, bool) or not isinstance(node_count, Integral):
        raise ConfigurationError(f"node_count must be an integer, got {node_count!r}")
    if node_count <= 0:
        raise ConfigurationError(f"node_count must be positive, got {node_count}")
    try:
        c = float(initial_connectivity)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"initial_connectivity must be a number, got {initial_connectivity!r}"
        ) from None
    if not math.isfinite(c) or not 0.0 <= c <= 1.0:
        raise ConfigurationError(f"initial_connectivity must be in [0, 1], got {initial_connectivity}")


def seed_tubes(
    node_ids: list[str],
    positions: np.ndarray,
    connectivity: float,
    thickness: float,
) -> dict[str, Tube]:
    """
    Build the seed tube set.

    Args:
        node_ids: Node ids, in seeding order
        positions: Array [n, 3] aligned with node_ids
        connectivity: Fraction in [0, 1]
        thickness: Starting thickness of every seeded tube

    Returns:
        Dict tube id → Tube
    """
    n = len(node_ids)
    k = seed_degree(n, connectivity)
    tubes: dict[str, Tube] = {}
    if k == 0:
        return tubes

    dist = pairwise_distances(positions)
    degree = np.zeros(n, dtype=np.int64)
    linked = np.eye(n, dtype=bool)

    for i in range(n):
        # Stable sort keeps ties in id order
        for j in np.argsort(dist[i], kind="stable"):
            if degree[i] >= k:
                break
            if linked[i, j]:
                continue
            tube = make_tube(node_ids[i], node_ids[j], thickness)
            tubes[tube.id] = tube
            linked[i, j] = linked[j, i] = True
            degree[i] += 1
            degree[j] += 1

    return tubes


def initialize(
    node_count: int,
    initial_connectivity: float = 0.5,
    config: EngineConfig | None = None,
    rng: np.random.Generator | None = None,
) -> Plasmodium:
    """
    Create a fresh plasmodium.

    Args:
        node_count: Number of nodes (> 0)
        initial_connectivity: Seed density in [0, 1]; out-of-range is rejected
        config: Engine constants (defaults if None)
        rng: Random source for pulse phases (fresh default_rng if None)

    Returns:
        Snapshot with time = 0

    Raises:
        ConfigurationError: on invalid node_count or connectivity
    """
    _validate_arguments(node_count, initial_connectivity)
    cfg = config if config is not None else DEFAULT_CONFIG
    cfg.validate()
    if rng is None:
        rng = np.random.default_rng()

    positions = fibonacci_sphere(node_count, cfg.layout_radius)
    phases = rng.uniform(0.0, 2.0 * np.pi, size=node_count)
    neutral = ResourceGradient.uniform(cfg.neutral_gradient, freshness=0.0)

    nodes: dict[str, Node] = {}
    for i in range(node_count):
        node = Node(
            id=f"node-{i}",
            position=tuple(float(v) for v in positions[i]),
            gradient=neutral,
            label=node_label(i),
            is_active=True,
            pulse_phase=float(phases[i]),
        )
        nodes[node.id] = node

    tubes = seed_tubes(
        list(nodes),
        positions,
        float(initial_connectivity),
        cfg.seed_thickness,
    )

    logger.debug(
        "initialized %d nodes, %d seed tubes (connectivity=%.2f)",
        node_count, len(tubes), float(initial_connectivity),
    )

    return Plasmodium(
        nodes=nodes,
        tubes=tubes,
        cytoplasm=node_count * CYTOPLASM_PER_NODE,
        time=0.0,
        migration_phase=0.0,
    )
