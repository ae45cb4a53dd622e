"""
Network state: nodes, tubes, and the plasmodium snapshot.

The snapshot is a VALUE. Every engine operation takes one snapshot and
returns a new one; nothing is mutated in place. Nodes and tubes are frozen
dataclasses, so successive snapshots can share unchanged records while an
older snapshot stays valid for inspection.

Tubes refer to their endpoints by node id, never by reference:
- removing a tube never invalidates another handle
- a tube whose endpoint id is missing is an invariant violation
"""

from __future__ import annotations

from dataclasses import dataclass, field

from physarum.core.geometry import Point3
from physarum.core.gradient import ResourceGradient


class ConfigurationError(ValueError):
    """Invalid engine arguments (node count, connectivity, scenario name)."""


@dataclass
class EngineConfig:
    """Tunable constants of the adaptation dynamics."""

    dt: float = 0.016  # Fixed tick duration in seconds (~60 Hz)

    # Murray's law: target thickness = tube_scale · |flow|^(1/3)
    tube_scale: float = 0.5
    adapt_rate: float = 2.0  # Thickness relaxation rate (1/s)

    # Pruning: thin AND old tubes are removed
    prune_threshold: float = 0.015
    seed_thickness: float = 0.03  # Start just above the prune threshold
    grace_period: float = 1.0  # Seconds a new tube is protected
    max_thickness: float = 1.0  # Upper bound enforced by the invariant guard

    # Hagen-Poiseuille analogy: R = min_resistance + flow_resistance / t⁴
    flow_gain: float = 1.0
    flow_resistance: float = 1e-4
    min_resistance: float = 1.0

    # Growth
    growth_threshold: float = 0.3  # Minimum combined gradient to grow
    target_degree: int = 4  # Nodes below this tube count try to grow
    growth_radius: float | None = None  # Reach limit (None = unlimited)

    # Gradient staleness
    decay_tau: float = 30.0  # Decay time constant (s)
    neutral_gradient: float = 0.5  # Baseline that gradients decay toward

    # Layout
    layout_radius: float = 4.0

    # Migration scenario
    migration_speed: float = 0.5  # Phase advance (rad/s)
    migration_sharpness: float = 2.0  # Peak concentration
    migration_floor: float = 0.1
    migration_ceiling: float = 0.9

    def max_murray_thickness(self) -> float:
        """Target thickness of a tube carrying the largest possible flow (|Δp| = 1)."""
        return self.tube_scale * (self.flow_gain / self.min_resistance) ** (1.0 / 3.0)

    def validate(self) -> None:
        """Raise ConfigurationError if any constant is out of range."""
        errors = []

        if not self.dt > 0:
            errors.append("dt must be positive")
        if self.adapt_rate < 0:
            errors.append("adapt_rate must be non-negative")
        if self.prune_threshold < 0:
            errors.append("prune_threshold must be non-negative")
        if self.seed_thickness <= self.prune_threshold:
            errors.append("seed_thickness must exceed prune_threshold")
        if self.grace_period < 0:
            errors.append("grace_period must be non-negative")
        if self.max_thickness < self.seed_thickness:
            errors.append("max_thickness must be >= seed_thickness")
        if self.tube_scale < 0 or self.flow_gain < 0:
            errors.append("tube_scale and flow_gain must be non-negative")
        if self.flow_resistance <= 0 or self.min_resistance <= 0:
            errors.append("flow_resistance and min_resistance must be positive")
        elif self.tube_scale >= 0 and self.flow_gain >= 0:
            # Adaptation must never push a tube past the guard's bound
            if self.max_murray_thickness() > self.max_thickness:
                errors.append(
                    f"max_thickness ({self.max_thickness}) is below the largest "
                    f"Murray target ({self.max_murray_thickness():.4g})"
                )
        if self.target_degree < 0:
            errors.append("target_degree must be non-negative")
        if not self.decay_tau > 0:
            errors.append("decay_tau must be positive")
        if not 0.0 <= self.neutral_gradient <= 1.0:
            errors.append("neutral_gradient must be in [0, 1]")
        if not 0.0 <= self.migration_floor <= self.migration_ceiling <= 1.0:
            errors.append("migration bounds must satisfy 0 <= floor <= ceiling <= 1")
        if not self.migration_floor <= self.neutral_gradient <= self.migration_ceiling:
            errors.append("neutral_gradient must lie inside the migration bounds")

        if errors:
            raise ConfigurationError("; ".join(errors))


DEFAULT_CONFIG = EngineConfig()


@dataclass(frozen=True)
class Node:
    """A fixed-position, resource-bearing participant."""

    id: str
    position: Point3
    gradient: ResourceGradient
    label: str
    is_active: bool = True
    pulse_phase: float = 0.0  # Display hint only


@dataclass(frozen=True)
class Tube:
    """A connector whose thickness encodes transport capacity."""

    id: str
    source_id: str
    sink_id: str
    thickness: float
    flow: float = 0.0
    age: float = 0.0

    def touches(self, node_id: str) -> bool:
        return node_id == self.source_id or node_id == self.sink_id

    def other_end(self, node_id: str) -> str:
        return self.sink_id if node_id == self.source_id else self.source_id


@dataclass(frozen=True)
class Plasmodium:
    """
    Snapshot of the whole network at one instant.

    Callers thread one snapshot through successive operations:

        plas = initialize(7, 0.5)
        plas = apply_scenario(plas, "hotspot")
        for _ in range(100):
            plas = step(plas)
    """

    nodes: dict[str, Node] = field(default_factory=dict)
    tubes: dict[str, Tube] = field(default_factory=dict)
    cytoplasm: float = 0.0  # Total "mass" in the network
    time: float = 0.0  # Elapsed simulated seconds
    migration_phase: float = 0.0  # Internal phase of the migration profile

    @classmethod
    def empty(cls) -> Plasmodium:
        """Zero-node snapshot (valid, every operation is a no-op on it)."""
        return cls()

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def tube_count(self) -> int:
        return len(self.tubes)

    def active_nodes(self) -> list[Node]:
        return [n for n in self.nodes.values() if n.is_active]

    def incident_tubes(self, node_id: str) -> list[Tube]:
        """Tubes with node_id at either end."""
        return [t for t in self.tubes.values() if t.touches(node_id)]


def tube_id(source_id: str, sink_id: str) -> str:
    """Canonical tube id for a directed (source, sink) pair."""
    return f"{source_id}->{sink_id}"


def pair_key(a: str, b: str) -> frozenset[str]:
    """Unordered pair key; at most one tube exists per key."""
    return frozenset((a, b))


def make_tube(source_id: str, sink_id: str, thickness: float) -> Tube:
    """New tube with zero flow and zero age."""
    return Tube(
        id=tube_id(source_id, sink_id),
        source_id=source_id,
        sink_id=sink_id,
        thickness=thickness,
    )


def connected_pairs(tubes: dict[str, Tube]) -> set[frozenset[str]]:
    """Set of unordered node pairs already joined by a tube."""
    return {pair_key(t.source_id, t.sink_id) for t in tubes.values()}


def degrees(nodes: dict[str, Node], tubes: dict[str, Tube]) -> dict[str, int]:
    """Tube count per node id (every node present, possibly 0)."""
    counts = {node_id: 0 for node_id in nodes}
    for tube in tubes.values():
        if tube.source_id in counts:
            counts[tube.source_id] += 1
        if tube.sink_id in counts:
            counts[tube.sink_id] += 1
    return counts
