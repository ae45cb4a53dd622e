"""
Core engine primitives.

This layer knows NOTHING about scenarios, metrics or rendering.
It only knows:
- Nodes with fixed positions and resource gradients
- Tubes with thickness, flow and age
- How one tick transforms a snapshot (flow, adaptation, pruning, growth,
  decay)

Public operations:
- initialize: build the starting network
- step: advance one tick
- combine_gradient, distance: primitives shared with the other layers
"""

from physarum.core.geometry import Point3, distance, lerp, normalize, fibonacci_sphere
from physarum.core.gradient import (
    ResourceGradient,
    combine_gradient,
    node_pressure,
    gradient_reliability,
)
from physarum.core.network import (
    ConfigurationError,
    EngineConfig,
    Node,
    Tube,
    Plasmodium,
)
from physarum.core.flow import compute_flows, optimal_thickness, resistance
from physarum.core.topology import initialize
from physarum.core.engine import step, check_invariants

__all__ = [
    "Point3",
    "distance",
    "lerp",
    "normalize",
    "fibonacci_sphere",
    "ResourceGradient",
    "combine_gradient",
    "node_pressure",
    "gradient_reliability",
    "ConfigurationError",
    "EngineConfig",
    "Node",
    "Tube",
    "Plasmodium",
    "compute_flows",
    "optimal_thickness",
    "resistance",
    "initialize",
    "step",
    "check_invariants",
]
