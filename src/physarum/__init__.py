"""
physarum: adaptive transport-network simulation engine

A Physarum polycephalum-style network whose tubes thicken, thin, grow and
prune in response to per-node resource gradients.

Core concepts:
- Resource differences between nodes drive flow through tubes
- Flow scales with thickness⁴ (Hagen-Poiseuille analogy)
- Thickness relaxes toward |flow|^(1/3) (Murray's law)
- Unused tubes fade and are pruned; rich nodes grow new ones
- Every operation maps one snapshot to a new snapshot
"""

__version__ = "0.1.0"
