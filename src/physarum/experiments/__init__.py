"""
Experiment harness: run a network under a scenario and record metrics.
"""

from physarum.experiments.simulation import Simulation

__all__ = ["Simulation"]
