"""
Simulation driver: owns one live snapshot and steps it tick by tick.

This is the headless counterpart of an animation loop:

    sim = Simulation.create(7, 0.5, scenario="hotspot", rng=rng)
    stats = sim.run(100)

Per tick, the migration scenario's gradients are advanced first, then the
engine steps once, then metrics are recorded. The driver only rebinds its
snapshot reference, so snapshots handed out earlier remain valid.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from physarum.analysis.metrics import NetworkMetrics, compute_metrics
from physarum.core.engine import step
from physarum.core.network import EngineConfig, Plasmodium
from physarum.core.topology import initialize
from physarum.scenarios.migration import advance_migration
from physarum.scenarios.presets import Scenario, apply_scenario


@dataclass
class Simulation:
    """Stateful wrapper threading one plasmodium through successive ticks."""

    plasmodium: Plasmodium
    scenario: Scenario | None = None
    config: EngineConfig = field(default_factory=EngineConfig)
    rng: np.random.Generator = field(default_factory=np.random.default_rng)

    # Metrics recorded after every tick
    history: list[NetworkMetrics] = field(default_factory=list, init=False)
    current_tick: int = field(default=0, init=False)

    @classmethod
    def create(
        cls,
        node_count: int,
        initial_connectivity: float = 0.5,
        scenario: Scenario | None = None,
        config: EngineConfig | None = None,
        rng: np.random.Generator | None = None,
    ) -> Simulation:
        """Initialize a network and apply the starting scenario."""
        config = config if config is not None else EngineConfig()
        rng = rng if rng is not None else np.random.default_rng()
        sim = cls(
            plasmodium=initialize(node_count, initial_connectivity, config, rng),
            config=config,
            rng=rng,
        )
        if scenario is not None:
            sim.set_scenario(scenario)
        return sim

    def set_scenario(self, scenario: Scenario) -> None:
        """Switch scenario and apply it to the live snapshot."""
        self.plasmodium = apply_scenario(self.plasmodium, scenario, self.config, self.rng)
        self.scenario = scenario

    def reset(self, node_count: int, initial_connectivity: float = 0.5) -> None:
        """Replace the network with a fresh one, keeping the scenario."""
        self.plasmodium = initialize(node_count, initial_connectivity, self.config, self.rng)
        self.history.clear()
        self.current_tick = 0
        if self.scenario is not None:
            self.plasmodium = apply_scenario(
                self.plasmodium, self.scenario, self.config, self.rng
            )

    def metrics(self) -> NetworkMetrics:
        return compute_metrics(self.plasmodium, self.config)

    def tick(self) -> Plasmodium:
        """Advance one tick and return the new snapshot."""
        plas = self.plasmodium
        if self.scenario == "migration":
            plas = advance_migration(plas, self.config)
        plas = step(plas, self.config)

        self.plasmodium = plas
        self.current_tick += 1
        self.history.append(compute_metrics(plas, self.config))
        return plas

    def run(self, n_ticks: int) -> dict:
        """
        Run n ticks.

        Returns:
            Statistics dictionary
        """
        for _ in range(n_ticks):
            self.tick()

        recent = self.history[-n_ticks:] if n_ticks > 0 else []
        final = self.metrics()
        return {
            "n_ticks": n_ticks,
            "current_tick": self.current_tick,
            "time": self.plasmodium.time,
            "tube_count": final.tube_count,
            "active_node_count": final.active_node_count,
            "total_flow": final.total_flow,
            "max_total_flow": max((m.total_flow for m in recent), default=0.0),
            "mean_efficiency": (
                float(np.mean([m.network_efficiency for m in recent])) if recent else 0.0
            ),
        }
