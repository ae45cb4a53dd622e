"""
Demo: Compare All Scenarios Side by Side.

Runs every scenario from the same seeded starting network and prints the
resulting tube count, total flow and efficiency, then plots each history.
"""

import logging
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

from physarum.analysis import metrics_history_arrays
from physarum.experiments import Simulation
from physarum.scenarios import SCENARIOS


def main():
    """Run every scenario and compare."""
    logging.basicConfig(level=logging.WARNING, format="%(name)s: %(message)s")

    print("=" * 60)
    print("Scenario Comparison")
    print("=" * 60)

    n_ticks = 600
    results = {}
    for scenario in SCENARIOS:
        sim = Simulation.create(10, 0.5, scenario=scenario, rng=np.random.default_rng(7))
        stats = sim.run(n_ticks)
        results[scenario] = sim
        print(f"\n{scenario}:")
        print(f"   Tubes:          {stats['tube_count']}")
        print(f"   Active nodes:   {stats['active_node_count']}")
        print(f"   Total flow:     {stats['total_flow']:.4f}")
        print(f"   Max total flow: {stats['max_total_flow']:.4f}")

    fig, axes = plt.subplots(1, 2, figsize=(12, 4))
    for scenario, sim in results.items():
        arrays = metrics_history_arrays(sim.history)
        times = np.arange(1, len(sim.history) + 1) * sim.config.dt
        axes[0].plot(times, arrays["tube_count"], label=scenario)
        axes[1].plot(times, arrays["total_flow"], label=scenario)
    axes[0].set_title("Tubes")
    axes[1].set_title("Total flow")
    for ax in axes:
        ax.set_xlabel("Simulated time (s)")
        ax.grid(True, alpha=0.3)
        ax.legend()
    fig.tight_layout()

    output_dir = Path(__file__).parent.parent / "output"
    output_dir.mkdir(exist_ok=True)
    fig.savefig(output_dir / "scenario_comparison.png", dpi=150)
    print(f"\nPlot saved to {output_dir / 'scenario_comparison.png'}")


if __name__ == "__main__":
    main()
