"""
Time-series plots of network metrics.

Draws the history recorded by a Simulation (or any list of NetworkMetrics):
tube count, total flow, efficiency and mean gradient against simulated time.
Drawing the network itself is left to the rendering layer.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.axes import Axes

from physarum.analysis.metrics import metrics_history_arrays

if TYPE_CHECKING:
    from physarum.analysis.metrics import NetworkMetrics


# Colors for the resource palette
COLOR_FLOW = "#ffd700"       # Living gold
COLOR_TUBES = "#00ff88"      # Mycelium green
COLOR_GRADIENT = "#a855f7"   # Bandwidth purple
COLOR_EFFICIENCY = "#4ecdc4"  # Storage cyan


def plot_metric(
    times: np.ndarray,
    values: np.ndarray,
    title: str = "",
    ylabel: str = "",
    color: str = COLOR_FLOW,
    ax: Axes | None = None,
    figsize: tuple[float, float] = (8, 4),
) -> tuple[Figure, Axes]:
    """
    Plot one metric against time.

    Returns:
        (fig, ax) tuple
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    ax.plot(times, values, color=color, linewidth=2)
    ax.set_xlabel("Simulated time (s)")
    ax.set_ylabel(ylabel)
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    return fig, ax


def plot_metrics_history(
    history: Sequence["NetworkMetrics"],
    dt: float = 0.016,
    title: str = "Network Metrics",
    figsize: tuple[float, float] = (12, 8),
) -> Figure:
    """
    Four-panel summary of a metrics history.

    Args:
        history: Metrics recorded once per tick
        dt: Tick duration, used for the time axis
        title: Overall title

    Returns:
        Figure
    """
    arrays = metrics_history_arrays(list(history))
    times = np.arange(1, len(history) + 1) * dt

    fig, axes = plt.subplots(2, 2, figsize=figsize, sharex=True)

    plot_metric(times, arrays["tube_count"], "Tubes", "count",
                color=COLOR_TUBES, ax=axes[0, 0])
    plot_metric(times, arrays["total_flow"], "Total flow", "Σ|Q|",
                color=COLOR_FLOW, ax=axes[0, 1])
    plot_metric(times, arrays["network_efficiency"], "Efficiency", "fraction",
                color=COLOR_EFFICIENCY, ax=axes[1, 0])
    plot_metric(times, arrays["avg_gradient"], "Mean gradient (active)", "level",
                color=COLOR_GRADIENT, ax=axes[1, 1])

    axes[1, 0].set_ylim(0.0, max(1e-3, float(arrays["network_efficiency"].max(initial=0.0)) * 1.1))
    axes[1, 1].set_ylim(0.0, 1.0)

    fig.suptitle(title, fontsize=14)
    fig.tight_layout()
    return fig


def save_figure(fig: Figure, path: str | Path, dpi: int = 150, **kwargs) -> None:
    """Save figure to file."""
    fig.savefig(path, dpi=dpi, bbox_inches="tight", **kwargs)
