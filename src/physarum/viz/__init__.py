"""
Visualization utilities.

- Metric time series (tube count, flow, efficiency, gradient)
"""

from physarum.viz.metrics import plot_metric, plot_metrics_history, save_figure

__all__ = [
    "plot_metric",
    "plot_metrics_history",
    "save_figure",
]
