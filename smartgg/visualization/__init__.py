"""Module visualisation - graphiques Plotly du dashboard."""

from smartgg.visualization.evolution import plot_evolution
from smartgg.visualization.theme import apply_smart_plot_style

__all__ = ["plot_evolution", "apply_smart_plot_style"]
