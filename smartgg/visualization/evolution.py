"""Graphique de la série d'évolution (winrate / KDA par partie)."""

from __future__ import annotations

from typing import Sequence

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from smartgg.config import PLOT_CONFIG, SMART_COLORS
from smartgg.models import EvolutionPoint
from smartgg.visualization.theme import apply_smart_plot_style, get_legend_horizontal_top


def plot_evolution(points: Sequence[EvolutionPoint], title: str | None = None) -> go.Figure:
    """Winrate (axe principal, %) et KDA (axe secondaire) par partie.

    Args:
        points: Série ordonnée renvoyée par le backend.
        title: Titre optionnel.

    Returns:
        Figure Plotly (vide mais stylée si la série est vide).
    """
    fig = make_subplots(rows=1, cols=1, specs=[[{"secondary_y": True}]])
    pts = list(points or ())
    x = [p.game for p in pts]

    fig.add_trace(
        go.Scatter(
            x=x,
            y=[p.winrate for p in pts],
            name="Winrate",
            mode="lines+markers",
            line=dict(color=SMART_COLORS.neon_primary, width=PLOT_CONFIG.line_width),
            marker=dict(size=PLOT_CONFIG.marker_size),
            customdata=[p.date for p in pts],
            hovertemplate="Partida %{x}<br>%{y:.1f}%<br>%{customdata}<extra></extra>",
        ),
        secondary_y=False,
    )
    fig.add_trace(
        go.Scatter(
            x=x,
            y=[p.kda for p in pts],
            name="KDA",
            mode="lines",
            line=dict(color=SMART_COLORS.success, width=PLOT_CONFIG.line_width, dash="dot"),
            hovertemplate="Partida %{x}<br>KDA %{y:.2f}<extra></extra>",
        ),
        secondary_y=True,
    )

    fig.update_yaxes(title_text="Winrate (%)", range=[0, 100], secondary_y=False)
    fig.update_yaxes(title_text="KDA", rangemode="tozero", secondary_y=True)
    fig.update_xaxes(title_text="Partida")
    fig.update_layout(legend=get_legend_horizontal_top())
    return apply_smart_plot_style(fig, title=title)
