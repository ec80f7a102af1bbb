"""Thème et style des graphiques Plotly."""

from __future__ import annotations

import plotly.graph_objects as go

from smartgg.config import PLOT_CONFIG, SMART_COLORS


def apply_smart_plot_style(
    fig: go.Figure,
    *,
    title: str | None = None,
    height: int | None = None,
) -> go.Figure:
    """Applique le thème néon SmartGG aux graphiques Plotly.

    Args:
        fig: Figure Plotly à styliser.
        title: Titre optionnel à ajouter.
        height: Hauteur optionnelle en pixels (défaut: PLOT_CONFIG.default_height).

    Returns:
        La figure stylisée (modifiée in-place).
    """
    cfg = PLOT_CONFIG
    fig.update_layout(
        template="plotly_dark",
        paper_bgcolor=cfg.bg_color,
        plot_bgcolor=cfg.bg_color,
        font=dict(color=cfg.text_color, size=13),
        hoverlabel=dict(bgcolor=cfg.bg_color, bordercolor=SMART_COLORS.neon_primary),
        height=height or cfg.default_height,
        margin=dict(l=40, r=40, t=50 if title else 20, b=40),
    )
    if title is not None:
        fig.update_layout(title=title)

    fig.update_xaxes(showgrid=True, gridcolor=cfg.grid_color, zeroline=False)
    fig.update_yaxes(showgrid=True, gridcolor=cfg.grid_color, zeroline=False)
    return fig


def get_legend_horizontal_top() -> dict:
    """Retourne la configuration pour une légende horizontale en haut."""
    return dict(
        orientation="h",
        yanchor="bottom",
        y=1.02,
        xanchor="left",
        x=0,
    )
