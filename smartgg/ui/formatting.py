# -*- coding: utf-8 -*-
"""Fonctions de formatage pour l'interface utilisateur.

Ce module centralise les utilitaires de formatage :
- Temps relatif ("5m atrás")
- Tendances signées et valeurs des cartes de métriques
- Couleurs par palier de classement
"""
from __future__ import annotations

import time
from typing import Any

from smartgg.config import SMART_COLORS, TIER_COLORS
from smartgg.models import PlayerStats

__all__ = [
    "format_time_ago",
    "format_trend",
    "format_damage",
    "format_kda_line",
    "tier_color",
    "metric_cards",
]


def format_time_ago(timestamp_ms: int | float | None, now_ms: int | float | None = None) -> str:
    """Temps écoulé depuis `timestamp_ms` (epoch en millisecondes).

    Args:
        timestamp_ms: Instant du match.
        now_ms: Instant de référence (défaut: maintenant).

    Returns:
        "Agora", "5m atrás", "3h atrás" ou "2d atrás".
    """
    if timestamp_ms is None:
        return "-"
    now = time.time() * 1000 if now_ms is None else float(now_ms)
    diff = now - float(timestamp_ms)

    days = int(diff // 86_400_000)
    hours = int(diff // 3_600_000)
    minutes = int(diff // 60_000)
    if days > 0:
        return f"{days}d atrás"
    if hours > 0:
        return f"{hours}h atrás"
    if minutes > 0:
        return f"{minutes}m atrás"
    return "Agora"


def format_trend(value: float, *, suffix: str = "", digits: int = 1, scale: float = 1.0) -> str:
    """Tendance signée, ex: "+2.5%", "-0.3", "+1.2k"."""
    v = float(value or 0.0)
    sign = "+" if v >= 0 else ""
    return f"{sign}{v / scale:.{digits}f}{suffix}"


def format_damage(value: float) -> str:
    """Dégâts moyens, en milliers au-delà de 1000 ("12.3k")."""
    v = float(value or 0.0)
    if v >= 1000:
        return f"{v / 1000:.1f}k"
    return f"{v:.0f}"


def format_kda_line(kills: int, deaths: int, assists: int) -> str:
    return f"{int(kills)}/{int(deaths)}/{int(assists)}"


def tier_color(tier: str | None) -> str:
    """Couleur d'un palier (IRON…CHALLENGER), couleur atténuée sinon."""
    return TIER_COLORS.get(str(tier or "").strip().upper(), SMART_COLORS.muted)


def metric_cards(stats: PlayerStats | None) -> list[dict[str, Any]]:
    """Cartes de métriques du dashboard (stats vides si non chargées)."""
    s = stats if stats is not None else PlayerStats.empty()
    return [
        {
            "label": "Winrate",
            "value": f"{s.winrate:.1f}%",
            "trend": format_trend(s.winrate_trend, suffix="%"),
            "positive": s.winrate_trend >= 0,
            "color": SMART_COLORS.success,
        },
        {
            "label": "KDA",
            "value": f"{s.kda:.2f}",
            "trend": format_trend(s.kda_trend),
            "positive": s.kda_trend >= 0,
            "color": SMART_COLORS.neon_primary,
        },
        {
            "label": "CS/min",
            "value": f"{s.cs_per_min:.1f}",
            "trend": format_trend(s.cs_per_min_trend),
            "positive": s.cs_per_min_trend >= 0,
            "color": SMART_COLORS.warning,
        },
        {
            "label": "Dano Médio",
            "value": format_damage(s.avg_damage),
            "trend": format_trend(s.avg_damage_trend, suffix="k", scale=1000.0),
            "positive": s.avg_damage_trend >= 0,
            "color": SMART_COLORS.danger,
        },
    ]
