"""Module UI - paramètres, formatage et tableaux pour l'interface Streamlit."""

from smartgg.ui.formatting import (
    format_damage,
    format_kda_line,
    format_time_ago,
    format_trend,
    metric_cards,
    tier_color,
)
from smartgg.ui.settings import AppSettings, get_settings_path, load_settings, save_settings
from smartgg.ui.tables import champions_frame, matches_frame

__all__ = [
    "AppSettings",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "format_time_ago",
    "format_trend",
    "format_damage",
    "format_kda_line",
    "tier_color",
    "metric_cards",
    "matches_frame",
    "champions_frame",
]
