"""Paramètres utilisateur (persistés en JSON).

Le chemin est configurable via SMARTGG_SETTINGS_PATH.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from typing import Any

from smartgg.config import (
    DEFAULT_TIME_WINDOW,
    DEFAULT_TIMEOUT_SECONDS,
    FETCH_LIMITS,
    TimeWindow,
    get_api_base_url,
    get_repo_root,
)

logger = logging.getLogger(__name__)


def get_settings_path() -> str:
    override = os.environ.get("SMARTGG_SETTINGS_PATH")
    if override and str(override).strip():
        return str(override).strip()
    return os.path.join(get_repo_root(), "app_settings.json")


@dataclass
class AppSettings:
    # Backend
    api_base_url: str = ""  # vide = SMARTGG_API_BASE_URL / défaut
    request_timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS

    # Dashboard
    default_time_window: str = DEFAULT_TIME_WINDOW.value
    dashboard_match_count: int = FETCH_LIMITS.dashboard_match_count

    # Diagnostic
    debug: bool = False

    def resolved_api_base_url(self) -> str:
        return (self.api_base_url.strip() or get_api_base_url()).rstrip("/")

    @property
    def time_window(self) -> TimeWindow:
        return TimeWindow.parse(self.default_time_window)


def _coerce_bool(v: Any, default: bool) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        s = v.strip().lower()
        if s in {"1", "true", "yes", "y", "on"}:
            return True
        if s in {"0", "false", "no", "n", "off"}:
            return False
    return default


def _coerce_int(v: Any, default: int) -> int:
    if v is None or isinstance(v, bool):
        return default
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def load_settings(path: str | None = None) -> AppSettings:
    """Charge les paramètres ; valeurs par défaut si le fichier est absent ou illisible."""
    path = path or get_settings_path()
    if not os.path.exists(path):
        return AppSettings()
    try:
        with open(path, "r", encoding="utf-8") as f:
            obj = json.load(f) or {}
    except (OSError, ValueError) as e:
        logger.warning("Paramètres illisibles (%s): %s", path, e)
        return AppSettings()

    if not isinstance(obj, dict):
        return AppSettings()

    s = AppSettings()
    s.api_base_url = str(obj.get("api_base_url") or "").strip()
    s.request_timeout_seconds = max(1, _coerce_int(obj.get("request_timeout_seconds"), s.request_timeout_seconds))
    s.default_time_window = TimeWindow.parse(obj.get("default_time_window") or s.default_time_window).value
    s.dashboard_match_count = max(1, _coerce_int(obj.get("dashboard_match_count"), s.dashboard_match_count))
    s.debug = _coerce_bool(obj.get("debug"), s.debug)
    return s


def save_settings(settings: AppSettings, path: str | None = None) -> tuple[bool, str]:
    path = path or get_settings_path()
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(asdict(settings), f, ensure_ascii=False, indent=2)
        return True, ""
    except OSError as e:
        return False, f"Impossible d'écrire {path}: {e}"
