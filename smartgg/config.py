"""Configuration centralisée et constantes du projet."""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv


def get_repo_root(start_path: str | None = None) -> str:
    """Retourne le répertoire racine du repo.

    Objectif: éviter les chemins faux quand le CWD Streamlit n'est pas le repo,
    ou quand le script est lancé depuis un autre dossier.
    """

    def _as_dir(p: Path) -> Path:
        try:
            p = p.resolve()
        except OSError:
            pass
        return p.parent if p.is_file() else p

    def _looks_like_repo_root(p: Path) -> bool:
        return (p / "pyproject.toml").exists() and (p / "smartgg").is_dir()

    starts: list[Path] = []
    if start_path:
        starts.append(_as_dir(Path(start_path)))
    starts.append(_as_dir(Path(__file__)))

    for s in starts:
        for p in [s] + list(s.parents)[:8]:
            if _looks_like_repo_root(p):
                return str(p)

    # Fallback raisonnable: le parent du package.
    return str(Path(__file__).resolve().parent.parent)


def load_env_files(repo_root: str | None = None) -> None:
    """Charge `.env.local` puis `.env` à la racine du repo (si présents).

    Ne remplace jamais une variable déjà définie dans l'environnement.
    """
    root = Path(repo_root or get_repo_root())
    for name in (".env.local", ".env"):
        dotenv_path = root / name
        if dotenv_path.exists():
            load_dotenv(dotenv_path, override=False)


def env_flag(name: str, default: bool = False) -> bool:
    """Lit une variable d'environnement booléenne (1/true/yes/on)."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


# =============================================================================
# Backend
# =============================================================================

DEFAULT_API_BASE_URL = "http://localhost:8081"
DEFAULT_TIMEOUT_SECONDS = 12


def get_api_base_url() -> str:
    """URL du backend de statistiques (override via SMARTGG_API_BASE_URL)."""
    override = str(os.environ.get("SMARTGG_API_BASE_URL") or "").strip()
    return (override or DEFAULT_API_BASE_URL).rstrip("/")


# =============================================================================
# Chemins par défaut
# =============================================================================

# Clé unique sous laquelle l'identité du joueur est persistée.
SESSION_STORAGE_KEY = "smartgg_user"


def get_session_dir() -> str:
    """Répertoire du stockage persistant de session."""
    override = str(os.environ.get("SMARTGG_SESSION_DIR") or "").strip()
    if override:
        return override
    return os.path.join(get_repo_root(), "data", "session")


def get_log_dir() -> str:
    """Répertoire des fichiers de log."""
    override = str(os.environ.get("SMARTGG_LOG_DIR") or "").strip()
    if override:
        return override
    return os.path.join(get_repo_root(), "logs")


# =============================================================================
# Fenêtres temporelles
# =============================================================================


class TimeWindow(str, Enum):
    """Fenêtre temporelle sélectionnée dans le dashboard."""

    SHORT = "7D"
    MEDIUM = "30D"
    LONG = "90D"

    @property
    def days(self) -> int:
        return {"7D": 7, "30D": 30, "90D": 90}[self.value]

    @classmethod
    def parse(cls, value: "str | TimeWindow | None") -> "TimeWindow":
        """Convertit un label ('7D', '30d', ...) en TimeWindow (SHORT par défaut)."""
        if isinstance(value, TimeWindow):
            return value
        s = str(value or "").strip().upper()
        for w in cls:
            if w.value == s:
                return w
        return cls.SHORT


DEFAULT_TIME_WINDOW = TimeWindow.SHORT


# =============================================================================
# Volumes des requêtes
# =============================================================================

@dataclass(frozen=True)
class FetchLimits:
    """Tailles fixes des jeux de données demandés au backend."""
    dashboard_match_count: int = 8
    context_stats_days: int = 7
    context_match_count: int = 5
    context_top_champions: int = 3


FETCH_LIMITS = FetchLimits()


# =============================================================================
# Valeurs d'affichage par défaut (joueur sans données)
# =============================================================================

DEFAULT_DISPLAY_NAME = "Jogador"
DEFAULT_DISPLAY_TIER = "Unranked"
DEFAULT_DISPLAY_LEVEL = "1"
DEFAULT_PROFILE_ICON_ID = 29


# =============================================================================
# Palette de couleurs SmartGG
# =============================================================================

@dataclass(frozen=True)
class SmartColors:
    """Palette néon du produit."""
    neon_primary: str = "#00E6FF"
    success: str = "#3DE08A"
    danger: str = "#FF6B6B"
    warning: str = "#FFD93D"
    muted: str = "#8A94A6"


SMART_COLORS = SmartColors()


TIER_COLORS: Dict[str, str] = {
    "IRON": "#8B7355",
    "BRONZE": "#CD7F32",
    "SILVER": "#C0C0C0",
    "GOLD": "#FFD700",
    "PLATINUM": "#00CED1",
    "EMERALD": "#50C878",
    "DIAMOND": "#B9F2FF",
    "MASTER": "#9932CC",
    "GRANDMASTER": "#FF4500",
    "CHALLENGER": "#F0E68C",
}


# =============================================================================
# Configuration des graphiques
# =============================================================================

@dataclass
class PlotConfig:
    """Configuration par défaut des graphiques."""
    default_height: int = 360
    line_width: float = 2.2
    marker_size: int = 6
    bg_color: str = "rgb(14, 18, 28)"
    text_color: str = "#E6EDF3"
    grid_color: str = "rgba(255,255,255,0.07)"


PLOT_CONFIG = PlotConfig()
