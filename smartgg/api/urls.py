"""Construction d'URLs pour les assets du jeu (icônes, emblèmes, splash arts).

Data Dragon pour les icônes de profil, Community Dragon pour le reste.
"""

from __future__ import annotations

from smartgg.config import DEFAULT_PROFILE_ICON_ID

DDRAGON_VERSION = "14.23.1"
DDRAGON_BASE = f"https://ddragon.leagueoflegends.com/cdn/{DDRAGON_VERSION}"
CDRAGON_BASE = "https://raw.communitydragon.org/latest/plugins"
_CDRAGON_GAME_DATA = f"{CDRAGON_BASE}/rcp-be-lol-game-data/global/default/v1"


def profile_icon_url(icon_id: int | None) -> str:
    """URL de l'icône de profil (icône 29 si inconnue)."""
    try:
        icon = int(icon_id) if icon_id is not None else DEFAULT_PROFILE_ICON_ID
    except (TypeError, ValueError):
        icon = DEFAULT_PROFILE_ICON_ID
    if icon <= 0:
        icon = DEFAULT_PROFILE_ICON_ID
    return f"{DDRAGON_BASE}/img/profileicon/{icon}.png"


def rank_emblem_url(tier: str | None) -> str:
    """URL de l'emblème de rang. Chaîne vide si le tier est vide."""
    t = str(tier or "").strip().lower()
    if not t:
        return ""
    return (
        f"{CDRAGON_BASE}/rcp-fe-lol-static-assets/global/default/images/"
        f"ranked-emblem/emblem-{t}.png"
    )


def champion_icon_url(champion_id: int) -> str:
    return f"{_CDRAGON_GAME_DATA}/champion-icons/{int(champion_id)}.png"


def champion_splash_url(champion_id: int) -> str:
    cid = int(champion_id)
    return f"{_CDRAGON_GAME_DATA}/champion-splashes/{cid}/{cid}000.jpg"
