"""Modèles de données (dataclasses) du projet.

Les payloads du backend sont en camelCase ; chaque modèle expose
`from_api()` (parsing tolérant) et `to_api()` (sérialisation inverse).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from smartgg.config import (
    DEFAULT_DISPLAY_LEVEL,
    DEFAULT_DISPLAY_NAME,
    DEFAULT_DISPLAY_TIER,
    DEFAULT_PROFILE_ICON_ID,
)


def _opt_str(v: Any) -> Optional[str]:
    s = str(v).strip() if v is not None else ""
    return s or None


def _opt_int(v: Any) -> Optional[int]:
    if v is None or isinstance(v, bool):
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


def _int(v: Any, default: int = 0) -> int:
    x = _opt_int(v)
    return default if x is None else x


def _float(v: Any, default: float = 0.0) -> float:
    if v is None or isinstance(v, bool):
        return default
    try:
        return float(v)
    except (TypeError, ValueError):
        return default


# =============================================================================
# Identité / authentification
# =============================================================================


@dataclass(frozen=True)
class Identity:
    """Joueur authentifié.

    `id` est la clé primaire immuable ; `puuid` est la clé utilisée pour
    toutes les requêtes de données. Les autres champs sont rafraîchis par
    remplacement complet de l'enregistrement.
    """

    id: int
    puuid: str
    email: str = ""
    game_name: str = ""
    tag_line: str = ""
    icon_id: Optional[int] = None
    level: Optional[str] = None
    tier: Optional[str] = None
    rank: Optional[str] = None
    league_points: Optional[int] = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Identity":
        """Construit une identité depuis le JSON du backend.

        Raises:
            ValueError: si `id` numérique ou `puuid` sont absents.
        """
        if not isinstance(data, Mapping):
            raise ValueError("Identité invalide: objet JSON attendu.")
        user_id = _opt_int(data.get("id"))
        puuid = _opt_str(data.get("puuid"))
        if user_id is None or puuid is None:
            raise ValueError("Identité invalide: 'id' et 'puuid' sont requis.")
        return cls(
            id=user_id,
            puuid=puuid,
            email=str(data.get("email") or ""),
            game_name=str(data.get("gameName") or ""),
            tag_line=str(data.get("tagLine") or ""),
            icon_id=_opt_int(data.get("iconId")),
            level=_opt_str(data.get("level")),
            tier=_opt_str(data.get("tier")),
            rank=_opt_str(data.get("rank")),
            league_points=_opt_int(data.get("leaguePoints")),
        )

    def to_api(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "gameName": self.game_name,
            "tagLine": self.tag_line,
            "puuid": self.puuid,
            "iconId": self.icon_id,
            "level": self.level,
            "tier": self.tier,
            "rank": self.rank,
            "leaguePoints": self.league_points,
        }

    # Projections d'affichage (valeurs par défaut du produit)

    @property
    def display_name(self) -> str:
        return self.game_name or DEFAULT_DISPLAY_NAME

    @property
    def display_tier(self) -> str:
        return self.tier or DEFAULT_DISPLAY_TIER

    @property
    def display_level(self) -> str:
        return self.level or DEFAULT_DISPLAY_LEVEL

    @property
    def display_icon_id(self) -> int:
        return self.icon_id or DEFAULT_PROFILE_ICON_ID

    @property
    def display_league_points(self) -> int:
        return self.league_points or 0

    @property
    def riot_id(self) -> str:
        """Nom complet `gameName#tagLine`."""
        if self.tag_line:
            return f"{self.display_name}#{self.tag_line}"
        return self.display_name


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str

    def to_api(self) -> dict[str, Any]:
        return {"email": self.email, "password": self.password}


@dataclass(frozen=True)
class RegistrationProfile:
    """Données d'inscription. Le '#' saisi dans le tag est retiré."""

    email: str
    password: str
    game_name: str
    tag_line: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "game_name", str(self.game_name or "").strip())
        object.__setattr__(self, "tag_line", str(self.tag_line or "").replace("#", "").strip())

    def to_api(self) -> dict[str, Any]:
        return {
            "email": self.email,
            "password": self.password,
            "gameName": self.game_name,
            "tagLine": self.tag_line,
        }


# =============================================================================
# Matchs
# =============================================================================


@dataclass(frozen=True)
class Match:
    """Résumé d'un match (liste la plus récente en premier)."""

    id: str
    champion: str
    champion_id: int
    role: str
    kills: int
    deaths: int
    assists: int
    kda: str
    result: str
    time: str = ""
    timestamp: int = 0
    damage: int = 0
    cs: int = 0
    cs_per_min: float = 0.0
    gold: int = 0
    duration: int = 0
    game_mode: str = ""

    @property
    def is_win(self) -> bool:
        return self.result == "win"

    @staticmethod
    def _fields_from_api(data: Mapping[str, Any]) -> dict[str, Any]:
        result = str(data.get("result") or "").strip().lower()
        return {
            "id": str(data.get("id") or ""),
            "champion": str(data.get("champion") or ""),
            "champion_id": _int(data.get("championId")),
            "role": str(data.get("role") or ""),
            "kills": _int(data.get("kills")),
            "deaths": _int(data.get("deaths")),
            "assists": _int(data.get("assists")),
            "kda": str(data.get("kda") or ""),
            "result": "win" if result == "win" else "lose",
            "time": str(data.get("time") or ""),
            "timestamp": _int(data.get("timestamp")),
            "damage": _int(data.get("damage")),
            "cs": _int(data.get("cs")),
            "cs_per_min": _float(data.get("csPerMin")),
            "gold": _int(data.get("gold")),
            "duration": _int(data.get("duration")),
            "game_mode": str(data.get("gameMode") or ""),
        }

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Match":
        return cls(**cls._fields_from_api(data))

    def to_api(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "champion": self.champion,
            "championId": self.champion_id,
            "role": self.role,
            "kills": self.kills,
            "deaths": self.deaths,
            "assists": self.assists,
            "kda": self.kda,
            "result": self.result,
            "time": self.time,
            "timestamp": self.timestamp,
            "damage": self.damage,
            "cs": self.cs,
            "csPerMin": self.cs_per_min,
            "gold": self.gold,
            "duration": self.duration,
            "gameMode": self.game_mode,
        }


@dataclass(frozen=True)
class MatchDetails(Match):
    """Match enrichi (écran de détail)."""

    items: tuple[int, ...] = ()
    primary_rune: Optional[int] = None
    secondary_rune: Optional[int] = None
    summoner_spells: tuple[int, ...] = ()
    vision_score: int = 0
    wards_placed: int = 0
    wards_killed: int = 0
    objectives_participation: float = 0.0

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "MatchDetails":
        runes = data.get("runes") if isinstance(data.get("runes"), Mapping) else {}
        return cls(
            **cls._fields_from_api(data),
            items=tuple(_int(i) for i in (data.get("items") or [])),
            primary_rune=_opt_int(runes.get("primary")),
            secondary_rune=_opt_int(runes.get("secondary")),
            summoner_spells=tuple(_int(s) for s in (data.get("summonerSpells") or [])),
            vision_score=_int(data.get("visionScore")),
            wards_placed=_int(data.get("wardsPlaced")),
            wards_killed=_int(data.get("wardsKilled")),
            objectives_participation=_float(data.get("objectivesParticipation")),
        )


# =============================================================================
# Statistiques
# =============================================================================


@dataclass(frozen=True)
class PlayerStats:
    """Statistiques résumées sur une fenêtre, avec tendances vs fenêtre précédente."""

    winrate: float = 0.0
    winrate_trend: float = 0.0
    kda: float = 0.0
    kda_trend: float = 0.0
    cs_per_min: float = 0.0
    cs_per_min_trend: float = 0.0
    avg_damage: float = 0.0
    avg_damage_trend: float = 0.0
    total_games: int = 0
    wins: int = 0
    losses: int = 0

    @classmethod
    def empty(cls) -> "PlayerStats":
        """Valeurs affichées tant que les statistiques ne sont pas chargées."""
        return cls()

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "PlayerStats":
        return cls(
            winrate=_float(data.get("winrate")),
            winrate_trend=_float(data.get("winrateTrend")),
            kda=_float(data.get("kda")),
            kda_trend=_float(data.get("kdaTrend")),
            cs_per_min=_float(data.get("csPerMin")),
            cs_per_min_trend=_float(data.get("csPerMinTrend")),
            avg_damage=_float(data.get("avgDamage")),
            avg_damage_trend=_float(data.get("avgDamageTrend")),
            total_games=_int(data.get("totalGames")),
            wins=_int(data.get("wins")),
            losses=_int(data.get("losses")),
        )

    def to_api(self) -> dict[str, Any]:
        return {
            "winrate": self.winrate,
            "winrateTrend": self.winrate_trend,
            "kda": self.kda,
            "kdaTrend": self.kda_trend,
            "csPerMin": self.cs_per_min,
            "csPerMinTrend": self.cs_per_min_trend,
            "avgDamage": self.avg_damage,
            "avgDamageTrend": self.avg_damage_trend,
            "totalGames": self.total_games,
            "wins": self.wins,
            "losses": self.losses,
        }


@dataclass(frozen=True)
class ChampionStats:
    """Agrégats par champion (historique complet)."""

    champion_id: int
    champion_name: str
    games: int = 0
    wins: int = 0
    winrate: float = 0.0
    kda: float = 0.0
    avg_cs: float = 0.0
    avg_damage: float = 0.0

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "ChampionStats":
        return cls(
            champion_id=_int(data.get("championId")),
            champion_name=str(data.get("championName") or ""),
            games=_int(data.get("games")),
            wins=_int(data.get("wins")),
            winrate=_float(data.get("winrate")),
            kda=_float(data.get("kda")),
            avg_cs=_float(data.get("avgCs")),
            avg_damage=_float(data.get("avgDamage")),
        )

    def to_api(self) -> dict[str, Any]:
        return {
            "championId": self.champion_id,
            "championName": self.champion_name,
            "games": self.games,
            "wins": self.wins,
            "winrate": self.winrate,
            "kda": self.kda,
            "avgCs": self.avg_cs,
            "avgDamage": self.avg_damage,
        }


@dataclass(frozen=True)
class EvolutionPoint:
    """Échantillon de la série d'évolution (index de match → winrate/KDA)."""

    game: int
    winrate: float
    kda: float
    date: str = ""

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "EvolutionPoint":
        return cls(
            game=_int(data.get("game")),
            winrate=_float(data.get("winrate")),
            kda=_float(data.get("kda")),
            date=str(data.get("date") or ""),
        )


# =============================================================================
# Assistant
# =============================================================================


@dataclass(frozen=True)
class Insight:
    """Valeur mise en avant sous une réponse de l'assistant."""

    label: str
    value: str
    color: str

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Insight":
        return cls(
            label=str(data.get("label") or ""),
            value=str(data.get("value") or ""),
            color=str(data.get("color") or ""),
        )


@dataclass(frozen=True)
class ChatMessage:
    id: str
    role: str  # "user" | "assistant"
    content: str
    timestamp: datetime
    insights: Optional[tuple[Insight, ...]] = None


@dataclass(frozen=True)
class PlayerContext:
    """Instantané du joueur envoyé avec chaque question à l'assistant."""

    stats: Optional[PlayerStats] = None
    recent_matches: tuple[Match, ...] = ()
    top_champions: tuple[ChampionStats, ...] = ()

    def to_api(self, current_champion: Optional[str] = None) -> dict[str, Any]:
        return {
            "stats": self.stats.to_api() if self.stats is not None else None,
            "recentMatches": [m.to_api() for m in self.recent_matches],
            "topChampions": [c.to_api() for c in self.top_champions],
            "currentChampion": current_champion,
        }


@dataclass(frozen=True)
class AssistantReply:
    response: str
    insights: Optional[tuple[Insight, ...]] = None
    is_game_related: bool = True

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "AssistantReply":
        """Parse la réponse du endpoint assistant.

        Raises:
            ValueError: si le champ `response` est absent.
        """
        if not isinstance(data, Mapping) or not isinstance(data.get("response"), str):
            raise ValueError("Réponse assistant invalide: champ 'response' manquant.")
        raw_insights = data.get("insights")
        insights = None
        if isinstance(raw_insights, list) and raw_insights:
            insights = tuple(Insight.from_api(i) for i in raw_insights if isinstance(i, Mapping))
        return cls(
            response=data["response"],
            insights=insights or None,
            is_game_related=bool(data.get("isGameRelated", True)),
        )


@dataclass
class AssistantRequest:
    """Payload envoyé à l'assistant distant."""

    message: str
    user_id: int
    puuid: str
    game_name: Optional[str] = None
    tier: Optional[str] = None
    rank: Optional[str] = None
    context: Optional[PlayerContext] = None
    current_champion: Optional[str] = None

    def to_api(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "userId": self.user_id,
            "puuid": self.puuid,
            "gameName": self.game_name,
            "tier": self.tier,
            "rank": self.rank,
            "playerContext": (
                self.context.to_api(self.current_champion) if self.context is not None else None
            ),
        }
