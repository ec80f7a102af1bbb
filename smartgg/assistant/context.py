"""Cache du contexte joueur envoyé à l'assistant.

Le triplet (stats récentes, derniers matchs, top champions) est chargé une
seule fois par identité, même si plusieurs messages partent en parallèle.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from smartgg.config import FETCH_LIMITS, FetchLimits
from smartgg.models import PlayerContext

logger = logging.getLogger(__name__)


class AssistantContextCache:
    """Charge et mémorise le `PlayerContext` par clé d'identité.

    Args:
        client: Client backend (`get_player_stats`, `get_matches`, `get_champion_stats`).
        limits: Tailles des jeux de données demandés.
    """

    def __init__(self, client, *, limits: FetchLimits = FETCH_LIMITS) -> None:
        self._client = client
        self._limits = limits
        self._contexts: dict[str, PlayerContext] = {}
        # Tâches de chargement encore en cours (partagées entre appelants).
        self._pending: dict[str, asyncio.Task] = {}

    def get(self, identity_key: str) -> Optional[PlayerContext]:
        """Contexte déjà chargé (None sinon), sans appel réseau."""
        return self._contexts.get(identity_key)

    async def ensure_context(self, identity_key: str | None) -> PlayerContext:
        """Retourne le contexte, en le chargeant au premier appel pour cette clé."""
        if not identity_key:
            return PlayerContext()
        ctx = self._contexts.get(identity_key)
        if ctx is not None:
            return ctx

        task = self._pending.get(identity_key)
        if task is None or task.done():
            task = asyncio.get_running_loop().create_task(
                self._load(identity_key), name=f"smartgg-context-{identity_key}"
            )
            self._pending[identity_key] = task
        return await asyncio.shield(task)

    def clear(self, identity_key: str | None = None) -> None:
        """Oublie le contexte d'une identité (ou de toutes)."""
        if identity_key is None:
            self._contexts.clear()
            self._pending.clear()
        else:
            self._contexts.pop(identity_key, None)
            self._pending.pop(identity_key, None)

    async def _load(self, identity_key: str) -> PlayerContext:
        limits = self._limits
        stats, matches, champions = await asyncio.gather(
            self._client.get_player_stats(identity_key, limits.context_stats_days),
            self._client.get_matches(identity_key, limits.context_match_count),
            self._client.get_champion_stats(identity_key),
            return_exceptions=True,
        )
        for name, result in (("stats", stats), ("matches", matches), ("champions", champions)):
            if isinstance(result, BaseException):
                logger.error("Contexte assistant: chargement de '%s' en échec", name, exc_info=result)

        ctx = PlayerContext(
            stats=None if isinstance(stats, BaseException) else stats,
            recent_matches=() if isinstance(matches, BaseException) else tuple(matches or ()),
            top_champions=(
                () if isinstance(champions, BaseException)
                else tuple(list(champions or ())[: limits.context_top_champions])
            ),
        )
        self._contexts[identity_key] = ctx
        self._pending.pop(identity_key, None)
        return ctx
