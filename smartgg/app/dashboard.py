"""Orchestration des données du dashboard.

Ce module gère :
- Le chargement initial des quatre jeux de données (une seule fois par identité)
- Le rechargement « fenêtré » (stats + évolution) quand la période change
- Le refresh manuel complet (resync serveur → rechargement → refresh identité)

Règles de cohérence :
- Les quatre requêtes du chargement initial partent en parallèle et sont
  commitées ensemble (un seul remplacement du cache).
- Une requête en échec laisse son champ inchangé ; les autres sont commitées.
- Chaque requête reçoit un jeton de génération à son lancement ; un résultat
  plus ancien que le dernier commité pour son champ est ignoré.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

from smartgg.app.guards import FieldGenerations, LatchState, LoadLatch
from smartgg.app.observable import Observable
from smartgg.config import DEFAULT_TIME_WINDOW, FETCH_LIMITS, TimeWindow
from smartgg.models import ChampionStats, EvolutionPoint, Match, PlayerStats

logger = logging.getLogger(__name__)

FULL_FIELDS = ("matches", "stats", "evolution", "champions")
WINDOW_FIELDS = ("stats", "evolution")


@dataclass(frozen=True)
class DashboardCache:
    """Instantané du cache (remplacé en bloc, jamais muté).

    Un champ à None signifie « pas encore chargé » (ou chargement en échec).
    """

    identity_key: Optional[str] = None
    window: TimeWindow = DEFAULT_TIME_WINDOW
    matches: Optional[tuple[Match, ...]] = None
    stats: Optional[PlayerStats] = None
    evolution: Optional[tuple[EvolutionPoint, ...]] = None
    champions: Optional[tuple[ChampionStats, ...]] = None
    # Fenêtre à laquelle correspondent les stats commitées.
    stats_window: Optional[TimeWindow] = None
    last_synced_matches: Optional[int] = None
    is_loading_matches: bool = False
    is_loading_stats: bool = False
    is_refreshing: bool = False


def _freeze(field: str, value: Any) -> Any:
    if field in ("matches", "evolution", "champions"):
        return tuple(value or ())
    return value


class DashboardOrchestrator:
    """Remplit et maintient le cache du dashboard avec un minimum d'appels réseau.

    Args:
        client: Client backend (`get_matches`, `get_player_stats`, `get_evolution`,
            `get_champion_stats`, `sync_matches`).
        session: `SessionStore` (pour `refresh_identity()` après un refresh manuel).
        window: Fenêtre temporelle initiale.
        match_count: Nombre de matchs affichés.
    """

    def __init__(
        self,
        client,
        session,
        *,
        window: TimeWindow | str = DEFAULT_TIME_WINDOW,
        match_count: int = FETCH_LIMITS.dashboard_match_count,
    ) -> None:
        self._client = client
        self._session = session
        self._match_count = int(match_count)
        self._latch = LoadLatch()
        self._gens = FieldGenerations()
        self._cache: Observable[DashboardCache] = Observable(
            DashboardCache(window=TimeWindow.parse(window))
        )
        self._requested_window: Optional[TimeWindow] = None
        self._loading_all = 0
        self._loading_window = 0
        self._refreshing = 0

    # ------------------------------------------------------------------
    # Lecture
    # ------------------------------------------------------------------

    @property
    def cache(self) -> DashboardCache:
        return self._cache.value

    @property
    def window(self) -> TimeWindow:
        return self._cache.value.window

    @property
    def is_refreshing(self) -> bool:
        return self._refreshing > 0

    def latch_state(self, identity_key: str) -> LatchState:
        return self._latch.state(identity_key)

    def subscribe(self, listener: Callable[[DashboardCache], None]) -> Callable[[], None]:
        return self._cache.subscribe(listener)

    # ------------------------------------------------------------------
    # Écriture interne
    # ------------------------------------------------------------------

    def _publish(self, **changes: Any) -> None:
        self._cache._set(
            replace(
                self.cache,
                **changes,
                is_loading_matches=self._loading_all > 0,
                is_loading_stats=(self._loading_all + self._loading_window) > 0,
                is_refreshing=self._refreshing > 0,
            )
        )

    def _bind_identity(self, identity_key: str) -> None:
        """Repart d'un cache vide si l'identité a changé."""
        if self.cache.identity_key != identity_key:
            self._cache._set(DashboardCache(identity_key=identity_key, window=self.window))
            self._requested_window = None

    def _commit(
        self,
        identity_key: str,
        fields: tuple[str, ...],
        results: list[Any],
        tokens: dict[str, int],
        window: TimeWindow,
    ) -> dict[str, Any]:
        """Commit atomique des résultats valides ; retourne les champs commités."""
        changes: dict[str, Any] = {}
        if self.cache.identity_key != identity_key:
            logger.debug("Résultats ignorés: identité changée pendant le chargement")
            return changes
        for field, result in zip(fields, results):
            if isinstance(result, BaseException):
                logger.warning("Chargement de '%s' en échec: %s", field, result)
                continue
            if not self._gens.accept(field, tokens[field]):
                logger.debug("Résultat obsolète ignoré pour '%s'", field)
                continue
            changes[field] = _freeze(field, result)
        if "stats" in changes:
            changes["stats_window"] = window
        return changes

    # ------------------------------------------------------------------
    # Opérations
    # ------------------------------------------------------------------

    async def load_all(self, identity_key: str | None) -> bool:
        """Chargement initial des quatre jeux de données.

        Sans effet (aucun appel réseau) si déjà déclenché pour cette identité
        depuis le dernier refresh manuel. Retourne True si un chargement a eu lieu.
        """
        if not identity_key:
            return False
        latch = self._latch
        if not latch.try_acquire(identity_key):
            logger.debug("load_all ignoré pour %s (%s)", identity_key, latch.state(identity_key).value)
            return False

        self._bind_identity(identity_key)
        window = self.window
        self._requested_window = window
        tokens = {f: self._gens.issue(f) for f in FULL_FIELDS}

        self._loading_all += 1
        self._publish()
        try:
            results = await asyncio.gather(
                self._client.get_matches(identity_key, self._match_count),
                self._client.get_player_stats(identity_key, window.days),
                self._client.get_evolution(identity_key, window.days),
                self._client.get_champion_stats(identity_key),
                return_exceptions=True,
            )
        except asyncio.CancelledError:
            latch.reset(identity_key)
            raise
        finally:
            self._loading_all -= 1

        changes = self._commit(identity_key, FULL_FIELDS, list(results), tokens, window)
        latch.complete(identity_key)
        self._publish(**changes)
        logger.info(
            "Dashboard chargé pour %s (%d/%d jeux de données)",
            identity_key,
            sum(1 for r in results if not isinstance(r, BaseException)),
            len(FULL_FIELDS),
        )

        # Changement de période reçu pendant le chargement : rattrapage.
        await self._catch_up_window(identity_key)
        return True

    async def reload_for_window(self, window: TimeWindow | str) -> bool:
        """Change la période et recharge uniquement stats + évolution.

        Avant la fin du chargement initial, ou pendant un refresh manuel, la
        nouvelle période est seulement mémorisée : le chargement en cours la
        prendra en compte à sa fin. Retourne True si des requêtes sont parties.
        """
        new_window = TimeWindow.parse(window)
        if new_window is self.window:
            return False
        self._publish(window=new_window)

        key = self.cache.identity_key
        if key is None or not self._latch.is_done(key) or self._refreshing > 0:
            logger.debug("Période %s mise en attente", new_window.value)
            return False
        await self._fetch_window(key, new_window)
        return True

    async def force_refresh(self, identity_key: str | None) -> Optional[int]:
        """Refresh manuel complet.

        Étapes strictement séquentielles : resync serveur (son échec n'arrête
        pas la suite), réarmement du verrou, rechargement complet, refresh de
        l'identité. Retourne le nombre de matchs synchronisés (None si la
        resync a échoué).
        """
        if not identity_key:
            return None
        self._refreshing += 1
        self._publish()
        synced: Optional[int] = None
        try:
            try:
                synced = await self._client.sync_matches(identity_key)
                logger.info("Resync: %s nouveau(x) match(s) pour %s", synced, identity_key)
            except Exception as e:
                logger.warning("Resync impossible pour %s, rechargement quand même: %s", identity_key, e)

            self._latch.reset(identity_key)
            await self.load_all(identity_key)
            await self._session.refresh_identity()
        finally:
            self._refreshing -= 1
            self._publish(last_synced_matches=synced)

        await self._catch_up_window(identity_key)
        return synced

    def clear(self) -> None:
        """Vide le cache et les verrous (logout)."""
        self._latch = LoadLatch()
        self._requested_window = None
        self._cache._set(DashboardCache(window=self.window))

    # ------------------------------------------------------------------
    # Interne
    # ------------------------------------------------------------------

    async def _catch_up_window(self, identity_key: str) -> None:
        if self._refreshing > 0 or not self._latch.is_done(identity_key):
            return
        if self.cache.identity_key != identity_key:
            return
        if self._requested_window is not self.window:
            await self._fetch_window(identity_key, self.window)

    async def _fetch_window(self, identity_key: str, window: TimeWindow) -> None:
        self._requested_window = window
        tokens = {f: self._gens.issue(f) for f in WINDOW_FIELDS}
        self._loading_window += 1
        self._publish()
        try:
            results = await asyncio.gather(
                self._client.get_player_stats(identity_key, window.days),
                self._client.get_evolution(identity_key, window.days),
                return_exceptions=True,
            )
        finally:
            self._loading_window -= 1
        changes = self._commit(identity_key, WINDOW_FIELDS, list(results), tokens, window)
        self._publish(**changes)
