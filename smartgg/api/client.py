"""Client HTTP (aiohttp) du backend de statistiques SmartGG.

Objectif:
- Exposer chaque opération distante (auth, matchs, stats, assistant) en `async`.
- Convertir toute erreur transport/HTTP en erreurs typées (`smartgg.api.errors`).

Contraintes:
- Utilisable depuis des boucles asyncio successives (reruns Streamlit) : sans
  session injectée, une `aiohttp.ClientSession` courte est ouverte par appel.
- Aucun timeout applicatif en dehors de `aiohttp.ClientTimeout`.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Mapping

import aiohttp

from smartgg.api.errors import (
    AssistantUnavailable,
    AuthenticationFailed,
    TransientFetchFailure,
)
from smartgg.config import DEFAULT_TIMEOUT_SECONDS, get_api_base_url
from smartgg.models import (
    AssistantReply,
    AssistantRequest,
    ChampionStats,
    Credentials,
    EvolutionPoint,
    Identity,
    Match,
    MatchDetails,
    PlayerStats,
    RegistrationProfile,
)

logger = logging.getLogger(__name__)

REGISTER_FAILED_MESSAGE = "Erro ao criar conta. Tente novamente."


def _error_message_from_body(body: str) -> str | None:
    """Extrait le champ `message` (ou `error`) d'un corps d'erreur JSON."""
    try:
        obj = json.loads(body)
    except (TypeError, ValueError):
        return None
    if isinstance(obj, Mapping):
        for key in ("message", "error"):
            msg = obj.get(key)
            if isinstance(msg, str) and msg.strip():
                return msg.strip()
    return None


class SmartGGClient:
    """Accès au backend JSON-over-HTTP.

    Args:
        base_url: URL du backend (défaut: `SMARTGG_API_BASE_URL` ou localhost:8081).
        timeout_seconds: Timeout total par requête.
        session: Session aiohttp partagée (optionnelle, non fermée par le client).
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.base_url = (base_url or get_api_base_url()).rstrip("/")
        self.timeout_seconds = float(timeout_seconds)
        self._session = session

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_body: Any = None,
    ) -> Any:
        """Exécute une requête et retourne le JSON décodé.

        Raises:
            TransientFetchFailure: erreur réseau, timeout, statut >= 400 ou JSON invalide.
        """
        url = f"{self.base_url}{path}"
        headers = {"Content-Type": "application/json", "Accept": "application/json"}

        async def _do(session: aiohttp.ClientSession) -> Any:
            async with session.request(
                method, url, params=params, json=json_body, headers=headers
            ) as resp:
                # Corps non UTF-8 (page d'erreur de proxy) : décodage tolérant.
                body = (await resp.read()).decode("utf-8", errors="replace")
                if resp.status >= 400:
                    backend_msg = _error_message_from_body(body)
                    raise TransientFetchFailure(
                        backend_msg or f"HTTP {resp.status} sur {method} {path}",
                        status=resp.status,
                        backend_message=backend_msg,
                    )
                if not body.strip():
                    return None
                try:
                    return json.loads(body)
                except ValueError as e:
                    raise TransientFetchFailure(
                        f"Réponse JSON invalide sur {method} {path}", status=resp.status
                    ) from e

        logger.debug("%s %s params=%s", method, path, dict(params or {}))
        try:
            if self._session is not None:
                return await _do(self._session)
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                return await _do(session)
        except TransientFetchFailure:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransientFetchFailure(f"{method} {path}: {str(e) or type(e).__name__}") from e

    async def _get(self, path: str, **params: Any) -> Any:
        return await self._request("GET", path, params=params or None)

    async def _post(self, path: str, body: Any = None) -> Any:
        return await self._request("POST", path, json_body=body)

    @staticmethod
    def _as_list(data: Any, what: str) -> list[Mapping[str, Any]]:
        if not isinstance(data, list):
            raise TransientFetchFailure(f"Réponse inattendue pour {what}: liste attendue.")
        return [x for x in data if isinstance(x, Mapping)]

    @staticmethod
    def _as_mapping(data: Any, what: str) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise TransientFetchFailure(f"Réponse inattendue pour {what}: objet attendu.")
        return data

    @staticmethod
    def _identity(data: Any, what: str) -> Identity:
        try:
            return Identity.from_api(data)
        except ValueError as e:
            raise TransientFetchFailure(f"{what}: {e}") from e

    # ------------------------------------------------------------------
    # Authentification / utilisateur
    # ------------------------------------------------------------------

    async def login(self, credentials: Credentials) -> Identity:
        """Authentifie le joueur.

        Raises:
            AuthenticationFailed: avec le message du backend si disponible.
        """
        try:
            data = await self._post("/users/login", credentials.to_api())
            return self._identity(data, "login")
        except TransientFetchFailure as e:
            raise AuthenticationFailed(
                e.backend_message, status=e.status, backend_message=e.backend_message
            ) from e

    async def register(self, profile: RegistrationProfile) -> Identity:
        """Crée le compte et retourne l'identité.

        Raises:
            AuthenticationFailed: avec le message du backend si disponible.
        """
        try:
            data = await self._post("/users/register", profile.to_api())
            return self._identity(data, "register")
        except TransientFetchFailure as e:
            raise AuthenticationFailed(
                e.backend_message or REGISTER_FAILED_MESSAGE,
                status=e.status,
                backend_message=e.backend_message,
            ) from e

    async def get_user(self, user_id: int) -> Identity:
        data = await self._get(f"/users/{int(user_id)}")
        return self._identity(data, "get_user")

    # ------------------------------------------------------------------
    # Matchs
    # ------------------------------------------------------------------

    async def get_matches(self, puuid: str, count: int = 10) -> list[Match]:
        data = await self._get(f"/matches/{puuid}", count=int(count))
        return [Match.from_api(m) for m in self._as_list(data, "matches")]

    async def get_match(self, puuid: str, match_id: str) -> MatchDetails:
        data = await self._get(f"/matches/{puuid}/match/{match_id}")
        return MatchDetails.from_api(self._as_mapping(data, "match"))

    async def sync_matches(self, puuid: str) -> int:
        """Déclenche la resynchronisation serveur. Retourne le nombre de matchs ajoutés."""
        data = await self._post(f"/matches/{puuid}/sync")
        if isinstance(data, Mapping):
            try:
                return int(data.get("matchesSynced") or 0)
            except (TypeError, ValueError):
                return 0
        return 0

    # ------------------------------------------------------------------
    # Statistiques
    # ------------------------------------------------------------------

    async def get_player_stats(self, puuid: str, days: int = 30) -> PlayerStats:
        data = await self._get(f"/stats/{puuid}", days=int(days))
        return PlayerStats.from_api(self._as_mapping(data, "stats"))

    async def get_evolution(self, puuid: str, days: int = 30) -> list[EvolutionPoint]:
        data = await self._get(f"/stats/{puuid}/evolution", days=int(days))
        return [EvolutionPoint.from_api(p) for p in self._as_list(data, "evolution")]

    async def get_champion_stats(self, puuid: str) -> list[ChampionStats]:
        data = await self._get(f"/stats/{puuid}/champions")
        return [ChampionStats.from_api(c) for c in self._as_list(data, "champions")]

    async def get_champion_average(self, puuid: str, champion_id: int) -> dict[str, Any]:
        data = await self._get(f"/users/champion/average/{puuid}", championId=int(champion_id))
        return dict(self._as_mapping(data, "champion average"))

    # ------------------------------------------------------------------
    # Assistant
    # ------------------------------------------------------------------

    async def assistant_chat(self, request: AssistantRequest) -> AssistantReply:
        """Interroge l'assistant distant.

        Raises:
            AssistantUnavailable: erreur réseau, statut non-succès ou réponse invalide.
        """
        try:
            data = await self._post("/assistant/chat", request.to_api())
        except TransientFetchFailure as e:
            raise AssistantUnavailable(e.message, status=e.status) from e
        try:
            return AssistantReply.from_api(data)
        except ValueError as e:
            raise AssistantUnavailable(str(e)) from e
