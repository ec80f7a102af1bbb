"""Session joueur : seule autorité sur « qui est connecté ».

Ce module gère :
- La restauration de l'identité persistée au démarrage (puis refresh en arrière-plan)
- Login / inscription / logout
- Le refresh de l'identité (rang, niveau, icône...) depuis le backend

Seul `SessionStore` écrit dans le stockage de session ; les consommateurs
lisent `state` / `identity` ou s'abonnent aux changements.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional

from smartgg.api.errors import AuthenticationFailed
from smartgg.app.observable import Observable
from smartgg.app.storage import LocalStorage
from smartgg.config import SESSION_STORAGE_KEY
from smartgg.models import Credentials, Identity, RegistrationProfile

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class SessionState:
    """État de session (valeur immuable, remplacée à chaque transition).

    `is_loading` est vrai pendant un login/inscription en cours, pour que l'UI
    désactive la double soumission.
    """

    status: SessionStatus = SessionStatus.UNINITIALIZED
    identity: Optional[Identity] = None
    is_loading: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.status is SessionStatus.AUTHENTICATED and self.identity is not None


class SessionStore:
    """Propriétaire de l'identité authentifiée.

    Args:
        client: Client backend (`login`, `register`, `get_user`).
        storage: Stockage persistant (défaut: `LocalStorage()`).
        storage_key: Clé de persistance de l'identité.
    """

    def __init__(
        self,
        client,
        storage: LocalStorage | None = None,
        *,
        storage_key: str = SESSION_STORAGE_KEY,
    ) -> None:
        self._client = client
        self._storage = storage if storage is not None else LocalStorage()
        self._storage_key = storage_key
        self._state: Observable[SessionState] = Observable(SessionState())
        self._restored = False
        # Incrémenté à chaque changement de session (login/register/logout) :
        # un refresh lancé pour une session précédente ne commite pas.
        self._epoch = 0
        self._background_refresh: asyncio.Task | None = None

    # ------------------------------------------------------------------
    # Lecture
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state.value

    @property
    def identity(self) -> Optional[Identity]:
        return self._state.value.identity

    @property
    def identity_key(self) -> Optional[str]:
        """Clé (puuid) utilisée par toutes les requêtes de données."""
        ident = self.identity
        return ident.puuid if ident is not None else None

    def subscribe(self, listener: Callable[[SessionState], None]) -> Callable[[], None]:
        return self._state.subscribe(listener)

    # ------------------------------------------------------------------
    # Écriture interne
    # ------------------------------------------------------------------

    def _transition(self, state: SessionState) -> None:
        self._state._set(state)

    def _persist(self, identity: Identity) -> None:
        self._storage.set_json(self._storage_key, identity.to_api())

    def _authenticate(self, identity: Identity) -> None:
        self._epoch += 1
        self._persist(identity)
        self._transition(SessionState(SessionStatus.AUTHENTICATED, identity))

    # ------------------------------------------------------------------
    # Opérations
    # ------------------------------------------------------------------

    async def restore(self, *, background_refresh: bool = True) -> SessionState:
        """Restaure la session persistée (une seule fois par processus).

        Avec un enregistrement valide, l'état passe immédiatement à
        AUTHENTICATED puis un refresh est lancé en tâche de fond ; son échec
        conserve l'instantané local. Un enregistrement illisible est supprimé.

        Args:
            background_refresh: Si False, aucune tâche n'est lancée : l'appelant
                exécute `refresh_identity()` lui-même (boucle éphémère de Streamlit).
        """
        if self._restored:
            logger.debug("restore() déjà exécuté, ignoré")
            return self.state
        self._restored = True
        self._transition(SessionState(SessionStatus.LOADING))

        identity: Identity | None = None
        if self._storage.get_item(self._storage_key) is not None:
            # Tout enregistrement présent qui n'est pas une identité est supprimé
            # (JSON invalide, `null`, objet incomplet).
            try:
                identity = Identity.from_api(self._storage.get_json(self._storage_key))
            except ValueError as e:
                logger.warning("Session persistée invalide (%s), suppression", e)
                self._storage.remove_item(self._storage_key)

        if identity is None:
            self._transition(SessionState(SessionStatus.ANONYMOUS))
            return self.state

        self._transition(SessionState(SessionStatus.AUTHENTICATED, identity))
        if not background_refresh:
            return self.state
        self._background_refresh = asyncio.get_running_loop().create_task(
            self.refresh_identity(), name="smartgg-identity-refresh"
        )
        return self.state

    async def wait_background(self) -> None:
        """Attend la fin du refresh d'arrière-plan lancé par `restore()` (s'il existe)."""
        task = self._background_refresh
        if task is not None and not task.done():
            await task

    async def login(self, credentials: Credentials) -> Identity:
        """Authentifie puis persiste l'identité.

        Raises:
            AuthenticationFailed: l'état reste inchangé (hors flag de chargement).
        """
        return await self._authenticate_with(self._client.login, credentials)

    async def register(self, profile: RegistrationProfile) -> Identity:
        """Crée le compte puis persiste l'identité.

        Raises:
            AuthenticationFailed: l'état reste inchangé (hors flag de chargement).
        """
        return await self._authenticate_with(self._client.register, profile)

    async def _authenticate_with(self, call, payload) -> Identity:
        self._transition(replace(self.state, is_loading=True))
        try:
            identity = await call(payload)
        except AuthenticationFailed:
            self._transition(replace(self.state, is_loading=False))
            raise
        except Exception as e:
            self._transition(replace(self.state, is_loading=False))
            logger.warning("Authentification impossible: %s", e)
            raise AuthenticationFailed() from e
        self._authenticate(identity)
        logger.info("Session ouverte pour %s", identity.riot_id)
        return identity

    def logout(self) -> None:
        """Efface la session persistée et passe à ANONYMOUS (non suspendu)."""
        self._epoch += 1
        self._storage.remove_item(self._storage_key)
        self._transition(SessionState(SessionStatus.ANONYMOUS))
        logger.info("Session fermée")

    async def refresh_identity(self) -> None:
        """Recharge l'identité courante depuis le backend.

        No-op sans session. Un échec est logué et l'identité précédente conservée.
        """
        current = self.identity
        if current is None:
            return
        epoch = self._epoch
        try:
            fresh = await self._client.get_user(current.id)
        except Exception as e:
            logger.warning("Refresh de l'identité %s impossible: %s", current.id, e)
            return

        if epoch != self._epoch or self.identity is None or self.identity.id != current.id:
            logger.debug("Refresh d'identité obsolète ignoré (session changée)")
            return
        self._persist(fresh)
        self._transition(replace(self.state, identity=fresh))
