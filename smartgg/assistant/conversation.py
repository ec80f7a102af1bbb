"""Transcript de l'assistant et envoi des messages.

Le transcript est en ajout seul, ordonné par horodatage d'ajout ; plusieurs
`send()` peuvent se chevaucher sans corrompre l'historique.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional

from smartgg.api.errors import AssistantUnavailable
from smartgg.assistant.context import AssistantContextCache
from smartgg.assistant.fallback import fallback_reply
from smartgg.models import AssistantReply, AssistantRequest, ChatMessage, PlayerContext

logger = logging.getLogger(__name__)


def greeting_text(player_name: Optional[str] = None) -> str:
    name = f", **{player_name}**" if player_name else ""
    return (
        f"Olá{name}! 👋\n\n"
        "Sou seu assistente de análise pessoal. Posso ajudá-lo a:\n\n"
        "• Analisar suas partidas rankeadas\n"
        "• Melhorar seu desempenho\n"
        "• Sugerir builds e estratégias\n\n"
        "Como posso te ajudar hoje?"
    )


def _new_message(role: str, content: str, insights=None) -> ChatMessage:
    return ChatMessage(
        id=uuid.uuid4().hex,
        role=role,
        content=content,
        timestamp=datetime.now(),
        insights=insights,
    )


class Conversation:
    """Historique des messages (ajout seul)."""

    def __init__(self, messages: list[ChatMessage] | None = None) -> None:
        self._messages: list[ChatMessage] = list(messages or [])
        self._in_flight = 0

    @classmethod
    def start(cls, player_name: Optional[str] = None) -> "Conversation":
        """Nouvelle conversation ouverte par le message d'accueil."""
        greeting = ChatMessage(
            id="1",
            role="assistant",
            content=greeting_text(player_name),
            timestamp=datetime.now(),
        )
        return cls([greeting])

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def is_waiting(self) -> bool:
        """Vrai tant qu'au moins un envoi attend sa réponse."""
        return self._in_flight > 0

    def append(self, message: ChatMessage) -> None:
        self._messages.append(message)

    @contextmanager
    def waiting(self) -> Iterator[None]:
        self._in_flight += 1
        try:
            yield
        finally:
            self._in_flight -= 1

    def __len__(self) -> int:
        return len(self._messages)


class Assistant:
    """Envoie les questions du joueur à l'assistant distant.

    En cas d'échec distant, la réponse vient du générateur local : le joueur
    reçoit toujours une réponse.

    Args:
        client: Client backend (`assistant_chat`).
        session: `SessionStore` (identité courante).
        contexts: Cache du contexte joueur (créé sur `client` si absent).
    """

    def __init__(self, client, session, contexts: AssistantContextCache | None = None) -> None:
        self._client = client
        self._session = session
        self.contexts = contexts if contexts is not None else AssistantContextCache(client)

    async def send(
        self,
        text: str,
        conversation: Conversation,
        *,
        current_champion: Optional[str] = None,
    ) -> Optional[ChatMessage]:
        """Ajoute la question puis la réponse au transcript.

        Returns:
            Le message assistant ajouté, ou None si `text` est vide.
        """
        message = str(text or "")
        if not message.strip():
            return None

        conversation.append(_new_message("user", message))
        with conversation.waiting():
            reply = await self._ask(message, current_champion)

        answer = _new_message("assistant", reply.response, reply.insights)
        conversation.append(answer)
        return answer

    async def _ask(self, message: str, current_champion: Optional[str]) -> AssistantReply:
        identity = self._session.identity
        if identity is not None:
            context = await self.contexts.ensure_context(identity.puuid)
        else:
            context = PlayerContext()

        request = AssistantRequest(
            message=message,
            user_id=identity.id if identity is not None else 0,
            puuid=identity.puuid if identity is not None else "",
            game_name=identity.game_name if identity is not None else None,
            tier=identity.tier if identity is not None else None,
            rank=identity.rank if identity is not None else None,
            context=context,
            current_champion=current_champion,
        )
        try:
            return await self._client.assistant_chat(request)
        except AssistantUnavailable as e:
            logger.warning("Assistant distant indisponible, réponse locale: %s", e)
            return fallback_reply(message)
        except Exception:
            logger.exception("Erreur inattendue de l'assistant distant, réponse locale")
            return fallback_reply(message)
