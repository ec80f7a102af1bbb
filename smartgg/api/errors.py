"""Erreurs remontées par le client du backend SmartGG."""

from __future__ import annotations


class SmartGGApiError(Exception):
    """Erreur de base du client (statut HTTP éventuel + message lisible)."""

    default_message = "Erro de comunicação com o servidor."

    def __init__(
        self,
        message: str | None = None,
        *,
        status: int | None = None,
        backend_message: str | None = None,
    ) -> None:
        self.message = str(message or "").strip() or self.default_message
        self.status = status
        # Message fourni par le backend dans le corps de la réponse (si présent).
        self.backend_message = backend_message
        super().__init__(self.message)


class AuthenticationFailed(SmartGGApiError):
    """Login/inscription refusés (identifiants invalides, compte déjà existant...).

    Seule erreur destinée à être affichée telle quelle à l'utilisateur.
    """

    default_message = "Email ou senha incorretos"


class TransientFetchFailure(SmartGGApiError):
    """Échec réseau/HTTP sur un jeu de données, la resync ou le refresh d'identité.

    Toujours absorbée par les composants : loguée, jamais bloquante.
    """


class AssistantUnavailable(SmartGGApiError):
    """L'assistant distant n'a pas répondu correctement (déclenche le fallback local)."""

    default_message = "Assistente indisponível."
