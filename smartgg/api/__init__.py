"""Module API - accès au backend de statistiques SmartGG."""

from smartgg.api.client import SmartGGClient
from smartgg.api.errors import (
    AssistantUnavailable,
    AuthenticationFailed,
    SmartGGApiError,
    TransientFetchFailure,
)
from smartgg.api.urls import (
    champion_icon_url,
    champion_splash_url,
    profile_icon_url,
    rank_emblem_url,
)

__all__ = [
    "SmartGGClient",
    # erreurs
    "SmartGGApiError",
    "AuthenticationFailed",
    "TransientFetchFailure",
    "AssistantUnavailable",
    # urls
    "profile_icon_url",
    "rank_emblem_url",
    "champion_icon_url",
    "champion_splash_url",
]
