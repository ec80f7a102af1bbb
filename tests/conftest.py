"""Fixtures partagées : identité, client backend simulé, stockage en mémoire."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from smartgg.app.storage import MemoryStorage
from smartgg.models import ChampionStats, EvolutionPoint, Identity, Match, PlayerStats

PUUID = "puuid-abc"


@pytest.fixture
def identity_payload() -> dict:
    return {
        "id": 42,
        "email": "faker@example.com",
        "gameName": "Faker",
        "tagLine": "KR1",
        "puuid": PUUID,
        "iconId": 588,
        "level": "512",
        "tier": "CHALLENGER",
        "rank": "I",
        "leaguePoints": 1337,
    }


@pytest.fixture
def identity(identity_payload) -> Identity:
    return Identity.from_api(identity_payload)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


def _match(i: int) -> Match:
    return Match(
        id=f"BR1_{i}",
        champion="Ahri",
        champion_id=103,
        role="MID",
        kills=8,
        deaths=3,
        assists=6,
        kda="4.67",
        result="win" if i % 2 else "lose",
    )


@pytest.fixture
def client() -> MagicMock:
    """Client backend dont chaque opération est un AsyncMock avec une réponse valide."""
    c = MagicMock()
    c.login = AsyncMock()
    c.register = AsyncMock()
    c.get_user = AsyncMock()
    c.get_matches = AsyncMock(return_value=[_match(i) for i in range(5)])
    c.get_player_stats = AsyncMock(return_value=PlayerStats(winrate=55.0, kda=3.2, total_games=20))
    c.get_evolution = AsyncMock(
        return_value=[EvolutionPoint(game=i, winrate=50.0 + i, kda=3.0) for i in range(1, 4)]
    )
    c.get_champion_stats = AsyncMock(
        return_value=[
            ChampionStats(champion_id=103, champion_name="Ahri", games=12),
            ChampionStats(champion_id=238, champion_name="Zed", games=8),
            ChampionStats(champion_id=7, champion_name="LeBlanc", games=5),
            ChampionStats(champion_id=61, champion_name="Orianna", games=2),
        ]
    )
    c.sync_matches = AsyncMock(return_value=3)
    c.assistant_chat = AsyncMock()
    return c
