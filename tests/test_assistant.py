"""Tests pour l'assistant : réponses locales, cache de contexte, conversation."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from smartgg.api.errors import AssistantUnavailable, TransientFetchFailure
from smartgg.assistant.context import AssistantContextCache
from smartgg.assistant.conversation import Assistant, Conversation, greeting_text
from smartgg.assistant.fallback import (
    RESPONSES,
    FallbackCategory,
    classify_message,
    fallback_reply,
)
from smartgg.models import AssistantReply, Insight

from conftest import PUUID


class TestClassifyMessage:
    """Tests du classifieur par mots-clés."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Como melhorar meu farm?", FallbackCategory.FARM),
            ("Meu CS está baixo", FallbackCategory.FARM),
            ("Por que morri tanto?", FallbackCategory.DEATHS),
            ("Estou morrendo demais", FallbackCategory.DEATHS),
            ("Melhores runas para Ahri?", FallbackCategory.BUILD),
            ("Qual build usar?", FallbackCategory.BUILD),
            ("Analisar última partida", FallbackCategory.MATCH_ANALYSIS),
            ("Oi, tudo bem?", FallbackCategory.DEFAULT),
            ("", FallbackCategory.DEFAULT),
        ],
    )
    def test_categories(self, text, expected):
        assert classify_message(text) is expected

    def test_first_matching_category_wins(self):
        """Farm passe avant mortes, mortes avant analyse de partida."""
        assert classify_message("morri farmando") is FallbackCategory.FARM
        assert classify_message("morri na última partida") is FallbackCategory.DEATHS

    def test_deterministic(self):
        text = "Por que MORRI tanto?"
        assert {classify_message(text) for _ in range(10)} == {FallbackCategory.DEATHS}
        assert fallback_reply(text) == fallback_reply(text)


class TestFallbackReply:
    def test_farm_has_two_insights(self):
        reply = fallback_reply("Como melhorar meu farm?")
        assert reply.response == RESPONSES[FallbackCategory.FARM]
        assert [i.label for i in reply.insights] == ["CS Ideal (10min)", "Meta/min"]
        assert [i.value for i in reply.insights] == ["80+", "8+"]

    def test_match_analysis_insights(self):
        reply = fallback_reply("analisar minha partida")
        assert [i.value for i in reply.insights] == ["8/3/6", "82% KP"]

    def test_no_insights_without_category(self):
        assert fallback_reply("bom dia").insights is None
        assert fallback_reply("bom dia").response == RESPONSES[FallbackCategory.DEFAULT]


class TestAssistantContextCache:
    """Tests du cache de contexte joueur."""

    def test_concurrent_calls_fetch_once(self, client):
        cache = AssistantContextCache(client)

        async def _run():
            return await asyncio.gather(*(cache.ensure_context(PUUID) for _ in range(5)))

        contexts = asyncio.run(_run())
        assert all(c is contexts[0] for c in contexts)
        assert client.get_player_stats.await_count == 1
        assert client.get_matches.await_count == 1
        assert client.get_champion_stats.await_count == 1

    def test_sequential_calls_fetch_once(self, client):
        cache = AssistantContextCache(client)
        asyncio.run(cache.ensure_context(PUUID))
        asyncio.run(cache.ensure_context(PUUID))
        client.get_player_stats.assert_awaited_once_with(PUUID, 7)
        client.get_matches.assert_awaited_once_with(PUUID, 5)

    def test_top_three_champions_in_backend_order(self, client):
        ctx = asyncio.run(AssistantContextCache(client).ensure_context(PUUID))
        assert [c.champion_name for c in ctx.top_champions] == ["Ahri", "Zed", "LeBlanc"]
        assert len(ctx.recent_matches) == 5

    def test_partial_failure_keeps_other_parts(self, client):
        client.get_matches.side_effect = TransientFetchFailure("HTTP 500")
        cache = AssistantContextCache(client)

        ctx = asyncio.run(cache.ensure_context(PUUID))
        asyncio.run(cache.ensure_context(PUUID))

        assert ctx.recent_matches == ()
        assert ctx.stats is not None
        assert client.get_matches.await_count == 1

    def test_clear_allows_reload(self, client):
        cache = AssistantContextCache(client)
        asyncio.run(cache.ensure_context(PUUID))
        cache.clear(PUUID)
        assert cache.get(PUUID) is None
        asyncio.run(cache.ensure_context(PUUID))
        assert client.get_matches.await_count == 2


def _session(identity):
    s = MagicMock()
    s.identity = identity
    return s


class TestAssistantSend:
    """Tests de l'envoi des messages."""

    def test_remote_reply_appended(self, client, identity):
        client.assistant_chat.return_value = AssistantReply(
            response="Foque no farm.",
            insights=(Insight("CS", "7.1", "#3DE08A"),),
        )
        assistant = Assistant(client, _session(identity))
        conv = Conversation.start(identity.game_name)

        msg = asyncio.run(assistant.send("Dicas?", conv))

        assert [m.role for m in conv.messages] == ["assistant", "user", "assistant"]
        assert msg.content == "Foque no farm."
        assert msg.insights[0].value == "7.1"

        request = client.assistant_chat.await_args.args[0]
        assert request.message == "Dicas?"
        assert request.user_id == 42
        assert request.puuid == PUUID
        assert request.game_name == "Faker"
        assert request.tier == "CHALLENGER"
        assert request.rank == "I"
        payload = request.to_api()
        assert len(payload["playerContext"]["topChampions"]) == 3
        assert len(payload["playerContext"]["recentMatches"]) == 5

    def test_fallback_on_unavailable_assistant(self, client, identity):
        """Scénario E : l'assistant distant échoue, réponse locale farm + 2 insights."""
        client.assistant_chat.side_effect = AssistantUnavailable("réseau")
        assistant = Assistant(client, _session(identity))
        conv = Conversation.start()

        msg = asyncio.run(assistant.send("Como melhorar meu farm?", conv))

        assert msg.role == "assistant"
        assert msg.content == RESPONSES[FallbackCategory.FARM]
        assert "80+ CS" in msg.content
        assert len(msg.insights) == 2
        assert conv.messages[-1] is msg
        assert conv.is_waiting is False

    def test_fallback_on_unexpected_error(self, client, identity):
        """Une erreur imprévue du client donne quand même une réponse locale."""
        client.assistant_chat.side_effect = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        assistant = Assistant(client, _session(identity))
        conv = Conversation.start()

        msg = asyncio.run(assistant.send("Como melhorar meu farm?", conv))

        assert [m.role for m in conv.messages] == ["assistant", "user", "assistant"]
        assert msg.content == RESPONSES[FallbackCategory.FARM]
        assert len(msg.insights) == 2
        assert conv.is_waiting is False

    def test_empty_input_ignored(self, client, identity):
        assistant = Assistant(client, _session(identity))
        conv = Conversation.start()

        assert asyncio.run(assistant.send("   ", conv)) is None
        assert len(conv) == 1
        client.assistant_chat.assert_not_awaited()
        client.get_matches.assert_not_awaited()

    def test_context_loaded_once_across_messages(self, client, identity):
        client.assistant_chat.side_effect = AssistantUnavailable()
        assistant = Assistant(client, _session(identity))
        conv = Conversation.start()

        asyncio.run(assistant.send("farm", conv))
        asyncio.run(assistant.send("build", conv))

        assert client.get_player_stats.await_count == 1
        assert len(conv) == 5

    def test_waiting_while_in_flight(self, client, identity):
        assistant = Assistant(client, _session(identity))
        conv = Conversation.start()

        async def _run():
            gate = asyncio.Event()

            async def slow_chat(_request):
                await gate.wait()
                return AssistantReply(response="ok")

            client.assistant_chat.side_effect = slow_chat
            task = asyncio.create_task(assistant.send("oi", conv))
            for _ in range(5):
                await asyncio.sleep(0)
            assert conv.is_waiting is True
            gate.set()
            await task
            assert conv.is_waiting is False

        asyncio.run(_run())


class TestConversation:
    def test_greeting_names_player(self):
        conv = Conversation.start("Faker")
        assert conv.messages[0].role == "assistant"
        assert "**Faker**" in conv.messages[0].content

    def test_greeting_without_name(self):
        assert greeting_text().startswith("Olá! ")
