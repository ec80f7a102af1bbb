"""Tests pour DashboardOrchestrator (chargement initial, période, refresh manuel)."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

from smartgg.api.errors import TransientFetchFailure
from smartgg.app.dashboard import DashboardOrchestrator
from smartgg.app.guards import LatchState
from smartgg.config import TimeWindow
from smartgg.models import PlayerStats

from conftest import PUUID


def _session() -> MagicMock:
    s = MagicMock()
    s.refresh_identity = AsyncMock()
    return s


def _dashboard(client, session=None, **kwargs) -> DashboardOrchestrator:
    return DashboardOrchestrator(client, session or _session(), **kwargs)


class TestLoadAll:
    """Tests du chargement initial."""

    def test_fetches_four_datasets_once(self, client):
        dash = _dashboard(client)

        assert asyncio.run(dash.load_all(PUUID)) is True
        assert asyncio.run(dash.load_all(PUUID)) is False

        client.get_matches.assert_awaited_once_with(PUUID, 8)
        client.get_player_stats.assert_awaited_once_with(PUUID, 7)
        client.get_evolution.assert_awaited_once_with(PUUID, 7)
        client.get_champion_stats.assert_awaited_once_with(PUUID)
        cache = dash.cache
        assert cache.identity_key == PUUID
        assert len(cache.matches) == 5
        assert cache.stats.winrate == 55.0
        assert cache.stats_window is TimeWindow.SHORT
        assert dash.latch_state(PUUID) is LatchState.DONE

    def test_concurrent_callers_fetch_once(self, client):
        dash = _dashboard(client)

        async def _run():
            return await asyncio.gather(*(dash.load_all(PUUID) for _ in range(5)))

        results = asyncio.run(_run())
        assert results.count(True) == 1
        assert client.get_matches.await_count == 1
        assert client.get_champion_stats.await_count == 1

    def test_partial_success_commits_other_fields(self, client):
        """Un jeu de données en échec n'empêche pas le commit des trois autres."""
        client.get_player_stats.side_effect = TransientFetchFailure("HTTP 500")
        dash = _dashboard(client)

        asyncio.run(dash.load_all(PUUID))

        cache = dash.cache
        assert cache.stats is None
        assert cache.stats_window is None
        assert cache.matches is not None
        assert cache.evolution is not None
        assert cache.champions is not None
        assert dash.latch_state(PUUID) is LatchState.DONE

    def test_commit_is_a_single_replacement(self, client):
        dash = _dashboard(client)
        snapshots = []
        dash.subscribe(snapshots.append)

        asyncio.run(dash.load_all(PUUID))

        with_data = [s for s in snapshots if s.matches is not None or s.stats is not None]
        assert with_data
        first = with_data[0]
        assert first.matches is not None and first.stats is not None
        assert first.evolution is not None and first.champions is not None

    def test_busy_flags(self, client):
        dash = _dashboard(client)
        flags = []
        dash.subscribe(lambda c: flags.append((c.is_loading_matches, c.is_loading_stats)))

        asyncio.run(dash.load_all(PUUID))

        assert (True, True) in flags
        assert flags[-1] == (False, False)

    def test_missing_identity_is_noop(self, client):
        dash = _dashboard(client)
        assert asyncio.run(dash.load_all(None)) is False
        client.get_matches.assert_not_awaited()

    def test_new_identity_starts_from_empty_cache(self, client):
        dash = _dashboard(client)
        asyncio.run(dash.load_all(PUUID))
        client.get_matches.side_effect = TransientFetchFailure("x")

        asyncio.run(dash.load_all("other-puuid"))

        assert dash.cache.identity_key == "other-puuid"
        assert dash.cache.matches is None


class TestWindowChange:
    """Tests du rechargement fenêtré."""

    def test_only_window_fields_refetched(self, client):
        """Scénario D : 7 jours → 30 jours ne recharge que stats + évolution."""
        dash = _dashboard(client)
        asyncio.run(dash.load_all(PUUID))
        client.get_player_stats.return_value = PlayerStats(winrate=61.0)

        assert asyncio.run(dash.reload_for_window("30D")) is True

        client.get_player_stats.assert_awaited_with(PUUID, 30)
        client.get_evolution.assert_awaited_with(PUUID, 30)
        assert client.get_matches.await_count == 1
        assert client.get_champion_stats.await_count == 1
        assert dash.cache.stats.winrate == 61.0
        assert dash.cache.stats_window is TimeWindow.MEDIUM

    def test_same_window_is_noop(self, client):
        dash = _dashboard(client)
        asyncio.run(dash.load_all(PUUID))
        assert asyncio.run(dash.reload_for_window(TimeWindow.SHORT)) is False
        assert client.get_player_stats.await_count == 1

    def test_window_change_before_initial_load_is_deferred(self, client):
        dash = _dashboard(client)
        assert asyncio.run(dash.reload_for_window("90D")) is False
        client.get_player_stats.assert_not_awaited()

        asyncio.run(dash.load_all(PUUID))
        client.get_player_stats.assert_awaited_once_with(PUUID, 90)

    def test_window_change_during_initial_load_caught_up(self, client):
        """Un changement reçu pendant le chargement est rattrapé une fois à la fin."""
        dash = _dashboard(client)

        async def _run():
            gate = asyncio.Event()
            original = client.get_matches.return_value

            async def slow_matches(*_args):
                await gate.wait()
                return original

            client.get_matches.side_effect = slow_matches
            load = asyncio.create_task(dash.load_all(PUUID))
            await asyncio.sleep(0)
            assert await dash.reload_for_window("30D") is False
            gate.set()
            await load

        asyncio.run(_run())
        days = [c.args[1] for c in client.get_player_stats.await_args_list]
        assert days == [7, 30]
        assert dash.cache.stats_window is TimeWindow.MEDIUM
        assert client.get_matches.await_count == 1

    def test_stale_window_result_never_overwrites_newer(self, client):
        """7D → 30D → 90D : la réponse 30D qui arrive en dernier est ignorée."""
        dash = _dashboard(client)
        asyncio.run(dash.load_all(PUUID))

        async def _run():
            gate_30 = asyncio.Event()

            async def stats(_puuid, days):
                if days == 30:
                    await gate_30.wait()
                return PlayerStats(winrate=float(days))

            client.get_player_stats.side_effect = stats
            first = asyncio.create_task(dash.reload_for_window("30D"))
            await asyncio.sleep(0)
            await dash.reload_for_window("90D")
            gate_30.set()
            await first

        asyncio.run(_run())
        assert dash.cache.stats.winrate == 90.0
        assert dash.cache.window is TimeWindow.LONG


class TestForceRefresh:
    """Tests du refresh manuel."""

    def _ordered(self, client, session, calls: list[str]):
        def record(name, value):
            async def _call(*_args):
                calls.append(name)
                return value

            return _call

        client.sync_matches.side_effect = record("sync", 2)
        client.get_matches.side_effect = record("matches", [])
        client.get_player_stats.side_effect = record("stats", PlayerStats())
        client.get_evolution.side_effect = record("evolution", [])
        client.get_champion_stats.side_effect = record("champions", [])
        session.refresh_identity.side_effect = record("identity", None)

    def test_sequence_resync_reload_identity(self, client):
        session = _session()
        dash = _dashboard(client, session)
        asyncio.run(dash.load_all(PUUID))
        calls: list[str] = []
        self._ordered(client, session, calls)

        synced = asyncio.run(dash.force_refresh(PUUID))

        assert synced == 2
        assert calls[0] == "sync"
        assert sorted(calls[1:5]) == ["champions", "evolution", "matches", "stats"]
        assert calls[5:] == ["identity"]
        assert dash.cache.last_synced_matches == 2

    def test_failed_resync_still_reloads_and_refreshes_identity(self, client):
        """Scénario F : la resync échoue, le rechargement et le refresh identité ont lieu."""
        session = _session()
        dash = _dashboard(client, session)
        asyncio.run(dash.load_all(PUUID))
        client.sync_matches.side_effect = TransientFetchFailure("HTTP 503")

        synced = asyncio.run(dash.force_refresh(PUUID))

        assert synced is None
        assert client.get_matches.await_count == 2
        assert client.get_player_stats.await_count == 2
        assert client.get_evolution.await_count == 2
        assert client.get_champion_stats.await_count == 2
        session.refresh_identity.assert_awaited_once()
        assert dash.latch_state(PUUID) is LatchState.DONE

    def test_failed_field_keeps_previous_value(self, client):
        dash = _dashboard(client)
        asyncio.run(dash.load_all(PUUID))
        previous = dash.cache.champions
        client.get_champion_stats.side_effect = TransientFetchFailure("HTTP 500")

        asyncio.run(dash.force_refresh(PUUID))

        assert dash.cache.champions == previous

    def test_refreshing_flag(self, client):
        dash = _dashboard(client)
        seen = []
        dash.subscribe(lambda c: seen.append(c.is_refreshing))

        asyncio.run(dash.force_refresh(PUUID))

        assert True in seen
        assert dash.is_refreshing is False
        assert seen[-1] is False

    def test_window_change_during_refresh_is_deferred(self, client):
        """Pendant un refresh, la période est seulement mémorisée puis prise en compte."""
        session = _session()
        dash = _dashboard(client, session)
        asyncio.run(dash.load_all(PUUID))

        async def _run():
            gate = asyncio.Event()

            async def slow_sync(*_args):
                await gate.wait()
                return 0

            client.sync_matches.side_effect = slow_sync
            refresh = asyncio.create_task(dash.force_refresh(PUUID))
            await asyncio.sleep(0)
            assert await dash.reload_for_window("30D") is False
            gate.set()
            await refresh

        asyncio.run(_run())
        days = [c.args[1] for c in client.get_player_stats.await_args_list]
        assert days == [7, 30]
        assert dash.cache.stats_window is TimeWindow.MEDIUM


class TestClear:
    def test_clear_resets_cache_and_latch(self, client):
        dash = _dashboard(client)
        asyncio.run(dash.load_all(PUUID))
        dash.clear()
        assert dash.cache.matches is None
        assert dash.latch_state(PUUID) is LatchState.NOT_STARTED
        assert asyncio.run(dash.load_all(PUUID)) is True
