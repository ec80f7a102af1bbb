"""Tests pour run_sync et l'assemblage des composants."""

from __future__ import annotations

import asyncio

from smartgg.app.runtime import build_services, run_sync
from smartgg.app.storage import MemoryStorage
from smartgg.config import TimeWindow
from smartgg.ui.settings import AppSettings


async def _answer() -> int:
    await asyncio.sleep(0)
    return 42


class TestRunSync:
    def test_without_running_loop(self):
        assert run_sync(_answer()) == 42

    def test_inside_running_loop(self):
        """Depuis une boucle active, la coroutine passe par un thread dédié."""

        async def _outer():
            return run_sync(_answer())

        assert asyncio.run(_outer()) == 42


class TestBuildServices:
    def test_settings_applied(self):
        settings = AppSettings(
            api_base_url="http://api.local:9000/",
            request_timeout_seconds=5,
            default_time_window="90D",
            dashboard_match_count=3,
        )
        services = build_services(settings, storage=MemoryStorage())

        assert services.client.base_url == "http://api.local:9000"
        assert services.client.timeout_seconds == 5.0
        assert services.dashboard.window is TimeWindow.LONG
        assert services.session.identity is None
