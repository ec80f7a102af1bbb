"""Exécution hors boucle asyncio (Streamlit, scripts) et assemblage des composants."""

from __future__ import annotations

import asyncio
import concurrent.futures
from dataclasses import dataclass
from typing import Any, Coroutine, TypeVar

from smartgg.api.client import SmartGGClient
from smartgg.app.dashboard import DashboardOrchestrator
from smartgg.app.session import SessionStore
from smartgg.app.storage import LocalStorage
from smartgg.assistant.context import AssistantContextCache
from smartgg.assistant.conversation import Assistant
from smartgg.config import DEFAULT_TIMEOUT_SECONDS
from smartgg.ui.settings import AppSettings

T = TypeVar("T")


def run_sync(coro: Coroutine[Any, Any, T], timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> T:
    """Exécute `coro` jusqu'au bout depuis du code synchrone.

    Si une boucle tourne déjà dans ce thread, la coroutine est exécutée dans
    un thread dédié (avec sa propre boucle).

    Args:
        coro: Coroutine à exécuter.
        timeout_seconds: Délai réseau de référence (le thread dédié attend
            un peu plus longtemps).
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    with concurrent.futures.ThreadPoolExecutor(max_workers=1) as ex:
        fut = ex.submit(asyncio.run, coro)
        return fut.result(timeout=float(timeout_seconds) + 20.0)


@dataclass
class Services:
    """Composants partagés d'une exécution (une instance par session Streamlit)."""

    client: SmartGGClient
    session: SessionStore
    dashboard: DashboardOrchestrator
    assistant: Assistant


def build_services(settings: AppSettings | None = None, *, storage: LocalStorage | None = None) -> Services:
    """Assemble client, session, dashboard et assistant à partir des paramètres."""
    settings = settings or AppSettings()
    client = SmartGGClient(
        settings.resolved_api_base_url(),
        timeout_seconds=settings.request_timeout_seconds,
    )
    session = SessionStore(client, storage)
    dashboard = DashboardOrchestrator(
        client,
        session,
        window=settings.time_window,
        match_count=settings.dashboard_match_count,
    )
    assistant = Assistant(client, session, AssistantContextCache(client))
    return Services(client=client, session=session, dashboard=dashboard, assistant=assistant)
