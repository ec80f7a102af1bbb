"""Module application - état partagé et orchestration.

- session.py : SessionStore (identité authentifiée, persistance)
- dashboard.py : DashboardOrchestrator (cache des quatre jeux de données)
- guards.py : LoadLatch / FieldGenerations
- observable.py : cellule de valeur observable
- storage.py : stockage persistant local
- runtime.py : run_sync et build_services (Streamlit, scripts)
"""

from __future__ import annotations

from smartgg.app.dashboard import DashboardCache, DashboardOrchestrator
from smartgg.app.guards import FieldGenerations, LatchState, LoadLatch
from smartgg.app.observable import Observable
from smartgg.app.runtime import Services, build_services, run_sync
from smartgg.app.session import SessionState, SessionStatus, SessionStore
from smartgg.app.storage import LocalStorage, MemoryStorage

__all__ = [
    # session
    "SessionStore",
    "SessionState",
    "SessionStatus",
    # dashboard
    "DashboardOrchestrator",
    "DashboardCache",
    # garde-fous
    "LoadLatch",
    "LatchState",
    "FieldGenerations",
    "Observable",
    # stockage / runtime
    "LocalStorage",
    "MemoryStorage",
    "run_sync",
    "Services",
    "build_services",
]
