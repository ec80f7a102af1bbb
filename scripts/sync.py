#!/usr/bin/env python3
"""Refresh manuel des données SmartGG depuis la ligne de commande.

Séquence identique au bouton « Atualizar » du dashboard :
resync serveur → rechargement des quatre jeux de données → refresh identité.

Usage:
    python scripts/sync.py --help
    python scripts/sync.py                                  # session persistée
    python scripts/sync.py --email a@b.c --password secret  # login puis sync
    python scripts/sync.py --window 30D -v
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ajouter le répertoire parent au path pour les imports
REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT))

from smartgg.api.errors import AuthenticationFailed
from smartgg.app.dashboard import DashboardCache
from smartgg.app.runtime import Services, build_services, run_sync
from smartgg.config import TimeWindow, load_env_files
from smartgg.logging_utils import setup_logging
from smartgg.models import Credentials
from smartgg.ui.formatting import metric_cards
from smartgg.ui.settings import load_settings

logger = logging.getLogger("smartgg.scripts.sync")


# =============================================================================
# Étapes
# =============================================================================


async def _open_session(services: Services, email: str | None, password: str | None) -> bool:
    """Restaure la session persistée, ou se connecte si des identifiants sont fournis."""
    if email and password:
        try:
            await services.session.login(Credentials(email=email, password=password))
        except AuthenticationFailed as e:
            logger.error("Connexion refusée: %s", e.message)
            return False
        return True

    state = await services.session.restore()
    await services.session.wait_background()
    if not state.is_authenticated:
        logger.error("Aucune session persistée. Utilisez --email/--password.")
        return False
    return True


async def _run(services: Services, args: argparse.Namespace) -> DashboardCache | None:
    if not await _open_session(services, args.email, args.password):
        return None
    key = services.session.identity_key
    if args.window:
        await services.dashboard.reload_for_window(args.window)
    if args.no_resync:
        await services.dashboard.load_all(key)
    else:
        await services.dashboard.force_refresh(key)
    return services.dashboard.cache


def print_summary(services: Services, cache: DashboardCache) -> None:
    identity = services.session.identity
    print()
    print("=" * 60)
    if identity is not None:
        print(f"{identity.riot_id}  ({identity.display_tier} {identity.rank or ''})".rstrip())
    if cache.last_synced_matches is not None:
        print(f"Matchs synchronisés: {cache.last_synced_matches}")
    window = cache.stats_window.value if cache.stats_window else "-"
    print(f"Période: {window}")
    for card in metric_cards(cache.stats):
        print(f"  {card['label']:<12} {card['value']:>8}  ({card['trend']})")
    print(f"Matchs chargés: {len(cache.matches) if cache.matches is not None else '-'}")
    print(f"Champions: {len(cache.champions) if cache.champions is not None else '-'}")
    print("=" * 60)


# =============================================================================
# Point d'entrée
# =============================================================================


def main() -> int:
    """Point d'entrée principal."""
    parser = argparse.ArgumentParser(
        description="Refresh manuel des statistiques SmartGG",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exemples:
  python scripts/sync.py                                  # Session persistée
  python scripts/sync.py --email a@b.c --password secret  # Login puis refresh
  python scripts/sync.py --window 90D                     # Stats sur 90 jours
  python scripts/sync.py --no-resync                      # Sans resync serveur
        """,
    )
    parser.add_argument("--email", type=str, default=None, help="Email du compte")
    parser.add_argument("--password", type=str, default=None, help="Mot de passe du compte")
    parser.add_argument(
        "--window",
        type=str,
        default=None,
        choices=[w.value for w in TimeWindow],
        help="Période des statistiques (défaut: paramètres)",
    )
    parser.add_argument(
        "--no-resync",
        action="store_true",
        help="Recharge les données sans demander de resync au serveur",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Mode verbeux",
    )
    args = parser.parse_args()

    load_env_files()
    settings = load_settings()
    setup_logging(debug=args.verbose or settings.debug, to_file=False)

    services = build_services(settings)
    logger.info("Backend: %s", services.client.base_url)

    cache = run_sync(_run(services, args), timeout_seconds=settings.request_timeout_seconds * 4)
    if cache is None:
        return 1
    print_summary(services, cache)
    return 0


if __name__ == "__main__":
    sys.exit(main())
