"""Stockage persistant local (clé → texte), façon localStorage.

Chaque clé est un fichier JSON dans le répertoire de session. Les accès sont
synchrones : disque local uniquement, pour que `logout()` reste non suspendu.
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

from smartgg.config import get_session_dir

logger = logging.getLogger(__name__)

_SAFE_KEY_RE = re.compile(r"[^A-Za-z0-9_.-]")


def _safe_write_text(path: Path, text: str) -> None:
    """Écriture atomique (fichier temporaire puis remplacement)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(text, encoding="utf-8")
    os.replace(tmp, path)


class LocalStorage:
    """Persistance clé/valeur sur disque.

    Args:
        directory: Répertoire de stockage (défaut: `SMARTGG_SESSION_DIR` ou data/session).
    """

    def __init__(self, directory: str | os.PathLike[str] | None = None) -> None:
        self.directory = Path(directory or get_session_dir())

    def _path(self, key: str) -> Path:
        safe = _SAFE_KEY_RE.sub("_", str(key or "").strip()) or "_"
        return self.directory / f"{safe}.json"

    def get_item(self, key: str) -> str | None:
        """Retourne le texte brut stocké, ou None si absent/illisible."""
        path = self._path(key)
        try:
            if not path.exists():
                return None
            return path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Lecture impossible de %s: %s", path, e)
            return None

    def set_item(self, key: str, value: str) -> None:
        _safe_write_text(self._path(key), str(value))

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            pass

    # Helpers JSON

    def get_json(self, key: str) -> Any:
        """Décode la valeur stockée.

        Raises:
            ValueError: si le contenu n'est pas du JSON valide.
        """
        raw = self.get_item(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set_json(self, key: str, obj: Any) -> None:
        self.set_item(key, json.dumps(obj, ensure_ascii=False, indent=2))


class MemoryStorage(LocalStorage):
    """Variante en mémoire (tests, exécutions éphémères)."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)
