"""Configuration du logging du package."""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path

from smartgg.config import env_flag, get_log_dir

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    *,
    debug: bool | None = None,
    log_dir: str | None = None,
    to_file: bool = True,
) -> logging.Logger:
    """Configure le logger racine `smartgg` (idempotent).

    Args:
        debug: Niveau DEBUG si vrai (défaut: variable `SMARTGG_DEBUG`).
        log_dir: Répertoire des fichiers de log (défaut: `get_log_dir()`).
        to_file: Ajoute un fichier journalier `smartgg_YYYYMMDD.log`.

    Returns:
        Le logger `smartgg`.
    """
    logger = logging.getLogger("smartgg")
    if logger.handlers:
        return logger

    if debug is None:
        debug = env_flag("SMARTGG_DEBUG")
    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if to_file:
        directory = Path(log_dir or get_log_dir())
        try:
            directory.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(
                directory / f"smartgg_{datetime.now().strftime('%Y%m%d')}.log",
                encoding="utf-8",
            )
        except OSError as e:
            logger.warning("Fichier de log indisponible (%s), console uniquement", e)
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
