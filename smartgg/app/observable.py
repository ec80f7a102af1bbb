"""Cellule de valeur observable.

Le propriétaire écrit via `_set()` ; les consommateurs lisent `value` (lecture
synchrone, jamais de valeur à moitié écrite puisque chaque écriture remplace
l'objet entier) et peuvent s'abonner aux changements.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Observable(Generic[T]):
    def __init__(self, initial: T) -> None:
        self._value = initial
        self._listeners: list[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    def subscribe(self, listener: Callable[[T], None]) -> Callable[[], None]:
        """Abonne `listener` ; retourne la fonction de désabonnement."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return _unsubscribe

    def _set(self, value: T) -> None:
        self._value = value
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                # La valeur reste écrite même si un abonné échoue.
                logger.exception("Listener en erreur sur %s", type(self).__name__)
