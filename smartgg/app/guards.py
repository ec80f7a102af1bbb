"""Garde-fous de synchronisation (boucle asyncio mono-thread).

- `LoadLatch` : verrou à trois états par clé d'identité, pour garantir un seul
  chargement initial tant qu'aucun refresh explicite ne le réarme.
- `FieldGenerations` : jetons de génération par champ de cache ; un résultat
  n'est commité que s'il est plus récent que le dernier commité.
"""

from __future__ import annotations

from enum import Enum


class LatchState(str, Enum):
    NOT_STARTED = "not-started"
    IN_FLIGHT = "in-flight"
    DONE = "done"


class LoadLatch:
    """Verrou one-shot par clé.

    `try_acquire()` teste et passe à IN_FLIGHT sans point de suspension entre
    les deux : deux appelants concurrents ne peuvent pas l'obtenir tous les deux.
    """

    def __init__(self) -> None:
        self._states: dict[str, LatchState] = {}

    def state(self, key: str) -> LatchState:
        return self._states.get(key, LatchState.NOT_STARTED)

    def try_acquire(self, key: str) -> bool:
        if self.state(key) is not LatchState.NOT_STARTED:
            return False
        self._states[key] = LatchState.IN_FLIGHT
        return True

    def complete(self, key: str) -> None:
        self._states[key] = LatchState.DONE

    def reset(self, key: str) -> None:
        self._states.pop(key, None)

    def is_done(self, key: str) -> bool:
        return self.state(key) is LatchState.DONE


class FieldGenerations:
    """Jetons monotones par champ.

    Usage:
        token = gens.issue("stats")      # au lancement de la requête
        ...
        if gens.accept("stats", token):  # au moment du commit
            cache = replace(cache, stats=result)
    """

    def __init__(self) -> None:
        self._issued: dict[str, int] = {}
        self._committed: dict[str, int] = {}

    def issue(self, field: str) -> int:
        token = self._issued.get(field, 0) + 1
        self._issued[field] = token
        return token

    def accept(self, field: str, token: int) -> bool:
        """Enregistre le commit si `token` est le plus récent vu pour ce champ."""
        if token <= self._committed.get(field, 0):
            return False
        self._committed[field] = token
        return True

    def latest_issued(self, field: str) -> int:
        return self._issued.get(field, 0)
