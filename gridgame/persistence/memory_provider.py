"""PersistenceProvider en memoria del proceso (CLI y tests)."""

from __future__ import annotations

import threading

from ..state import GameState
from .provider import PersistenceProvider, VersionConflictError


class InMemoryPersistenceProvider(PersistenceProvider):
    """Registro en memoria; los snapshots son inmutables, así que se guardan tal cual."""

    def __init__(self) -> None:
        self._registry: dict[str, GameState] = {}
        self._lock = threading.Lock()

    def create_game(self, state: GameState) -> GameState:
        with self._lock:
            if state.id in self._registry:
                raise ValueError(f"Game already exists: {state.id}")
            self._registry[state.id] = state
        return state

    def get_game(self, game_id: str) -> GameState:
        with self._lock:
            try:
                return self._registry[game_id]
            except KeyError:
                raise KeyError(f"Game not found: {game_id}") from None

    def save_game_state(self, state: GameState, expected_version: str) -> GameState:
        with self._lock:
            stored = self._registry.get(state.id)
            if stored is None:
                raise KeyError(f"Game not found: {state.id}")
            if stored.version != expected_version:
                raise VersionConflictError(state.id, expected_version, stored.version)
            self._registry[state.id] = state
        return state
