"""Implementación JSON de PersistenceProvider."""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from ..state import GameState, is_game_id
from .provider import PersistenceProvider, VersionConflictError

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class JsonPersistenceProvider(PersistenceProvider):
    """Persistencia en filesystem: un directorio por partida con state.json.

    El compare-and-set de versión es atómico dentro del proceso (lock) y cada
    escritura reemplaza el fichero completo, nunca deja un JSON a medias.
    """

    def __init__(self, base_path: Path | None = None) -> None:
        self._root = self._resolve_base_path(base_path)
        self._root.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    @staticmethod
    def _resolve_base_path(base_path: Path | None = None) -> Path:
        if base_path is not None:
            return base_path
        configured = os.getenv("GRIDGAME_GAMES_DIR", "").strip()
        if configured:
            candidate = Path(configured)
            return candidate if candidate.is_absolute() else (PROJECT_ROOT / candidate)
        return PROJECT_ROOT / "games"

    def _game_dir(self, game_id: str) -> Path:
        if not is_game_id(game_id):
            raise KeyError(f"Game not found: {game_id}")
        return self._root / game_id

    @staticmethod
    def _read_json(path: Path) -> Any:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)

    @staticmethod
    def _write_json(path: Path, data: Any) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".state-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _state_path(self, game_id: str) -> Path:
        path = self._game_dir(game_id) / "state.json"
        if not path.exists():
            raise KeyError(f"Game not found: {game_id}")
        return path

    def create_game(self, state: GameState) -> GameState:
        with self._lock:
            game_dir = self._game_dir(state.id)
            game_dir.mkdir(parents=True, exist_ok=False)
            self._write_json(game_dir / "state.json", state.to_dict())
        return state

    def get_game(self, game_id: str) -> GameState:
        with self._lock:
            path = self._state_path(game_id)
            return GameState.from_dict(self._read_json(path))

    def save_game_state(self, state: GameState, expected_version: str) -> GameState:
        with self._lock:
            path = self._state_path(state.id)
            stored = self._read_json(path)
            stored_version = stored.get("version") if isinstance(stored, dict) else None
            if stored_version != expected_version:
                raise VersionConflictError(state.id, expected_version, stored_version)
            self._write_json(path, state.to_dict())
        return state
