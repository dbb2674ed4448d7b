"""Coordinador de sesiones: identidad, turnos, idempotencia y proyección por jugador.

Es el único componente que habla con el PersistenceProvider.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..config import MIN_BOARD_SIZE, GameSettings, load_settings
from ..errors import (
    ConcurrentModificationError,
    GameFinishedError,
    GameFullError,
    GameNotFoundError,
    InvalidSizeError,
    NotYourTurnError,
    error_for,
)
from ..logging_config import get_logger
from ..persistence import PersistenceProvider, VersionConflictError, create_persistence_provider
from ..state import Cell, GameState, GameStatus, Mark, is_game_id, new_game_state
from .engine import GameEngine, MoveRejected


@dataclass(frozen=True)
class GameView:
    """Partida vista por un solicitante concreto."""

    id: str
    size: int
    win_length: int
    status: GameStatus
    cells: tuple[Cell, ...]
    version: str
    moves_count: int
    current_player_session_id: str | None
    is_your_turn: bool
    your_symbol: Mark | None
    winner: Mark | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "size": self.size,
            "win_length": self.win_length,
            "status": self.status.value,
            "cells": [
                {"row": c.row, "column": c.column, "value": c.value.value}
                for c in self.cells
            ],
            "etag": self.version,
            "moves_count": self.moves_count,
            "current_player_session_id": self.current_player_session_id,
            "is_your_turn": self.is_your_turn,
            "your_symbol": self.your_symbol.value if self.your_symbol else None,
            "winner": self.winner.value if self.winner else None,
        }


def project_view(state: GameState, session_id: str | None) -> GameView:
    """Oculta turno y símbolo a quien no participa en la partida."""
    participant = state.participant_for(session_id)
    current = state.current_participant
    is_participant = participant is not None
    return GameView(
        id=state.id,
        size=state.size,
        win_length=state.win_length,
        status=state.status,
        cells=state.cells,
        version=state.version,
        moves_count=state.moves_count,
        current_player_session_id=current.session_id if (is_participant and current) else None,
        is_your_turn=bool(is_participant and current and current.session_id == session_id),
        your_symbol=participant.mark if participant else None,
        winner=state.winner,
    )


class SessionCoordinator:
    """Crea partidas, las proyecta y aplica jugadas con control optimista de versión."""

    def __init__(
        self,
        persistence_provider: PersistenceProvider,
        settings: GameSettings | None = None,
        engine: GameEngine | None = None,
    ) -> None:
        self._persistence = persistence_provider
        self._settings = settings or (engine.settings if engine else GameSettings())
        self._engine = engine or GameEngine(self._settings)

    @property
    def settings(self) -> GameSettings:
        return self._settings

    def create_game(self, session_id: str, size: int | None = None) -> GameView:
        """Crea una partida vacía con el creador como X. InvalidSizeError si size < 3."""
        if not session_id:
            raise NotYourTurnError("A player session id is required")
        size = self._settings.default_size if size is None else size
        if size < MIN_BOARD_SIZE:
            raise InvalidSizeError(f"Size must be at least {MIN_BOARD_SIZE}")
        state = new_game_state(size, self._settings.win_length_for(size), session_id)
        created = self._persistence.create_game(state)
        get_logger("Coordinator", game_id=created.id).debug(
            "Game created size=%d win_length=%d", created.size, created.win_length
        )
        return project_view(created, session_id)

    def get_game(self, game_id: str, session_id: str | None = None) -> GameView:
        return project_view(self._load(game_id), session_id)

    def make_move(
        self,
        game_id: str,
        row: int,
        column: int,
        session_id: str,
        expected_version: str | None = None,
    ) -> GameView:
        """Aplica una jugada. Reintenta load→validar→evaluar→guardar ante conflictos de versión.

        Si `expected_version` coincide con la versión almacenada se devuelve la vista
        actual sin evaluar nada (reintento idempotente del cliente).
        """
        log = get_logger("Coordinator", game_id=game_id)
        attempts = self._settings.save_retries
        for attempt in range(1, attempts + 1):
            state = self._load(game_id)
            if expected_version and expected_version == state.version:
                log.debug("Idempotent replay for version %s", expected_version)
                return project_view(state, session_id)

            candidate, acting_mark = self._authorize(state, session_id)
            outcome = self._engine.evaluate(candidate, row, column, acting_mark)
            if isinstance(outcome, MoveRejected):
                raise error_for(outcome.reason, outcome.message)

            try:
                saved = self._persistence.save_game_state(outcome, expected_version=state.version)
            except VersionConflictError as exc:
                log.warning("Version conflict (attempt %d/%d): %s", attempt, attempts, exc)
                continue
            except KeyError:
                raise GameNotFoundError(f"Game with ID {game_id} was not found") from None
            log.debug(
                "Move (%d, %d) by %s committed: status=%s moves=%d",
                row,
                column,
                acting_mark.value,
                saved.status.value,
                saved.moves_count,
            )
            return project_view(saved, session_id)

        log.warning("Giving up after %d conflicting attempts", attempts)
        raise ConcurrentModificationError(f"Game {game_id} was modified concurrently; retry the request")

    def _load(self, game_id: str) -> GameState:
        if not is_game_id(game_id):
            raise GameNotFoundError(f"Game with ID {game_id} was not found")
        try:
            return self._persistence.get_game(game_id)
        except KeyError:
            raise GameNotFoundError(f"Game with ID {game_id} was not found") from None

    @staticmethod
    def _authorize(state: GameState, session_id: str) -> tuple[GameState, Mark]:
        """Valida identidad y turno; liga la marca O a la segunda sesión si hace falta."""
        if state.status.is_finished:
            raise GameFinishedError("Game is already finished")
        if not session_id:
            raise NotYourTurnError("A player session id is required")

        participant = state.participant_for(session_id)
        if participant is not None:
            if participant.mark is not state.current_turn:
                raise NotYourTurnError("It's not your turn")
            return state, participant.mark

        if state.player_o is not None:
            raise GameFullError("Game is full")
        # X abre siempre; la segunda sesión solo puede unirse una vez empezada la partida.
        if state.status is GameStatus.CREATED:
            raise NotYourTurnError("It's not your turn")
        return state.bind_player_o(session_id), Mark.O


def create_coordinator(
    persistence_provider: PersistenceProvider | None = None,
    settings: GameSettings | None = None,
) -> SessionCoordinator:
    """Factory: una instancia del coordinador (para API, CLI o tests)."""
    return SessionCoordinator(
        persistence_provider=persistence_provider or create_persistence_provider(),
        settings=settings or load_settings(),
    )
