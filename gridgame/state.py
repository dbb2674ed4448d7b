"""Estado de partida: tablero N×N, participantes y token de versión.

Los snapshots son inmutables; cada jugada aceptada produce un GameState nuevo.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class Mark(str, Enum):
    """Contenido de una casilla. X es la marca A (creador), O la marca B."""

    EMPTY = "empty"
    X = "X"
    O = "O"

    def opponent(self) -> "Mark":
        if self is Mark.X:
            return Mark.O
        if self is Mark.O:
            return Mark.X
        raise ValueError("EMPTY no tiene oponente")


class GameStatus(str, Enum):
    CREATED = "created"
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAW = "draw"

    @property
    def is_finished(self) -> bool:
        return self in (GameStatus.WON, GameStatus.DRAW)


@dataclass(frozen=True)
class Cell:
    row: int
    column: int
    value: Mark = Mark.EMPTY


@dataclass(frozen=True)
class Participant:
    """Sesión ligada a una marca durante toda la partida."""

    session_id: str
    mark: Mark


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_version() -> str:
    """Token opaco de versión; se regenera en cada mutación confirmada."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class GameState:
    """Snapshot completo de una partida."""

    id: str
    size: int
    win_length: int
    status: GameStatus
    cells: tuple[Cell, ...]
    moves_count: int
    created_at: datetime
    version: str
    player_x: Participant | None = None
    player_o: Participant | None = None
    current_turn: Mark = Mark.X
    last_move_at: datetime | None = None
    winner: Mark | None = None

    def in_bounds(self, row: int, column: int) -> bool:
        return 0 <= row < self.size and 0 <= column < self.size

    def cell_at(self, row: int, column: int) -> Cell:
        if not self.in_bounds(row, column):
            raise IndexError(f"Casilla fuera del tablero: ({row}, {column})")
        return self.cells[row * self.size + column]

    def with_cell(self, row: int, column: int, value: Mark) -> tuple[Cell, ...]:
        """Devuelve una copia de las casillas con (row, column) reemplazada."""
        index = row * self.size + column
        cells = list(self.cells)
        cells[index] = Cell(row=row, column=column, value=value)
        return tuple(cells)

    def participant_by_mark(self, mark: Mark) -> Participant | None:
        if mark is Mark.X:
            return self.player_x
        if mark is Mark.O:
            return self.player_o
        return None

    def participant_for(self, session_id: str | None) -> Participant | None:
        if not session_id:
            return None
        for participant in (self.player_x, self.player_o):
            if participant is not None and participant.session_id == session_id:
                return participant
        return None

    @property
    def current_participant(self) -> Participant | None:
        return self.participant_by_mark(self.current_turn)

    @property
    def is_full(self) -> bool:
        return self.player_x is not None and self.player_o is not None

    def bind_player_o(self, session_id: str) -> "GameState":
        """Asigna la marca O a la segunda sesión. Solo se puede hacer una vez."""
        if self.player_o is not None:
            raise ValueError("La marca O ya está asignada")
        return replace(self, player_o=Participant(session_id=session_id, mark=Mark.O))

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
            "moves_count": self.moves_count,
            "created_at": self.created_at.isoformat(),
            "last_move_at": self.last_move_at.isoformat() if self.last_move_at else None,
            "version": self.version,
            "player_x": _participant_to_dict(self.player_x),
            "player_o": _participant_to_dict(self.player_o),
            "current_turn": self.current_turn.value,
            "winner": self.winner.value if self.winner else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameState":
        if not isinstance(data, dict):
            raise ValueError("state_json inválido")
        try:
            return cls._from_checked_dict(data)
        except KeyError as exc:
            raise ValueError(f"state_json incompleto: falta {exc}") from exc

    @classmethod
    def _from_checked_dict(cls, data: dict[str, Any]) -> "GameState":
        size = int(data["size"])
        cells = tuple(
            Cell(row=int(c["row"]), column=int(c["column"]), value=Mark(c["value"]))
            for c in sorted(data.get("cells", []), key=lambda c: (int(c["row"]), int(c["column"])))
        )
        if len(cells) != size * size:
            raise ValueError(f"Se esperaban {size * size} casillas, hay {len(cells)}")
        last_move_at = data.get("last_move_at")
        winner = data.get("winner")
        return cls(
            id=str(data["id"]),
            size=size,
            win_length=int(data["win_length"]),
            status=GameStatus(data["status"]),
            cells=cells,
            moves_count=int(data.get("moves_count", 0)),
            created_at=datetime.fromisoformat(data["created_at"]),
            last_move_at=datetime.fromisoformat(last_move_at) if last_move_at else None,
            version=str(data["version"]),
            player_x=_participant_from_dict(data.get("player_x")),
            player_o=_participant_from_dict(data.get("player_o")),
            current_turn=Mark(data.get("current_turn", Mark.X.value)),
            winner=Mark(winner) if winner else None,
        )


def _participant_to_dict(participant: Participant | None) -> dict[str, str] | None:
    if participant is None:
        return None
    return {"session_id": participant.session_id, "mark": participant.mark.value}


def _participant_from_dict(data: Any) -> Participant | None:
    if not isinstance(data, dict) or not data.get("session_id"):
        return None
    return Participant(session_id=str(data["session_id"]), mark=Mark(data["mark"]))


def new_game_state(size: int, win_length: int, session_id: str) -> GameState:
    """Estado inicial: tablero vacío, estado CREATED y el creador ligado a X."""
    cells = tuple(
        Cell(row=row, column=column)
        for row in range(size)
        for column in range(size)
    )
    return GameState(
        id=str(uuid.uuid4()),
        size=size,
        win_length=win_length,
        status=GameStatus.CREATED,
        cells=cells,
        moves_count=0,
        created_at=utc_now(),
        version=new_version(),
        player_x=Participant(session_id=session_id, mark=Mark.X),
        player_o=None,
        current_turn=Mark.X,
    )


def is_game_id(value: str) -> bool:
    """True si `value` es un UUID en forma canónica, como los que emite new_game_state."""
    try:
        return str(uuid.UUID(value)) == value
    except (ValueError, TypeError, AttributeError):
        return False
