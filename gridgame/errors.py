"""Errores de dominio del motor y del coordinador de sesiones."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_SIZE = "invalid_size"
    NOT_FOUND = "not_found"
    GAME_FINISHED = "game_finished"
    NOT_YOUR_TURN = "not_your_turn"
    GAME_FULL = "game_full"
    OUT_OF_BOUNDS = "out_of_bounds"
    CELL_OCCUPIED = "cell_occupied"
    CONCURRENT_MODIFICATION = "concurrent_modification"


class GameError(Exception):
    """Fallo tipado que cruza la frontera del core. La capa HTTP lo traduce por `kind`."""

    kind: ErrorKind

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.kind.value)
        self.message = message or self.kind.value


class InvalidSizeError(GameError):
    kind = ErrorKind.INVALID_SIZE


class GameNotFoundError(GameError):
    kind = ErrorKind.NOT_FOUND


class GameFinishedError(GameError):
    kind = ErrorKind.GAME_FINISHED


class NotYourTurnError(GameError):
    kind = ErrorKind.NOT_YOUR_TURN


class GameFullError(GameError):
    kind = ErrorKind.GAME_FULL


class OutOfBoundsError(GameError):
    kind = ErrorKind.OUT_OF_BOUNDS


class CellOccupiedError(GameError):
    kind = ErrorKind.CELL_OCCUPIED


class ConcurrentModificationError(GameError):
    kind = ErrorKind.CONCURRENT_MODIFICATION


_ERRORS_BY_KIND: dict[ErrorKind, type[GameError]] = {
    cls.kind: cls
    for cls in (
        InvalidSizeError,
        GameNotFoundError,
        GameFinishedError,
        NotYourTurnError,
        GameFullError,
        OutOfBoundsError,
        CellOccupiedError,
        ConcurrentModificationError,
    )
}


def error_for(kind: ErrorKind, message: str = "") -> GameError:
    """Construye la excepción tipada correspondiente a un ErrorKind."""
    return _ERRORS_BY_KIND[kind](message)
