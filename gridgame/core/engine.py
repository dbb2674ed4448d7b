"""Motor de reglas: evalúa una jugada sobre un snapshot. Sin I/O ni almacenamiento."""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import Callable, Iterator

from ..config import GameSettings
from ..errors import ErrorKind
from ..state import GameState, GameStatus, Mark, new_version, utc_now

# Horizontal, vertical, diagonal principal y antidiagonal.
_DIRECTIONS: tuple[tuple[int, int], ...] = ((0, 1), (1, 0), (1, 1), (1, -1))


@dataclass(frozen=True)
class MoveRejected:
    """Jugada rechazada por el motor; el estado de entrada no cambia."""

    reason: ErrorKind
    message: str


class GameEngine:
    """Transición de estado pura salvo por la regla de cambio aleatorio de símbolo.

    Regla de cambio de símbolo: cada `swap_interval` jugadas (contando las ya
    hechas, sin incluir la primera) la jugada tiene una probabilidad
    `swap_probability` de registrarse con la marca del rival en lugar de la
    propia. La fuente aleatoria se inyecta para poder fijar ambos resultados en tests.
    """

    def __init__(self, settings: GameSettings | None = None, rng: Callable[[], float] | None = None) -> None:
        self._settings = settings or GameSettings()
        self._rng = rng or random.random

    @property
    def settings(self) -> GameSettings:
        return self._settings

    def evaluate(self, state: GameState, row: int, column: int, acting_mark: Mark) -> GameState | MoveRejected:
        """Aplica la jugada de `acting_mark` en (row, column) o devuelve el motivo de rechazo."""
        if state.status.is_finished:
            return MoveRejected(ErrorKind.GAME_FINISHED, "Game is already finished")
        if not state.in_bounds(row, column):
            return MoveRejected(
                ErrorKind.OUT_OF_BOUNDS,
                f"Invalid cell position ({row}, {column}) for size {state.size}",
            )
        if state.cell_at(row, column).value is not Mark.EMPTY:
            return MoveRejected(ErrorKind.CELL_OCCUPIED, "Cell is already occupied")

        symbol = self._symbol_for(state.moves_count, acting_mark)
        played = replace(
            state,
            cells=state.with_cell(row, column, symbol),
            moves_count=state.moves_count + 1,
            last_move_at=utc_now(),
            version=new_version(),
        )

        if self.check_win(played, row, column):
            return replace(played, status=GameStatus.WON, winner=symbol)
        if self.is_board_full(played):
            return replace(played, status=GameStatus.DRAW)
        return replace(
            played,
            status=GameStatus.IN_PROGRESS,
            current_turn=self._next_turn(played, acting_mark),
        )

    def _symbol_for(self, moves_count: int, acting_mark: Mark) -> Mark:
        interval = self._settings.swap_interval
        if moves_count > 0 and moves_count % interval == 0:
            if self._rng() < self._settings.swap_probability:
                return acting_mark.opponent()
        return acting_mark

    @staticmethod
    def _next_turn(state: GameState, acting_mark: Mark) -> Mark:
        # Sin rival ligado el turno se queda con el único participante.
        opponent = acting_mark.opponent()
        if state.participant_by_mark(opponent) is None:
            return acting_mark
        return opponent

    @staticmethod
    def is_board_full(state: GameState) -> bool:
        return all(cell.value is not Mark.EMPTY for cell in state.cells)

    @staticmethod
    def check_win(state: GameState, row: int, column: int) -> bool:
        """True si alguna de las cuatro líneas que pasan por (row, column) tiene una racha de win_length."""
        mark = state.cell_at(row, column).value
        if mark is Mark.EMPTY:
            return False
        for d_row, d_col in _DIRECTIONS:
            count = 0
            for r, c in _line_through(state.size, row, column, d_row, d_col):
                if state.cell_at(r, c).value is mark:
                    count += 1
                else:
                    count = 0
                if count >= state.win_length:
                    return True
        return False


def _line_through(size: int, row: int, column: int, d_row: int, d_col: int) -> Iterator[tuple[int, int]]:
    """Recorre la línea completa del tablero que pasa por (row, column) en la dirección dada."""
    r, c = row, column
    while 0 <= r - d_row < size and 0 <= c - d_col < size:
        r -= d_row
        c -= d_col
    while 0 <= r < size and 0 <= c < size:
        yield r, c
        r += d_row
        c += d_col
