"""Fixtures compartidos para tests."""

from dataclasses import replace

import pytest

from gridgame.config import GameSettings
from gridgame.core import GameEngine, SessionCoordinator
from gridgame.persistence.json_provider import JsonPersistenceProvider
from gridgame.persistence.memory_provider import InMemoryPersistenceProvider
from gridgame.state import Cell, GameStatus, Mark, Participant, new_game_state

_CHARS = {"X": Mark.X, "O": Mark.O, ".": Mark.EMPTY}


def never_swap() -> float:
    """Fuente aleatoria que nunca dispara el cambio de símbolo."""
    return 0.99


@pytest.fixture
def engine() -> GameEngine:
    """Motor con la configuración de referencia y sin cambios de símbolo."""
    return GameEngine(GameSettings(), rng=never_swap)


@pytest.fixture
def memory_provider() -> InMemoryPersistenceProvider:
    return InMemoryPersistenceProvider()


@pytest.fixture
def json_provider(tmp_path) -> JsonPersistenceProvider:
    return JsonPersistenceProvider(base_path=tmp_path)


@pytest.fixture
def coordinator(json_provider, engine) -> SessionCoordinator:
    """Coordinador determinista sobre almacenamiento JSON en tmp_path."""
    return SessionCoordinator(json_provider, engine=engine)


@pytest.fixture
def make_state():
    """Construye un GameState desde filas de texto ('X', 'O', '.').

    Por defecto X es 'sess-x', O es 'sess-o' y el turno es de X.
    """

    def _make(rows, current_turn=Mark.X, bind_o=True, status=None, win_length=None):
        size = len(rows)
        base = new_game_state(size, win_length or min(3, size), "sess-x")
        cells = tuple(
            Cell(row=r, column=c, value=_CHARS[ch])
            for r, line in enumerate(rows)
            for c, ch in enumerate(line)
        )
        moves = sum(1 for cell in cells if cell.value is not Mark.EMPTY)
        if status is None:
            status = GameStatus.IN_PROGRESS if moves else GameStatus.CREATED
        return replace(
            base,
            cells=cells,
            moves_count=moves,
            status=status,
            current_turn=current_turn,
            player_o=Participant("sess-o", Mark.O) if bind_o else None,
        )

    return _make
