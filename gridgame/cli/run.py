"""Partida por terminal: dos sesiones locales que se turnan contra el coordinador."""

import os
import uuid

from gridgame.core import create_coordinator
from gridgame.errors import GameError
from gridgame.io_adapters import (
    InputProvider,
    OutputHandler,
    TerminalInputProvider,
    TerminalOutputHandler,
)
from gridgame.logging_config import get_logger, set_game_id, setup_session_logging
from gridgame.persistence import create_persistence_provider
from gridgame.persistence.memory_provider import InMemoryPersistenceProvider


def play_game(
    coordinator,
    input_provider: InputProvider,
    output_handler: OutputHandler,
    size: int | None = None,
):
    """Ejecuta una partida completa en hot-seat. Devuelve la última vista o None si se abandonó."""
    sessions = {"X": f"local-x-{uuid.uuid4().hex[:8]}", "O": f"local-o-{uuid.uuid4().hex[:8]}"}
    view = coordinator.create_game(session_id=sessions["X"], size=size)
    set_game_id(view.id)
    logger = get_logger("CLI")
    logger.info("Game %s created (size=%d, win_length=%d)", view.id, view.size, view.win_length)

    label = "X"
    output_handler.on_board(view)
    while not view.status.is_finished:
        move = input_provider.get_move(label)
        if move.user_exit:
            logger.info("Player %s left the game", label)
            return None
        try:
            view = coordinator.make_move(view.id, move.row, move.column, session_id=sessions[label])
        except GameError as exc:
            output_handler.on_error(f"Jugada rechazada: {exc.message}")
            continue
        output_handler.on_board(view)
        label = "O" if label == "X" else "X"

    logger.info("Game finished: status=%s winner=%s", view.status.value, view.winner)
    output_handler.on_game_ended(view)
    return view


def run_terminal() -> None:
    """Bucle de terminal: crea partida, pide jugadas y muestra el tablero."""
    setup_session_logging(f"cli-{uuid.uuid4().hex[:8]}")
    logger = get_logger("CLI")

    # Sin PERSISTENCE_MODE explícito la partida vive solo en memoria.
    if os.getenv("PERSISTENCE_MODE", "").strip():
        provider = create_persistence_provider()
    else:
        provider = InMemoryPersistenceProvider()
    coordinator = create_coordinator(persistence_provider=provider)

    print("=== Tres en raya ===")
    print(f"Tablero {coordinator.settings.default_size}×{coordinator.settings.default_size}, "
          f"{coordinator.settings.win_length} en línea. Escribe 'q' para salir.")
    try:
        play_game(coordinator, TerminalInputProvider(), TerminalOutputHandler())
    except Exception as e:
        logger.error("Error durante la ejecución: %s", e, exc_info=True)
        print(f"\nError: {e}")
    finally:
        logger.info("Session ended")
