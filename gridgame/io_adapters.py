"""Abstracciones de I/O para desacoplar el coordinador de terminal/HTTP.

El coordinador no conoce input() ni print(); el cliente de terminal recibe
InputProvider y OutputHandler por inyección.
"""

from dataclasses import dataclass
from typing import Protocol

from .core import GameView
from .renderer import render_board
from .state import GameStatus


@dataclass
class MoveInput:
    """Resultado de pedir una jugada al jugador."""
    row: int | None
    column: int | None
    user_exit: bool  # True si el jugador pidió salir (exit/quit/salir/q)


class InputProvider(Protocol):
    """Provee la siguiente jugada del jugador indicado."""

    def get_move(self, player_label: str) -> MoveInput:
        """Obtiene la jugada. Bloquea hasta que haya entrada (en terminal)."""
        ...


class OutputHandler(Protocol):
    """Recibe eventos de la partida para mostrarlos."""

    def on_board(self, view: GameView) -> None:
        ...

    def on_game_ended(self, view: GameView) -> None:
        ...

    def on_error(self, msg: str) -> None:
        ...


# --- Implementaciones para terminal ---


class TerminalInputProvider:
    """InputProvider que lee 'fila columna' con input() y detecta comandos de salida."""

    EXIT_COMMANDS = {"exit", "quit", "salir", "q"}

    def get_move(self, player_label: str) -> MoveInput:
        while True:
            raw = input(f"{player_label} (fila columna): ").strip()
            if raw.lower() in self.EXIT_COMMANDS:
                return MoveInput(row=None, column=None, user_exit=True)
            parts = raw.replace(",", " ").split()
            if len(parts) == 2 and all(p.lstrip("-").isdigit() for p in parts):
                return MoveInput(row=int(parts[0]), column=int(parts[1]), user_exit=False)
            print("Formato: dos números separados por espacio, p. ej. '1 2'.")


class TerminalOutputHandler:
    """OutputHandler que imprime el tablero y el resultado en stdout."""

    def on_board(self, view: GameView) -> None:
        print()
        print(render_board(view))
        print()

    def on_game_ended(self, view: GameView) -> None:
        print("=== Partida terminada ===")
        if view.status is GameStatus.WON and view.winner is not None:
            print(f"Gana {view.winner.value}.")
        else:
            print("Empate.")
        print()

    def on_error(self, msg: str) -> None:
        print(msg)
