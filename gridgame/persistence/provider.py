"""Contrato de persistencia para partidas."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..state import GameState


class VersionConflictError(Exception):
    """La versión almacenada ya no coincide con la versión leída por quien guarda."""

    def __init__(self, game_id: str, expected_version: str, actual_version: str | None = None) -> None:
        super().__init__(f"Version conflict on game {game_id}: expected {expected_version}, found {actual_version}")
        self.game_id = game_id
        self.expected_version = expected_version
        self.actual_version = actual_version


class PersistenceProvider(ABC):
    """Interfaz de almacenamiento desacoplada del coordinador."""

    @abstractmethod
    def create_game(self, state: GameState) -> GameState:
        """Guarda una partida nueva tal cual llega (id y versión incluidos)."""

    @abstractmethod
    def get_game(self, game_id: str) -> GameState:
        """Recupera el snapshot actual. Lanza KeyError si no existe."""

    @abstractmethod
    def save_game_state(self, state: GameState, expected_version: str) -> GameState:
        """Guarda el snapshot solo si la versión almacenada sigue siendo `expected_version`.

        Lanza VersionConflictError si otra escritura se adelantó y KeyError si la partida no existe.
        """
