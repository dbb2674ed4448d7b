"""Configuración del motor leída de variables de entorno (.env cargado por app/CLI)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

_logger = logging.getLogger(__name__)

MIN_BOARD_SIZE = 3
MIN_WIN_LENGTH = 3


@dataclass(frozen=True)
class GameSettings:
    """Parámetros globales del motor. El tamaño y la línea ganadora se congelan en cada partida."""

    default_size: int = 3
    win_length: int = 3
    swap_probability: float = 0.10
    swap_interval: int = 3
    save_retries: int = 3

    def __post_init__(self) -> None:
        if self.default_size < MIN_BOARD_SIZE:
            raise ValueError(f"default_size debe ser >= {MIN_BOARD_SIZE}")
        if not MIN_WIN_LENGTH <= self.win_length <= self.default_size:
            raise ValueError(f"win_length debe estar entre {MIN_WIN_LENGTH} y default_size ({self.default_size})")
        if not 0.0 <= self.swap_probability <= 1.0:
            raise ValueError("swap_probability debe estar entre 0 y 1")
        if self.swap_interval < 1:
            raise ValueError("swap_interval debe ser >= 1")
        if self.save_retries < 1:
            raise ValueError("save_retries debe ser >= 1")

    def win_length_for(self, size: int) -> int:
        """Línea ganadora para un tablero concreto (nunca mayor que el tablero)."""
        return min(self.win_length, size)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        _logger.warning("Valor inválido para %s: %s. Usando %s.", name, raw, default)
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        _logger.warning("Valor inválido para %s: %s. Usando %s.", name, raw, default)
        return default


def load_settings() -> GameSettings:
    """Construye GameSettings desde GRIDGAME_*; ValueError si los valores son incoherentes."""
    defaults = GameSettings()
    return GameSettings(
        default_size=_env_int("GRIDGAME_DEFAULT_SIZE", defaults.default_size),
        win_length=_env_int("GRIDGAME_WIN_LENGTH", defaults.win_length),
        swap_probability=_env_float("GRIDGAME_SWAP_PROBABILITY", defaults.swap_probability),
        swap_interval=_env_int("GRIDGAME_SWAP_INTERVAL", defaults.swap_interval),
        save_retries=_env_int("GRIDGAME_SAVE_RETRIES", defaults.save_retries),
    )
