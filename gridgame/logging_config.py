"""Logging centralizado: terminal (con colores) + archivo por partida en modo CLI."""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path

import colorama

LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOGGER_NAME = "gridgame"
_game_id_var: ContextVar[str | None] = ContextVar("game_id", default=None)

_logger: logging.Logger | None = None

_LOG_FORMAT = "%(asctime)s | %(levelname)s | game=%(game_id)s | %(component)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def set_game_id(game_id: str) -> None:
    """Establece la partida activa para el contexto actual."""
    _game_id_var.set(game_id)


def get_game_id() -> str | None:
    return _game_id_var.get()


class PlainFormatter(logging.Formatter):
    """Formato sin códigos de color (para archivo)."""

    def __init__(self) -> None:
        super().__init__(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        record.game_id = getattr(record, "game_id", "-")
        record.component = getattr(record, "component", "-")
        return super().format(record)


class ColoredFormatter(PlainFormatter):
    """Formato con colores por nivel (para terminal)."""

    COLORS = {
        logging.DEBUG: colorama.Fore.CYAN,
        logging.INFO: colorama.Fore.GREEN,
        logging.WARNING: colorama.Fore.YELLOW,
        logging.ERROR: colorama.Fore.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        color = self.COLORS.get(record.levelno, "")
        return f"{color}{base}{colorama.Style.RESET_ALL}"


def _level_from_env(default: str) -> int:
    name = os.getenv("GRIDGAME_LOG_LEVEL", default).upper()
    return getattr(logging, name, getattr(logging, default))


def setup_session_logging(game_id: str) -> logging.Logger:
    """Modo terminal: archivo logs/game_<id>.log y stderr con colores."""
    global _logger
    colorama.just_fix_windows_console()
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    log_level = _level_from_env("INFO")

    _logger = logging.getLogger(LOGGER_NAME)
    _logger.setLevel(log_level)
    _logger.handlers.clear()

    file_handler = logging.FileHandler(LOG_DIR / f"game_{game_id}.log", encoding="utf-8")
    file_handler.setLevel(log_level)
    file_handler.setFormatter(PlainFormatter())
    _logger.addHandler(file_handler)

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(ColoredFormatter())
    _logger.addHandler(stream_handler)

    set_game_id(game_id)
    return _logger


def setup_api_logging() -> None:
    """Modo API: solo stderr, nivel WARNING salvo GRIDGAME_LOG_LEVEL."""
    global _logger
    log_level = _level_from_env("WARNING")

    _logger = logging.getLogger(LOGGER_NAME)
    _logger.setLevel(log_level)
    _logger.handlers.clear()

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(PlainFormatter())
    _logger.addHandler(stream_handler)

    for name in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(component: str, game_id: str | None = None) -> logging.LoggerAdapter:
    """Devuelve un LoggerAdapter con game_id y component."""
    gid = game_id if game_id is not None else (get_game_id() or "-")
    if _logger is None:
        # Sin setup previo (p. ej. tests): logger hijo sin handlers propios
        base = logging.getLogger(f"{LOGGER_NAME}.{component}")
        return logging.LoggerAdapter(base, {"game_id": gid, "component": component})
    return logging.LoggerAdapter(_logger, {"game_id": gid, "component": component})
