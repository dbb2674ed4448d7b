"""Cliente de terminal."""

from .run import play_game, run_terminal

__all__ = ["play_game", "run_terminal"]
