"""Core: motor de reglas y coordinador de sesiones (sin HTTP)."""

from .coordinator import GameView, SessionCoordinator, create_coordinator, project_view
from .engine import GameEngine, MoveRejected

__all__ = [
    "GameEngine",
    "GameView",
    "MoveRejected",
    "SessionCoordinator",
    "create_coordinator",
    "project_view",
]
