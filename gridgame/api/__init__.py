"""API HTTP FastAPI para el coordinador de partidas."""

from .app import app
from .dependencies import get_coordinator

__all__ = ["app", "get_coordinator"]
