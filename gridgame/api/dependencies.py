"""Dependencias FastAPI: coordinador y persistencia singleton."""

from gridgame.core import create_coordinator
from gridgame.persistence import create_persistence_provider

_coordinator = None
_persistence = None


def get_persistence_provider():
    global _persistence
    if _persistence is None:
        _persistence = create_persistence_provider()
    return _persistence


def get_coordinator():
    global _coordinator
    if _coordinator is None:
        _coordinator = create_coordinator(persistence_provider=get_persistence_provider())
    return _coordinator
