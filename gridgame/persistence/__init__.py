"""Capa de persistencia (json/db/memory) para partidas."""

from .provider import PersistenceProvider, VersionConflictError
from .factory import create_persistence_provider

__all__ = ["PersistenceProvider", "VersionConflictError", "create_persistence_provider"]
