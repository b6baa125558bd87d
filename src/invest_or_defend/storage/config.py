"""Storage configuration for Invest or Defend.

This module provides configuration for storage backends and a factory
function creating the appropriate repository based on configuration.
"""

import os
from enum import Enum

from .memory_repo import MemoryRepository
from .repository import SimulationRepository
from .sqlite_repo import SQLiteRepository


class StorageBackend(Enum):
    """Available storage backends."""

    MEMORY = "memory"
    SQLITE = "sqlite"


# Default configuration (can be overridden via environment variables)
DEFAULT_STORAGE_BACKEND = StorageBackend.MEMORY
DEFAULT_DATABASE_URI = "instance/invest_or_defend.db"


def get_storage_backend() -> StorageBackend:
    """Get configured storage backend from environment.

    Returns:
        StorageBackend enum value
    """
    backend_str = os.environ.get("INVEST_OR_DEFEND_STORAGE_BACKEND", "memory").lower()
    if backend_str == "sqlite":
        return StorageBackend.SQLITE
    return StorageBackend.MEMORY


def get_database_uri() -> str:
    """Get configured database URI from environment."""
    return os.environ.get("INVEST_OR_DEFEND_DATABASE_URI", DEFAULT_DATABASE_URI)


def get_catalog_path() -> str | None:
    """Get configured catalog file from environment (None = packaged default)."""
    return os.environ.get("INVEST_OR_DEFEND_CATALOG_PATH")


def get_repository(
    backend: StorageBackend | None = None,
    database_uri: str | None = None,
) -> SimulationRepository:
    """Factory function to create a repository.

    Args:
        backend: Storage backend to use. If None, uses environment config.
        database_uri: SQLite database path. If None, uses environment config.

    Returns:
        SimulationRepository instance
    """
    if backend is None:
        backend = get_storage_backend()

    if backend == StorageBackend.SQLITE:
        return SQLiteRepository(database_uri or get_database_uri())
    return MemoryRepository()
