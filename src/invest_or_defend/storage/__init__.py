"""Storage module for Invest or Defend.

This module provides the repository interface the simulation core depends
on, plus memory and SQLite implementations.

Usage:
    from invest_or_defend.storage import get_repository, seed_catalog

    # Get repository using configured backend (from environment)
    repository = get_repository()
    seed_catalog(repository)

    # Or specify backend explicitly
    from invest_or_defend.storage import StorageBackend
    repository = get_repository(StorageBackend.SQLITE)

Configuration via environment variables:
    INVEST_OR_DEFEND_STORAGE_BACKEND: "memory" or "sqlite" (default: "memory")
    INVEST_OR_DEFEND_DATABASE_URI: SQLite database path (default: "instance/invest_or_defend.db")
    INVEST_OR_DEFEND_CATALOG_PATH: Catalog JSON file (default: packaged catalog)
"""

from .config import (
    StorageBackend,
    get_catalog_path,
    get_database_uri,
    get_repository,
    get_storage_backend,
)
from .memory_repo import MemoryRepository
from .repository import DocumentRepository, SimulationRepository
from .seed import default_catalog_path, load_catalog_file, seed_catalog
from .sqlite_repo import SQLiteRepository

__all__ = [
    # Abstract interfaces
    "SimulationRepository",
    "DocumentRepository",
    # Implementations
    "MemoryRepository",
    "SQLiteRepository",
    # Configuration
    "StorageBackend",
    "get_storage_backend",
    "get_database_uri",
    "get_catalog_path",
    # Factory functions
    "get_repository",
    # Seeding
    "default_catalog_path",
    "load_catalog_file",
    "seed_catalog",
]
