"""Flask configuration."""

import os
from pathlib import Path

from invest_or_defend.storage import get_catalog_path, get_database_uri, get_storage_backend


class Config:
    """Base configuration."""

    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-key-change-in-prod")

    # Storage - instance folder is at project root
    PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
    INSTANCE_PATH = PROJECT_ROOT / "instance"
    STORAGE_BACKEND = get_storage_backend()
    DATABASE_URI = get_database_uri()

    # Catalog
    SEED_CATALOG = True
    CATALOG_PATH = get_catalog_path()

    # Simulation
    RANDOM_SEED = None


class TestConfig(Config):
    """Testing configuration."""

    TESTING = True
    STORAGE_BACKEND = "memory"
    DATABASE_URI = ":memory:"
    RANDOM_SEED = 1234
