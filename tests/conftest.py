"""Shared pytest fixtures and markers for all tests."""

import pytest
from support import seed_test_catalog

from invest_or_defend.storage import MemoryRepository


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "webapp: marks webapp-specific tests"
    )


@pytest.fixture
def repository():
    """In-memory repository holding the small test catalog."""
    repo = MemoryRepository()
    seed_test_catalog(repo)
    return repo
