"""Pytest fixtures for webapp tests."""

import pytest

from invest_or_defend.webapp.config import TestConfig


@pytest.fixture
def app():
    """Create test application backed by a fresh in-memory repository."""
    from invest_or_defend.webapp import create_app

    app = create_app(TestConfig)
    yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def new_game(client):
    """Factory creating a game through the API and returning the response JSON."""

    def _create(organisation_name="Acme", **settings):
        response = client.post("/games", json={"organisation_name": organisation_name, "settings": settings})
        assert response.status_code == 201
        return response.get_json()

    return _create
