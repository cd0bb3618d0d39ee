"""Shared fixtures for Restaurant API tests."""

import pytest
from fastapi.testclient import TestClient

from restaurant_api import config as config_module
from restaurant_api.config import Config
from restaurant_api.server import app
from restaurant_api.services import RestaurantStore


@pytest.fixture
def le_pigeon() -> dict:
    """Request body for a sample restaurant."""
    return {
        "name": "Le Pigeon",
        "stars": 4,
        "address": "123 Main",
        "chef": "Gabriel",
    }


@pytest.fixture
def store():
    """Create an in-memory restaurant store."""
    restaurant_store = RestaurantStore(":memory:")
    yield restaurant_store
    restaurant_store.close()


@pytest.fixture
def test_config(tmp_path, monkeypatch) -> Config:
    """Point the global config at a temporary database file."""
    cfg = Config(database_path=str(tmp_path / "data" / "restaurants.db"))
    monkeypatch.setattr(config_module, "config", cfg)
    return cfg


@pytest.fixture
def client(test_config):
    """Run the app (including its lifespan) against a temporary database."""
    with TestClient(app) as test_client:
        yield test_client
