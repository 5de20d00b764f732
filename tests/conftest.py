"""
- Seeded RNG so AI choices are repeatable per test
- A fresh in-memory store per test
- Provide a client fixture (TestClient(app)) whose routes use that store
"""
import os
import random

import pytest
from fastapi.testclient import TestClient

# Keep test runs quiet and independent of a developer's local .env
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from deadwounded.main import app, get_store
from deadwounded.store import MatchStore


@pytest.fixture
def rng() -> random.Random:
    return random.Random(20240611)


@pytest.fixture
def store(rng) -> MatchStore:
    return MatchStore(rng=rng)


@pytest.fixture(autouse=True)
def override_store(store):
    """Force the app to use this test's store for every request."""
    app.dependency_overrides[get_store] = lambda: store
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    # Talks to the FastAPI app in-process
    return TestClient(app)
