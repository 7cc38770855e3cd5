"""Shared test configuration for datagen-api tests.

Sets environment variables before any module imports so that the app is
built with the test-support routes mounted and per-IP limiting switched off.
"""

import os

# Disable per-IP limiting so tests can call public endpoints freely.
os.environ.setdefault("DATAGEN_API_RATE_LIMIT_ENABLED", "false")
# Mount DELETE /test/rate-limit/{api_key}.
os.environ.setdefault("DATAGEN_API_ENABLE_TEST_ROUTES", "true")

import pytest

from datagen_api.generators import GeneratorInstanceManager, get_generator_manager
from datagen_api.store import InMemoryKeyStore, get_key_store

TEST_API_KEY = "test-api-key"        # plan "test", high limit
FREE_TEST_API_KEY = "free-test-key"  # plan "free", limit 5
DISABLED_API_KEY = "disabled-key"


@pytest.fixture
def key_store():
    """In-memory store preloaded with the standard test keys."""
    return InMemoryKeyStore(initial={
        TEST_API_KEY: {"enabled": True, "plan": "test"},
        FREE_TEST_API_KEY: {"enabled": True, "plan": "free"},
        DISABLED_API_KEY: {"enabled": False, "plan": "pro"},
    })


@pytest.fixture
def generator_manager():
    return GeneratorInstanceManager()


@pytest.fixture
def app(key_store, generator_manager):
    """The FastAPI app wired to a fresh store and generator cache."""
    from datagen_api.main import app as _app

    _app.dependency_overrides[get_key_store] = lambda: key_store
    _app.dependency_overrides[get_generator_manager] = lambda: generator_manager
    yield _app
    _app.dependency_overrides.clear()


def auth_headers(api_key: str = TEST_API_KEY) -> dict:
    return {"X-API-Key": api_key}
