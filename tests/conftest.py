"""
Pytest configuration and shared fixtures.

Provides an in-memory catalog provider that counts its calls, and a
LocalStore backed by a temporary SQLite file with a clock the tests can move.
"""

import os

import pytest
import pytest_asyncio

from comicshelf.database.store import LocalStore
from tests.factories import FakeClock, MockCatalogProvider


@pytest.fixture
def mock_provider():
    """Create an in-memory catalog provider."""
    return MockCatalogProvider()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'comicshelf.db'}"


@pytest_asyncio.fixture
async def store(database_url, clock):
    """Provide an initialized LocalStore on a temporary SQLite file."""
    local_store = LocalStore(database_url, clock=clock)
    await local_store.initialize()
    yield local_store
    await local_store.close()


@pytest.fixture
def mock_env_vars(database_url):
    """Mock environment variables for testing."""
    from comicshelf.providers.settings import reset_settings

    original_values = {}
    test_values = {
        'COMICVINE_API_KEY': 'test_api_key_12345',
        'COMICSHELF_DATABASE_URL': database_url,
        'COMICSHELF_CACHE_TTL': '3600',
        'COMICSHELF_BATCH_DELAY': '0',
    }

    # Store original values and set test values
    for key, value in test_values.items():
        original_values[key] = os.getenv(key)
        os.environ[key] = value

    # Reset settings to pick up new env vars
    reset_settings()

    yield test_values

    # Restore original values
    for key, original_value in original_values.items():
        if original_value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original_value

    # Reset settings again after restore
    reset_settings()
