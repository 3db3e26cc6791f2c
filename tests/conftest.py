"""Pytest configuration and shared fixtures."""

import os
import tempfile
from datetime import date
from typing import Generator

# Keep configuration, database and logs out of the real home directory.
# Must run before anything imports tracklife.
_test_data_dir = tempfile.mkdtemp(prefix="tracklife-tests-")
os.environ["TRACKLIFE_USER_DATA_DIR"] = _test_data_dir
os.environ["TRACKLIFE_DATABASE_URL"] = f"sqlite:///{os.path.join(_test_data_dir, 'tracklife.db')}"
os.environ["TRACKLIFE_LOG_TO_FILE"] = "0"

import pytest
from fastapi.testclient import TestClient

from tracklife.storage.memory_impl import MemoryStorage
from tracklife.storage.sqlalchemy_impl import SQLAlchemyStorage
from tracklife.store.registry import TrackerStores


@pytest.fixture
def memory_storage() -> MemoryStorage:
    """Fresh in-memory key-value storage."""
    return MemoryStorage()


@pytest.fixture
def stores(memory_storage: MemoryStorage) -> TrackerStores:
    """Tracker stores over in-memory storage."""
    return TrackerStores(memory_storage)


@pytest.fixture
def sqlite_storage(tmp_path) -> Generator[SQLAlchemyStorage, None, None]:
    """SQLAlchemy storage backed by a temporary SQLite file."""
    storage = SQLAlchemyStorage(database_url=f"sqlite:///{tmp_path / 'tracklife.db'}")
    yield storage
    storage.close()


@pytest.fixture
def today() -> date:
    """A fixed reference day: Friday 15 March 2024 (its week runs Sun 10 - Sat 16)."""
    return date(2024, 3, 15)


@pytest.fixture
def client(memory_storage: MemoryStorage) -> Generator[TestClient, None, None]:
    """Create a test client whose storage is the in-memory fake."""
    from tracklife.main import app
    from tracklife.storage.dependencies import set_storage

    set_storage(memory_storage)

    with TestClient(app) as test_client:
        yield test_client

    set_storage(None)
