"""
@file: conftest.py
@description:
This module provides pytest fixtures for the blobstash test suite.

Fixtures include:
- Settings pointing at a throwaway SQLite database
- An in-memory blob store that records every call
- Test clients backed by the real database store or the in-memory one
- Environment configuration for testing

@dependencies:
- pytest: For test framework and fixtures
- fastapi.testclient: For testing FastAPI applications
- aiosqlite: SQLite driver for SQLAlchemy's asyncio engine

@notes:
- Database-backed tests use a SQLite file under tmp_path, so every test gets
  a fresh database
- The settings cache is cleared around each test so environment changes apply
"""

import os
from typing import Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient
from ulid import ULID

from blobstash.core.config import Settings, get_settings
from blobstash.main import create_app


class MemoryBlobStore:
    """In-memory stand-in for BlobStore that records every call."""

    def __init__(self):
        self.entries: Dict[ULID, bytes] = {}
        self.calls: List[Tuple[str, ULID]] = []

    async def put(self, entry_id: ULID, value: bytes) -> None:
        self.calls.append(("put", entry_id))
        self.entries[entry_id] = value

    async def get(self, entry_id: ULID) -> Optional[bytes]:
        self.calls.append(("get", entry_id))
        return self.entries.get(entry_id)


@pytest.fixture(autouse=True)
def setup_test_environment():
    """
    Fixture that sets up the test environment.
    This fixture runs automatically for each test.
    """
    original_env = {}
    test_env = {
        "DATABASE_URL": "sqlite+aiosqlite:///:memory:",
        "LOG_LEVEL": "DEBUG",
    }

    for key, value in test_env.items():
        if key in os.environ:
            original_env[key] = os.environ[key]
        os.environ[key] = value
    get_settings.cache_clear()

    yield

    for key in test_env:
        if key in original_env:
            os.environ[key] = original_env[key]
        else:
            del os.environ[key]
    get_settings.cache_clear()


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'blobstash.db'}"


@pytest.fixture
def settings(database_url):
    return Settings(
        _env_file=None,
        DATABASE_URL=database_url,
        CORS_ORIGIN="https://paste.example",
        DB_POOL_SIZE=2,
        DB_MAX_OVERFLOW=0,
    )


@pytest.fixture
def memory_store():
    return MemoryBlobStore()


@pytest.fixture
def test_client(settings):
    """
    TestClient for an app that connects to the SQLite database on startup.
    """
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture
def memory_client(settings, memory_store):
    """
    TestClient for an app using the in-memory store.
    """
    with TestClient(create_app(settings, blob_store=memory_store)) as client:
        yield client
