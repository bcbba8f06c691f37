"""
Test configuration and fixtures for the golink service.
Every storage-facing test runs once per backend (memory and SQLite).
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from golink_app.config import Settings
from golink_app.dependencies import get_storage
from golink_app.services.golink_service import GolinkService
from golink_app.storage.strategies import InMemoryGolinkStorage, SQLiteGolinkStorage
from main import create_app


@pytest.fixture(params=["memory", "sqlite"])
def storage(request, tmp_path):
    """
    Fresh, empty storage for each test.
    A new SQLite file per test keeps tests isolated.
    """
    if request.param == "memory":
        backend = InMemoryGolinkStorage()
    else:
        backend = SQLiteGolinkStorage(database_path=str(tmp_path / "golinks.db"))

    try:
        yield backend
    finally:
        asyncio.run(backend.close())


@pytest.fixture
def service(storage):
    return GolinkService(storage=storage)


def _make_client(storage, api_token=None, **settings_overrides):
    app = create_app(Settings(storage_backend="memory", api_token=api_token, **settings_overrides))
    # Route everything to the test's storage instead of the one built at startup
    app.dependency_overrides[get_storage] = lambda: storage
    return TestClient(app)


@pytest.fixture
def client(storage):
    """
    Test client with the storage dependency overridden.
    This is the main fixture the API tests use.
    """
    with _make_client(storage) as test_client:
        yield test_client


@pytest.fixture
def small_page_client(storage):
    """Test client for an app configured with a default page size of 3"""
    with _make_client(storage, default_page_size=3) as test_client:
        yield test_client


@pytest.fixture
def auth_client(storage):
    """Test client for an app that requires a bearer token"""
    with _make_client(storage, api_token="s3cret-token") as test_client:
        yield test_client
