"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from users_api.main import app
from users_api.services import get_document_store, reset_services
from users_common.infra.memory.memory_document_store import InMemoryDocumentStore


@pytest.fixture
def store() -> InMemoryDocumentStore:
    """Create an empty in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def client(store: InMemoryDocumentStore) -> Iterator[TestClient]:
    """Create a FastAPI test client backed by the in-memory store."""
    app.dependency_overrides[get_document_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _fresh_services() -> Iterator[None]:
    reset_services()
    yield
    reset_services()
