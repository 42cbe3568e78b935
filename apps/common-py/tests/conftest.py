"""Pytest configuration for common-py tests."""

import pytest
from users_common.infra.document_store import Document
from users_common.infra.memory.memory_document_store import InMemoryDocumentStore
from users_common.services.user_service import UserService


class RacingDocumentStore(InMemoryDocumentStore):
    """In-memory store where another writer acts right after the next read.

    Set ``interloper`` to a callable taking the store and the document just
    read; it runs once, between the read and the caller's write.
    """

    def __init__(self) -> None:
        super().__init__()
        self.interloper = None

    def get(self, document_id: str) -> Document | None:
        document = super().get(document_id)
        if document is not None and self.interloper is not None:
            interloper, self.interloper = self.interloper, None
            interloper(self, document)
        return document


@pytest.fixture
def store() -> RacingDocumentStore:
    """Create an empty in-memory document store."""
    return RacingDocumentStore()


@pytest.fixture
def service(store: RacingDocumentStore) -> UserService:
    """Create a user service over the in-memory store."""
    return UserService(store)
