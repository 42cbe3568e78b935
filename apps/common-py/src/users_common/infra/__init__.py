"""Infrastructure layer for the document store."""

from users_common.config.store_config import StoreConfig
from users_common.infra.cosmos.cosmos_document_store import CosmosDocumentStore
from users_common.infra.document_store import Document, DocumentStore, WriteResult
from users_common.infra.errors import (
    DocumentNotFoundError,
    InvalidDocumentError,
    RevisionConflictError,
    StoreError,
)
from users_common.infra.memory.memory_document_store import InMemoryDocumentStore


def create_document_store(config: StoreConfig) -> DocumentStore:
    """Build the document store selected by ``config.store_backend``."""
    if config.store_backend == "memory":
        return InMemoryDocumentStore()
    return CosmosDocumentStore(config=config)


__all__ = [
    "CosmosDocumentStore",
    "Document",
    "DocumentNotFoundError",
    "DocumentStore",
    "InMemoryDocumentStore",
    "InvalidDocumentError",
    "RevisionConflictError",
    "StoreError",
    "WriteResult",
    "create_document_store",
]
