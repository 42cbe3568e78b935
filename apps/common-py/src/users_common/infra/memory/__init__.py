"""In-process infrastructure."""

from users_common.infra.memory.memory_document_store import InMemoryDocumentStore

__all__ = ["InMemoryDocumentStore"]
