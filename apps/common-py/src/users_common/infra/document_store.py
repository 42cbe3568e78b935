"""Abstract contract for the schema-less document store."""

from abc import ABC, abstractmethod
from typing import Any, NamedTuple

Document = dict[str, Any]


class WriteResult(NamedTuple):
    """Identity and post-write revision of a stored document."""

    id: str
    revision: str


class DocumentStore(ABC):
    """Abstract interface for a revisioned document collection.

    Documents are plain dictionaries carrying ``id`` and ``revision`` next to
    their own fields. Implementations must be safe to share between
    concurrent requests.
    """

    @abstractmethod
    def ensure_collection_exists(self) -> bool:
        """Create the backing collection if it is missing.

        Returns:
            True if the collection was created, False if it already existed
        """

    @abstractmethod
    def list(self) -> list[Document]:
        """List every document with its current revision."""

    @abstractmethod
    def get(self, document_id: str) -> Document | None:
        """Get a document by ID, or None if it does not exist."""

    @abstractmethod
    def insert(self, document: Document) -> WriteResult:
        """Create or replace a document.

        A document without a ``revision`` is created (an ``id`` is assigned
        when absent). A document with a ``revision`` replaces the stored one
        only if that revision is still current.

        Raises:
            RevisionConflictError: The revision is stale or the ID is taken
            DocumentNotFoundError: The document to replace does not exist
            StoreError: Any other store failure
        """

    @abstractmethod
    def delete(self, document_id: str, revision: str) -> None:
        """Delete a document if it is still at ``revision``.

        Raises:
            RevisionConflictError: The revision is stale
            DocumentNotFoundError: The document does not exist
            StoreError: Any other store failure
        """
