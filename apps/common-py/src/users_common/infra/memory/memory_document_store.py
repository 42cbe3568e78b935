"""In-memory document store for local development and tests."""

import copy
import logging
import threading
import uuid

from users_common.infra.document_store import Document, DocumentStore, WriteResult
from users_common.infra.errors import DocumentNotFoundError, RevisionConflictError

logger = logging.getLogger(__name__)


def _new_token() -> str:
    return uuid.uuid4().hex


class InMemoryDocumentStore(DocumentStore):
    """Document store kept in a process-local dictionary.

    Revision checks behave like the Cosmos implementation: every write mints a
    fresh opaque revision and stale revisions are rejected. Documents are
    copied on the way in and out so callers never share state with the store.
    """

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}
        self._lock = threading.Lock()
        self._created = False

    def ensure_collection_exists(self) -> bool:
        with self._lock:
            created = not self._created
            self._created = True
        return created

    def list(self) -> list[Document]:
        with self._lock:
            return [copy.deepcopy(document) for document in self._documents.values()]

    def get(self, document_id: str) -> Document | None:
        with self._lock:
            document = self._documents.get(document_id)
            return copy.deepcopy(document) if document is not None else None

    def insert(self, document: Document) -> WriteResult:
        stored = copy.deepcopy(document)
        revision = stored.pop("revision", None)

        with self._lock:
            if revision is None:
                document_id = stored.setdefault("id", _new_token())
                if document_id in self._documents:
                    raise RevisionConflictError(document_id)
            else:
                document_id = stored.get("id")
                if document_id is None:
                    raise ValueError("A document with a revision must carry its id")
                current = self._documents.get(document_id)
                if current is None:
                    raise DocumentNotFoundError(document_id)
                if current["revision"] != revision:
                    raise RevisionConflictError(document_id, revision)

            stored["revision"] = _new_token()
            self._documents[document_id] = stored

        logger.debug("Wrote document %s at revision %s", document_id, stored["revision"])
        return WriteResult(id=document_id, revision=stored["revision"])

    def delete(self, document_id: str, revision: str) -> None:
        with self._lock:
            current = self._documents.get(document_id)
            if current is None:
                raise DocumentNotFoundError(document_id)
            if current["revision"] != revision:
                raise RevisionConflictError(document_id, revision)
            del self._documents[document_id]

        logger.debug("Deleted document %s", document_id)
