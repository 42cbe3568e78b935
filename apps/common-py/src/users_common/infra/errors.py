"""Exceptions raised by document store clients."""


class StoreError(Exception):
    """The document store could not complete an operation."""


class DocumentNotFoundError(StoreError):
    """The requested document does not exist."""

    def __init__(self, document_id: str) -> None:
        super().__init__(f"Document {document_id} not found")
        self.document_id = document_id


class RevisionConflictError(StoreError):
    """A write was rejected because the document's revision has moved on."""

    def __init__(self, document_id: str, revision: str | None = None) -> None:
        if revision is None:
            message = f"Document {document_id} already exists"
        else:
            message = f"Document {document_id} is no longer at revision {revision}"
        super().__init__(message)
        self.document_id = document_id
        self.revision = revision


class InvalidDocumentError(StoreError):
    """The store refused the document itself, for example an unusable ID."""

    def __init__(self, document_id: str | None, reason: str) -> None:
        super().__init__(f"Document {document_id} rejected: {reason}")
        self.document_id = document_id
        self.reason = reason
