"""Service layer: user resource handlers over a revisioned document store."""

import logging
from typing import Any

from pydantic import ValidationError

from users_common.infra.document_store import Document, DocumentStore
from users_common.infra.errors import (
    DocumentNotFoundError,
    InvalidDocumentError,
    RevisionConflictError,
    StoreError,
)
from users_common.models.outcome import ErrorKind, Outcome
from users_common.models.user import UserCreate, UserDocument

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "description")
INTERNAL_ERROR_MESSAGE = "Internal server error"
MAX_ID_LENGTH = 255
# Characters that cannot appear in a /users/{id} path segment or a Cosmos item id
RESERVED_ID_CHARACTERS = frozenset("/\\?#")


def _describe_validation_error(error: ValidationError) -> str:
    problems = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "body"
        problems.append(f"{location}: {detail['msg']}")
    return "; ".join(problems)


def _check_id(document_id: Any) -> str | None:
    """Return why ``document_id`` is unusable as a user ID, or None if it is fine."""
    if not isinstance(document_id, str) or not document_id:
        return "id: must be a non-empty string"
    if len(document_id) > MAX_ID_LENGTH:
        return f"id: must be at most {MAX_ID_LENGTH} characters"
    if RESERVED_ID_CHARACTERS.intersection(document_id):
        return "id: must not contain /, \\, ? or #"
    return None


def _check_required_fields(body: dict[str, Any]) -> str | None:
    invalid = [
        field for field in REQUIRED_FIELDS if field in body and not (isinstance(body[field], str) and body[field])
    ]
    return "; ".join(f"{field}: must be a non-empty string" for field in invalid) or None


class UserService:
    """Resource handlers for the users collection.

    Every handler returns an ``Outcome`` carrying either its result or a
    classified ``UserError``. Store failures are translated here and never
    raised to the caller. Documents are re-read from the store on every call;
    nothing is cached between requests.
    """

    def __init__(self, store: DocumentStore) -> None:
        """Initialize the user service.

        Args:
            store: Shared document store handle
        """
        self.store = store

    @staticmethod
    def _internal(action: str, error: Exception) -> Outcome[Any]:
        logger.error("Failed to %s: %s", action, error, exc_info=error)
        return Outcome.failure(ErrorKind.INTERNAL, INTERNAL_ERROR_MESSAGE)

    @staticmethod
    def _not_found(user_id: str) -> Outcome[Any]:
        return Outcome.failure(ErrorKind.NOT_FOUND, f"User {user_id} not found")

    def list_users(self) -> Outcome[list[UserDocument]]:
        """List all users in store order."""
        try:
            users = [UserDocument.model_validate(document) for document in self.store.list()]
        except (StoreError, ValidationError) as e:
            return self._internal("list users", e)
        return Outcome.success(users)

    def create_user(self, body: dict[str, Any]) -> Outcome[UserDocument]:
        """Create a user from ``body``.

        ``name`` and ``description`` must be present and non-empty. The store
        assigns the ID when the body has none; a ``revision`` in the body is
        ignored since creation never replaces an existing document.

        Args:
            body: Request body with the user's fields

        Returns:
            Outcome with the stored user, including its ID and revision
        """
        try:
            UserCreate.model_validate(body)
        except ValidationError as e:
            return Outcome.failure(ErrorKind.VALIDATION, _describe_validation_error(e))

        document: Document = {k: v for k, v in body.items() if k != "revision"}
        if "id" in document:
            problem = _check_id(document["id"])
            if problem:
                return Outcome.failure(ErrorKind.VALIDATION, problem)

        try:
            result = self.store.insert(document)
        except RevisionConflictError as e:
            logger.info("Rejected create: %s", e)
            return Outcome.failure(ErrorKind.CONFLICT, f"User {e.document_id} already exists")
        except InvalidDocumentError as e:
            logger.info("Store rejected new user: %s", e)
            return Outcome.failure(ErrorKind.VALIDATION, f"User rejected by the store: {e.reason}")
        except StoreError as e:
            return self._internal("create user", e)

        logger.info("Created user %s", result.id)
        stored = {**document, "id": result.id, "revision": result.revision}
        return Outcome.success(UserDocument.model_validate(stored))

    def get_user(self, user_id: str) -> Outcome[UserDocument]:
        """Get the current version of a user."""
        try:
            document = self.store.get(user_id)
            if document is None:
                return self._not_found(user_id)
            return Outcome.success(UserDocument.model_validate(document))
        except (StoreError, ValidationError) as e:
            return self._internal(f"get user {user_id}", e)

    def update_user(self, user_id: str, body: dict[str, Any]) -> Outcome[UserDocument]:
        """Shallow-merge ``body`` onto the current version of a user.

        Top-level keys in ``body`` replace the stored values, nested objects
        included; keys absent from ``body`` keep their stored values. The
        identity comes from ``user_id`` and the write is conditioned on the
        revision just read, so a ``id`` or ``revision`` in the body has no
        effect. A concurrent write between the read and the replace yields a
        conflict rather than a lost update.

        Args:
            user_id: ID of the user to update
            body: Fields to set

        Returns:
            Outcome with the merged user at its new revision
        """
        try:
            existing = self.store.get(user_id)
        except StoreError as e:
            return self._internal(f"read user {user_id}", e)
        if existing is None:
            return self._not_found(user_id)

        problem = _check_required_fields(body)
        if problem:
            return Outcome.failure(ErrorKind.VALIDATION, problem)

        merged: Document = {**existing, **body, "id": user_id, "revision": existing["revision"]}

        try:
            result = self.store.insert(merged)
        except (RevisionConflictError, DocumentNotFoundError) as e:
            logger.info("Update of user %s lost a race: %s", user_id, e)
            return Outcome.failure(ErrorKind.CONFLICT, f"User {user_id} was modified concurrently, re-read and retry")
        except InvalidDocumentError as e:
            logger.info("Store rejected update of user %s: %s", user_id, e)
            return Outcome.failure(ErrorKind.VALIDATION, f"User rejected by the store: {e.reason}")
        except StoreError as e:
            return self._internal(f"update user {user_id}", e)

        merged["revision"] = result.revision
        logger.info("Updated user %s", user_id)
        try:
            return Outcome.success(UserDocument.model_validate(merged))
        except ValidationError as e:
            return self._internal(f"render user {user_id}", e)

    def delete_user(self, user_id: str) -> Outcome[None]:
        """Delete a user at the revision currently stored."""
        try:
            existing = self.store.get(user_id)
        except StoreError as e:
            return self._internal(f"read user {user_id}", e)
        if existing is None:
            return self._not_found(user_id)

        try:
            self.store.delete(user_id, existing["revision"])
        except (RevisionConflictError, DocumentNotFoundError) as e:
            logger.info("Delete of user %s lost a race: %s", user_id, e)
            return Outcome.failure(ErrorKind.CONFLICT, f"User {user_id} was modified concurrently, re-read and retry")
        except StoreError as e:
            return self._internal(f"delete user {user_id}", e)

        logger.info("Deleted user %s", user_id)
        return Outcome.success()
