"""Service initialization and dependency injection."""

import logging

from fastapi import Depends
from users_common.config.store_config import get_store_config
from users_common.infra import DocumentStore, create_document_store
from users_common.services.user_service import UserService

logger = logging.getLogger(__name__)

# Service instances cache
_services_cache: dict[str, DocumentStore] = {}


def get_document_store() -> DocumentStore:
    """Get the process-wide document store.

    Built on first use from ``StoreConfig`` and shared by every request.

    Returns:
        DocumentStore instance
    """
    if "document_store" not in _services_cache:
        config = get_store_config()
        store = create_document_store(config)
        _services_cache["document_store"] = store
        logger.info("Initialized %s (backend=%s)", type(store).__name__, config.store_backend)

    return _services_cache["document_store"]


def get_user_service(store: DocumentStore = Depends(get_document_store)) -> UserService:
    """Get user service bound to the shared document store.

    Args:
        store: Document store

    Returns:
        UserService instance
    """
    return UserService(store)


def reset_services() -> None:
    """Drop cached service instances."""
    _services_cache.clear()
