"""Document store initialization service."""

import logging

from users_common.config.store_config import get_store_config

from users_api.config import Settings
from users_api.services import get_document_store

logger = logging.getLogger(__name__)


async def initialize_document_store(settings: Settings) -> None:
    """Make sure the users collection exists during application startup.

    Safe to run on every start: an existing collection and its documents are
    left untouched.

    Args:
        settings: Application settings
    """
    config = get_store_config()
    if config.store_backend == "cosmos" and not config.azure_cosmosdb_endpoint:
        logger.warning("Cosmos DB endpoint not configured. Skipping initialization.")
        return

    try:
        created = get_document_store().ensure_collection_exists()
    except Exception as e:
        logger.error("Failed to initialize document store: %s", e, exc_info=True)
        if settings.is_production:
            raise
        # In development, log warning but allow app to continue
        logger.warning("Continuing without document store initialization (development mode)")
        return

    if created:
        logger.info("Users collection created")
    else:
        logger.info("Users collection already exists")
