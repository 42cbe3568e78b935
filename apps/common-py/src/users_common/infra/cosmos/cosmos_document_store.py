"""Document store backed by an Azure Cosmos DB container."""

import logging
from typing import Any

from azure.core import MatchConditions
from azure.core.exceptions import AzureError
from azure.cosmos import CosmosClient, PartitionKey
from azure.cosmos.exceptions import (
    CosmosAccessConditionFailedError,
    CosmosHttpResponseError,
    CosmosResourceExistsError,
    CosmosResourceNotFoundError,
)
from azure.identity import DefaultAzureCredential

from users_common.config.store_config import StoreConfig
from users_common.infra.document_store import Document, DocumentStore, WriteResult
from users_common.infra.errors import (
    DocumentNotFoundError,
    InvalidDocumentError,
    RevisionConflictError,
    StoreError,
)

logger = logging.getLogger(__name__)

# Cosmos DB system fields; _etag is surfaced separately as "revision"
COSMOS_SYSTEM_FIELDS = frozenset({"_rid", "_self", "_etag", "_attachments", "_ts"})
PARTITION_KEY_PATH = "/id"


class CosmosDocumentStore(DocumentStore):
    """Infrastructure layer: users collection in Cosmos DB.

    The container is partitioned on ``/id`` so every document is addressed by
    its ID alone. The item ``_etag`` is the revision token; replaces and
    deletes are sent with ``IfNotModified`` so a stale token is rejected by
    the service itself.
    """

    def __init__(self, config: StoreConfig | None = None) -> None:
        """Initialize Cosmos DB document store.

        Args:
            config: Store configuration. If None, will load from environment.
        """
        if config is None:
            from users_common.config.store_config import get_store_config

            config = get_store_config()

        if not config.azure_cosmosdb_endpoint:
            raise ValueError("AZURE_COSMOSDB_ENDPOINT is required")

        self.config = config
        self.database_name = config.cosmos_db
        self.container_name = config.cosmos_users_container

        if config.azure_cosmosdb_key:
            self.client = CosmosClient(url=config.azure_cosmosdb_endpoint, credential=config.azure_cosmosdb_key)
        else:
            # Use managed identity
            self.client = CosmosClient(url=config.azure_cosmosdb_endpoint, credential=DefaultAzureCredential())

        self.database = self.client.get_database_client(self.database_name)
        self.container = self.database.get_container_client(self.container_name)

    @staticmethod
    def _to_document(item: dict[str, Any]) -> Document:
        """Convert a Cosmos item into a document, exposing ``_etag`` as ``revision``."""
        try:
            revision = item["_etag"]
        except KeyError as e:
            raise StoreError(f"Item {item.get('id')} has no _etag") from e
        document = {k: v for k, v in item.items() if k not in COSMOS_SYSTEM_FIELDS}
        document["revision"] = revision
        return document

    @staticmethod
    def _to_body(document: Document) -> dict[str, Any]:
        return {k: v for k, v in document.items() if k != "revision" and k not in COSMOS_SYSTEM_FIELDS}

    def ensure_collection_exists(self) -> bool:
        created = False
        # Emulator requires provisioned throughput
        throughput = {"offer_throughput": 400} if self.config.is_emulator else {}

        try:
            try:
                self.client.create_database(id=self.database_name)
                logger.info("Database '%s' created", self.database_name)
                created = True
            except CosmosResourceExistsError:
                logger.info("Database '%s' already exists", self.database_name)

            try:
                self.database.create_container(
                    id=self.container_name,
                    partition_key=PartitionKey(path=PARTITION_KEY_PATH),
                    **throughput,
                )
                logger.info(
                    "Container '%s' created with partition key '%s'",
                    self.container_name,
                    PARTITION_KEY_PATH,
                )
                created = True
            except CosmosResourceExistsError:
                logger.info("Container '%s' already exists", self.container_name)
        except AzureError as e:
            raise StoreError(f"Failed to ensure container {self.container_name}") from e

        return created

    def list(self) -> list[Document]:
        try:
            items = [self._to_document(item) for item in self.container.read_all_items()]
        except AzureError as e:
            raise StoreError(f"Failed to list items from {self.container_name}") from e
        logger.debug("Listed %d items from container %s", len(items), self.container_name)
        return items

    def get(self, document_id: str) -> Document | None:
        try:
            item = self.container.read_item(item=document_id, partition_key=document_id)
        except CosmosResourceNotFoundError:
            logger.debug("Item %s not found in container %s", document_id, self.container_name)
            return None
        except AzureError as e:
            raise StoreError(f"Failed to read item {document_id} from {self.container_name}") from e
        logger.debug("Read item %s from container %s", document_id, self.container_name)
        return self._to_document(item)

    def insert(self, document: Document) -> WriteResult:
        body = self._to_body(document)
        revision = document.get("revision")
        document_id = body.get("id")

        if revision is not None and document_id is None:
            raise ValueError("A document with a revision must carry its id")

        try:
            if revision is None:
                written = self.container.create_item(
                    body=body,
                    enable_automatic_id_generation=document_id is None,
                )
                logger.info("Created item %s in container %s", written["id"], self.container_name)
            else:
                written = self.container.replace_item(
                    item=document_id,
                    body=body,
                    etag=revision,
                    match_condition=MatchConditions.IfNotModified,
                )
                logger.info("Replaced item %s in container %s", document_id, self.container_name)
        except CosmosAccessConditionFailedError as e:
            raise RevisionConflictError(document_id, revision) from e
        except CosmosResourceExistsError as e:
            raise RevisionConflictError(document_id) from e
        except CosmosResourceNotFoundError as e:
            raise DocumentNotFoundError(document_id) from e
        except CosmosHttpResponseError as e:
            if e.status_code == 400:
                raise InvalidDocumentError(document_id, e.http_error_message or "bad request") from e
            raise StoreError(f"Failed to write item {document_id} to {self.container_name}") from e
        except AzureError as e:
            raise StoreError(f"Failed to write item {document_id} to {self.container_name}") from e

        stored = self._to_document(written)
        return WriteResult(id=stored["id"], revision=stored["revision"])

    def delete(self, document_id: str, revision: str) -> None:
        try:
            self.container.delete_item(
                item=document_id,
                partition_key=document_id,
                etag=revision,
                match_condition=MatchConditions.IfNotModified,
            )
        except CosmosAccessConditionFailedError as e:
            raise RevisionConflictError(document_id, revision) from e
        except CosmosResourceNotFoundError as e:
            raise DocumentNotFoundError(document_id) from e
        except AzureError as e:
            raise StoreError(f"Failed to delete item {document_id} from {self.container_name}") from e
        logger.info("Deleted item %s from container %s", document_id, self.container_name)
