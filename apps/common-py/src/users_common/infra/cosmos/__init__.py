"""Cosmos DB infrastructure."""

from users_common.infra.cosmos.cosmos_document_store import CosmosDocumentStore

__all__ = ["CosmosDocumentStore"]
