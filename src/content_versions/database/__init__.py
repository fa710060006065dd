"""Cosmos DB access layer."""

from content_versions.database.client import CosmosClient

__all__ = ["CosmosClient"]
