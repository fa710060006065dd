"""Async Cosmos DB client initialization."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from azure.cosmos import PartitionKey
from azure.cosmos.aio import CosmosClient as AzureCosmosClient

if TYPE_CHECKING:
    from azure.cosmos.aio import DatabaseProxy

    from content_versions.config import CosmosConfig

logger = logging.getLogger(__name__)

# Container name -> partition key path
CONTAINERS = {
    "collections": "/id",
    "contents": "/collection_id",
    "versions": "/content_id",
}


class CosmosClient:
    """Manages the async Cosmos DB client and database reference."""

    def __init__(self, config: CosmosConfig) -> None:
        self._config = config
        self._client: AzureCosmosClient | None = None
        self._database: DatabaseProxy | None = None

    async def initialize(self) -> None:
        """Create the client and obtain a database reference."""
        self._client = AzureCosmosClient(self._config.endpoint, credential=self._config.key)
        self._database = self._client.get_database_client(self._config.database)
        logger.info("Connected to Cosmos DB database %s", self._config.database)

    async def close(self) -> None:
        """Close the underlying client."""
        if self._client:
            await self._client.close()
            self._client = None
            self._database = None

    @property
    def database(self) -> DatabaseProxy:
        if self._database is None:
            raise RuntimeError("CosmosClient not initialized, call initialize() first")
        return self._database

    async def ensure_containers(self) -> None:
        """Create the database and containers if they do not exist yet."""
        if self._client is None:
            raise RuntimeError("CosmosClient not initialized, call initialize() first")
        database = await self._client.create_database_if_not_exists(self._config.database)
        for name, partition_key in CONTAINERS.items():
            await database.create_container_if_not_exists(
                id=name, partition_key=PartitionKey(path=partition_key)
            )
        self._database = database
        logger.info("Ensured containers %s", ", ".join(CONTAINERS))
