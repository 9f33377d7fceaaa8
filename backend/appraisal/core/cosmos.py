"""Shared Cosmos DB client for the appraisal containers."""

from __future__ import annotations

import logging
from typing import Any

from azure.cosmos import PartitionKey
from azure.cosmos.aio import CosmosClient

from appraisal.core.config import Settings

logger = logging.getLogger(__name__)


class StoreUnavailableError(RuntimeError):
    """Raised when a write is attempted before the document store is configured."""


class CosmosStore:
    def __init__(self) -> None:
        self.client: CosmosClient | None = None
        self.database: Any = None
        self.initialized: bool = False

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        if not settings.COSMOS_DB_ENDPOINT or not settings.COSMOS_DB_KEY:
            logger.warning("Cosmos DB credentials missing — store not initialized")
            return

        self.client = CosmosClient(settings.COSMOS_DB_ENDPOINT, settings.COSMOS_DB_KEY)
        self.database = await self.client.create_database_if_not_exists(id=settings.COSMOS_DB_DATABASE)
        self.initialized = True
        logger.info("CosmosStore initialized (database=%s)", settings.COSMOS_DB_DATABASE)

    async def container(self, name: str) -> Any:
        """Return the container client, creating the container on first use.

        Every container is partitioned on ``/id`` so that the document id is
        unique across the whole container and doubles as the business key.
        """
        if not self.initialized:
            raise StoreUnavailableError("Cosmos DB is not configured")
        container = await self.database.create_container_if_not_exists(
            id=name,
            partition_key=PartitionKey(path="/id"),
        )
        logger.info("Container ready: %s", name)
        return container

    async def close(self) -> None:
        if self.client:
            await self.client.close()
        self.client = None
        self.database = None
        self.initialized = False


cosmos_store = CosmosStore()
