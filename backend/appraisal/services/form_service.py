"""Cosmos DB appraisal form service."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from azure.cosmos.exceptions import CosmosResourceExistsError, CosmosResourceNotFoundError

from appraisal.core.config import Settings
from appraisal.core.cosmos import StoreUnavailableError, cosmos_store
from appraisal.models.form import Form, FormCreate
from appraisal.services.identifiers import generate_form_id

logger = logging.getLogger(__name__)

LIST_QUERY = "SELECT * FROM c"
BY_IDS_QUERY = "SELECT * FROM c WHERE ARRAY_CONTAINS(@ids, c.id)"
COUNT_QUERY = "SELECT VALUE COUNT(1) FROM c"


class FormService:
    def __init__(self) -> None:
        self.container: Any = None
        self.initialized: bool = False

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        await cosmos_store.initialize(settings)
        if not cosmos_store.initialized:
            logger.warning("Document store unavailable — FormService not initialized")
            return

        self.container = await cosmos_store.container(settings.COSMOS_DB_FORMS_CONTAINER)
        self.initialized = True
        logger.info("FormService initialized (container=%s)", settings.COSMOS_DB_FORMS_CONTAINER)

    async def close(self) -> None:
        self.container = None
        self.initialized = False

    def _require_container(self) -> Any:
        if not self.container:
            raise StoreUnavailableError("FormService not initialized")
        return self.container

    async def _query(self, query: str, params: list[dict[str, Any]] | None = None) -> list[Form]:
        results: list[Form] = []
        async for item in self.container.query_items(
            query=query,
            parameters=params or [],
            enable_cross_partition_query=True,
        ):
            results.append(Form.model_validate(item))
        return results

    async def list_forms(self) -> list[Form]:
        if not self.container:
            return []
        return await self._query(LIST_QUERY)

    async def get_form(self, form_id: str) -> Form | None:
        if not self.container:
            return None
        try:
            raw = await self.container.read_item(item=form_id, partition_key=form_id)
        except CosmosResourceNotFoundError:
            return None
        return Form.model_validate(raw)

    async def form_exists(self, form_id: str) -> bool:
        self._require_container()
        return await self.get_form(form_id) is not None

    async def create_form(self, request: FormCreate) -> Form:
        container = self._require_container()
        questions = request.numbered_questions()

        while True:
            form_id = await generate_form_id(self.form_exists)
            now = datetime.now(timezone.utc)
            form = Form(form_id=form_id, questions=questions, created_at=now, updated_at=now)

            document = form.model_dump(by_alias=True, mode="json")
            document["id"] = form_id
            try:
                created = await container.create_item(body=document)
            except CosmosResourceExistsError:
                logger.warning("Form id %s taken concurrently, regenerating", form_id)
                continue

            logger.info("Created form %s with %d questions", form_id, len(questions))
            return Form.model_validate(created)

    async def delete_form(self, form_id: str) -> bool:
        container = self._require_container()
        try:
            await container.delete_item(item=form_id, partition_key=form_id)
        except CosmosResourceNotFoundError:
            return False

        logger.info("Deleted form %s", form_id)
        return True

    async def delete_forms(self, form_ids: list[str]) -> int:
        self._require_container()
        if not form_ids:
            return 0

        params = [{"name": "@ids", "value": list(form_ids)}]
        matches = await self._query(BY_IDS_QUERY, params)
        results = await asyncio.gather(*(self.delete_form(form.form_id) for form in matches))
        return sum(1 for removed in results if removed)

    async def check_connection(self) -> bool:
        if not self.container:
            return False
        try:
            async for _ in self.container.query_items(
                query=COUNT_QUERY,
                enable_cross_partition_query=True,
            ):
                return True
            return True
        except Exception:
            logger.exception("Cosmos DB connection check failed")
            return False


form_service = FormService()
