"""Cosmos DB service for submitted appraisal responses.

Responses are write-once: there is no update or delete path. The document id
is ``"{employeeId}:{formId}"``, so the container itself rejects a second
response for the same employee and form.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from azure.cosmos.exceptions import CosmosResourceExistsError, CosmosResourceNotFoundError

from appraisal.core.config import Settings
from appraisal.core.cosmos import StoreUnavailableError, cosmos_store
from appraisal.models.employee import Role
from appraisal.models.response import Response

logger = logging.getLogger(__name__)


class DuplicateResponseError(Exception):
    """A response for this employee and form has already been submitted."""


def response_document_id(employee_id: str, form_id: str) -> str:
    return f"{employee_id}:{form_id}"


class ResponseService:
    def __init__(self) -> None:
        self.container: Any = None
        self.initialized: bool = False

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        await cosmos_store.initialize(settings)
        if not cosmos_store.initialized:
            logger.warning("Document store unavailable — ResponseService not initialized")
            return

        self.container = await cosmos_store.container(settings.COSMOS_DB_RESPONSES_CONTAINER)
        self.initialized = True
        logger.info("ResponseService initialized (container=%s)", settings.COSMOS_DB_RESPONSES_CONTAINER)

    async def close(self) -> None:
        self.container = None
        self.initialized = False

    async def submit_response(
        self,
        *,
        employee_id: str,
        form_id: str,
        submitted_by: str,
        role: Role,
        answers: dict[str, str],
        submitted_at: datetime | None = None,
    ) -> Response:
        if not self.container:
            raise StoreUnavailableError("ResponseService not initialized")

        response = Response(
            employee_id=employee_id,
            form_id=form_id,
            submitted_by=submitted_by,
            role=role,
            answers=answers,
            submitted_at=submitted_at or datetime.now(timezone.utc),
        )
        document = response.model_dump(by_alias=True, mode="json")
        document["id"] = response_document_id(employee_id, form_id)

        try:
            created = await self.container.create_item(body=document)
        except CosmosResourceExistsError as err:
            raise DuplicateResponseError(
                f"Response for employee '{employee_id}' on form '{form_id}' already submitted"
            ) from err

        logger.info("Response submitted for %s on %s by %s", employee_id, form_id, submitted_by)
        return Response.model_validate(created)

    async def get_response(self, employee_id: str, form_id: str) -> Response | None:
        if not self.container:
            return None

        document_id = response_document_id(employee_id, form_id)
        try:
            raw = await self.container.read_item(item=document_id, partition_key=document_id)
        except CosmosResourceNotFoundError:
            return None
        return Response.model_validate(raw)

    async def list_responses(
        self,
        form_id: str | None = None,
        employee_id: str | None = None,
    ) -> list[Response]:
        if not self.container:
            return []

        clauses: list[str] = []
        params: list[dict[str, Any]] = []
        if form_id:
            clauses.append("c.formId = @formId")
            params.append({"name": "@formId", "value": form_id})
        if employee_id:
            clauses.append("c.employeeId = @employeeId")
            params.append({"name": "@employeeId", "value": employee_id})

        query = "SELECT * FROM c"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)

        results: list[Response] = []
        async for item in self.container.query_items(
            query=query,
            parameters=params,
            enable_cross_partition_query=True,
        ):
            results.append(Response.model_validate(item))
        return results


response_service = ResponseService()
