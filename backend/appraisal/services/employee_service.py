"""Cosmos DB employee service."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from azure.cosmos.exceptions import CosmosResourceExistsError, CosmosResourceNotFoundError

from appraisal.core.config import Settings
from appraisal.core.cosmos import StoreUnavailableError, cosmos_store
from appraisal.models.employee import Employee, EmployeeCreate, Role
from appraisal.services.identifiers import generate_employee_id

logger = logging.getLogger(__name__)

LIST_QUERY = "SELECT * FROM c"
BY_ID_QUERY = "SELECT * FROM c WHERE LOWER(c.employeeId) = @employeeId"
BY_IDS_QUERY = "SELECT * FROM c WHERE ARRAY_CONTAINS(@ids, c.id)"
SUPERVISORS_QUERY = "SELECT * FROM c WHERE c.role != @excludedRole"
COUNT_QUERY = "SELECT VALUE COUNT(1) FROM c"


class EmployeeService:
    def __init__(self) -> None:
        self.container: Any = None
        self.initialized: bool = False

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        await cosmos_store.initialize(settings)
        if not cosmos_store.initialized:
            logger.warning("Document store unavailable — EmployeeService not initialized")
            return

        self.container = await cosmos_store.container(settings.COSMOS_DB_EMPLOYEES_CONTAINER)
        self.initialized = True
        logger.info("EmployeeService initialized (container=%s)", settings.COSMOS_DB_EMPLOYEES_CONTAINER)

    async def close(self) -> None:
        self.container = None
        self.initialized = False

    def _require_container(self) -> Any:
        if not self.container:
            raise StoreUnavailableError("EmployeeService not initialized")
        return self.container

    async def _query(self, query: str, params: list[dict[str, Any]] | None = None) -> list[Employee]:
        results: list[Employee] = []
        async for item in self.container.query_items(
            query=query,
            parameters=params or [],
            enable_cross_partition_query=True,
        ):
            results.append(self._transform_employee(item))
        return results

    async def list_employees(self) -> list[Employee]:
        if not self.container:
            return []
        return await self._query(LIST_QUERY)

    async def list_supervisors(self) -> list[Employee]:
        """Everyone who can lead a team, i.e. all roles except junior developers."""
        if not self.container:
            return []
        params = [{"name": "@excludedRole", "value": Role.JUNIOR_DEV.value}]
        return await self._query(SUPERVISORS_QUERY, params)

    async def _find_document(self, employee_id: str) -> dict[str, Any] | None:
        params = [{"name": "@employeeId", "value": employee_id.lower()}]
        async for item in self.container.query_items(
            query=BY_ID_QUERY,
            parameters=params,
            enable_cross_partition_query=True,
        ):
            return item
        return None

    async def get_employee(self, employee_id: str) -> Employee | None:
        if not self.container:
            return None

        raw = await self._find_document(employee_id)
        if raw is None:
            return None
        return self._transform_employee(raw)

    async def employee_exists(self, employee_id: str) -> bool:
        container = self._require_container()
        try:
            await container.read_item(item=employee_id, partition_key=employee_id)
        except CosmosResourceNotFoundError:
            return False
        return True

    async def create_employee(self, request: EmployeeCreate) -> Employee:
        container = self._require_container()

        while True:
            employee_id = await generate_employee_id(
                request.role.value,
                request.department,
                self.employee_exists,
            )
            employee = Employee(
                employee_id=employee_id,
                name=request.name,
                role=request.role,
                supervisor=request.supervisor,
                team=list(request.team),
                department=request.department,
                form_id=None,
            )
            try:
                created = await container.create_item(body=self._to_document(employee))
            except CosmosResourceExistsError:
                # Another writer took the id between the check and the insert.
                logger.warning("Employee id %s taken concurrently, regenerating", employee_id)
                continue

            logger.info("Created employee %s (%s)", employee_id, request.role.value)
            return self._transform_employee(created)

    async def _patch(
        self,
        employee_id: str,
        operations_for: Callable[[dict[str, Any]], list[dict[str, Any]]],
    ) -> dict[str, Any] | None:
        """Patch the record matching ``employee_id`` in any case; ``None`` if absent."""
        container = self._require_container()
        raw = await self._find_document(employee_id)
        if raw is None:
            return None

        try:
            return await container.patch_item(
                item=raw["id"],
                partition_key=raw["id"],
                patch_operations=operations_for(raw),
            )
        except CosmosResourceNotFoundError:
            return None

    async def add_team_member(self, supervisor_id: str, member_id: str) -> Employee | None:
        def operations(raw: dict[str, Any]) -> list[dict[str, Any]]:
            # Appending needs an existing array; older records may store null
            if isinstance(raw.get("team"), list):
                return [{"op": "add", "path": "/team/-", "value": member_id}]
            return [{"op": "set", "path": "/team", "value": [member_id]}]

        updated = await self._patch(supervisor_id, operations)
        if updated is None:
            return None

        logger.info("Added %s to team of %s", member_id, updated["id"])
        return self._transform_employee(updated)

    async def assign_form(self, employee_id: str, form_id: str) -> Employee | None:
        updated = await self._patch(
            employee_id,
            lambda raw: [{"op": "set", "path": "/formId", "value": form_id}],
        )
        if updated is None:
            return None

        logger.info("Assigned form %s to employee %s", form_id, updated["id"])
        return self._transform_employee(updated)

    async def delete_employee(self, employee_id: str) -> bool:
        container = self._require_container()
        try:
            await container.delete_item(item=employee_id, partition_key=employee_id)
        except CosmosResourceNotFoundError:
            return False

        logger.info("Deleted employee %s", employee_id)
        return True

    async def delete_employees(self, employee_ids: list[str]) -> int:
        self._require_container()
        if not employee_ids:
            return 0

        params = [{"name": "@ids", "value": list(employee_ids)}]
        matches = await self._query(BY_IDS_QUERY, params)
        results = await asyncio.gather(
            *(self.delete_employee(employee.employee_id) for employee in matches),
        )
        deleted = sum(1 for removed in results if removed)
        logger.info("Bulk delete removed %d of %d requested employees", deleted, len(employee_ids))
        return deleted

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

    def _to_document(self, employee: Employee) -> dict[str, Any]:
        document = employee.model_dump(by_alias=True, mode="json")
        document["id"] = employee.employee_id
        return document

    def _transform_employee(self, raw: dict[str, Any]) -> Employee:
        data = dict(raw)
        data.setdefault("employeeId", raw.get("id"))
        if data.get("team") is None:
            data["team"] = []
        return Employee.model_validate(data)


employee_service = EmployeeService()
