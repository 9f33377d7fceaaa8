"""Async HTTP client for the appraisal admin API.

Mirrors the calls the admin dashboard makes: listing and creating employees,
team and form updates, deletes, and the two composite flows (self-lookup with
supervisor name, batch form assignment).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from appraisal.core.config import Settings
from appraisal.services.hierarchy import ADMIN_SUPERVISOR

logger = logging.getLogger(__name__)


class AppraisalApiError(Exception):
    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message


class NotFoundError(AppraisalApiError):
    pass


class AppraisalClient:
    def __init__(self, base_url: str, timeout_seconds: int = 30) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    @classmethod
    def from_settings(cls, settings: Settings) -> AppraisalClient:
        return cls(settings.API_BASE_URL, settings.API_TIMEOUT_SECONDS)

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        url = f"{self.base_url}{path}"
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.request(method, url, json=json) as response:
                data = await response.json(content_type=None)
                if response.status >= 400:
                    message = ""
                    if isinstance(data, dict):
                        message = str(data.get("message") or data.get("error") or "")
                    if response.status == 404:
                        raise NotFoundError(response.status, message)
                    raise AppraisalApiError(response.status, message)
                return data

    async def fetch_employees(self) -> list[dict[str, Any]]:
        """All employees; an empty organisation is returned as ``[]``."""
        try:
            return await self._request("GET", "/employees")
        except NotFoundError:
            return []

    async def fetch_employee(self, employee_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/employees/{employee_id.lower()}")

    async def fetch_supervisors(self) -> list[dict[str, Any]]:
        try:
            return await self._request("GET", "/employees/supervisors")
        except NotFoundError:
            return []

    async def create_employee(self, employee: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/employees", json=employee)

    async def supervisor_update(self, supervisor_id: str, new_employee_id: str) -> dict[str, Any]:
        return await self._request(
            "PATCH",
            f"/employees/{supervisor_id}",
            json={"newEmployeeId": new_employee_id},
        )

    async def assign_form(self, employee_id: str, form_id: str) -> dict[str, Any]:
        return await self._request("PATCH", f"/employees/{employee_id}/form", json={"formId": form_id})

    async def delete_one_employee(self, employee_id: str) -> dict[str, Any]:
        return await self._request("DELETE", f"/employees/{employee_id}")

    async def delete_many_employees(self, employee_ids: list[str]) -> dict[str, Any]:
        return await self._request("DELETE", "/employees", json={"employeeIds": employee_ids})

    async def fetch_forms(self) -> list[dict[str, Any]]:
        try:
            return await self._request("GET", "/forms")
        except NotFoundError:
            return []

    async def create_form(self, questions: list[dict[str, Any]]) -> dict[str, Any]:
        return await self._request("POST", "/forms", json={"questions": questions})

    async def add_employee(self, employee: dict[str, Any]) -> dict[str, Any]:
        """Create an employee and append it to its supervisor's team.

        The supervisor update is a second, independent write; a supervisor id
        with no record (an Admin-supervised employee) is not an error.
        """
        created = await self.create_employee(employee)
        try:
            await self.supervisor_update(created["supervisor"], created["employeeId"])
        except NotFoundError:
            logger.info("Supervisor %s has no record, skipping team update", created["supervisor"])
        return created

    async def lookup_self(self, employee_id: str) -> dict[str, Any]:
        """Fetch an employee and replace its supervisor id with the supervisor's name."""
        employee = await self.fetch_employee(employee_id)
        try:
            supervisor = await self.fetch_employee(employee["supervisor"])
        except NotFoundError:
            employee["supervisor"] = ADMIN_SUPERVISOR
        else:
            employee["supervisor"] = supervisor.get("name") or ADMIN_SUPERVISOR
        return employee

    async def assign_form_to_many(self, employee_ids: list[str], form_id: str) -> list[dict[str, Any]]:
        """Assign one form to every id in parallel.

        Raises the first failure; updates that already succeeded stay applied.
        """
        if not form_id:
            raise ValueError("A form id is required")
        return list(await asyncio.gather(*(self.assign_form(employee_id, form_id) for employee_id in employee_ids)))
