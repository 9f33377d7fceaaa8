from __future__ import annotations

import copy
from types import SimpleNamespace
from typing import Any

import pytest
from azure.cosmos.exceptions import CosmosResourceExistsError, CosmosResourceNotFoundError
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from appraisal.main import app
from appraisal.services.employee_service import employee_service
from appraisal.services.form_service import form_service
from appraisal.services.response_service import response_service

MANAGER_DOC = {
    "id": "M-ENG-AB12CD34",
    "employeeId": "M-ENG-AB12CD34",
    "name": "Maria Manager",
    "role": "manager",
    "supervisor": "ADMIN",
    "team": ["SD-ENG-00000001"],
    "department": "Engineering",
    "formId": None,
}

SENIOR_DOC = {
    "id": "SD-ENG-00000001",
    "employeeId": "SD-ENG-00000001",
    "name": "Sam Senior",
    "role": "senior-dev",
    "supervisor": "M-ENG-AB12CD34",
    "team": [],
    "department": "Engineering",
    "formId": None,
}

JUNIOR_DOC = {
    "id": "JD-ENG-00000002",
    "employeeId": "JD-ENG-00000002",
    "name": "Jo Junior",
    "role": "junior-dev",
    "supervisor": "SD-ENG-00000001",
    "team": [],
    "department": "Engineering",
    "formId": None,
}

FORM_DOC = {
    "id": "FORM-AB12CD34",
    "formId": "FORM-AB12CD34",
    "questions": [
        {"questionId": "Q1", "question": "What went well?", "type": "text"},
        {"questionId": "Q2", "question": "Rate collaboration", "type": "rating"},
    ],
    "createdAt": "2024-01-10T09:00:00+00:00",
    "updatedAt": "2024-01-10T09:00:00+00:00",
}


class FakeContainer:
    """In-memory stand-in for an ``azure.cosmos.aio`` container client.

    Query filtering is driven by parameter names: ``@ids`` matches document
    ids, ``@excludedX`` excludes documents whose ``x`` equals the value,
    ``@x`` used as ``LOWER(c.x)`` compares case-insensitively, and any other
    ``@x`` is an equality match on ``x``.
    """

    def __init__(self, docs: list[dict[str, Any]] | None = None) -> None:
        self.docs: dict[str, dict[str, Any]] = {}
        for doc in docs or []:
            self.docs[doc["id"]] = copy.deepcopy(doc)
        self.queries: list[tuple[str, list[dict[str, Any]]]] = []

    async def create_item(self, body: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        if body["id"] in self.docs:
            raise CosmosResourceExistsError(status_code=409, message="Entity with the specified id already exists")
        self.docs[body["id"]] = copy.deepcopy(body)
        return copy.deepcopy(body)

    async def read_item(self, item: str, partition_key: str, **kwargs: Any) -> dict[str, Any]:
        if item not in self.docs:
            raise CosmosResourceNotFoundError(status_code=404, message="Entity not found")
        return copy.deepcopy(self.docs[item])

    async def patch_item(
        self,
        item: str,
        partition_key: str,
        patch_operations: list[dict[str, Any]],
        **kwargs: Any,
    ) -> dict[str, Any]:
        if item not in self.docs:
            raise CosmosResourceNotFoundError(status_code=404, message="Entity not found")
        doc = self.docs[item]
        for operation in patch_operations:
            parts = operation["path"].lstrip("/").split("/")
            if operation["op"] == "add" and parts[-1] == "-":
                doc[parts[0]].append(operation["value"])
            else:
                doc[parts[0]] = operation["value"]
        return copy.deepcopy(doc)

    async def delete_item(self, item: str, partition_key: str, **kwargs: Any) -> None:
        if item not in self.docs:
            raise CosmosResourceNotFoundError(status_code=404, message="Entity not found")
        del self.docs[item]

    def query_items(self, query: str, parameters: list[dict[str, Any]] | None = None, **kwargs: Any):
        self.queries.append((query, parameters or []))
        return self._results(query, parameters or [])

    async def _results(self, query: str, parameters: list[dict[str, Any]]):
        if "COUNT(1)" in query:
            yield len(self.docs)
            return

        params = {p["name"].lstrip("@"): p["value"] for p in parameters}
        for doc in list(self.docs.values()):
            if self._matches(query, doc, params):
                yield copy.deepcopy(doc)

    @staticmethod
    def _matches(query: str, doc: dict[str, Any], params: dict[str, Any]) -> bool:
        for name, value in params.items():
            if name == "ids":
                if doc.get("id") not in value:
                    return False
            elif name.startswith("excluded"):
                field = name[len("excluded")].lower() + name[len("excluded") + 1 :]
                if doc.get(field) == value:
                    return False
            elif f"LOWER(c.{name})" in query:
                if str(doc.get(name, "")).lower() != value:
                    return False
            elif doc.get(name) != value:
                return False
        return True


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def containers():
    """Attach fake containers to the service singletons."""
    fakes = SimpleNamespace(
        employees=FakeContainer([MANAGER_DOC, SENIOR_DOC, JUNIOR_DOC]),
        forms=FakeContainer([FORM_DOC]),
        responses=FakeContainer(),
    )
    for service, fake in (
        (employee_service, fakes.employees),
        (form_service, fakes.forms),
        (response_service, fakes.responses),
    ):
        service.container = fake
        service.initialized = True
    yield fakes
    for service in (employee_service, form_service, response_service):
        service.container = None
        service.initialized = False


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def store_client(containers):
    with TestClient(app) as c:
        yield c


@pytest.fixture
async def async_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
