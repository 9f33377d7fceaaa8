"""Employee models for the Cosmos DB employees container."""

from __future__ import annotations

from enum import Enum

from pydantic import Field, computed_field

from appraisal.models.base import CamelModel


class Role(str, Enum):
    MANAGER = "manager"
    ASSISTANT_MANAGER = "assistant-manager"
    SENIOR_DEV = "senior-dev"
    JUNIOR_DEV = "junior-dev"


class Employee(CamelModel):
    employee_id: str
    name: str
    role: Role
    supervisor: str
    team: list[str] = []
    department: str
    form_id: str | None = None


class EmployeeRow(Employee):
    """Employee plus the display name of its supervisor."""

    supervisor_name: str


class EmployeeCreate(CamelModel):
    name: str = Field(..., min_length=1)
    role: Role
    supervisor: str = Field(..., min_length=1)
    department: str = Field(..., min_length=1)
    team: list[str] = []


class TeamMemberUpdate(CamelModel):
    new_employee_id: str = Field(..., min_length=1)


class FormAssignment(CamelModel):
    # Optional so a missing id can be reported as 404 rather than a validation error
    form_id: str | None = None


class BulkEmployeeDelete(CamelModel):
    employee_ids: list[str]


class BatchFormAssignment(CamelModel):
    employee_ids: list[str]
    form_id: str = Field(..., min_length=1)


class AssignmentResult(CamelModel):
    form_id: str
    assigned: list[str] = []
    missing: list[str] = []
    failed: list[str] = []

    @computed_field
    @property
    def ok(self) -> bool:
        return not self.missing and not self.failed


class DeleteResult(CamelModel):
    message: str
    deleted_count: int
