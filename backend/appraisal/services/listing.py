"""Filtering, sorting and paging for the dashboard tables."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TypeVar

from appraisal.models.employee import Employee, EmployeeRow
from appraisal.models.form import Form

T = TypeVar("T")
E = TypeVar("E", bound=Employee)


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class EmployeeSortField(str, Enum):
    EMPLOYEE_ID = "employeeId"
    NAME = "name"
    SUPERVISOR = "supervisor"


def paginate(items: list[T], skip: int = 0, limit: int | None = None) -> list[T]:
    if limit is None:
        return items[skip:]
    return items[skip : skip + limit]


def filter_employees(employees: list[E], employee_id: str | None) -> list[E]:
    if not employee_id:
        return employees
    needle = employee_id.lower()
    return [e for e in employees if needle in e.employee_id.lower()]


def sort_employees(
    employees: list[E],
    field: EmployeeSortField | None,
    order: SortOrder = SortOrder.ASC,
) -> list[E]:
    if field is None:
        return employees

    def key(employee: E) -> str:
        if field is EmployeeSortField.NAME:
            return employee.name.lower()
        if field is EmployeeSortField.SUPERVISOR:
            # Table rows sort by the displayed name, plain records by id
            if isinstance(employee, EmployeeRow):
                return employee.supervisor_name.lower()
            return employee.supervisor.lower()
        return employee.employee_id.lower()

    return sorted(employees, key=key, reverse=order is SortOrder.DESC)


def filter_forms(forms: list[Form], form_id: str | None) -> list[Form]:
    if not form_id:
        return forms
    needle = form_id.upper()
    return [form for form in forms if needle in form.form_id.upper()]


def sort_forms(forms: list[Form], order: SortOrder = SortOrder.ASC) -> list[Form]:
    def key(form: Form) -> datetime:
        return form.created_at

    return sorted(forms, key=key, reverse=order is SortOrder.DESC)
