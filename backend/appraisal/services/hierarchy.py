"""Supervisor name resolution.

An employee's ``supervisor`` field holds an employee id. When no employee
record carries that id, the employee reports directly to the organisation and
is displayed with the ``Admin`` sentinel. Ids match case-insensitively, the
same way ``EmployeeService.get_employee`` looks them up.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping

from appraisal.models.employee import Employee, EmployeeRow

ADMIN_SUPERVISOR = "Admin"

EmployeeLookup = Callable[[str], Awaitable[Employee | None]]


def _names_by_id(employees: Iterable[Employee]) -> dict[str, str]:
    return {employee.employee_id.lower(): employee.name for employee in employees}


def _name_from(names: Mapping[str, str], supervisor_id: str | None) -> str:
    if not supervisor_id:
        return ADMIN_SUPERVISOR
    return names.get(supervisor_id.lower()) or ADMIN_SUPERVISOR


def supervisor_name(supervisor_id: str | None, employees: Iterable[Employee]) -> str:
    """Resolve against an already-fetched listing."""
    return _name_from(_names_by_id(employees), supervisor_id)


def with_supervisor_names(employees: list[Employee]) -> list[EmployeeRow]:
    names = _names_by_id(employees)
    return [
        EmployeeRow(**employee.model_dump(), supervisor_name=_name_from(names, employee.supervisor))
        for employee in employees
    ]


async def resolve_supervisor_name(employee: Employee, lookup: EmployeeLookup) -> str:
    """Resolve with a dedicated fetch of the supervisor record."""
    if not employee.supervisor:
        return ADMIN_SUPERVISOR
    supervisor = await lookup(employee.supervisor)
    if supervisor is None or not supervisor.name:
        return ADMIN_SUPERVISOR
    return supervisor.name
