from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, Response, status

from appraisal.core.cosmos import StoreUnavailableError
from appraisal.models.employee import (
    AssignmentResult,
    BatchFormAssignment,
    BulkEmployeeDelete,
    DeleteResult,
    Employee,
    EmployeeCreate,
    EmployeeRow,
    FormAssignment,
    TeamMemberUpdate,
)
from appraisal.services.assignment import assign_form_to_employees
from appraisal.services.employee_service import employee_service
from appraisal.services.form_service import form_service
from appraisal.services.hierarchy import resolve_supervisor_name, with_supervisor_names
from appraisal.services.listing import (
    EmployeeSortField,
    SortOrder,
    filter_employees,
    paginate,
    sort_employees,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])


async def _all_employees() -> list[Employee]:
    try:
        employees = await employee_service.list_employees()
    except Exception as err:
        logger.exception("Failed to list employees")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve employees",
        ) from err

    if not employees:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No employees found")
    return employees


async def _require_form(form_id: str) -> None:
    """404 for an unknown form; skipped when the form store is not configured."""
    if not form_service.initialized:
        return

    try:
        known = await form_service.form_exists(form_id)
    except Exception as err:
        logger.exception("Failed to look up form %s", form_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve form",
        ) from err

    if not known:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Form '{form_id}' not found")


@router.get("", response_model=list[Employee])
async def list_employees(
    employee_id: str | None = None,
    sort: EmployeeSortField | None = None,
    order: SortOrder = SortOrder.ASC,
    skip: int = Query(0, ge=0),
    limit: int | None = Query(None, ge=1),
):
    employees = await _all_employees()
    employees = sort_employees(filter_employees(employees, employee_id), sort, order)
    return paginate(employees, skip, limit)


@router.get("/table", response_model=list[EmployeeRow])
async def list_employee_rows(
    employee_id: str | None = None,
    sort: EmployeeSortField | None = None,
    order: SortOrder = SortOrder.ASC,
    skip: int = Query(0, ge=0),
    limit: int | None = Query(None, ge=1),
):
    # Supervisor names are joined against the full listing before filtering
    rows = with_supervisor_names(await _all_employees())
    rows = sort_employees(filter_employees(rows, employee_id), sort, order)
    return paginate(rows, skip, limit)


@router.get("/supervisors", response_model=list[Employee])
async def list_supervisors():
    try:
        supervisors = await employee_service.list_supervisors()
    except Exception as err:
        logger.exception("Failed to list supervisors")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve supervisors",
        ) from err

    if not supervisors:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No supervisors found")
    return supervisors


@router.post("", response_model=Employee, status_code=status.HTTP_201_CREATED)
async def create_employee(request: EmployeeCreate):
    try:
        return await employee_service.create_employee(request)
    except StoreUnavailableError:
        raise
    except Exception as err:
        logger.exception("Failed to create employee %s", request.name)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create employee",
        ) from err


@router.delete("", response_model=DeleteResult)
async def delete_employees(request: BulkEmployeeDelete):
    try:
        deleted = await employee_service.delete_employees(request.employee_ids)
    except StoreUnavailableError:
        raise
    except Exception as err:
        logger.exception("Failed to delete %d employees", len(request.employee_ids))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete employees",
        ) from err

    return DeleteResult(message=f"{deleted} employees deleted successfully.", deleted_count=deleted)


@router.post("/form-assignments", response_model=AssignmentResult)
async def assign_form_batch(request: BatchFormAssignment, response: Response):
    await _require_form(request.form_id)

    result = await assign_form_to_employees(request.employee_ids, request.form_id)
    if not result.ok:
        response.status_code = status.HTTP_207_MULTI_STATUS
    return result


@router.get("/{employee_id}", response_model=Employee)
async def get_employee(employee_id: str):
    try:
        employee = await employee_service.get_employee(employee_id)
    except Exception as err:
        logger.exception("Failed to get employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve employee",
        ) from err

    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")

    return employee


@router.get("/{employee_id}/profile", response_model=EmployeeRow)
async def get_employee_profile(employee_id: str):
    """Self-lookup: the employee record with its supervisor's display name."""
    try:
        employee = await employee_service.get_employee(employee_id)
        if not employee:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")
        name = await resolve_supervisor_name(employee, employee_service.get_employee)
    except HTTPException:
        raise
    except Exception as err:
        logger.exception("Failed to get profile of employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve employee",
        ) from err

    return EmployeeRow(**employee.model_dump(), supervisor_name=name)


@router.patch("/{employee_id}", response_model=Employee)
async def add_team_member(employee_id: str, request: TeamMemberUpdate):
    try:
        supervisor = await employee_service.add_team_member(employee_id, request.new_employee_id)
    except StoreUnavailableError:
        raise
    except Exception as err:
        logger.exception("Failed to update team of %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update employee",
        ) from err

    if not supervisor:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Supervisor not found")

    return supervisor


@router.delete("/{employee_id}")
async def delete_employee(employee_id: str):
    try:
        deleted = await employee_service.delete_employee(employee_id)
    except StoreUnavailableError:
        raise
    except Exception as err:
        logger.exception("Failed to delete employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete employee",
        ) from err

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")

    return {"message": f"Employee with ID {employee_id} deleted successfully"}


@router.patch("/{employee_id}/form", response_model=Employee)
async def assign_form(employee_id: str, request: FormAssignment):
    if not request.form_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Form ID not found")

    await _require_form(request.form_id)

    try:
        employee = await employee_service.assign_form(employee_id, request.form_id)
    except StoreUnavailableError:
        raise
    except Exception as err:
        logger.exception("Failed to assign form %s to %s", request.form_id, employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to assign form",
        ) from err

    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")

    return employee
