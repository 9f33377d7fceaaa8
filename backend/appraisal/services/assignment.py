"""Batch assignment of an appraisal form to selected employees."""

from __future__ import annotations

import asyncio
import logging

from appraisal.core.cosmos import StoreUnavailableError
from appraisal.models.employee import AssignmentResult
from appraisal.services.employee_service import EmployeeService, employee_service

logger = logging.getLogger(__name__)


async def assign_form_to_employees(
    employee_ids: list[str],
    form_id: str,
    service: EmployeeService = employee_service,
) -> AssignmentResult:
    """Assign ``form_id`` to every employee independently and in parallel.

    Updates are not atomic as a batch: when one employee fails, the others
    keep their new form. The result lists the outcome per employee so the
    caller can retry just the missing or failed ones.
    """
    unique_ids = list(dict.fromkeys(employee_ids))
    outcomes = await asyncio.gather(
        *(service.assign_form(employee_id, form_id) for employee_id in unique_ids),
        return_exceptions=True,
    )
    for outcome in outcomes:
        if isinstance(outcome, StoreUnavailableError):
            raise outcome

    result = AssignmentResult(form_id=form_id)
    for employee_id, outcome in zip(unique_ids, outcomes):
        if isinstance(outcome, BaseException):
            logger.error("Assigning form %s to %s failed: %s", form_id, employee_id, outcome)
            result.failed.append(employee_id)
        elif outcome is None:
            result.missing.append(employee_id)
        else:
            result.assigned.append(employee_id)

    logger.info(
        "Form %s assigned to %d/%d employees",
        form_id,
        len(result.assigned),
        len(unique_ids),
    )
    return result
