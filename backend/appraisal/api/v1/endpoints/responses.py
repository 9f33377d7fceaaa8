from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from appraisal.core.cosmos import StoreUnavailableError
from appraisal.models.response import Response, ResponseCreate
from appraisal.services.employee_service import employee_service
from appraisal.services.form_service import form_service
from appraisal.services.response_service import DuplicateResponseError, response_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/responses", tags=["responses"])


@router.post("", response_model=Response, status_code=status.HTTP_201_CREATED)
async def submit_response(request: ResponseCreate):
    try:
        form = await form_service.get_form(request.form_id)
        employee = await employee_service.get_employee(request.employee_id)
        submitter = await employee_service.get_employee(request.submitted_by)
    except Exception as err:
        logger.exception("Failed to load form %s or employees for response", request.form_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to submit response",
        ) from err

    if not form:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Form not found")
    if not employee:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")
    if not submitter:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submitting employee not found")

    question_ids = {question.question_id for question in form.questions}
    unknown = sorted(set(request.answers) - question_ids)
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown question ids: {', '.join(unknown)}",
        )

    try:
        return await response_service.submit_response(
            employee_id=employee.employee_id,
            form_id=form.form_id,
            submitted_by=submitter.employee_id,
            role=submitter.role,
            answers=request.answers,
        )
    except DuplicateResponseError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except StoreUnavailableError:
        raise
    except Exception as err:
        logger.exception("Failed to store response for %s on %s", request.employee_id, request.form_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to submit response",
        ) from err


@router.get("", response_model=list[Response])
async def list_responses(form_id: str | None = None, employee_id: str | None = None):
    try:
        return await response_service.list_responses(form_id=form_id, employee_id=employee_id)
    except Exception as err:
        logger.exception("Failed to list responses")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve responses",
        ) from err


@router.get("/{employee_id}/{form_id}", response_model=Response)
async def get_response(employee_id: str, form_id: str):
    try:
        response = await response_service.get_response(employee_id, form_id)
    except Exception as err:
        logger.exception("Failed to get response for %s on %s", employee_id, form_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve response",
        ) from err

    if not response:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Response not found")

    return response
