from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status

from appraisal.core.cosmos import StoreUnavailableError
from appraisal.models.employee import DeleteResult
from appraisal.models.form import BulkFormDelete, Form, FormCreate
from appraisal.services.form_service import form_service
from appraisal.services.listing import SortOrder, filter_forms, paginate, sort_forms

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/forms", tags=["forms"])


@router.get("", response_model=list[Form])
async def list_forms(
    form_id: str | None = None,
    order: SortOrder = SortOrder.ASC,
    skip: int = Query(0, ge=0),
    limit: int | None = Query(None, ge=1),
):
    try:
        forms = await form_service.list_forms()
    except Exception as err:
        logger.exception("Failed to list forms")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve forms",
        ) from err

    if not forms:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No forms found")

    return paginate(sort_forms(filter_forms(forms, form_id), order), skip, limit)


@router.post("", response_model=Form, status_code=status.HTTP_201_CREATED)
async def create_form(request: FormCreate):
    try:
        return await form_service.create_form(request)
    except StoreUnavailableError:
        raise
    except Exception as err:
        logger.exception("Failed to create form")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create form",
        ) from err


@router.delete("", response_model=DeleteResult)
async def delete_forms(request: BulkFormDelete):
    try:
        deleted = await form_service.delete_forms(request.form_ids)
    except StoreUnavailableError:
        raise
    except Exception as err:
        logger.exception("Failed to delete %d forms", len(request.form_ids))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete forms",
        ) from err

    return DeleteResult(message=f"{deleted} forms deleted successfully.", deleted_count=deleted)


@router.get("/{form_id}", response_model=Form)
async def get_form(form_id: str):
    try:
        form = await form_service.get_form(form_id)
    except Exception as err:
        logger.exception("Failed to get form %s", form_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve form",
        ) from err

    if not form:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Form not found")

    return form


@router.delete("/{form_id}")
async def delete_form(form_id: str):
    try:
        deleted = await form_service.delete_form(form_id)
    except StoreUnavailableError:
        raise
    except Exception as err:
        logger.exception("Failed to delete form %s", form_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete form",
        ) from err

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Form not found")

    return {"message": f"Form with ID {form_id} deleted successfully"}
