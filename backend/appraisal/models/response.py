"""Submitted appraisal responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from appraisal.models.base import CamelModel
from appraisal.models.employee import Role


class Response(CamelModel):
    employee_id: str
    form_id: str
    submitted_by: str
    role: Role
    answers: dict[str, str]
    submitted_at: datetime


class ResponseCreate(CamelModel):
    employee_id: str = Field(..., min_length=1)
    form_id: str = Field(..., min_length=1)
    submitted_by: str = Field(..., min_length=1)
    answers: dict[str, str]
