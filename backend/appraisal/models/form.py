"""Appraisal form models for the Cosmos DB forms container."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from appraisal.models.base import CamelModel


class QuestionType(str, Enum):
    TEXT = "text"
    RATING = "rating"


class Question(CamelModel):
    question_id: str
    question: str = Field(..., min_length=1)
    type: QuestionType


class QuestionDraft(CamelModel):
    """A question as submitted by the dashboard; the id may be left to the server."""

    question_id: str | None = None
    question: str = Field(..., min_length=1)
    type: QuestionType = QuestionType.TEXT


class Form(CamelModel):
    form_id: str
    questions: list[Question] = []
    created_at: datetime
    updated_at: datetime


class FormCreate(CamelModel):
    questions: list[QuestionDraft] = Field(..., min_length=1)

    def numbered_questions(self) -> list[Question]:
        """Fill in missing question ids positionally as Q1, Q2, ..."""
        return [
            Question(
                question_id=draft.question_id or f"Q{index}",
                question=draft.question,
                type=draft.type,
            )
            for index, draft in enumerate(self.questions, start=1)
        ]


class BulkFormDelete(CamelModel):
    form_ids: list[str]
