"""Evaluation models — the contract between the service and API callers.

These models are intentionally decoupled from the ORM models in
``survey_db`` so that API consumers never see database internals.

    EvaluationHeader   — what the respondent fills in before the wizard
    EvaluationSummary  — returned after a successful create
    EvaluationListItem — one row of the owner's dashboard
    EvaluationDetail   — header plus responses joined with question text
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, computed_field, field_validator

from survey_core.codec import decode_for_display
from survey_core.constants import DEFAULT_CATEGORY

Phase = Literal["before", "after"]


class EvaluationHeader(BaseModel):
    """Name, description, and phase of an evaluation being taken."""

    name: str
    description: Optional[str] = None
    phase: Phase = "before"

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name is required")
        return v


class EvaluationSummary(BaseModel):
    id: str
    name: str
    phase: Phase
    status: str


class EvaluationListItem(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    phase: Phase
    status: str
    response_count: int
    created_at: datetime
    completed_at: Optional[datetime] = None


class ResponseDetail(BaseModel):
    """A stored answer joined with its question's text and category."""

    question_id: str
    question_text: str
    question_category: Optional[str] = None
    answer: str

    def display_value(self) -> str | list[str]:
        return decode_for_display(self.answer)


class EvaluationDetail(BaseModel):
    """Full evaluation; responses are ordered by question order."""

    id: str
    name: str
    description: Optional[str] = None
    phase: Phase
    status: str
    created_at: datetime
    completed_at: Optional[datetime] = None
    responses: list[ResponseDetail]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def grouped(self) -> dict[str, list[ResponseDetail]]:
        return group_by_category(self.responses)


def group_by_category(responses: list[ResponseDetail]) -> dict[str, list[ResponseDetail]]:
    """Group responses by question category, preserving first-seen order.

    Responses whose question has no category land under ``"Other"``.
    """
    groups: dict[str, list[ResponseDetail]] = {}
    for response in responses:
        groups.setdefault(response.question_category or DEFAULT_CATEGORY, []).append(response)
    return groups
