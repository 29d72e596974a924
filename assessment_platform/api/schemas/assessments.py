from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class AssessmentItem(BaseModel):
    id: str
    name: str
    version: int
    definition: Any = Field(None, description="Opaque assessment content")


class ActiveAssessmentsResponse(BaseModel):
    assessments: list[AssessmentItem]


class SessionStartRequest(BaseModel):
    assessment_id: str = Field(..., min_length=1, description="Assessment to start")
    metadata: dict[str, Any] | None = Field(None, description="Stored and returned unmodified")


class AnswerSubmitRequest(BaseModel):
    session_id: str = Field(..., min_length=1)
    question_id: str | None = None
    answer: Any = Field(..., description="Arbitrary JSON value, null included")
    answer_order: int
    metadata: dict[str, Any] | None = None


class SessionCompleteRequest(BaseModel):
    session_id: str = Field(..., min_length=1)


class SessionItem(BaseModel):
    id: str
    assessment_id: str
    user_id: str
    status: str
    started_at: datetime
    completed_at: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class SessionResponse(BaseModel):
    session: SessionItem


class AnswerItem(BaseModel):
    id: str
    session_id: str
    question_id: str | None = None
    answer_order: int
    answer_payload: Any = None
    answered_at: datetime
    metadata: dict[str, Any] = Field(default_factory=dict)


class AnswerResponse(BaseModel):
    answer: AnswerItem
