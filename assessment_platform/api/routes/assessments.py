from __future__ import annotations

from assessment_platform.api.deps import get_db_session, get_token_user
from assessment_platform.api.schemas.assessments import (
    ActiveAssessmentsResponse,
    AnswerItem,
    AnswerResponse,
    AnswerSubmitRequest,
    AssessmentItem,
    SessionCompleteRequest,
    SessionItem,
    SessionResponse,
    SessionStartRequest,
)
from assessment_platform.domain import User
from assessment_platform.domain.services.assessments import AssessmentService
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/assessments", tags=["Assessments"])


@router.get("/active", response_model=ActiveAssessmentsResponse)
async def list_active_assessments(
    user: User = Depends(get_token_user),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> ActiveAssessmentsResponse:
    """Active assessments ordered by name, newest version first."""
    assessments = await AssessmentService(session).list_active()
    return ActiveAssessmentsResponse(
        assessments=[AssessmentItem(**assessment) for assessment in assessments]
    )


@router.post("/start", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def start_session(
    payload: SessionStartRequest,
    user: User = Depends(get_token_user),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> SessionResponse:
    result = await AssessmentService(session).start_session(
        user=user,
        assessment_id=payload.assessment_id,
        metadata=payload.metadata,
    )
    return SessionResponse(session=SessionItem(**result))


@router.post("/answer", response_model=AnswerResponse, status_code=status.HTTP_201_CREATED)
async def submit_answer(
    payload: AnswerSubmitRequest,
    user: User = Depends(get_token_user),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> AnswerResponse:
    """
    Record one answer for the caller's session.

    - 404 when the session does not exist
    - 403 when it belongs to another user
    - 409 when it has already been completed
    """
    result = await AssessmentService(session).record_answer(
        user=user,
        session_id=payload.session_id,
        answer_order=payload.answer_order,
        answer=payload.answer,
        question_id=payload.question_id,
        metadata=payload.metadata,
    )
    return AnswerResponse(answer=AnswerItem(**result))


@router.post("/complete", response_model=SessionResponse)
async def complete_session(
    payload: SessionCompleteRequest,
    user: User = Depends(get_token_user),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> SessionResponse:
    """Complete the caller's active session; any non-match is a 404."""
    result = await AssessmentService(session).complete_session(
        user=user, session_id=payload.session_id
    )
    return SessionResponse(session=SessionItem(**result))
