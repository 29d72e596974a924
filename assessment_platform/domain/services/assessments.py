"""Assessment session lifecycle: list, start, answer, complete."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import structlog
from assessment_platform.core.errors import (
    ConflictError,
    ForbiddenError,
    InternalError,
    NotFoundError,
)
from assessment_platform.domain import User
from assessment_platform.infrastructure.db.models import (
    Assessment,
    AssessmentAnswer,
    AssessmentSession,
    SessionStatus,
)
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


class SessionNotFoundError(NotFoundError):
    default_message = "Session not found"


class SessionNotOwnedError(ForbiddenError):
    default_message = "Session does not belong to user"


class SessionCompletedError(ConflictError):
    default_message = "Session already completed"


class AssessmentService:
    """Domain logic for assessment session operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_active(self) -> list[dict[str, Any]]:
        stmt = (
            select(Assessment)
            .where(Assessment.is_active.is_(True))
            .order_by(Assessment.name, Assessment.version.desc())
        )
        try:
            assessments = (await self.session.execute(stmt)).scalars().all()
        except SQLAlchemyError as exc:
            await logger.aerror("assessments_list_failed", exc_info=exc)
            raise InternalError("Failed to load assessments") from exc

        return [
            {
                "id": assessment.id,
                "name": assessment.name,
                "version": assessment.version,
                "definition": assessment.definition,
            }
            for assessment in assessments
        ]

    async def start_session(
        self,
        *,
        user: User,
        assessment_id: str,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        record = AssessmentSession(
            assessment_id=assessment_id,
            user_id=user.user_id,
            status=SessionStatus.ACTIVE,
            metadata_=metadata if metadata is not None else {},
        )
        try:
            self.session.add(record)
            await self.session.commit()
            await self.session.refresh(record)
        except SQLAlchemyError as exc:
            await self._rollback_quietly()
            await logger.aerror(
                "session_start_failed", assessment_id=assessment_id, exc_info=exc
            )
            raise InternalError("Failed to start assessment session") from exc

        await logger.ainfo(
            "session_started",
            session_id=record.id,
            assessment_id=assessment_id,
            user_id=user.user_id,
        )
        return self._session_to_dict(record)

    async def record_answer(
        self,
        *,
        user: User,
        session_id: str,
        answer_order: int,
        answer: Any,
        question_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Append an answer to one of the caller's active sessions.

        Ownership and status are checked with a separate read first, so a
        missing session (404) is distinguishable from someone else's (403).
        """
        try:
            target = (
                await self.session.execute(
                    select(
                        AssessmentSession.id,
                        AssessmentSession.user_id,
                        AssessmentSession.status,
                    ).where(AssessmentSession.id == session_id)
                )
            ).one_or_none()
        except SQLAlchemyError as exc:
            await logger.aerror(
                "answer_session_lookup_failed", session_id=session_id, exc_info=exc
            )
            raise InternalError("Failed to record answer") from exc

        if target is None:
            raise SessionNotFoundError()
        if target.user_id != user.user_id:
            await logger.awarning(
                "answer_session_not_owned", session_id=session_id, user_id=user.user_id
            )
            raise SessionNotOwnedError()
        if target.status == SessionStatus.COMPLETED:
            raise SessionCompletedError()

        record = AssessmentAnswer(
            session_id=session_id,
            question_id=question_id,
            answer_order=answer_order,
            answer_payload=answer,
            metadata_=metadata if metadata is not None else {},
        )
        try:
            self.session.add(record)
            await self.session.commit()
            await self.session.refresh(record)
        except SQLAlchemyError as exc:
            await self._rollback_quietly()
            await logger.aerror("answer_insert_failed", session_id=session_id, exc_info=exc)
            raise InternalError("Failed to record answer") from exc

        await logger.ainfo(
            "answer_recorded",
            answer_id=record.id,
            session_id=session_id,
            answer_order=answer_order,
        )
        return self._answer_to_dict(record)

    async def complete_session(self, *, user: User, session_id: str) -> dict[str, Any]:
        """Mark the caller's active session completed.

        A single conditional update; "not found", "not yours" and "already
        completed" all surface as SessionNotFoundError.
        """
        stmt = (
            update(AssessmentSession)
            .where(
                AssessmentSession.id == session_id,
                AssessmentSession.user_id == user.user_id,
                AssessmentSession.status == SessionStatus.ACTIVE,
            )
            .values(status=SessionStatus.COMPLETED, completed_at=datetime.now(UTC))
            .returning(AssessmentSession)
        )
        try:
            record = (await self.session.scalars(stmt)).one_or_none()
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self._rollback_quietly()
            await logger.aerror("session_complete_failed", session_id=session_id, exc_info=exc)
            raise InternalError("Failed to complete assessment session") from exc

        if record is None:
            raise SessionNotFoundError()

        await logger.ainfo("session_completed", session_id=session_id, user_id=user.user_id)
        return self._session_to_dict(record)

    async def _rollback_quietly(self) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError as exc:
            await logger.awarning("rollback_failed", exc_info=exc)

    def _session_to_dict(self, record: AssessmentSession) -> dict[str, Any]:
        return {
            "id": record.id,
            "assessment_id": record.assessment_id,
            "user_id": record.user_id,
            "status": SessionStatus(record.status).value,
            "started_at": record.started_at,
            "completed_at": record.completed_at,
            "metadata": record.metadata_,
        }

    def _answer_to_dict(self, record: AssessmentAnswer) -> dict[str, Any]:
        return {
            "id": record.id,
            "session_id": record.session_id,
            "question_id": record.question_id,
            "answer_order": record.answer_order,
            "answer_payload": record.answer_payload,
            "answered_at": record.answered_at,
            "metadata": record.metadata_,
        }
