"""Service-level tests for AssessmentService."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from assessment_platform.api.assessment_main import app as assessment_app
from assessment_platform.api.deps import get_db_session
from assessment_platform.core.errors import InternalError
from assessment_platform.domain import User
from assessment_platform.domain.services.assessments import (
    AssessmentService,
    SessionCompletedError,
    SessionNotFoundError,
    SessionNotOwnedError,
)
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from tests.utils import auth_headers


class _UnavailableSession:
    """Stands in for an AsyncSession whose database has gone away."""

    def add(self, _instance: object) -> None:
        return None

    async def execute(self, *_args: object, **_kwargs: object) -> None:
        raise OperationalError("SELECT 1", {}, ConnectionError("database unavailable"))

    async def scalars(self, *_args: object, **_kwargs: object) -> None:
        raise OperationalError("UPDATE", {}, ConnectionError("database unavailable"))

    async def commit(self) -> None:
        raise OperationalError("COMMIT", {}, ConnectionError("database unavailable"))

    async def rollback(self) -> None:
        return None


@pytest.mark.asyncio
async def test_session_lifecycle(db_session: AsyncSession) -> None:
    service = AssessmentService(db_session)
    owner = User(user_id="owner")

    started = await service.start_session(user=owner, assessment_id="B1")
    answer = await service.record_answer(
        user=owner, session_id=started["id"], answer_order=1, answer={"pick": 2}
    )
    completed = await service.complete_session(user=owner, session_id=started["id"])

    assert started["status"] == "active"
    assert answer["answer_payload"] == {"pick": 2}
    assert answer["metadata"] == {}
    assert completed["status"] == "completed"
    assert completed["completed_at"] is not None
    assert completed["started_at"] == started["started_at"]


@pytest.mark.asyncio
async def test_record_answer_error_precedence(db_session: AsyncSession) -> None:
    service = AssessmentService(db_session)
    owner = User(user_id="owner")
    started = await service.start_session(user=owner, assessment_id="A1")
    await service.complete_session(user=owner, session_id=started["id"])

    with pytest.raises(SessionNotFoundError):
        await service.record_answer(user=owner, session_id="nope", answer_order=1, answer="A")
    # Ownership is checked before completion status
    with pytest.raises(SessionNotOwnedError):
        await service.record_answer(
            user=User(user_id="other"), session_id=started["id"], answer_order=1, answer="A"
        )
    with pytest.raises(SessionCompletedError):
        await service.record_answer(
            user=owner, session_id=started["id"], answer_order=1, answer="A"
        )


@pytest.mark.asyncio
async def test_complete_session_collapses_failures(db_session: AsyncSession) -> None:
    service = AssessmentService(db_session)
    started = await service.start_session(user=User(user_id="owner"), assessment_id="A1")

    with pytest.raises(SessionNotFoundError):
        await service.complete_session(user=User(user_id="other"), session_id=started["id"])
    with pytest.raises(SessionNotFoundError):
        await service.complete_session(user=User(user_id="owner"), session_id="nope")


@pytest.mark.asyncio
async def test_store_failures_become_internal_errors() -> None:
    service = AssessmentService(_UnavailableSession())  # type: ignore[arg-type]
    user = User(user_id="owner")

    with pytest.raises(InternalError, match="Failed to load assessments"):
        await service.list_active()
    with pytest.raises(InternalError, match="Failed to start assessment session"):
        await service.start_session(user=user, assessment_id="A1")
    with pytest.raises(InternalError, match="Failed to record answer"):
        await service.record_answer(user=user, session_id="s", answer_order=1, answer="A")
    with pytest.raises(InternalError, match="Failed to complete assessment session"):
        await service.complete_session(user=user, session_id="s")


def test_store_failure_renders_500_without_detail() -> None:
    async def unavailable_session() -> AsyncIterator[_UnavailableSession]:
        yield _UnavailableSession()

    assessment_app.dependency_overrides[get_db_session] = unavailable_session
    try:
        with TestClient(assessment_app) as client:
            response = client.get("/assessments/active", headers=auth_headers())
    finally:
        assessment_app.dependency_overrides.pop(get_db_session, None)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to load assessments"}
