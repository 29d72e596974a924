from __future__ import annotations

import os

# Settings are read at import time by the app modules below.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_ACCESS_SECRET"] = "test-access-secret-0123456789abcdef0123456789"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret-0123456789abcdef012345678"
# The assessment service trusts auth-issued access tokens via the shared secret.
os.environ["AUTH_JWT_SECRET"] = os.environ["JWT_ACCESS_SECRET"]
os.environ.pop("AUTH_JWT_PUBLIC_KEY", None)

from collections.abc import AsyncIterator, Callable, Iterator  # noqa: E402
from pathlib import Path  # noqa: E402

import pytest  # noqa: E402
from assessment_platform.api.assessment_main import app as assessment_app  # noqa: E402
from assessment_platform.api.auth_main import app as auth_app  # noqa: E402
from assessment_platform.api.deps import get_db_session  # noqa: E402
from assessment_platform.core.config import (  # noqa: E402
    get_assessment_settings,
    get_auth_settings,
)
from assessment_platform.infrastructure.db.base import Base  # noqa: E402
from assessment_platform.infrastructure.db.models import Assessment  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Session  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

ASSESSMENT_FIXTURES = [
    {"id": "A1", "name": "Numeracy", "version": 1, "definition": {"questions": 10}},
    {"id": "A2", "name": "Numeracy", "version": 2, "definition": {"questions": 12}},
    {"id": "B1", "name": "Literacy", "version": 1, "definition": ["q1", "q2"]},
    {
        "id": "Z1",
        "name": "Archived",
        "version": 1,
        "definition": {},
        "is_active": False,
    },
]


def _prepare_database(
    path: Path, seed: Callable[[Session], None] | None = None
) -> async_sessionmaker[AsyncSession]:
    """Create the schema in a file-backed SQLite database and return an async factory."""
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    if seed is not None:
        with Session(sync_engine) as session:
            seed(session)
            session.commit()
    sync_engine.dispose()

    # NullPool keeps connections from outliving the event loop that opened them.
    engine = create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    return async_sessionmaker(engine, expire_on_commit=False)


def _enable_foreign_keys(dbapi_connection, _connection_record) -> None:
    # SQLite leaves foreign keys off unless asked, unlike PostgreSQL.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _seed_assessments(session: Session) -> None:
    for row in ASSESSMENT_FIXTURES:
        session.add(Assessment(**row))


def _client_for(
    app: FastAPI, session_factory: async_sessionmaker[AsyncSession]
) -> Iterator[TestClient]:
    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    with TestClient(app) as client:
        client.session_factory = session_factory  # type: ignore[attr-defined]
        yield client
    app.dependency_overrides.pop(get_db_session, None)


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Iterator[None]:
    yield
    get_auth_settings.cache_clear()
    get_assessment_settings.cache_clear()


@pytest.fixture()
def auth_client(tmp_path: Path) -> Iterator[TestClient]:
    session_factory = _prepare_database(tmp_path / "auth.db")
    yield from _client_for(auth_app, session_factory)


@pytest.fixture()
def assessment_client(tmp_path: Path) -> Iterator[TestClient]:
    session_factory = _prepare_database(tmp_path / "assessment.db", _seed_assessments)
    yield from _client_for(assessment_app, session_factory)


@pytest.fixture()
async def async_client(auth_client: TestClient) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the auth service."""
    transport = ASGITransport(app=auth_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture()
async def db_session(tmp_path: Path) -> AsyncIterator[AsyncSession]:
    """Standalone session for service-level tests."""
    session_factory = _prepare_database(tmp_path / "unit.db", _seed_assessments)
    async with session_factory() as session:
        yield session
