from __future__ import annotations

from collections.abc import AsyncIterator

import structlog
from assessment_platform.core.auth import (
    resolve_user_id,
    verify_access_token,
    verify_bearer_token,
)
from assessment_platform.core.config import get_assessment_settings
from assessment_platform.core.errors import AuthError
from assessment_platform.core.result import Err
from assessment_platform.domain import User
from assessment_platform.infrastructure.db.session import Database, get_session
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

BEARER_SCHEME = "Bearer"

bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header.

    The scheme must be exactly ``Bearer`` followed by a single token; anything
    else is rejected before any verification is attempted.
    """
    if credentials is None:
        if request.headers.get("authorization"):
            raise AuthError("Invalid Authorization header")
        raise AuthError("Missing Authorization header")

    token = credentials.credentials
    if credentials.scheme != BEARER_SCHEME or " " in token:
        raise AuthError("Invalid Authorization header")
    return token


async def get_current_user(
    token: str = Depends(get_bearer_token),  # noqa: B008
) -> User:
    """Resolve the caller from an access token issued by this auth service."""
    result = verify_access_token(token)
    if isinstance(result, Err):
        await logger.ainfo("access_token_rejected", reason=str(result.error))
        raise AuthError("Invalid or expired token")

    return User(user_id=result.value.subject_id, email=result.value.email)


async def get_token_user(
    token: str = Depends(get_bearer_token),  # noqa: B008
) -> User:
    """Resolve the caller from a token minted by the auth service (RS256 or HS256)."""
    key = get_assessment_settings().jwt_verification_key
    if key is None:
        await logger.aerror("jwt_verification_key_missing")

    result = verify_bearer_token(token, key)
    if isinstance(result, Err):
        await logger.ainfo("bearer_token_rejected", reason=str(result.error))
        raise AuthError("Invalid token")

    claims = result.value
    user_id = resolve_user_id(claims)
    if user_id is None:
        raise AuthError("Token missing user identity")

    email = claims.get("email")
    return User(user_id=user_id, email=email if isinstance(email, str) else "")


async def get_db_session(request: Request) -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session bound to the app's database."""
    database: Database = request.app.state.database
    async for session in get_session(database):
        yield session
