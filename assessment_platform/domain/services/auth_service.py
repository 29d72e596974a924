"""Authentication service: registration, login, token refresh, profile lookup."""

from __future__ import annotations

from typing import Any

import structlog
from assessment_platform.core.auth import (
    TokenClaims,
    TokenPair,
    issue_token_pair,
    verify_refresh_token,
)
from assessment_platform.core.errors import AuthError, ConflictError, NotFoundError
from assessment_platform.core.passwords import burn_verification, hash_password, verify_password
from assessment_platform.core.result import Err
from assessment_platform.infrastructure.db.models import UserModel
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

logger = structlog.get_logger()


class UserExistsError(ConflictError):
    """Raised when attempting to register with an existing email."""

    default_message = "Email already registered"


class InvalidCredentialsError(AuthError):
    """Raised for both unknown email and wrong password."""

    default_message = "Invalid credentials"


class InvalidRefreshTokenError(AuthError):
    default_message = "Invalid or expired refresh token"


class UserNotFoundError(NotFoundError):
    default_message = "User not found"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """Service for authentication operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def register_user(self, *, email: str, password: str) -> dict[str, Any]:
        """
        Register a new user.

        Returns:
            dict with user data and tokens
        """
        normalized_email = normalize_email(email)
        await logger.ainfo("register_attempt", email=normalized_email)

        existing = await self.session.scalar(
            select(UserModel.id).where(UserModel.email == normalized_email)
        )
        if existing is not None:
            await logger.awarning("register_duplicate_email", email=normalized_email)
            raise UserExistsError()

        password_hash = await run_in_threadpool(hash_password, password)
        user = UserModel(email=normalized_email, password_hash=password_hash)

        try:
            self.session.add(user)
            await self.session.commit()
            await self.session.refresh(user)
        except IntegrityError as exc:
            # Lost a race with a concurrent registration for the same email
            await self.session.rollback()
            await logger.awarning("register_duplicate_email", email=normalized_email)
            raise UserExistsError() from exc

        await logger.ainfo("register_success", user_id=user.id)

        return {
            "user": self._user_to_dict(user),
            "tokens": issue_token_pair(user.id, user.email),
        }

    async def login(self, *, email: str, password: str) -> dict[str, Any]:
        """
        Authenticate user with email and password.

        Returns:
            dict with user data and tokens
        """
        normalized_email = normalize_email(email)
        await logger.ainfo("login_attempt", email=normalized_email)

        stmt = select(UserModel).where(UserModel.email == normalized_email)
        user = (await self.session.execute(stmt)).scalar_one_or_none()

        if user is None:
            await run_in_threadpool(burn_verification, password)
            await logger.awarning("login_user_not_found", email=normalized_email)
            raise InvalidCredentialsError()

        matches = await run_in_threadpool(verify_password, password, user.password_hash)
        if not matches:
            await logger.awarning("login_invalid_password", user_id=user.id)
            raise InvalidCredentialsError()

        await logger.ainfo("login_success", user_id=user.id)

        return {
            "user": self._user_to_dict(user),
            "tokens": issue_token_pair(user.id, user.email),
        }

    async def get_user_by_id(self, user_id: str) -> dict[str, Any]:
        """Get user by ID."""
        stmt = select(UserModel).where(UserModel.id == user_id)
        user = (await self.session.execute(stmt)).scalar_one_or_none()

        if user is None:
            raise UserNotFoundError()

        return self._user_to_dict(user)

    def _user_to_dict(self, user: UserModel) -> dict[str, Any]:
        return {
            "id": user.id,
            "email": user.email,
            "created_at": user.created_at,
        }


async def refresh_tokens(refresh_token: str) -> TokenPair:
    """Exchange a refresh token for a new pair.

    Needs no store access; the old token stays valid until it expires.
    """
    result = verify_refresh_token(refresh_token)
    if isinstance(result, Err):
        await logger.awarning("refresh_rejected", reason=str(result.error))
        raise InvalidRefreshTokenError()

    claims: TokenClaims = result.value
    await logger.ainfo("refresh_success", user_id=claims.subject_id)
    return issue_token_pair(claims.subject_id, claims.email)
