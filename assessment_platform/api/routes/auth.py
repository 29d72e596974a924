"""Authentication routes - register, login, token refresh, profile."""

from __future__ import annotations

from typing import Any

from assessment_platform.api.deps import get_current_user, get_db_session
from assessment_platform.api.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    RefreshTokenRequest,
    RegisterRequest,
    TokenPairResponse,
    UserResponse,
)
from assessment_platform.domain import User
from assessment_platform.domain.services.auth_service import AuthService, refresh_tokens
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Create a new user account and return an access/refresh token pair.",
)
async def register(
    payload: RegisterRequest,
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> AuthResponse:
    service = AuthService(session)
    result = await service.register_user(email=payload.email, password=payload.password)
    return _auth_response(result)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="User login",
    description="Authenticate user with email and password, returns JWT tokens.",
)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> AuthResponse:
    service = AuthService(session)
    result = await service.login(email=payload.email, password=payload.password)
    return _auth_response(result)


@router.post(
    "/refresh",
    response_model=TokenPairResponse,
    summary="Refresh tokens",
    description="Exchange a refresh token for a new access/refresh pair.",
)
async def refresh(payload: RefreshTokenRequest) -> TokenPairResponse:
    tokens = await refresh_tokens(payload.refresh_token)
    return TokenPairResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )


@router.get(
    "/me",
    response_model=MeResponse,
    summary="Get current user",
    description="Get the currently authenticated user's profile.",
)
async def get_me(
    user: User = Depends(get_current_user),  # noqa: B008
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> MeResponse:
    user_data = await AuthService(session).get_user_by_id(user.user_id)
    return MeResponse(user=UserResponse(**user_data))


def _auth_response(result: dict[str, Any]) -> AuthResponse:
    tokens = result["tokens"]
    return AuthResponse(
        user=UserResponse(**result["user"]),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
    )
