"""Pydantic schemas for authentication endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# --- Request Schemas ---


class RegisterRequest(BaseModel):
    """Request schema for user registration."""

    email: str = Field(..., min_length=1, max_length=255, description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class LoginRequest(BaseModel):
    """Request schema for user login."""

    email: str = Field(..., min_length=1, description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class RefreshTokenRequest(BaseModel):
    """Request schema for token refresh."""

    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str = Field(
        ..., alias="refreshToken", min_length=1, description="Refresh token"
    )


# --- Response Schemas ---


class UserResponse(BaseModel):
    """Response schema for user data."""

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="Normalized user email")
    created_at: datetime | None = Field(None, description="Account creation timestamp")


class TokenPairResponse(BaseModel):
    """Access and refresh tokens, camelCased on the wire."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., alias="accessToken", description="JWT access token")
    refresh_token: str = Field(..., alias="refreshToken", description="JWT refresh token")


class AuthResponse(TokenPairResponse):
    """Response schema for registration and login."""

    user: UserResponse


class MeResponse(BaseModel):
    """Response schema for current user info."""

    user: UserResponse
