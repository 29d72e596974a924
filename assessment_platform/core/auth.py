from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

import jwt
from assessment_platform.core.config import get_auth_settings
from assessment_platform.core.result import Err, Ok, Result

BEARER_ALGORITHMS = ("RS256", "HS256")


class TokenError(Exception):
    """Raised when a token cannot be decoded or validated."""


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Identity carried by an access or refresh token."""

    subject_id: str
    email: str


@dataclass(frozen=True, slots=True)
class TokenPair:
    access_token: str
    refresh_token: str


def issue_access_token(
    subject_id: str, email: str, *, expires_in: timedelta | None = None
) -> str:
    """Sign a short-lived access token with the access secret."""
    settings = get_auth_settings()
    return _encode(
        subject_id,
        email,
        token_type=TokenType.ACCESS,
        secret=settings.jwt_access_secret,
        algorithm=settings.jwt_algorithm,
        ttl=expires_in if expires_in is not None else settings.jwt_access_expires_in,
    )


def issue_refresh_token(
    subject_id: str, email: str, *, expires_in: timedelta | None = None
) -> str:
    """Sign a long-lived refresh token with the refresh secret."""
    settings = get_auth_settings()
    return _encode(
        subject_id,
        email,
        token_type=TokenType.REFRESH,
        secret=settings.jwt_refresh_secret,
        algorithm=settings.jwt_algorithm,
        ttl=expires_in if expires_in is not None else settings.jwt_refresh_expires_in,
    )


def issue_token_pair(subject_id: str, email: str) -> TokenPair:
    return TokenPair(
        access_token=issue_access_token(subject_id, email),
        refresh_token=issue_refresh_token(subject_id, email),
    )


def verify_access_token(token: str) -> Result[TokenClaims, TokenError]:
    """Validate an access token; signature, expiry and token type must all hold."""
    settings = get_auth_settings()
    return _decode(
        token,
        token_type=TokenType.ACCESS,
        secret=settings.jwt_access_secret,
        algorithm=settings.jwt_algorithm,
    )


def verify_refresh_token(token: str) -> Result[TokenClaims, TokenError]:
    """Validate a refresh token; signature, expiry and token type must all hold."""
    settings = get_auth_settings()
    return _decode(
        token,
        token_type=TokenType.REFRESH,
        secret=settings.jwt_refresh_secret,
        algorithm=settings.jwt_algorithm,
    )


def verify_bearer_token(token: str, key: str | None) -> Result[dict[str, Any], TokenError]:
    """Validate a token minted elsewhere against a public key or shared secret.

    Both RS256 and HS256 are accepted. PyJWT rejects HMAC verification with
    asymmetric key material, so a configured public key only ever verifies
    RS256 signatures.
    """
    if not key:
        return Err(TokenError("No JWT verification key configured"))

    try:
        payload = jwt.decode(token, key, algorithms=list(BEARER_ALGORITHMS))
    except jwt.PyJWTError as exc:
        return Err(TokenError(str(exc) or "Invalid token"))
    return Ok(payload)


def resolve_user_id(claims: dict[str, Any]) -> str | None:
    """Prefer an explicit ``user_id`` claim, fall back to ``sub``."""
    user_id = claims.get("user_id")
    if not isinstance(user_id, str):
        user_id = claims.get("sub")
    return str(user_id) if user_id else None


def _encode(
    subject_id: str,
    email: str,
    *,
    token_type: TokenType,
    secret: str,
    algorithm: str,
    ttl: timedelta,
) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": subject_id,
        "email": email,
        "typ": token_type.value,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def _decode(
    token: str, *, token_type: TokenType, secret: str, algorithm: str
) -> Result[TokenClaims, TokenError]:
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["sub", "exp", "typ"]},
        )
    except jwt.PyJWTError as exc:
        return Err(TokenError(str(exc) or "Invalid token"))

    if payload.get("typ") != token_type.value:
        return Err(TokenError(f"Expected {token_type.value} token"))

    return Ok(TokenClaims(subject_id=payload["sub"], email=payload.get("email", "")))
