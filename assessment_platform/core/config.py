from __future__ import annotations

import re
from datetime import timedelta
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DURATION_PATTERN = re.compile(r"^\s*(-?(?:\d+)?\.?\d+)\s*([a-z]*)\s*$", re.IGNORECASE)
_UNIT_ALIASES = {
    timedelta(milliseconds=1): ("ms", "msec", "msecs", "millisecond", "milliseconds"),
    timedelta(seconds=1): ("s", "sec", "secs", "second", "seconds"),
    timedelta(minutes=1): ("m", "min", "mins", "minute", "minutes"),
    timedelta(hours=1): ("h", "hr", "hrs", "hour", "hours"),
    timedelta(days=1): ("d", "day", "days"),
    timedelta(weeks=1): ("w", "week", "weeks"),
    timedelta(days=365.25): ("y", "yr", "yrs", "year", "years"),
}
_DURATION_UNITS = {alias: size for size, aliases in _UNIT_ALIASES.items() for alias in aliases}


def parse_duration(value: str | int | float | timedelta) -> timedelta:
    """Parse a ``jsonwebtoken`` style ``expiresIn`` value into a timedelta.

    Numbers are seconds. Strings carry a unit (``15m``, ``7d``, ``2 hours``,
    ``1y``); a string without one is milliseconds, so ``"3600"`` is 3.6s.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, int | float):
        return timedelta(seconds=value)

    match = _DURATION_PATTERN.match(value)
    if match is None:
        raise ValueError(f"Unsupported duration: {value!r}")
    amount, unit = match.groups()
    unit_size = _DURATION_UNITS.get(unit.lower() or "ms")
    if unit_size is None:
        raise ValueError(f"Unsupported duration unit: {unit!r}")
    return unit_size * float(amount)


class ServiceSettings(BaseSettings):
    """Runtime configuration shared by both services."""

    app_name: str = Field(default="Assessment Platform", validation_alias="APP_NAME")
    environment: str = Field(default="local", validation_alias="APP_ENV")
    version: str = Field(default="0.1.0")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=8000, validation_alias="PORT")
    database_url: str = Field(..., validation_alias="DATABASE_URL")

    @property
    def async_database_url(self) -> str:
        """Convert database URL to async format (postgresql+asyncpg://)."""
        url = self.database_url
        # Hosting providers hand out postgres:// URLs
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        elif url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+asyncpg://", 1)
        return url

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="allow")


class AuthSettings(ServiceSettings):
    """Configuration for the auth service."""

    app_name: str = Field(default="Auth Service", validation_alias="APP_NAME")
    port: int = Field(default=3000, validation_alias="PORT")
    jwt_access_secret: str = Field(..., min_length=1, validation_alias="JWT_ACCESS_SECRET")
    jwt_refresh_secret: str = Field(..., min_length=1, validation_alias="JWT_REFRESH_SECRET")
    jwt_access_expires_in: timedelta = Field(
        default=timedelta(minutes=15), validation_alias="JWT_ACCESS_EXPIRES_IN"
    )
    jwt_refresh_expires_in: timedelta = Field(
        default=timedelta(days=7), validation_alias="JWT_REFRESH_EXPIRES_IN"
    )
    jwt_algorithm: str = Field(default="HS256")

    @field_validator("jwt_access_expires_in", "jwt_refresh_expires_in", mode="before")
    @classmethod
    def _parse_expiry(cls, value: object) -> timedelta:
        if isinstance(value, str | int | float | timedelta):
            return parse_duration(value)
        raise ValueError(f"Unsupported duration: {value!r}")


class AssessmentSettings(ServiceSettings):
    """Configuration for the assessment service."""

    app_name: str = Field(default="Assessment Service", validation_alias="APP_NAME")
    port: int = Field(default=3002, validation_alias="PORT")
    auth_jwt_public_key: str | None = Field(default=None, validation_alias="AUTH_JWT_PUBLIC_KEY")
    auth_jwt_secret: str | None = Field(default=None, validation_alias="AUTH_JWT_SECRET")

    @property
    def jwt_verification_key(self) -> str | None:
        """Public key when configured, shared secret otherwise."""
        if self.auth_jwt_public_key:
            # PEM blocks are often passed through env with escaped newlines
            return self.auth_jwt_public_key.replace("\\n", "\n")
        if self.auth_jwt_secret:
            return self.auth_jwt_secret
        return None


@lru_cache
def get_auth_settings() -> AuthSettings:
    """Return cached auth service settings."""
    return AuthSettings()


@lru_cache
def get_assessment_settings() -> AssessmentSettings:
    """Return cached assessment service settings."""
    return AssessmentSettings()
