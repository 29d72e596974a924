"""Password hashing with bcrypt via passlib."""

from __future__ import annotations

from functools import lru_cache

import structlog
from passlib.context import CryptContext

logger = structlog.get_logger()

BCRYPT_ROUNDS = 12

# Password hashing context with bcrypt (cost 12 as per security standards)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt. Every call uses a fresh salt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash; malformed hashes never match."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        logger.warning("password_hash_unrecognized")
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("timing-equalization-placeholder")


def burn_verification(plain_password: str) -> None:
    """Spend one verification's worth of work against a throwaway hash.

    Used when the account does not exist so that a failed login takes about
    as long as a wrong password does.
    """
    pwd_context.verify(plain_password, _dummy_hash())
