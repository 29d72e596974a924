from __future__ import annotations

from typing import Any

import jwt
from assessment_platform.core.auth import issue_access_token


def auth_headers(user_id: str = "student-1", email: str = "student@example.com") -> dict[str, str]:
    token = issue_access_token(user_id, email)
    return {"Authorization": f"Bearer {token}"}


def signed_headers(claims: dict[str, Any], key: str, algorithm: str = "HS256") -> dict[str, str]:
    """Bearer header for an arbitrary token, e.g. one minted by a third party."""
    token = jwt.encode(claims, key, algorithm=algorithm)
    return {"Authorization": f"Bearer {token}"}
