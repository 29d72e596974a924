from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class User:
    """Represents an authenticated actor within the system."""

    user_id: str
    email: str = ""
