from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class SessionStatus(str, enum.Enum):
    """Assessment session lifecycle; only ACTIVE -> COMPLETED is allowed."""

    ACTIVE = "active"
    COMPLETED = "completed"


# --- Auth service tables ---


class UserModel(Base):
    """SQLAlchemy model for users table."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email={self.email})>"


# --- Assessment service tables ---


class Assessment(Base):
    """Assessment definition. Managed outside this system and only read here."""

    __tablename__ = "assessments"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    definition: Mapped[Any] = mapped_column(JSON, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)


class AssessmentSession(Base):
    __tablename__ = "assessment_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    # Not constrained to the catalog; any id the client sends is recorded.
    assessment_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    # Copied from a verified token; never checked against the users table.
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    status: Mapped[SessionStatus] = mapped_column(
        Enum(
            SessionStatus,
            name="assessment_session_status",
            values_callable=lambda enum: [e.value for e in enum],
        ),
        default=SessionStatus.ACTIVE,
        nullable=False,
    )
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    metadata_: Mapped[dict] = mapped_column("metadata", JSON, nullable=False, default=dict)

    answers: Mapped[list[AssessmentAnswer]] = relationship(back_populates="session")


class AssessmentAnswer(Base):
    """A single recorded answer. Insert-only; answer_order is not unique."""

    __tablename__ = "assessment_answers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    session_id: Mapped[str] = mapped_column(
        ForeignKey("assessment_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    question_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    answer_order: Mapped[int] = mapped_column(Integer, nullable=False)
    answer_payload: Mapped[Any] = mapped_column(JSON, nullable=True)
    answered_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    metadata_: Mapped[dict] = mapped_column("metadata", JSON, nullable=False, default=dict)

    session: Mapped[AssessmentSession] = relationship(back_populates="answers")
