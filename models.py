from __future__ import annotations

import uuid
from datetime import UTC, datetime

import sqlalchemy as sa
from sqlalchemy import Boolean, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from db import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class ProblemSession(Base):
    __tablename__ = "math_problem_sessions"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), index=True
    )
    problem_text: Mapped[str] = mapped_column(Text)
    final_answer: Mapped[float] = mapped_column(Float)


class Submission(Base):
    __tablename__ = "math_problem_submissions"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )
    # no cascade: submissions only point at the session they graded
    session_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("math_problem_sessions.id"), index=True
    )
    user_answer: Mapped[float] = mapped_column(Float)
    is_correct: Mapped[bool] = mapped_column(Boolean)
    feedback: Mapped[str] = mapped_column(sa.Text)
