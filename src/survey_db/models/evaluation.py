"""Evaluation and Response ORM models.

An evaluation is written together with its full response set in a single
transaction and is never updated afterwards.  Each response references the
question it answers; the foreign key makes an unknown question id fail the
whole insert.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from survey_db.models.base import Base
from survey_db.models.enums import EvaluationStatus


class Evaluation(Base):
    """One survey run ("before" or "after") by one user."""

    __tablename__ = "evaluations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    # External user ID, as delivered by the identity gateway
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    phase: Mapped[str] = mapped_column(String(10), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=EvaluationStatus.COMPLETED.value,
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        TIMESTAMP(timezone=True), nullable=True
    )

    __table_args__ = (
        CheckConstraint("phase IN ('before', 'after')", name="ck_evaluation_phase"),
        CheckConstraint(
            "status != 'completed' OR completed_at IS NOT NULL",
            name="ck_completed_has_timestamp",
        ),
        # Dashboard query: WHERE user_id = ? ORDER BY created_at DESC
        Index("ix_evaluations_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Evaluation(id={self.id!s}, user={self.user_id!r}, "
            f"phase={self.phase!r}, status={self.status!r})>"
        )


class Response(Base):
    """One answer within an evaluation; multi-select answers are JSON arrays."""

    __tablename__ = "responses"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    evaluation_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("evaluations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    question_id: Mapped[str] = mapped_column(
        Text,
        ForeignKey("questions.id"),
        nullable=False,
    )
    answer: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("evaluation_id", "question_id", name="uq_evaluation_question"),
    )

    def __repr__(self) -> str:
        return f"<Response(evaluation={self.evaluation_id!s}, question={self.question_id!r})>"
