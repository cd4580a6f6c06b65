"""Question ORM model — the survey catalog.

Rows are seeded from ``survey_core/data/questions.yaml`` and never deleted:
a retired question is marked ``active = false`` so that past responses keep
a valid foreign key.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, Index, Integer, String, Text
from sqlalchemy import text as sa_text
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from survey_db.models.base import Base


class Question(Base):
    """One catalog question, identified by a stable string id."""

    __tablename__ = "questions"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    # Presentation order within the survey
    order: Mapped[int] = mapped_column(Integer, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    required: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=sa_text("false"),
    )
    active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=sa_text("true"),
    )
    category: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Ordered option labels: ["Agile (Scrum)", ...]; null for free-text kinds
    options: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    placeholder: Mapped[str | None] = mapped_column(Text, nullable=True)
    help_text: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint(
            "kind IN ('text', 'textarea', 'select', 'multiselect')",
            name="ck_question_kind",
        ),
        # Catalog reads filter on active and sort by order
        Index("ix_questions_active_order", "active", "order"),
    )

    def __repr__(self) -> str:
        return f"<Question(id={self.id!r}, order={self.order}, kind={self.kind!r})>"
