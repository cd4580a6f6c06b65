"""Initial schema: users, questions, evaluations, responses.

Creates the four tables backing the survey service.  ``responses`` carries
a foreign key to ``questions`` so that an evaluation referencing an
unknown question id fails as a whole, and a unique
``(evaluation_id, question_id)`` pair so a question is answered at most
once per evaluation.

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

# revision identifiers, used by Alembic.
revision = "20261019_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.Text(), nullable=False, unique=True),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", TIMESTAMP(timezone=True), nullable=False),
    )

    # --- questions ---
    op.create_table(
        "questions",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("required", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("category", sa.Text(), nullable=True),
        sa.Column("options", JSONB(), nullable=True),
        sa.Column("placeholder", sa.Text(), nullable=True),
        sa.Column("help_text", sa.Text(), nullable=True),
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", TIMESTAMP(timezone=True), nullable=False),
        sa.CheckConstraint(
            "kind IN ('text', 'textarea', 'select', 'multiselect')",
            name="ck_question_kind",
        ),
    )
    op.create_index("ix_questions_active_order", "questions", ["active", "order"])

    # --- evaluations ---
    op.create_table(
        "evaluations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("phase", sa.String(10), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False),
        sa.Column("completed_at", TIMESTAMP(timezone=True), nullable=True),
        sa.CheckConstraint("phase IN ('before', 'after')", name="ck_evaluation_phase"),
        sa.CheckConstraint(
            "status != 'completed' OR completed_at IS NOT NULL",
            name="ck_completed_has_timestamp",
        ),
    )
    op.create_index(
        "ix_evaluations_user_created", "evaluations", ["user_id", "created_at"],
    )

    # --- responses ---
    op.create_table(
        "responses",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "evaluation_id",
            UUID(as_uuid=True),
            sa.ForeignKey("evaluations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "question_id",
            sa.Text(),
            sa.ForeignKey("questions.id"),
            nullable=False,
        ),
        sa.Column("answer", sa.Text(), nullable=False),
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False),
        sa.UniqueConstraint("evaluation_id", "question_id", name="uq_evaluation_question"),
    )
    op.create_index("ix_responses_evaluation_id", "responses", ["evaluation_id"])


def downgrade() -> None:
    op.drop_index("ix_responses_evaluation_id", table_name="responses")
    op.drop_table("responses")
    op.drop_index("ix_evaluations_user_created", table_name="evaluations")
    op.drop_table("evaluations")
    op.drop_index("ix_questions_active_order", table_name="questions")
    op.drop_table("questions")
    op.drop_table("users")
