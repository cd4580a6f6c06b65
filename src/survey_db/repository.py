"""Async CRUD repositories for users, questions, and evaluations.

All public methods accept an ``AsyncSession`` so the caller controls
transaction boundaries.  Repositories call ``flush()`` but never
``commit()``: the FastAPI ``get_db`` dependency (or a CLI entry point)
commits once per unit of work, which is what makes evaluation creation
atomic.

The repositories deliberately avoid business-logic validation — that
belongs in ``survey_core.service``.  They *do* rely on DB constraints for
structural invariants (unique emails, response → question foreign key).
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Iterable

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from survey_db.models.enums import EvaluationStatus
from survey_db.models.evaluation import Evaluation, Response
from survey_db.models.question import Question
from survey_db.models.user import User


class UserRepository:
    """Async read/write operations on the ``users`` table."""

    async def create_user(
        self,
        db: AsyncSession,
        *,
        email: str,
        password_hash: str,
        name: str | None = None,
    ) -> User:
        """Insert a new user row and return it.

        The caller must ``await db.commit()`` to persist.
        """
        user = User(email=email, password_hash=password_hash, name=name)
        db.add(user)
        await db.flush()
        return user

    async def get_by_email(self, db: AsyncSession, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, db: AsyncSession, user_pk: uuid.UUID) -> User | None:
        return await db.get(User, user_pk)


class QuestionRepository:
    """Async read/write operations on the ``questions`` table."""

    async def list_active(self, db: AsyncSession) -> list[Question]:
        """Active questions in presentation order."""
        stmt = (
            select(Question)
            .where(Question.active.is_(True))
            .order_by(Question.order.asc(), Question.id.asc())
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def get_existing_ids(self, db: AsyncSession, ids: Iterable[str]) -> set[str]:
        """Return the subset of *ids* that exist (active or not)."""
        wanted = list(ids)
        if not wanted:
            return set()
        stmt = select(Question.id).where(Question.id.in_(wanted))
        result = await db.execute(stmt)
        return set(result.scalars().all())

    async def upsert(
        self,
        db: AsyncSession,
        *,
        question_id: str,
        active: bool = True,
        **fields: Any,
    ) -> Question:
        """Insert or update one catalog question by id."""
        row = await db.get(Question, question_id)
        if row is None:
            row = Question(id=question_id, active=active, **fields)
            db.add(row)
        else:
            for key, value in fields.items():
                setattr(row, key, value)
            row.active = active
            row.updated_at = datetime.now(timezone.utc)
        await db.flush()
        return row

    async def deactivate_except(self, db: AsyncSession, keep_ids: Iterable[str]) -> int:
        """Mark every active question not in *keep_ids* inactive.

        Returns the number of rows changed.
        """
        stmt = (
            update(Question)
            .where(Question.active.is_(True), Question.id.not_in(list(keep_ids)))
            .values(active=False, updated_at=datetime.now(timezone.utc))
        )
        result = await db.execute(stmt)
        await db.flush()
        return result.rowcount


class EvaluationRepository:
    """Async read/write operations on ``evaluations`` and ``responses``."""

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create_evaluation(
        self,
        db: AsyncSession,
        *,
        user_id: str,
        name: str,
        description: str | None,
        phase: str,
        responses: dict[str, str],
    ) -> Evaluation:
        """Insert one evaluation and all of its responses.

        Both inserts happen inside the caller's transaction; if the caller
        rolls back (e.g. on an ``IntegrityError`` from an unknown question
        id) neither the evaluation nor any response is persisted.
        """
        now = datetime.now(timezone.utc)
        evaluation = Evaluation(
            user_id=user_id,
            name=name,
            description=description,
            phase=phase,
            status=EvaluationStatus.COMPLETED.value,
            created_at=now,
            completed_at=now,
        )
        db.add(evaluation)
        await db.flush()  # Populate evaluation.id for the response rows

        db.add_all(
            Response(evaluation_id=evaluation.id, question_id=qid, answer=answer)
            for qid, answer in responses.items()
        )
        await db.flush()
        return evaluation

    # ------------------------------------------------------------------
    # Read: single evaluation
    # ------------------------------------------------------------------

    async def get_by_id(
        self, db: AsyncSession, evaluation_pk: uuid.UUID
    ) -> Evaluation | None:
        """Fetch an evaluation header by primary key (responses not loaded)."""
        return await db.get(Evaluation, evaluation_pk)

    async def list_responses(
        self, db: AsyncSession, evaluation_pk: uuid.UUID
    ) -> list[tuple[Response, Question]]:
        """Responses of one evaluation joined with their questions.

        Ordered by the question's ``order`` so the detail view matches the
        order the respondent saw.
        """
        stmt = (
            select(Response, Question)
            .join(Question, Response.question_id == Question.id)
            .where(Response.evaluation_id == evaluation_pk)
            .order_by(Question.order.asc(), Question.id.asc())
        )
        result = await db.execute(stmt)
        return [(row.Response, row.Question) for row in result.all()]

    # ------------------------------------------------------------------
    # Read: multiple evaluations
    # ------------------------------------------------------------------

    async def list_by_user(
        self,
        db: AsyncSession,
        user_id: str,
        *,
        limit: int = 20,
        offset: int = 0,
    ) -> list[tuple[Evaluation, int]]:
        """List a user's evaluations with response counts, most recent first."""
        response_count = func.count(Response.id).label("response_count")
        stmt = (
            select(Evaluation, response_count)
            .outerjoin(Response, Response.evaluation_id == Evaluation.id)
            .where(Evaluation.user_id == user_id)
            .group_by(Evaluation.id)
            .order_by(Evaluation.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await db.execute(stmt)
        return [(row.Evaluation, row.response_count) for row in result.all()]

    async def count_by_phase(self, db: AsyncSession) -> dict[str, int]:
        """Number of evaluations per phase across all users."""
        stmt = select(Evaluation.phase, func.count(Evaluation.id)).group_by(Evaluation.phase)
        result = await db.execute(stmt)
        return {phase: count for phase, count in result.all()}
