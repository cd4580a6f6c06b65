"""EvaluationService — server-side operations behind the survey API.

Stateless service pattern: each call reads what it needs from the database,
performs one unit of work, and returns a public model.  No in-memory state
is kept between calls.

The service accepts an ``AsyncSession`` from the caller so that the caller
(typically the FastAPI ``get_db`` dependency) controls the transaction.
``create_evaluation`` relies on this: the evaluation row and every response
row are flushed inside one transaction, and any failure makes the caller
roll back the whole unit.

Operation overview:
    list_questions     — active catalog, ordered
    create_evaluation  — header + responses, atomic
    get_evaluation     — detail view; owner-only
    list_evaluations   — owner's dashboard, newest first
    register_user      — credential registration (bcrypt)
    verify_credentials — email/password check for the identity gateway
    sync_catalog       — upsert the YAML catalog into the questions table
    phase_counts       — evaluation counts per phase (admin)
"""

from __future__ import annotations

import asyncio
import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from survey_db.models.evaluation import Evaluation
from survey_db.repository import EvaluationRepository, QuestionRepository, UserRepository

from survey_core import security
from survey_core.catalog import QuestionCatalog
from survey_core.constants import PHASES
from survey_core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ErrorCode,
    NotFoundError,
    ValidationError,
)
from survey_core.models.evaluation import (
    EvaluationDetail,
    EvaluationListItem,
    EvaluationSummary,
    ResponseDetail,
)
from survey_core.models.question import Question
from survey_core.models.user import UserInfo

logger = logging.getLogger(__name__)


class EvaluationService:
    """Catalog reads, evaluation persistence, and user registration."""

    def __init__(self) -> None:
        self._evaluations = EvaluationRepository()
        self._questions = QuestionRepository()
        self._users = UserRepository()

    # ==================================================================
    # Catalog
    # ==================================================================

    async def list_questions(self, db: AsyncSession) -> list[Question]:
        """Return the active questions ordered by their display order."""
        rows = await self._questions.list_active(db)
        logger.info("Retrieved %d active questions", len(rows))
        return [Question.model_validate(row) for row in rows]

    async def sync_catalog(
        self,
        db: AsyncSession,
        catalog: QuestionCatalog,
        *,
        deactivate_missing: bool = False,
    ) -> int:
        """Upsert every catalog question into the database.

        With ``deactivate_missing`` the active questions that no longer
        appear in the catalog are marked inactive (never deleted, so past
        responses stay valid).  Returns the number of questions written.
        """
        questions = catalog.all()
        for q in questions:
            await self._questions.upsert(
                db,
                question_id=q.id,
                active=catalog.is_active(q.id),
                **q.model_dump(exclude={"id"}),
            )
        retired = 0
        if deactivate_missing:
            retired = await self._questions.deactivate_except(db, [q.id for q in questions])
        logger.info(
            "Catalog synced: %d questions written, %d retired", len(questions), retired,
        )
        return len(questions)

    # ==================================================================
    # Evaluations
    # ==================================================================

    async def create_evaluation(
        self,
        db: AsyncSession,
        *,
        user_id: str,
        name: str,
        description: str | None,
        phase: str,
        responses: dict[str, str],
    ) -> EvaluationSummary:
        """Create an evaluation together with all of its responses.

        Raises ``ValidationError`` for a blank name, an unknown phase, or
        response keys that do not reference an existing question.  The
        caller must ``await db.commit()`` to persist.
        """
        problems = []
        if not name or not name.strip():
            problems.append("Name is required")
        if phase not in PHASES:
            problems.append('Phase must be either "before" or "after"')
        if problems:
            raise ValidationError(", ".join(problems))

        existing = await self._questions.get_existing_ids(db, responses.keys())
        unknown = sorted(set(responses) - existing)
        if unknown:
            raise ValidationError(
                "Responses reference unknown questions",
                code=ErrorCode.CONSTRAINT_VIOLATION,
                context={"question_ids": unknown},
            )

        logger.info(
            "Creating evaluation: user_id=%s, name=%r, phase=%s, responses=%d",
            user_id, name, phase, len(responses),
        )
        try:
            row = await self._evaluations.create_evaluation(
                db,
                user_id=user_id,
                name=name,
                description=description,
                phase=phase,
                responses=responses,
            )
        except IntegrityError as exc:
            # A question vanished between the check above and the insert
            logger.warning("Evaluation insert violated a constraint: %s", exc.orig)
            raise ValidationError(
                "Evaluation violates a data constraint",
                code=ErrorCode.CONSTRAINT_VIOLATION,
            ) from exc

        logger.info("Evaluation created: id=%s, user_id=%s", row.id, user_id)
        return EvaluationSummary(
            id=str(row.id), name=row.name, phase=row.phase, status=row.status,
        )

    async def get_evaluation(
        self, db: AsyncSession, *, user_id: str, evaluation_id: str
    ) -> EvaluationDetail:
        """Return an evaluation with its responses, ordered by question order.

        Raises ``NotFoundError`` if the id is unknown (or not a UUID) and
        ``AuthorizationError`` if it belongs to another user.  Responses are
        only loaded after the ownership check passes.
        """
        row = await self._load_evaluation(db, evaluation_id)
        if row.user_id != user_id:
            logger.warning(
                "User %s denied access to evaluation %s", user_id, evaluation_id,
            )
            raise AuthorizationError("You do not have access to this evaluation")

        pairs = await self._evaluations.list_responses(db, row.id)
        return EvaluationDetail(
            id=str(row.id),
            name=row.name,
            description=row.description,
            phase=row.phase,
            status=row.status,
            created_at=row.created_at,
            completed_at=row.completed_at,
            responses=[
                ResponseDetail(
                    question_id=response.question_id,
                    question_text=question.text,
                    question_category=question.category,
                    answer=response.answer,
                )
                for response, question in pairs
            ],
        )

    async def list_evaluations(
        self,
        db: AsyncSession,
        *,
        user_id: str,
        limit: int = 20,
        offset: int = 0,
    ) -> list[EvaluationListItem]:
        """List a user's evaluations, most recent first."""
        rows = await self._evaluations.list_by_user(db, user_id, limit=limit, offset=offset)
        logger.info("Retrieved %d evaluations for user_id=%s", len(rows), user_id)
        return [
            EvaluationListItem(
                id=str(row.id),
                name=row.name,
                description=row.description,
                phase=row.phase,
                status=row.status,
                response_count=count,
                created_at=row.created_at,
                completed_at=row.completed_at,
            )
            for row, count in rows
        ]

    async def phase_counts(self, db: AsyncSession) -> dict[str, int]:
        """Evaluation counts keyed by phase; phases with none report 0."""
        counts = await self._evaluations.count_by_phase(db)
        return {phase: counts.get(phase, 0) for phase in PHASES}

    # ==================================================================
    # Users
    # ==================================================================

    async def register_user(
        self,
        db: AsyncSession,
        *,
        email: str,
        password: str,
        name: str | None = None,
    ) -> UserInfo:
        """Register a new user with a bcrypt-hashed password.

        Raises ``ValidationError`` for a malformed email, a weak password,
        or an email that is already registered.
        """
        problems = []
        email_problem = security.email_problem(email)
        if email_problem:
            problems.append(email_problem)
        problems.extend(security.password_problems(password))
        if problems:
            raise ValidationError(", ".join(problems))

        normalized = security.normalize_email(email)
        if await self._users.get_by_email(db, normalized) is not None:
            raise ValidationError("User with this email already exists")

        password_hash = await asyncio.to_thread(security.hash_password, password)
        try:
            user = await self._users.create_user(
                db, email=normalized, password_hash=password_hash, name=name or None,
            )
        except IntegrityError as exc:
            # Concurrent registration with the same email
            raise ConflictError("User with this email already exists") from exc

        logger.info("New user registered: user_id=%s", user.id)
        return UserInfo(id=str(user.id), email=user.email, name=user.name)

    async def verify_credentials(
        self, db: AsyncSession, *, email: str, password: str
    ) -> UserInfo:
        """Return the user matching *email* / *password*.

        Raises ``AuthenticationError`` with the same message whether the
        email is unknown or the password is wrong.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = await self._users.get_by_email(db, security.normalize_email(email))
        if user is None:
            logger.warning("Login attempt for non-existent user")
            raise AuthenticationError("Invalid credentials", code=ErrorCode.INVALID_CREDENTIALS)

        valid = await asyncio.to_thread(security.verify_password, password, user.password_hash)
        if not valid:
            logger.warning("Login attempt with invalid password: user_id=%s", user.id)
            raise AuthenticationError("Invalid credentials", code=ErrorCode.INVALID_CREDENTIALS)

        logger.info("User credentials verified: user_id=%s", user.id)
        return UserInfo(id=str(user.id), email=user.email, name=user.name)

    # ==================================================================
    # Internal helpers
    # ==================================================================

    async def _load_evaluation(self, db: AsyncSession, evaluation_id: str) -> Evaluation:
        """Load an evaluation header or raise ``NotFoundError``."""
        try:
            pk = uuid.UUID(evaluation_id)
        except ValueError:
            raise NotFoundError("Evaluation", context={"evaluation_id": evaluation_id}) from None
        row = await self._evaluations.get_by_id(db, pk)
        if row is None:
            raise NotFoundError("Evaluation", context={"evaluation_id": evaluation_id})
        return row
