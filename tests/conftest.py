import os

# Cheap bcrypt cost for tests; must be set before survey_core is imported.
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from unittest.mock import AsyncMock

import pytest

from survey_core.catalog import QuestionCatalog
from survey_core.models.evaluation import EvaluationHeader
from survey_core.models.question import Question
from survey_core.service import EvaluationService

from helpers.mocks import MockEvaluationRepository, MockQuestionRepository, MockUserRepository


@pytest.fixture(scope="session")
def catalog():
    """The bundled question catalog, loaded once."""
    c = QuestionCatalog()
    c.load()
    return c


@pytest.fixture
def mock_db():
    """AsyncMock standing in for AsyncSession — flush/commit are no-ops."""
    return AsyncMock()


@pytest.fixture
def question_repo(catalog):
    repo = MockQuestionRepository()
    repo.seed(catalog)
    return repo


@pytest.fixture
def evaluation_repo(question_repo):
    return MockEvaluationRepository(question_repo)


@pytest.fixture
def user_repo():
    return MockUserRepository()


@pytest.fixture
def service(question_repo, evaluation_repo, user_repo):
    """EvaluationService with in-memory repositories."""
    svc = EvaluationService()
    svc._questions = question_repo
    svc._evaluations = evaluation_repo
    svc._users = user_repo
    return svc


@pytest.fixture
def header():
    return EvaluationHeader(name="Q3 baseline", description="Platform team", phase="before")


@pytest.fixture
def three_questions():
    """Required text, optional select, required multi-select."""
    return [
        Question(id="q1", order=1, text="Business domain?", kind="text", required=True),
        Question(
            id="q2", order=2, text="Methodology?", kind="select",
            options=["Scrum", "Kanban"],
        ),
        Question(
            id="q3", order=3, text="Targets?", kind="multiselect", required=True,
            options=["Design", "Testing", "Deployment"],
        ),
    ]
