"""QuestionCatalog — loads the question seed file into typed models.

The YAML file is the source the database ``questions`` table is seeded
from (``survey-seed`` CLI, ``POST /admin/questions/reload``).  At runtime
the wizard reads the catalog over HTTP instead, so it only ever sees the
active questions stored in the database.

Usage::

    catalog = QuestionCatalog()     # defaults to the bundled data/questions.yaml
    catalog.load()

    catalog.active()                # ordered list of active questions
    catalog.get("business_domain")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from survey_core.models.question import Question

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "questions.yaml"


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


class QuestionCatalog:
    """Ordered, validated set of question definitions.

    Entries may carry ``active: false`` to retire a question; retired
    questions stay in ``all()`` so seeding can mark them inactive.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path is not None else DEFAULT_CATALOG_PATH
        self._questions: list[Question] = []
        self._active: dict[str, bool] = {}

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> None:
        """Parse the YAML file.  Raises ``ValueError`` on malformed content."""
        raw = load_yaml(self._path)
        entries = raw.get("questions") if isinstance(raw, dict) else None
        if not isinstance(entries, list):
            raise ValueError(f"{self._path}: expected a top-level 'questions' list")

        questions: list[Question] = []
        active: dict[str, bool] = {}
        for entry in entries:
            entry = dict(entry)
            is_active = bool(entry.pop("active", True))
            q = Question.model_validate(entry)
            if q.id in active:
                raise ValueError(f"{self._path}: duplicate question id {q.id!r}")
            questions.append(q)
            active[q.id] = is_active

        self._questions = sorted(questions, key=lambda q: q.order)
        self._active = active
        logger.info(
            "QuestionCatalog loaded: %d questions (%d active) from %s",
            len(self._questions), sum(active.values()), self._path,
        )

    def all(self) -> list[Question]:
        return list(self._questions)

    def active(self) -> list[Question]:
        return [q for q in self._questions if self._active[q.id]]

    def is_active(self, question_id: str) -> bool:
        return self._active[question_id]

    def get(self, question_id: str) -> Question:
        """Return a question by id.  Raises ``KeyError`` if unknown."""
        for q in self._questions:
            if q.id == question_id:
                return q
        raise KeyError(question_id)

    def __len__(self) -> int:
        return len(self._questions)
