"""Question model — one entry of the survey catalog.

Each kind maps to a specific input widget and answer encoding:

    - text:        single-line free text
    - textarea:    multi-line free text
    - select:      pick one option (answer is the option label)
    - multiselect: pick any number of options (answer is a JSON array)

Questions are immutable for the lifetime of a survey session.  The same
model is used for the YAML seed file, the ``GET /questions`` payload, and
the wizard.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from survey_core.constants import SELECT_KINDS

QuestionKind = Literal["text", "textarea", "select", "multiselect"]


class Question(BaseModel):
    """A single catalog question."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    order: int
    text: str
    kind: QuestionKind
    required: bool = False
    category: Optional[str] = None
    # Ordered option labels; only meaningful for select kinds
    options: Optional[list[str]] = None
    placeholder: Optional[str] = None
    help_text: Optional[str] = None

    @model_validator(mode="after")
    def _chk_options(self):
        if self.kind in SELECT_KINDS and not self.options:
            raise ValueError(f"{self.kind} question {self.id!r} must define options")
        return self

    @property
    def is_multiselect(self) -> bool:
        return self.kind == "multiselect"
