"""Survey constants shared across the SDK.

These values are referenced by the wizard, codec, service, and catalog.
They mirror the conventions encoded in ``data/questions.yaml``.

The bcrypt cost factor can be overridden via an environment variable so
that test runs and low-powered deployments can trade hashing cost for speed.
"""

import os

# Question kinds, as stored in the catalog and the ``questions.kind`` column.
KIND_TEXT = "text"
KIND_TEXTAREA = "textarea"
KIND_SELECT = "select"
KIND_MULTISELECT = "multiselect"

QUESTION_KINDS: tuple[str, ...] = (
    KIND_TEXT,
    KIND_TEXTAREA,
    KIND_SELECT,
    KIND_MULTISELECT,
)

# Kinds that carry an ``options`` list.
SELECT_KINDS: set[str] = {KIND_SELECT, KIND_MULTISELECT}

# Evaluation phases: baseline vs. post-adoption.
PHASE_BEFORE = "before"
PHASE_AFTER = "after"
PHASES: tuple[str, ...] = (PHASE_BEFORE, PHASE_AFTER)

# Evaluations are written in one shot, so they are born completed.
STATUS_COMPLETED = "completed"

# Wizard validation messages (shown verbatim to the respondent).
MSG_REQUIRED = "This field is required"
MSG_SELECT_AT_LEAST_ONE = "Please select at least one option"

# Label used when grouping responses whose question has no category.
DEFAULT_CATEGORY = "Other"

# Password hashing cost.  Overridable via BCRYPT_ROUNDS.
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Minimum password length enforced at registration.
PASSWORD_MIN_LENGTH = 8
