"""Password hashing and registration input checks.

Hashes are bcrypt with the cost from ``BCRYPT_ROUNDS``.  Hashing is
CPU-bound; async callers should run it in a worker thread
(``asyncio.to_thread``) so the event loop is not blocked.
"""

import re

import bcrypt

from survey_core.constants import BCRYPT_ROUNDS, PASSWORD_MIN_LENGTH

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PASSWORD_CLASSES_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def hash_password(password: str, rounds: int | None = None) -> str:
    """Return a bcrypt hash string for *password*."""
    salt = bcrypt.gensalt(rounds=rounds or BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    """Check *password* against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("ascii"))
    except ValueError:
        # Malformed stored hash
        return False


def normalize_email(email: str) -> str:
    return email.strip().lower()


def email_problem(email: str) -> str | None:
    """Return a message if *email* is not a plausible address."""
    if not _EMAIL_RE.match(email.strip()):
        return "Invalid email format"
    return None


def password_problems(password: str) -> list[str]:
    """Return every password-policy violation (empty list if acceptable)."""
    problems = []
    if len(password) < PASSWORD_MIN_LENGTH:
        problems.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    # bcrypt only looks at the first 72 bytes and newer releases reject longer input
    if len(password.encode("utf-8")) > 72:
        problems.append("Password must be at most 72 bytes long")
    if not _PASSWORD_CLASSES_RE.match(password):
        problems.append(
            "Password must contain at least one uppercase letter, "
            "one lowercase letter, and one number"
        )
    return problems
