"""Password hashing and registration input checks."""

import pytest

from survey_core import security


class TestHashing:

    def test_hash_verifies(self):
        h = security.hash_password("Secret123", rounds=4)
        assert h.startswith("$2")
        assert security.verify_password("Secret123", h)
        assert not security.verify_password("Secret124", h)

    def test_malformed_hash_does_not_verify(self):
        assert security.verify_password("Secret123", "not-a-bcrypt-hash") is False


class TestPasswordPolicy:

    def test_strong_password_passes(self):
        assert security.password_problems("Secret123") == []

    @pytest.mark.parametrize(
        "password, fragment",
        [
            ("Sec12", "at least 8"),
            ("secret123", "uppercase"),
            ("SECRET123", "uppercase"),
            ("SecretSecret", "uppercase"),
            ("Aa1" + "x" * 70, "72 bytes"),
        ],
    )
    def test_violations_reported(self, password, fragment):
        problems = security.password_problems(password)
        assert any(fragment in p for p in problems), problems


class TestEmail:

    @pytest.mark.parametrize("email", ["a@b.co", " Ada@Example.com "])
    def test_valid(self, email):
        assert security.email_problem(email) is None

    @pytest.mark.parametrize("email", ["", "ada", "ada@", "ada@example", "a b@c.d"])
    def test_invalid(self, email):
        assert security.email_problem(email) == "Invalid email format"

    def test_normalize(self):
        assert security.normalize_email("  Ada@Example.COM ") == "ada@example.com"
