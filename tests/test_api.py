"""HTTP API tests via FastAPI TestClient.

The app is built with ``create_app()`` and the database-facing
dependencies are overridden: ``get_db`` yields an AsyncMock session,
``get_service`` returns the service wired to in-memory repositories, and
``get_catalog`` returns the bundled catalog.  The lifespan is not entered,
so no database connection is attempted.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from survey_server import app as app_module
from survey_server.app import create_app
from survey_server.config import ServerSettings
from survey_server.dependencies import get_catalog, get_db, get_service

VALID_BODY = {
    "name": "Q3 baseline",
    "description": "Platform team",
    "phase": "before",
    "responses": {
        "business_domain": "Healthcare",
        "sdlc_targets": '["Testing"]',
    },
}


# =====================================================================
# Fixtures
# =====================================================================


def _build(service, catalog, **settings_kwargs):
    app = create_app(ServerSettings(**settings_kwargs))

    async def _db():
        yield AsyncMock()

    app.dependency_overrides[get_db] = _db
    app.dependency_overrides[get_service] = lambda: service
    app.dependency_overrides[get_catalog] = lambda: catalog
    return app


@pytest.fixture
def client(service, catalog):
    return TestClient(_build(service, catalog))


def _as(user_id):
    return {"X-User-ID": user_id}


# =====================================================================
# Tests: questions
# =====================================================================


class TestQuestions:

    def test_list_questions_no_auth(self, client):
        resp = client.get("/api/v1/questions")
        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert [q["order"] for q in data["questions"]] == sorted(q["order"] for q in data["questions"])
        assert data["questions"][1]["options"][0] == "Agile (Scrum)"


# =====================================================================
# Tests: evaluations
# =====================================================================


class TestEvaluations:

    def test_create_returns_201(self, client):
        resp = client.post("/api/v1/evaluations", json=VALID_BODY, headers=_as("u1"))
        assert resp.status_code == 201
        data = resp.json()
        assert data["success"] is True
        assert data["evaluation"]["status"] == "completed"
        assert data["evaluation"]["phase"] == "before"
        assert "id" in data["evaluation"]

    def test_create_requires_identity(self, client):
        resp = client.post("/api/v1/evaluations", json=VALID_BODY)
        assert resp.status_code == 401
        error = resp.json()["error"]
        assert error["code"] == "AUTH_1001"
        assert resp.json()["success"] is False

    def test_invalid_body_is_400(self, client):
        body = {**VALID_BODY, "phase": "during"}
        resp = client.post("/api/v1/evaluations", json=body, headers=_as("u1"))
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "VAL_2002"

    def test_missing_name_is_400(self, client):
        body = {k: v for k, v in VALID_BODY.items() if k != "name"}
        resp = client.post("/api/v1/evaluations", json=body, headers=_as("u1"))
        assert resp.status_code == 400

    def test_blank_name_is_400(self, client):
        body = {**VALID_BODY, "name": "  "}
        resp = client.post("/api/v1/evaluations", json=body, headers=_as("u1"))
        assert resp.status_code == 400
        assert resp.json()["error"]["message"] == "Name is required"

    def test_unknown_question_is_400(self, client):
        body = {**VALID_BODY, "responses": {"ghost": "boo"}}
        resp = client.post("/api/v1/evaluations", json=body, headers=_as("u1"))
        assert resp.status_code == 400
        assert resp.json()["error"]["context"] == {"question_ids": ["ghost"]}

    def test_detail_for_owner(self, client):
        created = client.post("/api/v1/evaluations", json=VALID_BODY, headers=_as("u1")).json()
        eid = created["evaluation"]["id"]

        resp = client.get(f"/api/v1/evaluations/{eid}", headers=_as("u1"))
        assert resp.status_code == 200
        evaluation = resp.json()["evaluation"]
        assert [r["question_id"] for r in evaluation["responses"]] == [
            "business_domain", "sdlc_targets",
        ]
        assert set(evaluation["grouped"]) == {"Organization", "Scope"}

    def test_detail_for_other_user_is_403(self, client):
        created = client.post("/api/v1/evaluations", json=VALID_BODY, headers=_as("u1")).json()
        eid = created["evaluation"]["id"]

        resp = client.get(f"/api/v1/evaluations/{eid}", headers=_as("u2"))
        assert resp.status_code == 403
        assert "Q3 baseline" not in resp.text
        assert "Healthcare" not in resp.text

    def test_detail_unknown_is_404(self, client):
        resp = client.get(
            "/api/v1/evaluations/00000000-0000-0000-0000-000000000000", headers=_as("u1"),
        )
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "DB_3002"

    def test_list_own(self, client):
        client.post("/api/v1/evaluations", json=VALID_BODY, headers=_as("u1"))
        client.post("/api/v1/evaluations", json=VALID_BODY, headers=_as("u2"))

        resp = client.get("/api/v1/evaluations", headers=_as("u1"))
        assert resp.status_code == 200
        items = resp.json()["evaluations"]
        assert len(items) == 1
        assert items[0]["response_count"] == 2

    def test_list_limit_bounds(self, client):
        resp = client.get("/api/v1/evaluations?limit=0", headers=_as("u1"))
        assert resp.status_code == 400


# =====================================================================
# Tests: trusted proxy secret
# =====================================================================


class TestProxySecret:

    @pytest.fixture
    def guarded(self, service, catalog):
        return TestClient(_build(service, catalog, trusted_proxy_secret="s3cret"))

    def test_missing_secret_is_403(self, guarded):
        resp = guarded.get("/api/v1/evaluations", headers=_as("u1"))
        assert resp.status_code == 403

    def test_wrong_secret_is_403(self, guarded):
        resp = guarded.get(
            "/api/v1/evaluations", headers={**_as("u1"), "X-Proxy-Secret": "nope"},
        )
        assert resp.status_code == 403

    def test_matching_secret_passes(self, guarded):
        resp = guarded.get(
            "/api/v1/evaluations", headers={**_as("u1"), "X-Proxy-Secret": "s3cret"},
        )
        assert resp.status_code == 200


# =====================================================================
# Tests: auth
# =====================================================================


class TestAuth:

    def test_register_and_verify(self, client):
        resp = client.post(
            "/api/v1/auth/register",
            json={"email": "ada@example.com", "password": "Secret123", "name": "Ada"},
        )
        assert resp.status_code == 201
        user = resp.json()["user"]
        assert user["email"] == "ada@example.com"
        assert "password" not in resp.text

        resp = client.post(
            "/api/v1/auth/verify", json={"email": "ada@example.com", "password": "Secret123"},
        )
        assert resp.status_code == 200
        assert resp.json()["user"]["id"] == user["id"]

    def test_duplicate_email_is_400(self, client):
        body = {"email": "ada@example.com", "password": "Secret123"}
        client.post("/api/v1/auth/register", json=body)
        resp = client.post("/api/v1/auth/register", json=body)
        assert resp.status_code == 400
        assert resp.json()["error"]["message"] == "User with this email already exists"

    def test_weak_password_is_400(self, client):
        resp = client.post(
            "/api/v1/auth/register", json={"email": "ada@example.com", "password": "weak"},
        )
        assert resp.status_code == 400

    def test_wrong_password_is_401(self, client):
        client.post("/api/v1/auth/register", json={"email": "a@b.co", "password": "Secret123"})
        resp = client.post("/api/v1/auth/verify", json={"email": "a@b.co", "password": "Nope12345"})
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "AUTH_1002"


# =====================================================================
# Tests: admin
# =====================================================================


class TestAdmin:

    @pytest.fixture
    def admin(self, service, catalog):
        return TestClient(_build(service, catalog, admin_api_key="adm"))

    def test_disabled_without_key_configured(self, client):
        resp = client.get("/api/v1/admin/stats", headers={"X-Admin-Key": "anything"})
        assert resp.status_code == 403

    def test_missing_header_is_401(self, admin):
        assert admin.get("/api/v1/admin/stats").status_code == 401

    def test_wrong_key_is_403(self, admin):
        resp = admin.get("/api/v1/admin/stats", headers={"X-Admin-Key": "bad"})
        assert resp.status_code == 403

    def test_stats(self, admin):
        admin.post("/api/v1/evaluations", json=VALID_BODY, headers=_as("u1"))
        resp = admin.get("/api/v1/admin/stats", headers={"X-Admin-Key": "adm"})
        assert resp.status_code == 200
        assert resp.json()["evaluations_by_phase"] == {"before": 1, "after": 0}

    def test_reload(self, admin, question_repo):
        question_repo.rows.pop("motivation")
        resp = admin.post("/api/v1/admin/questions/reload", headers={"X-Admin-Key": "adm"})
        assert resp.status_code == 200
        assert resp.json()["questions"] == 6
        assert "motivation" in question_repo.rows


# =====================================================================
# Tests: health & unexpected errors
# =====================================================================


class TestHealth:

    def test_healthy(self, client, monkeypatch):
        engine = MagicMock()
        engine.connect.return_value.__aenter__.return_value = AsyncMock()
        monkeypatch.setattr(app_module, "get_engine", lambda: engine)

        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"
        assert resp.json()["checks"] == {"database": "healthy"}

    def test_unhealthy_is_503(self, client, monkeypatch):
        def _down():
            raise OSError("connection refused")

        monkeypatch.setattr(app_module, "get_engine", _down)
        resp = client.get("/health")
        assert resp.status_code == 503
        assert resp.json()["status"] == "unhealthy"


class TestUnexpectedErrors:

    def test_masked_500(self, service, catalog):
        service.list_questions = AsyncMock(side_effect=RuntimeError("secret detail"))
        client = TestClient(_build(service, catalog), raise_server_exceptions=False)

        resp = client.get("/api/v1/questions")
        assert resp.status_code == 500
        assert resp.json()["error"]["code"] == "SYS_5001"
        assert "secret detail" not in resp.text

    def test_debug_errors_adds_context(self, service, catalog):
        service.list_questions = AsyncMock(side_effect=RuntimeError("secret detail"))
        client = TestClient(
            _build(service, catalog, debug_errors=True), raise_server_exceptions=False,
        )

        resp = client.get("/api/v1/questions")
        assert resp.json()["error"]["context"]["exception"] == "RuntimeError"
