"""HTTP client, gateway, and terminal front-end tests.

The API client runs against ``httpx.MockTransport`` handlers; the
interactive loop runs with scripted answers in place of Rich prompts.
"""

import io
import json
import uuid

import httpx
import pytest
from rich.console import Console

from survey_client import cli
from survey_client.http import HttpEvaluationGateway, SurveyApiClient
from survey_core.coordinator import SubmissionCoordinator
from survey_core.errors import (
    AuthorizationError,
    NotFoundError,
    ServiceUnavailableError,
    ValidationError,
)
from survey_core.wizard import SurveyWizard, WizardStatus

from helpers.fakes import FakeGateway

BASE = "http://survey.test"


def _summary(body):
    return {
        "success": True,
        "message": "Evaluation created successfully",
        "evaluation": {
            "id": str(uuid.uuid4()),
            "name": body["name"],
            "phase": body["phase"],
            "status": "completed",
        },
    }


def _client(handler, **kwargs):
    return SurveyApiClient(
        BASE, user_id="u1", transport=httpx.MockTransport(handler), **kwargs,
    )


# =====================================================================
# Tests: SurveyApiClient
# =====================================================================


class TestApiClient:

    @pytest.mark.asyncio
    async def test_sends_identity_headers(self):
        seen = {}

        def handler(request):
            seen.update(request.headers)
            return httpx.Response(200, json={"success": True, "evaluations": []})

        async with _client(handler, proxy_secret="s3cret") as api:
            assert await api.list_evaluations() == []
        assert seen["x-user-id"] == "u1"
        assert seen["x-proxy-secret"] == "s3cret"

    @pytest.mark.asyncio
    async def test_get_questions(self, catalog):
        payload = {
            "success": True,
            "questions": [q.model_dump() for q in catalog.active()],
        }

        def handler(request):
            assert request.url.path == "/api/v1/questions"
            return httpx.Response(200, json=payload)

        async with _client(handler) as api:
            questions = await api.get_questions()
        assert [q.id for q in questions] == [q.id for q in catalog.active()]

    @pytest.mark.asyncio
    async def test_create_evaluation_posts_body(self, header):
        captured = {}

        def handler(request):
            captured.update(json.loads(request.content))
            return httpx.Response(201, json=_summary(captured))

        async with _client(handler) as api:
            summary = await api.create_evaluation(header, {"q1": "x"})
        assert captured == {
            "name": "Q3 baseline",
            "description": "Platform team",
            "phase": "before",
            "responses": {"q1": "x"},
        }
        assert summary.status == "completed"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, code, exc_type",
        [
            (400, "VAL_2001", ValidationError),
            (403, "AUTH_1004", AuthorizationError),
            (404, "DB_3002", NotFoundError),
        ],
    )
    async def test_error_status_maps_to_exception(self, status, code, exc_type):
        def handler(request):
            return httpx.Response(
                status, json={"success": False, "error": {"code": code, "message": "nope"}},
            )

        async with _client(handler) as api:
            with pytest.raises(exc_type) as exc_info:
                await api.get_evaluation("abc")
        assert exc_info.value.message == "nope"

    @pytest.mark.asyncio
    async def test_transport_failure_is_service_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as api:
            with pytest.raises(ServiceUnavailableError):
                await api.get_questions()

    @pytest.mark.asyncio
    async def test_must_be_entered(self):
        api = _client(lambda request: httpx.Response(200, json={}))
        with pytest.raises(RuntimeError):
            await api.get_questions()


# =====================================================================
# Tests: HttpEvaluationGateway through the coordinator
# =====================================================================


class TestGateway:

    @pytest.mark.asyncio
    async def test_failure_becomes_result(self, header):
        def handler(request):
            return httpx.Response(
                400,
                json={"success": False, "error": {"code": "VAL_2001", "message": "Name is required"}},
            )

        async with _client(handler) as api:
            coordinator = SubmissionCoordinator(HttpEvaluationGateway(api))
            result = await coordinator.create_evaluation(header, {})
        assert not result.ok
        assert result.error.status == 400
        assert result.error.message == "Name is required"

    @pytest.mark.asyncio
    async def test_server_down_becomes_result(self, header):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        async with _client(handler) as api:
            coordinator = SubmissionCoordinator(HttpEvaluationGateway(api))
            result = await coordinator.create_evaluation(header, {})
        assert result.error.kind == "store"
        assert result.error.status == 503

    @pytest.mark.asyncio
    async def test_malformed_success_body_becomes_result(self, header):
        def handler(request):
            return httpx.Response(201, json={"success": True})

        async with _client(handler) as api:
            coordinator = SubmissionCoordinator(HttpEvaluationGateway(api))
            result = await coordinator.create_evaluation(header, {})
        assert not result.ok
        assert result.error.kind == "store"
        assert result.error.code == "SYS_5003"


# =====================================================================
# Tests: terminal front-end
# =====================================================================


class _Script:
    """Stands in for rich's Prompt/Confirm, answering from a list."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.prompts = []

    def ask(self, prompt, **kwargs):
        self.prompts.append(prompt)
        return self.answers.pop(0)


@pytest.fixture
def quiet(monkeypatch):
    out = io.StringIO()
    monkeypatch.setattr(cli, "console", Console(file=out, width=120))
    return out


class TestParseSelection:

    def test_numbers_map_to_labels_in_option_order(self):
        assert cli.parse_selection("3, 1", ["a", "b", "c"]) == ["a", "c"]

    def test_invalid_tokens_ignored(self):
        assert cli.parse_selection("0, 9, x, 2, 2", ["a", "b"]) == ["b"]

    def test_empty(self):
        assert cli.parse_selection("", ["a"]) == []


class TestFormatAnswer:

    def test_list(self):
        assert cli.format_answer(["a", "b"]) == "a, b"

    def test_empty(self):
        assert cli.format_answer([]) == "-"
        assert cli.format_answer("") == "-"


class TestRunWizard:

    @pytest.mark.asyncio
    async def test_walks_to_submission(self, monkeypatch, quiet, three_questions, header):
        gateway = FakeGateway()
        wizard = SurveyWizard(three_questions, SubmissionCoordinator(gateway), header)
        monkeypatch.setattr(
            cli, "Prompt", _Script(["Healthcare", "next", "1", "next", "1,3", "submit"]),
        )

        assert await cli.run_wizard(wizard)
        assert wizard.status == WizardStatus.SUBMITTED
        assert gateway.calls[0][1] == {
            "q1": "Healthcare",
            "q2": "Scrum",
            "q3": '["Design", "Deployment"]',
        }

    @pytest.mark.asyncio
    async def test_validation_error_is_shown(self, monkeypatch, quiet, three_questions, header):
        wizard = SurveyWizard(three_questions, SubmissionCoordinator(FakeGateway()), header)
        monkeypatch.setattr(
            cli, "Prompt", _Script(["", "next", "Healthcare", "next", "", "next", "2", "submit"]),
        )

        assert await cli.run_wizard(wizard)
        assert "This field is required" in quiet.getvalue()

    @pytest.mark.asyncio
    async def test_retry_after_failure(self, monkeypatch, quiet, three_questions, header):
        gateway = FakeGateway(outcomes=[ServiceUnavailableError("down")])
        wizard = SurveyWizard(three_questions, SubmissionCoordinator(gateway), header)
        monkeypatch.setattr(
            cli, "Prompt",
            _Script(["Healthcare", "next", "", "next", "1", "submit", "", "submit"]),
        )
        monkeypatch.setattr(cli, "Confirm", _Script([True]))

        assert await cli.run_wizard(wizard)
        assert len(gateway.calls) == 2
        assert gateway.calls[0][1] == gateway.calls[1][1]
        assert "Submission failed" in quiet.getvalue()

    @pytest.mark.asyncio
    async def test_give_up_after_failure(self, monkeypatch, quiet, three_questions, header):
        gateway = FakeGateway(outcomes=[ServiceUnavailableError("down")])
        wizard = SurveyWizard(three_questions, SubmissionCoordinator(gateway), header)
        monkeypatch.setattr(
            cli, "Prompt", _Script(["Healthcare", "next", "", "next", "1", "submit"]),
        )
        monkeypatch.setattr(cli, "Confirm", _Script([False]))

        assert not await cli.run_wizard(wizard)
        assert wizard.status == WizardStatus.FAILED


class TestShowResults:

    @staticmethod
    def _item(name, phase):
        return {
            "id": str(uuid.uuid4()),
            "name": name,
            "phase": phase,
            "status": "completed",
            "response_count": 3,
            "created_at": "2026-01-15T10:00:00Z",
        }

    @pytest.mark.asyncio
    async def test_groups_by_phase(self, quiet):
        def handler(request):
            return httpx.Response(200, json={
                "success": True,
                "evaluations": [self._item("Pilot", "after"), self._item("Baseline", "before")],
            })

        async with _client(handler) as api:
            assert await cli.show_results(api, None) == 0
        out = quiet.getvalue()
        assert "Before AI Evaluations" in out
        assert "After AI Evaluations" in out
        assert out.index("Before AI Evaluations") < out.index("After AI Evaluations")
        assert out.index("Baseline") < out.index("Pilot"), "Each row belongs under its own phase"

    @pytest.mark.asyncio
    async def test_empty_phase_is_omitted(self, quiet):
        def handler(request):
            return httpx.Response(
                200, json={"success": True, "evaluations": [self._item("Baseline", "before")]},
            )

        async with _client(handler) as api:
            await cli.show_results(api, None)
        assert "After AI Evaluations" not in quiet.getvalue()
