"""Async HTTP client for the survey API.

Every request carries the ``X-User-ID`` header (and ``X-Proxy-Secret`` when
configured), mirroring what the identity gateway injects in production.
Error responses are turned back into ``SurveyError`` subclasses so callers
handle remote and local failures the same way; transport failures
(connection refused, timeouts) become ``ServiceUnavailableError``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from survey_core.errors import ServiceUnavailableError, error_from_response
from survey_core.interfaces import EvaluationGateway
from survey_core.models.evaluation import (
    EvaluationDetail,
    EvaluationHeader,
    EvaluationListItem,
    EvaluationSummary,
)
from survey_core.models.question import Question

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


class SurveyApiClient:
    """Thin httpx wrapper around the survey REST API.

    Use as an async context manager::

        async with SurveyApiClient(base_url, user_id="u-1") as api:
            questions = await api.get_questions()

    Args:
        base_url: server root, e.g. ``http://localhost:8080``
        user_id: value sent in ``X-User-ID``
        proxy_secret: value sent in ``X-Proxy-Secret`` (optional)
        timeout: per-request timeout in seconds
        transport: optional httpx transport (tests pass ``httpx.MockTransport``)
    """

    def __init__(
        self,
        base_url: str,
        *,
        user_id: str,
        proxy_secret: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._headers = {"X-User-ID": user_id}
        if proxy_secret:
            self._headers["X-Proxy-Secret"] = proxy_secret
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> SurveyApiClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers=self._headers,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def get_questions(self) -> list[Question]:
        data = await self._request("GET", "/questions")
        return [Question.model_validate(q) for q in data["questions"]]

    async def create_evaluation(
        self, header: EvaluationHeader, responses: dict[str, str]
    ) -> EvaluationSummary:
        body = {
            "name": header.name,
            "description": header.description,
            "phase": header.phase,
            "responses": responses,
        }
        data = await self._request("POST", "/evaluations", json=body)
        return EvaluationSummary.model_validate(data["evaluation"])

    async def list_evaluations(
        self, *, limit: int | None = None, offset: int = 0
    ) -> list[EvaluationListItem]:
        params: dict[str, int] = {"offset": offset}
        if limit is not None:
            params["limit"] = limit
        data = await self._request("GET", "/evaluations", params=params)
        return [EvaluationListItem.model_validate(e) for e in data["evaluations"]]

    async def get_evaluation(self, evaluation_id: str) -> EvaluationDetail:
        data = await self._request("GET", f"/evaluations/{evaluation_id}")
        return EvaluationDetail.model_validate(data["evaluation"])

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Send one request and return the decoded JSON body.

        Raises the ``SurveyError`` subclass matching an error status, or
        ``ServiceUnavailableError`` if the server could not be reached.
        """
        if self._client is None:
            raise RuntimeError("SurveyApiClient must be used as an async context manager")
        try:
            resp = await self._client.request(method, API_PREFIX + path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ServiceUnavailableError(
                "Could not reach the survey server",
                context={"detail": str(exc)},
            ) from exc

        if resp.status_code >= 400:
            try:
                payload = resp.json()
            except ValueError:
                payload = None
            raise error_from_response(resp.status_code, payload)
        return resp.json()


class HttpEvaluationGateway(EvaluationGateway):
    """``EvaluationGateway`` that submits through ``POST /evaluations``.

    The server creates the evaluation and its responses in one database
    transaction, which provides the atomicity the interface requires.
    """

    def __init__(self, api: SurveyApiClient) -> None:
        self._api = api

    async def create_evaluation(
        self, header: EvaluationHeader, responses: dict[str, str]
    ) -> EvaluationSummary:
        return await self._api.create_evaluation(header, responses)
