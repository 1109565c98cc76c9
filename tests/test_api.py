"""Tests for the FastAPI summarize router.

The pipeline on ``app.state`` is replaced after startup with a ``MagicMock``
whose ``run`` is an ``AsyncMock``, so no HTTP calls leave the test process.
"""

from __future__ import annotations

from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from oneline.api.app import create_app
from oneline.errors import (
    ExtractionFailedError,
    FetchFailedError,
    GenerationFailedError,
    InvalidInputError,
    MissingCredentialError,
    OverallTimeoutError,
    StageTimeoutError,
)

_VALID = "東京都が再生可能エネルギー計画を発表し、2030年までに電力の半分を賄う目標を掲げた。"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def pipeline() -> MagicMock:
    fake = MagicMock()
    fake.run = AsyncMock(return_value=_VALID)
    return fake


@pytest.fixture()
def client(pipeline: MagicMock, monkeypatch) -> Generator[TestClient, None, None]:
    """TestClient whose app uses the fake pipeline."""
    monkeypatch.setattr("oneline.config.settings.google_api_key", "test-key")
    app = create_app()

    with TestClient(app) as c:
        c.app.state.pipeline = pipeline
        yield c


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestSummarizeEndpoint:
    def test_returns_summary(self, client: TestClient, pipeline: MagicMock) -> None:
        resp = client.post("/summarize", json={"url": "https://example.com/article"})

        assert resp.status_code == 200
        assert resp.json() == {"summary": _VALID}
        pipeline.run.assert_awaited_once_with("https://example.com/article")

    def test_missing_url_is_invalid_input(self, client: TestClient, pipeline: MagicMock) -> None:
        pipeline.run.side_effect = InvalidInputError("URL required")
        resp = client.post("/summarize", json={})

        assert resp.status_code == 400
        assert resp.json() == {"error": "URL required", "kind": "invalid_input"}
        pipeline.run.assert_awaited_once_with("")

    def test_null_url_is_invalid_input(self, client: TestClient, pipeline: MagicMock) -> None:
        pipeline.run.side_effect = InvalidInputError("URL required")
        resp = client.post("/summarize", json={"url": None})

        assert resp.status_code == 400
        assert resp.json() == {"error": "URL required", "kind": "invalid_input"}
        pipeline.run.assert_awaited_once_with("")

    def test_malformed_json_is_invalid_input(
        self, client: TestClient, pipeline: MagicMock
    ) -> None:
        resp = client.post(
            "/summarize",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert resp.status_code == 400
        assert resp.json() == {"error": "invalid request body", "kind": "invalid_input"}
        pipeline.run.assert_not_awaited()

    def test_non_string_url_is_invalid_input(
        self, client: TestClient, pipeline: MagicMock
    ) -> None:
        resp = client.post("/summarize", json={"url": ["https://example.com/"]})

        assert resp.status_code == 400
        assert resp.json()["kind"] == "invalid_input"
        pipeline.run.assert_not_awaited()

    @pytest.mark.parametrize(
        ("exc", "status"),
        [
            (InvalidInputError("unsupported scheme"), 400),
            (FetchFailedError("not found"), 422),
            (ExtractionFailedError("could not extract article body"), 422),
            (GenerationFailedError("summary did not satisfy format constraints"), 502),
            (MissingCredentialError("missing credential"), 500),
            (StageTimeoutError("content fetch timed out"), 504),
            (OverallTimeoutError("processing timed out"), 504),
        ],
    )
    def test_error_kinds_map_to_status(
        self, client: TestClient, pipeline: MagicMock, exc: Exception, status: int
    ) -> None:
        pipeline.run.side_effect = exc
        resp = client.post("/summarize", json={"url": "https://example.com/"})

        assert resp.status_code == status
        body = resp.json()
        assert body["error"] == str(exc)
        assert body["kind"] == exc.kind  # type: ignore[attr-defined]

    def test_get_not_allowed(self, client: TestClient) -> None:
        assert client.get("/summarize").status_code == 405

    def test_health(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "configured": True}


class TestMissingCredentialAtStartup:
    def test_summarize_reports_configuration_error(self, monkeypatch) -> None:
        monkeypatch.setattr("oneline.config.settings.google_api_key", "")
        app = create_app()

        with TestClient(app) as c:
            resp = c.post("/summarize", json={"url": "https://example.com/"})
            health = c.get("/health")

        assert resp.status_code == 500
        assert resp.json() == {"error": "missing credential", "kind": "missing_credential"}
        assert health.json()["configured"] is False
