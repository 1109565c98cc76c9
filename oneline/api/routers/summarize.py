"""Summarize endpoint.

Routes
------
POST /summarize   Body: {"url": "https://..."}   → {"summary": "..."}
GET  /health                                     → {"status": "ok", ...}

Pipeline failures are answered as ``{"error": <message>, "kind": <kind>}``
with a status code chosen per error kind.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from oneline.errors import InvalidInputError, SummarizerError

router = APIRouter()

_STATUS_BY_KIND: dict[str, int] = {
    "invalid_input": 400,
    "fetch_failed": 422,
    "extraction_failed": 422,
    "missing_credential": 500,
    "generation_failed": 502,
    "timeout": 504,
    "overall_timeout": 504,
}


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class SummarizeRequest(BaseModel):
    url: str | None = None


class SummarizeResponse(BaseModel):
    summary: str


class ErrorResponse(BaseModel):
    error: str
    kind: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _error_response(exc: SummarizerError) -> JSONResponse:
    return JSONResponse(
        status_code=_STATUS_BY_KIND.get(exc.kind, 502),
        content={"error": exc.message, "kind": exc.kind},
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Answer unparseable or mistyped request bodies as invalid input."""
    return _error_response(InvalidInputError("invalid request body"))


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/summarize",
    response_model=SummarizeResponse,
    responses={code: {"model": ErrorResponse} for code in (400, 422, 500, 502, 504)},
)
async def summarize_endpoint(body: SummarizeRequest, request: Request) -> Any:
    """Summarize the page at ``body.url`` in one Japanese sentence."""
    pipeline = request.app.state.pipeline
    if pipeline is None:
        return _error_response(request.app.state.config_error)

    try:
        summary = await pipeline.run(body.url or "")
    except SummarizerError as exc:
        return _error_response(exc)
    return {"summary": summary}


@router.get("/health")
def health(request: Request) -> dict[str, Any]:
    """Report liveness and whether the model credential is configured."""
    return {"status": "ok", "configured": request.app.state.pipeline is not None}
