"""FastAPI application factory.

Lifespan
--------
On startup the app builds one :class:`~oneline.pipeline.SummaryPipeline`
from ``settings`` and keeps it on ``app.state.pipeline``.  The pipeline holds
configuration only, so sharing it across requests shares nothing mutable.

A missing model credential does not stop the server from starting: the error
is kept on ``app.state.config_error`` and every summarize request answers
with a configuration error until the key is set.

Routers
-------
    /summarize — URL → one-sentence Japanese summary
    /health    — liveness and configuration status
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from oneline.api.routers import summarize as summarize_router
from oneline.config import configure_logging
from oneline.errors import MissingCredentialError
from oneline.pipeline import SummaryPipeline

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the pipeline on startup."""
    configure_logging()
    try:
        app.state.pipeline = SummaryPipeline.from_settings()
        app.state.config_error = None
    except MissingCredentialError as exc:
        logger.error("Summarization disabled: GOOGLE_API_KEY is not set")
        app.state.pipeline = None
        app.state.config_error = exc
    yield


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="One-line Summarizer API",
        description=(
            "Summarizes the main content of a web page in a single Japanese "
            "sentence of at most 80 characters."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(summarize_router.router, tags=["summarize"])
    app.add_exception_handler(
        RequestValidationError, summarize_router.request_validation_handler
    )

    return app


# Module-level instance used by uvicorn:
#   uvicorn oneline.api.app:app --reload
app = create_app()
