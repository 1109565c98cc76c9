"""End-to-end pipeline: raw URL → one validated Japanese sentence.

``SummaryPipeline.run`` orchestrates the stages strictly in order:

    validate → fetch → extract → summarize

Validation happens before the clock starts.  Fetch, extract and summarize
share one overall deadline; when it fires, the in-flight stage is cancelled
(closing its HTTP connection) and :class:`OverallTimeoutError` is raised.
Stage errors otherwise propagate unchanged.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from oneline.config import Settings, settings as default_settings
from oneline.errors import OverallTimeoutError
from oneline.scraper.extractor import extract_main_text
from oneline.scraper.fetcher import fetch_html
from oneline.scraper.models import CandidateUrl
from oneline.scraper.validator import validate_url
from oneline.summary.gemini import GeminiClient
from oneline.summary.generator import SummaryGenerator

logger = logging.getLogger(__name__)


class SummaryPipeline:
    """Composes the scraper and summary stages under one deadline.

    Holds configuration only; every :meth:`run` call allocates its own HTTP
    clients and buffers, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        generator: SummaryGenerator,
        *,
        fetch_timeout: float | None = None,
        overall_timeout: float | None = None,
        max_redirects: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.generator = generator
        self.fetch_timeout = (
            default_settings.fetch_timeout if fetch_timeout is None else fetch_timeout
        )
        self.overall_timeout = (
            default_settings.overall_timeout if overall_timeout is None else overall_timeout
        )
        self.max_redirects = (
            default_settings.max_redirects if max_redirects is None else max_redirects
        )
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "SummaryPipeline":
        """Build a pipeline from *settings* (defaults to the module singleton).

        Raises:
            MissingCredentialError: No model API key is configured.
        """
        settings = settings or default_settings
        client = GeminiClient.from_settings(settings)
        generator = SummaryGenerator(client, timeout=settings.generation_timeout)
        return cls(
            generator,
            fetch_timeout=settings.fetch_timeout,
            overall_timeout=settings.overall_timeout,
            max_redirects=settings.max_redirects,
        )

    async def _process(self, candidate: CandidateUrl) -> str:
        fetched = await fetch_html(
            candidate,
            timeout=self.fetch_timeout,
            max_redirects=self.max_redirects,
            transport=self._transport,
        )
        page = extract_main_text(fetched.html, fetched.final_url)
        return await self.generator.summarize(page.text)

    async def run(self, raw_url: str) -> str:
        """Summarize the page at *raw_url* in one Japanese sentence.

        Raises:
            InvalidInputError: *raw_url* was rejected; no request was made.
            FetchFailedError, StageTimeoutError, ExtractionFailedError,
            GenerationFailedError: Raised unchanged by the failing stage.
            OverallTimeoutError: The overall deadline elapsed first.
        """
        candidate = validate_url(raw_url)
        logger.info("Summarizing %s", candidate.url)

        try:
            summary = await asyncio.wait_for(
                self._process(candidate), self.overall_timeout
            )
        except asyncio.TimeoutError as exc:
            logger.warning(
                "Overall deadline (%.1fs) elapsed for %s",
                self.overall_timeout, candidate.url,
            )
            raise OverallTimeoutError("processing timed out") from exc

        logger.info("Summary ready for %s", candidate.url)
        return summary


def summarize_url(raw_url: str, pipeline: SummaryPipeline | None = None) -> str:
    """Blocking wrapper around :meth:`SummaryPipeline.run`."""
    pipeline = pipeline or SummaryPipeline.from_settings()
    return asyncio.run(pipeline.run(raw_url))
