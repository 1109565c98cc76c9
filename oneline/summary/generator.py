"""One-line summary generation with format validation and a single retry.

Flow for one call to :meth:`SummaryGenerator.summarize`:

    clip input → prompt → model → clean → validate → cap length → validate
        └─ on failure: stricter prompt, same steps (last try)

Each model call has its own deadline.  A timed-out or failed first call uses
up the first attempt exactly like an invalid answer does; the retry is the
last chance.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from oneline.config import (
    MODEL_INPUT_MAX_CHARS,
    MODEL_INPUT_MIN_CHARS,
    SUMMARY_MAX_CHARS,
    settings,
)
from oneline.errors import (
    GenerationFailedError,
    MissingCredentialError,
    StageTimeoutError,
    SummarizerError,
)
from oneline.summary.gemini import GeminiClient
from oneline.summary.prompts import (
    build_retry_user_content,
    build_system_instruction,
    build_user_content,
)
from oneline.summary.rules import clean_output, enforce_max_length, summary_violations

logger = logging.getLogger(__name__)


def clip_model_input(text: str) -> str:
    """Bound the text sent to the model to ``MODEL_INPUT_MAX_CHARS``."""
    limit = min(max(MODEL_INPUT_MIN_CHARS, len(text)), MODEL_INPUT_MAX_CHARS)
    return text[:limit]


class SummaryGenerator:
    """Produces a validated one-sentence Japanese summary.

    Args:
        client: The model client; constructing it already validated the
            credential.
        timeout: Deadline in seconds for each model call.  Defaults to
            ``settings.generation_timeout``.
        max_chars: Hard cap on the returned summary's length.
    """

    def __init__(
        self,
        client: GeminiClient,
        *,
        timeout: float | None = None,
        max_chars: int = SUMMARY_MAX_CHARS,
    ) -> None:
        self.client = client
        self.timeout = settings.generation_timeout if timeout is None else timeout
        self.max_chars = max_chars

    async def _invoke(self, content: dict[str, Any]) -> str:
        try:
            raw = await asyncio.wait_for(
                self.client.generate([content], build_system_instruction()),
                self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise StageTimeoutError("summary generation timed out") from exc
        return clean_output(raw)

    async def summarize(self, text: str) -> str:
        """Return a summary of *text* that satisfies every format rule.

        Raises:
            MissingCredentialError: The client has no credential (never retried).
            GenerationFailedError: Both attempts failed; the message describes
                the last failure.
            StageTimeoutError: The retry call exceeded its deadline.
        """
        chunk = clip_model_input(text)
        attempts = (build_user_content(chunk), build_retry_user_content(chunk))

        last_error: SummarizerError = GenerationFailedError(
            "summary did not satisfy format constraints"
        )
        for number, content in enumerate(attempts, start=1):
            try:
                candidate = await self._invoke(content)
            except MissingCredentialError:
                raise
            except (GenerationFailedError, StageTimeoutError) as exc:
                logger.warning("Summary attempt %d failed: %s", number, exc)
                last_error = exc
                continue

            violations = summary_violations(candidate)
            if not violations:
                candidate = enforce_max_length(candidate, self.max_chars)
                violations = summary_violations(candidate)
            if not violations:
                logger.info(
                    "Summary accepted on attempt %d (%d chars)", number, len(candidate)
                )
                return candidate

            logger.warning(
                "Summary attempt %d rejected: %s", number, ", ".join(violations)
            )
            last_error = GenerationFailedError(
                "summary did not satisfy format constraints"
            )

        raise last_error
