"""Error kinds raised by the summarization pipeline.

Every failure that crosses a component boundary is one of these.  Lower-level
exceptions (httpx, trafilatura, BeautifulSoup, JSON decoding) are caught where
they originate and re-raised as the matching kind, chained with ``from`` so
the original traceback is still available when debugging.

``kind`` is a stable, transport-neutral identifier; outer surfaces (the HTTP
API, the CLI) map it to a status code or an exit message.

None of these subclass the built-in ``TimeoutError``: ``asyncio.wait_for``
signals deadline expiry with that type, and a stage-level timeout must never
be mistaken for the pipeline's own overall deadline firing.
"""

from __future__ import annotations


class SummarizerError(Exception):
    """Base class for all pipeline failures."""

    kind: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(SummarizerError):
    """The raw URL is empty, too long, malformed, or not http(s)."""

    kind = "invalid_input"


class FetchFailedError(SummarizerError):
    """The page could not be retrieved (status, redirects, transport)."""

    kind = "fetch_failed"


class StageTimeoutError(SummarizerError):
    """A stage-local deadline (fetch or generation) elapsed."""

    kind = "timeout"


class ExtractionFailedError(SummarizerError):
    """The page was fetched but no sufficiently long main text was found."""

    kind = "extraction_failed"


class GenerationFailedError(SummarizerError):
    """The model call failed or its output never satisfied the format rules."""

    kind = "generation_failed"


class MissingCredentialError(GenerationFailedError):
    """No model API credential is configured.

    A configuration problem rather than a runtime failure: it is raised once
    at construction time and never retried.
    """

    kind = "missing_credential"


class OverallTimeoutError(SummarizerError):
    """The end-to-end processing deadline elapsed."""

    kind = "overall_timeout"
