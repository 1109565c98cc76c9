"""Main-text extraction: turns fetched HTML into an :class:`ExtractedPage`.

Extraction is a chain of pluggable strategies tried in order.  Each result is
whitespace-normalized and accepted only once it reaches
``MIN_TEXT_LENGTH`` characters; the default chain is

1. :class:`HeuristicStrategy`: ``trafilatura``'s readability-style scoring
   of DOM subtrees, which keeps the article body and drops boilerplate.
2. :class:`TagStrippingStrategy`: a BeautifulSoup flattening of the whole
   document with script, style, navigation and footer elements removed.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Sequence

import trafilatura
from bs4 import BeautifulSoup

from oneline.config import MIN_TEXT_LENGTH
from oneline.errors import ExtractionFailedError
from oneline.scraper.models import ExtractedPage

logger = logging.getLogger(__name__)

_LINE_BREAKS = re.compile(r"\r\n?|\u2028|\u2029")
_SPACE_AROUND_NEWLINE = re.compile(r"\s*\n\s*")
_SPACE_RUNS = re.compile(r"[\u00a0\s]{2,}")

_SKIPPED_TAGS = ["script", "style", "nav", "footer", "noscript", "template"]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def normalize_whitespace(text: str) -> str:
    """Collapse whitespace to single spaces and single ``\\n`` line breaks.

    Tabs become spaces, blank-line runs collapse to one newline, and leading
    and trailing whitespace is removed.  Applying it twice is a no-op.
    """
    text = _LINE_BREAKS.sub("\n", text)
    text = text.replace("\t", " ")
    text = _SPACE_AROUND_NEWLINE.sub("\n", text)
    text = _SPACE_RUNS.sub(" ", text)
    return text.strip()


def _extract_title(html: str) -> str:
    """Return the text content of the first ``<title>`` tag, or empty string."""
    match = re.search(r"<title[^>]*>([^<]+)</title>", html, re.IGNORECASE)
    if match:
        return normalize_whitespace(match.group(1))
    return ""


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

class ExtractionStrategy(ABC):
    """Abstract base class for a single main-content extraction strategy."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier recorded on the resulting page."""

    @abstractmethod
    def extract(self, html: str, base_url: str) -> str:
        """Return the raw (un-normalized) text, or ``""`` if nothing qualifies."""


class HeuristicStrategy(ExtractionStrategy):
    """Score DOM subtrees by text density and keep the best article body.

    *base_url* is passed through so relative links are resolved while
    trafilatura weighs link density.
    """

    @property
    def name(self) -> str:
        return "heuristic"

    def extract(self, html: str, base_url: str) -> str:
        text: str | None = trafilatura.extract(
            html,
            url=base_url,
            include_comments=False,
            include_links=False,
            include_images=False,
            include_tables=True,
        )
        return text or ""


class TagStrippingStrategy(ExtractionStrategy):
    """Flatten the full document to text, skipping non-content elements."""

    @property
    def name(self) -> str:
        return "tag-stripping"

    def extract(self, html: str, base_url: str) -> str:
        soup = BeautifulSoup(html, "html.parser")
        for tag in soup(_SKIPPED_TAGS):
            tag.decompose()
        return soup.get_text(separator="\n")


DEFAULT_STRATEGIES: tuple[ExtractionStrategy, ...] = (
    HeuristicStrategy(),
    TagStrippingStrategy(),
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_main_text(
    html: str,
    base_url: str,
    strategies: Sequence[ExtractionStrategy] | None = None,
) -> ExtractedPage:
    """Extract the main article text from *html*.

    Args:
        html: Raw HTML of the fetched page.
        base_url: The page's final URL, used to resolve relative links.
        strategies: Strategies to try in order.  Defaults to
            :data:`DEFAULT_STRATEGIES`.

    Returns:
        An :class:`ExtractedPage` whose ``text`` is normalized and at least
        ``MIN_TEXT_LENGTH`` characters long.

    Raises:
        ExtractionFailedError: No strategy produced enough text, or parsing
            failed.  Parser exceptions never escape this function.
    """
    chain = DEFAULT_STRATEGIES if strategies is None else strategies

    try:
        for strategy in chain:
            text = normalize_whitespace(strategy.extract(html, base_url))
            if len(text) >= MIN_TEXT_LENGTH:
                logger.info(
                    "Extracted %d chars from %s using %s strategy",
                    len(text), base_url, strategy.name,
                )
                return ExtractedPage(
                    url=base_url,
                    title=_extract_title(html),
                    text=text,
                    strategy=strategy.name,
                )
            logger.debug(
                "%s strategy yielded %d chars for %s; trying next",
                strategy.name, len(text), base_url,
            )
    except Exception as exc:  # noqa: BLE001
        raise ExtractionFailedError("text extraction failed") from exc

    raise ExtractionFailedError("could not extract article body")
