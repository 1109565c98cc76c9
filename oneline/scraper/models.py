"""Data models for the scraper stages."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CandidateUrl:
    """A syntactically valid absolute http(s) URL accepted by the validator."""

    url: str
    scheme: str
    host: str

    def __str__(self) -> str:
        return self.url


@dataclass
class FetchResult:
    """The body of the final 2xx response in a redirect chain."""

    html: str
    final_url: str
    http_status: int


@dataclass
class ExtractedPage:
    """Normalized main text extracted from a :class:`FetchResult`.

    ``strategy`` names the extraction strategy that produced ``text``.
    """

    url: str
    title: str
    text: str
    strategy: str
