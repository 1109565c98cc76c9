"""Gatekeeper for user-supplied URLs.

``validate_url`` is pure: it never touches the network, so anything it
rejects is guaranteed never to reach the fetcher.
"""

from __future__ import annotations

import httpx

from oneline.config import MAX_URL_LENGTH
from oneline.errors import InvalidInputError
from oneline.scraper.models import CandidateUrl

_ALLOWED_SCHEMES = frozenset({"http", "https"})


def validate_url(raw: str) -> CandidateUrl:
    """Check *raw* and return it as a :class:`CandidateUrl`.

    Checks run in a fixed order so the first failing one determines the
    message: empty, too long, malformed, unsupported scheme.

    Raises:
        InvalidInputError: If any check fails.
    """
    trimmed = (raw or "").strip()
    if not trimmed:
        raise InvalidInputError("URL required")
    if len(trimmed) > MAX_URL_LENGTH:
        raise InvalidInputError("URL too long")

    try:
        parsed = httpx.URL(trimmed)
    except (httpx.InvalidURL, ValueError) as exc:
        raise InvalidInputError("malformed URL") from exc

    # A bare "example.com/page" parses as a relative reference.
    if not parsed.scheme:
        raise InvalidInputError("malformed URL")
    if parsed.scheme not in _ALLOWED_SCHEMES:
        raise InvalidInputError("unsupported scheme")
    if not parsed.host:
        raise InvalidInputError("malformed URL")

    return CandidateUrl(url=str(parsed), scheme=parsed.scheme, host=parsed.host)
