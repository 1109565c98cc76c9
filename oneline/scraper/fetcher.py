"""HTTP fetcher with manual, bounded redirect following.

Redirects are followed by hand rather than by ``httpx`` so the chain length
can be capped and every hop is resolved against the URL that produced it.
One deadline covers the whole chain; it is not reset per hop.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from oneline.config import settings
from oneline.errors import FetchFailedError, StageTimeoutError
from oneline.scraper.models import CandidateUrl, FetchResult

logger = logging.getLogger(__name__)

_REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})


def _default_headers() -> dict[str, str]:
    return {"User-Agent": settings.user_agent}


async def _follow_chain(
    client: httpx.AsyncClient, start_url: str, max_redirects: int
) -> FetchResult:
    """GET *start_url*, following at most *max_redirects* redirects."""
    current = start_url
    redirects = 0

    while True:
        response = await client.get(current)
        status = response.status_code

        if status in _REDIRECT_STATUSES:
            if redirects >= max_redirects:
                logger.warning("Redirect limit (%d) reached at %s", max_redirects, current)
                raise FetchFailedError("too many redirects")
            location = response.headers.get("location")
            if not location:
                raise FetchFailedError("missing redirect target")
            try:
                current = str(httpx.URL(current).join(location))
            except httpx.InvalidURL as exc:
                raise FetchFailedError("invalid redirect target") from exc
            redirects += 1
            logger.debug("Redirect %d → %s", redirects, current)
            continue

        if 200 <= status < 300:
            return FetchResult(html=response.text, final_url=current, http_status=status)

        if status == 404:
            raise FetchFailedError("not found")

        raise FetchFailedError(f"fetch failed (HTTP {status})")


async def fetch_html(
    candidate: CandidateUrl,
    *,
    timeout: float | None = None,
    max_redirects: int | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FetchResult:
    """Fetch the HTML behind *candidate*.

    Args:
        candidate: A URL accepted by :func:`~oneline.scraper.validator.validate_url`.
        timeout: Deadline in seconds for the entire redirect chain.  Defaults
            to ``settings.fetch_timeout``.
        max_redirects: Maximum number of redirects to follow.  Defaults to
            ``settings.max_redirects``.
        transport: Optional ``httpx`` transport (used by tests).

    Returns:
        A :class:`FetchResult` for the final 2xx response.

    Raises:
        FetchFailedError: Terminal non-2xx status, missing ``Location``,
            too many redirects, or a transport-level failure.
        StageTimeoutError: The deadline elapsed before a 2xx body was read.
    """
    timeout = settings.fetch_timeout if timeout is None else timeout
    max_redirects = settings.max_redirects if max_redirects is None else max_redirects

    try:
        async with httpx.AsyncClient(
            headers=_default_headers(),
            timeout=timeout,
            follow_redirects=False,
            transport=transport,
        ) as client:
            result = await asyncio.wait_for(
                _follow_chain(client, candidate.url, max_redirects), timeout
            )
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        raise StageTimeoutError("content fetch timed out") from exc
    except httpx.HTTPError as exc:
        raise FetchFailedError("error while fetching page") from exc

    logger.info(
        "Fetched %s (HTTP %d, %d chars)",
        result.final_url, result.http_status, len(result.html),
    )
    return result
