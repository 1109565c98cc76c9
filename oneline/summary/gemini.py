"""Minimal async client for the Gemini ``generateContent`` REST endpoint.

The API key is passed in at construction time and sent in the
``x-goog-api-key`` header, so it never appears in a URL (and therefore never
in an access log or an httpx exception message).
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from oneline.config import SUMMARY_MAX_CHARS, Settings
from oneline.errors import GenerationFailedError, MissingCredentialError

logger = logging.getLogger(__name__)

# Loose token cap: roughly four tokens per output character.  The hard length
# limit is applied after validation.
_DEFAULT_GENERATION_CONFIG: dict[str, Any] = {
    "temperature": 0.3,
    "topP": 0.95,
    "maxOutputTokens": SUMMARY_MAX_CHARS * 4,
}


class GeminiClient:
    """Calls ``{base_url}/models/{model}:generateContent``.

    Args:
        api_key: Server-held API credential.
        model: Model name, e.g. ``"gemini-1.5-flash"``.
        base_url: API root including the version segment.
        timeout: Transport timeout in seconds for a single call.
        transport: Optional ``httpx`` transport (used by tests).

    Raises:
        MissingCredentialError: If *api_key* is empty.
    """

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "gemini-1.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
        generation_config: dict[str, Any] | None = None,
    ) -> None:
        if not api_key:
            raise MissingCredentialError("missing credential")
        self._api_key = api_key
        self.model = model
        self.endpoint = f"{base_url.rstrip('/')}/models/{model}:generateContent"
        self.timeout = timeout
        self._transport = transport
        self.generation_config = dict(generation_config or _DEFAULT_GENERATION_CONFIG)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "GeminiClient":
        return cls(
            settings.require_api_key(),
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.generation_timeout,
            transport=transport,
        )

    def __repr__(self) -> str:
        return f"GeminiClient(model={self.model!r})"

    async def generate(
        self,
        contents: list[dict[str, Any]],
        system_instruction: dict[str, Any],
    ) -> str:
        """Send one ``generateContent`` request and return the first text part.

        Raises:
            GenerationFailedError: Non-2xx status, an empty or missing text
                part, or a transport/decoding failure.
            httpx.TimeoutException: Propagated so the caller can report it as
                a timeout rather than a generic failure.
        """
        body = {
            "contents": contents,
            "systemInstruction": system_instruction,
            "generationConfig": self.generation_config,
        }

        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport
        ) as client:
            try:
                response = await client.post(
                    self.endpoint,
                    headers={"x-goog-api-key": self._api_key},
                    json=body,
                )
            except httpx.TimeoutException:
                raise
            except httpx.HTTPError as exc:
                raise GenerationFailedError("model API request failed") from exc

        if not response.is_success:
            logger.warning("Gemini returned HTTP %d", response.status_code)
            raise GenerationFailedError(
                f"model API error (HTTP {response.status_code})"
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise GenerationFailedError("model API request failed") from exc

        text = _first_text_part(data)
        if not text or not text.strip():
            raise GenerationFailedError("empty model response")
        return text


def _first_text_part(data: Any) -> str | None:
    """Return ``candidates[0].content.parts[0].text`` or ``None`` if absent."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None
