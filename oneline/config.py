"""Centralised settings for the one-line summarizer.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

The model API key is read here but never used from here: it is handed to
:class:`~oneline.summary.gemini.GeminiClient` explicitly when the pipeline is
built (see :meth:`Settings.require_api_key`).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from oneline.errors import MissingCredentialError

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# ---------------------------------------------------------------------------
# Fixed limits (part of the output contract, not tunable per deployment)
# ---------------------------------------------------------------------------
MAX_URL_LENGTH = 2048
MIN_TEXT_LENGTH = 200
MODEL_INPUT_MIN_CHARS = 3000
MODEL_INPUT_MAX_CHARS = 8000
SUMMARY_MAX_CHARS = 80


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Text-generation model
    # ------------------------------------------------------------------
    google_api_key: str = field(
        default_factory=lambda: os.environ.get("GOOGLE_API_KEY", ""),
        repr=False,
    )
    gemini_model: str = field(
        default_factory=lambda: os.environ.get("GEMINI_MODEL", "gemini-1.5-flash")
    )
    gemini_base_url: str = field(
        default_factory=lambda: os.environ.get(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        )
    )
    generation_timeout: float = field(
        default_factory=lambda: float(os.environ.get("GENERATION_TIMEOUT", "5.0"))
    )

    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "ONELINE_USER_AGENT",
            "Mozilla/5.0 (compatible; OneLineSummarizer/1.0; +https://example.invalid)",
        )
    )
    fetch_timeout: float = field(
        default_factory=lambda: float(os.environ.get("FETCH_TIMEOUT", "10.0"))
    )
    max_redirects: int = field(
        default_factory=lambda: int(os.environ.get("MAX_REDIRECTS", "5"))
    )

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    overall_timeout: float = field(
        default_factory=lambda: float(os.environ.get("OVERALL_TIMEOUT", "15.0"))
    )
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )

    def require_api_key(self) -> str:
        """Return the model API key, or raise if it is not configured.

        Raises:
            MissingCredentialError: ``GOOGLE_API_KEY`` is empty or unset.
        """
        key = self.google_api_key.strip()
        if not key:
            raise MissingCredentialError("missing credential")
        return key


def configure_logging(level: str | None = None) -> None:
    """Install a root stream handler at *level* (defaults to ``settings.log_level``)."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=_LOG_FORMAT,
    )


# Module-level singleton — import this everywhere:
#   from oneline.config import settings
settings = Settings()
