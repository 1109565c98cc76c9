"""Scraper package — URL validation, web fetch & main-text extraction."""

from oneline.scraper.extractor import extract_main_text, normalize_whitespace
from oneline.scraper.fetcher import fetch_html
from oneline.scraper.models import CandidateUrl, ExtractedPage, FetchResult
from oneline.scraper.validator import validate_url

__all__ = [
    "validate_url",
    "fetch_html",
    "extract_main_text",
    "normalize_whitespace",
    "CandidateUrl",
    "FetchResult",
    "ExtractedPage",
]
