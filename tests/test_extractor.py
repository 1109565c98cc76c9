"""Tests for main-text extraction.

Mocking strategy:
- Strategy selection is tested with small in-test ``ExtractionStrategy``
  doubles so the length gate is exercised independently of trafilatura.
- ``trafilatura.extract`` is patched where a test needs the heuristic step to
  come back empty or blow up.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from oneline.errors import ExtractionFailedError
from oneline.scraper.extractor import (
    ExtractionStrategy,
    HeuristicStrategy,
    TagStrippingStrategy,
    _extract_title,
    extract_main_text,
    normalize_whitespace,
)
from oneline.scraper.models import ExtractedPage

_PARAGRAPH = (
    "東京都は新しい再生可能エネルギー計画を発表し、二〇三〇年までに都内の電力の半分を"
    "太陽光と風力でまかなう目標を掲げた。計画には住宅向けの補助金拡充も含まれている。"
)

_ARTICLE_HTML = f"""\
<!DOCTYPE html>
<html>
<head><title>再生可能エネルギー計画</title><style>.a{{color:red}}</style></head>
<body>
  <nav><a href="/">ホーム</a> <a href="/news">ニュース</a></nav>
  <article>
    <h1>再生可能エネルギー計画</h1>
    <p>{_PARAGRAPH}</p>
    <p>{_PARAGRAPH}</p>
    <p>{_PARAGRAPH}</p>
  </article>
  <script>alert('tracking')</script>
  <footer>Copyright Example News</footer>
</body>
</html>
"""

_SHORT_HTML = "<html><body><p>短い本文です。これだけでは要約には足りません。</p></body></html>"


class _FixedStrategy(ExtractionStrategy):
    def __init__(self, name: str, text: str) -> None:
        self._name = name
        self.text = text
        self.calls = 0

    @property
    def name(self) -> str:
        return self._name

    def extract(self, html: str, base_url: str) -> str:
        self.calls += 1
        return self.text


class _BrokenStrategy(ExtractionStrategy):
    @property
    def name(self) -> str:
        return "broken"

    def extract(self, html: str, base_url: str) -> str:
        raise ValueError("parser exploded")


# ---------------------------------------------------------------------------
# normalize_whitespace
# ---------------------------------------------------------------------------

class TestNormalizeWhitespace:
    def test_collapses_tabs_and_spaces(self) -> None:
        assert normalize_whitespace("a\t\tb   c") == "a b c"

    def test_collapses_blank_line_runs(self) -> None:
        assert normalize_whitespace("a\n\n\n  \nb") == "a\nb"

    def test_normalizes_line_endings(self) -> None:
        assert normalize_whitespace("a\r\nb\rc\u2028d\u2029e") == "a\nb\nc\nd\ne"

    def test_strips_edges(self) -> None:
        assert normalize_whitespace("  \n a b \n ") == "a b"

    def test_non_breaking_space_runs(self) -> None:
        assert normalize_whitespace("a\u00a0\u00a0b\u00a0 c") == "a b c"

    @pytest.mark.parametrize(
        "raw",
        [
            "  title\n\n\tbody  text \r\n more ",
            "　全角スペース　　あり\n\n",
            "one\n two \n\n three\t\tfour",
        ],
    )
    def test_idempotent(self, raw: str) -> None:
        once = normalize_whitespace(raw)
        assert normalize_whitespace(once) == once

    def test_no_tabs_or_blank_lines_remain(self) -> None:
        out = normalize_whitespace("x\t\n\n\ty \n\n z")
        assert "\t" not in out
        assert "\n\n" not in out
        assert "  " not in out


# ---------------------------------------------------------------------------
# Helpers and concrete strategies
# ---------------------------------------------------------------------------

class TestExtractTitle:
    def test_extracts_title(self) -> None:
        assert _extract_title(_ARTICLE_HTML) == "再生可能エネルギー計画"

    def test_missing_title_returns_empty(self) -> None:
        assert _extract_title("<html><body></body></html>") == ""


class TestTagStrippingStrategy:
    def test_skips_non_content_elements(self) -> None:
        text = TagStrippingStrategy().extract(_ARTICLE_HTML, "https://example.com/")
        assert "alert" not in text
        assert "color:red" not in text
        assert "ホーム" not in text
        assert "Copyright" not in text
        assert "再生可能エネルギー" in text


class TestHeuristicStrategy:
    def test_returns_empty_string_when_nothing_qualifies(self) -> None:
        with patch("oneline.scraper.extractor.trafilatura.extract", return_value=None):
            assert HeuristicStrategy().extract("<html></html>", "https://example.com/") == ""

    def test_passes_base_url(self) -> None:
        with patch(
            "oneline.scraper.extractor.trafilatura.extract", return_value="body"
        ) as mock_extract:
            HeuristicStrategy().extract("<html></html>", "https://example.com/a")
        assert mock_extract.call_args.kwargs["url"] == "https://example.com/a"


# ---------------------------------------------------------------------------
# extract_main_text
# ---------------------------------------------------------------------------

class TestExtractMainText:
    def test_article_page(self) -> None:
        page = extract_main_text(_ARTICLE_HTML, "https://example.com/article")

        assert isinstance(page, ExtractedPage)
        assert page.url == "https://example.com/article"
        assert page.title == "再生可能エネルギー計画"
        assert len(page.text) >= 200
        assert "太陽光と風力" in page.text
        assert "alert" not in page.text
        assert page.strategy in {"heuristic", "tag-stripping"}

    def test_falls_back_when_heuristic_finds_nothing(self) -> None:
        with patch("oneline.scraper.extractor.trafilatura.extract", return_value=None):
            page = extract_main_text(_ARTICLE_HTML, "https://example.com/")

        assert page.strategy == "tag-stripping"
        assert "太陽光と風力" in page.text
        assert "Copyright" not in page.text

    def test_short_heuristic_result_triggers_fallback(self) -> None:
        primary = _FixedStrategy("primary", "短すぎる")
        fallback = _FixedStrategy("fallback", "あ" * 250)
        page = extract_main_text("<html></html>", "https://example.com/", [primary, fallback])

        assert page.strategy == "fallback"
        assert primary.calls == 1
        assert fallback.calls == 1

    def test_fallback_not_run_when_primary_is_long_enough(self) -> None:
        primary = _FixedStrategy("primary", "い" * 200)
        fallback = _FixedStrategy("fallback", "あ" * 250)
        page = extract_main_text("<html></html>", "https://example.com/", [primary, fallback])

        assert page.strategy == "primary"
        assert fallback.calls == 0

    def test_length_gate_applies_after_normalization(self) -> None:
        padded = _FixedStrategy("padded", "あ\n\n\n\n" * 60)
        with pytest.raises(ExtractionFailedError):
            extract_main_text("<html></html>", "https://example.com/", [padded])

    def test_short_page_fails(self) -> None:
        with pytest.raises(ExtractionFailedError, match="could not extract article body"):
            extract_main_text(_SHORT_HTML, "https://example.com/")

    def test_empty_document_fails(self) -> None:
        with pytest.raises(ExtractionFailedError, match="could not extract article body"):
            extract_main_text("", "https://example.com/")

    def test_parser_errors_are_wrapped(self) -> None:
        with pytest.raises(ExtractionFailedError, match="text extraction failed") as exc_info:
            extract_main_text("<html></html>", "https://example.com/", [_BrokenStrategy()])

        assert isinstance(exc_info.value.__cause__, ValueError)
