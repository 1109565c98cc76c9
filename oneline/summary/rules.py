"""Format rules for one-line summaries.

Pure predicates over text, plus the cleanup applied to raw model output and
the punctuation-aware length cap.  A summary is accepted when
:func:`summary_violations` returns an empty list.
"""

from __future__ import annotations

import re

from oneline.config import SUMMARY_MAX_CHARS

_JAPANESE = re.compile(r"[぀-ヿ㐀-䶿一-鿿]")

_MARU_RUNS = re.compile(r"。+")
_TWO_MARU = re.compile(r"。.*。")
# ASCII terminators followed by a letter/digit are decimals or abbreviations
# ("3.5", "example.com"), not sentence ends.
_LATIN_TERMINATOR = re.compile(r"[.!?](?!\w)", re.ASCII)

_URL = re.compile(r"https?://", re.IGNORECASE)
_HASHTAG = re.compile(r"[#＃]")
_PICTOGRAPH = re.compile(
    r"["
    r"©®‼⁉™ℹ↔-↙↩↪"
    r"⌚⌛⌨⎈⏏⏩-⏳⏸-⏺"
    r"Ⓜ▪▫▶◀◻-◾"
    r"☀-★☇-☒☔-⚅⚐-✅✈-✒"
    r"✔✖✝✡✨✳✴❄❇❌❎"
    r"❓-❕❗❣-❧➕-➗➡➰➿"
    r"⤴⤵⬅-⬇⬛⬜⭐⭕"
    r"〰〽㊗㊙"
    r"\U0001f000-\U0001f0ff\U0001f10d-\U0001f10f\U0001f12f"
    r"\U0001f16c-\U0001f171\U0001f17e\U0001f17f\U0001f18e\U0001f191-\U0001f19a"
    r"\U0001f1ad-\U0001f1e5\U0001f201-\U0001f20f\U0001f21a\U0001f22f"
    r"\U0001f232-\U0001f23a\U0001f23c-\U0001f23f\U0001f249-\U0001f3fa"
    r"\U0001f400-\U0001f53d\U0001f546-\U0001f64f\U0001f680-\U0001f6ff"
    r"\U0001f774-\U0001f77f\U0001f7d5-\U0001f7ff\U0001f80c-\U0001f80f"
    r"\U0001f848-\U0001f84f\U0001f85a-\U0001f85f\U0001f888-\U0001f88f"
    r"\U0001f8ae-\U0001f8ff\U0001f90c-\U0001f93a\U0001f93c-\U0001f945"
    r"\U0001f947-\U0001faff\U0001fc00-\U0001fffd"
    r"]"
)

_WRAPPING_QUOTES = {
    '"': '"',
    "'": "'",
    "“": "”",
    "「": "」",
    "『": "』",
}

# Sentence and clause punctuation a truncated summary may end on.  An ASCII
# "." or "," between two word characters belongs to a number or name
# ("3.5", "1,000") and is never a cut point.
_CUT_MARK = re.compile(r"[。、．，！？!?]|(?<!\w)[.,]|[.,](?!\w)", re.ASCII)
_MIN_CUT_INDEX = 10


def clean_output(text: str) -> str:
    """Trim *text*, collapse whitespace to single spaces, drop wrapping quotes."""
    cleaned = re.sub(r"\s+", " ", text.strip())
    if len(cleaned) >= 2 and _WRAPPING_QUOTES.get(cleaned[0]) == cleaned[-1]:
        cleaned = cleaned[1:-1].strip()
    return cleaned


def contains_japanese(text: str) -> bool:
    return _JAPANESE.search(text) is not None


def is_single_sentence(text: str) -> bool:
    """Return ``True`` if *text* has at most one sentence terminator.

    Runs of ``。`` are collapsed to one before counting, so ``"…。。"`` is a
    single sentence while ``"…。…。"`` is two.
    """
    collapsed = _MARU_RUNS.sub("。", text)
    ends = collapsed.count("。") + len(_LATIN_TERMINATOR.findall(collapsed))
    return ends <= 1 and _TWO_MARU.search(collapsed) is None


def has_no_forbidden_content(text: str) -> bool:
    """Return ``False`` if *text* contains a URL, a hashtag mark or an emoji."""
    if _URL.search(text):
        return False
    if _HASHTAG.search(text):
        return False
    if _PICTOGRAPH.search(text):
        return False
    return True


def summary_violations(text: str) -> list[str]:
    """Return the names of the format checks *text* fails (empty if valid)."""
    violations: list[str] = []
    if not contains_japanese(text):
        violations.append("not_japanese")
    if not is_single_sentence(text):
        violations.append("multiple_sentences")
    if not has_no_forbidden_content(text):
        violations.append("forbidden_content")
    return violations


def enforce_max_length(text: str, max_chars: int = SUMMARY_MAX_CHARS) -> str:
    """Cap *text* at *max_chars* characters.

    Over-long text is cut right after the last punctuation mark in the first
    *max_chars* characters, provided that mark is not too close to the start;
    otherwise it is hard-cut.  No ellipsis is appended.  The result can fail
    :func:`summary_violations` even when *text* passed, so callers re-check it.
    """
    if len(text) <= max_chars:
        return text
    cuts = [m.start() for m in _CUT_MARK.finditer(text) if m.start() < max_chars]
    if cuts and cuts[-1] >= _MIN_CUT_INDEX:
        return text[: cuts[-1] + 1]
    return text[:max_chars]
