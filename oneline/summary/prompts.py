"""Prompt builders for the Gemini ``generateContent`` request.

Each builder returns a JSON-ready fragment of the request body.  The retry
prompt is shorter and states the constraints more bluntly; it replaces the
first prompt rather than continuing a conversation.
"""

from __future__ import annotations

from typing import Any

from oneline.config import SUMMARY_MAX_CHARS

# One worked example shown to the model.  Placeholders keep it topic-neutral.
_EXAMPLE_INPUT = "〇〇社が□□を発表。市場動向〜"
_EXAMPLE_OUTPUT = "〇〇社が□□を発表し、△△市場で××の拡大を狙う動きが加速した"


def build_system_instruction() -> dict[str, Any]:
    lines = [
        "あなたはウェブ記事を要約する日本語編集者です。",
        f"出力は日本語の一文のみ、{SUMMARY_MAX_CHARS}文字以内とします。",
        "客観的かつ中立な文体で、固有名詞などの具体的な情報を優先してください。",
        "URL、絵文字、記号による装飾、箇条書きは使用しないでください。",
        "本文に複数の話題が含まれる場合は、最も中心的な話題だけを要約してください。",
    ]
    return {"parts": [{"text": "\n".join(lines)}]}


def build_user_content(text: str) -> dict[str, Any]:
    """Return the first-attempt user turn embedding *text*."""
    prompt = "\n".join([
        f"次の本文を日本語の一文、{SUMMARY_MAX_CHARS}文字以内（句読点を含む）で要約してください。",
        "URL、絵文字、ハッシュタグは使わないでください。",
        "複数の話題がある場合は中心的な話題を要約してください。",
        "【例】",
        f"入力: {_EXAMPLE_INPUT}",
        f"出力: {_EXAMPLE_OUTPUT}",
        "【本文】",
        text,
    ])
    return {"role": "user", "parts": [{"text": prompt}]}


def build_retry_user_content(text: str) -> dict[str, Any]:
    """Return the stricter user turn sent after a failed first attempt."""
    prompt = "\n".join([
        "前回の出力は条件を満たしていませんでした。",
        f"必ず日本語で「一文のみ」「{SUMMARY_MAX_CHARS}文字以内」で出力してください。",
        "URL・絵文字・ハッシュタグは禁止です。短く端的に要約してください。",
        "【本文】",
        text,
    ])
    return {"role": "user", "parts": [{"text": prompt}]}
