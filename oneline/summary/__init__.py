"""Summary package — model client, prompts, format rules & generator."""

from oneline.summary.gemini import GeminiClient
from oneline.summary.generator import SummaryGenerator
from oneline.summary.rules import enforce_max_length, summary_violations

__all__ = ["GeminiClient", "SummaryGenerator", "enforce_max_length", "summary_violations"]
