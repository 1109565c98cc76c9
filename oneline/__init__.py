"""One-line summarizer: web page URL → one validated Japanese sentence.

Public re-exports so callers can write::

    from oneline import SummaryPipeline, summarize_url
"""

from oneline.pipeline import SummaryPipeline, summarize_url

__all__ = ["SummaryPipeline", "summarize_url"]
