"""One-line summarizer CLI — entry-point for all pipeline operations.

Usage:
    python cli/main.py --help

Sub-commands map to pipeline stages:
    fetch      → validate + fetch
    extract    → validate + fetch + extract
    summarize  → full pipeline
    serve      → HTTP API
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from oneline.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any working
# directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio

import typer

from oneline.config import configure_logging, settings
from oneline.errors import SummarizerError
from oneline.scraper import extract_main_text, fetch_html, validate_url

app = typer.Typer(
    name="oneline",
    help="Summarize a web page in one Japanese sentence.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    """Configure logging before any command runs."""
    configure_logging("DEBUG" if verbose else settings.log_level)


def _fail(exc: SummarizerError) -> None:
    typer.echo(f"[{exc.kind}] {exc.message}", err=True)
    raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Stage commands
# ---------------------------------------------------------------------------
@app.command("fetch")
def fetch(url: str = typer.Argument(..., help="URL to fetch.")) -> None:
    """Fetch a URL (following redirects) and print what came back."""
    try:
        result = asyncio.run(fetch_html(validate_url(url)))
    except SummarizerError as exc:
        _fail(exc)
        return

    typer.echo(f"[fetch] HTTP {result.http_status}")
    typer.echo(f"[fetch] Final URL : {result.final_url}")
    typer.echo(f"[fetch] Body      : {len(result.html)} chars")


@app.command("extract")
def extract(
    url: str = typer.Argument(..., help="URL to fetch and extract."),
    max_chars: int = typer.Option(0, "--max-chars", help="Truncate printed text (0 = all)."),
) -> None:
    """Fetch a URL and print its extracted main text."""
    try:
        result = asyncio.run(fetch_html(validate_url(url)))
        page = extract_main_text(result.html, result.final_url)
    except SummarizerError as exc:
        _fail(exc)
        return

    text = page.text[:max_chars] if max_chars > 0 else page.text
    typer.echo(f"[extract] Strategy : {page.strategy}")
    typer.echo(f"[extract] Title    : {page.title or '(none)'}")
    typer.echo(f"[extract] Length   : {len(page.text)} chars")
    typer.echo("")
    typer.echo(text)


# ---------------------------------------------------------------------------
# Full pipeline
# ---------------------------------------------------------------------------
@app.command("summarize")
def summarize(url: str = typer.Argument(..., help="URL to summarize.")) -> None:
    """Summarize a web page in one Japanese sentence (≤80 characters)."""
    from oneline.pipeline import summarize_url

    try:
        summary = summarize_url(url)
    except SummarizerError as exc:
        _fail(exc)
        return

    typer.echo(summary)


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8000, help="Bind port."),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("oneline.api.app:app", host=host, port=port)


if __name__ == "__main__":
    app()
