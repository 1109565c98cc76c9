"""Command-line interface for the one-line summarizer."""
