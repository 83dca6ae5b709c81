"""Git history extraction: sanitized command execution and output parsing."""

__version__ = "0.1.0"
