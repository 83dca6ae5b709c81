"""Repository-level history extraction."""

from gitstats.extraction.repository import GitRepository

__all__ = ["GitRepository"]
