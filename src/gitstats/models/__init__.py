"""Data models for Git history records."""

from gitstats.models.command import CommandResult
from gitstats.models.commit import Author, Commit, CommitStats, FileChange, FileStatus
from gitstats.models.config import ExecutorConfig, Settings
from gitstats.models.contributor import Contributor, RepositoryInfo

__all__ = [
    "Author",
    "CommandResult",
    "Commit",
    "CommitStats",
    "Contributor",
    "ExecutorConfig",
    "FileChange",
    "FileStatus",
    "RepositoryInfo",
    "Settings",
]
