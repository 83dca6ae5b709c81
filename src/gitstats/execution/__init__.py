"""Sanitized git process execution."""

from gitstats.execution.executor import GitCommandExecutor, get_git_version, is_git_available
from gitstats.execution.sanitizer import (
    ALLOWED_COMMANDS,
    sanitize_command,
    validate_argument,
    validate_subcommand,
)

__all__ = [
    "ALLOWED_COMMANDS",
    "GitCommandExecutor",
    "get_git_version",
    "is_git_available",
    "sanitize_command",
    "validate_argument",
    "validate_subcommand",
]
