"""Exception hierarchy for git command execution."""

from typing import List, Optional

from gitstats.models.command import CommandResult


class GitStatsError(Exception):
    """Base exception for gitstats errors"""
    pass


class SanitizationError(GitStatsError, ValueError):
    """Raised when a subcommand or argument is rejected before execution"""

    def __init__(
        self,
        reason: str,
        subcommand: str,
        argument: Optional[str] = None,
        position: Optional[int] = None,
    ):
        self.reason = reason
        self.subcommand = subcommand
        self.argument = argument
        self.position = position
        if position is None:
            message = f"Command sanitization failed for {subcommand!r}: {reason}"
        else:
            message = (
                f"Command sanitization failed for {subcommand!r}: "
                f"invalid argument at position {position}: {reason}"
            )
        super().__init__(message)


class InvalidRepositoryError(GitStatsError, ValueError):
    """Raised when a working directory is not a usable git repository"""
    pass


class ExecutionError(GitStatsError):
    """Raised when a git process times out, fails, or produces too much output"""

    timeout = False
    too_large = False

    def __init__(
        self,
        message: str,
        command: List[str],
        exit_code: Optional[int] = None,
        stderr: str = "",
        result: Optional[CommandResult] = None,
    ):
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        self.result = result
        super().__init__(message)


class CommandTimeoutError(ExecutionError):
    """Raised when a git process exceeds its deadline and is killed"""

    timeout = True

    def __init__(self, command: List[str], timeout_seconds: float, result: Optional[CommandResult] = None):
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Command {' '.join(command)} timed out after {timeout_seconds}s",
            command,
            exit_code=result.exit_code if result else None,
            result=result,
        )


class CommandFailedError(ExecutionError):
    """Raised when a git process exits non-zero or cannot be started"""

    def __init__(self, command: List[str], exit_code: int, stderr: str, result: Optional[CommandResult] = None):
        super().__init__(
            f"Command {' '.join(command)} failed with code {exit_code}: {stderr.strip()}",
            command,
            exit_code=exit_code,
            stderr=stderr,
            result=result,
        )


class OutputTooLargeError(ExecutionError):
    """Raised when command output exceeds the configured ceiling.

    ``result`` holds the output truncated at the ceiling so the caller can
    decide whether to retry with a narrower query.
    """

    too_large = True

    def __init__(self, command: List[str], limit: int, result: CommandResult):
        self.limit = limit
        super().__init__(
            f"Command output exceeds maximum size limit ({limit} bytes)",
            command,
            exit_code=result.exit_code,
            result=result,
        )
