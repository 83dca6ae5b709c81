"""Result of a single git process invocation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CommandResult:
    """Captured outcome of one git command.

    Attributes:
        output: Combined stdout and stderr text
        error_text: Output text when the command failed, otherwise empty
        exit_code: Process exit code (-1 when the process was killed)
        duration: Wall-clock execution time in seconds
    """
    output: str
    error_text: str = ""
    exit_code: int = 0
    duration: float = 0.0
