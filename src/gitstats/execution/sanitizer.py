"""Validation of git subcommands and arguments before a process is spawned.

The subcommand allow-list is a security boundary: anything not listed is
rejected outright. Arguments are passed to git as an argv vector (never
through a shell), and are additionally screened for shell metacharacters and
control bytes.

The pipe character is deliberately accepted because it is the field
separator of the history query's ``--pretty=format:`` string.
"""

import re
from typing import Optional, Sequence

import structlog

from gitstats.exceptions import SanitizationError

logger = structlog.get_logger(__name__)

ALLOWED_COMMANDS = frozenset(
    {
        "log",
        "show",
        "rev-list",
        "shortlog",
        "branch",
        "status",
        "diff",
        "ls-files",
        "rev-parse",
        "config",
        "remote",
        "tag",
        "version",
        "init",
    }
)

DENIED_CHARACTERS = (";", "&", "`", "$", "(", ")", "<", ">", "\\")
MAX_ARGUMENT_BYTES = 4096

_COMMAND_PATTERN = re.compile(r"[a-zA-Z0-9_-]+")


def validate_subcommand(subcommand: str) -> None:
    """Check a subcommand's format and allow-list membership.

    Raises:
        SanitizationError: If the subcommand is empty, malformed, or not allowed
    """
    if not subcommand:
        raise SanitizationError("command cannot be empty", subcommand)
    if not _COMMAND_PATTERN.fullmatch(subcommand):
        raise SanitizationError(f"invalid command format: {subcommand!r}", subcommand)
    if subcommand not in ALLOWED_COMMANDS:
        raise SanitizationError(f"command not allowed: {subcommand}", subcommand)


def validate_argument(arg: str, subcommand: str = "", position: Optional[int] = None) -> None:
    """Check a single argument for control bytes, metacharacters, and length.

    Empty arguments are accepted.

    Raises:
        SanitizationError: If the argument is unsafe
    """
    if arg == "":
        return

    if "\x00" in arg:
        raise SanitizationError("argument contains null byte", subcommand, arg, position)

    for char in DENIED_CHARACTERS:
        if char in arg:
            raise SanitizationError(
                f"argument contains dangerous character {char!r}", subcommand, arg, position
            )

    size = len(arg.encode("utf-8"))
    if size > MAX_ARGUMENT_BYTES:
        raise SanitizationError(
            f"argument too long (max {MAX_ARGUMENT_BYTES} bytes): {size}", subcommand, arg, position
        )


def sanitize_command(subcommand: str, args: Sequence[str] = ()) -> None:
    """Validate a subcommand and all of its arguments.

    Args:
        subcommand: Git subcommand (e.g. ``log``)
        args: Arguments that will follow the subcommand

    Raises:
        SanitizationError: On the first rejected item
    """
    try:
        validate_subcommand(subcommand)
        for position, arg in enumerate(args):
            validate_argument(arg, subcommand, position)
    except SanitizationError as e:
        logger.warning(
            "command_rejected",
            subcommand=subcommand,
            position=e.position,
            reason=e.reason,
        )
        raise
