"""
Git Command Executor

Runs git as an external process with a sanitized argv vector, a pinned
environment, a deadline, and a ceiling on captured output.

Each call owns its own process handle and output buffer, so one executor can
serve concurrent callers as long as they share the same working directory.
"""

import os
import shutil
import signal
import subprocess
import threading
import time
from pathlib import Path
from typing import IO, Dict, List, Optional, Sequence, Union

import structlog

from gitstats.exceptions import (
    CommandFailedError,
    CommandTimeoutError,
    InvalidRepositoryError,
    OutputTooLargeError,
)
from gitstats.execution.sanitizer import sanitize_command
from gitstats.models import CommandResult, ExecutorConfig

logger = structlog.get_logger(__name__)

# Pinned so that parsers can rely on a fixed date format and undecorated output
PINNED_ENVIRONMENT: Dict[str, str] = {
    "LC_ALL": "C",
    "LANG": "C",
    "TZ": "UTC",
    "GIT_PAGER": "",
    "PAGER": "cat",
    "GIT_EDITOR": ":",
    "GIT_ASKPASS": "echo",
    "GIT_TERMINAL_PROMPT": "0",
}

_READ_CHUNK_SIZE = 64 * 1024

# How long the reader may outlive a killed process before it is abandoned
_READER_GRACE = 1.0


class _BoundedOutput:
    """Collects a process stream up to ``limit`` bytes and discards the rest."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.size = 0
        self.overflowed = False
        self._chunks: List[bytes] = []

    def drain(self, stream: IO[bytes]) -> None:
        # Keep reading past the limit so the child never blocks on a full pipe
        try:
            for chunk in iter(lambda: stream.read(_READ_CHUNK_SIZE), b""):
                remaining = self.limit - self.size
                if len(chunk) > remaining:
                    self.overflowed = True
                    chunk = chunk[: max(remaining, 0)]
                if chunk:
                    self._chunks.append(chunk)
                    self.size += len(chunk)
        except (OSError, ValueError):
            # Stream closed by the owner after this reader was abandoned
            logger.debug("git_output_reader_closed", bytes_read=self.size)

    def text(self) -> str:
        return b"".join(self._chunks).decode("utf-8", errors="replace")


def _kill_process_group(proc: subprocess.Popen) -> None:
    """Kill the child and every helper it spawned into its session."""
    if hasattr(os, "killpg"):
        try:
            os.killpg(proc.pid, signal.SIGKILL)
            return
        except ProcessLookupError:
            pass
    proc.kill()


def _join_reader(reader: threading.Thread, proc: subprocess.Popen, deadline_at: float) -> bool:
    """Wait for the output reader to reach end of stream.

    A helper process can inherit the output pipe and hold it open after git
    exits. If the reader is still blocked once the deadline has passed, the
    whole process group is killed.

    Returns:
        True if the deadline had to be enforced here
    """
    reader.join(max(deadline_at - time.monotonic(), 0) + _READER_GRACE)
    if not reader.is_alive():
        return False

    _kill_process_group(proc)
    reader.join(_READER_GRACE)
    if reader.is_alive():
        logger.warning("git_output_reader_abandoned", pid=proc.pid)
    return True


class GitCommandExecutor:
    """Executes sanitized git commands in a validated repository directory.

    Example:
        >>> executor = GitCommandExecutor(ExecutorConfig(working_directory=Path("/path/to/repo")))
        >>> result = executor.execute("log", ["--oneline", "-5"])
        >>> print(result.output)
    """

    def __init__(self, config: Optional[ExecutorConfig] = None) -> None:
        """Initialize the executor.

        Args:
            config: Executor configuration (defaults apply when omitted)

        Raises:
            InvalidRepositoryError: If the configured working directory is not a repository root
        """
        self.config = config or ExecutorConfig()
        self.default_timeout = self.config.default_timeout
        self.max_output_size = self.config.max_output_size
        self.git_binary = self.config.git_binary
        self._working_directory: Optional[Path] = None

        if self.config.working_directory is not None:
            self.set_working_directory(self.config.working_directory)

    @property
    def working_directory(self) -> Optional[Path]:
        return self._working_directory

    def set_working_directory(self, path: Union[str, Path]) -> None:
        """Set the repository root that commands run in.

        Args:
            path: Repository root; resolved to an absolute path

        Raises:
            InvalidRepositoryError: If the path is empty, missing, or has no .git marker
        """
        if path is None or str(path) == "":
            raise InvalidRepositoryError("Working directory path cannot be empty")

        resolved = Path(path).expanduser().resolve()
        if not resolved.is_dir():
            raise InvalidRepositoryError(f"Directory does not exist: {resolved}")
        if not (resolved / ".git").exists():
            raise InvalidRepositoryError(f"Not a git repository: {resolved}")

        self._working_directory = resolved

    def build_environment(self) -> Dict[str, str]:
        """Environment for the child process: the parent's, with pinned overrides."""
        env = dict(os.environ)
        env.update(PINNED_ENVIRONMENT)
        return env

    def execute(
        self,
        command: str,
        args: Sequence[str] = (),
        timeout: Optional[float] = None,
    ) -> CommandResult:
        """Run ``git <command> <args...>`` and capture its combined output.

        Args:
            command: Git subcommand, checked against the allow-list
            args: Subcommand arguments
            timeout: Deadline in seconds (defaults to the configured timeout)

        Returns:
            CommandResult for a zero exit within limits

        Raises:
            SanitizationError: If the command or an argument is rejected; nothing is spawned
            InvalidRepositoryError: If no working directory has been set
            CommandTimeoutError: If the deadline expires; the process group is killed
            CommandFailedError: If git exits non-zero or cannot be started
            OutputTooLargeError: If output exceeds the ceiling; carries the truncated result
        """
        args = list(args)
        sanitize_command(command, args)

        if self._working_directory is None:
            raise InvalidRepositoryError("Working directory is not set; call set_working_directory first")

        deadline = self.default_timeout if timeout is None else timeout
        cmd = [self.git_binary, command] + args
        cwd = str(self._working_directory)

        logger.debug("git_command_started", command=command, args=args, cwd=cwd, timeout=deadline)

        buffer = _BoundedOutput(self.max_output_size)
        timed_out = False
        start = time.monotonic()

        try:
            # Own session so a kill reaches diff drivers and other helpers git starts
            proc = subprocess.Popen(
                cmd,
                cwd=cwd,
                env=self.build_environment(),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                bufsize=0,
                start_new_session=True,
            )
        except OSError as e:
            logger.error("git_command_spawn_failed", command=command, error=str(e))
            raise CommandFailedError(cmd, -1, str(e)) from e

        with proc:
            reader = threading.Thread(target=buffer.drain, args=(proc.stdout,), daemon=True)
            reader.start()
            try:
                exit_code = proc.wait(timeout=deadline)
            except subprocess.TimeoutExpired:
                timed_out = True
                _kill_process_group(proc)
                proc.wait()
                exit_code = -1
            except BaseException:
                _kill_process_group(proc)
                raise
            finally:
                if _join_reader(reader, proc, start + deadline):
                    timed_out = True

        duration = time.monotonic() - start
        output = buffer.text()

        if timed_out:
            result = CommandResult(output=output, error_text=output, exit_code=-1, duration=duration)
            logger.error("git_command_timeout", command=command, timeout=deadline)
            raise CommandTimeoutError(cmd, deadline, result)

        if exit_code != 0:
            result = CommandResult(output=output, error_text=output, exit_code=exit_code, duration=duration)
            logger.error("git_command_failed", command=command, exit_code=exit_code, stderr=output[:500])
            raise CommandFailedError(cmd, exit_code, output, result)

        result = CommandResult(output=output, exit_code=exit_code, duration=duration)

        if buffer.overflowed:
            logger.warning("git_command_output_too_large", command=command, limit=self.max_output_size)
            raise OutputTooLargeError(cmd, self.max_output_size, result)

        logger.debug(
            "git_command_completed",
            command=command,
            exit_code=exit_code,
            duration=round(duration, 4),
            output_bytes=buffer.size,
        )
        return result

    def execute_with_timeout(self, command: str, timeout: float, args: Sequence[str] = ()) -> CommandResult:
        """Run a git command with an explicit deadline in seconds."""
        return self.execute(command, args, timeout=timeout)


def is_git_available(binary: str = "git") -> bool:
    """Check whether the git binary can be found on PATH."""
    return shutil.which(binary) is not None


def get_git_version(binary: str = "git", timeout: float = 10.0) -> str:
    """Return the installed git version string (e.g. ``git version 2.43.0``).

    Raises:
        CommandFailedError: If git cannot be run or exits non-zero
    """
    cmd = [binary, "--version"]
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        raise CommandFailedError(cmd, e.returncode, e.stderr or "") from e
    except (OSError, subprocess.TimeoutExpired) as e:
        raise CommandFailedError(cmd, -1, str(e)) from e
    return result.stdout.strip()
