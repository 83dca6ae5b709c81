"""Parser for history output in the ``header + numstat`` layout.

The input interleaves one header line per commit::

    hash|authorName|authorEmail|authorDate|committerName|committerEmail|committerDate|message|parents|tree

with zero or more numstat lines (``insertions<TAB>deletions<TAB>path``)
belonging to that commit. There is no explicit terminator between commits, so
commit boundaries are inferred from header lines and a one-line lookahead
after blank lines.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

import structlog

from gitstats.models import Author, Commit, CommitStats, FileChange, FileStatus

logger = structlog.get_logger(__name__)

FIELD_SEPARATOR = "|"
HEADER_MIN_SEPARATORS = 7
HEADER_FULL_FIELDS = 10
DATE_FORMAT = "%Y-%m-%d %H:%M:%S %z"
BINARY_MARKER = "-"


class _State(Enum):
    AWAITING_HEADER = "awaiting_header"
    IN_COMMIT_BODY = "in_commit_body"


def is_header_line(line: str) -> bool:
    return line.count(FIELD_SEPARATOR) >= HEADER_MIN_SEPARATORS


def is_numstat_line(line: str) -> bool:
    return bool(line) and "\t" in line


def parse_git_date(value: str) -> Optional[datetime]:
    """Parse ``YYYY-MM-DD HH:MM:SS +ZZZZ``; returns None when unparsable."""
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT)
    except ValueError:
        return None


def _split_header(line: str) -> Optional[List[str]]:
    parts = line.split(FIELD_SEPARATOR)
    if len(parts) < 8:
        return None
    if len(parts) > HEADER_FULL_FIELDS:
        # The subject itself contained the separator
        message = FIELD_SEPARATOR.join(parts[7:-2])
        parts = parts[:7] + [message] + parts[-2:]
    return parts


def parse_header(line: str) -> Optional[Commit]:
    """Build a Commit (without stats) from a header line, or None if malformed."""
    parts = _split_header(line)
    if parts is None:
        logger.debug("line_skipped", reason="header_too_few_fields", line=line)
        return None

    commit_hash = parts[0].strip()
    if not commit_hash:
        logger.debug("line_skipped", reason="header_empty_hash", line=line)
        return None

    parents = parts[8].split() if len(parts) > 8 else []
    tree = parts[9].strip() if len(parts) > 9 else ""

    author_date = parse_git_date(parts[3])
    committer_date = parse_git_date(parts[6])
    if author_date is None or committer_date is None:
        logger.debug("unparsable_commit_date", hash=commit_hash, author_date=parts[3], committer_date=parts[6])

    return Commit(
        hash=commit_hash,
        author=Author(name=parts[1], email=parts[2]),
        author_date=author_date,
        committer=Author(name=parts[4], email=parts[5]),
        committer_date=committer_date,
        message=parts[7],
        parent_hashes=parents,
        tree_hash=tree,
    )


def _parse_count(value: str) -> Optional[int]:
    value = value.strip()
    if value == BINARY_MARKER:
        return 0
    try:
        count = int(value)
    except ValueError:
        return None
    return count if count >= 0 else None


def parse_numstat_line(line: str) -> Optional[FileChange]:
    """Parse ``insertions<TAB>deletions<TAB>path``; ``-`` (binary) counts as 0."""
    parts = line.split("\t", 2)
    if len(parts) < 3:
        logger.debug("line_skipped", reason="numstat_too_few_fields", line=line)
        return None

    insertions = _parse_count(parts[0])
    deletions = _parse_count(parts[1])
    if insertions is None or deletions is None:
        logger.debug("line_skipped", reason="numstat_bad_count", line=line)
        return None

    return FileChange(
        path=parts[2],
        status=FileStatus.from_counts(insertions, deletions),
        insertions=insertions,
        deletions=deletions,
    )


class _CommitBuilder:
    """Accumulates file changes for the commit under construction."""

    def __init__(self, header: Commit) -> None:
        self.header = header
        self.files: List[FileChange] = []

    def build(self) -> Commit:
        return self.header.model_copy(update={"stats": CommitStats.from_files(self.files)})


def _next_non_blank(lines: List[str], start: int) -> Tuple[int, Optional[str]]:
    for index in range(start, len(lines)):
        candidate = lines[index].strip()
        if candidate:
            return index, candidate
    return len(lines), None


def parse_commit_log(output: str) -> List[Commit]:
    """Convert raw history output into commits, in input order.

    Malformed lines are skipped; empty input yields an empty list.

    Args:
        output: Raw text from ``git log --pretty=format:... --numstat``

    Returns:
        List of Commit objects
    """
    commits: List[Commit] = []
    if not output or not output.strip():
        return commits

    lines = output.split("\n")
    state = _State.AWAITING_HEADER
    current: Optional[_CommitBuilder] = None

    def flush() -> None:
        nonlocal current, state
        if current is not None:
            commits.append(current.build())
        current = None
        state = _State.AWAITING_HEADER

    for index, raw in enumerate(lines):
        line = raw.strip()

        if is_header_line(line):
            flush()
            header = parse_header(line)
            if header is not None:
                current = _CommitBuilder(header)
                state = _State.IN_COMMIT_BODY
            continue

        if state is _State.AWAITING_HEADER:
            if line:
                logger.debug("line_skipped", reason="outside_commit", line=line)
            continue

        if not line:
            _, upcoming = _next_non_blank(lines, index + 1)
            if upcoming is not None and is_numstat_line(upcoming) and not is_header_line(upcoming):
                continue
            # Next record is a header, something unrecognised, or end of input
            flush()
            continue

        if is_numstat_line(line):
            change = parse_numstat_line(line)
            if change is not None:
                current.files.append(change)
            continue

        logger.debug("line_skipped", reason="unrecognised_body_line", line=line)

    flush()
    logger.debug("commit_log_parsed", commits=len(commits), lines=len(lines))
    return commits
