"""Parser for ``git diff --stat`` summaries.

Each file line looks like ``" src/main.go | 15 +++++++++------"``. The
number is the total count of changed lines; the bar only shows their
proportion, scaled to the terminal width. When the bar mixes ``+`` and ``-``
the insertion/deletion split is therefore an approximation::

    insertions = total * plus // (plus + minus)
    deletions  = total - insertions

The exact split cannot be recovered from this format; use numstat output
when precise counts matter.
"""

from typing import List, Optional

import structlog

from gitstats.models import CommitStats, FileChange, FileStatus

logger = structlog.get_logger(__name__)


def parse_diff_stat_line(line: str) -> Optional[FileChange]:
    """Parse a single ``path | N bar`` line, or return None if it is not one."""
    parts = line.split("|")
    if len(parts) != 2:
        return None

    path = parts[0].strip()
    fields = parts[1].split()
    if not path or not fields:
        logger.debug("line_skipped", reason="diffstat_missing_fields", line=line)
        return None

    try:
        total = int(fields[0])
    except ValueError:
        # e.g. "Bin 0 -> 1234 bytes"
        logger.debug("line_skipped", reason="diffstat_non_numeric", line=line)
        return None

    bar = fields[1] if len(fields) > 1 else ""
    plus = bar.count("+")
    minus = bar.count("-")

    if plus and not minus:
        insertions, deletions = total, 0
    elif minus and not plus:
        insertions, deletions = 0, total
    elif plus and minus:
        insertions = total * plus // (plus + minus)
        deletions = total - insertions
    else:
        insertions, deletions = 0, 0

    if plus and minus:
        status = FileStatus.MODIFIED
    else:
        status = FileStatus.from_counts(insertions, deletions)

    return FileChange(path=path, status=status, insertions=insertions, deletions=deletions)


def parse_diff_stat(output: str) -> CommitStats:
    """Convert diff-stat text into CommitStats; the trailing totals line is ignored.

    Args:
        output: Raw text from ``git diff --stat``

    Returns:
        CommitStats whose totals are the sums of the (approximated) file changes
    """
    files: List[FileChange] = []
    for raw in output.splitlines():
        line = raw.strip()
        if not line:
            continue
        change = parse_diff_stat_line(line)
        if change is not None:
            files.append(change)
    return CommitStats.from_files(files)
