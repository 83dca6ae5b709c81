"""Parsers for contributor summaries and per-contributor activity."""

import re
from datetime import date, datetime
from typing import Dict, List, Optional

import structlog

from gitstats.models import Contributor

logger = structlog.get_logger(__name__)

# "    42\tJohn Doe <john@example.com>"
CONTRIBUTOR_PATTERN = re.compile(r"^\s*(\d+)\s+(.+?)\s+<([^<>]*)>\s*$")


def parse_contributors(output: str) -> List[Contributor]:
    """Parse ``shortlog -sne`` output into contributors; non-matching lines are skipped."""
    contributors: List[Contributor] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        match = CONTRIBUTOR_PATTERN.match(line)
        if not match:
            logger.debug("line_skipped", reason="contributor_no_match", line=line)
            continue
        count, name, email = match.groups()
        contributors.append(Contributor(name=name, email=email, total_commits=int(count)))
    return contributors


def _parse_day(value: str) -> Optional[date]:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def _parse_count(value: str) -> int:
    value = value.strip()
    return int(value) if value.isdigit() else 0


def parse_contributor_activity(contributor: Contributor, output: str) -> Contributor:
    """Enrich a contributor from ``log --pretty=format:%ad|%H --date=short --numstat`` output.

    Header lines (``date|hash``) count a commit on that day; numstat lines add
    to the line totals, with binary markers counting as zero. Results
    accumulate onto the values the contributor already carries.

    Returns:
        Updated copy of ``contributor``
    """
    commits_by_day: Dict[str, int] = dict(contributor.commits_by_day)
    first = contributor.first_commit
    last = contributor.last_commit
    insertions = contributor.total_insertions
    deletions = contributor.total_deletions

    for raw in output.splitlines():
        line = raw.strip()
        if not line:
            continue

        if line.count("|") == 1 and "\t" not in line:
            day = _parse_day(line.split("|")[0])
            if day is None:
                logger.debug("line_skipped", reason="activity_bad_date", line=line)
                continue
            key = day.isoformat()
            commits_by_day[key] = commits_by_day.get(key, 0) + 1
            if first is None or day < first:
                first = day
            if last is None or day > last:
                last = day
            continue

        parts = line.split("\t", 2)
        if len(parts) < 3:
            logger.debug("line_skipped", reason="activity_unrecognised", line=line)
            continue
        insertions += _parse_count(parts[0])
        deletions += _parse_count(parts[1])

    return contributor.model_copy(
        update={
            "commits_by_day": commits_by_day,
            "first_commit": first,
            "last_commit": last,
            "total_insertions": insertions,
            "total_deletions": deletions,
            "active_days": len(commits_by_day),
        }
    )
