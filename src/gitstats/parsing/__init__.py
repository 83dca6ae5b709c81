"""Parsers that turn git text output into typed records."""

from typing import List

from gitstats.models import Commit, CommitStats, Contributor
from gitstats.parsing.branches import parse_branches
from gitstats.parsing.commit_log import parse_commit_log
from gitstats.parsing.contributors import parse_contributor_activity, parse_contributors
from gitstats.parsing.diff_stat import parse_diff_stat


class GitOutputParser:
    """Stateless facade over the individual output parsers."""

    def parse_commit_log(self, output: str) -> List[Commit]:
        return parse_commit_log(output)

    def parse_diff_stat(self, output: str) -> CommitStats:
        return parse_diff_stat(output)

    def parse_contributors(self, output: str) -> List[Contributor]:
        return parse_contributors(output)

    def parse_contributor_activity(self, contributor: Contributor, output: str) -> Contributor:
        return parse_contributor_activity(contributor, output)

    def parse_branches(self, output: str) -> List[str]:
        return parse_branches(output)


__all__ = [
    "GitOutputParser",
    "parse_branches",
    "parse_commit_log",
    "parse_contributor_activity",
    "parse_contributors",
    "parse_diff_stat",
]
