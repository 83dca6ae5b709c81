"""Git repository history queries."""

from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Union

import structlog

from gitstats.exceptions import ExecutionError, InvalidRepositoryError
from gitstats.execution import GitCommandExecutor
from gitstats.models import Commit, CommitStats, Contributor, ExecutorConfig, RepositoryInfo
from gitstats.parsing import GitOutputParser
from gitstats.parsing.commit_log import parse_git_date

logger = structlog.get_logger(__name__)

COMMIT_LOG_FORMAT = "--pretty=format:%H|%an|%ae|%ad|%cn|%ce|%cd|%s|%P|%T"
ACTIVITY_LOG_FORMAT = "--pretty=format:%ad|%H"


def _last_count(output: str) -> Optional[int]:
    """Integer on the last non-empty line; warnings git prints to stderr come earlier."""
    lines = [line.strip() for line in output.splitlines() if line.strip()]
    if not lines or not lines[-1].isdigit():
        return None
    return int(lines[-1])


def _date_arg(value: Union[date, datetime]) -> str:
    return value.strftime("%Y-%m-%d")


class GitRepository:
    """Runs history queries against a Git repository and returns typed records."""

    def __init__(
        self,
        repo_path: Union[str, Path],
        executor: Optional[GitCommandExecutor] = None,
        parser: Optional[GitOutputParser] = None,
        config: Optional[ExecutorConfig] = None,
    ) -> None:
        """Initialize the repository.

        Args:
            repo_path: Path to the repository root
            executor: Pre-configured executor (one is created from ``config`` otherwise)
            parser: Output parser (defaults to GitOutputParser)
            config: Executor configuration used when no executor is given

        Raises:
            InvalidRepositoryError: If the path is not a valid Git repository
        """
        if repo_path is None or str(repo_path) == "":
            raise InvalidRepositoryError("Repository path cannot be empty")

        if executor is None:
            base = config or ExecutorConfig()
            executor = GitCommandExecutor(base.model_copy(update={"working_directory": Path(repo_path)}))
        elif executor.working_directory is None:
            executor.set_working_directory(repo_path)

        self.executor = executor
        self.parser = parser or GitOutputParser()
        self.path = executor.working_directory

        if not self.is_valid_repository():
            raise InvalidRepositoryError(f"Invalid Git repository: {repo_path}")

    def is_valid_repository(self) -> bool:
        """Check that git recognises the working directory as a repository."""
        try:
            self.executor.execute("rev-parse", ["--git-dir"])
        except ExecutionError:
            return False
        return True

    def get_commits(
        self,
        since: Optional[Union[date, datetime]] = None,
        until: Optional[Union[date, datetime]] = None,
        author: Optional[str] = None,
        max_count: Optional[int] = None,
        all_refs: bool = True,
    ) -> List[Commit]:
        """Extract commits with per-file statistics.

        Args:
            since: Only commits after this date
            until: Only commits before this date
            author: Only commits whose author matches this pattern
            max_count: Maximum number of commits to extract
            all_refs: Walk all refs instead of only HEAD

        Returns:
            Commits in the order git reports them (newest first)
        """
        args = [COMMIT_LOG_FORMAT, "--date=iso", "--numstat"]
        if all_refs:
            args.append("--all")
        if since:
            args.append(f"--since={_date_arg(since)}")
        if until:
            args.append(f"--until={_date_arg(until)}")
        if author:
            args.append(f"--author={author}")
        if max_count:
            args.append(f"--max-count={max_count}")

        result = self.executor.execute("log", args)
        commits = self.parser.parse_commit_log(result.output)
        logger.info("commits_extracted", count=len(commits), repo=str(self.path))
        return commits

    def get_diff_stat(self, base: str, target: Optional[str] = None) -> CommitStats:
        """Summarize changes between two revisions from ``git diff --stat``.

        Insertion/deletion splits for files with mixed changes are approximate.
        """
        args = ["--stat", base]
        if target:
            args.append(target)
        result = self.executor.execute("diff", args)
        return self.parser.parse_diff_stat(result.output)

    def get_contributors(self, with_activity: bool = True) -> List[Contributor]:
        """List contributors by commit count, optionally enriched with activity data."""
        result = self.executor.execute("shortlog", ["-sne", "--all"])
        contributors = self.parser.parse_contributors(result.output)

        if with_activity:
            contributors = [self._with_activity(c) for c in contributors]

        logger.info("contributors_extracted", count=len(contributors), repo=str(self.path))
        return contributors

    def _with_activity(self, contributor: Contributor) -> Contributor:
        args = [
            ACTIVITY_LOG_FORMAT,
            "--date=short",
            "--numstat",
            f"--author={contributor.email}",
            "--all",
        ]
        result = self.executor.execute("log", args)
        return self.parser.parse_contributor_activity(contributor, result.output)

    def get_branches(self) -> List[str]:
        """List local and remote branch names."""
        result = self.executor.execute("branch", ["-a"])
        return self.parser.parse_branches(result.output)

    def get_repository_info(self) -> RepositoryInfo:
        """Collect summary metadata about the repository.

        An empty repository (no HEAD) reports zero commits and no dates.
        """
        info = RepositoryInfo(path=str(self.path), name=self.path.name)

        try:
            result = self.executor.execute("rev-list", ["--count", "HEAD"])
        except ExecutionError:
            logger.info("repository_has_no_head", repo=str(self.path))
            info.branches = self.get_branches()
            return info

        total = _last_count(result.output)
        if total is None:
            logger.warning("commit_count_unparsable", repo=str(self.path), output=result.output[:200])
        else:
            info.total_commits = total

        roots = self.executor.execute("rev-list", ["--max-parents=0", "HEAD"]).output.split()
        if roots:
            info.first_commit = self._author_date(roots[-1])
        info.last_commit = self._author_date("HEAD")
        info.branches = self.get_branches()
        return info

    def _author_date(self, revision: str) -> Optional[datetime]:
        result = self.executor.execute("show", ["-s", "--pretty=format:%ad", "--date=iso", revision])
        return parse_git_date(result.output)
