"""Unit tests for repository-level history queries."""

import tempfile
from datetime import date
from pathlib import Path
from unittest.mock import MagicMock

import git
import pytest

from gitstats.exceptions import CommandFailedError, InvalidRepositoryError
from gitstats.execution import GitCommandExecutor
from gitstats.extraction import GitRepository
from gitstats.models import CommandResult, ExecutorConfig, FileStatus


@pytest.fixture
def test_repo():
    """Create a temporary Git repository for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        repo_path = Path(tmpdir)
        repo = git.Repo.init(repo_path)

        # Configure git
        repo.config_writer().set_value("user", "name", "Test User").release()
        repo.config_writer().set_value("user", "email", "test@example.com").release()

        # Create initial commit
        (repo_path / "README.md").write_text("# Test Project\n")
        repo.index.add(["README.md"])
        repo.index.commit("Initial commit")

        # Create second commit
        (repo_path / "main.py").write_text("def hello():\n    print('Hello, World!')\n")
        repo.index.add(["main.py"])
        repo.index.commit("Add main.py")

        # Create third commit
        (repo_path / "main.py").write_text("def hello():\n    print('Hello, GitStats!')\n")
        repo.index.add(["main.py"])
        repo.index.commit("Fix: Update hello message")

        repo.create_head("feature")

        yield repo_path


@pytest.fixture
def empty_repo():
    """Create a repository with no commits."""
    with tempfile.TemporaryDirectory() as tmpdir:
        git.Repo.init(tmpdir)
        yield Path(tmpdir)


@pytest.fixture
def mock_executor():
    """Create a mock executor that returns empty output."""
    executor = MagicMock(spec=GitCommandExecutor)
    executor.working_directory = Path("/repo")
    executor.execute.return_value = CommandResult(output="")
    return executor


def test_repository_initialization(test_repo):
    """Test GitRepository initialization."""
    repo = GitRepository(test_repo)

    assert repo.path == test_repo.resolve()
    assert repo.is_valid_repository()


def test_repository_invalid_path():
    """Test GitRepository with invalid repository path."""
    with pytest.raises(InvalidRepositoryError, match="does not exist"):
        GitRepository(Path("/nonexistent/path"))


def test_repository_not_a_git_directory():
    """Test GitRepository with a plain directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(InvalidRepositoryError, match="Not a git repository"):
            GitRepository(tmpdir)


def test_get_commits(test_repo):
    """Test extracting all commits with statistics."""
    repo = GitRepository(test_repo)

    commits = repo.get_commits()

    assert [c.message for c in commits] == ["Fix: Update hello message", "Add main.py", "Initial commit"]
    latest, added, initial = commits

    assert latest.author.name == "Test User"
    assert latest.author.email == "test@example.com"
    assert latest.author_date is not None
    assert latest.committer_date is not None
    assert len(latest.hash) == 40
    assert latest.parent_hashes == [added.hash]
    assert latest.tree_hash

    assert latest.stats.files_changed == 1
    assert latest.stats.files[0].path == "main.py"
    assert latest.stats.insertions == 1
    assert latest.stats.deletions == 1
    assert latest.stats.files[0].status is FileStatus.MODIFIED

    assert added.stats.files[0].status is FileStatus.ADDED
    assert added.stats.insertions == 2

    assert initial.is_root
    assert initial.stats.files[0].path == "README.md"


def test_get_commits_with_max_count(test_repo):
    """Test extracting commits with max count limit."""
    repo = GitRepository(test_repo)

    commits = repo.get_commits(max_count=2)

    assert len(commits) == 2


def test_get_commits_author_filter(test_repo):
    """Test author filtering excludes non-matching commits."""
    repo = GitRepository(test_repo)

    assert len(repo.get_commits(author="test@example.com")) == 3
    assert repo.get_commits(author="nobody@example.com") == []


def test_get_commits_builds_arguments(mock_executor):
    """Test query filters are translated into log arguments."""
    repo = GitRepository("/repo", executor=mock_executor)

    repo.get_commits(since=date(2024, 1, 1), until=date(2024, 2, 1), author="jane", max_count=5)

    command, args = mock_executor.execute.call_args[0]
    assert command == "log"
    assert args[0].startswith("--pretty=format:%H|%an|%ae|%ad")
    assert "--numstat" in args
    assert "--date=iso" in args
    assert "--all" in args
    assert "--since=2024-01-01" in args
    assert "--until=2024-02-01" in args
    assert "--author=jane" in args
    assert "--max-count=5" in args


def test_execution_errors_propagate(mock_executor):
    """Test executor failures surface unchanged from queries."""
    def fail_log(command, args=(), timeout=None):
        if command == "log":
            raise CommandFailedError(["git", "log"], 128, "fatal: bad revision")
        return CommandResult(output="")

    mock_executor.execute.side_effect = fail_log
    repo = GitRepository("/repo", executor=mock_executor)

    with pytest.raises(CommandFailedError):
        repo.get_commits()


def test_invalid_repository_check_fails(mock_executor):
    """Test construction fails when git rejects the directory."""
    mock_executor.execute.side_effect = CommandFailedError(["git", "rev-parse"], 128, "fatal: not a git repository")

    with pytest.raises(InvalidRepositoryError):
        GitRepository("/repo", executor=mock_executor)


def test_get_diff_stat(test_repo):
    """Test diff-stat between two revisions."""
    repo = GitRepository(test_repo)

    stats = repo.get_diff_stat("HEAD~2", "HEAD")

    assert stats.files_changed == 1
    assert stats.files[0].path == "main.py"
    assert stats.insertions == 2
    assert stats.deletions == 0
    assert stats.files[0].status is FileStatus.ADDED


def test_get_contributors(test_repo):
    """Test contributors with activity enrichment."""
    repo = GitRepository(test_repo)

    contributors = repo.get_contributors()

    assert len(contributors) == 1
    contributor = contributors[0]
    assert contributor.name == "Test User"
    assert contributor.email == "test@example.com"
    assert contributor.total_commits == 3
    assert contributor.active_days >= 1
    assert contributor.first_commit is not None
    assert contributor.total_insertions == 4
    assert contributor.total_deletions == 1


def test_get_contributors_without_activity(test_repo):
    """Test contributors without the per-contributor log queries."""
    repo = GitRepository(test_repo)

    contributors = repo.get_contributors(with_activity=False)

    assert contributors[0].total_commits == 3
    assert contributors[0].active_days == 0


def test_get_branches(test_repo):
    """Test listing branches."""
    repo = GitRepository(test_repo)

    branches = repo.get_branches()

    assert "feature" in branches
    assert len(branches) == 2


def test_get_repository_info(test_repo):
    """Test repository summary metadata."""
    repo = GitRepository(test_repo)

    info = repo.get_repository_info()

    assert info.name == test_repo.resolve().name
    assert info.total_commits == 3
    assert info.first_commit is not None
    assert info.last_commit is not None
    assert info.first_commit <= info.last_commit
    assert "feature" in info.branches


def test_get_repository_info_empty(empty_repo):
    """Test an empty repository reports zero commits."""
    repo = GitRepository(empty_repo)

    info = repo.get_repository_info()

    assert info.total_commits == 0
    assert info.first_commit is None
    assert info.branches == []


def test_get_repository_info_ignores_warning_lines(mock_executor):
    """Test the commit count is read from the last line when git also warns."""
    def respond(command, args=(), timeout=None):
        if command == "rev-list" and args[0] == "--count":
            return CommandResult(output="warning: ignoring broken ref refs/heads/old\n3\n")
        if command == "rev-list":
            return CommandResult(output="a" * 40 + "\n")
        if command == "show":
            return CommandResult(output="2024-01-15 10:30:00 +0000")
        if command == "branch":
            return CommandResult(output="* main\n")
        return CommandResult(output="")

    mock_executor.execute.side_effect = respond
    repo = GitRepository("/repo", executor=mock_executor)

    info = repo.get_repository_info()

    assert info.total_commits == 3
    assert info.first_commit is not None
    assert info.branches == ["main"]


def test_get_repository_info_unparsable_count(mock_executor):
    """Test an unreadable commit count leaves the total at zero."""
    def respond(command, args=(), timeout=None):
        if command == "rev-list" and args[0] == "--count":
            return CommandResult(output="not a number\n")
        return CommandResult(output="")

    mock_executor.execute.side_effect = respond
    repo = GitRepository("/repo", executor=mock_executor)

    info = repo.get_repository_info()

    assert info.total_commits == 0
    assert info.last_commit is None


def test_repository_uses_executor_config(test_repo):
    """Test executor limits are taken from the given config."""
    repo = GitRepository(test_repo, config=ExecutorConfig(default_timeout=5.0, max_output_size=4096))

    assert repo.executor.default_timeout == 5.0
    assert repo.executor.max_output_size == 4096
