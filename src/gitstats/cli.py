"""Command-line interface for gitstats."""

from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from gitstats.exceptions import GitStatsError
from gitstats.extraction import GitRepository
from gitstats.log_config import configure_logging
from gitstats.models import ExecutorConfig, Settings

app = typer.Typer(
    name="gitstats",
    help="Extract commits, contributors and branches from a Git repository",
    add_completion=False,
)
console = Console()


def _open_repository(repo_path: Path, log_level: Optional[str]) -> GitRepository:
    settings = Settings()
    configure_logging(log_level or settings.log_level)
    return GitRepository(repo_path, config=ExecutorConfig.from_settings(settings))


def _format_date(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "-"


@app.command()
def commits(
    repo_path: Path = typer.Argument(..., help="Path to Git repository"),
    since: Optional[datetime] = typer.Option(None, "--since", help="Only commits after this date", formats=["%Y-%m-%d"]),
    until: Optional[datetime] = typer.Option(None, "--until", help="Only commits before this date", formats=["%Y-%m-%d"]),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="Filter by author"),
    max_count: int = typer.Option(20, "--max", "-n", help="Maximum commits to show"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """List commits with line statistics."""
    try:
        repo = _open_repository(repo_path, log_level)
        history = repo.get_commits(since=since, until=until, author=author, max_count=max_count)

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Hash", style="cyan", width=10)
        table.add_column("Author", style="green")
        table.add_column("Date", style="blue")
        table.add_column("Message", style="white")
        table.add_column("Files", justify="right", style="yellow")
        table.add_column("+/-", justify="right")

        for commit in history:
            table.add_row(
                commit.short_hash,
                commit.author.name[:20],
                _format_date(commit.author_date),
                commit.message[:60],
                str(commit.stats.files_changed),
                f"[green]+{commit.stats.insertions}[/green] [red]-{commit.stats.deletions}[/red]",
            )

        console.print(table)

    except GitStatsError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def contributors(
    repo_path: Path = typer.Argument(..., help="Path to Git repository"),
    activity: bool = typer.Option(True, "--activity/--no-activity", help="Include line totals and active days"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """List contributors by commit count."""
    try:
        repo = _open_repository(repo_path, log_level)

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Name", style="green")
        table.add_column("Email", style="cyan")
        table.add_column("Commits", justify="right", style="yellow")
        if activity:
            table.add_column("+/-", justify="right")
            table.add_column("Active Days", justify="right")

        for contributor in repo.get_contributors(with_activity=activity):
            row = [contributor.name, contributor.email, str(contributor.total_commits)]
            if activity:
                row.append(f"+{contributor.total_insertions} -{contributor.total_deletions}")
                row.append(str(contributor.active_days))
            table.add_row(*row)

        console.print(table)

    except GitStatsError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def branches(
    repo_path: Path = typer.Argument(..., help="Path to Git repository"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """List local and remote branches."""
    try:
        repo = _open_repository(repo_path, log_level)
        for branch in repo.get_branches():
            console.print(f"  • {branch}")
    except GitStatsError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def diffstat(
    repo_path: Path = typer.Argument(..., help="Path to Git repository"),
    base: str = typer.Argument(..., help="Base revision"),
    target: Optional[str] = typer.Argument(None, help="Target revision (defaults to the working tree)"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Summarize changes between revisions (mixed-change splits are approximate)."""
    try:
        repo = _open_repository(repo_path, log_level)
        stats = repo.get_diff_stat(base, target)

        for change in stats.files:
            console.print(
                f"  [yellow]{change.status.value}[/yellow] {change.path} "
                f"[green]+{change.insertions}[/green] [red]-{change.deletions}[/red]"
            )
        console.print(
            f"\n[bold]{stats.files_changed} files changed[/bold], "
            f"{stats.insertions} insertions(+), {stats.deletions} deletions(-)"
        )
    except GitStatsError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def info(
    repo_path: Path = typer.Argument(..., help="Path to Git repository"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Show repository summary information."""
    try:
        repo = _open_repository(repo_path, log_level)
        details = repo.get_repository_info()

        console.print("\n[bold]Repository Information[/bold]")
        console.print(f"[cyan]Name:[/cyan] {details.name}")
        console.print(f"[cyan]Path:[/cyan] {details.path}")
        console.print(f"[cyan]Commits:[/cyan] {details.total_commits}")
        console.print(f"[cyan]First Commit:[/cyan] {_format_date(details.first_commit)}")
        console.print(f"[cyan]Last Commit:[/cyan] {_format_date(details.last_commit)}")
        console.print(f"[cyan]Branches:[/cyan] {', '.join(details.branches) or '-'}")
    except GitStatsError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
