"""Data models for contributors and repository metadata."""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class Contributor(BaseModel):
    """A repository contributor as reported by shortlog, optionally enriched with activity."""

    name: str = Field(..., description="Contributor name")
    email: str = Field(..., description="Contributor email")
    total_commits: int = Field(0, ge=0, description="Number of commits")
    total_insertions: int = Field(0, ge=0, description="Lines added across all commits")
    total_deletions: int = Field(0, ge=0, description="Lines deleted across all commits")
    first_commit: Optional[date] = Field(None, description="Date of first commit")
    last_commit: Optional[date] = Field(None, description="Date of most recent commit")
    active_days: int = Field(0, ge=0, description="Number of distinct days with commits")
    commits_by_day: Dict[str, int] = Field(default_factory=dict, description="YYYY-MM-DD -> commit count")

    class Config:
        """Pydantic config."""
        json_schema_extra = {
            "example": {
                "name": "Jane Smith",
                "email": "jane@example.com",
                "total_commits": 42,
                "total_insertions": 1200,
                "total_deletions": 300,
                "first_commit": "2024-01-02",
                "last_commit": "2024-03-18",
                "active_days": 20,
                "commits_by_day": {"2024-01-02": 3},
            }
        }

    @property
    def activity_level(self) -> str:
        """Coarse activity bucket based on commit count."""
        if self.total_commits == 0:
            return "inactive"
        if self.total_commits < 10:
            return "low"
        if self.total_commits < 50:
            return "medium"
        if self.total_commits < 200:
            return "high"
        return "very_high"


class RepositoryInfo(BaseModel):
    """Summary metadata about a repository."""

    path: str = Field(..., description="Absolute repository path")
    name: str = Field(..., description="Repository directory name")
    total_commits: int = Field(0, description="Commits reachable from HEAD")
    first_commit: Optional[datetime] = Field(None, description="Author date of the root commit")
    last_commit: Optional[datetime] = Field(None, description="Author date of HEAD")
    branches: List[str] = Field(default_factory=list, description="Local and remote branch names")
