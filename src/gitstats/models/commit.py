"""Data models for Git commit information."""

from datetime import datetime
from enum import Enum
from pathlib import PurePosixPath
from typing import List, Optional

from pydantic import BaseModel, Field


class FileStatus(str, Enum):
    """Change status of a file, derived from its line counts."""

    ADDED = "A"
    MODIFIED = "M"
    DELETED = "D"

    @classmethod
    def from_counts(cls, insertions: int, deletions: int) -> "FileStatus":
        """Derive a status from insertion/deletion counts.

        Only insertions means the file was added, only deletions means it was
        deleted, anything else (including binary 0/0) is a modification.
        Renames and copies are not detected.
        """
        if insertions > 0 and deletions == 0:
            return cls.ADDED
        if insertions == 0 and deletions > 0:
            return cls.DELETED
        return cls.MODIFIED


class Author(BaseModel):
    """Commit author or committer identity."""

    name: str = Field(..., description="Author name")
    email: str = Field(..., description="Author email")

    class Config:
        """Pydantic config."""
        frozen = True


class FileChange(BaseModel):
    """Line-level changes to a single file in a commit."""

    path: str = Field(..., description="Path to the file")
    status: FileStatus = Field(FileStatus.MODIFIED, description="Derived change status")
    insertions: int = Field(0, ge=0, description="Number of lines added")
    deletions: int = Field(0, ge=0, description="Number of lines deleted")

    @property
    def is_added(self) -> bool:
        return self.status is FileStatus.ADDED

    @property
    def is_modified(self) -> bool:
        return self.status is FileStatus.MODIFIED

    @property
    def is_deleted(self) -> bool:
        return self.status is FileStatus.DELETED


class CommitStats(BaseModel):
    """Statistics for a commit (files and lines changed)."""

    files_changed: int = Field(0, description="Number of files changed")
    insertions: int = Field(0, description="Number of lines added")
    deletions: int = Field(0, description="Number of lines deleted")
    files: List[FileChange] = Field(default_factory=list, description="Per-file changes")

    @classmethod
    def from_files(cls, files: List[FileChange]) -> "CommitStats":
        """Build stats whose totals are the sums over ``files``."""
        return cls(
            files_changed=len(files),
            insertions=sum(f.insertions for f in files),
            deletions=sum(f.deletions for f in files),
            files=list(files),
        )


class Commit(BaseModel):
    """Represents a single Git commit parsed from history output."""

    hash: str = Field(..., min_length=1, description="Full commit SHA hash")
    message: str = Field("", description="Commit subject line")
    author: Author = Field(..., description="Commit author")
    committer: Author = Field(..., description="Commit committer")
    author_date: Optional[datetime] = Field(None, description="Author timestamp (None if unparsable)")
    committer_date: Optional[datetime] = Field(None, description="Committer timestamp (None if unparsable)")
    parent_hashes: List[str] = Field(default_factory=list, description="Parent commit hashes")
    tree_hash: str = Field("", description="Tree object hash")
    stats: CommitStats = Field(default_factory=CommitStats, description="Change statistics")

    class Config:
        """Pydantic config."""
        json_schema_extra = {
            "example": {
                "hash": "abc123def456",
                "message": "Fix authentication bug",
                "author": {"name": "John Doe", "email": "john@example.com"},
                "committer": {"name": "John Doe", "email": "john@example.com"},
                "author_date": "2024-01-15T10:30:00+00:00",
                "committer_date": "2024-01-15T10:30:00+00:00",
                "parent_hashes": ["parent123"],
                "tree_hash": "tree456",
                "stats": {
                    "files_changed": 1,
                    "insertions": 3,
                    "deletions": 1,
                    "files": [{"path": "src/auth.py", "status": "M", "insertions": 3, "deletions": 1}],
                },
            }
        }

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    @property
    def is_merge(self) -> bool:
        return len(self.parent_hashes) > 1

    @property
    def is_root(self) -> bool:
        return not self.parent_hashes

    @property
    def is_empty(self) -> bool:
        """True when the commit touched no files and no lines."""
        return (
            self.stats.files_changed == 0
            and self.stats.insertions == 0
            and self.stats.deletions == 0
        )

    def file_extensions(self) -> List[str]:
        """Unique file extensions (without the dot) touched by this commit, in first-seen order."""
        seen: List[str] = []
        for change in self.stats.files:
            suffix = PurePosixPath(change.path).suffix
            if suffix and suffix[1:] not in seen:
                seen.append(suffix[1:])
        return seen
