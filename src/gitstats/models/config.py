"""Configuration models."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_OUTPUT_SIZE = 100 * 1024 * 1024  # 100MB


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings are prefixed with GITSTATS_ (e.g., GITSTATS_DEFAULT_TIMEOUT).
    """

    model_config = SettingsConfigDict(
        env_prefix="GITSTATS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Execution
    git_binary: str = "git"
    default_timeout: float = DEFAULT_TIMEOUT_SECONDS
    max_output_size: int = DEFAULT_MAX_OUTPUT_SIZE

    # Logging
    log_level: str = "WARNING"


class ExecutorConfig(BaseModel):
    """Configuration for the git command executor."""

    working_directory: Optional[Path] = Field(None, description="Repository root to run commands in")
    default_timeout: float = Field(
        DEFAULT_TIMEOUT_SECONDS, gt=0, description="Deadline in seconds when the caller gives none"
    )
    max_output_size: int = Field(
        DEFAULT_MAX_OUTPUT_SIZE, gt=0, description="Maximum captured output in bytes"
    )
    git_binary: str = Field("git", description="Name or path of the git executable")

    class Config:
        """Pydantic config."""
        json_schema_extra = {
            "example": {
                "working_directory": "/path/to/repo",
                "default_timeout": 30.0,
                "max_output_size": 104857600,
                "git_binary": "git",
            }
        }

    @classmethod
    def from_settings(cls, settings: Settings, working_directory: Optional[Path] = None) -> "ExecutorConfig":
        """Build an executor config from environment settings."""
        return cls(
            working_directory=working_directory,
            default_timeout=settings.default_timeout,
            max_output_size=settings.max_output_size,
            git_binary=settings.git_binary,
        )
