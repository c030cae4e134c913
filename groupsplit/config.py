"""Configuration loading for the groupsplit partitioner.

This module provides centralized configuration management:
- Load settings from environment variables, .env files and CLI flags
- Validate configuration using pydantic
- Provide typed access to all settings
- Convert settings into the immutable SplitConfig used by the core
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from groupsplit.core.models import DEFAULT_FILE_PATTERNS, SplitConfig, resolve_locations


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Environment variables use the ``GROUPSPLIT_`` prefix
    (``GROUPSPLIT_NUM_GROUPS=4``). Uses pydantic-settings for environment
    variable handling with .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_prefix="GROUPSPLIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Partitioning
    num_groups: int = Field(
        default=2,
        description="Number of groups to split into",
    )
    split_mode: Literal["tests", "files", "files_round_robin"] = Field(
        default="tests",
        description="Splitting strategy: dependency-aware tests, capacity-bounded files, or round-robin files",
    )

    # Inputs
    project_root: str = Field(
        default=".",
        description="Project root that test locations and node ids are relative to",
    )
    tests_from: str = Field(
        default="tests",
        description="Base path of the tests to split",
    )
    suites: str = Field(
        default="",
        description="Comma-separated suite directories under tests_from",
    )
    exclude_path: str = Field(
        default=".venv",
        description="Directory excluded from discovery",
    )
    file_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_FILE_PATTERNS),
        description="Filename patterns of test files; in tests mode only the .py patterns select modules",
    )

    # Output
    groups_to: str = Field(
        default="tests/_data/group_",
        description="Output path prefix for group files",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    @field_validator("num_groups")
    @classmethod
    def validate_num_groups(cls, v: int) -> int:
        """Ensure group count is positive."""
        if v <= 0:
            raise ValueError("num_groups must be positive")
        return v

    @field_validator("groups_to")
    @classmethod
    def validate_groups_to(cls, v: str) -> str:
        """Ensure the output pattern is not empty."""
        if not v.strip():
            raise ValueError("groups_to must not be empty")
        return v

    @field_validator("file_patterns")
    @classmethod
    def validate_file_patterns(cls, v: list[str]) -> list[str]:
        """Ensure at least one filename pattern is configured."""
        patterns = [pattern.strip() for pattern in v if pattern.strip()]
        if not patterns:
            raise ValueError("file_patterns must contain at least one pattern")
        return patterns

    def locations(self) -> tuple[str, ...]:
        """Input locations derived from tests_from and suites."""
        return resolve_locations(self.tests_from, self.suites)

    def to_split_config(self) -> SplitConfig:
        """Build the immutable configuration for one split run."""
        return SplitConfig(
            num_groups=self.num_groups,
            locations=self.locations(),
            project_root=Path(self.project_root),
            groups_to=self.groups_to,
            exclude_path=self.exclude_path,
            file_patterns=tuple(self.file_patterns),
        )


def load_settings(
    env_file: str | None = None,
    cli_args: list[str] | None = None,
) -> Settings:
    """Load application settings from environment and command line.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.
        cli_args: Optional command-line arguments (``--num_groups 4``).
                 Flags override environment values.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    kwargs = {}
    if env_file:
        kwargs["_env_file"] = env_file
    if cli_args is not None:
        kwargs["_cli_parse_args"] = cli_args
        kwargs["_cli_prog_name"] = "groupsplit"
    return Settings(**kwargs)  # type: ignore[arg-type]


__all__ = ["Settings", "load_settings"]
