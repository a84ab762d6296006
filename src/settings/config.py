from __future__ import annotations

import re
from pathlib import Path

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "cronstart.toml"

_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")

DEFAULT_SCAN_DIRS = ["pages", "app", "src/pages", "src/app"]


class CronStartConfig(BaseModel):
    """Configuration for scheduler wrapper generation and call rewriting."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    call_name: str = Field(
        default="cronStart",
        description="Identifier of the scheduling call to discover and rewrite",
    )
    call_module: str = Field(
        default="workflow-cron-start",
        description="Module the scheduling call must be imported from",
    )
    start_name: str = Field(
        default="start",
        description="Identifier of the task-start primitive",
    )
    start_module: str = Field(
        default="workflow/api",
        description="Module exporting the task-start primitive",
    )
    sleep_name: str = Field(
        default="cronSleep",
        description="Identifier of the cron-sleep primitive used by wrappers",
    )
    sleep_module: str = Field(
        default="workflow-cron-sleep",
        description="Module exporting the cron-sleep primitive",
    )
    scan_dirs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SCAN_DIRS),
        description="Directories (relative to the project root) to scan",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to exclude from scanning",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )

    @field_validator("call_name", "start_name", "sleep_name")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        if not _IDENTIFIER.match(v):
            msg = f"'{v}' is not a valid JavaScript identifier"
            raise ValueError(msg)
        return v

    @field_validator("call_module", "start_module", "sleep_module")
    @classmethod
    def validate_module(cls, v: str) -> str:
        if not v or any(ch in v for ch in "\"'\n"):
            msg = f"'{v}' is not a valid module specifier"
            raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path) -> CronStartConfig:
    """Load configuration from cronstart.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return CronStartConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return CronStartConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
