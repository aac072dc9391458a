from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from errors import FatalError

CONFIG_FILENAME = "batchstats.toml"

DEFAULT_ANALYZER_BINARY = "./target/release/entrota"

DEFAULT_EXCLUDE_DIRS = (
    "node_modules",
    ".git",
    "dist",
    "build",
    "__tests__",
    "test",
)

Variant = Literal["complexity", "quality"]


class DiscoveryConfig(BaseModel):
    """Which files under the target directory are analyzed."""

    model_config = ConfigDict(extra="forbid")

    extension: str = Field(default=".ts", description="Source file suffix")
    declaration_suffix: str = Field(
        default=".d.ts",
        description="Declaration-only suffix excluded even when it ends in extension",
    )
    exclude_dirs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS),
        description="Directory names skipped at any depth (exact match)",
    )
    respect_gitignore: bool = Field(
        default=False,
        description="Also skip files matched by the root .gitignore",
    )

    @field_validator("extension", "declaration_suffix")
    @classmethod
    def validate_suffix(cls, v: str) -> str:
        if not v.startswith("."):
            msg = f"suffix must start with '.', got {v!r}"
            raise ValueError(msg)
        return v


class AnalyzerConfig(BaseModel):
    """How the external analyzer is invoked."""

    model_config = ConfigDict(extra="forbid")

    binary: str = Field(
        default=DEFAULT_ANALYZER_BINARY,
        description="Path to the analyzer executable",
    )
    max_output_bytes: int = Field(
        default=10 * 1024 * 1024,
        gt=0,
        description="Ceiling on captured analyzer output per file",
    )
    timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Wall-clock limit per analyzer invocation (unset = none)",
    )


class StatisticsConfig(BaseModel):
    """Which metric variant is aggregated and how results are ranked."""

    model_config = ConfigDict(extra="forbid")

    variant: Variant = Field(default="complexity")
    top_files: int = Field(default=10, ge=0)
    top_symbols: int = Field(default=20, ge=0)
    buckets: int = Field(default=5, ge=1)
    complexity_threshold: float | None = Field(
        default=None,
        description="Complexity above this counts as an issue (unset = never)",
    )


class BatchStatsConfig(BaseModel):
    """Configuration for a batchstats run."""

    model_config = ConfigDict(extra="forbid")

    output_dir: str = Field(
        default=".",
        description="Directory the reports are written to",
    )
    workers: int = Field(default=1, ge=1, description="Concurrent analyzer calls")
    retries: int = Field(default=0, ge=0, description="Retries per failed file")
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    analyzer: AnalyzerConfig = Field(default_factory=AnalyzerConfig)
    statistics: StatisticsConfig = Field(default_factory=StatisticsConfig)


class ConfigError(FatalError):
    """Raised when config file exists but cannot be parsed."""


def load_config(path: Path | None = None) -> BatchStatsConfig:
    """Load configuration from batchstats.toml if it exists.

    ``path`` may name the file directly or a directory holding it; without
    it the current working directory is searched. An explicitly named file
    that does not exist is an error, an absent default file is not.
    """
    explicit = path is not None and not Path(path).is_dir()
    if path is None:
        config_path = Path.cwd() / CONFIG_FILENAME
    elif Path(path).is_dir():
        config_path = Path(path) / CONFIG_FILENAME
    else:
        config_path = Path(path)

    if not config_path.is_file():
        if explicit:
            msg = f"Config file not found: {config_path}"
            raise ConfigError(msg)
        return BatchStatsConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return BatchStatsConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
