"""Statistics models derived from a completed batch."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Schema version constant
SCHEMA_VERSION = 1


class DistributionBucket(BaseModel):
    """Number of values that fell in one range of a distribution."""

    model_config = ConfigDict(frozen=True)

    range: str
    min: float
    max: float
    count: int


class RankedFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    score: float
    loc: int
    issues: int


class RankedSymbol(BaseModel):
    model_config = ConfigDict(frozen=True)

    file: str
    symbol: str
    score: float
    loc: int


class GroupSummary(BaseModel):
    """Rollup of the entries sharing one grouping key."""

    model_config = ConfigDict(frozen=True)

    key: str
    count: int
    average: float
    average_loc: float | None = None
    max_value: float
    issue_count: int
    warning_count: int = 0
    error_count: int = 0


class Statistics(BaseModel):
    """Aggregate metrics over the successfully analyzed files."""

    model_config = ConfigDict(frozen=True)

    schema_version: int = Field(default=SCHEMA_VERSION)
    variant: str
    file_count: int
    symbol_count: int
    dependency_count: int
    avg_loc: float
    avg_score: float
    avg_fan_out: float
    avg_comment_lines: float | None = None
    avg_blank_lines: float | None = None
    issue_count: int
    warning_count: int
    error_count: int
    distribution: list[DistributionBucket] = Field(default_factory=list)
    top_files: list[RankedFile] = Field(default_factory=list)
    top_symbols: list[RankedSymbol] = Field(default_factory=list)
    symbol_kinds: list[GroupSummary] = Field(default_factory=list)
    metric_summaries: list[GroupSummary] = Field(default_factory=list)
    relation_kinds: list[GroupSummary] = Field(default_factory=list)


__all__ = [
    "SCHEMA_VERSION",
    "DistributionBucket",
    "GroupSummary",
    "RankedFile",
    "RankedSymbol",
    "Statistics",
]
