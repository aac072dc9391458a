"""Per-file analysis record models.

These mirror the JSON object the external analyzer prints for one source
file. Records are frozen once parsed and keep any fields the analyzer emits
beyond the ones modelled here, so the results report reproduces them.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Severity = Literal["info", "warning", "error"]

ISSUE_SEVERITIES: frozenset[str] = frozenset({"warning", "error"})


class QualityMetric(BaseModel):
    """A named numeric observation reported for a file or a symbol."""

    model_config = ConfigDict(frozen=True, extra="allow")

    name: str
    value: float
    threshold: float | None = None
    severity: Severity = "info"
    message: str | None = None

    @property
    def is_issue(self) -> bool:
        return self.severity in ISSUE_SEVERITIES


class SymbolRecord(BaseModel):
    """A declared program symbol inside a source file."""

    model_config = ConfigDict(frozen=True, extra="allow")

    kind: str
    name: str
    loc: int
    complexity: float | None = None
    metrics: list[QualityMetric] = Field(default_factory=list)

    @property
    def label(self) -> str:
        return f"{self.kind}:{self.name}"


class OutgoingRelation(BaseModel):
    """A directed dependency edge from the owning file."""

    model_config = ConfigDict(frozen=True, extra="allow")

    target: str | None = None
    relation: str
    strength: float


class SourceFileRecord(BaseModel):
    """Analysis result for one source file."""

    model_config = ConfigDict(frozen=True, extra="allow")

    path: str
    loc: int
    comment_lines: int | None = None
    blank_lines: int | None = None
    complexity: float | None = None
    symbols: list[SymbolRecord] = Field(default_factory=list)
    outgoing: list[OutgoingRelation] = Field(default_factory=list)
    metrics: list[QualityMetric] = Field(default_factory=list)


__all__ = [
    "ISSUE_SEVERITIES",
    "OutgoingRelation",
    "QualityMetric",
    "Severity",
    "SourceFileRecord",
    "SymbolRecord",
]
