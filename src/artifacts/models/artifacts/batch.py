"""Batch accumulator models.

`BatchResult` uses camelCase aliases on the wire (``totalFiles``,
``analyzedFiles``...) and snake_case attributes in Python.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from artifacts.models.artifacts.records import SourceFileRecord  # noqa: TC001


class BatchError(BaseModel):
    """A file whose analysis failed."""

    model_config = ConfigDict(frozen=True)

    path: str
    error: str
    kind: str | None = None


class BatchResult(BaseModel):
    """Accumulates per-file outcomes for one batch run."""

    model_config = ConfigDict(populate_by_name=True)

    total_files: int = Field(alias="totalFiles")
    analyzed_files: int = Field(default=0, alias="analyzedFiles")
    failed_files: int = Field(default=0, alias="failedFiles")
    results: list[SourceFileRecord] = Field(default_factory=list)
    errors: list[BatchError] = Field(default_factory=list)

    def record_success(self, record: SourceFileRecord) -> None:
        self.results.append(record)
        self.analyzed_files += 1

    def record_failure(self, path: str, message: str, kind: str | None = None) -> None:
        self.errors.append(BatchError(path=path, error=message, kind=kind))
        self.failed_files += 1

    @property
    def is_complete(self) -> bool:
        """True when every candidate file has been accounted for."""
        return (
            self.total_files == self.analyzed_files + self.failed_files
            and self.analyzed_files == len(self.results)
            and self.failed_files == len(self.errors)
        )

    def to_report(self) -> dict[str, Any]:
        """Return the JSON-ready report document.

        Records are dumped with only the fields the analyzer supplied, so the
        document reproduces its output rather than the model defaults.
        """
        return {
            "totalFiles": self.total_files,
            "analyzedFiles": self.analyzed_files,
            "failedFiles": self.failed_files,
            "results": [
                record.model_dump(mode="json", exclude_unset=True)
                for record in self.results
            ],
            "errors": [
                error.model_dump(mode="json", exclude_none=True)
                for error in self.errors
            ],
        }


__all__ = ["BatchError", "BatchResult"]
