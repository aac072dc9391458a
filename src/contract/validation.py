"""Validation helpers for written reports."""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from contract.artifacts import (
    FILES_COLUMNS,
    FILES_CSV,
    REPORT_SPECS,
    RESULTS_JSON,
    STATISTICS_JSON,
    columns_for,
)
from contract.models import BatchResult, Statistics

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(frozen=True)
class ValidationMessage:
    report: str
    path: Path
    message: str
    line: int | None = None

    def location(self) -> str:
        if self.line is None:
            return str(self.path)
        return f"{self.path}:{self.line}"


@dataclass
class ValidationResult:
    errors: list[ValidationMessage] = field(default_factory=list)
    warnings: list[ValidationMessage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def error(
        self, report: str, path: Path, message: str, line: int | None = None
    ) -> None:
        self.errors.append(ValidationMessage(report, path, message, line))


def validate_reports(
    reports_dir: Path, *, variant: str | None = None
) -> ValidationResult:
    """Check a reports directory against the report contract.

    Args:
        reports_dir: Directory holding the reports of one run
        variant: Expected metric variant; detected from the files table
            header when omitted
    """
    result = ValidationResult()

    if not reports_dir.exists():
        result.error("reports_dir", reports_dir, "Reports directory does not exist.")
        return result
    if not reports_dir.is_dir():
        result.error("reports_dir", reports_dir, "Reports path is not a directory.")
        return result

    batch = _validate_results(reports_dir / RESULTS_JSON, result)

    if variant is None:
        variant = detect_variant(reports_dir)
        if variant is None:
            result.error(
                "files",
                reports_dir / FILES_CSV,
                "Cannot determine report variant from the statistics report "
                "or the files table header.",
            )
            return result

    for report, spec in REPORT_SPECS.items():
        if spec.format != "csv" or not spec.applies_to(variant):
            continue
        path = reports_dir / spec.filename
        row_count = _validate_csv(report, path, columns_for(report, variant), result)
        if (
            report == "files"
            and batch is not None
            and row_count is not None
            and row_count != batch.analyzed_files
        ):
            result.error(
                report,
                path,
                f"Expected {batch.analyzed_files} file rows, found {row_count}.",
            )

    _validate_statistics(reports_dir / STATISTICS_JSON, batch, result)
    return result


def _validate_results(path: Path, result: ValidationResult) -> BatchResult | None:
    if not path.exists():
        result.error("results", path, "Required report file is missing.")
        return None
    try:
        raw = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as exc:
        result.error("results", path, f"Invalid JSON: {exc}.")
        return None
    if not isinstance(raw, dict):
        result.error("results", path, "Expected JSON object for analysis results.")
        return None
    try:
        batch = BatchResult.model_validate(raw)
    except ValidationError as exc:
        result.error("results", path, f"Schema validation failed: {exc}.")
        return None

    if batch.total_files != batch.analyzed_files + batch.failed_files:
        result.error(
            "results",
            path,
            "totalFiles must equal analyzedFiles + failedFiles "
            f"({batch.total_files} != {batch.analyzed_files} + {batch.failed_files}).",
        )
    if batch.analyzed_files != len(batch.results):
        result.error(
            "results",
            path,
            f"analyzedFiles is {batch.analyzed_files} but results has "
            f"{len(batch.results)} entries.",
        )
    if batch.failed_files != len(batch.errors):
        result.error(
            "results",
            path,
            f"failedFiles is {batch.failed_files} but errors has "
            f"{len(batch.errors)} entries.",
        )

    seen: set[str] = set()
    for record in batch.results:
        if record.path in seen:
            result.error("results", path, f"Duplicate result path: {record.path}.")
        seen.add(record.path)
    return batch


def _read_csv(path: Path) -> list[list[str]]:
    with path.open(encoding="utf-8", newline="") as f:
        return list(csv.reader(f))


def detect_variant(reports_dir: Path) -> str | None:
    """Return the metric variant a reports directory was written with.

    The statistics report names it directly; without one, the files table
    header identifies it. Returns None when neither is readable.
    """
    try:
        stats = orjson.loads((reports_dir / STATISTICS_JSON).read_bytes())
    except (OSError, orjson.JSONDecodeError):
        stats = None
    if isinstance(stats, dict) and stats.get("variant") in FILES_COLUMNS:
        return str(stats["variant"])

    try:
        rows = _read_csv(reports_dir / FILES_CSV)
    except (OSError, UnicodeDecodeError, csv.Error):
        return None
    if not rows:
        return None
    header = tuple(rows[0])
    for variant, columns in FILES_COLUMNS.items():
        if header == columns:
            return variant
    return None


def _validate_csv(
    report: str, path: Path, columns: tuple[str, ...], result: ValidationResult
) -> int | None:
    """Validate header and row widths; return the number of data rows."""
    if not path.exists():
        result.error(report, path, "Required report file is missing.")
        return None
    try:
        rows = _read_csv(path)
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        result.error(report, path, f"Failed to read file: {exc}.")
        return None

    if not rows or tuple(rows[0]) != columns:
        result.error(
            report,
            path,
            f"Header mismatch: expected {', '.join(columns)}.",
            line=1,
        )
        return None

    for line_number, row in enumerate(rows[1:], 2):
        if len(row) != len(columns):
            result.error(
                report,
                path,
                f"Expected {len(columns)} fields, found {len(row)}.",
                line=line_number,
            )
    return len(rows) - 1


def _validate_statistics(
    path: Path, batch: BatchResult | None, result: ValidationResult
) -> None:
    if not path.exists():
        if batch is not None and batch.analyzed_files > 0:
            result.warnings.append(
                ValidationMessage("statistics", path, "Statistics report is missing.")
            )
        return
    try:
        statistics = Statistics.model_validate(orjson.loads(path.read_bytes()))
    except (OSError, orjson.JSONDecodeError, ValidationError) as exc:
        result.error("statistics", path, f"Invalid statistics report: {exc}.")
        return

    if batch is not None and statistics.file_count != batch.analyzed_files:
        result.error(
            "statistics",
            path,
            f"file_count is {statistics.file_count} but "
            f"{batch.analyzed_files} files were analyzed.",
        )
    bucket_total = sum(bucket.count for bucket in statistics.distribution)
    if bucket_total != statistics.file_count:
        result.error(
            "statistics",
            path,
            f"Distribution counts sum to {bucket_total}, "
            f"expected {statistics.file_count}.",
        )


__all__ = [
    "ValidationMessage",
    "ValidationResult",
    "detect_variant",
    "validate_reports",
]
