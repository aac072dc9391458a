"""Report contract definitions.

Filenames and table layouts here are the stable output contract: column
order is fixed per variant so report diffs stay reproducible.
"""

from __future__ import annotations

from dataclasses import dataclass

# Report filename constants (stable contract identifiers).
RESULTS_JSON = "analysis-results.json"
STATISTICS_JSON = "analysis-statistics.json"
FILES_CSV = "analysis-files.csv"
SYMBOLS_CSV = "analysis-symbols.csv"
METRICS_CSV = "analysis-metrics.csv"

# Fixed decimal precision for numeric CSV fields.
SCORE_PRECISION = 3

FILES_COLUMNS: dict[str, tuple[str, ...]] = {
    "complexity": ("File", "LOC", "Complexity", "Symbols", "Dependencies"),
    "quality": (
        "File",
        "LOC",
        "Comment Lines",
        "Blank Lines",
        "Violation Rate",
        "Metrics",
        "Symbols",
        "Dependencies",
        "Warnings",
    ),
}

SYMBOLS_COLUMNS: dict[str, tuple[str, ...]] = {
    "complexity": ("File", "Symbol Type", "Symbol Name", "LOC", "Complexity"),
    "quality": ("File", "Symbol Type", "Symbol Name", "LOC", "Metrics", "Issues"),
}

METRICS_COLUMNS: tuple[str, ...] = (
    "File",
    "Symbol",
    "Metric",
    "Value",
    "Threshold",
    "Severity",
    "Message",
)


@dataclass(frozen=True)
class ReportSpec:
    """Specification for one report file."""

    filename: str
    format: str
    variants: tuple[str, ...]

    def applies_to(self, variant: str) -> bool:
        return variant in self.variants


REPORT_SPECS: dict[str, ReportSpec] = {
    "results": ReportSpec(
        filename=RESULTS_JSON,
        format="json",
        variants=("complexity", "quality"),
    ),
    "files": ReportSpec(
        filename=FILES_CSV,
        format="csv",
        variants=("complexity", "quality"),
    ),
    "symbols": ReportSpec(
        filename=SYMBOLS_CSV,
        format="csv",
        variants=("complexity", "quality"),
    ),
    "metrics": ReportSpec(
        filename=METRICS_CSV,
        format="csv",
        variants=("quality",),
    ),
}


def columns_for(report: str, variant: str) -> tuple[str, ...]:
    """Return the fixed header row of a CSV report."""
    if report == "files":
        return FILES_COLUMNS[variant]
    if report == "symbols":
        return SYMBOLS_COLUMNS[variant]
    if report == "metrics":
        return METRICS_COLUMNS
    msg = f"Not a CSV report: {report}"
    raise ValueError(msg)


__all__ = [
    "FILES_COLUMNS",
    "FILES_CSV",
    "METRICS_COLUMNS",
    "METRICS_CSV",
    "REPORT_SPECS",
    "RESULTS_JSON",
    "SCORE_PRECISION",
    "STATISTICS_JSON",
    "SYMBOLS_COLUMNS",
    "SYMBOLS_CSV",
    "ReportSpec",
    "columns_for",
]
