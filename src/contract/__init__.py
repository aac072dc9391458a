"""Stable report contract surface for batchstats.

Filenames, table layouts and the report models form the boundary that
downstream consumers of the reports depend on.
"""

from contract.artifacts import (
    FILES_CSV,
    METRICS_CSV,
    REPORT_SPECS,
    RESULTS_JSON,
    STATISTICS_JSON,
    SYMBOLS_CSV,
    ReportSpec,
    columns_for,
)


def __getattr__(name: str) -> object:
    if name in {"BatchError", "BatchResult", "SourceFileRecord", "Statistics"}:
        from contract.models import (
            BatchError,
            BatchResult,
            SourceFileRecord,
            Statistics,
        )

        return {
            "BatchError": BatchError,
            "BatchResult": BatchResult,
            "SourceFileRecord": SourceFileRecord,
            "Statistics": Statistics,
        }[name]

    if name in {"ValidationMessage", "ValidationResult", "validate_reports"}:
        from contract.validation import (
            ValidationMessage,
            ValidationResult,
            validate_reports,
        )

        return {
            "ValidationMessage": ValidationMessage,
            "ValidationResult": ValidationResult,
            "validate_reports": validate_reports,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "FILES_CSV",
    "METRICS_CSV",
    "REPORT_SPECS",
    "RESULTS_JSON",
    "STATISTICS_JSON",
    "SYMBOLS_CSV",
    "BatchError",
    "BatchResult",
    "ReportSpec",
    "SourceFileRecord",
    "Statistics",
    "ValidationMessage",
    "ValidationResult",
    "columns_for",
    "validate_reports",
]
