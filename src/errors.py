"""Error taxonomy for batchstats.

Per-file failures (`AnalysisError`) are absorbed into the batch result and
directory failures (`DiscoveryError`) are recovered during traversal. Only
`FatalError` and its subclasses end a run.
"""

from __future__ import annotations

from enum import Enum


class BatchStatsError(Exception):
    """Base exception for all batchstats errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class DiscoveryError(BatchStatsError):
    """A directory could not be read during discovery."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot read directory {path}: {reason}")
        self.path = path
        self.reason = reason


class AnalysisErrorKind(str, Enum):
    """Why a single file's analysis failed."""

    EXIT_STATUS = "exit_status"
    MALFORMED_OUTPUT = "malformed_output"
    INVALID_RECORD = "invalid_record"
    OUTPUT_TOO_LARGE = "output_too_large"
    TIMEOUT = "timeout"
    NOT_FOUND = "not_found"
    CANCELLED = "cancelled"


class AnalysisError(BatchStatsError):
    """Analysis of one file failed; recorded in the batch, never raised past it."""

    def __init__(self, path: str, message: str, kind: AnalysisErrorKind):
        super().__init__(message)
        self.path = path
        self.kind = kind


class FatalError(BatchStatsError):
    """Setup-time or output-time failure that terminates the run."""


class NoDataError(BatchStatsError):
    """Statistics were requested over an empty input."""


__all__ = [
    "AnalysisError",
    "AnalysisErrorKind",
    "BatchStatsError",
    "DiscoveryError",
    "FatalError",
    "NoDataError",
]
