"""Report models exposed at the contract boundary."""

from artifacts.models.artifacts.batch import BatchError, BatchResult
from artifacts.models.artifacts.records import SourceFileRecord
from artifacts.models.artifacts.statistics import Statistics

__all__ = ["BatchError", "BatchResult", "SourceFileRecord", "Statistics"]
