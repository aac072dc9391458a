"""Model namespace for batchstats report schemas."""

from artifacts.models.artifacts.batch import BatchError, BatchResult
from artifacts.models.artifacts.records import (
    OutgoingRelation,
    QualityMetric,
    SourceFileRecord,
    SymbolRecord,
)
from artifacts.models.artifacts.statistics import (
    DistributionBucket,
    GroupSummary,
    RankedFile,
    RankedSymbol,
    Statistics,
)

__all__ = [
    "BatchError",
    "BatchResult",
    "DistributionBucket",
    "GroupSummary",
    "OutgoingRelation",
    "QualityMetric",
    "RankedFile",
    "RankedSymbol",
    "SourceFileRecord",
    "Statistics",
    "SymbolRecord",
]
