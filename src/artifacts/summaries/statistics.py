"""Statistics engine: a pure fold over the analyzed file records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from artifacts.models.artifacts.statistics import (
    RankedFile,
    RankedSymbol,
    Statistics,
)
from artifacts.summaries.builders import (
    bucketize,
    equal_width_buckets,
    group_by,
    mean,
    top_n,
)
from artifacts.summaries.profiles import complexity_profile, worst_severity
from errors import NoDataError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from artifacts.models.artifacts.records import (
        QualityMetric,
        SourceFileRecord,
        SymbolRecord,
    )
    from artifacts.summaries.profiles import MetricProfile

DEFAULT_TOP_FILES = 10
DEFAULT_TOP_SYMBOLS = 20


@dataclass(frozen=True)
class _SymbolEntry:
    file: str
    symbol: SymbolRecord
    score: float
    severity: str


def _optional_mean(values: list[int]) -> float | None:
    return mean(values) if values else None


def compute_statistics(
    results: Sequence[SourceFileRecord],
    profile: MetricProfile | None = None,
    *,
    top_files: int = DEFAULT_TOP_FILES,
    top_symbols: int = DEFAULT_TOP_SYMBOLS,
) -> Statistics:
    """Aggregate analyzed files into a Statistics snapshot.

    Args:
        results: Successfully analyzed records, in batch order
        profile: Which scores and metric observations to aggregate
            (default: the complexity profile)
        top_files: Length limit of the top-files ranking
        top_symbols: Length limit of the top-symbols ranking

    Raises:
        NoDataError: ``results`` is empty.
    """
    if not results:
        msg = "No analyzed files to compute statistics from"
        raise NoDataError(msg)
    if profile is None:
        profile = complexity_profile()

    symbol_entries = [
        _SymbolEntry(
            file=record.path,
            symbol=symbol,
            score=profile.symbol_rank(symbol),
            severity=worst_severity(profile.symbol_metrics(symbol)),
        )
        for record in results
        for symbol in record.symbols
    ]
    observations: list[QualityMetric] = [
        metric for record in results for metric in profile.observations(record)
    ]
    relations = [relation for record in results for relation in record.outgoing]

    ranked_files = top_n(
        [
            RankedFile(
                path=record.path,
                score=profile.file_rank(record),
                loc=record.loc,
                issues=profile.issue_count(record),
            )
            for record in results
        ],
        key=lambda f: f.score,
        n=top_files,
    )
    ranked_symbols = [
        RankedSymbol(
            file=entry.file,
            symbol=entry.symbol.label,
            score=entry.score,
            loc=entry.symbol.loc,
        )
        for entry in top_n(symbol_entries, key=lambda e: e.score, n=top_symbols)
    ]

    buckets = equal_width_buckets(profile.low, profile.high, profile.buckets)

    warning_count = sum(1 for m in observations if m.severity == "warning")
    error_count = sum(1 for m in observations if m.severity == "error")

    return Statistics(
        variant=profile.name,
        file_count=len(results),
        symbol_count=len(symbol_entries),
        dependency_count=len(relations),
        avg_loc=mean(record.loc for record in results),
        avg_score=mean(profile.file_score(record) for record in results),
        avg_fan_out=mean(len(record.outgoing) for record in results),
        avg_comment_lines=_optional_mean(
            [r.comment_lines for r in results if r.comment_lines is not None]
        ),
        avg_blank_lines=_optional_mean(
            [r.blank_lines for r in results if r.blank_lines is not None]
        ),
        issue_count=warning_count + error_count,
        warning_count=warning_count,
        error_count=error_count,
        distribution=bucketize(
            (profile.file_score(record) for record in results), buckets
        ),
        top_files=ranked_files,
        top_symbols=ranked_symbols,
        symbol_kinds=group_by(
            symbol_entries,
            key=lambda e: e.symbol.kind,
            value=lambda e: e.score,
            severity=lambda e: e.severity,
            loc=lambda e: e.symbol.loc,
        ),
        metric_summaries=group_by(
            observations,
            key=lambda m: m.name,
            value=lambda m: m.value,
            severity=lambda m: m.severity,
        ),
        relation_kinds=group_by(
            relations,
            key=lambda r: r.relation,
            value=lambda r: r.strength,
            severity=lambda _r: "info",
        ),
    )


__all__ = ["DEFAULT_TOP_FILES", "DEFAULT_TOP_SYMBOLS", "compute_statistics"]
