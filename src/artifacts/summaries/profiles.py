"""Metric profiles: which numbers the statistics engine aggregates.

A profile turns a file or symbol into metric observations plus the scores
used for ranking and for the distribution. The complexity variant
synthesizes one ``complexity`` observation per file and symbol; the quality
variant uses the analyzer's severity-tagged metric lists as they are.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from artifacts.models.artifacts.records import QualityMetric

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from artifacts.models.artifacts.records import SourceFileRecord, SymbolRecord
    from rules.config import StatisticsConfig

COMPLEXITY = "complexity"
QUALITY = "quality"

_SEVERITY_RANK = {"info": 0, "warning": 1, "error": 2}


def worst_severity(metrics: Iterable[QualityMetric]) -> str:
    return max(
        (m.severity for m in metrics),
        key=_SEVERITY_RANK.__getitem__,
        default="info",
    )


def count_issues(metrics: Iterable[QualityMetric]) -> int:
    return sum(1 for m in metrics if m.is_issue)


@dataclass(frozen=True)
class MetricProfile:
    name: str
    file_metrics: Callable[[SourceFileRecord], list[QualityMetric]]
    symbol_metrics: Callable[[SymbolRecord], list[QualityMetric]]
    file_rank: Callable[[SourceFileRecord], float]
    symbol_rank: Callable[[SymbolRecord], float]
    file_score: Callable[[SourceFileRecord], float]
    buckets: int = 5
    low: float = 0.0
    high: float = 1.0

    def observations(self, record: SourceFileRecord) -> list[QualityMetric]:
        """File-level observations followed by each symbol's, in order."""
        observed = list(self.file_metrics(record))
        for symbol in record.symbols:
            observed.extend(self.symbol_metrics(symbol))
        return observed

    def issue_count(self, record: SourceFileRecord) -> int:
        return count_issues(self.observations(record))

    def symbol_issue_count(self, symbol: SymbolRecord) -> int:
        return count_issues(self.symbol_metrics(symbol))


def complexity_profile(
    *, threshold: float | None = None, buckets: int = 5
) -> MetricProfile:
    """One normalized complexity score per file and symbol."""

    def observe(score: float | None) -> list[QualityMetric]:
        value = score or 0.0
        flagged = threshold is not None and value > threshold
        return [
            QualityMetric(
                name=COMPLEXITY,
                value=value,
                threshold=threshold,
                severity="warning" if flagged else "info",
            )
        ]

    return MetricProfile(
        name=COMPLEXITY,
        file_metrics=lambda record: observe(record.complexity),
        symbol_metrics=lambda symbol: observe(symbol.complexity),
        file_rank=lambda record: record.complexity or 0.0,
        symbol_rank=lambda symbol: symbol.complexity or 0.0,
        file_score=lambda record: record.complexity or 0.0,
        buckets=buckets,
    )


def violation_rate(record: SourceFileRecord) -> float:
    """Share of a file's observations (file and symbols) that are issues."""
    observed = list(record.metrics)
    for symbol in record.symbols:
        observed.extend(symbol.metrics)
    if not observed:
        return 0.0
    return count_issues(observed) / len(observed)


def quality_profile(*, buckets: int = 5) -> MetricProfile:
    """Severity-tagged metric lists as reported by the analyzer."""

    def file_issues(record: SourceFileRecord) -> float:
        total = count_issues(record.metrics)
        for symbol in record.symbols:
            total += count_issues(symbol.metrics)
        return float(total)

    return MetricProfile(
        name=QUALITY,
        file_metrics=lambda record: list(record.metrics),
        symbol_metrics=lambda symbol: list(symbol.metrics),
        file_rank=file_issues,
        symbol_rank=lambda symbol: float(count_issues(symbol.metrics)),
        file_score=violation_rate,
        buckets=buckets,
    )


def profile_for(config: StatisticsConfig) -> MetricProfile:
    if config.variant == QUALITY:
        return quality_profile(buckets=config.buckets)
    return complexity_profile(
        threshold=config.complexity_threshold, buckets=config.buckets
    )


__all__ = [
    "COMPLEXITY",
    "QUALITY",
    "MetricProfile",
    "complexity_profile",
    "count_issues",
    "profile_for",
    "quality_profile",
    "violation_rate",
    "worst_severity",
]
