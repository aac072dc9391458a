"""Generic aggregation folds used by the statistics engine.

Every function here is pure: inputs are read once and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from artifacts.models.artifacts.statistics import DistributionBucket, GroupSummary
from errors import NoDataError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

T = TypeVar("T")


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean.

    Raises:
        NoDataError: ``values`` is empty. There is no average of nothing.
    """
    total = 0.0
    count = 0
    for value in values:
        total += value
        count += 1
    if count == 0:
        msg = "Cannot average an empty sequence"
        raise NoDataError(msg)
    return total / count


@dataclass(frozen=True)
class BucketRange:
    label: str
    low: float
    high: float


def equal_width_buckets(low: float, high: float, count: int) -> list[BucketRange]:
    """Split ``[low, high]`` into ``count`` equal-width ranges.

    Edges are computed from the span rather than by repeated addition so that
    e.g. the 0.6 edge of a five-way split of [0, 1] is exactly 0.6.
    """
    if count < 1:
        msg = f"bucket count must be positive, got {count}"
        raise ValueError(msg)
    if high <= low:
        msg = f"empty bucket span [{low}, {high}]"
        raise ValueError(msg)
    span = high - low
    edges = [low + span * i / count for i in range(count)] + [high]
    return [
        BucketRange(f"{edges[i]:.1f}-{edges[i + 1]:.1f}", edges[i], edges[i + 1])
        for i in range(count)
    ]


def bucket_index(value: float, buckets: Sequence[BucketRange]) -> int:
    """Return the bucket a value belongs to.

    Buckets are half-open ``[low, high)`` except the last, which also holds
    its upper edge. Values outside the overall span are clamped to the first
    or last bucket.
    """
    last = len(buckets) - 1
    for index, bucket in enumerate(buckets):
        if value < bucket.high or index == last:
            return index
    return last


def bucketize(
    values: Iterable[float], buckets: Sequence[BucketRange]
) -> list[DistributionBucket]:
    counts = [0] * len(buckets)
    for value in values:
        counts[bucket_index(value, buckets)] += 1
    return [
        DistributionBucket(
            range=bucket.label, min=bucket.low, max=bucket.high, count=count
        )
        for bucket, count in zip(buckets, counts, strict=True)
    ]


def top_n(items: Sequence[T], key: Callable[[T], float], n: int) -> list[T]:
    """Return the ``n`` highest-ranked items, ties kept in input order."""
    return sorted(items, key=key, reverse=True)[:n]


@dataclass
class _GroupAccumulator:
    count: int = 0
    total: float = 0.0
    total_loc: int = 0
    max_value: float = float("-inf")
    warnings: int = 0
    errors: int = 0


def group_by(
    entries: Iterable[T],
    key: Callable[[T], str],
    value: Callable[[T], float],
    *,
    severity: Callable[[T], str],
    loc: Callable[[T], int] | None = None,
) -> list[GroupSummary]:
    """Roll entries up by a string key.

    Each group reports its size, the mean and max of ``value``, the mean of
    ``loc`` when given, and how many entries have warning or error severity.
    Groups come back ordered by descending count, ties in first-seen order.
    """
    groups: dict[str, _GroupAccumulator] = {}
    for entry in entries:
        group = groups.setdefault(key(entry), _GroupAccumulator())
        entry_value = value(entry)
        group.count += 1
        group.total += entry_value
        group.max_value = max(group.max_value, entry_value)
        if loc is not None:
            group.total_loc += loc(entry)
        entry_severity = severity(entry)
        if entry_severity == "warning":
            group.warnings += 1
        elif entry_severity == "error":
            group.errors += 1

    summaries = [
        GroupSummary(
            key=name,
            count=group.count,
            average=group.total / group.count,
            average_loc=(group.total_loc / group.count) if loc is not None else None,
            max_value=group.max_value,
            issue_count=group.warnings + group.errors,
            warning_count=group.warnings,
            error_count=group.errors,
        )
        for name, group in groups.items()
    ]
    return top_n(summaries, key=lambda s: s.count, n=len(summaries))


__all__ = [
    "BucketRange",
    "bucket_index",
    "bucketize",
    "equal_width_buckets",
    "group_by",
    "mean",
    "top_n",
]
