"""Summary helpers for batchstats reports."""

from artifacts.summaries.builders import (
    bucketize,
    equal_width_buckets,
    group_by,
    mean,
    top_n,
)
from artifacts.summaries.profiles import (
    MetricProfile,
    complexity_profile,
    profile_for,
    quality_profile,
)
from artifacts.summaries.statistics import compute_statistics

__all__ = [
    "MetricProfile",
    "bucketize",
    "complexity_profile",
    "compute_statistics",
    "equal_width_buckets",
    "group_by",
    "mean",
    "profile_for",
    "quality_profile",
    "top_n",
]
