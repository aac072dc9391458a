"""Report generation entry points."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from artifacts.models.artifacts.batch import BatchResult
    from artifacts.models.artifacts.statistics import Statistics
    from rules.config import StatisticsConfig


def generate_reports(
    batch: BatchResult,
    out_dir: Path,
    *,
    config: StatisticsConfig,
) -> tuple[Statistics | None, list[Path]]:
    """Generate reports via lazy import to avoid package import cycles."""
    from artifacts.write import generate_reports as _generate_reports

    return _generate_reports(batch, out_dir, config=config)


__all__ = ["generate_reports"]
