from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from artifacts.summaries.profiles import QUALITY, complexity_profile, profile_for
from artifacts.summaries.statistics import compute_statistics
from artifacts.utils import _fixed, _write_csv, _write_json
from contract.artifacts import (
    FILES_CSV,
    METRICS_CSV,
    RESULTS_JSON,
    SCORE_PRECISION,
    STATISTICS_JSON,
    SYMBOLS_CSV,
    columns_for,
)
from errors import FatalError, NoDataError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from artifacts.models.artifacts.batch import BatchResult
    from artifacts.models.artifacts.records import SourceFileRecord
    from artifacts.models.artifacts.statistics import Statistics
    from artifacts.summaries.profiles import MetricProfile
    from rules.config import StatisticsConfig

logger = logging.getLogger(__name__)


def file_rows(
    results: Sequence[SourceFileRecord], profile: MetricProfile
) -> list[list[object]]:
    """One row per analyzed file, columns per ``columns_for("files", ...)``."""
    if profile.name == QUALITY:
        return [
            [
                record.path,
                record.loc,
                record.comment_lines,
                record.blank_lines,
                _fixed(profile.file_score(record), SCORE_PRECISION),
                len(profile.observations(record)),
                len(record.symbols),
                len(record.outgoing),
                profile.issue_count(record),
            ]
            for record in results
        ]
    return [
        [
            record.path,
            record.loc,
            _fixed(profile.file_score(record), SCORE_PRECISION),
            len(record.symbols),
            len(record.outgoing),
        ]
        for record in results
    ]


def symbol_rows(
    results: Sequence[SourceFileRecord], profile: MetricProfile
) -> list[list[object]]:
    """One row per symbol across all files, in file then declaration order."""
    rows: list[list[object]] = []
    for record in results:
        for symbol in record.symbols:
            if profile.name == QUALITY:
                rows.append(
                    [
                        record.path,
                        symbol.kind,
                        symbol.name,
                        symbol.loc,
                        len(symbol.metrics),
                        profile.symbol_issue_count(symbol),
                    ]
                )
            else:
                rows.append(
                    [
                        record.path,
                        symbol.kind,
                        symbol.name,
                        symbol.loc,
                        _fixed(profile.symbol_rank(symbol), SCORE_PRECISION),
                    ]
                )
    return rows


def metric_rows(results: Sequence[SourceFileRecord]) -> list[list[object]]:
    """One row per metric observation; file-level rows leave Symbol empty."""
    rows: list[list[object]] = []
    for record in results:
        owners = [(None, record.metrics)] + [
            (symbol.label, symbol.metrics) for symbol in record.symbols
        ]
        for owner, metrics in owners:
            for metric in metrics:
                rows.append(
                    [
                        record.path,
                        owner,
                        metric.name,
                        _fixed(metric.value, SCORE_PRECISION),
                        _fixed(metric.threshold, SCORE_PRECISION),
                        metric.severity,
                        metric.message,
                    ]
                )
    return rows


def write_reports(
    batch: BatchResult,
    statistics: Statistics | None,
    out_dir: Path,
    *,
    profile: MetricProfile | None = None,
) -> list[Path]:
    """Write the JSON report and CSV tables, overwriting existing files.

    Raises:
        FatalError: A report could not be written.
    """
    if profile is None:
        profile = complexity_profile()
    variant = profile.name

    written: list[Path] = []
    try:
        out_dir.mkdir(parents=True, exist_ok=True)

        _write_json(out_dir / RESULTS_JSON, batch)
        written.append(out_dir / RESULTS_JSON)

        stats_path = out_dir / STATISTICS_JSON
        if statistics is not None:
            _write_json(stats_path, statistics)
            written.append(stats_path)
        elif stats_path.exists():
            stats_path.unlink()

        _write_csv(
            out_dir / FILES_CSV,
            columns_for("files", variant),
            file_rows(batch.results, profile),
        )
        written.append(out_dir / FILES_CSV)

        _write_csv(
            out_dir / SYMBOLS_CSV,
            columns_for("symbols", variant),
            symbol_rows(batch.results, profile),
        )
        written.append(out_dir / SYMBOLS_CSV)

        if variant == QUALITY:
            _write_csv(
                out_dir / METRICS_CSV,
                columns_for("metrics", variant),
                metric_rows(batch.results),
            )
            written.append(out_dir / METRICS_CSV)
    except OSError as exc:
        msg = f"Failed to write reports to {out_dir}: {exc}"
        raise FatalError(msg) from exc

    logger.info("Wrote %d reports to %s", len(written), out_dir)
    return written


def generate_reports(
    batch: BatchResult,
    out_dir: Path,
    *,
    config: StatisticsConfig,
) -> tuple[Statistics | None, list[Path]]:
    """Compute statistics for a batch and write every report.

    Returns:
        The statistics (None for a batch with no analyzed files) and the
        paths written.
    """
    profile = profile_for(config)
    statistics: Statistics | None
    try:
        statistics = compute_statistics(
            batch.results,
            profile,
            top_files=config.top_files,
            top_symbols=config.top_symbols,
        )
    except NoDataError:
        logger.info("No analyzed files; statistics skipped")
        statistics = None

    paths = write_reports(batch, statistics, out_dir, profile=profile)
    return statistics, paths


__all__ = [
    "file_rows",
    "generate_reports",
    "metric_rows",
    "symbol_rows",
    "write_reports",
]
