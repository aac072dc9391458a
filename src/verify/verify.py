"""Determinism verification for batchstats reports."""

from __future__ import annotations

import filecmp
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from artifacts.utils import _load_json
from artifacts.write import generate_reports
from contract.artifacts import REPORT_SPECS, RESULTS_JSON, STATISTICS_JSON
from contract.models import BatchResult
from contract.validation import detect_variant
from rules.config import StatisticsConfig

REPORT_FILENAMES = frozenset(
    [spec.filename for spec in REPORT_SPECS.values()] + [STATISTICS_JSON]
)


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    mismatches: tuple[str, ...] = field(default_factory=tuple)
    missing: tuple[str, ...] = field(default_factory=tuple)
    extra: tuple[str, ...] = field(default_factory=tuple)


def _list_reports(root: Path) -> set[str]:
    return {name for name in REPORT_FILENAMES if (root / name).is_file()}


def verify_determinism(
    *,
    reports_dir: Path,
    config: StatisticsConfig | None = None,
    variant: str | None = None,
) -> DeterminismResult:
    """Verify that the reports in a directory are reproducible.

    Re-derives statistics and tables from the saved analysis results into a
    temporary directory and compares them byte-for-byte with the existing
    reports. No analyzer is invoked. Only report filenames are compared, so
    unrelated files in ``reports_dir`` are ignored.

    Args:
        reports_dir: Directory containing the reports of one run.
        config: Statistics settings the reports were produced with.
        variant: Metric variant to regenerate. Defaults to the variant
            recorded in the existing reports, then to ``config.variant``.

    Returns:
        DeterminismResult with ok status and lists of missing, extra, and
        mismatched report filenames.

    Raises:
        FileNotFoundError: If reports_dir or its results report does not exist.
        NotADirectoryError: If reports_dir is not a directory.
    """
    if not reports_dir.exists():
        msg = f"Reports directory does not exist: {reports_dir}"
        raise FileNotFoundError(msg)
    if not reports_dir.is_dir():
        msg = f"Reports path is not a directory: {reports_dir}"
        raise NotADirectoryError(msg)
    results_path = reports_dir / RESULTS_JSON
    if not results_path.is_file():
        msg = f"Results report does not exist: {results_path}"
        raise FileNotFoundError(msg)

    batch = BatchResult.model_validate(_load_json(results_path))
    config = config or StatisticsConfig()
    variant = variant or detect_variant(reports_dir)
    if variant is not None and variant != config.variant:
        config = config.model_copy(update={"variant": variant})

    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir)
        generate_reports(batch, temp_path, config=config)

        original_files = _list_reports(reports_dir)
        regenerated_files = _list_reports(temp_path)

        missing = sorted(regenerated_files - original_files)
        extra = sorted(original_files - regenerated_files)

        mismatches = [
            name
            for name in sorted(original_files & regenerated_files)
            if not filecmp.cmp(reports_dir / name, temp_path / name, shallow=False)
        ]

    ok = not missing and not extra and not mismatches
    return DeterminismResult(
        ok=ok,
        mismatches=tuple(mismatches),
        missing=tuple(missing),
        extra=tuple(extra),
    )
