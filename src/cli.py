"""Command-line interface for batchstats."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from analyzer.adapter import AnalyzerAdapter
from artifacts.summaries.text import format_statistics
from artifacts.write import generate_reports
from batch.collector import run_batch
from contract.validation import validate_reports
from errors import BatchStatsError, FatalError
from logging_config import setup_logging
from rules.config import BatchStatsConfig, ConfigError, load_config
from scan.files import find_source_files
from verify.verify import verify_determinism

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

USAGE_HINT = """\
Usage: batchstats <target-directory> [analyzer-binary]

Example:
  batchstats /path/to/packages
  batchstats /path/to/packages ./target/release/entrota
"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="batchstats",
        description="Run the analyzer over a directory and report statistics.",
    )
    parser.add_argument("target", nargs="?", help="Directory to analyze")
    parser.add_argument(
        "analyzer",
        nargs="?",
        default=None,
        help="Analyzer executable (default: config analyzer.binary)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Config file or directory holding batchstats.toml (default: cwd)",
    )
    parser.add_argument(
        "--out-dir",
        default=None,
        help="Output directory for reports (default: config output_dir)",
    )
    parser.add_argument(
        "--variant",
        choices=("complexity", "quality"),
        default=None,
        help="Metric variant to aggregate",
    )
    parser.add_argument("--workers", type=int, default=None)
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-file analyzer timeout in seconds",
    )
    parser.add_argument("--retries", type=int, default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("-q", "--quiet", action="store_true")
    check = parser.add_mutually_exclusive_group()
    check.add_argument(
        "--validate",
        action="store_true",
        help="Validate existing reports in the output directory",
    )
    check.add_argument(
        "--verify",
        action="store_true",
        help="Verify existing reports are reproducible from the saved results",
    )
    return parser


def _apply_overrides(
    config: BatchStatsConfig, args: argparse.Namespace
) -> BatchStatsConfig:
    data = config.model_dump()
    if args.workers is not None:
        data["workers"] = args.workers
    if args.retries is not None:
        data["retries"] = args.retries
    if args.timeout is not None:
        data["analyzer"]["timeout_seconds"] = args.timeout
    if args.analyzer is not None:
        data["analyzer"]["binary"] = args.analyzer
    if args.variant is not None:
        data["statistics"]["variant"] = args.variant
    try:
        return BatchStatsConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid command-line option: {e}"
        raise ConfigError(msg) from e


def _resolve_out_dir(out_dir: str | None, config: BatchStatsConfig) -> Path:
    return Path(out_dir or config.output_dir).expanduser().resolve()


@contextmanager
def _cancel_on_interrupt() -> Iterator[threading.Event]:
    """Turn Ctrl-C into a cooperative cancellation signal for the batch."""
    cancel = threading.Event()
    if threading.current_thread() is not threading.main_thread():
        yield cancel
        return

    def _handler(signum: int, frame: object) -> None:
        sys.stderr.write("\nCancelling after the current file...\n")
        cancel.set()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield cancel
    finally:
        signal.signal(signal.SIGINT, previous)


def _print_progress(index: int, total: int) -> None:
    percentage = index / total * 100
    sys.stdout.write(f"\rProcessing: {percentage:.1f}% ({index}/{total})")
    sys.stdout.flush()


def _handle_run(target: Path, config: BatchStatsConfig, out_dir: Path) -> int:
    if not target.is_dir():
        msg = f"Target directory does not exist: {target}"
        raise FatalError(msg)

    discovery = config.discovery
    sys.stdout.write(f"Finding {discovery.extension} files in: {target}\n")
    files = find_source_files(
        target,
        extension=discovery.extension,
        declaration_suffix=discovery.declaration_suffix,
        exclude_dirs=discovery.exclude_dirs,
        respect_gitignore=discovery.respect_gitignore,
    )
    sys.stdout.write(f"Found {len(files)} {discovery.extension} files\n\n")

    adapter = AnalyzerAdapter(
        config.analyzer.binary,
        max_output_bytes=config.analyzer.max_output_bytes,
        timeout=config.analyzer.timeout_seconds,
    )
    with _cancel_on_interrupt() as cancel:
        batch = run_batch(
            files,
            adapter,
            progress=_print_progress,
            cancel=cancel,
            workers=config.workers,
            retries=config.retries,
        )
    sys.stdout.write("\n\nAnalysis complete!\n\n")

    statistics, written = generate_reports(batch, out_dir, config=config.statistics)
    sys.stdout.write(format_statistics(statistics, batch))
    sys.stdout.write("\nReports written:\n")
    for path in written:
        sys.stdout.write(f"  - {path}\n")
    return 0


def _handle_validate(out_dir: Path, variant: str | None) -> int:
    result = validate_reports(out_dir, variant=variant)
    for warning in result.warnings:
        sys.stderr.write(f"warning: {warning.location()}: {warning.message}\n")
    if result.errors:
        for error in result.errors:
            sys.stderr.write(f"{error.location()}: {error.message}\n")
        return 1
    return 0


def _handle_verify(
    out_dir: Path, config: BatchStatsConfig, variant: str | None
) -> int:
    try:
        result = verify_determinism(
            reports_dir=out_dir, config=config.statistics, variant=variant
        )
    except (FileNotFoundError, NotADirectoryError) as exc:
        sys.stderr.write(f"reports-dir: {out_dir}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2
    if not result.ok:
        for label, names in (
            ("missing", result.missing),
            ("extra", result.extra),
            ("mismatches", result.mismatches),
        ):
            for name in names:
                sys.stderr.write(f"{label}: {name}\n")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        config_path = Path(args.config) if args.config else None
        config = _apply_overrides(load_config(config_path), args)
        out_dir = _resolve_out_dir(args.out_dir, config)

        if args.validate:
            return _handle_validate(out_dir, args.variant)

        if args.verify:
            return _handle_verify(out_dir, config, args.variant)

        if args.target is None:
            sys.stderr.write(USAGE_HINT)
            return 1

        return _handle_run(Path(args.target).expanduser(), config, out_dir)
    except BatchStatsError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1
    except Exception:
        logger.exception("Unexpected failure")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
