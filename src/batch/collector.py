"""Batch collection over a discovered file set.

Files are analyzed one at a time in discovery order by default. With
``workers > 1`` a bounded thread pool runs analyzer calls concurrently and
the outcomes are merged in original file order once every worker finishes,
so the resulting BatchResult is identical to a sequential run.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import TYPE_CHECKING

from artifacts.models.artifacts.batch import BatchResult
from errors import AnalysisError, AnalysisErrorKind

if TYPE_CHECKING:
    import threading
    from collections.abc import Callable, Iterable

    from artifacts.models.artifacts.records import SourceFileRecord

    AnalyzeFn = Callable[[str], SourceFileRecord]
    ProgressCallback = Callable[[int, int], None]

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "batch cancelled before analysis"


@dataclass(frozen=True)
class _Outcome:
    path: str
    record: SourceFileRecord | None = None
    error: AnalysisError | None = None


def _analyze_with_retries(
    path: str, analyze: AnalyzeFn, retries: int
) -> SourceFileRecord:
    attempt = 0
    while True:
        try:
            return analyze(path)
        except AnalysisError as exc:
            if attempt >= retries:
                raise
            attempt += 1
            logger.debug("Retrying %s (%d/%d): %s", path, attempt, retries, exc)


def _attempt(
    path: str,
    analyze: AnalyzeFn,
    retries: int,
    cancel: threading.Event | None,
) -> _Outcome:
    if cancel is not None and cancel.is_set():
        return _Outcome(
            path,
            error=AnalysisError(path, CANCELLED_MESSAGE, AnalysisErrorKind.CANCELLED),
        )
    try:
        return _Outcome(path, record=_analyze_with_retries(path, analyze, retries))
    except AnalysisError as exc:
        return _Outcome(path, error=exc)


def _apply(result: BatchResult, outcome: _Outcome) -> None:
    if outcome.record is not None:
        result.record_success(outcome.record)
        return
    error = outcome.error
    assert error is not None
    if error.kind is not AnalysisErrorKind.CANCELLED:
        logger.warning("Analysis failed for %s: %s", outcome.path, error.message)
    result.record_failure(outcome.path, error.message, error.kind.value)


def _run_sequential(
    paths: list[str],
    analyze: AnalyzeFn,
    result: BatchResult,
    *,
    progress: ProgressCallback | None,
    cancel: threading.Event | None,
    retries: int,
) -> None:
    total = len(paths)
    for index, path in enumerate(paths, 1):
        _apply(result, _attempt(path, analyze, retries, cancel))
        if progress is not None:
            progress(index, total)


def _run_pool(
    paths: list[str],
    analyze: AnalyzeFn,
    result: BatchResult,
    *,
    progress: ProgressCallback | None,
    cancel: threading.Event | None,
    retries: int,
    workers: int,
) -> None:
    total = len(paths)
    outcomes: list[_Outcome | None] = [None] * total
    completed = 0
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(_attempt, path, analyze, retries, cancel): index
            for index, path in enumerate(paths)
        }
        for future in as_completed(futures):
            outcomes[futures[future]] = future.result()
            completed += 1
            if progress is not None:
                progress(completed, total)

    for outcome in outcomes:
        assert outcome is not None
        _apply(result, outcome)


def run_batch(
    paths: Iterable[str],
    analyze: AnalyzeFn,
    *,
    progress: ProgressCallback | None = None,
    cancel: threading.Event | None = None,
    workers: int = 1,
    retries: int = 0,
) -> BatchResult:
    """Analyze every path exactly once and collect the outcomes.

    Args:
        paths: Candidate files, in the order they should be processed
        analyze: Per-file analysis function; AnalysisError marks a failure
        progress: Called with (completed, total) after each file
        cancel: When set, files not yet started are recorded as cancelled
            failures; a file already in flight still completes
        workers: Number of concurrent analyze calls
        retries: Additional attempts for a file whose analysis failed

    Returns:
        The completed BatchResult. Failures never stop the batch; exceptions
        other than AnalysisError propagate to the caller.
    """
    path_list = list(paths)
    result = BatchResult(total_files=len(path_list))
    logger.info("Analyzing %d files", len(path_list))

    if workers > 1 and len(path_list) > 1:
        _run_pool(
            path_list,
            analyze,
            result,
            progress=progress,
            cancel=cancel,
            retries=retries,
            workers=workers,
        )
    else:
        _run_sequential(
            path_list,
            analyze,
            result,
            progress=progress,
            cancel=cancel,
            retries=retries,
        )

    logger.info(
        "Analyzed %d files, %d failed", result.analyzed_files, result.failed_files
    )
    return result


__all__ = ["CANCELLED_MESSAGE", "run_batch"]
