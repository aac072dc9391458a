"""Plain-text rendering of batch statistics for the terminal."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from artifacts.models.artifacts.batch import BatchResult
    from artifacts.models.artifacts.statistics import GroupSummary, Statistics

RULE = "-" * 60
BAR_WIDTH = 50


def _bar(count: int, total: int) -> str:
    if total <= 0:
        return ""
    return "#" * int(count / total * BAR_WIDTH)


def _group_table(title: str, groups: list[GroupSummary], value_label: str) -> list[str]:
    lines = [
        title,
        f"  {'Key':<18}{'Count':<10}{value_label:<18}{'Avg LOC':<10}Issues",
        "  " + "-" * 62,
    ]
    for group in groups:
        avg_loc = "-" if group.average_loc is None else f"{group.average_loc:.1f}"
        lines.append(
            f"  {group.key:<18}{group.count:<10}{group.average:<18.3f}"
            f"{avg_loc:<10}{group.issue_count}"
        )
    return lines


def format_statistics(statistics: Statistics | None, batch: BatchResult) -> str:
    """Render the summary printed after a batch run.

    ``statistics`` is None when no file was analyzed successfully.
    """
    lines = [
        "Statistics:",
        RULE,
        f"  Total files analyzed: {batch.analyzed_files}",
        f"  Failed files: {batch.failed_files}",
    ]
    if statistics is None:
        lines.append("  No files were analyzed; no statistics to report.")
        return "\n".join(lines) + "\n"

    score_label = (
        "Average complexity"
        if statistics.variant == "complexity"
        else "Average violation rate"
    )
    lines += [
        f"  Average LOC per file: {statistics.avg_loc:.1f}",
        f"  {score_label}: {statistics.avg_score:.3f}",
        f"  Average dependencies per file: {statistics.avg_fan_out:.1f}",
        f"  Issues: {statistics.issue_count} "
        f"({statistics.warning_count} warnings, {statistics.error_count} errors)",
        "",
        "Distribution:",
    ]
    for bucket in statistics.distribution:
        percentage = bucket.count / statistics.file_count * 100
        lines.append(
            f"  {bucket.range}: {_bar(bucket.count, statistics.file_count)} "
            f"{bucket.count} ({percentage:.1f}%)"
        )

    lines += ["", f"Top {len(statistics.top_files)} files:"]
    for idx, ranked in enumerate(statistics.top_files, 1):
        lines.append(f"  {idx}. {ranked.path}")
        lines.append(
            f"     Score: {ranked.score:.3f}, LOC: {ranked.loc}, "
            f"Issues: {ranked.issues}"
        )

    lines.append("")
    lines += _group_table("Symbol types:", statistics.symbol_kinds, "Avg Score")
    if statistics.variant == "quality":
        lines.append("")
        lines += _group_table("Metrics:", statistics.metric_summaries, "Avg Value")
    return "\n".join(lines) + "\n"


__all__ = ["format_statistics"]
