from __future__ import annotations

import pytest

from artifacts.models.artifacts.records import (
    OutgoingRelation,
    QualityMetric,
    SourceFileRecord,
    SymbolRecord,
)
from artifacts.summaries.profiles import (
    complexity_profile,
    profile_for,
    quality_profile,
    violation_rate,
)
from artifacts.summaries.statistics import compute_statistics
from batch.collector import run_batch
from errors import AnalysisError, AnalysisErrorKind, NoDataError
from rules.config import StatisticsConfig


def _file(path: str, loc: int, complexity: float, **kwargs: object) -> SourceFileRecord:
    return SourceFileRecord(path=path, loc=loc, complexity=complexity, **kwargs)


def test_two_file_scenario() -> None:
    results = [
        _file(
            "a.ts",
            10,
            0.1,
            symbols=[SymbolRecord(kind="function", name="f", loc=5, complexity=0.3)],
        ),
        _file(
            "b.ts",
            20,
            0.9,
            outgoing=[OutgoingRelation(target="./a", relation="import", strength=1.0)],
        ),
    ]

    stats = compute_statistics(results)

    assert stats.variant == "complexity"
    assert stats.file_count == 2
    assert stats.symbol_count == 1
    assert stats.dependency_count == 1
    assert stats.avg_loc == 15.0
    assert stats.avg_score == pytest.approx(0.5)
    assert stats.avg_fan_out == 0.5
    assert [b.count for b in stats.distribution] == [1, 0, 0, 0, 1]
    assert stats.distribution[-1].range == "0.8-1.0"
    assert [f.path for f in stats.top_files] == ["b.ts", "a.ts"]
    assert stats.top_symbols[0].symbol == "function:f"
    assert stats.top_symbols[0].file == "a.ts"
    assert stats.relation_kinds[0].key == "import"


def test_ties_rank_in_batch_order() -> None:
    results = [
        _file("first.ts", 1, 0.9),
        _file("second.ts", 1, 0.3),
        _file("third.ts", 1, 0.9),
        _file("fourth.ts", 1, 0.3),
    ]

    stats = compute_statistics(results)

    assert [f.path for f in stats.top_files] == [
        "first.ts",
        "third.ts",
        "second.ts",
        "fourth.ts",
    ]


def test_rankings_are_truncated() -> None:
    results = [
        _file(
            f"f{i:02d}.ts",
            i,
            i / 30,
            symbols=[
                SymbolRecord(kind="function", name=f"s{i}", loc=1, complexity=i / 30)
            ],
        )
        for i in range(25)
    ]

    stats = compute_statistics(results, top_files=10, top_symbols=20)

    assert len(stats.top_files) == 10
    assert len(stats.top_symbols) == 20
    assert stats.top_files[0].path == "f24.ts"
    assert sum(b.count for b in stats.distribution) == stats.file_count == 25


def test_empty_input_is_no_data() -> None:
    with pytest.raises(NoDataError):
        compute_statistics([])


def test_compute_statistics_is_idempotent() -> None:
    results = [_file("a.ts", 10, 0.25), _file("b.ts", 30, 0.75)]

    first = compute_statistics(results)
    second = compute_statistics(results)

    assert first == second
    assert first.model_dump() == second.model_dump()


def test_missing_complexity_counts_as_zero() -> None:
    stats = compute_statistics([SourceFileRecord(path="a.ts", loc=4)])

    assert stats.avg_score == 0.0
    assert stats.distribution[0].count == 1


def test_symbol_kinds_summarize_counts_and_averages() -> None:
    symbols = [
        SymbolRecord(kind="function", name="a", loc=10, complexity=0.2),
        SymbolRecord(kind="function", name="b", loc=30, complexity=0.6),
        SymbolRecord(kind="class", name="C", loc=50, complexity=0.5),
    ]

    stats = compute_statistics([_file("a.ts", 90, 0.4, symbols=symbols)])

    kinds = {group.key: group for group in stats.symbol_kinds}
    assert [group.key for group in stats.symbol_kinds] == ["function", "class"]
    assert kinds["function"].count == 2
    assert kinds["function"].average == pytest.approx(0.4)
    assert kinds["function"].average_loc == pytest.approx(20.0)
    assert kinds["class"].average_loc == pytest.approx(50.0)


def test_complexity_threshold_flags_warnings() -> None:
    results = [
        _file(
            "a.ts",
            10,
            0.9,
            symbols=[SymbolRecord(kind="function", name="f", loc=5, complexity=0.95)],
        ),
        _file("b.ts", 10, 0.2),
    ]

    stats = compute_statistics(results, complexity_profile(threshold=0.8))

    assert stats.warning_count == 2
    assert stats.issue_count == 2
    assert stats.top_files[0].issues == 2
    assert stats.top_files[1].issues == 0
    assert stats.symbol_kinds[0].warning_count == 1


def test_quality_variant_summarizes_metrics() -> None:
    results = [
        SourceFileRecord(
            path="a.ts",
            loc=100,
            comment_lines=10,
            blank_lines=5,
            metrics=[
                QualityMetric(name="entropy", value=0.4),
                QualityMetric(
                    name="duplication",
                    value=0.3,
                    threshold=0.2,
                    severity="warning",
                    message="duplicated block",
                ),
            ],
            symbols=[
                SymbolRecord(
                    kind="function",
                    name="handler",
                    loc=40,
                    metrics=[
                        QualityMetric(
                            name="nesting", value=6, threshold=4, severity="error"
                        ),
                        QualityMetric(name="entropy", value=0.7),
                    ],
                )
            ],
        ),
        SourceFileRecord(
            path="b.ts",
            loc=20,
            comment_lines=2,
            blank_lines=1,
            metrics=[QualityMetric(name="entropy", value=0.1)],
        ),
    ]

    stats = compute_statistics(results, quality_profile())

    assert stats.variant == "quality"
    assert stats.warning_count == 1
    assert stats.error_count == 1
    assert stats.issue_count == 2
    assert stats.avg_comment_lines == 6.0
    assert stats.avg_blank_lines == 3.0
    assert stats.avg_score == pytest.approx((2 / 4 + 0.0) / 2)
    assert [f.path for f in stats.top_files] == ["a.ts", "b.ts"]
    assert stats.top_files[0].score == 2.0
    assert stats.top_symbols[0].symbol == "function:handler"
    assert stats.top_symbols[0].score == 1.0

    summaries = {group.key: group for group in stats.metric_summaries}
    assert stats.metric_summaries[0].key == "entropy"
    assert summaries["entropy"].count == 3
    assert summaries["entropy"].average == pytest.approx(0.4)
    assert summaries["entropy"].max_value == pytest.approx(0.7)
    assert summaries["duplication"].warning_count == 1
    assert summaries["nesting"].error_count == 1


def test_violation_rate_without_metrics_is_zero() -> None:
    assert violation_rate(SourceFileRecord(path="a.ts", loc=1)) == 0.0


def test_profile_for_selects_variant() -> None:
    assert profile_for(StatisticsConfig()).name == "complexity"
    assert profile_for(StatisticsConfig(variant="quality")).name == "quality"
    assert profile_for(StatisticsConfig(buckets=10)).buckets == 10


def test_three_file_batch_with_one_failure() -> None:
    records = {
        "a.ts": _file("a.ts", 10, 0.1),
        "b.ts": _file("b.ts", 20, 0.9),
    }

    def _analyze(path: str) -> SourceFileRecord:
        if path not in records:
            raise AnalysisError(path, "syntax error", AnalysisErrorKind.EXIT_STATUS)
        return records[path]

    batch = run_batch(["a.ts", "b.ts", "c.ts"], _analyze)
    stats = compute_statistics(batch.results)

    assert (batch.total_files, batch.analyzed_files, batch.failed_files) == (3, 2, 1)
    assert stats.avg_loc == 15.0
    last = stats.distribution[-1]
    assert (last.min, last.max, last.count) == (0.8, 1.0, 1)
