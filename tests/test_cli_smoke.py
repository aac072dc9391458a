from __future__ import annotations

import json
import os
import stat
import sys
from pathlib import Path

import pytest

from cli import main
from contract.artifacts import (
    FILES_CSV,
    METRICS_CSV,
    RESULTS_JSON,
    STATISTICS_JSON,
    SYMBOLS_CSV,
)

posix_only = pytest.mark.skipif(
    os.name == "nt",
    reason="Fake analyzer relies on POSIX shebang execution.",
)

# Treats each source file's content as the JSON record to print; a file
# starting with "FAIL" makes the analyzer exit non-zero.
FAKE_ANALYZER = """\
#!{python}
import json
import sys

path = sys.argv[2]
with open(path, encoding="utf-8") as handle:
    text = handle.read()
if text.startswith("FAIL"):
    sys.stderr.write("syntax error")
    sys.exit(1)
record = json.loads(text)
record["path"] = path
sys.stdout.write(json.dumps(record))
"""


def _write_fake_analyzer(directory: Path) -> Path:
    script = directory / "fake-analyzer"
    script.write_text(FAKE_ANALYZER.format(python=sys.executable), encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _write_packages(root: Path) -> None:
    _write(
        root / "core" / "index.ts",
        json.dumps(
            {
                "loc": 10,
                "complexity": 0.1,
                "symbols": [
                    {"kind": "function", "name": "boot", "loc": 8, "complexity": 0.2}
                ],
                "metrics": [
                    {"name": "entropy", "value": 0.5, "severity": "warning"}
                ],
            }
        ),
    )
    _write(root / "core" / "util.ts", json.dumps({"loc": 20, "complexity": 0.9}))
    _write(root / "core" / "broken.ts", "FAIL")
    _write(root / "core" / "types.d.ts", "not analyzed")
    _write(root / "node_modules" / "dep" / "index.ts", "not analyzed")


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    _write_packages(tmp_path / "packages")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_cli_without_target_prints_usage(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)

    exit_code = main([])

    assert exit_code == 1
    assert "Usage: batchstats <target-directory>" in capsys.readouterr().err


def test_cli_missing_target_directory_is_fatal(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)

    exit_code = main([str(tmp_path / "missing")])

    assert exit_code == 1
    assert "Target directory does not exist" in capsys.readouterr().err


def test_cli_invalid_config_is_fatal(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "batchstats.toml").write_text("bogus = 1", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    exit_code = main([str(tmp_path)])

    assert exit_code == 1
    assert "Invalid config" in capsys.readouterr().err


def test_cli_invalid_override_is_fatal(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)

    exit_code = main([str(tmp_path), "--workers", "0"])

    assert exit_code == 1
    assert "Invalid command-line option" in capsys.readouterr().err


@posix_only
def test_cli_run_smoke(workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
    analyzer = _write_fake_analyzer(workspace)
    out_dir = workspace / "reports"

    exit_code = main(["packages", str(analyzer), "--out-dir", str(out_dir)])

    assert exit_code == 0
    for name in (RESULTS_JSON, STATISTICS_JSON, FILES_CSV, SYMBOLS_CSV):
        assert (out_dir / name).is_file()
    assert not (out_dir / METRICS_CSV).exists()

    report = json.loads((out_dir / RESULTS_JSON).read_text(encoding="utf-8"))
    assert report["totalFiles"] == 3
    assert report["analyzedFiles"] == 2
    assert report["failedFiles"] == 1
    assert [r["path"] for r in report["results"]] == [
        "packages/core/index.ts",
        "packages/core/util.ts",
    ]
    assert report["errors"] == [
        {
            "path": "packages/core/broken.ts",
            "error": "syntax error",
            "kind": "exit_status",
        }
    ]

    out = capsys.readouterr().out
    assert "Found 3 .ts files" in out
    assert "Processing: 100.0% (3/3)" in out
    assert "Average LOC per file: 15.0" in out
    assert "0.8-1.0" in out


@posix_only
def test_cli_run_quality_variant_with_workers(workspace: Path) -> None:
    analyzer = _write_fake_analyzer(workspace)
    out_dir = workspace / "reports"

    exit_code = main(
        [
            "packages",
            str(analyzer),
            "--out-dir",
            str(out_dir),
            "--variant",
            "quality",
            "--workers",
            "3",
        ]
    )

    assert exit_code == 0
    assert (out_dir / METRICS_CSV).is_file()
    statistics = json.loads((out_dir / STATISTICS_JSON).read_text(encoding="utf-8"))
    assert statistics["variant"] == "quality"
    assert statistics["warning_count"] == 1


@posix_only
def test_cli_run_with_no_analyzable_files(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "empty").mkdir()
    monkeypatch.chdir(tmp_path)

    exit_code = main(["empty", str(_write_fake_analyzer(tmp_path))])

    assert exit_code == 0
    assert "no statistics to report" in capsys.readouterr().out
    assert (tmp_path / RESULTS_JSON).is_file()
    assert not (tmp_path / STATISTICS_JSON).exists()


@posix_only
def test_cli_validate_and_verify_after_run(
    workspace: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    analyzer = _write_fake_analyzer(workspace)
    out_dir = workspace / "reports"
    assert main(["packages", str(analyzer), "--out-dir", str(out_dir)]) == 0

    assert main(["--validate", "--out-dir", str(out_dir)]) == 0
    assert main(["--verify", "--out-dir", str(out_dir)]) == 0

    (out_dir / FILES_CSV).write_text("File\n", encoding="utf-8")
    capsys.readouterr()

    assert main(["--verify", "--out-dir", str(out_dir)]) == 1
    assert f"mismatches: {FILES_CSV}" in capsys.readouterr().err


def test_cli_validate_includes_path_and_message(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    reports_dir = tmp_path / "missing-reports"

    exit_code = main(["--validate", "--out-dir", str(reports_dir)])

    assert exit_code == 1
    captured = capsys.readouterr()
    assert f"{reports_dir}:" in captured.err
    assert "Reports directory does not exist." in captured.err


def test_cli_verify_missing_reports_dir_reports_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    reports_dir = tmp_path / "missing-reports"

    exit_code = main(["--verify", "--out-dir", str(reports_dir)])

    assert exit_code == 2
    captured = capsys.readouterr()
    assert f"reports-dir: {reports_dir}" in captured.err
    assert "Reports directory does not exist" in captured.err


def test_cli_validate_and_verify_are_exclusive() -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["--validate", "--verify"])

    assert exc_info.value.code == 2


@posix_only
def test_cli_verify_uses_variant_recorded_in_reports(
    workspace: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    analyzer = _write_fake_analyzer(workspace)
    out_dir = workspace / "reports"
    run = ["packages", str(analyzer), "--out-dir", str(out_dir)]
    assert main([*run, "--variant", "quality"]) == 0

    assert main(["--verify", "--out-dir", str(out_dir)]) == 0
    assert main(["--validate", "--out-dir", str(out_dir)]) == 0
    capsys.readouterr()

    assert main(["--verify", "--out-dir", str(out_dir), "--variant", "complexity"]) == 1
    assert f"extra: {METRICS_CSV}" in capsys.readouterr().err
