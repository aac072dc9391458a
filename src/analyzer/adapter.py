"""Adapter around the external per-file analyzer executable.

The analyzer is invoked once per file as::

    <binary> view <path> --format json

and must print a single JSON object on stdout. Any other outcome becomes an
AnalysisError; a partially parsed record is never returned.
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
import threading
from typing import TYPE_CHECKING, Any

import orjson
from pydantic import ValidationError

from artifacts.models.artifacts.records import SourceFileRecord
from errors import AnalysisError, AnalysisErrorKind

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_MAX_OUTPUT_BYTES = 10 * 1024 * 1024
_READ_CHUNK = 64 * 1024


class _BoundedReader:
    """Drains a pipe on a background thread, stopping at a byte ceiling."""

    def __init__(self, proc: subprocess.Popen[bytes], limit: int):
        self._proc = proc
        self._limit = limit
        self._chunks: list[bytes] = []
        self._size = 0
        self.overflowed = False
        self._thread = threading.Thread(target=self._drain, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def join(self) -> None:
        self._thread.join()

    def _drain(self) -> None:
        stream = self._proc.stdout
        assert stream is not None
        while True:
            chunk = stream.read(_READ_CHUNK)
            if not chunk:
                return
            self._size += len(chunk)
            if self._size > self._limit:
                self.overflowed = True
                self._proc.kill()
                return
            self._chunks.append(chunk)

    def getvalue(self) -> bytes:
        return b"".join(self._chunks)


class AnalyzerAdapter:
    """Runs the analyzer for one file and parses its JSON record."""

    def __init__(
        self,
        binary: str,
        *,
        max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
        timeout: float | None = None,
        cwd: Path | None = None,
    ):
        self.binary = binary
        self.max_output_bytes = max_output_bytes
        self.timeout = timeout
        self.cwd = cwd

    def command(self, path: str) -> list[str]:
        return [self.binary, "view", path, "--format", "json"]

    def __call__(self, path: str) -> SourceFileRecord:
        return self.analyze(path)

    def analyze(self, path: str) -> SourceFileRecord:
        """Analyze one file.

        Raises:
            AnalysisError: The analyzer could not be started, timed out,
                exited non-zero, produced too much output, or printed
                something that is not a valid record.
        """
        stdout = self._run(path)
        return self._parse(path, stdout)

    def _run(self, path: str) -> bytes:
        cmd = self.command(path)
        logger.debug("Running analyzer: %s", cmd)

        with tempfile.TemporaryFile() as stderr_file:
            try:
                proc = subprocess.Popen(
                    cmd,
                    stdout=subprocess.PIPE,
                    stderr=stderr_file,
                    stdin=subprocess.DEVNULL,
                    cwd=self.cwd,
                )
            except OSError as exc:
                msg = f"Cannot run analyzer {self.binary}: {exc.strerror or exc}"
                raise AnalysisError(path, msg, AnalysisErrorKind.NOT_FOUND) from exc

            with proc:
                reader = _BoundedReader(proc, self.max_output_bytes)
                reader.start()
                try:
                    returncode = proc.wait(timeout=self.timeout)
                except subprocess.TimeoutExpired as exc:
                    proc.kill()
                    proc.wait()
                    reader.join()
                    msg = f"Analyzer timed out after {self.timeout:g}s"
                    raise AnalysisError(path, msg, AnalysisErrorKind.TIMEOUT) from exc
                reader.join()

            if reader.overflowed:
                msg = f"Analyzer output exceeded {self.max_output_bytes} bytes"
                raise AnalysisError(path, msg, AnalysisErrorKind.OUTPUT_TOO_LARGE)

            if returncode != 0:
                stderr_file.seek(0)
                stderr = stderr_file.read().decode("utf-8", errors="replace").strip()
                msg = stderr or f"analyzer exited with status {returncode}"
                raise AnalysisError(path, msg, AnalysisErrorKind.EXIT_STATUS)

        return reader.getvalue()

    def _parse(self, path: str, stdout: bytes) -> SourceFileRecord:
        try:
            payload: Any = orjson.loads(stdout)
        except orjson.JSONDecodeError as exc:
            msg = f"Analyzer printed invalid JSON: {exc}"
            raise AnalysisError(path, msg, AnalysisErrorKind.MALFORMED_OUTPUT) from exc

        if not isinstance(payload, dict):
            msg = f"Expected a JSON object, got {type(payload).__name__}"
            raise AnalysisError(path, msg, AnalysisErrorKind.MALFORMED_OUTPUT)

        payload.setdefault("path", path)
        try:
            return SourceFileRecord.model_validate(payload)
        except ValidationError as exc:
            msg = f"Analyzer record failed validation: {exc}"
            raise AnalysisError(path, msg, AnalysisErrorKind.INVALID_RECORD) from exc


__all__ = ["DEFAULT_MAX_OUTPUT_BYTES", "AnalyzerAdapter"]
