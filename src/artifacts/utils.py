"""Utility functions for report writing."""

from __future__ import annotations

import csv
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import orjson

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path


def _to_dict(obj: object) -> object:
    """Convert object to dict for JSON serialization."""
    if hasattr(obj, "to_report"):
        return obj.to_report()
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    return obj


def _write_json(path: Path, obj: object) -> None:
    payload = _to_dict(obj)
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    path.write_bytes(orjson.dumps(payload, option=opts) + b"\n")


def _load_json(path: Path) -> Any:
    return orjson.loads(path.read_bytes())


def _write_csv(
    path: Path, header: Sequence[str], rows: Iterable[Sequence[object]]
) -> None:
    with path.open("w", encoding="utf-8", newline="") as f:
        csv.writer(f, lineterminator="\n").writerow(header)
        # Text fields are quoted; numbers and None (empty) stay bare.
        writer = csv.writer(f, lineterminator="\n", quoting=csv.QUOTE_STRINGS)
        writer.writerows(rows)


def _fixed(value: float | None, precision: int) -> Decimal | None:
    """Round a number to fixed precision; None becomes an empty field."""
    if value is None:
        return None
    return Decimal(f"{value:.{precision}f}")
