"""File discovery for batch analysis."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

from errors import DiscoveryError

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterator

logger = logging.getLogger(__name__)


def is_source_file(name: str, extension: str, declaration_suffix: str) -> bool:
    """Return True for ``*.<ext>`` names that are not ``*.d.<ext>``."""
    return name.endswith(extension) and not name.endswith(declaration_suffix)


def _build_gitignore_matcher(root: Path) -> Callable[[str], bool] | None:
    gitignore_path = root.resolve() / ".gitignore"
    if gitignore_path.is_file() and not gitignore_path.is_symlink():
        return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
    return None


def _walk(
    directory: Path,
    *,
    extension: str,
    declaration_suffix: str,
    exclude_dirs: Collection[str],
    on_error: Callable[[DiscoveryError], None] | None,
) -> Iterator[Path]:
    """Yield matching files depth-first, entries in name order."""
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        error = DiscoveryError(str(directory), exc.strerror or str(exc))
        logger.warning("%s", error)
        if on_error is not None:
            on_error(error)
        return

    for entry in entries:
        if entry.is_symlink():
            continue
        if entry.is_dir(follow_symlinks=False):
            if entry.name in exclude_dirs:
                continue
            yield from _walk(
                Path(entry.path),
                extension=extension,
                declaration_suffix=declaration_suffix,
                exclude_dirs=exclude_dirs,
                on_error=on_error,
            )
        elif entry.is_file(follow_symlinks=False) and is_source_file(
            entry.name, extension, declaration_suffix
        ):
            yield Path(entry.path)


def find_source_files(
    root: Path,
    base_dir: Path | None = None,
    *,
    extension: str = ".ts",
    declaration_suffix: str = ".d.ts",
    exclude_dirs: Collection[str] = (),
    on_error: Callable[[DiscoveryError], None] | None = None,
    respect_gitignore: bool = False,
) -> list[str]:
    """Find all source files under a directory.

    Args:
        root: Directory to search
        base_dir: Directory the returned paths are relative to (default: cwd)
        extension: File name suffix that marks a source file
        declaration_suffix: Suffix of declaration-only files to skip
        exclude_dirs: Directory names skipped at any depth (exact match)
        on_error: Called with a DiscoveryError for each unreadable directory;
            traversal continues with the next sibling
        respect_gitignore: Skip files matched by ``root/.gitignore``

    Returns:
        POSIX paths relative to ``base_dir``, in depth-first name order.
    """
    base = Path.cwd() if base_dir is None else base_dir
    excluded = frozenset(exclude_dirs)
    gitignore_matches = _build_gitignore_matcher(root) if respect_gitignore else None

    files: list[str] = []
    for path in _walk(
        root,
        extension=extension,
        declaration_suffix=declaration_suffix,
        exclude_dirs=excluded,
        on_error=on_error,
    ):
        if gitignore_matches is not None and gitignore_matches(str(path.resolve())):
            continue
        files.append(Path(os.path.relpath(path, base)).as_posix())
    return files


__all__ = ["find_source_files", "is_source_file"]
