"""Folder derivation and deterministic grouping of parsed files."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from clovercov.core.model.stats import FileRecord, Folder

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(frozen=True, slots=True)
class SourceFile:
    """A parsed file before grouping: its canonical path plus its record."""

    path: str
    record: FileRecord


def split_path(path: str) -> tuple[str, str]:
    """Return ``(folder, name)`` for a ``/``-separated *path*.

    >>> split_path("src/a/b.ts")
    ('src/a', 'b.ts')
    >>> split_path("b.ts")
    ('', 'b.ts')
    """
    folder, _, name = path.rpartition("/")
    return folder, name or path


def sort_files(files: Iterable[SourceFile]) -> list[SourceFile]:
    # stable: equal paths keep discovery order
    return sorted(files, key=lambda f: f.path)


def group_files(files: Iterable[SourceFile]) -> dict[str, Folder]:
    """Group *files* into folders keyed by directory path.

    Files are sorted by full path first; folders appear in the order they are
    first seen. A later file with the same name replaces the earlier one.
    """
    folders: dict[str, Folder] = {}
    for f in sort_files(files):
        key, _ = split_path(f.path)
        folder = folders.get(key)
        if folder is None:
            folder = folders[key] = Folder(name=key)
        folder.put(f.record)
    return folders


__all__ = ["SourceFile", "group_files", "sort_files", "split_path"]
