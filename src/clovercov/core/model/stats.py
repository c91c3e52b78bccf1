from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from clovercov.core.model.metrics import MetricSet
from clovercov.core.model.types import FULL_COVERAGE

if TYPE_CHECKING:
    from collections.abc import Iterator

CoveredPercent = Literal[0, 100]

# -----------------------------------------------------------------------------
# Per-file detail
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LineCoverageEntry:
    """Inclusive [start, end] run of lines sharing one covered/uncovered status."""

    start: int
    end: int
    covered_percent: CoveredPercent

    def __post_init__(self) -> None:
        """Validate that the range boundaries are sane."""
        if self.end < self.start:
            msg = "LineCoverageEntry.end must be >= start"
            raise ValueError(msg)
        if self.covered_percent not in {0, FULL_COVERAGE}:
            msg = "LineCoverageEntry.covered_percent must be 0 or 100"
            raise ValueError(msg)

    @property
    def covered(self) -> bool:
        return self.covered_percent == FULL_COVERAGE

    @property
    def line_count(self) -> int:
        return self.end - self.start + 1

    @property
    def label(self) -> str:
        return str(self.start) if self.start == self.end else f"{self.start}-{self.end}"


@dataclass(frozen=True, slots=True)
class MethodCoverageEntry:
    name: str
    covered_percent: CoveredPercent


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Coverage of a single source file; ``name`` carries no directory part."""

    name: str
    metrics: MetricSet
    line_coverage: tuple[LineCoverageEntry, ...] = ()
    method_coverage: tuple[MethodCoverageEntry, ...] = ()


# -----------------------------------------------------------------------------
# Hierarchy
# -----------------------------------------------------------------------------


@dataclass(slots=True)
class Folder:
    """Files sharing one directory; file names are unique within the folder."""

    name: str
    files: list[FileRecord] = field(default_factory=list)

    def get(self, name: str) -> FileRecord | None:
        for f in self.files:
            if f.name == name:
                return f
        return None

    def put(self, record: FileRecord) -> None:
        """Insert *record*, replacing a file of the same name in place."""
        for i, f in enumerate(self.files):
            if f.name == record.name:
                self.files[i] = record
                return
        self.files.append(record)


@dataclass(slots=True)
class ProjectStats:
    """Project-wide totals plus the folder -> file hierarchy.

    ``folders`` preserves discovery order. ``total`` is computed independently
    of the files (from the report's project metrics, or re-summed during
    change-set attribution) and need not equal the sum over ``folders``.
    """

    total: MetricSet
    folders: dict[str, Folder] = field(default_factory=dict)

    def get(self, folder: str, file: str) -> FileRecord | None:
        entry = self.folders.get(folder)
        return entry.get(file) if entry is not None else None

    def iter_files(self) -> Iterator[tuple[str, FileRecord]]:
        for key, folder in self.folders.items():
            for f in folder.files:
                yield key, f

    @property
    def file_count(self) -> int:
        return sum(len(folder.files) for folder in self.folders.values())


__all__ = [
    "CoveredPercent",
    "FileRecord",
    "Folder",
    "LineCoverageEntry",
    "MethodCoverageEntry",
    "ProjectStats",
]
