"""Delta algebra between a current and a baseline :class:`ProjectStats`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from clovercov.core.model.metrics import as_percent
from clovercov.core.model.types import ChangeKind, MetricKind

if TYPE_CHECKING:
    from collections.abc import Iterator

    from clovercov.core.model.metrics import MetricSet, Ratio
    from clovercov.core.model.stats import FileRecord, ProjectStats


@dataclass(frozen=True, slots=True)
class Comparison:
    kind: ChangeKind
    delta_percent: float


@dataclass(frozen=True, slots=True)
class FileComparison:
    """Comparison of one current file against its baseline counterpart.

    ``metrics`` is empty for files that are new in the current stats.
    """

    folder: str
    file: FileRecord
    kind: ChangeKind
    metrics: dict[MetricKind, Comparison]


def delta(a: Ratio, b: Ratio) -> float:
    """Return ``a.fraction - b.fraction``; positive means *a* improved on *b*."""
    return a.fraction - b.fraction


def compare_metric(a: Ratio, b: Ratio) -> Comparison:
    if a.fraction == b.fraction:
        return Comparison(kind=ChangeKind.EQUAL, delta_percent=0.0)
    d = delta(a, b)
    kind = ChangeKind.INCREASED if d > 0 else ChangeKind.DECREASED
    return Comparison(kind=kind, delta_percent=as_percent(d))


def compare_metric_sets(a: MetricSet, b: MetricSet) -> dict[MetricKind, Comparison]:
    return {kind: compare_metric(a.get(kind), b.get(kind)) for kind in MetricKind}


def compare_file(folder: str, record: FileRecord, baseline: ProjectStats) -> FileComparison:
    previous = baseline.get(folder, record.name)
    if previous is None:
        return FileComparison(folder=folder, file=record, kind=ChangeKind.NEW, metrics={})
    metrics = compare_metric_sets(record.metrics, previous.metrics)
    return FileComparison(folder=folder, file=record, kind=metrics[MetricKind.LINES].kind, metrics=metrics)


def compare_stats(current: ProjectStats, baseline: ProjectStats) -> Iterator[FileComparison]:
    for folder, record in current.iter_files():
        yield compare_file(folder, record, baseline)


def compare_totals(current: ProjectStats, baseline: ProjectStats) -> dict[MetricKind, Comparison]:
    return compare_metric_sets(current.total, baseline.total)


__all__ = [
    "Comparison",
    "FileComparison",
    "compare_file",
    "compare_metric",
    "compare_metric_sets",
    "compare_stats",
    "compare_totals",
    "delta",
]
