"""File selection predicates for :class:`ProjectStats`.

Every active predicate must accept a file for it to be kept; folders left
without files are removed.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from clovercov._meta import logger
from clovercov.core.model.metrics import as_percent, metric_kind
from clovercov.core.model.stats import Folder, ProjectStats
from clovercov.core.model.types import FULL_COVERAGE, MetricKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from clovercov.core.model.stats import FileRecord

FilePredicate = Callable[["FileRecord", str], bool]
"""Called with a file and its folder key; ``True`` keeps the file."""


def coverage_presence() -> FilePredicate:
    """Keep files with at least one covered line."""

    def keep(f: FileRecord, _folder: str) -> bool:
        return f.metrics.lines.covered != 0

    return keep


def coverable_lines_presence() -> FilePredicate:
    """Keep files with at least one coverable line."""

    def keep(f: FileRecord, _folder: str) -> bool:
        return f.metrics.lines.total != 0

    return keep


def _between(value: float, low: float, high: float) -> bool:
    v = 0.0 if math.isnan(value) else value
    return low <= v <= high


def percent_range(kind: MetricKind | str, low: float, high: float) -> FilePredicate:
    """Keep files whose *kind* percentage lies in ``[low, high]``."""
    resolved = metric_kind(kind)

    def keep(f: FileRecord, _folder: str) -> bool:
        return _between(f.metrics.get(resolved).percent, low, high)

    return keep


def delta_magnitude(kind: MetricKind | str, min_delta: float, baseline: ProjectStats) -> FilePredicate:
    """Keep new files and files whose *kind* changed by more than *min_delta* points."""
    resolved = metric_kind(kind)

    def keep(f: FileRecord, folder: str) -> bool:
        previous = baseline.get(folder, f.name)
        if previous is None:
            return True
        change = f.metrics.get(resolved).fraction - previous.metrics.get(resolved).fraction
        return abs(as_percent(change)) > min_delta

    return keep


def filter_stats(stats: ProjectStats, predicates: Sequence[FilePredicate]) -> ProjectStats:
    """Return a copy of *stats* keeping only files accepted by every predicate.

    The input is not modified; ``total`` is carried over unchanged. Without
    predicates *stats* itself is returned.
    """
    if not predicates:
        return stats
    folders: dict[str, Folder] = {}
    for key, folder in stats.folders.items():
        files = [f for f in folder.files if all(p(f, key) for p in predicates)]
        if files:
            folders[key] = Folder(name=folder.name, files=files)
        else:
            logger.debug("filter dropped folder %r", key)
    return ProjectStats(total=stats.total, folders=folders)


@dataclass(frozen=True, slots=True)
class FilterOptions:
    """Report selection knobs.

    only_with_cover:
        Drop files without any covered line.
    only_with_coverable_lines:
        Drop files without coverable lines.
    kind:
        Metric the percentage range and change filters look at.
    above, below:
        Inclusive percentage range; inactive at ``0`` and ``100``.
    min_change:
        Minimum change in percentage points against the baseline; inactive at ``0``.
    """

    only_with_cover: bool = False
    only_with_coverable_lines: bool = False
    kind: MetricKind = MetricKind.LINES
    above: float = 0.0
    below: float = float(FULL_COVERAGE)
    min_change: float = 0.0


def build_predicates(options: FilterOptions, baseline: ProjectStats | None = None) -> list[FilePredicate]:
    predicates: list[FilePredicate] = []
    if options.only_with_cover:
        predicates.append(coverage_presence())
    if options.only_with_coverable_lines:
        predicates.append(coverable_lines_presence())
    if options.above > 0 or options.below < FULL_COVERAGE:
        predicates.append(percent_range(options.kind, options.above, options.below))
    if options.min_change > 0 and baseline is not None:
        predicates.append(delta_magnitude(options.kind, options.min_change, baseline))
    return predicates


__all__ = [
    "FilePredicate",
    "FilterOptions",
    "build_predicates",
    "coverable_lines_presence",
    "coverage_presence",
    "delta_magnitude",
    "filter_stats",
    "percent_range",
]
