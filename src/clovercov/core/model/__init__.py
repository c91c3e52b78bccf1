"""Domain model for clovercov (pure types; no IO)."""

from .metrics import EMPTY, MetricSet, Ratio, as_percent, metric_kind
from .stats import FileRecord, Folder, LineCoverageEntry, MethodCoverageEntry, ProjectStats
from .types import ChangeKind, MetricKind

__all__ = [
    "EMPTY",
    "ChangeKind",
    "FileRecord",
    "Folder",
    "LineCoverageEntry",
    "MethodCoverageEntry",
    "MetricKind",
    "MetricSet",
    "ProjectStats",
    "Ratio",
    "as_percent",
    "metric_kind",
]
