"""Stable public API for clovercov.

Keep this module small and boring: it re-exports the supported entry points.
"""

from __future__ import annotations

from clovercov.core.changeset import TouchedFile
from clovercov.core.compare import compare_metric, compare_stats
from clovercov.core.config import CoreConfig
from clovercov.core.filters import FilterOptions, build_predicates, filter_stats
from clovercov.core.model import ChangeKind, FileRecord, Folder, MetricKind, MetricSet, ProjectStats, Ratio
from clovercov.core.thresholds import Limits, check_thresholds
from clovercov.errors import CloverCovError, ConfigurationError, MalformedReportError, ParseError
from clovercov.inputs.changes import load_changes, load_diff
from clovercov.inputs.clover import ingest

__all__ = [
    "ChangeKind",
    "CloverCovError",
    "ConfigurationError",
    "CoreConfig",
    "FileRecord",
    "FilterOptions",
    "Folder",
    "Limits",
    "MalformedReportError",
    "MetricKind",
    "MetricSet",
    "ParseError",
    "ProjectStats",
    "Ratio",
    "TouchedFile",
    "build_predicates",
    "check_thresholds",
    "compare_metric",
    "compare_stats",
    "filter_stats",
    "ingest",
    "load_changes",
    "load_diff",
]
