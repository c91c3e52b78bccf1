"""Coverage aggregation and diff engine (pure; no IO)."""

from clovercov.core.changeset import (
    TouchedFile,
    attribute,
    estimate_metrics,
    find_touched,
    hunk_ranges,
    parse_line_spec,
    parse_unified_diff,
)
from clovercov.core.compare import (
    Comparison,
    FileComparison,
    compare_file,
    compare_metric,
    compare_stats,
    compare_totals,
    delta,
)
from clovercov.core.config import LOG_FORMAT, CoreConfig
from clovercov.core.filters import (
    FilePredicate,
    FilterOptions,
    build_predicates,
    coverable_lines_presence,
    coverage_presence,
    delta_magnitude,
    filter_stats,
    percent_range,
)
from clovercov.core.grouping import SourceFile, group_files, split_path
from clovercov.core.thresholds import Limits, ThresholdsResult, check_thresholds, evaluate_thresholds, parse_limits

__all__ = [
    "LOG_FORMAT",
    "Comparison",
    "CoreConfig",
    "FileComparison",
    "FilePredicate",
    "FilterOptions",
    "Limits",
    "SourceFile",
    "ThresholdsResult",
    "TouchedFile",
    "attribute",
    "build_predicates",
    "check_thresholds",
    "compare_file",
    "compare_metric",
    "compare_stats",
    "compare_totals",
    "coverable_lines_presence",
    "coverage_presence",
    "delta",
    "delta_magnitude",
    "estimate_metrics",
    "evaluate_thresholds",
    "filter_stats",
    "find_touched",
    "group_files",
    "hunk_ranges",
    "parse_limits",
    "parse_line_spec",
    "parse_unified_diff",
    "percent_range",
    "split_path",
]
