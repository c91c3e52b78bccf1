from clovercov._meta import __version__, logger
from clovercov.api import (
    ChangeKind,
    CloverCovError,
    ConfigurationError,
    CoreConfig,
    Limits,
    MalformedReportError,
    MetricKind,
    ParseError,
    ProjectStats,
    Ratio,
    TouchedFile,
    check_thresholds,
    compare_metric,
    filter_stats,
    ingest,
)

__all__ = [
    "ChangeKind",
    "CloverCovError",
    "ConfigurationError",
    "CoreConfig",
    "Limits",
    "MalformedReportError",
    "MetricKind",
    "ParseError",
    "ProjectStats",
    "Ratio",
    "TouchedFile",
    "__version__",
    "check_thresholds",
    "compare_metric",
    "filter_stats",
    "ingest",
    "logger",
]
