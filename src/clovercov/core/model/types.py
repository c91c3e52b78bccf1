"""Shared enumerations and constants used across clovercov."""

from __future__ import annotations

from enum import StrEnum

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class MetricKind(StrEnum):
    """The three coverage metrics tracked for a file or a project."""

    LINES = "lines"
    METHODS = "methods"
    BRANCHES = "branches"


class ChangeKind(StrEnum):
    """Outcome of comparing a metric against its baseline."""

    EQUAL = "equal"
    INCREASED = "increased"
    DECREASED = "decreased"
    NEW = "new"  # no counterpart in the baseline


FULL_COVERAGE: int = 100

# Precision of stored fractions and of percentages surfaced to callers.
FRACTION_DIGITS: int = 4
PERCENT_DIGITS: int = 2


__all__ = [
    "FRACTION_DIGITS",
    "FULL_COVERAGE",
    "PERCENT_DIGITS",
    "ChangeKind",
    "MetricKind",
]
