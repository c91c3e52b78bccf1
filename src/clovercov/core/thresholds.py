"""Coverage limit parsing and evaluation utilities."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from clovercov.core.model.metrics import as_percent
from clovercov.core.model.types import FULL_COVERAGE
from clovercov.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from clovercov.core.model.stats import ProjectStats

_LIMIT_PATTERN = re.compile(r"^[a-zA-Z_-]+=")

_KEYS = {
    "line": "min_line_coverage",
    "lines": "min_line_coverage",
    "method": "min_method_coverage",
    "methods": "min_method_coverage",
    "line-drop": "max_line_coverage_decrease",
    "lines-drop": "max_line_coverage_decrease",
    "method-drop": "max_method_coverage_decrease",
    "methods-drop": "max_method_coverage_decrease",
}


@dataclass(frozen=True, slots=True)
class Limits:
    """Configured coverage limits, in percent.

    A falsy value (``None`` or ``0``) disables the corresponding check.
    """

    min_line_coverage: float | None = None
    min_method_coverage: float | None = None
    max_line_coverage_decrease: float | None = None
    max_method_coverage_decrease: float | None = None

    def is_empty(self) -> bool:
        return not (
            self.min_line_coverage
            or self.min_method_coverage
            or self.max_line_coverage_decrease
            or self.max_method_coverage_decrease
        )


@dataclass(frozen=True, slots=True)
class ThresholdsResult:
    """Outcome of evaluating a set of limits."""

    passed: bool
    messages: list[str]


def _fmt(value: float) -> str:
    return f"{value:.2f}%"


def check_thresholds(
    current: ProjectStats,
    baseline: ProjectStats | None = None,
    limits: Limits | None = None,
) -> Iterator[str]:
    """Yield a message for every violated limit.

    Checks run in a fixed order: minimum line coverage, minimum method
    coverage, then (only with a *baseline*) maximum line decrease and maximum
    method decrease. Coverage equal to a minimum passes; a decrease equal to
    a maximum fails.
    """
    limits = limits or Limits()
    lines_now = as_percent(current.total.lines.fraction)
    methods_now = as_percent(current.total.methods.fraction)

    if limits.min_line_coverage and lines_now < limits.min_line_coverage:
        yield f"Minimum line coverage is {_fmt(limits.min_line_coverage)}, currently it is {_fmt(lines_now)}"

    if limits.min_method_coverage and methods_now < limits.min_method_coverage:
        yield (
            f"Minimum method coverage is {_fmt(limits.min_method_coverage)}, "
            f"currently it is {_fmt(methods_now)}"
        )

    if baseline is None:
        return

    line_drop = as_percent(baseline.total.lines.fraction - current.total.lines.fraction)
    if limits.max_line_coverage_decrease and line_drop >= limits.max_line_coverage_decrease:
        yield f"Line coverage was down by {_fmt(line_drop)} (max is {_fmt(limits.max_line_coverage_decrease)})"

    method_drop = as_percent(baseline.total.methods.fraction - current.total.methods.fraction)
    if limits.max_method_coverage_decrease and method_drop >= limits.max_method_coverage_decrease:
        yield (
            f"Methods coverage was down by {_fmt(method_drop)} "
            f"(max is {_fmt(limits.max_method_coverage_decrease)})"
        )


def evaluate_thresholds(
    current: ProjectStats,
    baseline: ProjectStats | None = None,
    limits: Limits | None = None,
) -> ThresholdsResult:
    messages = list(check_thresholds(current, baseline, limits))
    return ThresholdsResult(passed=not messages, messages=messages)


def parse_limits(expression: str) -> Limits:
    """Parse a limit expression like 'line=80,method=70,line-drop=5'."""
    if not expression or not expression.strip():
        msg = "limit expression must be non-empty"
        raise ConfigurationError(msg)

    values: dict[str, float] = {}
    tokens = [token.strip() for token in re.split(r"[,\s]+", expression) if token.strip()]
    for token in tokens:
        if "=" not in token or not _LIMIT_PATTERN.match(token):
            msg = f"invalid limit token: {token!r}"
            raise ConfigurationError(msg)

        key, raw_value = token.split("=", 1)
        key = key.strip().lower().replace("_", "-")
        field = _KEYS.get(key)
        if field is None:
            msg = f"unknown limit: {key!r}"
            raise ConfigurationError(msg)
        if field in values:
            msg = f"duplicate limit in {token!r}"
            raise ConfigurationError(msg)
        values[field] = _parse_percentage(raw_value.strip().rstrip("%"), token=token)

    return Limits(**values)


def _parse_percentage(value: str, *, token: str) -> float:
    try:
        percent = float(value)
    except ValueError as exc:
        msg = f"invalid percentage value in {token!r}: {value!r}"
        raise ConfigurationError(msg) from exc
    if not 0 <= percent <= float(FULL_COVERAGE):
        msg = f"percentage out of range in {token!r}: {percent}"
        raise ConfigurationError(msg)
    return percent


__all__ = [
    "Limits",
    "ThresholdsResult",
    "check_thresholds",
    "evaluate_thresholds",
    "parse_limits",
]
