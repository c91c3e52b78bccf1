from __future__ import annotations

from dataclasses import dataclass

from clovercov.core.model.types import FRACTION_DIGITS, FULL_COVERAGE, PERCENT_DIGITS, MetricKind
from clovercov.errors import ConfigurationError


def as_percent(fraction: float) -> float:
    """Scale a 0..1 fraction to a percentage with two decimals."""
    return round(fraction * FULL_COVERAGE, PERCENT_DIGITS)


@dataclass(frozen=True, slots=True)
class Ratio:
    """A covered/total pair.

    ``fraction`` is vacuously ``1.0`` for an empty total; otherwise it is
    ``covered / total`` rounded to four decimals. Construction never raises,
    ``covered > total`` is rejected by the ingestion layer instead.
    """

    total: int
    covered: int

    @property
    def fraction(self) -> float:
        if self.total == 0:
            return 1.0
        return round(self.covered / self.total, FRACTION_DIGITS)

    @property
    def percent(self) -> float:
        return as_percent(self.fraction)

    @property
    def missed(self) -> int:
        return max(self.total - self.covered, 0)

    def __add__(self, other: Ratio) -> Ratio:
        if not isinstance(other, Ratio):
            return NotImplemented
        return Ratio(total=self.total + other.total, covered=self.covered + other.covered)


EMPTY = Ratio(total=0, covered=0)


def metric_kind(name: MetricKind | str) -> MetricKind:
    """Resolve *name* to a :class:`MetricKind`, rejecting unknown names."""
    try:
        return MetricKind(str(name).strip().lower())
    except ValueError as exc:
        choices = ", ".join(k.value for k in MetricKind)
        msg = f"unknown coverage metric: {name!r} (expected one of: {choices})"
        raise ConfigurationError(msg) from exc


@dataclass(frozen=True, slots=True)
class MetricSet:
    """Line, method and branch ratios of one file or of the whole project."""

    lines: Ratio = EMPTY
    methods: Ratio = EMPTY
    branches: Ratio = EMPTY

    def get(self, kind: MetricKind | str) -> Ratio:
        resolved = metric_kind(kind)
        if resolved is MetricKind.LINES:
            return self.lines
        if resolved is MetricKind.METHODS:
            return self.methods
        return self.branches

    def __add__(self, other: MetricSet) -> MetricSet:
        if not isinstance(other, MetricSet):
            return NotImplemented
        return MetricSet(
            lines=self.lines + other.lines,
            methods=self.methods + other.methods,
            branches=self.branches + other.branches,
        )


__all__ = ["EMPTY", "MetricSet", "Ratio", "as_percent", "metric_kind"]
