from __future__ import annotations

import pytest

from clovercov.core.filters import (
    FilterOptions,
    build_predicates,
    coverable_lines_presence,
    coverage_presence,
    delta_magnitude,
    filter_stats,
    percent_range,
)
from clovercov.core.model import MetricKind, MetricSet, Ratio
from clovercov.core.model.stats import FileRecord, Folder, ProjectStats
from clovercov.errors import ConfigurationError


def _file(name: str, total: int, covered: int, methods: Ratio | None = None) -> FileRecord:
    return FileRecord(name=name, metrics=MetricSet(lines=Ratio(total, covered), methods=methods or Ratio(0, 0)))


@pytest.fixture
def stats() -> ProjectStats:
    return ProjectStats(
        total=MetricSet(lines=Ratio(40, 20)),
        folders={
            "src": Folder(name="src", files=[_file("full.ts", 10, 10), _file("half.ts", 10, 5)]),
            "lib": Folder(name="lib", files=[_file("none.ts", 10, 0), _file("empty.ts", 0, 0)]),
        },
    )


def _names(stats: ProjectStats) -> list[str]:
    return [f"{k}/{f.name}" for k, f in stats.iter_files()]


def test_coverage_presence(stats: ProjectStats) -> None:
    out = filter_stats(stats, [coverage_presence()])
    assert _names(out) == ["src/full.ts", "src/half.ts"]
    assert "lib" not in out.folders


def test_coverable_lines_presence(stats: ProjectStats) -> None:
    assert _names(filter_stats(stats, [coverable_lines_presence()])) == [
        "src/full.ts",
        "src/half.ts",
        "lib/none.ts",
    ]


def test_percent_range_is_inclusive(stats: ProjectStats) -> None:
    assert _names(filter_stats(stats, [percent_range("lines", 50, 100)])) == [
        "src/full.ts",
        "src/half.ts",
        "lib/empty.ts",
    ]
    assert _names(filter_stats(stats, [percent_range(MetricKind.LINES, 0, 50)])) == [
        "src/half.ts",
        "lib/none.ts",
    ]


def test_percent_range_rejects_unknown_metric() -> None:
    with pytest.raises(ConfigurationError):
        percent_range("classes", 0, 50)


def test_predicates_are_combined_with_and(stats: ProjectStats) -> None:
    out = filter_stats(stats, [coverable_lines_presence(), percent_range("lines", 50, 100)])
    assert _names(out) == ["src/full.ts", "src/half.ts"]


def test_filter_leaves_input_untouched(stats: ProjectStats) -> None:
    filter_stats(stats, [coverage_presence()])
    assert _names(stats) == ["src/full.ts", "src/half.ts", "lib/none.ts", "lib/empty.ts"]


def test_filter_is_idempotent(stats: ProjectStats) -> None:
    predicates = [coverable_lines_presence(), percent_range("lines", 0, 60)]
    once = filter_stats(stats, predicates)
    twice = filter_stats(once, predicates)
    assert twice == once
    assert twice.total == stats.total


def test_delta_magnitude(stats: ProjectStats) -> None:
    baseline = ProjectStats(
        total=MetricSet(),
        folders={"src": Folder(name="src", files=[_file("full.ts", 10, 9), _file("half.ts", 10, 5)])},
    )
    out = filter_stats(stats, [delta_magnitude("lines", 5, baseline)])
    # full.ts moved 10 points, half.ts did not move, lib/* are new
    assert _names(out) == ["src/full.ts", "lib/none.ts", "lib/empty.ts"]
    assert _names(filter_stats(stats, [delta_magnitude("lines", 10, baseline)])) == [
        "lib/none.ts",
        "lib/empty.ts",
    ]


def test_build_predicates_activation() -> None:
    assert build_predicates(FilterOptions()) == []
    assert len(build_predicates(FilterOptions(only_with_cover=True, only_with_coverable_lines=True))) == 2
    assert len(build_predicates(FilterOptions(above=10))) == 1
    assert len(build_predicates(FilterOptions(below=90))) == 1
    # change filter needs a baseline
    assert build_predicates(FilterOptions(min_change=1)) == []
    baseline = ProjectStats(total=MetricSet())
    assert len(build_predicates(FilterOptions(min_change=1), baseline)) == 1


def test_build_predicates_uses_configured_metric(stats: ProjectStats) -> None:
    stats.folders["src"].files[0] = _file("full.ts", 10, 10, methods=Ratio(4, 1))
    predicates = build_predicates(FilterOptions(kind=MetricKind.METHODS, below=50))
    assert _names(filter_stats(stats, predicates)) == ["src/full.ts"]
