from __future__ import annotations

from collections.abc import Callable

import pytest

from clovercov.core.config import CoreConfig
from clovercov.core.model import Ratio
from clovercov.core.model.stats import LineCoverageEntry, MethodCoverageEntry
from clovercov.errors import MalformedReportError, ParseError
from clovercov.inputs.clover import coalesce_lines, ingest


def test_ingest_two_file_package(two_file_report: str) -> None:
    stats = ingest(two_file_report)

    assert stats.total.lines.fraction == 0.5
    assert list(stats.folders) == ["src"]
    a = stats.get("src", "a.ts")
    b = stats.get("src", "b.ts")
    assert a is not None
    assert b is not None
    assert a.metrics.lines.fraction == 1.0
    assert b.metrics.lines.fraction == 0.0
    assert b.line_coverage == (LineCoverageEntry(1, 2, 0),)


def test_totals_come_verbatim_from_project_metrics(clover_xml: Callable[..., str]) -> None:
    xml = clover_xml(
        project={"statements": 100, "coveredstatements": 90, "conditionals": 8, "coveredconditionals": 2},
        files=[{"name": "a.php", "metrics": {"statements": 1, "coveredstatements": 0}}],
    )
    stats = ingest(xml)
    assert stats.total.lines == Ratio(total=100, covered=90)
    assert stats.total.branches == Ratio(total=8, covered=2)
    assert stats.total.methods.fraction == 1.0


def test_root_files_and_packages_are_both_collected(clover_xml: Callable[..., str]) -> None:
    xml = clover_xml(
        files=[{"name": "z/root.php"}],
        packages=[[{"name": "a/one.php"}], [{"name": "a/two.php"}, {"name": "top.php"}]],
    )
    stats = ingest(xml)
    assert list(stats.folders) == ["a", "", "z"]
    assert [f.name for f in stats.folders["a"].files] == ["one.php", "two.php"]
    assert [f.name for f in stats.folders[""].files] == ["top.php"]


def test_path_attribute_wins_over_name(clover_xml: Callable[..., str]) -> None:
    xml = clover_xml(files=[{"name": "b.ts", "path": "src/a/b.ts"}])
    stats = ingest(xml)
    assert list(stats.folders) == ["src/a"]
    assert stats.folders["src/a"].files[0].name == "b.ts"


def test_grouping_is_deterministic(clover_xml: Callable[..., str]) -> None:
    xml = clover_xml(
        packages=[[{"name": "src/z.ts"}, {"name": "lib/b.ts"}, {"name": "src/a.ts"}, {"name": "lib/a.ts"}]],
    )
    first = ingest(xml)
    second = ingest(xml)
    order = [(k, f.name) for k, f in first.iter_files()]
    assert order == [(k, f.name) for k, f in second.iter_files()]
    assert order == [("lib", "a.ts"), ("lib", "b.ts"), ("src", "a.ts"), ("src", "z.ts")]


def test_duplicate_paths_last_one_wins(clover_xml: Callable[..., str]) -> None:
    xml = clover_xml(
        files=[{"name": "src/a.ts", "metrics": {"statements": 2, "coveredstatements": 0}}],
        packages=[[{"name": "src/a.ts", "metrics": {"statements": 2, "coveredstatements": 2}}]],
    )
    stats = ingest(xml)
    assert len(stats.folders["src"].files) == 1
    record = stats.get("src", "a.ts")
    assert record is not None
    assert record.metrics.lines == Ratio(total=2, covered=2)


def test_line_runs_are_coalesced(clover_xml: Callable[..., str]) -> None:
    xml = clover_xml(
        files=[
            {
                "name": "a.ts",
                "metrics": {"statements": 6, "coveredstatements": 5},
                "lines": [(1, 1), (2, 4), (3, 1), (4, 0), (5, 2), (6, 9)],
            }
        ]
    )
    record = ingest(xml).get("", "a.ts")
    assert record is not None
    assert record.line_coverage == (
        LineCoverageEntry(1, 3, 100),
        LineCoverageEntry(4, 4, 0),
        LineCoverageEntry(5, 6, 100),
    )


def test_coalesce_sorts_and_splits_on_gaps() -> None:
    entries = coalesce_lines({9: True, 1: True, 2: True, 5: True, 3: False})
    assert [e.label for e in entries] == ["1-2", "3", "5", "9"]
    assert coalesce_lines({}) == ()


def test_method_lines_become_method_entries(clover_xml: Callable[..., str]) -> None:
    xml = clover_xml(
        files=[
            {
                "name": "Foo.php",
                "metrics": {"statements": 2, "coveredstatements": 1, "methods": 2, "coveredmethods": 1},
                "methods": [(1, "run", 3), (4, "skip", 0)],
                "lines": [(2, 3), (5, 0)],
            }
        ]
    )
    record = ingest(xml).get("", "Foo.php")
    assert record is not None
    assert record.method_coverage == (
        MethodCoverageEntry(name="run", covered_percent=100),
        MethodCoverageEntry(name="skip", covered_percent=0),
    )
    assert [e.label for e in record.line_coverage] == ["1-2", "4-5"]


def test_lines_without_count_are_ignored() -> None:
    xml = (
        "<coverage><project>"
        '<metrics statements="1" coveredstatements="1" methods="0" coveredmethods="0"'
        ' conditionals="0" coveredconditionals="0"/>'
        '<file name="a.js">'
        '<metrics statements="1" coveredstatements="1" methods="0" coveredmethods="0"'
        ' conditionals="0" coveredconditionals="0"/>'
        '<line num="1" count="1" type="stmt"/><line num="2" type="stmt"/>'
        "</file></project></coverage>"
    )
    record = ingest(xml).get("", "a.js")
    assert record is not None
    assert [e.label for e in record.line_coverage] == ["1"]


def test_workspace_prefix_is_stripped(clover_xml: Callable[..., str]) -> None:
    xml = clover_xml(files=[{"name": "/work/repo/src/a.ts"}, {"name": "/elsewhere/b.ts"}])
    stats = ingest(xml, config=CoreConfig(workspace="/work/repo"))
    assert list(stats.folders) == ["/elsewhere", "src"]


def test_namespaced_report_is_accepted(two_file_report: str) -> None:
    xml = two_file_report.replace("<coverage ", '<coverage xmlns="urn:clover" ')
    assert ingest(xml).total.lines.fraction == 0.5


@pytest.mark.parametrize("text", ["", "<coverage><project>", "not xml at all"])
def test_malformed_xml_raises_parse_error(text: str) -> None:
    with pytest.raises(ParseError):
        ingest(text)


def test_entity_declarations_are_refused() -> None:
    xml = '<?xml version="1.0"?><!DOCTYPE c [<!ENTITY x "boom">]><coverage>&x;</coverage>'
    with pytest.raises(ParseError):
        ingest(xml)


def test_wrong_root_is_malformed() -> None:
    with pytest.raises(MalformedReportError, match="expected <coverage>"):
        ingest("<report/>")


def test_missing_project_is_malformed() -> None:
    with pytest.raises(MalformedReportError, match="missing <project>"):
        ingest("<coverage/>")


def test_missing_project_metrics_is_malformed() -> None:
    with pytest.raises(MalformedReportError, match="missing <metrics>"):
        ingest("<coverage><project/></coverage>")


def test_missing_file_attribute_names_the_file(clover_xml: Callable[..., str]) -> None:
    xml = clover_xml(files=[{"name": "src/a.ts"}])
    bad = xml.replace('<file name="src/a.ts"><metrics statements="0"', '<file name="src/a.ts"><metrics')
    with pytest.raises(MalformedReportError, match="statements") as info:
        ingest(bad)
    assert info.value.file == "src/a.ts"
    assert str(info.value).startswith("src/a.ts: ")


def test_non_integer_attribute_is_malformed(clover_xml: Callable[..., str]) -> None:
    xml = clover_xml(files=[{"name": "a.ts", "lines": [(1, 1)]}]).replace('count="1"', 'count="many"')
    with pytest.raises(MalformedReportError, match="not an integer") as info:
        ingest(xml)
    assert info.value.file == "a.ts"


def test_covered_exceeding_total_is_malformed(clover_xml: Callable[..., str]) -> None:
    xml = clover_xml(files=[{"name": "a.ts", "metrics": {"statements": 1, "coveredstatements": 2}}])
    with pytest.raises(MalformedReportError, match="exceeds"):
        ingest(xml)


def test_file_without_metrics_is_malformed() -> None:
    xml = (
        "<coverage><project>"
        '<metrics statements="0" coveredstatements="0" methods="0" coveredmethods="0"'
        ' conditionals="0" coveredconditionals="0"/>'
        '<file name="a.ts"/>'
        "</project></coverage>"
    )
    with pytest.raises(MalformedReportError, match="missing <metrics>"):
        ingest(xml)
