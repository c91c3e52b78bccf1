"""Clover XML ingestion.

Reads the ``<coverage><project>`` tree of a Clover report into a
:class:`~clovercov.core.model.ProjectStats`:

  * project files come from ``project/file`` followed by ``project/package/file``
  * file paths use ``path`` when present, else ``name``
  * ``<line>`` records become coalesced covered/uncovered line runs
  * ``type="method"`` lines also become method entries
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as ET

from clovercov._meta import logger
from clovercov.core.changeset import attribute
from clovercov.core.config import DEFAULT_CONFIG, CoreConfig
from clovercov.core.grouping import SourceFile, group_files, split_path
from clovercov.core.model.metrics import MetricSet, Ratio
from clovercov.core.model.stats import FileRecord, LineCoverageEntry, MethodCoverageEntry, ProjectStats
from clovercov.core.model.types import FULL_COVERAGE
from clovercov.errors import MalformedReportError, ParseError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from clovercov.core.changeset import TouchedFile


class CloverNode(Protocol):
    """The slice of the ElementTree element API the reader walks."""

    tag: str | None

    def findall(self, path: str) -> list[CloverNode]: ...

    def get(self, key: str, default: str | None = None) -> str | None: ...


# (total attribute, covered attribute) per metric
_METRIC_ATTRS = {
    "lines": ("statements", "coveredstatements"),
    "methods": ("methods", "coveredmethods"),
    "branches": ("conditionals", "coveredconditionals"),
}


def _local(tag: str | None) -> str:
    return (tag or "").split("}")[-1]  # tolerate namespaces


def _children(node: CloverNode, tag: str) -> list[CloverNode]:
    """Return direct children named *tag*, namespace-agnostic.

    This is the only place one-or-many child lookups are resolved.
    """
    return [child for child in node.findall("*") if _local(child.tag) == tag]


def _int_attr(node: CloverNode, attr: str, *, file: str | None) -> int:
    raw = node.get(attr)
    if raw is None:
        msg = f"missing required attribute {attr!r} on <{_local(node.tag)}>"
        raise MalformedReportError(msg, file=file)
    try:
        value = int(raw.strip())
    except ValueError as exc:
        msg = f"attribute {attr!r} on <{_local(node.tag)}> is not an integer: {raw!r}"
        raise MalformedReportError(msg, file=file) from exc
    if value < 0:
        msg = f"attribute {attr!r} on <{_local(node.tag)}> is negative: {value}"
        raise MalformedReportError(msg, file=file)
    return value


def parse_metrics(node: CloverNode, *, file: str | None = None) -> MetricSet:
    """Build a :class:`MetricSet` from a Clover ``<metrics>`` element."""
    ratios: dict[str, Ratio] = {}
    for kind, (total_attr, covered_attr) in _METRIC_ATTRS.items():
        total = _int_attr(node, total_attr, file=file)
        covered = _int_attr(node, covered_attr, file=file)
        if covered > total:
            msg = f"{covered_attr}={covered} exceeds {total_attr}={total}"
            raise MalformedReportError(msg, file=file)
        ratios[kind] = Ratio(total=total, covered=covered)
    return MetricSet(**ratios)


def _metrics_node(node: CloverNode, *, file: str | None) -> CloverNode:
    found = _children(node, "metrics")
    if not found:
        msg = f"missing <metrics> element in <{_local(node.tag)}>"
        raise MalformedReportError(msg, file=file)
    return found[0]


def coalesce_lines(statuses: dict[int, bool]) -> tuple[LineCoverageEntry, ...]:
    """Merge per-line covered flags into maximal contiguous same-status runs."""
    runs: list[list[int]] = []  # [start, end, covered_percent]
    for num in sorted(statuses):
        percent = FULL_COVERAGE if statuses[num] else 0
        last = runs[-1] if runs else None
        if last is not None and last[1] == num - 1 and last[2] == percent:
            last[1] = num
        else:
            runs.append([num, num, percent])
    return tuple(LineCoverageEntry(start=s, end=e, covered_percent=p) for s, e, p in runs)


def parse_file(node: CloverNode, *, config: CoreConfig = DEFAULT_CONFIG) -> SourceFile:
    """Parse one Clover ``<file>`` element."""
    name = node.get("name")
    path = node.get("path") or name
    if not path:
        msg = "<file> element without 'name' or 'path'"
        raise MalformedReportError(msg)
    path = config.strip(path)
    _, display = split_path(path)

    metrics = parse_metrics(_metrics_node(node, file=path), file=path)

    statuses: dict[int, bool] = {}
    methods: list[MethodCoverageEntry] = []
    for line in _children(node, "line"):
        if line.get("count") is None:
            continue
        num = _int_attr(line, "num", file=path)
        count = _int_attr(line, "count", file=path)
        statuses[num] = statuses.get(num, False) or count > 0
        if line.get("type") == "method":
            methods.append(
                MethodCoverageEntry(
                    name=line.get("name") or "",
                    covered_percent=FULL_COVERAGE if count > 0 else 0,
                )
            )

    record = FileRecord(
        name=display,
        metrics=metrics,
        line_coverage=coalesce_lines(statuses),
        method_coverage=tuple(methods),
    )
    return SourceFile(path=path, record=record)


def read_project(xml_text: str) -> CloverNode:
    """Parse *xml_text* and return its ``<project>`` element."""
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as exc:
        msg = f"failed to parse coverage XML: {exc}"
        raise ParseError(msg) from exc
    except DefusedXmlException as exc:
        msg = f"refusing to parse coverage XML: {exc}"
        raise ParseError(msg) from exc

    if _local(root.tag).lower() != "coverage":
        msg = f"unexpected root tag {root.tag!r}, expected <coverage>"
        raise MalformedReportError(msg)
    projects = _children(root, "project")
    if not projects:
        msg = "missing <project> element"
        raise MalformedReportError(msg)
    return projects[0]


def collect_files(project: CloverNode, *, config: CoreConfig = DEFAULT_CONFIG) -> list[SourceFile]:
    """Parse root-level files, then packaged files, in document order."""
    nodes = list(_children(project, "file"))
    for package in _children(project, "package"):
        nodes.extend(_children(package, "file"))
    return [parse_file(node, config=config) for node in nodes]


def ingest(
    xml_text: str,
    touched: Sequence[TouchedFile] | None = None,
    *,
    config: CoreConfig = DEFAULT_CONFIG,
) -> ProjectStats:
    """Build :class:`ProjectStats` from a Clover report.

    When *touched* is non-empty, only the files it names are kept and project
    totals are re-summed over them (see :mod:`clovercov.core.changeset`);
    otherwise totals come verbatim from the project ``<metrics>``.

    Raises
    ------
    ParseError
        *xml_text* is not well-formed XML.
    MalformedReportError
        Required Clover elements or numeric attributes are missing or invalid.
    """
    project = read_project(xml_text)
    total = parse_metrics(_metrics_node(project, file=None))
    files = collect_files(project, config=config)
    logger.debug("parsed %d files from clover report", len(files))

    if touched:
        files, total = attribute(files, touched)

    return ProjectStats(total=total, folders=group_files(files))


__all__ = [
    "coalesce_lines",
    "collect_files",
    "ingest",
    "parse_file",
    "parse_metrics",
    "read_project",
]
