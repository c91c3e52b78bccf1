from __future__ import annotations

import sys
from io import StringIO
from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.table import Table

from clovercov.core.compare import compare_file, compare_totals
from clovercov.core.model.types import ChangeKind, MetricKind

if TYPE_CHECKING:
    from clovercov.core.compare import Comparison
    from clovercov.core.model.metrics import MetricSet, Ratio
    from clovercov.core.model.stats import ProjectStats

MARKERS = {
    ChangeKind.EQUAL: "=",
    ChangeKind.INCREASED: "▲",
    ChangeKind.DECREASED: "▼",
    ChangeKind.NEW: "new",
}


# --------------------------- Formatting --------------------------------------
def _style_percent(ratio: Ratio, *, green: float = 80.0, yellow: float = 50.0) -> str:
    v = ratio.percent
    text = f"{v:.2f}% ({ratio.covered}/{ratio.total})"
    if v >= green:
        return f"[green]{text}[/green]"
    if v >= yellow:
        return f"[yellow]{text}[/yellow]"
    return f"[red]{text}[/red]"


def _cell(ratio: Ratio, comparison: Comparison | None) -> str:
    text = _style_percent(ratio)
    if comparison is None or comparison.kind is ChangeKind.EQUAL:
        return text
    return f"{text} {MARKERS[comparison.kind]} {comparison.delta_percent:+.2f}"


def _row(label: str, metrics: MetricSet, comparisons: dict[MetricKind, Comparison] | None) -> list[str]:
    comparisons = comparisons or {}
    return [label] + [_cell(metrics.get(kind), comparisons.get(kind)) for kind in MetricKind]


# --------------------------- Table -------------------------------------------
def build_table(stats: ProjectStats, baseline: ProjectStats | None = None, *, title: str | None = None) -> Table:
    table = Table(title=title, box=box.SIMPLE_HEAVY, header_style="bold")
    table.add_column("File", style="cyan", overflow="fold")
    table.add_column("Lines", justify="right")
    table.add_column("Methods", justify="right")
    table.add_column("Branches", justify="right")
    if baseline is not None:
        table.add_column("", justify="center")

    for folder, record in stats.iter_files():
        label = f"{folder}/{record.name}" if folder else record.name
        if baseline is None:
            table.add_row(*_row(label, record.metrics, None))
            continue
        fc = compare_file(folder, record, baseline)
        table.add_row(*_row(label, record.metrics, fc.metrics), MARKERS[fc.kind])

    if not stats.folders:
        table.add_row("No files reported or matching filters", "", "", "", *([""] if baseline else []))

    table.add_section()
    totals = compare_totals(stats, baseline) if baseline is not None else None
    total_row = _row("[bold]Total[/bold]", stats.total, totals)
    if baseline is not None:
        total_row.append("")
    table.add_row(*total_row)
    return table


def render_summary(
    stats: ProjectStats,
    baseline: ProjectStats | None = None,
    *,
    title: str | None = None,
    color: bool = False,
) -> str:
    """Render totals and per-file coverage as a Rich table captured to text."""
    buf = StringIO()
    console = Console(
        file=buf,
        force_terminal=color,
        width=sys.maxsize,
        color_system="standard" if color else None,
        no_color=not color,
    )
    console.print(build_table(stats, baseline, title=title))
    return buf.getvalue().rstrip()


__all__ = ["MARKERS", "build_table", "render_summary"]
