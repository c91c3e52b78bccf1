"""Change-set attribution: restrict coverage to the files and lines a diff touches.

Clover only reports per-file aggregates for statements, methods and
conditionals, so coverage of a touched line subset is *estimated*: the share
of touched lines in the file's statement count is applied to every aggregate.
The result approximates, and is not, line-accurate coverage.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from clovercov._meta import logger
from clovercov.core.model.metrics import MetricSet, Ratio
from clovercov.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from clovercov.core.grouping import SourceFile

LineRange = tuple[int, int]
LineSpec = int | str

_RANGE_RE = re.compile(r"^\s*(?P<start>\d+)\s*(?:-\s*(?P<end>\d+)\s*)?$")
_HUNK_RE = re.compile(
    r"^@@ -(?P<old_start>\d+)(?:,(?P<old_count>\d+))? "
    r"\+(?P<new_start>\d+)(?:,(?P<new_count>\d+))? @@"
)


@dataclass(frozen=True, slots=True)
class TouchedFile:
    """A file named by a change-set.

    ``ranges`` of ``None`` means the whole file is in scope.
    """

    file: str
    ranges: tuple[LineRange, ...] | None = None

    @classmethod
    def from_specs(cls, file: str, lines: Iterable[LineSpec] | None = None) -> TouchedFile:
        if lines is None:
            return cls(file=file)
        return cls(file=file, ranges=tuple(parse_line_spec(v) for v in lines))

    @property
    def line_count(self) -> int:
        return sum(end - start + 1 for start, end in self.ranges or ())


def parse_line_spec(value: LineSpec) -> LineRange:
    """Parse ``7``, ``"7"`` or ``"7-12"`` into an inclusive line range."""
    if isinstance(value, bool):
        msg = f"invalid line specification: {value!r}"
        raise ConfigurationError(msg)
    if isinstance(value, int):
        start = end = value
    else:
        m = _RANGE_RE.match(str(value))
        if not m:
            msg = f"invalid line specification: {value!r}"
            raise ConfigurationError(msg)
        start = int(m.group("start"))
        end = int(m.group("end") or start)
    if start < 1 or end < start:
        msg = f"invalid line range: {value!r}"
        raise ConfigurationError(msg)
    return start, end


# --------------------------- Diff parsing ------------------------------------
def _new_side(m: re.Match[str]) -> LineRange | None:
    start = int(m.group("new_start"))
    count = int(m.group("new_count") or 1)
    if count == 0:
        # pure deletion; nothing on the new side
        return None
    return start, start + count - 1


def hunk_ranges(patch: str) -> list[LineRange]:
    """Return the new-side line range of every hunk header in *patch*."""
    out: list[LineRange] = []
    for line in patch.splitlines():
        m = _HUNK_RE.match(line)
        if not m:
            continue
        new_range = _new_side(m)
        if new_range is not None:
            out.append(new_range)
    return out


def parse_unified_diff(text: str) -> list[TouchedFile]:
    """Turn a unified diff (``git diff`` output) into touched files.

    Hunk bodies are consumed by the line counts of their ``@@`` header, so
    added or removed lines that look like ``+++``/``---`` file headers stay
    part of the hunk. Deleted files and files without hunks are skipped.
    """
    touched: list[TouchedFile] = []
    current: str | None = None
    ranges: list[LineRange] = []
    old_left = new_left = 0

    def flush() -> None:
        if current is not None and ranges:
            touched.append(TouchedFile(file=current, ranges=tuple(ranges)))

    for line in text.splitlines():
        if old_left > 0 or new_left > 0:
            if line.startswith("+"):
                new_left -= 1
                continue
            if line.startswith("-"):
                old_left -= 1
                continue
            if line.startswith(" ") or not line:
                old_left -= 1
                new_left -= 1
                continue
            if line.startswith("\\"):
                # "\ No newline at end of file"
                continue
            # truncated hunk
            old_left = new_left = 0

        if line.startswith("diff --git "):
            flush()
            current, ranges = None, []
        elif line.startswith("+++ "):
            flush()
            target = line[4:].split("\t", 1)[0].strip()
            current = None if target == "/dev/null" else target.removeprefix("b/")
            ranges = []
        else:
            m = _HUNK_RE.match(line)
            if m is None:
                continue
            old_left = int(m.group("old_count") or 1)
            new_left = int(m.group("new_count") or 1)
            new_range = _new_side(m)
            if current is not None and new_range is not None:
                ranges.append(new_range)
    flush()
    return touched


# --------------------------- Attribution -------------------------------------
def find_touched(path: str, touched: Sequence[TouchedFile]) -> TouchedFile | None:
    """Return the first entry whose ``file`` contains *path*.

    Matching is by substring containment, so ``"a.ts"`` also matches an entry
    for ``"src/data.ts"``.
    """
    if not path:
        return None
    for entry in touched:
        if path in entry.file:
            return entry
    return None


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _scale(ratio: Ratio, proportion: float) -> Ratio:
    return Ratio(
        total=_round_half_up(ratio.total * proportion),
        covered=_round_half_up(ratio.covered * proportion),
    )


def estimate_metrics(metrics: MetricSet, ranges: Sequence[LineRange]) -> MetricSet:
    """Estimate *metrics* over the touched *ranges* of a file.

    The proportion is ``touched lines / statements`` (``1`` for a file without
    statements) and is applied unchanged to methods and conditionals.
    """
    touched_lines = sum(end - start + 1 for start, end in ranges)
    statements = metrics.lines.total
    proportion = touched_lines / statements if statements > 0 else 1.0
    return MetricSet(
        lines=_scale(metrics.lines, proportion),
        methods=_scale(metrics.methods, proportion),
        branches=_scale(metrics.branches, proportion),
    )


def attribute(
    files: Sequence[SourceFile],
    touched: Sequence[TouchedFile],
) -> tuple[list[SourceFile], MetricSet]:
    """Keep the files named by *touched* and re-sum project totals over them.

    *files* carry workspace-relative paths, as produced by ingestion. Returns
    the retained files (unchanged) and the new total metric set.
    Files touched with explicit line ranges contribute estimated metrics (see
    :func:`estimate_metrics`); files in scope as a whole contribute their full
    aggregates.
    """
    kept: list[SourceFile] = []
    total = MetricSet()
    for f in files:
        entry = find_touched(f.path, touched)
        if entry is None:
            continue
        kept.append(f)
        metrics = f.record.metrics
        if entry.ranges:
            metrics = estimate_metrics(metrics, entry.ranges)
            logger.debug("attribution %s: %d touched lines -> %s", f.path, entry.line_count, metrics.lines)
        total += metrics
    logger.debug("attribution kept %d of %d files", len(kept), len(files))
    return kept, total


__all__ = [
    "LineRange",
    "LineSpec",
    "TouchedFile",
    "attribute",
    "estimate_metrics",
    "find_touched",
    "hunk_ranges",
    "parse_line_spec",
    "parse_unified_diff",
]
