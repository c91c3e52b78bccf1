from __future__ import annotations

import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import click.utils as click_utils
import typer

from clovercov._meta import logger
from clovercov.cli.exit_codes import EXIT_CONFIG, EXIT_DATAERR, EXIT_NOINPUT, EXIT_OK, EXIT_THRESHOLD
from clovercov.core.config import LOG_FORMAT, WORKSPACE_ENVVARS, CoreConfig
from clovercov.core.filters import FilterOptions, build_predicates, filter_stats
from clovercov.core.model.types import MetricKind
from clovercov.core.thresholds import Limits, check_thresholds, parse_limits
from clovercov.errors import ConfigurationError, ReportError
from clovercov.inputs.changes import load_changes, load_diff
from clovercov.inputs.clover import ingest
from clovercov.io import read_text, write_output
from clovercov.render.summary import render_summary

if TYPE_CHECKING:
    from clovercov.core.changeset import TouchedFile
    from clovercov.core.model.stats import ProjectStats


def _configure_logging(*, quiet: bool, verbose: bool) -> None:
    level = logging.ERROR if quiet else (logging.DEBUG if verbose else logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.setLevel(level)
    logger.debug("debug logging enabled")


def _default_workspace() -> str | None:
    for name in WORKSPACE_ENVVARS:
        value = os.environ.get(name)
        if value:
            return value
    return None


def _read(path: Path) -> str:
    try:
        return read_text(path)
    except FileNotFoundError as exc:
        typer.echo(f"ERROR: file not found: {path}", err=True)
        raise typer.Exit(code=EXIT_NOINPUT) from exc
    except OSError as exc:
        typer.echo(f"ERROR: failed to read {path}: {exc}", err=True)
        raise typer.Exit(code=EXIT_NOINPUT) from exc


def _ingest(path: Path, touched: list[TouchedFile] | None, config: CoreConfig) -> ProjectStats:
    text = _read(path)
    try:
        return ingest(text, touched, config=config)
    except ReportError as exc:
        typer.echo(f"ERROR: {path}: {exc}", err=True)
        raise typer.Exit(code=EXIT_DATAERR) from exc


def _load_touched(changes: Path | None, diff: Path | None) -> list[TouchedFile] | None:
    if changes is not None and diff is not None:
        typer.echo("ERROR: --changes and --diff are mutually exclusive", err=True)
        raise typer.Exit(code=EXIT_CONFIG)
    if changes is not None:
        return load_changes(_read(changes))
    if diff is not None:
        return load_diff(_read(diff))
    return None


def _resolve_limits(
    expression: str | None,
    *,
    min_line_coverage: float | None,
    min_method_coverage: float | None,
    max_line_coverage_decrease: float | None,
    max_method_coverage_decrease: float | None,
) -> Limits:
    limits = parse_limits(expression) if expression else Limits()
    overrides = {
        "min_line_coverage": min_line_coverage,
        "min_method_coverage": min_method_coverage,
        "max_line_coverage_decrease": max_line_coverage_decrease,
        "max_method_coverage_decrease": max_method_coverage_decrease,
    }
    return replace(limits, **{k: v for k, v in overrides.items() if v is not None})


def _is_tty_stdout() -> bool:
    try:
        return bool(getattr(sys.stdout, "isatty", lambda: False)())
    except OSError:
        return False


def check_cmd(
    file: Annotated[Path, typer.Argument(help="Clover coverage XML of the current build.")],
    base_file: Annotated[
        Path | None,
        typer.Option("--base-file", help="Clover coverage XML of the baseline build."),
    ] = None,
    changes: Annotated[
        Path | None,
        typer.Option("--changes", help="JSON change-set of touched files and lines."),
    ] = None,
    diff: Annotated[
        Path | None,
        typer.Option("--diff", help="Unified diff whose touched lines restrict the report."),
    ] = None,
    dir_prefix: Annotated[
        str | None,
        typer.Option("--dir-prefix", help="Workspace prefix stripped from report paths."),
    ] = None,
    # Limits
    threshold: Annotated[
        str | None,
        typer.Option("--threshold", help="Limit expression, e.g. 'line=80 method=70 line-drop=5'."),
    ] = None,
    min_line_coverage: Annotated[
        float | None,
        typer.Option("--min-line-coverage", min=0, max=100, help="Fail if line coverage % is below this value."),
    ] = None,
    min_method_coverage: Annotated[
        float | None,
        typer.Option("--min-method-coverage", min=0, max=100, help="Fail if method coverage % is below this value."),
    ] = None,
    max_line_coverage_decrease: Annotated[
        float | None,
        typer.Option(
            "--max-line-coverage-decrease",
            min=0,
            max=100,
            help="Fail if line coverage drops by at least this many points against the baseline.",
        ),
    ] = None,
    max_method_coverage_decrease: Annotated[
        float | None,
        typer.Option(
            "--max-method-coverage-decrease",
            min=0,
            max=100,
            help="Fail if method coverage drops by at least this many points against the baseline.",
        ),
    ] = None,
    # Table filters
    only_with_cover: Annotated[
        bool,
        typer.Option("--only-with-cover", help="Only list files with some covered line."),
    ] = False,
    only_with_coverable_lines: Annotated[
        bool,
        typer.Option("--only-with-coverable-lines", help="Only list files with coverable lines."),
    ] = False,
    table_above_coverage: Annotated[
        float,
        typer.Option("--table-above-coverage", min=0, max=100, help="Only list files at or above this %."),
    ] = 0.0,
    table_below_coverage: Annotated[
        float,
        typer.Option("--table-below-coverage", min=0, max=100, help="Only list files at or below this %."),
    ] = 100.0,
    table_coverage_change: Annotated[
        float,
        typer.Option("--table-coverage-change", min=0, help="Only list files whose coverage changed by more."),
    ] = 0.0,
    table_type_coverage: Annotated[
        MetricKind,
        typer.Option("--table-type-coverage", case_sensitive=False, help="Metric used by the table filters."),
    ] = MetricKind.LINES,
    output: Annotated[
        Path | None,
        typer.Option("--output", help="Write output to PATH (use '-' for stdout)."),
    ] = None,
    *,
    color: Annotated[bool, typer.Option("--color", help="Force color output")] = False,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable color output")] = False,
    quiet: Annotated[bool, typer.Option("-q", "--quiet", help="Suppress INFO logs, emit only errors")] = False,
    verbose: Annotated[bool, typer.Option("-v", "--verbose", help="Emit diagnostic logging")] = False,
) -> None:
    """Summarise a Clover report and enforce coverage limits."""
    _configure_logging(quiet=quiet, verbose=verbose)
    config = CoreConfig(workspace=dir_prefix if dir_prefix is not None else _default_workspace())

    try:
        limits = _resolve_limits(
            threshold,
            min_line_coverage=min_line_coverage,
            min_method_coverage=min_method_coverage,
            max_line_coverage_decrease=max_line_coverage_decrease,
            max_method_coverage_decrease=max_method_coverage_decrease,
        )
        touched = _load_touched(changes, diff)
    except ConfigurationError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_CONFIG) from exc

    current = _ingest(file, touched, config)
    baseline = _ingest(base_file, None, config) if base_file is not None else None
    if touched is not None:
        logger.info("change-set names %d files, %d matched the report", len(touched), current.file_count)

    options = FilterOptions(
        only_with_cover=only_with_cover,
        only_with_coverable_lines=only_with_coverable_lines,
        kind=table_type_coverage,
        above=table_above_coverage,
        below=table_below_coverage,
        min_change=table_coverage_change,
    )
    shown = filter_stats(current, build_predicates(options, baseline))

    color_allowed = output is None and _is_tty_stdout() and not click_utils.should_strip_ansi(sys.stdout)
    use_color = not no_color and (color or color_allowed)
    write_output(render_summary(shown, baseline, title=f"Coverage report: {file.name}", color=use_color), output)

    violations = list(check_thresholds(current, baseline, limits))
    for message in violations:
        typer.echo(f"Threshold failed: {message}", err=True)
    raise typer.Exit(code=EXIT_THRESHOLD if violations else EXIT_OK)


def register(app: typer.Typer) -> None:
    app.command("check")(check_cmd)


__all__ = ["register"]
