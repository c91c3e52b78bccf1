from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

import pytest
from click.testing import CliRunner

FileSpec = Mapping[str, Any]

_METRIC_KEYS = (
    "statements",
    "coveredstatements",
    "methods",
    "coveredmethods",
    "conditionals",
    "coveredconditionals",
)


def metrics_xml(**values: int) -> str:
    attrs = {key: 0 for key in _METRIC_KEYS}
    attrs.update(values)
    rendered = " ".join(f'{k}="{v}"' for k, v in attrs.items())
    return f"<metrics {rendered}/>"


def line_xml(num: int, count: int, *, method: str | None = None) -> str:
    if method is not None:
        return f'<line num="{num}" type="method" name="{method}" count="{count}"/>'
    return f'<line num="{num}" type="stmt" count="{count}"/>'


def file_xml(spec: FileSpec) -> str:
    """Render one ``<file>``; *spec* keys: name, path, metrics, lines, methods."""
    path_attr = f' path="{spec["path"]}"' if spec.get("path") else ""
    lines: Iterable[tuple[int, int]] = spec.get("lines", ())
    methods: Iterable[tuple[int, str, int]] = spec.get("methods", ())
    body = "".join(line_xml(num, count, method=name) for num, name, count in methods)
    body += "".join(line_xml(num, count) for num, count in lines)
    return f'<file name="{spec["name"]}"{path_attr}>{metrics_xml(**spec.get("metrics", {}))}{body}</file>'


def build_clover(
    *,
    project: Mapping[str, int] | None = None,
    files: Sequence[FileSpec] = (),
    packages: Sequence[Sequence[FileSpec]] = (),
) -> str:
    root_files = "".join(file_xml(f) for f in files)
    pkgs = "".join(
        f'<package name="pkg{i}">{"".join(file_xml(f) for f in pkg)}</package>' for i, pkg in enumerate(packages)
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<coverage generated="1700000000">'
        '<project timestamp="1700000000">'
        f"{metrics_xml(**(project or {}))}"
        f"{root_files}{pkgs}"
        "</project>"
        "</coverage>"
    )


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Click CLI runner for invoking the command-line interface."""
    return CliRunner()


@pytest.fixture
def clover_xml() -> Callable[..., str]:
    return build_clover


@pytest.fixture
def two_file_report() -> str:
    """One package with a fully covered and an uncovered file."""
    return build_clover(
        project={"statements": 20, "coveredstatements": 10, "methods": 4, "coveredmethods": 2},
        packages=[
            [
                {
                    "name": "a.ts",
                    "path": "src/a.ts",
                    "metrics": {"statements": 10, "coveredstatements": 10, "methods": 2, "coveredmethods": 2},
                    "lines": [(1, 1), (2, 3)],
                },
                {
                    "name": "b.ts",
                    "path": "src/b.ts",
                    "metrics": {"statements": 10, "coveredstatements": 0, "methods": 2},
                    "lines": [(1, 0), (2, 0)],
                },
            ]
        ],
    )
