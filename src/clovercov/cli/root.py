from __future__ import annotations

from typing import Annotated

import typer
from typer.main import get_command

from clovercov._meta import __version__
from clovercov.cli import check


def _print_version(value: bool) -> None:  # noqa: FBT001
    if value:
        typer.echo(f"clovercov {__version__}")
        raise typer.Exit


def create_app() -> typer.Typer:
    app = typer.Typer(help="Coverage gates and change-set summaries for Clover XML reports.")

    @app.callback()
    def _root(
        *,
        version: Annotated[
            bool,
            typer.Option("--version", callback=_print_version, is_eager=True, help="Show version and exit"),
        ] = False,
    ) -> None:
        del version

    @app.command("version")
    def version_cmd() -> None:
        """Print the version and exit."""
        typer.echo(__version__)

    check.register(app)

    return app


def main() -> None:
    app = create_app()
    get_command(app)()


# Click-compatible object for tooling that imports it
cli = get_command(create_app())

__all__ = ["cli", "create_app", "main"]
