from __future__ import annotations

from typing import Annotated

import typer
from typer.main import get_command

from lcovreport import __version__
from lcovreport.cli import run


def create_app() -> typer.Typer:
    app = typer.Typer(help="Merge LCOV traces, publish an HTML report and comment coverage on GitHub.")

    @app.callback()
    def _root(
        *,
        version: Annotated[
            bool,
            typer.Option("--version", help="Show version and exit"),
        ] = False,
    ) -> None:
        if version:
            typer.echo(f"lcovreport {__version__}")
            raise typer.Exit

    run.register(app)

    return app


def main() -> None:
    app = create_app()
    get_command(app)()


# Click-compatible object for tooling that imports it
cli = get_command(create_app())

__all__ = ["cli", "create_app", "main"]
