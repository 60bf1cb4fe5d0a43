"""GitHub Actions workflow commands and step outputs."""

from __future__ import annotations

import os
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import typer

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def error(message: str) -> None:
    typer.echo(f"::error::{_escape_data(message)}")


@contextmanager
def group(title: str) -> Iterator[None]:
    typer.echo(f"::group::{title}")
    try:
        yield
    finally:
        typer.echo("::endgroup::")


def set_output(name: str, value: str, *, environ: Mapping[str, str] | None = None) -> bool:
    """Append *name* = *value* to ``$GITHUB_OUTPUT``; return ``False`` when unset."""
    env = os.environ if environ is None else environ
    output_file = env.get("GITHUB_OUTPUT")
    if not output_file:
        return False
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    with Path(output_file).open("a", encoding="utf-8") as fh:
        fh.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
    return True


__all__ = ["error", "group", "set_output"]
