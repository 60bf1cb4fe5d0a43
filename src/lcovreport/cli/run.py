from __future__ import annotations

import logging
import os
from typing import Annotated

import typer

from lcovreport._meta import logger
from lcovreport.cli.exit_codes import EXIT_CONFIG, EXIT_FAILURE, EXIT_OK
from lcovreport.core.config import LOG_FORMAT
from lcovreport.core.context import RunContext
from lcovreport.core.inputs import ActionInputs, input_env_name
from lcovreport.core.pipeline import run_report
from lcovreport.errors import ConfigurationError
from lcovreport.github import actions


def _configure_runtime(*, quiet: bool, verbose: bool) -> None:
    """Configure logging based on *quiet*/*verbose*."""
    level = logging.ERROR if quiet else (logging.DEBUG if verbose else logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.setLevel(level)


def _fail(message: str, code: int = EXIT_FAILURE) -> typer.Exit:
    actions.error(message)
    return typer.Exit(code=code)


def _input_environ(overrides: dict[str, str | bool | None]) -> dict[str, str]:
    """Return ``os.environ`` with the options given on the command line written as inputs."""
    environ = dict(os.environ)
    for name, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        environ[input_env_name(name)] = value
    return environ


def run_cmd(
    coverage_files: Annotated[
        str | None,
        typer.Option(
            "--coverage-files",
            help="Glob pattern(s) of the LCOV trace files, one per line. [env: INPUT_COVERAGE-FILES]",
        ),
    ] = None,
    minimum_coverage: Annotated[
        str | None,
        typer.Option(
            "--minimum-coverage",
            help="Fail if total line coverage % is below this value. [env: INPUT_MINIMUM-COVERAGE]",
        ),
    ] = None,
    github_token: Annotated[
        str | None,
        typer.Option(
            "--github-token",
            help="Token used to comment; empty disables commenting. [env: INPUT_GITHUB-TOKEN]",
        ),
    ] = None,
    working_directory: Annotated[
        str | None,
        typer.Option(
            "--working-directory",
            help="Directory genhtml runs in. [env: INPUT_WORKING-DIRECTORY]",
        ),
    ] = None,
    artifact_name: Annotated[
        str | None,
        typer.Option(
            "--artifact-name",
            help="Upload the HTML report as this artifact; empty skips the upload. [env: INPUT_ARTIFACT-NAME]",
        ),
    ] = None,
    install_lcov: Annotated[
        bool | None,
        typer.Option(
            "--install-lcov/--no-install-lcov",
            help="Install lcov with apt-get before running. [env: INPUT_INSTALL-LCOV]",
            show_default=False,
        ),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Show full tracebacks for errors"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("-q", "--quiet", help="Suppress INFO logs, emit only errors"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Emit diagnostic logging"),
    ] = False,
) -> None:
    """Merge the traces, publish the report and enforce the minimum coverage.

    Every input is read from its ``INPUT_*`` variable; an option given on the
    command line takes precedence.
    """
    _configure_runtime(quiet=quiet, verbose=verbose)

    environ = _input_environ(
        {
            "coverage-files": coverage_files,
            "minimum-coverage": minimum_coverage,
            "github-token": github_token,
            "working-directory": working_directory,
            "artifact-name": artifact_name,
            "install-lcov": install_lcov,
        }
    )
    try:
        inputs = ActionInputs.from_env(environ)
        inputs.minimum()
        context = RunContext.from_env(environ)
    except ConfigurationError as exc:
        if debug:
            raise
        raise _fail(str(exc), EXIT_CONFIG) from exc

    try:
        outcome = run_report(inputs, context)
    except Exception as exc:
        logger.debug("run failed", exc_info=True)
        if debug:
            raise
        raise _fail(str(exc)) from exc

    if outcome.post_result is not None and not outcome.post_result.posted:
        logger.debug("comment not posted: %s", outcome.post_result.error)

    if outcome.failed:
        raise _fail(outcome.error_message)
    raise typer.Exit(code=EXIT_OK)


def register(app: typer.Typer) -> None:
    app.command("run")(run_cmd)


__all__ = ["register"]
