"""Turn lcov's textual reports into the summary and per-file sections."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lcovreport._meta import logger
from lcovreport.core.config import DETAIL_HEADER_ROWS, NOT_APPLICABLE
from lcovreport.tools.lcov import lcov_list, lcov_summary
from lcovreport.tools.parsing import LIST_OUTPUT, SUMMARY_OUTPUT
from lcovreport.tools.runner import run_tool

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from lcovreport.core.context import RunContext
    from lcovreport.github.client import GitHubClient
    from lcovreport.tools.runner import Runner

_INDENT = "\n  "


def summarize(coverage_file: Path, *, runner: Runner = run_tool) -> str:
    """Return ``lcov --summary`` output without the banner line."""
    return "\n".join(SUMMARY_OUTPUT.body(lcov_summary(coverage_file, runner=runner)))


def detail_lines(coverage_file: Path, *, runner: Runner = run_tool) -> list[str]:
    """Return the ``lcov --list`` table: header rows followed by one row per file."""
    return LIST_OUTPUT.body(lcov_list(coverage_file, runner=runner))


def _matches_changed_file(line: str, changed_files: Sequence[str]) -> bool:
    return any(line.startswith(changed) for changed in changed_files)


def filter_changed_lines(lines: Sequence[str], changed_files: Sequence[str]) -> list[str]:
    """Keep the header rows and every row starting with a changed file path."""
    return [
        line
        for index, line in enumerate(lines)
        if index < DETAIL_HEADER_ROWS or _matches_changed_file(line, changed_files)
    ]


def format_detail(lines: Sequence[str]) -> str:
    return _INDENT + _INDENT.join(lines)


def detail(
    coverage_file: Path,
    *,
    context: RunContext,
    client: GitHubClient | None = None,
    runner: Runner = run_tool,
) -> str:
    """Return the per-file coverage table for the comment.

    On pull requests only rows for files the pull request touches are kept;
    when none remain the ``" n/a"`` marker is returned.
    """
    lines = detail_lines(coverage_file, runner=runner)
    if client is None or not context.is_pull_request:
        return format_detail(lines)

    changed_files = client.list_pull_request_files(context.pull_number)
    filtered = filter_changed_lines(lines, changed_files)
    logger.debug(
        "kept %d of %d coverage row(s)",
        len(filtered) - DETAIL_HEADER_ROWS,
        len(lines) - DETAIL_HEADER_ROWS,
    )
    if len(filtered) <= DETAIL_HEADER_ROWS:
        return NOT_APPLICABLE
    return format_detail(filtered)


__all__ = ["detail", "detail_lines", "filter_changed_lines", "format_detail", "summarize"]
