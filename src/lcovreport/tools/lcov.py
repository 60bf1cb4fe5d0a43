"""Fixed argument shapes for the lcov and genhtml command-line tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lcovreport.core.config import (
    BRANCH_COVERAGE_RC,
    INSTALL_COMMAND,
    MERGED_TRACEFILE_NAME,
)
from lcovreport.tools.runner import run_tool

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from lcovreport.tools.runner import Runner, ToolResult


def install_lcov(*, runner: Runner = run_tool) -> ToolResult:
    return runner(INSTALL_COMMAND)


def merge_args(trace_files: Sequence[Path], output_file: Path) -> list[str]:
    args: list[str] = []
    for trace in trace_files:
        args += ["--add-tracefile", str(trace)]
    args += ["--output-file", str(output_file)]
    return [*args, *BRANCH_COVERAGE_RC]


def genhtml_args(trace_files: Sequence[Path], output_dir: Path) -> list[str]:
    return [
        *(str(p) for p in trace_files),
        *BRANCH_COVERAGE_RC,
        "--no-source",
        "--synthesize-missing",
        "--output-directory",
        str(output_dir),
    ]


def merge_traces(trace_files: Sequence[Path], tmp_path: Path, *, runner: Runner = run_tool) -> Path:
    """Merge every trace into ``<tmp_path>/lcov.info`` with one lcov call."""
    tmp_path.mkdir(parents=True, exist_ok=True)
    merged = tmp_path / MERGED_TRACEFILE_NAME
    runner(["lcov", *merge_args(trace_files, merged)])
    return merged


def genhtml(
    trace_files: Sequence[Path],
    output_dir: Path,
    *,
    cwd: Path | None = None,
    runner: Runner = run_tool,
) -> ToolResult:
    return runner(["genhtml", *genhtml_args(trace_files, output_dir)], cwd=cwd)


def lcov_summary(trace_file: Path, *, runner: Runner = run_tool) -> str:
    return runner(["lcov", "--summary", str(trace_file), *BRANCH_COVERAGE_RC]).output


def lcov_list(trace_file: Path, *, runner: Runner = run_tool) -> str:
    return runner(["lcov", "--list", str(trace_file), "--list-full-path", *BRANCH_COVERAGE_RC]).output


__all__ = [
    "genhtml",
    "genhtml_args",
    "install_lcov",
    "lcov_list",
    "lcov_summary",
    "merge_args",
    "merge_traces",
]
