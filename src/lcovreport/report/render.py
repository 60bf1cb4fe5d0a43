"""HTML report generation and artifact upload."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from lcovreport._meta import logger
from lcovreport.core.config import HTML_DIRNAME
from lcovreport.github.artifact import ResultsServiceUploader
from lcovreport.tools.lcov import genhtml
from lcovreport.tools.runner import run_tool

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from lcovreport.github.artifact import ArtifactUploader
    from lcovreport.tools.runner import Runner


def collect_report_files(output_dir: Path) -> list[Path]:
    """Return every file below *output_dir*, recursively."""
    return sorted(p for p in output_dir.rglob("*") if p.is_file())


def render_html(
    trace_files: Sequence[Path],
    tmp_path: Path,
    *,
    working_directory: str = "./",
    artifact_name: str = "",
    runner: Runner = run_tool,
    uploader_factory: Callable[[], ArtifactUploader] | None = None,
) -> Path:
    """Render the HTML report into ``<tmp_path>/html`` and optionally upload it.

    Upload errors propagate; the report directory is returned otherwise.
    """
    output_dir = (tmp_path / HTML_DIRNAME).resolve()
    cwd = Path(working_directory.strip() or "./")
    genhtml(trace_files, output_dir, cwd=cwd, runner=runner)

    name = artifact_name.strip()
    if not name:
        logger.info("Skip uploading artifacts")
        return output_dir

    if uploader_factory is None:
        uploader_factory = ResultsServiceUploader.from_env

    html_files = collect_report_files(output_dir)
    logger.info("Uploading artifacts.")
    uploader_factory().upload(name, html_files, output_dir)
    return output_dir


__all__ = ["collect_report_files", "render_html"]
