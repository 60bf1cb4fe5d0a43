"""Locate, render, merge, evaluate and report: one reporting run end to end."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from lcovreport._meta import logger
from lcovreport.core.coverage import below_minimum, failure_message, lcov_total
from lcovreport.core.locate import locate_trace_files
from lcovreport.github import actions
from lcovreport.github.client import GitHubClient
from lcovreport.report.comment import PostResult, build_comment_body, post_comment
from lcovreport.report.extract import detail, summarize
from lcovreport.report.render import render_html
from lcovreport.tools.lcov import install_lcov, merge_traces
from lcovreport.tools.runner import run_tool

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from lcovreport.core.context import RunContext
    from lcovreport.core.inputs import ActionInputs
    from lcovreport.github.artifact import ArtifactUploader
    from lcovreport.tools.runner import Runner


@dataclass(frozen=True, slots=True)
class RunOutcome:
    """Result of a reporting run; ``failed`` is the coverage gate decision."""

    total_coverage: float
    minimum_coverage: float
    failed: bool
    error_message: str
    merged_trace: Path
    html_report: Path
    post_result: PostResult | None = None


def default_client(inputs: ActionInputs, context: RunContext) -> GitHubClient:
    return GitHubClient(inputs.github_token, context.owner, context.repo, base_url=context.api_url)


def _report(
    inputs: ActionInputs,
    context: RunContext,
    merged: Path,
    *,
    error_message: str | None,
    runner: Runner,
    client_factory: Callable[[ActionInputs, RunContext], GitHubClient],
) -> PostResult:
    logger.debug(
        "reporting %s on %s (head %s, base %s)",
        context.event_name,
        context.repository,
        context.head_ref,
        context.base_ref or "-",
    )
    with client_factory(inputs, context) as client:
        summary = summarize(merged, runner=runner)
        details = detail(merged, context=context, client=client, runner=runner)
        body = build_comment_body(context, summary=summary, details=details, error_message=error_message)
        return post_comment(client, context, body)


def run_report(
    inputs: ActionInputs,
    context: RunContext,
    *,
    runner: Runner = run_tool,
    client_factory: Callable[[ActionInputs, RunContext], GitHubClient] = default_client,
    uploader_factory: Callable[[], ArtifactUploader] | None = None,
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> RunOutcome:
    """Run every step once, in order, and return the gate decision.

    Errors from the tools, the file listing or the artifact upload propagate.
    Only the comment post is best-effort.
    """
    minimum = inputs.minimum()
    tmp_path = context.temp_dir()

    if inputs.install_lcov:
        with actions.group("Install lcov"):
            install_lcov(runner=runner)

    trace_files = locate_trace_files(inputs.coverage_files, cwd=cwd)

    with actions.group("Generate HTML report"):
        html_report = render_html(
            trace_files,
            tmp_path,
            working_directory=inputs.working_directory,
            artifact_name=inputs.artifact_name,
            runner=runner,
            uploader_factory=uploader_factory,
        )

    with actions.group("Merge coverage files"):
        merged = merge_traces(trace_files, tmp_path, runner=runner)

    exact = lcov_total(merged)
    error_message = failure_message(inputs.minimum_coverage)
    failed = below_minimum(exact, minimum)
    total = round(exact, 2)
    logger.info("Total coverage: %.2f%% (minimum %s)", total, inputs.minimum_coverage)

    post_result: PostResult | None = None
    if inputs.reporting_enabled:
        post_result = _report(
            inputs,
            context,
            merged,
            error_message=error_message if failed else None,
            runner=runner,
            client_factory=client_factory,
        )
    else:
        logger.info("github-token received is empty. Skipping writing a comment.")
        logger.info(
            "Note: This could happen even if github-token was provided in workflow file. "
            "It could be because your github token does not have permissions for commenting in target repo."
        )

    actions.set_output("total-coverage", f"{total:.2f}", environ=environ)
    actions.set_output("passed", "false" if failed else "true", environ=environ)

    return RunOutcome(
        total_coverage=total,
        minimum_coverage=minimum,
        failed=failed,
        error_message=error_message,
        merged_trace=merged,
        html_report=html_report,
        post_result=post_result,
    )


__all__ = ["RunOutcome", "default_client", "run_report"]
