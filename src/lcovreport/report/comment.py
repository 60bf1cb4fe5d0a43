"""Compose the coverage comment and post it on the pull request or commit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from lcovreport._meta import logger
from lcovreport.core.config import ACTION_HOME
from lcovreport.core.context import EventKind
from lcovreport.errors import GitHubAPIError

if TYPE_CHECKING:
    from lcovreport.core.context import RunContext
    from lcovreport.github.client import GitHubClient


@dataclass(frozen=True, slots=True)
class PostResult:
    """Outcome of the best-effort comment post."""

    target: str
    posted: bool
    error: str | None = None

    @classmethod
    def ok(cls, target: str) -> PostResult:
        return cls(target=target, posted=True)

    @classmethod
    def failed(cls, target: str, error: str) -> PostResult:
        return cls(target=target, posted=False, error=error)


def _commit_link(context: RunContext) -> str:
    short = f"[<code>{context.short_sha}</code>]"
    if context.is_pull_request:
        return f"{short}({context.pull_number}/commits/{context.commit_sha})"
    return short


def build_comment_body(
    context: RunContext,
    *,
    summary: str,
    details: str,
    error_message: str | None = None,
) -> str:
    body = (
        f"### [LCOV]({ACTION_HOME}) of commit {_commit_link(context)} during "
        f"[{context.workflow} #{context.run_number}]({context.run_url})\n"
        f"<pre>{summary}</pre>\n"
        f"<details><summary>File coverage rate:</summary><pre>{details}</pre></details>"
    )
    if error_message:
        body += f"\n:no_entry: {error_message}"
    return body


def post_comment(client: GitHubClient, context: RunContext, body: str) -> PostResult:
    """Post *body* where the event points; API failures are returned, not raised."""
    event = context.event
    if event is EventKind.PULL_REQUEST:
        target = "PR"
        logger.info("Creating a comment in the PR.")
    elif event is EventKind.PUSH:
        target = "commit"
        logger.info("Creating a comment in the Commit.")
    else:
        logger.info(
            "Event %r is neither a pull request nor a push. Skipping writing a comment.",
            context.event_name,
        )
        return PostResult.failed("none", f"unsupported event {context.event_name!r}")

    try:
        if event is EventKind.PULL_REQUEST:
            client.create_issue_comment(context.pull_number, body)
        else:
            client.create_commit_comment(context.commit_sha, body)
    except GitHubAPIError as exc:
        logger.info(
            "Error while trying to write a comment in the %s. "
            "This may be caused by insufficient permissions of the action.",
            target,
        )
        logger.debug("comment failure: %s", exc)
        return PostResult.failed(target, str(exc))
    return PostResult.ok(target)


__all__ = ["PostResult", "build_comment_body", "post_comment"]
