"""Immutable description of the workflow run that triggered the step."""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from lcovreport._meta import logger
from lcovreport.core.config import SHORT_SHA_LENGTH
from lcovreport.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping


class EventKind(StrEnum):
    PULL_REQUEST = "pull_request"
    PUSH = "push"
    OTHER = "other"

    @classmethod
    def from_name(cls, name: str) -> EventKind:
        try:
            return cls(name)
        except ValueError:
            return cls.OTHER


def _load_payload(path: str | None) -> dict[str, Any]:
    if not path:
        return {}
    event_path = Path(path)
    if not event_path.exists():
        logger.warning("GITHUB_EVENT_PATH %s does not exist", event_path)
        return {}
    try:
        data = json.loads(event_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        msg = f"failed to parse event payload {event_path}: {exc}"
        raise ConfigurationError(msg) from exc
    return data if isinstance(data, dict) else {}


@dataclass(frozen=True, slots=True)
class RunContext:
    """Event and repository coordinates for one run, built once at startup."""

    event_name: str = ""
    repository: str = ""
    ref: str = ""
    sha: str = ""
    workflow: str = ""
    run_number: int = 0
    run_id: int = 0
    action: str = ""
    server_url: str = "https://github.com"
    api_url: str = "https://api.github.com"
    runner_temp: str = ""
    payload: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RunContext:
        env = os.environ if environ is None else environ
        payload = _load_payload(env.get("GITHUB_EVENT_PATH"))
        return cls(
            event_name=env.get("GITHUB_EVENT_NAME", ""),
            repository=env.get("GITHUB_REPOSITORY", ""),
            ref=env.get("GITHUB_REF", ""),
            sha=env.get("GITHUB_SHA", ""),
            workflow=env.get("GITHUB_WORKFLOW", ""),
            run_number=int(env.get("GITHUB_RUN_NUMBER") or 0),
            run_id=int(env.get("GITHUB_RUN_ID") or 0),
            action=env.get("GITHUB_ACTION", ""),
            server_url=env.get("GITHUB_SERVER_URL") or "https://github.com",
            api_url=env.get("GITHUB_API_URL") or "https://api.github.com",
            runner_temp=env.get("RUNNER_TEMP", ""),
            payload=MappingProxyType(payload),
        )

    # ------------------------------------------------------------------ #
    # Derived coordinates                                                 #
    # ------------------------------------------------------------------ #

    @property
    def event(self) -> EventKind:
        return EventKind.from_name(self.event_name)

    @property
    def is_pull_request(self) -> bool:
        return self.event is EventKind.PULL_REQUEST

    @property
    def owner(self) -> str:
        return self._repo_parts()[0]

    @property
    def repo(self) -> str:
        return self._repo_parts()[1]

    def _repo_parts(self) -> tuple[str, str]:
        repository = self.repository
        if not repository:
            repository = str(self.payload.get("repository", {}).get("full_name", ""))
        owner, sep, repo = repository.partition("/")
        if not sep:
            msg = "context.repo requires a GITHUB_REPOSITORY environment variable like 'owner/repo'"
            raise ConfigurationError(msg)
        return owner, repo

    @property
    def pull_request(self) -> Mapping[str, Any]:
        return self.payload.get("pull_request") or {}

    @property
    def pull_number(self) -> int:
        number = self.pull_request.get("number")
        if number is None:
            msg = "event payload carries no pull_request.number"
            raise ConfigurationError(msg)
        return int(number)

    @property
    def commit_sha(self) -> str:
        """Sha the report is about: PR head for pull requests, ``after`` for pushes."""
        if self.is_pull_request:
            sha = self.pull_request.get("head", {}).get("sha", "")
        elif self.event is EventKind.PUSH:
            sha = self.payload.get("after", "")
        else:
            sha = self.sha
        if not sha:
            msg = f"could not determine the commit sha for event {self.event_name!r}"
            raise ConfigurationError(msg)
        return str(sha)

    @property
    def short_sha(self) -> str:
        return self.commit_sha[:SHORT_SHA_LENGTH]

    @property
    def head_ref(self) -> str:
        if self.is_pull_request:
            return str(self.pull_request.get("head", {}).get("ref", ""))
        return self.ref

    @property
    def base_ref(self) -> str | None:
        if self.is_pull_request:
            return str(self.pull_request.get("base", {}).get("ref", ""))
        return None

    @property
    def run_url(self) -> str:
        # Relative to the PR/commit page the comment is rendered on.
        return f"../actions/runs/{self.run_id}"

    def temp_dir(self) -> Path:
        base = Path(self.runner_temp) if self.runner_temp else Path(tempfile.gettempdir())
        return (base / self.action).resolve()


__all__ = ["EventKind", "RunContext"]
