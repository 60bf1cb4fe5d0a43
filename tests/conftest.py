from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

import httpx
import pytest
from click.testing import CliRunner

from lcovreport.core.context import RunContext
from lcovreport.tools.runner import ToolResult

SUMMARY_TEXT = """\
Reading tracefile /tmp/report/lcov.info
Summary coverage rate:
  lines......: 75.0% (3 of 4 lines)
  functions..: no data found
  branches...: no data found
"""

LIST_TEXT = """\
Reading tracefile /tmp/report/lcov.info
            |Lines       |Functions  |Branches
Filename    |Rate     Num|Rate    Num|Rate     Num
==================================================
src/a.c     |50.0%      2|    -     0|    -      0
src/b.c     | 100%      2|    -     0|    -      0
==================================================
      Total:|75.0%      4|    -     0|    -      0
"""


def trace_record(source: str, *, found: int, hit: int) -> str:
    lines = [f"DA:{n},{1 if n <= hit else 0}" for n in range(1, found + 1)]
    return "\n".join(["TN:", f"SF:{source}", *lines, f"LF:{found}", f"LH:{hit}", "end_of_record", ""])


class FakeRunner:
    """Stand-in for :func:`run_tool` that mimics lcov/genhtml side effects."""

    def __init__(self, outputs: Mapping[str, str] | None = None) -> None:
        self.outputs = {"summary": SUMMARY_TEXT, "list": LIST_TEXT, **(outputs or {})}
        self.calls: list[tuple[tuple[str, ...], Path | None]] = []

    @staticmethod
    def kind(command: Sequence[str]) -> str:
        if command[0] == "genhtml":
            return "genhtml"
        if "apt-get" in command:
            return "install"
        if "--add-tracefile" in command:
            return "merge"
        if "--summary" in command:
            return "summary"
        if "--list" in command:
            return "list"
        return "other"

    def commands(self, kind: str) -> list[tuple[str, ...]]:
        return [cmd for cmd, _ in self.calls if self.kind(cmd) == kind]

    def __call__(self, command: Sequence[str], *, cwd: Path | None = None) -> ToolResult:
        cmd = tuple(str(part) for part in command)
        self.calls.append((cmd, cwd))
        kind = self.kind(cmd)
        if kind == "merge":
            inputs = [cmd[i + 1] for i, part in enumerate(cmd) if part == "--add-tracefile"]
            output = Path(cmd[cmd.index("--output-file") + 1])
            output.write_text("".join(Path(p).read_text(encoding="utf-8") for p in inputs), encoding="utf-8")
        elif kind == "genhtml":
            out_dir = Path(cmd[cmd.index("--output-directory") + 1])
            (out_dir / "src").mkdir(parents=True, exist_ok=True)
            (out_dir / "index.html").write_text("<html></html>", encoding="utf-8")
            (out_dir / "src" / "index.html").write_text("<html></html>", encoding="utf-8")
        return ToolResult(command=cmd, returncode=0, output=self.outputs.get(kind, ""))


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Click CLI runner for invoking the command-line interface."""
    return CliRunner()


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def trace_files(tmp_path: Path) -> list[Path]:
    """Two traces totalling 3 of 4 lines (75.0%)."""
    cov_dir = tmp_path / "coverage"
    cov_dir.mkdir()
    a = cov_dir / "a.info"
    a.write_text(trace_record("src/a.c", found=2, hit=1), encoding="utf-8")
    b = cov_dir / "b.info"
    b.write_text(trace_record("src/b.c", found=2, hit=2), encoding="utf-8")
    return [a, b]


PULL_REQUEST_PAYLOAD: dict[str, Any] = {
    "pull_request": {
        "number": 7,
        "head": {"sha": "0123456789abcdef", "ref": "feature/coverage"},
        "base": {"ref": "main"},
    },
    "repository": {"full_name": "octo/widgets"},
}

PUSH_PAYLOAD: dict[str, Any] = {
    "after": "abcdef1234567890",
    "repository": {"full_name": "octo/widgets"},
}


@pytest.fixture
def github_env(tmp_path: Path) -> Callable[..., dict[str, str]]:
    def build(event_name: str, payload: Mapping[str, Any]) -> dict[str, str]:
        event_path = tmp_path / "event.json"
        event_path.write_text(json.dumps(payload), encoding="utf-8")
        return {
            "GITHUB_EVENT_NAME": event_name,
            "GITHUB_EVENT_PATH": str(event_path),
            "GITHUB_REPOSITORY": "octo/widgets",
            "GITHUB_REF": "refs/heads/main",
            "GITHUB_SHA": "ffffffffffffffff",
            "GITHUB_WORKFLOW": "CI",
            "GITHUB_RUN_NUMBER": "12",
            "GITHUB_RUN_ID": "3456",
            "GITHUB_ACTION": "report",
            "RUNNER_TEMP": str(tmp_path / "runner-temp"),
        }

    return build


@pytest.fixture
def make_context(github_env: Callable[..., dict[str, str]]) -> Callable[..., RunContext]:
    def build(event_name: str = "push", payload: Mapping[str, Any] | None = None) -> RunContext:
        if payload is None:
            payload = PULL_REQUEST_PAYLOAD if event_name == "pull_request" else PUSH_PAYLOAD
        return RunContext.from_env(github_env(event_name, payload))

    return build


class RecordingAPI:
    """``httpx.MockTransport`` handler emulating the GitHub endpoints used."""

    def __init__(
        self,
        *,
        changed_files: Sequence[str] = (),
        page_size: int = 100,
        comment_status: int = 201,
        files_status: int = 200,
        comment_content: bytes | None = None,
    ) -> None:
        self.changed_files = list(changed_files)
        self.page_size = page_size
        self.comment_status = comment_status
        self.files_status = files_status
        self.comment_content = comment_content
        self.requests: list[httpx.Request] = []

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def comments(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "POST"]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            if self.comment_content is not None:
                return httpx.Response(self.comment_status, content=self.comment_content)
            return httpx.Response(self.comment_status, json={"id": 1, **json.loads(request.content)})
        if request.url.path.endswith("/files"):
            if self.files_status >= 300:
                return httpx.Response(self.files_status, json={"message": "Not Found"})
            page = int(request.url.params.get("page", "1"))
            start = (page - 1) * self.page_size
            chunk = self.changed_files[start : start + self.page_size]
            headers = {}
            if start + self.page_size < len(self.changed_files):
                next_url = request.url.copy_set_param("page", str(page + 1))
                headers["Link"] = f'<{next_url}>; rel="next"'
            return httpx.Response(200, json=[{"filename": f} for f in chunk], headers=headers)
        return httpx.Response(404, json={"message": "Not Found"})
