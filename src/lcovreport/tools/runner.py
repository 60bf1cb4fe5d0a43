"""Run external tools and capture their combined output."""

from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from lcovreport._meta import logger
from lcovreport.errors import ToolError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


@dataclass(frozen=True, slots=True)
class ToolResult:
    command: tuple[str, ...]
    returncode: int
    output: str


class Runner(Protocol):
    def __call__(self, command: Sequence[str], *, cwd: Path | None = None) -> ToolResult: ...


def run_tool(command: Sequence[str], *, cwd: Path | None = None) -> ToolResult:
    """Run *command* to completion and return its interleaved stdout/stderr.

    Raises :class:`ToolError` when the process exits non-zero. A missing
    executable surfaces as the ``OSError`` raised by :mod:`subprocess`.
    """
    cmd = tuple(str(part) for part in command)
    logger.info("[command]%s", shlex.join(cmd))
    proc = subprocess.run(
        cmd,
        cwd=cwd,
        check=False,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
    )
    output = proc.stdout or ""
    if proc.returncode != 0:
        if output:
            logger.error("%s", output.rstrip())
        raise ToolError(cmd, proc.returncode, output)
    if output:
        logger.info("%s", output.rstrip())
    return ToolResult(command=cmd, returncode=proc.returncode, output=output)


__all__ = ["Runner", "ToolResult", "run_tool"]
