"""Centralised exception hierarchy for lcovreport."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class LcovReportError(Exception):
    """Base class for all custom lcovreport exceptions."""


class ConfigurationError(LcovReportError):
    """A step input or the workflow context is missing or invalid."""


class ToolError(LcovReportError):
    """An external tool exited with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int, output: str = "") -> None:
        self.command = tuple(command)
        self.returncode = returncode
        self.output = output
        super().__init__(f"The process '{self.command[0]}' failed with exit code {returncode}")


class ToolOutputError(LcovReportError):
    """An external tool produced output that does not match the expected layout."""


class GitHubAPIError(LcovReportError):
    """The GitHub REST API answered with a non-success status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ArtifactUploadError(LcovReportError):
    """The HTML report could not be stored as a workflow artifact."""


__all__ = [
    "ArtifactUploadError",
    "ConfigurationError",
    "GitHubAPIError",
    "LcovReportError",
    "ToolError",
    "ToolOutputError",
]
