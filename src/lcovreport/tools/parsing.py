"""Parsers for the text lcov prints around its reports.

``lcov --summary`` and ``lcov --list`` wrap their useful output in a fixed
frame: one ``Reading tracefile`` banner line on top and, for ``--list``, a
``====`` separator followed by a ``Total:`` row at the bottom. The frame is
checked before it is stripped so a format change in a newer lcov raises
:class:`ToolOutputError` instead of eating real rows.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from lcovreport.errors import ToolOutputError

_LINE_SPLIT = re.compile(r"\r?\n")
_BANNER_PREFIX = "Reading tracefile"
_TOTAL_MARKER = "Total:"
_SEPARATOR = re.compile(r"^=+$")


def split_lines(output: str) -> list[str]:
    """Trim *output* and split it on platform-agnostic line endings."""
    return _LINE_SPLIT.split(output.strip())


@dataclass(frozen=True, slots=True)
class LcovOutput:
    """Contract for one lcov invocation's captured output."""

    banner_lines: int = 1
    footer_lines: int = 0

    def body(self, output: str) -> list[str]:
        lines = split_lines(output)
        self._check_banner(lines)
        self._check_footer(lines)
        end = len(lines) - self.footer_lines
        return lines[self.banner_lines : end]

    def _check_banner(self, lines: list[str]) -> None:
        for line in lines[: self.banner_lines]:
            if not line.startswith(_BANNER_PREFIX):
                msg = f"expected lcov banner starting with {_BANNER_PREFIX!r}, got {line!r}"
                raise ToolOutputError(msg)
        if len(lines) < self.banner_lines + self.footer_lines:
            msg = (
                f"lcov output has {len(lines)} line(s), expected at least "
                f"{self.banner_lines + self.footer_lines}"
            )
            raise ToolOutputError(msg)

    def _check_footer(self, lines: list[str]) -> None:
        if self.footer_lines == 0:
            return
        footer = lines[-self.footer_lines :]
        if _TOTAL_MARKER not in footer[-1]:
            msg = f"expected lcov totals row containing {_TOTAL_MARKER!r}, got {footer[-1]!r}"
            raise ToolOutputError(msg)
        for line in footer[:-1]:
            if not _SEPARATOR.match(line.strip()):
                msg = f"expected lcov separator row, got {line!r}"
                raise ToolOutputError(msg)


# ``lcov --summary``: banner, then the rate lines.
SUMMARY_OUTPUT = LcovOutput(banner_lines=1)

# ``lcov --list``: banner, three header rows, file rows, separator, totals.
LIST_OUTPUT = LcovOutput(banner_lines=1, footer_lines=2)


__all__ = ["LIST_OUTPUT", "SUMMARY_OUTPUT", "LcovOutput", "split_lines"]
