"""Total line coverage of an LCOV trace and the minimum-coverage gate."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

_FULL_PERCENT = 100.0


@dataclass(frozen=True, slots=True)
class LineTotals:
    found: int = 0
    hit: int = 0

    @property
    def percent(self) -> float:
        if self.found == 0:
            return 0.0
        return self.hit / self.found * _FULL_PERCENT


def read_line_totals(trace_file: Path) -> LineTotals:
    """Sum the ``LF``/``LH`` records of *trace_file*."""
    found = 0
    hit = 0
    with trace_file.open(encoding="utf-8") as fh:
        for raw in fh:
            line = raw.strip()
            if line.startswith("LF:"):
                found += int(line[3:])
            elif line.startswith("LH:"):
                hit += int(line[3:])
    return LineTotals(found=found, hit=hit)


def lcov_total(trace_file: Path) -> float:
    """Return total line coverage of *trace_file* as an unrounded percentage (0-100)."""
    return read_line_totals(trace_file).percent


def below_minimum(total: float, minimum: float) -> bool:
    """Return ``True`` when *total* misses *minimum*; equality passes."""
    return total < minimum


def failure_message(minimum: str) -> str:
    return f"The code coverage is too low. Expected at least {minimum}."


__all__ = ["LineTotals", "below_minimum", "failure_message", "lcov_total", "read_line_totals"]
