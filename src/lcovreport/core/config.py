"""Central configuration and constants for ``lcovreport``."""

from __future__ import annotations

# Default logging format used by the CLI entry point.
LOG_FORMAT = "%(levelname)s: %(message)s"

# Passed to every lcov/genhtml call so branch data is kept and reported.
BRANCH_COVERAGE_RC = ("--rc", "lcov_branch_coverage=1")

MERGED_TRACEFILE_NAME = "lcov.info"
HTML_DIRNAME = "html"

INSTALL_COMMAND = ("sudo", "apt-get", "install", "-y", "lcov")

# Returned by the detail extractor when no changed file has coverage rows.
NOT_APPLICABLE = " n/a"

# Rows 0-2 of ``lcov --list`` output form the table header.
DETAIL_HEADER_ROWS = 3

SHORT_SHA_LENGTH = 7

ACTION_HOME = "https://github.com/immel-f/github-actions-report-lcov"

__all__ = [
    "ACTION_HOME",
    "BRANCH_COVERAGE_RC",
    "DETAIL_HEADER_ROWS",
    "HTML_DIRNAME",
    "INSTALL_COMMAND",
    "LOG_FORMAT",
    "MERGED_TRACEFILE_NAME",
    "NOT_APPLICABLE",
    "SHORT_SHA_LENGTH",
]
