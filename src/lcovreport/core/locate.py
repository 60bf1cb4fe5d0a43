"""Expand the ``coverage-files`` pattern into trace file paths."""

from __future__ import annotations

import glob
from pathlib import Path

from pathspec import GitIgnoreSpec

from lcovreport._meta import logger


def _split_patterns(pattern: str) -> tuple[list[str], list[str]]:
    """Return *(includes, excludes)* from a multi-line pattern string."""
    includes: list[str] = []
    excludes: list[str] = []
    for raw in pattern.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("!"):
            excludes.append(line[1:].strip())
        else:
            includes.append(line)
    return includes, excludes


def _relative(path: Path, base: Path) -> str:
    try:
        return path.resolve().relative_to(base.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def _exclusion_specs(excludes: list[str]) -> tuple[GitIgnoreSpec | None, GitIgnoreSpec | None]:
    """Return *(relative, absolute)* specs; absolute lines lose their leading ``/``."""
    relative = [line for line in excludes if not line.startswith("/")]
    absolute = [line.lstrip("/") for line in excludes if line.startswith("/")]
    return (
        GitIgnoreSpec.from_lines(relative) if relative else None,
        GitIgnoreSpec.from_lines(absolute) if absolute else None,
    )


def _is_excluded(
    path: Path, base: Path, relative: GitIgnoreSpec | None, absolute: GitIgnoreSpec | None
) -> bool:
    if relative is not None and relative.match_file(_relative(path, base)):
        return True
    if absolute is None:
        return False
    candidates = {path.absolute().as_posix(), path.resolve().as_posix()}
    return any(absolute.match_file(candidate.lstrip("/")) for candidate in candidates)


def locate_trace_files(pattern: str, *, cwd: Path | None = None) -> tuple[Path, ...]:
    """Return the trace files matching *pattern*, in glob expansion order.

    *pattern* may hold several newline-separated globs. Lines starting with
    ``!`` exclude matches, blank lines and ``#`` comments are ignored.
    Relative patterns are resolved against *cwd*. Absolute exclusions
    are matched against the absolute path of each file.
    """
    base = cwd or Path.cwd()
    includes, excludes = _split_patterns(pattern)
    relative_excludes, absolute_excludes = _exclusion_specs(excludes)

    found: list[Path] = []
    seen: set[Path] = set()
    for include in includes:
        for match in glob.glob(include, root_dir=base, recursive=True):
            path = Path(match) if Path(match).is_absolute() else base / match
            if not path.is_file() or path in seen:
                continue
            if _is_excluded(path, base, relative_excludes, absolute_excludes):
                continue
            seen.add(path)
            found.append(path)

    if not found:
        logger.warning("No coverage files matched %r", pattern)
    else:
        logger.debug("located %d coverage file(s)", len(found))
    return tuple(found)


__all__ = ["locate_trace_files"]
