"""Step inputs, read the way the GitHub Actions toolkit reads them."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from lcovreport.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

_TRUE_VALUES = {"true", "True", "TRUE"}
_FALSE_VALUES = {"false", "False", "FALSE"}


def input_env_name(name: str) -> str:
    """Return the environment variable that carries input *name*."""
    return "INPUT_" + name.replace(" ", "_").upper()


def get_input(name: str, *, required: bool = False, environ: Mapping[str, str] | None = None) -> str:
    env = os.environ if environ is None else environ
    value = env.get(input_env_name(name), "").strip()
    if required and not value:
        msg = f"Input required and not supplied: {name}"
        raise ConfigurationError(msg)
    return value


def get_boolean_input(name: str, *, default: bool, environ: Mapping[str, str] | None = None) -> bool:
    value = get_input(name, environ=environ)
    if not value:
        return default
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    msg = (
        f"Input does not meet YAML 1.2 \"Core Schema\" specification: {name}\n"
        "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
    )
    raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class ActionInputs:
    """Inputs of the reporting step, all trimmed."""

    coverage_files: str
    minimum_coverage: str = "0"
    github_token: str = ""
    working_directory: str = "./"
    artifact_name: str = ""
    install_lcov: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ActionInputs:
        return cls(
            coverage_files=get_input("coverage-files", required=True, environ=environ),
            minimum_coverage=get_input("minimum-coverage", environ=environ) or "0",
            github_token=get_input("github-token", environ=environ),
            working_directory=get_input("working-directory", environ=environ) or "./",
            artifact_name=get_input("artifact-name", environ=environ),
            install_lcov=get_boolean_input("install-lcov", default=True, environ=environ),
        )

    @property
    def reporting_enabled(self) -> bool:
        return bool(self.github_token)

    def minimum(self) -> float:
        """Return the minimum coverage as a number (an empty value means 0)."""
        raw = self.minimum_coverage.strip().rstrip("%")
        if not raw:
            return 0.0
        try:
            return float(raw)
        except ValueError as exc:
            msg = f"minimum-coverage must be a number, got {self.minimum_coverage!r}"
            raise ConfigurationError(msg) from exc


__all__ = ["ActionInputs", "get_boolean_input", "get_input", "input_env_name"]
