from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from lcovreport import __version__
from lcovreport.cli import cli
from lcovreport.core.pipeline import RunOutcome
from lcovreport.errors import ToolError
from tests.conftest import PUSH_PAYLOAD

if TYPE_CHECKING:
    from collections.abc import Callable

    from click.testing import CliRunner

    from lcovreport.core.context import RunContext
    from lcovreport.core.inputs import ActionInputs


class FakePipeline:
    def __init__(self, *, total: float = 90.0, minimum: float = 80.0, error: Exception | None = None) -> None:
        self.total = total
        self.minimum = minimum
        self.error = error
        self.calls: list[tuple[ActionInputs, RunContext]] = []

    def __call__(self, inputs: ActionInputs, context: RunContext, **_: Any) -> RunOutcome:
        self.calls.append((inputs, context))
        if self.error is not None:
            raise self.error
        return RunOutcome(
            total_coverage=self.total,
            minimum_coverage=self.minimum,
            failed=self.total < self.minimum,
            error_message=f"The code coverage is too low. Expected at least {inputs.minimum_coverage}.",
            merged_trace=Path("lcov.info"),
            html_report=Path("html"),
        )


@pytest.fixture
def pipeline(monkeypatch: pytest.MonkeyPatch) -> Callable[..., FakePipeline]:
    def install(**kwargs: Any) -> FakePipeline:
        fake = FakePipeline(**kwargs)
        monkeypatch.setattr("lcovreport.cli.run.run_report", fake)
        return fake

    return install


@pytest.fixture
def env(github_env: Callable[..., dict[str, str]]) -> dict[str, str]:
    return github_env("push", PUSH_PAYLOAD)


def test_cli_version_flag(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == f"lcovreport {__version__}"


def test_cli_reads_action_inputs_from_env(
    cli_runner: CliRunner, pipeline: Callable[..., FakePipeline], env: dict[str, str]
) -> None:
    fake = pipeline()
    env |= {
        "INPUT_COVERAGE-FILES": " build/**/*.info ",
        "INPUT_MINIMUM-COVERAGE": "80",
        "INPUT_GITHUB-TOKEN": "t0ken",
        "INPUT_ARTIFACT-NAME": "code-coverage",
        "INPUT_INSTALL-LCOV": "false",
    }
    result = cli_runner.invoke(cli, ["run"], env=env)
    assert result.exit_code == 0, result.output
    [(inputs, context)] = fake.calls
    assert inputs.coverage_files == "build/**/*.info"
    assert inputs.minimum_coverage == "80"
    assert inputs.github_token == "t0ken"
    assert inputs.artifact_name == "code-coverage"
    assert inputs.working_directory == "./"
    assert inputs.install_lcov is False
    assert context.short_sha == "abcdef1"


def test_cli_options_override_env(
    cli_runner: CliRunner, pipeline: Callable[..., FakePipeline], env: dict[str, str]
) -> None:
    fake = pipeline()
    env["INPUT_COVERAGE-FILES"] = "from-env/*.info"
    result = cli_runner.invoke(cli, ["run", "--coverage-files", "cli/*.info", "--no-install-lcov"], env=env)
    assert result.exit_code == 0, result.output
    assert fake.calls[0][0].coverage_files == "cli/*.info"
    assert fake.calls[0][0].install_lcov is False


def test_cli_boolean_input_uses_the_yaml_core_schema(
    cli_runner: CliRunner, pipeline: Callable[..., FakePipeline], env: dict[str, str]
) -> None:
    fake = pipeline()
    env |= {"INPUT_COVERAGE-FILES": "*.info", "INPUT_INSTALL-LCOV": "yes"}
    result = cli_runner.invoke(cli, ["run"], env=env)
    assert result.exit_code == 78
    assert "::error::Input does not meet YAML 1.2" in result.output
    assert fake.calls == []


def test_cli_blank_option_counts_as_missing(
    cli_runner: CliRunner, pipeline: Callable[..., FakePipeline], env: dict[str, str]
) -> None:
    pipeline()
    env["INPUT_COVERAGE-FILES"] = "from-env/*.info"
    result = cli_runner.invoke(cli, ["run", "--coverage-files", "  "], env=env)
    assert result.exit_code == 78
    assert "Input required and not supplied: coverage-files" in result.output

def test_cli_fails_below_minimum(
    cli_runner: CliRunner, pipeline: Callable[..., FakePipeline], env: dict[str, str]
) -> None:
    pipeline(total=75.0, minimum=80.0)
    result = cli_runner.invoke(cli, ["run", "--coverage-files", "*.info", "--minimum-coverage", "80"], env=env)
    assert result.exit_code == 1
    assert "::error::The code coverage is too low. Expected at least 80." in result.output


def test_cli_requires_coverage_files(
    cli_runner: CliRunner, pipeline: Callable[..., FakePipeline], env: dict[str, str]
) -> None:
    fake = pipeline()
    result = cli_runner.invoke(cli, ["run"], env=env)
    assert result.exit_code == 78
    assert "::error::Input required and not supplied: coverage-files" in result.output
    assert fake.calls == []


def test_cli_rejects_non_numeric_minimum(
    cli_runner: CliRunner, pipeline: Callable[..., FakePipeline], env: dict[str, str]
) -> None:
    pipeline()
    result = cli_runner.invoke(cli, ["run", "--coverage-files", "*.info", "--minimum-coverage", "lots"], env=env)
    assert result.exit_code == 78
    assert "minimum-coverage must be a number" in result.output


def test_cli_converts_errors_into_failed_run(
    cli_runner: CliRunner, pipeline: Callable[..., FakePipeline], env: dict[str, str]
) -> None:
    pipeline(error=ToolError(["genhtml"], 2, "genhtml: ERROR"))
    result = cli_runner.invoke(cli, ["run", "--coverage-files", "*.info"], env=env)
    assert result.exit_code == 1
    assert "::error::The process 'genhtml' failed with exit code 2" in result.output


def test_cli_debug_reraises(
    cli_runner: CliRunner, pipeline: Callable[..., FakePipeline], env: dict[str, str]
) -> None:
    pipeline(error=RuntimeError("boom"))
    result = cli_runner.invoke(cli, ["run", "--coverage-files", "*.info", "--debug"], env=env)
    assert result.exit_code == 1
    assert isinstance(result.exception, RuntimeError)
