import pytest

from lcovreport.errors import ToolOutputError
from lcovreport.tools.parsing import LIST_OUTPUT, SUMMARY_OUTPUT, split_lines

from tests.conftest import LIST_TEXT, SUMMARY_TEXT


def test_split_lines_handles_crlf() -> None:
    assert split_lines("\n a\r\nb\nc \n") == ["a", "b", "c"]


def test_summary_drops_only_the_banner() -> None:
    raw = split_lines(SUMMARY_TEXT)
    body = SUMMARY_OUTPUT.body(SUMMARY_TEXT)
    assert len(body) == len(raw) - 1
    assert not any(line.startswith("Reading tracefile") for line in body)
    assert body[0] == "Summary coverage rate:"


def test_list_drops_banner_and_footer() -> None:
    raw = split_lines(LIST_TEXT)
    body = LIST_OUTPUT.body(LIST_TEXT)
    assert len(body) == len(raw) - 3
    assert body[-1].startswith("src/b.c")
    assert all("Total:" not in line for line in body)


def test_missing_banner_fails_loudly() -> None:
    with pytest.raises(ToolOutputError, match="banner"):
        SUMMARY_OUTPUT.body("Summary coverage rate:\n  lines......: 75.0%")


def test_changed_footer_fails_loudly() -> None:
    text = LIST_TEXT + "Message summary:\n  no messages were reported\n"
    with pytest.raises(ToolOutputError, match="totals row"):
        LIST_OUTPUT.body(text)


def test_missing_separator_fails_loudly() -> None:
    text = LIST_TEXT.replace("==================================================\n      Total:", "------\n Total:")
    with pytest.raises(ToolOutputError, match="separator"):
        LIST_OUTPUT.body(text)


def test_too_short_output_fails_loudly() -> None:
    with pytest.raises(ToolOutputError, match="expected at least"):
        LIST_OUTPUT.body("Reading tracefile lcov.info")
