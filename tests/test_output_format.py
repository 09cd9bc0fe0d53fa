"""Tests for output format helpers."""

from __future__ import annotations

import io
import json
import sys
from typing import cast

import pytest
from rich.console import Console
from rich.syntax import Syntax

from odataq import output_format


CLAUSES = [("$filter", "Name eq 'Ann'"), ("$top", "5")]
QUERY = "$filter=Name eq 'Ann'&$top=5"


class _FakeConsole:
    def __init__(self) -> None:
        self.file = io.StringIO()
        self.renderables: list[object] = []

    def print(self, renderable: object, **kwargs: object) -> None:
        del kwargs
        self.renderables.append(renderable)


@pytest.mark.parametrize("value", ["text", "JSON", "  json  "])
def test_parse_output_format_normalizes(value: str) -> None:
    """Format names are case and whitespace insensitive."""
    assert output_format.parse_output_format(value).value == value.strip().lower()


def test_parse_output_format_rejects_unknown() -> None:
    """Unknown formats list the available ones."""
    with pytest.raises(output_format.OutputFormatError, match="Available formats: text, json"):
        output_format.parse_output_format("xml")


def test_prepare_output_text_writes_query_verbatim() -> None:
    """Text output is the query itself, even with color enabled."""
    console = _FakeConsole()
    prepared_output = output_format.prepare_output(
        QUERY, CLAUSES, output_format.OutputFormat.TEXT, True
    )

    output_format.print_prepared_output(cast(Console, console), prepared_output)

    assert console.file.getvalue() == f"{QUERY}\n"
    assert console.renderables == []


def test_prepare_output_json_plain_without_color() -> None:
    """JSON output maps clause names to values."""
    console = _FakeConsole()
    prepared_output = output_format.prepare_output(
        QUERY, CLAUSES, output_format.OutputFormat.JSON, False
    )

    output_format.print_prepared_output(cast(Console, console), prepared_output)

    assert json.loads(console.file.getvalue()) == {"$filter": "Name eq 'Ann'", "$top": "5"}


def test_prepare_output_json_uses_syntax_with_color() -> None:
    """Colored JSON output is syntax highlighted."""
    console = _FakeConsole()
    prepared_output = output_format.prepare_output(
        QUERY, CLAUSES, output_format.OutputFormat.JSON, True
    )

    output_format.print_prepared_output(cast(Console, console), prepared_output)

    assert console.file.getvalue() == ""
    assert len(console.renderables) == 1
    syntax = console.renderables[0]
    assert isinstance(syntax, Syntax)
    assert syntax.lexer is not None
    assert syntax.lexer.name.lower() == "json"
    assert syntax.word_wrap is True


def test_prepare_output_json_empty_query() -> None:
    """No clauses produce an empty JSON object."""
    prepared_output = output_format.prepare_output("", [], output_format.OutputFormat.JSON, False)
    assert prepared_output.text == "{}"


def test_should_use_color_respects_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    """Explicit color flag should override TTY detection."""
    monkeypatch.setattr(sys.stdout, "isatty", lambda: False)

    assert output_format.should_use_color(True) is True
    assert output_format.should_use_color(False) is False
    assert output_format.should_use_color(None) is False


def test_should_use_color_uses_tty(monkeypatch: pytest.MonkeyPatch) -> None:
    """When flag is None, use TTY detection."""
    monkeypatch.setattr(sys.stdout, "isatty", lambda: True)

    assert output_format.should_use_color(None) is True


def test_build_console_disables_color() -> None:
    """Console honors the color setting."""
    assert output_format.build_console(False).no_color is True
    assert output_format.build_console(True).no_color is False
