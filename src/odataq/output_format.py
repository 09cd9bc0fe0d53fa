"""Output formats and console rendering for CLI results."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from enum import StrEnum

from rich.console import Console
from rich.syntax import Syntax


DEFAULT_OUTPUT_THEME = "github-dark"


class OutputFormat(StrEnum):
    """Supported output formats."""

    TEXT = "text"
    JSON = "json"


class OutputFormatError(RuntimeError):
    """Raised when an output format is not supported."""


@dataclass(frozen=True)
class PreparedOutput:
    """Prepared output ready for console rendering."""

    text: str
    renderable: object | None = None


def should_use_color(color_flag: bool | None) -> bool:
    """Determine if color should be used based on flag and TTY detection.

    Args:
        color_flag: Explicit color preference (True/False) or None for auto-detect

    Returns:
        True if colors should be used, False otherwise
    """
    if color_flag is None:
        return sys.stdout.isatty()
    return color_flag


def build_console(color_enabled: bool) -> Console:
    """Build a Rich console honoring the color setting."""
    return Console(no_color=not color_enabled, highlight=False, soft_wrap=True)


def parse_output_format(value: str) -> OutputFormat:
    """Normalize and validate an output format name."""
    normalized = value.strip().lower()
    try:
        return OutputFormat(normalized)
    except ValueError as exc:
        available = ", ".join(fmt.value for fmt in OutputFormat)
        raise OutputFormatError(
            f"Unsupported output format: {value}. Available formats: {available}"
        ) from exc


def prepare_output(
    text: str,
    clauses: list[tuple[str, str]],
    output_format: OutputFormat,
    color_enabled: bool,
) -> PreparedOutput:
    """Prepare query output in the selected format.

    Text output is the query string itself; JSON output maps clause names to
    values and is syntax highlighted when color is enabled.
    """
    if output_format == OutputFormat.TEXT:
        return PreparedOutput(text=text)

    payload = json.dumps(dict(clauses), ensure_ascii=False)
    if not color_enabled:
        return PreparedOutput(text=payload)
    return PreparedOutput(
        text=payload,
        renderable=Syntax(
            payload,
            "json",
            theme=DEFAULT_OUTPUT_THEME,
            line_numbers=False,
            word_wrap=True,
        ),
    )


def print_prepared_output(console: Console, prepared_output: PreparedOutput) -> None:
    """Print prepared output to the console."""
    if prepared_output.renderable is not None:
        console.print(prepared_output.renderable)
        return
    console.file.write(f"{prepared_output.text}\n")
    console.file.flush()
