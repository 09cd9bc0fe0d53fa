"""Commands translating a single predicate or path."""

from __future__ import annotations

from collections.abc import Callable

import click
import typer

from odataq.query_language import ODataQueryError, compile_filter_text, compile_path_text


def _echo_translation(translate: Callable[[str], str], text: str) -> None:
    try:
        result = translate(text)
    except ODataQueryError as exc:
        raise click.UsageError(str(exc)) from exc
    typer.echo(result)


def register(app: typer.Typer) -> None:
    """Register the filter and path commands."""

    @app.command("filter")
    def filter_command(
        predicate: str = typer.Argument(..., metavar="PREDICATE", help="Lambda predicate"),
    ) -> None:
        """Translate a lambda predicate into $filter text."""
        _echo_translation(compile_filter_text, predicate)

    @app.command("path")
    def path_command(
        path: str = typer.Argument(..., metavar="PATH", help="Member path or lambda"),
    ) -> None:
        """Resolve a member path into an OData navigation path."""
        _echo_translation(compile_path_text, path)
