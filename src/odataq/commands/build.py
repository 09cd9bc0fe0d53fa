"""Build command assembling a full OData query string."""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce

import click
import typer

from odataq import config as config_module
from odataq.output_format import (
    OutputFormat,
    OutputFormatError,
    build_console,
    parse_output_format,
    prepare_output,
    print_prepared_output,
    should_use_color,
)
from odataq.query import QueryOptions, build_query_clauses, join_clauses
from odataq.query_language import (
    BinaryOp,
    Node,
    ODataQueryError,
    Operator,
    parse_path,
    parse_predicate,
)
from odataq.query_language.parser import DEFAULT_PARAMETER


@dataclass
class BuildArgs:
    """Arguments for the build command."""

    filter_text: str | None
    use_filter: list[str] | None
    order_by: str | None
    skip: int | None
    top: int | None
    expand: list[str] | None
    out: str
    color_flag: bool | None


def _combine_filters(texts: list[str]) -> Node | None:
    """Parse predicate texts and join them with `and`."""
    predicates = [parse_predicate(text, parameter=DEFAULT_PARAMETER) for text in texts]
    if not predicates:
        return None
    return reduce(lambda left, right: BinaryOp(Operator.AND, left, right), predicates)


def build_options(args: BuildArgs) -> QueryOptions:
    """Turn command arguments into query options."""
    filter_texts = [config_module.resolve_named_filter(name) for name in args.use_filter or []]
    if args.filter_text:
        filter_texts.append(args.filter_text)

    return QueryOptions(
        filter=_combine_filters(filter_texts),
        order_by=parse_path(args.order_by) if args.order_by else None,
        skip=args.skip,
        top=args.top,
        expand=tuple(parse_path(text) for text in args.expand or []),
    )


def run_build(args: BuildArgs) -> None:
    """Run the build command."""
    if args.skip is not None and args.skip < 0:
        raise typer.BadParameter("--skip must be non-negative")
    if args.top is not None and args.top < 0:
        raise typer.BadParameter("--top must be non-negative")
    try:
        output_format = parse_output_format(args.out)
    except OutputFormatError as exc:
        raise click.UsageError(str(exc)) from exc

    color_enabled = should_use_color(args.color_flag)
    console = build_console(color_enabled)

    try:
        clauses = build_query_clauses(build_options(args))
    except ODataQueryError as exc:
        raise click.UsageError(str(exc)) from exc

    query = join_clauses(clauses)
    prepared_output = prepare_output(query, clauses, output_format, color_enabled)
    print_prepared_output(console, prepared_output)


def register(app: typer.Typer) -> None:
    """Register the build command."""

    @app.command("build")
    def build_command(  # noqa: PLR0913
        filter_text: str | None = typer.Option(
            None,
            "--filter",
            "-f",
            metavar="PREDICATE",
            help="Lambda predicate, e.g. \"x => x.Age > 18\"",
        ),
        use_filter: list[str] | None = typer.Option(  # noqa: B008
            None,
            "--use-filter",
            "-F",
            metavar="NAME",
            help="Named predicate from the config file (repeatable, joined with and)",
        ),
        order_by: str | None = typer.Option(
            None,
            "--order-by",
            "-o",
            metavar="PATH",
            help="Member path to order by, e.g. Address.City",
        ),
        skip: int | None = typer.Option(
            None,
            "--skip",
            metavar="N",
            help="Number of records to skip",
        ),
        top: int | None = typer.Option(
            None,
            "--top",
            "-n",
            metavar="N",
            help="Maximum number of records to return",
        ),
        expand: list[str] | None = typer.Option(  # noqa: B008
            None,
            "--expand",
            "-e",
            metavar="PATH",
            help="Navigation path to expand (repeatable)",
        ),
        out: str = typer.Option(
            OutputFormat.TEXT,
            "--out",
            help="Output format: text or json",
        ),
        color_flag: bool | None = typer.Option(
            None,
            "--color/--no-color",
            help="Force colored output",
        ),
        config: str = typer.Option(
            config_module.DEFAULT_CONFIG_NAME,
            "--config",
            metavar="FILE",
            help="Config file name to load from current directory",
        ),
    ) -> None:
        """Build an OData query string from predicates and paging options."""
        del config
        args = BuildArgs(
            filter_text=filter_text,
            use_filter=use_filter,
            order_by=order_by,
            skip=skip,
            top=top,
            expand=expand,
            out=out,
            color_flag=color_flag,
        )
        config_module.apply_config_defaults(args)
        config_module.log_applied_config_defaults("build")
        config_module.log_command_arguments(args, "build")
        run_build(args)
