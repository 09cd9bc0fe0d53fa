#!/usr/bin/env python
"""CLI interface for odataq - OData query string builder."""

from __future__ import annotations

import sys

import typer

from odataq import config, logging_config
from odataq.commands import build, translate


app = typer.Typer(
    help="Build OData query strings from lambda-style predicates.",
    no_args_is_help=True,
)


DEFAULT_VERBOSE: dict[str, bool] = {"value": False}


def _resolve_verbose(verbose: bool | None) -> bool:
    if verbose is None:
        return DEFAULT_VERBOSE["value"]
    return verbose


@app.callback()
def main_callback(
    verbose: bool | None = typer.Option(
        None,
        "--verbose",
        "-v",
        help="Enable verbose logging output",
    ),
) -> None:
    """Global CLI options."""
    if verbose is None and not DEFAULT_VERBOSE["value"]:
        return
    logging_config.configure_logging(_resolve_verbose(verbose))


build.register(app)
translate.register(app)


def main() -> None:
    """Main CLI entry point."""
    loaded_config = config.load_cli_config(sys.argv)
    defaults = dict(loaded_config.defaults)
    DEFAULT_VERBOSE["value"] = bool(defaults.pop("verbose", False))
    config.CONFIG_DEFAULTS.clear()
    config.CONFIG_DEFAULTS.update(defaults)
    config.CONFIG_APPEND_DEFAULTS.clear()
    config.CONFIG_APPEND_DEFAULTS.update(loaded_config.append_defaults)
    config.CONFIG_NAMED_FILTERS.clear()
    config.CONFIG_NAMED_FILTERS.update(loaded_config.named_filters)

    command = typer.main.get_command(app)
    default_map = config.build_default_map(defaults) if defaults else None
    command.main(
        args=sys.argv[1:],
        prog_name="odataq",
        standalone_mode=True,
        default_map=default_map,
    )


if __name__ == "__main__":
    main()
