"""Configuration handling for the odataq CLI."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TypeGuard, cast

import typer

from odataq.logging_config import get_logger
from odataq.output_format import OutputFormat


DEFAULT_CONFIG_NAME = ".odataq.json"

COMMAND_OPTION_NAMES = {
    "color_flag",
    "order_by",
    "out",
    "skip",
    "top",
    "verbose",
}

CONFIG_APPEND_DEFAULTS: dict[str, list[str]] = {}
CONFIG_DEFAULTS: dict[str, object] = {}
CONFIG_NAMED_FILTERS: dict[str, str] = {}


DEST_TO_OPTION_NAME: dict[str, str] = {
    "color_flag": "--color/--no-color",
    "expand": "--expand",
    "order_by": "--order-by",
    "out": "--out",
    "skip": "--skip",
    "top": "--top",
    "use_filter": "--use-filter",
    "verbose": "--verbose",
}


logger = get_logger()


@dataclass
class ConfigOptions:
    """Config option mapping metadata."""

    int_options: dict[str, tuple[str, int | None]]
    bool_options: dict[str, str]
    str_options: dict[str, str]
    list_options: dict[str, str]


BUILD_OPTIONS = ConfigOptions(
    int_options={"--skip": ("skip", 0), "--top": ("top", 0)},
    bool_options={"--color": "color_flag", "--verbose": "verbose"},
    str_options={"--order-by": "order_by", "--out": "out"},
    list_options={"--expand": "expand", "--use-filter": "use_filter"},
)


@dataclass
class LoadedCliConfig:
    """Fully parsed CLI config payload."""

    defaults: dict[str, object]
    append_defaults: dict[str, list[str]]
    named_filters: dict[str, str]


def load_config(path: Path) -> tuple[dict[str, object], bool]:
    """Read a JSON config file.

    Returns:
        Tuple of (config object, malformed flag); a missing file is empty, not malformed
    """
    if not path.exists():
        return ({}, False)
    try:
        config = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return ({}, True)
    if not isinstance(config, dict):
        return ({}, True)
    return (config, False)


def is_string_list(value: object) -> TypeGuard[list[str]]:
    """Return whether value is a list of strings."""
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def is_string_dict(value: object) -> TypeGuard[dict[str, str]]:
    """Return whether value is a dict of string keys and values."""
    return isinstance(value, dict) and all(
        isinstance(key, str) and isinstance(item, str) for key, item in value.items()
    )


def validate_int_option(value: object, min_value: int | None) -> int | None:
    """Validate integer option value."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    if min_value is not None and value < min_value:
        return None
    return value


def validate_str_option(key: str, value: object) -> str | None:
    """Validate string option value."""
    if not isinstance(value, str) or not value.strip():
        return None
    if key == "--out" and value.strip().lower() not in {fmt.value for fmt in OutputFormat}:
        return None
    return value


def apply_config_entry(
    key: str,
    value: object,
    defaults: dict[str, object],
    append_defaults: dict[str, list[str]],
    options: ConfigOptions,
) -> bool:
    """Apply a config entry to defaults if valid."""
    if key in options.int_options:
        dest, min_value = options.int_options[key]
        int_value = validate_int_option(value, min_value)
        if int_value is None:
            return False
        defaults[dest] = int_value
        return True
    if key in options.bool_options:
        if not isinstance(value, bool):
            return False
        defaults[options.bool_options[key]] = value
        return True
    if key in options.str_options:
        str_value = validate_str_option(key, value)
        if str_value is None:
            return False
        defaults[options.str_options[key]] = str_value
        return True
    if key in options.list_options:
        if not is_string_list(value):
            return False
        append_defaults[options.list_options[key]] = list(value)
        return True
    return False


def parse_config_sections(
    raw_config: dict[str, object],
) -> tuple[dict[str, object], dict[str, str]] | None:
    """Parse top-level config sections.

    Accepted shape:
      {
        "defaults": {"--top": 50, "--expand": ["Department"], ...},
        "filter": {"name": "x => x.Status == 'Active'"}
      }
    """
    allowed_keys = {"defaults", "filter"}
    if any(key not in allowed_keys for key in raw_config):
        return None

    defaults_section = raw_config.get("defaults", {})
    if not isinstance(defaults_section, dict):
        return None

    filter_section = raw_config.get("filter", {})
    if not is_string_dict(filter_section):
        return None

    return (cast(dict[str, object], defaults_section), dict(filter_section))


def build_config_defaults(
    config: dict[str, object],
) -> tuple[dict[str, object], dict[str, list[str]]] | None:
    """Validate config values and build defaults.

    Args:
        config: Raw `defaults` section

    Returns:
        Tuple of (defaults, append defaults) or None if any entry is invalid
    """
    defaults: dict[str, object] = {}
    append_defaults: dict[str, list[str]] = {}
    for key, value in config.items():
        if not apply_config_entry(key, value, defaults, append_defaults, BUILD_OPTIONS):
            return None
    return (defaults, append_defaults)


def parse_config_argument(argv: list[str]) -> Path:
    """Find the --config value in raw argv and resolve it against the working directory.

    Scanning stops at `--`, after which arguments are predicates, not options.
    """
    config_name = DEFAULT_CONFIG_NAME
    args = iter(argv[1:])
    for arg in args:
        if arg == "--":
            break
        if arg == "--config":
            config_name = next(args, config_name)
        elif arg.startswith("--config="):
            config_name = arg.removeprefix("--config=")
    return Path.cwd() / config_name


def load_cli_config(argv: list[str]) -> LoadedCliConfig:
    """Load and validate the config file selected by argv."""
    config, malformed = load_config(parse_config_argument(argv))
    sections = None if malformed else parse_config_sections(config)
    config_defaults = None if sections is None else build_config_defaults(sections[0])
    if sections is None or config_defaults is None:
        raise typer.BadParameter("Malformed config")

    defaults, append_defaults = config_defaults
    return LoadedCliConfig(
        defaults=defaults,
        append_defaults=append_defaults,
        named_filters=sections[1],
    )


def build_default_map(defaults: dict[str, object]) -> dict[str, dict[str, object]]:
    """Build Click default_map for Typer commands."""
    build_defaults = {
        key: value
        for key, value in defaults.items()
        if key in COMMAND_OPTION_NAMES and key != "verbose"
    }
    return {"build": build_defaults}


def _format_log_entry(name: str, value: object) -> str:
    """Format one option/value pair for logging."""
    return f"{name}={value!r}"


def log_applied_config_defaults(command_name: str) -> None:
    """Log config defaults loaded from config file."""
    if not logger.isEnabledFor(logging.INFO):
        return

    entries: list[str] = []
    for dest, value in sorted({**CONFIG_DEFAULTS, **CONFIG_APPEND_DEFAULTS}.items()):
        option_name = DEST_TO_OPTION_NAME.get(dest)
        if option_name is None:
            continue
        entries.append(_format_log_entry(option_name, value))

    if CONFIG_NAMED_FILTERS:
        entries.append(_format_log_entry("filters", sorted(CONFIG_NAMED_FILTERS)))

    if entries:
        logger.info("Config defaults applied (%s): %s", command_name, ", ".join(entries))


def log_command_arguments(args: object, command_name: str) -> None:
    """Log all final argument values used to run a command."""
    if not logger.isEnabledFor(logging.INFO):
        return

    try:
        arg_items = vars(args).items()
    except TypeError:
        return

    entries = [
        _format_log_entry(arg_name, arg_value)
        for arg_name, arg_value in sorted(arg_items, key=lambda item: item[0])
    ]
    logger.info("Command arguments (%s): %s", command_name, ", ".join(entries))


def apply_config_defaults(args: object) -> None:
    """Apply config-provided defaults for list options left unset."""
    for dest, values in CONFIG_APPEND_DEFAULTS.items():
        if not hasattr(args, dest):
            continue
        if not getattr(args, dest, None):
            setattr(args, dest, list(values))


def resolve_named_filter(name: str) -> str:
    """Return predicate text for a filter name defined in the config file."""
    text = CONFIG_NAMED_FILTERS.get(name)
    if text is None:
        available = ", ".join(sorted(CONFIG_NAMED_FILTERS)) or "none"
        raise typer.BadParameter(
            f"Unknown filter: {name}. Available filters: {available}",
            param_hint="--use-filter",
        )
    return text
