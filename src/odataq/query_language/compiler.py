"""Compiler entrypoints turning predicate text into OData fragments."""

from __future__ import annotations

from odataq.query_language.parser import parse_path, parse_predicate
from odataq.query_language.paths import resolve_path
from odataq.query_language.translator import translate_filter


def compile_filter_text(text: str) -> str:
    """Parse lambda predicate text and translate it to `$filter` text."""
    return translate_filter(parse_predicate(text))


def compile_path_text(text: str) -> str:
    """Parse path text and resolve it to a navigation path."""
    return resolve_path(parse_path(text))
