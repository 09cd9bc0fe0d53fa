"""Assembly of OData query strings from predicate and paging directives."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from odataq.logging_config import get_logger
from odataq.query_language.ast import MemberAccess, Node
from odataq.query_language.errors import QueryOptionError
from odataq.query_language.paths import resolve_path
from odataq.query_language.translator import translate_filter


CLAUSE_SEPARATOR = "&"
EXPAND_SEPARATOR = ","

logger = get_logger()


@dataclass(frozen=True, slots=True)
class QueryOptions:
    """Directives for one OData query."""

    filter: Node | None = None
    order_by: MemberAccess | None = None
    skip: int | None = None
    top: int | None = None
    expand: tuple[MemberAccess, ...] = ()


def _validate_paging(name: str, value: int | None) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise QueryOptionError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0:
        raise QueryOptionError(f"{name} must be non-negative, got {value}")


def build_query_clauses(options: QueryOptions) -> list[tuple[str, str]]:
    """Return `(name, value)` clause pairs in `$filter, $orderby, $skip, $top, $expand` order."""
    _validate_paging("$skip", options.skip)
    _validate_paging("$top", options.top)

    clauses: list[tuple[str, str]] = []
    if options.filter is not None:
        filter_text = translate_filter(options.filter)
        if filter_text:
            clauses.append(("$filter", filter_text))
    if options.order_by is not None:
        clauses.append(("$orderby", resolve_path(options.order_by)))
    if options.skip is not None:
        clauses.append(("$skip", str(options.skip)))
    if options.top is not None:
        clauses.append(("$top", str(options.top)))
    if options.expand:
        expand_text = EXPAND_SEPARATOR.join(resolve_path(path) for path in options.expand)
        clauses.append(("$expand", expand_text))
    return clauses


def join_clauses(clauses: list[tuple[str, str]]) -> str:
    """Join clause pairs into an unencoded OData query string."""
    query = CLAUSE_SEPARATOR.join(f"{name}={value}" for name, value in clauses)
    logger.info("Query: %s", query)
    return query


def render_query(options: QueryOptions) -> str:
    """Render options as an unencoded OData query string."""
    return join_clauses(build_query_clauses(options))


def build_query(
    filter: Node | None = None,  # noqa: A002
    order_by: MemberAccess | None = None,
    skip: int | None = None,
    top: int | None = None,
    expand: Sequence[MemberAccess] | None = None,
) -> str:
    """Build an OData query string.

    Clauses appear in the fixed order `$filter`, `$orderby`, `$skip`, `$top`,
    `$expand` and only when their input is present. No directives yield an
    empty string. The result is not URL-encoded.

    Args:
        filter: Predicate tree for `$filter`
        order_by: Member path for `$orderby`
        skip: Number of records to skip
        top: Maximum number of records to return
        expand: Member paths for `$expand`

    Returns:
        Query string such as `$filter=Age gt 18&$top=5`
    """
    options = QueryOptions(
        filter=filter,
        order_by=order_by,
        skip=skip,
        top=top,
        expand=tuple(expand or ()),
    )
    return render_query(options)
