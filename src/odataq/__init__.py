"""odataq - Build OData query strings from predicate trees."""

from odataq.builder import Path, Predicate, it, param, to_node
from odataq.query import QueryOptions, build_query, build_query_clauses, render_query
from odataq.query_language import (
    BinaryOp,
    CollectionAny,
    Constant,
    MalformedPredicate,
    MemberAccess,
    Node,
    ODataQueryError,
    Operator,
    ParameterRef,
    PredicateParseError,
    QueryOptionError,
    UnsupportedOperator,
    UnsupportedPathExpression,
    compile_filter_text,
    parse_path,
    parse_predicate,
    resolve_path,
    translate_filter,
)


__version__ = "0.1.0"

__all__ = [
    "BinaryOp",
    "CollectionAny",
    "Constant",
    "MalformedPredicate",
    "MemberAccess",
    "Node",
    "ODataQueryError",
    "Operator",
    "ParameterRef",
    "Path",
    "Predicate",
    "PredicateParseError",
    "QueryOptionError",
    "QueryOptions",
    "UnsupportedOperator",
    "UnsupportedPathExpression",
    "__version__",
    "build_query",
    "build_query_clauses",
    "compile_filter_text",
    "it",
    "param",
    "parse_path",
    "parse_predicate",
    "render_query",
    "resolve_path",
    "to_node",
    "translate_filter",
]
