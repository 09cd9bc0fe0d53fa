"""Public API for predicate trees, parsing and filter translation."""

from odataq.query_language.ast import (
    BinaryOp,
    CollectionAny,
    Constant,
    MemberAccess,
    Node,
    Operator,
    ParameterRef,
)
from odataq.query_language.compiler import compile_filter_text, compile_path_text
from odataq.query_language.errors import (
    MalformedPredicate,
    ODataQueryError,
    PredicateParseError,
    QueryOptionError,
    UnsupportedOperator,
    UnsupportedPathExpression,
)
from odataq.query_language.parser import parse_path, parse_predicate
from odataq.query_language.paths import path_root, path_segments, resolve_path
from odataq.query_language.translator import free_parameters, translate_filter


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
    "PredicateParseError",
    "QueryOptionError",
    "UnsupportedOperator",
    "UnsupportedPathExpression",
    "compile_filter_text",
    "compile_path_text",
    "free_parameters",
    "parse_path",
    "parse_predicate",
    "path_root",
    "path_segments",
    "resolve_path",
    "translate_filter",
]
