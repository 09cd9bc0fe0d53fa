"""Parser for lambda-style predicate and path text."""

from __future__ import annotations

import ast
from collections.abc import Callable, Generator
from typing import TypeAlias, cast

from parsy import ParseError, Parser, eof, forward_declaration, generate, regex, seq, string

from odataq.query_language.ast import (
    BinaryOp,
    CollectionAny,
    Constant,
    MemberAccess,
    Node,
    ParameterRef,
)
from odataq.query_language.errors import PredicateParseError
from odataq.query_language.translator import free_parameters


DEFAULT_PARAMETER = "it"

Lambda: TypeAlias = tuple[str, Node]


def _parse_line_and_column(line_info: str) -> tuple[int, int]:
    """Parse line and column from parsy line info string."""
    line_text, sep, column_text = line_info.partition(":")
    if sep == "":
        return (0, 0)
    if not line_text.isdigit() or not column_text.isdigit():
        return (0, 0)
    return (int(line_text), int(column_text))


def _format_parse_error(text: str, exc: ParseError) -> str:
    """Build parse error message with a pointer at the failing column."""
    line_number, column_number = _parse_line_and_column(exc.line_info())
    text_lines = text.splitlines() or [text]
    error_line = text_lines[line_number] if 0 <= line_number < len(text_lines) else text
    pointer = " " * max(column_number, 0) + "^"
    return f"Invalid predicate syntax: {exc}\n\n{error_line}\n{pointer}"


def _decode_string(token_value: str) -> str:
    """Decode a single- or double-quoted string literal token."""
    try:
        decoded = ast.literal_eval(token_value)
    except (SyntaxError, ValueError) as exc:
        raise PredicateParseError(f"Invalid string literal: {token_value}") from exc
    if isinstance(decoded, str):
        return decoded
    raise PredicateParseError("Invalid string literal")


def _decode_number(token_value: str) -> Constant:
    if any(marker in token_value for marker in ".eE"):
        return Constant(float(token_value))
    return Constant(int(token_value))


def _keyword(name: str) -> Parser:
    """Build a keyword parser with identifier boundary."""
    return regex(rf"{name}(?![A-Za-z0-9_])").desc(name)


def _lexeme(parser: Parser) -> Parser:
    """Consume optional whitespace after parser."""
    return parser << regex(r"\s*")


def _symbol(value: str) -> Parser:
    """Build a symbol token parser."""
    return _lexeme(string(value))


def _chain_left(
    term: Parser,
    op: Parser,
    builder: Callable[[str, Node, Node], Node],
) -> Parser:
    """Build a left-associative parser from term and operator parsers."""

    @generate
    def parser() -> Generator[Parser, object, Node]:
        left_result = yield term
        rest_result = yield seq(op, term).many()

        current = cast(Node, left_result)
        for operator, right in cast(list[tuple[str, Node]], rest_result):
            current = builder(operator, current, right)
        return current

    return parser


def _binary_builder(operator: str, left: Node, right: Node) -> Node:
    """Construct binary operation node; unsupported operators raise here."""
    return BinaryOp(operator, left, right)


def _build_literal_parser() -> Parser:
    """Build parser for string, number, boolean and null literals."""
    string_token = _lexeme(regex(r'"(?:[^"\\]|\\.)*"') | regex(r"'(?:[^'\\]|\\.)*'"))
    number_token = _lexeme(regex(r"-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?"))
    true_literal = _lexeme(_keyword("true") | _keyword("True")).result(Constant(True))
    false_literal = _lexeme(_keyword("false") | _keyword("False")).result(Constant(False))
    null_literal = _lexeme(_keyword("null") | _keyword("None")).result(Constant(None))
    return (
        true_literal
        | false_literal
        | null_literal
        | number_token.map(_decode_number)
        | string_token.map(lambda v: Constant(_decode_string(v)))
    )


def _build_path_operand_parser(identifier: Parser, lambda_expr: Parser) -> Parser:
    """Build parser for `param.Member...` paths with an optional `.any(...)`."""
    member_postfix = _symbol(".") >> identifier
    any_postfix = (
        _symbol(".") >> _lexeme(_keyword("any")) >> _symbol("(") >> lambda_expr << _symbol(")")
    )

    @generate
    def path_operand() -> Generator[Parser, object, Node]:
        root_name = yield identifier
        current: MemberAccess | ParameterRef = ParameterRef(cast(str, root_name))

        while True:
            quantifier = yield any_postfix.optional()
            if quantifier is not None:
                parameter, predicate = cast(Lambda, quantifier)
                if not isinstance(current, MemberAccess):
                    raise PredicateParseError(
                        f"any() needs a collection member, not parameter '{current.name}'"
                    )
                return CollectionAny(current, parameter, predicate)
            member = yield member_postfix.optional()
            if member is None:
                return current
            current = MemberAccess(current, cast(str, member))

    return path_operand


def _make_parsers() -> tuple[Parser, Parser]:
    """Create the lambda predicate parser and the bare path parser."""
    ws = regex(r"\s*")
    identifier = _lexeme(regex(r"[A-Za-z_][A-Za-z0-9_]*")).desc("identifier")

    or_expr = forward_declaration()
    lambda_expr = forward_declaration()

    literal = _build_literal_parser()
    path_operand = _build_path_operand_parser(identifier, lambda_expr)
    grouped = _symbol("(") >> or_expr << _symbol(")")
    operand = grouped | literal | path_operand

    compare_op = _lexeme(
        string("==")
        | string("!=")
        | string(">=")
        | string("<=")
        | string(">")
        | string("<")
        | _keyword("eq")
        | _keyword("ne")
        | _keyword("ge")
        | _keyword("gt")
        | _keyword("le")
        | _keyword("lt")
        | string("%")
        | string("+")
        | string("-")
        | string("*")
        | string("/")
        | _keyword("mod")
    )

    @generate
    def comparison() -> Generator[Parser, object, Node]:
        left = yield operand
        rest = yield seq(compare_op, operand).optional()
        if rest is None:
            return cast(Node, left)
        operator, right = cast(tuple[str, Node], rest)
        return _binary_builder(operator, cast(Node, left), right)

    and_op = _lexeme(_keyword("and") | string("&&"))
    or_op = _lexeme(_keyword("or") | string("||"))
    and_expr = _chain_left(comparison, and_op, _binary_builder)
    or_expr.become(_chain_left(and_expr, or_op, _binary_builder))

    lambda_expr.become(
        seq(identifier << _symbol("=>"), or_expr).combine(lambda name, body: (name, body))
    )

    path_separator = _symbol(".") | _symbol("/")
    bare_path = identifier.sep_by(path_separator, min=1)

    return (ws >> lambda_expr << ws << eof, ws >> (lambda_expr | bare_path) << ws << eof)


LAMBDA_PARSER, PATH_PARSER = _make_parsers()


def _check_parameters(parameter: str, body: Node) -> None:
    unknown = free_parameters(body) - {parameter}
    if unknown:
        names = ", ".join(sorted(unknown))
        raise PredicateParseError(f"Unknown parameter(s) in predicate: {names}")


def _rebind(node: Node, old: str, new: str, bound: frozenset[str]) -> Node:
    """Rename free references to parameter `old` into `new`."""
    match node:
        case BinaryOp(operator=operator, left=left, right=right):
            return BinaryOp(
                operator, _rebind(left, old, new, bound), _rebind(right, old, new, bound)
            )
        case MemberAccess(base=base, name=name):
            rebound = cast(MemberAccess | ParameterRef, _rebind(base, old, new, bound))
            return MemberAccess(rebound, name)
        case ParameterRef(name=name) if name == old and old not in bound:
            if new in bound:
                raise PredicateParseError(f"Parameter '{new}' is shadowed by an any() binding")
            return ParameterRef(new)
        case CollectionAny(collection=collection, parameter=parameter, predicate=predicate):
            return CollectionAny(
                cast(MemberAccess, _rebind(collection, old, new, bound)),
                parameter,
                _rebind(predicate, old, new, bound | {parameter}),
            )
    return node


def parse_predicate(text: str, parameter: str | None = None) -> Node:
    """Parse lambda-style predicate text such as `x => x.Age > 18` into a node.

    Args:
        text: Predicate text
        parameter: Rename the lambda parameter to this name, so predicates
            written with different parameter names can be combined

    Returns:
        Predicate body
    """
    try:
        result = LAMBDA_PARSER.parse(text)
    except ParseError as exc:
        raise PredicateParseError(_format_parse_error(text, exc)) from exc
    name, body = cast(Lambda, result)
    _check_parameters(name, body)
    if parameter is None or parameter == name:
        return body
    return _rebind(body, name, parameter, frozenset())


def parse_path(text: str) -> MemberAccess:
    """Parse `x => x.A.B` or a bare `A.B` / `A/B` path into a member access."""
    try:
        result = PATH_PARSER.parse(text)
    except ParseError as exc:
        raise PredicateParseError(_format_parse_error(text, exc)) from exc

    if isinstance(result, list):
        current: MemberAccess | ParameterRef = ParameterRef(DEFAULT_PARAMETER)
        for name in cast(list[str], result):
            current = MemberAccess(current, name)
        return cast(MemberAccess, current)

    parameter, body = cast(Lambda, result)
    if not isinstance(body, MemberAccess):
        raise PredicateParseError(f"Expected a member path, got {type(body).__name__}")
    _check_parameters(parameter, body)
    return body
