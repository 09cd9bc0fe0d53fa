"""Translation of predicate trees into OData `$filter` text."""

from __future__ import annotations

from dataclasses import dataclass

from odataq.query_language.ast import (
    BinaryOp,
    CollectionAny,
    Constant,
    MemberAccess,
    Node,
    Operator,
    ParameterRef,
)
from odataq.query_language.errors import MalformedPredicate, UnsupportedOperator
from odataq.query_language.paths import PATH_SEPARATOR, path_root, resolve_path


ROOT_PARAMETER_TOKEN = "$it"

_OPERATOR_TOKENS: dict[Operator, str] = {
    Operator.EQ: "eq",
    Operator.NE: "ne",
    Operator.GT: "gt",
    Operator.GE: "ge",
    Operator.LT: "lt",
    Operator.LE: "le",
    Operator.AND: "and",
    Operator.OR: "or",
}


@dataclass(frozen=True, slots=True)
class _Scope:
    """Parameter names visible at one point of the traversal."""

    root: str | None
    bound: tuple[str, ...] = ()

    def push(self, name: str) -> _Scope:
        return _Scope(self.root, (*self.bound, name))

    def prefix_for(self, parameter: ParameterRef) -> str:
        """Return the path prefix contributed by a parameter reference."""
        if parameter.name in self.bound:
            return f"{parameter.name}{PATH_SEPARATOR}"
        if self.root is None or parameter.name == self.root:
            return ""
        raise MalformedPredicate(f"Parameter '{parameter.name}' is not in scope")


def _operator_token(operator: Operator) -> str:
    token = _OPERATOR_TOKENS.get(operator)
    if token is None:
        raise UnsupportedOperator(f"Operator {operator!r} is not supported")
    return token


def _format_constant(value: object) -> str:
    """Format a constant as an OData literal."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, str):
        escaped = value.replace("'", "''")
        return f"'{escaped}'"
    raise MalformedPredicate(f"Unsupported constant type: {type(value).__name__}")


def free_parameters(node: Node, bound: frozenset[str] = frozenset()) -> set[str]:
    """Collect parameter names referenced outside of any quantifier binding."""
    match node:
        case BinaryOp(left=left, right=right):
            return free_parameters(left, bound) | free_parameters(right, bound)
        case MemberAccess():
            return free_parameters(path_root(node), bound)
        case ParameterRef(name=name):
            return set() if name in bound else {name}
        case CollectionAny(collection=collection, parameter=parameter, predicate=predicate):
            return free_parameters(collection, bound) | free_parameters(
                predicate, bound | {parameter}
            )
    return set()


def _is_compound(node: BinaryOp) -> bool:
    return isinstance(node.left, BinaryOp) or isinstance(node.right, BinaryOp)


def _emit(node: Node, out: list[str], scope: _Scope, nested: bool) -> None:
    match node:
        case BinaryOp():
            _emit_binary(node, out, scope, nested)
        case MemberAccess():
            _emit_member(node, out, scope)
        case Constant(value=value):
            out.append(_format_constant(value))
        case ParameterRef():
            _emit_parameter(node, out, scope)
        case CollectionAny():
            _emit_any(node, out, scope)
        case _:
            raise MalformedPredicate(f"Unsupported predicate node: {type(node).__name__}")


def _emit_binary(node: BinaryOp, out: list[str], scope: _Scope, nested: bool) -> None:
    wrap = nested and _is_compound(node)
    token = _operator_token(node.operator)
    if wrap:
        out.append("(")
    _emit(node.left, out, scope, nested=True)
    out.append(f" {token} ")
    _emit(node.right, out, scope, nested=True)
    if wrap:
        out.append(")")


def _emit_member(node: MemberAccess, out: list[str], scope: _Scope) -> None:
    base = node.base
    if isinstance(base, MemberAccess):
        _emit_member(base, out, scope)
        out.append(PATH_SEPARATOR)
    elif isinstance(base, ParameterRef):
        out.append(scope.prefix_for(base))
    else:
        raise MalformedPredicate(f"Member '{node.name}' is not rooted at a parameter")
    out.append(node.name)


def _emit_parameter(node: ParameterRef, out: list[str], scope: _Scope) -> None:
    # A bare element reference, e.g. `t` in `Tags/any(t: t eq 'red')`.
    if node.name in scope.bound:
        out.append(node.name)
        return
    scope.prefix_for(node)
    out.append(ROOT_PARAMETER_TOKEN)


def _emit_any(node: CollectionAny, out: list[str], scope: _Scope) -> None:
    prefix = scope.prefix_for(path_root(node.collection))
    out.append(f"{prefix}{resolve_path(node.collection)}/any({node.parameter}: ")
    _emit(node.predicate, out, scope.push(node.parameter), nested=False)
    out.append(")")


def translate_filter(root: Node) -> str:
    """Translate a predicate tree into OData `$filter` expression text.

    Compound boolean subexpressions are parenthesized; the outermost
    expression is not. Member paths drop the root parameter and keep the
    names bound by enclosing `any` quantifiers.

    Args:
        root: Predicate tree to translate

    Returns:
        Filter expression without the `$filter=` prefix

    Raises:
        MalformedPredicate: If the tree references more than one root parameter
            or a parameter that is not in scope
        UnsupportedOperator: If a binary operator has no OData token
        UnsupportedPathExpression: If a path contains a non-member node
    """
    roots = free_parameters(root)
    if len(roots) > 1:
        names = ", ".join(sorted(roots))
        raise MalformedPredicate(f"Predicate references more than one root parameter: {names}")
    scope = _Scope(next(iter(roots), None))

    out: list[str] = []
    _emit(root, out, scope, nested=False)
    return "".join(out)
