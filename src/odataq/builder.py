"""Fluent predicate builder based on Python operator overloading.

Attribute access on a parameter proxy extends a member path, comparison
operators build comparisons, and `&` / `|` combine predicates::

    it = param()
    predicate = (it.Age > 18) & ((it.Status == "Active") | (it.Status == "Pending"))
    orders = it.Orders.any(lambda o: o.Total > 100)

Members whose names clash with proxy helpers (`any`, `node`) or start with an
underscore are reachable through indexing: `it["node"]`.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable

from odataq.query_language.ast import (
    NODE_TYPES,
    BinaryOp,
    CollectionAny,
    Constant,
    MemberAccess,
    Node,
    Operator,
    ParameterRef,
)
from odataq.query_language.errors import MalformedPredicate


def to_node(value: object) -> Node:
    """Convert a proxy, predicate, node or Python value into a predicate node."""
    if isinstance(value, Path | Predicate):
        return value.node
    if isinstance(value, NODE_TYPES):
        return value
    return Constant(value)  # type: ignore[arg-type]


class _Combinable:
    """Logical combination shared by paths and predicates."""

    __slots__ = ()

    @property
    def node(self) -> Node:
        raise NotImplementedError

    def __and__(self, other: object) -> Predicate:
        return Predicate(BinaryOp(Operator.AND, self.node, to_node(other)))

    def __rand__(self, other: object) -> Predicate:
        return Predicate(BinaryOp(Operator.AND, to_node(other), self.node))

    def __or__(self, other: object) -> Predicate:
        return Predicate(BinaryOp(Operator.OR, self.node, to_node(other)))

    def __ror__(self, other: object) -> Predicate:
        return Predicate(BinaryOp(Operator.OR, to_node(other), self.node))

    def __bool__(self) -> bool:
        raise TypeError("Predicates cannot be used as booleans; combine them with & and |")


class Predicate(_Combinable):
    """Wrapper around a built predicate node."""

    __slots__ = ("_node",)

    def __init__(self, node: Node) -> None:
        self._node = node

    @property
    def node(self) -> Node:
        return self._node

    def __repr__(self) -> str:
        return f"Predicate({self._node!r})"


class Path(_Combinable):
    """Member path proxy rooted at a parameter."""

    __slots__ = ("_target",)

    def __init__(self, target: MemberAccess | ParameterRef) -> None:
        self._target = target

    @property
    def node(self) -> MemberAccess | ParameterRef:
        return self._target

    def __getattr__(self, name: str) -> Path:
        if name.startswith("_"):
            raise AttributeError(name)
        return Path(MemberAccess(self._target, name))

    def __getitem__(self, name: str) -> Path:
        return Path(MemberAccess(self._target, name))

    def __repr__(self) -> str:
        return f"Path({self._target!r})"

    def _compare(self, operator: str, other: object) -> Predicate:
        return Predicate(BinaryOp(operator, self._target, to_node(other)))  # type: ignore[arg-type]

    def __eq__(self, other: object) -> Predicate:  # type: ignore[override]
        return self._compare("==", other)

    def __ne__(self, other: object) -> Predicate:  # type: ignore[override]
        return self._compare("!=", other)

    def __gt__(self, other: object) -> Predicate:
        return self._compare(">", other)

    def __ge__(self, other: object) -> Predicate:
        return self._compare(">=", other)

    def __lt__(self, other: object) -> Predicate:
        return self._compare("<", other)

    def __le__(self, other: object) -> Predicate:
        return self._compare("<=", other)

    # No OData counterpart; BinaryOp raises UnsupportedOperator.
    def __mod__(self, other: object) -> Predicate:
        return self._compare("%", other)

    def __add__(self, other: object) -> Predicate:
        return self._compare("+", other)

    def __sub__(self, other: object) -> Predicate:
        return self._compare("-", other)

    def __mul__(self, other: object) -> Predicate:
        return self._compare("*", other)

    def __truediv__(self, other: object) -> Predicate:
        return self._compare("/", other)

    __hash__ = None  # type: ignore[assignment]

    def any(
        self,
        parameter: str | Callable[[Path], object],
        predicate: object | None = None,
    ) -> Predicate:
        """Build an `any` quantifier over this collection path.

        Args:
            parameter: Element parameter name, or a one-argument callable whose
                argument name becomes the parameter name
            predicate: Element predicate when `parameter` is a name; either a
                node/predicate or a callable receiving the element proxy

        Returns:
            Quantifier predicate
        """
        if not isinstance(self._target, MemberAccess):
            raise MalformedPredicate("any() needs a collection member, not a bare parameter")

        if callable(parameter):
            body: object = parameter
            name = _callable_parameter_name(parameter)
        else:
            if predicate is None:
                raise MalformedPredicate("any() with a parameter name needs a predicate")
            body = predicate
            name = parameter

        element = Path(ParameterRef(name))
        inner = body(element) if callable(body) else body
        return Predicate(CollectionAny(self._target, name, to_node(inner)))


def _callable_parameter_name(function: Callable[..., object]) -> str:
    parameters = list(inspect.signature(function).parameters)
    if len(parameters) != 1:
        raise MalformedPredicate(
            f"any() predicate must take exactly one argument, got {len(parameters)}"
        )
    return parameters[0]


def param(name: str = "it") -> Path:
    """Return a proxy for the predicate's root parameter."""
    return Path(ParameterRef(name))


it = param()
