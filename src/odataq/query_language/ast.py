"""AST nodes for OData filter predicates."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum
from typing import TypeAlias

from odataq.query_language.errors import MalformedPredicate, UnsupportedOperator


class Operator(StrEnum):
    """Binary operators with an OData filter counterpart."""

    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GE = "ge"
    LT = "lt"
    LE = "le"
    AND = "and"
    OR = "or"

    @property
    def is_logical(self) -> bool:
        """Return whether the operator combines two predicates."""
        return self in (Operator.AND, Operator.OR)

    @classmethod
    def from_token(cls, token: object) -> Operator:
        """Coerce an operator token or name into an Operator.

        Accepts enum members, OData tokens (``"eq"``), member names (``"Eq"``)
        and the usual symbolic spellings (``"=="``, ``"&&"``).

        Raises:
            UnsupportedOperator: If the token has no OData counterpart
        """
        if isinstance(token, Operator):
            return token
        if isinstance(token, str):
            normalized = token.strip()
            symbolic = _SYMBOLIC_OPERATORS.get(normalized)
            if symbolic is not None:
                return symbolic
            try:
                return cls(normalized.lower())
            except ValueError:
                pass
        raise UnsupportedOperator(f"Operator {token!r} is not supported")


_SYMBOLIC_OPERATORS: dict[str, Operator] = {
    "==": Operator.EQ,
    "!=": Operator.NE,
    ">": Operator.GT,
    ">=": Operator.GE,
    "<": Operator.LT,
    "<=": Operator.LE,
    "&&": Operator.AND,
    "&": Operator.AND,
    "||": Operator.OR,
    "|": Operator.OR,
}

ConstantValue: TypeAlias = str | int | float | bool | None


def _check_name(name: object, kind: str) -> None:
    if not isinstance(name, str) or not name.strip():
        raise MalformedPredicate(f"{kind} name must be a non-empty string, got {name!r}")


def _check_node(value: object, role: str) -> None:
    if not isinstance(value, NODE_TYPES):
        raise MalformedPredicate(f"{role} must be a predicate node, got {type(value).__name__}")


@dataclass(frozen=True, slots=True)
class ParameterRef:
    """Root of a member chain, bound to a predicate input variable."""

    name: str

    def __post_init__(self) -> None:
        _check_name(self.name, "Parameter")


@dataclass(frozen=True, slots=True)
class MemberAccess:
    """Member access `base.name`; chained accesses form a navigation path."""

    base: MemberAccess | ParameterRef
    name: str

    def __post_init__(self) -> None:
        _check_name(self.name, "Member")
        if not isinstance(self.base, MemberAccess | ParameterRef):
            raise MalformedPredicate(
                f"Member access '{self.name}' must be rooted at a parameter, "
                f"got {type(self.base).__name__}"
            )


@dataclass(frozen=True, slots=True)
class Constant:
    """Literal value."""

    value: ConstantValue

    def __post_init__(self) -> None:
        if self.value is not None and not isinstance(self.value, str | int | float):
            raise MalformedPredicate(f"Unsupported constant type: {type(self.value).__name__}")
        if isinstance(self.value, float) and not math.isfinite(self.value):
            raise MalformedPredicate(f"Non-finite constant: {self.value!r}")


@dataclass(frozen=True, slots=True)
class BinaryOp:
    """Comparison or logical combination of two nodes."""

    operator: Operator
    left: Node
    right: Node

    def __post_init__(self) -> None:
        object.__setattr__(self, "operator", Operator.from_token(self.operator))
        _check_node(self.left, "Left operand")
        _check_node(self.right, "Right operand")


@dataclass(frozen=True, slots=True)
class CollectionAny:
    """Quantifier: some element of `collection` satisfies `predicate`.

    The predicate refers to the element through `parameter`.
    """

    collection: MemberAccess
    parameter: str
    predicate: Node

    def __post_init__(self) -> None:
        if not isinstance(self.collection, MemberAccess):
            raise MalformedPredicate(
                "Quantified collection must be a member access rooted at a parameter, "
                f"got {type(self.collection).__name__}"
            )
        _check_name(self.parameter, "Quantifier parameter")
        _check_node(self.predicate, "Quantifier predicate")


Node: TypeAlias = BinaryOp | MemberAccess | Constant | ParameterRef | CollectionAny

NODE_TYPES = (BinaryOp, MemberAccess, Constant, ParameterRef, CollectionAny)
