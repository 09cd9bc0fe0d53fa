"""Sanity tests for the lambda predicate parser."""

from __future__ import annotations

import pytest

from odataq.query_language import parse_path, parse_predicate
from odataq.query_language.ast import (
    BinaryOp,
    CollectionAny,
    Constant,
    MemberAccess,
    Operator,
    ParameterRef,
)
from odataq.query_language.errors import PredicateParseError, UnsupportedOperator


@pytest.mark.parametrize(
    "text",
    [
        "x => x.Age > 18",
        "x => x.Age gt 18",
        "x => x.Name == 'Ann'",
        'x => x.Name == "Ann"',
        "x => x.Deleted == null",
        "x => x.Deleted == None",
        "x => x.Active == true && x.Score >= 1.5",
        "x => x.A == 1 and (x.B == 2 or x.C == 3)",
        "x => x.Address.City != 'Paris'",
        "x => x.Orders.any(o => o.Total > 100)",
        "x => x.Tags.any(t => t == 'red')",
        "  it  =>  it.Age<=-3  ",
    ],
)
def test_parse_predicate_examples(text: str) -> None:
    """Parser should accept representative predicate examples."""
    assert parse_predicate(text) is not None


def test_parse_comparison_shape() -> None:
    """Comparisons build a binary node with a member path on the left."""
    node = parse_predicate("x => x.Age > 18")

    assert node == BinaryOp(
        Operator.GT, MemberAccess(ParameterRef("x"), "Age"), Constant(18)
    )


def test_parse_logical_operators_are_left_associative() -> None:
    """Chains of the same logical operator group from the left."""
    node = parse_predicate("x => x.A == 1 && x.B == 2 && x.C == 3")

    assert isinstance(node, BinaryOp)
    assert node.operator is Operator.AND
    assert isinstance(node.left, BinaryOp)
    assert node.left.operator is Operator.AND
    assert node.right == BinaryOp(
        Operator.EQ, MemberAccess(ParameterRef("x"), "C"), Constant(3)
    )


def test_parse_and_binds_tighter_than_or() -> None:
    """`and` takes precedence over `or`."""
    node = parse_predicate("x => x.A == 1 || x.B == 2 && x.C == 3")

    assert isinstance(node, BinaryOp)
    assert node.operator is Operator.OR
    assert isinstance(node.right, BinaryOp)
    assert node.right.operator is Operator.AND


@pytest.mark.parametrize(
    ("literal", "value"),
    [
        ("42", 42),
        ("-7", -7),
        ("1.5", 1.5),
        ("2e3", 2000.0),
        ("true", True),
        ("False", False),
        ("null", None),
        ("'O\\'Brien'", "O'Brien"),
        ('"say \\"hi\\""', 'say "hi"'),
    ],
)
def test_parse_literals(literal: str, value: object) -> None:
    """Literals decode into constant values."""
    node = parse_predicate(f"x => x.Field == {literal}")

    assert isinstance(node, BinaryOp)
    assert node.right == Constant(value)  # type: ignore[arg-type]


def test_parse_any_shape() -> None:
    """`.any(...)` builds a quantifier over the preceding member path."""
    node = parse_predicate("x => x.Orders.any(o => o.Total > 100)")

    assert isinstance(node, CollectionAny)
    assert node.collection == MemberAccess(ParameterRef("x"), "Orders")
    assert node.parameter == "o"
    assert node.predicate == BinaryOp(
        Operator.GT, MemberAccess(ParameterRef("o"), "Total"), Constant(100)
    )


def test_parse_member_named_any_without_call() -> None:
    """`any` without a call is an ordinary member."""
    node = parse_predicate("x => x.any == 1")

    assert isinstance(node, BinaryOp)
    assert node.left == MemberAccess(ParameterRef("x"), "any")


def test_parse_any_on_bare_parameter_fails() -> None:
    """Quantifiers need a collection member."""
    with pytest.raises(PredicateParseError, match="collection member"):
        parse_predicate("x => x.any(o => o.Total > 1)")


@pytest.mark.parametrize("operator", ["%", "+", "-", "*", "/", "mod"])
def test_parse_unsupported_operator(operator: str) -> None:
    """Operators with no OData counterpart are rejected."""
    with pytest.raises(UnsupportedOperator):
        parse_predicate(f"x => x.Age {operator} 2")


@pytest.mark.parametrize(
    "text",
    [
        "",
        "x.Age > 18",
        "x => ",
        "x => x.Age >",
        "x => (x.Age > 18",
        "x => x.Age > 18 )",
        "x => x.Age ~ 18",
    ],
)
def test_parse_invalid_syntax(text: str) -> None:
    """Malformed predicate text raises a parse error with a pointer."""
    with pytest.raises(PredicateParseError, match="Invalid predicate syntax") as exc_info:
        parse_predicate(text)

    assert "^" in str(exc_info.value)


def test_parse_unknown_parameter() -> None:
    """Only the lambda parameter and any() bindings may be referenced."""
    with pytest.raises(PredicateParseError, match="Unknown parameter"):
        parse_predicate("x => y.Age > 18")


def test_parse_renames_parameter() -> None:
    """The lambda parameter can be renamed on request."""
    node = parse_predicate("p => p.Orders.any(o => o.Total > p.Limit)", parameter="it")

    assert isinstance(node, CollectionAny)
    assert node.collection == MemberAccess(ParameterRef("it"), "Orders")
    assert isinstance(node.predicate, BinaryOp)
    assert node.predicate.left == MemberAccess(ParameterRef("o"), "Total")
    assert node.predicate.right == MemberAccess(ParameterRef("it"), "Limit")


def test_parse_rename_rejects_shadowed_name() -> None:
    """Renaming fails when an any() binding would capture the new name."""
    with pytest.raises(PredicateParseError, match="shadowed"):
        parse_predicate("p => p.Orders.any(it => it.Total > p.Limit)", parameter="it")


@pytest.mark.parametrize(
    ("text", "segments"),
    [
        ("x => x.Address.City", ("Address", "City")),
        ("Address.City", ("Address", "City")),
        ("Address/City", ("Address", "City")),
        ("Name", ("Name",)),
    ],
)
def test_parse_path_forms(text: str, segments: tuple[str, ...]) -> None:
    """Paths may be lambdas or bare dotted/slashed member names."""
    node = parse_path(text)

    names: list[str] = []
    current: object = node
    while isinstance(current, MemberAccess):
        names.append(current.name)
        current = current.base
    assert tuple(reversed(names)) == segments
    assert isinstance(current, ParameterRef)


@pytest.mark.parametrize(
    "text",
    ["x => x", "x => x.Age > 1", "x => 1", "x => x.Orders.any(o => o.Total > 1)"],
)
def test_parse_path_rejects_non_member_body(text: str) -> None:
    """Path lambdas must return a member path."""
    with pytest.raises(PredicateParseError, match="Expected a member path"):
        parse_path(text)


def test_parse_path_rejects_invalid_syntax() -> None:
    """Broken path text raises a parse error."""
    with pytest.raises(PredicateParseError):
        parse_path("Address..City")
