"""Errors for predicate construction, translation and query assembly."""


class ODataQueryError(Exception):
    """Base exception for OData query building failures."""


class MalformedPredicate(ODataQueryError):
    """Raised when a predicate tree is structurally invalid."""


class UnsupportedOperator(ODataQueryError):
    """Raised when an operator has no OData counterpart."""


class UnsupportedPathExpression(ODataQueryError):
    """Raised when a navigation path contains a non-member node."""


class PredicateParseError(ODataQueryError):
    """Raised when predicate text cannot be parsed."""


class QueryOptionError(ODataQueryError):
    """Raised when a paging value is not a non-negative integer."""
