"""Navigation path resolution for member access chains."""

from __future__ import annotations

from odataq.query_language.ast import MemberAccess, ParameterRef
from odataq.query_language.errors import UnsupportedPathExpression


PATH_SEPARATOR = "/"


def _walk(node: object) -> tuple[tuple[str, ...], ParameterRef]:
    """Collect member names root-to-leaf and the terminating parameter."""
    if not isinstance(node, MemberAccess):
        raise UnsupportedPathExpression(
            f"Expected a member access path, got {type(node).__name__}"
        )

    names: list[str] = []
    current: object = node
    while isinstance(current, MemberAccess):
        names.append(current.name)
        current = current.base

    if not isinstance(current, ParameterRef):
        raise UnsupportedPathExpression(
            f"Path '{'.'.join(reversed(names))}' is not rooted at a parameter "
            f"(found {type(current).__name__})"
        )
    return (tuple(reversed(names)), current)


def path_segments(node: MemberAccess) -> tuple[str, ...]:
    """Return member names of a path in root-to-leaf order."""
    segments, _root = _walk(node)
    return segments


def path_root(node: MemberAccess) -> ParameterRef:
    """Return the parameter a path is rooted at."""
    _segments, root = _walk(node)
    return root


def resolve_path(node: MemberAccess) -> str:
    """Flatten a member access chain into a slash-delimited navigation path.

    The root parameter contributes no text, so `x.Address.City` resolves to
    `Address/City`.

    Args:
        node: Leaf member access of the chain

    Returns:
        Navigation path relative to the implicit root

    Raises:
        UnsupportedPathExpression: If the chain holds anything but member accesses
    """
    return PATH_SEPARATOR.join(path_segments(node))
