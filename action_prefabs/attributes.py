"""Dotted attribute path access for target documents.

Paths address nested fields with dots, e.g. ``system.attributes.hp.value``.
Reads walk mappings by key, lists and tuples by integer index, and any other
object by attribute name.
"""

from collections.abc import Mapping
from typing import Any


def split_path(path: str) -> list[str]:
    """Split a dotted path into its segments.

    The empty path has zero segments.
    """
    if not path:
        return []
    return path.split(".")


def _step(value: Any, token: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(token)
    if isinstance(value, (list, tuple)):
        if token.lstrip("-").isdigit():
            index = int(token)
            if -len(value) <= index < len(value):
                return value[index]
        return None
    return getattr(value, token, None)


def get_attribute(document: Any, path: str) -> Any:
    """Read a nested value from a document by dotted path.

    Short-circuits to None as soon as any segment is missing. Never raises for
    a missing path; callers decide whether None is an error. An empty path
    returns the document itself.

    Args:
        document: Mapping, sequence, or object to read from.
        path: Dotted attribute path.

    Returns:
        The value at the path, or None if it does not exist.

    Examples:
        >>> get_attribute({"a": {"b": 1}}, "a.b")
        1
        >>> get_attribute({"a": {}}, "a.b.c") is None
        True
    """
    value = document
    for token in split_path(path):
        if value is None:
            return None
        value = _step(value, token)
    return value


def _slot(node: Any, token: str, path: str) -> Any:
    if isinstance(node, list):
        if token.lstrip("-").isdigit() and -len(node) <= int(token) < len(node):
            return int(token)
        raise ValueError(f"Cannot set '{path}': '{token}' is not an index of the list")
    return token


def set_attribute(target: dict, path: str, value: Any) -> None:
    """Write a value into a nested dict by dotted path.

    Lists are walked by integer index, in place. Missing intermediates become
    dicts; a scalar intermediate is replaced by a dict.

    Raises:
        ValueError: If the path is empty, or a list segment is not an index
            within the list.

    Examples:
        >>> doc = {"items": [1, 2, 3]}
        >>> set_attribute(doc, "items.0", 11)
        >>> doc
        {'items': [11, 2, 3]}
    """
    tokens = split_path(path)
    if not tokens:
        raise ValueError("Cannot set an empty attribute path")

    node = target
    for token in tokens[:-1]:
        slot = _slot(node, token, path)
        child = node[slot] if isinstance(node, list) else node.get(slot)
        if isinstance(child, tuple):
            child = list(child)
        elif not isinstance(child, (dict, list)):
            child = {}
        node[slot] = child
        node = child
    node[_slot(node, tokens[-1], path)] = value


def expand_dotted(fields: Mapping[str, Any]) -> dict:
    """Expand a flat ``{"a.b": 1}`` mapping into nested ``{"a": {"b": 1}}``."""
    expanded: dict = {}
    for path, value in fields.items():
        set_attribute(expanded, path, value)
    return expanded
