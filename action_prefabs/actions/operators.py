"""Comparison operators and update methods.

Operand kinds follow fixed rules instead of implicit coercion:

- ``=`` / ``!=``: strict equality. Operands of different kinds are unequal,
  so ``True`` never equals ``1`` while ``1`` equals ``1.0``.
- ``>`` ``<`` ``>=`` ``<=``: both numbers or both strings.
- ``includes``: left is a string (substring test) or a sequence (membership).
- ``in``: ``includes`` with the operands swapped.
- ``hasKey``: left is a mapping. ``isKey``: right is a mapping.

Any other combination raises TypeMismatchError.
"""

from collections.abc import Callable, Mapping
from typing import Any

from action_prefabs.actions.types import value_kind
from action_prefabs.errors import TypeMismatchError


Operator = Callable[[Any, Any], bool]


def _equals(a: Any, b: Any) -> bool:
    return value_kind(a) == value_kind(b) and a == b


def _ordered(symbol: str, compare: Operator) -> Operator:
    def operator(a: Any, b: Any) -> bool:
        kind_a, kind_b = value_kind(a), value_kind(b)
        if kind_a != kind_b or kind_a not in ("number", "string"):
            raise TypeMismatchError(symbol, "two numbers or two strings", f"{kind_a} and {kind_b}")
        return compare(a, b)

    return operator


def _contains(symbol: str, container: Any, item: Any) -> bool:
    kind = value_kind(container)
    if kind == "string":
        if not isinstance(item, str):
            raise TypeMismatchError(symbol, "string", value_kind(item))
        return item in container
    if kind == "sequence":
        return any(_equals(element, item) for element in container)
    raise TypeMismatchError(symbol, "string or sequence", kind)


def _has_key(symbol: str, mapping: Any, key: Any) -> bool:
    if not isinstance(mapping, Mapping):
        raise TypeMismatchError(symbol, "mapping", value_kind(mapping))
    return key in mapping


# a is the attribute (or roll total) value, b is the payload value
EQUALITY_OPERATORS: dict[str, Operator] = {
    "=": _equals,
    "!=": lambda a, b: not _equals(a, b),
}

ORDERING_OPERATORS: dict[str, Operator] = {
    ">": _ordered(">", lambda a, b: a > b),
    "<": _ordered("<", lambda a, b: a < b),
    ">=": _ordered(">=", lambda a, b: a >= b),
    "<=": _ordered("<=", lambda a, b: a <= b),
}

NUMERIC_OPERATORS: dict[str, Operator] = {**EQUALITY_OPERATORS, **ORDERING_OPERATORS}

COMPARISON_OPERATORS: dict[str, Operator] = {
    **NUMERIC_OPERATORS,
    "includes": lambda a, b: _contains("includes", a, b),
    "in": lambda a, b: _contains("in", b, a),
    "hasKey": lambda a, b: _has_key("hasKey", a, b),
    "isKey": lambda a, b: _has_key("isKey", b, a),
}


def _add(current: Any, value: Any) -> Any:
    kind = value_kind(current)
    if kind == "sequence":
        return [*current, *value]
    if kind not in ("number", "string"):
        raise TypeMismatchError("add", "number, string or sequence", kind)
    return current + value


# value is the payload value, current is the attribute's present value
UPDATE_METHODS: dict[str, Callable[[Any, Any], Any]] = {
    "replace": lambda value, current: value,
    "add": lambda value, current: _add(current, value),
}
