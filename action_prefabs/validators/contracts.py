"""Field contract checks used by action variants to validate payloads.

Every check takes a mapping of field name to value. A list or tuple value is
checked element by element. Checks raise ValidationError on the first
violating element; they never aggregate. Fields that hold exactly one value are
guarded with ``is_scalar`` first.

Example:
    is_in({"operation": data["operation"]}, ["apply", "remove"])
    is_string({"attribute_path": data["attribute_path"]})
    is_instance({"true_actions": data["true_actions"]}, Action)
"""

import math
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from action_prefabs.errors import ValidationError


def _check(
    values: Mapping[str, Any],
    rule: str,
    passes: Callable[[Any], bool],
    message: str,
) -> None:
    for field_name, value in values.items():
        items = value if isinstance(value, (list, tuple)) else [value]
        for item in items:
            if not passes(item):
                raise ValidationError(field_name, rule, message.format(field=field_name))


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def is_in(values: Mapping[str, Any], choices: Iterable[Any]) -> None:
    """Each value must be one of ``choices``."""
    allowed = list(choices)
    _check(values, "choice", lambda v: v in allowed, "{field} invalid option.")


def is_key_of(values: Mapping[str, Any], mapping: Mapping[str, Any]) -> None:
    """Each value must be a key of ``mapping``."""
    _check(
        values,
        "key",
        lambda v: isinstance(v, str) and v in mapping,
        "{field} invalid option.",
    )


def is_number(values: Mapping[str, Any]) -> None:
    """Each value must be an int or float (not bool, not NaN)."""
    _check(values, "number", _is_number, "{field} must be a number.")


def is_integer(values: Mapping[str, Any]) -> None:
    """Each value must be integral (an int, or a float with no fraction)."""
    _check(
        values,
        "integer",
        lambda v: _is_number(v) and float(v).is_integer(),
        "{field} must be an integer.",
    )


def is_non_negative(values: Mapping[str, Any]) -> None:
    """Each value must be a number >= 0."""
    _check(
        values,
        "non_negative",
        lambda v: _is_number(v) and v >= 0,
        "{field} must be non-negative.",
    )


def is_instance(values: Mapping[str, Any], kind: type) -> None:
    """Each value must be an instance of ``kind``."""
    _check(
        values,
        "instance",
        lambda v: isinstance(v, kind),
        f"{{field}} must be instance of {kind.__name__}.",
    )


def is_string(values: Mapping[str, Any]) -> None:
    """Each value must be a str."""
    _check(values, "string", lambda v: isinstance(v, str), "{field} must be a string.")


def is_boolean(values: Mapping[str, Any]) -> None:
    """Each value must be a bool."""
    _check(values, "boolean", lambda v: isinstance(v, bool), "{field} must be a boolean.")


def is_not_null(values: Mapping[str, Any]) -> None:
    """Each value must not be None."""
    _check(values, "not_null", lambda v: v is not None, "{field} must be non-null.")


def is_object(values: Mapping[str, Any]) -> None:
    """Each value must be a mapping."""
    _check(values, "object", lambda v: isinstance(v, Mapping), "{field} must be an object.")


def is_scalar(values: Mapping[str, Any]) -> None:
    """Each value must be a single value, not a list or tuple.

    Unlike the other checks this looks at the whole value. Run it before an
    element-wise check on fields that hold exactly one value.
    """
    for field_name, value in values.items():
        if isinstance(value, (list, tuple)):
            raise ValidationError(field_name, "scalar", f"{field_name} must be a single value.")
