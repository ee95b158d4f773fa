"""Payload validators for action variants.

Variants validate their payloads with these checks before an Action can be
constructed.

Main Components:
    - contracts: composable field checks raising ValidationError
"""

from action_prefabs.validators.contracts import (
    is_boolean,
    is_in,
    is_instance,
    is_integer,
    is_key_of,
    is_non_negative,
    is_not_null,
    is_number,
    is_object,
    is_scalar,
    is_string,
)

__all__ = [
    "is_in",
    "is_key_of",
    "is_number",
    "is_integer",
    "is_non_negative",
    "is_instance",
    "is_string",
    "is_boolean",
    "is_not_null",
    "is_object",
    "is_scalar",
]
