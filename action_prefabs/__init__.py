"""Action prefabs: composable, validated actions resolved against documents.

Usage:
    >>> from action_prefabs import init_actions
    >>> api = init_actions()
    >>> check = api.create("Comparison", {
    ...     "operation": ">",
    ...     "attribute_path": "hp",
    ...     "value": 0,
    ...     "true_actions": api.create("UpdateDoc", {
    ...         "updates": {"attribute_path": "hp", "method": "add", "value": -1},
    ...     }),
    ... })
    >>> await api.resolve(document, check)
"""

from action_prefabs.actions import Action, ActionRegistry, CoreActionType
from action_prefabs.api import ActionAPI, init_actions
from action_prefabs.attributes import get_attribute
from action_prefabs.errors import (
    ActionError,
    AttributePathError,
    AuthorizationError,
    HandleResolutionError,
    TypeMismatchError,
    UnknownTypeError,
    ValidationError,
)
from action_prefabs.executor import AuthorityGate, GateDecision, Principal, Role

__all__ = [
    # API
    "ActionAPI",
    "init_actions",
    # Model
    "Action",
    "ActionRegistry",
    "CoreActionType",
    "get_attribute",
    # Authority
    "AuthorityGate",
    "GateDecision",
    "Principal",
    "Role",
    # Errors
    "ActionError",
    "ValidationError",
    "UnknownTypeError",
    "AttributePathError",
    "TypeMismatchError",
    "AuthorizationError",
    "HandleResolutionError",
]
