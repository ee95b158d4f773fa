"""Comparison action: branch on a document attribute."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from action_prefabs.actions.operators import COMPARISON_OPERATORS
from action_prefabs.actions.types import Action, ActionVariant, CoreActionType, normalize_branches, thaw
from action_prefabs.attributes import get_attribute
from action_prefabs.errors import AttributePathError
from action_prefabs.validators.contracts import is_in, is_instance, is_not_null, is_scalar, is_string

if TYPE_CHECKING:
    from action_prefabs.documents.base import Document
    from action_prefabs.resolver.resolver import ResolutionContext


def require_attribute(document: Any, path: str) -> Any:
    """Read ``path`` from ``document``, raising if it is missing.

    Raises:
        AttributePathError: If the path does not exist or its value is None.
    """
    value = get_attribute(document, path)
    if value is None:
        raise AttributePathError(path)
    return value


async def resolve_comparison(
    context: "ResolutionContext",
    document: "Document",
    data: Mapping[str, Any],
    action_type: str,
) -> None:
    """Compare the attribute at ``attribute_path`` to ``value`` and branch."""
    attribute_value = require_attribute(document, data["attribute_path"])
    outcome = COMPARISON_OPERATORS[data["operation"]](attribute_value, thaw(data["value"]))
    await context.branch(document, action_type, outcome, data)


def validate_comparison(data: Mapping[str, Any]) -> None:
    """Validate a comparison payload in field order."""
    is_scalar({"operation": data.get("operation"), "attribute_path": data.get("attribute_path")})
    is_in({"operation": data.get("operation")}, COMPARISON_OPERATORS)
    is_string({"attribute_path": data.get("attribute_path")})
    is_not_null({"value": data.get("value")})
    is_instance(
        {"true_actions": data["true_actions"], "false_actions": data["false_actions"]},
        Action,
    )


class Comparison(ActionVariant):
    """Compares an attribute of a document to a provided value, resolving
    additional actions based on the result.

    Payload:
        operation: One of ``options["operations"]``.
        attribute_path: Dotted path of the attribute to read.
        value: Right-hand operand (non-null).
        true_actions: Action or list of actions for a true result.
        false_actions: Optional action or list of actions for a false result.
    """

    name = CoreActionType.COMPARISON.value
    options = {"operations": COMPARISON_OPERATORS}
    branch_fields = ("true_actions", "false_actions")

    def normalize(self, data: dict[str, Any]) -> dict[str, Any]:
        return normalize_branches(data)

    def validate(self, data: Mapping[str, Any]) -> None:
        validate_comparison(data)

    async def resolve(
        self,
        context: "ResolutionContext",
        document: "Document",
        data: Mapping[str, Any],
    ) -> None:
        await resolve_comparison(context, document, data, self.name)
