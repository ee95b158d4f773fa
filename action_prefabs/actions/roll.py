"""Roll action: branch on the result of a dice roll."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from action_prefabs.actions.operators import NUMERIC_OPERATORS
from action_prefabs.actions.types import Action, ActionVariant, CoreActionType, normalize_branches
from action_prefabs.validators.contracts import (
    is_boolean,
    is_in,
    is_instance,
    is_number,
    is_scalar,
    is_string,
)

if TYPE_CHECKING:
    from action_prefabs.documents.base import Document
    from action_prefabs.resolver.resolver import ResolutionContext


async def evaluate_check(
    context: "ResolutionContext",
    document: "Document",
    formula: str,
    roll_data: Mapping[str, Any],
    operation: str,
    target: int | float,
    announce: bool = False,
) -> bool:
    """Roll ``formula`` and compare its total to ``target``.

    Args:
        context: Resolution context providing the dice provider.
        document: Document the roll is made for.
        formula: Dice formula; ``@path`` references read ``roll_data``.
        roll_data: Data for formula references.
        operation: Key of NUMERIC_OPERATORS.
        target: Right-hand operand for the comparison.
        announce: Announce the roll before comparing.

    Returns:
        Whether ``total <operation> target`` holds.
    """
    result = await context.dice.evaluate(formula, roll_data)
    if announce:
        await context.dice.announce(result, document)
    return NUMERIC_OPERATORS[operation](result.total, target)


class Roll(ActionVariant):
    """Makes a roll and resolves additional actions based on the result.

    Payload:
        formula: Dice formula, evaluated against the document's roll data.
        operation: One of ``options["operations"]``.
        value: Number the roll total is compared to.
        true_actions / false_actions: Branches.
        print: Announce the roll (default False).
    """

    name = CoreActionType.ROLL.value
    options = {"operations": NUMERIC_OPERATORS}
    branch_fields = ("true_actions", "false_actions")

    def normalize(self, data: dict[str, Any]) -> dict[str, Any]:
        data.setdefault("print", False)
        return normalize_branches(data)

    def validate(self, data: Mapping[str, Any]) -> None:
        is_scalar(
            {
                "formula": data.get("formula"),
                "operation": data.get("operation"),
                "value": data.get("value"),
                "print": data["print"],
            }
        )
        is_string({"formula": data.get("formula")})
        is_in({"operation": data.get("operation")}, NUMERIC_OPERATORS)
        is_number({"value": data.get("value")})
        is_instance(
            {"true_actions": data["true_actions"], "false_actions": data["false_actions"]},
            Action,
        )
        is_boolean({"print": data["print"]})

    async def resolve(
        self,
        context: "ResolutionContext",
        document: "Document",
        data: Mapping[str, Any],
    ) -> None:
        outcome = await evaluate_check(
            context,
            document,
            data["formula"],
            document.roll_data(),
            data["operation"],
            data["value"],
            data["print"],
        )
        await context.branch(document, self.name, outcome, data)
