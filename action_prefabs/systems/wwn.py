"""Actions for the Worlds Without Number game system."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from action_prefabs.actions.comparison import require_attribute
from action_prefabs.actions.registry import Extension
from action_prefabs.actions.types import ActionVariant
from action_prefabs.validators.contracts import is_in, is_integer, is_scalar

if TYPE_CHECKING:
    from action_prefabs.documents.base import Document
    from action_prefabs.resolver.resolver import ResolutionContext

SYSTEM_ID = "wwn"

HP_PATH = "system.hp.value"

# hp is the current value, value is the payload amount
HP_METHODS = {
    "damage": lambda hp, value: hp - value,
    "heal": lambda hp, value: hp + value,
    "replace": lambda hp, value: value,
}


class ChangeHP(ActionVariant):
    """Modify hit points via damage, healing or replacement.

    Payload:
        method: damage, heal or replace.
        value: Integer amount.
    """

    name = "ChangeHP"
    options = {"operations": HP_METHODS}

    def validate(self, data: Mapping[str, Any]) -> None:
        is_scalar({"method": data.get("method"), "value": data.get("value")})
        is_in({"method": data.get("method")}, HP_METHODS)
        is_integer({"value": data.get("value")})

    async def resolve(
        self,
        context: "ResolutionContext",
        document: "Document",
        data: Mapping[str, Any],
    ) -> None:
        hp = require_attribute(document, HP_PATH)
        await context.update(document, {HP_PATH: HP_METHODS[data["method"]](hp, data["value"])})


extension = Extension(system_id=SYSTEM_ID, variants=(ChangeHP(),))
