"""ActiveEffect and StatusEffect actions: add or remove effects on a document.

Effects live in the document's ``ActiveEffect`` embedded collection. Applying
an effect that structurally matches an existing one (same name, same status
set) updates the existing entry in place instead of creating a duplicate.
"""

import copy
import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from action_prefabs.actions.types import ActionVariant, CoreActionType, as_sequence, thaw
from action_prefabs.validators.contracts import is_boolean, is_in, is_object, is_scalar, is_string

if TYPE_CHECKING:
    from action_prefabs.documents.base import Document
    from action_prefabs.resolver.resolver import ResolutionContext

logger = logging.getLogger(__name__)

EFFECT_KIND = "ActiveEffect"


def _status(status_id: str, name: str) -> dict[str, str]:
    return {"id": status_id, "name": name, "icon": f"icons/svg/{status_id.lower()}.svg"}


# Core status effect catalogue; game systems may supply their own.
DEFAULT_STATUS_EFFECTS: tuple[dict[str, str], ...] = (
    _status("dead", "Dead"),
    _status("unconscious", "Unconscious"),
    _status("sleep", "Asleep"),
    _status("stun", "Stunned"),
    _status("prone", "Prone"),
    _status("restrain", "Restrained"),
    _status("paralysis", "Paralyzed"),
    _status("fly", "Flying"),
    _status("blind", "Blind"),
    _status("deaf", "Deaf"),
    _status("silence", "Silenced"),
    _status("fear", "Frightened"),
    _status("burning", "Burning"),
    _status("frozen", "Frozen"),
    _status("shock", "Shocked"),
    _status("corrode", "Corroding"),
    _status("bleeding", "Bleeding"),
    _status("disease", "Diseased"),
    _status("poison", "Poisoned"),
    _status("curse", "Cursed"),
    _status("regen", "Regeneration"),
    _status("degen", "Degeneration"),
    _status("upgrade", "Upgrade"),
    _status("downgrade", "Downgrade"),
    _status("invisible", "Invisible"),
    _status("target", "Targeted"),
    _status("eye", "Marked"),
    _status("bless", "Blessed"),
    _status("fireShield", "Fire Shield"),
    _status("coldShield", "Ice Shield"),
    _status("magicShield", "Magic Shield"),
    _status("holyShield", "Holy Shield"),
)


def compare_effects(first: Mapping[str, Any], second: Mapping[str, Any]) -> bool:
    """Whether two effects have the same name and the same set of statuses."""
    first_statuses = list(first.get("statuses") or [])
    second_statuses = list(second.get("statuses") or [])
    return (
        first.get("name") == second.get("name")
        and len(first_statuses) == len(second_statuses)
        and all(status in second_statuses for status in first_statuses)
    )


def effect_label(effect: Mapping[str, Any]) -> str | None:
    """Label used to match effects for removal; falls back to the name."""
    return effect.get("label") or effect.get("name")


async def apply_effects(
    context: "ResolutionContext",
    document: "Document",
    effect_data: Sequence[Mapping[str, Any]],
    announce: bool,
) -> None:
    """Update matching effects in place and create the rest."""
    existing = document.embedded(EFFECT_KIND)
    update_effects: list[dict[str, Any]] = []
    create_effects: list[dict[str, Any]] = []
    for candidate in effect_data:
        candidate = thaw(candidate)
        match = next((effect for effect in existing if compare_effects(candidate, effect)), None)
        if match:
            update_effects.append({"_id": match["_id"], **candidate})
        else:
            create_effects.append(candidate)

    await document.update_embedded(EFFECT_KIND, update_effects)
    await document.create_embedded(EFFECT_KIND, create_effects)

    if announce and effect_data:
        names = ", ".join(str(effect.get("name")) for effect in effect_data)
        await context.say(document, f"is affected by {names}.")


async def remove_effects(
    context: "ResolutionContext",
    document: "Document",
    effect_data: Sequence[Mapping[str, Any]],
    announce: bool,
) -> None:
    """Delete the first existing effect matching each candidate's label."""
    existing = document.embedded(EFFECT_KIND)
    effects_to_remove: list[str] = []
    removed_names: list[str] = []
    for candidate in effect_data:
        label = effect_label(candidate)
        match = next(
            (
                effect
                for effect in existing
                if effect_label(effect) == label and effect["_id"] not in effects_to_remove
            ),
            None,
        )
        if match:
            effects_to_remove.append(match["_id"])
            removed_names.append(str(label))

    await document.delete_embedded(EFFECT_KIND, effects_to_remove)

    if announce and removed_names:
        await context.say(document, f"is no longer affected by {', '.join(removed_names)}.")


async def toggle_effects(
    context: "ResolutionContext",
    document: "Document",
    effect_data: Sequence[Mapping[str, Any]],
    announce: bool,
) -> None:
    """Declared operation with no behaviour yet."""
    logger.debug(f"ActiveEffect toggle is not implemented; skipped on {document.uuid}")


EFFECT_OPERATIONS = {
    "apply": apply_effects,
    "remove": remove_effects,
    "toggle": toggle_effects,
}


def _normalize_effect(effect: Any) -> Any:
    if not isinstance(effect, Mapping):
        return effect
    effect = dict(effect)
    effect["statuses"] = list(as_sequence(effect.get("statuses") or ()))
    return effect


def validate_effect_data(effect_data: Sequence[Any]) -> None:
    """Each effect must be a mapping with a string name and string statuses."""
    is_object({"effect_data": effect_data})
    for effect in effect_data:
        is_scalar({"name": effect.get("name")})
        is_string({"name": effect.get("name")})
        is_string({"statuses": effect["statuses"]})


class ActiveEffect(ActionVariant):
    """Applies or removes active effects on a document.

    Payload:
        operation: apply, remove or toggle.
        effect_data: One effect mapping or a list of them. Each needs a
            ``name``; ``statuses`` defaults to an empty list.
        print: Post a chat message about the change (default False).
    """

    name = CoreActionType.ACTIVE_EFFECT.value
    options = {"operations": EFFECT_OPERATIONS}

    def normalize(self, data: dict[str, Any]) -> dict[str, Any]:
        data["effect_data"] = tuple(_normalize_effect(e) for e in as_sequence(data.get("effect_data")))
        data.setdefault("print", False)
        return data

    def validate(self, data: Mapping[str, Any]) -> None:
        is_scalar({"operation": data.get("operation"), "print": data["print"]})
        is_in({"operation": data.get("operation")}, EFFECT_OPERATIONS)
        validate_effect_data(data["effect_data"])
        is_boolean({"print": data["print"]})

    async def resolve(
        self,
        context: "ResolutionContext",
        document: "Document",
        data: Mapping[str, Any],
    ) -> None:
        await EFFECT_OPERATIONS[data["operation"]](
            context, document, data["effect_data"], data["print"]
        )


class StatusEffect(ActionVariant):
    """Applies or removes catalogue status effects on a document.

    Each status id becomes an effect built from its catalogue entry, then the
    action behaves exactly like ActiveEffect.

    Payload:
        operation: apply, remove or toggle.
        statuses: One status id or a list of them.
        print: Post a chat message about the change (default False).
    """

    name = CoreActionType.STATUS_EFFECT.value

    def __init__(self, catalogue: Sequence[Mapping[str, Any]] = DEFAULT_STATUS_EFFECTS) -> None:
        self.catalogue = {entry["id"]: dict(entry) for entry in catalogue}
        self.options = {
            "operations": EFFECT_OPERATIONS,
            "status_effects": list(self.catalogue),
        }

    def status_effect_data(self, status_id: str) -> dict[str, Any]:
        """Effect data for one catalogue status."""
        effect = copy.deepcopy(self.catalogue[status_id])
        effect.pop("id")
        effect["statuses"] = [status_id]
        return effect

    def normalize(self, data: dict[str, Any]) -> dict[str, Any]:
        data["statuses"] = as_sequence(data.get("statuses"))
        data.setdefault("print", False)
        data["effect_data"] = tuple(
            self.status_effect_data(status)
            for status in data["statuses"]
            if isinstance(status, str) and status in self.catalogue
        )
        return data

    def validate(self, data: Mapping[str, Any]) -> None:
        is_scalar({"operation": data.get("operation"), "print": data["print"]})
        is_in({"operation": data.get("operation")}, EFFECT_OPERATIONS)
        is_in({"statuses": data["statuses"]}, self.catalogue)
        is_boolean({"print": data["print"]})

    async def resolve(
        self,
        context: "ResolutionContext",
        document: "Document",
        data: Mapping[str, Any],
    ) -> None:
        await EFFECT_OPERATIONS[data["operation"]](
            context, document, data["effect_data"], data["print"]
        )
