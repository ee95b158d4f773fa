"""Actions for the dnd5e game system.

Documents follow the dnd5e actor layout: hit points under
``system.attributes.hp``, damage traits under ``system.traits.{dr,di,dv}``,
abilities under ``system.abilities`` and skills under ``system.skills``.
"""

import logging
import math
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from action_prefabs.actions.comparison import require_attribute, resolve_comparison, validate_comparison
from action_prefabs.actions.registry import Extension
from action_prefabs.actions.roll import evaluate_check
from action_prefabs.actions.types import Action, ActionVariant, as_sequence, normalize_branches
from action_prefabs.attributes import get_attribute
from action_prefabs.chat import speaker_name
from action_prefabs.validators.contracts import (
    is_boolean,
    is_instance,
    is_integer,
    is_key_of,
    is_non_negative,
    is_scalar,
)

if TYPE_CHECKING:
    from action_prefabs.documents.base import Document
    from action_prefabs.resolver.resolver import ResolutionContext

logger = logging.getLogger(__name__)

SYSTEM_ID = "dnd5e"

DAMAGE_TYPES: dict[str, str] = {
    "acid": "Acid",
    "bludgeoning": "Bludgeoning",
    "cold": "Cold",
    "fire": "Fire",
    "force": "Force",
    "lightning": "Lightning",
    "necrotic": "Necrotic",
    "piercing": "Piercing",
    "poison": "Poison",
    "psychic": "Psychic",
    "radiant": "Radiant",
    "slashing": "Slashing",
    "thunder": "Thunder",
}

ABILITIES: dict[str, str] = {
    "str": "Strength",
    "dex": "Dexterity",
    "con": "Constitution",
    "int": "Intelligence",
    "wis": "Wisdom",
    "cha": "Charisma",
}

SKILLS: dict[str, str] = {
    "acr": "Acrobatics",
    "ani": "Animal Handling",
    "arc": "Arcana",
    "ath": "Athletics",
    "dec": "Deception",
    "his": "History",
    "ins": "Insight",
    "itm": "Intimidation",
    "inv": "Investigation",
    "med": "Medicine",
    "nat": "Nature",
    "prc": "Perception",
    "prf": "Performance",
    "per": "Persuasion",
    "rel": "Religion",
    "slt": "Sleight of Hand",
    "ste": "Stealth",
    "sur": "Survival",
}

CREATURE_TYPES: dict[str, str] = {
    "aberration": "Aberration",
    "beast": "Beast",
    "celestial": "Celestial",
    "construct": "Construct",
    "dragon": "Dragon",
    "elemental": "Elemental",
    "fey": "Fey",
    "fiend": "Fiend",
    "giant": "Giant",
    "humanoid": "Humanoid",
    "monstrosity": "Monstrosity",
    "ooze": "Ooze",
    "plant": "Plant",
    "undead": "Undead",
}

HP_PATH = "system.attributes.hp"
CREATURE_TYPE_PATH = "system.details.type.value"


def _trait(document: "Document", trait: str) -> list[Any]:
    return list(get_attribute(document, f"system.traits.{trait}.value") or [])


def damage_multiplier(document: "Document", damage_type: str) -> float:
    """Multiplier for ``damage_type`` from the document's resistances,
    immunities and vulnerabilities, checked in that order."""
    if damage_type in _trait(document, "dr"):
        return 0.5
    if damage_type in _trait(document, "di"):
        return 0
    if damage_type in _trait(document, "dv"):
        return 2
    return 1


async def apply_damage(
    context: "ResolutionContext",
    document: "Document",
    amount: int,
    multiplier: float = 1,
) -> None:
    """Apply damage (or healing, with a negative multiplier) to hit points.

    Temporary hit points absorb damage first. The resulting value is kept
    within ``[0, hp.max]``. Both fields are written in one update.
    """
    hp = require_attribute(document, HP_PATH)
    amount = math.floor(amount * multiplier)
    temp = hp.get("temp") or 0
    value = hp.get("value") or 0
    hp_max = hp.get("max")

    temp_damage = min(temp, amount) if amount > 0 else 0
    new_value = max(value - (amount - temp_damage), 0)
    if hp_max is not None:
        new_value = min(new_value, hp_max)

    logger.debug(f"{document.uuid} hp {value} -> {new_value} (amount {amount})")
    await context.update(
        document,
        {f"{HP_PATH}.temp": temp - temp_damage, f"{HP_PATH}.value": new_value},
    )


async def resolve_with_multiplier(
    context: "ResolutionContext",
    document: "Document",
    data: Mapping[str, Any],
    multiplier_fn: Callable[["Document", Mapping[str, Any]], float],
    describe: Callable[["Document", Mapping[str, Any]], str],
) -> None:
    """Shared resolution for Damage and Healing."""
    await apply_damage(context, document, data["value"], multiplier_fn(document, data))
    if data["print"]:
        await context.say(document, describe(document, data))


class Damage(ActionVariant):
    """Applies damage, accounting for resistances, immunities and vulnerabilities.

    Payload:
        damage_type: One of ``options["damage_types"]``.
        value: Integer amount.
        print: Post a chat message (default False).
    """

    name = "Damage"
    options = {"damage_types": DAMAGE_TYPES}

    def normalize(self, data: dict[str, Any]) -> dict[str, Any]:
        data.setdefault("print", False)
        return data

    def validate(self, data: Mapping[str, Any]) -> None:
        is_scalar(
            {"damage_type": data.get("damage_type"), "value": data.get("value"), "print": data["print"]}
        )
        is_key_of({"damage_type": data.get("damage_type")}, DAMAGE_TYPES)
        is_integer({"value": data.get("value")})
        is_boolean({"print": data["print"]})

    async def resolve(
        self,
        context: "ResolutionContext",
        document: "Document",
        data: Mapping[str, Any],
    ) -> None:
        await resolve_with_multiplier(
            context,
            document,
            data,
            lambda doc, d: damage_multiplier(doc, d["damage_type"]),
            lambda doc, d: (
                f"{speaker_name(doc)} takes {d['value']} {DAMAGE_TYPES[d['damage_type']]} damage."
            ),
        )


class Healing(ActionVariant):
    """Restores hit points, up to the maximum.

    Payload:
        value: Integer amount.
        print: Post a chat message (default False).
    """

    name = "Healing"

    def normalize(self, data: dict[str, Any]) -> dict[str, Any]:
        data.setdefault("print", False)
        return data

    def validate(self, data: Mapping[str, Any]) -> None:
        is_scalar({"value": data.get("value"), "print": data["print"]})
        is_integer({"value": data.get("value")})
        is_boolean({"print": data["print"]})

    async def resolve(
        self,
        context: "ResolutionContext",
        document: "Document",
        data: Mapping[str, Any],
    ) -> None:
        await resolve_with_multiplier(
            context,
            document,
            data,
            lambda doc, d: -1,
            lambda doc, d: f"{speaker_name(doc)} heals {d['value']} hp.",
        )


class D20Check(ActionVariant):
    """A d20 roll against a DC that resolves additional actions on the result.

    Succeeds when the total is at least ``dc``.

    Payload:
        type: One of ``options["type"]``.
        bonus: Integer added to the roll (default 0).
        dc: Integer difficulty class.
        true_actions / false_actions: Branches.
        print: Announce the roll (default False).
    """

    branch_fields = ("true_actions", "false_actions")

    def __init__(self, name: str, choices: Mapping[str, str], formula: str) -> None:
        """Initialize check.

        Args:
            name: Registered type name.
            choices: Allowed values for ``type``.
            formula: Roll formula; ``{type}`` is replaced by the payload type.
        """
        self.name = name
        self.choices = choices
        self.formula = formula
        self.options = {"type": choices}

    def normalize(self, data: dict[str, Any]) -> dict[str, Any]:
        data.setdefault("bonus", 0)
        data.setdefault("print", False)
        return normalize_branches(data)

    def validate(self, data: Mapping[str, Any]) -> None:
        is_scalar(
            {
                "type": data.get("type"),
                "bonus": data["bonus"],
                "dc": data.get("dc"),
                "print": data["print"],
            }
        )
        is_key_of({"type": data.get("type")}, self.choices)
        is_integer({"bonus": data["bonus"], "dc": data.get("dc")})
        is_non_negative({"dc": data["dc"]})
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
        roll_data = document.roll_data()
        roll_data["bonus"] = data["bonus"]
        outcome = await evaluate_check(
            context,
            document,
            self.formula.format(type=data["type"]),
            roll_data,
            ">=",
            data["dc"],
            data["print"],
        )
        await context.branch(document, self.name, outcome, data)


def saving_throw() -> D20Check:
    return D20Check("SavingThrow", ABILITIES, "1d20 + @abilities.{type}.save + @bonus")


def ability_check() -> D20Check:
    return D20Check("AbilityCheck", ABILITIES, "1d20 + @abilities.{type}.mod + @bonus")


def skill_check() -> D20Check:
    return D20Check("SkillCheck", SKILLS, "1d20 + @skills.{type}.total + @bonus")


class CreatureType(ActionVariant):
    """Resolves additional actions based on an NPC's creature type.

    Documents that are not NPCs are skipped without resolving either branch.

    Payload:
        type: Creature type or list of creature types.
        true_actions / false_actions: Branches.
    """

    name = "CreatureType"
    options = {"creature_types": CREATURE_TYPES}
    branch_fields = ("true_actions", "false_actions")

    def normalize(self, data: dict[str, Any]) -> dict[str, Any]:
        data["type"] = as_sequence(data.get("type"))
        data["operation"] = "in"
        data["attribute_path"] = CREATURE_TYPE_PATH
        data["value"] = data["type"]
        return normalize_branches(data)

    def validate(self, data: Mapping[str, Any]) -> None:
        is_key_of({"type": data["type"]}, CREATURE_TYPES)
        validate_comparison(data)

    async def resolve(
        self,
        context: "ResolutionContext",
        document: "Document",
        data: Mapping[str, Any],
    ) -> None:
        if document.document_type != "npc":
            logger.debug(f"CreatureType skipped for {document.uuid} ({document.document_type})")
            return
        await resolve_comparison(context, document, data, self.name)


extension = Extension(
    system_id=SYSTEM_ID,
    variants=(Damage(), Healing(), saving_throw(), ability_check(), skill_check(), CreatureType()),
)
