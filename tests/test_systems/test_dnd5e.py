"""Tests for the dnd5e action variants."""

import pytest

from action_prefabs.documents import MemoryDocument
from action_prefabs.errors import AttributePathError, ValidationError
from action_prefabs.resolver.resolver import ActionResolver
from action_prefabs.systems.dnd5e import DAMAGE_TYPES, damage_multiplier


@pytest.fixture
def dnd_resolver(dnd5e_registry, dice, chat, hook) -> ActionResolver:
    return ActionResolver(dnd5e_registry, dice=dice, chat=chat, hook=hook)


@pytest.fixture
def goblin() -> MemoryDocument:
    return MemoryDocument(
        "Actor.goblin",
        data={
            "system": {
                "attributes": {"hp": {"value": 7, "max": 7, "temp": 0}},
                "details": {"type": {"value": "humanoid"}},
                "traits": {
                    "dr": {"value": ["fire"]},
                    "di": {"value": ["poison"]},
                    "dv": {"value": ["radiant"]},
                },
            },
        },
        document_type="npc",
        name="Goblin",
    )


def hp_of(document) -> dict:
    return document["system"]["attributes"]["hp"]


class TestRegistration:
    """Tests for the dnd5e extension."""

    def test_types_registered(self, dnd5e_registry, registry):
        """Should add the dnd5e types after the core ones."""
        assert dnd5e_registry.types.keys() >= {
            "Damage",
            "Healing",
            "SavingThrow",
            "AbilityCheck",
            "SkillCheck",
            "CreatureType",
        }
        assert "Damage" not in registry

    def test_options(self, dnd5e_registry):
        """Should publish the choice lists as options."""
        assert dnd5e_registry.options["Damage"]["damage_types"] == list(DAMAGE_TYPES)
        assert "wis" in dnd5e_registry.options["SavingThrow"]["type"]
        assert "ste" in dnd5e_registry.options["SkillCheck"]["type"]
        assert "undead" in dnd5e_registry.options["CreatureType"]["creature_types"]


class TestDamageMultiplier:
    """Tests for damage_multiplier."""

    @pytest.mark.parametrize(
        "damage_type,expected",
        [("fire", 0.5), ("poison", 0), ("radiant", 2), ("cold", 1)],
    )
    def test_traits(self, goblin, damage_type, expected):
        """Should read resistances, immunities and vulnerabilities."""
        assert damage_multiplier(goblin, damage_type) == expected

    def test_no_traits(self, actor):
        """Should default to 1 without trait data."""
        assert damage_multiplier(actor, "fire") == 1


class TestDamage:
    """Tests for the Damage action."""

    @pytest.mark.asyncio
    async def test_plain_damage(self, dnd5e_registry, dnd_resolver, actor):
        """Should subtract the value in one update."""
        action = dnd5e_registry.create("Damage", {"damage_type": "fire", "value": 4})
        await dnd_resolver.resolve_tree(actor, action)

        assert hp_of(actor)["value"] == 6
        assert actor.operations == [
            ("update", {"system.attributes.hp.temp": 0, "system.attributes.hp.value": 6}),
        ]

    @pytest.mark.asyncio
    async def test_temp_absorbs_first(self, dnd5e_registry, dnd_resolver):
        """Should drain temporary hit points before the value."""
        target = MemoryDocument(
            "Actor.a", {"system": {"attributes": {"hp": {"value": 10, "max": 10, "temp": 5}}}}
        )
        action = dnd5e_registry.create("Damage", {"damage_type": "cold", "value": 8})
        await dnd_resolver.resolve_tree(target, action)

        assert hp_of(target) == {"value": 7, "max": 10, "temp": 0}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "damage_type,expected",
        [("fire", 6), ("poison", 7), ("radiant", 1), ("acid", 4)],
    )
    async def test_traits_applied(self, dnd5e_registry, dnd_resolver, goblin, damage_type, expected):
        """Should scale by the multiplier, rounding down."""
        action = dnd5e_registry.create("Damage", {"damage_type": damage_type, "value": 3})
        await dnd_resolver.resolve_tree(goblin, action)
        assert hp_of(goblin)["value"] == expected

    @pytest.mark.asyncio
    async def test_never_below_zero(self, dnd5e_registry, dnd_resolver, goblin):
        """Should clamp the value at zero."""
        action = dnd5e_registry.create("Damage", {"damage_type": "acid", "value": 50})
        await dnd_resolver.resolve_tree(goblin, action)
        assert hp_of(goblin)["value"] == 0

    @pytest.mark.asyncio
    async def test_print(self, dnd5e_registry, dnd_resolver, actor, chat):
        """Should announce the damage taken."""
        action = dnd5e_registry.create(
            "Damage", {"damage_type": "necrotic", "value": 2, "print": True}
        )
        await dnd_resolver.resolve_tree(actor, action)

        assert chat.messages[0].speaker == "Hero"
        assert chat.messages[0].content == "Hero takes 2 Necrotic damage."

    @pytest.mark.asyncio
    async def test_missing_hp(self, dnd5e_registry, dnd_resolver):
        """Should raise when the document has no hit points."""
        action = dnd5e_registry.create("Damage", {"damage_type": "fire", "value": 1})
        with pytest.raises(AttributePathError):
            await dnd_resolver.resolve_tree(MemoryDocument("Item.x", {"system": {}}), action)

    @pytest.mark.parametrize(
        "payload,field",
        [
            ({"damage_type": "sonic", "value": 1}, "damage_type"),
            ({"damage_type": "fire", "value": 1.5}, "value"),
            ({"damage_type": "fire", "value": 1, "print": "yes"}, "print"),
            ({"damage_type": ["fire", "cold"], "value": 1}, "damage_type"),
            ({"damage_type": "fire", "value": [1]}, "value"),
        ],
    )
    def test_validation(self, dnd5e_registry, payload, field):
        """Should reject invalid payloads."""
        with pytest.raises(ValidationError) as exc_info:
            dnd5e_registry.create("Damage", payload)
        assert exc_info.value.field == field


class TestHealing:
    """Tests for the Healing action."""

    @pytest.mark.asyncio
    async def test_heal_up_to_max(self, dnd5e_registry, dnd_resolver, actor, chat):
        """Should add hit points without exceeding the maximum."""
        action = dnd5e_registry.create("Healing", {"value": 15, "print": True})
        await dnd_resolver.resolve_tree(actor, action)

        assert hp_of(actor)["value"] == 20
        assert chat.messages[0].content == "Hero heals 15 hp."

    @pytest.mark.asyncio
    async def test_heal(self, dnd5e_registry, dnd_resolver, actor):
        """Should add the value."""
        await dnd_resolver.resolve_tree(actor, dnd5e_registry.create("Healing", {"value": 3}))
        assert hp_of(actor)["value"] == 13

    def test_rejects_list_value(self, dnd5e_registry):
        """Should reject a list where one amount is expected."""
        with pytest.raises(ValidationError) as exc_info:
            dnd5e_registry.create("Healing", {"value": [3, 4]})
        assert exc_info.value.field == "value"
        assert exc_info.value.rule == "scalar"


class TestD20Check:
    """Tests for SavingThrow, AbilityCheck and SkillCheck."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "type_name,choice,formula",
        [
            ("SavingThrow", "str", "1d20 + @abilities.str.save + @bonus"),
            ("AbilityCheck", "dex", "1d20 + @abilities.dex.mod + @bonus"),
            ("SkillCheck", "ath", "1d20 + @skills.ath.total + @bonus"),
        ],
    )
    async def test_formula(self, dnd5e_registry, dnd_resolver, actor, dice, type_name, choice, formula):
        """Should roll the system formula with the payload bonus."""
        action = dnd5e_registry.create(type_name, {"type": choice, "bonus": 1, "dc": 5})
        await dnd_resolver.resolve_tree(actor, action)

        rolled_formula, data = dice.evaluated[0]
        assert rolled_formula == formula
        assert data["bonus"] == 1
        assert data["abilities"]["str"]["save"] == 5

    @pytest.mark.asyncio
    async def test_bonus_defaults_to_zero(self, dnd5e_registry, dnd_resolver, actor, dice):
        """Should replace the document's bonus with the payload default."""
        action = dnd5e_registry.create("SavingThrow", {"type": "con", "dc": 5})
        assert action.data["bonus"] == 0

        await dnd_resolver.resolve_tree(actor, action)
        assert dice.evaluated[0][1]["bonus"] == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("dc,expected", [(10, 1), (11, -1)])
    async def test_meets_dc(self, dnd5e_registry, dnd_resolver, actor, dc, expected):
        """Should take the true branch when the total reaches the DC."""
        mark = {"attribute_path": "hp", "method": "add"}
        action = dnd5e_registry.create(
            "SavingThrow",
            {
                "type": "wis",
                "dc": dc,
                "true_actions": dnd5e_registry.create("UpdateDoc", {"updates": {**mark, "value": 1}}),
                "false_actions": dnd5e_registry.create("UpdateDoc", {"updates": {**mark, "value": -1}}),
            },
        )
        await dnd_resolver.resolve_tree(actor, action)
        assert actor["hp"] == 10 + expected

    @pytest.mark.asyncio
    async def test_print_announces(self, dnd5e_registry, dnd_resolver, actor, dice):
        """Should announce the roll when print is set."""
        action = dnd5e_registry.create("AbilityCheck", {"type": "str", "dc": 1, "print": True})
        await dnd_resolver.resolve_tree(actor, action)
        assert len(dice.announced) == 1

    @pytest.mark.parametrize(
        "payload,field",
        [
            ({"type": "luck", "dc": 10}, "type"),
            ({"type": "str", "dc": 10, "bonus": "2"}, "bonus"),
            ({"type": "str"}, "dc"),
            ({"type": "str", "dc": -1}, "dc"),
            ({"type": "str", "dc": 10, "true_actions": {"type": "Roll"}}, "true_actions"),
            ({"type": ["str", "dex"], "dc": 10}, "type"),
            ({"type": "str", "dc": [10, 12]}, "dc"),
            ({"type": "str", "dc": 10, "bonus": [1, 2]}, "bonus"),
        ],
    )
    def test_validation(self, dnd5e_registry, payload, field):
        """Should reject invalid payloads."""
        with pytest.raises(ValidationError) as exc_info:
            dnd5e_registry.create("SavingThrow", payload)
        assert exc_info.value.field == field


class TestCreatureType:
    """Tests for the CreatureType action."""

    def _marked(self, registry, creature_type):
        return registry.create(
            "CreatureType",
            {
                "type": creature_type,
                "true_actions": registry.create(
                    "UpdateDoc",
                    {"updates": {"attribute_path": "system.details.type.value", "method": "add", "value": "!"}},
                ),
            },
        )

    def test_normalized(self, dnd5e_registry):
        """Should expand into an "in" comparison on the creature type."""
        action = self._marked(dnd5e_registry, "undead")
        assert action.data["type"] == ("undead",)
        assert action.data["operation"] == "in"
        assert action.data["attribute_path"] == "system.details.type.value"
        assert action.data["false_actions"] == ()

    @pytest.mark.asyncio
    async def test_matching_npc(self, dnd5e_registry, dnd_resolver, goblin, hook):
        """Should take the true branch when the type is listed."""
        await dnd_resolver.resolve_tree(goblin, self._marked(dnd5e_registry, ["fiend", "humanoid"]))
        assert goblin["system"]["details"]["type"]["value"] == "humanoid!"

    @pytest.mark.asyncio
    async def test_other_npc(self, dnd5e_registry, dnd_resolver, goblin):
        """Should take the false branch when the type is not listed."""
        await dnd_resolver.resolve_tree(goblin, self._marked(dnd5e_registry, "undead"))
        assert goblin["system"]["details"]["type"]["value"] == "humanoid"

    @pytest.mark.asyncio
    async def test_skips_characters(self, dnd5e_registry, dnd_resolver, actor, hook):
        """Should resolve neither branch for non-NPC documents."""
        await dnd_resolver.resolve_tree(actor, self._marked(dnd5e_registry, "humanoid"))

        assert actor.operations == []
        assert [type(event).__name__ for event in hook.events] == ["ActionStartEvent", "ActionEndEvent"]

    def test_unknown_type(self, dnd5e_registry):
        """Should reject creature types outside the catalogue."""
        with pytest.raises(ValidationError) as exc_info:
            dnd5e_registry.create("CreatureType", {"type": ["undead", "dragonborn"]})
        assert exc_info.value.field == "type"
