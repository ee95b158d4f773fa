"""Tests for the ActiveEffect and StatusEffect actions."""

import pytest

from action_prefabs.actions.effects import EFFECT_KIND, compare_effects
from action_prefabs.errors import ValidationError


class TestCompareEffects:
    """Tests for structural effect matching."""

    def test_same_name_and_statuses(self):
        """Should match regardless of status order."""
        assert compare_effects(
            {"name": "Hexed", "statuses": ["a", "b"]},
            {"name": "Hexed", "statuses": ["b", "a"]},
        )

    def test_different_statuses(self):
        """Should not match when the status sets differ."""
        assert not compare_effects({"name": "Hexed", "statuses": ["a"]}, {"name": "Hexed", "statuses": ["a", "b"]})
        assert not compare_effects({"name": "Hexed", "statuses": ["a"]}, {"name": "Cursed", "statuses": ["a"]})


class TestActiveEffectValidation:
    """Payload checks for ActiveEffect."""

    @pytest.mark.parametrize(
        "payload,field,rule",
        [
            ({"operation": "burn", "effect_data": {"name": "x"}}, "operation", "choice"),
            ({"operation": "apply", "effect_data": "x"}, "effect_data", "object"),
            ({"operation": "apply", "effect_data": {"label": "x"}}, "name", "string"),
            ({"operation": "apply", "effect_data": {"name": "x", "statuses": [1]}}, "statuses", "string"),
            ({"operation": "apply", "effect_data": {"name": "x"}, "print": 1}, "print", "boolean"),
            ({"operation": ["apply", "remove"], "effect_data": {"name": "x"}}, "operation", "scalar"),
            ({"operation": "apply", "effect_data": {"name": ["x", "y"]}}, "name", "scalar"),
            ({"operation": "apply", "effect_data": {"name": "x"}, "print": [True]}, "print", "scalar"),
        ],
    )
    def test_rejects(self, registry, payload, field, rule):
        """Should raise a ValidationError naming the bad field."""
        with pytest.raises(ValidationError) as exc_info:
            registry.create("ActiveEffect", payload)
        assert exc_info.value.field == field
        assert exc_info.value.rule == rule

    def test_normalises_effects(self, registry):
        """Should wrap one effect and default its statuses."""
        action = registry.create("ActiveEffect", {"operation": "apply", "effect_data": {"name": "Hexed"}})
        assert action.data["effect_data"] == ({"name": "Hexed", "statuses": ()},)
        assert action.data["print"] is False


class TestActiveEffectResolve:
    """Applying, removing and toggling effects."""

    @pytest.mark.asyncio
    async def test_apply_creates_new_effect(self, registry, resolver, actor):
        """Should create an effect that matches nothing existing."""
        action = registry.create(
            "ActiveEffect", {"operation": "apply", "effect_data": {"name": "Hexed", "statuses": ["curse"]}}
        )
        await resolver.resolve_tree(actor, action)

        assert [op[0] for op in actor.operations] == ["update_embedded", "create_embedded"]
        assert actor.operations[0][2] == []
        names = [effect["name"] for effect in actor.embedded(EFFECT_KIND)]
        assert names == ["Blessed", "Hexed"]

    @pytest.mark.asyncio
    async def test_apply_updates_matching_effect(self, registry, resolver, actor):
        """Should update an existing structurally equal effect in place."""
        action = registry.create(
            "ActiveEffect",
            {"operation": "apply", "effect_data": {"name": "Blessed", "statuses": ["bless"], "duration": 3}},
        )
        await resolver.resolve_tree(actor, action)

        effects = actor.embedded(EFFECT_KIND)
        assert len(effects) == 1
        assert effects[0]["_id"] == "eff1"
        assert effects[0]["duration"] == 3
        assert actor.operations[1] == ("create_embedded", EFFECT_KIND, [])

    @pytest.mark.asyncio
    async def test_remove_by_label(self, registry, resolver, actor):
        """Should delete the effect whose label matches."""
        action = registry.create("ActiveEffect", {"operation": "remove", "effect_data": {"name": "Blessed"}})
        await resolver.resolve_tree(actor, action)
        assert actor.operations == [("delete_embedded", EFFECT_KIND, ["eff1"])]
        assert actor.embedded(EFFECT_KIND) == []

    @pytest.mark.asyncio
    async def test_remove_missing_effect(self, registry, resolver, actor):
        """Should delete nothing when no effect matches."""
        action = registry.create("ActiveEffect", {"operation": "remove", "effect_data": {"name": "Hexed"}})
        await resolver.resolve_tree(actor, action)
        assert actor.operations == [("delete_embedded", EFFECT_KIND, [])]

    @pytest.mark.asyncio
    async def test_remove_each_match_once(self, registry, resolver, actor):
        """Should remove one existing effect per candidate."""
        await actor.create_embedded(EFFECT_KIND, [{"_id": "eff2", "name": "Blessed", "statuses": []}])
        action = registry.create(
            "ActiveEffect",
            {"operation": "remove", "effect_data": [{"name": "Blessed"}, {"name": "Blessed"}]},
        )
        await resolver.resolve_tree(actor, action)
        assert actor.operations[-1] == ("delete_embedded", EFFECT_KIND, ["eff1", "eff2"])

    @pytest.mark.asyncio
    async def test_toggle_does_nothing(self, registry, resolver, actor):
        """Should leave the document untouched."""
        action = registry.create("ActiveEffect", {"operation": "toggle", "effect_data": {"name": "Blessed"}})
        await resolver.resolve_tree(actor, action)
        assert actor.operations == []

    @pytest.mark.asyncio
    async def test_print_posts_message(self, registry, resolver, actor, chat):
        """Should post a chat message when print is set."""
        action = registry.create(
            "ActiveEffect", {"operation": "apply", "effect_data": {"name": "Hexed"}, "print": True}
        )
        await resolver.resolve_tree(actor, action)
        assert [m.content for m in chat.messages] == ["is affected by Hexed."]
        assert chat.messages[0].speaker == "Hero"


class TestStatusEffect:
    """StatusEffect builds effects from the status catalogue."""

    def test_unknown_status(self, registry):
        """Should reject ids outside the catalogue."""
        with pytest.raises(ValidationError) as exc_info:
            registry.create("StatusEffect", {"operation": "apply", "statuses": ["prone", "levitating"]})
        assert exc_info.value.field == "statuses"
        assert exc_info.value.rule == "choice"

    def test_rejects_several_operations(self, registry):
        """Should reject a list where one operation is expected."""
        with pytest.raises(ValidationError) as exc_info:
            registry.create("StatusEffect", {"operation": ["apply"], "statuses": "prone"})
        assert exc_info.value.field == "operation"
        assert exc_info.value.rule == "scalar"

    def test_builds_effect_data(self, registry):
        """Should derive effect data from the catalogue entry."""
        action = registry.create("StatusEffect", {"operation": "apply", "statuses": "prone"})
        assert action.data["statuses"] == ("prone",)
        assert action.data["effect_data"] == (
            {"name": "Prone", "icon": "icons/svg/prone.svg", "statuses": ("prone",)},
        )

    @pytest.mark.asyncio
    async def test_apply_status(self, registry, resolver, actor):
        """Should create the status effect on the document."""
        action = registry.create("StatusEffect", {"operation": "apply", "statuses": ["prone"]})
        await resolver.resolve_tree(actor, action)
        created = actor.operations[1][2]
        assert [effect["statuses"] for effect in created] == [["prone"]]

    @pytest.mark.asyncio
    async def test_apply_existing_status_updates(self, registry, resolver, actor):
        """Should update the existing effect for an already present status."""
        action = registry.create("StatusEffect", {"operation": "apply", "statuses": "bless"})
        await resolver.resolve_tree(actor, action)
        assert actor.operations[0][2][0]["_id"] == "eff1"
        assert len(actor.embedded(EFFECT_KIND)) == 1

    @pytest.mark.asyncio
    async def test_remove_status(self, registry, resolver, actor):
        """Should remove the effect by its status name."""
        action = registry.create("StatusEffect", {"operation": "remove", "statuses": "bless"})
        await resolver.resolve_tree(actor, action)
        assert actor.embedded(EFFECT_KIND) == []
