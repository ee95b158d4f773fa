"""Tests for the public action API."""

import pytest

from action_prefabs import (
    ActionAPI,
    AuthorizationError,
    HandleResolutionError,
    Principal,
    Role,
    UnknownTypeError,
    ValidationError,
    init_actions,
)
from action_prefabs.config import Settings
from action_prefabs.documents.memory import MemoryDocumentStore
from action_prefabs.transport import LocalTransport


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, system_id="", who_can_use_actions="everyone")


@pytest.fixture
def store(actor) -> MemoryDocumentStore:
    return MemoryDocumentStore([actor])


def lower_hp(api: ActionAPI, amount: int = 3):
    return api.create(
        "UpdateDoc", {"updates": {"attribute_path": "hp", "method": "add", "value": -amount}}
    )


class TestInitActions:
    """Tests for init_actions."""

    def test_core_types(self, settings):
        """Should publish the core types and their options."""
        api = init_actions(settings)
        assert api.list_types() == ["Comparison", "UpdateDoc", "Roll", "ActiveEffect", "StatusEffect"]
        assert list(api.types) == api.list_types()
        assert api.list_options("Roll")["operations"] == ["=", "!=", ">", "<", ">=", "<="]
        assert api.registry.frozen

    def test_system_types(self, settings):
        """Should add the configured system's types."""
        api = init_actions(settings.model_copy(update={"system_id": "dnd5e"}))
        assert "Damage" in api.list_types()
        assert "damage_types" in api.options["Damage"]

    def test_published_options_are_copies(self, settings):
        """Should hand out option lists that cannot change the registry."""
        api = init_actions(settings)
        api.list_options("Roll")["operations"].append("includes")
        api.options["Roll"]["operations"].clear()
        assert api.list_options("Roll")["operations"] == ["=", "!=", ">", "<", ">=", "<="]
        with pytest.raises(TypeError):
            api.types["Roll"] = None

    def test_unknown_type(self, settings):
        """Should raise for unregistered type names."""
        api = init_actions(settings)
        with pytest.raises(UnknownTypeError):
            api.list_options("Damage")
        with pytest.raises(UnknownTypeError):
            api.create("Damage", {})

    def test_create_validates(self, settings):
        """Should raise ValidationError for bad payloads."""
        api = init_actions(settings)
        with pytest.raises(ValidationError):
            api.create("Roll", {"formula": 3, "operation": ">", "value": 1})


class TestResolve:
    """Tests for ActionAPI.resolve."""

    @pytest.mark.asyncio
    async def test_gamemaster_by_handle(self, settings, store, actor, chat):
        """Should resolve a handle locally for the default principal."""
        api = init_actions(settings, store=store, chat=chat)
        await api.resolve("Actor.hero", lower_hp(api))
        assert actor["hp"] == 7

    @pytest.mark.asyncio
    async def test_player_forwards(self, settings, store, actor, hook):
        """Should forward player requests to the in-process authority."""
        api = init_actions(settings, store=store, principal=Principal("Pat"), hook=hook)
        await api.resolve(actor, [lower_hp(api), lower_hp(api, 1)])

        forwards = [event for event in hook.events if type(event).__name__ == "ForwardEvent"]
        assert len(forwards) == 1
        assert forwards[0].action_count == 2
        assert forwards[0].principal == "Pat"
        assert actor["hp"] == 6

    @pytest.mark.asyncio
    async def test_policy_refuses(self, settings, store, actor):
        """Should refuse callers the policy does not admit."""
        api = init_actions(
            settings.model_copy(update={"who_can_use_actions": "trusted"}),
            store=store,
            principal=Principal("Pat", Role.PLAYER),
        )
        with pytest.raises(AuthorizationError):
            await api.resolve(actor, lower_hp(api))
        assert actor.operations == []

    @pytest.mark.asyncio
    async def test_override_principal(self, settings, store, actor):
        """Should let a single call run as another principal."""
        api = init_actions(settings, store=store, principal=Principal("Pat", Role.PLAYER))
        await api.resolve(actor, lower_hp(api), principal=Principal("Gia", Role.GAMEMASTER))
        assert actor["hp"] == 7

    @pytest.mark.asyncio
    async def test_unknown_handle(self, settings):
        """Should raise when the handle resolves to nothing."""
        api = init_actions(settings)
        with pytest.raises(HandleResolutionError):
            await api.resolve("Actor.ghost", lower_hp(api))

    @pytest.mark.asyncio
    async def test_external_transport_without_authority(self, settings, store, actor):
        """Should fail to forward when nobody receives on the transport."""
        api = init_actions(
            settings, store=store, principal=Principal("Pat"), transport=LocalTransport()
        )
        with pytest.raises(LookupError):
            await api.resolve(actor, lower_hp(api))
        assert actor["hp"] == 10
