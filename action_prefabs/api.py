"""Public entry point for creating and resolving actions."""

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from action_prefabs.actions.registry import ActionRegistry, build_registry
from action_prefabs.actions.types import Action
from action_prefabs.chat import ChatSink
from action_prefabs.config import Settings, get_settings
from action_prefabs.documents.memory import MemoryDocumentStore
from action_prefabs.executor.authority import AuthorityGate, Principal, Role
from action_prefabs.observability.hooks import ResolutionHook
from action_prefabs.resolver.resolver import ActionResolver
from action_prefabs.transport.base import Transport
from action_prefabs.transport.local import LocalTransport

if TYPE_CHECKING:
    from action_prefabs.dice.roller import DiceProvider
    from action_prefabs.documents.base import Document, DocumentStore

logger = logging.getLogger(__name__)


class ActionAPI:
    """Facade over the registry and the authority gate.

    Attributes:
        registry: The registry actions are built from.
        gate: Authority gate that runs or forwards resolutions.
    """

    def __init__(self, registry: ActionRegistry, gate: AuthorityGate) -> None:
        self.registry = registry
        self.gate = gate

    @property
    def types(self) -> Mapping[str, Any]:
        """Registered variants by type name (read-only view)."""
        return self.registry.types

    @property
    def options(self) -> dict[str, dict[str, list[Any]]]:
        """Option groups by type name. Changing the result has no effect."""
        return self.registry.options

    def create(self, type_name: str, payload: Mapping[str, Any]) -> Action:
        """Build a validated action.

        Raises:
            UnknownTypeError: If the type is not registered.
            ValidationError: If the payload fails a check.
        """
        return self.registry.create(type_name, payload)

    async def resolve(
        self,
        document: "Document | str",
        actions: Action | Iterable[Action],
        principal: Principal | None = None,
    ) -> None:
        """Resolve actions on a document or document handle."""
        await self.gate.resolve(document, actions, principal)

    def list_types(self) -> list[str]:
        """Registered type names in registration order."""
        return list(self.registry)

    def list_options(self, type_name: str) -> dict[str, list[Any]]:
        """Copy of the option groups of one type.

        Raises:
            UnknownTypeError: If the type is not registered.
        """
        return self.registry.options_of(type_name)


def init_actions(
    settings: Settings | None = None,
    store: "DocumentStore | None" = None,
    principal: Principal | None = None,
    transport: Transport | None = None,
    dice: "DiceProvider | None" = None,
    chat: ChatSink | None = None,
    hook: ResolutionHook | None = None,
) -> ActionAPI:
    """Assemble the registry, resolver and gate from settings.

    When the caller is not privileged and no transport is given, an
    in-process authority is set up on a LocalTransport to receive forwarded
    requests.

    Args:
        settings: Settings to use. Defaults to ``get_settings()``.
        store: Document store for handles. Defaults to an empty memory store.
        principal: The caller. Defaults to a game master.
        transport: Transport for forwarded requests.
        dice: Randomness provider.
        chat: Chat sink.
        hook: Observability hook.

    Returns:
        Ready-to-use ActionAPI.
    """
    settings = settings or get_settings()
    store = store if store is not None else MemoryDocumentStore()
    principal = principal or Principal("gamemaster", Role.GAMEMASTER)

    registry = build_registry(settings.system_id)
    resolver = ActionResolver(registry, dice=dice, chat=chat, hook=hook)

    if transport is None:
        transport = LocalTransport()
        if not principal.is_privileged:
            AuthorityGate(
                resolver,
                store,
                transport,
                policy=settings.who_can_use_actions,
                principal=Principal("authority", Role.GAMEMASTER),
                hook=hook,
            )

    gate = AuthorityGate(
        resolver,
        store,
        transport,
        policy=settings.who_can_use_actions,
        principal=principal,
        hook=hook,
    )
    logger.debug(
        f"Actions ready: system '{settings.system_id or 'core'}', "
        f"{len(registry)} types, policy {settings.who_can_use_actions}"
    )
    return ActionAPI(registry, gate)
