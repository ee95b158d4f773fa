"""Authority gate deciding where actions are resolved.

Privileged principals resolve actions locally. Other principals, when the
usage policy admits them, forward the request to a privileged executor over
a transport. Anyone else is refused before any document is touched.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING

from action_prefabs.actions.types import Action
from action_prefabs.config import UsagePolicy
from action_prefabs.errors import AuthorizationError, HandleResolutionError
from action_prefabs.observability.events import ForwardEvent
from action_prefabs.observability.hooks import NullHook, ResolutionHook
from action_prefabs.transport.base import ForwardRequest, SerializedAction, Transport

if TYPE_CHECKING:
    from action_prefabs.documents.base import Document, DocumentStore
    from action_prefabs.resolver.resolver import ActionResolver

logger = logging.getLogger(__name__)

RECEIVER_NAME = "resolve_actions"


class Role(IntEnum):
    """Principal roles, ordered by permission level."""

    PLAYER = 1
    TRUSTED = 2
    ASSISTANT = 3
    GAMEMASTER = 4


@dataclass(frozen=True)
class Principal:
    """The caller on whose behalf actions are resolved.

    Attributes:
        name: Display name of the caller.
        role: Permission level.
    """

    name: str
    role: Role = Role.PLAYER

    @property
    def is_privileged(self) -> bool:
        return self.role >= Role.ASSISTANT


class GateDecision(str, Enum):
    """Where a resolve request is executed."""

    LOCAL_EXECUTE = "local_execute"
    FORWARD_TO_AUTHORITY = "forward_to_authority"


def policy_admits(policy: UsagePolicy, principal: Principal) -> bool:
    """Whether a non-privileged ``principal`` may use actions under ``policy``."""
    if policy == "everyone":
        return True
    if policy == "trusted":
        return principal.role >= Role.TRUSTED
    return False


class AuthorityGate:
    """Routes resolve requests to local execution or to the authority.

    Example:
        gate = AuthorityGate(resolver, store, LocalTransport(), policy="trusted")
        await gate.resolve("Actor.abc", actions, Principal("Ana", Role.TRUSTED))
    """

    def __init__(
        self,
        resolver: "ActionResolver",
        store: "DocumentStore",
        transport: Transport | None = None,
        policy: UsagePolicy = "everyone",
        principal: Principal | None = None,
        hook: ResolutionHook | None = None,
    ) -> None:
        """Initialize gate.

        A gate whose default principal is privileged registers itself as the
        receiver for forwarded requests on ``transport``.

        Args:
            resolver: Resolver used for local execution.
            store: Store resolving document handles.
            transport: Transport used to forward requests.
            policy: Who may use actions besides privileged principals.
            principal: Default caller when ``resolve`` is given none.
            hook: Observability hook.
        """
        self.resolver = resolver
        self.store = store
        self.transport = transport
        self.policy = policy
        self.principal = principal or Principal("gamemaster", Role.GAMEMASTER)
        self.hook = hook or NullHook()
        if transport is not None and self.principal.is_privileged:
            transport.register(RECEIVER_NAME, self.handle_forwarded)

    def decide(self, principal: Principal | None = None) -> GateDecision:
        """Decide where a request from ``principal`` is executed.

        Raises:
            AuthorizationError: If the policy does not admit the principal.
        """
        principal = principal or self.principal
        if principal.is_privileged:
            return GateDecision.LOCAL_EXECUTE
        if policy_admits(self.policy, principal):
            return GateDecision.FORWARD_TO_AUTHORITY
        raise AuthorizationError(
            f"'{principal.name}' is not allowed to use actions (policy: {self.policy})."
        )

    async def resolve(
        self,
        document: "Document | str",
        actions: Action | Iterable[Action],
        principal: Principal | None = None,
    ) -> None:
        """Resolve ``actions`` against a document or document handle.

        The decision is made before the handle is resolved, so a refused
        caller causes no lookup and no writes.

        Raises:
            AuthorizationError: If the caller may not use actions.
            HandleResolutionError: If a handle resolves to no document.
        """
        principal = principal or self.principal
        decision = self.decide(principal)
        entries = (actions,) if isinstance(actions, Action) else tuple(actions)

        if decision is GateDecision.LOCAL_EXECUTE:
            await self.resolve_local(document, entries)
            return

        if self.transport is None:
            raise RuntimeError("No transport configured for forwarding actions")

        document_uuid = document if isinstance(document, str) else document.uuid
        request = ForwardRequest(
            document_uuid=document_uuid,
            actions=[SerializedAction(**action.to_dict()) for action in entries],
            principal=principal.name,
        )
        logger.info(f"Forwarding {len(entries)} action(s) on {document_uuid} for '{principal.name}'")
        self.hook.on_forward(ForwardEvent(document_uuid, principal.name, len(entries)))
        await self.transport.forward(RECEIVER_NAME, request)

    async def resolve_local(self, document: "Document | str", actions: Iterable[Action]) -> None:
        """Resolve a handle if needed, then run the action tree."""
        if isinstance(document, str):
            handle = document
            document = await self.store.get(handle)
            if document is None:
                raise HandleResolutionError(handle)
        await self.resolver.resolve_tree(document, actions)

    async def handle_forwarded(self, request: ForwardRequest) -> None:
        """Receiving side of a forwarded request."""
        logger.info(
            f"Resolving {len(request.actions)} forwarded action(s) on "
            f"{request.document_uuid} for '{request.principal}'"
        )
        actions = self.resolver.registry.load([action.model_dump() for action in request.actions])
        await self.resolve_local(request.document_uuid, actions)
