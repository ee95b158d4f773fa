"""Transport protocol and wire messages for forwarding action requests.

A non-privileged caller cannot resolve actions itself. Its gate serialises
the request and forwards it over a transport to a privileged executor, which
rebuilds and resolves the actions.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field


class SerializedAction(BaseModel):
    """An action in wire form, as produced by ``Action.to_dict``."""

    type: str
    data: dict[str, Any] = Field(default_factory=dict)


class ForwardRequest(BaseModel):
    """Request to resolve actions on behalf of another principal."""

    # Document handle on the executor's side
    document_uuid: str

    # Actions to resolve, in order
    actions: list[SerializedAction] = Field(default_factory=list)

    # Name of the principal that asked
    principal: str = ""


Handler = Callable[[ForwardRequest], Awaitable[None]]


@runtime_checkable
class Transport(Protocol):
    """Delivers forwarded requests to exactly one privileged executor."""

    def register(self, name: str, handler: Handler) -> None:
        """Register the receiving handler for ``name``."""
        ...

    async def forward(self, name: str, request: ForwardRequest) -> None:
        """Deliver ``request`` to the handler registered under ``name``.

        Completes once the executor has finished resolving.
        """
        ...
