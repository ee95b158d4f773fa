"""In-process transport.

Requests cross a JSON boundary so the executor only ever sees the wire form.
"""

import logging

from action_prefabs.transport.base import ForwardRequest, Handler

logger = logging.getLogger(__name__)


class LocalTransport:
    """Transport whose executor lives in the same process.

    Example:
        transport = LocalTransport()
        gate = AuthorityGate(resolver, store, transport)  # registers itself
        await transport.forward("resolve_actions", request)
    """

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}

    def register(self, name: str, handler: Handler) -> None:
        self._handlers[name] = handler

    async def forward(self, name: str, request: ForwardRequest) -> None:
        """Deliver ``request`` to the handler for ``name``.

        Raises:
            LookupError: If no handler is registered under ``name``.
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise LookupError(f"No handler registered for '{name}'")

        payload = request.model_dump_json()
        logger.debug(f"Forwarding '{name}' ({len(payload)} bytes)")
        await handler(ForwardRequest.model_validate_json(payload))
