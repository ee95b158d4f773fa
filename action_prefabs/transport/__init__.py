"""Transports for forwarding action requests to a privileged executor."""

from action_prefabs.transport.base import ForwardRequest, Handler, SerializedAction, Transport
from action_prefabs.transport.local import LocalTransport

__all__ = [
    "Transport",
    "Handler",
    "ForwardRequest",
    "SerializedAction",
    "LocalTransport",
]
