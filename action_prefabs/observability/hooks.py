"""Observability hook protocol and implementations.

The ResolutionHook protocol defines the interface for receiving events from
action resolution. Implementations can render to console, write to files,
or aggregate metrics.
"""

from typing import Protocol, runtime_checkable

from action_prefabs.observability.events import (
    ActionEndEvent,
    ActionStartEvent,
    BranchEvent,
    DocumentUpdateEvent,
    ForwardEvent,
    RollEvent,
)


@runtime_checkable
class ResolutionHook(Protocol):
    """Protocol for observability hooks.

    Implement this protocol to receive events from action resolution.
    """

    def on_action_start(self, event: ActionStartEvent) -> None:
        """Called when an action starts resolving."""
        ...

    def on_action_end(self, event: ActionEndEvent) -> None:
        """Called when an action finishes or fails."""
        ...

    def on_branch(self, event: BranchEvent) -> None:
        """Called when a branch is chosen."""
        ...

    def on_roll(self, event: RollEvent) -> None:
        """Called after a dice formula is evaluated."""
        ...

    def on_document_update(self, event: DocumentUpdateEvent) -> None:
        """Called when document fields are written."""
        ...

    def on_forward(self, event: ForwardEvent) -> None:
        """Called when a request is forwarded to a privileged executor."""
        ...


class NullHook:
    """No-op hook for when observability is disabled.

    This is the default hook - it does nothing but satisfies the protocol.
    Using this avoids null checks throughout the code.
    """

    def on_action_start(self, event: ActionStartEvent) -> None:
        pass

    def on_action_end(self, event: ActionEndEvent) -> None:
        pass

    def on_branch(self, event: BranchEvent) -> None:
        pass

    def on_roll(self, event: RollEvent) -> None:
        pass

    def on_document_update(self, event: DocumentUpdateEvent) -> None:
        pass

    def on_forward(self, event: ForwardEvent) -> None:
        pass


class CompositeHook:
    """Combines multiple hooks into one.

    Events are dispatched to all hooks in order.
    """

    def __init__(self, hooks: list[ResolutionHook]) -> None:
        """Initialize with a list of hooks.

        Args:
            hooks: List of hooks to dispatch events to.
        """
        self.hooks = hooks

    def on_action_start(self, event: ActionStartEvent) -> None:
        for hook in self.hooks:
            hook.on_action_start(event)

    def on_action_end(self, event: ActionEndEvent) -> None:
        for hook in self.hooks:
            hook.on_action_end(event)

    def on_branch(self, event: BranchEvent) -> None:
        for hook in self.hooks:
            hook.on_branch(event)

    def on_roll(self, event: RollEvent) -> None:
        for hook in self.hooks:
            hook.on_roll(event)

    def on_document_update(self, event: DocumentUpdateEvent) -> None:
        for hook in self.hooks:
            hook.on_document_update(event)

    def on_forward(self, event: ForwardEvent) -> None:
        for hook in self.hooks:
            hook.on_forward(event)
