"""Observability module for action resolution monitoring.

Provides hooks and observers for real-time visibility into action
resolution, branch choices, rolls and document writes.
"""

from action_prefabs.observability.console_observer import RichConsoleObserver
from action_prefabs.observability.events import (
    ActionEndEvent,
    ActionStartEvent,
    BranchEvent,
    DocumentUpdateEvent,
    ForwardEvent,
    RollEvent,
)
from action_prefabs.observability.hooks import (
    CompositeHook,
    NullHook,
    ResolutionHook,
)

__all__ = [
    # Events
    "ActionStartEvent",
    "ActionEndEvent",
    "BranchEvent",
    "RollEvent",
    "DocumentUpdateEvent",
    "ForwardEvent",
    # Hooks
    "ResolutionHook",
    "NullHook",
    "CompositeHook",
    # Observers
    "RichConsoleObserver",
]
