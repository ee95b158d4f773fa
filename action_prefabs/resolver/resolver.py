"""Sequential, depth-first resolution of action trees.

Actions in a list run strictly one after another; each is awaited before the
next starts, so later actions see every write made by earlier ones. Branching
actions recurse into their chosen branch through the ResolutionContext.
Errors abort the whole walk and propagate to the caller.
"""

import logging
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from action_prefabs.actions.types import Action
from action_prefabs.chat import ChatMessage, ChatSink, LoggingChat, speaker_name
from action_prefabs.dice.roller import DiceProvider, DiceRoller
from action_prefabs.observability.events import (
    ActionEndEvent,
    ActionStartEvent,
    BranchEvent,
    DocumentUpdateEvent,
)
from action_prefabs.observability.hooks import NullHook, ResolutionHook

if TYPE_CHECKING:
    from action_prefabs.actions.registry import ActionRegistry
    from action_prefabs.documents.base import Document

logger = logging.getLogger(__name__)


@dataclass
class ResolutionContext:
    """What a variant can reach while resolving.

    Attributes:
        resolver: The resolver running the current tree.
        depth: Nesting level of the action being resolved (0 = top level).
    """

    resolver: "ActionResolver"
    depth: int = 0

    @property
    def dice(self) -> DiceProvider:
        return self.resolver.dice

    @property
    def chat(self) -> ChatSink:
        return self.resolver.chat

    @property
    def hook(self) -> ResolutionHook:
        return self.resolver.hook

    async def branch(
        self,
        document: "Document",
        action_type: str,
        outcome: bool,
        data: Mapping[str, Any],
    ) -> None:
        """Resolve ``true_actions`` if ``outcome`` holds, else ``false_actions``."""
        chosen = data["true_actions"] if outcome else data["false_actions"]
        logger.debug(f"{action_type} -> {'true' if outcome else 'false'} branch ({len(chosen)} actions)")
        self.hook.on_branch(BranchEvent(action_type, outcome, len(chosen), self.depth))
        await self.resolver.resolve_tree(document, chosen, depth=self.depth + 1)

    async def update(self, document: "Document", fields: Mapping[str, Any]) -> None:
        """Apply one atomic field update to ``document``."""
        self.hook.on_document_update(DocumentUpdateEvent(document.uuid, dict(fields)))
        await document.update(fields)

    async def say(self, document: "Document", content: str, flavor: str | None = None) -> None:
        """Post a chat message about ``document``."""
        await self.chat.post(ChatMessage(speaker_name(document), content, flavor))


class ActionResolver:
    """Walks action trees against a document.

    Example:
        resolver = ActionResolver(registry)
        await resolver.resolve_tree(actor, [check, update])
    """

    def __init__(
        self,
        registry: "ActionRegistry",
        dice: DiceProvider | None = None,
        chat: ChatSink | None = None,
        hook: ResolutionHook | None = None,
    ) -> None:
        """Initialize resolver.

        Args:
            registry: Registry used to look up each action's variant.
            dice: Randomness provider. Defaults to a DiceRoller.
            chat: Chat sink for printed outcomes. Defaults to logging.
            hook: Observability hook. Defaults to NullHook.
        """
        self.registry = registry
        self.hook = hook or NullHook()
        self.chat = chat or LoggingChat()
        self.dice = dice or DiceRoller(chat=self.chat, hook=self.hook)

    async def resolve_tree(
        self,
        document: "Document",
        actions: Action | Iterable[Action],
        depth: int = 0,
    ) -> None:
        """Resolve an action or ordered list of actions.

        Args:
            document: Target document.
            actions: A single Action or a sequence of Actions.
            depth: Nesting level, set by branching actions.

        Raises:
            UnknownTypeError: If an action's type is not registered.
            ActionError: Any error raised by a variant; remaining actions
                are not resolved.
        """
        entries = (actions,) if isinstance(actions, Action) else tuple(actions)
        context = ResolutionContext(self, depth)

        for action in entries:
            variant = self.registry.get(action.type)
            logger.debug(f"Resolving {action.type} on {document.uuid} (depth {depth})")
            self.hook.on_action_start(ActionStartEvent(action.type, document.uuid, depth))
            start = time.perf_counter()
            try:
                await variant.resolve(context, document, action.data)
            except Exception as e:
                self.hook.on_action_end(
                    ActionEndEvent(
                        action.type,
                        document.uuid,
                        (time.perf_counter() - start) * 1000,
                        depth,
                        success=False,
                        error=str(e),
                    )
                )
                raise
            self.hook.on_action_end(
                ActionEndEvent(action.type, document.uuid, (time.perf_counter() - start) * 1000, depth)
            )
