"""Chat message sinks.

Actions with ``print`` enabled announce their outcome as a chat message.
Rendering and delivery belong to the host; a sink receives the message.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol, runtime_checkable

from rich.console import Console

logger = logging.getLogger(__name__)


@dataclass
class ChatMessage:
    """A user-visible notification.

    Attributes:
        speaker: Display name of the document the message is about.
        content: Message text.
        flavor: Optional short heading (e.g. the roll formula).
    """

    speaker: str
    content: str
    flavor: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)


@runtime_checkable
class ChatSink(Protocol):
    """Receives chat messages."""

    async def post(self, message: ChatMessage) -> None:
        ...


class LoggingChat:
    """Sink that writes messages to the log. Default when no host sink is given."""

    async def post(self, message: ChatMessage) -> None:
        heading = f" [{message.flavor}]" if message.flavor else ""
        logger.info(f"{message.speaker}{heading}: {message.content}")


class ConsoleChat:
    """Sink that prints messages to a Rich console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    async def post(self, message: ChatMessage) -> None:
        heading = f" [dim]{message.flavor}[/dim]" if message.flavor else ""
        self.console.print(f"[bold]{message.speaker}[/bold]{heading}: {message.content}")


def speaker_name(document) -> str:
    """Best display name for a document."""
    return getattr(document, "name", None) or getattr(document, "uuid", None) or "Unknown"
