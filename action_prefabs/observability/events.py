"""Event dataclasses for observability hooks.

These events are emitted by the resolver, dice roller and authority gate at
key points to provide visibility into what's happening during resolution.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class ActionStartEvent:
    """Emitted when an action starts resolving."""

    action_type: str
    document_uuid: str
    depth: int = 0
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class ActionEndEvent:
    """Emitted when an action finishes resolving (or fails)."""

    action_type: str
    document_uuid: str
    duration_ms: float
    depth: int = 0
    success: bool = True
    error: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class BranchEvent:
    """Emitted when a branching action picks its true or false branch."""

    action_type: str
    outcome: bool
    branch_size: int
    depth: int = 0
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class RollEvent:
    """Emitted when a dice formula is evaluated."""

    formula: str
    total: int
    individual_rolls: tuple[int, ...] = ()
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class DocumentUpdateEvent:
    """Emitted when an action writes fields to a document."""

    document_uuid: str
    fields: dict[str, Any]
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class ForwardEvent:
    """Emitted when the authority gate forwards a request."""

    document_uuid: str
    principal: str
    action_count: int
    timestamp: datetime = field(default_factory=datetime.now)
