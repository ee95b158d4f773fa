"""Core test fixtures for action prefab tests."""

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from action_prefabs.actions.registry import build_registry
from action_prefabs.database.models import Base
from action_prefabs.dice.types import DiceExpression, RollResult
from action_prefabs.documents.memory import MemoryDocument
from action_prefabs.observability.events import (
    ActionEndEvent,
    ActionStartEvent,
    BranchEvent,
    DocumentUpdateEvent,
    ForwardEvent,
    RollEvent,
)
from action_prefabs.resolver.resolver import ActionResolver


class FixedDice:
    """Dice provider that always rolls the same total and records every call."""

    def __init__(self, total: int = 10) -> None:
        self.total = total
        self.evaluated: list[tuple[str, dict]] = []
        self.announced: list[RollResult] = []

    async def evaluate(self, formula, data=None) -> RollResult:
        self.evaluated.append((formula, dict(data or {})))
        return RollResult(
            expression=DiceExpression(terms=()),
            individual_rolls=(self.total,),
            modifier=0,
            total=self.total,
            formula=formula,
        )

    async def announce(self, result, document) -> None:
        self.announced.append(result)


class RecordingChat:
    """Chat sink that keeps posted messages."""

    def __init__(self) -> None:
        self.messages = []

    async def post(self, message) -> None:
        self.messages.append(message)


class RecordingHook:
    """Resolution hook that keeps every event in order."""

    def __init__(self) -> None:
        self.events = []

    def on_action_start(self, event: ActionStartEvent) -> None:
        self.events.append(event)

    def on_action_end(self, event: ActionEndEvent) -> None:
        self.events.append(event)

    def on_branch(self, event: BranchEvent) -> None:
        self.events.append(event)

    def on_roll(self, event: RollEvent) -> None:
        self.events.append(event)

    def on_document_update(self, event: DocumentUpdateEvent) -> None:
        self.events.append(event)

    def on_forward(self, event: ForwardEvent) -> None:
        self.events.append(event)


@pytest.fixture(scope="session")
def engine():
    """Create SQLite in-memory engine for fast tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
    )

    # Enable foreign key constraints in SQLite
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture(scope="function")
def db_session(engine) -> Session:
    """Create a fresh database session for each test.

    Uses a transaction that rolls back after each test for isolation.
    """
    connection = engine.connect()
    transaction = connection.begin()
    session_factory = sessionmaker(bind=connection)
    session = session_factory()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def registry():
    """Registry with the core variants only."""
    return build_registry()


@pytest.fixture
def dnd5e_registry():
    """Registry with the dnd5e extension."""
    return build_registry("dnd5e")


@pytest.fixture
def dice() -> FixedDice:
    """Dice that always total 10."""
    return FixedDice(10)


@pytest.fixture
def chat() -> RecordingChat:
    return RecordingChat()


@pytest.fixture
def hook() -> RecordingHook:
    return RecordingHook()


@pytest.fixture
def resolver(registry, dice, chat, hook) -> ActionResolver:
    """Core resolver with deterministic dice and recording collaborators."""
    return ActionResolver(registry, dice=dice, chat=chat, hook=hook)


@pytest.fixture
def actor() -> MemoryDocument:
    """A character document with a few attributes and one effect."""
    return MemoryDocument(
        "Actor.hero",
        data={
            "hp": 10,
            "name": "Hero",
            "tags": ["brave"],
            "system": {
                "attributes": {"hp": {"value": 10, "max": 20, "temp": 0}},
                "abilities": {"str": {"mod": 3, "save": 5}},
                "bonus": 2,
            },
        },
        document_type="character",
        name="Hero",
        embedded={
            "ActiveEffect": [
                {"_id": "eff1", "name": "Blessed", "label": "Blessed", "statuses": ["bless"]},
            ],
        },
    )
