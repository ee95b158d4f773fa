"""SQL storage for target documents."""

from action_prefabs.database.connection import get_db_session, get_engine, init_db
from action_prefabs.database.models import Base, DocumentRecord, EmbeddedRecord

__all__ = [
    "Base",
    "DocumentRecord",
    "EmbeddedRecord",
    "get_db_session",
    "get_engine",
    "init_db",
]
