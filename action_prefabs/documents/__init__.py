"""Target documents and document stores.

Main Components:
    - Document: abstract mapping view plus async update primitives
    - DocumentStore: resolves document handles (uuids) to documents
    - MemoryDocument / MemoryDocumentStore: in-memory implementation
    - SqlDocument / SqlDocumentStore: SQLAlchemy implementation
"""

from action_prefabs.documents.base import Document, DocumentStore
from action_prefabs.documents.memory import MemoryDocument, MemoryDocumentStore
from action_prefabs.documents.sql import SqlDocument, SqlDocumentStore

__all__ = [
    "Document",
    "DocumentStore",
    "MemoryDocument",
    "MemoryDocumentStore",
    "SqlDocument",
    "SqlDocumentStore",
]
