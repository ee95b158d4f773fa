"""SQLAlchemy-backed documents and store.

Each write method flushes its changes in one statement batch, so an update
call is applied as a unit within the caller's transaction. Committing is the
session owner's job (see ``get_db_session``).
"""

import copy
from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from action_prefabs.attributes import set_attribute
from action_prefabs.database.models import DocumentRecord, EmbeddedRecord
from action_prefabs.documents.base import Document
from action_prefabs.documents.memory import new_id


class SqlDocument(Document):
    """Document stored as a DocumentRecord row."""

    def __init__(self, db: Session, record: DocumentRecord) -> None:
        self.db = db
        self.record = record
        self.uuid = record.uuid
        self.name = record.name
        self.document_type = record.document_type

    @property
    def data(self) -> Mapping[str, Any]:
        return self.record.data

    def _entries(self, kind: str) -> list[EmbeddedRecord]:
        return [entry for entry in self.record.embedded if entry.kind == kind]

    def embedded(self, kind: str) -> list[dict[str, Any]]:
        return [{**copy.deepcopy(entry.data), "_id": entry.entry_id} for entry in self._entries(kind)]

    async def update(self, fields: Mapping[str, Any]) -> None:
        updated = copy.deepcopy(self.record.data)
        for path, value in fields.items():
            set_attribute(updated, path, copy.deepcopy(value))
        self.record.data = updated
        flag_modified(self.record, "data")
        self.db.flush()

    async def create_embedded(self, kind: str, data_list: list[dict[str, Any]]) -> None:
        for entry in data_list:
            payload = copy.deepcopy(entry)
            entry_id = payload.pop("_id", None) or new_id()
            self.record.embedded.append(
                EmbeddedRecord(kind=kind, entry_id=entry_id, data=payload)
            )
        self.db.flush()

    async def update_embedded(self, kind: str, data_list: list[dict[str, Any]]) -> None:
        entries = {entry.entry_id: entry for entry in self._entries(kind)}
        for change in data_list:
            payload = copy.deepcopy(change)
            entry_id = payload.pop("_id", None)
            target = entries.get(entry_id)
            if target is None:
                raise KeyError(f"No embedded {kind} with id {entry_id!r} on {self.uuid}")
            target.data = {**target.data, **payload}
            flag_modified(target, "data")
        self.db.flush()

    async def delete_embedded(self, kind: str, ids: list[str]) -> None:
        doomed = set(ids)
        for entry in self._entries(kind):
            if entry.entry_id in doomed:
                self.record.embedded.remove(entry)
        self.db.flush()

    def to_dict(self) -> dict[str, Any]:
        """Serialisable snapshot, in the same form as MemoryDocument.to_dict."""
        embedded: dict[str, list[dict[str, Any]]] = {}
        for entry in self.record.embedded:
            embedded.setdefault(entry.kind, []).append({**copy.deepcopy(entry.data), "_id": entry.entry_id})
        return {
            "uuid": self.uuid,
            "name": self.name,
            "type": self.document_type,
            "data": copy.deepcopy(self.record.data),
            "embedded": embedded,
        }


class SqlDocumentStore:
    """Document store over a SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def add(
        self,
        uuid: str,
        data: Mapping[str, Any],
        document_type: str = "base",
        name: str | None = None,
        embedded: Mapping[str, list[dict[str, Any]]] | None = None,
    ) -> SqlDocument:
        """Insert a new document row with its embedded entries."""
        record = DocumentRecord(
            uuid=uuid,
            name=name,
            document_type=document_type,
            data=copy.deepcopy(dict(data)),
        )
        for kind, entries in (embedded or {}).items():
            for entry in entries:
                payload = copy.deepcopy(entry)
                entry_id = payload.pop("_id", None) or new_id()
                record.embedded.append(EmbeddedRecord(kind=kind, entry_id=entry_id, data=payload))
        self.db.add(record)
        self.db.flush()
        return SqlDocument(self.db, record)

    async def get(self, uuid: str) -> SqlDocument | None:
        record = self.db.query(DocumentRecord).filter(DocumentRecord.uuid == uuid).first()
        if record is None:
            return None
        return SqlDocument(self.db, record)
