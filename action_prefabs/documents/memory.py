"""In-memory documents and store.

Used by the CLI ``run`` command and throughout the tests. Every write is
recorded in ``MemoryDocument.operations`` so callers can inspect exactly
which update calls an action tree issued.
"""

import copy
import uuid as uuid_module
from collections.abc import Mapping
from typing import Any

from action_prefabs.attributes import set_attribute
from action_prefabs.documents.base import Document


def new_id() -> str:
    """Random 16-character embedded entry id."""
    return uuid_module.uuid4().hex[:16]


class MemoryDocument(Document):
    """Document held entirely in memory.

    Attributes:
        operations: Applied writes in order, as ``(operation, *args)`` tuples.
    """

    def __init__(
        self,
        uuid: str,
        data: Mapping[str, Any] | None = None,
        document_type: str = "base",
        name: str | None = None,
        embedded: Mapping[str, list[dict[str, Any]]] | None = None,
    ) -> None:
        self.uuid = uuid
        self.document_type = document_type
        self.name = name
        self._data: dict[str, Any] = copy.deepcopy(dict(data or {}))
        self._embedded: dict[str, list[dict[str, Any]]] = {
            kind: [{"_id": entry.get("_id") or new_id(), **entry} for entry in entries]
            for kind, entries in (embedded or {}).items()
        }
        self.operations: list[tuple] = []

    @property
    def data(self) -> Mapping[str, Any]:
        return self._data

    def embedded(self, kind: str) -> list[dict[str, Any]]:
        return copy.deepcopy(self._embedded.get(kind, []))

    async def update(self, fields: Mapping[str, Any]) -> None:
        updated = copy.deepcopy(self._data)
        for path, value in fields.items():
            set_attribute(updated, path, copy.deepcopy(value))
        self._data = updated
        self.operations.append(("update", dict(fields)))

    async def create_embedded(self, kind: str, data_list: list[dict[str, Any]]) -> None:
        created = [{**copy.deepcopy(entry), "_id": entry.get("_id") or new_id()} for entry in data_list]
        self._embedded.setdefault(kind, []).extend(created)
        self.operations.append(("create_embedded", kind, created))

    async def update_embedded(self, kind: str, data_list: list[dict[str, Any]]) -> None:
        entries = {entry["_id"]: entry for entry in self._embedded.get(kind, [])}
        for change in data_list:
            target = entries.get(change.get("_id"))
            if target is None:
                raise KeyError(f"No embedded {kind} with id {change.get('_id')!r} on {self.uuid}")
            target.update(copy.deepcopy(change))
        self.operations.append(("update_embedded", kind, list(data_list)))

    async def delete_embedded(self, kind: str, ids: list[str]) -> None:
        doomed = set(ids)
        self._embedded[kind] = [
            entry for entry in self._embedded.get(kind, []) if entry["_id"] not in doomed
        ]
        self.operations.append(("delete_embedded", kind, list(ids)))

    def to_dict(self) -> dict[str, Any]:
        """Serialisable snapshot of the document."""
        return {
            "uuid": self.uuid,
            "name": self.name,
            "type": self.document_type,
            "data": copy.deepcopy(self._data),
            "embedded": copy.deepcopy(self._embedded),
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "MemoryDocument":
        """Build from the ``to_dict`` form."""
        return cls(
            uuid=raw["uuid"],
            data=raw.get("data", {}),
            document_type=raw.get("type", "base"),
            name=raw.get("name"),
            embedded=raw.get("embedded"),
        )


class MemoryDocumentStore:
    """Document store backed by a dict of uuid -> MemoryDocument."""

    def __init__(self, documents: list[MemoryDocument] | None = None) -> None:
        self._documents: dict[str, MemoryDocument] = {}
        for document in documents or []:
            self.add(document)

    def add(self, document: MemoryDocument) -> MemoryDocument:
        self._documents[document.uuid] = document
        return document

    async def get(self, uuid: str) -> MemoryDocument | None:
        return self._documents.get(uuid)
