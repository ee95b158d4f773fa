"""Target document interface.

A document is an externally owned entity with nested fields addressable by
dotted attribute paths, plus embedded collections (e.g. active effects).
Actions read it as a Mapping and write to it only through the async update
primitives below.
"""

import copy
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from typing import Any, Protocol, runtime_checkable


class Document(Mapping, ABC):
    """Read-only mapping view of a document plus its update primitives.

    Subclasses provide ``uuid``, ``data`` and the async write methods. Reads
    through the Mapping interface always reflect the latest applied update.
    """

    uuid: str
    name: str | None = None
    document_type: str = "base"

    @property
    @abstractmethod
    def data(self) -> Mapping[str, Any]:
        """Current field values."""
        ...

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def roll_data(self) -> dict[str, Any]:
        """Data exposed to dice formulas as ``@path`` references.

        A copy of the ``system`` field when the document has one, otherwise
        of all fields.
        """
        system = self.data.get("system")
        source = system if isinstance(system, Mapping) else self.data
        return copy.deepcopy(dict(source))

    @abstractmethod
    def embedded(self, kind: str) -> list[dict[str, Any]]:
        """Embedded entries of ``kind``; each carries an ``_id``."""
        ...

    @abstractmethod
    async def update(self, fields: Mapping[str, Any]) -> None:
        """Atomically write ``{dotted_path: value}`` pairs."""
        ...

    @abstractmethod
    async def create_embedded(self, kind: str, data_list: list[dict[str, Any]]) -> None:
        """Create embedded entries."""
        ...

    @abstractmethod
    async def update_embedded(self, kind: str, data_list: list[dict[str, Any]]) -> None:
        """Update embedded entries; each entry names its target by ``_id``."""
        ...

    @abstractmethod
    async def delete_embedded(self, kind: str, ids: list[str]) -> None:
        """Delete embedded entries by id."""
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.uuid!r}>"

    # Mapping defines __eq__ by content; documents compare by identity.
    __eq__ = object.__eq__
    __hash__ = object.__hash__


@runtime_checkable
class DocumentStore(Protocol):
    """Resolves opaque document handles to live documents."""

    async def get(self, uuid: str) -> Document | None:
        ...
