"""Action type definitions.

An Action is an immutable, already-validated unit of work: a type name plus a
payload. The behaviour behind a type name lives in an ActionVariant, which
declares its options, normalises and validates payloads, and resolves them
against a document.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from action_prefabs.documents.base import Document
    from action_prefabs.resolver.resolver import ResolutionContext


class CoreActionType(str, Enum):
    """Variant names that are always registered."""

    COMPARISON = "Comparison"
    UPDATE_DOC = "UpdateDoc"
    ROLL = "Roll"
    ACTIVE_EFFECT = "ActiveEffect"
    STATUS_EFFECT = "StatusEffect"


def freeze(value: Any) -> Any:
    """Read-only copy of a payload value: mappings become MappingProxyType and
    lists become tuples, recursively (sets become frozensets). Actions are kept as they are."""
    if isinstance(value, Action):
        return value
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    if isinstance(value, set):
        return frozenset(value)
    return value


def thaw(value: Any) -> Any:
    """Plain, writable copy of a frozen payload value (dicts and lists)."""
    if isinstance(value, Action):
        return value
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(item) for item in value]
    return value


def _serialize(value: Any) -> Any:
    if isinstance(value, Action):
        return value.to_dict()
    if isinstance(value, Mapping):
        return {key: _serialize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    return value


@dataclass(frozen=True)
class Action:
    """A validated action.

    Attributes:
        type: Registered variant name.
        data: Normalised, validated payload. Read-only at every level: nested
            mappings are MappingProxyType and sequences are tuples.
    """

    type: str
    data: Mapping[str, Any]

    # Payloads are mappings, so actions compare by value but cannot be hashed.
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", freeze(self.data))

    def to_dict(self) -> dict[str, Any]:
        """Plain, JSON-ready form with nested actions serialised."""
        return {"type": self.type, "data": _serialize(self.data)}

    # Immutable: copies may share the instance.
    def __copy__(self) -> "Action":
        return self

    def __deepcopy__(self, memo: dict) -> "Action":
        return self

    def __str__(self) -> str:
        return self.type


class ActionVariant(ABC):
    """Implementation behind one action type name.

    Subclasses set ``name`` and ``options`` and implement ``validate`` and
    ``resolve``. Shared behaviour between variants goes into helper functions,
    not into subclass chains.

    Attributes:
        name: Registered type name.
        options: Option groups. Values are either operator tables
            (symbol -> callable) or sequences of allowed choices.
        branch_fields: Payload fields holding nested action lists.
    """

    name: ClassVar[str]
    options: Mapping[str, Any] = {}
    branch_fields: ClassVar[tuple[str, ...]] = ()

    def normalize(self, data: dict[str, Any]) -> dict[str, Any]:
        """Fill defaults and coerce single values into sequences.

        Receives a private copy of the caller's payload and may modify it.
        """
        return data

    @abstractmethod
    def validate(self, data: Mapping[str, Any]) -> None:
        """Raise ValidationError for any invalid field."""
        ...

    @abstractmethod
    async def resolve(
        self,
        context: "ResolutionContext",
        document: "Document",
        data: Mapping[str, Any],
    ) -> None:
        """Execute the action against ``document``."""
        ...

    def option_keys(self) -> dict[str, list[Any]]:
        """Options flattened to lists of allowed keys."""
        return {
            group: list(values.keys()) if isinstance(values, Mapping) else list(values)
            for group, values in self.options.items()
        }

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


def as_sequence(value: Any) -> tuple:
    """Wrap a single value in a tuple; convert lists to tuples."""
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


def normalize_branches(data: dict[str, Any]) -> dict[str, Any]:
    """Normalise true/false branch lists; false_actions defaults to empty."""
    data["true_actions"] = as_sequence(data.get("true_actions", ()))
    data["false_actions"] = as_sequence(data.get("false_actions", ()))
    return data


def value_kind(value: Any) -> str:
    """Kind name used for explicit type compatibility rules.

    Returns one of "null", "boolean", "number", "string", "sequence",
    "mapping" or "object".
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "mapping"
    if isinstance(value, (Sequence, set, frozenset)):
        return "sequence"
    return "object"
