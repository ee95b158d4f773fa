"""UpdateDoc action: write computed values to document attributes."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from action_prefabs.actions.comparison import require_attribute
from action_prefabs.actions.operators import UPDATE_METHODS
from action_prefabs.actions.types import ActionVariant, CoreActionType, as_sequence, thaw, value_kind
from action_prefabs.errors import TypeMismatchError
from action_prefabs.validators.contracts import is_in, is_not_null, is_object, is_scalar, is_string

if TYPE_CHECKING:
    from action_prefabs.documents.base import Document
    from action_prefabs.resolver.resolver import ResolutionContext


class UpdateDoc(ActionVariant):
    """Updates a document with the provided values.

    All entries are computed from the document's current state first, then
    written with a single update call.

    Payload:
        updates: One entry or a list of entries, each with
            ``attribute_path``, ``method`` (replace/add) and ``value``.
    """

    name = CoreActionType.UPDATE_DOC.value
    options = {"operations": UPDATE_METHODS}

    def normalize(self, data: dict[str, Any]) -> dict[str, Any]:
        data["updates"] = as_sequence(data.get("updates"))
        return data

    def validate(self, data: Mapping[str, Any]) -> None:
        is_object({"updates": data["updates"]})
        for entry in data["updates"]:
            is_scalar({"attribute_path": entry.get("attribute_path"), "method": entry.get("method")})
            is_string({"attribute_path": entry.get("attribute_path")})
            is_in({"method": entry.get("method")}, UPDATE_METHODS)
            is_not_null({"value": entry.get("value")})

    async def resolve(
        self,
        context: "ResolutionContext",
        document: "Document",
        data: Mapping[str, Any],
    ) -> None:
        fields: dict[str, Any] = {}
        for entry in data["updates"]:
            path, value = entry["attribute_path"], thaw(entry["value"])
            current = require_attribute(document, path)
            if value_kind(current) != value_kind(value):
                raise TypeMismatchError(path, value_kind(current), value_kind(value))
            fields[path] = UPDATE_METHODS[entry["method"]](value, current)

        if fields:
            await context.update(document, fields)
