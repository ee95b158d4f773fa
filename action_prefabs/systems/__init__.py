"""Game-system extensions, keyed by system id."""

from action_prefabs.actions.registry import Extension
from action_prefabs.systems import dnd5e, wwn

EXTENSIONS: dict[str, Extension] = {
    dnd5e.SYSTEM_ID: dnd5e.extension,
    wwn.SYSTEM_ID: wwn.extension,
}

__all__ = ["EXTENSIONS"]
