"""Registry of action variants.

The registry maps type names to variants and builds validated Actions. It is
populated once at startup and frozen; after that it is read-only.
"""

import copy
import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from action_prefabs.actions.comparison import Comparison
from action_prefabs.actions.effects import DEFAULT_STATUS_EFFECTS, ActiveEffect, StatusEffect
from action_prefabs.actions.roll import Roll
from action_prefabs.actions.types import Action, ActionVariant, thaw
from action_prefabs.actions.update import UpdateDoc
from action_prefabs.errors import UnknownTypeError, ValidationError

logger = logging.getLogger(__name__)


def _require_mapping(field_name: str, value: Any) -> None:
    if not isinstance(value, Mapping):
        raise ValidationError(field_name, "object", f"{field_name} must be an object.")


@dataclass(frozen=True)
class Extension:
    """Variants contributed by a game system.

    Attributes:
        system_id: Game-system identifier the extension is active for.
        variants: Additional action variants.
        status_effects: Optional catalogue replacing the default status effects.
    """

    system_id: str
    variants: tuple[ActionVariant, ...]
    status_effects: tuple[Mapping[str, Any], ...] | None = None


class ActionRegistry:
    """Name -> variant mapping with published types and options.

    Example:
        registry = ActionRegistry()
        registry.register(Comparison())
        registry.freeze()
        action = registry.create("Comparison", payload)
    """

    def __init__(self) -> None:
        self._variants: dict[str, ActionVariant] = {}
        self._options: dict[str, dict[str, list[Any]]] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def types(self) -> Mapping[str, ActionVariant]:
        """Registered variants by name (read-only view)."""
        return MappingProxyType(self._variants)

    @property
    def options(self) -> dict[str, dict[str, list[Any]]]:
        """Option groups by type name, as fresh lists of allowed keys."""
        return {name: self.options_of(name) for name in self._options}

    def options_of(self, type_name: str) -> dict[str, list[Any]]:
        """Copy of one type's option groups.

        Raises:
            UnknownTypeError: If nothing is registered under ``type_name``.
        """
        self.get(type_name)
        return {group: list(values) for group, values in self._options[type_name].items()}

    def register(self, variant: ActionVariant) -> None:
        """Register a variant under its name.

        Raises:
            RuntimeError: If the registry is frozen.
            ValueError: If the name is already registered.
        """
        if self._frozen:
            raise RuntimeError(f"Cannot register '{variant.name}': registry is frozen")
        if variant.name in self._variants:
            raise ValueError(f"Action type already registered: '{variant.name}'")

        self._variants[variant.name] = variant
        self._options[variant.name] = variant.option_keys()
        logger.debug(f"Registered action type {variant.name}")

    def freeze(self) -> None:
        """Disallow further registration."""
        self._frozen = True

    def get(self, type_name: str) -> ActionVariant:
        """Look up a variant by name.

        Raises:
            UnknownTypeError: If nothing is registered under ``type_name``.
        """
        variant = self._variants.get(type_name)
        if variant is None:
            raise UnknownTypeError(type_name)
        return variant

    def create(self, type_name: str, payload: Mapping[str, Any]) -> Action:
        """Normalise and validate ``payload`` into an Action.

        The caller's payload is never modified. Nothing is produced if any
        check fails.

        Raises:
            UnknownTypeError: If the type is not registered.
            ValidationError: If the payload fails a check.
        """
        variant = self.get(type_name)
        _require_mapping("payload", payload)
        data = variant.normalize(copy.deepcopy(thaw(payload)))
        variant.validate(data)
        return Action(variant.name, data)

    def load(self, raw: Any) -> Action | tuple[Action, ...]:
        """Rebuild actions from their ``to_dict`` form.

        Accepts an Action, a ``{"type", "data"}`` mapping or a list of
        either. Nested branch actions are rebuilt first, and every action is
        validated again.
        """
        if isinstance(raw, Action):
            return raw
        if isinstance(raw, Sequence) and not isinstance(raw, str):
            return tuple(self._load_one(entry) for entry in raw)
        return self._load_one(raw)

    def _load_one(self, raw: Any) -> Action:
        if isinstance(raw, Action):
            return raw
        _require_mapping("action", raw)
        variant = self.get(raw.get("type"))
        data = dict(raw.get("data") or {})
        for field_name in variant.branch_fields:
            if field_name in data:
                loaded = self.load(data[field_name])
                data[field_name] = loaded if isinstance(loaded, tuple) else (loaded,)
        return self.create(variant.name, data)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._variants

    def __iter__(self) -> Iterator[str]:
        return iter(self._variants)

    def __len__(self) -> int:
        return len(self._variants)


def core_variants(
    status_effects: Sequence[Mapping[str, Any]] = DEFAULT_STATUS_EFFECTS,
) -> list[ActionVariant]:
    """Variants registered regardless of game system."""
    return [Comparison(), UpdateDoc(), Roll(), ActiveEffect(), StatusEffect(status_effects)]


def build_registry(
    system_id: str = "",
    extensions: Mapping[str, Extension] | None = None,
) -> ActionRegistry:
    """Build and freeze a registry for ``system_id``.

    Core variants are always registered; the extension matching
    ``system_id`` (if any) adds its variants and may replace the status
    effect catalogue.

    Args:
        system_id: Active game-system identifier.
        extensions: Extensions by system id. Defaults to the bundled ones.
    """
    if extensions is None:
        from action_prefabs.systems import EXTENSIONS

        extensions = EXTENSIONS

    extension = extensions.get(system_id)
    catalogue = DEFAULT_STATUS_EFFECTS
    if extension is not None and extension.status_effects is not None:
        catalogue = extension.status_effects

    registry = ActionRegistry()
    for variant in core_variants(catalogue):
        registry.register(variant)

    if extension is not None:
        logger.info(f"Loading action extension for system '{system_id}'")
        for variant in extension.variants:
            registry.register(variant)

    registry.freeze()
    return registry
