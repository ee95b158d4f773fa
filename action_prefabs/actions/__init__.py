"""Action variants, the Action value type and the registry."""

from action_prefabs.actions.comparison import Comparison
from action_prefabs.actions.effects import (
    DEFAULT_STATUS_EFFECTS,
    EFFECT_OPERATIONS,
    ActiveEffect,
    StatusEffect,
)
from action_prefabs.actions.operators import (
    COMPARISON_OPERATORS,
    NUMERIC_OPERATORS,
    UPDATE_METHODS,
)
from action_prefabs.actions.registry import (
    ActionRegistry,
    Extension,
    build_registry,
    core_variants,
)
from action_prefabs.actions.roll import Roll, evaluate_check
from action_prefabs.actions.types import Action, ActionVariant, CoreActionType
from action_prefabs.actions.update import UpdateDoc

__all__ = [
    # Model
    "Action",
    "ActionVariant",
    "CoreActionType",
    # Registry
    "ActionRegistry",
    "Extension",
    "build_registry",
    "core_variants",
    # Core variants
    "Comparison",
    "UpdateDoc",
    "Roll",
    "ActiveEffect",
    "StatusEffect",
    "evaluate_check",
    # Tables
    "COMPARISON_OPERATORS",
    "NUMERIC_OPERATORS",
    "UPDATE_METHODS",
    "EFFECT_OPERATIONS",
    "DEFAULT_STATUS_EFFECTS",
]
