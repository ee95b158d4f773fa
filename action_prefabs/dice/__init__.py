"""Dice system for roll-style actions.

Provides formula parsing, rolling, and the default randomness provider.

Usage:
    >>> from action_prefabs.dice import roll
    >>> result = roll("1d20 + @bonus", {"bonus": 3})
"""

# Types
from action_prefabs.dice.types import (
    DiceExpression,
    DiceTerm,
    KeepRule,
    RollResult,
)

# Parser
from action_prefabs.dice.parser import DiceParseError, parse_dice

# Roller
from action_prefabs.dice.roller import DiceProvider, DiceRoller, roll, roll_dice

__all__ = [
    # Types
    "DiceExpression",
    "DiceTerm",
    "KeepRule",
    "RollResult",
    # Parser
    "parse_dice",
    "DiceParseError",
    # Roller
    "roll_dice",
    "roll",
    "DiceProvider",
    "DiceRoller",
]
