"""Dice formula parser.

Parses formulas like ``1d20``, ``2d6+3``, ``d100``, ``2d20kh``, and
``1d20 + @abilities.str.mod + @bonus``. ``@path`` references are looked up in
the roll data with dotted attribute paths.
"""

import logging
import re
from collections.abc import Mapping
from typing import Any

from action_prefabs.attributes import get_attribute
from action_prefabs.dice.types import DiceExpression, DiceTerm, KeepRule

logger = logging.getLogger(__name__)


class DiceParseError(ValueError):
    """Error parsing dice notation."""

    pass


# One signed term: dice (with optional keep rule), a number, or an @reference.
# Examples: 1d20, + 2d6, - 3, +@abilities.dex.mod, 2d20kh, 4d6kh3
TERM_PATTERN = re.compile(
    r"\s*([+-])?\s*(?:(\d*)d(\d+)(kh|kl)?(\d*)|(\d+)|@([A-Za-z_][\w.]*))\s*",
    re.IGNORECASE,
)


def _resolve_reference(path: str, data: Mapping[str, Any] | None, notation: str) -> int:
    value = get_attribute(data, path) if data is not None else None
    if value is None:
        logger.warning(f"Roll data has no value for '@{path}' in '{notation}', using 0")
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DiceParseError(f"'@{path}' in '{notation}' is not a number: {value!r}")
    if not float(value).is_integer():
        raise DiceParseError(f"'@{path}' in '{notation}' is not an integer: {value!r}")
    return int(value)


def parse_dice(notation: str, data: Mapping[str, Any] | None = None) -> DiceExpression:
    """Parse dice notation into a DiceExpression.

    Args:
        notation: Dice formula (e.g., "2d6+3", "1d20 + @bonus", "d100").
        data: Roll data used to resolve ``@path`` references. A missing
            reference counts as 0 and logs a warning.

    Returns:
        DiceExpression with parsed terms and summed flat modifier.

    Raises:
        DiceParseError: If notation is invalid.

    Examples:
        >>> parse_dice("2d6+3")
        DiceExpression(terms=(DiceTerm(num_dice=2, die_size=6, sign=1, keep=None, keep_count=1),), modifier=3)
        >>> parse_dice("1d20 + @bonus", {"bonus": 2}).modifier
        2
    """
    if not notation or not notation.strip():
        raise DiceParseError("Dice notation cannot be empty")

    terms: list[DiceTerm] = []
    modifier = 0
    position = 0
    while position < len(notation):
        match = TERM_PATTERN.match(notation, position)
        if not match or match.end() == position:
            raise DiceParseError(f"Invalid dice notation: '{notation}'")
        sign_str, count_str, size_str, keep_str, keep_count_str, number_str, reference = match.groups()

        # Every term after the first needs an explicit operator
        if sign_str is None and position > 0:
            raise DiceParseError(f"Invalid dice notation: '{notation}'")
        sign = -1 if sign_str == "-" else 1

        if size_str is not None:
            # Default to 1 die if not specified (e.g., "d20" means "1d20")
            num_dice = int(count_str) if count_str else 1
            die_size = int(size_str)
            if num_dice < 1:
                raise DiceParseError(f"Number of dice must be at least 1, got {num_dice}")
            if die_size < 1:
                raise DiceParseError(f"Die size must be at least 1, got {die_size}")

            keep = KeepRule(keep_str.lower()) if keep_str else None
            keep_count = int(keep_count_str) if keep_count_str else 1
            if keep and not 1 <= keep_count <= num_dice:
                raise DiceParseError(
                    f"Keep count must be between 1 and {num_dice}, got {keep_count}"
                )
            terms.append(DiceTerm(num_dice, die_size, sign, keep, keep_count))
        elif number_str is not None:
            modifier += sign * int(number_str)
        else:
            modifier += sign * _resolve_reference(reference, data, notation)

        position = match.end()

    return DiceExpression(terms=tuple(terms), modifier=modifier)
