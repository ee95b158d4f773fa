"""Dice system type definitions.

Immutable dataclasses for dice expressions and roll results.
"""

from dataclasses import dataclass, field
from enum import Enum


class KeepRule(str, Enum):
    """Which dice of a term count toward the total."""

    HIGHEST = "kh"
    LOWEST = "kl"


@dataclass(frozen=True)
class DiceTerm:
    """One dice term like 2d6 or 2d20kh.

    Attributes:
        num_dice: Number of dice to roll.
        die_size: Size of each die (e.g., 6 for d6, 20 for d20).
        sign: +1 or -1; whether the term adds to or subtracts from the total.
        keep: Optional keep rule (advantage / disadvantage style).
        keep_count: Number of dice kept when ``keep`` is set.
    """

    num_dice: int
    die_size: int
    sign: int = 1
    keep: KeepRule | None = None
    keep_count: int = 1

    def __str__(self) -> str:
        keep = f"{self.keep.value}{self.keep_count if self.keep_count != 1 else ''}" if self.keep else ""
        return f"{self.num_dice}d{self.die_size}{keep}"


@dataclass(frozen=True)
class DiceExpression:
    """A parsed dice formula: dice terms plus a flat modifier.

    Attributes:
        terms: Dice terms in formula order.
        modifier: Sum of all flat numbers and resolved ``@`` references.
    """

    terms: tuple[DiceTerm, ...]
    modifier: int = 0

    def __str__(self) -> str:
        parts: list[str] = []
        for term in self.terms:
            if parts:
                parts += ["-" if term.sign < 0 else "+", str(term)]
            else:
                parts.append(f"-{term}" if term.sign < 0 else str(term))
        if parts and self.modifier:
            parts += ["-" if self.modifier < 0 else "+", str(abs(self.modifier))]
        elif not parts:
            parts.append(str(self.modifier))
        return " ".join(parts)


@dataclass(frozen=True)
class RollResult:
    """Result of rolling a dice expression.

    Attributes:
        expression: The dice expression that was rolled.
        individual_rolls: Kept die results, in term order.
        modifier: The flat modifier applied.
        total: Signed sum of kept dice plus modifier.
        discarded_rolls: Dice dropped by keep rules.
        formula: The formula text the expression was parsed from.
    """

    expression: DiceExpression
    individual_rolls: tuple[int, ...]
    modifier: int
    total: int
    discarded_rolls: tuple[int, ...] = field(default_factory=tuple)
    formula: str = ""
