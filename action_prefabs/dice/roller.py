"""Core dice rolling engine.

Provides functions to roll dice expressions, plus DiceRoller, the default
randomness provider used by roll-style actions.
"""

import logging
import random
from collections.abc import Mapping
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from action_prefabs.chat import ChatMessage, ChatSink, LoggingChat, speaker_name
from action_prefabs.dice.parser import parse_dice
from action_prefabs.dice.types import DiceExpression, DiceTerm, KeepRule, RollResult
from action_prefabs.observability.events import RollEvent
from action_prefabs.observability.hooks import NullHook, ResolutionHook

if TYPE_CHECKING:
    from action_prefabs.documents.base import Document

logger = logging.getLogger(__name__)


def _roll_term(term: DiceTerm) -> tuple[list[int], list[int]]:
    rolls = [random.randint(1, term.die_size) for _ in range(term.num_dice)]
    if term.keep is None:
        return rolls, []

    ranked = sorted(rolls, reverse=term.keep == KeepRule.HIGHEST)
    return ranked[: term.keep_count], ranked[term.keep_count :]


def roll_dice(expression: DiceExpression) -> RollResult:
    """Roll dice according to the expression.

    Args:
        expression: The dice expression to roll.

    Returns:
        RollResult with kept and discarded rolls and the total.

    Examples:
        >>> expr = DiceExpression(terms=(DiceTerm(num_dice=2, die_size=6),), modifier=3)
        >>> result = roll_dice(expr)
        >>> len(result.individual_rolls)
        2
    """
    kept: list[int] = []
    discarded: list[int] = []
    total = expression.modifier
    for term in expression.terms:
        term_kept, term_discarded = _roll_term(term)
        kept.extend(term_kept)
        discarded.extend(term_discarded)
        total += term.sign * sum(term_kept)

    return RollResult(
        expression=expression,
        individual_rolls=tuple(kept),
        modifier=expression.modifier,
        total=total,
        discarded_rolls=tuple(discarded),
        formula=str(expression),
    )


def roll(notation: str, data: Mapping[str, Any] | None = None) -> RollResult:
    """Parse dice notation and roll.

    Convenience function combining parse_dice and roll_dice.

    Args:
        notation: Dice notation string (e.g., "2d6+3").
        data: Roll data for ``@path`` references.

    Returns:
        RollResult with individual rolls and total.

    Raises:
        DiceParseError: If notation is invalid.
    """
    return replace(roll_dice(parse_dice(notation, data)), formula=notation)


@runtime_checkable
class DiceProvider(Protocol):
    """Randomness collaborator used by roll-style actions."""

    async def evaluate(self, formula: str, data: Mapping[str, Any] | None = None) -> RollResult:
        """Roll ``formula`` against ``data``; the result exposes ``total``."""
        ...

    async def announce(self, result: RollResult, document: "Document") -> None:
        """Make the roll visible to users."""
        ...


class DiceRoller:
    """Default DiceProvider using the module's random roller.

    Example:
        roller = DiceRoller(chat=ConsoleChat())
        result = await roller.evaluate("1d20 + @bonus", {"bonus": 2})
        await roller.announce(result, actor)
    """

    def __init__(self, chat: ChatSink | None = None, hook: ResolutionHook | None = None) -> None:
        self.chat = chat or LoggingChat()
        self.hook = hook or NullHook()

    async def evaluate(self, formula: str, data: Mapping[str, Any] | None = None) -> RollResult:
        result = roll(formula, data)
        logger.debug(f"Rolled {formula}: {result.individual_rolls} -> {result.total}")
        self.hook.on_roll(RollEvent(formula, result.total, result.individual_rolls))
        return result

    async def announce(self, result: RollResult, document: "Document") -> None:
        rolls = ", ".join(str(r) for r in result.individual_rolls)
        await self.chat.post(
            ChatMessage(
                speaker=speaker_name(document),
                content=f"rolled {result.total} ({rolls})" if rolls else f"rolled {result.total}",
                flavor=result.formula,
            )
        )
