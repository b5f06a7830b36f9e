"""Dice rolling for character creation.

Ability score rolls, rolled hit points and starting wealth all go through
the d20 library here. Only the dice a roll keeps are reported, so
``4d6kh3`` yields three values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import d20

from character_forge.core.exceptions import DiceRollError
from character_forge.core.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class DiceRoll:
    """Outcome of a dice roll.

    Attributes:
        expression: The expression that was rolled.
        total: Result of the whole expression.
        kept: Values of the dice that counted toward the total.
    """

    expression: str
    total: int
    kept: tuple[int, ...]


def _kept_values(node: Any) -> list[int]:
    """Collect kept die values from a d20 expression tree."""
    if isinstance(node, d20.Dice):
        return [die.number for die in node.values if die.kept]
    values: list[int] = []
    for child in getattr(node, "children", []):
        values.extend(_kept_values(child))
    return values


def roll(expression: str) -> DiceRoll:
    """Roll a dice expression.

    Args:
        expression: Dice notation, e.g. ``'4d6kh3'`` or ``'5d4*10'``.

    Returns:
        DiceRoll with the total and the kept dice.

    Raises:
        DiceRollError: If the expression is empty or invalid.

    Example:
        >>> result = roll("3d6")
        >>> 3 <= result.total <= 18
        True
    """
    if not expression or not expression.strip():
        raise DiceRollError("Empty dice expression", expression=expression)

    try:
        result = d20.roll(expression)
    except d20.RollError as exc:
        raise DiceRollError(f"Invalid dice expression: {exc}", expression=expression) from exc

    kept = tuple(_kept_values(result.expr))
    logger.debug("Dice rolled", expression=expression, total=result.total, kept=kept)
    return DiceRoll(expression=expression, total=result.total, kept=kept)


def roll_hit_die(die_type: int) -> int:
    """Roll a single hit die of the given size."""
    return roll(f"1d{die_type}").total


__all__ = [
    "DiceRoll",
    "roll",
    "roll_hit_die",
]
