"""Ability score generation and validation.

Covers the creation-wizard methods for assigning the six ability scores:
the standard array, point buy and the three dice-rolling methods.

Example:
    >>> calculate_point_buy_cost(8, 15)
    9
    >>> get_available_standard_array_scores([15, 12])
    [14, 13, 10, 8]
"""

from __future__ import annotations

import random
from collections import Counter
from collections.abc import Iterable, Mapping

from character_forge.core.config import get_settings
from character_forge.core.constants import (
    POINT_BUY_COSTS,
    POINT_BUY_MAX,
    POINT_BUY_MIN,
    POINT_BUY_TOTAL,
    STANDARD_ARRAY,
)
from character_forge.core.exceptions import ValidationError
from character_forge.core.logging import get_logger
from character_forge.models.enums import Ability, AbilityScoreMethod
from character_forge.models.results import ValidationResult
from character_forge.rules.dice import roll


logger = get_logger(__name__)


# =============================================================================
# Tables
# =============================================================================

ABILITY_NAMES: tuple[Ability, ...] = tuple(Ability)

STANDARD_ARRAY_SCORES: tuple[int, ...] = STANDARD_ARRAY

POINT_BUY_BUDGET = POINT_BUY_TOTAL

ABILITY_METHOD_TITLES: dict[AbilityScoreMethod, str] = {
    AbilityScoreMethod.STANDARD_ARRAY: "Standard Array",
    AbilityScoreMethod.STANDARD_ROLL: "4d6, Drop Lowest",
    AbilityScoreMethod.CLASSIC_ROLL: "3d6 in Order",
    AbilityScoreMethod.FIVE_D6_DROP_TWO: "5d6, Drop Two Lowest",
    AbilityScoreMethod.POINT_BUY: "Point Buy (27 Points)",
    AbilityScoreMethod.CUSTOM: "Custom Entry",
}

_ROLL_EXPRESSIONS: dict[AbilityScoreMethod, str] = {
    AbilityScoreMethod.STANDARD_ROLL: "4d6kh3",
    AbilityScoreMethod.CLASSIC_ROLL: "3d6",
    AbilityScoreMethod.FIVE_D6_DROP_TWO: "5d6kh3",
}


def _budget() -> int:
    return get_settings().rules.point_buy_budget


# =============================================================================
# Point Buy
# =============================================================================


def calculate_point_buy_cost(old_score: int, new_score: int) -> int:
    """Points spent (negative when refunded) changing one score.

    Scores outside the cost table count as costing nothing.
    """
    return POINT_BUY_COSTS.get(new_score, 0) - POINT_BUY_COSTS.get(old_score, 0)


def is_valid_point_buy_change(old_score: int, new_score: int, current_points: int) -> bool:
    """Whether a score can move from ``old_score`` to ``new_score``.

    Args:
        old_score: Current score.
        new_score: Requested score.
        current_points: Points still unspent.

    Returns:
        False when the new score is outside 8-15 or the change costs more
        than the points remaining.
    """
    if new_score < POINT_BUY_MIN or new_score > POINT_BUY_MAX:
        return False
    return current_points - calculate_point_buy_cost(old_score, new_score) >= 0


def point_buy_total_cost(scores: Mapping[Ability, int]) -> int:
    """Total points spent on a set of point-buy scores."""
    return sum(POINT_BUY_COSTS.get(score, 0) for score in scores.values())


def remaining_point_buy_points(scores: Mapping[Ability, int], budget: int | None = None) -> int:
    """Unspent points for a set of point-buy scores."""
    if budget is None:
        budget = _budget()
    return budget - point_buy_total_cost(scores)


def validate_point_buy(scores: Mapping[Ability, int], budget: int | None = None) -> ValidationResult:
    """Check a complete point-buy assignment.

    Every score must be in 8-15 and the total cost may not exceed the
    budget.
    """
    if budget is None:
        budget = _budget()

    errors: list[str] = []
    for ability in ABILITY_NAMES:
        score = scores.get(ability, 0)
        if not POINT_BUY_MIN <= score <= POINT_BUY_MAX:
            errors.append(
                f"{ability.full_name} must be between {POINT_BUY_MIN} and {POINT_BUY_MAX} (got {score})"
            )

    spent = point_buy_total_cost(scores)
    if spent > budget:
        errors.append(f"Point buy total of {spent} exceeds the {budget} point budget")
    return ValidationResult.from_errors(errors)


# =============================================================================
# Standard Array
# =============================================================================


def get_available_standard_array_scores(used_scores: Iterable[int]) -> list[int]:
    """Standard array values not yet used, in array order."""
    used = list(used_scores)
    return [score for score in STANDARD_ARRAY_SCORES if score not in used]


def validate_standard_array(scores: Mapping[Ability, int]) -> ValidationResult:
    """Check that the six scores are exactly the standard array values."""
    assigned = [scores.get(ability, 0) for ability in ABILITY_NAMES]
    if Counter(assigned) == Counter(STANDARD_ARRAY_SCORES):
        return ValidationResult(is_valid=True)
    expected = ", ".join(str(score) for score in STANDARD_ARRAY_SCORES)
    return ValidationResult(
        is_valid=False,
        errors=(f"Scores must use each standard array value once: {expected}",),
    )


def are_ability_scores_complete(abilities: Mapping[Ability, int]) -> bool:
    """Whether every ability has been assigned (score above 0)."""
    return all(abilities.get(ability, 0) > 0 for ability in ABILITY_NAMES)


# =============================================================================
# Generation
# =============================================================================


def generate_standard_array(rng: random.Random | None = None) -> dict[Ability, int]:
    """Assign the standard array to the abilities in random order."""
    rng = rng or random.Random()
    order = list(ABILITY_NAMES)
    rng.shuffle(order)
    return dict(zip(order, STANDARD_ARRAY_SCORES))


def generate_point_buy(
    rng: random.Random | None = None,
    budget: int | None = None,
) -> dict[Ability, int]:
    """Spend the point-buy budget on random abilities.

    Starts every score at 8 and raises a random affordable score one step
    at a time until no raise fits the remaining points.
    """
    rng = rng or random.Random()
    points = _budget() if budget is None else budget
    scores = {ability: POINT_BUY_MIN for ability in ABILITY_NAMES}

    while True:
        affordable = [
            ability
            for ability in ABILITY_NAMES
            if scores[ability] < POINT_BUY_MAX
            and calculate_point_buy_cost(scores[ability], scores[ability] + 1) <= points
        ]
        if not affordable:
            break
        ability = rng.choice(affordable)
        points -= calculate_point_buy_cost(scores[ability], scores[ability] + 1)
        scores[ability] += 1

    return scores


def generate_dice_roll(method: AbilityScoreMethod | str) -> dict[Ability, int]:
    """Roll all six abilities with a dice method.

    Args:
        method: ``standard-roll`` (4d6 drop lowest), ``classic-roll``
            (3d6 in order) or ``5d6-drop-2`` (5d6 keep the highest three).

    Returns:
        Rolled scores in ability order.

    Raises:
        ValidationError: If ``method`` is not a dice method.
    """
    try:
        method = AbilityScoreMethod(method)
    except ValueError:
        raise ValidationError(
            f"Unknown ability score method: {method}",
            field_name="method",
            invalid_value=str(method),
        ) from None
    expression = _ROLL_EXPRESSIONS.get(method)
    if expression is None:
        raise ValidationError(
            f"{method.value} is not a dice rolling method",
            field_name="method",
            invalid_value=method.value,
        )

    scores = {ability: roll(expression).total for ability in ABILITY_NAMES}
    logger.debug("Rolled ability scores", method=method.value, scores=scores)
    return scores


__all__ = [
    "ABILITY_NAMES",
    "STANDARD_ARRAY_SCORES",
    "POINT_BUY_COSTS",
    "POINT_BUY_BUDGET",
    "ABILITY_METHOD_TITLES",
    "calculate_point_buy_cost",
    "is_valid_point_buy_change",
    "point_buy_total_cost",
    "remaining_point_buy_points",
    "validate_point_buy",
    "get_available_standard_array_scores",
    "validate_standard_array",
    "are_ability_scores_complete",
    "generate_standard_array",
    "generate_point_buy",
    "generate_dice_roll",
]
