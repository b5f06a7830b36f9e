"""Tests for ability score generation and validation."""

from __future__ import annotations

import random

import pytest

from character_forge.core.exceptions import ValidationError
from character_forge.models import Ability, AbilityScoreMethod
from character_forge.rules.ability_scores import (
    are_ability_scores_complete,
    calculate_point_buy_cost,
    generate_dice_roll,
    generate_point_buy,
    generate_standard_array,
    get_available_standard_array_scores,
    is_valid_point_buy_change,
    point_buy_total_cost,
    remaining_point_buy_points,
    validate_point_buy,
    validate_standard_array,
)


class TestPointBuy:
    """Tests for point-buy costs and validation."""

    @pytest.mark.parametrize(
        ("old", "new", "expected"),
        [(8, 15, 9), (8, 9, 1), (13, 14, 2), (15, 8, -9), (14, 14, 0)],
    )
    def test_cost(self, old: int, new: int, expected: int) -> None:
        """Test point cost of a score change."""
        assert calculate_point_buy_cost(old, new) == expected

    def test_change_within_budget(self) -> None:
        """Test allowed and rejected score changes."""
        assert is_valid_point_buy_change(8, 15, 9) is True
        assert is_valid_point_buy_change(8, 15, 8) is False
        assert is_valid_point_buy_change(8, 16, 27) is False
        assert is_valid_point_buy_change(8, 7, 27) is False
        assert is_valid_point_buy_change(15, 8, 0) is True

    def test_totals(self, standard_scores: dict[Ability, int]) -> None:
        """Test total and remaining points."""
        assert point_buy_total_cost(standard_scores) == 27
        assert remaining_point_buy_points(standard_scores) == 0
        assert remaining_point_buy_points(standard_scores, budget=30) == 3

    def test_valid_assignment(self, standard_scores: dict[Ability, int]) -> None:
        """Test a 27 point assignment passes."""
        assert validate_point_buy(standard_scores).is_valid

    def test_over_budget(self) -> None:
        """Test spending more than the budget fails."""
        scores = {ability: 15 for ability in Ability}

        result = validate_point_buy(scores)

        assert not result.is_valid
        assert any("exceeds the 27 point budget" in error for error in result.errors)

    def test_out_of_range_scores(self) -> None:
        """Test scores outside 8-15 are reported by ability."""
        scores = {ability: 8 for ability in Ability}
        scores[Ability.STR] = 17

        result = validate_point_buy(scores)

        assert not result.is_valid
        assert result.errors[0].startswith("Strength must be between 8 and 15")

    def test_budget_from_settings(self, mock_env_vars: dict[str, str]) -> None:
        """Test the configured budget is used by default."""
        scores = {ability: 8 for ability in Ability}

        assert remaining_point_buy_points(scores) == 30


class TestStandardArray:
    """Tests for the standard array."""

    def test_available_scores(self) -> None:
        """Test used values are removed in array order."""
        assert get_available_standard_array_scores([15, 12]) == [14, 13, 10, 8]
        assert get_available_standard_array_scores([]) == [15, 14, 13, 12, 10, 8]

    def test_valid_in_any_order(self) -> None:
        """Test any permutation of the array is valid."""
        scores = dict(zip(Ability, (8, 10, 12, 13, 14, 15)))
        assert validate_standard_array(scores).is_valid

    def test_duplicate_rejected(self) -> None:
        """Test reusing a value fails even with the same total."""
        scores = dict(zip(Ability, (15, 15, 12, 12, 10, 8)))

        result = validate_standard_array(scores)

        assert not result.is_valid
        assert "15, 14, 13, 12, 10, 8" in result.errors[0]

    def test_completeness(self, standard_scores: dict[Ability, int]) -> None:
        """Test unassigned abilities are detected."""
        assert are_ability_scores_complete(standard_scores)
        assert not are_ability_scores_complete({**standard_scores, Ability.CHA: 0})
        assert not are_ability_scores_complete({})


class TestGeneration:
    """Tests for random ability score generation."""

    def test_standard_array_permutation(self) -> None:
        """Test the generated scores are a permutation of the array."""
        scores = generate_standard_array(random.Random(7))

        assert set(scores) == set(Ability)
        assert validate_standard_array(scores).is_valid

    def test_point_buy_within_budget(self) -> None:
        """Test generated point buy stays legal."""
        for seed in range(20):
            scores = generate_point_buy(random.Random(seed))
            assert validate_point_buy(scores).is_valid
            assert 0 <= remaining_point_buy_points(scores) <= 1

    def test_point_buy_custom_budget(self) -> None:
        """Test a zero budget leaves every score at 8."""
        scores = generate_point_buy(random.Random(1), budget=0)
        assert set(scores.values()) == {8}

    @pytest.mark.parametrize(
        ("method", "low", "high"),
        [
            (AbilityScoreMethod.STANDARD_ROLL, 3, 18),
            (AbilityScoreMethod.CLASSIC_ROLL, 3, 18),
            ("5d6-drop-2", 3, 18),
        ],
    )
    def test_dice_methods(self, method: AbilityScoreMethod | str, low: int, high: int) -> None:
        """Test dice methods roll six scores in range."""
        scores = generate_dice_roll(method)

        assert list(scores) == list(Ability)
        assert all(low <= score <= high for score in scores.values())

    def test_non_dice_method_rejected(self) -> None:
        """Test point buy is not a dice method."""
        with pytest.raises(ValidationError) as exc_info:
            generate_dice_roll(AbilityScoreMethod.POINT_BUY)

        assert exc_info.value.details["field_name"] == "method"
        assert exc_info.value.details["invalid_value"] == "point-buy"

    def test_unknown_method_rejected(self) -> None:
        """Test an unknown method name raises ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            generate_dice_roll("7d6-keep-all")

        assert exc_info.value.details["invalid_value"] == "7d6-keep-all"
