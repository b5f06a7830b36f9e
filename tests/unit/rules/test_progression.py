"""Tests for level progression rules."""

from __future__ import annotations

import pytest

from character_forge.models import Character
from character_forge.rules.progression import (
    average_hp_gain,
    calculate_level_up,
    can_level_up,
    cantrips_known_at,
    format_modifier,
    get_asi_levels,
    get_hit_die_for_class,
    get_level_for_xp,
    get_modifier,
    get_proficiency_bonus,
    get_xp_for_next_level,
    grants_asi,
    roll_hp_gain,
)


class TestCoreNumbers:
    """Tests for modifiers, proficiency bonus and hit dice."""

    @pytest.mark.parametrize(
        ("score", "expected"),
        [(1, -5), (8, -1), (9, -1), (10, 0), (11, 0), (16, 3), (20, 5), (30, 10)],
    )
    def test_modifier(self, score: int, expected: int) -> None:
        """Test ability modifiers round down."""
        assert get_modifier(score) == expected

    @pytest.mark.parametrize(
        ("level", "expected"),
        [(1, 2), (4, 2), (5, 3), (9, 4), (13, 5), (17, 6), (20, 6), (0, 2), (25, 2)],
    )
    def test_proficiency_bonus(self, level: int, expected: int) -> None:
        """Test proficiency bonus by level."""
        assert get_proficiency_bonus(level) == expected

    @pytest.mark.parametrize(
        ("slug", "expected"),
        [("barbarian", 12), ("fighter", 10), ("wizard", 6), ("wizard-evocation", 6), ("", 8), (None, 8), ("psion", 8)],
    )
    def test_hit_die(self, slug: str | None, expected: int) -> None:
        """Test hit die lookup with subclass and unknown slugs."""
        assert get_hit_die_for_class(slug) == expected

    def test_format_modifier(self) -> None:
        """Test signed display."""
        assert format_modifier(3) == "+3"
        assert format_modifier(-1) == "-1"
        assert format_modifier(0) == "+0"


class TestExperience:
    """Tests for XP thresholds."""

    @pytest.mark.parametrize(
        ("xp", "expected"),
        [(0, 1), (299, 1), (300, 2), (900, 3), (6499, 4), (355000, 20), (999999, 20)],
    )
    def test_level_for_xp(self, xp: int, expected: int) -> None:
        """Test level lookup from experience."""
        assert get_level_for_xp(xp) == expected

    def test_xp_for_next_level(self) -> None:
        """Test the next threshold, none at the cap."""
        assert get_xp_for_next_level(1) == 300
        assert get_xp_for_next_level(4) == 6500
        assert get_xp_for_next_level(20) is None

    def test_can_level_up(self, sample_character: Character) -> None:
        """Test enough XP unlocks the next level, never past 20."""
        assert can_level_up(sample_character) is False
        assert can_level_up(sample_character.model_copy(update={"experience_points": 300})) is True
        assert can_level_up(sample_character.model_copy(update={"level": 20, "experience_points": 400000})) is False


class TestAbilityScoreImprovements:
    """Tests for ASI levels."""

    def test_standard_levels(self) -> None:
        """Test most classes share the standard levels."""
        assert get_asi_levels("wizard") == frozenset({4, 8, 12, 16, 19})

    def test_fighter_and_rogue_extras(self) -> None:
        """Test fighter and rogue bonus ASI levels."""
        assert grants_asi("fighter", 6)
        assert grants_asi("fighter", 14)
        assert grants_asi("rogue-thief", 10)
        assert not grants_asi("wizard", 6)
        assert not grants_asi("rogue", 6)


class TestLevelUp:
    """Tests for level-up calculations."""

    def test_average_hp_gain(self) -> None:
        """Test fixed HP per level, minimum 1."""
        assert average_hp_gain(10, 2) == 8
        assert average_hp_gain(6, 0) == 4
        assert average_hp_gain(6, -5) == 1

    def test_roll_hp_gain(self) -> None:
        """Test a rolled gain is one die plus CON, never below 1."""
        assert all(3 <= roll_hp_gain(10, 2) <= 12 for _ in range(50))
        assert all(roll_hp_gain(6, -5) == 1 for _ in range(20))

    def test_cantrips_known(self) -> None:
        """Test cantrip table lookups."""
        assert cantrips_known_at("wizard", 1) == 3
        assert cantrips_known_at("wizard", 4) == 4
        assert cantrips_known_at("fighter", 4) == 0
        assert cantrips_known_at("wizard", 0) == 0

    def test_level_up_summary(self, sample_character: Character) -> None:
        """Test the numbers for a fighter reaching level 2."""
        summary = calculate_level_up(sample_character)

        assert summary is not None
        assert summary.from_level == 1
        assert summary.to_level == 2
        assert summary.hit_die == 10
        assert summary.con_modifier == 2
        assert summary.average_hp_gain == 8
        assert summary.grants_asi is False
        assert summary.new_cantrips == 0

    def test_level_up_at_cap(self, sample_character: Character) -> None:
        """Test no level up past 20."""
        capped = sample_character.model_copy(update={"level": 20})
        assert calculate_level_up(capped) is None
