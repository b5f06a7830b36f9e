"""Tests for creation wizard state, NPC and result models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from character_forge.models import (
    NPC,
    Ability,
    AbilityScoreMethod,
    CharacterCreationData,
    NPCFilters,
    StepValidation,
    ValidationResult,
)


class TestCharacterCreationData:
    """Tests for CharacterCreationData."""

    def test_defaults(self) -> None:
        """Test a fresh wizard state."""
        data = CharacterCreationData()

        assert data.level == 1
        assert data.edition == "2014"
        assert data.ability_score_method is AbilityScoreMethod.STANDARD_ARRAY
        assert all(data.abilities[ability] == 0 for ability in Ability)
        assert data.spell_selection.selected_cantrips == []
        assert data.spell_selection.spellbook is None

    def test_assignment_is_validated(self) -> None:
        """Test assignments go through validation."""
        data = CharacterCreationData()

        with pytest.raises(ValidationError):
            data.level = 0

    def test_unknown_edition_rejected(self) -> None:
        """Test only 2014 and 2024 editions are accepted."""
        with pytest.raises(ValidationError):
            CharacterCreationData(edition="2030")


class TestNPCFilters:
    """Tests for NPC library filtering."""

    @pytest.fixture
    def npc(self) -> NPC:
        """A sample NPC."""
        return NPC(name="Greta Ironfist", species="dwarf", occupation="Blacksmith", alignment="Lawful Neutral")

    def test_empty_filters_match(self, npc: NPC) -> None:
        """Test no filters match every NPC."""
        assert NPCFilters().matches(npc)

    def test_search_is_case_insensitive(self, npc: NPC) -> None:
        """Test search covers name, occupation and species."""
        assert NPCFilters(search="greta").matches(npc)
        assert NPCFilters(search="SMITH").matches(npc)
        assert NPCFilters(search="Dwarf").matches(npc)
        assert not NPCFilters(search="elf").matches(npc)

    def test_list_filters(self, npc: NPC) -> None:
        """Test species, occupation and alignment filters."""
        assert NPCFilters(species=("dwarf", "elf")).matches(npc)
        assert not NPCFilters(occupations=("Sage",)).matches(npc)
        assert not NPCFilters(alignments=("Chaotic Evil",)).matches(npc)

    def test_npc_defaults(self) -> None:
        """Test NPC ids and timestamps are generated."""
        first = NPC(name="A")
        second = NPC(name="B")
        assert first.id != second.id
        assert first.created_at


class TestResults:
    """Tests for validation result objects."""

    def test_from_errors(self) -> None:
        """Test validity follows the error list."""
        assert ValidationResult.from_errors([]).is_valid is True

        result = ValidationResult.from_errors(["Too many cantrips"])
        assert result.is_valid is False
        assert result.errors == ("Too many cantrips",)

    @pytest.mark.parametrize(
        ("complete", "missing", "expected"),
        [
            (True, (), 100),
            (False, ("Background selection",), 75),
            (False, ("a", "b", "c"), 25),
            (False, ("a", "b", "c", "d", "e"), 0),
        ],
    )
    def test_progress_percent(self, complete: bool, missing: tuple[str, ...], expected: int) -> None:
        """Test step progress percentage."""
        step = StepValidation(is_complete=complete, missing_selections=missing)
        assert step.progress_percent == expected
