"""Integration tests for persistence through the shared database."""

from __future__ import annotations

import random

import pytest

from character_forge.data import RulesRepository
from character_forge.models import Character
from character_forge.npcs import NPCManager, generate_complete_npc
from character_forge.storage import get_database, reset_database


pytestmark = pytest.mark.integration


class TestCharacterPersistence:
    """Saved characters across database instances."""

    def test_save_reload_after_reset(self, sample_character: Character) -> None:
        """Test a character is still there after the singleton is reset."""
        get_database().add_character(sample_character)
        reset_database()

        loaded = get_database().get_character(sample_character.id)

        assert loaded is not None
        assert loaded.name == "Thorin"
        assert loaded.skills == sample_character.skills
        assert loaded.features_and_traits == sample_character.features_and_traits

    def test_progress_is_saved(self, sample_character: Character) -> None:
        """Test damage and experience are kept by update."""
        database = get_database()
        database.add_character(sample_character)

        sample_character.hit_points = 4
        sample_character.experience_points = 300
        sample_character.conditions = ["poisoned"]
        sample_character.touch()
        database.update_character(sample_character)

        loaded = database.get_character(sample_character.id)
        assert loaded is not None
        assert loaded.hit_points == 4
        assert loaded.experience_points == 300
        assert loaded.conditions == ["poisoned"]


class TestNPCLibrary:
    """NPC library backed by the configured database."""

    def test_generated_npcs_survive_restart(self, repository: RulesRepository) -> None:
        """Test generated NPCs are reloaded by a new manager."""
        rng = random.Random(21)
        manager = NPCManager()
        generated = [generate_complete_npc(rng, repository) for _ in range(3)]
        for npc in generated:
            assert manager.create_npc(npc)

        reset_database()
        restarted = NPCManager()

        assert [npc.id for npc in restarted.npcs] == [npc.id for npc in generated]
        assert restarted.npcs[0].ability_scores == generated[0].ability_scores

    def test_filters_on_reloaded_library(self, repository: RulesRepository) -> None:
        """Test filters apply to NPCs loaded from storage."""
        manager = NPCManager()
        npc = generate_complete_npc(random.Random(22), repository)
        manager.create_npc(npc)

        restarted = NPCManager()
        restarted.set_filters(species=[npc.species], alignments=[npc.alignment])

        assert [found.id for found in restarted.filtered_npcs] == [npc.id]
        restarted.set_filters(search="zzz-no-match")
        assert restarted.filtered_npcs == []
