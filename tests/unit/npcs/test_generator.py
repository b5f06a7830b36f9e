"""Tests for random NPC generation."""

from __future__ import annotations

import random

from character_forge.data import RulesRepository
from character_forge.models import NPC
from character_forge.npcs.generator import (
    FALLBACK_NAME_PREFIXES,
    PLOT_HOOKS,
    RELATIONSHIP_STATUSES,
    SEXUAL_ORIENTATIONS,
    generate_complete_npc,
    generate_random_ability_scores,
    generate_random_alignment,
    generate_random_name,
    generate_random_occupation,
    generate_random_personality_traits,
    generate_random_species,
)
from character_forge.rules.ability_scores import STANDARD_ARRAY_SCORES


class TestNames:
    """Tests for name generation."""

    def test_species_name_has_surname(self, repository: RulesRepository) -> None:
        """Test a dwarf name has a first name and a surname."""
        names = repository.load_npc_name_data()["species"]["dwarf"]

        name = generate_random_name("dwarf", random.Random(1), repository)
        first, _, surname = name.partition(" ")

        assert first in names["male"] + names["female"]
        assert surname in names["surnames"]

    def test_subrace_uses_base_list(self, repository: RulesRepository) -> None:
        """Test hill-dwarf draws from the dwarf lists."""
        names = repository.load_npc_name_data()["species"]["dwarf"]

        name = generate_random_name("hill-dwarf", random.Random(2), repository)

        assert name.split(" ")[0] in names["male"] + names["female"]

    def test_unknown_species_fallback(self, repository: RulesRepository) -> None:
        """Test species without a list get a built fantasy name."""
        name = generate_random_name("warforged", random.Random(3), repository)

        assert name.startswith(FALLBACK_NAME_PREFIXES)
        assert " " not in name

    def test_seeded_results_repeat(self, repository: RulesRepository) -> None:
        """Test the same seed gives the same name."""
        first = generate_random_name("elf", random.Random(42), repository)
        second = generate_random_name("elf", random.Random(42), repository)

        assert first == second


class TestAttributes:
    """Tests for individual NPC attributes."""

    def test_ability_scores_are_standard_array(self) -> None:
        """Test the standard array is shuffled across abilities."""
        scores = generate_random_ability_scores(random.Random(5))

        assert len(scores) == 6
        assert sorted(scores.values()) == sorted(STANDARD_ARRAY_SCORES)

    def test_personality_traits_distinct(self, repository: RulesRepository) -> None:
        """Test traits are drawn without repeats."""
        traits = generate_random_personality_traits(3, random.Random(6), repository)

        assert len(traits) == 3
        assert len(set(traits)) == 3
        assert set(traits) <= set(repository.load_npc_name_data()["personalities"])

    def test_values_come_from_rule_data(self, repository: RulesRepository) -> None:
        """Test occupation, alignment and species are known values."""
        rng = random.Random(7)

        assert generate_random_occupation(rng, repository) in {b.name for b in repository.load_backgrounds()}
        assert generate_random_alignment(rng, repository) in {a.name for a in repository.load_alignments()}
        assert generate_random_species(rng, repository) in {r.slug for r in repository.load_races()}


class TestCompleteNPC:
    """Tests for full NPC generation."""

    def test_fields_populated(self, repository: RulesRepository) -> None:
        """Test every generated field is filled in."""
        npc = generate_complete_npc(random.Random(8), repository)

        assert isinstance(npc, NPC)
        assert npc.name
        assert npc.species
        assert npc.occupation
        assert len(npc.personality_traits) == 2
        assert npc.relationship_status in RELATIONSHIP_STATUSES
        assert npc.sexual_orientation in SEXUAL_ORIENTATIONS
        assert npc.plot_hook in PLOT_HOOKS
        assert npc.notes == ""

    def test_fresh_ids(self, repository: RulesRepository) -> None:
        """Test each NPC gets its own id."""
        first = generate_complete_npc(random.Random(9), repository)
        second = generate_complete_npc(random.Random(9), repository)

        assert first.id != second.id
        assert first.name == second.name
