"""Integration tests for the character creation flow.

Walks the wizard steps, builds the sheet and works with the result the
way the application does.
"""

from __future__ import annotations

import random

import pytest

from character_forge.core.exceptions import EquipmentConflictError
from character_forge.data import RulesRepository
from character_forge.models import Ability, Character, CharacterCreationData, Skill, SpellSelectionData
from character_forge.rules import (
    calculate_character_stats,
    calculate_level_up,
    equip_item,
    generate_standard_array,
    validate_standard_array,
)
from character_forge.rules.spellcasting import (
    are_spell_selections_complete,
    get_available_spells_for_creation,
    update_spellcasting_on_level_up,
)
from character_forge.rules.wizard import WizardStep, validate_step


pytestmark = pytest.mark.integration


class TestFighterCreation:
    """A hill dwarf fighter from empty inputs to equipped sheet."""

    def test_wizard_steps_then_build(self, repository: RulesRepository) -> None:
        """Test each step reports missing choices until filled in."""
        data = CharacterCreationData(name="Thorin")

        assert not validate_step(WizardStep.DETAILS, data, repository).is_complete
        assert validate_step(WizardStep.ABILITIES, data, repository).missing_selections == (
            "6 ability scores to assign",
        )

        data = data.model_copy(
            update={
                "background": "Soldier",
                "alignment": "Lawful Good",
                "race_slug": "hill-dwarf",
                "class_slug": "fighter",
                "abilities": generate_standard_array(random.Random(11)),
                "selected_skills": [Skill.PERCEPTION, Skill.SURVIVAL],
            }
        )

        for step in WizardStep:
            assert validate_step(step, data, repository).is_complete
        assert validate_standard_array(data.abilities).is_valid

        character = calculate_character_stats(data, repository)

        assert character.character_class == "Fighter"
        assert character.hit_dice.die_type == 10
        assert character.skills[Skill.INTIMIDATION].proficient

    def test_equip_armor_changes_armor_class(
        self,
        sample_creation_data: CharacterCreationData,
        repository: RulesRepository,
    ) -> None:
        """Test equipping chain mail and a shield updates armor class."""
        character = calculate_character_stats(sample_creation_data, repository)
        chain_mail = repository.get_equipment_by_slug("chain-mail")
        shield = repository.get_equipment_by_slug("shield")
        assert chain_mail is not None
        assert shield is not None

        character = equip_item(character, chain_mail, repository)
        character = equip_item(character, shield, repository)

        assert character.equipped_armor == "chain-mail"
        assert character.armor_class == 18

    def test_weak_character_cannot_wear_plate(self, repository: RulesRepository) -> None:
        """Test a low strength wizard is refused plate armor."""
        data = CharacterCreationData(
            name="Pip",
            race_slug="high-elf",
            class_slug="wizard",
            abilities={ability: 10 for ability in Ability} | {Ability.STR: 8},
        )
        character = calculate_character_stats(data, repository)
        plate = repository.get_equipment_by_slug("plate-armor")
        assert plate is not None

        with pytest.raises(EquipmentConflictError):
            equip_item(character, plate, repository)

    def test_level_up_summary(self, sample_character: Character) -> None:
        """Test the next level's numbers for the built fighter."""
        summary = calculate_level_up(sample_character)

        assert summary is not None
        assert summary.to_level == 2
        assert summary.average_hp_gain == 8


class TestWizardCreation:
    """A high elf wizard choosing spells."""

    def test_spell_picks_through_to_level_up(
        self,
        wizard_creation_data: CharacterCreationData,
        repository: RulesRepository,
    ) -> None:
        """Test picks are complete, land on the sheet and survive levelling."""
        available = get_available_spells_for_creation("wizard", 1, repository)
        cantrips = [spell.slug for spell in available.cantrips[:3]]
        spellbook = [spell.slug for spell in available.spells[:6]]
        selection = SpellSelectionData(
            selected_cantrips=cantrips,
            spellbook=spellbook,
            daily_prepared=spellbook[:4],
        )
        final_scores = {Ability.INT: 16}

        assert are_spell_selections_complete(selection, "wizard", 1, final_scores, repository)

        character = calculate_character_stats(
            wizard_creation_data.model_copy(update={"spell_selection": selection}),
            repository,
        )
        assert character.spellcasting is not None
        assert character.spellcasting.spellbook == spellbook

        levelled = update_spellcasting_on_level_up(character, 3, "wizard", repository)

        assert levelled is not None
        assert levelled.spellbook == spellbook
        assert levelled.spell_slots[2] == 2
