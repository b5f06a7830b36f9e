"""Tests for SRD record transforms."""

from __future__ import annotations

import pytest

from character_forge.data import (
    classify_proficiency,
    transform_class,
    transform_race,
    transform_spell,
)
from character_forge.models import Ability, SpellcastingType, SpellSchool


class TestClassifyProficiency:
    """Tests for proficiency classification."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Skill: Perception", "skill"),
            ("Shields", "armor"),
            ("Light Armor", "armor"),
            ("Smith's Tools", "tool"),
            ("One type of gaming set", "tool"),
            ("Martial Weapons", "weapon"),
            ("Battleaxes", "weapon"),
            ("Saving Throw: STR", None),
        ],
    )
    def test_classification(self, name: str, expected: str | None) -> None:
        """Test names are sorted into the right bucket."""
        assert classify_proficiency(name) == expected


class TestTransformSpell:
    """Tests for spell transforms."""

    def test_fields(self) -> None:
        """Test an SRD spell record becomes a Spell."""
        spell = transform_spell({
            "index": "fire-bolt",
            "name": "Fire Bolt",
            "level": 0,
            "school": {"index": "evocation", "name": "evocation"},
            "casting_time": "1 action",
            "range": "120 feet",
            "components": ["V", "S"],
            "duration": "Instantaneous",
            "desc": ["You hurl a mote of fire.", "Damage increases."],
            "damage": {"damage_type": {"name": "Fire"}},
            "classes": [{"index": "sorcerer"}, {"index": "wizard"}],
        })

        assert spell.slug == "fire-bolt"
        assert spell.school is SpellSchool.EVOCATION
        assert spell.components.verbal and spell.components.somatic
        assert not spell.components.material
        assert spell.description == "You hurl a mote of fire.\n\nDamage increases."
        assert spell.damage_type == "Fire"
        assert spell.save_type is None
        assert spell.classes == ("sorcerer", "wizard")

    def test_save_type(self) -> None:
        """Test the saving throw ability is resolved."""
        spell = transform_spell({
            "index": "sleep",
            "name": "Sleep",
            "level": 1,
            "school": {"name": "Enchantment"},
            "casting_time": "1 action",
            "range": "90 feet",
            "duration": "1 minute",
            "dc": {"dc_type": {"index": "wis"}},
        })

        assert spell.save_type is Ability.WIS


class TestTransformRace:
    """Tests for race transforms."""

    def test_proficiency_buckets(self) -> None:
        """Test starting proficiencies are split by kind."""
        race = transform_race({
            "index": "elf",
            "name": "Elf",
            "speed": 30,
            "ability_bonuses": [{"ability_score": {"index": "dex"}, "bonus": 2}],
            "starting_proficiencies": [{"name": "Skill: Perception"}, {"name": "Longswords"}],
            "languages": [{"name": "Common"}, {"name": "Elvish"}],
            "traits": [{"name": "Darkvision"}],
        })

        assert race.ability_bonuses == {Ability.DEX: 2}
        assert race.skill_proficiencies == ("Perception",)
        assert race.weapon_proficiencies == ("Longswords",)
        assert race.languages == ("Common", "Elvish")
        assert race.racial_traits == ("Darkvision",)


class TestTransformClass:
    """Tests for class transforms."""

    def test_skill_choices_and_spellcasting(self) -> None:
        """Test skill options and first-level spellcasting are derived."""
        character_class = transform_class({
            "index": "wizard",
            "name": "Wizard",
            "hit_die": 6,
            "proficiency_choices": [
                {
                    "type": "proficiencies",
                    "choose": 2,
                    "from": {
                        "options": [
                            {"item": {"name": "Skill: Arcana"}},
                            {"item": {"name": "Skill: History"}},
                        ]
                    },
                }
            ],
            "proficiencies": [{"name": "Daggers"}, {"name": "Saving Throw: INT"}],
            "saving_throws": [{"name": "INT"}, {"name": "WIS"}],
            "spellcasting": {"spellcasting_ability": {"index": "int"}},
        })

        assert character_class.skill_proficiencies == ("Arcana", "History")
        assert character_class.num_skill_choices == 2
        assert character_class.proficiencies == ("Daggers",)
        assert character_class.spellcasting is not None
        assert character_class.spellcasting.type is SpellcastingType.WIZARD
        assert character_class.spellcasting.cantrips_known == 3
        assert character_class.spellcasting.spells_known_or_prepared == 6
        assert character_class.spellcasting.spell_slots[1] == 2

    def test_non_caster(self) -> None:
        """Test classes without spellcasting have none."""
        character_class = transform_class({"index": "barbarian", "name": "Barbarian", "hit_die": 12})

        assert character_class.spellcasting is None
        assert character_class.num_skill_choices == 0
