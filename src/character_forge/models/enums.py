"""Enumeration types for Character Forge.

This module defines the enumeration types used by the rules engine,
including ability scores, skills, spellcasting types and equipment
categories. These enums serve as the foundation for type-safe 5E mechanics.
"""

from __future__ import annotations

from enum import StrEnum


class Ability(StrEnum):
    """The six ability scores, valued by their three-letter abbreviation."""

    STR = "STR"
    DEX = "DEX"
    CON = "CON"
    INT = "INT"
    WIS = "WIS"
    CHA = "CHA"

    @property
    def full_name(self) -> str:
        """Get the full name of the ability.

        Returns:
            Full ability name (e.g., 'Strength' for STR).
        """
        names = {
            Ability.STR: "Strength",
            Ability.DEX: "Dexterity",
            Ability.CON: "Constitution",
            Ability.INT: "Intelligence",
            Ability.WIS: "Wisdom",
            Ability.CHA: "Charisma",
        }
        return names[self]

    @classmethod
    def from_srd(cls, value: str) -> Ability:
        """Resolve an SRD ability index ('str', 'Strength', 'DEX') to an Ability.

        Raises:
            ValueError: If ``value`` names no ability.
        """
        key = value.strip().upper()[:3]
        try:
            return cls(key)
        except ValueError:
            msg = f"Unknown ability: {value!r}"
            raise ValueError(msg) from None


class Skill(StrEnum):
    """The eighteen skills, valued by their character-sheet key."""

    ACROBATICS = "Acrobatics"
    ANIMAL_HANDLING = "AnimalHandling"
    ARCANA = "Arcana"
    ATHLETICS = "Athletics"
    DECEPTION = "Deception"
    HISTORY = "History"
    INSIGHT = "Insight"
    INTIMIDATION = "Intimidation"
    INVESTIGATION = "Investigation"
    MEDICINE = "Medicine"
    NATURE = "Nature"
    PERCEPTION = "Perception"
    PERFORMANCE = "Performance"
    PERSUASION = "Persuasion"
    RELIGION = "Religion"
    SLEIGHT_OF_HAND = "SleightOfHand"
    STEALTH = "Stealth"
    SURVIVAL = "Survival"

    @property
    def ability(self) -> Ability:
        """Get the ability score used for checks with this skill."""
        return SKILL_TO_ABILITY[self]

    @property
    def display_name(self) -> str:
        """Get the skill name as printed in the rules ('Sleight of Hand')."""
        if self is Skill.SLEIGHT_OF_HAND:
            return "Sleight of Hand"
        if self is Skill.ANIMAL_HANDLING:
            return "Animal Handling"
        return self.value

    @classmethod
    def from_name(cls, name: str) -> Skill | None:
        """Resolve a skill from its display or SRD name.

        Accepts 'Sleight of Hand', 'Skill: Sleight of Hand' and
        'SleightOfHand'. Returns None when nothing matches.
        """
        cleaned = name.removeprefix("Skill:").strip().replace(" ", "").replace("-", "")
        for skill in cls:
            if skill.value.lower() == cleaned.lower():
                return skill
        return None


SKILL_TO_ABILITY: dict[Skill, Ability] = {
    Skill.ACROBATICS: Ability.DEX,
    Skill.ANIMAL_HANDLING: Ability.WIS,
    Skill.ARCANA: Ability.INT,
    Skill.ATHLETICS: Ability.STR,
    Skill.DECEPTION: Ability.CHA,
    Skill.HISTORY: Ability.INT,
    Skill.INSIGHT: Ability.WIS,
    Skill.INTIMIDATION: Ability.CHA,
    Skill.INVESTIGATION: Ability.INT,
    Skill.MEDICINE: Ability.WIS,
    Skill.NATURE: Ability.INT,
    Skill.PERCEPTION: Ability.WIS,
    Skill.PERFORMANCE: Ability.CHA,
    Skill.PERSUASION: Ability.CHA,
    Skill.RELIGION: Ability.INT,
    Skill.SLEIGHT_OF_HAND: Ability.DEX,
    Skill.STEALTH: Ability.DEX,
    Skill.SURVIVAL: Ability.WIS,
}


class SpellcastingType(StrEnum):
    """How a class gains access to its leveled spells."""

    KNOWN = "known"
    PREPARED = "prepared"
    WIZARD = "wizard"


class SpellLearningType(StrEnum):
    """Spell learning rule family used for progression tables."""

    KNOWN = "known"
    PREPARED = "prepared"
    SPELLBOOK = "spellbook"
    NONE = "none"


class CasterProgression(StrEnum):
    """Spell slot progression families."""

    FULL = "full"
    HALF = "half"
    THIRD = "third"
    PACT = "pact"
    NONE = "none"


class SpellSchool(StrEnum):
    """Schools of magic."""

    ABJURATION = "Abjuration"
    CONJURATION = "Conjuration"
    DIVINATION = "Divination"
    ENCHANTMENT = "Enchantment"
    EVOCATION = "Evocation"
    ILLUSION = "Illusion"
    NECROMANCY = "Necromancy"
    TRANSMUTATION = "Transmutation"


class ArmorCategory(StrEnum):
    """Armor categories."""

    LIGHT = "Light"
    MEDIUM = "Medium"
    HEAVY = "Heavy"
    SHIELD = "Shield"


class WeaponCategory(StrEnum):
    """Weapon proficiency categories."""

    SIMPLE = "Simple"
    MARTIAL = "Martial"


class WeaponRange(StrEnum):
    """Weapon range categories."""

    MELEE = "Melee"
    RANGED = "Ranged"


class CurrencyUnit(StrEnum):
    """Coin denominations."""

    CP = "cp"
    SP = "sp"
    GP = "gp"
    PP = "pp"

    @property
    def copper_value(self) -> int:
        """Value of one coin of this denomination in copper pieces."""
        values = {
            CurrencyUnit.CP: 1,
            CurrencyUnit.SP: 10,
            CurrencyUnit.GP: 100,
            CurrencyUnit.PP: 1000,
        }
        return values[self]


class AbilityScoreMethod(StrEnum):
    """Ability score generation methods offered by the creation wizard."""

    STANDARD_ARRAY = "standard-array"
    STANDARD_ROLL = "standard-roll"
    CLASSIC_ROLL = "classic-roll"
    FIVE_D6_DROP_TWO = "5d6-drop-2"
    POINT_BUY = "point-buy"
    CUSTOM = "custom"


class HPCalculationMethod(StrEnum):
    """How first-level hit points are determined."""

    MAX = "max"
    ROLLED = "rolled"


class FeatCategory(StrEnum):
    """2024 feat categories."""

    ORIGIN = "origin"
    GENERAL = "general"
    FIGHTING_STYLE = "fighting_style"
    EPIC_BOON = "epic_boon"


class FeatContext(StrEnum):
    """Where a feat is being chosen from."""

    ASI = "asi"
    FIGHTING_STYLE = "fighting_style"
    BACKGROUND = "background"


__all__ = [
    "Ability",
    "Skill",
    "SKILL_TO_ABILITY",
    "SpellcastingType",
    "SpellLearningType",
    "CasterProgression",
    "SpellSchool",
    "ArmorCategory",
    "WeaponCategory",
    "WeaponRange",
    "CurrencyUnit",
    "AbilityScoreMethod",
    "HPCalculationMethod",
    "FeatCategory",
    "FeatContext",
]
