"""5E level progression tables.

Static data needed to resolve a character at a given level:
- XP thresholds and proficiency bonus by level
- Hit dice by class
- Spell slots by caster progression
- Spellcasting ability, type and spell learning rules by class
- Cantrips known by class and level

All tables are keyed by lowercase base class slug ('wizard', not
'wizard-evocation'). Lookups for subclass slugs go through
:func:`base_class_slug`.
"""

from __future__ import annotations

from dataclasses import dataclass

from character_forge.models.enums import (
    Ability,
    CasterProgression,
    SpellcastingType,
    SpellLearningType,
)


def base_class_slug(class_slug: str) -> str:
    """Strip a subclass suffix: 'wizard-evocation' -> 'wizard'."""
    return class_slug.split("-")[0].strip().lower()


# =============================================================================
# XP Thresholds (PHB p.15)
# =============================================================================

XP_THRESHOLDS: dict[int, int] = {
    1: 0,
    2: 300,
    3: 900,
    4: 2700,
    5: 6500,
    6: 14000,
    7: 23000,
    8: 34000,
    9: 48000,
    10: 64000,
    11: 85000,
    12: 100000,
    13: 120000,
    14: 140000,
    15: 165000,
    16: 195000,
    17: 225000,
    18: 265000,
    19: 305000,
    20: 355000,
}

# =============================================================================
# Proficiency Bonus by Level (PHB p.15)
# =============================================================================

PROFICIENCY_BONUSES: tuple[int, ...] = (
    2, 2, 2, 2, 3, 3, 3, 3, 4, 4, 4, 4, 5, 5, 5, 5, 6, 6, 6, 6,
)
"""Proficiency bonus for levels 1-20 (index = level - 1)."""

# =============================================================================
# Hit Dice by Class
# =============================================================================

CLASS_HIT_DIE: dict[str, int] = {
    "barbarian": 12,
    "fighter": 10,
    "paladin": 10,
    "ranger": 10,
    "artificer": 8,
    "bard": 8,
    "cleric": 8,
    "druid": 8,
    "monk": 8,
    "rogue": 8,
    "warlock": 8,
    "sorcerer": 6,
    "wizard": 6,
}

DEFAULT_HIT_DIE = 8

# =============================================================================
# Spell Slots by Level
# =============================================================================

# Full casters: Bard, Cleric, Druid, Sorcerer, Wizard
FULL_CASTER_SLOTS: dict[int, dict[int, int]] = {
    1:  {1: 2},
    2:  {1: 3},
    3:  {1: 4, 2: 2},
    4:  {1: 4, 2: 3},
    5:  {1: 4, 2: 3, 3: 2},
    6:  {1: 4, 2: 3, 3: 3},
    7:  {1: 4, 2: 3, 3: 3, 4: 1},
    8:  {1: 4, 2: 3, 3: 3, 4: 2},
    9:  {1: 4, 2: 3, 3: 3, 4: 3, 5: 1},
    10: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2},
    11: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1},
    12: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1},
    13: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1},
    14: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1},
    15: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1, 8: 1},
    16: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1, 8: 1},
    17: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1, 8: 1, 9: 1},
    18: {1: 4, 2: 3, 3: 3, 4: 3, 5: 3, 6: 1, 7: 1, 8: 1, 9: 1},
    19: {1: 4, 2: 3, 3: 3, 4: 3, 5: 3, 6: 2, 7: 1, 8: 1, 9: 1},
    20: {1: 4, 2: 3, 3: 3, 4: 3, 5: 3, 6: 2, 7: 2, 8: 1, 9: 1},
}

# Half casters: Paladin, Ranger (start at level 2)
HALF_CASTER_SLOTS: dict[int, dict[int, int]] = {
    1:  {},
    2:  {1: 2},
    3:  {1: 3},
    4:  {1: 3},
    5:  {1: 4, 2: 2},
    6:  {1: 4, 2: 2},
    7:  {1: 4, 2: 3},
    8:  {1: 4, 2: 3},
    9:  {1: 4, 2: 3, 3: 2},
    10: {1: 4, 2: 3, 3: 2},
    11: {1: 4, 2: 3, 3: 3},
    12: {1: 4, 2: 3, 3: 3},
    13: {1: 4, 2: 3, 3: 3, 4: 1},
    14: {1: 4, 2: 3, 3: 3, 4: 1},
    15: {1: 4, 2: 3, 3: 3, 4: 2},
    16: {1: 4, 2: 3, 3: 3, 4: 2},
    17: {1: 4, 2: 3, 3: 3, 4: 3, 5: 1},
    18: {1: 4, 2: 3, 3: 3, 4: 3, 5: 1},
    19: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2},
    20: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2},
}

# Third casters: Eldritch Knight, Arcane Trickster (start at level 3)
THIRD_CASTER_SLOTS: dict[int, dict[int, int]] = {
    1:  {},
    2:  {},
    3:  {1: 2},
    4:  {1: 3},
    5:  {1: 3},
    6:  {1: 3},
    7:  {1: 4, 2: 2},
    8:  {1: 4, 2: 2},
    9:  {1: 4, 2: 2},
    10: {1: 4, 2: 3},
    11: {1: 4, 2: 3},
    12: {1: 4, 2: 3},
    13: {1: 4, 2: 3, 3: 2},
    14: {1: 4, 2: 3, 3: 2},
    15: {1: 4, 2: 3, 3: 2},
    16: {1: 4, 2: 3, 3: 3},
    17: {1: 4, 2: 3, 3: 3},
    18: {1: 4, 2: 3, 3: 3},
    19: {1: 4, 2: 3, 3: 3, 4: 1},
    20: {1: 4, 2: 3, 3: 3, 4: 1},
}

# Warlock pact magic
WARLOCK_PACT_SLOTS: dict[int, tuple[int, int]] = {
    # level: (num_slots, slot_level)
    1:  (1, 1),
    2:  (2, 1),
    3:  (2, 2),
    4:  (2, 2),
    5:  (2, 3),
    6:  (2, 3),
    7:  (2, 4),
    8:  (2, 4),
    9:  (2, 5),
    10: (2, 5),
    11: (3, 5),
    12: (3, 5),
    13: (3, 5),
    14: (3, 5),
    15: (3, 5),
    16: (3, 5),
    17: (4, 5),
    18: (4, 5),
    19: (4, 5),
    20: (4, 5),
}

CLASS_CASTER_PROGRESSION: dict[str, CasterProgression] = {
    "bard": CasterProgression.FULL,
    "cleric": CasterProgression.FULL,
    "druid": CasterProgression.FULL,
    "sorcerer": CasterProgression.FULL,
    "wizard": CasterProgression.FULL,
    "paladin": CasterProgression.HALF,
    "ranger": CasterProgression.HALF,
    "artificer": CasterProgression.HALF,
    "warlock": CasterProgression.PACT,
}

THIRD_CASTER_SUBCLASSES = frozenset({"eldritch-knight", "arcane-trickster"})

# =============================================================================
# Spellcasting by Class
# =============================================================================

SPELLCASTING_TYPE_MAP: dict[str, SpellcastingType] = {
    "wizard": SpellcastingType.WIZARD,
    "bard": SpellcastingType.KNOWN,
    "sorcerer": SpellcastingType.KNOWN,
    "warlock": SpellcastingType.KNOWN,
    "ranger": SpellcastingType.KNOWN,
    "cleric": SpellcastingType.PREPARED,
    "druid": SpellcastingType.PREPARED,
    "paladin": SpellcastingType.PREPARED,
    "artificer": SpellcastingType.PREPARED,
}

SPELLCASTING_ABILITY: dict[str, Ability] = {
    "wizard": Ability.INT,
    "sorcerer": Ability.CHA,
    "bard": Ability.CHA,
    "warlock": Ability.CHA,
    "cleric": Ability.WIS,
    "druid": Ability.WIS,
    "paladin": Ability.CHA,
    "ranger": Ability.WIS,
    "artificer": Ability.INT,
}

LEVEL_ONE_SPELLCASTING: dict[str, tuple[int, int]] = {
    # class: (cantrips known, spells known or prepared)
    "wizard": (3, 6),
    "sorcerer": (4, 2),
    "bard": (2, 4),
    "warlock": (2, 2),
    "cleric": (3, 2),
    "druid": (2, 2),
    "paladin": (0, 0),
    "ranger": (0, 0),
    "artificer": (0, 0),
}
"""First-level cantrip and spell counts used by the creation wizard."""

CANTRIPS_KNOWN_BY_LEVEL: dict[str, tuple[int, ...]] = {
    "bard": (2, 2, 2, 3, 3, 3, 3, 3, 3, 4, 4, 4, 4, 4, 4, 4, 4, 4, 4, 4),
    "cleric": (3, 3, 3, 4, 4, 4, 4, 4, 4, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5),
    "druid": (2, 2, 2, 3, 3, 3, 3, 3, 3, 4, 4, 4, 4, 4, 4, 4, 4, 4, 4, 4),
    "sorcerer": (4, 4, 4, 5, 5, 5, 5, 5, 5, 6, 6, 6, 6, 6, 6, 6, 6, 6, 6, 6),
    "warlock": (2, 2, 2, 3, 3, 3, 3, 3, 3, 4, 4, 4, 4, 4, 4, 4, 4, 4, 4, 4),
    "wizard": (3, 3, 3, 4, 4, 4, 4, 4, 4, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5, 5),
}


@dataclass(frozen=True)
class SpellLearningRule:
    """How a class learns spells, with its per-level counts.

    Attributes:
        type: Spell learning family.
        by_level: Spells known, prepared or spellbook capacity for
            levels 1-20 (index = level - 1). Empty for non-casters.
    """

    type: SpellLearningType
    by_level: tuple[int, ...] = ()

    def count_at(self, level: int) -> int:
        """Spell count at the given character level (0 outside 1-20)."""
        if not self.by_level or not 1 <= level <= len(self.by_level):
            return 0
        return self.by_level[level - 1]


_HALF_CASTER_SPELLS = (0, 2, 3, 3, *([4] * 16))

SPELL_LEARNING_RULES: dict[str, SpellLearningRule] = {
    "wizard": SpellLearningRule(
        SpellLearningType.SPELLBOOK,
        tuple(6 + 2 * index for index in range(20)),
    ),
    "cleric": SpellLearningRule(
        SpellLearningType.PREPARED,
        (*range(2, 21), 20),
    ),
    "druid": SpellLearningRule(
        SpellLearningType.PREPARED,
        (*range(2, 21), 20),
    ),
    "paladin": SpellLearningRule(SpellLearningType.PREPARED, _HALF_CASTER_SPELLS),
    "ranger": SpellLearningRule(SpellLearningType.KNOWN, _HALF_CASTER_SPELLS),
    "artificer": SpellLearningRule(SpellLearningType.PREPARED, _HALF_CASTER_SPELLS),
    "sorcerer": SpellLearningRule(
        SpellLearningType.KNOWN,
        (2, 3, 4, 5, 6, 7, 8, 9, 10, 10, 11, 11, 12, 12, 13, 13, 14, 14, 15, 15),
    ),
    "warlock": SpellLearningRule(
        SpellLearningType.KNOWN,
        (2, 3, 4, 5, 6, 7, 8, 9, 10, 10, 11, 11, 12, 12, 13, 13, 14, 14, 15, 15),
    ),
    "bard": SpellLearningRule(
        SpellLearningType.KNOWN,
        (4, 5, 6, 7, 8, 9, 10, 11, 12, 14, 15, 15, 16, 18, 19, 19, 20, 22, 22, 22),
    ),
    "barbarian": SpellLearningRule(SpellLearningType.NONE),
    "fighter": SpellLearningRule(SpellLearningType.NONE),
    "monk": SpellLearningRule(SpellLearningType.NONE),
    "rogue": SpellLearningRule(SpellLearningType.NONE),
}

# =============================================================================
# ASI Levels (Ability Score Improvements)
# =============================================================================

STANDARD_ASI_LEVELS = frozenset({4, 8, 12, 16, 19})
FIGHTER_ASI_LEVELS = frozenset({4, 6, 8, 12, 14, 16, 19})
ROGUE_ASI_LEVELS = frozenset({4, 8, 10, 12, 16, 19})


__all__ = [
    "base_class_slug",
    "XP_THRESHOLDS",
    "PROFICIENCY_BONUSES",
    "CLASS_HIT_DIE",
    "DEFAULT_HIT_DIE",
    "FULL_CASTER_SLOTS",
    "HALF_CASTER_SLOTS",
    "THIRD_CASTER_SLOTS",
    "WARLOCK_PACT_SLOTS",
    "CLASS_CASTER_PROGRESSION",
    "THIRD_CASTER_SUBCLASSES",
    "SPELLCASTING_TYPE_MAP",
    "SPELLCASTING_ABILITY",
    "LEVEL_ONE_SPELLCASTING",
    "CANTRIPS_KNOWN_BY_LEVEL",
    "SpellLearningRule",
    "SPELL_LEARNING_RULES",
    "STANDARD_ASI_LEVELS",
    "FIGHTER_ASI_LEVELS",
    "ROGUE_ASI_LEVELS",
]
