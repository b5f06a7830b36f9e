"""Level progression rules.

Ability modifiers, proficiency bonus, hit dice, experience thresholds,
ability score improvement levels and the numbers that change when a
character gains a level.

Example:
    >>> get_modifier(16)
    3
    >>> get_hit_die_for_class("wizard-evocation")
    6
"""

from __future__ import annotations

from dataclasses import dataclass

from character_forge.core.constants import MAX_LEVEL, MIN_LEVEL
from character_forge.models.character import Character
from character_forge.models.enums import Ability
from character_forge.models.progression import (
    CANTRIPS_KNOWN_BY_LEVEL,
    CLASS_HIT_DIE,
    DEFAULT_HIT_DIE,
    FIGHTER_ASI_LEVELS,
    PROFICIENCY_BONUSES,
    ROGUE_ASI_LEVELS,
    STANDARD_ASI_LEVELS,
    XP_THRESHOLDS,
    base_class_slug,
)
from character_forge.rules.dice import roll_hit_die


# =============================================================================
# Core Numbers
# =============================================================================


def get_modifier(score: int) -> int:
    """Ability modifier for a score: floor((score - 10) / 2)."""
    return (score - 10) // 2


def get_proficiency_bonus(level: int) -> int:
    """Proficiency bonus for a character level; out-of-range levels get 2."""
    if MIN_LEVEL <= level <= MAX_LEVEL:
        return PROFICIENCY_BONUSES[level - 1]
    return PROFICIENCY_BONUSES[0]


def get_hit_die_for_class(class_slug: str | None) -> int:
    """Hit die size for a class or subclass slug.

    Args:
        class_slug: Class slug; subclass suffixes such as
            ``wizard-evocation`` resolve through the base class.

    Returns:
        The die size, or 8 for empty or unknown slugs.
    """
    if not class_slug:
        return DEFAULT_HIT_DIE
    return CLASS_HIT_DIE.get(base_class_slug(class_slug), DEFAULT_HIT_DIE)


def format_modifier(modifier: int) -> str:
    """Signed modifier for display: '+3', '-1', '+0'."""
    return f"{modifier:+d}"


# =============================================================================
# Experience
# =============================================================================


def get_level_for_xp(experience_points: int) -> int:
    """Highest level whose XP threshold has been reached."""
    level = MIN_LEVEL
    for candidate, threshold in XP_THRESHOLDS.items():
        if experience_points >= threshold:
            level = max(level, candidate)
    return level


def get_xp_for_next_level(level: int) -> int | None:
    """XP needed to reach the level after ``level``; None at level 20."""
    return XP_THRESHOLDS.get(level + 1)


def can_level_up(character: Character) -> bool:
    """Whether the character's experience points reach their next level."""
    return character.level < MAX_LEVEL and get_level_for_xp(character.experience_points) > character.level


# =============================================================================
# Ability Score Improvements
# =============================================================================


def get_asi_levels(class_slug: str) -> frozenset[int]:
    """Levels at which the class gains an ability score improvement."""
    base = base_class_slug(class_slug)
    if base == "fighter":
        return FIGHTER_ASI_LEVELS
    if base == "rogue":
        return ROGUE_ASI_LEVELS
    return STANDARD_ASI_LEVELS


def grants_asi(class_slug: str, level: int) -> bool:
    """Whether reaching ``level`` grants an ability score improvement."""
    return level in get_asi_levels(class_slug)


# =============================================================================
# Level Up
# =============================================================================


def average_hp_gain(hit_die: int, con_modifier: int) -> int:
    """Fixed hit point gain per level: half the die plus one, plus CON.

    A level always grants at least 1 hit point.
    """
    return max(1, hit_die // 2 + 1 + con_modifier)


def roll_hp_gain(hit_die: int, con_modifier: int) -> int:
    """Rolled hit point gain for a level: one hit die plus CON, at least 1."""
    return max(1, roll_hit_die(hit_die) + con_modifier)


def cantrips_known_at(class_slug: str, level: int) -> int:
    """Cantrips known by the class at a level (0 for non-cantrip classes)."""
    table = CANTRIPS_KNOWN_BY_LEVEL.get(base_class_slug(class_slug))
    if not table or not MIN_LEVEL <= level <= MAX_LEVEL:
        return 0
    return table[level - 1]


@dataclass(frozen=True)
class LevelUpSummary:
    """What changes when a character gains one level.

    Attributes:
        from_level: Current level.
        to_level: Level being reached.
        proficiency_bonus: Proficiency bonus at the new level.
        hit_die: Class hit die size.
        con_modifier: Constitution modifier added to the HP gain.
        average_hp_gain: Fixed hit point gain for the level.
        grants_asi: Whether the new level grants an ability score improvement.
        new_cantrips: Extra cantrips learned at the new level.
    """

    from_level: int
    to_level: int
    proficiency_bonus: int
    hit_die: int
    con_modifier: int
    average_hp_gain: int
    grants_asi: bool
    new_cantrips: int


def calculate_level_up(character: Character, class_slug: str | None = None) -> LevelUpSummary | None:
    """Work out the numbers for a character's next level.

    Args:
        character: The character levelling up.
        class_slug: Class slug; defaults to the lowercased class name on
            the sheet.

    Returns:
        The level-up summary, or None when the character is level 20.
    """
    if character.level >= MAX_LEVEL:
        return None

    slug = class_slug or character.character_class.lower()
    to_level = character.level + 1
    hit_die = get_hit_die_for_class(slug)
    con_modifier = character.abilities[Ability.CON].modifier

    return LevelUpSummary(
        from_level=character.level,
        to_level=to_level,
        proficiency_bonus=get_proficiency_bonus(to_level),
        hit_die=hit_die,
        con_modifier=con_modifier,
        average_hp_gain=average_hp_gain(hit_die, con_modifier),
        grants_asi=grants_asi(slug, to_level),
        new_cantrips=max(0, cantrips_known_at(slug, to_level) - cantrips_known_at(slug, character.level)),
    )


__all__ = [
    "get_modifier",
    "get_proficiency_bonus",
    "get_hit_die_for_class",
    "format_modifier",
    "get_level_for_xp",
    "get_xp_for_next_level",
    "can_level_up",
    "get_asi_levels",
    "grants_asi",
    "average_hp_gain",
    "roll_hp_gain",
    "cantrips_known_at",
    "LevelUpSummary",
    "calculate_level_up",
]
