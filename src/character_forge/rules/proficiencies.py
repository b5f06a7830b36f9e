"""Proficiency aggregation.

Collects armor, weapon, tool and skill proficiencies from a character's
race, class and background into one de-duplicated summary.
"""

from __future__ import annotations

from collections.abc import Iterable

from character_forge.data import classify_proficiency
from character_forge.models.enums import Skill
from character_forge.models.reference import Background, CharacterClass, Race
from character_forge.models.results import ProficiencySummary


def _skill_names(names: Iterable[str]) -> list[str]:
    skills: list[str] = []
    for name in names:
        skill = Skill.from_name(name)
        skills.append(skill.value if skill is not None else name)
    return skills


def get_race_proficiencies(race: Race | None) -> ProficiencySummary:
    """Proficiencies granted by a race."""
    if race is None:
        return ProficiencySummary()
    return ProficiencySummary(
        armor=list(race.armor_proficiencies),
        weapons=list(race.weapon_proficiencies),
        tools=list(race.tool_proficiencies),
        skills=_skill_names(race.skill_proficiencies),
    )


def get_class_proficiencies(
    character_class: CharacterClass | None,
    selected_skills: Iterable[Skill | str] = (),
) -> ProficiencySummary:
    """Proficiencies granted by a class.

    The class's skill list is a menu, so only ``selected_skills`` count
    as skill proficiencies.
    """
    if character_class is None:
        return ProficiencySummary()

    summary = ProficiencySummary(skills=_skill_names(str(skill) for skill in selected_skills))
    for name in character_class.proficiencies:
        kind = classify_proficiency(name)
        if kind == "armor":
            summary.armor.append(name)
        elif kind == "weapon":
            summary.weapons.append(name)
        elif kind == "tool":
            summary.tools.append(name)
        elif kind == "skill":
            summary.skills.extend(_skill_names([name]))
    return summary


def get_background_proficiencies(background: Background | None) -> ProficiencySummary:
    """Skill and tool proficiencies granted by a background."""
    if background is None:
        return ProficiencySummary()
    return ProficiencySummary(
        tools=list(background.tool_proficiencies),
        skills=_skill_names(background.skill_proficiencies),
    )


def aggregate_proficiencies(
    race: Race | None,
    character_class: CharacterClass | None,
    background: Background | None,
    selected_skills: Iterable[Skill | str] = (),
) -> ProficiencySummary:
    """Combine race, class and background proficiencies.

    Each list keeps the first occurrence of every entry, in race, class,
    background order.

    Example:
        >>> summary = aggregate_proficiencies(dwarf, fighter, soldier, [Skill.PERCEPTION])
        >>> summary.armor
        ['All armor', 'Shields']
    """
    parts = [
        get_race_proficiencies(race),
        get_class_proficiencies(character_class, selected_skills),
        get_background_proficiencies(background),
    ]
    return ProficiencySummary(
        armor=list(dict.fromkeys(name for part in parts for name in part.armor)),
        weapons=list(dict.fromkeys(name for part in parts for name in part.weapons)),
        tools=list(dict.fromkeys(name for part in parts for name in part.tools)),
        skills=list(dict.fromkeys(name for part in parts for name in part.skills)),
    )


__all__ = [
    "get_race_proficiencies",
    "get_class_proficiencies",
    "get_background_proficiencies",
    "aggregate_proficiencies",
]
