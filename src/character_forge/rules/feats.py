"""Feat availability and prerequisite rules.

Handles both prerequisite styles in the rule data: the free-text
``prerequisite`` of 2014 feats ("Strength 13 or higher") and the
structured ``prerequisites`` of 2024 feats.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable

from character_forge.core.constants import UNASSIGNED_ABILITY_SCORE
from character_forge.models.creation import CharacterCreationData
from character_forge.models.enums import Ability, FeatCategory, FeatContext
from character_forge.models.progression import CLASS_HIT_DIE, base_class_slug
from character_forge.models.reference import Feat
from character_forge.models.results import ValidationResult
from character_forge.rules.spellcasting import is_spellcaster


FIGHTING_STYLE_CLASSES = frozenset({"fighter", "paladin", "ranger"})
GENERAL_FEAT_MIN_LEVEL = 4
EPIC_BOON_MIN_LEVEL = 19

_ABILITY_PATTERN = re.compile(
    r"\b(strength|dexterity|constitution|intelligence|wisdom|charisma|str|dex|con|int|wis|cha)\s+(\d+)",
    re.IGNORECASE,
)
_LEVEL_PATTERN = re.compile(r"level\s+(\d+)", re.IGNORECASE)
_ALTERNATIVE_PATTERN = re.compile(r"\bor\b(?!\s+higher)", re.IGNORECASE)


def calculate_feat_availability(level: int) -> int:
    """Feats a character may have at ``level``: one per four levels after 1st."""
    return max(0, (level - 1) // 4)


def can_select_more_feats(current_feats: list[str], level: int) -> bool:
    """Whether another feat fits under the level's allowance."""
    return len(current_feats) < calculate_feat_availability(level)


# =============================================================================
# Prerequisites
# =============================================================================


def _score(data: CharacterCreationData, ability: Ability) -> int:
    return data.abilities.get(ability) or UNASSIGNED_ABILITY_SCORE


def _check_text_prerequisite(prerequisite: str, data: CharacterCreationData) -> bool:
    """Evaluate a free-text prerequisite.

    Every ability minimum must be met unless the text joins them with
    "or" ("Strength 13 or Dexterity 13"), in which case one is enough.
    A stated character level is enforced as well, and a prerequisite
    naming classes requires one of them. Anything else (armor
    proficiencies, the ability to cast a spell) is accepted.
    """
    lowered = prerequisite.lower()

    ability_matches = list(_ABILITY_PATTERN.finditer(prerequisite))
    if ability_matches:
        met = [_score(data, Ability.from_srd(match.group(1))) >= int(match.group(2)) for match in ability_matches]
        gaps = (prerequisite[a.end() : b.start()] for a, b in zip(ability_matches, ability_matches[1:]))
        either = any(_ALTERNATIVE_PATTERN.search(gap) for gap in gaps)
        if not (any(met) if either else all(met)):
            return False

    level_match = _LEVEL_PATTERN.search(prerequisite)
    if level_match and data.level < int(level_match.group(1)):
        return False

    named_classes = [slug for slug in CLASS_HIT_DIE if re.search(rf"\b{slug}\b", lowered)]
    if named_classes and data.class_slug:
        return base_class_slug(data.class_slug) in named_classes

    return True


def check_feat_prerequisites(feat: Feat, data: CharacterCreationData) -> bool:
    """Whether the creation data meets a feat's prerequisites.

    Structured prerequisites win over the free-text form when a feat has
    both. Unassigned ability scores count as 10.
    """
    prerequisites = feat.prerequisites
    if prerequisites is not None:
        if prerequisites.level and data.level < prerequisites.level:
            return False
        for ability, required in prerequisites.stats.items():
            if _score(data, ability) < required:
                return False
        if prerequisites.spellcasting and not is_spellcaster(data.class_slug):
            return False
        return True

    if feat.prerequisite:
        return _check_text_prerequisite(feat.prerequisite, data)
    return True


def filter_available_feats(feats: Iterable[Feat], data: CharacterCreationData) -> list[Feat]:
    """Feats whose prerequisites the character meets."""
    return [feat for feat in feats if check_feat_prerequisites(feat, data)]


def feat_provides_ability_increase(feat: Feat) -> bool:
    """Whether the feat raises an ability score."""
    return bool(feat.ability_score_increase)


def _allowed_in_context(feat: Feat, data: CharacterCreationData, context: FeatContext) -> bool:
    if context is FeatContext.BACKGROUND:
        return feat.category is FeatCategory.ORIGIN

    if context is FeatContext.FIGHTING_STYLE:
        return (
            base_class_slug(data.class_slug) in FIGHTING_STYLE_CLASSES
            and feat.category is FeatCategory.FIGHTING_STYLE
        )

    if data.level < GENERAL_FEAT_MIN_LEVEL:
        return False
    if feat.category is FeatCategory.EPIC_BOON:
        return data.level >= EPIC_BOON_MIN_LEVEL
    return feat.category in (FeatCategory.GENERAL, FeatCategory.ORIGIN)


def get_available_feats_for_character(
    feats: Iterable[Feat],
    data: CharacterCreationData,
    context: FeatContext = FeatContext.ASI,
) -> list[Feat]:
    """Feats a character can pick in a given context.

    Args:
        feats: All feats.
        data: The character's creation data.
        context: ``background`` offers origin feats, ``fighting_style``
            offers fighting style feats to fighters, paladins and rangers,
            and ``asi`` offers general and origin feats from 4th level plus
            epic boons from 19th.

    Returns:
        Feats allowed in the context whose prerequisites are met.
    """
    return [
        feat
        for feat in feats
        if _allowed_in_context(feat, data, context) and check_feat_prerequisites(feat, data)
    ]


def validate_feat_selection(
    selected_feats: list[str],
    feats: Iterable[Feat],
    data: CharacterCreationData,
) -> ValidationResult:
    """Check the number, uniqueness and prerequisites of selected feats."""
    errors: list[str] = []
    max_feats = calculate_feat_availability(data.level)

    if len(selected_feats) > max_feats:
        errors.append(f"Too many feats selected. Maximum {max_feats} allowed at level {data.level}.")

    if any(count > 1 for count in Counter(selected_feats).values()):
        errors.append("Duplicate feats selected.")

    by_slug = {feat.slug: feat for feat in feats}
    for slug in dict.fromkeys(selected_feats):
        feat = by_slug.get(slug)
        if feat is not None and not check_feat_prerequisites(feat, data):
            errors.append(f"Prerequisites not met for feat: {feat.name}")

    return ValidationResult.from_errors(errors)


__all__ = [
    "FIGHTING_STYLE_CLASSES",
    "calculate_feat_availability",
    "can_select_more_feats",
    "check_feat_prerequisites",
    "filter_available_feats",
    "feat_provides_ability_increase",
    "get_available_feats_for_character",
    "validate_feat_selection",
]
