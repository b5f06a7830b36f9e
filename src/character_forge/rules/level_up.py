"""Applying a level up to a character sheet.

:func:`~character_forge.rules.progression.calculate_level_up` works out
what the next level brings; :func:`apply_level_up` writes those numbers
and the player's choices onto a copy of the character.

Example:
    >>> levelled = apply_level_up(character, ability_increases={Ability.STR: 2})
    >>> levelled.level
    4
"""

from __future__ import annotations

from collections.abc import Mapping

from character_forge.core.constants import PC_ABILITY_SCORE_CAP
from character_forge.core.exceptions import ValidationError
from character_forge.core.logging import get_logger, log_context
from character_forge.data import RulesRepository, get_repository
from character_forge.models.character import AbilityScore, Character, HitDice, SpellcastingState, SrdFeatureRef
from character_forge.models.enums import Ability, SpellcastingType
from character_forge.models.progression import base_class_slug
from character_forge.rules.builder import DWARVEN_TOUGHNESS_RACES, calculate_skills
from character_forge.rules.equipment import recalculate_armor_class
from character_forge.rules.progression import (
    LevelUpSummary,
    calculate_level_up,
    get_modifier,
    roll_hp_gain,
)
from character_forge.rules.spellcasting import update_spellcasting_on_level_up


logger = get_logger(__name__)

ASI_POINTS = 2
"""Points an ability score improvement spreads over one or two abilities."""


def _check_improvement(
    character: Character,
    summary: LevelUpSummary,
    ability_increases: Mapping[Ability, int],
    feat: str | None,
) -> None:
    if not ability_increases and feat is None:
        return
    if not summary.grants_asi:
        raise ValidationError(
            f"Level {summary.to_level} does not grant an ability score improvement",
            field_name="ability_increases" if ability_increases else "feat",
        )
    if ability_increases and feat is not None:
        raise ValidationError(
            "Choose either ability score increases or a feat, not both",
            field_name="feat",
            invalid_value=feat,
        )
    if feat is not None:
        if feat in character.selected_feats:
            raise ValidationError(f"Feat already taken: {feat}", field_name="feat", invalid_value=feat)
        return

    if any(amount < 1 for amount in ability_increases.values()) or sum(ability_increases.values()) != ASI_POINTS:
        raise ValidationError(
            f"Ability score increases must add up to {ASI_POINTS}",
            field_name="ability_increases",
            invalid_value={ability.value: amount for ability, amount in ability_increases.items()},
        )
    for ability, amount in ability_increases.items():
        if character.abilities[ability].score + amount > PC_ABILITY_SCORE_CAP:
            raise ValidationError(
                f"{ability.full_name} cannot exceed {PC_ABILITY_SCORE_CAP}",
                field_name="ability_increases",
                invalid_value=ability.value,
            )


def _race_slug(race_name: str) -> str:
    return "-".join(race_name.lower().split())


def _refresh_features(
    character: Character,
    class_slug: str,
    to_level: int,
    repository: RulesRepository,
) -> None:
    base = base_class_slug(class_slug)
    class_features = repository.get_features_by_class(base, to_level)
    subclass_features = (
        repository.get_features_by_subclass(base, character.subclass, to_level) if character.subclass else []
    )

    character.srd_features = character.srd_features.model_copy(
        update={
            "class_features": [
                SrdFeatureRef(name=feature.name, slug=feature.slug, level=feature.level, source="class")
                for feature in class_features
            ],
            "subclass_features": [
                SrdFeatureRef(name=feature.name, slug=feature.slug, level=feature.level, source="subclass")
                for feature in subclass_features
            ],
        }
    )

    names = list(character.features_and_traits.class_features)
    for feature in [*class_features, *subclass_features]:
        if feature.level == to_level and feature.name not in names:
            names.append(feature.name)
    character.features_and_traits = character.features_and_traits.model_copy(update={"class_features": names})


def _learn_spells(state: SpellcastingState, spells: list[str]) -> SpellcastingState:
    """Add spells to a wizard's spellbook or a caster's known spells."""
    field = "spellbook" if state.spellcasting_type is SpellcastingType.WIZARD else "spells_known"
    current = list(getattr(state, field) or [])
    current.extend(slug for slug in spells if slug not in current)
    return state.model_copy(update={field: current})


def apply_level_up(
    character: Character,
    *,
    class_slug: str | None = None,
    roll_hit_points: bool = False,
    ability_increases: Mapping[Ability, int] | None = None,
    feat: str | None = None,
    subclass: str | None = None,
    fighting_style: str | None = None,
    spells_learned: list[str] | None = None,
    repository: RulesRepository | None = None,
) -> Character:
    """Raise a character by one level.

    Hit points grow by the fixed average gain, or by a rolled hit die
    when ``roll_hit_points`` is set, plus 1 for dwarven toughness. A
    Constitution increase also adds its new modifier retroactively for
    every level. Proficiency bonus, skills, initiative, armor class,
    features and spellcasting are recalculated for the new level.

    Args:
        character: The character gaining a level.
        class_slug: Class slug; defaults to the lowercased class name.
        roll_hit_points: Roll the hit die instead of taking the average.
        ability_increases: Ability score improvement, two points over one
            or two abilities. Only allowed on improvement levels.
        feat: Feat slug taken instead of ability score increases.
        subclass: Subclass slug chosen at this level.
        fighting_style: Fighting style chosen at this level.
        spells_learned: Spell slugs learned at this level. Wizards copy them
            into their spellbook, other casters add them to known spells.
        repository: Rule data; defaults to the shared repository.

    Returns:
        An updated copy of the character.

    Raises:
        ValidationError: If the character is already level 20 or a choice
            breaks the rules.
    """
    summary = calculate_level_up(character, class_slug)
    if summary is None:
        raise ValidationError(
            "Character is already at the maximum level",
            field_name="level",
            invalid_value=character.level,
        )

    slug = class_slug or character.character_class.lower()
    increases = dict(ability_increases or {})
    _check_improvement(character, summary, increases, feat)
    repository = repository or get_repository()

    with log_context(character_id=character.id, character_class=slug, level=summary.to_level):
        updated = character.model_copy(deep=True)

        abilities = dict(updated.abilities)
        for ability, amount in increases.items():
            score = abilities[ability].score + amount
            abilities[ability] = AbilityScore(score=score, modifier=get_modifier(score))
        updated.abilities = abilities

        if roll_hit_points:
            hp_gained = roll_hp_gain(summary.hit_die, summary.con_modifier)
        else:
            hp_gained = summary.average_hp_gain
        if _race_slug(updated.race) in DWARVEN_TOUGHNESS_RACES:
            hp_gained += 1
        hp_gained += (abilities[Ability.CON].modifier - summary.con_modifier) * summary.to_level

        updated.level = summary.to_level
        updated.max_hit_points += hp_gained
        updated.hit_points = min(updated.max_hit_points, updated.hit_points + hp_gained)
        updated.hit_dice = HitDice(
            current=updated.hit_dice.current + 1,
            max=updated.hit_dice.max + 1,
            die_type=updated.hit_dice.die_type,
        )
        updated.proficiency_bonus = summary.proficiency_bonus

        proficient = {skill for skill, value in updated.skills.items() if value.proficient}
        updated.skills = calculate_skills(abilities, proficient, summary.proficiency_bonus)
        if Ability.DEX in increases:
            updated.initiative = abilities[Ability.DEX].modifier
            updated.armor_class = recalculate_armor_class(updated, repository)

        if feat is not None:
            updated.selected_feats = [*updated.selected_feats, feat]
        if subclass is not None:
            updated.subclass = subclass
        if fighting_style is not None:
            updated.selected_fighting_style = fighting_style

        _refresh_features(updated, slug, summary.to_level, repository)
        if fighting_style is not None:
            traits = updated.features_and_traits
            updated.features_and_traits = traits.model_copy(
                update={"class_features": [*traits.class_features, f"Fighting Style: {fighting_style}"]}
            )
        updated.spellcasting = update_spellcasting_on_level_up(updated, summary.to_level, slug, repository)
        if spells_learned:
            if updated.spellcasting is None:
                raise ValidationError(
                    f"{updated.character_class} does not cast spells",
                    field_name="spells_learned",
                    invalid_value=list(spells_learned),
                )
            updated.spellcasting = _learn_spells(updated.spellcasting, spells_learned)
        updated.touch()

        logger.info(
            "Character levelled up",
            hp_gained=hp_gained,
            proficiency_bonus=summary.proficiency_bonus,
            ability_increases={ability.value: amount for ability, amount in increases.items()},
            feat=feat,
        )
    return updated


__all__ = ["ASI_POINTS", "apply_level_up"]
