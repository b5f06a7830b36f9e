"""Character assembly.

Turns the creation wizard's :class:`CharacterCreationData` into a complete
:class:`Character` sheet: final ability scores, hit points, skills,
spellcasting, starting gear, armor class, features and languages.

Example:
    >>> data = CharacterCreationData(name="Thorin", race_slug="hill-dwarf",
    ...     class_slug="fighter", background="Soldier", abilities=scores)
    >>> character = calculate_character_stats(data)
    >>> character.hit_dice.die_type
    10
"""

from __future__ import annotations

import re

from character_forge.core.constants import MIN_ABILITY_SCORE
from character_forge.core.exceptions import CharacterBuildError
from character_forge.core.logging import get_logger, log_context
from character_forge.data import RulesRepository, get_repository
from character_forge.models.character import (
    AbilityScore,
    Character,
    Currency,
    FeaturesAndTraits,
    HitDice,
    InventoryItem,
    SkillValue,
    SpellcastingState,
    SrdFeatureRef,
    SrdFeatures,
)
from character_forge.models.creation import CharacterCreationData
from character_forge.models.enums import Ability, HPCalculationMethod, Skill
from character_forge.models.reference import (
    CharacterClass,
    Equipment,
    EquipmentOption,
    EquipmentPackage,
    Race,
)
from character_forge.rules.equipment import QuickStartLoadout, calculate_armor_class
from character_forge.rules.languages import calculate_known_languages
from character_forge.rules.proficiencies import aggregate_proficiencies
from character_forge.rules.progression import (
    average_hp_gain,
    get_hit_die_for_class,
    get_modifier,
    get_proficiency_bonus,
)
from character_forge.rules.spellcasting import (
    initialize_spellcasting,
    migrate_spell_selection_to_character,
)


logger = get_logger(__name__)

DWARVEN_TOUGHNESS_RACES = frozenset({"dwarf", "hill-dwarf"})
"""Races that gain 1 extra hit point per level."""

# =============================================================================
# Abilities and Hit Points
# =============================================================================


def calculate_final_abilities(data: CharacterCreationData, race: Race) -> dict[Ability, AbilityScore]:
    """Raw scores plus racial and 2024 background bonuses, with modifiers."""
    background_bonuses = (
        data.background_ability_choices.bonuses if data.background_ability_choices else {}
    )
    final: dict[Ability, AbilityScore] = {}
    for ability in Ability:
        score = (
            data.abilities.get(ability, 0)
            + race.ability_bonuses.get(ability, 0)
            + background_bonuses.get(ability, 0)
        )
        score = max(MIN_ABILITY_SCORE, score)
        final[ability] = AbilityScore(score=score, modifier=get_modifier(score))
    return final


def calculate_max_hit_points(
    data: CharacterCreationData,
    character_class: CharacterClass,
    con_modifier: int,
) -> int:
    """Maximum hit points for a new character.

    First level uses the full hit die, or the rolled value when the player
    rolled. Each later level adds the fixed average gain. Dwarven
    toughness adds 1 per level.
    """
    if data.hp_calculation_method is HPCalculationMethod.ROLLED and data.rolled_hp:
        first_level = data.rolled_hp
    else:
        first_level = character_class.hit_die

    hit_points = max(1, first_level + con_modifier)
    hit_points += (data.level - 1) * average_hp_gain(character_class.hit_die, con_modifier)
    if data.race_slug in DWARVEN_TOUGHNESS_RACES:
        hit_points += data.level
    return hit_points


def calculate_skills(
    abilities: dict[Ability, AbilityScore],
    proficient_skills: set[Skill],
    proficiency_bonus: int,
) -> dict[Skill, SkillValue]:
    """All eighteen skills with the proficiency bonus applied where proficient."""
    skills: dict[Skill, SkillValue] = {}
    for skill in Skill:
        proficient = skill in proficient_skills
        value = abilities[skill.ability].modifier + (proficiency_bonus if proficient else 0)
        skills[skill] = SkillValue(value=value, proficient=proficient)
    return skills


# =============================================================================
# Inventory
# =============================================================================


def _option_slug(name: str) -> str:
    return re.sub(r"[^a-z0-9-]", "", re.sub(r"\s+", "-", name.lower()))


def _find_equipment(option: EquipmentOption, repository: RulesRepository) -> Equipment | None:
    slug = _option_slug(option.name)
    lowered = option.name.lower()
    return next(
        (
            item
            for item in repository.load_equipment()
            if item.slug == slug or item.name.lower() == lowered
        ),
        None,
    )


def select_equipment_package(level: int, repository: RulesRepository) -> EquipmentPackage | None:
    """The package for the character's level, else the first package."""
    packages = repository.load_equipment_packages()
    if not packages:
        return None
    return next((package for package in packages if package.level == level), packages[0])


def inventory_from_quick_start(loadout: QuickStartLoadout) -> list[InventoryItem]:
    """Inventory entries for a quick-start loadout, keeping equipped flags."""
    return [
        InventoryItem(
            equipment_slug=item.equipment_slug,
            quantity=item.quantity,
            equipped=item.equipped,
        )
        for item in loadout.items
    ]


def build_inventory(
    data: CharacterCreationData,
    package: EquipmentPackage | None,
    repository: RulesRepository,
) -> list[InventoryItem]:
    """Starting inventory from the package, class choices and extra items.

    Class choice items that match no known equipment are dropped. Extra
    starting items merge into existing entries with the same slug.
    """
    inventory: list[InventoryItem] = []

    if package is not None:
        for package_item in package.items:
            inventory.append(
                InventoryItem(
                    equipment_slug=package_item.resolved_slug,
                    quantity=package_item.quantity,
                    equipped=package_item.equipped,
                )
            )

    for choice in data.equipment_choices:
        if choice.selected is None or not 0 <= choice.selected < len(choice.options):
            continue
        for option in choice.options[choice.selected]:
            equipment = _find_equipment(option, repository)
            if equipment is None:
                logger.debug("Skipping unmatched equipment choice", item=option.name)
                continue
            inventory.append(InventoryItem(equipment_slug=equipment.slug, quantity=option.quantity))

    by_slug = {item.equipment_slug: item for item in inventory}
    for extra in data.starting_inventory:
        existing = by_slug.get(extra.equipment_slug)
        if existing is not None:
            existing.quantity += extra.quantity
            existing.equipped = existing.equipped or extra.equipped
        else:
            entry = extra.model_copy()
            inventory.append(entry)
            by_slug[entry.equipment_slug] = entry

    return inventory


def resolve_equipped_items(
    inventory: list[InventoryItem],
    repository: RulesRepository,
) -> tuple[str | None, list[str]]:
    """Equipped armor slug and wielded weapon and shield slugs.

    The first equipped body armor wins the armor slot.
    """
    armor: str | None = None
    wielded: list[str] = []
    for item in inventory:
        if not item.equipped:
            continue
        equipment = repository.get_equipment_by_slug(item.equipment_slug)
        if equipment is None:
            continue
        if equipment.is_armor and not equipment.is_shield:
            armor = armor or equipment.slug
        elif (equipment.is_shield or equipment.is_weapon) and equipment.slug not in wielded:
            wielded.append(equipment.slug)
    return armor, wielded


# =============================================================================
# Features and Spellcasting
# =============================================================================


def _build_features(
    data: CharacterCreationData,
    character_class: CharacterClass,
    repository: RulesRepository,
) -> tuple[SrdFeatures, list[str]]:
    class_features = repository.get_features_by_class(character_class.slug, data.level)
    subclass_features = (
        repository.get_features_by_subclass(character_class.slug, data.subclass_slug, data.level)
        if data.subclass_slug
        else []
    )

    srd_features = SrdFeatures(
        class_features=[
            SrdFeatureRef(name=feature.name, slug=feature.slug, level=feature.level, source="class")
            for feature in class_features
        ],
        subclass_features=[
            SrdFeatureRef(name=feature.name, slug=feature.slug, level=feature.level, source="subclass")
            for feature in subclass_features
        ],
    )

    names = list(character_class.class_features) or list(
        dict.fromkeys(feature.name for feature in class_features)
    )
    if data.selected_fighting_style:
        names.append(f"Fighting Style: {data.selected_fighting_style}")
    return srd_features, names


def _has_spell_picks(data: CharacterCreationData) -> bool:
    selection = data.spell_selection
    return any(
        (
            selection.selected_cantrips,
            selection.known_spells,
            selection.prepared_spells,
            selection.spellbook,
            selection.daily_prepared,
            selection.selected_spells,
        )
    )


def _build_spellcasting(
    data: CharacterCreationData,
    character_class: CharacterClass,
    scores: dict[Ability, int],
    repository: RulesRepository,
) -> SpellcastingState | None:
    if character_class.spellcasting is None:
        return None
    if _has_spell_picks(data):
        return migrate_spell_selection_to_character(
            data.spell_selection,
            character_class,
            scores,
            data.level,
            repository,
            data.subclass_slug,
        )
    return initialize_spellcasting(
        character_class.slug,
        data.level,
        scores,
        repository,
        data.subclass_slug,
    )


# =============================================================================
# Character
# =============================================================================


def _assemble_character(
    data: CharacterCreationData,
    race: Race,
    character_class: CharacterClass,
    repository: RulesRepository,
) -> Character:
    abilities = calculate_final_abilities(data, race)
    scores = {ability: entry.score for ability, entry in abilities.items()}
    dex_modifier = abilities[Ability.DEX].modifier
    proficiency_bonus = get_proficiency_bonus(data.level)
    max_hit_points = calculate_max_hit_points(data, character_class, abilities[Ability.CON].modifier)

    background = repository.get_background(data.background) if data.background else None
    proficiencies = aggregate_proficiencies(race, character_class, background, data.selected_skills)
    proficient_skills = {skill for skill in Skill if skill.value in proficiencies.skills}

    package = select_equipment_package(data.level, repository)
    inventory = build_inventory(data, package, repository)
    equipped_armor, equipped_weapons = resolve_equipped_items(inventory, repository)
    armor = repository.get_equipment_by_slug(equipped_armor) if equipped_armor else None
    has_shield = any(
        item is not None and item.is_shield
        for item in map(repository.get_equipment_by_slug, equipped_weapons)
    )

    srd_features, class_feature_names = _build_features(data, character_class, repository)

    return Character(
        name=data.name or "Unnamed Hero",
        race=race.name,
        character_class=character_class.name,
        subclass=data.subclass_slug,
        level=data.level,
        alignment=data.alignment,
        background=data.background,
        languages=calculate_known_languages(data, repository),
        proficiency_bonus=proficiency_bonus,
        armor_class=calculate_armor_class(dex_modifier, armor, has_shield),
        hit_points=max_hit_points,
        max_hit_points=max_hit_points,
        hit_dice=HitDice(
            current=data.level,
            max=data.level,
            die_type=get_hit_die_for_class(data.class_slug),
        ),
        speed=race.speed,
        initiative=dex_modifier,
        abilities=abilities,
        skills=calculate_skills(abilities, proficient_skills, proficiency_bonus),
        features_and_traits=FeaturesAndTraits(
            personality=data.personality,
            ideals=data.ideals,
            bonds=data.bonds,
            flaws=data.flaws,
            class_features=class_feature_names,
            racial_traits=list(race.racial_traits),
        ),
        spellcasting=_build_spellcasting(data, character_class, scores, repository),
        inventory=inventory,
        currency=Currency(gp=package.starting_gold if package else 0),
        equipped_armor=equipped_armor,
        equipped_weapons=equipped_weapons,
        selected_fighting_style=data.selected_fighting_style,
        srd_features=srd_features,
        selected_feats=list(data.selected_feats),
    )


def calculate_character_stats(
    data: CharacterCreationData,
    repository: RulesRepository | None = None,
) -> Character:
    """Assemble a complete character from the wizard's choices.

    Args:
        data: The accumulated creation wizard inputs.
        repository: Rule data; defaults to the shared repository.

    Returns:
        A new character with a fresh id.

    Raises:
        CharacterBuildError: If the race or class is unknown.
    """
    repository = repository or get_repository()
    race = repository.get_race(data.race_slug)
    character_class = repository.get_class(data.class_slug)

    if race is None or character_class is None:
        missing = [
            field
            for field, found in (("race_slug", race), ("class_slug", character_class))
            if found is None
        ]
        raise CharacterBuildError("Incomplete creation data.", missing=missing)

    with log_context(race=race.slug, character_class=character_class.slug, level=data.level):
        character = _assemble_character(data, race, character_class, repository)

    logger.info(
        "Character built",
        character_id=character.id,
        race=race.slug,
        character_class=character_class.slug,
        level=data.level,
    )
    return character


__all__ = [
    "DWARVEN_TOUGHNESS_RACES",
    "calculate_final_abilities",
    "calculate_max_hit_points",
    "calculate_skills",
    "select_equipment_package",
    "inventory_from_quick_start",
    "build_inventory",
    "resolve_equipped_items",
    "calculate_character_stats",
]
