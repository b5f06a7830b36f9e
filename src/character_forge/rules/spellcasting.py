"""Spellcasting rules.

Derived spellcasting numbers (save DC, attack bonus, prepared spell cap),
spell slot tables, creation-wizard spell selection checks and the
spellcasting state of saved characters.

Spell slot lists are normalized to length 10 with index 0 as the cantrip
placeholder, so ``slots[3]`` is the number of 3rd-level slots.

Example:
    >>> calculate_spell_save_dc({Ability.INT: 16}, Ability.INT)
    13
    >>> get_spell_slots("wizard", 3)
    [0, 4, 2, 0, 0, 0, 0, 0, 0, 0]
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from character_forge.core.constants import SPELL_SLOT_LEVELS, UNASSIGNED_ABILITY_SCORE
from character_forge.core.logging import get_logger
from character_forge.data import RulesRepository, get_repository
from character_forge.models.character import Character, SpellcastingState
from character_forge.models.creation import SpellSelectionData
from character_forge.models.enums import (
    Ability,
    CasterProgression,
    SpellcastingType,
    SpellLearningType,
)
from character_forge.models.progression import (
    CLASS_CASTER_PROGRESSION,
    FULL_CASTER_SLOTS,
    HALF_CASTER_SLOTS,
    SPELL_LEARNING_RULES,
    SPELLCASTING_ABILITY,
    SPELLCASTING_TYPE_MAP,
    THIRD_CASTER_SLOTS,
    THIRD_CASTER_SUBCLASSES,
    WARLOCK_PACT_SLOTS,
    SpellLearningRule,
    base_class_slug,
)
from character_forge.models.reference import CharacterClass, Spell
from character_forge.models.results import ValidationResult
from character_forge.rules.progression import (
    cantrips_known_at,
    get_modifier,
    get_proficiency_bonus,
)


logger = get_logger(__name__)

DEFAULT_WIZARD_INT = 16
"""Intelligence assumed when checking a wizard's daily preparation without scores."""

_ZERO_BASED_SLOT_CLASSES = frozenset({"bard"})


# =============================================================================
# Class Lookups
# =============================================================================


def get_spellcasting_type(class_slug: str) -> SpellcastingType | None:
    """Spellcasting type of a class, or None for non-casters."""
    return SPELLCASTING_TYPE_MAP.get(base_class_slug(class_slug))


def is_spellcaster(class_slug: str) -> bool:
    """Whether the class casts spells."""
    return get_spellcasting_type(class_slug) is not None


def get_spellcasting_ability(class_slug: str) -> Ability | None:
    """Ability the class casts with, or None for non-casters."""
    return SPELLCASTING_ABILITY.get(base_class_slug(class_slug))


def get_learning_rule(class_slug: str) -> SpellLearningRule:
    """Spell learning rule for a class; unknown classes learn no spells."""
    return SPELL_LEARNING_RULES.get(
        base_class_slug(class_slug),
        SpellLearningRule(SpellLearningType.NONE),
    )


# =============================================================================
# Derived Numbers
# =============================================================================


def _ability_modifier(abilities: Mapping[Ability, int], ability: Ability) -> int:
    return get_modifier(abilities.get(ability, UNASSIGNED_ABILITY_SCORE))


def calculate_spell_save_dc(
    abilities: Mapping[Ability, int],
    spellcasting_ability: Ability,
    level: int = 1,
) -> int:
    """Spell save DC: 8 + ability modifier + proficiency bonus.

    Args:
        abilities: Final ability scores.
        spellcasting_ability: The class's casting ability.
        level: Character level, for the proficiency bonus.

    Returns:
        The save DC.
    """
    return 8 + _ability_modifier(abilities, spellcasting_ability) + get_proficiency_bonus(level)


def calculate_spell_attack_bonus(
    abilities: Mapping[Ability, int],
    spellcasting_ability: Ability,
    level: int = 1,
) -> int:
    """Spell attack bonus: ability modifier + proficiency bonus."""
    return _ability_modifier(abilities, spellcasting_ability) + get_proficiency_bonus(level)


def get_max_prepared_spells(
    abilities: Mapping[Ability, int],
    spellcasting_ability: Ability,
    level: int,
) -> int:
    """Spells a prepared caster can prepare: ability modifier + level, at least 1."""
    return max(1, _ability_modifier(abilities, spellcasting_ability) + level)


# =============================================================================
# Spell Slots
# =============================================================================


def normalize_spell_slots(class_slug: str, raw_slots: Sequence[int] | None = None) -> list[int]:
    """Normalize a raw slot row to the cantrip-placeholder layout.

    Bard rows store 1st-level slots at index 0 and are shifted right.
    Other rows carry cantrips known at index 0, which is zeroed.

    Example:
        >>> normalize_spell_slots("bard", [2])
        [0, 2, 0, 0, 0, 0, 0, 0, 0, 0]
        >>> normalize_spell_slots("wizard", [3, 2])
        [0, 2, 0, 0, 0, 0, 0, 0, 0, 0]
    """
    padded = list(raw_slots or [])
    padded.extend([0] * (SPELL_SLOT_LEVELS - len(padded)))

    if base_class_slug(class_slug) in _ZERO_BASED_SLOT_CLASSES:
        return [0, *padded][:SPELL_SLOT_LEVELS]
    return [0, *padded[1:SPELL_SLOT_LEVELS]]


def get_caster_progression(class_slug: str, subclass_slug: str | None = None) -> CasterProgression:
    """Slot progression of a class, counting third-caster subclasses."""
    if subclass_slug and subclass_slug in THIRD_CASTER_SUBCLASSES:
        return CasterProgression.THIRD
    return CLASS_CASTER_PROGRESSION.get(base_class_slug(class_slug), CasterProgression.NONE)


def get_spell_slots(class_slug: str, level: int, subclass_slug: str | None = None) -> list[int]:
    """Normalized spell slots for a class at a level.

    Args:
        class_slug: Class slug.
        level: Character level (1-20).
        subclass_slug: Subclass slug; Eldritch Knights and Arcane
            Tricksters use the third-caster table.

    Returns:
        Length-10 list, index 0 unused.
    """
    slots = [0] * SPELL_SLOT_LEVELS
    progression = get_caster_progression(class_slug, subclass_slug)

    if progression is CasterProgression.PACT:
        count, slot_level = WARLOCK_PACT_SLOTS.get(level, (0, 0))
        if slot_level:
            slots[slot_level] = count
        return slots

    table = {
        CasterProgression.FULL: FULL_CASTER_SLOTS,
        CasterProgression.HALF: HALF_CASTER_SLOTS,
        CasterProgression.THIRD: THIRD_CASTER_SLOTS,
    }.get(progression)
    if table is None:
        return slots

    for slot_level, count in table.get(level, {}).items():
        slots[slot_level] = count
    return slots


def get_highest_spell_slot_level(slots: Sequence[int]) -> int:
    """Highest spell level with at least one slot in a normalized list."""
    for slot_level in range(len(slots) - 1, 0, -1):
        if slots[slot_level] > 0:
            return slot_level
    return 0


# =============================================================================
# Creation Wizard
# =============================================================================


@dataclass(frozen=True)
class AvailableSpells:
    """Spells a new character may choose from.

    Attributes:
        cantrips: Cantrips on the class list.
        spells: Leveled spells the character has slots for.
    """

    cantrips: list[Spell] = field(default_factory=list)
    spells: list[Spell] = field(default_factory=list)


@dataclass(frozen=True)
class SpellRequirements:
    """Spell counts a class must pick at a level.

    Attributes:
        cantrips: Cantrips to select.
        spells: Known or prepared spells, or spellbook size for wizards.
    """

    cantrips: int
    spells: int


def get_spell_requirements(character_class: CharacterClass, level: int = 1) -> SpellRequirements:
    """Cantrip and spell counts for a class at a level.

    First-level counts come from the class data; later levels come from
    the class progression tables.
    """
    spellcasting = character_class.spellcasting
    if spellcasting is None:
        return SpellRequirements(cantrips=0, spells=0)
    if level <= 1:
        return SpellRequirements(
            cantrips=spellcasting.cantrips_known,
            spells=spellcasting.spells_known_or_prepared,
        )
    return SpellRequirements(
        cantrips=cantrips_known_at(character_class.slug, level),
        spells=get_learning_rule(character_class.slug).count_at(level),
    )


def _casting_ability(character_class: CharacterClass) -> Ability:
    if character_class.spellcasting is not None:
        return character_class.spellcasting.ability
    return get_spellcasting_ability(character_class.slug) or Ability.INT


def validate_spell_selection(
    selection: SpellSelectionData,
    character_class: CharacterClass,
    level: int = 1,
    abilities: Mapping[Ability, int] | None = None,
) -> ValidationResult:
    """Check creation-wizard spell picks against the class's counts.

    Non-casters are always valid. Wizards without ability scores are
    checked against an Intelligence of 16.

    Args:
        selection: The wizard's spell picks.
        character_class: The chosen class.
        level: Character level.
        abilities: Final ability scores, when known.

    Returns:
        ValidationResult listing every count that is off.
    """
    spellcasting_type = get_spellcasting_type(character_class.slug)
    if spellcasting_type is None or character_class.spellcasting is None:
        return ValidationResult(is_valid=True)

    required = get_spell_requirements(character_class, level)
    errors: list[str] = []

    if len(selection.selected_cantrips) != required.cantrips:
        errors.append(f"Must select exactly {required.cantrips} cantrips")

    if spellcasting_type is SpellcastingType.KNOWN:
        if selection.known_spells is None or len(selection.known_spells) != required.spells:
            errors.append(f"Must select exactly {required.spells} known spells")
    elif spellcasting_type is SpellcastingType.PREPARED:
        if selection.prepared_spells is None or len(selection.prepared_spells) != required.spells:
            errors.append(f"Must select exactly {required.spells} prepared spells")
    else:
        if selection.spellbook is None or len(selection.spellbook) != required.spells:
            errors.append(f"Must select exactly {required.spells} spells for your spellbook")
        scores = abilities or {Ability.INT: DEFAULT_WIZARD_INT}
        max_prepared = get_max_prepared_spells(scores, Ability.INT, level)
        if selection.daily_prepared is None or len(selection.daily_prepared) > max_prepared:
            errors.append(f"Can prepare at most {max_prepared} spells per day")

    return ValidationResult.from_errors(errors)


def has_spellcasting_at_level(class_slug: str, repository: RulesRepository | None = None) -> bool:
    """Whether a new character of the class picks any cantrips or spells."""
    repository = repository or get_repository()
    character_class = repository.get_class(class_slug)
    if character_class is None or character_class.spellcasting is None:
        return False
    spellcasting = character_class.spellcasting
    return spellcasting.cantrips_known > 0 or spellcasting.spells_known_or_prepared > 0


def get_available_spells_for_creation(
    class_slug: str,
    level: int,
    repository: RulesRepository | None = None,
) -> AvailableSpells:
    """Cantrips plus the leveled spells a character can cast at ``level``.

    Leveled spells run from 1st level up to the highest slot level the
    class has at ``level``.
    """
    repository = repository or get_repository()
    highest = get_highest_spell_slot_level(get_spell_slots(class_slug, level))
    spells = [
        spell
        for spell in repository.get_spells_for_class(class_slug)
        if 1 <= spell.level <= highest
    ]
    return AvailableSpells(
        cantrips=repository.get_cantrips_by_class(class_slug),
        spells=spells,
    )


def are_spell_selections_complete(
    selection: SpellSelectionData,
    class_slug: str,
    level: int,
    abilities: Mapping[Ability, int],
    repository: RulesRepository | None = None,
) -> bool:
    """Whether every required spell pick has been made.

    Wizards must also fill their daily preparation exactly.
    """
    repository = repository or get_repository()
    character_class = repository.get_class(class_slug)
    if character_class is None or character_class.spellcasting is None:
        return True

    required = get_spell_requirements(character_class, level)
    if len(selection.selected_cantrips) != required.cantrips:
        return False

    spellcasting_type = get_spellcasting_type(class_slug)
    if spellcasting_type is SpellcastingType.KNOWN:
        return len(selection.known_spells or []) == required.spells
    if spellcasting_type is SpellcastingType.PREPARED:
        return len(selection.prepared_spells or []) == required.spells
    if spellcasting_type is SpellcastingType.WIZARD:
        max_prepared = get_max_prepared_spells(abilities, Ability.INT, level)
        return (
            len(selection.spellbook or []) == required.spells
            and len(selection.daily_prepared or []) == max_prepared
        )
    return False


def cleanup_invalid_spell_selections(
    selection: SpellSelectionData,
    class_slug: str,
    level: int,
    abilities: Mapping[Ability, int],
    repository: RulesRepository | None = None,
) -> SpellSelectionData:
    """Truncate each pick list to what the class allows.

    Used when the class, level or scores change after spells were picked.

    Returns:
        A new selection; the input is not modified.
    """
    repository = repository or get_repository()
    character_class = repository.get_class(class_slug)
    if character_class is None or character_class.spellcasting is None:
        return selection

    required = get_spell_requirements(character_class, level)
    updates: dict[str, list[str]] = {
        "selected_cantrips": selection.selected_cantrips[: required.cantrips],
    }

    spellcasting_type = get_spellcasting_type(class_slug)
    if spellcasting_type is SpellcastingType.KNOWN:
        updates["known_spells"] = (selection.known_spells or [])[: required.spells]
    elif spellcasting_type is SpellcastingType.PREPARED:
        updates["prepared_spells"] = (selection.prepared_spells or [])[: required.spells]
    elif spellcasting_type is SpellcastingType.WIZARD:
        max_prepared = get_max_prepared_spells(abilities, Ability.INT, level)
        updates["spellbook"] = (selection.spellbook or [])[: required.spells]
        updates["daily_prepared"] = (selection.daily_prepared or [])[:max_prepared]

    return selection.model_copy(update=updates)


# =============================================================================
# Character Spellcasting State
# =============================================================================


def _base_state(
    class_slug: str,
    ability: Ability,
    spellcasting_type: SpellcastingType,
    abilities: Mapping[Ability, int],
    level: int,
    subclass_slug: str | None = None,
) -> dict[str, object]:
    slots = get_spell_slots(class_slug, level, subclass_slug)
    return {
        "ability": ability,
        "spell_save_dc": calculate_spell_save_dc(abilities, ability, level),
        "spell_attack_bonus": calculate_spell_attack_bonus(abilities, ability, level),
        "spell_slots": slots,
        "used_spell_slots": [0] * len(slots),
        "spellcasting_type": spellcasting_type,
    }


def migrate_spell_selection_to_character(
    selection: SpellSelectionData,
    character_class: CharacterClass,
    abilities: Mapping[Ability, int],
    level: int = 1,
    repository: RulesRepository | None = None,
    subclass_slug: str | None = None,
) -> SpellcastingState | None:
    """Turn creation-wizard spell picks into a character's spellcasting state.

    ``selected_spells`` is read as a fallback for selections saved before
    the per-type lists existed. Prepared casters know their whole
    castable class list.

    Returns:
        The spellcasting state, or None for non-casters.
    """
    spellcasting_type = get_spellcasting_type(character_class.slug)
    if spellcasting_type is None or character_class.spellcasting is None:
        return None

    state = _base_state(
        character_class.slug,
        character_class.spellcasting.ability,
        spellcasting_type,
        abilities,
        level,
        subclass_slug,
    )
    state["cantrips_known"] = list(selection.selected_cantrips)
    state["cantrip_choices_by_level"] = {level: ",".join(selection.selected_cantrips)}

    legacy = selection.selected_spells or []
    learning = get_learning_rule(character_class.slug).type
    if learning is SpellLearningType.KNOWN:
        state["spells_known"] = list(selection.known_spells or legacy)
    elif learning is SpellLearningType.PREPARED:
        available = get_available_spells_for_creation(character_class.slug, level, repository)
        state["spells_known"] = [spell.slug for spell in available.spells]
        state["prepared_spells"] = list(selection.prepared_spells or legacy)
    elif learning is SpellLearningType.SPELLBOOK:
        state["spellbook"] = list(selection.spellbook or legacy)
        state["prepared_spells"] = list(selection.daily_prepared or [])

    logger.debug(
        "Migrated spell selection",
        class_slug=character_class.slug,
        level=level,
        learning=learning.value,
    )
    return SpellcastingState.model_validate(state)


def initialize_spellcasting(
    class_slug: str,
    level: int,
    abilities: Mapping[Ability, int],
    repository: RulesRepository | None = None,
    subclass_slug: str | None = None,
) -> SpellcastingState | None:
    """Default spellcasting state for a character created without picks.

    Cantrips are the first ones on the class list, up to the number known.
    Known casters get the first spells on their list up to their limit,
    prepared casters know their castable list with nothing prepared and
    wizards start with an empty spellbook.

    Returns:
        The spellcasting state, or None for non-casters.
    """
    spellcasting_type = get_spellcasting_type(class_slug)
    ability = get_spellcasting_ability(class_slug)
    learning = get_learning_rule(class_slug)
    if spellcasting_type is None or ability is None or learning.type is SpellLearningType.NONE:
        return None

    available = get_available_spells_for_creation(class_slug, level, repository)
    state = _base_state(class_slug, ability, spellcasting_type, abilities, level, subclass_slug)
    state["cantrips_known"] = [
        spell.slug for spell in available.cantrips[: cantrips_known_at(class_slug, level)]
    ]

    if learning.type is SpellLearningType.KNOWN:
        state["spells_known"] = [spell.slug for spell in available.spells[: learning.count_at(level)]]
    elif learning.type is SpellLearningType.PREPARED:
        state["spells_known"] = [spell.slug for spell in available.spells]
        state["prepared_spells"] = []
    else:
        state["spellbook"] = []
        state["prepared_spells"] = []

    return SpellcastingState.model_validate(state)


def update_spellcasting_on_level_up(
    character: Character,
    new_level: int,
    class_slug: str | None = None,
    repository: RulesRepository | None = None,
) -> SpellcastingState | None:
    """Spellcasting state after a character reaches ``new_level``.

    Slots are recalculated and refreshed, the save DC and attack bonus
    pick up the new proficiency bonus, and cantrips are topped up to the
    new count. Prepared casters get the new castable list, known casters
    keep their spells and learn new ones up to their limit, and wizards
    keep their spellbook.

    Returns:
        The new state, or None when the character does not cast spells.
    """
    current = character.spellcasting
    if current is None:
        return None

    slug = class_slug or character.character_class.lower()
    repository = repository or get_repository()
    abilities = character.ability_scores()
    available = get_available_spells_for_creation(slug, new_level, repository)

    slots = get_spell_slots(slug, new_level, character.subclass)
    cantrips = list(current.cantrips_known)
    for spell in available.cantrips:
        if len(cantrips) >= cantrips_known_at(slug, new_level):
            break
        if spell.slug not in cantrips:
            cantrips.append(spell.slug)

    updates: dict[str, object] = {
        "spell_slots": slots,
        "used_spell_slots": [0] * len(slots),
        "cantrips_known": cantrips,
        "spell_save_dc": calculate_spell_save_dc(abilities, current.ability, new_level),
        "spell_attack_bonus": calculate_spell_attack_bonus(abilities, current.ability, new_level),
    }

    learning = get_learning_rule(slug)
    if learning.type is SpellLearningType.PREPARED:
        updates["spells_known"] = [spell.slug for spell in available.spells]
    elif learning.type is SpellLearningType.KNOWN:
        known = list(current.spells_known or [])
        limit = learning.count_at(new_level) or len(known)
        for spell in available.spells:
            if len(known) >= limit:
                break
            if spell.slug not in known:
                known.append(spell.slug)
        updates["spells_known"] = known

    logger.info("Spellcasting levelled up", class_slug=slug, new_level=new_level)
    return current.model_copy(update=updates)


__all__ = [
    "DEFAULT_WIZARD_INT",
    "get_spellcasting_type",
    "is_spellcaster",
    "get_spellcasting_ability",
    "get_learning_rule",
    "calculate_spell_save_dc",
    "calculate_spell_attack_bonus",
    "get_max_prepared_spells",
    "normalize_spell_slots",
    "get_caster_progression",
    "get_spell_slots",
    "get_highest_spell_slot_level",
    "AvailableSpells",
    "SpellRequirements",
    "get_spell_requirements",
    "validate_spell_selection",
    "has_spellcasting_at_level",
    "get_available_spells_for_creation",
    "are_spell_selections_complete",
    "cleanup_invalid_spell_selections",
    "migrate_spell_selection_to_character",
    "initialize_spellcasting",
    "update_spellcasting_on_level_up",
]
