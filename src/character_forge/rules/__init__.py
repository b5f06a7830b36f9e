"""Rules resolution for Character Forge.

Pure functions that compute derived numbers and validation results from
the player's choices and the rule data.

Modules:
    ability_scores: Point buy, standard array and rolled scores
    progression: Modifiers, proficiency bonus, hit dice, XP and level up
    level_up: Applying a new level to a character sheet
    spellcasting: Save DC, spell slots, spell selection and caster state
    equipment: Armor class, equip checks and starting gear
    feats: Feat availability and prerequisites
    languages: Known and available languages
    proficiencies: Armor, weapon, tool and skill proficiencies
    wizard: Creation wizard step validation
    builder: CharacterCreationData -> Character
    dice: Dice expressions via the d20 library
"""

from __future__ import annotations

from character_forge.rules.ability_scores import (
    ABILITY_METHOD_TITLES,
    ABILITY_NAMES,
    POINT_BUY_BUDGET,
    STANDARD_ARRAY_SCORES,
    are_ability_scores_complete,
    calculate_point_buy_cost,
    generate_dice_roll,
    generate_point_buy,
    generate_standard_array,
    get_available_standard_array_scores,
    is_valid_point_buy_change,
    validate_point_buy,
    validate_standard_array,
)
from character_forge.rules.builder import calculate_character_stats
from character_forge.rules.dice import DiceRoll, roll, roll_hit_die
from character_forge.rules.equipment import (
    calculate_armor_class,
    can_afford_purchase,
    can_equip_item,
    can_unequip_item,
    equip_item,
    generate_quick_start_equipment,
    get_average_starting_wealth,
    get_equipment_conflicts,
    has_equipment_conflicts,
    roll_starting_wealth,
    unequip_item,
)
from character_forge.rules.feats import (
    calculate_feat_availability,
    can_select_more_feats,
    check_feat_prerequisites,
    filter_available_feats,
    get_available_feats_for_character,
    validate_feat_selection,
)
from character_forge.rules.languages import (
    calculate_known_languages,
    get_available_languages,
    get_max_languages,
    parse_background_language_choices,
)
from character_forge.rules.level_up import apply_level_up
from character_forge.rules.proficiencies import aggregate_proficiencies
from character_forge.rules.progression import (
    calculate_level_up,
    can_level_up,
    get_hit_die_for_class,
    get_level_for_xp,
    get_modifier,
    get_proficiency_bonus,
    roll_hp_gain,
)
from character_forge.rules.spellcasting import (
    are_spell_selections_complete,
    calculate_spell_attack_bonus,
    calculate_spell_save_dc,
    cleanup_invalid_spell_selections,
    get_available_spells_for_creation,
    get_max_prepared_spells,
    get_spell_slots,
    get_spellcasting_type,
    has_spellcasting_at_level,
    initialize_spellcasting,
    is_spellcaster,
    migrate_spell_selection_to_character,
    update_spellcasting_on_level_up,
    validate_spell_selection,
)
from character_forge.rules.wizard import WizardStep, validate_step


__all__ = [
    # Ability scores
    "ABILITY_NAMES",
    "ABILITY_METHOD_TITLES",
    "STANDARD_ARRAY_SCORES",
    "POINT_BUY_BUDGET",
    "calculate_point_buy_cost",
    "is_valid_point_buy_change",
    "get_available_standard_array_scores",
    "are_ability_scores_complete",
    "validate_point_buy",
    "validate_standard_array",
    "generate_standard_array",
    "generate_point_buy",
    "generate_dice_roll",
    # Progression
    "get_modifier",
    "get_proficiency_bonus",
    "get_hit_die_for_class",
    "get_level_for_xp",
    "calculate_level_up",
    "can_level_up",
    "roll_hp_gain",
    "apply_level_up",
    # Spellcasting
    "get_spellcasting_type",
    "is_spellcaster",
    "calculate_spell_save_dc",
    "calculate_spell_attack_bonus",
    "get_max_prepared_spells",
    "get_spell_slots",
    "validate_spell_selection",
    "has_spellcasting_at_level",
    "get_available_spells_for_creation",
    "are_spell_selections_complete",
    "cleanup_invalid_spell_selections",
    "migrate_spell_selection_to_character",
    "initialize_spellcasting",
    "update_spellcasting_on_level_up",
    # Equipment
    "calculate_armor_class",
    "can_equip_item",
    "can_unequip_item",
    "get_equipment_conflicts",
    "has_equipment_conflicts",
    "equip_item",
    "unequip_item",
    "generate_quick_start_equipment",
    "roll_starting_wealth",
    "get_average_starting_wealth",
    "can_afford_purchase",
    # Feats
    "calculate_feat_availability",
    "can_select_more_feats",
    "check_feat_prerequisites",
    "filter_available_feats",
    "get_available_feats_for_character",
    "validate_feat_selection",
    # Languages and proficiencies
    "calculate_known_languages",
    "get_max_languages",
    "get_available_languages",
    "parse_background_language_choices",
    "aggregate_proficiencies",
    # Wizard and builder
    "WizardStep",
    "validate_step",
    "calculate_character_stats",
    # Dice
    "DiceRoll",
    "roll",
    "roll_hit_die",
]
