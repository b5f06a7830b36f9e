"""Pydantic V2 schemas for Character Forge.

This module provides the data model layer: enumerations, immutable rule
reference data, saved characters and NPCs, creation wizard state and
validation results.

Submodules:
    enums: Enumeration types (Ability, Skill, SpellcastingType, etc.)
    reference: Rule data (Spell, Race, CharacterClass, Equipment, Feat, ...)
    character: Saved characters and their sheet components
    creation: Character creation wizard state
    npc: NPC library records and filters
    results: Validation result objects

Example:
    >>> from character_forge.models import Ability, CharacterCreationData
    >>> data = CharacterCreationData(race_slug="hill-dwarf", class_slug="cleric")
    >>> data.abilities[Ability.WIS]
    0
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from character_forge.models.enums import (
    SKILL_TO_ABILITY,
    Ability,
    AbilityScoreMethod,
    ArmorCategory,
    CasterProgression,
    CurrencyUnit,
    FeatCategory,
    FeatContext,
    HPCalculationMethod,
    Skill,
    SpellcastingType,
    SpellLearningType,
    SpellSchool,
    WeaponCategory,
    WeaponRange,
)

# =============================================================================
# Reference Data
# =============================================================================
from character_forge.models.reference import (
    Alignment,
    ArmorClassValues,
    Background,
    BackgroundAbilityScores,
    CharacterClass,
    ClassSpellcasting,
    ContainerContent,
    Cost,
    Damage,
    CoinPurse,
    Equipment,
    EquipmentChoice,
    EquipmentOption,
    EquipmentPackage,
    Feat,
    FeatPrerequisites,
    Feature,
    FightingStyle,
    Language,
    PackageItem,
    QuickStartItem,
    QuickStartPreset,
    QuickStartPresets,
    Race,
    ShopItem,
    Spell,
    SpellComponents,
    StartingWealthRule,
    Subclass,
    WeaponRangeValues,
)

# =============================================================================
# Characters
# =============================================================================
from character_forge.models.character import (
    AbilityScore,
    Character,
    Currency,
    DeathSaves,
    FeaturesAndTraits,
    HitDice,
    InventoryItem,
    SkillValue,
    SpellcastingState,
    SrdFeatureRef,
    SrdFeatures,
)

# =============================================================================
# Creation Wizard, NPCs and Results
# =============================================================================
from character_forge.models.creation import (
    BackgroundAbilityChoices,
    CharacterCreationData,
    SpellSelectionData,
)
from character_forge.models.npc import NPC, NPCFilters
from character_forge.models.results import (
    EquipmentValidationResult,
    ProficiencySummary,
    StepValidation,
    ValidationResult,
)


__all__ = [
    # Enumerations
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
    # Reference data
    "Spell",
    "SpellComponents",
    "Race",
    "CharacterClass",
    "ClassSpellcasting",
    "EquipmentChoice",
    "EquipmentOption",
    "Background",
    "BackgroundAbilityScores",
    "Equipment",
    "Cost",
    "Damage",
    "WeaponRangeValues",
    "ArmorClassValues",
    "ContainerContent",
    "PackageItem",
    "EquipmentPackage",
    "QuickStartItem",
    "CoinPurse",
    "QuickStartPreset",
    "QuickStartPresets",
    "StartingWealthRule",
    "ShopItem",
    "FightingStyle",
    "Feat",
    "FeatPrerequisites",
    "Feature",
    "Subclass",
    "Alignment",
    "Language",
    # Characters
    "Character",
    "AbilityScore",
    "SkillValue",
    "HitDice",
    "FeaturesAndTraits",
    "SpellcastingState",
    "SrdFeatureRef",
    "SrdFeatures",
    "InventoryItem",
    "Currency",
    "DeathSaves",
    # Creation wizard
    "CharacterCreationData",
    "SpellSelectionData",
    "BackgroundAbilityChoices",
    # NPCs
    "NPC",
    "NPCFilters",
    # Results
    "ValidationResult",
    "EquipmentValidationResult",
    "StepValidation",
    "ProficiencySummary",
]
